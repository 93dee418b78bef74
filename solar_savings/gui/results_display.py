"""Results display widget for the Solar Savings Calculator.

Shows the summary metrics, the projection chart for the current view,
and the year-by-year projection table.
"""

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QPixmap
from PyQt6.QtWidgets import (
    QFrame,
    QGroupBox,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from solar_savings.models.parameters import VIEW_ANNUAL, ProjectionResults
from solar_savings.models.projection import PROJECTION_YEARS
from solar_savings.reports.charts import render_projection_chart
from solar_savings.utils.formatters import format_breakeven, format_currency_exact


class MetricCard(QFrame):
    """A single metric display card with label, value, and optional color."""

    def __init__(self, label: str, value: str = "--", color: str = "#333", parent=None):
        super().__init__(parent)
        self.setFrameShape(QFrame.Shape.Box)
        self.setStyleSheet("""
            MetricCard {
                border: 2px solid #ddd;
                border-radius: 8px;
                padding: 8px;
                background: white;
            }
        """)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 8, 12, 8)

        self.label = QLabel(label)
        self.label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.label.setStyleSheet("font-size: 11px; color: #666; border: none;")
        layout.addWidget(self.label)

        self.value_label = QLabel(value)
        self.value_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.set_value(value, color)
        layout.addWidget(self.value_label)

    def set_value(self, text: str, color: str = "#333"):
        self.value_label.setText(text)
        self.value_label.setStyleSheet(f"font-size: 20px; font-weight: bold; color: {color}; border: none;")


class ResultsWidget(QWidget):
    """Projection display with metric cards, chart, and table."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self._init_ui()

    def _init_ui(self):
        layout = QVBoxLayout(self)

        metrics_layout = QHBoxLayout()
        self.savings_card = MetricCard(f"{PROJECTION_YEARS}-yr PPA Savings vs Utility")
        self.breakeven_card = MetricCard("Purchase Breakeven (Ops vs ITC-Adjusted Cost)")
        self.co2_card = MetricCard("CO₂ Offset (kg) / Trees")
        for card in [self.savings_card, self.breakeven_card, self.co2_card]:
            metrics_layout.addWidget(card)
        layout.addLayout(metrics_layout)

        self.chart_group = QGroupBox("Projection")
        chart_layout = QVBoxLayout(self.chart_group)
        self.chart_label = QLabel()
        self.chart_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.chart_label.setMinimumSize(500, 280)
        chart_layout.addWidget(self.chart_label)
        layout.addWidget(self.chart_group)

        self.table = QTableWidget(0, 4)
        self.table.setHorizontalHeaderLabels(["Year", "Utility", "PPA", "Purchase"])
        self.table.verticalHeader().setVisible(False)
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Stretch)
        self.table.setMinimumHeight(180)
        layout.addWidget(self.table)

    def display_results(self, results: ProjectionResults, view: str):
        """Populate all result widgets for the given view."""
        savings = results.total_savings_ppa_vs_utility
        self.savings_card.set_value(
            format_currency_exact(savings), "#2e7d32" if savings >= 0 else "#c62828"
        )
        self.breakeven_card.set_value(format_breakeven(results.breakeven_year))
        self.co2_card.set_value(
            f"{results.co2_saved_kg:,.0f} / {results.trees_equivalent:,.0f}"
        )

        self.chart_group.setTitle(f"Projection ({view})")
        self._draw_chart(results, view)
        self._fill_table(results, view)

    def _draw_chart(self, results: ProjectionResults, view: str):
        pixmap = QPixmap()
        pixmap.loadFromData(render_projection_chart(results, view))
        self.chart_label.setPixmap(pixmap)

    def _fill_table(self, results: ProjectionResults, view: str):
        self.table.setRowCount(len(results.rows))
        for i, r in enumerate(results.rows):
            if view == VIEW_ANNUAL:
                values = (r.util_annual, r.ppa_annual, r.purchase_annual)
            else:
                values = (r.cum_util, r.cum_ppa, r.cum_purchase)
            self.table.setItem(i, 0, QTableWidgetItem(str(r.year)))
            for col, value in enumerate(values, start=1):
                item = QTableWidgetItem(format_currency_exact(value))
                item.setTextAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
                self.table.setItem(i, col, item)
