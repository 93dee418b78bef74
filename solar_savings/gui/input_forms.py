"""Input forms for the Solar Savings Calculator.

Provides a scrollable widget with grouped input sections for usage,
utility and PPA pricing, battery and NEM, and the purchase path. Every
edit is reported as a single (field, value) change.
"""

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import (
    QCheckBox,
    QDoubleSpinBox,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from solar_savings.models.parameters import ParameterSet
from solar_savings.models.projection import BATTERY_MONTHLY_FEE
from solar_savings.reports.proposal import ContactDetails
from solar_savings.utils.formatters import format_currency_exact, format_percent

# Fields shown as percentages in the form and stored as decimals.
PERCENT_FIELDS = ("utility_esc", "ppa_esc", "itc")


class InputFormWidget(QWidget):
    """Scrollable input form for the parameter set and contact details."""

    field_changed = pyqtSignal(str, object)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._spins = {}
        self._init_ui()

    def _init_ui(self):
        outer = QVBoxLayout(self)
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        container = QWidget()
        layout = QVBoxLayout(container)

        layout.addWidget(self._create_usage_section())
        layout.addWidget(self._create_pricing_section())
        layout.addWidget(self._create_purchase_section())
        layout.addWidget(self._create_contact_section())

        layout.addStretch()
        scroll.setWidget(container)
        outer.addWidget(scroll)

    # --- Section Builders ---

    def _create_usage_section(self) -> QGroupBox:
        group = QGroupBox("Usage")
        layout = QVBoxLayout(group)

        spin = self._add_spin("usage", 1.0, 200000.0, 0, suffix=" kWh", step=500)
        layout.addLayout(self._row("Annual Usage:", spin))
        hint = QLabel("Typical home: 8,000–16,000 kWh")
        hint.setStyleSheet("color: #666; font-size: 11px;")
        layout.addWidget(hint)

        return group

    def _create_pricing_section(self) -> QGroupBox:
        group = QGroupBox("Utility, PPA, Battery & NEM")
        layout = QVBoxLayout(group)

        spin = self._add_spin("utility_rate", 0.0, 5.0, 3, prefix="$", suffix=" /kWh", step=0.001)
        layout.addLayout(self._row("Utility Start:", spin))

        spin = self._add_spin("utility_esc", -50.0, 50.0, 2, suffix=" %/yr", step=0.1)
        layout.addLayout(self._row("Utility Escalation:", spin))

        spin = self._add_spin("ppa_rate", 0.0, 5.0, 3, prefix="$", suffix=" /kWh", step=0.001)
        layout.addLayout(self._row("PPA Start:", spin))

        spin = self._add_spin("ppa_esc", -50.0, 50.0, 2, suffix=" %/yr", step=0.1)
        layout.addLayout(self._row("PPA Escalator:", spin))

        self.battery_check = QCheckBox(f"Include Battery (${BATTERY_MONTHLY_FEE}/mo)")
        self.battery_check.toggled.connect(
            lambda checked: self.field_changed.emit("include_battery", checked)
        )
        layout.addWidget(self.battery_check)

        spin = self._add_spin("net_metering_credit", 0.0, 5.0, 3, prefix="$", suffix=" /kWh",
                              step=0.001)
        layout.addLayout(self._row("NEM Credit:", spin))

        return group

    def _create_purchase_section(self) -> QGroupBox:
        group = QGroupBox("Purchase")
        layout = QVBoxLayout(group)

        spin = self._add_spin("system_cost", 0.0, 1000000.0, 0, prefix="$", step=100)
        layout.addLayout(self._row("System Cost:", spin))

        spin = self._add_spin("maintenance", 0.0, 100000.0, 0, prefix="$", suffix=" /yr", step=10)
        layout.addLayout(self._row("Annual Maintenance:", spin))

        spin = self._add_spin("itc", 0.0, 100.0, 1, suffix=" %", step=1)
        layout.addLayout(self._row("Federal Tax Credit:", spin))

        self.net_cost_label = QLabel("")
        self.net_cost_label.setStyleSheet("color: #666; font-size: 11px;")
        layout.addWidget(self.net_cost_label)

        return group

    def _create_contact_section(self) -> QGroupBox:
        group = QGroupBox("Get Your Personalized Proposal")
        layout = QVBoxLayout(group)

        self.name_edit = QLineEdit()
        self.name_edit.setPlaceholderText("Jane Homeowner")
        layout.addLayout(self._row("Full Name:", self.name_edit))

        self.email_edit = QLineEdit()
        self.email_edit.setPlaceholderText("jane@email.com")
        layout.addLayout(self._row("Email:", self.email_edit))

        self.address_edit = QLineEdit()
        self.address_edit.setPlaceholderText("123 Main St, Boston MA")
        layout.addLayout(self._row("Address:", self.address_edit))

        self.phone_edit = QLineEdit()
        self.phone_edit.setPlaceholderText("(555) 555-5555")
        layout.addLayout(self._row("Phone:", self.phone_edit))

        return group

    # --- Helper Methods ---

    def _add_spin(self, name: str, low: float, high: float, decimals: int,
                  prefix: str = "", suffix: str = "", step: float = 1.0) -> QDoubleSpinBox:
        spin = QDoubleSpinBox()
        spin.setRange(low, high)
        spin.setDecimals(decimals)
        spin.setSingleStep(step)
        if prefix:
            spin.setPrefix(prefix)
        if suffix:
            spin.setSuffix(suffix)
        spin.valueChanged.connect(lambda value, n=name: self._on_spin_changed(n, value))
        self._spins[name] = spin
        return spin

    @staticmethod
    def _row(label_text: str, widget) -> QHBoxLayout:
        row = QHBoxLayout()
        lbl = QLabel(label_text)
        lbl.setFixedWidth(160)
        row.addWidget(lbl)
        row.addWidget(widget)
        return row

    def _on_spin_changed(self, name: str, value: float):
        if name in PERCENT_FIELDS:
            value = value / 100
        self.field_changed.emit(name, value)

    # --- Public API ---

    def load_parameters(self, params: ParameterSet):
        """Populate all form fields without emitting change signals."""
        for name, spin in self._spins.items():
            value = getattr(params, name)
            if name in PERCENT_FIELDS:
                value = value * 100
            spin.blockSignals(True)
            spin.setValue(value)
            spin.blockSignals(False)

        self.battery_check.blockSignals(True)
        self.battery_check.setChecked(params.include_battery)
        self.battery_check.blockSignals(False)

        self.net_cost_label.setText(
            f"ITC applied at {format_percent(params.itc, 0)} → Net: "
            f"{format_currency_exact(params.discounted_system_cost)}"
        )

    def set_editable(self, editable_fields):
        """Enable only the inputs whose fields are in editable_fields."""
        for name, spin in self._spins.items():
            editable = name in editable_fields
            spin.setReadOnly(not editable)
            spin.setEnabled(editable)
        self.battery_check.setEnabled("include_battery" in editable_fields)

    def get_contact(self) -> ContactDetails:
        """Read the lead-capture fields."""
        return ContactDetails(
            name=self.name_edit.text(),
            email=self.email_edit.text(),
            phone=self.phone_edit.text(),
            address=self.address_edit.text(),
        )
