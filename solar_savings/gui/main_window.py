"""Main application window for the Solar Savings Calculator.

Provides the top-level window with the current-URL bar, the input form,
the results panel, and action buttons for the view toggle, sharing,
the proposal email and report export. All state lives in a
CalculatorSession; every form edit goes through it.
"""

from PyQt6.QtCore import QSize, QUrl
from PyQt6.QtGui import QDesktopServices, QGuiApplication
from PyQt6.QtWidgets import (
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSplitter,
    QVBoxLayout,
    QWidget,
)

from solar_savings.data.query_state import CalculatorSession, SessionLockedError
from solar_savings.gui.input_forms import InputFormWidget
from solar_savings.gui.results_display import ResultsWidget
from solar_savings.models.parameters import VIEW_ANNUAL
from solar_savings.reports.proposal import compose_proposal_email
from solar_savings.reports.summary import generate_savings_summary
from solar_savings.reports.workbook import export_projection_workbook


class MainWindow(QMainWindow):
    """Main application window bound to one calculator session."""

    def __init__(self, initial_url: str = "", admin_secret: str = ""):
        super().__init__()
        self.setMinimumSize(QSize(1100, 720))
        self._init_ui()
        self.session = CalculatorSession(
            initial_url, admin_secret=admin_secret, on_url_change=self.url_edit.setText
        )
        self._init_menu()

        title = "Solar Savings Comparison"
        if self.session.locked:
            title += " · View-only"
        self.setWindowTitle(title)

        self.input_form.set_editable(self.session.editable_fields())
        self._refresh()
        self.statusBar().showMessage(
            "View-only link: inputs are locked." if self.session.locked else "Ready."
        )

    def _init_ui(self):
        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)

        url_row = QHBoxLayout()
        url_row.addWidget(QLabel("URL:"))
        self.url_edit = QLineEdit()
        self.url_edit.setReadOnly(True)
        url_row.addWidget(self.url_edit)
        layout.addLayout(url_row)

        splitter = QSplitter()
        self.input_form = InputFormWidget()
        self.input_form.field_changed.connect(self._on_field_changed)
        self.results_widget = ResultsWidget()
        splitter.addWidget(self.input_form)
        splitter.addWidget(self.results_widget)
        splitter.setStretchFactor(1, 2)
        layout.addWidget(splitter)

        btn_layout = QHBoxLayout()
        btn_layout.addStretch()

        self.toggle_btn = QPushButton()
        self.toggle_btn.clicked.connect(self._toggle_view)
        btn_layout.addWidget(self.toggle_btn)

        self.share_btn = QPushButton("Copy Customer Link")
        self.share_btn.clicked.connect(self._copy_share_link)
        btn_layout.addWidget(self.share_btn)

        self.email_btn = QPushButton("Email My Details")
        self.email_btn.clicked.connect(self._email_details)
        btn_layout.addWidget(self.email_btn)

        self.report_btn = QPushButton("Download PDF Summary")
        self.report_btn.setStyleSheet("font-weight: bold; padding: 6px 20px;")
        self.report_btn.clicked.connect(self._generate_report)
        btn_layout.addWidget(self.report_btn)

        self.excel_btn = QPushButton("Export to Excel")
        self.excel_btn.clicked.connect(self._export_to_excel)
        btn_layout.addWidget(self.excel_btn)

        btn_layout.addStretch()
        layout.addLayout(btn_layout)

    def _init_menu(self):
        menubar = self.menuBar()

        file_menu = menubar.addMenu("File")
        file_menu.addAction("Copy Customer Link", self._copy_share_link)
        file_menu.addAction("Email My Details...", self._email_details)
        file_menu.addSeparator()
        file_menu.addAction("Exit", self.close)

        reports_menu = menubar.addMenu("Reports")
        reports_menu.addAction("PDF Summary", self._generate_report)
        reports_menu.addAction("Export to Excel", self._export_to_excel)

        help_menu = menubar.addMenu("Help")
        help_menu.addAction("About", self._show_about)

    # --- Session updates ---

    def _refresh(self):
        params = self.session.params
        self.input_form.load_parameters(params)
        self.results_widget.display_results(self.session.results, params.view)
        next_view = "Cumulative" if params.view == VIEW_ANNUAL else "Annual"
        self.toggle_btn.setText(f"Toggle to {next_view}")

    def _on_field_changed(self, name: str, value):
        try:
            self.session.update(name, value)
        except SessionLockedError as e:
            self.statusBar().showMessage(str(e))
        except ValueError as e:
            QMessageBox.critical(self, "Input Error", f"Invalid input:\n{e}")
        self._refresh()

    def _toggle_view(self):
        view = self.session.toggle_view()
        self._refresh()
        self.statusBar().showMessage(f"Showing {view} costs.")

    # --- Actions ---

    def _copy_share_link(self):
        link = self.session.share_url()
        QGuiApplication.clipboard().setText(link)
        self.statusBar().showMessage("Customer link copied to clipboard.")

    def _email_details(self):
        url = compose_proposal_email(self.session.params, self.input_form.get_contact())
        if not QDesktopServices.openUrl(QUrl(url)):
            QMessageBox.warning(self, "Email", "No mail application is configured.")

    def _generate_report(self):
        path, _ = QFileDialog.getSaveFileName(
            self, "Save PDF Summary", "Solar_Savings_Summary.pdf", "PDF Files (*.pdf);;All Files (*)"
        )
        if not path:
            return
        try:
            generate_savings_summary(self.session.params, self.session.results, path)
            self.statusBar().showMessage(f"Report saved: {path}")
        except Exception as e:
            QMessageBox.critical(self, "Report Error", f"Failed to generate report:\n{e}")

    def _export_to_excel(self):
        path, _ = QFileDialog.getSaveFileName(
            self, "Export to Excel", "Solar_Savings_Projection.xlsx",
            "Excel Files (*.xlsx);;All Files (*)"
        )
        if not path:
            return
        try:
            written = export_projection_workbook(self.session.params, self.session.results, path)
            self.statusBar().showMessage(f"Excel exported: {written}")
        except Exception as e:
            QMessageBox.critical(self, "Export Error", f"Failed to export Excel:\n{e}")

    def _show_about(self):
        QMessageBox.about(
            self,
            "About Solar Savings Calculator",
            "<b>Solar Savings Calculator v1.0</b><br><br>"
            "25-year projection of utility, PPA and purchase costs<br>"
            "with battery, net metering and the federal ITC.<br><br>"
            "Inputs are kept in the URL; <i>Copy Customer Link</i> shares them<br>"
            "without the admin key.",
        )
