"""Solar Savings Calculator - Utility vs PPA vs Purchase comparison.

A desktop application projecting 25 years of household electricity
costs under three options: staying on the utility, a solar power
purchase agreement, and buying the system outright.

Usage:
    python main.py ["https://example.com/tool?usage=12000&admin=KEY"]
"""

import logging
import sys

from PyQt6.QtWidgets import QApplication

from solar_savings.data.config import get_admin_secret
from solar_savings.gui.main_window import MainWindow


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    app = QApplication(sys.argv)
    app.setApplicationName("Solar Savings Calculator")
    initial_url = sys.argv[1] if len(sys.argv) > 1 else ""
    window = MainWindow(initial_url, admin_secret=get_admin_secret())
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
