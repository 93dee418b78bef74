#!/usr/bin/env python3
"""
Solar Savings CLI - 25-Year Utility vs PPA vs Purchase Comparison

A command-line front end to the projection engine and URL state:
- Start from a shared calculator URL or query string (or the defaults)
- Override individual inputs (only when unlocked with the admin key)
- Print the inputs, headline metrics and the year-by-year projection
- Produce a share link with the admin key stripped
- Generate a PDF summary, an Excel workbook or a PNG chart
- Compose the "Email My Details" proposal request as a mailto: link

Usage:
    python savings_cli.py                                   # Defaults, view-only
    python savings_cli.py "https://example.com/tool?usage=12000&ur=0.31"
    python savings_cli.py "?admin=KEY" --usage 9000 --battery --url
    python savings_cli.py "?usage=12000" --toggle-view --share
    python savings_cli.py --report summary.pdf --excel projection.xlsx
    python savings_cli.py --help                            # Show all options

The admin key is read from the SOLAR_SAVINGS_ADMIN_KEY environment variable.
"""

import argparse
import logging
import sys
from typing import List, Optional

from solar_savings.data.config import ADMIN_KEY_ENV, get_admin_secret
from solar_savings.data.query_state import CalculatorSession, SessionLockedError
from solar_savings.data.validators import validate_parameters
from solar_savings.models.parameters import VIEW_ANNUAL, VIEW_MODES
from solar_savings.models.projection import (
    BATTERY_MONTHLY_FEE,
    CO2_KG_PER_KWH,
    CO2_KG_PER_TREE,
    PROJECTION_YEARS,
)
from solar_savings.reports.proposal import ContactDetails, compose_proposal_email
from solar_savings.utils.formatters import (
    format_breakeven,
    format_currency_exact,
    format_number,
    format_percent,
    format_rate,
)

log = logging.getLogger(__name__)

# CLI option dest -> ParameterSet field
FIELD_OPTIONS = {
    "usage": "usage",
    "utility_rate": "utility_rate",
    "utility_esc": "utility_esc",
    "ppa_rate": "ppa_rate",
    "ppa_esc": "ppa_esc",
    "battery": "include_battery",
    "nem_credit": "net_metering_credit",
    "system_cost": "system_cost",
    "maintenance": "maintenance",
    "itc": "itc",
}


# ============================================================================
# FORMATTING UTILITIES
# ============================================================================

def print_header(text: str, char: str = "=") -> None:
    """Print a formatted section header."""
    width = 70
    print(f"\n{char * width}")
    print(f" {text}")
    print(f"{char * width}")


def print_subheader(text: str) -> None:
    """Print a formatted subsection header."""
    print(f"\n--- {text} ---")


# ============================================================================
# DISPLAY FUNCTIONS
# ============================================================================

def print_inputs(session: CalculatorSession) -> None:
    """Display the current parameter set."""
    params = session.params
    print_header(
        "SOLAR SAVINGS COMPARISON" + ("  ·  View-only" if session.locked else ""), "="
    )

    print_subheader("Inputs")
    print(f"  Annual Usage:      {format_number(params.usage, 0)} kWh")
    print(f"  Utility Start:     {format_rate(params.utility_rate)}")
    print(f"  Utility Esc:       {format_percent(params.utility_esc)}")
    print(f"  PPA Start:         {format_rate(params.ppa_rate)}")
    print(f"  PPA Escalator:     {format_percent(params.ppa_esc)}")
    print(f"  Include Battery:   {'Yes' if params.include_battery else 'No'}"
          f" (${BATTERY_MONTHLY_FEE}/mo)")
    print(f"  NEM Credit:        {format_rate(params.net_metering_credit)}")
    print(f"  System Cost:       {format_currency_exact(params.system_cost)}"
          f"  (ITC {format_percent(params.itc, 0)} -> Net "
          f"{format_currency_exact(params.discounted_system_cost)})")
    print(f"  Maintenance:       {format_currency_exact(params.maintenance)}")
    print(f"  View Mode:         {params.view}")


def print_results(session: CalculatorSession, rows_to_show: Optional[List[int]] = None) -> None:
    """Display headline metrics and the projection table for the current view."""
    results = session.results
    view = session.params.view

    print_subheader("Key Figures")
    print(f"\n  {f'{PROJECTION_YEARS}-yr PPA Savings vs Utility':<46} "
          f"{format_currency_exact(results.total_savings_ppa_vs_utility):>15}")
    print(f"  {'Purchase Breakeven (Ops vs ITC-Adjusted Cost)':<46} "
          f"{format_breakeven(results.breakeven_year):>15}")
    print(f"  {'CO2 Offset (kg) / Trees':<46} "
          f"{f'{results.co2_saved_kg:,.0f} / {results.trees_equivalent:,.0f}':>15}")

    print_subheader(f"Projection ({view})")
    print(f"\n  {'Year':>6} {'Utility':>15} {'PPA':>15} {'Purchase':>15}")
    print(f"  {'-' * 54}")
    for r in results.rows:
        if rows_to_show and r.year not in rows_to_show:
            continue
        if view == VIEW_ANNUAL:
            values = (r.util_annual, r.ppa_annual, r.purchase_annual)
        else:
            values = (r.cum_util, r.cum_ppa, r.cum_purchase)
        print(f"  {r.year:>6} " + " ".join(f"{format_currency_exact(v):>15}" for v in values))


def print_methodology() -> None:
    """Print methodology documentation."""

    print_header("METHODOLOGY", "=")

    print(f"""
All three paths are projected for {PROJECTION_YEARS} years. Year 1 carries no
escalation.

1. Utility only
   Annual     = utility_rate * (1 + utility_esc)^(y-1) * usage
   Cumulative = utility_rate * usage * ((1 + utility_esc)^y - 1) / utility_esc
                (utility_rate * usage * y when the escalation is 0)

2. Power Purchase Agreement
   Annual     = ppa_rate * (1 + ppa_esc)^(y-1) * usage + battery(y)
   battery(y) = {BATTERY_MONTHLY_FEE} * 12 * 1.03^(y-1) when a battery is included
   Cumulative = same geometric sum as the utility path, plus the battery sum

3. Purchase
   Annual     = maintenance + battery fee (flat) - usage * NEM credit
   Cumulative = system_cost * (1 - ITC) + running sum of annual costs
   Breakeven  = first year the running sum of annual costs reaches
                system_cost * (1 - ITC)

Environmental equivalents
   CO2 offset = usage * {PROJECTION_YEARS} * {CO2_KG_PER_KWH} kg
   Trees      = CO2 offset / {CO2_KG_PER_TREE} kg per tree
""")


# ============================================================================
# MAIN CLI
# ============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Solar Savings CLI - Utility vs PPA vs Purchase over 25 years",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  python savings_cli.py "?usage=12000&ur=0.31"        # Shared link, view-only
  python savings_cli.py "?admin=KEY" --usage 9000     # Edit with the admin key
  python savings_cli.py "?usage=12000" --toggle-view  # Viewers may change the view
  python savings_cli.py --share                       # Print a customer link
  python savings_cli.py --report summary.pdf          # PDF summary
  python savings_cli.py --excel projection.xlsx       # Excel workbook
  python savings_cli.py --email --name "Jane Homeowner" --contact-email jane@email.com

The admin key is compared against ${ADMIN_KEY_ENV}.
        """
    )

    parser.add_argument("url", nargs="?", default="",
                        help="Calculator URL or query string to start from")

    # Inputs (editable only when unlocked)
    parser.add_argument("--usage", type=float, help="Annual usage (kWh)")
    parser.add_argument("--utility-rate", type=float, help="Utility start rate ($/kWh)")
    parser.add_argument("--utility-esc", type=float, help="Utility escalation (0.09 = 9%%)")
    parser.add_argument("--ppa-rate", type=float, help="PPA start rate ($/kWh)")
    parser.add_argument("--ppa-esc", type=float, help="PPA escalator (0.035 = 3.5%%)")
    parser.add_argument("--battery", action=argparse.BooleanOptionalAction, default=None,
                        help=f"Include the ${BATTERY_MONTHLY_FEE}/mo battery")
    parser.add_argument("--nem-credit", type=float, help="NEM credit ($/kWh)")
    parser.add_argument("--system-cost", type=float, help="Purchase system cost ($)")
    parser.add_argument("--maintenance", type=float, help="Purchase annual maintenance ($)")
    parser.add_argument("--itc", type=float, help="Federal tax credit (0.30 = 30%%)")

    # View (always allowed)
    parser.add_argument("--view", choices=VIEW_MODES, help="Display mode")
    parser.add_argument("--toggle-view", action="store_true",
                        help="Switch between annual and cumulative")

    # Report files
    parser.add_argument("--report", type=str, nargs="?", const="Solar_Savings_Summary.pdf",
                        help="Generate PDF summary (optional: specify filename)")
    parser.add_argument("--excel", type=str, nargs="?", const="Solar_Savings_Projection.xlsx",
                        help="Export projection to an Excel workbook")
    parser.add_argument("--chart", type=str, nargs="?", const="Solar_Savings_Chart.png",
                        help="Save the projection chart as PNG")

    # Sharing
    parser.add_argument("--url", dest="print_url", action="store_true",
                        help="Print the current calculator URL")
    parser.add_argument("--share", action="store_true",
                        help="Print a customer link (admin key removed)")
    parser.add_argument("--email", action="store_true",
                        help="Print a mailto: link requesting a proposal")
    parser.add_argument("--name", type=str, default="", help="Contact name for --email")
    parser.add_argument("--contact-email", type=str, default="", help="Contact email for --email")
    parser.add_argument("--phone", type=str, default="", help="Contact phone for --email")
    parser.add_argument("--address", type=str, default="", help="Contact address for --email")

    # Display options
    parser.add_argument("--years", type=int, nargs="+",
                        help="Only show these projection years")
    parser.add_argument("--methodology", "-m", action="store_true",
                        help="Show calculation methodology")
    parser.add_argument("--quiet", "-q", action="store_true",
                        help="Suppress detailed output")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable debug logging")
    return parser


def apply_overrides(session: CalculatorSession, args: argparse.Namespace) -> None:
    """Apply per-field options to the session, one field at a time.

    Raises:
        SessionLockedError: If an input other than the view is changed while locked.
        ValueError: If an override fails validation.
    """
    for dest, name in FIELD_OPTIONS.items():
        value = getattr(args, dest)
        if value is not None:
            session.update(name, value)

    if args.view:
        session.update("view", args.view)
    if args.toggle_view:
        session.toggle_view()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""

    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.methodology:
        print_methodology()
        return 0

    session = CalculatorSession(args.url, admin_secret=get_admin_secret())

    try:
        apply_overrides(session, args)
    except SessionLockedError as e:
        print(f"\nError: {e}. Add ?admin=<key> to the URL to edit inputs.", file=sys.stderr)
        return 2
    except ValueError as e:
        print(f"\nError: {e}", file=sys.stderr)
        return 1
    log.debug("Current URL: %s", session.url)

    is_valid, messages = validate_parameters(session.params)
    for msg in messages:
        print(msg, file=sys.stderr)
    if not is_valid:
        return 1

    if not args.quiet:
        print_inputs(session)
        print_results(session, args.years)

    if args.report:
        try:
            from solar_savings.reports.summary import generate_savings_summary
            generate_savings_summary(session.params, session.results, args.report)
            print(f"\nPDF summary generated: {args.report}")
        except Exception as e:
            print(f"\nError generating PDF: {e}", file=sys.stderr)

    if args.excel:
        try:
            from solar_savings.reports.workbook import export_projection_workbook
            path = export_projection_workbook(session.params, session.results, args.excel)
            print(f"\nExcel workbook generated: {path}")
        except Exception as e:
            print(f"\nError generating Excel: {e}", file=sys.stderr)

    if args.chart:
        try:
            from solar_savings.reports.charts import create_projection_chart
            create_projection_chart(session.results, session.params.view, args.chart)
            print(f"\nChart saved: {args.chart}")
        except Exception as e:
            print(f"\nError generating chart: {e}", file=sys.stderr)

    if args.print_url:
        print(f"\nURL: {session.url}")
    if args.share:
        print(f"\nCustomer link: {session.share_url()}")
    if args.email:
        contact = ContactDetails(
            name=args.name, email=args.contact_email, phone=args.phone, address=args.address
        )
        print(f"\n{compose_proposal_email(session.params, contact)}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
