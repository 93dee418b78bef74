"""Projection engine for the Solar Savings Calculator.

Compares three 25-year cost trajectories for a household: staying on the
utility, signing a power purchase agreement (PPA), and buying the system
outright. Utility and PPA totals use the closed-form sum of a geometric
series; the purchase path accumulates year by year because its NEM credit
and maintenance do not escalate.
"""

import logging
import math
from typing import Dict, List, Optional

from solar_savings.models.parameters import (
    PROJECTION_YEARS,
    VIEW_ANNUAL,
    VIEW_MODES,
    ParameterSet,
    ProjectionResults,
    ProjectionRow,
)

log = logging.getLogger(__name__)

BATTERY_MONTHLY_FEE = 59.99
BATTERY_ESCALATION = 0.03
CO2_KG_PER_KWH = 0.7
CO2_KG_PER_TREE = 21.77


def escalated_rate(base: float, escalation: float, year: int) -> float:
    r"""Price in a given year under compound escalation.

    Formula:
        rate_y = base \cdot (1 + e)^{y-1}

    Year 1 carries no escalation.

    Args:
        base: Year 1 price.
        escalation: Annual escalation as decimal (e.g., 0.09 for 9%).
        year: Projection year, 1-indexed.

    Returns:
        Escalated price for that year.
    """
    return base * (1 + escalation) ** (year - 1)


def cumulative_escalated_cost(annual_base: float, escalation: float, years: int) -> float:
    r"""Total of an escalating annual cost through a given year.

    Formula:
        C_y = A \cdot \frac{(1 + e)^y - 1}{e}

    The numerator is evaluated as expm1(y * log1p(e)) so that very small
    escalations keep full precision. When e is exactly zero the series is
    flat and C_y = A \cdot y.

    Args:
        annual_base: Year 1 cost ($).
        escalation: Annual escalation as decimal.
        years: Number of years summed.

    Returns:
        Cumulative cost in dollars.

    Example:
        >>> cumulative_escalated_cost(1000, 0.0, 3)
        3000.0
    """
    if escalation == 0:
        return float(annual_base * years)
    return annual_base * math.expm1(years * math.log1p(escalation)) / escalation


def battery_annual_cost(year: int) -> float:
    """PPA-path battery fee for a year, escalating at a fixed 3%."""
    return escalated_rate(BATTERY_MONTHLY_FEE * 12, BATTERY_ESCALATION, year)


def _find_breakeven(cum_ops: List[float], discounted_system_cost: float) -> Optional[int]:
    """Return the first year cumulative operating cost reaches the system cost.

    Args:
        cum_ops: Cumulative purchase operating cost for years 1..N.
        discounted_system_cost: ITC-adjusted system cost ($).

    Returns:
        Year number (1-indexed), or None if never reached.
    """
    for year, cumulative in enumerate(cum_ops, start=1):
        if cumulative >= discounted_system_cost:
            return year
    return None


def calculate_projection(params: ParameterSet) -> ProjectionResults:
    """Run the full 25-year comparison for a parameter set.

    Each row depends only on the parameters and its year, except the
    purchase-path running total which is strictly sequential.

    Args:
        params: Current inputs.

    Returns:
        ProjectionResults with 25 rows, breakeven year and summary metrics.
    """
    battery_flat = BATTERY_MONTHLY_FEE * 12 if params.include_battery else 0.0
    discounted_system_cost = params.discounted_system_cost
    nem_savings = params.usage * params.net_metering_credit

    rows = []
    cum_ops = []
    cum_purchase_ops = 0.0
    for year in range(1, PROJECTION_YEARS + 1):
        utility_rate = escalated_rate(params.utility_rate, params.utility_esc, year)
        ppa_rate = escalated_rate(params.ppa_rate, params.ppa_esc, year)
        battery_year = battery_annual_cost(year) if params.include_battery else 0.0

        util_annual = utility_rate * params.usage
        ppa_annual = ppa_rate * params.usage + battery_year
        # Purchase-path battery fee and NEM credit stay flat
        purchase_annual = params.maintenance + battery_flat - nem_savings

        cum_purchase_ops += purchase_annual
        cum_ops.append(cum_purchase_ops)

        cum_ppa = cumulative_escalated_cost(params.ppa_rate * params.usage, params.ppa_esc, year)
        if params.include_battery:
            cum_ppa += cumulative_escalated_cost(BATTERY_MONTHLY_FEE * 12, BATTERY_ESCALATION, year)
        cum_util = cumulative_escalated_cost(
            params.utility_rate * params.usage, params.utility_esc, year
        )

        rows.append(ProjectionRow(
            year=year,
            util_annual=util_annual,
            ppa_annual=ppa_annual,
            purchase_annual=purchase_annual,
            cum_util=cum_util,
            cum_ppa=cum_ppa,
            cum_purchase=discounted_system_cost + cum_purchase_ops,
        ))

    breakeven = _find_breakeven(cum_ops, discounted_system_cost)
    log.debug("Breakeven year: %s (ITC-adjusted cost %.2f)", breakeven, discounted_system_cost)

    total_kwh = params.usage * PROJECTION_YEARS
    co2_saved_kg = total_kwh * CO2_KG_PER_KWH

    return ProjectionResults(
        rows=rows,
        breakeven_year=breakeven,
        discounted_system_cost=discounted_system_cost,
        total_savings_ppa_vs_utility=sum(r.util_annual - r.ppa_annual for r in rows),
        total_kwh=total_kwh,
        co2_saved_kg=co2_saved_kg,
        trees_equivalent=co2_saved_kg / CO2_KG_PER_TREE,
    )


def chart_series(results: ProjectionResults, view: str = VIEW_ANNUAL) -> Dict[str, List[float]]:
    """Per-year values of the three paths for the selected view.

    Values are rounded to cents for display.

    Args:
        results: Output of calculate_projection().
        view: "annual" or "cumulative".

    Returns:
        Dict with keys "year", "Utility", "PPA", "Purchase".

    Raises:
        ValueError: If view is not a known display mode.
    """
    if view not in VIEW_MODES:
        raise ValueError(f"view must be one of {VIEW_MODES}, got {view!r}")
    annual = view == VIEW_ANNUAL
    return {
        "year": [r.year for r in results.rows],
        "Utility": [round(r.util_annual if annual else r.cum_util, 2) for r in results.rows],
        "PPA": [round(r.ppa_annual if annual else r.cum_ppa, 2) for r in results.rows],
        "Purchase": [round(r.purchase_annual if annual else r.cum_purchase, 2) for r in results.rows],
    }
