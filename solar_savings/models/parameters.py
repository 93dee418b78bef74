"""Data models for the Solar Savings Calculator.

Defines the parameter set a user edits, the per-year projection rows
derived from it, and the projection results with summary metrics.
"""

import math
from dataclasses import dataclass, field, fields, replace
from typing import List, Optional

VIEW_ANNUAL = "annual"
VIEW_CUMULATIVE = "cumulative"
VIEW_MODES = (VIEW_ANNUAL, VIEW_CUMULATIVE)

PROJECTION_YEARS = 25

# Escalations are limited to (-100%, +100%] per year.
MAX_ESCALATION = 1.0


@dataclass(frozen=True)
class ParameterSet:
    """Utility and solar-financing inputs for a 25-year comparison.

    Attributes:
        usage: Annual household consumption in kWh.
        utility_rate: Year 1 utility price ($/kWh).
        utility_esc: Annual utility price escalation (0.09 = 9%).
        ppa_rate: Year 1 PPA price ($/kWh).
        ppa_esc: Annual PPA escalator (0.035 = 3.5%).
        include_battery: Add the $59.99/month battery to PPA and purchase paths.
        net_metering_credit: NEM credit per kWh exported ($/kWh).
        system_cost: Purchase price of the system before tax credits ($).
        maintenance: Purchase-path annual maintenance cost ($).
        itc: Investment Tax Credit fraction (0.30 = 30%).
        view: Display mode, "annual" or "cumulative".
    """

    usage: float = 14354.0
    utility_rate: float = 0.38
    utility_esc: float = 0.09
    ppa_rate: float = 0.22
    ppa_esc: float = 0.035
    include_battery: bool = False
    net_metering_credit: float = 0.10
    system_cost: float = 45000.0
    maintenance: float = 200.0
    itc: float = 0.30
    view: str = VIEW_ANNUAL

    def __post_init__(self):
        for name in NUMERIC_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}")
        if self.usage <= 0:
            raise ValueError(f"usage must be > 0, got {self.usage}")
        for name in ("utility_esc", "ppa_esc"):
            value = getattr(self, name)
            if not -1 < value <= MAX_ESCALATION:
                raise ValueError(
                    f"{name} must be > -1 and <= {MAX_ESCALATION}, got {value}"
                )
        if not 0 <= self.itc <= 1:
            raise ValueError(f"itc must be between 0 and 1, got {self.itc}")
        if not isinstance(self.include_battery, bool):
            raise ValueError(f"include_battery must be a bool, got {self.include_battery!r}")
        if self.view not in VIEW_MODES:
            raise ValueError(f"view must be 'annual' or 'cumulative', got {self.view!r}")
        self._check_horizon_finite()

    def _check_horizon_finite(self):
        """Reject inputs whose 25-year totals would overflow a float."""
        bounds = [
            abs(self.usage * rate) * max(1.0, (1 + esc) ** PROJECTION_YEARS) * PROJECTION_YEARS
            for rate, esc in ((self.utility_rate, self.utility_esc),
                              (self.ppa_rate, self.ppa_esc))
        ]
        ops = abs(self.maintenance) + abs(self.usage * self.net_metering_credit)
        bounds.append(abs(self.system_cost) + ops * PROJECTION_YEARS)
        if not all(math.isfinite(b) for b in bounds):
            raise ValueError("inputs are too large to project over "
                             f"{PROJECTION_YEARS} years")

    def update(self, name: str, value) -> "ParameterSet":
        """Return a copy with a single field changed.

        Raises:
            KeyError: If name is not a parameter field.
            ValueError: If the new value fails validation.
        """
        if name not in FIELD_NAMES:
            raise KeyError(f"Unknown parameter '{name}'. Available: {list(FIELD_NAMES)}")
        if name in NUMERIC_FIELDS and isinstance(value, int) and not isinstance(value, bool):
            value = float(value)
        return replace(self, **{name: value})

    @property
    def discounted_system_cost(self) -> float:
        """System cost after the Investment Tax Credit."""
        return self.system_cost * (1 - self.itc)


FIELD_NAMES = tuple(f.name for f in fields(ParameterSet))
NUMERIC_FIELDS = tuple(
    name for name in FIELD_NAMES if name not in ("include_battery", "view")
)


@dataclass(frozen=True)
class ProjectionRow:
    """Annual and cumulative costs of the three paths for one year.

    Attributes:
        year: Projection year, 1-indexed.
        util_annual: Utility-only cost this year ($).
        ppa_annual: PPA cost this year, battery included ($).
        purchase_annual: Purchase-path operating cost this year, net of NEM ($).
        cum_util: Utility cost through this year ($).
        cum_ppa: PPA cost through this year ($).
        cum_purchase: ITC-adjusted system cost plus operating costs through this year ($).
    """

    year: int
    util_annual: float
    ppa_annual: float
    purchase_annual: float
    cum_util: float
    cum_ppa: float
    cum_purchase: float


@dataclass
class ProjectionResults:
    """Projection rows plus the metrics shown in the summary bar.

    Attributes:
        rows: One ProjectionRow per year, in year order.
        breakeven_year: First year purchase operating costs reach the
            ITC-adjusted system cost, or None within the horizon.
        discounted_system_cost: System cost after ITC ($).
        total_savings_ppa_vs_utility: Sum of utility minus PPA annual costs ($).
        total_kwh: Consumption over the horizon (kWh).
        co2_saved_kg: Emissions offset over the horizon (kg CO2).
        trees_equivalent: Tree-years of sequestration equal to co2_saved_kg.
    """

    rows: List[ProjectionRow] = field(default_factory=list)
    breakeven_year: Optional[int] = None
    discounted_system_cost: float = 0.0
    total_savings_ppa_vs_utility: float = 0.0
    total_kwh: float = 0.0
    co2_saved_kg: float = 0.0
    trees_equivalent: float = 0.0
