"""Input validation functions for the Solar Savings Calculator.

Each validator returns a tuple of (is_valid: bool, message: str).
Messages describe errors or warnings for user display.
"""

from typing import List, Tuple

from solar_savings.models.parameters import MAX_ESCALATION, ParameterSet


def validate_usage(usage_kwh: float) -> Tuple[bool, str]:
    """Validate annual consumption.

    Args:
        usage_kwh: Annual household usage in kWh.

    Returns:
        (is_valid, message) tuple.
    """
    if usage_kwh <= 0:
        return False, "Annual usage must be greater than 0 kWh."
    if usage_kwh < 2000:
        return True, f"Warning: {usage_kwh:,.0f} kWh/yr is low for a home. Verify this is correct."
    if usage_kwh > 50000:
        return True, f"Warning: {usage_kwh:,.0f} kWh/yr is unusually high for a home."
    return True, ""


def validate_rate(rate: float, label: str) -> Tuple[bool, str]:
    """Validate a $/kWh price.

    Args:
        rate: Price in $/kWh.
        label: Name used in messages (e.g., "Utility rate").

    Returns:
        (is_valid, message) tuple.
    """
    if rate < 0:
        return False, f"{label} cannot be negative."
    if rate > 1.0:
        return True, f"Warning: {label} above $1.00/kWh is unusual. Verify units."
    return True, ""


def validate_escalation(escalation: float, label: str) -> Tuple[bool, str]:
    """Validate an annual escalation rate.

    Args:
        escalation: Escalation as decimal (e.g., 0.035 for 3.5%).
        label: Name used in messages.

    Returns:
        (is_valid, message) tuple.
    """
    if escalation <= -1:
        return False, f"{label} must be greater than -100%."
    if escalation > MAX_ESCALATION:
        return False, f"{label} cannot exceed {MAX_ESCALATION:.0%} per year."
    if escalation < 0:
        return True, f"Warning: {label} is negative; prices will fall each year."
    if escalation > 0.20:
        return True, f"Warning: {label} above 20%/yr compounds quickly over 25 years."
    return True, ""


def validate_itc(itc: float) -> Tuple[bool, str]:
    """Validate the Investment Tax Credit fraction.

    Args:
        itc: ITC as decimal (e.g., 0.30 for 30%).

    Returns:
        (is_valid, message) tuple.
    """
    if not 0 <= itc <= 1:
        return False, "ITC must be between 0% and 100%."
    if itc > 0.5:
        return True, "Warning: ITC above 50% exceeds current federal credits."
    return True, ""


def validate_system_cost(system_cost: float) -> Tuple[bool, str]:
    """Validate the purchase price of the system."""
    if system_cost < 0:
        return False, "System cost cannot be negative."
    if system_cost == 0:
        return True, "Warning: System cost is $0; breakeven is immediate."
    return True, ""


def validate_maintenance(maintenance: float) -> Tuple[bool, str]:
    """Validate the purchase-path annual maintenance."""
    if maintenance < 0:
        return False, "Annual maintenance cannot be negative."
    return True, ""


def validate_parameters(params: ParameterSet) -> Tuple[bool, List[str]]:
    """Run all validations on a parameter set.

    Args:
        params: Inputs to validate.

    Returns:
        (is_valid, messages) where messages includes all errors and warnings.
    """
    messages = []
    is_valid = True

    checks = [
        validate_usage(params.usage),
        validate_rate(params.utility_rate, "Utility rate"),
        validate_escalation(params.utility_esc, "Utility escalation"),
        validate_rate(params.ppa_rate, "PPA rate"),
        validate_escalation(params.ppa_esc, "PPA escalator"),
        validate_rate(params.net_metering_credit, "NEM credit"),
        validate_system_cost(params.system_cost),
        validate_maintenance(params.maintenance),
        validate_itc(params.itc),
    ]

    for valid, msg in checks:
        if not valid:
            is_valid = False
        if msg:
            messages.append(msg)

    if params.ppa_rate > params.utility_rate:
        messages.append("Warning: PPA rate starts above the utility rate.")

    return is_valid, messages
