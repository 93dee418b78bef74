"""Number and currency formatting utilities for the Solar Savings Calculator."""

from typing import Optional


def format_currency(value: float, decimals: int = 0, prefix: str = "$") -> str:
    """Format a number as an abbreviated currency string.

    Args:
        value: The numeric value to format.
        decimals: Number of decimal places.
        prefix: Currency symbol prefix.

    Returns:
        Formatted currency string (e.g., "$134.2K"). Negative values
        carry the sign before the symbol ("-$1.2K").
    """
    sign = "-" if value < 0 else ""
    value = abs(value)
    if value >= 1e6:
        return f"{sign}{prefix}{value / 1e6:,.{decimals}f}M"
    if value >= 1e3:
        return f"{sign}{prefix}{value / 1e3:,.{decimals}f}K"
    return f"{sign}{prefix}{value:,.{decimals}f}"


def format_currency_exact(value: float, decimals: int = 0, prefix: str = "$") -> str:
    """Format a number as exact currency string without abbreviation.

    Args:
        value: The numeric value to format.
        decimals: Number of decimal places.
        prefix: Currency symbol prefix.

    Returns:
        Formatted currency string (e.g., "$1,234,567" or "-$1,235").
    """
    sign = "-" if value < 0 and round(abs(value), decimals) != 0 else ""
    return f"{sign}{prefix}{abs(value):,.{decimals}f}"


def format_percent(value: float, decimals: int = 1) -> str:
    """Format a decimal as percentage string.

    Args:
        value: Decimal value (e.g., 0.035 for 3.5%).
        decimals: Number of decimal places.

    Returns:
        Formatted percentage string (e.g., "3.5%").
    """
    return f"{value * 100:,.{decimals}f}%"


def format_number(value: float, decimals: int = 1) -> str:
    """Format a number with comma separators (e.g., "1,234.5")."""
    return f"{value:,.{decimals}f}"


def format_rate(value: float) -> str:
    """Format a $/kWh price (e.g., "$0.380/kWh")."""
    return f"${value:,.3f}/kWh"


def format_breakeven(year: Optional[int]) -> str:
    """Format a breakeven year.

    Args:
        year: Breakeven year, or None if not reached.

    Returns:
        "Year N", or an em dash when there is no breakeven.
    """
    if year is None:
        return "—"
    return f"Year {year}"
