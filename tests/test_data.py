"""Tests for parameter models, validation and formatting."""

import pytest

from solar_savings.data.validators import (
    validate_escalation,
    validate_itc,
    validate_parameters,
    validate_rate,
    validate_system_cost,
    validate_usage,
)
from solar_savings.models.parameters import ParameterSet
from solar_savings.utils.formatters import (
    format_breakeven,
    format_currency,
    format_currency_exact,
    format_percent,
    format_rate,
)


# ---- ParameterSet ----

class TestParameterSet:
    def test_defaults(self):
        params = ParameterSet()
        assert params.usage == 14354.0
        assert params.include_battery is False
        assert params.view == "annual"

    def test_discounted_system_cost(self):
        """45000 * (1 - 0.30) = 31500."""
        assert ParameterSet().discounted_system_cost == pytest.approx(31500.0)

    def test_update_returns_copy(self):
        params = ParameterSet()
        updated = params.update("usage", 9000)
        assert updated.usage == 9000.0
        assert isinstance(updated.usage, float)
        assert params.usage == 14354.0

    def test_update_unknown_field(self):
        with pytest.raises(KeyError):
            ParameterSet().update("discount_rate", 0.07)

    @pytest.mark.parametrize("name,value", [
        ("usage", 0.0),
        ("utility_esc", -1.0),
        ("utility_esc", 1e15),
        ("ppa_esc", 1.5),
        ("ppa_rate", 1e306),
        ("itc", 1.5),
        ("ppa_rate", float("nan")),
        ("system_cost", float("inf")),
        ("include_battery", "yes"),
        ("view", "monthly"),
        ("maintenance", True),
    ])
    def test_invalid_values(self, name, value):
        with pytest.raises(ValueError):
            ParameterSet().update(name, value)


# ---- Validators ----

class TestValidators:
    def test_usage_invalid(self):
        assert validate_usage(0)[0] is False

    def test_usage_low_warning(self):
        valid, msg = validate_usage(1500)
        assert valid is True
        assert msg.startswith("Warning")

    def test_negative_rate_invalid(self):
        assert validate_rate(-0.1, "Utility rate") == (False, "Utility rate cannot be negative.")

    def test_high_rate_warning(self):
        valid, msg = validate_rate(1.5, "PPA rate")
        assert valid is True
        assert "PPA rate" in msg

    def test_escalation_limits(self):
        assert validate_escalation(-1.0, "PPA escalator")[0] is False
        assert validate_escalation(-0.02, "PPA escalator")[1].startswith("Warning")
        assert validate_escalation(0.25, "PPA escalator")[1].startswith("Warning")
        assert validate_escalation(0.035, "PPA escalator") == (True, "")
        assert validate_escalation(1.5, "PPA escalator")[0] is False

    def test_itc(self):
        assert validate_itc(0.30) == (True, "")
        assert validate_itc(0.6)[1].startswith("Warning")
        assert validate_itc(-0.1)[0] is False

    def test_zero_system_cost_warning(self):
        valid, msg = validate_system_cost(0)
        assert valid is True
        assert "breakeven" in msg

    def test_defaults_clean(self):
        assert validate_parameters(ParameterSet()) == (True, [])

    def test_ppa_above_utility_warning(self):
        valid, messages = validate_parameters(ParameterSet(ppa_rate=0.45))
        assert valid is True
        assert any("PPA rate starts above" in m for m in messages)

    def test_negative_maintenance_invalid(self):
        valid, messages = validate_parameters(ParameterSet(maintenance=-10.0))
        assert valid is False
        assert messages == ["Annual maintenance cannot be negative."]


# ---- Formatters ----

class TestFormatters:
    def test_currency_abbreviated(self):
        assert format_currency(134200) == "$134K"
        assert format_currency(2_500_000, 1) == "$2.5M"
        assert format_currency(-1500, 1) == "-$1.5K"
        assert format_currency(950) == "$950"

    def test_currency_exact(self):
        assert format_currency_exact(31500) == "$31,500"
        assert format_currency_exact(-1235.4) == "-$1,235"
        assert format_currency_exact(-0.2) == "$0"

    def test_percent(self):
        assert format_percent(0.035) == "3.5%"
        assert format_percent(0.30, 0) == "30%"

    def test_rate(self):
        assert format_rate(0.38) == "$0.380/kWh"

    def test_breakeven(self):
        assert format_breakeven(7) == "Year 7"
        assert format_breakeven(None) == "—"
