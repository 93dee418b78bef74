"""Tests for URL query-state synchronization and admin-key gating."""

from urllib.parse import parse_qs, urlsplit

import pytest

from solar_savings.data.config import ADMIN_KEY_ENV, DEFAULT_PATH, get_admin_secret
from solar_savings.data.query_state import (
    CalculatorSession,
    SessionLockedError,
    build_url,
    is_unlocked,
    parse_query,
    serialize_query,
    share_url,
    split_url,
)
from solar_savings.models.parameters import FIELD_NAMES, ParameterSet

DEFAULT_QUERY = (
    "usage=14354&ur=0.38&ue=0.09&pr=0.22&pe=0.035"
    "&nmc=0.1&sys=45000&maint=200&itc=0.3&view=annual"
)


# ---- Parsing ----

class TestParseQuery:
    def test_empty_query_gives_defaults(self):
        assert parse_query("") == ParameterSet()

    def test_recognized_keys_merge(self):
        params = parse_query("usage=12000&ur=0.31")
        assert params.usage == 12000.0
        assert params.utility_rate == 0.31
        assert params.ppa_rate == 0.22

    def test_leading_question_mark(self):
        assert parse_query("?pe=0.02").ppa_esc == 0.02

    def test_all_keys(self):
        params = parse_query(
            "usage=9000&ur=0.3&ue=0.05&pr=0.2&pe=0.03&battery=1"
            "&nmc=0.08&sys=30000&maint=150&itc=0.26&view=cumulative"
        )
        assert params == ParameterSet(
            usage=9000.0, utility_rate=0.3, utility_esc=0.05, ppa_rate=0.2,
            ppa_esc=0.03, include_battery=True, net_metering_credit=0.08,
            system_cost=30000.0, maintenance=150.0, itc=0.26, view="cumulative",
        )

    def test_unparseable_values_ignored(self):
        """Non-numbers, empty values and non-finite numbers keep the defaults."""
        params = parse_query("usage=abc&ur=&ue=nan&pr=inf&sys=-inf")
        assert params == ParameterSet()

    def test_out_of_range_values_ignored(self):
        """Values rejected by field validation keep the defaults."""
        params = parse_query("usage=-5&ue=-1&itc=5")
        assert params == ParameterSet()

    def test_huge_escalation_ignored(self):
        """Escalations that would overflow the projection keep the defaults."""
        params = parse_query("ue=1e15&pe=1.5&ur=0.41")
        assert params.utility_esc == 0.09
        assert params.ppa_esc == 0.035
        assert params.utility_rate == 0.41

    def test_overflowing_magnitudes_ignored(self):
        assert parse_query("usage=1e300&ur=1e300").utility_rate == 0.38

    def test_valid_keys_survive_invalid_neighbours(self):
        params = parse_query("usage=abc&ur=0.41")
        assert params.usage == 14354.0
        assert params.utility_rate == 0.41

    def test_unknown_keys_ignored(self):
        assert parse_query("foo=1&admin=x") == ParameterSet()

    def test_exponent_notation(self):
        assert parse_query("usage=1.2e4").usage == 12000.0

    def test_first_value_wins(self):
        assert parse_query("usage=9000&usage=8000").usage == 9000.0

    def test_battery_only_one(self):
        """Only "1" turns the battery on; anything else leaves it unchanged."""
        assert parse_query("battery=1").include_battery is True
        assert parse_query("battery=true").include_battery is False
        assert parse_query("battery=0").include_battery is False
        on = ParameterSet(include_battery=True)
        assert parse_query("battery=0", base=on).include_battery is True

    def test_view_enum(self):
        assert parse_query("view=cumulative").view == "cumulative"
        assert parse_query("view=weekly").view == "annual"

    def test_zero_escalation_accepted(self):
        assert parse_query("ue=0").utility_esc == 0.0

    def test_merges_into_base(self):
        base = ParameterSet(usage=5000.0)
        assert parse_query("ur=0.5", base=base).usage == 5000.0


# ---- Serialization ----

class TestSerializeQuery:
    def test_default_order(self):
        assert serialize_query(ParameterSet()) == DEFAULT_QUERY

    def test_battery_written_when_set(self):
        query = serialize_query(ParameterSet(include_battery=True))
        assert "&pe=0.035&battery=1&nmc=0.1&" in query

    def test_never_contains_admin(self):
        assert "admin" not in serialize_query(ParameterSet())

    def test_roundtrip_preserves_floats(self):
        params = ParameterSet(
            usage=12345.678, utility_rate=0.1 + 0.2, utility_esc=0.0,
            include_battery=True, maintenance=-50.0, view="cumulative",
        )
        assert parse_query(serialize_query(params)) == params

    def test_build_url(self):
        assert build_url("/tool", ParameterSet()) == "/tool?" + DEFAULT_QUERY


# ---- Splitting ----

class TestSplitUrl:
    def test_full_url(self):
        assert split_url("https://x.com/tool?usage=1#top") == ("https://x.com/tool", "usage=1")

    def test_bare_query(self):
        assert split_url("usage=1&ur=0.2") == ("", "usage=1&ur=0.2")

    def test_question_mark_query(self):
        assert split_url("?usage=1") == ("", "usage=1")

    def test_path_only(self):
        assert split_url("/calc") == ("/calc", "")


# ---- Admin Key ----

class TestAdminKey:
    def test_matching_key_unlocks(self):
        assert is_unlocked("usage=1&admin=s3cret", "s3cret") is True

    def test_wrong_key_locks(self):
        assert is_unlocked("admin=guess", "s3cret") is False

    def test_absent_key_locks(self):
        assert is_unlocked("usage=1", "s3cret") is False

    def test_absent_key_locks_empty_secret(self):
        assert is_unlocked("", "") is False

    def test_empty_key_unlocks_empty_secret(self):
        assert is_unlocked("admin=", "") is True

    def test_secret_from_env(self):
        assert get_admin_secret({ADMIN_KEY_ENV: "abc"}) == "abc"
        assert get_admin_secret({}) == ""


# ---- Share Links ----

class TestShareUrl:
    def test_strips_admin(self):
        url = "https://x.com/tool?usage=1&admin=s3cret&ur=0.3"
        assert share_url(url) == "https://x.com/tool?usage=1&ur=0.3"

    def test_strips_repeated_admin(self):
        assert share_url("/tool?admin=a&usage=1&admin=b") == "/tool?usage=1"

    def test_admin_only(self):
        assert share_url("https://x.com/tool?admin=s3cret") == "https://x.com/tool"

    def test_no_admin_unchanged(self):
        url = "/tool?" + DEFAULT_QUERY
        assert share_url(url) == url


# ---- Session ----

class TestCalculatorSession:
    def test_default_base(self):
        session = CalculatorSession("")
        assert session.url == f"{DEFAULT_PATH}?{DEFAULT_QUERY}"
        assert session.locked is True

    def test_initial_url_rewritten_without_admin(self):
        seen = []
        session = CalculatorSession(
            "https://x.com/tool?usage=12000&admin=s3cret", "s3cret", on_url_change=seen.append
        )
        assert session.locked is False
        assert len(seen) == 1
        assert seen[0] == session.url
        assert session.url.startswith("https://x.com/tool?usage=12000&ur=0.38")
        assert "admin" not in session.url

    def test_overflowing_link_opens_with_defaults(self):
        session = CalculatorSession("https://x.com/tool?ue=1e15")
        assert session.params.utility_esc == 0.09
        assert "ue=0.09&" in session.url

    def test_update_rejects_huge_escalation(self):
        session = CalculatorSession("?admin=k", "k")
        with pytest.raises(ValueError):
            session.update("utility_esc", 1e15)
        assert session.params.utility_esc == 0.09

    def test_initial_results_computed(self):
        session = CalculatorSession("?usage=10000&ur=0.3")
        assert session.results.rows[0].util_annual == pytest.approx(3000.0)

    def test_update_recomputes_and_replaces_url(self):
        seen = []
        session = CalculatorSession("?admin=k", "k", on_url_change=seen.append)
        results = session.update("usage", 9000)
        assert results is session.results
        assert results.rows[0].util_annual == pytest.approx(3420.0)
        assert "usage=9000&" in session.url
        assert seen == [seen[0], session.url]

    def test_update_battery(self):
        session = CalculatorSession("?admin=k", "k")
        session.update("include_battery", True)
        assert "battery=1" in session.url
        assert session.results.rows[0].ppa_annual == pytest.approx(3877.76)

    def test_lock_derived_once(self):
        """The rewritten URL drops admin, but the session stays unlocked."""
        session = CalculatorSession("?admin=k", "k")
        session.update("usage", 8000)
        session.update("itc", 0.26)
        assert session.locked is False
        assert session.params.itc == 0.26

    def test_locked_rejects_edits(self):
        seen = []
        session = CalculatorSession("?usage=12000", "s3cret", on_url_change=seen.append)
        with pytest.raises(SessionLockedError):
            session.update("usage", 9000)
        assert session.params.usage == 12000.0
        assert len(seen) == 1

    def test_wrong_key_locks(self):
        session = CalculatorSession("https://x.com/tool?admin=guess", "real")
        assert session.locked is True
        assert "admin" not in session.share_url()

    def test_locked_allows_view_toggle(self):
        session = CalculatorSession("?usage=12000", "s3cret")
        assert session.toggle_view() == "cumulative"
        assert session.params.view == "cumulative"
        assert session.url.endswith("view=cumulative")
        assert session.toggle_view() == "annual"

    def test_editable_fields(self):
        assert CalculatorSession("", "k").editable_fields() == ("view",)
        assert CalculatorSession("?admin=k", "k").editable_fields() == FIELD_NAMES

    def test_unknown_field(self):
        session = CalculatorSession("?admin=k", "k")
        with pytest.raises(KeyError):
            session.update("bogus", 1)

    def test_invalid_value_keeps_state(self):
        session = CalculatorSession("?admin=k", "k")
        url = session.url
        with pytest.raises(ValueError):
            session.update("itc", 2.0)
        assert session.params.itc == 0.3
        assert session.url == url

    def test_share_url_keeps_inputs(self):
        session = CalculatorSession("https://x.com/tool?admin=k&usage=11000", "k")
        link = session.share_url()
        query = parse_qs(urlsplit(link).query)
        assert query["usage"] == ["11000"]
        assert "admin" not in query

    def test_shared_link_opens_locked(self):
        session = CalculatorSession("https://x.com/tool?admin=k&usage=11000", "k")
        viewer = CalculatorSession(session.share_url(), "k")
        assert viewer.locked is True
        assert viewer.params == session.params
