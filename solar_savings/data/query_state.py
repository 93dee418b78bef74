"""Synchronization between a ParameterSet and a shareable URL.

The calculator's whole state lives in the query string: it is merged into
the defaults once at startup and written back, replacing the current URL,
after every edit. An "admin" query key unlocks editing when it matches the
configured secret; lock state is decided once and never re-derived.
"""

import logging
import math
from typing import Callable, Dict, Optional, Tuple
from urllib.parse import parse_qs, parse_qsl, urlencode, urlsplit, urlunsplit

from solar_savings.data.config import DEFAULT_PATH
from solar_savings.models.parameters import (
    FIELD_NAMES,
    VIEW_ANNUAL,
    VIEW_CUMULATIVE,
    VIEW_MODES,
    ParameterSet,
    ProjectionResults,
)
from solar_savings.models.projection import calculate_projection

log = logging.getLogger(__name__)

ADMIN_KEY = "admin"

# Query key -> ParameterSet field, in serialization order.
QUERY_KEYS: Dict[str, str] = {
    "usage": "usage",
    "ur": "utility_rate",
    "ue": "utility_esc",
    "pr": "ppa_rate",
    "pe": "ppa_esc",
    "battery": "include_battery",
    "nmc": "net_metering_credit",
    "sys": "system_cost",
    "maint": "maintenance",
    "itc": "itc",
    "view": "view",
}


class SessionLockedError(PermissionError):
    """Raised when a locked session receives an edit other than the view toggle."""


def split_url(url: str) -> Tuple[str, str]:
    """Split a URL (or bare query string) into (base, query).

    The base keeps scheme, host and path; the fragment is dropped.
    """
    if url.startswith("?"):
        return "", url[1:]
    if "?" not in url and "=" in url and "://" not in url and not url.startswith("/"):
        return "", url
    parts = urlsplit(url)
    base = urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))
    return base, parts.query


def _first_values(query: str) -> Dict[str, str]:
    return {k: v[0] for k, v in parse_qs(query.lstrip("?"), keep_blank_values=True).items()}


def _parse_number(raw: str) -> Optional[float]:
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_query(query: str, base: Optional[ParameterSet] = None) -> ParameterSet:
    """Merge recognized query keys into a parameter set.

    Keys that are missing, empty, unparseable or rejected by field
    validation leave the corresponding value untouched. Nothing is raised.

    Args:
        query: Query string, with or without the leading "?".
        base: Parameter set to merge into. Defaults to ParameterSet().

    Returns:
        The merged ParameterSet.
    """
    params = base if base is not None else ParameterSet()
    values = _first_values(query)

    for key, name in QUERY_KEYS.items():
        raw = values.get(key)
        if not raw:
            continue
        if name == "include_battery":
            if raw == "1":
                params = params.update(name, True)
            else:
                log.debug("Ignoring query key %s=%r", key, raw)
            continue
        if name == "view":
            if raw in VIEW_MODES:
                params = params.update(name, raw)
            else:
                log.debug("Ignoring query key %s=%r", key, raw)
            continue

        number = _parse_number(raw)
        if number is None:
            log.debug("Ignoring query key %s=%r: not a finite number", key, raw)
            continue
        try:
            params = params.update(name, number)
        except ValueError as e:
            log.debug("Ignoring query key %s=%r: %s", key, raw, e)
    return params


def _format_number(value: float) -> str:
    if float(value).is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(float(value))


def serialize_query(params: ParameterSet) -> str:
    """Encode the full parameter set as a query string (no leading "?").

    The battery flag is written only when set. The admin credential is
    never part of the output.
    """
    pairs = []
    for key, name in QUERY_KEYS.items():
        value = getattr(params, name)
        if name == "include_battery":
            if value:
                pairs.append((key, "1"))
        elif name == "view":
            pairs.append((key, value))
        else:
            pairs.append((key, _format_number(value)))
    return urlencode(pairs)


def build_url(base: str, params: ParameterSet) -> str:
    """Return base + "?" + the serialized parameter set."""
    return f"{base}?{serialize_query(params)}"


def is_unlocked(query: str, secret: str) -> bool:
    """Return True only if the admin key is present and equals the secret.

    An absent key is locked even when the secret is empty.
    """
    provided = _first_values(query).get(ADMIN_KEY)
    if provided is None:
        return False
    return provided == secret


def share_url(url: str) -> str:
    """Return url with every admin parameter removed, other keys kept."""
    parts = urlsplit(url)
    kept = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != ADMIN_KEY]
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(kept), parts.fragment))


class CalculatorSession:
    """One calculator session: current inputs, results, URL and lock state.

    Every accepted edit recomputes the projection synchronously and
    replaces the current URL; no history of previous URLs is kept.

    Args:
        initial_url: URL or query string the session starts from.
        admin_secret: Configured secret for the "admin" query key.
        on_url_change: Called with the new URL after each replacement.
    """

    def __init__(
        self,
        initial_url: str = "",
        admin_secret: str = "",
        on_url_change: Optional[Callable[[str], None]] = None,
    ):
        base, query = split_url(initial_url)
        self.base = base or DEFAULT_PATH
        self._locked = not is_unlocked(query, admin_secret)
        self.on_url_change = on_url_change
        self.url = ""
        self.results: Optional[ProjectionResults] = None
        log.info("Session started %s", "locked (view-only)" if self._locked else "unlocked")
        self._commit(parse_query(query))

    @property
    def locked(self) -> bool:
        return self._locked

    def editable_fields(self) -> Tuple[str, ...]:
        """Fields the user may change in the current lock state."""
        if self._locked:
            return ("view",)
        return FIELD_NAMES

    def update(self, name: str, value) -> ProjectionResults:
        """Change one field, recompute and replace the URL.

        Raises:
            SessionLockedError: If locked and name is not "view".
            KeyError: If name is not a parameter field.
            ValueError: If value fails validation.
        """
        if name not in self.editable_fields():
            if name not in FIELD_NAMES:
                raise KeyError(f"Unknown parameter '{name}'")
            raise SessionLockedError(f"Session is view-only; '{name}' cannot be edited")
        self._commit(self.params.update(name, value))
        return self.results

    def toggle_view(self) -> str:
        """Switch between annual and cumulative display; allowed while locked."""
        new_view = VIEW_CUMULATIVE if self.params.view == VIEW_ANNUAL else VIEW_ANNUAL
        self.update("view", new_view)
        return new_view

    def share_url(self) -> str:
        """Shareable link for the current state, without the admin key."""
        return share_url(self.url)

    def replace_url(self, url: str) -> None:
        self.url = url
        if self.on_url_change is not None:
            self.on_url_change(url)

    def _commit(self, params: ParameterSet) -> None:
        self.params = params
        self.results = calculate_projection(params)
        self.replace_url(build_url(self.base, params))
