"""Process configuration for the Solar Savings Calculator."""

import os
from typing import Mapping, Optional

ADMIN_KEY_ENV = "SOLAR_SAVINGS_ADMIN_KEY"
DEFAULT_PATH = "/tool"


def get_admin_secret(env: Optional[Mapping[str, str]] = None) -> str:
    """Return the secret that unlocks editing.

    An unset variable yields the empty string, which is a valid (if
    insecure) configuration: "?admin=" then unlocks the calculator.

    Args:
        env: Mapping to read from. Defaults to os.environ.
    """
    if env is None:
        env = os.environ
    return env.get(ADMIN_KEY_ENV, "")
