"""Cookie attribute defaults.

CookieConfig is a frozen dataclass — immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from dataclasses import dataclass

THIRTY_DAYS = 60 * 60 * 24 * 30
ONE_YEAR = 60 * 60 * 24 * 365


@dataclass(frozen=True, slots=True)
class CookieConfig:
    """Defaults used when an injector attribute was never set.

    Override what you need::

        config = CookieConfig(expiry_seconds=3600, secure=True)
        registry = Registry(cookies, config=config)
    """

    # Relative lifetime applied when no expiry was configured
    expiry_seconds: int = THIRTY_DAYS
    path: str = "/"
    secure: bool = False
    http_only: bool = False

    # Removal directives are dated this far in the past
    removal_age: int = ONE_YEAR


DEFAULT_CONFIG = CookieConfig()
