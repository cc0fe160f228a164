"""cookietree exception hierarchy.

Shared across Injector, Component and Registry so every module
raises and catches the same types.
"""


class CookieTreeError(Exception):
    """Base for all cookietree-specific errors."""


class ConfigurationError(CookieTreeError):
    """Raised when an injector attribute value is invalid.

    Raised by the ``Injector.set_*`` methods at the moment of the call,
    never deferred to injection time.
    """


class SetFailed(CookieTreeError):  # noqa: N818 — mirrors the failure it reports
    """The host refused to set a cookie.

    Almost always caused by the response having already started, so
    cookie headers can no longer be emitted. Never retried.
    """

    def __init__(self, name: str, detail: str = "") -> None:
        self.name = name
        self.detail = detail or "Cookie insertion failed"
        super().__init__(f"{self.detail}: {name!r}")
