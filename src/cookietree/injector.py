"""Injector — the policy that persists one cookie value.

An injector is used every time a cookie is set. It either holds the
attribute configuration passed to the host primitive (expiry, path,
domain, secure, http-only) or a setter callback that takes over
persistence entirely.

Binding an injector::

    # tree-wide
    cookie().set_injector(Injector({"secure": True}))

    # one subtree: make it a subtree first, then bind
    cookie().set("prefs", {})
    cookie().get("prefs").set_injector(Injector({"path": "/app"}))

    # one cookie
    cookie().set("token", Injector({"expiry": "+1 hour"}, "abc"))

    # a whole subtree in one go; the new subtree keeps the injector
    cookie().set("prefs", Injector({"expiry": 3600}, {"theme": "dark", "lang": "en"}))

When no node on the path carries an injector, the default injector of
the Registry is used.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any, TypeAlias

from cookietree import coercion
from cookietree.config import DEFAULT_CONFIG, CookieConfig
from cookietree.errors import ConfigurationError, SetFailed
from cookietree.host import current_host, get_host

logger = logging.getLogger("cookietree")

# (name, value) -> result; ``False`` signals failure
CookieSetter: TypeAlias = Callable[[str, str], Any]

# (name, value, injector) -> truthy to continue, falsy to stop quietly
Hook: TypeAlias = Callable[[str, Any, "Injector"], Any]

ATTRIBUTES = ("expiry", "path", "domain", "secure", "http_only")


class Injector:
    """Attribute configuration plus the act of setting a cookie.

    ``config`` is either a mapping with any of the keys ``expiry``,
    ``path``, ``domain``, ``secure`` and ``http_only`` (``None`` entries
    are skipped), or a callable ``setter(name, value)`` used in place of
    the host primitive, e.g. to store raw values somewhere else.

    ``value`` is only needed when the injector itself is assigned to a
    key; it is consumed by the next ``inject()``.

    Hooks are called as ``hook(name, value, injector)``. The pre-hook
    sees the value as given, the post-hook the persisted string. A falsy
    return ends the injection without error and ``inject()`` returns
    None.
    """

    __slots__ = ("_config", "_defaults", "_post_hook", "_pre_hook", "_setter", "_value")

    def __init__(
        self,
        config: Mapping[str, Any] | CookieSetter | None = None,
        value: Any = None,
        *,
        pre_hook: Hook | None = None,
        post_hook: Hook | None = None,
        defaults: CookieConfig = DEFAULT_CONFIG,
    ) -> None:
        self._value = value
        self._pre_hook = pre_hook
        self._post_hook = post_hook
        self._defaults = defaults
        self._config: dict[str, Any] = {}
        self._setter: CookieSetter | None = None

        if callable(config):
            self._setter = config
        elif config is not None:
            unknown = sorted(str(key) for key in config if key not in ATTRIBUTES)
            if unknown:
                msg = (
                    f"Unknown injector config key(s): {', '.join(unknown)}. "
                    f"Expected any of: {', '.join(ATTRIBUTES)}"
                )
                raise ConfigurationError(msg)
            for key in ATTRIBUTES:
                if config.get(key) is not None:
                    getattr(self, f"set_{key}")(config[key])

    @staticmethod
    def is_injector(value: Any) -> bool:
        return isinstance(value, Injector)

    def __repr__(self) -> str:
        if self._setter is not None:
            return f"Injector(setter={self._setter!r})"
        return f"Injector({self._config!r})"

    # -- Pending value --

    @property
    def value(self) -> Any:
        return self._value

    def clear_value(self) -> Injector:
        self._value = None
        return self

    # -- Hooks --

    @property
    def pre_hook(self) -> Hook | None:
        return self._pre_hook

    @property
    def post_hook(self) -> Hook | None:
        return self._post_hook

    def set_pre_hook(self, hook: Hook | None) -> Injector:
        """Set the hook called before the value is normalized and stored."""
        self._pre_hook = hook
        return self

    def set_post_hook(self, hook: Hook | None) -> Injector:
        """Set the hook called after the cookie was stored."""
        self._post_hook = hook
        return self

    @property
    def delegates(self) -> bool:
        """True when a setter callback replaces the host primitive."""
        return self._setter is not None

    # -- Configuration storage --

    def _set_config(self, key: str, value: Any, valid: Callable[[Any], bool]) -> Injector:
        if self._setter is not None:
            msg = f"Cannot set {key!r}: this injector delegates to a setter callback"
            raise ConfigurationError(msg)
        if not valid(value):
            msg = f"Config value - {key} - is not valid: {value!r}"
            raise ConfigurationError(msg)
        self._config[key] = value
        return self

    def _get_config(
        self,
        key: str,
        default: Any,
        use_default: bool,
        coerce: Callable[[Any], Any],
    ) -> Any:
        if key in self._config:
            raw = self._config[key]
        elif use_default:
            raw = default
            # A callback injector keeps an empty configuration
            if self._setter is None:
                self._config[key] = raw
        else:
            return None
        return coerce(raw)

    # -- Expiry --

    def set_expiry(self, value: Any = "") -> Injector:
        """Set when the cookie expires.

        - empty -> session cookie (expires when the browser closes)
        - number or numeric string -> that many seconds from now
        - ``datetime`` / ``date`` -> that moment
        - ``"@<int>"`` -> that UNIX timestamp
        - other strings -> parsed date/time text (``"2030-01-01"``,
          ``"+2 weeks"``)

        Default: 30 days from now.
        """
        return self._set_config("expiry", value, coercion.is_valid_expiry)

    def get_expiry(self, use_default: bool = False) -> int | None:
        """Expiry as a UNIX timestamp, ``0`` for a session cookie."""
        return self._get_config(
            "expiry", self._defaults.expiry_seconds, use_default, coercion.coerce_expiry
        )

    # -- Path --

    def set_path(self, value: Any = "") -> Injector:
        """Set the cookie path. Empty means ``/``."""
        return self._set_config("path", value, coercion.is_valid_path)

    def get_path(self, use_default: bool = False) -> str | None:
        return self._get_config("path", self._defaults.path, use_default, coercion.coerce_path)

    # -- Domain --

    def set_domain(self, value: str) -> Injector:
        """Set the cookie domain; must be a non-blank string.

        Default: the host's server name when it contains a dot, else ``""``.
        """
        return self._set_config("domain", value, coercion.is_valid_domain)

    def get_domain(self, use_default: bool = False) -> str | None:
        host = current_host()
        default = coercion.default_domain(host.server_name if host is not None else None)
        return self._get_config("domain", default, use_default, str)

    # -- Secure / HttpOnly --

    def set_secure(self, value: Any) -> Injector:
        """Accepts a bool, ``0``/``1``, ``"true"``/``"false"`` or empty."""
        return self._set_config("secure", value, coercion.is_valid_flag)

    def get_secure(self, use_default: bool = False) -> bool | None:
        return self._get_config("secure", self._defaults.secure, use_default, coercion.coerce_flag)

    def set_http_only(self, value: Any) -> Injector:
        """Accepts a bool, ``0``/``1``, ``"true"``/``"false"`` or empty."""
        return self._set_config("http_only", value, coercion.is_valid_flag)

    def get_http_only(self, use_default: bool = False) -> bool | None:
        return self._get_config(
            "http_only", self._defaults.http_only, use_default, coercion.coerce_flag
        )

    # -- Injection --

    def _run_hook(self, hook: Hook | None, name: str, value: Any) -> bool:
        if hook is None:
            return True
        return bool(hook(name, value, self))

    def inject(self, name: str, value: Any = None) -> str | None:
        """Set cookie *name* and return the stored string.

        Uses the pending value when *value* is omitted (and clears it).
        Returns None when a hook stopped the injection.

        Raises ``SetFailed`` if the host (or setter callback) refused.
        """
        if value is None:
            value = self._value
            self.clear_value()

        if isinstance(value, (Mapping, list, tuple)):
            msg = f"Cannot inject a nested value into {name!r}; set it on a Component"
            raise TypeError(msg)

        if not self._run_hook(self._pre_hook, name, value):
            logger.debug("Pre-hook stopped injection of %r", name)
            return None

        if isinstance(value, bool):
            value = int(value)
        text = "" if value is None else str(value)

        if self._setter is not None:
            failed = self._setter(name, text) is False
        else:
            host = get_host()
            failed = not host.set_cookie(
                name,
                text,
                self.get_expiry(True),
                self.get_path(True),
                self.get_domain(True),
                self.get_secure(True),
                self.get_http_only(True),
            )

        if failed:
            logger.warning("Cookie %r could not be set (response already started?)", name)
            raise SetFailed(name)

        if not self._run_hook(self._post_hook, name, text):
            logger.debug("Post-hook stopped injection of %r", name)
            return None

        logger.debug("Injected cookie %r", name)
        return text

    def __call__(self, name: str, value: Any = None) -> str | None:
        """Alias of ``inject()``."""
        return self.inject(name, value)
