"""The host collaborator: incoming cookies and the cookie-set primitive.

cookietree never parses ``Cookie`` headers and never writes
``Set-Cookie`` headers. Both belong to the host environment, which
hands over:

- ``cookies``: the incoming cookies, already parsed into a nested dict
  (``pref[a]=1`` arrives as ``{"pref": {"a": "1"}}``).
- ``set_cookie()``: the primitive that emits one outbound cookie
  directive and reports whether it could.

The active host is held in a ContextVar, task-local under asyncio and
thread-local under threads, and is installed with ``use_host()``.
"""

import time
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

# -- Host protocol --


@runtime_checkable
class CookieHost(Protocol):
    """Structural interface every host environment provides."""

    cookies: dict[Any, Any]
    server_name: str

    def set_cookie(
        self,
        name: str,
        value: str,
        expires: int,
        path: str,
        domain: str,
        secure: bool,
        httponly: bool,
    ) -> bool: ...


# -- Recorded directives --


@dataclass(frozen=True, slots=True)
class CookieDirective:
    """One call made to the cookie-set primitive."""

    name: str
    value: str
    expires: int = 0
    path: str = "/"
    domain: str = ""
    secure: bool = False
    httponly: bool = False

    @property
    def is_session(self) -> bool:
        """True when the cookie lives until the browser closes."""
        return self.expires == 0

    @property
    def is_removal(self) -> bool:
        """True when the directive asks the client to drop the cookie."""
        return 0 < self.expires < time.time()


@dataclass(slots=True)
class BufferedHost:
    """In-memory host that buffers directives until headers are sent.

    Mirrors how a real response behaves: cookies can be added while the
    response has not started, and every later attempt fails::

        host = BufferedHost(cookies={"theme": "dark"}, server_name="www.example.com")
        with use_host(host):
            cookie().set("lang", "en")
        host.send_headers()
        host.directives  # [CookieDirective(name='lang', value='en', ...)]
    """

    cookies: dict[Any, Any] = field(default_factory=dict)
    server_name: str = "localhost"
    directives: list[CookieDirective] = field(default_factory=list)
    headers_sent: bool = False

    def set_cookie(
        self,
        name: str,
        value: str,
        expires: int,
        path: str,
        domain: str,
        secure: bool,
        httponly: bool,
    ) -> bool:
        if self.headers_sent:
            return False
        self.directives.append(
            CookieDirective(
                name=name,
                value=value,
                expires=expires,
                path=path,
                domain=domain,
                secure=secure,
                httponly=httponly,
            )
        )
        return True

    def send_headers(self) -> list[CookieDirective]:
        """Close the buffer and return everything that was recorded."""
        self.headers_sent = True
        return list(self.directives)

    @property
    def removals(self) -> list[CookieDirective]:
        return [d for d in self.directives if d.is_removal]


# -- Active host context --

host_var: ContextVar[CookieHost | None] = ContextVar("cookietree_host", default=None)
"""The host serving the current request. Set with ``use_host()``."""


def get_host() -> CookieHost:
    """Return the active host.

    Raises ``LookupError`` if called outside ``use_host()``.
    """
    host = host_var.get()
    if host is None:
        msg = (
            "No active cookie host. Wrap request handling in "
            "use_host(host) before touching cookies."
        )
        raise LookupError(msg)
    return host


def current_host() -> CookieHost | None:
    """Return the active host, or None outside ``use_host()``."""
    return host_var.get()


@contextmanager
def use_host(host: CookieHost) -> Iterator[CookieHost]:
    """Make *host* the active host for the enclosed block."""
    token = host_var.set(host)
    try:
        yield host
    finally:
        host_var.reset(token)
