"""cookietree — object-oriented access to cookies, nested ones included.

Reads, writes, enumerates and deletes cookies through a tree of nodes
instead of the raw cookie dictionary and the host's cookie-set primitive.

Basic usage::

    from cookietree import BufferedHost, cookie, use_host

    host = BufferedHost(cookies={"pref": {"theme": "dark"}})

    with use_host(host):
        cookie().get("pref").get("theme")        # "dark"
        cookie().set("pref", {"lang": "en"})     # sets pref[lang]=en
        cookie().delete("pref")                  # removes both leaves

Per-cookie attributes (``pip install cookietree`` pulls in
``python-dateutil`` for free-form expiry dates)::

    from cookietree import Injector

    cookie().set("token", Injector({"expiry": "+1 hour", "secure": True}, "abc"))

If a ``SetFailed`` error is raised, the host refused the cookie, which
almost always means the response had already started.
"""

__version__ = "0.1.0"
__all__ = [
    "BufferedHost",
    "Component",
    "ConfigurationError",
    "CookieConfig",
    "CookieDirective",
    "CookieHost",
    "CookieTreeError",
    "Injector",
    "Node",
    "Registry",
    "SetFailed",
    "cookie",
    "get_host",
    "use_host",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import cookietree`` fast while providing a clean top-level API.
    """
    if name in ("Registry", "cookie"):
        from cookietree import registry as _registry

        return getattr(_registry, name)

    if name == "Component":
        from cookietree.component import Component

        return Component

    if name == "Node":
        from cookietree.node import Node

        return Node

    if name == "Injector":
        from cookietree.injector import Injector

        return Injector

    if name == "CookieConfig":
        from cookietree.config import CookieConfig

        return CookieConfig

    if name in ("BufferedHost", "CookieDirective", "CookieHost", "get_host", "use_host"):
        from cookietree import host as _host

        return getattr(_host, name)

    if name in ("ConfigurationError", "CookieTreeError", "SetFailed"):
        from cookietree import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
