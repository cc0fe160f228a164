"""Tests for cookietree.injector — configuration, hooks and inject()."""

import time
from datetime import UTC, datetime
from typing import Any

import pytest

from cookietree.config import CookieConfig
from cookietree.errors import ConfigurationError, SetFailed
from cookietree.host import BufferedHost, use_host
from cookietree.injector import Injector


class TestConfiguration:
    def test_unset_attributes_are_absent(self) -> None:
        inj = Injector()

        assert inj.get_expiry() is None
        assert inj.get_path() is None
        assert inj.get_domain() is None
        assert inj.get_secure() is None
        assert inj.get_http_only() is None

    def test_mapping_config(self) -> None:
        inj = Injector({"path": "/app", "secure": "true", "http_only": 1, "expiry": "@5000"})

        assert inj.get_path() == "/app"
        assert inj.get_secure() is True
        assert inj.get_http_only() is True
        assert inj.get_expiry() == 5000

    def test_none_entries_skipped(self) -> None:
        inj = Injector({"expiry": None, "domain": None})

        assert inj.get_expiry() is None
        assert inj.get_domain() is None

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown injector config key"):
            Injector({"expires": 10})

    def test_positional_keys_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            Injector({0: 3600})

    def test_invalid_value_fails_at_construction(self) -> None:
        with pytest.raises(ConfigurationError, match="expiry"):
            Injector({"expiry": "banana"})

    def test_setters_chain(self) -> None:
        inj = Injector().set_path("/a").set_secure(True).set_domain("example.org")

        assert inj.get_path() == "/a"
        assert inj.get_secure() is True
        assert inj.get_domain() == "example.org"


class TestExpiry:
    def test_empty_is_session(self) -> None:
        assert Injector().set_expiry("").get_expiry(True) == 0

    def test_relative_seconds(self) -> None:
        before = int(time.time())
        expiry = Injector().set_expiry(3600).get_expiry(True)
        after = int(time.time())

        assert before + 3600 <= expiry <= after + 3600

    def test_epoch(self) -> None:
        assert Injector().set_expiry("@1000").get_expiry(True) == 1000

    def test_datetime(self) -> None:
        moment = datetime(2031, 3, 4, 5, 6, 7, tzinfo=UTC)
        assert Injector().set_expiry(moment).get_expiry(True) == int(moment.timestamp())

    def test_default_is_thirty_days(self) -> None:
        before = int(time.time())
        expiry = Injector().get_expiry(True)

        assert before + 2_592_000 <= expiry <= int(time.time()) + 2_592_000

    def test_default_from_config(self) -> None:
        inj = Injector(defaults=CookieConfig(expiry_seconds=0))
        assert inj.get_expiry(True) == 0

    @pytest.mark.parametrize("value", ["banana", True, [1]])
    def test_invalid(self, value: Any) -> None:
        with pytest.raises(ConfigurationError, match="expiry"):
            Injector().set_expiry(value)


class TestPathDomainFlags:
    def test_empty_path_is_root(self) -> None:
        assert Injector().set_path("").get_path(True) == "/"
        assert Injector().set_path(None).get_path() == "/"

    def test_invalid_path(self) -> None:
        with pytest.raises(ConfigurationError):
            Injector().set_path(12)

    @pytest.mark.parametrize("value", ["", "   ", None, 5])
    def test_invalid_domain(self, value: Any) -> None:
        with pytest.raises(ConfigurationError, match="domain"):
            Injector().set_domain(value)

    def test_default_domain_uses_dotted_server_name(self) -> None:
        with use_host(BufferedHost(server_name="www.example.com")):
            assert Injector().get_domain(True) == "www.example.com"

    def test_default_domain_empty_for_bare_host(self) -> None:
        with use_host(BufferedHost(server_name="localhost")):
            assert Injector().get_domain(True) == ""

    def test_default_domain_without_host(self) -> None:
        assert Injector().get_domain(True) == ""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("true", True), (0, False), ("", False), (1, True), ("false", False), (None, False)],
    )
    def test_secure(self, value: Any, expected: bool) -> None:
        assert Injector().set_secure(value).get_secure(True) is expected

    def test_http_only(self) -> None:
        assert Injector().set_http_only("true").get_http_only(True) is True
        assert Injector().get_http_only(True) is False

    def test_invalid_flag(self) -> None:
        with pytest.raises(ConfigurationError, match="secure"):
            Injector().set_secure({"on": True})

    def test_default_is_memoized(self) -> None:
        inj = Injector()

        assert inj.get_path() is None
        assert inj.get_path(True) == "/"
        assert inj.get_path() == "/"


class TestInject:
    def test_calls_host_with_coerced_attributes(self, host: BufferedHost) -> None:
        inj = Injector(
            {
                "expiry": "@2000",
                "path": "/app",
                "domain": "example.org",
                "secure": "true",
                "http_only": 1,
            }
        )

        assert inj.inject("theme", "dark") == "dark"

        (directive,) = host.directives
        assert directive.name == "theme"
        assert directive.value == "dark"
        assert directive.expires == 2000
        assert directive.path == "/app"
        assert directive.domain == "example.org"
        assert directive.secure is True
        assert directive.httponly is True

    def test_defaults_applied(self, host: BufferedHost) -> None:
        Injector().inject("a", "b")

        (directive,) = host.directives
        assert directive.path == "/"
        assert directive.domain == ""
        assert directive.secure is False
        assert directive.httponly is False
        assert directive.expires > time.time()

    def test_pending_value_consumed(self, host: BufferedHost) -> None:
        inj = Injector(value="abc")

        assert inj.inject("token") == "abc"
        assert inj.value is None
        assert host.directives[0].value == "abc"

    def test_bool_normalized(self, host: BufferedHost) -> None:
        assert Injector().inject("yes", True) == "1"
        assert Injector().inject("no", False) == "0"
        assert [d.value for d in host.directives] == ["1", "0"]

    def test_number_normalized(self, host: BufferedHost) -> None:
        assert Injector().inject("n", 42) == "42"

    def test_nested_value_rejected(self, host: BufferedHost) -> None:
        with pytest.raises(TypeError, match="Component"):
            Injector().inject("pref", {"a": 1})
        assert host.directives == []

    def test_headers_sent_raises_set_failed(self, host: BufferedHost) -> None:
        host.send_headers()

        with pytest.raises(SetFailed) as exc_info:
            Injector().inject("late", "x")
        assert exc_info.value.name == "late"

    def test_requires_active_host(self) -> None:
        with pytest.raises(LookupError, match="No active cookie host"):
            Injector().inject("a", "b")

    def test_call_alias(self, host: BufferedHost) -> None:
        assert Injector()("a", "b") == "b"
        assert host.directives[0].name == "a"


class TestHooks:
    def test_pre_hook_false_skips_host(self, host: BufferedHost) -> None:
        inj = Injector(pre_hook=lambda name, value, injector: False)

        assert inj.inject("a", "b") is None
        assert len(host.directives) == 0

    def test_pre_hook_sees_raw_value(self, host: BufferedHost) -> None:
        seen: list[tuple[str, Any, Injector]] = []
        inj = Injector(pre_hook=lambda *args: seen.append(args) or True)

        inj.inject("flag", True)

        assert seen == [("flag", True, inj)]

    def test_post_hook_sees_string(self, host: BufferedHost) -> None:
        seen: list[tuple[str, Any, Injector]] = []
        inj = Injector(post_hook=lambda *args: seen.append(args) or True)

        assert inj.inject("flag", True) == "1"
        assert seen == [("flag", "1", inj)]

    def test_post_hook_false_returns_none_after_setting(self, host: BufferedHost) -> None:
        inj = Injector(post_hook=lambda *args: 0)

        assert inj.inject("a", "b") is None
        assert len(host.directives) == 1

    def test_hook_setters(self, host: BufferedHost) -> None:
        inj = Injector()
        pre = lambda *args: True  # noqa: E731
        post = lambda *args: False  # noqa: E731

        assert inj.set_pre_hook(pre) is inj
        assert inj.set_post_hook(post) is inj
        assert inj.pre_hook is pre
        assert inj.post_hook is post


class TestSetterCallback:
    def test_setter_replaces_host(self, host: BufferedHost) -> None:
        calls: list[tuple[str, str]] = []
        inj = Injector(lambda name, value: calls.append((name, value)))

        assert inj.delegates
        assert inj.inject("raw", True) == "1"
        assert calls == [("raw", "1")]
        assert host.directives == []

    def test_setter_false_raises(self) -> None:
        inj = Injector(lambda name, value: False)

        with pytest.raises(SetFailed):
            inj.inject("raw", "x")

    def test_setter_works_without_host(self) -> None:
        assert Injector(lambda name, value: True).inject("raw", "x") == "x"

    def test_attributes_cannot_be_set(self) -> None:
        inj = Injector(lambda name, value: True)

        with pytest.raises(ConfigurationError, match="setter callback"):
            inj.set_expiry(10)

    def test_defaults_not_memoized(self) -> None:
        inj = Injector(lambda name, value: True)

        assert inj.get_path(True) == "/"
        assert inj.get_path() is None


class TestIsInjector:
    def test_is_injector(self) -> None:
        assert Injector.is_injector(Injector())
        assert not Injector.is_injector({"path": "/"})
        assert not Injector.is_injector(None)
