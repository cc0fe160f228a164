"""Tests for cookietree.errors — exception hierarchy and messages."""

from cookietree.errors import ConfigurationError, CookieTreeError, SetFailed


class TestHierarchy:
    def test_configuration_error_is_cookietree_error(self) -> None:
        assert issubclass(ConfigurationError, CookieTreeError)

    def test_set_failed_is_cookietree_error(self) -> None:
        assert issubclass(SetFailed, CookieTreeError)


class TestSetFailed:
    def test_carries_name(self) -> None:
        err = SetFailed("pref[a]")
        assert err.name == "pref[a]"
        assert str(err) == "Cookie insertion failed: 'pref[a]'"

    def test_custom_detail(self) -> None:
        err = SetFailed("theme", "Cookie removal failed")
        assert err.detail == "Cookie removal failed"
        assert "removal" in str(err)
