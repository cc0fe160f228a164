"""Tests for cookietree.config — CookieConfig frozen dataclass."""

import pytest

from cookietree.config import DEFAULT_CONFIG, ONE_YEAR, THIRTY_DAYS, CookieConfig


class TestCookieConfig:
    def test_defaults(self) -> None:
        cfg = CookieConfig()

        assert cfg.expiry_seconds == 2_592_000 == THIRTY_DAYS
        assert cfg.path == "/"
        assert cfg.secure is False
        assert cfg.http_only is False
        assert cfg.removal_age == ONE_YEAR

    def test_override(self) -> None:
        cfg = CookieConfig(expiry_seconds=60, secure=True)

        assert cfg.expiry_seconds == 60
        assert cfg.secure is True

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            DEFAULT_CONFIG.path = "/app"  # type: ignore[misc]
