"""Tests for configuration."""

from pathlib import Path

import pytest

from prayer_circle.config import AppConfig, parse_store_path


class TestAppConfig:
    """Environment configuration tests."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test defaults without environment variables."""
        for name in (
            "PRAYER_CIRCLE_STORE_PATH",
            "PRAYER_CIRCLE_REQUIRE_OWNER_FOR_UPDATE",
            "PRAYER_CIRCLE_REQUIRE_OWNER_FOR_DELETE",
            "PRAYER_CIRCLE_RECOVER_ON_STARTUP",
            "PRAYER_CIRCLE_PORT",
        ):
            monkeypatch.delenv(name, raising=False)

        config = AppConfig.from_env()
        assert config.port == 8080
        assert config.store_path is not None
        assert config.store_path.name == "prayers.json"
        assert config.require_owner_for_update is False
        assert config.require_owner_for_delete is False
        assert config.recover_on_startup is True

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test environment overrides."""
        monkeypatch.setenv("PRAYER_CIRCLE_PORT", "9000")
        monkeypatch.setenv("PRAYER_CIRCLE_STORE_PATH", str(tmp_path / "p.json"))
        monkeypatch.setenv("PRAYER_CIRCLE_REQUIRE_OWNER_FOR_DELETE", "true")
        monkeypatch.setenv("PRAYER_CIRCLE_RECOVER_ON_STARTUP", "0")

        config = AppConfig.from_env()
        assert config.port == 9000
        assert config.store_path == tmp_path / "p.json"
        assert config.require_owner_for_delete is True
        assert config.recover_on_startup is False

    @pytest.mark.parametrize("value", ["memory", "MEMORY", "", "  "])
    def test_memory_store(self, value: str) -> None:
        """Test in-memory store values."""
        assert parse_store_path(value) is None
