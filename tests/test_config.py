import pytest
from pydantic import ValidationError

from archiplan.execution.config import ExecutorConfig


class TestExecutorConfig:
    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        monkeypatch.delenv("ARCHIPLAN_STOP_ON_ERROR", raising=False)
        monkeypatch.delenv("ARCHIPLAN_AUTO_CONNECT", raising=False)

    def test_defaults(self):
        config = ExecutorConfig.from_env()
        assert config == ExecutorConfig()
        assert config.stop_on_error and config.auto_connect
        assert (config.default_width, config.default_height) == (120, 55)

    @pytest.mark.parametrize("raw, expected", [("0", False), ("no", False), ("ON", True), (" true ", True)])
    def test_env_flags(self, monkeypatch, raw, expected):
        monkeypatch.setenv("ARCHIPLAN_AUTO_CONNECT", raw)
        assert ExecutorConfig.from_env().auto_connect is expected

    def test_blank_env_uses_default(self, monkeypatch):
        monkeypatch.setenv("ARCHIPLAN_STOP_ON_ERROR", "  ")
        assert ExecutorConfig.from_env().stop_on_error is True

    def test_overrides_win(self, monkeypatch):
        monkeypatch.setenv("ARCHIPLAN_STOP_ON_ERROR", "false")
        assert ExecutorConfig.from_env(stop_on_error=True).stop_on_error is True

    def test_invalid_flag(self, monkeypatch):
        monkeypatch.setenv("ARCHIPLAN_STOP_ON_ERROR", "maybe")
        with pytest.raises(ValueError, match="ARCHIPLAN_STOP_ON_ERROR"):
            ExecutorConfig.from_env()

    def test_frozen_and_strict(self):
        config = ExecutorConfig()
        with pytest.raises(ValidationError):
            config.stop_on_error = False
        with pytest.raises(ValidationError):
            ExecutorConfig(colour="blue")
        with pytest.raises(ValidationError):
            ExecutorConfig(grid_columns=0)
