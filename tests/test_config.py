"""Tests for configuration models and loading."""

import pytest
import yaml
from pydantic import ValidationError

from loopwork.core.config import (
    Config,
    HeartbeatConfig,
    ProxyConfig,
    RunInterval,
    ScheduleConfig,
    expand_env_vars,
    load_config,
)


class TestScheduleConfig:
    """Test ScheduleConfig defaults and validation."""

    def test_default_values(self) -> None:
        config = ScheduleConfig()

        assert config.interval is RunInterval.SECOND
        assert config.cycle_padding_micros == 100_000

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("minute", RunInterval.MINUTE),
            ("Hour", RunInterval.HOUR),
            ("everyTick", RunInterval.EVERY_TICK),
            ("every_tick", RunInterval.EVERY_TICK),
            ("every-tick", RunInterval.EVERY_TICK),
        ],
    )
    def test_interval_spellings(self, value, expected) -> None:
        assert ScheduleConfig(interval=value).interval is expected

    def test_unknown_interval_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ScheduleConfig(interval="fortnight")

    def test_zero_padding_rejected(self) -> None:
        with pytest.raises(ValidationError, match="cycle_padding_micros must be greater than 0"):
            ScheduleConfig(interval="second", cycle_padding_micros=0)

    def test_zero_padding_allowed_for_every_tick(self) -> None:
        config = ScheduleConfig(interval="every_tick", cycle_padding_micros=0)

        assert config.cycle_padding_micros == 0

    def test_negative_padding_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ScheduleConfig(cycle_padding_micros=-1)

    def test_immutable(self) -> None:
        config = ScheduleConfig()

        with pytest.raises(ValidationError):
            config.interval = RunInterval.DAY


class TestProxyConfig:
    """Test proxy settings and environment fallbacks."""

    def test_defaults(self) -> None:
        config = ProxyConfig()

        assert config.host == "engage-delegation-proxy"
        assert config.port == 5557
        assert config.persistent_id == "delegation_proxy"
        assert config.dsn == "tcp://engage-delegation-proxy:5557"

    def test_from_env(self, monkeypatch) -> None:
        monkeypatch.setenv("DELEGATION_PROXY_HOST", "proxy.internal")
        monkeypatch.setenv("DELEGATION_PROXY_PORT", "6001")
        monkeypatch.setenv("DELEGATION_PROXY_PERSISTENT_ID", "billing_pub")

        config = ProxyConfig.from_env()

        assert config.dsn == "tcp://proxy.internal:6001"
        assert config.persistent_id == "billing_pub"

    def test_from_env_overrides_win(self, monkeypatch) -> None:
        monkeypatch.setenv("DELEGATION_PROXY_HOST", "proxy.internal")

        config = ProxyConfig.from_env(host="other")

        assert config.host == "other"

    def test_invalid_port(self) -> None:
        with pytest.raises(ValidationError):
            ProxyConfig(port=70000)


class TestConfig:
    def test_defaults(self, monkeypatch) -> None:
        monkeypatch.delenv("DELEGATION_PROXY_HOST", raising=False)

        config = Config()

        assert config.service_name == "loopwork"
        assert config.timezone == "UTC"
        assert config.heartbeat == HeartbeatConfig()
        assert config.heartbeat.enabled is False
        assert config.proxy.host == "engage-delegation-proxy"

    def test_invalid_timezone(self) -> None:
        with pytest.raises(ValidationError, match="Unknown timezone"):
            Config(timezone="Mars/Olympus_Mons")


class TestLoadConfig:
    """Test YAML loading with environment expansion."""

    def test_no_path_returns_defaults(self) -> None:
        assert load_config(None).schedule == ScheduleConfig()

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_config(tmp_path / "missing.yaml")

    def test_load_full_file(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv("PROXY_HOST", "proxy.example")
        monkeypatch.setenv("DELEGATION_PROXY_PORT", "7000")
        config_file = tmp_path / "loopwork.yaml"
        config_file.write_text(
            yaml.safe_dump(
                {
                    "service_name": "billing",
                    "timezone": "Europe/Copenhagen",
                    "schedule": {"interval": "minute", "cycle_padding_micros": 50000},
                    "heartbeat": {"enabled": True},
                    "proxy": {"host": "${PROXY_HOST}"},
                    "logging": {"level": "DEBUG", "to_file": False},
                }
            )
        )

        config = load_config(config_file)

        assert config.service_name == "billing"
        assert config.schedule == ScheduleConfig(interval="minute", cycle_padding_micros=50000)
        assert config.heartbeat.enabled is True
        assert config.heartbeat.channel == "magnet_activate"
        assert config.proxy.dsn == "tcp://proxy.example:7000"
        assert config.logging.to_file is False

    def test_unresolved_variable(self, tmp_path, monkeypatch) -> None:
        monkeypatch.delenv("NOT_SET_ANYWHERE", raising=False)
        config_file = tmp_path / "loopwork.yaml"
        config_file.write_text("proxy:\n  host: ${NOT_SET_ANYWHERE}\n")

        with pytest.raises(ValueError, match=r"\$\{NOT_SET_ANYWHERE\}"):
            load_config(config_file)

    def test_empty_file(self, tmp_path) -> None:
        config_file = tmp_path / "loopwork.yaml"
        config_file.write_text("")

        assert load_config(config_file).service_name == "loopwork"

    def test_expand_env_vars(self, monkeypatch) -> None:
        monkeypatch.setenv("PROXY_HOST", "proxy.local")

        assert expand_env_vars("tcp://${PROXY_HOST}:${MISSING_VAR_X}") == "tcp://proxy.local:${MISSING_VAR_X}"
