"""Tests for configuration, metric loading and the CLI entry point."""

import pytest

from solo_bench.config import (
    BenchmarkConfig,
    ConfigurationError,
    ConsensusConfig,
    ExecutionConfig,
    InfrastructureConfig,
    host_port,
    parse_duration,
    sanitize_url,
)
from solo_bench.loader import load_enabled_metrics
from solo_bench.main import build_config, main, parse_args
from solo_bench.metric import Group


def _config(**overrides):
    values = dict(
        consensus=ConsensusConfig(address="http://lighthouse:5052/"),
        execution=ExecutionConfig(address="http://geth:8545"),
        network="Mainnet",
    )
    values.update(overrides)
    return BenchmarkConfig(**values)


class TestParseDuration:
    @pytest.mark.parametrize(
        "text, seconds",
        [("90", 90.0), ("30s", 30.0), ("5m", 300.0), ("1h30m", 5400.0), ("250ms", 0.25), ("0", 0.0)],
    )
    def test_valid(self, text, seconds):
        assert parse_duration(text) == pytest.approx(seconds)

    @pytest.mark.parametrize("text", ["", "fast", "5 minutes", "-3", "10x"])
    def test_invalid(self, text):
        with pytest.raises(ConfigurationError):
            parse_duration(text)


class TestValidate:
    def test_sanitizes(self):
        config = _config().validate()

        assert config.consensus.address == "http://lighthouse:5052"
        assert config.network == "mainnet"

    def test_malformed_address(self):
        with pytest.raises(ConfigurationError, match="consensus"):
            _config(consensus=ConsensusConfig(address="lighthouse:5052")).validate()

    def test_address_not_needed_when_disabled(self):
        config = _config(
            execution=ExecutionConfig(address="", peers=False, latency=False)
        ).validate()

        assert config.execution.address == ""

    def test_unknown_network(self):
        with pytest.raises(ConfigurationError, match="network"):
            _config(network="sepolia").validate()

    def test_negative_duration(self):
        with pytest.raises(ConfigurationError):
            _config(duration_seconds=-1).validate()

    def test_invalid_port(self):
        with pytest.raises(ConfigurationError):
            sanitize_url("http://geth:notaport")

    def test_host_port(self):
        assert host_port("http://geth:8545") == "geth:8545"
        assert host_port("https://beacon.example") == "beacon.example:443"
        assert host_port("http://[::1]:5052") == "[::1]:5052"


class TestLoadEnabledMetrics:
    def test_all_enabled(self):
        metrics = load_enabled_metrics(_config().validate())

        assert [m.name for m in metrics[Group.CONSENSUS]] == ["Client", "Latency", "Peers"]
        assert [m.name for m in metrics[Group.EXECUTION]] == ["Peers", "Latency"]
        assert [m.name for m in metrics[Group.INFRASTRUCTURE]] == ["CPU", "Memory"]

    def test_toggles(self):
        config = _config(
            consensus=ConsensusConfig(address="", client=False, latency=False, peers=False),
            infrastructure=InfrastructureConfig(cpu=False, memory=True),
        ).validate()

        metrics = load_enabled_metrics(config)

        assert Group.CONSENSUS not in metrics
        assert [m.name for m in metrics[Group.INFRASTRUCTURE]] == ["Memory"]

    def test_probe_timeouts_fit_interval(self):
        for collectors in load_enabled_metrics(_config().validate()).values():
            for collector in collectors:
                assert collector.probe_timeout < collector.interval


class TestMain:
    def test_parse_args_toggles(self):
        args = parse_args(["--no-infra-metric-cpu", "--duration", "2m", "--network", "holesky"])
        config = build_config(args)

        assert config.infrastructure.cpu is False
        assert config.infrastructure.memory is True
        assert config.duration_seconds == 120.0
        assert config.network == "holesky"

    def test_invalid_config_exits_before_running(self, caplog):
        assert main(["--consensus-addr", "not a url", "--network", "mainnet"]) == 1
        assert "invalid benchmark configuration" in caplog.text

    def test_dry_run(self, capsys):
        code = main(
            [
                "--consensus-addr", "http://lighthouse:5052",
                "--execution-addr", "http://geth:8545",
                "--network", "mainnet",
                "--dry-run",
            ]
        )

        assert code == 0
        out = capsys.readouterr().out
        assert "Group: Consensus" in out
        assert "Peers: every 10s" in out
