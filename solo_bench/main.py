from __future__ import annotations

import argparse
import logging
import os
import signal
import sys
import threading
from pathlib import Path

from .config import (
    BenchmarkConfig,
    ConfigurationError,
    ConsensusConfig,
    ExecutionConfig,
    InfrastructureConfig,
    parse_duration,
)
from .loader import load_enabled_metrics
from .metric import GaugeExporter
from .metric.logger import close_metric_log, configure_metric_log
from .report import Report
from .service import BenchmarkService

LOGGER = logging.getLogger("solo_bench")


def _env_flag(name: str, default: bool = True) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run benchmarks of a solo staking node")
    parser.add_argument(
        "--duration",
        default=os.environ.get("BENCHMARK_DURATION", "15m"),
        help="How long to gather metrics, e.g. '5m' or '1h30m'; 0 runs until interrupted",
    )
    parser.add_argument(
        "--consensus-addr",
        default=os.environ.get("BENCHMARK_CONSENSUS_ADDR", ""),
        help="Consensus client (beacon node API) address with scheme and port, e.g. http://lighthouse:5052",
    )
    parser.add_argument(
        "--execution-addr",
        default=os.environ.get("BENCHMARK_EXECUTION_ADDR", ""),
        help="Execution client address with scheme and port, e.g. http://geth:8545",
    )
    parser.add_argument(
        "--network",
        default=os.environ.get("BENCHMARK_NETWORK", ""),
        help="Ethereum network, either 'mainnet' or 'holesky'",
    )

    toggles = [
        ("consensus-metric-client", "consensus client metric"),
        ("consensus-metric-latency", "consensus client latency metric"),
        ("consensus-metric-peers", "consensus client peers metric"),
        ("execution-metric-peers", "execution client peers metric"),
        ("execution-metric-latency", "execution client latency metric"),
        ("infra-metric-cpu", "infrastructure CPU metric"),
        ("infra-metric-memory", "infrastructure memory metric"),
    ]
    for flag, description in toggles:
        env_name = "BENCHMARK_" + flag.upper().replace("-", "_") + "_ENABLED"
        parser.add_argument(
            f"--{flag}",
            action=argparse.BooleanOptionalAction,
            default=_env_flag(env_name),
            help=f"Enable {description}",
        )

    parser.add_argument(
        "--output-dir",
        default=os.environ.get("BENCHMARK_OUTPUT_DIR"),
        help="Directory to store report artefacts (CSV, chart and manifest)",
    )
    parser.add_argument(
        "--metric-log-path",
        default=os.environ.get("BENCHMARK_METRIC_LOG_PATH"),
        help="Optional file receiving every metric sample and probe error",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only print the metrics that would be collected",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("BENCHMARK_LOG_LEVEL", "INFO"),
        help="Logging level",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> BenchmarkConfig:
    return BenchmarkConfig(
        consensus=ConsensusConfig(
            address=args.consensus_addr,
            client=args.consensus_metric_client,
            latency=args.consensus_metric_latency,
            peers=args.consensus_metric_peers,
        ),
        execution=ExecutionConfig(
            address=args.execution_addr,
            peers=args.execution_metric_peers,
            latency=args.execution_metric_latency,
        ),
        infrastructure=InfrastructureConfig(
            cpu=args.infra_metric_cpu,
            memory=args.infra_metric_memory,
        ),
        network=args.network,
        duration_seconds=parse_duration(args.duration),
        output_dir=Path(args.output_dir) if args.output_dir else None,
        metric_log_path=Path(args.metric_log_path) if args.metric_log_path else None,
    )


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def install_signal_handlers(stop_event: threading.Event) -> None:
    def _stop(signum, _frame) -> None:
        LOGGER.warning("received signal %s, terminating the benchmark", signum)
        stop_event.set()

    signal.signal(signal.SIGINT, _stop)
    signal.signal(signal.SIGTERM, _stop)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)

    try:
        config = build_config(args).validate()
    except ConfigurationError:
        LOGGER.exception("invalid benchmark configuration")
        return 1

    exporter = GaugeExporter()
    metrics = load_enabled_metrics(config, exporter)

    LOGGER.info("Network: %s", config.network)
    LOGGER.info("Duration: %s", f"{config.duration_seconds:.0f}s" if config.duration_seconds else "until interrupted")
    if config.output_dir is not None:
        LOGGER.info("Benchmark output directory: %s", config.output_dir)

    if args.dry_run:
        _print_plan(metrics)
        return 0

    if config.metric_log_path is not None:
        configure_metric_log(config.metric_log_path)

    stop_event = threading.Event()
    install_signal_handlers(stop_event)

    service = BenchmarkService(
        metrics,
        Report(output_dir=config.output_dir, exporter=exporter),
    )
    try:
        service.start(stop_event, config.duration_seconds)
    finally:
        close_metric_log()
    return 0


def _print_plan(metrics) -> None:
    for group, collectors in metrics.items():
        print(f"Group: {group.value}")
        for collector in collectors:
            print(f"  - {collector.name}: every {collector.interval:g}s")


if __name__ == "__main__":
    sys.exit(main())
