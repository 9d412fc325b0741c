from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TextIO

import pandas as pd

from ..metric import GaugeExporter, HealthStatus, Record
from .charts import render_health_chart

LOGGER = logging.getLogger("solo_bench.report")

COLUMNS = ["Group", "Metric", "Value", "Health", "Severity"]

_HEALTH_LABELS = {
    HealthStatus.HEALTHY: "Healthy ✅",
    HealthStatus.UNHEALTHY: "Unhealthy ❌",
}


class Report:
    """Collects one record per metric and renders them once the run is over."""

    def __init__(
        self,
        stream: TextIO | None = None,
        output_dir: Path | None = None,
        exporter: GaugeExporter | None = None,
    ) -> None:
        self._stream = stream
        self._output_dir = output_dir
        self._exporter = exporter
        self._records: list[Record] = []

    @property
    def records(self) -> list[Record]:
        return list(self._records)

    def add_record(self, record: Record) -> None:
        self._records.append(record)

    def build_dataframe(self) -> pd.DataFrame:
        if not self._records:
            return pd.DataFrame(columns=COLUMNS + ["SeverityLevels"])
        return pd.DataFrame(
            [
                {
                    "Group": record.group.value,
                    "Metric": record.metric_name,
                    "Value": record.value,
                    "Health": _HEALTH_LABELS[record.health],
                    "Severity": record.severity_label(),
                    "SeverityLevels": {name: level.value for name, level in record.severity.items()},
                }
                for record in self._records
            ]
        )

    def render(self) -> None:
        df = self.build_dataframe()
        stream = self._stream or sys.stdout
        try:
            if df.empty:
                stream.write("No metrics were enabled.\n")
            else:
                stream.write(df[COLUMNS].to_string(index=False, justify="left"))
                stream.write("\n")
            stream.flush()
        except (OSError, ValueError):
            LOGGER.exception("failed to print benchmark report")

        if self._output_dir is not None:
            self._write_artefacts(df, self._output_dir)

    def _write_artefacts(self, df: pd.DataFrame, output_dir: Path) -> None:
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            csv_path = output_dir / "benchmark_report.csv"
            df[COLUMNS].to_csv(csv_path, index=False)
            LOGGER.info("Saved report to %s (%d rows)", csv_path, len(df))
        except Exception:  # noqa: BLE001
            LOGGER.exception("failed to write report CSV")

        chart_path = None
        try:
            chart_path = render_health_chart(df, output_dir / "health_overview.png")
        except Exception:  # noqa: BLE001
            LOGGER.exception("failed to render health chart")

        manifest = {
            "records": [
                {
                    "group": record.group.value,
                    "metric": record.metric_name,
                    "value": record.value,
                    "health": record.health.value,
                    "severity": {name: level.value for name, level in record.severity.items()},
                }
                for record in self._records
            ],
            "chart": str(chart_path) if chart_path else None,
            "gauges": self._exporter.snapshot() if self._exporter is not None else [],
        }
        manifest_path = output_dir / "benchmark_manifest.json"
        try:
            with open(manifest_path, "w", encoding="utf-8") as f:
                json.dump(manifest, f, indent=2)
            LOGGER.info("Benchmark manifest written to %s", manifest_path)
        except Exception:  # noqa: BLE001
            LOGGER.exception("failed to write benchmark manifest")
