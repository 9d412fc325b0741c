from __future__ import annotations

import logging
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns

LOGGER = logging.getLogger("solo_bench.report.charts")

sns.set_style("whitegrid")
plt.rcParams["figure.dpi"] = 100
plt.rcParams["savefig.dpi"] = 300
plt.rcParams["font.size"] = 10
plt.rcParams["axes.titlesize"] = 13

# 0 = healthy / no severity, then Low, Medium, High
SEVERITY_SCORES = {"None": 0, "Low": 1, "Medium": 2, "High": 3}
SEVERITY_COLORS = ["#6A994E", "#F2CC8F", "#F18F01", "#C73E1D"]


def severity_matrix(df: pd.DataFrame) -> pd.DataFrame:
    """Worst severity score per (group, metric) row, one column per measurement."""
    rows: dict[str, dict[str, int]] = {}
    for _, row in df.iterrows():
        label = f"{row['Group']} / {row['Metric']}"
        scores = rows.setdefault(label, {})
        severity = row["SeverityLevels"] or {}
        if not severity:
            scores.setdefault("overall", SEVERITY_SCORES["None"])
        for measurement, level in severity.items():
            scores[measurement] = max(scores.get(measurement, 0), SEVERITY_SCORES[level])
    matrix = pd.DataFrame.from_dict(rows, orient="index").fillna(0).astype(int)
    return matrix.reindex(sorted(matrix.columns), axis=1)


def render_health_chart(df: pd.DataFrame, chart_path: Path) -> Path | None:
    """Heatmap of the severity recorded for every metric and measurement."""
    if df.empty:
        LOGGER.warning("No records available for health chart")
        return None

    matrix = severity_matrix(df)
    fig, ax = plt.subplots(figsize=(max(6, 1.6 * len(matrix.columns) + 4), 0.6 * len(matrix) + 2))
    sns.heatmap(
        matrix,
        annot=np.vectorize(_severity_name)(matrix.to_numpy()),
        fmt="",
        cmap=SEVERITY_COLORS,
        vmin=0,
        vmax=len(SEVERITY_COLORS) - 1,
        cbar=False,
        linewidths=1,
        linecolor="white",
        ax=ax,
    )
    ax.set_xlabel("Measurement", fontweight="semibold")
    ax.set_ylabel("")
    ax.set_title("Node Health Overview", fontweight="bold", pad=15)

    plt.tight_layout()
    fig.savefig(chart_path, bbox_inches="tight", facecolor="white")
    plt.close(fig)
    LOGGER.info("Rendering chart %s", chart_path)
    return chart_path


def _severity_name(score: int) -> str:
    for name, value in SEVERITY_SCORES.items():
        if value == score:
            return "" if name == "None" else name
    return ""
