"""End-of-run report: console table plus optional CSV, chart and manifest."""

from .report import Report

__all__ = ["Report"]
