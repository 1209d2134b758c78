"""Fairness evaluation for Fair Minutes allocations."""

from __future__ import annotations

import csv
import io
import statistics
from typing import Dict, List, Optional, Protocol

from ..models import (
    DEFAULT_FORMATION, Allocation, FairnessReport, FormationConfig,
    PlayerMinutesSummary, summarize_minutes,
)
from ..utils.constants import APP_TITLE

FAIRNESS_ORDER = {"under": 0, "ok": 1, "over": 2}


class ExportServiceInterface(Protocol):
    """Interface for report export."""

    def export_to_csv(self, report: FairnessReport, config: FormationConfig) -> str:
        """Export report to CSV format."""
        ...


def spread_warning(spread: int, max_spread: int) -> str:
    return (
        f"Fairness difference of {spread} minutes exceeds the target of "
        f"{max_spread} minutes"
    )


def evaluate_summary(summary: Dict[str, int],
                     config: FormationConfig = DEFAULT_FORMATION) -> FairnessReport:
    """
    Compute spread statistics for a player -> minutes mapping.

    ``spread`` is the range ``max - min``. A warning is emitted only when the
    spread exceeds ``config.fairness.max_spread``.
    """
    minutes = list(summary.values())
    if not minutes:
        return FairnessReport(summary=dict(summary))

    low = min(minutes)
    high = max(minutes)
    spread = high - low
    warnings: List[str] = []
    if spread > config.fairness.max_spread:
        warnings.append(spread_warning(spread, config.fairness.max_spread))

    return FairnessReport(
        summary=dict(summary),
        mean=sum(minutes) / len(minutes),
        min=low,
        max=high,
        spread=spread,
        warnings=warnings,
    )


def evaluate(allocation: Allocation,
             config: FormationConfig = DEFAULT_FORMATION) -> FairnessReport:
    """
    Build a :class:`FairnessReport` for an allocation.

    The summary is derived from the slots. An allocation without quarters is
    treated as a bare summary and its stored summary is used instead.
    """
    if allocation.quarters:
        summary = summarize_minutes(allocation.quarters)
    else:
        summary = dict(allocation.summary)
    return evaluate_summary(summary, config)


def with_fairness(allocation: Allocation,
                  config: FormationConfig = DEFAULT_FORMATION) -> Allocation:
    """Return a copy with summary and warnings recomputed from the slots."""
    report = evaluate(allocation, config)
    return Allocation(
        quarters=allocation.quarters,
        summary=report.summary,
        warnings=tuple(report.warnings),
    )


def classify_fairness(delta: float, max_spread: int) -> str:
    """Label a player's distance from the mean as under, ok or over."""
    threshold = max_spread / 2
    if delta < -threshold:
        return "under"
    if delta > threshold:
        return "over"
    return "ok"


def player_summaries(report: FairnessReport,
                     config: FormationConfig = DEFAULT_FORMATION) -> List[PlayerMinutesSummary]:
    """Per-player rows sorted by fairness bucket, then minutes, then name."""
    rows = []
    for name, minutes in report.summary.items():
        delta = minutes - report.mean
        rows.append(
            PlayerMinutesSummary(
                name=name,
                minutes=minutes,
                delta_from_mean=delta,
                fairness=classify_fairness(delta, config.fairness.max_spread),
            )
        )
    rows.sort(key=lambda row: (FAIRNESS_ORDER.get(row.fairness, 1), row.minutes, row.name))
    return rows


class FairnessReportExporter:
    """CSV export of a fairness report."""

    def export_to_csv(self, report: FairnessReport,
                      config: FormationConfig = DEFAULT_FORMATION) -> str:
        """
        Return a CSV document describing the minutes distribution.

        Summary rows come first, followed by a table of per-player minutes.
        """
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")

        minutes = list(report.summary.values())
        median = statistics.median(minutes) if minutes else 0
        writer.writerow([f"{APP_TITLE} Report"])
        writer.writerow(["Players", len(report.summary)])
        writer.writerow(["Average Minutes", round(report.mean, 2)])
        writer.writerow(["Median Minutes", median])
        writer.writerow(["Minimum Minutes", report.min])
        writer.writerow(["Maximum Minutes", report.max])
        writer.writerow(["Spread", report.spread])
        writer.writerow(["Target Spread", config.fairness.max_spread])
        for warning in report.warnings:
            writer.writerow(["Warning", warning])
        writer.writerow([])

        writer.writerow(["Name", "Minutes", "Delta From Mean", "Fairness"])
        for row in player_summaries(report, config):
            writer.writerow([row.name, row.minutes, f"{row.delta_from_mean:+.1f}", row.fairness])

        csv_text = buffer.getvalue()
        buffer.close()
        return csv_text


class FairnessService:
    """
    Evaluates allocations against one formation config.

    Uses an injected exporter so callers can swap the CSV layout.
    """

    def __init__(self, config: FormationConfig = DEFAULT_FORMATION,
                 export_service: Optional[ExportServiceInterface] = None) -> None:
        self.config = config
        self.export_service = export_service or FairnessReportExporter()

    def evaluate(self, allocation: Allocation) -> FairnessReport:
        return evaluate(allocation, self.config)

    def export_report_csv(self, allocation: Allocation) -> str:
        report = self.evaluate(allocation)
        return self.export_service.export_to_csv(report, self.config)
