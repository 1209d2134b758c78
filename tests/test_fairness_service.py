"""Tests for fairness evaluation and report export."""

import csv
import io
import unittest

import pytest

from fairminutes.models import Allocation, FairnessRules, FormationConfig
from fairminutes.services import (
    FairnessReportExporter,
    FairnessService,
    evaluate,
    evaluate_summary,
    generate,
    with_fairness,
)
from fairminutes.services.fairness_service import classify_fairness, player_summaries

UNEVEN_SUMMARY = {"Alex": 30, "Blake": 25, "Casey": 20, "Drew": 15}


def test_evaluate_bare_summary_reports_spread():
    report = evaluate(Allocation(summary=UNEVEN_SUMMARY))

    assert report.summary == UNEVEN_SUMMARY
    assert report.mean == pytest.approx(22.5)
    assert report.min == 15
    assert report.max == 30
    assert report.spread == 15
    assert report.variance == 15
    assert len(report.warnings) == 1
    assert "15" in report.warnings[0]
    assert "5" in report.warnings[0]


def test_spread_at_target_has_no_warning():
    report = evaluate_summary({"A": 25, "B": 20})

    assert report.spread == 5
    assert report.warnings == []


def test_tolerance_comes_from_config():
    config = FormationConfig(fairness=FairnessRules(max_spread=20))
    report = evaluate_summary(UNEVEN_SUMMARY, config)

    assert report.spread == 15
    assert report.warnings == []


def test_empty_summary_reports_zeros():
    report = evaluate(Allocation())

    assert report.summary == {}
    assert (report.mean, report.min, report.max, report.spread) == (0, 0, 0, 0)
    assert report.warnings == []


def test_summary_is_derived_from_slots():
    allocation = generate(["A", "B", "C", "D", "E", "F"])
    stale = Allocation(quarters=allocation.quarters, summary={"A": 999})

    assert evaluate(stale).summary == allocation.summary


def test_evaluate_is_idempotent():
    allocation = generate(["A", "B", "C", "D", "E", "F", "G", "H", "I", "J", "K"])
    refreshed = with_fairness(allocation)

    assert refreshed == allocation
    assert evaluate(refreshed) == evaluate(allocation)


def test_report_to_dict():
    data = evaluate_summary(UNEVEN_SUMMARY).to_dict()

    assert data["spread"] == 15
    assert data["mean"] == 22.5
    assert data["summary"] == UNEVEN_SUMMARY
    assert isinstance(data["warnings"], list)


def test_classify_fairness_threshold_is_half_the_tolerance():
    assert classify_fairness(-3, 5) == "under"
    assert classify_fairness(-2.5, 5) == "ok"
    assert classify_fairness(2.5, 5) == "ok"
    assert classify_fairness(3, 5) == "over"


def test_player_summaries_sorted_by_fairness_then_minutes():
    report = evaluate_summary(UNEVEN_SUMMARY)
    rows = player_summaries(report)

    assert [row.name for row in rows] == ["Drew", "Casey", "Blake", "Alex"]
    assert [row.fairness for row in rows] == ["under", "ok", "ok", "over"]
    assert rows[-1].delta_from_mean == pytest.approx(7.5)


class TestFairnessExport(unittest.TestCase):
    """Test CSV export of fairness reports."""

    def setUp(self):
        """Set up test fixtures."""
        self.service = FairnessService()
        self.allocation = Allocation(summary=UNEVEN_SUMMARY)

    def _rows(self):
        csv_content = self.service.export_report_csv(self.allocation)
        return list(csv.reader(io.StringIO(csv_content)))

    def test_csv_export_summary_rows(self):
        """Test the leading statistics rows."""
        rows = self._rows()

        self.assertEqual(rows[0], ["Fair Minutes Report"])
        self.assertIn(["Players", "4"], rows)
        self.assertIn(["Average Minutes", "22.5"], rows)
        self.assertIn(["Median Minutes", "22.5"], rows)
        self.assertIn(["Spread", "15"], rows)
        self.assertIn(["Target Spread", "5"], rows)
        self.assertTrue(any(row and row[0] == "Warning" for row in rows))

    def test_csv_export_player_table(self):
        """Test the per-player table follows the header row."""
        rows = self._rows()
        header_index = rows.index(["Name", "Minutes", "Delta From Mean", "Fairness"])
        players = rows[header_index + 1:]

        self.assertEqual(len(players), 4)
        self.assertEqual(players[0], ["Drew", "15", "-7.5", "under"])
        self.assertEqual(players[-1], ["Alex", "30", "+7.5", "over"])

    def test_custom_exporter_is_used(self):
        """Test an injected exporter receives the report and config."""
        calls = []

        class RecordingExporter:
            def export_to_csv(self, report, config):
                calls.append((report, config))
                return "custom"

        config = FormationConfig(fairness=FairnessRules(max_spread=3))
        service = FairnessService(config, RecordingExporter())

        self.assertEqual(service.export_report_csv(self.allocation), "custom")
        self.assertEqual(calls[0][0].spread, 15)
        self.assertIs(calls[0][1], config)

    def test_exporter_handles_empty_report(self):
        """Test an empty allocation still produces a document."""
        content = FairnessReportExporter().export_to_csv(evaluate(Allocation()))

        self.assertIn("Fair Minutes Report", content)
        self.assertIn("Name,Minutes,Delta From Mean,Fairness", content)


if __name__ == "__main__":
    unittest.main()
