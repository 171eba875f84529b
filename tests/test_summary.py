import re
from dataclasses import dataclass
from datetime import datetime

import pytest

from csreports.summary import CallSummaryReporter


@dataclass
class _Call:
    id: str
    title: str
    scheduled_start: datetime
    actual_start: datetime | None = None


def _calls():
    return [
        _Call("c1", "Zeta - Sync", datetime(2024, 1, 10, 9)),
        _Call("c2", "Acme + Team - Review", datetime(2024, 1, 11, 9)),
        _Call("c3", "Acme - Kickoff", datetime(2024, 1, 12, 9)),
    ]


def test_overview_counts_calls():
    report = CallSummaryReporter().generate_summary_report(_calls(), None, None)
    assert "- **Total Calls:** 3\n" in report
    assert report.startswith("# Team Calls Summary - ")
    assert "- **Date Range:** Last 7 days" in report


def test_header_date_matches_extraction_date():
    report = CallSummaryReporter().generate_summary_report([], None, None)
    header = re.match(r"# Team Calls Summary - (\d{4}-\d{2}-\d{2})\n", report)
    assert header
    assert f"- **Extraction Date:** {header.group(1)}" in report


def test_groups_by_customer_sorted():
    report = CallSummaryReporter().generate_summary_report(_calls(), None, None)
    sections = re.findall(r"^### (.+) \((\d+) calls\)$", report, re.MULTILINE)
    assert sections == [("Acme", "2"), ("Zeta", "1")]


def test_resolved_customer_name_takes_all_calls():
    report = CallSummaryReporter().generate_summary_report(_calls(), None, "Initech")
    sections = re.findall(r"^### (.+) \((\d+) calls\)$", report, re.MULTILINE)
    assert sections == [("Initech", "3")]


def test_actual_start_preferred_over_scheduled():
    call = _Call("c9", "Acme - Demo", datetime(2024, 3, 1, 9), datetime(2024, 3, 5, 9))
    report = CallSummaryReporter().generate_summary_report([call], None, None)
    assert "03/05/2024" in report
    assert "03/01/2024" not in report


def test_each_call_listed_with_id():
    report = CallSummaryReporter().generate_summary_report(_calls(), None, None)
    for call in _calls():
        assert f"- **{call.title}** - " in report
        assert f"(ID: `{call.id})" in report


def test_no_calls_no_sections():
    report = CallSummaryReporter().generate_summary_report([], None, None)
    assert "###" not in report
    assert report.endswith("## Calls by Customer\n\n")


def test_writes_to_output_path(tmp_path):
    target = tmp_path / "summary.md"
    report = CallSummaryReporter().generate_summary_report(_calls(), target, None)
    assert target.read_text(encoding="utf-8") == report


def test_missing_directory_raises(tmp_path):
    target = tmp_path / "missing" / "summary.md"
    with pytest.raises(FileNotFoundError):
        CallSummaryReporter().generate_summary_report(_calls(), target, None)