"""
Tests for literal search over XML reports.
"""

import pytest

from admx_export.report_search import read_report, search_reports


@pytest.fixture
def reports(tmp_path):
    root = tmp_path / "reports"
    (root / "nested").mkdir(parents=True)
    (root / "a.xml").write_text("<Report><Policy>Enable the thing</Policy></Report>", encoding="utf-8")
    (root / "nested" / "b.xml").write_text("<Report><Policy>Other</Policy></Report>", encoding="utf-16")
    (root / "c.txt").write_text("Enable the thing", encoding="utf-8")
    return root


def test_read_utf16_report(reports):
    assert "Other" in read_report(reports / "nested" / "b.xml")


def test_search_is_literal_and_case_sensitive(reports):
    assert list(search_reports(reports, "Enable the thing")) == [reports / "a.xml"]
    assert list(search_reports(reports, "enable the thing")) == []


def test_search_ignore_case(reports):
    assert list(search_reports(reports, "OTHER", ignore_case=True)) == [reports / "nested" / "b.xml"]


def test_search_only_xml_files(reports):
    found = list(search_reports(reports, "<Report>"))
    assert found == [reports / "a.xml", reports / "nested" / "b.xml"]


def test_missing_directory(tmp_path):
    with pytest.raises(RuntimeError):
        list(search_reports(tmp_path / "nope", "x"))
