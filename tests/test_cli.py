"""
CLI tests via click's CliRunner; network access is patched out.
"""

import json
from unittest.mock import patch

from click.testing import CliRunner
from bpsummary.__main__ import main, preprocess
from bpsummary.loader import load_csv_as_table


def test_summarize_prints_summary(fpath_sample_csv):
    runner = CliRunner()
    result = runner.invoke(main, ["summarize", "--csv-path", fpath_sample_csv, "--window", "3"])
    assert result.exit_code == 0, result.output
    assert "Records: 6 (skipped 3 of 9 rows)" in result.output
    assert "High: 1  Medium: 2  Night: 1  Night (classified): 2" in result.output
    assert "Moving average (3 d, latest): 126/82 mmHg" in result.output
    assert "Warnings found while parsing" in result.output


def test_summarize_writes_json(fpath_sample_csv, tmp_path):
    runner = CliRunner()
    result = runner.invoke(
        main, ["summarize", "-c", fpath_sample_csv, "-o", str(tmp_path)]
    )
    assert result.exit_code == 0, result.output
    written = list(tmp_path.glob("*/summary.json"))
    assert len(written) == 1
    summary = json.loads(written[0].read_text(encoding="utf-8"))
    assert len(summary["records"]) == 6
    assert summary["moving_average"]["window"] == 7
    assert summary["period"]["start"] == "2025-03-02T10:00:00+02:00"
    assert sum(b["count"] for b in summary["statistics"]["systolic"]) == 6
    assert summary["diagnostics"]["skipped_rows"] == 3


def test_summarize_empty_file_fails(tmp_path):
    empty = tmp_path / "empty.csv"
    empty.write_bytes(b"")
    result = CliRunner().invoke(main, ["summarize", "-c", str(empty)])
    assert result.exit_code == 1
    assert "source is empty" in result.output


def test_summarize_needs_a_source():
    result = CliRunner().invoke(main, ["summarize"])
    assert result.exit_code == 1


def test_audit_csv_reports_rows(fpath_sample_csv):
    result = CliRunner().invoke(main, ["audit-csv", "-c", fpath_sample_csv])
    assert result.exit_code == 0, result.output
    assert "6 kept" in result.output
    assert "Notes" in result.output


def test_preprocess_flags_missing_columns():
    table = load_csv_as_table("Date,Time\n3 Mar 2025,08:00\n")
    entries = preprocess(table, "broken.csv")
    assert any(e.step == "required-columns" and e.level == "error" for e in entries)
    # rows are not checked when the header is unusable
    assert not any(e.step == "row-check" for e in entries)


def test_download_mocks_network(tmp_path, monkeypatch):
    monkeypatch.setattr("bpsummary.source.BASE_URL", "https://example.org/exports")
    runner = CliRunner()
    with patch("bpsummary.__main__.read_source", return_value=b"Date,Time\n") as fake:
        res = runner.invoke(main, ["download", "-s", "home", "-d", str(tmp_path)])
    assert res.exit_code == 0, res.output
    fake.assert_called_once_with("home")
    assert (tmp_path / "home.csv").read_bytes() == b"Date,Time\n"


def test_download_refuses_local_base(tmp_path, monkeypatch):
    monkeypatch.setattr("bpsummary.source.BASE_URL", str(tmp_path))
    (tmp_path / "home.csv").write_bytes(b"Date,Time\n")
    with patch("bpsummary.__main__.read_source") as fake:
        res = CliRunner().invoke(main, ["download", "-s", "home", "-d", str(tmp_path)])
    assert res.exit_code == 1
    assert "BPSUMMARY_BASE_URL" in res.output
    fake.assert_not_called()
