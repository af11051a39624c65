import csv
from pathlib import Path

from takeout_dater import config
from takeout_dater.models import Outcome, ProcessingResult, RunSummary
from takeout_dater.reporting import RunReporter


def _results():
    return [
        ProcessingResult(Path("/t/b.jpg.supplemental-metadata.json"), Outcome.SKIPPED, media_path=Path("/t/b.jpg")),
        ProcessingResult(Path("/t/a.jpg.supplemental-metadata.json"), Outcome.UPDATED, media_path=Path("/t/a.jpg"),
                         exif_datetime="2017:11:23 23:34:26"),
        ProcessingResult(Path("/t/c.jpg.json"), Outcome.FAILED, reason="Path does not end with suffix"),
    ]


def test_record_prints_per_file_lines(capsys):
    reporter = RunReporter()
    for r in _results():
        reporter.record(r)

    captured = capsys.readouterr()
    assert "Updated: /t/a.jpg.supplemental-metadata.json" in captured.out
    assert "Skipped (already has EXIF date): /t/b.jpg.supplemental-metadata.json" in captured.out
    assert "Error processing /t/c.jpg.json: Path does not end with suffix" in captured.err
    assert len(reporter.results) == 3


def test_summary_block(capsys):
    RunReporter().print_summary(RunSummary(found=5, updated=2, skipped=2, errors=1))
    out = capsys.readouterr().out
    assert out.endswith(
        "Summary:\n"
        "  Metadata files found: 5\n"
        "  Media files updated: 2\n"
        "  Errors: 1\n"
    )


def test_summary_counts_each_outcome():
    summary = RunSummary(found=3)
    for r in _results():
        summary.record(r)
    assert summary == RunSummary(found=3, updated=1, skipped=1, errors=1)


def test_write_csv(tmp_path, capsys):
    reporter = RunReporter()
    for r in _results():
        reporter.record(r)

    out_csv = tmp_path / "report.csv"
    reporter.write_csv(out_csv)

    with out_csv.open(newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))

    assert rows[0] == config.REPORT_HEADERS
    assert [row[2] for row in rows[1:]] == ["updated", "skipped", "failed"]
    assert rows[1] == [str(Path("/t/a.jpg.supplemental-metadata.json")), str(Path("/t/a.jpg")),
                       "updated", "2017:11:23 23:34:26", ""]
    assert rows[3][1] == ""
