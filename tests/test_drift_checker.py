"""Tests for detecting documentation drift."""

from pathlib import Path

from rbsdoc.drift_checker import DriftReport, check_drift, format_drift_report


def _docs(tmp_path: Path) -> Path:
    out = tmp_path / "docs"
    (out / "sample").mkdir(parents=True)
    (out / "index.md").write_text("# Index\n", encoding="utf-8")
    (out / "sample" / "calc.md").write_text("# Calc\n", encoding="utf-8")
    (out / "sample" / "old.md").write_text("# Old\n", encoding="utf-8")
    return out


def test_up_to_date(tmp_path: Path) -> None:
    """Verify matching pages report no drift."""
    out = tmp_path / "docs"
    out.mkdir()
    (out / "index.md").write_text("---\ngenerated: 1\n---\n# Index\n", encoding="utf-8")
    report = check_drift({"index.md": "---\ngenerated: 2\n---\n# Index\n"}, out)
    assert not report.has_drift
    assert format_drift_report(report) == "Documentation is up to date."


def test_reports_drifted_missing_and_orphaned(tmp_path: Path) -> None:
    """Verify each kind of drift is classified."""
    out = _docs(tmp_path)
    report = check_drift(
        {"index.md": "# Index\n", "sample/calc.md": "# Calculator\n", "sample/new.md": "# New\n"},
        out,
    )
    assert report.drifted == ["sample/calc.md"]
    assert report.missing == ["sample/new.md"]
    assert report.orphaned == ["sample/old.md"]
    assert report.has_drift


def test_partial_check_ignores_orphans(tmp_path: Path) -> None:
    """Verify partial checks only compare the rendered subset."""
    out = _docs(tmp_path)
    report = check_drift({"sample/calc.md": "# Calc\n"}, out, partial=True)
    assert not report.has_drift


def test_missing_output_directory(tmp_path: Path) -> None:
    """Verify every page is missing when nothing was generated yet."""
    report = check_drift({"index.md": "# Index\n"}, tmp_path / "nope")
    assert report.missing == ["index.md"]
    assert report.orphaned == []


def test_format_drift_report() -> None:
    """Verify the report lists each group with counts."""
    text = format_drift_report(DriftReport(drifted=["a.md"], orphaned=["b.md", "c.md"]))
    assert text.splitlines() == [
        "Documentation drift detected:",
        "  Out of date (1):",
        "    - a.md",
        "  Orphaned (2):",
        "    - b.md",
        "    - c.md",
        "Run `rbsdoc refresh` to update the documentation.",
    ]
