"""Logic for detecting documentation that no longer matches the source."""

from dataclasses import dataclass, field
from pathlib import Path

from rbsdoc.file_writer import content_changed


@dataclass
class DriftReport:
    drifted: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    orphaned: list[str] = field(default_factory=list)

    @property
    def has_drift(self) -> bool:
        return bool(self.drifted or self.missing or self.orphaned)


def check_drift(files: dict[str, str], out_root: Path, *, partial: bool = False) -> DriftReport:
    """Compare freshly rendered pages with those on disk.

    Orphans are markdown files under ``out_root`` that would no longer be
    generated; they are not reported in ``partial`` mode since only a subset
    of pages is rendered there.
    """
    report = DriftReport()
    for relative, expected in sorted(files.items()):
        target = out_root / relative
        if not target.exists():
            report.missing.append(relative)
        elif content_changed(target.read_text(encoding="utf-8"), expected):
            report.drifted.append(relative)

    if not partial and out_root.is_dir():
        report.orphaned = sorted(
            p.relative_to(out_root).as_posix()
            for p in out_root.rglob("*.md")
            if p.relative_to(out_root).as_posix() not in files
        )
    return report


def format_drift_report(report: DriftReport) -> str:
    """Describe the drift in a few human-readable lines."""
    if not report.has_drift:
        return "Documentation is up to date."
    lines = ["Documentation drift detected:"]
    for label, paths in (
        ("Out of date", report.drifted),
        ("Missing", report.missing),
        ("Orphaned", report.orphaned),
    ):
        if paths:
            lines.append(f"  {label} ({len(paths)}):")
            lines.extend(f"    - {p}" for p in paths)
    lines.append("Run `rbsdoc refresh` to update the documentation.")
    return "\n".join(lines)
