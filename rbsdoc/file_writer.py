"""Logic for writing rendered pages only when their content changed."""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

GENERATED_LINE_RE = re.compile(r"^generated: .+$", re.MULTILINE)
BLANK_RUN_RE = re.compile(r"\n{2,}")


def normalize_content(content: str) -> str:
    """Mask the generation timestamp and blank-line differences."""
    masked = GENERATED_LINE_RE.sub("generated: TIMESTAMP", content)
    return BLANK_RUN_RE.sub("\n\n", masked).strip()


def content_changed(old: str, new: str) -> bool:
    return normalize_content(old) != normalize_content(new)


def resolve_inside(out_root: Path, relative: str) -> Path | None:
    """Return ``out_root / relative`` unless it escapes ``out_root``."""
    target = (out_root / relative).resolve()
    try:
        target.relative_to(out_root.resolve())
    except ValueError:
        return None
    return target


@dataclass
class WriteResult:
    written: list[Path] = field(default_factory=list)
    unchanged: list[Path] = field(default_factory=list)


class FileWriter:
    """Write ``{relative path: content}`` maps under an output root."""

    def __init__(self, out_root: Path, logger: logging.Logger | None = None) -> None:
        self.out_root = out_root
        self.logger = logger

    def write(self, files: dict[str, str]) -> WriteResult:
        result = WriteResult()
        for relative, content in sorted(files.items()):
            target = resolve_inside(self.out_root, relative)
            if target is None:
                if self.logger:
                    self.logger.warning("Refusing to write outside %s: %s", self.out_root, relative)
                continue
            if not content.endswith("\n"):
                content += "\n"
            if target.exists() and not content_changed(
                target.read_text(encoding="utf-8"), content
            ):
                result.unchanged.append(target)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
            result.written.append(target)
            if self.logger:
                self.logger.debug("Wrote %s", target)

        if self.logger:
            self.logger.info(
                "%d files written, %d unchanged", len(result.written), len(result.unchanged)
            )
        return result
