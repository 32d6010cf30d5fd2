"""Logic for grouping extracted namespaces by their defining source file."""

import os
from collections.abc import Iterable
from pathlib import Path

from rbsdoc.document_model import FileDoc, NamespaceDoc


def relative_path(path: str, root: Path) -> str:
    """Express ``path`` relative to ``root`` when it lies beneath it."""
    try:
        return Path(path).resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return path


def _line_count(path: Path) -> int:
    try:
        return len(path.read_text(encoding="utf-8").splitlines())
    except (OSError, UnicodeDecodeError):
        return 0


def group_by_file(namespaces: Iterable[NamespaceDoc], root: Path) -> tuple[FileDoc, ...]:
    """Build one ``FileDoc`` per source file, sorted by relative path."""
    by_file: dict[str, list[NamespaceDoc]] = {}
    for ns in namespaces:
        if ns.file:
            by_file.setdefault(relative_path(ns.file, root), []).append(ns)

    files = []
    for path, grouped in by_file.items():
        grouped.sort(key=lambda ns: ns.path)
        absolute = Path(path) if os.path.isabs(path) else root / path
        files.append(
            FileDoc(
                path=path,
                namespaces=tuple(grouped),
                type_aliases=tuple(a for ns in grouped for a in ns.type_aliases),
                line_count=_line_count(absolute),
            )
        )
    return tuple(sorted(files, key=lambda f: f.path))
