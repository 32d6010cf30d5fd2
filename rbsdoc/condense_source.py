"""Logic for measuring method bodies and condensing trivial accessors."""

import re
from dataclasses import dataclass

from rbsdoc.document_model import AttrType

READER_DEF_RE = re.compile(r"^def\s+(\w+)$")
READER_BODY_RE = re.compile(r"^@(\w+)$")
WRITER_DEF_RE = re.compile(r"^def\s+(\w+)=\s*\((\w+)\)$")
WRITER_BODY_RE = re.compile(r"^@(\w+)\s*=\s*(\w+)$")
ENDLESS_DEF_RE = re.compile(r"^def\s+[\w.]+[?!]?(?:\([^)]*\)\s*|\s+)=(?![=~>])")


@dataclass(frozen=True)
class SourceInfo:
    """Display form of a method's source."""

    source: str | None
    body_lines: int
    attr_type: AttrType


def condense_source(source: str | None) -> SourceInfo:
    """Count body lines and rewrite trivial accessors as one-liners.

    ``def x`` / ``@x`` / ``end`` becomes ``def x = @x`` and
    ``def x=(v)`` / ``@x = v`` / ``end`` becomes ``def x=(v) = (@x = v)``.
    """
    if not source:
        return SourceInfo(source, 0, AttrType.NONE)

    lines = [line.strip() for line in source.strip().splitlines()]
    if len(lines) == 3 and lines[2] == "end":
        reader = READER_DEF_RE.match(lines[0])
        read_body = READER_BODY_RE.match(lines[1])
        if reader and read_body:
            condensed = f"def {reader.group(1)} = @{read_body.group(1)}"
            return SourceInfo(condensed, 0, AttrType.READER)

        writer = WRITER_DEF_RE.match(lines[0])
        write_body = WRITER_BODY_RE.match(lines[1])
        if writer and write_body and write_body.group(2) == writer.group(2):
            arg = writer.group(2)
            condensed = (
                f"def {writer.group(1)}=({arg}) = (@{write_body.group(1)} = {arg})"
            )
            return SourceInfo(condensed, 0, AttrType.WRITER)

    if len(lines) == 1:
        return SourceInfo(source, 0, AttrType.NONE)
    if ENDLESS_DEF_RE.match(lines[0]):
        return SourceInfo(source, len(lines) - 1, AttrType.NONE)
    return SourceInfo(source, max(len(lines) - 2, 0), AttrType.NONE)
