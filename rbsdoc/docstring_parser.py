"""Parser for YARD-style doc comments."""

import re
import textwrap

from rbsdoc.code_objects import Docstring, Tag
from rbsdoc.split_top_level import split_top_level

TAG_LINE_RE = re.compile(r"^@(\w+!?)(?:\s+(.*))?$")
NAME_AND_REST_RE = re.compile(r"^(\S+)\s*(.*)$", re.DOTALL)
OPTION_KEY_RE = re.compile(r"^:?(\w+)\s*(?:\(([^)]*)\))?\s*(.*)$", re.DOTALL)

NAMED_TYPED_TAGS = frozenset({"param", "yieldparam"})
TYPED_TAGS = frozenset({"return", "raise", "yieldreturn", "yield"})
MULTILINE_TAGS = frozenset({"example", "note", "deprecated", "todo", "abstract"})


def _collapse(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def extract_types(text: str) -> tuple[list[str] | None, str]:
    """Split a leading ``[Type, Other]`` list off ``text``."""
    s = text.lstrip()
    if not s.startswith("["):
        return None, text
    depth = 0
    for i, ch in enumerate(s):
        if ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
            if depth == 0:
                return split_top_level(s[1:i], angle=True), s[i + 1 :].lstrip()
    return None, text


def _split_name(text: str) -> tuple[str | None, str]:
    m = NAME_AND_REST_RE.match(text.strip())
    if not m:
        return None, ""
    return m.group(1), m.group(2)


def _build_tag(name: str, first: str, continuation: list[str]) -> Tag:
    body_lines = textwrap.dedent("\n".join(continuation)).strip("\n")

    if name == "example":
        return Tag("example", text=body_lines, name=first.strip() or None)

    body = "\n".join(part for part in (first, body_lines) if part)
    if name in MULTILINE_TAGS:
        return Tag(name, text=body.strip())

    if name in NAMED_TYPED_TAGS:
        types, rest = extract_types(body)
        if types is None:
            tag_name, rest = _split_name(body)
            types, rest = extract_types(rest)
        else:
            tag_name, rest = _split_name(rest)
        return Tag(name, text=_collapse(rest), name=tag_name, types=types)

    if name == "option":
        param_name, rest = _split_name(body)
        types, rest = extract_types(rest)
        key = OPTION_KEY_RE.match(rest.strip())
        pair = None
        if key:
            defaults = [key.group(2).strip()] if key.group(2) else None
            pair = Tag(
                "option",
                text=_collapse(key.group(3)),
                name=key.group(1),
                types=types,
                defaults=defaults,
            )
        return Tag("option", name=param_name, pair=pair)

    if name in TYPED_TAGS:
        types, rest = extract_types(body)
        return Tag(name, text=_collapse(rest), types=types)

    if name == "see":
        target, rest = _split_name(body)
        return Tag("see", text=_collapse(rest), name=target)

    return Tag(name, text=_collapse(body))


def parse_docstring(lines: list[str]) -> Docstring:
    """Parse comment lines (``#`` markers already removed) into a Docstring.

    A tag's text continues over the following lines that are indented or
    blank; the first line back at column zero ends it.
    """
    dedented = textwrap.dedent("\n".join(lines)).splitlines()
    text_lines: list[str] = []
    tags: list[Tag] = []
    current: tuple[str, str, list[str]] | None = None

    for line in dedented:
        m = TAG_LINE_RE.match(line)
        if m:
            if current:
                tags.append(_build_tag(*current))
            current = (m.group(1), m.group(2) or "", [])
            continue
        if current and (not line.strip() or line[:1].isspace()):
            current[2].append(line)
            continue
        if current:
            tags.append(_build_tag(*current))
            current = None
        text_lines.append(line)

    if current:
        tags.append(_build_tag(*current))
    return Docstring(text="\n".join(text_lines).strip(), tags=tags)
