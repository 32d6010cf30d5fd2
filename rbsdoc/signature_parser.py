"""Parsers for RBS method, record and block signatures.

Parsing is best-effort: annotations are hand-written, so input that does not
fit the expected shape yields an empty or partial result instead of raising.
"""

import re

from rbsdoc.signature_data import BlockType, SignatureData, TypeInfo
from rbsdoc.split_top_level import split_top_level

BLOCK_KEY = "&block"

TYPE_PARAMS_RE = re.compile(r"^\[[^\]]*\]\s*")
KEYWORD_PARAM_RE = re.compile(r"^\??(\w+):(?!:)\s*(.+)$", re.DOTALL)
POSITIONAL_PARAM_RE = re.compile(
    r"^\??(\*{1,2})?\s*(.*?[^|&,\s])\s+([a-z_]\w*)$", re.DOTALL
)
RECORD_PAIR_RE = re.compile(r"^\??(\w+)\??\s*:(?!:)\s*(.+)$", re.DOTALL)
RBS_TAG_RE = re.compile(r"@rbs\s+([&*]{0,2}\w+):\s*(.*)$")


def strip_type_params(sig: str) -> str:
    """Drop a leading generic parameter list such as ``[T]``."""
    return TYPE_PARAMS_RE.sub("", sig.strip(), count=1)


def _matching_close(text: str, start: int) -> int:
    """Return the index of the bracket closing the one at ``start``, or -1."""
    depth = 0
    for i in range(start, len(text)):
        ch = text[i]
        if ch in "[{(":
            depth += 1
        elif ch in "]})":
            depth -= 1
            if depth == 0:
                return i
    return -1


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


def _is_block(param: str) -> bool:
    p = param.lstrip("?").strip()
    if p.startswith("^"):
        return True
    return p.startswith("{") and p[1:].lstrip().startswith(("(", "->"))


def parse_param(param: str) -> tuple[str, str] | None:
    """Split one parameter into ``(name, type)``.

    Handles keyword (``?name: T``), positional (``?T name``, ``*T rest``) and
    block (``?{ (T) -> R }``, ``^(T) -> R``) forms. Unnamed positionals yield
    ``None``.
    """
    p = param.strip()
    if not p:
        return None
    if _is_block(p):
        return BLOCK_KEY, p
    m = KEYWORD_PARAM_RE.match(p)
    if m:
        return m.group(1), m.group(2).strip()
    m = POSITIONAL_PARAM_RE.match(p)
    if m:
        return m.group(3), m.group(2).strip()
    return None


def parse_rbs_line(line: str) -> tuple[str, TypeInfo] | None:
    """Parse an ``@rbs key: Type -- description`` comment line.

    Splat markers are removed from the key and any block key becomes
    ``&block``. Field declarations (``@rbs @name: T``) are not matched.
    """
    m = RBS_TAG_RE.search(line)
    if not m:
        return None
    key, rest = m.group(1), m.group(2).strip()
    if key.startswith("&"):
        key = BLOCK_KEY
    else:
        key = key.lstrip("*")
    type_str, sep, desc = rest.partition(" -- ")
    type_str = type_str.strip()
    if not type_str:
        return None
    description = _capitalize(desc.strip()) if sep and desc.strip() else None
    return key, TypeInfo(type_str, description)


def parse_rbs_descriptions(
    comment: str,
) -> tuple[dict[str, str], str | None, str | None]:
    """Collect parameter descriptions, the return description and ``raises``."""
    param_descs: dict[str, str] = {}
    return_desc: str | None = None
    raises: str | None = None
    for line in comment.splitlines():
        parsed = parse_rbs_line(line)
        if not parsed:
            continue
        key, info = parsed
        if key == "raises":
            raises = info.type
        elif key == "return":
            return_desc = info.desc or return_desc
        elif info.desc:
            param_descs[key] = info.desc
    return param_descs, return_desc, raises


def parse_signature(sig: str, comment: str | None = None) -> SignatureData:
    """Parse ``(params) -> Return`` into a ``SignatureData``.

    ``comment`` is the annotation block preceding the declaration; its
    ``@rbs`` lines back-fill descriptions and the ``raises`` field.
    """
    full = sig.strip()
    body = strip_type_params(full)
    types: dict[str, str] = {}
    rest = body

    if rest.startswith("("):
        close = _matching_close(rest, 0)
        if close < 0:
            return SignatureData(full=full)
        for param in split_top_level(rest[1:close]):
            parsed = parse_param(param)
            if parsed:
                types[parsed[0]] = parsed[1]
        rest = rest[close + 1 :].lstrip()

    if rest.startswith(("{", "?{")):
        close = _matching_close(rest, rest.index("{"))
        if close < 0:
            return SignatureData(full=full, params=_with_descs(types, {}))
        types[BLOCK_KEY] = rest[: close + 1]
        rest = rest[close + 1 :].lstrip()

    param_descs: dict[str, str] = {}
    return_desc = raises = None
    if comment:
        param_descs, return_desc, raises = parse_rbs_descriptions(comment)

    params = _with_descs(types, param_descs)
    if not rest.startswith("->"):
        return SignatureData(full=full, params=params, raises=raises)

    return_type = rest[2:].strip()
    returns = TypeInfo(return_type, return_desc) if return_type else None
    return SignatureData(full=full, params=params, returns=returns, raises=raises)


def _with_descs(types: dict[str, str], descs: dict[str, str]) -> dict[str, TypeInfo]:
    return {name: TypeInfo(t, descs.get(name)) for name, t in types.items()}


def parse_record_type(type_str: str) -> dict[str, str]:
    """Parse ``{ key: Type, other?: Type }`` into ``{key: type}``."""
    s = type_str.strip()
    if s.endswith("?"):
        s = s[:-1].rstrip()
    if not (s.startswith("{") and s.endswith("}")):
        return {}
    fields: dict[str, str] = {}
    for pair in split_top_level(s[1:-1]):
        m = RECORD_PAIR_RE.match(pair)
        if m:
            fields[m.group(1)] = m.group(2).strip()
    return fields


def parse_block_type(block_type: str) -> BlockType:
    """Parse ``^(T1, T2) -> R`` or ``{ (T1) -> R }`` into positional types."""
    s = block_type.strip().lstrip("?").strip()
    if s.startswith("{") and s.endswith("}"):
        s = s[1:-1].strip()
    s = s.lstrip("^").strip()

    inner = ""
    if s.startswith("("):
        close = _matching_close(s, 0)
        if close < 0:
            return BlockType([], None)
        inner, s = s[1:close], s[close + 1 :].strip()
    if not s.startswith("->"):
        return BlockType([], None)

    param_types = []
    for param in split_top_level(inner):
        parsed = parse_param(param)
        param_types.append(parsed[1] if parsed else param)
    return BlockType(param_types, s[2:].strip() or None)
