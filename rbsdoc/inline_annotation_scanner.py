"""Line scanner for rbs-inline annotations embedded in Ruby source.

Recognized forms::

    # @rbs name: String -- description
    # @rbs return: Integer
    def method(name)

    #: (String) -> Integer
    def other(name)

    attr_reader :count #: Integer

    # @rbs!
    #   attr_accessor label: String
    #   type mode = :fast | :slow

    # @rbs @cache: Hash[String, Integer] -- memoized lookups
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from rbsdoc.document_model import TypeAliasDoc
from rbsdoc.namespace_stack import NamespaceStack
from rbsdoc.signature_data import SignatureData, TypeInfo
from rbsdoc.signature_parser import BLOCK_KEY, parse_rbs_line, parse_signature

NAMESPACE_RE = re.compile(r"^(\s*)(?:class|module)\s+([\w:]+)")
ONE_LINE_NAMESPACE_RE = re.compile(r";\s*end\s*(?:#.*)?$")
RECORD_RE = re.compile(
    r"^(\s*)([A-Z][\w:]*)\s*=\s*(?:Data\.define|Struct\.new)\b(.*)$"
)
TRAILING_DO_RE = re.compile(r"\bdo\s*(?:\|[^|]*\|)?\s*(?:#.*)?$")
RECORD_CLOSE_RE = re.compile(r"^\s*\)\s*(do\b)?")
RECORD_MEMBER_RE = re.compile(r"^\s*:(\w+),?\s*(?:#:\s*(.+?))?\s*$")
END_RE = re.compile(r"^(\s*)end\b\s*(?:#.*)?$")
DEF_RE = re.compile(
    r"^\s*(?:(?:private|protected|public|module_function)\s+)?"
    r"def\s+(?:self\.)?(\w+[?!=]?|\[\]=?|[+\-*/%&|^<>=!~]+)"
)
ATTR_RE = re.compile(r"^\s*attr_(?:reader|writer|accessor)\s+(.+?)\s*#:\s*(.+?)\s*$")
METHOD_TYPE_RE = re.compile(r"^#:\s*(.+)$")
IVAR_RBS_RE = re.compile(r"^#\s*@rbs\s+@(\w+):\s*(.+)$")
BLOCK_START_RE = re.compile(r"^#\s*@rbs!\s*(.*)$")
BLOCK_ATTR_RE = re.compile(r"^attr_(?:reader|writer|accessor)\s+(\w+):\s*(.+)$")
BLOCK_IVAR_RE = re.compile(r"^@(\w+):\s*(.+)$")
BLOCK_ALIAS_RE = re.compile(r"^type\s+(\w+)\s*=\s*(.+)$")


@dataclass
class InlineScanResult:
    """Everything the scanner collected across all files."""

    signatures: dict[str, dict[str, SignatureData]] = field(default_factory=dict)
    file_namespaces: dict[str, list[str]] = field(default_factory=dict)
    attribute_types: dict[str, dict[str, TypeInfo]] = field(default_factory=dict)
    ivar_types: dict[str, dict[str, TypeInfo]] = field(default_factory=dict)
    type_aliases: dict[str, list[TypeAliasDoc]] = field(default_factory=dict)


@dataclass
class _PendingRecord:
    """A ``Name = Data.define(`` statement whose member list is still open."""

    name: str
    indent: int
    fields: dict[str, TypeInfo] = field(default_factory=dict)


@dataclass
class _FileState:
    path: str
    stack: NamespaceStack = field(default_factory=NamespaceStack)
    pending: dict[str, TypeInfo] = field(default_factory=dict)
    comment_lines: list[str] = field(default_factory=list)
    method_type: str | None = None
    record: _PendingRecord | None = None
    in_block: bool = False
    block_desc: list[str] = field(default_factory=list)
    namespaces: list[str] = field(default_factory=list)

    def reset_pending(self) -> None:
        self.pending = {}
        self.comment_lines = []
        self.method_type = None


class InlineAnnotationScanner:
    """Collect formal types written as comments next to Ruby declarations."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger

    def scan(self, source_files: list[Path]) -> InlineScanResult:
        """Scan every file and merge the per-file findings."""
        result = InlineScanResult()
        for file in source_files:
            try:
                content = Path(file).read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                if self.logger:
                    self.logger.warning("Skipping unreadable file %s: %s", file, exc)
                continue
            self._scan_file(str(Path(file).resolve()), content, result)

        if self.logger and source_files:
            self.logger.info("Scanned inline annotations in %d files", len(source_files))
        return result

    def _scan_file(self, path: str, content: str, result: InlineScanResult) -> None:
        state = _FileState(path)
        annotated = "@rbs" in content or "#:" in content

        for lineno, raw in enumerate(content.splitlines(), start=1):
            if state.record is not None:
                self._record_line(raw, state.record, state, result)
                continue

            stripped = raw.strip()
            if state.in_block:
                if stripped.startswith("#"):
                    self._block_line(stripped, lineno, state, result)
                    continue
                state.in_block = False
                state.block_desc = []

            if stripped.startswith("#"):
                self._comment_line(stripped, lineno, state, result)
                continue
            if not stripped:
                state.reset_pending()
                continue

            if self._namespace_line(raw, state, result):
                continue
            if self._record_open_line(raw, state, result):
                continue

            end = END_RE.match(raw)
            if end:
                state.stack.pop_at(len(end.group(1)))
                state.reset_pending()
                continue

            method = DEF_RE.match(raw)
            if method:
                self._def_line(method.group(1), state, result)
                continue

            attr = ATTR_RE.match(raw)
            if attr:
                self._attr_line(attr.group(1), attr.group(2), state, result)
            state.reset_pending()

        if annotated and state.namespaces:
            result.file_namespaces[path] = list(dict.fromkeys(state.namespaces))

    def _comment_line(
        self, stripped: str, lineno: int, state: _FileState, result: InlineScanResult
    ) -> None:
        block = BLOCK_START_RE.match(stripped)
        if block:
            state.in_block = True
            if block.group(1):
                self._block_line("# " + block.group(1), lineno, state, result)
            return

        method_type = METHOD_TYPE_RE.match(stripped)
        if method_type:
            state.method_type = method_type.group(1).strip()
            return

        ivar = IVAR_RBS_RE.match(stripped)
        if ivar:
            info = self._split_desc(ivar.group(2))
            result.ivar_types.setdefault(state.stack.current, {})[ivar.group(1)] = info
            return

        state.comment_lines.append(stripped)
        parsed = parse_rbs_line(stripped)
        if parsed:
            key, info = parsed
            state.pending[key] = info

    def _block_line(
        self, stripped: str, lineno: int, state: _FileState, result: InlineScanResult
    ) -> None:
        """Handle one comment line inside an ``@rbs!`` block."""
        text = stripped.lstrip("#").strip()
        if text.startswith("#"):
            state.block_desc.append(text.lstrip("#").strip())
            return

        ns = state.stack.current
        desc = " ".join(state.block_desc) or None
        attr = BLOCK_ATTR_RE.match(text)
        ivar = BLOCK_IVAR_RE.match(text)
        alias = BLOCK_ALIAS_RE.match(text)
        if attr:
            info = TypeInfo(attr.group(2).strip(), desc)
            result.attribute_types.setdefault(ns, {})[attr.group(1)] = info
        elif ivar:
            info = TypeInfo(ivar.group(2).strip(), desc)
            result.ivar_types.setdefault(ns, {})[ivar.group(1)] = info
        elif alias:
            result.type_aliases.setdefault(ns, []).append(
                TypeAliasDoc(
                    name=alias.group(1),
                    definition=alias.group(2).strip(),
                    description=desc,
                    namespace=ns,
                    file=state.path,
                    line=lineno,
                )
            )
        else:
            return
        state.block_desc = []

    def _namespace_line(
        self, raw: str, state: _FileState, result: InlineScanResult
    ) -> bool:
        m = NAMESPACE_RE.match(raw)
        if not m:
            return False
        state.reset_pending()
        if ONE_LINE_NAMESPACE_RE.search(raw):
            return True
        ns = state.stack.push(m.group(2), len(m.group(1)))
        result.signatures.setdefault(ns, {})
        state.namespaces.append(ns)
        return True

    def _record_open_line(
        self, raw: str, state: _FileState, result: InlineScanResult
    ) -> bool:
        m = RECORD_RE.match(raw)
        if not m:
            return False
        state.reset_pending()
        indent, name, rest = len(m.group(1)), m.group(2), m.group(3)
        if TRAILING_DO_RE.search(rest):
            ns = state.stack.push(name, indent)
            result.signatures.setdefault(ns, {})
            state.namespaces.append(ns)
        elif rest.count("(") > rest.count(")"):
            state.record = _PendingRecord(name, indent)
        return True

    def _record_line(
        self,
        raw: str,
        record: _PendingRecord,
        state: _FileState,
        result: InlineScanResult,
    ) -> None:
        """Consume one line of a multi-line record constructor."""
        close = RECORD_CLOSE_RE.match(raw)
        if close:
            if close.group(1):
                ns = state.stack.push(record.name, record.indent)
                result.signatures.setdefault(ns, {})
                state.namespaces.append(ns)
            else:
                ns = state.stack.path_for(record.name)
            if record.fields:
                result.attribute_types.setdefault(ns, {}).update(record.fields)
            state.record = None
            return

        member = RECORD_MEMBER_RE.match(raw)
        if member and member.group(2):
            record.fields[member.group(1)] = TypeInfo(member.group(2))
            return
        parsed = parse_rbs_line(raw.strip()) if raw.strip().startswith("#") else None
        if parsed:
            record.fields[parsed[0]] = parsed[1]

    def _def_line(self, name: str, state: _FileState, result: InlineScanResult) -> None:
        ns = state.stack.current
        if not ns or not (state.pending or state.method_type):
            return
        if state.method_type:
            sig = parse_signature(state.method_type, "\n".join(state.comment_lines))
        else:
            sig = build_signature(state.pending)
        result.signatures.setdefault(ns, {})[name] = sig
        state.reset_pending()

    def _attr_line(
        self, names: str, type_str: str, state: _FileState, result: InlineScanResult
    ) -> None:
        ns = state.stack.current
        for name in re.findall(r":(\w+)", names):
            result.attribute_types.setdefault(ns, {})[name] = TypeInfo(type_str)

    @staticmethod
    def _split_desc(value: str) -> TypeInfo:
        type_str, sep, desc = value.partition(" -- ")
        return TypeInfo(type_str.strip(), desc.strip() if sep and desc.strip() else None)


def build_signature(entries: dict[str, TypeInfo]) -> SignatureData:
    """Assemble a signature from accumulated ``@rbs`` entries."""
    returns = entries.get("return")
    raises = entries.get("raises")
    params = {
        k: v for k, v in entries.items() if k not in ("return", "raises", BLOCK_KEY)
    }
    param_str = ", ".join(f"{info.type} {name}" for name, info in params.items())
    full = f"({param_str})"

    block = entries.get(BLOCK_KEY)
    if block:
        params[BLOCK_KEY] = block
        full += " " + _block_clause(block.type)
    full += f" -> {returns.type if returns else 'void'}"

    return SignatureData(
        full=full,
        params=params,
        returns=returns,
        raises=raises.type if raises else None,
    )


def _block_clause(block_type: str) -> str:
    t = block_type.strip()
    optional = t.startswith("?")
    t = t.lstrip("?").strip()
    if t.startswith("^"):
        t = "{ " + t[1:].strip() + " }"
    return ("?" if optional else "") + t
