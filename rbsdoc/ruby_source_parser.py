"""Line-based builder of the documentation object graph from Ruby source.

Nesting is tracked by indentation: a namespace or method opened at column N
is closed by the first ``end`` at column N. This holds for conventionally
formatted (rubocop-style) code, which is what documentation runs target.
"""

import logging
import re
import textwrap
from dataclasses import dataclass
from pathlib import Path

from rbsdoc.code_objects import (
    ConstantObject,
    Docstring,
    MethodObject,
    NamespaceObject,
    Registry,
    Tag,
)
from rbsdoc.docstring_parser import parse_docstring
from rbsdoc.document_model import NamespaceType, Scope, Visibility
from rbsdoc.split_top_level import split_top_level

NAMESPACE_RE = re.compile(
    r"^(class|module)\s+([\w:]+)(?:\s*<\s*([\w:]+))?"
)
SINGLETON_RE = re.compile(r"^class\s*<<\s*self\b")
ONE_LINE_END_RE = re.compile(r";\s*end\s*(?:#.*)?$")
END_RE = re.compile(r"^end\b")
DEF_RE = re.compile(
    r"^(?:(private|protected|public|private_class_method|module_function)\s+)?"
    r"def\s+(self\.)?(\w+[?!=]?|\[\]=?|[+\-*/%&|^<>=!~]+)(.*)$"
)
VISIBILITY_RE = re.compile(r"^(private|protected|public|module_function)\s*(?:#.*)?$")
VISIBILITY_NAMES_RE = re.compile(
    r"^(private|protected|public|private_class_method|module_function)\s+(:.+)$"
)
ATTR_RE = re.compile(
    r"^(?:(private|protected|public)\s+)?attr_(reader|writer|accessor)\s+([^#]+)"
)
MIXIN_RE = re.compile(r"^(include|extend|prepend)\s+([^#]+)")
RECORD_RE = re.compile(r"^([A-Z]\w*)\s*=\s*(Struct\.new|Data\.define)\b(.*)$")
CONSTANT_RE = re.compile(r"^([A-Z]\w*)\s*=(?![=~])\s*(.*)$")
HEREDOC_RE = re.compile(r"<<[~-]?(['\"]?)(\w+)\1")
TRAILING_DO_RE = re.compile(r"\bdo\s*(?:\|[^|]*\|)?\s*(?:#.*)?$")
STRING_RE = re.compile(r"\"(?:\\.|[^\"\\])*\"|'(?:\\.|[^'\\])*'")
MAGIC_COMMENT_RE = re.compile(
    r"^#\s*(?:frozen_string_literal|encoding|typed|rbs_inline|warn_indent):"
)
SYMBOL_RE = re.compile(r":(\w+[?!]?)")


def _indent(line: str) -> int:
    return len(line) - len(line.lstrip())


def _bracket_depth(text: str) -> int:
    text = STRING_RE.sub("", text)
    return sum(text.count(c) for c in "([{") - sum(text.count(c) for c in ")]}")


def parse_parameter(param: str) -> tuple[str, str | None]:
    """Turn ``a = 1`` / ``key: 2`` / ``*rest`` into ``(name, default)``."""
    p = param.strip()
    sigil = re.match(r"^(\*\*|\*|&)(\w*)", p)
    if sigil:
        return sigil.group(1) + sigil.group(2), None
    keyword = re.match(r"^(\w+):\s*(.*)$", p, re.DOTALL)
    if keyword:
        return f"{keyword.group(1)}:", keyword.group(2).strip() or None
    optional = re.match(r"^(\w+)\s*=\s*(.*)$", p, re.DOTALL)
    if optional:
        return optional.group(1), optional.group(2).strip()
    return p, None


@dataclass
class _Frame:
    namespace: NamespaceObject
    indent: int
    singleton: bool = False
    owns_location: bool = False
    visibility: Visibility = Visibility.PUBLIC
    module_function: bool = False


class _FileParser:
    """Walks one file's lines and registers what it declares."""

    def __init__(self, path: str, lines: list[str], registry: Registry) -> None:
        self.path = path
        self.lines = lines
        self.registry = registry
        self.stack: list[_Frame] = []
        self.comments: list[str] = []

    @property
    def frame(self) -> _Frame | None:
        return self.stack[-1] if self.stack else None

    @property
    def context(self) -> str:
        return self.frame.namespace.path if self.frame else ""

    def run(self) -> None:
        i = 0
        while i < len(self.lines):
            i = self._line(i) + 1

    def _take_docstring(self) -> Docstring:
        doc = parse_docstring(self.comments)
        self.comments = []
        return doc

    def _line(self, i: int) -> int:
        line = self.lines[i]
        stripped = line.strip()

        if stripped == "__END__":
            return len(self.lines)
        if stripped.startswith("=begin"):
            while i < len(self.lines) and not self.lines[i].startswith("=end"):
                i += 1
            return i
        if stripped.startswith("#"):
            if not MAGIC_COMMENT_RE.match(stripped) and not stripped.startswith("#:"):
                self.comments.append(line.lstrip()[1:])
            return i
        if not stripped:
            self.comments = []
            return i

        handlers = (
            self._singleton,
            self._namespace,
            self._end,
            self._def,
            self._visibility,
            self._attr,
            self._mixin,
            self._record,
            self._constant,
        )
        for handler in handlers:
            last = handler(i, line, stripped)
            if last is not None:
                return last
        self.comments = []
        return i

    def _singleton(self, i: int, line: str, stripped: str) -> int | None:
        if not SINGLETON_RE.match(stripped) or not self.frame:
            return None
        self.comments = []
        self.stack.append(
            _Frame(self.frame.namespace, _indent(line), singleton=True)
        )
        return i

    def _namespace(self, i: int, line: str, stripped: str) -> int | None:
        m = NAMESPACE_RE.match(stripped)
        if not m:
            return None
        kind = NamespaceType.CLASS if m.group(1) == "class" else NamespaceType.MODULE
        ns, owns = self._open_namespace(m.group(2), kind, m.group(3), i)
        if not ONE_LINE_END_RE.search(stripped):
            self.stack.append(_Frame(ns, _indent(line), owns_location=owns))
        elif owns:
            ns.end_line = i + 1
        return i

    def _open_namespace(
        self, name: str, kind: NamespaceType, superclass: str | None, i: int
    ) -> tuple[NamespaceObject, bool]:
        name = name.removeprefix("::")
        path = f"{self.context}::{name}" if self.context else name
        docstring = self._take_docstring()
        ns = self.registry.get(path)
        owns = ns is None or ns.file is None
        if ns is None:
            ns = self.registry.add(
                NamespaceObject(name=path.split("::")[-1], path=path, kind=kind)
            )
        if owns:
            ns.file = self.path
            ns.line = i + 1
        if not docstring.is_blank and ns.docstring.is_blank:
            ns.docstring = docstring
        if superclass and not ns.superclass:
            ns.superclass = superclass
        return ns, owns

    def _end(self, i: int, line: str, stripped: str) -> int | None:
        if not END_RE.match(stripped):
            return None
        frame = self.frame
        if frame and frame.indent == _indent(line):
            self.stack.pop()
            if frame.owns_location and not frame.singleton:
                frame.namespace.end_line = i + 1
        self.comments = []
        return i

    def _def(self, i: int, line: str, stripped: str) -> int | None:
        m = DEF_RE.match(stripped)
        if not m:
            return None
        frame = self.frame
        if frame is None:
            self.comments = []
            return self._method_end(i, line, m.group(4))[0]

        keyword, is_self, name, rest = m.groups()
        last, params_text = self._method_end(i, line, rest)

        scope = Scope.INSTANCE
        if is_self or frame.singleton or frame.module_function:
            scope = Scope.CLASS
        if keyword == "module_function":
            scope = Scope.CLASS

        if keyword in ("private", "protected", "public"):
            visibility = Visibility(keyword)
        elif keyword == "private_class_method":
            visibility = Visibility.PRIVATE
        elif is_self or frame.module_function or name == "initialize":
            visibility = Visibility.PUBLIC
        else:
            visibility = frame.visibility

        params = [parse_parameter(p) for p in split_top_level(params_text)]
        prefix = "self." if is_self else ""
        signature = f"def {prefix}{name}"
        if params_text.strip():
            signature += f"({params_text.strip()})"

        docstring = self._take_docstring()
        if name == "initialize" and scope is Scope.INSTANCE and not docstring.has_tag("return"):
            owner = frame.namespace.name
            docstring.tags.append(
                Tag("return", text=f"a new instance of {owner}", types=[owner])
            )

        source = textwrap.dedent("\n".join(self.lines[i : last + 1])).strip()
        frame.namespace.add_method(
            MethodObject(
                name=name,
                namespace=frame.namespace.path,
                scope=scope,
                visibility=visibility,
                parameters=params,
                signature=signature,
                source=source,
                file=self.path,
                line=i + 1,
                docstring=docstring,
            )
        )
        return last

    def _method_end(self, i: int, line: str, rest: str) -> tuple[int, str]:
        """Return the method's last line index and its raw parameter text."""
        j = i
        params_text = ""
        after = rest
        if rest.lstrip().startswith("("):
            text = rest
            while _bracket_depth(text) > 0 and j + 1 < len(self.lines):
                j += 1
                text += "\n" + self.lines[j].strip()
            body = text.lstrip()
            depth = 0
            for pos, ch in enumerate(body):
                depth += ch in "([{"
                depth -= ch in ")]}"
                if depth == 0:
                    params_text, after = body[1:pos], body[pos + 1 :]
                    break
        elif rest.strip() and not rest.strip().startswith(("=", ";", "#")):
            params_text = rest.split("#")[0].strip()
            after = ""

        after = after.strip()
        if after.startswith("=") and not after.startswith(("==", "=~")):
            if after != "=":
                return j, params_text
            k = j + 1
            while k + 1 < len(self.lines) and _indent(self.lines[k + 1]) > _indent(line):
                k += 1
            return min(k, len(self.lines) - 1), params_text
        if re.search(r";\s*end\s*(?:#.*)?$", after):
            return j, params_text

        indent = _indent(line)
        for k in range(j + 1, len(self.lines)):
            candidate = self.lines[k]
            if candidate.strip() and _indent(candidate) == indent and END_RE.match(
                candidate.strip()
            ):
                return k, params_text
        return j, params_text

    def _visibility(self, i: int, line: str, stripped: str) -> int | None:
        frame = self.frame
        if frame is None:
            return None
        bare = VISIBILITY_RE.match(stripped)
        if bare:
            if bare.group(1) == "module_function":
                frame.module_function = True
            else:
                frame.visibility = Visibility(bare.group(1))
            self.comments = []
            return i
        named = VISIBILITY_NAMES_RE.match(stripped)
        if not named:
            return None
        keyword = named.group(1)
        for name in SYMBOL_RE.findall(named.group(2)):
            scope = Scope.CLASS if keyword == "private_class_method" else Scope.INSTANCE
            method = frame.namespace.method(name, scope)
            if method is None:
                continue
            if keyword == "module_function":
                method.scope = Scope.CLASS
            elif keyword == "private_class_method":
                method.visibility = Visibility.PRIVATE
            else:
                method.visibility = Visibility(keyword)
        self.comments = []
        return i

    def _attr(self, i: int, line: str, stripped: str) -> int | None:
        m = ATTR_RE.match(stripped)
        frame = self.frame
        if not m or frame is None:
            return None
        visibility = Visibility(m.group(1)) if m.group(1) else frame.visibility
        docstring = self._take_docstring()
        for name in SYMBOL_RE.findall(m.group(3)):
            self._add_attribute(frame, name, m.group(2), docstring, visibility, i + 1)
        return i

    def _add_attribute(
        self,
        frame: _Frame,
        name: str,
        kind: str,
        docstring: Docstring,
        visibility: Visibility,
        line_no: int,
    ) -> None:
        scope = Scope.CLASS if frame.singleton else Scope.INSTANCE
        common = {
            "namespace": frame.namespace.path,
            "scope": scope,
            "visibility": visibility,
            "file": self.path,
            "line": line_no,
        }
        return_tag = docstring.tag("return")
        if kind in ("reader", "accessor"):
            reader_doc = docstring
            if docstring.is_blank:
                reader_doc = Docstring(text=f"Returns the value of attribute {name}.")
            frame.namespace.add_method(
                MethodObject(
                    name=name,
                    signature=f"def {name}",
                    source=f"def {name}\n  @{name}\nend",
                    docstring=reader_doc,
                    **common,
                )
            )
        if kind in ("writer", "accessor"):
            param = Tag(
                "param",
                text=f"the value to set the attribute {name} to.",
                name="value",
                types=return_tag.types if return_tag else None,
            )
            text = docstring.text or f"Sets the attribute {name}"
            frame.namespace.add_method(
                MethodObject(
                    name=f"{name}=",
                    parameters=[("value", None)],
                    signature=f"def {name}=(value)",
                    source=f"def {name}=(value)\n  @{name} = value\nend",
                    docstring=Docstring(text=text, tags=[param]),
                    **common,
                )
            )

    def _mixin(self, i: int, line: str, stripped: str) -> int | None:
        m = MIXIN_RE.match(stripped)
        if not m or self.frame is None:
            return None
        frame = self.frame
        target = (
            frame.namespace.class_mixins
            if m.group(1) == "extend" or frame.singleton
            else frame.namespace.instance_mixins
        )
        for name in split_top_level(m.group(2)):
            if name != "self" and name not in target:
                target.append(name)
        self.comments = []
        return i

    def _record(self, i: int, line: str, stripped: str) -> int | None:
        m = RECORD_RE.match(stripped)
        if not m:
            return None
        statement = m.group(3)
        j = i
        while _bracket_depth(statement) > 0 and j + 1 < len(self.lines):
            j += 1
            statement += "\n" + self.lines[j].split("#")[0].strip()
        members = SYMBOL_RE.findall(re.sub(r"#.*", "", statement))

        superclass = "Struct" if m.group(2).startswith("Struct") else "Data"
        ns, owns = self._open_namespace(m.group(1), NamespaceType.CLASS, superclass, i)
        frame = _Frame(ns, _indent(line), owns_location=owns)
        self.stack.append(frame)
        kind = "accessor" if superclass == "Struct" else "reader"
        for member in members:
            self._add_attribute(
                frame, member, kind, Docstring(), Visibility.PUBLIC, i + 1
            )

        closing = self.lines[j].strip()
        if TRAILING_DO_RE.search(closing):
            return j
        self.stack.pop()
        if owns:
            ns.end_line = j + 1
        return j

    def _constant(self, i: int, line: str, stripped: str) -> int | None:
        m = CONSTANT_RE.match(stripped)
        if not m or self.frame is None:
            return None
        value_lines = [m.group(2)]
        j = i
        heredoc = HEREDOC_RE.search(m.group(2))
        if heredoc:
            terminator = heredoc.group(2)
            while j + 1 < len(self.lines):
                j += 1
                value_lines.append(self.lines[j])
                if self.lines[j].strip() == terminator:
                    break
        elif TRAILING_DO_RE.search(m.group(2)):
            indent = _indent(line)
            while j + 1 < len(self.lines):
                j += 1
                value_lines.append(self.lines[j])
                if _indent(self.lines[j]) == indent and END_RE.match(self.lines[j].strip()):
                    break
        else:
            while _bracket_depth("\n".join(value_lines)) > 0 and j + 1 < len(self.lines):
                j += 1
                value_lines.append(self.lines[j])

        first, *rest = value_lines
        value = first
        if rest:
            value += "\n" + textwrap.dedent("\n".join(rest))
        self.frame.namespace.constants.append(
            ConstantObject(
                name=m.group(1),
                value=value.strip(),
                docstring=self._take_docstring(),
                file=self.path,
                line=i + 1,
            )
        )
        return j


class RubySourceParser:
    """Build a ``Registry`` of namespaces, methods and constants."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger

    def parse_files(self, files: list[Path]) -> Registry:
        """Parse every file; unreadable files are skipped with a warning."""
        registry = Registry()
        for file in files:
            try:
                content = Path(file).read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                if self.logger:
                    self.logger.warning("Skipping unreadable file %s: %s", file, exc)
                continue
            path = str(Path(file).resolve())
            _FileParser(path, content.splitlines(), registry).run()

        self._resolve_references(registry)
        if self.logger:
            self.logger.info(
                "Parsed %d namespaces from %d files", len(registry), len(files)
            )
        return registry

    @staticmethod
    def _resolve_references(registry: Registry) -> None:
        for ns in registry.all_namespaces():
            ns.instance_mixins = [registry.resolve(m, ns.path) for m in ns.instance_mixins]
            ns.class_mixins = [registry.resolve(m, ns.path) for m in ns.class_mixins]
            if ns.superclass:
                parent = ns.path.rpartition("::")[0]
                ns.superclass = registry.resolve(ns.superclass, parent)
