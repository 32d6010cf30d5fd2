"""Logic for turning class references into wikilinks."""

import re

from rbsdoc.doc_path_for_namespace import doc_path_for_namespace
from rbsdoc.document_model import ProjectDoc

CURLY_REF_RE = re.compile(r"\{([A-Z][\w:]*)\}")
CLASS_REF_RE = re.compile(r"\b([A-Z]\w*(?:::[A-Z]\w*)*)\b")


class ClassLinker:
    """Resolve class names against the documented namespaces.

    ``link`` returns ``[[doc/path|Short]]`` for known classes and the bare
    short name otherwise. Names listed in ``skip_types`` are never linked.
    """

    def __init__(
        self, namespace_strip: str | None = None, skip_types: list[str] | None = None
    ) -> None:
        self.namespace_strip = namespace_strip
        self.skip_types = set(skip_types or [])
        self.known: dict[str, str] = {}

    def register(self, project: ProjectDoc) -> None:
        """Record the page path of every namespace in ``project``."""
        for ns in project.namespaces:
            doc_path = doc_path_for_namespace(ns.path, self.namespace_strip)
            self.known[ns.path] = doc_path
            self.known.setdefault(ns.name, doc_path)

    def known_class(self, name: str) -> bool:
        return name in self.known

    def resolve(self, name: str, context: str | None = None) -> str | None:
        """Return the page path for ``name`` or ``None`` when undocumented."""
        name = name.removeprefix("::")
        if name in self.known:
            return self.known[name]
        if self.namespace_strip and self.namespace_strip + name in self.known:
            return self.known[self.namespace_strip + name]
        if context:
            for candidate in (f"{context}::{name}", f"{context.rpartition('::')[0]}::{name}"):
                if candidate in self.known:
                    return self.known[candidate]
        return None

    def link(self, path: str, context: str | None = None) -> str:
        short = path.split("::")[-1]
        if short in self.skip_types:
            return short
        resolved = self.resolve(path, context)
        return f"[[{resolved}|{short}]]" if resolved else short

    def linkify_docstring(self, text: str, context: str | None = None) -> str:
        """Rewrite YARD ``{Class}`` references as wikilinks."""
        if not text:
            return text
        return CURLY_REF_RE.sub(lambda m: self.link(m.group(1), context), text)

    def linkify_type(self, type_str: str | None, context: str | None = None) -> str:
        """Format a type with backticks around text and bare wikilinks."""
        if not type_str:
            return "`untyped`"
        segments: list[tuple[bool, str]] = []
        last = 0
        for m in CLASS_REF_RE.finditer(type_str):
            if m.start() > last:
                segments.append((False, type_str[last : m.start()]))
            segments.append(self._segment(m.group(1), context))
            last = m.end()
        if last < len(type_str):
            segments.append((False, type_str[last:]))

        parts: list[str] = []
        buffer = ""
        for is_link, text in segments:
            if not is_link:
                buffer += text
                continue
            if buffer:
                parts.append(f"`{buffer}`")
                buffer = ""
            parts.append(text)
        if buffer:
            parts.append(f"`{buffer}`")
        return "".join(parts)

    def _segment(self, ref: str, context: str | None) -> tuple[bool, str]:
        if ref in self.skip_types:
            return False, ref
        resolved = self.resolve(ref, context)
        if not resolved:
            return False, ref
        return True, f"[[{resolved}|{ref.split('::')[-1]}]]"
