"""Logic for building YAML frontmatter for documentation pages."""

import re
from datetime import datetime, timezone
from typing import Any

import yaml

from rbsdoc.class_linker import ClassLinker
from rbsdoc.doc_path_for_namespace import doc_path_for_namespace, strip_namespace
from rbsdoc.document_model import NamespaceDoc, ProjectDoc, Scope
from rbsdoc.kebab_case import to_kebab_case

PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")
FIRST_SENTENCE_RE = re.compile(r"^(.+?[.!?])(?:\s|$)", re.DOTALL)
MARKDOWN_STRIPS = (
    (re.compile(r"\*\*(.+?)\*\*"), r"\1"),
    (re.compile(r"`(.+?)`"), r"\1"),
    (re.compile(r"\[\[[^\]|]+\|([^\]]+)\]\]"), r"\1"),
    (re.compile(r"\[\[([^\]]+)\]\]"), r"\1"),
    (re.compile(r"\{([^}]+)\}"), r"\1"),
)


def first_sentence(docstring: str) -> str | None:
    """Return the first sentence of the first paragraph, markdown stripped."""
    if not docstring or not docstring.strip():
        return None
    paragraph = PARAGRAPH_SPLIT_RE.split(docstring.strip())[0].strip()
    m = FIRST_SENTENCE_RE.match(paragraph)
    text = m.group(1) if m else paragraph
    for pattern, replacement in MARKDOWN_STRIPS:
        text = pattern.sub(replacement, text)
    return " ".join(text.split())


def render_frontmatter(fields: dict[str, Any]) -> str:
    """Dump ``fields`` as a ``---`` delimited YAML block."""
    body = yaml.safe_dump(
        fields, sort_keys=False, allow_unicode=True, default_flow_style=None, width=1000
    )
    return f"---\n{body}---\n"


def timestamp(moment: datetime | None = None) -> str:
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class FrontmatterBuilder:
    """Collect navigation and discovery metadata for each page."""

    def __init__(
        self,
        linker: ClassLinker,
        namespace_strip: str | None = None,
        project_title: str = "API Documentation",
        generated_at: datetime | None = None,
    ) -> None:
        self.linker = linker
        self.namespace_strip = namespace_strip
        self.project_title = project_title
        self.generated = timestamp(generated_at)
        self.children: dict[str, list[str]] = {}

    def register_inheritance(self, project: ProjectDoc) -> None:
        """Map each documented superclass to the classes inheriting from it."""
        self.children = {}
        for ns in project.classes:
            if ns.superclass and self._documentable(ns.superclass):
                self.children.setdefault(ns.superclass, []).append(ns.path)

    def build(
        self, ns: NamespaceDoc, source: str | None = None, source_url: str | None = None
    ) -> dict[str, Any]:
        """Build the frontmatter fields of a namespace page, in output order."""
        inherited_by = [self._class_link(c) for c in sorted(self.children.get(ns.path, []))]
        fields: dict[str, Any] = {
            "generated": self.generated,
            "title": ns.path,
            "type": ns.type.value,
            "source": source,
            "source_url": source_url,
            "description": first_sentence(ns.docstring),
            "inherits": self._class_link(ns.superclass) or ns.superclass,
            "parent": self._parent(ns.path),
            "inherited_by": [link for link in inherited_by if link],
            "includes": [m.split("::")[-1] for m in ns.includes],
            "extends": [m.split("::")[-1] for m in ns.extends],
            "rbs": ns.rbs_file,
            "tags": self._tags(ns.path),
            "aliases": [ns.name] if ns.name != ns.path else [],
            "constants": [c.name for c in ns.constants],
            "methods": self._methods(ns),
            "related": self._related(ns),
        }
        return {k: v for k, v in fields.items() if v not in (None, [], "")}

    def build_index(self) -> dict[str, Any]:
        return {
            "generated": self.generated,
            "title": self.project_title,
            "tags": ["index", "api-reference"],
        }

    def _documentable(self, path: str) -> bool:
        return not self.namespace_strip or path.startswith(self.namespace_strip)

    def _class_link(self, path: str | None) -> str | None:
        if not path or not self._documentable(path):
            return None
        return f"[[{doc_path_for_namespace(path, self.namespace_strip)}|{path}]]"

    def _parent(self, path: str) -> str | None:
        if "::" not in strip_namespace(path, self.namespace_strip):
            return None
        return self._class_link(path.rpartition("::")[0])

    def _tags(self, path: str) -> list[str]:
        stripped = strip_namespace(path, self.namespace_strip)
        return [to_kebab_case(p) for p in stripped.split("::") if p]

    @staticmethod
    def _methods(ns: NamespaceDoc) -> list[str]:
        class_methods = sorted(
            f"{ns.name}.{m.name}" for m in ns.methods if m.scope is Scope.CLASS
        )
        instance_methods = sorted(m.name for m in ns.methods if m.scope is Scope.INSTANCE)
        return class_methods + instance_methods

    def _related(self, ns: NamespaceDoc) -> list[str]:
        candidates = [s.target for s in ns.see_also]
        candidates += [*ns.includes, *ns.extends]
        if ns.superclass not in (None, "Object", "BasicObject"):
            candidates.append(ns.superclass)
        related: list[str] = []
        for path in candidates:
            resolved = self.linker.resolve(path, ns.path)
            if resolved is None:
                continue
            link = f"[[{resolved}|{path.split('::')[-1]}]]"
            if link not in related:
                related.append(link)
        return related
