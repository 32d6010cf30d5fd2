"""Navigable object graph built from Ruby source and its doc comments."""

from __future__ import annotations

from dataclasses import dataclass, field

from rbsdoc.document_model import NamespaceType, Scope, Visibility


@dataclass
class Tag:
    """One ``@tag`` from a doc comment.

    ``pair`` carries the key part of an ``@option`` tag.
    """

    tag_name: str
    text: str = ""
    name: str | None = None
    types: list[str] | None = None
    pair: Tag | None = None
    defaults: list[str] | None = None


@dataclass
class Docstring:
    """Free text of a doc comment plus its tags."""

    text: str = ""
    tags: list[Tag] = field(default_factory=list)

    def __str__(self) -> str:
        return self.text

    def tag(self, name: str) -> Tag | None:
        return next((t for t in self.tags if t.tag_name == name), None)

    def tags_named(self, name: str) -> list[Tag]:
        return [t for t in self.tags if t.tag_name == name]

    def has_tag(self, name: str) -> bool:
        return any(t.tag_name == name for t in self.tags)

    @property
    def is_blank(self) -> bool:
        return not self.text.strip() and not self.tags


@dataclass
class ConstantObject:
    name: str
    value: str
    docstring: Docstring = field(default_factory=Docstring)
    file: str | None = None
    line: int | None = None


@dataclass
class MethodObject:
    """A method as written; parameter names keep their sigils (``*a``, ``k:``)."""

    name: str
    namespace: str
    scope: Scope = Scope.INSTANCE
    visibility: Visibility = Visibility.PUBLIC
    parameters: list[tuple[str, str | None]] = field(default_factory=list)
    signature: str = ""
    source: str | None = None
    file: str | None = None
    line: int | None = None
    docstring: Docstring = field(default_factory=Docstring)

    @property
    def path(self) -> str:
        sep = "." if self.scope is Scope.CLASS else "#"
        return f"{self.namespace}{sep}{self.name}"


@dataclass
class NamespaceObject:
    """A class or module and everything declared directly inside it."""

    name: str
    path: str
    kind: NamespaceType
    superclass: str | None = None
    docstring: Docstring = field(default_factory=Docstring)
    file: str | None = None
    line: int | None = None
    end_line: int | None = None
    constants: list[ConstantObject] = field(default_factory=list)
    methods: list[MethodObject] = field(default_factory=list)
    instance_mixins: list[str] = field(default_factory=list)
    class_mixins: list[str] = field(default_factory=list)

    def meths(
        self, *, scope: Scope | None = None, visibility: Visibility | None = None
    ) -> list[MethodObject]:
        """Return methods filtered by scope and/or visibility."""
        return [
            m
            for m in self.methods
            if (scope is None or m.scope is scope)
            and (visibility is None or m.visibility is visibility)
        ]

    def method(self, name: str, scope: Scope = Scope.INSTANCE) -> MethodObject | None:
        return next(
            (m for m in self.methods if m.name == name and m.scope is scope), None
        )

    def add_method(self, method: MethodObject) -> None:
        """Add ``method``, replacing an earlier definition with the same name."""
        self.methods = [
            m
            for m in self.methods
            if not (m.name == method.name and m.scope is method.scope)
        ]
        self.methods.append(method)


class Registry:
    """All namespaces found while parsing, keyed by qualified path."""

    def __init__(self) -> None:
        self._namespaces: dict[str, NamespaceObject] = {}

    def __len__(self) -> int:
        return len(self._namespaces)

    def __contains__(self, path: object) -> bool:
        return path in self._namespaces

    def add(self, namespace: NamespaceObject) -> NamespaceObject:
        return self._namespaces.setdefault(namespace.path, namespace)

    def get(self, path: str) -> NamespaceObject | None:
        return self._namespaces.get(path)

    def all_namespaces(self) -> list[NamespaceObject]:
        return [self._namespaces[p] for p in sorted(self._namespaces)]

    def resolve(self, name: str, context: str) -> str:
        """Resolve a constant reference the way Ruby's lexical lookup would."""
        if name.startswith("::"):
            return name[2:]
        parts = context.split("::") if context else []
        for depth in range(len(parts), -1, -1):
            candidate = "::".join([*parts[:depth], name])
            if candidate in self._namespaces:
                return candidate
        return name
