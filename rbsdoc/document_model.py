"""Immutable semantic document model produced by the extractor.

Every record is a frozen dataclass built once per invocation. Sequences are
tuples.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path

from rbsdoc.kebab_case import to_snake_case


class Scope(Enum):
    """Whether a method is defined on the class object or on instances."""

    CLASS = "class"
    INSTANCE = "instance"


class Visibility(Enum):
    """Ruby method visibility."""

    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"


class AttrType(Enum):
    """Trivial accessor shape detected from a method's source."""

    READER = "reader"
    WRITER = "writer"
    NONE = "none"


class AttributeMode(Enum):
    """Access mode of a synthesized attribute."""

    READ = "read"
    WRITE = "write"
    READ_WRITE = "read_write"


class NamespaceType(Enum):
    """Kind of namespace node."""

    CLASS = "class"
    MODULE = "module"


@dataclass(frozen=True)
class ParamDoc:
    """A single method parameter. ``name`` never carries a sigil."""

    name: str
    type: str | None = None
    description: str | None = None
    default: str | None = None
    prefix: str | None = None  # "*", "**" or "&"


@dataclass(frozen=True)
class ReturnDoc:
    type: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class OptionDoc:
    """One documented key of a hash/record parameter."""

    param_name: str
    key: str
    type: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class YieldDoc:
    """Block contract of a method."""

    description: str | None = None
    params: tuple[ParamDoc, ...] = ()
    return_type: str | None = None
    return_desc: str | None = None
    block_type: str | None = None


@dataclass(frozen=True)
class RaiseDoc:
    type: str
    description: str | None = None


@dataclass(frozen=True)
class OverloadDoc:
    signature: str
    description: str | None = None


@dataclass(frozen=True)
class ExampleDoc:
    """An ``@example`` block; ``name`` is its optional title."""

    name: str | None
    code: str


@dataclass(frozen=True)
class SeeDoc:
    target: str
    text: str | None = None


@dataclass(frozen=True)
class SpecExampleDoc:
    """A ``let``/``subject`` snippet lifted from a spec file."""

    name: str
    code: str


@dataclass(frozen=True)
class IvarDoc:
    name: str
    type: str
    description: str | None = None


@dataclass(frozen=True)
class ConstantDoc:
    name: str
    value: str | None
    type: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class TypeAliasDoc:
    """An RBS ``type name = definition`` declaration."""

    name: str
    definition: str
    description: str | None = None
    namespace: str = ""
    file: str | None = None
    line: int | None = None


@dataclass(frozen=True)
class MethodDoc:
    """Fully merged documentation for one method.

    ``deprecated`` is ``None`` when the tag is absent, ``""`` when the tag is
    present without text, and the tag text otherwise.
    """

    name: str
    scope: Scope
    visibility: Visibility
    signature: str | None = None
    docstring: str = ""
    params: tuple[ParamDoc, ...] = ()
    options: tuple[OptionDoc, ...] = ()
    returns: ReturnDoc | None = None
    yields: YieldDoc | None = None
    raises: tuple[RaiseDoc, ...] = ()
    examples: tuple[ExampleDoc, ...] = ()
    notes: tuple[str, ...] = ()
    see_also: tuple[SeeDoc, ...] = ()
    api: str | None = None
    deprecated: str | None = None
    abstract: bool = False
    since: str | None = None
    todo: str | None = None
    rbs_signature: str | None = None
    overloads: tuple[OverloadDoc, ...] = ()
    source: str | None = None
    source_body_lines: int = 0
    attr_type: AttrType = AttrType.NONE
    file: str | None = None
    line: int | None = None
    spec_examples: tuple[SpecExampleDoc, ...] = ()
    spec_behaviors: tuple[str, ...] = ()

    @property
    def is_deprecated(self) -> bool:
        return self.deprecated is not None

    @property
    def is_accessor(self) -> bool:
        return self.attr_type is not AttrType.NONE


@dataclass(frozen=True)
class AttributeDoc:
    """A field exposed through a reader and/or writer method."""

    name: str
    type: str | None
    description: str | None
    mode: AttributeMode
    reader: MethodDoc | None = None
    writer: MethodDoc | None = None


@dataclass(frozen=True)
class NamespaceDoc:
    """A documented class or module."""

    name: str
    path: str
    type: NamespaceType
    superclass: str | None = None
    docstring: str = ""
    examples: tuple[ExampleDoc, ...] = ()
    notes: tuple[str, ...] = ()
    see_also: tuple[SeeDoc, ...] = ()
    api: str | None = None
    deprecated: str | None = None
    abstract: bool = False
    since: str | None = None
    todo: str | None = None
    includes: tuple[str, ...] = ()
    extends: tuple[str, ...] = ()
    constants: tuple[ConstantDoc, ...] = ()
    type_aliases: tuple[TypeAliasDoc, ...] = ()
    ivars: tuple[IvarDoc, ...] = ()
    attributes: tuple[AttributeDoc, ...] = ()
    methods: tuple[MethodDoc, ...] = ()
    private_methods: tuple[MethodDoc, ...] = ()
    file: str | None = None
    line: int | None = None
    end_line: int | None = None
    rbs_file: str | None = None
    referenced_types: tuple[TypeAliasDoc, ...] = ()
    spec_examples: tuple[SpecExampleDoc, ...] = ()
    needs_regeneration: bool = True

    @property
    def is_class(self) -> bool:
        return self.type is NamespaceType.CLASS

    @property
    def is_module(self) -> bool:
        return self.type is NamespaceType.MODULE

    @property
    def is_deprecated(self) -> bool:
        return self.deprecated is not None

    @property
    def member_count(self) -> int:
        return (
            len(self.methods)
            + len(self.private_methods)
            + len(self.attributes)
            + len(self.constants)
        )


@dataclass(frozen=True)
class FileDoc:
    """All namespaces defined in one source file."""

    path: str
    namespaces: tuple[NamespaceDoc, ...] = ()
    type_aliases: tuple[TypeAliasDoc, ...] = ()
    line_count: int = 0

    @property
    def filename(self) -> str:
        return Path(self.path).name

    @property
    def primary_namespace(self) -> NamespaceDoc | None:
        """Pick the namespace that best represents this file."""
        if not self.namespaces:
            return None
        base = Path(self.path).stem
        candidates = [ns for ns in self.namespaces if to_snake_case(ns.name) == base]
        if not candidates:
            candidates = list(self.namespaces)
        return min(
            candidates,
            key=lambda ns: (not ns.is_module, len(ns.path), -ns.member_count),
        )


@dataclass(frozen=True)
class ProjectDoc:
    """Root of the semantic model."""

    title: str
    description: str
    namespaces: tuple[NamespaceDoc, ...] = ()
    files: tuple[FileDoc, ...] = ()
    type_aliases: dict[str, tuple[TypeAliasDoc, ...]] = field(default_factory=dict)
    generated_at: datetime | None = None

    @property
    def classes(self) -> tuple[NamespaceDoc, ...]:
        return tuple(ns for ns in self.namespaces if ns.is_class)

    @property
    def modules(self) -> tuple[NamespaceDoc, ...]:
        return tuple(ns for ns in self.namespaces if ns.is_module)

    def find(self, path: str) -> NamespaceDoc | None:
        """Return the namespace with the given qualified path."""
        for ns in self.namespaces:
            if ns.path == path:
                return ns
        return None
