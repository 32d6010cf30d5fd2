"""Data models for parsed formal type signatures."""

from dataclasses import dataclass, field

from rbsdoc.document_model import TypeAliasDoc


@dataclass(frozen=True)
class TypeInfo:
    """A formal type with an optional description."""

    type: str
    desc: str | None = None


@dataclass(frozen=True)
class BlockType:
    """Positional parameter types and return type of a block signature."""

    param_types: list[str]
    return_type: str | None


@dataclass(frozen=True)
class SignatureData:
    """Structured form of one method signature."""

    full: str
    params: dict[str, TypeInfo] = field(default_factory=dict)
    returns: TypeInfo | None = None
    raises: str | None = None
    overloads: tuple[str, ...] = ()


@dataclass
class TypeSources:
    """Formal type information gathered from signature files or annotations.

    Every map is keyed by namespace path first.
    """

    signatures: dict[str, dict[str, SignatureData]] = field(default_factory=dict)
    ivars: dict[str, dict[str, TypeInfo]] = field(default_factory=dict)
    attrs: dict[str, dict[str, TypeInfo]] = field(default_factory=dict)
    constants: dict[str, dict[str, str]] = field(default_factory=dict)
    type_aliases: dict[str, list[TypeAliasDoc]] = field(default_factory=dict)
    overloads: dict[str, dict[str, list[str]]] = field(default_factory=dict)

    def signature_for(self, namespace: str, method: str) -> SignatureData | None:
        return self.signatures.get(namespace, {}).get(method)
