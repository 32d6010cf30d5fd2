"""Tests for wikilink generation."""

from rbsdoc.class_linker import ClassLinker
from rbsdoc.document_model import NamespaceDoc, NamespaceType, ProjectDoc


def _linker(*paths: str, skip: list[str] | None = None) -> ClassLinker:
    project = ProjectDoc(
        "Demo",
        "",
        namespaces=tuple(
            NamespaceDoc(name=p.split("::")[-1], path=p, type=NamespaceType.CLASS) for p in paths
        ),
    )
    linker = ClassLinker("Sample::", skip)
    linker.register(project)
    return linker


def test_link_known_and_unknown() -> None:
    """Verify known classes link and others fall back to short names."""
    linker = _linker("Sample::Calculator")
    assert linker.known_class("Sample::Calculator")
    assert linker.link("Sample::Calculator") == "[[calculator|Calculator]]"
    assert linker.link("Calculator") == "[[calculator|Calculator]]"
    assert linker.link("Other::Thing") == "Thing"


def test_skip_types_never_link() -> None:
    """Verify core types are left as text even when documented."""
    linker = _linker("Sample::String", skip=["String"])
    assert linker.link("String") == "String"
    assert linker.linkify_type("String") == "`String`"


def test_resolve_relative_to_context() -> None:
    """Verify partial paths resolve against the enclosing namespaces."""
    linker = _linker("Shop::Types::Money", "Shop::Cart")
    assert linker.resolve("Types::Money", "Shop::Cart") == "shop/types/money"
    assert linker.resolve("::Shop::Cart") == "shop/cart"
    assert linker.resolve("Nope", "Shop::Cart") is None


def test_linkify_docstring() -> None:
    """Verify {Class} references become links or plain names."""
    linker = _linker("Sample::Calculator")
    text = "See {Calculator} and {Missing}, not {#method}."
    assert linker.linkify_docstring(text, "Sample::Formatter") == (
        "See [[calculator|Calculator]] and Missing, not {#method}."
    )


def test_linkify_type() -> None:
    """Verify text is backticked while links stay bare."""
    linker = _linker("Sample::Calculator", skip=["Array"])
    assert linker.linkify_type("Array[Calculator]?") == "`Array[`[[calculator|Calculator]]`]?`"
    assert linker.linkify_type(None) == "`untyped`"
    assert linker.linkify_type("Integer | nil") == "`Integer | nil`"
