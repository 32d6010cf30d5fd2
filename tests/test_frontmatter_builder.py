"""Tests for page frontmatter."""

from datetime import datetime, timezone

import yaml

from rbsdoc.class_linker import ClassLinker
from rbsdoc.document_model import (
    ConstantDoc,
    MethodDoc,
    NamespaceDoc,
    NamespaceType,
    ProjectDoc,
    Scope,
    SeeDoc,
    Visibility,
)
from rbsdoc.frontmatter_builder import (
    FrontmatterBuilder,
    first_sentence,
    render_frontmatter,
    timestamp,
)

MOMENT = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def _class(path: str, **kwargs) -> NamespaceDoc:
    return NamespaceDoc(name=path.split("::")[-1], path=path, type=NamespaceType.CLASS, **kwargs)


CALCULATOR = _class(
    "Sample::Calculator",
    superclass="Sample::Base",
    docstring="Adds **numbers** quickly. More text follows.",
    includes=("Sample::Helpers",),
    constants=(ConstantDoc("VERSION", '"1.0"'),),
    methods=(
        MethodDoc("initialize", Scope.INSTANCE, Visibility.PUBLIC),
        MethodDoc("add", Scope.INSTANCE, Visibility.PUBLIC),
        MethodDoc("positive?", Scope.CLASS, Visibility.PUBLIC),
    ),
    see_also=(SeeDoc("Sample::Formatter"),),
    rbs_file="sig/sample/calculator.rbs",
)
PROJECT = ProjectDoc(
    "Sample",
    "",
    namespaces=(
        _class("Sample::Base"),
        CALCULATOR,
        _class("Sample::Calculator::Error", superclass="StandardError"),
        _class("Sample::Formatter"),
        NamespaceDoc(name="Helpers", path="Sample::Helpers", type=NamespaceType.MODULE),
    ),
)


def _builder() -> FrontmatterBuilder:
    linker = ClassLinker("Sample::")
    linker.register(PROJECT)
    builder = FrontmatterBuilder(linker, "Sample::", "Sample Docs", MOMENT)
    builder.register_inheritance(PROJECT)
    return builder


def test_build_namespace_fields() -> None:
    """Verify field values and their order; empty fields are dropped."""
    fields = _builder().build(CALCULATOR, "lib/sample/calculator.rb", "https://x/y#L1-L9")
    assert list(fields) == [
        "generated",
        "title",
        "type",
        "source",
        "source_url",
        "description",
        "inherits",
        "includes",
        "rbs",
        "tags",
        "aliases",
        "constants",
        "methods",
        "related",
    ]
    assert fields["generated"] == "2024-01-02T03:04:05Z"
    assert fields["description"] == "Adds numbers quickly."
    assert fields["inherits"] == "[[base|Sample::Base]]"
    assert fields["includes"] == ["Helpers"]
    assert fields["tags"] == ["calculator"]
    assert fields["aliases"] == ["Calculator"]
    assert fields["methods"] == ["Calculator.positive?", "add", "initialize"]
    assert fields["related"] == ["[[formatter|Formatter]]", "[[helpers|Helpers]]", "[[base|Base]]"]


def test_inheritance_and_parent_links() -> None:
    """Verify inherited_by on parents and parent links on nested classes."""
    builder = _builder()
    base = builder.build(PROJECT.find("Sample::Base"))
    assert base["inherited_by"] == ["[[calculator|Sample::Calculator]]"]

    error = builder.build(PROJECT.find("Sample::Calculator::Error"))
    assert error["parent"] == "[[calculator|Sample::Calculator]]"
    assert error["inherits"] == "StandardError"
    assert error["tags"] == ["calculator", "error"]
    assert "related" not in error


def test_build_index() -> None:
    """Verify the index page metadata."""
    assert _builder().build_index() == {
        "generated": "2024-01-02T03:04:05Z",
        "title": "Sample Docs",
        "tags": ["index", "api-reference"],
    }


def test_render_frontmatter_round_trips() -> None:
    """Verify the YAML block is delimited and parseable."""
    fields = {"title": "Sample::Calculator", "inherits": "[[base|Sample::Base]]", "tags": ["a", "b"]}
    rendered = render_frontmatter(fields)
    assert rendered.startswith("---\n")
    assert rendered.endswith("---\n")
    assert yaml.safe_load(rendered.strip("-\n")) == fields
    assert list(yaml.safe_load(rendered.strip("-\n"))) == ["title", "inherits", "tags"]


def test_first_sentence() -> None:
    """Verify the summary sentence is taken from the first paragraph."""
    assert first_sentence("First para\nline two.\n\nSecond.") == "First para line two."
    assert first_sentence("Uses `code` and {Ref}. Then more.") == "Uses code and Ref."
    assert first_sentence("[[a/b|Thing]] does stuff.") == "Thing does stuff."
    assert first_sentence("No period here") == "No period here"
    assert first_sentence("   ") is None


def test_timestamp_is_utc() -> None:
    """Verify timestamps are rendered in UTC with a Z suffix."""
    assert timestamp(MOMENT) == "2024-01-02T03:04:05Z"
