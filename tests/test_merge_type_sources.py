"""Tests for combining inline and generated type sources."""

from rbsdoc.document_model import TypeAliasDoc
from rbsdoc.inline_annotation_scanner import InlineScanResult
from rbsdoc.merge_type_sources import merge_type_sources
from rbsdoc.signature_data import SignatureData, TypeInfo, TypeSources


def test_generated_signature_wins() -> None:
    """Verify the generated signature replaces the inline one per method."""
    inline = InlineScanResult(
        signatures={
            "App::User": {
                "save": SignatureData("() -> void"),
                "name": SignatureData("() -> String"),
            }
        }
    )
    generated = TypeSources(signatures={"App::User": {"save": SignatureData("() -> bool")}})
    merged = merge_type_sources(inline, generated)
    assert merged.signature_for("App::User", "save").full == "() -> bool"
    assert merged.signature_for("App::User", "name").full == "() -> String"


def test_attrs_ivars_and_generated_only_maps() -> None:
    """Verify per-key overlay for attrs and ivars; constants come from files only."""
    inline = InlineScanResult(
        attribute_types={"Box": {"width": TypeInfo("Integer"), "label": TypeInfo("String")}},
        ivar_types={"Box": {"cache": TypeInfo("Hash[String, Integer]")}},
    )
    generated = TypeSources(
        attrs={"Box": {"width": TypeInfo("Float")}},
        constants={"Box": {"LIMIT": "Integer"}},
        overloads={"Box": {"fit": ["(Integer) -> bool"]}},
    )
    merged = merge_type_sources(inline, generated)
    assert merged.attrs["Box"] == {"width": TypeInfo("Float"), "label": TypeInfo("String")}
    assert merged.ivars["Box"] == {"cache": TypeInfo("Hash[String, Integer]")}
    assert merged.constants == {"Box": {"LIMIT": "Integer"}}
    assert merged.overloads == {"Box": {"fit": ["(Integer) -> bool"]}}


def test_type_aliases_merged_by_name() -> None:
    """Verify same-named aliases are replaced and others are kept."""
    inline = InlineScanResult(
        type_aliases={
            "App": [
                TypeAliasDoc("id", "Integer", namespace="App"),
                TypeAliasDoc("tag", "Symbol", namespace="App"),
            ]
        }
    )
    generated = TypeSources(
        type_aliases={
            "App": [TypeAliasDoc("id", "String", namespace="App")],
            "Other": [TypeAliasDoc("key", "Symbol", namespace="Other")],
        }
    )
    merged = merge_type_sources(inline, generated)
    assert [(a.name, a.definition) for a in merged.type_aliases["App"]] == [
        ("id", "String"),
        ("tag", "Symbol"),
    ]
    assert [a.name for a in merged.type_aliases["Other"]] == ["key"]


def test_inputs_are_not_mutated() -> None:
    """Verify merging copies the nested maps."""
    inline = InlineScanResult(signatures={"A": {"x": SignatureData("() -> void")}})
    generated = TypeSources(signatures={"A": {"y": SignatureData("() -> void")}})
    merge_type_sources(inline, generated)
    assert set(inline.signatures["A"]) == {"x"}
    assert set(generated.signatures["A"]) == {"y"}
