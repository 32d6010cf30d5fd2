"""Tests for merging prose and formal types."""

from unittest.mock import MagicMock

from rbsdoc.document_model import ParamDoc, ReturnDoc
from rbsdoc.signature_data import SignatureData, TypeInfo
from rbsdoc.signature_parser import BLOCK_KEY, parse_signature
from rbsdoc.type_merger import (
    TypeMerger,
    merge_descriptions,
    normalize_type,
    types_compatible,
)


def test_formal_type_wins_over_prose() -> None:
    """Verify prose and formal params merge into formal types with prose descriptions."""
    params = [
        ParamDoc("a", type="Object", description="first"),
        ParamDoc("b", type="Object", description="second"),
    ]
    signature = parse_signature("(Integer a, String b) -> Boolean")
    merged = TypeMerger().merge_params(params, signature, "Demo", "call")
    assert merged == [
        ParamDoc("a", type="Integer", description="first"),
        ParamDoc("b", type="String", description="second"),
    ]


def test_formal_type_used_verbatim() -> None:
    """Verify the formal type is copied as written, whatever the prose says."""
    params = [ParamDoc("items", type="Array<String>")]
    signature = SignatureData(
        "(Array[String | Symbol]  items) -> void",
        params={"items": TypeInfo("Array[String | Symbol] ")},
    )
    merged = TypeMerger().merge_params(params, signature, "Demo", "call")
    assert merged[0].type == "Array[String | Symbol] "


def test_params_without_signature_are_unchanged() -> None:
    """Verify prose params pass through when there is no formal data."""
    params = [ParamDoc("x", type="Integer", description="value")]
    merger = TypeMerger()
    assert merger.merge_params(params, None, "Demo", "call") == params
    assert merger.merge_params(params, SignatureData("() -> void"), "Demo", "call") == params


def test_block_param_matches_block_key() -> None:
    """Verify an &block param takes the formal block type."""
    params = [ParamDoc("blk", prefix="&")]
    signature = SignatureData(
        "() { (Integer) -> void } -> void",
        params={BLOCK_KEY: TypeInfo("{ (Integer) -> void }")},
    )
    merged = TypeMerger().merge_params(params, signature, "Demo", "each")
    assert merged[0].type == "{ (Integer) -> void }"
    assert merged[0].prefix == "&"


def test_description_tie_break_prefers_formal() -> None:
    """Verify equal-length descriptions resolve to the formal one."""
    assert merge_descriptions("abcd", "wxyz") == "wxyz"
    assert merge_descriptions("a longer prose text", "short") == "a longer prose text"
    assert merge_descriptions("short", "a longer formal text") == "a longer formal text"


def test_description_fallback_when_one_side_empty() -> None:
    """Verify a missing description on either side yields the other."""
    assert merge_descriptions(None, "formal") == "formal"
    assert merge_descriptions("", "formal") == "formal"
    assert merge_descriptions("prose", None) == "prose"
    assert merge_descriptions("prose", "   ") == "prose"
    assert merge_descriptions(None, None) is None


def test_constructor_keeps_class_return_over_void() -> None:
    """Verify initialize keeps its prose class type when the formal return is void."""
    signature = parse_signature("(Integer initial) -> void")
    returns = ReturnDoc(type="Calculator", description="a new instance of Calculator")
    merged = TypeMerger().merge_return(returns, signature, "Sample::Calculator", "initialize")
    assert merged == returns


def test_void_applies_to_regular_methods() -> None:
    """Verify the void exception is limited to constructors."""
    signature = parse_signature("() -> void")
    merged = TypeMerger().merge_return(ReturnDoc(type="nil"), signature, "Demo", "reset")
    assert merged == ReturnDoc(type="void")


def test_return_from_formal_only() -> None:
    """Verify a formal return is used when no prose tag exists."""
    signature = parse_signature("() -> Integer", "@rbs return: Integer -- the count")
    assert TypeMerger().merge_return(None, signature, "Demo", "count") == ReturnDoc(
        type="Integer", description="The count"
    )
    assert TypeMerger().merge_return(None, None, "Demo", "count") is None


def test_mismatch_is_logged_but_formal_used() -> None:
    """Verify an incompatible prose type triggers one warning."""
    logger = MagicMock()
    merger = TypeMerger(logger)
    params = [ParamDoc("count", type="String")]
    merged = merger.merge_params(params, parse_signature("(Integer count) -> void"), "Demo", "run")
    assert merged[0].type == "Integer"
    logger.warning.assert_called_once()
    assert logger.warning.call_args.args[1:] == (
        "Demo",
        "run",
        "count",
        "String",
        "Integer",
    )


def test_compatible_types_are_not_logged() -> None:
    """Verify equivalent spellings do not produce warnings."""
    logger = MagicMock()
    merger = TypeMerger(logger)
    params = [
        ParamDoc("flag", type="Boolean"),
        ParamDoc("items", type="Array<String>"),
        ParamDoc("opts", type="Hash"),
        ParamDoc("untyped"),
    ]
    signature = parse_signature(
        "(bool flag, Array[String] items, Hash[Symbol, untyped] opts, Integer untyped) -> void"
    )
    merger.merge_params(params, signature, "Demo", "run")
    logger.warning.assert_not_called()


def test_types_compatible_rules() -> None:
    """Verify the equivalence rules used for mismatch detection."""
    assert normalize_type("Hash< Symbol, String >") == "Hash[Symbol,String]"
    assert types_compatible("Boolean", "TrueClass")
    assert types_compatible("String", "String?")
    assert types_compatible(None, "Integer")
    assert not types_compatible("String", "Integer")
    assert not types_compatible("Boolean", "Integer")
