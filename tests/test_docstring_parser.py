"""Tests for YARD comment parsing."""

from rbsdoc.docstring_parser import extract_types, parse_docstring


def _lines(text: str) -> list[str]:
    return [" " + line if line else "" for line in text.splitlines()]


def test_text_and_param_tags() -> None:
    """Verify free text and both @param orders."""
    doc = parse_docstring(
        _lines(
            "Adds numbers.\n"
            "\n"
            "More detail here.\n"
            "@param a [Integer] the first\n"
            "@param [String] b the second"
        )
    )
    assert doc.text == "Adds numbers.\n\nMore detail here."
    first, second = doc.tags_named("param")
    assert (first.name, first.types, first.text) == ("a", ["Integer"], "the first")
    assert (second.name, second.types, second.text) == ("b", ["String"], "the second")


def test_multiline_tag_continuation() -> None:
    """Verify indented lines continue the previous tag."""
    doc = parse_docstring(
        _lines("@return [Hash<Symbol, String>] a mapping\n  of names to labels\nTrailing text")
    )
    tag = doc.tag("return")
    assert tag.types == ["Hash<Symbol, String>"]
    assert tag.text == "a mapping of names to labels"
    assert doc.text == "Trailing text"


def test_example_keeps_code_layout() -> None:
    """Verify @example titles and dedented code."""
    doc = parse_docstring(_lines("@example Basic usage\n  calc = Calc.new\n    calc.add(1)"))
    example = doc.tag("example")
    assert example.name == "Basic usage"
    assert example.text == "calc = Calc.new\n  calc.add(1)"


def test_option_tag() -> None:
    """Verify @option key, type, default and description."""
    doc = parse_docstring(_lines("@option opts [Integer] :precision (2) digits to keep"))
    tag = doc.tag("option")
    assert tag.name == "opts"
    assert tag.pair.name == "precision"
    assert tag.pair.types == ["Integer"]
    assert tag.pair.defaults == ["2"]
    assert tag.pair.text == "digits to keep"


def test_simple_and_flag_tags() -> None:
    """Verify raise, see, deprecated without text and abstract."""
    doc = parse_docstring(
        _lines(
            "@raise [ArgumentError, KeyError] when invalid\n"
            "@see Sample::Formatter for output\n"
            "@deprecated\n"
            "@abstract\n"
            "@since 1.2"
        )
    )
    assert doc.tag("raise").types == ["ArgumentError", "KeyError"]
    see = doc.tag("see")
    assert (see.name, see.text) == ("Sample::Formatter", "for output")
    assert doc.tag("deprecated").text == ""
    assert doc.has_tag("abstract")
    assert doc.tag("since").text == "1.2"


def test_extract_types() -> None:
    """Verify leading type lists are split at top level."""
    assert extract_types("[Array<String>, nil] rest") == (["Array<String>", "nil"], "rest")
    assert extract_types("no types") == (None, "no types")
    assert extract_types("[unclosed") == (None, "[unclosed")


def test_empty_comment_is_blank() -> None:
    """Verify an empty comment yields a blank docstring."""
    assert parse_docstring([]).is_blank
