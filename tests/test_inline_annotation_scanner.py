"""Tests for the rbs-inline comment scanner."""

from pathlib import Path

from rbsdoc.inline_annotation_scanner import InlineAnnotationScanner, build_signature
from rbsdoc.signature_data import TypeInfo
from rbsdoc.signature_parser import BLOCK_KEY

FIXTURE_LIB = Path(__file__).parent / "fixtures" / "sample_project" / "lib" / "sample"


def _scan(tmp_path: Path, source: str):
    file = tmp_path / "subject.rb"
    file.write_text(source, encoding="utf-8")
    return InlineAnnotationScanner().scan([file]), str(file.resolve())


def test_rbs_comments_build_signature() -> None:
    """Verify @rbs lines before a def become that method's signature."""
    result = InlineAnnotationScanner().scan([FIXTURE_LIB / "calculator.rb"])
    sig = result.signatures["Sample::Calculator"]["add"]
    assert sig.full == "(Integer a, Integer b) -> Integer"
    assert sig.params["a"] == TypeInfo("Integer", "The first operand")
    assert sig.returns == TypeInfo("Integer", "The new total")


def test_method_type_comment_and_class_method() -> None:
    """Verify #: signatures and self. methods are keyed by bare name."""
    result = InlineAnnotationScanner().scan([FIXTURE_LIB / "calculator.rb"])
    sigs = result.signatures["Sample::Calculator"]
    assert sigs["reset"].full == "() -> void"
    assert sigs["positive?"].returns == TypeInfo("bool")
    assert sigs["round_value"].params["value"] == TypeInfo("Float", "Raw number")
    assert "subtract" not in sigs


def test_block_annotation_and_alias_block() -> None:
    """Verify block params and @rbs! type aliases."""
    result = InlineAnnotationScanner().scan([FIXTURE_LIB / "calculator.rb"])
    stats = result.signatures["Sample::Calculator"]["compute_stats"]
    assert stats.params[BLOCK_KEY].type == "^(Symbol) -> void"
    assert stats.full == (
        "(Array[Integer] values, { precision: Integer } opts) "
        "{ (Symbol) -> void } -> Hash[Symbol, Float]"
    )
    (alias,) = result.type_aliases["Sample::Calculator"]
    assert alias.name == "mode"
    assert alias.definition == ":fast | :precise"
    assert alias.namespace == "Sample::Calculator"


def test_file_namespaces_only_for_annotated_files() -> None:
    """Verify files without annotations are not mapped to namespaces."""
    files = [FIXTURE_LIB / "calculator.rb", FIXTURE_LIB / "formatter.rb"]
    result = InlineAnnotationScanner().scan(files)
    calculator = str((FIXTURE_LIB / "calculator.rb").resolve())
    assert result.file_namespaces == {calculator: ["Sample", "Sample::Calculator"]}


def test_nested_namespaces_close_at_matching_indent(tmp_path: Path) -> None:
    """Verify an inner end never closes the outer namespace."""
    result, _ = _scan(
        tmp_path,
        "module Outer\n"
        "  class Inner\n"
        "    def helper\n"
        "    end\n"
        "  end\n"
        "\n"
        "  # @rbs return: String\n"
        "  def name\n"
        "  end\n"
        "end\n",
    )
    assert "name" in result.signatures["Outer"]
    assert result.signatures["Outer::Inner"] == {}


def test_blank_line_discards_pending_annotations(tmp_path: Path) -> None:
    """Verify annotations separated from the def by a blank line are dropped."""
    result, _ = _scan(
        tmp_path,
        "class Thing\n"
        "  # @rbs value: Integer\n"
        "\n"
        "  def set(value)\n"
        "  end\n"
        "end\n",
    )
    assert result.signatures["Thing"] == {}


def test_attribute_and_ivar_annotations(tmp_path: Path) -> None:
    """Verify trailing attr types, @rbs! attrs and @rbs ivars."""
    result, _ = _scan(
        tmp_path,
        "class Box\n"
        "  attr_reader :width, :height #: Integer\n"
        "\n"
        "  # @rbs!\n"
        "  #   # Human readable label\n"
        "  #   attr_accessor label: String\n"
        "  #   @cache: Hash[String, Integer]\n"
        "\n"
        "  # @rbs @size: Integer -- cached size\n"
        "end\n",
    )
    attrs = result.attribute_types["Box"]
    assert attrs["width"] == TypeInfo("Integer")
    assert attrs["height"] == TypeInfo("Integer")
    assert attrs["label"] == TypeInfo("String", "Human readable label")
    ivars = result.ivar_types["Box"]
    assert ivars["cache"] == TypeInfo("Hash[String, Integer]")
    assert ivars["size"] == TypeInfo("Integer", "cached size")


def test_multiline_record_members(tmp_path: Path) -> None:
    """Verify Data.define member annotations become attribute types."""
    result, _ = _scan(
        tmp_path,
        "module Shapes\n"
        "  Point = Data.define(\n"
        "    :x, #: Integer\n"
        "    :y, #: Integer\n"
        "  )\n"
        "end\n",
    )
    assert result.attribute_types["Shapes::Point"] == {
        "x": TypeInfo("Integer"),
        "y": TypeInfo("Integer"),
    }


def test_one_line_class_is_not_opened(tmp_path: Path) -> None:
    """Verify `class X < Y; end` does not leave a namespace open."""
    result, _ = _scan(
        tmp_path,
        "module Errors\n"
        "  class Failure < StandardError; end\n"
        "\n"
        "  # @rbs return: bool\n"
        "  def self.ok?\n"
        "  end\n"
        "end\n",
    )
    assert "ok?" in result.signatures["Errors"]
    assert "Errors::Failure" not in result.signatures


def test_unreadable_file_is_skipped(tmp_path: Path) -> None:
    """Verify a missing file does not abort the scan."""
    result = InlineAnnotationScanner().scan([tmp_path / "missing.rb"])
    assert result.signatures == {}


def test_build_signature_without_return() -> None:
    """Verify the void default and raises extraction."""
    sig = build_signature(
        {"name": TypeInfo("String"), "raises": TypeInfo("KeyError")}
    )
    assert sig.full == "(String name) -> void"
    assert sig.returns is None
    assert sig.raises == "KeyError"
