"""Tests for namespace page paths."""

from pathlib import Path

from rbsdoc.doc_path_for_namespace import (
    doc_path_for_namespace,
    output_file_for_namespace,
    strip_namespace,
)


def test_doc_path_for_namespace() -> None:
    """Verify kebab-cased segments with an optional stripped prefix."""
    assert doc_path_for_namespace("Sample::HTTPClient", "Sample::") == "http-client"
    assert doc_path_for_namespace("Sample::Calculator::Error", "Sample::") == "calculator/error"
    assert doc_path_for_namespace("Sample::Calculator") == "sample/calculator"
    assert doc_path_for_namespace("Sample", "Sample::") == "sample"


def test_strip_namespace() -> None:
    """Verify only a matching prefix is removed."""
    assert strip_namespace("Sample::Calculator", "Sample::") == "Calculator"
    assert strip_namespace("Other::Calculator", "Sample::") == "Other::Calculator"
    assert strip_namespace("Sample::Calculator", None) == "Sample::Calculator"


def test_output_file_for_namespace() -> None:
    """Verify the page lands below the output root."""
    assert output_file_for_namespace(Path("docs"), "Sample::Calculator", "Sample::") == Path(
        "docs/calculator.md"
    )
