"""Tests for harvesting examples from spec files."""

from pathlib import Path

from rbsdoc.document_model import SpecExampleDoc
from rbsdoc.spec_example_loader import SpecExampleLoader

FIXTURE_TESTS = Path(__file__).parent / "fixtures" / "sample_project" / "test"


def test_loads_lets_subjects_and_behaviors() -> None:
    """Verify snippets and behaviors are keyed by the described class."""
    examples = SpecExampleLoader(FIXTURE_TESTS).load()
    calc = examples["Sample::Calculator"]
    assert calc.lets == [SpecExampleDoc("calc", "Sample::Calculator.new(10)")]
    assert calc.subjects == [SpecExampleDoc("subject", "calc.add(2, 3)")]
    assert calc.behaviors == {
        "#add": ["adds both operands to the total", "returns the new total"],
        ".positive?": ["is true for positive numbers"],
    }
    assert calc.method_examples == {"#add": [SpecExampleDoc("subject", "calc.add(2, 3)")]}


def test_rspec_style_file(tmp_path: Path) -> None:
    """Verify RSpec.describe and named subjects."""
    (tmp_path / "widget_spec.rb").write_text(
        "RSpec.describe Shop::Widget do\n"
        "  subject(:widget) { Shop::Widget.new(size: 2) }\n"
        "\n"
        "  describe '#resize' do\n"
        "    it 'doubles the size' do\n"
        "      expect(widget.resize).to eq(4)\n"
        "    end\n"
        "  end\n"
        "end\n",
        encoding="utf-8",
    )
    examples = SpecExampleLoader(tmp_path).load()
    widget = examples["Shop::Widget"]
    assert widget.subjects == [SpecExampleDoc("widget", "Shop::Widget.new(size: 2)")]
    assert widget.behaviors == {"#resize": ["doubles the size"]}
    assert widget.method_examples == {}


def test_files_without_described_class_are_ignored(tmp_path: Path) -> None:
    """Verify helper files contribute nothing."""
    (tmp_path / "helper_test.rb").write_text("require 'minitest'\n", encoding="utf-8")
    assert SpecExampleLoader(tmp_path).load() == {}


def test_missing_directory(tmp_path: Path) -> None:
    """Verify a missing spec directory yields no examples."""
    assert SpecExampleLoader(tmp_path / "spec").load() == {}
