"""Tests for document model helpers and file grouping."""

from pathlib import Path

from rbsdoc.document_model import (
    AttrType,
    ConstantDoc,
    FileDoc,
    MethodDoc,
    NamespaceDoc,
    NamespaceType,
    ProjectDoc,
    Scope,
    Visibility,
)
from rbsdoc.group_by_file import group_by_file, relative_path


def _ns(path: str, kind: NamespaceType = NamespaceType.CLASS, **kwargs) -> NamespaceDoc:
    return NamespaceDoc(name=path.split("::")[-1], path=path, type=kind, **kwargs)


def test_primary_namespace_prefers_file_name_match() -> None:
    """Verify the namespace named after the file is chosen."""
    file = FileDoc(
        path="lib/shop/cart_item.rb",
        namespaces=(_ns("Shop", NamespaceType.MODULE), _ns("Shop::CartItem")),
    )
    assert file.primary_namespace.path == "Shop::CartItem"
    assert file.filename == "cart_item.rb"


def test_primary_namespace_fallback_prefers_modules_then_short_paths() -> None:
    """Verify the tie-breakers when no namespace matches the file name."""
    file = FileDoc(
        path="lib/misc.rb",
        namespaces=(_ns("A::B::C"), _ns("A::D"), _ns("A", NamespaceType.MODULE)),
    )
    assert file.primary_namespace.path == "A"

    classes = FileDoc(
        path="lib/misc.rb",
        namespaces=(
            _ns("X::Big", constants=(ConstantDoc("A", "1"), ConstantDoc("B", "2"))),
            _ns("X::Few"),
        ),
    )
    assert classes.primary_namespace.path == "X::Big"
    assert FileDoc(path="lib/empty.rb").primary_namespace is None


def test_method_and_project_helpers() -> None:
    """Verify derived flags on methods and project lookups."""
    method = MethodDoc(
        "total", Scope.INSTANCE, Visibility.PUBLIC, deprecated="", attr_type=AttrType.READER
    )
    assert method.is_deprecated
    assert method.is_accessor

    project = ProjectDoc(
        "Demo", "", namespaces=(_ns("Demo", NamespaceType.MODULE), _ns("Demo::Item"))
    )
    assert project.find("Demo::Item").is_class
    assert project.find("Missing") is None
    assert [ns.path for ns in project.modules] == ["Demo"]


def test_group_by_file(tmp_path: Path) -> None:
    """Verify grouping, sorting and line counts."""
    lib = tmp_path / "lib"
    lib.mkdir()
    (lib / "b.rb").write_text("class B\nend\n", encoding="utf-8")
    (lib / "a.rb").write_text("module A\n  class Z\n  end\nend\n", encoding="utf-8")
    namespaces = [
        _ns("B", file=str(lib / "b.rb")),
        _ns("A::Z", file=str(lib / "a.rb")),
        _ns("A", NamespaceType.MODULE, file=str(lib / "a.rb")),
        _ns("Floating"),
    ]
    files = group_by_file(namespaces, tmp_path)
    assert [f.path for f in files] == ["lib/a.rb", "lib/b.rb"]
    assert [ns.path for ns in files[0].namespaces] == ["A", "A::Z"]
    assert files[0].line_count == 4
    assert files[1].line_count == 2


def test_relative_path_outside_root(tmp_path: Path) -> None:
    """Verify paths outside the root are returned unchanged."""
    outside = "/somewhere/else.rb"
    assert relative_path(outside, tmp_path) == outside
    assert relative_path(str(tmp_path / "lib" / "x.rb"), tmp_path) == "lib/x.rb"
