"""Utilities for mapping namespace paths to documentation pages."""

from pathlib import Path

from rbsdoc.kebab_case import to_kebab_case


def strip_namespace(path: str, strip: str | None) -> str:
    """Remove the configured ``strip`` prefix from a namespace path."""
    if strip and path.startswith(strip) and path != strip.removesuffix("::"):
        return path[len(strip) :]
    return path


def doc_path_for_namespace(path: str, strip: str | None = None) -> str:
    """Generate the page path for a namespace.

    ``Sample::HTTPClient`` with strip ``Sample::`` becomes ``http-client``.
    """
    parts = strip_namespace(path, strip).split("::")
    return "/".join(to_kebab_case(p) for p in parts if p)


def output_file_for_namespace(out_root: Path, path: str, strip: str | None = None) -> Path:
    """Determine the output markdown file for a namespace page."""
    # Sample::Calculator -> out_root/calculator.md
    return out_root / (doc_path_for_namespace(path, strip) + ".md")
