"""Logic for rendering every page of a project."""

from pathlib import Path
from typing import Any

from rbsdoc.class_linker import ClassLinker
from rbsdoc.doc_path_for_namespace import doc_path_for_namespace
from rbsdoc.document_model import ProjectDoc
from rbsdoc.frontmatter_builder import FrontmatterBuilder
from rbsdoc.github_linker import GithubLinker
from rbsdoc.group_by_file import relative_path
from rbsdoc.post_process import post_process
from rbsdoc.render_index_page import render_index_page
from rbsdoc.render_namespace_page import render_namespace_page
from rbsdoc.render_type_aliases_page import render_type_aliases_page


def namespace_strip_for(config: dict[str, Any]) -> str | None:
    """Return the prefix removed from page paths."""
    return config.get("namespace_strip") or config.get("namespace_filter")


def render_project(
    project: ProjectDoc, config: dict[str, Any], github: GithubLinker | None = None
) -> dict[str, str]:
    """Render ``project`` into ``{output-relative path: markdown}``.

    Namespaces marked ``needs_regeneration=False`` are skipped; the index
    always lists every namespace.
    """
    strip = namespace_strip_for(config)
    root = Path(config.get("root", "."))
    linker = ClassLinker(strip, config.get("skip_types"))
    linker.register(project)
    frontmatter = FrontmatterBuilder(
        linker,
        namespace_strip=strip,
        project_title=config.get("project_title", project.title),
        generated_at=project.generated_at,
    )
    frontmatter.register_inheritance(project)

    pages: dict[str, str] = {
        "index.md": render_index_page(project, frontmatter.build_index(), strip)
    }
    if any(project.type_aliases.values()):
        pages["types.md"] = render_type_aliases_page(project, frontmatter.generated)

    for ns in project.namespaces:
        if not ns.needs_regeneration:
            continue
        source = relative_path(ns.file, root) if ns.file else None
        source_url = github.url(source, ns.line, ns.end_line) if github and source else None
        page = render_namespace_page(
            ns,
            linker,
            frontmatter.build(ns, source, source_url),
            include_specs=config.get("include_specs", False),
            inline_source_threshold=config.get("inline_source_threshold", 10),
        )
        pages[doc_path_for_namespace(ns.path, strip) + ".md"] = page

    return {path: post_process(content) for path, content in pages.items()}
