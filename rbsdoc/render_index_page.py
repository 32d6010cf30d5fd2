"""Logic for rendering the documentation index page."""

from rbsdoc.doc_path_for_namespace import doc_path_for_namespace
from rbsdoc.document_model import NamespaceDoc, ProjectDoc
from rbsdoc.frontmatter_builder import first_sentence, render_frontmatter


def _entry(ns: NamespaceDoc, strip: str | None) -> str:
    line = f"- [[{doc_path_for_namespace(ns.path, strip)}|{ns.path}]]"
    summary = first_sentence(ns.docstring)
    return f"{line} — {summary}" if summary else line


def render_index_page(
    project: ProjectDoc, frontmatter: dict, namespace_strip: str | None = None
) -> str:
    """Render the index listing every documented class and module."""
    parts: list[str] = [render_frontmatter(frontmatter), f"# {project.title}", ""]
    if project.description:
        parts += [project.description, ""]

    for heading, group in (("Classes", project.classes), ("Modules", project.modules)):
        if not group:
            continue
        parts += [f"## {heading}", ""]
        parts += [_entry(ns, namespace_strip) for ns in sorted(group, key=lambda n: n.path)]
        parts.append("")

    return "\n".join(parts).rstrip() + "\n"
