"""Logic for rendering the type alias reference page."""

from rbsdoc.document_model import ProjectDoc
from rbsdoc.frontmatter_builder import render_frontmatter
from rbsdoc.md_codeblock import md_codeblock


def render_type_aliases_page(project: ProjectDoc, generated: str) -> str:
    """Render every type alias, grouped by the namespace declaring it."""
    frontmatter = {"generated": generated, "title": "Type Aliases", "tags": ["types"]}
    parts: list[str] = [render_frontmatter(frontmatter), "# Type Aliases", ""]

    for namespace in sorted(project.type_aliases):
        aliases = project.type_aliases[namespace]
        if not aliases:
            continue
        parts += [f"## {namespace or '(top level)'}", ""]
        for alias in sorted(aliases, key=lambda a: a.name):
            parts += [f"### {alias.name}", ""]
            if alias.description:
                parts += [alias.description, ""]
            parts += [md_codeblock(f"type {alias.name} = {alias.definition}", "rbs"), ""]

    return "\n".join(parts).rstrip() + "\n"
