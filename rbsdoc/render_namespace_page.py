"""Logic for rendering class and module pages."""

from rbsdoc.class_linker import ClassLinker
from rbsdoc.document_model import (
    AttributeDoc,
    AttributeMode,
    ConstantDoc,
    NamespaceDoc,
)
from rbsdoc.frontmatter_builder import render_frontmatter
from rbsdoc.md_codeblock import md_codeblock
from rbsdoc.md_table import md_table
from rbsdoc.render_method import render_method

MAX_TABLE_VALUE = 60
MAX_TABLE_DESCRIPTION = 80
MODE_LABELS = {
    AttributeMode.READ: "read",
    AttributeMode.WRITE: "write",
    AttributeMode.READ_WRITE: "read/write",
}


def _strip_freeze(value: str | None) -> str:
    return (value or "").removesuffix(".freeze")


def _simple_constant(constant: ConstantDoc) -> bool:
    desc = constant.description or ""
    return (
        (constant.value or "").count("\n") == 0
        and desc.count("\n") <= 1
        and len(desc) <= MAX_TABLE_DESCRIPTION
    )


def render_namespace_page(
    ns: NamespaceDoc,
    linker: ClassLinker,
    frontmatter: dict,
    *,
    include_specs: bool = False,
    inline_source_threshold: int = 10,
) -> str:
    """Render a namespace page in Markdown."""
    parts: list[str] = [render_frontmatter(frontmatter), f"# {ns.path}", ""]

    if ns.deprecated is not None:
        note = f": {ns.deprecated}" if ns.deprecated else ""
        parts += [f"> **Deprecated**{note}", ""]
    if ns.abstract:
        parts += ["> **Abstract:** meant to be subclassed, not instantiated.", ""]
    if ns.superclass:
        parts += [f"**Inherits:** {linker.link(ns.superclass, ns.path)}", ""]
    if ns.docstring:
        parts += [linker.linkify_docstring(ns.docstring, ns.path), ""]
    for note in ns.notes:
        parts += [f"> **Note:** {note}", ""]

    parts.extend(_render_mixins(ns, linker))

    for example in ns.examples:
        label = f"Example: {example.name}" if example.name else "Example"
        parts += [f"**{label}:**", "", md_codeblock(example.code), ""]
    if include_specs and ns.spec_examples:
        parts += ["## Usage Examples", ""]
        for example in ns.spec_examples:
            parts += [f"**{example.name}:**", "", md_codeblock(example.code), ""]

    parts.extend(_render_constants(ns.constants))
    parts.extend(_render_types(ns))
    parts.extend(_render_attributes(ns.attributes, linker, ns.path))

    if ns.methods:
        parts += ["## Methods", ""]
        for method in ns.methods:
            parts += [
                render_method(
                    method,
                    ns.name,
                    linker,
                    context=ns.path,
                    include_specs=include_specs,
                    inline_source_threshold=inline_source_threshold,
                ),
                "",
            ]

    if ns.private_methods:
        names = ", ".join(f"`{m.name}`" for m in ns.private_methods)
        parts += ["## Private Methods", "", names, ""]

    if ns.see_also:
        parts += ["## See Also", ""]
        for see in ns.see_also:
            line = f"- {linker.link(see.target, ns.path)}"
            parts.append(f"{line} — {see.text}" if see.text else line)
        parts.append("")

    return "\n".join(parts).rstrip() + "\n"


def _render_mixins(ns: NamespaceDoc, linker: ClassLinker) -> list[str]:
    if not ns.is_class or not (ns.includes or ns.extends):
        return []
    segments = []
    if ns.includes:
        segments.append("**Includes:** " + ", ".join(linker.link(m, ns.path) for m in ns.includes))
    if ns.extends:
        segments.append("**Extends:** " + ", ".join(linker.link(m, ns.path) for m in ns.extends))
    return [" · ".join(segments), ""]


def _render_constants(constants: tuple[ConstantDoc, ...]) -> list[str]:
    if not constants:
        return []
    parts = ["## Constants", ""]
    simple = [c for c in constants if _simple_constant(c)]
    rows = [
        [f"`{c.name}`", f"`{_strip_freeze(c.value)[:MAX_TABLE_VALUE]}`", c.description or ""]
        for c in simple
    ]
    if rows:
        parts += [md_table(["Name", "Value", "Description"], rows), ""]
    for c in constants:
        if c in simple:
            continue
        parts += [f"### {c.name}", ""]
        if c.description:
            parts += [c.description, ""]
        parts += [md_codeblock(f"{c.name} = {_strip_freeze(c.value)}"), ""]
    return parts


def _render_types(ns: NamespaceDoc) -> list[str]:
    if not ns.referenced_types:
        return []
    parts = ["## Types", ""]
    for alias in ns.referenced_types:
        line = f"- `{alias.name}` = `{alias.definition}`"
        parts.append(f"{line} — {alias.description}" if alias.description else line)
    return parts + [""]


def _render_attributes(
    attributes: tuple[AttributeDoc, ...], linker: ClassLinker, context: str
) -> list[str]:
    if not attributes:
        return []
    parts = ["## Attributes", ""]
    for attr in attributes:
        line = f"- `{attr.name}` : {linker.linkify_type(attr.type, context)} ({MODE_LABELS[attr.mode]})"
        description = (attr.description or "").strip().split("\n")[0]
        if description and not description.startswith("Returns the value of attribute"):
            line += f" — {description}"
        parts.append(line)
    return parts + [""]
