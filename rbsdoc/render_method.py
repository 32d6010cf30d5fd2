"""Logic for rendering a single method section."""

import re

from rbsdoc.class_linker import ClassLinker
from rbsdoc.document_model import MethodDoc, ParamDoc, Scope
from rbsdoc.md_codeblock import md_codeblock

AUTO_READER_DOC_RE = re.compile(r"^Returns the value of attribute \w+\.?$")
MAX_BEHAVIORS = 8
MAX_SPEC_EXAMPLES = 3


def method_display_name(method: MethodDoc, class_name: str) -> str:
    """Show ``initialize`` as ``Class.new`` and class methods as ``Class.name``."""
    if method.name == "initialize" and method.scope is Scope.INSTANCE:
        return f"{class_name}.new"
    if method.scope is Scope.CLASS:
        return f"{class_name}.{method.name}"
    return method.name


def useful_docstring(docstring: str) -> bool:
    return bool(docstring) and not AUTO_READER_DOC_RE.match(docstring)


def _normalize_type(type_str: str) -> str:
    return type_str.replace("<", "[").replace(">", "]")


def _param_line(param: ParamDoc, width: int) -> str:
    inner = f"{param.prefix or ''}{param.name.ljust(width)} : {_normalize_type(param.type or 'untyped')}"
    if param.default is not None:
        inner += f" = {param.default}"
    return f"⟨{inner}⟩ → {param.description}" if param.description else f"⟨{inner}⟩"


def _return_line(method: MethodDoc, class_name: str) -> str | None:
    returns = method.returns
    if returns is None or not returns.type:
        return None
    type_str = returns.type
    if type_str == "void" and method.name == "initialize":
        type_str = class_name
    if type_str == "void":
        return None
    line = f"→ {_normalize_type(type_str)}"
    return f"{line} — {returns.description}" if returns.description else line


def render_method(
    method: MethodDoc,
    class_name: str,
    linker: ClassLinker | None = None,
    *,
    context: str | None = None,
    include_specs: bool = False,
    inline_source_threshold: int = 10,
) -> str:
    """Render a method as a markdown section."""
    suffix = "(...)" if method.params else ""
    parts: list[str] = [f"### {method_display_name(method, class_name)}{suffix}", ""]

    if method.deprecated is not None:
        note = f": {method.deprecated}" if method.deprecated else ""
        parts += [f"> **Deprecated**{note}", ""]

    if useful_docstring(method.docstring):
        text = linker.linkify_docstring(method.docstring, context) if linker else method.docstring
        parts += [text, ""]

    signature: list[str] = []
    if method.params:
        width = max(len(p.name) for p in method.params)
        signature += [_param_line(p, width) for p in method.params]
    return_line = _return_line(method, class_name)
    if return_line:
        signature.append(return_line)
    if signature:
        parts += signature + [""]

    parts.extend(_render_options(method))
    parts.extend(_render_yields(method))
    parts.extend(_render_raises(method))
    parts.extend(_render_overloads(method))

    for example in method.examples:
        label = f"Example: {example.name}" if example.name else "Example"
        parts += [f"**{label}:**", "", md_codeblock(example.code), ""]
    for note in method.notes:
        parts += [f"> **Note:** {note}", ""]

    if include_specs and method.spec_behaviors:
        parts += ["**Tested behaviors:**"]
        parts += [f"- {b}" for b in method.spec_behaviors[:MAX_BEHAVIORS]]
        parts.append("")
    if include_specs:
        for example in method.spec_examples[:MAX_SPEC_EXAMPLES]:
            parts += [f"**From specs ({example.name}):**", "", md_codeblock(example.code), ""]

    if method.source and method.source_body_lines <= inline_source_threshold:
        parts += [md_codeblock(method.source), ""]

    return "\n".join(parts).rstrip() + "\n"


def _render_options(method: MethodDoc) -> list[str]:
    if not method.options:
        return []
    parts = ["**Options:**"]
    for opt in method.options:
        line = f"- `{opt.param_name}[:{opt.key}]` : `{_normalize_type(opt.type or 'untyped')}`"
        parts.append(f"{line} — {opt.description}" if opt.description else line)
    return parts + [""]


def _render_yields(method: MethodDoc) -> list[str]:
    yields = method.yields
    if yields is None:
        return []
    header = "**Yields:**"
    if yields.description:
        header += f" {yields.description}"
    parts = [header]
    if yields.block_type:
        parts.append(f"Block: `{yields.block_type}`")
    for p in yields.params:
        line = f"- `{p.name}` : `{p.type or 'untyped'}`"
        parts.append(f"{line} — {p.description}" if p.description else line)
    if yields.return_type:
        line = f"Block returns `{yields.return_type}`"
        parts.append(f"{line} — {yields.return_desc}" if yields.return_desc else line)
    return parts + [""]


def _render_raises(method: MethodDoc) -> list[str]:
    if not method.raises:
        return []
    parts = ["**Raises:**"]
    for r in method.raises:
        parts.append(f"- `{r.type}` — {r.description}" if r.description else f"- `{r.type}`")
    return parts + [""]


def _render_overloads(method: MethodDoc) -> list[str]:
    if not method.overloads:
        return []
    parts = ["**Overloads:**"]
    parts += [f"- `{o.signature}`" for o in method.overloads]
    return parts + [""]
