"""Logic for finding the type aliases a namespace's methods refer to."""

import re
from collections.abc import Iterable, Mapping, Sequence

from rbsdoc.document_model import MethodDoc, TypeAliasDoc

TYPE_TOKEN_RE = re.compile(r"\b([A-Za-z_][A-Za-z0-9_]*)\b")


def type_names(type_str: str | None) -> list[str]:
    """Return every identifier token in a type string."""
    if not type_str:
        return []
    return TYPE_TOKEN_RE.findall(type_str)


def _method_types(method: MethodDoc) -> list[str | None]:
    types = [p.type for p in method.params]
    types.extend(o.type for o in method.options)
    if method.returns:
        types.append(method.returns.type)
    return types


def collect_referenced_types(
    methods: Iterable[MethodDoc],
    aliases: Mapping[str, Sequence[TypeAliasDoc]],
    own: str,
) -> tuple[TypeAliasDoc, ...]:
    """Return the aliases used by ``methods``, sorted by name.

    Aliases mentioned inside a matched alias definition are included too.
    Aliases declared in the ``own`` namespace shadow same-named ones elsewhere.
    """
    lookup: dict[str, TypeAliasDoc] = {}
    for namespace, defined in aliases.items():
        if namespace == own:
            continue
        for alias in defined:
            lookup.setdefault(alias.name, alias)
    for alias in aliases.get(own, ()):
        lookup[alias.name] = alias
    if not lookup:
        return ()

    pending = [
        name
        for method in methods
        for type_str in _method_types(method)
        for name in type_names(type_str)
        if name in lookup
    ]
    found: dict[str, TypeAliasDoc] = {}
    while pending:
        name = pending.pop()
        if name in found:
            continue
        alias = lookup[name]
        found[name] = alias
        pending.extend(n for n in type_names(alias.definition) if n in lookup)

    return tuple(found[name] for name in sorted(found))
