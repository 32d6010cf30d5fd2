"""Logic for combining inline annotations with signature-file data."""

from rbsdoc.document_model import TypeAliasDoc
from rbsdoc.inline_annotation_scanner import InlineScanResult
from rbsdoc.signature_data import TypeSources


def _overlay(base: dict[str, dict], top: dict[str, dict]) -> dict[str, dict]:
    """Merge two namespace-keyed maps; entries from ``top`` win per key."""
    merged = {ns: dict(entries) for ns, entries in base.items()}
    for ns, entries in top.items():
        merged.setdefault(ns, {}).update(entries)
    return merged


def _merge_aliases(
    base: dict[str, list[TypeAliasDoc]], top: dict[str, list[TypeAliasDoc]]
) -> dict[str, list[TypeAliasDoc]]:
    merged: dict[str, list[TypeAliasDoc]] = {}
    for ns in list(base) + [ns for ns in top if ns not in base]:
        by_name = {alias.name: alias for alias in base.get(ns, [])}
        by_name.update({alias.name: alias for alias in top.get(ns, [])})
        merged[ns] = list(by_name.values())
    return merged


def merge_type_sources(inline: InlineScanResult, generated: TypeSources) -> TypeSources:
    """Combine both sources; signature files override inline data key by key."""
    return TypeSources(
        signatures=_overlay(inline.signatures, generated.signatures),
        ivars=_overlay(inline.ivar_types, generated.ivars),
        attrs=_overlay(inline.attribute_types, generated.attrs),
        constants=_overlay({}, generated.constants),
        type_aliases=_merge_aliases(inline.type_aliases, generated.type_aliases),
        overloads=_overlay({}, generated.overloads),
    )
