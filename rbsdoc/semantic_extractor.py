"""Assembly of the semantic document model from the parsed object graph.

Every namespace in the registry becomes a ``NamespaceDoc``. Prose tags from
doc comments supply names, descriptions and fallback types; the merged formal
type sources supply authoritative types through ``TypeMerger``.
"""

import logging
import re
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

from rbsdoc.code_objects import Docstring, MethodObject, NamespaceObject, Registry
from rbsdoc.collect_referenced_types import collect_referenced_types
from rbsdoc.condense_source import condense_source
from rbsdoc.document_model import (
    AttributeDoc,
    AttributeMode,
    AttrType,
    ConstantDoc,
    ExampleDoc,
    IvarDoc,
    MethodDoc,
    NamespaceDoc,
    OptionDoc,
    OverloadDoc,
    ParamDoc,
    ProjectDoc,
    RaiseDoc,
    ReturnDoc,
    Scope,
    SeeDoc,
    SpecExampleDoc,
    TypeAliasDoc,
    Visibility,
    YieldDoc,
)
from rbsdoc.group_by_file import group_by_file
from rbsdoc.kebab_case import to_snake_case
from rbsdoc.signature_data import SignatureData, TypeSources
from rbsdoc.signature_parser import BLOCK_KEY, parse_block_type, parse_record_type
from rbsdoc.spec_example_loader import SpecExamples
from rbsdoc.type_merger import TypeMerger

RUBOCOP_DIRECTIVE_RE = re.compile(r"^rubocop:(disable|enable|todo)\b", re.IGNORECASE)
RBS_BLOCK_RE = re.compile(r"@rbs!\s*\n(?:[ \t]+.*(?:\n|$))*")
PARAM_PREFIX_RE = re.compile(r"^(\*\*|\*|&)")


def clean_docstring(text: str) -> str:
    """Remove ``@rbs!`` blocks and rubocop directives from comment text."""
    if not text:
        return ""
    cleaned = RBS_BLOCK_RE.sub("", text)
    lines = [
        line
        for line in cleaned.splitlines()
        if not RUBOCOP_DIRECTIVE_RE.match(line.strip())
    ]
    return "\n".join(lines).strip()


def _text(text: str | None) -> str | None:
    return text if text else None


def _first(types: list[str] | None) -> str | None:
    return types[0] if types else None


class SemanticExtractor:
    """Build a ``ProjectDoc`` from a ``Registry`` and merged type sources.

    ``source_filter`` holds resolved paths of changed files. When set, only
    namespaces defined in (or annotated from) those files are fully
    extracted; the rest keep identity fields for indexing and are marked
    ``needs_regeneration=False``.
    """

    def __init__(
        self,
        type_sources: TypeSources,
        spec_examples: dict[str, SpecExamples] | None = None,
        namespace_filter: str | None = None,
        source_filter: set[str] | None = None,
        file_namespaces: dict[str, list[str]] | None = None,
        root: Path | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.sources = type_sources
        self.spec_examples = spec_examples or {}
        self.namespace_filter = namespace_filter
        self.source_filter = source_filter
        self.file_namespaces = file_namespaces or {}
        self.root = root or Path.cwd()
        self.logger = logger
        self.type_merger = TypeMerger(logger)

    def extract(
        self,
        registry: Registry,
        title: str = "API Documentation",
        description: str = "",
        root: Path | None = None,
    ) -> ProjectDoc:
        """Extract every documented namespace into an immutable ``ProjectDoc``."""
        root = root or self.root
        aliases = {
            ns: tuple(self._alias(a, ns) for a in defined)
            for ns, defined in self.sources.type_aliases.items()
        }

        namespaces = []
        for obj in registry.all_namespaces():
            if not self._should_document(obj):
                continue
            doc = self._namespace(obj, aliases)
            if doc.needs_regeneration:
                doc = _with_referenced(doc, aliases)
            namespaces.append(doc)

        if self.logger:
            self.logger.info("Extracted %d namespaces", len(namespaces))
        return ProjectDoc(
            title=title,
            description=description,
            namespaces=tuple(namespaces),
            files=group_by_file(namespaces, root),
            type_aliases=aliases,
            generated_at=datetime.now(timezone.utc),
        )

    def _should_document(self, obj: NamespaceObject) -> bool:
        return not self.namespace_filter or obj.path.startswith(self.namespace_filter)

    def _needs_regeneration(self, obj: NamespaceObject) -> bool:
        if self.source_filter is None:
            return True
        if obj.file and obj.file in self.source_filter:
            return True
        return any(
            obj.path in self.file_namespaces.get(changed, ())
            for changed in self.source_filter
        )

    @staticmethod
    def _alias(alias: TypeAliasDoc, namespace: str) -> TypeAliasDoc:
        if alias.namespace == namespace:
            return alias
        return TypeAliasDoc(
            name=alias.name,
            definition=alias.definition,
            description=alias.description,
            namespace=namespace,
            file=alias.file,
            line=alias.line,
        )

    def _namespace(
        self, obj: NamespaceObject, aliases: dict[str, tuple[TypeAliasDoc, ...]]
    ) -> NamespaceDoc:
        path = obj.path
        doc = obj.docstring
        identity = {
            "name": obj.name,
            "path": path,
            "type": obj.kind,
            "superclass": obj.superclass,
            "docstring": clean_docstring(doc.text),
            "includes": tuple(obj.instance_mixins),
            "extends": tuple(obj.class_mixins),
            "file": obj.file,
            "line": obj.line,
            "end_line": obj.end_line,
        }
        if not self._needs_regeneration(obj):
            return NamespaceDoc(**identity, needs_regeneration=False)

        methods = [
            self._method(meth, path)
            for scope in (Scope.INSTANCE, Scope.CLASS)
            for meth in obj.meths(scope=scope)
        ]
        spec = self.spec_examples.get(path)
        return NamespaceDoc(
            **identity,
            examples=_examples(doc),
            notes=_notes(doc),
            see_also=_see_also(doc),
            api=_tag_text(doc, "api"),
            deprecated=_deprecated(doc),
            abstract=doc.has_tag("abstract"),
            since=_tag_text(doc, "since"),
            todo=_tag_text(doc, "todo"),
            constants=self._constants(obj),
            type_aliases=aliases.get(path, ()),
            ivars=self._ivars(path),
            attributes=self._attributes(obj.path, methods),
            methods=_grouped(methods, public=True),
            private_methods=_grouped(methods, public=False),
            rbs_file=self._rbs_file(path),
            spec_examples=tuple([*spec.lets, *spec.subjects]) if spec else (),
            needs_regeneration=True,
        )

    def _constants(self, obj: NamespaceObject) -> tuple[ConstantDoc, ...]:
        types = self.sources.constants.get(obj.path, {})
        return tuple(
            ConstantDoc(
                name=c.name,
                value=c.value,
                type=types.get(c.name),
                description=clean_docstring(c.docstring.text),
            )
            for c in obj.constants
        )

    def _ivars(self, path: str) -> tuple[IvarDoc, ...]:
        return tuple(
            IvarDoc(name=name, type=info.type, description=info.desc)
            for name, info in self.sources.ivars.get(path, {}).items()
        )

    def _rbs_file(self, path: str) -> str | None:
        parts = [to_snake_case(part) for part in path.split("::")]
        relative = "sig/" + "/".join(parts) + ".rbs"
        return relative if (self.root / relative).is_file() else None

    def _attributes(self, path: str, methods: list[MethodDoc]) -> tuple[AttributeDoc, ...]:
        readers: dict[str, MethodDoc] = {}
        writers: dict[str, MethodDoc] = {}
        for method in methods:
            if method.scope is not Scope.INSTANCE or method.visibility is not Visibility.PUBLIC:
                continue
            if method.attr_type is AttrType.READER:
                readers[method.name] = method
            elif method.attr_type is AttrType.WRITER:
                writers[method.name.removesuffix("=")] = method

        attributes = []
        for name in sorted({*readers, *writers}):
            reader = readers.get(name)
            writer = writers.get(name)
            if reader and writer:
                mode = AttributeMode.READ_WRITE
            elif reader:
                mode = AttributeMode.READ
            else:
                mode = AttributeMode.WRITE
            attributes.append(
                AttributeDoc(
                    name=name,
                    type=self._attr_type(path, name, reader, writer),
                    description=self._attr_description(path, name, reader, writer),
                    mode=mode,
                    reader=reader,
                    writer=writer,
                )
            )
        return tuple(attributes)

    def _attr_type(
        self, path: str, name: str, reader: MethodDoc | None, writer: MethodDoc | None
    ) -> str | None:
        formal = self.sources.attrs.get(path, {}).get(name)
        if formal and formal.type and formal.type != "untyped":
            return formal.type
        if reader and reader.returns and reader.returns.type:
            return reader.returns.type
        if writer and writer.params:
            return writer.params[0].type
        return None

    def _attr_description(
        self, path: str, name: str, reader: MethodDoc | None, writer: MethodDoc | None
    ) -> str | None:
        formal = self.sources.attrs.get(path, {}).get(name)
        if formal and formal.desc:
            return formal.desc
        if reader and reader.returns and reader.returns.description:
            return reader.returns.description
        if reader and reader.docstring:
            return reader.docstring
        if writer and writer.params:
            return writer.params[0].description
        return None

    def _method(self, meth: MethodObject, path: str) -> MethodDoc:
        doc = meth.docstring
        signature = self.sources.signature_for(path, meth.name)
        source = condense_source(meth.source)
        params = self.type_merger.merge_params(
            self._params(meth), signature, path, meth.name
        )
        returns = self.type_merger.merge_return(
            self._returns(doc), signature, path, meth.name
        )
        behaviors, spec_snippets = self._method_specs(path, meth)

        return MethodDoc(
            name=meth.name,
            scope=meth.scope,
            visibility=meth.visibility,
            signature=meth.signature,
            docstring=clean_docstring(doc.text),
            params=tuple(params),
            options=self._options(doc, signature),
            returns=returns,
            yields=self._yields(doc, signature),
            raises=self._raises(doc, signature),
            examples=_examples(doc),
            notes=_notes(doc),
            see_also=_see_also(doc),
            api=_tag_text(doc, "api"),
            deprecated=_deprecated(doc),
            abstract=doc.has_tag("abstract"),
            since=_tag_text(doc, "since"),
            todo=_tag_text(doc, "todo"),
            rbs_signature=signature.full if signature else None,
            overloads=self._overloads(path, meth.name, signature),
            source=source.source,
            source_body_lines=source.body_lines,
            attr_type=source.attr_type,
            file=meth.file,
            line=meth.line,
            spec_examples=spec_snippets,
            spec_behaviors=behaviors,
        )

    @staticmethod
    def _params(meth: MethodObject) -> list[ParamDoc]:
        tags = {t.name: t for t in meth.docstring.tags_named("param") if t.name}
        params = []
        for raw_name, default in meth.parameters:
            prefix = PARAM_PREFIX_RE.match(raw_name)
            name = PARAM_PREFIX_RE.sub("", raw_name).removesuffix(":")
            tag = tags.get(name)
            params.append(
                ParamDoc(
                    name=name,
                    type=_first(tag.types) if tag else None,
                    description=_text(tag.text) if tag else None,
                    default=default,
                    prefix=prefix.group(1) if prefix else None,
                )
            )
        return params

    @staticmethod
    def _returns(doc: Docstring) -> ReturnDoc | None:
        tag = doc.tag("return")
        if tag is None:
            return None
        return ReturnDoc(type=_first(tag.types), description=_text(tag.text))

    @staticmethod
    def _options(
        doc: Docstring, signature: SignatureData | None
    ) -> tuple[OptionDoc, ...]:
        records: dict[str, dict[str, str]] = {}
        if signature:
            for name, info in signature.params.items():
                fields = parse_record_type(info.type)
                if fields:
                    records[name] = fields

        options = []
        for tag in doc.tags_named("option"):
            param_name = tag.name or ""
            pair = tag.pair
            key = pair.name.lstrip(":") if pair and pair.name else "unknown"
            prose_type = _first(pair.types) if pair else None
            options.append(
                OptionDoc(
                    param_name=param_name,
                    key=key,
                    type=records.get(param_name, {}).get(key) or prose_type,
                    description=_text(pair.text) if pair else None,
                )
            )
        return tuple(options)

    @staticmethod
    def _yields(doc: Docstring, signature: SignatureData | None) -> YieldDoc | None:
        yield_tag = doc.tag("yield")
        yield_params = doc.tags_named("yieldparam")
        yield_return = doc.tag("yieldreturn")

        block = signature.params.get(BLOCK_KEY) if signature else None
        block_type = block.type if block else None
        parsed = parse_block_type(block_type) if block_type else None

        if yield_tag is None and not yield_params and yield_return is None and block is None:
            return None

        formal_types = parsed.param_types if parsed else []
        params = tuple(
            ParamDoc(
                name=tag.name or f"arg{i}",
                type=formal_types[i] if i < len(formal_types) else _first(tag.types),
                description=_text(tag.text),
            )
            for i, tag in enumerate(yield_params)
        )
        description = _text(yield_tag.text) if yield_tag else None
        return YieldDoc(
            description=description or (block.desc if block else None),
            params=params,
            return_type=(parsed.return_type if parsed else None)
            or (_first(yield_return.types) if yield_return else None),
            return_desc=_text(yield_return.text) if yield_return else None,
            block_type=block_type,
        )

    @staticmethod
    def _raises(doc: Docstring, signature: SignatureData | None) -> tuple[RaiseDoc, ...]:
        raises: dict[str, RaiseDoc] = {}
        for tag in doc.tags_named("raise"):
            for type_name in tag.types or ():
                raises.setdefault(type_name, RaiseDoc(type_name, _text(tag.text)))
        if signature and signature.raises:
            raises.setdefault(signature.raises, RaiseDoc(signature.raises))
        return tuple(raises.values())

    def _overloads(
        self, path: str, name: str, signature: SignatureData | None
    ) -> tuple[OverloadDoc, ...]:
        raw = signature.overloads if signature and signature.overloads else None
        if raw is None:
            raw = self.sources.overloads.get(path, {}).get(name, ())
        return tuple(OverloadDoc(sig) for sig in raw)

    def _method_specs(
        self, path: str, meth: MethodObject
    ) -> tuple[tuple[str, ...], tuple[SpecExampleDoc, ...]]:
        spec = self.spec_examples.get(path)
        if spec is None:
            return (), ()
        sep = "." if meth.scope is Scope.CLASS else "#"
        key = f"{sep}{meth.name}"
        return (
            tuple(spec.behaviors.get(key, ())),
            tuple(spec.method_examples.get(key, ())),
        )


def _with_referenced(
    doc: NamespaceDoc, aliases: dict[str, tuple[TypeAliasDoc, ...]]
) -> NamespaceDoc:
    methods = [*doc.methods, *doc.private_methods]
    methods.extend(m for a in doc.attributes for m in (a.reader, a.writer) if m)
    return replace(doc, referenced_types=collect_referenced_types(methods, aliases, doc.path))


def _grouped(methods: list[MethodDoc], public: bool) -> tuple[MethodDoc, ...]:
    """Select public or non-public methods; public instance accessors live in attributes."""
    return tuple(
        m
        for m in methods
        if (m.visibility is Visibility.PUBLIC) == public
        and not (public and m.is_accessor and m.scope is Scope.INSTANCE)
    )


def _tag_text(doc: Docstring, name: str) -> str | None:
    tag = doc.tag(name)
    return tag.text if tag else None


def _deprecated(doc: Docstring) -> str | None:
    tag = doc.tag("deprecated")
    if tag is None:
        return None
    return tag.text or ""


def _examples(doc: Docstring) -> tuple[ExampleDoc, ...]:
    return tuple(ExampleDoc(t.name, t.text) for t in doc.tags_named("example"))


def _notes(doc: Docstring) -> tuple[str, ...]:
    return tuple(t.text for t in doc.tags_named("note"))


def _see_also(doc: Docstring) -> tuple[SeeDoc, ...]:
    return tuple(
        SeeDoc(t.name, _text(t.text)) for t in doc.tags_named("see") if t.name
    )
