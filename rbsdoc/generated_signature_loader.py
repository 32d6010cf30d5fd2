"""Loader for ``.rbs`` signature files written by rbs-inline or by hand."""

import logging
import re
from dataclasses import replace
from pathlib import Path

from rbsdoc.document_model import TypeAliasDoc
from rbsdoc.signature_data import TypeInfo, TypeSources
from rbsdoc.signature_parser import parse_signature

NAMESPACE_RE = re.compile(r"^(?:class|module|interface)\s+([\w:]+)")
IVAR_RE = re.compile(r"^@(\w+):\s*(.+)$")
ATTR_RE = re.compile(r"^attr_(?:reader|accessor|writer)\s+(\w+):\s*(.+)$")
ALIAS_RE = re.compile(r"^type\s+(\w+)\s*=\s*(.+)$")
CONSTANT_RE = re.compile(r"^([A-Z]\w*)\s*:\s*(.+)$")
METHOD_RE = re.compile(
    r"^def\s+(?:self\??\.)?(\w+[?!=]?|\[\]=?|[+\-*/%&|^<>=!~]+):\s*(.+)$"
)


def find_signature_dir(root: Path, rbs_path: str = "sig") -> Path | None:
    """Prefer ``sig/generated`` and fall back to ``sig`` itself."""
    base = root / rbs_path
    generated = base / "generated"
    if generated.is_dir():
        return generated
    if base.is_dir():
        return base
    return None


def first_description_line(comment: str | None) -> str | None:
    """Return the first comment line that is not an ``@rbs`` annotation."""
    if not comment:
        return None
    for line in comment.splitlines():
        line = line.strip()
        if line and not line.startswith("@rbs"):
            return line
    return None


class GeneratedSignatureLoader:
    """Read every ``*.rbs`` file below a directory into ``TypeSources``.

    Generated files are regular: a namespace closes on a bare ``end``,
    comments directly precede the declaration they describe, and overloads
    either repeat the ``def`` line or continue with a leading ``|``.
    """

    def __init__(self, rbs_dir: Path | None, logger: logging.Logger | None = None) -> None:
        self.rbs_dir = rbs_dir
        self.logger = logger

    def load(self) -> TypeSources:
        """Parse all signature files; a missing directory yields empty sources."""
        sources = TypeSources()
        if self.rbs_dir is None or not self.rbs_dir.is_dir():
            return sources

        for file in sorted(self.rbs_dir.rglob("*.rbs")):
            try:
                content = file.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                if self.logger:
                    self.logger.warning("Skipping unreadable signature %s: %s", file, exc)
                continue
            self._parse_file(file, content, sources)

        self._attach_overloads(sources)
        if self.logger:
            self.logger.info(
                "Loaded signatures: %d methods, %d ivars, %d attrs, %d type aliases",
                sum(len(m) for m in sources.signatures.values()),
                sum(len(i) for i in sources.ivars.values()),
                sum(len(a) for a in sources.attrs.values()),
                sum(len(t) for t in sources.type_aliases.values()),
            )
        return sources

    def _parse_file(self, file: Path, content: str, sources: TypeSources) -> None:
        stack: list[str] = []
        pending_comment: str | None = None
        pending_method: str | None = None

        for lineno, line in enumerate(content.splitlines(), start=1):
            stripped = line.strip()

            ns_match = NAMESPACE_RE.match(stripped)
            if ns_match:
                stack.append(ns_match.group(1))
                pending_comment = None
                pending_method = None
                continue

            if stripped == "end":
                if stack:
                    stack.pop()
                pending_comment = None
                pending_method = None
                continue

            if stripped.startswith("#"):
                text = re.sub(r"^#\s?", "", stripped)
                pending_comment = f"{pending_comment}\n{text}" if pending_comment else text
                continue

            if not stripped or stripped.startswith("%a{"):
                continue

            namespace = "::".join(stack)
            alias = ALIAS_RE.match(stripped)
            if alias:
                sources.type_aliases.setdefault(namespace, []).append(
                    TypeAliasDoc(
                        name=alias.group(1),
                        definition=alias.group(2).strip(),
                        description=pending_comment,
                        namespace=namespace,
                        file=str(file),
                        line=lineno,
                    )
                )
                pending_comment = None
                continue

            if not namespace:
                pending_comment = None
                pending_method = None
                continue

            if stripped.startswith("|") and pending_method:
                overload = stripped[1:].strip()
                sources.overloads.setdefault(namespace, {}).setdefault(
                    pending_method, []
                ).append(overload)
                continue

            method = METHOD_RE.match(stripped)
            if method:
                name, sig = method.group(1), method.group(2).strip()
                if name == pending_method:
                    sources.overloads.setdefault(namespace, {}).setdefault(
                        name, []
                    ).append(sig)
                else:
                    sources.signatures.setdefault(namespace, {})[name] = parse_signature(
                        sig, pending_comment
                    )
                    pending_method = name
                pending_comment = None
                continue

            ivar = IVAR_RE.match(stripped)
            attr = ATTR_RE.match(stripped)
            constant = CONSTANT_RE.match(stripped)
            if ivar:
                sources.ivars.setdefault(namespace, {})[ivar.group(1)] = TypeInfo(
                    ivar.group(2).strip(), first_description_line(pending_comment)
                )
            elif attr:
                sources.attrs.setdefault(namespace, {})[attr.group(1)] = TypeInfo(
                    attr.group(2).strip(), first_description_line(pending_comment)
                )
            elif constant:
                sources.constants.setdefault(namespace, {})[constant.group(1)] = (
                    constant.group(2).strip()
                )
            else:
                pending_method = None
            pending_comment = None

    @staticmethod
    def _attach_overloads(sources: TypeSources) -> None:
        for namespace, methods in sources.overloads.items():
            sigs = sources.signatures.get(namespace, {})
            for name, overloads in methods.items():
                if name in sigs:
                    sigs[name] = replace(sigs[name], overloads=tuple(overloads))
