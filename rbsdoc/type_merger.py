"""Reconciliation of YARD prose types with RBS formal types."""

import logging
import re
from dataclasses import replace

from rbsdoc.document_model import ParamDoc, ReturnDoc
from rbsdoc.signature_data import SignatureData, TypeInfo
from rbsdoc.signature_parser import BLOCK_KEY

BOOLEAN_TYPES = frozenset({"bool", "boolish", "TrueClass", "FalseClass"})
GENERIC_PREFIXES = {"Hash": "Hash[", "Array": "Array["}
CONSTRUCTOR_NAMES = frozenset({"initialize"})


def normalize_type(type_str: str) -> str:
    """Drop whitespace and rewrite ``<>`` generics as ``[]``."""
    return re.sub(r"\s+", "", type_str).replace("<", "[").replace(">", "]")


def types_compatible(prose_type: str | None, formal_type: str | None) -> bool:
    """Return whether two declared types plausibly describe the same thing."""
    if not prose_type or not formal_type:
        return True
    prose = normalize_type(prose_type)
    formal = normalize_type(formal_type)
    if prose == formal or formal.startswith(prose):
        return True
    if prose == "Boolean" and formal in BOOLEAN_TYPES:
        return True
    prefix = GENERIC_PREFIXES.get(prose)
    return prefix is not None and formal.startswith(prefix)


def merge_descriptions(prose: str | None, formal: str | None) -> str | None:
    """Pick the longer description; the formal one wins ties."""
    if not prose or not prose.strip():
        return formal if formal and formal.strip() else prose
    if not formal or not formal.strip():
        return prose
    return formal if len(formal) >= len(prose) else prose


class TypeMerger:
    """Merge prose and formal type records under the formal-wins policy.

    The formal type replaces the prose type whenever one exists. Mismatches
    are reported through the optional logger and never change the outcome.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger

    def merge_params(
        self,
        params: list[ParamDoc],
        signature: SignatureData | None,
        namespace: str,
        method_name: str,
    ) -> list[ParamDoc]:
        """Apply formal parameter types and descriptions to prose params."""
        if signature is None or not signature.params:
            return list(params)
        return [
            self._merge_param(p, signature.params, namespace, method_name)
            for p in params
        ]

    def merge_return(
        self,
        returns: ReturnDoc | None,
        signature: SignatureData | None,
        namespace: str,
        method_name: str,
    ) -> ReturnDoc | None:
        """Apply the formal return type, keeping constructor prose types."""
        if signature is None or signature.returns is None:
            return returns
        formal = signature.returns
        if returns is None:
            return ReturnDoc(type=formal.type, description=formal.desc)

        description = merge_descriptions(returns.description, formal.desc)
        if (
            formal.type == "void"
            and method_name in CONSTRUCTOR_NAMES
            and returns.type
        ):
            return replace(returns, description=description)

        self._check(returns.type, formal.type, namespace, method_name, "(return)")
        return ReturnDoc(type=formal.type, description=description)

    def _merge_param(
        self,
        param: ParamDoc,
        formal_params: dict[str, TypeInfo],
        namespace: str,
        method_name: str,
    ) -> ParamDoc:
        key = BLOCK_KEY if param.prefix == "&" else param.name
        formal = formal_params.get(key)
        if formal is None:
            return param
        self._check(param.type, formal.type, namespace, method_name, param.name)
        return replace(
            param,
            type=formal.type,
            description=merge_descriptions(param.description, formal.desc),
        )

    def _check(
        self,
        prose_type: str | None,
        formal_type: str,
        namespace: str,
        method_name: str,
        param_name: str,
    ) -> None:
        if self.logger is None or types_compatible(prose_type, formal_type):
            return
        self.logger.warning(
            "Type mismatch in %s#%s param '%s': YARD says '%s', RBS says '%s' (using RBS)",
            namespace,
            method_name,
            param_name,
            prose_type,
            formal_type,
        )
