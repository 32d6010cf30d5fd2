"""Utilities for converting Ruby constant names to path segments."""

import re

VERSION_SUFFIX_RE = re.compile(r"([A-Za-z])([vV]\d+)")
ACRONYM_RE = re.compile(r"([A-Z]+)([A-Z][a-z])")
CAMEL_RE = re.compile(r"([a-z\d])([A-Z])")


def to_kebab_case(name: str) -> str:
    """Convert ``HTTPClientV2`` style names to ``http-client-v2``."""
    s = VERSION_SUFFIX_RE.sub(r"\1-\2", name)
    s = ACRONYM_RE.sub(r"\1-\2", s)
    s = CAMEL_RE.sub(r"\1-\2", s)
    return s.lower()


def to_snake_case(name: str) -> str:
    """Convert a constant name to the file name Ruby conventions expect."""
    return to_kebab_case(name).replace("-", "_")
