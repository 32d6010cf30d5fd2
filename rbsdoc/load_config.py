"""Logic for loading and merging configuration files."""

import copy
from pathlib import Path
from typing import Any

import yaml

from rbsdoc.deep_merge import deep_merge

CONFIG_FILENAME = ".rbsdoc.yml"

DEFAULT_CONFIG: dict[str, Any] = {
    "root": ".",
    "source_path": "lib",
    "output": "docs/sys",
    "namespace_filter": None,
    "namespace_strip": None,
    "include_specs": False,
    "spec_path": "test",
    "rbs_path": "sig",
    "github_repo": None,
    "github_branch": "main",
    "project_title": "API Documentation",
    "index_description": "Auto-generated from source code.",
    "inline_source_threshold": 10,
    "skip_types": [
        "Array",
        "Boolean",
        "Class",
        "Comparable",
        "Enumerable",
        "FalseClass",
        "Float",
        "Hash",
        "Integer",
        "Module",
        "NilClass",
        "Numeric",
        "Object",
        "Proc",
        "String",
        "Symbol",
        "TrueClass",
    ],
}


def load_config(path: str | None = None, root: str | None = None) -> dict[str, Any]:
    """Load configuration from a YAML file and merge it with defaults.

    Without ``path``, ``.rbsdoc.yml`` under ``root`` is used when present.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if path is None:
        candidate = Path(root or ".") / CONFIG_FILENAME
        path = str(candidate) if candidate.exists() else None
    if path:
        p = Path(path)
        if p.exists():
            user_config = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
            config = deep_merge(config, user_config)
    return config
