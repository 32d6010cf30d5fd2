"""Command line interface for generating and checking documentation."""

import argparse
import logging
from pathlib import Path
from typing import Any

from rbsdoc.drift_checker import format_drift_report
from rbsdoc.engine import DocEngine
from rbsdoc.load_config import load_config

logger = logging.getLogger("rbsdoc")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="rbsdoc",
        description="Generate markdown API docs from YARD comments and RBS signatures.",
    )
    ap.add_argument(
        "command",
        choices=["refresh", "check"],
        help="refresh writes the docs; check exits 1 when they are out of date",
    )
    ap.add_argument(
        "files",
        nargs="*",
        type=Path,
        help="Changed source files (partial refresh); default is every file",
    )
    ap.add_argument("--config", help="Path to configuration file (default: .rbsdoc.yml)")
    ap.add_argument("--root", help="Project root (default: current directory)")
    ap.add_argument("--output", help="Output directory, relative to the root")
    ap.add_argument("--namespace-filter", help="Only document namespaces with this prefix")
    ap.add_argument(
        "--include-specs",
        action="store_true",
        default=None,
        help="Include examples and behaviors harvested from spec files",
    )
    ap.add_argument("--json", type=Path, help="Also write the document model as JSON")
    ap.add_argument("--verbose", "-v", action="store_true", help="Log progress")
    return ap


def resolve_config(args: argparse.Namespace) -> dict[str, Any]:
    """Load the config file and apply command line overrides."""
    config = load_config(args.config, root=args.root)
    overrides = {
        "root": args.root,
        "output": args.output,
        "namespace_filter": args.namespace_filter,
        "include_specs": args.include_specs,
    }
    config.update({k: v for k, v in overrides.items() if v is not None})
    return config


def main(argv: list[str] | None = None) -> int:
    """Run the documentation command."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    engine = DocEngine(resolve_config(args), logger)
    changed = args.files or None

    if args.command == "check":
        report = engine.check(changed)
        if report.has_drift:
            logger.error(format_drift_report(report))
            return 1
        print(format_drift_report(report))
        return 0

    result = engine.refresh(changed, json_path=args.json)
    print(
        f"Documentation refreshed in {engine.output}: "
        f"{len(result.written)} written, {len(result.unchanged)} unchanged"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
