"""Main orchestration script for generating RBS signatures and markdown docs."""

import argparse
import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path


def run_command(cmd_list: Sequence[str | Path], cwd: Path | str | None = None) -> None:
    """Run a command and exit if it fails."""
    cmd_str = " ".join(str(x) for x in cmd_list)
    print(f"Running: {cmd_str}")
    try:
        subprocess.run(cmd_list, check=True, cwd=cwd)
    except subprocess.CalledProcessError as e:
        print(f"Error executing command: {cmd_str}")
        sys.exit(e.returncode)


def main() -> None:
    """Run the full documentation generation pipeline."""
    parser = argparse.ArgumentParser(
        description="Generate RBS signatures with rbs-inline, then refresh the docs."
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=Path.cwd(),
        help="Ruby project root (default: current directory)",
    )
    parser.add_argument(
        "--skip-codegen",
        action="store_true",
        help="Use the existing sig/generated files instead of running rbs-inline",
    )
    parser.add_argument(
        "--include-specs",
        action="store_true",
        help="Include examples harvested from spec files",
    )
    parser.add_argument(
        "--config",
        help="Path to configuration file",
    )
    args = parser.parse_args()

    root_dir = args.root.resolve()

    if not args.skip_codegen:
        # 1. Generate RBS from inline annotations
        print("--- Step 1: Generating RBS signatures ---")
        run_command(["rbs-inline", "--output=sig/generated", "lib"], cwd=root_dir)

    # 2. Extract, merge and render
    print("\n--- Step 2: Refreshing documentation ---")
    cmd = [sys.executable, "-m", "rbsdoc.cli", "refresh", "--root", str(root_dir)]
    if args.include_specs:
        cmd.append("--include-specs")
    if args.config:
        cmd.extend(["--config", args.config])

    run_command(cmd)

    print(f"\nSUCCESS: Documentation refreshed under {root_dir}")


if __name__ == "__main__":
    main()
