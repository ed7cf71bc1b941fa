"""CLI entry point: python -m tome_level_patcher --plugin Skyrim.esm.json [--plugin ...]

Plugins are JSON record dumps given in load order. Writes the patch as a dump
of the renamed books.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from tome_level_patcher.engine.run_patch import run_patch
from tome_level_patcher.engine.settings import Settings, load_settings, write_settings
from tome_level_patcher.engine.state import DEFAULT_PATCH_NAME, PatcherState
from tome_level_patcher.errors import PatcherError
from tome_level_patcher.log import setup_logging
from tome_level_patcher.parser.plugin_merge import resolve_plugins_for_cli


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Rename spell tomes after their spell's school and level")
    parser.add_argument("--plugin", type=Path, action="append", help="Plugin dump path; repeat in load order")
    parser.add_argument("--settings", type=Path, default=Path("settings.json"), help="Settings JSON path")
    parser.add_argument("--patch-name", default=DEFAULT_PATCH_NAME, help="Name of the output plugin")
    parser.add_argument("--output", type=Path, default=None, help="Output dump path (default: <patch-name>.json)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug messages")
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)
    output = args.output or Path(f"{args.patch_name}.json")

    try:
        paths = resolve_plugins_for_cli(args.plugin)
        if not args.settings.exists():
            write_settings(args.settings, Settings())
            print(f"Wrote default settings: {args.settings}")
        settings = load_settings(args.settings)
        state = PatcherState.from_paths(paths, args.patch_name)
    except (FileNotFoundError, PatcherError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    report = run_patch(state, settings)
    try:
        state.patch_mod.write(output)
    except OSError as exc:
        print(f"Error: could not write {output}: {exc}", file=sys.stderr)
        return 1

    print(f"Renamed {len(report.renamed)} spell tome(s), skipped {len(report.skipped)} book(s)")
    if report.failed:
        print(f"Failed on {len(report.failed)} book(s):")
        for outcome in report.failed:
            print(f"  - {outcome.error}")
    print(f"Patch written: {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
