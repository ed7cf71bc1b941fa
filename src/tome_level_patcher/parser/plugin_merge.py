"""Helpers for merging parsed records across plugin load order.

Input order matters: later plugins override earlier ones ("last wins").
"""

from collections.abc import Callable, Iterable, Iterator
from pathlib import Path
from typing import TypeVar

from tome_level_patcher.parser.dump_parser import PluginDump, load_plugin_dump


T = TypeVar("T")
K = TypeVar("K")


def load_plugin_dumps(paths: Iterable[Path]) -> list[PluginDump]:
    return [load_plugin_dump(p) for p in paths]


def resolve_plugins_for_cli(explicit_paths: list[Path] | None) -> list[Path]:
    """Validate plugin dump paths given on the command line.

    All paths must exist or FileNotFoundError is raised. There is no default
    load order: the caller always names the plugins, in load order.
    """
    if not explicit_paths:
        raise FileNotFoundError("No plugins given. Pass --plugin at least once.")
    missing = [p for p in explicit_paths if not p.exists()]
    if missing:
        raise FileNotFoundError(
            "Missing explicit plugins: " + ", ".join(str(p) for p in missing)
        )
    return explicit_paths


def parse_records_merged(
    plugins: Iterable[PluginDump],
    records_fn: Callable[[PluginDump], list[T]],
    *,
    key_fn: Callable[[T], K] = lambda x: getattr(x, "form_key"),  # type: ignore[arg-type]
) -> dict[K, T]:
    """Merge one record group across plugins, keyed by FormKey; last wins."""
    merged: dict[K, T] = {}
    for plugin in plugins:
        for row in records_fn(plugin):
            merged[key_fn(row)] = row
    return merged


def iter_winning_overrides(
    plugins: list[PluginDump],
    records_fn: Callable[[PluginDump], list[T]],
    *,
    key_fn: Callable[[T], K] = lambda x: getattr(x, "form_key"),  # type: ignore[arg-type]
) -> Iterator[tuple[str, T]]:
    """Yield (winning plugin, record) once per record, highest priority first.

    Walks the load order backwards so the first version seen of each record
    is the one that wins; later (lower priority) copies are skipped.
    """
    seen: set[K] = set()
    for plugin in reversed(plugins):
        for row in records_fn(plugin):
            key = key_fn(row)
            if key in seen:
                continue
            seen.add(key)
            yield plugin.mod_key, row
