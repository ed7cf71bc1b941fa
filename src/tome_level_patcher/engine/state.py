"""Everything one patch run reads from and writes to."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from tome_level_patcher.engine.patch_mod import PatchMod
from tome_level_patcher.parser.dump_parser import PluginDump
from tome_level_patcher.parser.load_order import LinkCache, LoadOrder
from tome_level_patcher.parser.plugin_merge import load_plugin_dumps


DEFAULT_PATCH_NAME = "DisplaySpellTomeLevelPatcher.esp"


@dataclass(slots=True)
class PatcherState:
    load_order: LoadOrder
    link_cache: LinkCache
    patch_mod: PatchMod

    @classmethod
    def from_plugins(
        cls,
        plugins: list[PluginDump],
        patch_name: str = DEFAULT_PATCH_NAME,
    ) -> "PatcherState":
        load_order = LoadOrder(plugins)
        return cls(
            load_order=load_order,
            link_cache=load_order.link_cache(),
            patch_mod=PatchMod(patch_name),
        )

    @classmethod
    def from_paths(
        cls,
        paths: list[Path],
        patch_name: str = DEFAULT_PATCH_NAME,
    ) -> "PatcherState":
        return cls.from_plugins(load_plugin_dumps(paths), patch_name)
