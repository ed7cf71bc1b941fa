"""Load order and link cache over parsed plugin dumps.

This is the read side of the patcher's environment: which plugins are
loaded, the winning version of each book, and FormKey -> record lookups.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Generic, TypeVar

from tome_level_patcher.models.book import Book
from tome_level_patcher.models.effect import MagicEffect
from tome_level_patcher.models.records import FormKey, same_mod
from tome_level_patcher.models.spell import Spell
from tome_level_patcher.parser.dump_parser import PluginDump
from tome_level_patcher.parser.plugin_merge import iter_winning_overrides, parse_records_merged


R = TypeVar("R", Book, Spell, MagicEffect)

_RECORD_GROUPS: dict[type, Callable[[PluginDump], list]] = {
    Book: lambda p: p.books,
    Spell: lambda p: p.spells,
    MagicEffect: lambda p: p.magic_effects,
}


def _group_for(kind: type) -> Callable[[PluginDump], list]:
    try:
        return _RECORD_GROUPS[kind]
    except KeyError:
        raise TypeError(f"Unsupported record kind: {kind.__name__}") from None


@dataclass(frozen=True, slots=True)
class RecordContext(Generic[R]):
    """A winning record together with the plugin it won from."""
    mod_key: str
    record: R


class LinkCache:
    """Resolves FormKeys to the winning record of a given kind.

    Build once per load order; lookups are plain dict hits.
    """

    def __init__(self, plugins: list[PluginDump]) -> None:
        self._by_kind: dict[type, dict[FormKey, object]] = {
            kind: parse_records_merged(plugins, records_fn)
            for kind, records_fn in _RECORD_GROUPS.items()
        }

    def resolve(self, form_key: FormKey | None, kind: type[R]) -> R | None:
        """Return the winning record of *kind*, or None if absent or another kind."""
        if form_key is None:
            return None
        records = self._by_kind.get(kind)
        if records is None:
            raise TypeError(f"Unsupported record kind: {kind.__name__}")
        return records.get(form_key)  # type: ignore[return-value]


class LoadOrder:
    """Plugins in load order (first loaded first)."""

    def __init__(self, plugins: list[PluginDump]) -> None:
        self._plugins = list(plugins)

    def has_mod(self, mod_key: str) -> bool:
        return any(same_mod(p.mod_key, mod_key) for p in self._plugins)

    def winning_overrides(self, kind: type[R]) -> Iterator[RecordContext[R]]:
        """Yield the winning version of every record of *kind*, in priority order."""
        for mod_key, record in iter_winning_overrides(self._plugins, _group_for(kind)):
            yield RecordContext(mod_key=mod_key, record=record)

    def link_cache(self) -> LinkCache:
        return LinkCache(self._plugins)
