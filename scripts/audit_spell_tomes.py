"""Audit spell tomes in a load order without writing a patch.

Shows each winning spell tome with the spell it teaches and the school/level
the patcher would derive for it.

Usage:
    python -m scripts.audit_spell_tomes --plugin Skyrim.esm.json [--plugin ...]
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path

from tome_level_patcher.engine.run_patch import find_taught_spell
from tome_level_patcher.engine.spell_info import get_spell_info
from tome_level_patcher.engine.state import PatcherState
from tome_level_patcher.models.book import Book
from tome_level_patcher.models.constants import (
    BETTER_SPELL_LEARNING,
    LEVEL_NAMES,
    VENDOR_ITEM_SPELL_TOME,
    school_name,
)
from tome_level_patcher.parser.plugin_merge import resolve_plugins_for_cli


@dataclass(slots=True)
class TomeRow:
    book: str
    winning_plugin: str
    spell: str
    school: str
    level: str


def collect_rows(state: PatcherState) -> list[TomeRow]:
    has_bsl = state.load_order.has_mod(BETTER_SPELL_LEARNING)
    rows: list[TomeRow] = []
    for context in state.load_order.winning_overrides(Book):
        book = context.record
        if book.name is None or not book.has_keyword(VENDOR_ITEM_SPELL_TOME):
            continue
        spell = find_taught_spell(state.link_cache, book, has_better_spell_learning=has_bsl)
        if spell is None:
            rows.append(TomeRow(book.name, context.mod_key, "?", "?", "?"))
            continue
        info = get_spell_info(state.link_cache, spell)
        rows.append(
            TomeRow(
                book=book.name,
                winning_plugin=context.mod_key,
                spell=spell.name or spell.editor_id,
                school=school_name(info.school) if info else "?",
                level=LEVEL_NAMES[info.level] if info else "?",
            )
        )
    return rows


def main() -> None:
    parser = argparse.ArgumentParser(description="Audit spell tome schools and levels")
    parser.add_argument("--plugin", type=Path, action="append", help="Plugin dump path; repeat in load order")
    args = parser.parse_args()

    paths = resolve_plugins_for_cli(args.plugin)
    state = PatcherState.from_paths(paths)
    rows = collect_rows(state)

    print(f"Spell tomes: {len(rows)}")
    for row in sorted(rows, key=lambda r: (r.school, LEVEL_NAMES.index(r.level) if r.level in LEVEL_NAMES else 99, r.book)):
        print(f"  - [{row.school} / {row.level}] {row.book} -> {row.spell} ({row.winning_plugin})")


if __name__ == "__main__":
    main()
