"""The output patch: overrides collected during a run, written once at the end."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

from tome_level_patcher.models.book import Book
from tome_level_patcher.models.records import FormKey
from tome_level_patcher.parser.dump_parser import dump_book


class BookGroup:
    """Book overrides held by a patch, keyed by FormKey in insertion order."""

    def __init__(self) -> None:
        self._records: dict[FormKey, Book] = {}

    def get_or_add_as_override(self, book: Book) -> Book:
        """Return the patch's copy of *book*, copying it in on first use.

        The copy is independent of the source record, so edits never leak back
        into the load order.
        """
        existing = self._records.get(book.form_key)
        if existing is not None:
            return existing
        override = copy.deepcopy(book)
        self._records[book.form_key] = override
        return override

    def get(self, form_key: FormKey) -> Book | None:
        return self._records.get(form_key)

    def __contains__(self, form_key: object) -> bool:
        return form_key in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self):
        return iter(self._records.values())


class PatchMod:
    def __init__(self, mod_key: str, masters: list[str] | None = None) -> None:
        self.mod_key = mod_key
        self.masters = list(masters or [])
        self.books = BookGroup()

    def _referenced_masters(self) -> list[str]:
        # Every plugin that defines an overridden record must be a master.
        masters = list(self.masters)
        lowered = {m.lower() for m in masters}
        for book in self.books:
            owner = book.form_key.mod_key
            if owner.lower() not in lowered:
                lowered.add(owner.lower())
                masters.append(owner)
        return masters

    def to_dict(self) -> dict[str, Any]:
        return {
            "mod_key": self.mod_key,
            "masters": self._referenced_masters(),
            "books": [dump_book(b) for b in self.books],
            "spells": [],
            "magic_effects": [],
        }

    def write(self, path: Path) -> None:
        path.write_text(json.dumps(self.to_dict(), indent=2) + "\n", encoding="utf-8")
