"""Rename every winning spell tome in the load order.

Each book is handled by patch_book(), which reports what happened as a
BookOutcome instead of raising. process_book() wraps it so that an
unexpected exception on one book becomes a "failed" outcome carrying the
plugin and FormKey, and the run moves on to the next book.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal

from tome_level_patcher.engine.better_spell_learning import find_better_spell_learning_spell
from tome_level_patcher.engine.rename_format import render_name, requires_spell_info
from tome_level_patcher.engine.settings import Settings
from tome_level_patcher.engine.spell_info import get_spell_info
from tome_level_patcher.engine.state import PatcherState
from tome_level_patcher.errors import RecordError
from tome_level_patcher.models.book import Book, BookSpell
from tome_level_patcher.models.constants import (
    BETTER_SPELL_LEARNING,
    LEVEL_NAMES,
    VENDOR_ITEM_SPELL_TOME,
    school_name,
)
from tome_level_patcher.models.records import FormKey
from tome_level_patcher.models.spell import Spell
from tome_level_patcher.parser.load_order import LinkCache, RecordContext

logger = logging.getLogger(__name__)


OutcomeKind = Literal["renamed", "skipped", "failed"]

SKIP_NO_NAME = "book has no name"
SKIP_NOT_SPELL_TOME = "not a spell tome"
SKIP_NO_SPELL = "no taught spell"
SKIP_SPELL_NO_NAME = "spell has no name"
SKIP_NO_SPELL_INFO = "cannot determine school and level"


@dataclass(frozen=True, slots=True)
class BookOutcome:
    """What happened to one book during a run."""

    kind: OutcomeKind
    form_key: FormKey
    mod_key: str
    old_name: str | None = None
    new_name: str | None = None
    reason: str = ""
    error: RecordError | None = None


@dataclass(slots=True)
class PatchReport:
    outcomes: list[BookOutcome] = field(default_factory=list)

    def _of_kind(self, kind: OutcomeKind) -> list[BookOutcome]:
        return [o for o in self.outcomes if o.kind == kind]

    @property
    def renamed(self) -> list[BookOutcome]:
        return self._of_kind("renamed")

    @property
    def skipped(self) -> list[BookOutcome]:
        return self._of_kind("skipped")

    @property
    def failed(self) -> list[BookOutcome]:
        return self._of_kind("failed")


def find_taught_spell(
    link_cache: LinkCache,
    book: Book,
    *,
    has_better_spell_learning: bool,
) -> Spell | None:
    """Direct teaches-spell link first, then the Better Spell Learning script."""
    spell: Spell | None = None
    if isinstance(book.teaches, BookSpell):
        spell = link_cache.resolve(book.teaches.spell, Spell)
    if spell is None and has_better_spell_learning:
        spell = find_better_spell_learning_spell(link_cache, book)
    return spell


def patch_book(
    state: PatcherState,
    context: RecordContext[Book],
    rename_format: str,
    *,
    has_better_spell_learning: bool,
) -> BookOutcome:
    book = context.record

    def skipped(reason: str) -> BookOutcome:
        return BookOutcome(
            kind="skipped",
            form_key=book.form_key,
            mod_key=context.mod_key,
            old_name=book.name,
            reason=reason,
        )

    if book.name is None:
        return skipped(SKIP_NO_NAME)
    if not book.has_keyword(VENDOR_ITEM_SPELL_TOME):
        return skipped(SKIP_NOT_SPELL_TOME)

    spell = find_taught_spell(
        state.link_cache,
        book,
        has_better_spell_learning=has_better_spell_learning,
    )
    if spell is None:
        return skipped(SKIP_NO_SPELL)
    if spell.name is None:
        return skipped(SKIP_SPELL_NO_NAME)

    level_name = ""
    school = ""
    if requires_spell_info(rename_format):
        spell_info = get_spell_info(state.link_cache, spell)
        if spell_info is None:
            logger.warning("Cannot determine school and level for book: %s", book.name)
            return skipped(SKIP_NO_SPELL_INFO)
        level_name = LEVEL_NAMES[spell_info.level]
        school = school_name(spell_info.school)

    new_name = render_name(
        rename_format,
        level=level_name,
        spell=spell.name,
        plugin=book.form_key.mod_name,
        school=school,
    )
    logger.info("%s -> %s", book.name, new_name)

    state.patch_mod.books.get_or_add_as_override(book).name = new_name
    return BookOutcome(
        kind="renamed",
        form_key=book.form_key,
        mod_key=context.mod_key,
        old_name=book.name,
        new_name=new_name,
    )


def process_book(
    state: PatcherState,
    context: RecordContext[Book],
    rename_format: str,
    *,
    has_better_spell_learning: bool,
) -> BookOutcome:
    """patch_book() with a failure boundary around it."""
    book = context.record
    try:
        return patch_book(
            state,
            context,
            rename_format,
            has_better_spell_learning=has_better_spell_learning,
        )
    except Exception as exc:
        err = RecordError.enrich(exc, context.mod_key, book.form_key, book.editor_id)
        logger.error("%s", err, exc_info=exc)
        return BookOutcome(
            kind="failed",
            form_key=book.form_key,
            mod_key=context.mod_key,
            old_name=book.name,
            error=err,
        )


def run_patch(state: PatcherState, settings: Settings) -> PatchReport:
    has_better_spell_learning = state.load_order.has_mod(BETTER_SPELL_LEARNING)
    if has_better_spell_learning:
        logger.debug("%s found; reading taught spells from book scripts", BETTER_SPELL_LEARNING)

    report = PatchReport()
    for context in state.load_order.winning_overrides(Book):
        report.outcomes.append(
            process_book(
                state,
                context,
                settings.format,
                has_better_spell_learning=has_better_spell_learning,
            )
        )
    return report
