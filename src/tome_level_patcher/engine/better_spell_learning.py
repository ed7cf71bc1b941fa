"""Find the taught spell on books patched by Better Spell Learning.

That mod strips the book's teaches-spell link and instead attaches
SpellTomeReadScript with the spell in its SpellLearned object property.
"""

from __future__ import annotations

from tome_level_patcher.models.book import Book, ScriptObjectProperty
from tome_level_patcher.models.spell import Spell
from tome_level_patcher.parser.load_order import LinkCache

READ_SCRIPT_NAME = "SpellTomeReadScript"
SPELL_PROPERTY_NAME = "SpellLearned"


def find_better_spell_learning_spell(link_cache: LinkCache, book: Book) -> Spell | None:
    # Every match is resolved in order; the last one that resolves wins.
    spell: Spell | None = None
    for script in book.scripts or []:
        if script.name != READ_SCRIPT_NAME:
            continue
        for prop in script.properties:
            if not isinstance(prop, ScriptObjectProperty) or prop.name != SPELL_PROPERTY_NAME:
                continue
            resolved = link_cache.resolve(prop.object, Spell)
            if resolved is not None:
                spell = resolved
    return spell
