from scripts.audit_spell_tomes import TomeRow, collect_rows
from tome_level_patcher.engine.state import PatcherState
from tome_level_patcher.models.book import Book, BookSpell
from tome_level_patcher.models.constants import VENDOR_ITEM_SPELL_TOME, ActorValue, CastType
from tome_level_patcher.models.effect import EffectData, MagicEffect, SpellEffect
from tome_level_patcher.models.records import FormKey
from tome_level_patcher.models.spell import Spell
from tome_level_patcher.parser.dump_parser import PluginDump


def _fk(form_id: int) -> FormKey:
    return FormKey(form_id, "Skyrim.esm")


def test_collect_rows_lists_spell_tomes_only():
    plugin = PluginDump(
        mod_key="Skyrim.esm",
        books=[
            Book(form_key=_fk(0x100), editor_id="SpellTomeHealing", name="Spell Tome: Healing",
                 keywords=[VENDOR_ITEM_SPELL_TOME], teaches=BookSpell(spell=_fk(0x10))),
            Book(form_key=_fk(0x101), editor_id="SpellTomeLost", name="Spell Tome: Lost",
                 keywords=[VENDOR_ITEM_SPELL_TOME], teaches=BookSpell(spell=_fk(0x99))),
            Book(form_key=_fk(0x102), editor_id="BookNotATome", name="Notes", keywords=[]),
        ],
        spells=[
            Spell(form_key=_fk(0x10), editor_id="Healing", name="Healing",
                  effects=[SpellEffect(base_effect=_fk(0x20), data=EffectData(magnitude=10))]),
        ],
        magic_effects=[
            MagicEffect(form_key=_fk(0x20), editor_id="RestoreHealthConcSelf", name="Restore Health",
                        base_cost=0.5, cast_type=CastType.CONCENTRATION, minimum_skill_level=0,
                        magic_skill=ActorValue.RESTORATION),
        ],
    )

    rows = collect_rows(PatcherState.from_plugins([plugin]))

    assert rows == [
        TomeRow("Spell Tome: Healing", "Skyrim.esm", "Healing", "Restoration", "Novice"),
        TomeRow("Spell Tome: Lost", "Skyrim.esm", "?", "?", "?"),
    ]
