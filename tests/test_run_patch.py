"""Tests for the patch driver over small synthetic load orders."""

import logging

import pytest

from tome_level_patcher.engine.run_patch import (
    SKIP_NO_NAME,
    SKIP_NO_SPELL,
    SKIP_NO_SPELL_INFO,
    SKIP_NOT_SPELL_TOME,
    SKIP_SPELL_NO_NAME,
    run_patch,
)
from tome_level_patcher.engine.settings import Settings
from tome_level_patcher.engine.state import PatcherState
from tome_level_patcher.errors import RecordError
from tome_level_patcher.models.book import Book, BookSkill, BookSpell, ScriptEntry, ScriptObjectProperty
from tome_level_patcher.models.constants import (
    BETTER_SPELL_LEARNING,
    VENDOR_ITEM_SPELL_TOME,
    ActorValue,
    CastType,
)
from tome_level_patcher.models.effect import EffectData, MagicEffect, SpellEffect
from tome_level_patcher.models.records import FormKey
from tome_level_patcher.models.spell import Spell
from tome_level_patcher.parser.dump_parser import PluginDump


SKYRIM = "Skyrim.esm"
FIRE_DAMAGE = FormKey(0x12FCC, SKYRIM)
FIREBOLT = FormKey(0x12FCD, SKYRIM)
NAMELESS = FormKey(0x12FCE, SKYRIM)
NO_EFFECTS = FormKey(0x12FCF, SKYRIM)
OTHER_KEYWORD = FormKey(0x0937A4, SKYRIM)


def _fk(form_id: int) -> FormKey:
    return FormKey(form_id, SKYRIM)


def _tome(form_id: int, name: str | None = "Spell Tome: Firebolt", spell: FormKey | None = FIREBOLT, **kw) -> Book:
    kw.setdefault("keywords", [VENDOR_ITEM_SPELL_TOME])
    return Book(
        form_key=_fk(form_id),
        editor_id=f"SpellTome{form_id:X}",
        name=name,
        teaches=BookSpell(spell=spell) if spell is not None else None,
        **kw,
    )


def _skyrim(*books: Book) -> PluginDump:
    return PluginDump(
        mod_key=SKYRIM,
        books=list(books),
        spells=[
            Spell(
                form_key=FIREBOLT,
                editor_id="Firebolt",
                name="Firebolt",
                effects=[SpellEffect(base_effect=FIRE_DAMAGE, data=EffectData(magnitude=25, duration=0))],
            ),
            Spell(form_key=NAMELESS, editor_id="Nameless", name=None, effects=[]),
            Spell(form_key=NO_EFFECTS, editor_id="NoEffects", name="Hollow", effects=[]),
        ],
        magic_effects=[
            MagicEffect(
                form_key=FIRE_DAMAGE,
                editor_id="FireDamageFFAimed",
                name="Fire Damage",
                base_cost=0.7,
                cast_type=CastType.FIRE_AND_FORGET,
                minimum_skill_level=50,
                magic_skill=ActorValue.DESTRUCTION,
            ),
        ],
    )


def _run(plugins: list[PluginDump], fmt: str = "<level> <school>: <spell>"):
    state = PatcherState.from_plugins(plugins)
    report = run_patch(state, Settings(format=fmt))
    return state, report


def test_spell_tome_is_renamed_in_patch(caplog):
    book = _tome(0x100)

    with caplog.at_level(logging.INFO):
        state, report = _run([_skyrim(book)])

    override = state.patch_mod.books.get(book.form_key)
    assert override is not None
    assert override.name == "Adept Destruction: Firebolt"
    # Source record is untouched.
    assert book.name == "Spell Tome: Firebolt"
    assert [o.new_name for o in report.renamed] == ["Adept Destruction: Firebolt"]
    assert "Spell Tome: Firebolt -> Adept Destruction: Firebolt" in caplog.text


def test_plugin_token_uses_defining_plugin_name():
    state, _ = _run([_skyrim(_tome(0x100))], fmt="<spell> (<plugin>)")
    assert state.patch_mod.books.get(_fk(0x100)).name == "Firebolt (Skyrim)"


@pytest.mark.parametrize("keywords", [None, [], [OTHER_KEYWORD]])
def test_books_without_marker_keyword_are_not_patched(keywords):
    state, report = _run([_skyrim(_tome(0x100, keywords=keywords))])

    assert len(state.patch_mod.books) == 0
    assert [o.reason for o in report.skipped] == [SKIP_NOT_SPELL_TOME]


def test_skippable_books_produce_no_override():
    books = [
        _tome(0x100, name=None),
        _tome(0x101, spell=None),
        _tome(0x102, spell=_fk(0xBAD)),
        _tome(0x103, spell=NAMELESS),
        Book(form_key=_fk(0x104), editor_id="SkillBook", name="Skill Book",
             keywords=[VENDOR_ITEM_SPELL_TOME], teaches=BookSkill(skill=ActorValue.ALTERATION)),
    ]
    state, report = _run([_skyrim(*books)])

    assert len(state.patch_mod.books) == 0
    reasons = {o.form_key.id: o.reason for o in report.skipped}
    assert reasons == {
        0x100: SKIP_NO_NAME,
        0x101: SKIP_NO_SPELL,
        0x102: SKIP_NO_SPELL,
        0x103: SKIP_SPELL_NO_NAME,
        0x104: SKIP_NO_SPELL,
    }
    assert report.failed == []


def test_missing_spell_info_skips_when_template_needs_it(caplog):
    book = _tome(0x100, name="Spell Tome: Hollow", spell=NO_EFFECTS)

    with caplog.at_level(logging.WARNING):
        state, report = _run([_skyrim(book)], fmt="<level>: <spell>")

    assert len(state.patch_mod.books) == 0
    assert [o.reason for o in report.skipped] == [SKIP_NO_SPELL_INFO]
    assert "Cannot determine school and level for book: Spell Tome: Hollow" in caplog.text


def test_missing_spell_info_is_fine_when_template_does_not_need_it():
    book = _tome(0x100, name="Spell Tome: Hollow", spell=NO_EFFECTS)

    state, _ = _run([_skyrim(book)], fmt="Tome of <spell>")

    assert state.patch_mod.books.get(book.form_key).name == "Tome of Hollow"


def test_spell_info_not_computed_when_template_does_not_need_it(monkeypatch):
    calls = []
    monkeypatch.setattr(
        "tome_level_patcher.engine.run_patch.get_spell_info",
        lambda *args: calls.append(args),
    )

    _run([_skyrim(_tome(0x100))], fmt="<spell>")

    assert calls == []


def _bsl_book(form_id: int) -> Book:
    return _tome(
        form_id,
        spell=None,
        scripts=[
            ScriptEntry(
                name="SpellTomeReadScript",
                properties=[ScriptObjectProperty(name="SpellLearned", object=FIREBOLT)],
            )
        ],
    )


def test_better_spell_learning_fallback_used_when_plugin_loaded():
    book = _bsl_book(0x100)

    state, report = _run([_skyrim(book), PluginDump(mod_key=BETTER_SPELL_LEARNING)])

    assert state.patch_mod.books.get(book.form_key).name == "Adept Destruction: Firebolt"
    assert len(report.renamed) == 1


def test_better_spell_learning_fallback_never_called_without_plugin(monkeypatch):
    def _boom(*_args):
        raise AssertionError("fallback must not run")

    monkeypatch.setattr("tome_level_patcher.engine.run_patch.find_better_spell_learning_spell", _boom)

    state, report = _run([_skyrim(_bsl_book(0x100))])

    assert len(state.patch_mod.books) == 0
    assert [o.reason for o in report.skipped] == [SKIP_NO_SPELL]


def test_direct_link_preferred_over_script():
    book = _bsl_book(0x100)
    book.teaches = BookSpell(spell=FIREBOLT)
    book.scripts[0].properties[0].object = NAMELESS

    state, _ = _run([_skyrim(book), PluginDump(mod_key=BETTER_SPELL_LEARNING)], fmt="<spell>")

    assert state.patch_mod.books.get(book.form_key).name == "Firebolt"


def test_winning_override_is_processed_once():
    base = _tome(0x100, name="Spell Tome: Firebolt")
    renamed = _tome(0x100, name="Tome (Firebolt)")
    mod = PluginDump(mod_key="Tomes.esp", masters=[SKYRIM], books=[renamed])

    state, report = _run([_skyrim(base), mod])

    assert len(report.outcomes) == 1
    outcome = report.renamed[0]
    assert outcome.mod_key == "Tomes.esp"
    assert outcome.old_name == "Tome (Firebolt)"
    assert len(state.patch_mod.books) == 1


def test_failure_on_one_book_does_not_stop_the_run(monkeypatch, caplog):
    from tome_level_patcher.engine import run_patch as run_patch_module

    real = run_patch_module.render_name

    def _flaky_render(fmt, **values):
        if values["spell"] == "Firebolt" and fmt.startswith("<level>") and not _flaky_render.failed:
            _flaky_render.failed = True
            raise RuntimeError("template exploded")
        return real(fmt, **values)

    _flaky_render.failed = False
    monkeypatch.setattr(run_patch_module, "render_name", _flaky_render)

    first = _tome(0x100, name="Spell Tome: One")
    second = _tome(0x101, name="Spell Tome: Two")

    with caplog.at_level(logging.ERROR):
        state, report = _run([_skyrim(first, second)])

    assert len(report.failed) == 1
    assert len(report.renamed) == 1
    failure = report.failed[0]
    assert isinstance(failure.error, RecordError)
    assert failure.error.mod_key == SKYRIM
    assert failure.error.form_key == failure.form_key
    assert isinstance(failure.error.__cause__, RuntimeError)
    assert "template exploded" in caplog.text
    assert str(failure.form_key) in caplog.text
    assert state.patch_mod.books.get(report.renamed[0].form_key) is not None
    assert state.patch_mod.books.get(failure.form_key) is None
