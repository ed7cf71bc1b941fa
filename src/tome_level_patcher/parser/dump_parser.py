"""Parse JSON plugin dumps into record models.

One dump file describes one plugin:

  {
    "mod_key": "Skyrim.esm",
    "masters": [],
    "books": [...],
    "spells": [...],
    "magic_effects": [...]
  }

Record references are FormKey strings ("0937A5:Skyrim.esm"). Enum-valued
fields (cast type, actor values) accept either the integer value or the
name, e.g. "Concentration" or "FireAndForget". Absent lists are treated as
empty; absent names/keywords/scripts stay None because the patcher treats
"no FULL" differently from an empty string.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Any, TypeVar

from tome_level_patcher.errors import DumpFormatError
from tome_level_patcher.models.book import (
    Book,
    BookSkill,
    BookSpell,
    ScriptBoolProperty,
    ScriptEntry,
    ScriptFloatProperty,
    ScriptIntProperty,
    ScriptObjectProperty,
    ScriptProperty,
    ScriptStringProperty,
)
from tome_level_patcher.models.constants import ActorValue, CastType
from tome_level_patcher.models.effect import EffectData, MagicEffect, SpellEffect
from tome_level_patcher.models.records import FormKey
from tome_level_patcher.models.spell import Spell


E = TypeVar("E", bound=IntEnum)

_NAME_NORMALIZE = re.compile(r"[\s_\-]")


@dataclass(slots=True)
class PluginDump:
    """All records one plugin defines or overrides."""
    mod_key: str
    masters: list[str] = field(default_factory=list)
    books: list[Book] = field(default_factory=list)
    spells: list[Spell] = field(default_factory=list)
    magic_effects: list[MagicEffect] = field(default_factory=list)


def _require(row: dict[str, Any], key: str, plugin: str, what: str) -> Any:
    if key not in row:
        raise DumpFormatError(plugin, f"{what} is missing {key!r}")
    return row[key]


def _form_key(value: Any, plugin: str, what: str) -> FormKey:
    if not isinstance(value, str):
        raise DumpFormatError(plugin, f"{what}: expected FormKey string, got {value!r}")
    try:
        return FormKey.parse(value)
    except ValueError as exc:
        raise DumpFormatError(plugin, f"{what}: {exc}") from None


def _optional_form_key(value: Any, plugin: str, what: str) -> FormKey | None:
    if value is None:
        return None
    return _form_key(value, plugin, what)


def _enum_value(enum_cls: type[E], value: Any, plugin: str, what: str) -> E:
    if isinstance(value, bool):
        raise DumpFormatError(plugin, f"{what}: bool is not a valid {enum_cls.__name__}")
    if isinstance(value, int):
        try:
            return enum_cls(value)
        except ValueError:
            raise DumpFormatError(plugin, f"{what}: unknown {enum_cls.__name__} {value}") from None
    if isinstance(value, str):
        wanted = _NAME_NORMALIZE.sub("", value).lower()
        for member in enum_cls:
            if member.name.replace("_", "").lower() == wanted:
                return member
    raise DumpFormatError(plugin, f"{what}: unknown {enum_cls.__name__} {value!r}")


def _actor_value(value: Any, plugin: str, what: str) -> int:
    # Unknown integer actor values are kept as-is; they just have no school name.
    if value is None:
        return int(ActorValue.NONE)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return int(_enum_value(ActorValue, value, plugin, what))


def _optional_str(value: Any, plugin: str, what: str) -> str | None:
    if value is None or isinstance(value, str):
        return value
    raise DumpFormatError(plugin, f"{what}: expected string, got {value!r}")


def _number(value: Any, cast: type, plugin: str, what: str) -> Any:
    # bool is an int subclass but never a valid number here.
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise DumpFormatError(plugin, f"{what}: expected number, got {value!r}")
    try:
        return cast(value)
    except ValueError:
        raise DumpFormatError(plugin, f"{what}: expected number, got {value!r}") from None


def _int(value: Any, plugin: str, what: str) -> int:
    if isinstance(value, float) and not value.is_integer():
        raise DumpFormatError(plugin, f"{what}: expected integer, got {value!r}")
    return _number(value, int, plugin, what)


def _float(value: Any, plugin: str, what: str) -> float:
    return _number(value, float, plugin, what)


def _bool(value: Any, plugin: str, what: str) -> bool:
    if not isinstance(value, bool):
        raise DumpFormatError(plugin, f"{what}: expected true or false, got {value!r}")
    return value


def _row(value: Any, plugin: str, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise DumpFormatError(plugin, f"{what}: expected an object, got {value!r}")
    return value


def _list(row: dict[str, Any], key: str, plugin: str, what: str) -> list[Any]:
    value = row.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise DumpFormatError(plugin, f"{what}: {key!r} must be a list")
    return value


def parse_script_property(row: Any, plugin: str, what: str) -> ScriptProperty:
    row = _row(row, plugin, f"{what} property")
    name = str(_require(row, "name", plugin, what))
    kind = str(row.get("type", "")).strip().lower()
    where = f"{what} property {name!r}"
    if kind == "object":
        return ScriptObjectProperty(name=name, object=_optional_form_key(row.get("object"), plugin, where))
    if kind == "int":
        return ScriptIntProperty(name=name, value=_int(row.get("value", 0), plugin, where))
    if kind == "float":
        return ScriptFloatProperty(name=name, value=_float(row.get("value", 0.0), plugin, where))
    if kind == "bool":
        return ScriptBoolProperty(name=name, value=_bool(row.get("value", False), plugin, where))
    if kind == "string":
        return ScriptStringProperty(name=name, value=str(row.get("value", "")))
    # Arrays, structs and variables are never inspected.
    return ScriptProperty(name=name)


def parse_script(row: Any, plugin: str, what: str) -> ScriptEntry:
    row = _row(row, plugin, f"{what} script")
    name = str(_require(row, "name", plugin, what))
    return ScriptEntry(
        name=name,
        properties=[
            parse_script_property(p, plugin, f"{what} script {name!r}")
            for p in _list(row, "properties", plugin, what)
        ],
    )


def _parse_teaches(value: Any, plugin: str, what: str) -> BookSpell | BookSkill | None:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise DumpFormatError(plugin, f"{what}: 'teaches' must be an object or null")
    if "spell" in value:
        return BookSpell(spell=_optional_form_key(value["spell"], plugin, f"{what} teaches"))
    if "skill" in value:
        return BookSkill(skill=_actor_value(value["skill"], plugin, f"{what} teaches"))
    raise DumpFormatError(plugin, f"{what}: 'teaches' needs a 'spell' or 'skill' key")


def parse_book(row: Any, plugin: str) -> Book:
    row = _row(row, plugin, "book")
    form_key = _form_key(_require(row, "form_key", plugin, "book"), plugin, "book form_key")
    what = f"book {form_key}"
    keywords = row.get("keywords")
    if keywords is not None:
        if not isinstance(keywords, list):
            raise DumpFormatError(plugin, f"{what}: 'keywords' must be a list or null")
        keywords = [_form_key(k, plugin, f"{what} keyword") for k in keywords]
    scripts = row.get("scripts")
    if scripts is not None:
        scripts = [parse_script(s, plugin, what) for s in _list(row, "scripts", plugin, what)]
    return Book(
        form_key=form_key,
        editor_id=str(row.get("editor_id") or ""),
        name=_optional_str(row.get("name"), plugin, f"{what} name"),
        keywords=keywords,
        teaches=_parse_teaches(row.get("teaches"), plugin, what),
        scripts=scripts,
    )


def parse_spell_effect(row: Any, plugin: str, what: str) -> SpellEffect:
    row = _row(row, plugin, f"{what} effect")
    data = row.get("data")
    effect_data: EffectData | None = None
    if data is not None:
        if not isinstance(data, dict):
            raise DumpFormatError(plugin, f"{what}: effect 'data' must be an object or null")
        effect_data = EffectData(
            magnitude=_float(data.get("magnitude", 0.0), plugin, f"{what} effect magnitude"),
            area=_int(data.get("area", 0), plugin, f"{what} effect area"),
            duration=_int(data.get("duration", 0), plugin, f"{what} effect duration"),
        )
    return SpellEffect(
        base_effect=_optional_form_key(row.get("base_effect"), plugin, f"{what} base_effect"),
        data=effect_data,
    )


def parse_spell(row: Any, plugin: str) -> Spell:
    row = _row(row, plugin, "spell")
    form_key = _form_key(_require(row, "form_key", plugin, "spell"), plugin, "spell form_key")
    what = f"spell {form_key}"
    return Spell(
        form_key=form_key,
        editor_id=str(row.get("editor_id") or ""),
        name=_optional_str(row.get("name"), plugin, f"{what} name"),
        effects=[parse_spell_effect(e, plugin, what) for e in _list(row, "effects", plugin, what)],
    )


def parse_mgef(row: Any, plugin: str) -> MagicEffect:
    row = _row(row, plugin, "magic effect")
    form_key = _form_key(_require(row, "form_key", plugin, "magic effect"), plugin, "magic effect form_key")
    what = f"magic effect {form_key}"
    editor_id = str(row.get("editor_id") or "")
    return MagicEffect(
        form_key=form_key,
        editor_id=editor_id,
        name=str(row.get("name") or editor_id),
        base_cost=_float(row.get("base_cost", 0.0), plugin, f"{what} base_cost"),
        cast_type=_enum_value(CastType, row.get("cast_type", 0), plugin, f"{what} cast_type"),
        minimum_skill_level=_int(row.get("minimum_skill_level", 0), plugin, f"{what} minimum_skill_level"),
        magic_skill=_actor_value(row.get("magic_skill"), plugin, f"{what} magic_skill"),
    )


def parse_plugin_dump(payload: Any, *, default_mod_key: str | None = None) -> PluginDump:
    """Parse one decoded plugin dump object."""
    if not isinstance(payload, dict):
        raise DumpFormatError(default_mod_key or "<unknown>", "dump must be a JSON object")
    mod_key = payload.get("mod_key") or default_mod_key
    if not mod_key:
        raise DumpFormatError("<unknown>", "dump is missing 'mod_key'")
    mod_key = str(mod_key)
    return PluginDump(
        mod_key=mod_key,
        masters=[str(m) for m in _list(payload, "masters", mod_key, "plugin")],
        books=[parse_book(r, mod_key) for r in _list(payload, "books", mod_key, "plugin")],
        spells=[parse_spell(r, mod_key) for r in _list(payload, "spells", mod_key, "plugin")],
        magic_effects=[
            parse_mgef(r, mod_key) for r in _list(payload, "magic_effects", mod_key, "plugin")
        ],
    )


def mod_key_for_path(path: Path) -> str:
    """Default plugin name for a dump file: "Skyrim.esm.json" -> "Skyrim.esm"."""
    if path.suffix.lower() == ".json":
        return path.stem
    return path.name


def load_plugin_dump(path: Path) -> PluginDump:
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise DumpFormatError(path.name, f"not valid UTF-8: {exc}") from None
    except FileNotFoundError:
        raise
    except OSError as exc:
        raise DumpFormatError(path.name, f"cannot read dump: {exc.strerror or exc}") from None
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DumpFormatError(path.name, f"invalid JSON: {exc}") from None
    return parse_plugin_dump(payload, default_mod_key=mod_key_for_path(path))


def dump_book(book: Book) -> dict[str, Any]:
    """Inverse of parse_book, used when writing the output patch."""
    teaches: dict[str, Any] | None = None
    if isinstance(book.teaches, BookSpell):
        teaches = {"spell": str(book.teaches.spell) if book.teaches.spell else None}
    elif isinstance(book.teaches, BookSkill):
        teaches = {"skill": book.teaches.skill}

    scripts: list[dict[str, Any]] | None = None
    if book.scripts is not None:
        scripts = [
            {"name": s.name, "properties": [_dump_property(p) for p in s.properties]}
            for s in book.scripts
        ]

    return {
        "form_key": str(book.form_key),
        "editor_id": book.editor_id,
        "name": book.name,
        "keywords": [str(k) for k in book.keywords] if book.keywords is not None else None,
        "teaches": teaches,
        "scripts": scripts,
    }


def _dump_property(prop: ScriptProperty) -> dict[str, Any]:
    if isinstance(prop, ScriptObjectProperty):
        return {"name": prop.name, "type": "object", "object": str(prop.object) if prop.object else None}
    if isinstance(prop, ScriptIntProperty):
        return {"name": prop.name, "type": "int", "value": prop.value}
    if isinstance(prop, ScriptFloatProperty):
        return {"name": prop.name, "type": "float", "value": prop.value}
    if isinstance(prop, ScriptBoolProperty):
        return {"name": prop.name, "type": "bool", "value": prop.value}
    if isinstance(prop, ScriptStringProperty):
        return {"name": prop.name, "type": "string", "value": prop.value}
    return {"name": prop.name}
