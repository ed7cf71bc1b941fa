"""Spell model and the derived school/level result."""

from dataclasses import dataclass, field

from tome_level_patcher.models.effect import SpellEffect
from tome_level_patcher.models.records import FormKey


@dataclass(slots=True)
class Spell:
    form_key: FormKey
    editor_id: str
    name: str | None
    effects: list[SpellEffect] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class SpellInfo:
    """School and level tier of a spell, taken from its dominant effect."""
    school: int  # ActorValue index
    level: int   # 0 (Novice) .. 4 (Master)
