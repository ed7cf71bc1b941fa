"""BOOK record model, including the embedded script (VMAD) data.

A book "teaches" either a skill or a spell. Script properties come in several
kinds; only object properties can point at a spell, so each kind is its own
class and callers check for the one they need.
"""

from dataclasses import dataclass, field

from tome_level_patcher.models.records import FormKey


@dataclass(slots=True)
class BookSpell:
    """Teaches-spell payload: the book adds this spell when read."""
    spell: FormKey | None


@dataclass(slots=True)
class BookSkill:
    """Teaches-skill payload: a skill book."""
    skill: int  # ActorValue index


@dataclass(slots=True)
class ScriptProperty:
    """A script property whose kind the patcher does not inspect."""
    name: str


@dataclass(slots=True)
class ScriptObjectProperty(ScriptProperty):
    object: FormKey | None = None


@dataclass(slots=True)
class ScriptIntProperty(ScriptProperty):
    value: int = 0


@dataclass(slots=True)
class ScriptFloatProperty(ScriptProperty):
    value: float = 0.0


@dataclass(slots=True)
class ScriptBoolProperty(ScriptProperty):
    value: bool = False


@dataclass(slots=True)
class ScriptStringProperty(ScriptProperty):
    value: str = ""


@dataclass(slots=True)
class ScriptEntry:
    name: str
    properties: list[ScriptProperty] = field(default_factory=list)


@dataclass(slots=True)
class Book:
    """A BOOK record as it appears in one plugin.

    `name` and `keywords` are None when the record has no FULL/KWDA
    subrecord, which is different from an empty keyword list only in
    how the plugin stored it.
    """
    form_key: FormKey
    editor_id: str
    name: str | None = None
    keywords: list[FormKey] | None = None
    teaches: BookSpell | BookSkill | None = None
    scripts: list[ScriptEntry] | None = None

    def has_keyword(self, keyword: FormKey) -> bool:
        return self.keywords is not None and keyword in self.keywords
