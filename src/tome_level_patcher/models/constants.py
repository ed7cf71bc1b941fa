"""Skyrim actor values, cast types, and the fixed lookup tables for renaming.

Actor value indices follow the Skyrim Creation Kit numbering. Only the five
magic schools matter for spell tomes; the remaining skills are included so
dumps that name them still parse.
"""

from enum import IntEnum

from tome_level_patcher.models.records import FormKey


class ActorValue(IntEnum):
    """Skill actor value indices as stored on MGEF records."""
    NONE = -1

    ONE_HANDED = 6
    TWO_HANDED = 7
    ARCHERY = 8
    BLOCK = 9
    SMITHING = 10
    HEAVY_ARMOR = 11
    LIGHT_ARMOR = 12
    PICKPOCKET = 13
    LOCKPICKING = 14
    SNEAK = 15
    ALCHEMY = 16
    SPEECH = 17

    # Magic schools
    ALTERATION = 18
    CONJURATION = 19
    DESTRUCTION = 20
    ILLUSION = 21
    RESTORATION = 22

    ENCHANTING = 23


class CastType(IntEnum):
    CONSTANT_EFFECT = 0
    FIRE_AND_FORGET = 1
    CONCENTRATION = 2
    SCROLL = 3


# Indexed by level tier (0-4)
LEVEL_NAMES: tuple[str, ...] = ("Novice", "Apprentice", "Adept", "Expert", "Master")

MAGIC_SCHOOL_NAMES: dict[int, str] = {
    ActorValue.ALTERATION: "Alteration",
    ActorValue.CONJURATION: "Conjuration",
    ActorValue.DESTRUCTION: "Destruction",
    ActorValue.ILLUSION: "Illusion",
    ActorValue.RESTORATION: "Restoration",
}

NO_SCHOOL_NAME = "None"

ALLOWED_MINIMUM_SKILL_LEVELS = frozenset({0, 25, 50, 75, 100})

# Keyword carried by every vendor-sold spell tome.
VENDOR_ITEM_SPELL_TOME = FormKey(0x0937A5, "Skyrim.esm")

# Compatibility plugin that moves the taught spell into a script property.
BETTER_SPELL_LEARNING = "Better Spell Learning.esp"


def school_name(actor_value: int) -> str:
    """Display name for a magic school, or "None" for any other skill."""
    return MAGIC_SCHOOL_NAMES.get(int(actor_value), NO_SCHOOL_NAME)
