"""Work out a spell's school and level from its dominant magic effect.

The dominant effect is the one with the highest cost, using the same shape
as the game's auto-calculated spell cost:

    cost = base_cost * magnitude^1.1 * duration_factor

where duration_factor is 1 for concentration effects and duration^1.1
otherwise (a duration of 0 counts as 10).
"""

from __future__ import annotations

import logging
import math

from tome_level_patcher.models.constants import ALLOWED_MINIMUM_SKILL_LEVELS, LEVEL_NAMES
from tome_level_patcher.models.effect import EffectData, MagicEffect
from tome_level_patcher.models.spell import Spell, SpellInfo
from tome_level_patcher.parser.load_order import LinkCache

logger = logging.getLogger(__name__)

COST_EXPONENT = 1.1
DEFAULT_DURATION = 10
SKILL_LEVELS_PER_TIER = 25
MAX_LEVEL = len(LEVEL_NAMES) - 1


def effect_cost(data: EffectData, magic_effect: MagicEffect) -> float:
    # Fractional powers of negatives are undefined; NaN never wins a comparison.
    if data.magnitude < 0:
        return math.nan
    if magic_effect.is_concentration:
        duration_factor = 1.0
    elif data.duration < 0:
        return math.nan
    else:
        duration_factor = (data.duration or DEFAULT_DURATION) ** COST_EXPONENT
    return magic_effect.base_cost * data.magnitude ** COST_EXPONENT * duration_factor


def level_for_minimum_skill(minimum_skill_level: int) -> int:
    """Map a minimum skill level to a tier, clamped to Novice..Master."""
    return max(0, min(MAX_LEVEL, int(minimum_skill_level) // SKILL_LEVELS_PER_TIER))


def dominant_effect(link_cache: LinkCache, spell: Spell) -> MagicEffect | None:
    """Return the base effect of the costliest effect entry; first one wins ties."""
    max_cost = -1.0
    winner: MagicEffect | None = None
    for effect in spell.effects:
        if effect.data is None:
            continue
        magic_effect = link_cache.resolve(effect.base_effect, MagicEffect)
        if magic_effect is None:
            continue
        cost = effect_cost(effect.data, magic_effect)
        if cost > max_cost:
            max_cost = cost
            winner = magic_effect
    return winner


def get_spell_info(link_cache: LinkCache, spell: Spell) -> SpellInfo | None:
    magic_effect = dominant_effect(link_cache, spell)
    if magic_effect is None:
        return None
    if magic_effect.minimum_skill_level not in ALLOWED_MINIMUM_SKILL_LEVELS:
        logger.warning(
            "Unexpected minimum skill level %s for magic effect: %s",
            magic_effect.minimum_skill_level,
            magic_effect.form_key,
        )
    return SpellInfo(
        school=magic_effect.magic_skill,
        level=level_for_minimum_skill(magic_effect.minimum_skill_level),
    )
