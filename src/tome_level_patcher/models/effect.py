"""Magic effect data models.

The chain a spell tome walks is: book -> spell -> effect entry -> base
magic effect. These models cover the bottom two layers: the per-spell effect
entry (SPEL EFID/EFIT pair) and the shared MGEF record it points at.
"""

from dataclasses import dataclass

from tome_level_patcher.models.constants import CastType
from tome_level_patcher.models.records import FormKey


@dataclass(slots=True)
class MagicEffect:
    """A base magic effect (MGEF record).

    Only the fields that feed the cost heuristic and the school/level lookup
    are kept; visuals, sounds and archetype data are not needed.
    """
    form_key: FormKey
    editor_id: str
    name: str
    base_cost: float
    cast_type: CastType
    minimum_skill_level: int  # expected to be one of 0/25/50/75/100
    magic_skill: int          # ActorValue index, -1 if none

    @property
    def is_concentration(self) -> bool:
        return self.cast_type == CastType.CONCENTRATION


@dataclass(slots=True)
class EffectData:
    """EFIT payload: magnitude, area and duration of one spell effect."""
    magnitude: float
    area: int = 0
    duration: int = 0  # seconds, 0 = instant


@dataclass(slots=True)
class SpellEffect:
    """One EFID+EFIT pair within a spell.

    Either half may be missing in a malformed plugin, so both are optional.
    """
    base_effect: FormKey | None
    data: EffectData | None = None
