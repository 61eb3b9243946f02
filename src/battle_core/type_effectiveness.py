from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from src.battle_core.constants import TYPE_MUL_NO_EFFECT, TYPE_MUL_NORMAL, TYPE_MUL_NOT_EFFECTIVE, TYPE_MUL_SUPER_EFFECTIVE
from src.battle_core.enums.type import Type

_X2 = TYPE_MUL_SUPER_EFFECTIVE
_X05 = TYPE_MUL_NOT_EFFECTIVE
_X0 = TYPE_MUL_NO_EFFECT

# Defensive modifiers: defending type -> {attacking type: multiplier}.
# Only entries that differ from x1.0 are listed.
DEFAULT_DEFENSE_MODS: dict[Type, dict[Type, float]] = {
    Type.NORMAL: {Type.FIGHTING: _X2, Type.GHOST: _X0},
    Type.FIGHTING: {Type.BUG: _X05, Type.DARK: _X05, Type.ROCK: _X05, Type.FAIRY: _X2, Type.FLYING: _X2, Type.PSYCHIC: _X2},
    Type.FLYING: {Type.BUG: _X05, Type.FIGHTING: _X05, Type.GRASS: _X05, Type.ELECTRIC: _X2, Type.ICE: _X2, Type.ROCK: _X2, Type.GROUND: _X0},
    Type.POISON: {Type.FIGHTING: _X05, Type.POISON: _X05, Type.GRASS: _X05, Type.BUG: _X05, Type.FAIRY: _X05, Type.GROUND: _X2, Type.PSYCHIC: _X2},
    Type.GROUND: {Type.POISON: _X05, Type.ROCK: _X05, Type.GRASS: _X2, Type.ICE: _X2, Type.WATER: _X2, Type.ELECTRIC: _X0},
    Type.ROCK: {
        Type.FIRE: _X05,
        Type.FLYING: _X05,
        Type.NORMAL: _X05,
        Type.POISON: _X05,
        Type.FIGHTING: _X2,
        Type.GRASS: _X2,
        Type.GROUND: _X2,
        Type.STEEL: _X2,
        Type.WATER: _X2,
    },
    Type.BUG: {Type.FIGHTING: _X05, Type.GRASS: _X05, Type.GROUND: _X05, Type.FIRE: _X2, Type.FLYING: _X2, Type.ROCK: _X2},
    Type.GHOST: {Type.POISON: _X05, Type.BUG: _X05, Type.GHOST: _X2, Type.DARK: _X2, Type.NORMAL: _X0, Type.FIGHTING: _X0},
    Type.STEEL: {
        Type.NORMAL: _X05,
        Type.GRASS: _X05,
        Type.ICE: _X05,
        Type.FLYING: _X05,
        Type.PSYCHIC: _X05,
        Type.BUG: _X05,
        Type.ROCK: _X05,
        Type.DRAGON: _X05,
        Type.STEEL: _X05,
        Type.FAIRY: _X05,
        Type.FIRE: _X2,
        Type.FIGHTING: _X2,
        Type.GROUND: _X2,
        Type.POISON: _X0,
    },
    Type.FIRE: {
        Type.FIRE: _X05,
        Type.GRASS: _X05,
        Type.ICE: _X05,
        Type.BUG: _X05,
        Type.STEEL: _X05,
        Type.FAIRY: _X05,
        Type.WATER: _X2,
        Type.GROUND: _X2,
        Type.ROCK: _X2,
    },
    Type.WATER: {Type.FIRE: _X05, Type.WATER: _X05, Type.ICE: _X05, Type.STEEL: _X05, Type.ELECTRIC: _X2, Type.GRASS: _X2},
    Type.GRASS: {
        Type.WATER: _X05,
        Type.ELECTRIC: _X05,
        Type.GRASS: _X05,
        Type.GROUND: _X05,
        Type.FIRE: _X2,
        Type.ICE: _X2,
        Type.POISON: _X2,
        Type.FLYING: _X2,
        Type.BUG: _X2,
    },
    Type.ELECTRIC: {Type.ELECTRIC: _X05, Type.FLYING: _X05, Type.STEEL: _X05, Type.GROUND: _X2},
    Type.PSYCHIC: {Type.FIGHTING: _X05, Type.PSYCHIC: _X05, Type.BUG: _X2, Type.GHOST: _X2, Type.DARK: _X2},
    Type.ICE: {Type.ICE: _X05, Type.FIRE: _X2, Type.FIGHTING: _X2, Type.ROCK: _X2, Type.STEEL: _X2},
    Type.DRAGON: {Type.FIRE: _X05, Type.WATER: _X05, Type.ELECTRIC: _X05, Type.GRASS: _X05, Type.ICE: _X2, Type.DRAGON: _X2, Type.FAIRY: _X2},
    Type.DARK: {Type.GHOST: _X05, Type.DARK: _X05, Type.FIGHTING: _X2, Type.BUG: _X2, Type.FAIRY: _X2, Type.PSYCHIC: _X0},
    Type.FAIRY: {Type.FIGHTING: _X05, Type.BUG: _X05, Type.DARK: _X05, Type.POISON: _X2, Type.STEEL: _X2, Type.DRAGON: _X0},
}


class TypeMod(BaseModel):
    """A single defensive modifier: damage from ``attacking`` is scaled by ``multiplier``"""

    model_config = ConfigDict(frozen=True)

    attacking: Type
    multiplier: float


class TypeInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Type
    mods: tuple[TypeMod, ...] = ()

    def mod(self, attacking: Type) -> float:
        for type_mod in self.mods:
            if type_mod.attacking == attacking:
                return type_mod.multiplier
        # No entry found = normal effectiveness
        return TYPE_MUL_NORMAL


class TypeChart:
    """
    Immutable type-effectiveness lookup

    Built once at startup and passed to whatever needs it (the damage
    calculator, gym leader move selection). Every Type has an entry; a type
    with no modifiers takes x1.0 from everything.
    """

    def __init__(self, defense_mods: Optional[Mapping[Type, Mapping[Type, float]]] = None):
        defense_mods = DEFAULT_DEFENSE_MODS if defense_mods is None else defense_mods
        arena = {}
        for defending in Type:
            mods = defense_mods.get(defending, {})
            arena[defending] = TypeInfo(type=defending, mods=tuple(TypeMod(attacking=a, multiplier=m) for a, m in mods.items()))
        self._types: Mapping[Type, TypeInfo] = MappingProxyType(arena)

    def __getitem__(self, type_: Type) -> TypeInfo:
        return self._types[type_]

    def get_effectiveness(self, attacking: Type, defending: Type) -> float:
        """Multiplier for one attacking type against one defending type"""
        return self._types[defending].mod(attacking)

    def calculate_effectiveness(self, attacking: Type, defending_types: Iterable[Type]) -> float:
        """
        Combined multiplier against a single- or dual-type defender.

        Per-type multipliers compose multiplicatively, so the result does not
        depend on the order of the defending types. A duplicated type counts once.
        """
        result = TYPE_MUL_NORMAL
        for defending in dict.fromkeys(defending_types):
            result *= self.get_effectiveness(attacking, defending)
        return result

    def is_immune(self, attacking: Type, defending_types: Iterable[Type]) -> bool:
        return self.calculate_effectiveness(attacking, defending_types) == TYPE_MUL_NO_EFFECT

    def is_super_effective(self, attacking: Type, defending_types: Iterable[Type]) -> bool:
        return self.calculate_effectiveness(attacking, defending_types) > TYPE_MUL_NORMAL

    def is_not_very_effective(self, attacking: Type, defending_types: Iterable[Type]) -> bool:
        return TYPE_MUL_NO_EFFECT < self.calculate_effectiveness(attacking, defending_types) < TYPE_MUL_NORMAL
