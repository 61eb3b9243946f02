"""
Out-of-battle stat formulas and in-battle stage modifiers

Out-of-battle (OOB) stats depend only on the creature: base, IV, EV and level.
In-battle (IB) stats scale the OOB value by the stage multiplier stored in the
creature's PokemonBattleInfo.
"""

from src.battle_core.enums import StatType
from src.battle_core.schema.pokemon import Pokemon, Stat


def calc_oob_stat(stat: Stat, level: int) -> int:
    """Any stat besides HP, not including in-battle effects"""
    return ((2 * stat.base + stat.iv + stat.ev // 4) * level) // 100 + 5


def calc_oob_hp(stat: Stat, level: int) -> int:
    """Maximum HP, not including in-battle effects"""
    return ((2 * stat.base + stat.iv + stat.ev // 4) * level) // 100 + level + 10


def max_hp(pokemon: Pokemon) -> int:
    return calc_oob_hp(pokemon.hp, pokemon.level)


def stage_multiplier(stage: int) -> float:
    """Multiplier for attack, defense, special attack, special defense and speed stages"""
    if stage >= 0:
        return (stage + 2) / 2.0
    return 2.0 / (-stage + 2)


def accuracy_multiplier(stage: int) -> float:
    """Multiplier applied to a move's accuracy for the user's accuracy stage"""
    if stage >= 0:
        return (3.0 + stage) / 3.0
    return 3.0 / (3.0 - stage)


def evasion_multiplier(stage: int) -> float:
    """Multiplier applied to a move's accuracy for the target's evasion stage"""
    if stage >= 0:
        return 3.0 / (3.0 + stage)
    return (3.0 - stage) / 3.0


_STAT_FIELDS = {
    StatType.ATTACK: "attack",
    StatType.DEFENSE: "defense",
    StatType.SPECIAL_ATTACK: "sp_attack",
    StatType.SPECIAL_DEFENSE: "sp_defense",
    StatType.SPEED: "speed",
}


def calc_ib_stat(pokemon: Pokemon, stat_type: StatType, stage: int) -> int:
    """In-battle value of one of the five stage-scaled stats"""
    if stat_type not in _STAT_FIELDS:
        raise ValueError(f"{stat_type.name} has no in-battle stat value")
    stat: Stat = getattr(pokemon, _STAT_FIELDS[stat_type])
    return int(calc_oob_stat(stat, pokemon.level) * stage_multiplier(stage))
