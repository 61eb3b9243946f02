"""
Damage calculation

    damage = ((2L + 10) / 250 * A / D * power + 2) * STAB * type * crit * roll

A/D is attack over defense for physical moves and special attack over special
defense for special moves, both including stat stages. ``roll`` is a uniform
integer percentage in [85, 100]. A type multiplier of exactly 0 means the
defender is immune and no damage is computed at all.
"""

from typing import Optional

from pydantic import BaseModel

from src.battle_core.config import EngineConfig
from src.battle_core.constants import (
    CRIT_CHANCES,
    DAMAGE_ROLL_MAX,
    DAMAGE_ROLL_MIN,
    STAB_MULTIPLIER,
    TYPE_MUL_NO_EFFECT,
)
from src.battle_core.enums import DamageClass, StatType
from src.battle_core.schema.battle_move import Move
from src.battle_core.schema.battle_state import PokemonBattleInfo
from src.battle_core.schema.pokemon import Pokemon
from src.battle_core.stats import calc_ib_stat
from src.battle_core.type_effectiveness import TypeChart
from src.battle_core.utils.rng import RandomSource


class DamageResult(BaseModel):
    damage: int
    critical: bool
    effectiveness: float

    @property
    def immune(self) -> bool:
        return self.effectiveness == TYPE_MUL_NO_EFFECT


def crit_chance(crit_rate: int) -> float:
    """Percent chance of a critical hit for a move's crit tier"""
    return CRIT_CHANCES[min(max(crit_rate, 0), len(CRIT_CHANCES) - 1)]


def attack_defense_stats(move: Move) -> tuple[StatType, StatType]:
    if move.damage_class == DamageClass.SPECIAL:
        return StatType.SPECIAL_ATTACK, StatType.SPECIAL_DEFENSE
    return StatType.ATTACK, StatType.DEFENSE


class DamageCalculator:
    def __init__(self, type_chart: TypeChart, config: Optional[EngineConfig] = None):
        self.type_chart = type_chart
        self.config = config or EngineConfig()

    def effectiveness(self, move: Move, defender: Pokemon) -> float:
        return self.type_chart.calculate_effectiveness(move.type, defender.types)

    def stab(self, move: Move, attacker: Pokemon) -> float:
        return STAB_MULTIPLIER if move.type in attacker.types else 1.0

    def base_damage(
        self,
        attacker: Pokemon,
        attacker_info: PokemonBattleInfo,
        defender: Pokemon,
        defender_info: PokemonBattleInfo,
        move: Move,
    ) -> float:
        """The bracketed part of the formula, before any multipliers"""
        attack_stat, defense_stat = attack_defense_stats(move)
        attack = calc_ib_stat(attacker, attack_stat, attacker_info.get_stage(attack_stat))
        defense = max(1, calc_ib_stat(defender, defense_stat, defender_info.get_stage(defense_stat)))
        return ((2 * attacker.level + 10) / 250.0) * (attack / defense) * move.power + 2

    def roll_critical(self, move: Move, rng: RandomSource) -> bool:
        return rng.chance(crit_chance(move.crit_rate))

    def calculate(
        self,
        attacker: Pokemon,
        attacker_info: PokemonBattleInfo,
        defender: Pokemon,
        defender_info: PokemonBattleInfo,
        move: Move,
        rng: RandomSource,
    ) -> DamageResult:
        """
        Compute the damage of a single hit.

        Draws, in order: critical hit, damage roll. Immunity short-circuits
        before any draw is made. A hit that is not immune always deals at
        least 1 damage.
        """
        effectiveness = self.effectiveness(move, defender)
        if effectiveness == TYPE_MUL_NO_EFFECT:
            return DamageResult(damage=0, critical=False, effectiveness=effectiveness)

        critical = self.roll_critical(move, rng)
        roll = rng.randint(DAMAGE_ROLL_MIN, DAMAGE_ROLL_MAX) / 100.0

        damage = self.base_damage(attacker, attacker_info, defender, defender_info, move)
        damage *= self.stab(move, attacker)
        damage *= effectiveness
        if critical:
            damage *= self.config.crit_multiplier
        damage *= roll

        return DamageResult(damage=max(1, int(damage)), critical=critical, effectiveness=effectiveness)
