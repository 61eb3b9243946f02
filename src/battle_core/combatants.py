"""
How each kind of combatant picks its turn action

Humans submit actions through requests. Wild creatures and gym leaders have
their action synthesised when the human side is waiting on them.
"""

import logging
from typing import Optional, Protocol

from src.battle_core.enums import BattleActionType, TrainerType
from src.battle_core.errors import InvariantViolationError
from src.battle_core.move_catalog import Catalog
from src.battle_core.schema.battle_state import BattleAction, BattleTrainerData
from src.battle_core.type_effectiveness import TypeChart
from src.battle_core.utils.rng import RandomSource

logger = logging.getLogger(__name__)


class CombatantBehavior(Protocol):
    def select_action(
        self,
        me: BattleTrainerData,
        opponent: BattleTrainerData,
        catalog: Catalog,
        type_chart: TypeChart,
        rng: RandomSource,
    ) -> Optional[BattleAction]:
        """Return this turn's action, or None when the combatant submits its own"""
        ...


def _known_moves(me: BattleTrainerData) -> list[int]:
    pokemon = me.active_pokemon()
    moves = [m for m in pokemon.moves if m]
    if not moves:
        raise InvariantViolationError(f"{pokemon.name} ({pokemon.uid}) knows no moves")
    return moves


def _replacement(me: BattleTrainerData) -> Optional[BattleAction]:
    """Switch to the first party member still able to fight"""
    for slot, pokemon in enumerate(me.party):
        if me.battle_info_for(pokemon).curr_hp > 0:
            return BattleAction(type=BattleActionType.SWITCH, val=slot)
    return None


class HumanBehavior:
    def select_action(self, me, opponent, catalog, type_chart, rng) -> Optional[BattleAction]:
        return None


class WildBehavior:
    """Uniformly random choice among the known moves"""

    def select_action(self, me, opponent, catalog, type_chart, rng) -> Optional[BattleAction]:
        move_id = rng.choice(_known_moves(me))
        logger.info("wild %s picked move %d", me.active_pokemon().name, move_id)
        return BattleAction(type=BattleActionType.MOVE, val=move_id)


class GymLeaderBehavior:
    """Greedy: the known move with the highest power x effectiveness against the opposing creature.

    Ties go to the earliest move slot.
    """

    def select_action(self, me, opponent, catalog, type_chart, rng) -> Optional[BattleAction]:
        if me.active_battle_info().curr_hp <= 0:
            return _replacement(me)

        target_types = opponent.active_pokemon().types
        best_id, best_score = None, -1.0
        for move_id in _known_moves(me):
            move = catalog.fetch_move(move_id)
            score = move.power * type_chart.calculate_effectiveness(move.type, target_types)
            if score > best_score:
                best_id, best_score = move_id, score
        logger.info("gym leader %s picked move %d (score %.1f)", me.trainer_id, best_id, best_score)
        return BattleAction(type=BattleActionType.MOVE, val=best_id)


BEHAVIORS: dict[TrainerType, CombatantBehavior] = {
    TrainerType.HUMAN: HumanBehavior(),
    TrainerType.WILD: WildBehavior(),
    TrainerType.GYM_LEADER: GymLeaderBehavior(),
}


def behavior_for(trainer_type: TrainerType) -> CombatantBehavior:
    return BEHAVIORS[trainer_type]
