"""
Turn order

Catch beats Switch beats Move. Two moves are ordered by move priority, then by
in-battle Speed. Any remaining tie goes to the requester, i.e. the combatant
whose request triggered the turn.
"""

import logging

from src.battle_core.enums import BattleActionType, StatType
from src.battle_core.errors import InvariantViolationError
from src.battle_core.move_catalog import Catalog
from src.battle_core.schema.battle_state import BattleData, BattleTrainerData
from src.battle_core.stats import calc_ib_stat

logger = logging.getLogger(__name__)


def effective_speed(side: BattleTrainerData) -> int:
    info = side.active_battle_info()
    return calc_ib_stat(side.active_pokemon(), StatType.SPEED, info.speed_stage)


def requester_goes_first(battle_data: BattleData, catalog: Catalog) -> bool:
    requester, opponent = battle_data.sides()
    mine = requester.battle_info.next_battle_action
    theirs = opponent.battle_info.next_battle_action
    if mine is None or theirs is None:
        raise InvariantViolationError("turn order requested before both actions were queued")

    if mine.type != theirs.type:
        return mine.type.priority > theirs.type.priority

    if mine.type == BattleActionType.CATCH:
        # Only one side of a battle can ever be human and facing a wild creature
        logger.warning("both trainers in battle %s tried to catch", battle_data.battle.key)
        return True
    if mine.type == BattleActionType.SWITCH:
        return True

    my_priority = catalog.fetch_move(mine.val).priority
    their_priority = catalog.fetch_move(theirs.val).priority
    if my_priority != their_priority:
        return my_priority > their_priority

    my_speed = effective_speed(requester)
    their_speed = effective_speed(opponent)
    logger.debug("speed check: %s=%d vs %s=%d", requester.trainer_id, my_speed, opponent.trainer_id, their_speed)
    return my_speed >= their_speed


def determine_turn_order(battle_data: BattleData, catalog: Catalog) -> tuple[BattleTrainerData, BattleTrainerData]:
    if requester_goes_first(battle_data, catalog):
        return battle_data.requester, battle_data.opponent
    return battle_data.opponent, battle_data.requester
