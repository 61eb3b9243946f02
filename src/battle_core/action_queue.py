import logging
from typing import Optional

from src.battle_core.combatants import behavior_for
from src.battle_core.move_catalog import Catalog
from src.battle_core.schema.battle_state import BattleAction, BattleData
from src.battle_core.type_effectiveness import TypeChart
from src.battle_core.utils.rng import RandomSource

logger = logging.getLogger(__name__)


class ActionQueue:
    """
    One pending action per combatant per turn

    A turn resolves only once both sides have an action queued. Submitting
    again before the turn resolves overwrites the earlier action.
    """

    def __init__(self, catalog: Catalog, type_chart: TypeChart, rng: Optional[RandomSource] = None):
        self.catalog = catalog
        self.type_chart = type_chart
        self.rng = rng or RandomSource()

    def submit(self, battle_data: BattleData, trainer_id: str, action: BattleAction) -> None:
        info = battle_data.side_of(trainer_id).battle_info
        if info.finished_turn:
            logger.debug("trainer %s replaced its queued action", trainer_id)
        info.next_battle_action = action
        info.finished_turn = True

    def is_ready(self, battle_data: BattleData) -> bool:
        return all(side.battle_info.finished_turn for side in battle_data.sides())

    def prepare(self, battle_data: BattleData) -> bool:
        """Synthesise actions for computer-controlled combatants, then report readiness"""
        for side in battle_data.sides():
            if side.battle_info.finished_turn:
                continue
            behavior = behavior_for(side.trainer.type)
            action = behavior.select_action(side, battle_data.other_side(side), self.catalog, self.type_chart, self.rng)
            if action is not None:
                self.submit(battle_data, side.trainer_id, action)
        return self.is_ready(battle_data)

    def reset(self, battle_data: BattleData) -> None:
        for side in battle_data.sides():
            side.battle_info.finished_turn = False
            side.battle_info.next_battle_action = None
