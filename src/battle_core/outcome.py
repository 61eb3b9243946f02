import logging
from typing import Optional

from src.battle_core.enums import BattleMode, BattleResult, TrainerMode
from src.battle_core.schema.battle_state import Battle, BattleData, BattleTrainerData
from src.battle_core.schema.reports import BattleOutcome

logger = logging.getLogger(__name__)


def has_lost(side: BattleTrainerData) -> bool:
    """A combatant loses when no party member can fight"""
    return all(info.curr_hp <= 0 for info in side.party_battle_infos())


def detect_outcome(battle_data: BattleData) -> Optional[BattleOutcome]:
    """Check both sides independently. Returns None while the battle continues."""
    requester, opponent = battle_data.sides()
    requester_lost = has_lost(requester)
    opponent_lost = has_lost(opponent)

    if requester_lost and opponent_lost:
        return BattleOutcome(result=BattleResult.DRAW)
    if opponent_lost:
        return BattleOutcome(result=BattleResult.WIN, winner_id=requester.trainer_id, loser_id=opponent.trainer_id)
    if requester_lost:
        return BattleOutcome(result=BattleResult.WIN, winner_id=opponent.trainer_id, loser_id=requester.trainer_id)
    return None


def forfeit_outcome(battle: Battle, forfeiter_id: str) -> BattleOutcome:
    """A forfeit before the battle started is a withdrawal and nobody loses"""
    if battle.mode != BattleMode.STARTED:
        return BattleOutcome(result=BattleResult.WITHDRAWN)
    return BattleOutcome(result=BattleResult.FORFEIT, winner_id=battle.opponent_of(forfeiter_id), loser_id=forfeiter_id)


def apply_outcome(battle_data: BattleData, outcome: BattleOutcome) -> None:
    """Update win/loss counters and return both trainers to WAITING. Purging is up to the caller."""
    for side in battle_data.sides():
        trainer = side.trainer
        if trainer.uid == outcome.winner_id:
            trainer.wins += 1
        elif trainer.uid == outcome.loser_id:
            trainer.losses += 1
        trainer.mode = TrainerMode.WAITING

    logger.info(
        "battle %s over: %s (winner=%s, loser=%s)",
        battle_data.battle.key,
        outcome.result.name,
        outcome.winner_id,
        outcome.loser_id,
    )
