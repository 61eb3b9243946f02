import logging
from typing import Optional

from src.battle_core.action_queue import ActionQueue
from src.battle_core.capture import attempt_catch
from src.battle_core.config import EngineConfig
from src.battle_core.damage_calculator import DamageCalculator
from src.battle_core.enums import Ailment, BattleActionType, CatchOutcome, MoveTarget, TrainerType
from src.battle_core.errors import InvalidInputError, InvariantViolationError, PreconditionError
from src.battle_core.leveling import experience_for
from src.battle_core.move_catalog import Catalog
from src.battle_core.move_effects.healing import apply_healing
from src.battle_core.move_effects.multi_hit import roll_hit_count
from src.battle_core.move_effects.recoil_and_drain import apply_drain
from src.battle_core.move_effects.stat_changes import apply_stat_changes
from src.battle_core.move_effects.status_effects import apply_ailment
from src.battle_core.outcome import apply_outcome, detect_outcome
from src.battle_core.schema.battle_move import Move
from src.battle_core.schema.battle_state import BattleAction, BattleData, BattleTrainerData, PokemonBattleInfo
from src.battle_core.schema.reports import ActionReport, CatchReport, HitReport, MoveReport, SkippedReport, SwitchReport, TurnReport
from src.battle_core.stats import accuracy_multiplier, evasion_multiplier, max_hp
from src.battle_core.turn_order import determine_turn_order
from src.battle_core.type_effectiveness import TypeChart
from src.battle_core.utils.rng import RandomSource

logger = logging.getLogger(__name__)


def validate_switch(side: BattleTrainerData, slot: int) -> None:
    """Raise unless the combatant could switch its active creature to party ``slot``"""
    if not 0 <= slot < len(side.party):
        raise InvalidInputError(f"no creature in slot {slot + 1}")
    if slot == side.battle_info.curr_pkmn_slot:
        raise PreconditionError(f"{side.party[slot].name} is already in battle")
    if side.battle_info_for(side.party[slot]).curr_hp <= 0:
        raise PreconditionError(f"{side.party[slot].name} has fainted and cannot battle")


class BattleEngine:
    """
    Resolves one battle turn at a time

    A turn runs both queued actions in order. When the first action knocks
    out the second actor's active creature (or catches it) the second action
    is skipped. Flinching skips the second actor's move only. After the
    actions, both parties are checked for a loss.
    """

    def __init__(
        self,
        catalog: Catalog,
        type_chart: Optional[TypeChart] = None,
        config: Optional[EngineConfig] = None,
        rng: Optional[RandomSource] = None,
    ):
        self.catalog = catalog
        self.type_chart = type_chart or TypeChart()
        self.config = config or EngineConfig()
        self.rng = rng or RandomSource()
        self.damage_calculator = DamageCalculator(self.type_chart, self.config)
        self.queue = ActionQueue(catalog, self.type_chart, self.rng)

    def process_turn(self, battle_data: BattleData) -> TurnReport:
        """Run a turn whose actions are both queued. Applies the outcome, if any, and resets the queue."""
        if not self.queue.is_ready(battle_data):
            raise InvariantViolationError("turn processed before both combatants were ready")

        first, second = determine_turn_order(battle_data, self.catalog)
        report = TurnReport(first_actor=first.trainer_id, second_actor=second.trainer_id)

        second_active_hp = second.active_battle_info().curr_hp
        first_report = self.execute_action(battle_data, first, acting_first=True)
        report.actions.append(first_report)

        skip_reason = self._skip_reason(second, second_active_hp, first_report)
        if skip_reason is not None:
            report.actions.append(SkippedReport(trainer_id=second.trainer_id, reason=skip_reason))
        else:
            report.actions.append(self.execute_action(battle_data, second))

        outcome = detect_outcome(battle_data)
        if outcome is not None:
            apply_outcome(battle_data, outcome)
            report.outcome = outcome

        self.queue.reset(battle_data)
        logger.info("processed turn for battle %s (first=%s)", battle_data.battle.key, first.trainer_id)
        return report

    def _skip_reason(self, second: BattleTrainerData, hp_before: int, first_report: ActionReport) -> Optional[str]:
        # The first action cannot switch the second actor's creature, so the active creature is unchanged
        if hp_before > 0 and second.active_battle_info().curr_hp <= 0:
            if isinstance(first_report, CatchReport) and first_report.outcome == CatchOutcome.CAUGHT:
                return "caught"
            return "fainted"
        action = second.battle_info.next_battle_action
        if isinstance(first_report, MoveReport) and first_report.flinched and action.type == BattleActionType.MOVE:
            return "flinched"
        return None

    def execute_action(self, battle_data: BattleData, side: BattleTrainerData, acting_first: bool = False) -> ActionReport:
        action: Optional[BattleAction] = side.battle_info.next_battle_action
        if action is None:
            raise InvariantViolationError(f"trainer {side.trainer_id} has no queued action")

        if action.type == BattleActionType.MOVE:
            return self.execute_move(battle_data, side, action.val, acting_first)
        if action.type == BattleActionType.SWITCH:
            return self.execute_switch(side, action.val)
        return self.execute_catch(battle_data, side)

    def _check_accuracy(self, move: Move, user_info: PokemonBattleInfo, target_info: PokemonBattleInfo) -> bool:
        if move.accuracy == 0:
            return True
        chance = move.accuracy * accuracy_multiplier(user_info.accuracy_stage)
        if not (move.is_status and move.target == MoveTarget.SELF):
            chance *= evasion_multiplier(target_info.evasion_stage)
        return self.rng.chance(chance)

    def execute_move(self, battle_data: BattleData, side: BattleTrainerData, move_id: int, acting_first: bool = False) -> MoveReport:
        user = side.active_pokemon()
        user_info = side.active_battle_info()
        target_side = battle_data.other_side(side)
        target = target_side.active_pokemon()
        target_info = target_side.active_battle_info()
        move = self.catalog.fetch_move(move_id)

        report = MoveReport(
            trainer_id=side.trainer_id,
            pokemon_name=user.name,
            target_name=target.name,
            move_id=move.id,
            move_name=move.name,
        )

        if user_info.curr_hp <= 0:
            report.fainted_cannot_act = True
            return report
        if target_info.curr_hp <= 0 and not (move.is_status and move.target == MoveTarget.SELF):
            report.target_already_fainted = True
            return report

        user_hp_before = user_info.curr_hp
        target_hp_before = target_info.curr_hp

        if move.is_status:
            if not self._check_accuracy(move, user_info, target_info):
                report.missed = True
                return report
        elif not self._strike(move, user, user_info, target, target_info, report):
            return report

        self._apply_secondary_effects(move, user, user_info, target_info, report, acting_first)

        report.user_hp_delta = user_info.curr_hp - user_hp_before
        report.target_hp_delta = target_info.curr_hp - target_hp_before
        report.user_fainted = user_info.curr_hp <= 0
        report.target_fainted = target_hp_before > 0 and target_info.curr_hp <= 0

        if report.target_fainted and side.trainer.type == TrainerType.HUMAN:
            gained = experience_for(target, wild=target_side.trainer.type == TrainerType.WILD)
            user.experience += gained
            report.experience_gained = gained

        logger.debug("%s used %s: %s", side.trainer_id, move.name, report)
        return report

    def _strike(self, move, user, user_info, target, target_info, report: MoveReport) -> bool:
        """Deal the move's hits. Returns False when the move ended without landing anything."""
        for _ in range(roll_hit_count(move, self.rng)):
            if not self._check_accuracy(move, user_info, target_info):
                break
            result = self.damage_calculator.calculate(user, user_info, target, target_info, move, self.rng)
            report.effectiveness = result.effectiveness
            if result.immune:
                report.immune = True
                return False
            dealt = min(result.damage, target_info.curr_hp)
            target_info.curr_hp -= dealt
            report.hits.append(HitReport(damage=dealt, critical=result.critical))
            if target_info.curr_hp <= 0:
                break

        if not report.hits:
            report.missed = True
            return False
        return True

    def _apply_secondary_effects(self, move: Move, user, user_info, target_info, report: MoveReport, acting_first: bool) -> None:
        on_user = move.target == MoveTarget.SELF
        affected = user_info if on_user else target_info
        user_max_hp = max_hp(user)

        if affected.curr_hp > 0:
            report.ailment_inflicted = apply_ailment(move, affected, self.rng)
            report.confused = report.ailment_inflicted == Ailment.CONFUSION
            report.stat_changes = apply_stat_changes(move, affected, on_user, self.config, self.rng)

        if move.drain:
            apply_drain(move, user_info, user_max_hp, report.total_damage)
        if move.healing:
            apply_healing(move, user_info, user_max_hp)

        # Flinching only matters when the target has yet to act this turn
        if acting_first and move.flinch_chance and target_info.curr_hp > 0 and self.rng.chance(move.flinch_chance):
            report.flinched = True

    def execute_switch(self, side: BattleTrainerData, slot: int) -> SwitchReport:
        validate_switch(side, slot)
        withdrawn_slot = side.battle_info.curr_pkmn_slot
        side.battle_info.curr_pkmn_slot = slot
        logger.info("trainer %s switched slot %d -> %d", side.trainer_id, withdrawn_slot, slot)
        return SwitchReport(
            trainer_id=side.trainer_id,
            withdrawn_slot=withdrawn_slot,
            withdrawn_name=side.party[withdrawn_slot].name,
            selected_slot=slot,
            selected_name=side.party[slot].name,
        )

    def execute_catch(self, battle_data: BattleData, side: BattleTrainerData) -> CatchReport:
        return attempt_catch(side, battle_data.other_side(side), self.rng, self.config)
