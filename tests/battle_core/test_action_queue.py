import pytest

from src.battle_core.action_queue import ActionQueue
from src.battle_core.combatants import GymLeaderBehavior, HumanBehavior, WildBehavior, behavior_for
from src.battle_core.enums import BattleActionType, TrainerType, Type
from src.battle_core.errors import InvariantViolationError
from src.battle_core.schema.battle_state import BattleAction
from src.battle_core.utils.rng import RandomSource

from conftest import EMBER, GROWL, QUICK_ATTACK, SWIFT, TACKLE, FixedRandom, make_battle_data, make_mon


@pytest.fixture
def queue(catalog, type_chart):
    return ActionQueue(catalog, type_chart, RandomSource(seed=7))


def tackle():
    return BattleAction(type=BattleActionType.MOVE, val=TACKLE)


def test_submit_marks_the_combatant_ready(queue):
    battle_data = make_battle_data([make_mon("Alpha")], [make_mon("Bravo")])
    queue.submit(battle_data, "red", tackle())

    assert battle_data.requester.battle_info.finished_turn
    assert battle_data.requester.battle_info.next_battle_action == tackle()
    assert not queue.is_ready(battle_data)

    queue.submit(battle_data, "blue", tackle())
    assert queue.is_ready(battle_data)


def test_resubmitting_overwrites_the_pending_action(queue):
    battle_data = make_battle_data([make_mon("Alpha"), make_mon("Beta")], [make_mon("Bravo")])
    queue.submit(battle_data, "red", tackle())
    queue.submit(battle_data, "red", BattleAction(type=BattleActionType.SWITCH, val=1))
    assert battle_data.requester.battle_info.next_battle_action.type == BattleActionType.SWITCH


def test_prepare_waits_for_humans(queue):
    battle_data = make_battle_data([make_mon("Alpha")], [make_mon("Bravo")])
    queue.submit(battle_data, "red", tackle())
    assert not queue.prepare(battle_data)
    assert battle_data.opponent.battle_info.next_battle_action is None


def test_prepare_picks_for_wild_creatures(queue):
    moves = (TACKLE, GROWL, EMBER)
    battle_data = make_battle_data([make_mon("Alpha")], [make_mon("Wildmon", moves=moves)], opponent_type=TrainerType.WILD)
    queue.submit(battle_data, "red", tackle())

    assert queue.prepare(battle_data)
    action = battle_data.opponent.battle_info.next_battle_action
    assert action.type == BattleActionType.MOVE
    assert action.val in moves


def test_wild_choice_is_uniform_over_known_moves(catalog, type_chart):
    battle_data = make_battle_data([make_mon("Alpha")], [make_mon("Wildmon", moves=(TACKLE, GROWL))], opponent_type=TrainerType.WILD)
    rng = RandomSource(seed=3)
    picks = [WildBehavior().select_action(battle_data.opponent, battle_data.requester, catalog, type_chart, rng).val for _ in range(400)]
    assert 150 < picks.count(TACKLE) < 250


def test_gym_leader_picks_the_strongest_move(catalog, type_chart):
    battle_data = make_battle_data([make_mon("Leafy", type1=Type.GRASS)], [make_mon("Leader", moves=(TACKLE, EMBER, GROWL))], opponent_type=TrainerType.GYM_LEADER)
    action = GymLeaderBehavior().select_action(battle_data.opponent, battle_data.requester, catalog, type_chart, FixedRandom())
    # Ember: 40 x2 beats Tackle: 40 x1
    assert action.val == EMBER


def test_gym_leader_ties_go_to_the_first_slot(catalog, type_chart):
    battle_data = make_battle_data([make_mon("Alpha")], [make_mon("Leader", moves=(QUICK_ATTACK, TACKLE, SWIFT))], opponent_type=TrainerType.GYM_LEADER)
    action = GymLeaderBehavior().select_action(battle_data.opponent, battle_data.requester, catalog, type_chart, FixedRandom())
    # Swift has 60 power; the first two tie at 40 below it
    assert action.val == SWIFT

    battle_data = make_battle_data([make_mon("Alpha")], [make_mon("Leader", moves=(QUICK_ATTACK, TACKLE))], opponent_type=TrainerType.GYM_LEADER)
    action = GymLeaderBehavior().select_action(battle_data.opponent, battle_data.requester, catalog, type_chart, FixedRandom())
    assert action.val == QUICK_ATTACK


def test_gym_leader_replaces_a_fainted_creature(catalog, type_chart):
    battle_data = make_battle_data([make_mon("Alpha")], [make_mon("Leader"), make_mon("Backup")], opponent_type=TrainerType.GYM_LEADER)
    battle_data.opponent.active_battle_info().curr_hp = 0
    action = GymLeaderBehavior().select_action(battle_data.opponent, battle_data.requester, catalog, type_chart, FixedRandom())
    assert action == BattleAction(type=BattleActionType.SWITCH, val=1)


def test_creature_without_moves_is_an_invariant_violation(catalog, type_chart):
    battle_data = make_battle_data([make_mon("Alpha")], [make_mon("Wildmon", moves=())], opponent_type=TrainerType.WILD)
    with pytest.raises(InvariantViolationError):
        WildBehavior().select_action(battle_data.opponent, battle_data.requester, catalog, type_chart, FixedRandom())


def test_behaviors_by_trainer_type():
    assert isinstance(behavior_for(TrainerType.HUMAN), HumanBehavior)
    assert isinstance(behavior_for(TrainerType.WILD), WildBehavior)
    assert isinstance(behavior_for(TrainerType.GYM_LEADER), GymLeaderBehavior)


def test_reset_clears_both_sides(queue):
    battle_data = make_battle_data([make_mon("Alpha")], [make_mon("Bravo")])
    queue.submit(battle_data, "red", tackle())
    queue.submit(battle_data, "blue", tackle())
    queue.reset(battle_data)
    assert not queue.is_ready(battle_data)
    assert all(side.battle_info.next_battle_action is None for side in battle_data.sides())
