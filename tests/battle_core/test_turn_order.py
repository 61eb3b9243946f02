import logging

import pytest

from src.battle_core.enums import BattleActionType
from src.battle_core.errors import InvariantViolationError
from src.battle_core.schema.battle_state import BattleAction
from src.battle_core.turn_order import determine_turn_order, requester_goes_first

from conftest import QUICK_ATTACK, TACKLE, make_battle_data, make_mon


def queue(battle_data, requester_action, opponent_action):
    battle_data.requester.battle_info.next_battle_action = requester_action
    battle_data.opponent.battle_info.next_battle_action = opponent_action


def move(move_id=TACKLE):
    return BattleAction(type=BattleActionType.MOVE, val=move_id)


def switch(slot=1):
    return BattleAction(type=BattleActionType.SWITCH, val=slot)


CATCH = BattleAction(type=BattleActionType.CATCH)


def speed_battle(requester_speed=50, opponent_speed=50):
    return make_battle_data(
        [make_mon("Fast" if requester_speed > opponent_speed else "Red1", speed=requester_speed), make_mon("Red2")],
        [make_mon("Blue1", speed=opponent_speed), make_mon("Blue2")],
    )


@pytest.mark.parametrize(
    "mine, theirs, expected",
    [
        (CATCH, switch(), True),
        (CATCH, move(), True),
        (switch(), move(), True),
        (move(), switch(), False),
        (move(), CATCH, False),
        (switch(), CATCH, False),
    ],
)
def test_catch_beats_switch_beats_move(catalog, mine, theirs, expected):
    # The opponent is much faster; action class still decides
    battle_data = speed_battle(requester_speed=10, opponent_speed=200)
    queue(battle_data, mine, theirs)
    assert requester_goes_first(battle_data, catalog) is expected


def test_switch_against_switch_goes_to_requester(catalog):
    battle_data = speed_battle(requester_speed=10, opponent_speed=200)
    queue(battle_data, switch(), switch())
    assert requester_goes_first(battle_data, catalog)


def test_catch_against_catch_is_logged_and_goes_to_requester(catalog, caplog):
    battle_data = speed_battle()
    queue(battle_data, CATCH, CATCH)
    with caplog.at_level(logging.WARNING):
        assert requester_goes_first(battle_data, catalog)
    assert "tried to catch" in caplog.text


def test_higher_move_priority_goes_first(catalog):
    battle_data = speed_battle(requester_speed=10, opponent_speed=200)
    queue(battle_data, move(QUICK_ATTACK), move(TACKLE))
    assert requester_goes_first(battle_data, catalog)

    queue(battle_data, move(TACKLE), move(QUICK_ATTACK))
    assert not requester_goes_first(battle_data, catalog)


def test_speed_breaks_priority_ties(catalog):
    battle_data = speed_battle(requester_speed=50, opponent_speed=100)
    queue(battle_data, move(), move())
    first, second = determine_turn_order(battle_data, catalog)
    assert first is battle_data.opponent
    assert second is battle_data.requester


def test_speed_stages_count(catalog):
    battle_data = speed_battle(requester_speed=50, opponent_speed=60)
    queue(battle_data, move(), move())
    assert not requester_goes_first(battle_data, catalog)

    battle_data.requester.active_battle_info().speed_stage = 1
    assert requester_goes_first(battle_data, catalog)


def test_speed_tie_goes_to_requester(catalog):
    battle_data = speed_battle(requester_speed=50, opponent_speed=50)
    queue(battle_data, move(), move())
    first, _ = determine_turn_order(battle_data, catalog)
    assert first is battle_data.requester


def test_order_needs_both_actions(catalog):
    battle_data = speed_battle()
    queue(battle_data, move(), None)
    with pytest.raises(InvariantViolationError):
        determine_turn_order(battle_data, catalog)
