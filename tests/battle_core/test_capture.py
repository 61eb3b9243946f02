import pytest

from src.battle_core.capture import attempt_catch, capture_score
from src.battle_core.config import EngineConfig
from src.battle_core.enums import Ailment, CatchOutcome, TrainerType
from src.battle_core.errors import PreconditionError
from src.battle_core.utils.rng import RandomSource

from conftest import FixedRandom, make_battle_data, make_mon


def wild_battle(capturer_party=None):
    return make_battle_data(capturer_party or [make_mon("Alpha")], [make_mon("Wildmon")], opponent_type=TrainerType.WILD)


def test_full_hp_score_is_a_third_of_the_catch_rate():
    wild = make_mon("Wildmon")
    battle_data = wild_battle()
    info = battle_data.opponent.battle_info_for(wild)
    assert capture_score(wild, info) == pytest.approx(15.0)


def test_ailments_multiply_the_score():
    battle_data = wild_battle()
    wild = battle_data.opponent.active_pokemon()
    info = battle_data.opponent.active_battle_info()

    info.ailment = Ailment.SLEEP
    assert capture_score(wild, info) == pytest.approx(30.0)
    info.ailment = Ailment.POISON
    assert capture_score(wild, info) == pytest.approx(22.5)
    info.ailment = Ailment.CONFUSION
    assert capture_score(wild, info) == pytest.approx(15.0)


@pytest.mark.parametrize("ailment", [Ailment.NONE, Ailment.PARALYSIS, Ailment.FREEZE])
def test_score_does_not_decrease_as_hp_drops(ailment):
    battle_data = wild_battle()
    wild = battle_data.opponent.active_pokemon()
    info = battle_data.opponent.active_battle_info()
    info.ailment = ailment

    scores = []
    for hp in range(30, -1, -1):
        info.curr_hp = hp
        scores.append(capture_score(wild, info))
    assert scores == sorted(scores)


def test_successful_catch_moves_a_copy_into_the_party(config):
    battle_data = wild_battle()
    report = attempt_catch(battle_data.requester, battle_data.opponent, FixedRandom(fraction=0.0), config)

    assert report.outcome == CatchOutcome.CAUGHT
    assert battle_data.opponent.active_battle_info().curr_hp == 0
    caught = battle_data.requester.party[-1]
    assert caught.name == "Wildmon"
    assert caught is not battle_data.opponent.active_pokemon()


def test_failed_roll_changes_nothing(config):
    battle_data = wild_battle()
    report = attempt_catch(battle_data.requester, battle_data.opponent, FixedRandom(fraction=0.5), config)

    assert report.outcome == CatchOutcome.FAILED
    assert report.roll == pytest.approx(128.0)
    assert len(battle_data.requester.party) == 1
    assert battle_data.opponent.active_battle_info().curr_hp == 30


def test_full_party_is_reported_separately():
    battle_data = wild_battle([make_mon("Alpha"), make_mon("Beta")])
    report = attempt_catch(battle_data.requester, battle_data.opponent, FixedRandom(fraction=0.0), EngineConfig(max_party_size=2))

    assert report.outcome == CatchOutcome.PARTY_FULL
    assert len(battle_data.requester.party) == 2
    assert battle_data.opponent.active_battle_info().curr_hp == 30


def test_only_wild_creatures_can_be_caught(config):
    battle_data = make_battle_data([make_mon("Alpha")], [make_mon("Bravo")])
    with pytest.raises(PreconditionError):
        attempt_catch(battle_data.requester, battle_data.opponent, FixedRandom(), config)


def sample_success_rate(curr_hp: int, draws: int = 20000) -> float:
    # A one-slot party turns every successful roll into PARTY_FULL, leaving state untouched between draws
    battle_data = wild_battle()
    battle_data.opponent.active_battle_info().curr_hp = curr_hp
    config = EngineConfig(max_party_size=1)
    rng = RandomSource(seed=1234)
    successes = 0
    for _ in range(draws):
        report = attempt_catch(battle_data.requester, battle_data.opponent, rng, config)
        if report.outcome != CatchOutcome.FAILED:
            successes += 1
    return successes / draws


def test_sampled_catch_rate_at_full_hp():
    # Catch rate 45 at full HP scores 15 out of 256
    assert sample_success_rate(30) == pytest.approx(15 / 256, abs=0.01)


def test_sampled_catch_rate_near_zero_hp_approaches_the_base_rate():
    # One HP left out of 30 scores 44: the base rate of 45/256, less a sliver
    rate = sample_success_rate(1)
    assert rate == pytest.approx(44 / 256, abs=0.015)
    assert rate == pytest.approx(45 / 256, abs=0.02)
