import logging
import uuid

from src.battle_core.config import EngineConfig
from src.battle_core.constants import CATCH_ROLL_MAX
from src.battle_core.enums import CatchOutcome, TrainerType
from src.battle_core.errors import PreconditionError
from src.battle_core.schema.battle_state import BattleTrainerData, PokemonBattleInfo
from src.battle_core.schema.pokemon import Pokemon
from src.battle_core.schema.reports import CatchReport
from src.battle_core.stats import max_hp
from src.battle_core.utils.rng import RandomSource

logger = logging.getLogger(__name__)


def capture_score(pokemon: Pokemon, info: PokemonBattleInfo) -> float:
    """
    Likelihood score on a [0, 256) scale, higher is easier.

    Full HP gives ``catch_rate / 3``, one remaining HP approaches ``catch_rate``;
    major ailments multiply the result.
    """
    full = 3 * max_hp(pokemon)
    score = (full - 2 * info.curr_hp) * pokemon.catch_rate / full
    return score * info.ailment.catch_bonus()


def attempt_catch(capturer: BattleTrainerData, target: BattleTrainerData, rng: RandomSource, config: EngineConfig) -> CatchReport:
    """
    Throw a ball at the target side's active creature.

    On success the creature is set to 0 HP in battle and a copy joins the
    capturer's party. A successful roll with a full party changes nothing.
    """
    if target.trainer.type != TrainerType.WILD:
        raise PreconditionError("only wild creatures can be caught")

    wild = target.active_pokemon()
    wild_info = target.active_battle_info()
    score = capture_score(wild, wild_info)
    roll = rng.uniform(0.0, CATCH_ROLL_MAX)
    logger.debug("catch roll %.2f against score %.2f for %s", roll, score, wild.uid)

    report = CatchReport(trainer_id=capturer.trainer_id, target_name=wild.name, outcome=CatchOutcome.FAILED, capture_score=score, roll=roll)
    if roll > score:
        return report

    if len(capturer.party) >= config.max_party_size:
        report.outcome = CatchOutcome.PARTY_FULL
        return report

    capturer.party.append(wild.model_copy(update={"uid": uuid.uuid4().hex}, deep=True))
    wild_info.curr_hp = 0
    report.outcome = CatchOutcome.CAUGHT
    logger.info("trainer %s caught %s", capturer.trainer_id, wild.name)
    return report
