from src.battle_core.enums import Ailment
from src.battle_core.schema.battle_move import Move
from src.battle_core.schema.battle_state import PokemonBattleInfo
from src.battle_core.utils.rng import RandomSource


def can_inflict(info: PokemonBattleInfo, ailment: Ailment) -> bool:
    """A creature holds at most one major ailment; confusion is tracked separately"""
    if ailment == Ailment.CONFUSION:
        return not info.confused
    if ailment.is_major():
        return info.ailment == Ailment.NONE
    return False


def inflict(info: PokemonBattleInfo, ailment: Ailment) -> None:
    if ailment == Ailment.CONFUSION:
        info.confused = True
    else:
        info.ailment = ailment


def apply_ailment(move: Move, affected: PokemonBattleInfo, rng: RandomSource) -> Ailment:
    """Try to inflict the move's ailment.

    Returns the ailment that landed, or Ailment.NONE. No chance is rolled when
    the creature cannot receive the ailment.
    """
    ailment = move.ailment
    if not can_inflict(affected, ailment):
        return Ailment.NONE
    if not rng.chance(move.effective_chance(move.ailment_chance)):
        return Ailment.NONE
    inflict(affected, ailment)
    return ailment

