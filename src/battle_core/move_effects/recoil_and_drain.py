from src.battle_core.schema.battle_move import Move
from src.battle_core.schema.battle_state import PokemonBattleInfo


def drain_amount(move: Move, damage_dealt: int) -> int:
    """Signed HP change for the user: a share of the damage dealt, negative for recoil.

    Any recoil from a hit that dealt damage is at least 1.
    """
    if move.drain == 0 or damage_dealt <= 0:
        return 0
    amount = (damage_dealt * abs(move.drain)) // 100
    amount = max(1, amount)
    return amount if move.drain > 0 else -amount


def apply_drain(move: Move, user_info: PokemonBattleInfo, user_max_hp: int, damage_dealt: int) -> int:
    """Heal or hurt the user and return the HP delta actually applied"""
    amount = drain_amount(move, damage_dealt)
    return adjust_hp(user_info, user_max_hp, amount)


def adjust_hp(info: PokemonBattleInfo, max_hp: int, amount: int) -> int:
    """Move current HP by ``amount`` within [0, max_hp] and return the applied delta"""
    before = info.curr_hp
    info.curr_hp = max(0, min(max_hp, info.curr_hp + amount))
    return info.curr_hp - before
