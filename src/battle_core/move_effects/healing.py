from src.battle_core.move_effects.recoil_and_drain import adjust_hp
from src.battle_core.schema.battle_move import Move
from src.battle_core.schema.battle_state import PokemonBattleInfo


def apply_healing(move: Move, user_info: PokemonBattleInfo, user_max_hp: int) -> int:
    """Restore (or, for negative values, cost) a percentage of the user's max HP"""
    if move.healing == 0:
        return 0
    amount = (user_max_hp * abs(move.healing)) // 100
    if move.healing < 0:
        amount = -amount
    return adjust_hp(user_info, user_max_hp, amount)
