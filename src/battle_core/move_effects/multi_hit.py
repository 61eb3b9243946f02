from src.battle_core.schema.battle_move import Move
from src.battle_core.utils.rng import RandomSource


def roll_hit_count(move: Move, rng: RandomSource) -> int:
    """Number of strikes for this use of the move. Single-hit moves return 1 without drawing."""
    if not move.has_multiple_hits:
        return 1
    low, high = sorted((move.min_hits, move.max_hits))
    if low == high:
        return low
    return rng.randint(low, high)
