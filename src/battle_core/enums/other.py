from enum import IntEnum


class GrowthRate(IntEnum):
    ERRATIC = 1
    FAST = 2
    MEDIUM_FAST = 3
    MEDIUM_SLOW = 4
    SLOW = 5
    FLUCTUATING = 6


class BattleMode(IntEnum):
    WAITING = 1
    STARTED = 2


class BattleActionType(IntEnum):
    """Kinds of turn action. The integer value doubles as the action's base priority."""

    MOVE = 1
    SWITCH = 2
    CATCH = 3

    @property
    def priority(self) -> int:
        return int(self)


class TrainerType(IntEnum):
    HUMAN = 1
    WILD = 2
    GYM_LEADER = 3


class TrainerMode(IntEnum):
    WAITING = 2
    BATTLING = 3
    FORGET_MOVE = 4


class Region(IntEnum):
    KANTO = 0
    JOHTO = 1
    HOENN = 2
    SINNOH = 3
    UNOVA = 4
    KALOS = 5


class BattleResult(IntEnum):
    """How a finished battle ended"""

    WIN = 1
    DRAW = 2
    FORFEIT = 3
    WITHDRAWN = 4


class CatchOutcome(IntEnum):
    CAUGHT = 1
    FAILED = 2
    PARTY_FULL = 3
