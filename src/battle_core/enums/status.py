from enum import IntEnum


class Ailment(IntEnum):
    """Persistent status conditions - a creature holds at most one at a time.

    CONFUSION is listed because moves declare it as their ailment, but it is
    tracked on the separate ``confused`` flag of the battle info and does not
    occupy the ailment slot.
    """

    NONE = 0
    PARALYSIS = 1
    POISON = 2
    FREEZE = 3
    BURN = 4
    SLEEP = 5
    CONFUSION = 6

    def is_major(self) -> bool:
        """True for ailments that occupy the exclusive ailment slot"""
        return self not in (Ailment.NONE, Ailment.CONFUSION)

    def catch_bonus(self) -> float:
        """Capture multiplier granted by this ailment"""
        if self in (Ailment.SLEEP, Ailment.FREEZE):
            return 2.0
        if self in (Ailment.PARALYSIS, Ailment.POISON, Ailment.BURN):
            return 1.5
        return 1.0
