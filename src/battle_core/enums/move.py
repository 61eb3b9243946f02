from enum import IntEnum


class DamageClass(IntEnum):
    STATUS = 1
    PHYSICAL = 2
    SPECIAL = 3


class MoveTarget(IntEnum):
    """Who a move's stat changes and ailments land on"""

    SELF = 1
    ENEMY = 2


class StatType(IntEnum):
    ATTACK = 1
    DEFENSE = 2
    SPECIAL_ATTACK = 3
    SPECIAL_DEFENSE = 4
    SPEED = 5
    EVASION = 6
    ACCURACY = 7
