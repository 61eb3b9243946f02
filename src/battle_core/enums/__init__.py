from src.battle_core.enums.type import Type
from src.battle_core.enums.move import DamageClass, MoveTarget, StatType
from src.battle_core.enums.status import Ailment
from src.battle_core.enums.other import GrowthRate, BattleMode, BattleActionType, TrainerType, TrainerMode, Region, BattleResult, CatchOutcome
