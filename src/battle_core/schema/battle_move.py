from pydantic import BaseModel, ConfigDict, Field

from src.battle_core.enums import Ailment, DamageClass, MoveTarget, StatType, Type


class StatChange(BaseModel):
    model_config = ConfigDict(frozen=True)

    stat: StatType
    change: int = Field(ge=-12, le=12)


class Move(BaseModel):
    """Immutable catalog entry for a single move.

    Percent chances follow the data provider's convention: 0 on a status move
    means the effect always applies, 0 on a damaging move means it never does.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=1)
    name: str
    type: Type
    power: int = Field(default=0, ge=0)
    accuracy: int = Field(default=100, ge=0, le=100)  # 0 = never misses
    pp: int = Field(default=10, ge=0)
    priority: int = Field(default=0, ge=-7, le=7)
    damage_class: DamageClass = DamageClass.PHYSICAL
    target: MoveTarget = MoveTarget.ENEMY

    ailment: Ailment = Ailment.NONE
    ailment_chance: int = Field(default=0, ge=0, le=100)
    flinch_chance: int = Field(default=0, ge=0, le=100)
    stat_chance: int = Field(default=0, ge=0, le=100)
    stat_changes: tuple[StatChange, ...] = ()

    crit_rate: int = Field(default=0, ge=0)  # crit tier, see CRIT_CHANCES
    min_hits: int | None = Field(default=None, ge=1)
    max_hits: int | None = Field(default=None, ge=1)
    drain: int = Field(default=0, ge=-100, le=100)  # percent of damage dealt, negative = recoil
    healing: int = Field(default=0, ge=-100, le=100)  # percent of the user's max HP

    @property
    def is_status(self) -> bool:
        return self.damage_class == DamageClass.STATUS

    @property
    def has_multiple_hits(self) -> bool:
        return self.min_hits is not None and self.max_hits is not None

    def effective_chance(self, declared: int) -> int:
        """Resolve a declared secondary-effect chance to the percentage actually rolled against"""
        if declared == 0 and self.is_status:
            return 100
        return declared
