from pydantic import BaseModel, Field

from src.battle_core.enums import Region, TrainerMode, TrainerType


def _default_encounter_levels() -> dict[Region, int]:
    # New trainers start with the first Kanto tier unlocked
    return {Region.KANTO: 1}


class Trainer(BaseModel):
    uid: str
    name: str
    type: TrainerType = TrainerType.HUMAN
    mode: TrainerMode = TrainerMode.WAITING

    wins: int = Field(default=0, ge=0)
    losses: int = Field(default=0, ge=0)

    # Number of unlocked wild-encounter tiers per region
    encounter_levels: dict[Region, int] = Field(default_factory=_default_encounter_levels)

