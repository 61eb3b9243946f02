"""
Wild creature tables

Each region holds a list of tiers. A trainer's ``encounter_levels[region]`` is
the number of that region's tiers unlocked; tiers are drawn uniformly, then an
entry is drawn from the tier weighted by its probability.
"""

from pydantic import BaseModel, Field

from src.battle_core.enums import Region
from src.battle_core.errors import PreconditionError
from src.battle_core.schema.trainer import Trainer
from src.battle_core.utils.rng import RandomSource


class WildEntry(BaseModel):
    id: int = Field(ge=1)  # species id
    probability: int = Field(ge=0)  # relative weight within the tier
    median_level: int = Field(ge=1, le=100)


def _tier(*entries: tuple[int, int, int]) -> list[WildEntry]:
    return [WildEntry(id=i, probability=p, median_level=lvl) for i, p, lvl in entries]


WILD_TABLES: dict[Region, list[list[WildEntry]]] = {
    Region.KANTO: [
        _tier(
            (16, 100, 3),  # Pidgey
            (19, 100, 3),  # Rattata
            (21, 100, 3),  # Spearow
            (29, 40, 3),  # Nidoran F
            (32, 40, 3),  # Nidoran M
            (56, 30, 3),  # Mankey
            (10, 100, 3),  # Caterpie
            (13, 90, 3),  # Weedle
            (11, 70, 3),  # Metapod
            (14, 70, 3),  # Kakuna
            (25, 10, 3),  # Pikachu
        ),
    ],
    Region.JOHTO: [
        _tier(
            (161, 100, 5),  # Sentret
            (163, 90, 5),  # Hoothoot
            (187, 30, 5),  # Hoppip
            (60, 30, 5),  # Poliwag
            (165, 70, 5),  # Ledyba
            (167, 70, 5),  # Spinarak
            (69, 50, 5),  # Bellsprout
            (92, 5, 5),  # Gastly
            (206, 20, 5),  # Dunsparce
            (216, 20, 5),  # Teddiursa
        ),
    ],
    Region.HOENN: [
        _tier(
            (261, 100, 6),  # Poochyena
            (263, 100, 6),  # Zigzagoon
            (265, 100, 6),  # Wurmple
            (270, 70, 6),  # Lotad
            (273, 20, 6),  # Seedot
            (280, 10, 6),  # Ralts
            (283, 10, 6),  # Surskit
            (278, 70, 6),  # Wingull
        ),
    ],
    Region.SINNOH: [
        _tier(
            (396, 100, 7),  # Starly
            (399, 100, 7),  # Bidoof
            (401, 50, 7),  # Kricketot
            (403, 70, 7),  # Shinx
            (406, 70, 7),  # Budew
            (63, 10, 7),  # Abra
            (417, 40, 7),  # Pachirisu
        ),
    ],
    Region.UNOVA: [
        _tier(
            (504, 100, 8),  # Patrat
            (506, 100, 8),  # Lillipup
            (509, 80, 8),  # Purrloin
            (531, 20, 8),  # Audino
            (550, 40, 8),  # Basculin
            (517, 10, 8),  # Munna
            (519, 100, 8),  # Pidove
        ),
    ],
    Region.KALOS: [
        _tier(
            (661, 100, 9),  # Fletchling
            (659, 100, 9),  # Bunnelby
            (664, 100, 9),  # Scatterbug
            (511, 10, 9),  # Pansage
            (513, 10, 9),  # Pansear
            (515, 10, 9),  # Panpour
            (25, 20, 9),  # Pikachu
            (298, 30, 9),  # Azurill
            (412, 10, 9),  # Burmy
        ),
    ],
}


def available_wilds(trainer: Trainer, tables: dict[Region, list[list[WildEntry]]] = WILD_TABLES) -> list[list[WildEntry]]:
    """Every tier the trainer has unlocked, across all regions"""
    tiers: list[list[WildEntry]] = []
    for region, unlocked in trainer.encounter_levels.items():
        tiers.extend(tables.get(region, [])[:unlocked])
    return tiers


def random_wild(tiers: list[list[WildEntry]], rng: RandomSource) -> WildEntry:
    tiers = [t for t in tiers if t]
    if not tiers:
        raise PreconditionError("no wild creatures available")
    tier = rng.choice(tiers)

    total = sum(entry.probability for entry in tier)
    if total <= 0:
        return rng.choice(tier)
    num = rng.uniform(0, total)
    cumulative = 0
    for entry in tier:
        cumulative += entry.probability
        if num < cumulative:
            return entry
    return tier[-1]
