from pydantic import BaseModel, ConfigDict, Field

from src.battle_core.constants import MAX_LEVEL, MAX_MON_MOVES, MAX_PER_STAT_EVS, MAX_PER_STAT_IVS, MIN_LEVEL
from src.battle_core.enums import GrowthRate, Type


class Stat(BaseModel):
    """A single stat - species base value plus the individual's IV and EV"""

    base: int = Field(ge=0, le=255)
    iv: int = Field(default=0, ge=0, le=MAX_PER_STAT_IVS)
    ev: int = Field(default=0, ge=0, le=MAX_PER_STAT_EVS)


class CreatureTemplate(BaseModel):
    """Species data as handed out by the catalog collaborator"""

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=1)
    name: str
    type1: Type
    type2: Type | None = None

    base_hp: int = Field(ge=1, le=255)
    base_attack: int = Field(ge=1, le=255)
    base_defense: int = Field(ge=1, le=255)
    base_sp_attack: int = Field(ge=1, le=255)
    base_sp_defense: int = Field(ge=1, le=255)
    base_speed: int = Field(ge=1, le=255)

    catch_rate: int = Field(default=45, ge=0, le=255)
    growth_rate: GrowthRate = GrowthRate.MEDIUM_FAST
    base_experience: int = Field(default=64, ge=0)

    # Level -> move ids learned at that level by level-up
    learnset: dict[int, tuple[int, ...]] = Field(default_factory=dict)


class Pokemon(BaseModel):
    """A party member. Battle-scoped values (current HP, stages, ailments) live in PokemonBattleInfo."""

    uid: str
    species_id: int = Field(ge=1)
    name: str
    type1: Type
    type2: Type | None = None

    level: int = Field(ge=MIN_LEVEL, le=MAX_LEVEL)

    hp: Stat
    attack: Stat
    defense: Stat
    sp_attack: Stat
    sp_defense: Stat
    speed: Stat

    moves: list[int] = Field(default_factory=list, max_length=MAX_MON_MOVES)

    catch_rate: int = Field(default=45, ge=0, le=255)
    growth_rate: GrowthRate = GrowthRate.MEDIUM_FAST
    base_experience: int = Field(default=64, ge=0)
    experience: int = Field(default=0, ge=0)

    # Moves turned down for the level it is about to reach; cleared on level-up
    declined_moves: list[int] = Field(default_factory=list)

    @property
    def types(self) -> list[Type]:
        return [self.type1] if self.type2 is None else [self.type1, self.type2]

    def move_count(self) -> int:
        return len(self.moves)

    def knows_move(self, move_id: int) -> bool:
        return move_id in self.moves

    def learn_move(self, move_id: int) -> None:
        if len(self.moves) >= MAX_MON_MOVES:
            raise ValueError("attempt to give a creature a new move when all move slots are full")
        self.moves.append(move_id)

    def replace_move(self, slot: int, move_id: int) -> int:
        """Overwrite the move in a 0-based slot and return the forgotten move id"""
        if not 0 <= slot < len(self.moves):
            raise IndexError(f"no move in slot {slot}")
        forgotten = self.moves[slot]
        self.moves[slot] = move_id
        return forgotten
