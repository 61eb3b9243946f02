from typing import Optional

from pydantic import BaseModel, Field

from src.battle_core.enums import Ailment, BattleActionType, BattleMode, StatType
from src.battle_core.schema.pokemon import Pokemon
from src.battle_core.schema.trainer import Trainer
from src.battle_core.stats import max_hp


class BattleAction(BaseModel):
    """One queued turn action. ``val`` is the move id, the target party slot, or unused for catches."""

    type: BattleActionType
    val: int = 0


class Battle(BaseModel):
    p1: str
    p2: str
    mode: BattleMode = BattleMode.WAITING

    @property
    def key(self) -> tuple[str, str]:
        """Unordered participant pair - at most one battle exists per key"""
        return battle_key(self.p1, self.p2)

    def involves(self, trainer_id: str) -> bool:
        return trainer_id in (self.p1, self.p2)

    def opponent_of(self, trainer_id: str) -> str:
        if trainer_id == self.p1:
            return self.p2
        if trainer_id == self.p2:
            return self.p1
        raise ValueError(f"trainer '{trainer_id}' is not part of this battle")


def battle_key(p1: str, p2: str) -> tuple[str, str]:
    return (p1, p2) if p1 <= p2 else (p2, p1)


class TrainerBattleInfo(BaseModel):
    """Per-combatant, per-battle record"""

    trainer_id: str
    finished_turn: bool = False
    next_battle_action: Optional[BattleAction] = None
    curr_pkmn_slot: int = Field(default=0, ge=0)


class PokemonBattleInfo(BaseModel):
    """Per-creature, per-battle record. Stages are signed offsets from 0."""

    pkmn_uid: str
    curr_hp: int = Field(ge=0)

    att_stage: int = 0
    def_stage: int = 0
    sp_att_stage: int = 0
    sp_def_stage: int = 0
    speed_stage: int = 0
    accuracy_stage: int = 0
    evasion_stage: int = 0

    ailment: Ailment = Ailment.NONE
    confused: bool = False

    def get_stage(self, stat: StatType) -> int:
        return getattr(self, _STAGE_FIELDS[stat])

    def set_stage(self, stat: StatType, value: int) -> None:
        setattr(self, _STAGE_FIELDS[stat], value)

    @classmethod
    def fresh(cls, pokemon: Pokemon) -> "PokemonBattleInfo":
        """Full out-of-battle HP, no ailment, neutral stages"""
        return cls(pkmn_uid=pokemon.uid, curr_hp=max_hp(pokemon))


_STAGE_FIELDS = {
    StatType.ATTACK: "att_stage",
    StatType.DEFENSE: "def_stage",
    StatType.SPECIAL_ATTACK: "sp_att_stage",
    StatType.SPECIAL_DEFENSE: "sp_def_stage",
    StatType.SPEED: "speed_stage",
    StatType.ACCURACY: "accuracy_stage",
    StatType.EVASION: "evasion_stage",
}


class BattleTrainerData(BaseModel):
    """Everything one combatant brings to a request: trainer, party and battle records"""

    trainer: Trainer
    party: list[Pokemon] = Field(default_factory=list)
    battle_info: TrainerBattleInfo
    pkmn_battle_infos: dict[str, PokemonBattleInfo] = Field(default_factory=dict)

    @property
    def trainer_id(self) -> str:
        return self.trainer.uid

    def active_pokemon(self) -> Pokemon:
        return self.party[self.battle_info.curr_pkmn_slot]

    def battle_info_for(self, pokemon: Pokemon) -> PokemonBattleInfo:
        """Battle info for a party member, created on first reference"""
        info = self.pkmn_battle_infos.get(pokemon.uid)
        if info is None:
            info = PokemonBattleInfo.fresh(pokemon)
            self.pkmn_battle_infos[pokemon.uid] = info
        return info

    def active_battle_info(self) -> PokemonBattleInfo:
        return self.battle_info_for(self.active_pokemon())

    def party_battle_infos(self) -> list[PokemonBattleInfo]:
        return [self.battle_info_for(p) for p in self.party]


class BattleData(BaseModel):
    """
    Request-scoped view of a battle

    ``requester`` is the combatant whose request is being handled (and who
    wins speed and switch ties); ``opponent`` is the other side.
    """

    battle: Battle
    requester: BattleTrainerData
    opponent: BattleTrainerData

    def sides(self) -> tuple[BattleTrainerData, BattleTrainerData]:
        return self.requester, self.opponent

    def side_of(self, trainer_id: str) -> BattleTrainerData:
        if self.requester.trainer_id == trainer_id:
            return self.requester
        if self.opponent.trainer_id == trainer_id:
            return self.opponent
        raise ValueError(f"trainer '{trainer_id}' is not part of this battle")

    def other_side(self, side: BattleTrainerData) -> BattleTrainerData:
        return self.opponent if side is self.requester else self.requester
