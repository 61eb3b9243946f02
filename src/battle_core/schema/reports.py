"""
Structured outcome reports

The engine never formats user-facing text; each report below is handed to the
messaging collaborator, which decides how to render it.
"""

from typing import Optional, Union

from pydantic import BaseModel, Field

from src.battle_core.enums import Ailment, BattleResult, CatchOutcome, StatType


class HitReport(BaseModel):
    """One strike of a (possibly multi-hit) damaging move"""

    damage: int = Field(ge=0)
    critical: bool = False


class StatChangeReport(BaseModel):
    stat: StatType
    change: int
    on_user: bool


class MoveReport(BaseModel):
    kind: str = "move"
    trainer_id: str
    pokemon_name: str
    target_name: str
    move_id: int
    move_name: str

    fainted_cannot_act: bool = False
    target_already_fainted: bool = False
    missed: bool = False
    immune: bool = False
    effectiveness: float = 1.0

    hits: list[HitReport] = Field(default_factory=list)
    ailment_inflicted: Ailment = Ailment.NONE
    confused: bool = False
    stat_changes: list[StatChangeReport] = Field(default_factory=list)
    flinched: bool = False

    # Signed HP deltas applied by this move
    target_hp_delta: int = 0
    user_hp_delta: int = 0

    user_fainted: bool = False
    target_fainted: bool = False
    experience_gained: int = 0

    @property
    def total_damage(self) -> int:
        return sum(h.damage for h in self.hits)

    @property
    def critical(self) -> bool:
        return any(h.critical for h in self.hits)


class SwitchReport(BaseModel):
    kind: str = "switch"
    trainer_id: str
    withdrawn_slot: int
    withdrawn_name: str
    selected_slot: int
    selected_name: str


class CatchReport(BaseModel):
    kind: str = "catch"
    trainer_id: str
    target_name: str
    outcome: CatchOutcome
    capture_score: float
    roll: Optional[float] = None


class SkippedReport(BaseModel):
    """The action never ran: the actor's creature fainted or flinched before its turn"""

    kind: str = "skipped"
    trainer_id: str
    reason: str


ActionReport = Union[MoveReport, SwitchReport, CatchReport, SkippedReport]


class BattleOutcome(BaseModel):
    kind: str = "outcome"
    result: BattleResult
    winner_id: Optional[str] = None
    loser_id: Optional[str] = None


class TurnReport(BaseModel):
    """Everything that happened in one resolved turn, in execution order"""

    kind: str = "turn"
    first_actor: str
    second_actor: str
    actions: list[ActionReport] = Field(default_factory=list)
    outcome: Optional[BattleOutcome] = None

    @property
    def battle_over(self) -> bool:
        return self.outcome is not None


class LevelUpReport(BaseModel):
    kind: str = "level_up"
    pokemon_uid: str
    pokemon_name: str
    new_level: int


class MoveLearnedReport(BaseModel):
    kind: str = "move_learned"
    pokemon_uid: str
    pokemon_name: str
    move_id: int


class MoveConflictPrompt(BaseModel):
    """Leveling halted: the creature knows a full set of moves and must forget one or decline"""

    kind: str = "move_conflict"
    party_slot: int
    pokemon_uid: str
    pokemon_name: str
    move_id: int
    current_moves: list[int]


class MoveForgottenReport(BaseModel):
    kind: str = "move_forgotten"
    pokemon_uid: str
    forgotten_move_id: int
    learned_move_id: int


class MoveDeclinedReport(BaseModel):
    kind: str = "move_declined"
    pokemon_uid: str
    move_id: int


class ForfeitReport(BaseModel):
    kind: str = "forfeit"
    forfeiter_id: str
    opponent_id: str
    battle_started: bool


class BattleStartedReport(BaseModel):
    kind: str = "battle_started"
    challenger_id: str
    opponent_id: str
    started: bool
    wild_species_id: Optional[int] = None


class ActionQueuedReport(BaseModel):
    kind: str = "action_queued"
    trainer_id: str
    action_type: str
    val: int


class Rejection(BaseModel):
    """Invalid input or precondition failure - the request changed nothing"""

    kind: str = "rejection"
    reason: str


class InternalFailure(BaseModel):
    kind: str = "internal_failure"
    reason: str = "something went wrong, please try again"
