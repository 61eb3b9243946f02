"""
Experience, growth rates and level-up move learning

``required_experience(rate, n)`` is the total experience a creature needs to be
level ``n``. Creatures level up one level at a time; when the next level
teaches a move and the creature already knows a full set, leveling halts and
the trainer has to either forget a move or decline the new one.
"""

import logging
from typing import Optional

from src.battle_core.config import EngineConfig
from src.battle_core.constants import EXP_DIVISOR, TRAINER_EXP_MULTIPLIER, WILD_EXP_MULTIPLIER
from src.battle_core.enums import GrowthRate, TrainerMode
from src.battle_core.errors import InvalidInputError, InvariantViolationError, PreconditionError
from src.battle_core.move_catalog import Catalog, moves_learned_at
from src.battle_core.schema.pokemon import Pokemon
from src.battle_core.schema.reports import (
    LevelUpReport,
    MoveConflictPrompt,
    MoveDeclinedReport,
    MoveForgottenReport,
    MoveLearnedReport,
)
from src.battle_core.schema.trainer import Trainer

logger = logging.getLogger(__name__)


def _erratic(n: int) -> float:
    if n <= 50:
        return n**3 * (100 - n) / 50
    if n <= 68:
        return n**3 * (150 - n) / 100
    if n <= 98:
        return n**3 * ((1911 - 10 * n) // 3) / 500
    return n**3 * (160 - n) / 100


def _fluctuating(n: int) -> float:
    if n <= 15:
        return n**3 * ((n + 1) // 3 + 24) / 50
    if n <= 36:
        return n**3 * (n + 14) / 50
    return n**3 * (n // 2 + 32) / 50


GROWTH_FORMULAS = {
    GrowthRate.ERRATIC: _erratic,
    GrowthRate.FAST: lambda n: 4 * n**3 / 5,
    GrowthRate.MEDIUM_FAST: lambda n: n**3,
    GrowthRate.MEDIUM_SLOW: lambda n: 6 * n**3 / 5 - 15 * n**2 + 100 * n - 140,
    GrowthRate.SLOW: lambda n: 5 * n**3 / 4,
    GrowthRate.FLUCTUATING: _fluctuating,
}


def required_experience(rate: GrowthRate, level: int) -> int:
    """Total experience needed to be ``level``. Level 1 needs none."""
    if level <= 1:
        return 0
    return max(0, int(GROWTH_FORMULAS[rate](level)))


def experience_for(defeated: Pokemon, wild: bool) -> int:
    """Experience awarded for fainting ``defeated``"""
    multiplier = WILD_EXP_MULTIPLIER if wild else TRAINER_EXP_MULTIPLIER
    return int(defeated.base_experience * multiplier * defeated.level / EXP_DIVISOR)


def ready_to_level_up(pokemon: Pokemon, max_level: int) -> bool:
    return pokemon.level < max_level and pokemon.experience >= required_experience(pokemon.growth_rate, pokemon.level + 1)


class LevelingResult:
    """Reports produced by one leveling pass, plus the prompt that halted it (if any)"""

    def __init__(self):
        self.reports: list = []
        self.prompt: Optional[MoveConflictPrompt] = None

    @property
    def halted(self) -> bool:
        return self.prompt is not None


class LevelingResolver:
    def __init__(self, catalog: Catalog, config: Optional[EngineConfig] = None):
        self.catalog = catalog
        self.config = config or EngineConfig()

    def _unknown_moves_at_next_level(self, pokemon: Pokemon) -> list[int]:
        learnable = moves_learned_at(self.catalog, pokemon.species_id, pokemon.level + 1)
        return [m for m in learnable if not pokemon.knows_move(m) and m not in pokemon.declined_moves]

    def _level_up(self, pokemon: Pokemon, result: LevelingResult) -> None:
        pokemon.level += 1
        pokemon.declined_moves.clear()
        logger.info("%s (%s) grew to level %d", pokemon.name, pokemon.uid, pokemon.level)
        result.reports.append(LevelUpReport(pokemon_uid=pokemon.uid, pokemon_name=pokemon.name, new_level=pokemon.level))

    def level_up_party(self, trainer: Trainer, party: list[Pokemon]) -> LevelingResult:
        """
        Level up every party member as far as its experience allows.

        Stops at the first creature that must choose between its current moves
        and a new one, puts the trainer into FORGET_MOVE mode and returns the
        prompt. Calling again after the choice resumes where it halted.
        """
        result = LevelingResult()
        for slot, pokemon in enumerate(party):
            while ready_to_level_up(pokemon, self.config.max_level):
                for move_id in self._unknown_moves_at_next_level(pokemon):
                    if pokemon.move_count() >= self.config.max_moves:
                        trainer.mode = TrainerMode.FORGET_MOVE
                        result.prompt = MoveConflictPrompt(
                            party_slot=slot,
                            pokemon_uid=pokemon.uid,
                            pokemon_name=pokemon.name,
                            move_id=move_id,
                            current_moves=list(pokemon.moves),
                        )
                        logger.info("leveling of %s halted on move %d", pokemon.uid, move_id)
                        return result
                    pokemon.learn_move(move_id)
                    result.reports.append(MoveLearnedReport(pokemon_uid=pokemon.uid, pokemon_name=pokemon.name, move_id=move_id))
                self._level_up(pokemon, result)

        if trainer.mode == TrainerMode.FORGET_MOVE:
            trainer.mode = TrainerMode.WAITING
        return result

    def pending_conflict(self, party: list[Pokemon]) -> Optional[tuple[int, Pokemon, int]]:
        """First (slot, creature, move id) whose next level teaches a move it has no room for"""
        for slot, pokemon in enumerate(party):
            if not ready_to_level_up(pokemon, self.config.max_level):
                continue
            unknown = self._unknown_moves_at_next_level(pokemon)
            if unknown and pokemon.move_count() >= self.config.max_moves:
                return slot, pokemon, unknown[0]
        return None

    def _require_conflict(self, trainer: Trainer, party: list[Pokemon]) -> tuple[int, Pokemon, int]:
        if trainer.mode != TrainerMode.FORGET_MOVE:
            raise PreconditionError("no creature is trying to learn a move right now")
        conflict = self.pending_conflict(party)
        if conflict is None:
            raise InvariantViolationError(f"trainer {trainer.uid} is choosing a move to forget but no creature is waiting to learn one")
        return conflict

    def forget_move(self, trainer: Trainer, party: list[Pokemon], move_slot: int) -> LevelingResult:
        """Replace the move in ``move_slot`` with the pending move, then resume leveling"""
        _, pokemon, move_id = self._require_conflict(trainer, party)
        if not 0 <= move_slot < pokemon.move_count():
            raise InvalidInputError(f"no move in slot {move_slot + 1}")

        forgotten = pokemon.replace_move(move_slot, move_id)
        result = LevelingResult()
        result.reports.append(MoveForgottenReport(pokemon_uid=pokemon.uid, forgotten_move_id=forgotten, learned_move_id=move_id))

        resumed = self.level_up_party(trainer, party)
        result.reports.extend(resumed.reports)
        result.prompt = resumed.prompt
        return result

    def decline_move(self, trainer: Trainer, party: list[Pokemon]) -> LevelingResult:
        """Keep the current moves and skip the pending move, then resume leveling"""
        _, pokemon, move_id = self._require_conflict(trainer, party)

        result = LevelingResult()
        result.reports.append(MoveDeclinedReport(pokemon_uid=pokemon.uid, move_id=move_id))
        pokemon.declined_moves.append(move_id)

        resumed = self.level_up_party(trainer, party)
        result.reports.extend(resumed.reports)
        result.prompt = resumed.prompt
        return result
