"""
Request handling

Each public method handles one request from one trainer as a single unit of
work inside ``storage.transaction()``. Invalid input and precondition failures
roll the transaction back and come back as a Rejection; collaborator failures
propagate. Reports for other trainers are only delivered once the unit of work
has committed.
"""

import logging
import uuid
from typing import Callable, Optional

from pydantic import BaseModel

from src.battle_core.battle_engine import BattleEngine, validate_switch
from src.battle_core.config import EngineConfig
from src.battle_core.enums import BattleActionType, BattleMode, BattleResult, TrainerMode, TrainerType
from src.battle_core.errors import InvalidInputError, InvariantViolationError, NotFoundError, PreconditionError
from src.battle_core.leveling import LevelingResolver, LevelingResult
from src.battle_core.messaging import Messenger
from src.battle_core.move_catalog import Catalog
from src.battle_core.outcome import apply_outcome, forfeit_outcome
from src.battle_core.schema.battle_state import Battle, BattleAction, BattleData, BattleTrainerData, TrainerBattleInfo
from src.battle_core.schema.reports import (
    ActionQueuedReport,
    BattleOutcome,
    BattleStartedReport,
    ForfeitReport,
    InternalFailure,
    Rejection,
    TurnReport,
)
from src.battle_core.schema.trainer import Trainer
from src.battle_core.storage import Storage
from src.battle_core.type_effectiveness import TypeChart
from src.battle_core.utils.mon_factory import create_random_pokemon
from src.battle_core.utils.rng import RandomSource
from src.battle_core.wild_encounters import available_wilds, random_wild

logger = logging.getLogger(__name__)


class BattleService:
    def __init__(
        self,
        storage: Storage,
        catalog: Catalog,
        messenger: Messenger,
        config: Optional[EngineConfig] = None,
        rng: Optional[RandomSource] = None,
        type_chart: Optional[TypeChart] = None,
    ):
        self.storage = storage
        self.catalog = catalog
        self.messenger = messenger
        self.config = config or EngineConfig()
        self.rng = rng or RandomSource()
        self.engine = BattleEngine(catalog, type_chart or TypeChart(), self.config, self.rng)
        self.leveling = LevelingResolver(catalog, self.config)
        self._outbox: list[tuple[str, BaseModel, bool]] = []

    # Unit of work

    def _run(self, requester_id: str, handler: Callable[[], list[BaseModel]]) -> list[BaseModel]:
        self._outbox = []
        try:
            with self.storage.transaction():
                reports = handler()
        except (InvalidInputError, PreconditionError) as e:
            logger.info("rejected request from %s: %s", requester_id, e.reason)
            reports = [Rejection(reason=e.reason)]
            self._outbox = []
        except InvariantViolationError:
            logger.exception("invariant violated while handling a request from %s", requester_id)
            reports = [InternalFailure()]
            self._outbox = []

        for recipient, report, public in self._outbox:
            self.messenger.send(recipient, report, public)
        for report in reports:
            self.messenger.send(requester_id, report)
        self._outbox = []
        return reports

    def _notify(self, trainer: Trainer, report: BaseModel, public: bool = False) -> None:
        # Only humans have anywhere to receive reports
        if trainer.type == TrainerType.HUMAN:
            self._outbox.append((trainer.uid, report, public))

    # Loading and saving

    def _load_trainer(self, uid: str) -> Trainer:
        try:
            return self.storage.load_trainer(uid)
        except NotFoundError:
            raise PreconditionError(f"no trainer named '{uid}'") from None

    def _load_side(self, battle: Battle, trainer: Trainer) -> BattleTrainerData:
        info = self.storage.load_trainer_battle_info(battle, trainer.uid)
        if info is None:
            raise InvariantViolationError(f"battle {battle.key} has no battle info for trainer {trainer.uid}")
        party = self.storage.load_party(trainer.uid)
        side = BattleTrainerData(trainer=trainer, party=party, battle_info=info)
        for pokemon in party:
            pkmn_info = self.storage.load_pokemon_battle_info(battle, pokemon.uid)
            if pkmn_info is not None:
                side.pkmn_battle_infos[pokemon.uid] = pkmn_info
        return side

    def _load_battle_data(self, battle: Battle, requester: Trainer) -> BattleData:
        opponent = self.storage.load_trainer(battle.opponent_of(requester.uid))
        return BattleData(battle=battle, requester=self._load_side(battle, requester), opponent=self._load_side(battle, opponent))

    def _save_side(self, battle: Battle, side: BattleTrainerData) -> None:
        self.storage.save_trainer(side.trainer)
        self.storage.save_party(side.trainer_id, side.party)
        self.storage.save_trainer_battle_info(battle, side.battle_info)
        for info in side.pkmn_battle_infos.values():
            self.storage.save_pokemon_battle_info(battle, info)

    def _save_battle_data(self, battle_data: BattleData) -> None:
        self.storage.save_battle(battle_data.battle)
        for side in battle_data.sides():
            self._save_side(battle_data.battle, side)

    def _end_battle(self, battle_data: BattleData, outcome: BattleOutcome) -> list[BaseModel]:
        """Purge the battle, drop wild trainers and level up the humans. Returns the requester's leveling reports."""
        self.storage.purge_battle(battle_data.battle)
        requester_reports: list[BaseModel] = []
        for side in battle_data.sides():
            trainer = side.trainer
            if trainer.type == TrainerType.WILD:
                self.storage.purge_trainer(trainer.uid)
                continue
            leveled = self._level_up(trainer, side.party)
            self.storage.save_trainer(trainer)
            self.storage.save_party(trainer.uid, side.party)
            if side is battle_data.requester:
                requester_reports.extend(leveled)
            else:
                for report in leveled:
                    self._notify(trainer, report)
        logger.info("battle %s ended: %s", battle_data.battle.key, outcome.result.name)
        return requester_reports

    def _level_up(self, trainer: Trainer, party) -> list[BaseModel]:
        result = self.leveling.level_up_party(trainer, party)
        return _leveling_reports(result)

    # Requests

    def challenge(self, requester_id: str, opponent_id: str) -> list[BaseModel]:
        """Challenge another trainer, or accept their standing challenge"""
        return self._run(requester_id, lambda: self._challenge(requester_id, opponent_id))

    def _challenge(self, requester_id: str, opponent_id: str) -> list[BaseModel]:
        if requester_id == opponent_id:
            raise InvalidInputError("you cannot challenge yourself")
        requester = self._load_trainer(requester_id)
        if requester.mode != TrainerMode.WAITING:
            raise PreconditionError("you can only challenge someone while you are not battling")
        opponent = self._load_trainer(opponent_id)
        if opponent.type == TrainerType.WILD:
            raise PreconditionError("wild creatures cannot be challenged")
        party = self.storage.load_party(requester_id)
        if not party:
            raise PreconditionError("you have no creatures to battle with")

        battle = self.storage.load_battle(requester_id, opponent_id)
        requester.mode = TrainerMode.BATTLING

        if battle is not None and battle.mode == BattleMode.WAITING and battle.p2 == requester_id:
            battle.mode = BattleMode.STARTED
            logger.info("trainer %s accepted a challenge from %s", requester_id, opponent_id)
        else:
            if self.storage.load_battle_trainer_is_in(requester_id) is not None:
                raise InvariantViolationError(f"trainer {requester_id} is waiting but already in a battle")
            battle = Battle(p1=requester_id, p2=opponent_id, mode=BattleMode.WAITING)
            logger.info("trainer %s challenged %s", requester_id, opponent_id)
            if opponent.type == TrainerType.GYM_LEADER:
                # Gym leaders accept every challenge straight away
                battle.mode = BattleMode.STARTED
                leader = BattleTrainerData(
                    trainer=opponent, party=self.storage.load_party(opponent_id), battle_info=TrainerBattleInfo(trainer_id=opponent_id)
                )
                leader.party_battle_infos()
                self._save_side(battle, leader)

        self.storage.save_battle(battle)
        self.storage.save_trainer(requester)
        info = TrainerBattleInfo(trainer_id=requester_id)
        self.storage.save_trainer_battle_info(battle, info)
        side = BattleTrainerData(trainer=requester, party=party, battle_info=info)
        for pkmn_info in side.party_battle_infos():
            self.storage.save_pokemon_battle_info(battle, pkmn_info)

        report = BattleStartedReport(challenger_id=requester_id, opponent_id=opponent_id, started=battle.mode == BattleMode.STARTED)
        self._notify(opponent, report)
        return [report]

    def wild_encounter(self, requester_id: str) -> list[BaseModel]:
        return self._run(requester_id, lambda: self._wild_encounter(requester_id))

    def _wild_encounter(self, requester_id: str) -> list[BaseModel]:
        requester = self._load_trainer(requester_id)
        if requester.mode != TrainerMode.WAITING:
            raise PreconditionError("you can only look for wild creatures while you are not battling")
        party = self.storage.load_party(requester_id)
        if not party:
            raise PreconditionError("you have no creatures to battle with")

        entry = random_wild(available_wilds(requester), self.rng)
        template = self.catalog.fetch_creature(entry.id)
        wild = create_random_pokemon(template, entry.median_level, self.rng)
        wild_trainer = Trainer(uid=uuid.uuid4().hex, name=wild.name, type=TrainerType.WILD, mode=TrainerMode.BATTLING)
        requester.mode = TrainerMode.BATTLING

        battle = Battle(p1=requester_id, p2=wild_trainer.uid, mode=BattleMode.STARTED)
        battle_data = BattleData(
            battle=battle,
            requester=BattleTrainerData(trainer=requester, party=party, battle_info=TrainerBattleInfo(trainer_id=requester_id)),
            opponent=BattleTrainerData(trainer=wild_trainer, party=[wild], battle_info=TrainerBattleInfo(trainer_id=wild_trainer.uid)),
        )
        for side in battle_data.sides():
            side.party_battle_infos()
        self._save_battle_data(battle_data)

        logger.info("trainer %s encountered a wild %s (level %d)", requester_id, wild.name, wild.level)
        return [BattleStartedReport(challenger_id=requester_id, opponent_id=wild_trainer.uid, started=True, wild_species_id=template.id)]

    def use_move(self, requester_id: str, move_slot: int) -> list[BaseModel]:
        return self._run(requester_id, lambda: self._use_move(requester_id, move_slot))

    def _use_move(self, requester_id: str, move_slot: int) -> list[BaseModel]:
        battle_data = self._started_battle_data(requester_id)
        side = battle_data.requester
        pokemon = side.active_pokemon()
        if side.active_battle_info().curr_hp <= 0:
            raise PreconditionError(f"{pokemon.name} has fainted, switch to another creature")
        if not 0 <= move_slot < pokemon.move_count():
            raise InvalidInputError(f"no move in slot {move_slot + 1}")
        return self._queue_action(battle_data, BattleAction(type=BattleActionType.MOVE, val=pokemon.moves[move_slot]))

    def switch_pokemon(self, requester_id: str, party_slot: int) -> list[BaseModel]:
        return self._run(requester_id, lambda: self._switch_pokemon(requester_id, party_slot))

    def _switch_pokemon(self, requester_id: str, party_slot: int) -> list[BaseModel]:
        battle_data = self._started_battle_data(requester_id)
        validate_switch(battle_data.requester, party_slot)
        return self._queue_action(battle_data, BattleAction(type=BattleActionType.SWITCH, val=party_slot))

    def catch_pokemon(self, requester_id: str) -> list[BaseModel]:
        return self._run(requester_id, lambda: self._catch_pokemon(requester_id))

    def _catch_pokemon(self, requester_id: str) -> list[BaseModel]:
        battle_data = self._started_battle_data(requester_id)
        if battle_data.opponent.trainer.type != TrainerType.WILD:
            raise PreconditionError("you can only catch wild creatures")
        return self._queue_action(battle_data, BattleAction(type=BattleActionType.CATCH))

    def _started_battle_data(self, requester_id: str) -> BattleData:
        requester = self._load_trainer(requester_id)
        if requester.mode != TrainerMode.BATTLING:
            raise PreconditionError("you are not in a battle")
        battle = self.storage.load_battle_trainer_is_in(requester_id)
        if battle is None:
            raise InvariantViolationError(f"trainer {requester_id} is battling without a battle record")
        if battle.mode != BattleMode.STARTED:
            raise PreconditionError("your opponent has not accepted the challenge yet")
        return self._load_battle_data(battle, requester)

    def _queue_action(self, battle_data: BattleData, action: BattleAction) -> list[BaseModel]:
        requester = battle_data.requester
        self.engine.queue.submit(battle_data, requester.trainer_id, action)
        reports: list[BaseModel] = [ActionQueuedReport(trainer_id=requester.trainer_id, action_type=action.type.name, val=action.val)]

        if not self.engine.queue.prepare(battle_data):
            self._save_battle_data(battle_data)
            return reports

        turn: TurnReport = self.engine.process_turn(battle_data)
        reports.append(turn)
        self._notify(battle_data.opponent.trainer, turn)

        self._save_battle_data(battle_data)
        if turn.outcome is not None:
            reports.extend(self._end_battle(battle_data, turn.outcome))
        return reports

    def forfeit(self, requester_id: str) -> list[BaseModel]:
        return self._run(requester_id, lambda: self._forfeit(requester_id))

    def _forfeit(self, requester_id: str) -> list[BaseModel]:
        requester = self._load_trainer(requester_id)
        battle = self.storage.load_battle_trainer_is_in(requester_id)
        if battle is None:
            raise PreconditionError("you are not in a battle")
        outcome = forfeit_outcome(battle, requester_id)
        opponent_id = battle.opponent_of(requester_id)
        reports: list[BaseModel] = [ForfeitReport(forfeiter_id=requester_id, opponent_id=opponent_id, battle_started=battle.mode == BattleMode.STARTED)]

        if outcome.result == BattleResult.WITHDRAWN:
            # The opponent never joined, so only the challenger's state changes
            requester.mode = TrainerMode.WAITING
            self.storage.save_trainer(requester)
            self.storage.purge_battle(battle)
            opponent = self.storage.load_trainer(opponent_id)
            logger.info("trainer %s withdrew a challenge to %s", requester_id, opponent_id)
            reports.append(outcome)
        else:
            battle_data = self._load_battle_data(battle, requester)
            opponent = battle_data.opponent.trainer
            apply_outcome(battle_data, outcome)
            self._save_battle_data(battle_data)
            reports.append(outcome)
            reports.extend(self._end_battle(battle_data, outcome))

        for report in reports[:2]:
            self._notify(opponent, report)
        return reports

    def forget_move(self, requester_id: str, move_slot: int) -> list[BaseModel]:
        return self._run(requester_id, lambda: self._resolve_conflict(requester_id, move_slot))

    def decline_move(self, requester_id: str) -> list[BaseModel]:
        return self._run(requester_id, lambda: self._resolve_conflict(requester_id, None))

    def _resolve_conflict(self, requester_id: str, move_slot: Optional[int]) -> list[BaseModel]:
        trainer = self._load_trainer(requester_id)
        party = self.storage.load_party(requester_id)
        if move_slot is None:
            result = self.leveling.decline_move(trainer, party)
        else:
            result = self.leveling.forget_move(trainer, party, move_slot)
        self.storage.save_trainer(trainer)
        self.storage.save_party(requester_id, party)
        return _leveling_reports(result)


def _leveling_reports(result: LevelingResult) -> list[BaseModel]:
    reports = list(result.reports)
    if result.prompt is not None:
        reports.append(result.prompt)
    return reports
