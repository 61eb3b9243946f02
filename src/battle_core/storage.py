"""
Persistence boundary

The service talks to storage only through the Storage protocol. Records are
plain pydantic models; InMemoryStorage hands out copies so that nothing changes
until a record is explicitly saved.
"""

import copy
import logging
from contextlib import contextmanager
from typing import ContextManager, Iterator, Optional, Protocol

from src.battle_core.enums import BattleMode
from src.battle_core.errors import NotFoundError
from src.battle_core.schema.battle_state import Battle, PokemonBattleInfo, TrainerBattleInfo, battle_key
from src.battle_core.schema.pokemon import Pokemon
from src.battle_core.schema.trainer import Trainer

logger = logging.getLogger(__name__)


class Storage(Protocol):
    def transaction(self) -> ContextManager[None]:
        """Context manager: everything saved or purged inside it is kept only if the block exits cleanly"""
        ...

    def load_trainer(self, uid: str) -> Trainer: ...

    def save_trainer(self, trainer: Trainer) -> None: ...

    def purge_trainer(self, uid: str) -> None: ...

    def load_party(self, trainer_uid: str) -> list[Pokemon]: ...

    def save_party(self, trainer_uid: str, party: list[Pokemon]) -> None: ...

    def load_battle(self, p1: str, p2: str) -> Optional[Battle]: ...

    def load_battle_trainer_is_in(self, trainer_uid: str) -> Optional[Battle]:
        """The battle the trainer started or joined. Challenges the trainer has not accepted do not count."""
        ...

    def save_battle(self, battle: Battle) -> None: ...

    def purge_battle(self, battle: Battle) -> None:
        """Delete the battle together with all of its trainer and creature battle infos"""
        ...

    def load_trainer_battle_info(self, battle: Battle, trainer_uid: str) -> Optional[TrainerBattleInfo]: ...

    def save_trainer_battle_info(self, battle: Battle, info: TrainerBattleInfo) -> None: ...

    def load_pokemon_battle_info(self, battle: Battle, pkmn_uid: str) -> Optional[PokemonBattleInfo]: ...

    def save_pokemon_battle_info(self, battle: Battle, info: PokemonBattleInfo) -> None: ...


class InMemoryStorage:
    def __init__(self):
        self._trainers: dict[str, Trainer] = {}
        self._parties: dict[str, list[Pokemon]] = {}
        self._battles: dict[tuple[str, str], Battle] = {}
        self._trainer_battle_infos: dict[tuple[tuple[str, str], str], TrainerBattleInfo] = {}
        self._pokemon_battle_infos: dict[tuple[tuple[str, str], str], PokemonBattleInfo] = {}
        self._in_transaction = False

    def _snapshot(self) -> dict:
        return copy.deepcopy(
            {
                "_trainers": self._trainers,
                "_parties": self._parties,
                "_battles": self._battles,
                "_trainer_battle_infos": self._trainer_battle_infos,
                "_pokemon_battle_infos": self._pokemon_battle_infos,
            }
        )

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self._in_transaction:
            # Nested blocks join the outer unit of work
            yield
            return
        snapshot = self._snapshot()
        self._in_transaction = True
        try:
            yield
        except BaseException:
            logger.debug("rolling back storage transaction")
            for name, value in snapshot.items():
                setattr(self, name, value)
            raise
        finally:
            self._in_transaction = False

    # Trainers and parties

    def load_trainer(self, uid: str) -> Trainer:
        try:
            return self._trainers[uid].model_copy(deep=True)
        except KeyError:
            raise NotFoundError("trainer", uid) from None

    def has_trainer(self, uid: str) -> bool:
        return uid in self._trainers

    def save_trainer(self, trainer: Trainer) -> None:
        self._trainers[trainer.uid] = trainer.model_copy(deep=True)

    def purge_trainer(self, uid: str) -> None:
        self._trainers.pop(uid, None)
        self._parties.pop(uid, None)

    def load_party(self, trainer_uid: str) -> list[Pokemon]:
        return [p.model_copy(deep=True) for p in self._parties.get(trainer_uid, [])]

    def save_party(self, trainer_uid: str, party: list[Pokemon]) -> None:
        self._parties[trainer_uid] = [p.model_copy(deep=True) for p in party]

    # Battles

    def load_battle(self, p1: str, p2: str) -> Optional[Battle]:
        battle = self._battles.get(battle_key(p1, p2))
        return battle.model_copy() if battle is not None else None

    def load_battle_trainer_is_in(self, trainer_uid: str) -> Optional[Battle]:
        for battle in self._battles.values():
            if battle.p1 == trainer_uid or (battle.p2 == trainer_uid and battle.mode == BattleMode.STARTED):
                return battle.model_copy()
        return None

    def save_battle(self, battle: Battle) -> None:
        self._battles[battle.key] = battle.model_copy()

    def purge_battle(self, battle: Battle) -> None:
        key = battle.key
        self._battles.pop(key, None)
        self._trainer_battle_infos = {k: v for k, v in self._trainer_battle_infos.items() if k[0] != key}
        self._pokemon_battle_infos = {k: v for k, v in self._pokemon_battle_infos.items() if k[0] != key}

    def load_trainer_battle_info(self, battle: Battle, trainer_uid: str) -> Optional[TrainerBattleInfo]:
        info = self._trainer_battle_infos.get((battle.key, trainer_uid))
        return info.model_copy(deep=True) if info is not None else None

    def save_trainer_battle_info(self, battle: Battle, info: TrainerBattleInfo) -> None:
        self._trainer_battle_infos[(battle.key, info.trainer_id)] = info.model_copy(deep=True)

    def load_pokemon_battle_info(self, battle: Battle, pkmn_uid: str) -> Optional[PokemonBattleInfo]:
        info = self._pokemon_battle_infos.get((battle.key, pkmn_uid))
        return info.model_copy() if info is not None else None

    def save_pokemon_battle_info(self, battle: Battle, info: PokemonBattleInfo) -> None:
        self._pokemon_battle_infos[(battle.key, info.pkmn_uid)] = info.model_copy()

    def battle_count(self) -> int:
        return len(self._battles)
