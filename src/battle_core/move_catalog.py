"""
Move and creature data provider adapter

The engine only ever reads catalog data. Any lookup that cannot be answered
raises CatalogError; callers treat that as fatal for the current request.
"""

import logging
from typing import Iterable, Mapping, Protocol

from src.battle_core.errors import CatalogError
from src.battle_core.schema.battle_move import Move
from src.battle_core.schema.pokemon import CreatureTemplate

logger = logging.getLogger(__name__)


class Catalog(Protocol):
    def fetch_move(self, move_id: int) -> Move: ...

    def fetch_creature(self, species_id: int) -> CreatureTemplate: ...

    def fetch_learnable_moves(self, species_id: int) -> Mapping[int, tuple[int, ...]]:
        """Level -> move ids learned by level-up at exactly that level"""
        ...


class InMemoryCatalog:
    """Catalog backed by plain dicts, used for tests and embedded data sets"""

    def __init__(self, moves: Iterable[Move] = (), creatures: Iterable[CreatureTemplate] = ()):
        self._moves: dict[int, Move] = {m.id: m for m in moves}
        self._creatures: dict[int, CreatureTemplate] = {c.id: c for c in creatures}

    def add_move(self, move: Move) -> None:
        self._moves[move.id] = move

    def add_creature(self, creature: CreatureTemplate) -> None:
        self._creatures[creature.id] = creature

    def fetch_move(self, move_id: int) -> Move:
        try:
            return self._moves[move_id]
        except KeyError:
            raise CatalogError(f"unknown move id {move_id}") from None

    def fetch_creature(self, species_id: int) -> CreatureTemplate:
        try:
            return self._creatures[species_id]
        except KeyError:
            raise CatalogError(f"unknown species id {species_id}") from None

    def fetch_learnable_moves(self, species_id: int) -> Mapping[int, tuple[int, ...]]:
        return self.fetch_creature(species_id).learnset


class CachedCatalog:
    """Memoises a slower catalog. Failed lookups are not cached."""

    def __init__(self, inner: Catalog):
        self._inner = inner
        self._moves: dict[int, Move] = {}
        self._creatures: dict[int, CreatureTemplate] = {}
        self._learnsets: dict[int, Mapping[int, tuple[int, ...]]] = {}

    def fetch_move(self, move_id: int) -> Move:
        if move_id not in self._moves:
            logger.debug("catalog miss for move %d", move_id)
            self._moves[move_id] = self._inner.fetch_move(move_id)
        return self._moves[move_id]

    def fetch_creature(self, species_id: int) -> CreatureTemplate:
        if species_id not in self._creatures:
            logger.debug("catalog miss for species %d", species_id)
            self._creatures[species_id] = self._inner.fetch_creature(species_id)
        return self._creatures[species_id]

    def fetch_learnable_moves(self, species_id: int) -> Mapping[int, tuple[int, ...]]:
        if species_id not in self._learnsets:
            self._learnsets[species_id] = self._inner.fetch_learnable_moves(species_id)
        return self._learnsets[species_id]

    def clear(self) -> None:
        self._moves.clear()
        self._creatures.clear()
        self._learnsets.clear()


def moves_learned_at(catalog: Catalog, species_id: int, level: int) -> tuple[int, ...]:
    return tuple(catalog.fetch_learnable_moves(species_id).get(level, ()))
