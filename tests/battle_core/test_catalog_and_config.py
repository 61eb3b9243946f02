import logging

import pytest
from pydantic import ValidationError

from src.battle_core.config import EngineConfig
from src.battle_core.enums import DamageClass, Type
from src.battle_core.errors import CatalogError, CollaboratorError
from src.battle_core.logging_setup import PACKAGE_LOGGER, configure_logging
from src.battle_core.move_catalog import CachedCatalog, InMemoryCatalog, moves_learned_at
from src.battle_core.schema.battle_move import Move
from src.battle_core.utils.mon_factory import create_pokemon

from conftest import EMBER, GROWL, MOVES, SWIFT, TACKLE, make_template


class CountingCatalog(InMemoryCatalog):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.move_calls = 0

    def fetch_move(self, move_id):
        self.move_calls += 1
        return super().fetch_move(move_id)


def test_unknown_ids_raise_catalog_error(catalog):
    with pytest.raises(CatalogError):
        catalog.fetch_move(999)
    with pytest.raises(CollaboratorError):
        catalog.fetch_creature(999)


def test_cached_catalog_memoises_hits_only():
    inner = CountingCatalog(moves=MOVES)
    cached = CachedCatalog(inner)

    assert cached.fetch_move(TACKLE).name == "Tackle"
    cached.fetch_move(TACKLE)
    assert inner.move_calls == 1

    for _ in range(2):
        with pytest.raises(CatalogError):
            cached.fetch_move(999)
    assert inner.move_calls == 3

    cached.clear()
    cached.fetch_move(TACKLE)
    assert inner.move_calls == 4


def test_moves_learned_at(catalog):
    catalog.add_creature(make_template(id=2, learnset={1: (TACKLE,), 7: (EMBER, GROWL)}))
    assert moves_learned_at(catalog, 2, 7) == (EMBER, GROWL)
    assert moves_learned_at(catalog, 2, 8) == ()


def test_moves_are_frozen():
    move = Move(id=1, name="Tackle", type=Type.NORMAL, power=40)
    with pytest.raises(ValidationError):
        move.power = 50


def test_zero_chance_means_always_only_for_status_moves():
    status = Move(id=1, name="Growl", type=Type.NORMAL, damage_class=DamageClass.STATUS)
    damaging = Move(id=2, name="Tackle", type=Type.NORMAL, power=40)
    assert status.effective_chance(0) == 100
    assert damaging.effective_chance(0) == 0
    assert damaging.effective_chance(30) == 30


def test_factory_starts_with_latest_level_up_moves():
    template = make_template(learnset={1: (TACKLE,), 3: (GROWL,), 5: (EMBER,), 7: (SWIFT,), 9: (2,)})
    mon = create_pokemon(template, level=8)
    assert mon.moves == [TACKLE, GROWL, EMBER, SWIFT]
    assert create_pokemon(template, level=9).moves == [GROWL, EMBER, SWIFT, 2]
    assert mon.experience == 512


def test_config_defaults():
    config = EngineConfig()
    assert config.max_party_size == 6
    assert config.max_moves == 4
    assert config.crit_multiplier == 2.0
    assert config.clamp_stage(9) == 6
    assert config.clamp_stage(-9) == -6


def test_config_from_environment():
    config = EngineConfig.from_env({"BATTLE_CORE_MAX_PARTY_SIZE": "3", "BATTLE_CORE_CLAMP_STAT_STAGES": "false", "UNRELATED": "1"})
    assert config.max_party_size == 3
    assert config.clamp_stage(9) == 9


def test_config_rejects_bad_values():
    with pytest.raises(ValidationError):
        EngineConfig.from_env({"BATTLE_CORE_MAX_PARTY_SIZE": "seven"})
    with pytest.raises(ValidationError):
        EngineConfig(max_party_size=7)


def test_configure_logging_replaces_its_handler():
    records = []

    class ListHandler(logging.Handler):
        def emit(self, record):
            records.append(record)

    config = EngineConfig(log_level="debug")
    configure_logging(config, ListHandler())
    logger = configure_logging(config, ListHandler())

    assert logger.name == PACKAGE_LOGGER
    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG

    logging.getLogger("src.battle_core.some_module").debug("hello")
    assert [r.getMessage() for r in records] == ["hello"]

    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
