import pytest

from src.battle_core.config import EngineConfig
from src.battle_core.enums import Ailment, BattleMode, DamageClass, GrowthRate, MoveTarget, StatType, TrainerType, Type
from src.battle_core.battle_engine import BattleEngine
from src.battle_core.move_catalog import InMemoryCatalog
from src.battle_core.schema.battle_move import Move, StatChange
from src.battle_core.schema.battle_state import Battle, BattleData, BattleTrainerData, TrainerBattleInfo
from src.battle_core.schema.pokemon import CreatureTemplate
from src.battle_core.schema.trainer import Trainer
from src.battle_core.type_effectiveness import TypeChart
from src.battle_core.utils.mon_factory import create_pokemon
from src.battle_core.utils.rng import RandomSource

TACKLE = 1
QUICK_ATTACK = 2
EMBER = 3
GROWL = 4
THUNDER_WAVE = 5
SWIFT = 6
DOUBLE_SLAP = 7
ABSORB = 8
DOUBLE_EDGE = 9
RECOVER = 10
SWORDS_DANCE = 11
BITE = 12
CONFUSE_RAY = 13

MOVES = [
    Move(id=TACKLE, name="Tackle", type=Type.NORMAL, power=40),
    Move(id=QUICK_ATTACK, name="Quick Attack", type=Type.NORMAL, power=40, priority=1),
    Move(id=EMBER, name="Ember", type=Type.FIRE, power=40, damage_class=DamageClass.SPECIAL, ailment=Ailment.BURN, ailment_chance=10),
    Move(
        id=GROWL,
        name="Growl",
        type=Type.NORMAL,
        damage_class=DamageClass.STATUS,
        stat_changes=(StatChange(stat=StatType.ATTACK, change=-1),),
    ),
    Move(id=THUNDER_WAVE, name="Thunder Wave", type=Type.ELECTRIC, accuracy=90, damage_class=DamageClass.STATUS, ailment=Ailment.PARALYSIS),
    Move(id=SWIFT, name="Swift", type=Type.NORMAL, power=60, accuracy=0, damage_class=DamageClass.SPECIAL),
    Move(id=DOUBLE_SLAP, name="Double Slap", type=Type.NORMAL, power=15, accuracy=85, min_hits=2, max_hits=5),
    Move(id=ABSORB, name="Absorb", type=Type.GRASS, power=20, damage_class=DamageClass.SPECIAL, drain=50),
    Move(id=DOUBLE_EDGE, name="Double-Edge", type=Type.NORMAL, power=120, drain=-33),
    Move(id=RECOVER, name="Recover", type=Type.NORMAL, accuracy=0, damage_class=DamageClass.STATUS, target=MoveTarget.SELF, healing=50),
    Move(
        id=SWORDS_DANCE,
        name="Swords Dance",
        type=Type.NORMAL,
        accuracy=0,
        damage_class=DamageClass.STATUS,
        target=MoveTarget.SELF,
        stat_changes=(StatChange(stat=StatType.ATTACK, change=2),),
    ),
    Move(id=BITE, name="Bite", type=Type.DARK, power=60, flinch_chance=30),
    Move(id=CONFUSE_RAY, name="Confuse Ray", type=Type.GHOST, damage_class=DamageClass.STATUS, ailment=Ailment.CONFUSION),
]


class FixedRandom(RandomSource):
    """Deterministic stand-in for RandomSource.

    ``percent`` is returned by every percentage roll, so ``chance(p)`` succeeds
    exactly when ``percent < p``. ``high`` makes every integer draw return its
    upper bound instead of its lower bound. ``fraction`` places every uniform
    draw within its range.
    """

    def __init__(self, percent: float = 0.0, high: bool = True, fraction: float = 0.0):
        super().__init__(seed=0)
        self.percent = percent
        self.high = high
        self.fraction = fraction

    def roll_percent(self) -> float:
        return self.percent

    def randint(self, low: int, high: int) -> int:
        return high if self.high else low

    def uniform(self, low: float, high: float) -> float:
        return low + (high - low) * self.fraction


# Every draw that can fail does: no crits, no secondary effects, misses on anything below 100%
NEVER = dict(percent=99.99, high=True)
# Every draw that can succeed does, damage rolls at their minimum
ALWAYS = dict(percent=0.0, high=False)


def make_template(
    id: int = 1,
    name: str = "Testmon",
    type1: Type = Type.NORMAL,
    type2: Type | None = None,
    base: int = 50,
    speed: int | None = None,
    learnset: dict | None = None,
    catch_rate: int = 45,
    growth_rate: GrowthRate = GrowthRate.MEDIUM_FAST,
    base_experience: int = 64,
) -> CreatureTemplate:
    return CreatureTemplate(
        id=id,
        name=name,
        type1=type1,
        type2=type2,
        base_hp=base,
        base_attack=base,
        base_defense=base,
        base_sp_attack=base,
        base_sp_defense=base,
        base_speed=speed if speed is not None else base,
        catch_rate=catch_rate,
        growth_rate=growth_rate,
        base_experience=base_experience,
        learnset=learnset or {1: (TACKLE,)},
    )


def make_mon(name: str = "Testmon", level: int = 10, moves=(TACKLE,), **template_kwargs):
    """Level 10 with base 50 everywhere: 30 max HP, 15 in every other stat"""
    template = make_template(name=name, **template_kwargs)
    return create_pokemon(template, level=level, moves=list(moves), uid=name.lower())


def make_side(trainer_id: str, party, trainer_type: TrainerType = TrainerType.HUMAN) -> BattleTrainerData:
    return BattleTrainerData(
        trainer=Trainer(uid=trainer_id, name=trainer_id, type=trainer_type),
        party=list(party),
        battle_info=TrainerBattleInfo(trainer_id=trainer_id),
    )


def make_battle_data(requester_party, opponent_party, opponent_type: TrainerType = TrainerType.HUMAN) -> BattleData:
    requester = make_side("red", requester_party)
    opponent = make_side("blue", opponent_party, opponent_type)
    return BattleData(battle=Battle(p1="red", p2="blue", mode=BattleMode.STARTED), requester=requester, opponent=opponent)


@pytest.fixture
def catalog() -> InMemoryCatalog:
    return InMemoryCatalog(moves=MOVES, creatures=[make_template()])


@pytest.fixture
def type_chart() -> TypeChart:
    return TypeChart()


@pytest.fixture
def config() -> EngineConfig:
    return EngineConfig()


@pytest.fixture
def make_engine(catalog, type_chart, config):
    def _make(rng: RandomSource | None = None) -> BattleEngine:
        return BattleEngine(catalog, type_chart, config, rng or RandomSource(seed=1))

    return _make
