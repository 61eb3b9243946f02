import uuid
from typing import Iterable, Optional

from src.battle_core.constants import MAX_MON_MOVES, MAX_PER_STAT_IVS
from src.battle_core.leveling import required_experience
from src.battle_core.schema.pokemon import CreatureTemplate, Pokemon, Stat
from src.battle_core.utils.rng import RandomSource


def _starting_moves(template: CreatureTemplate, level: int) -> list[int]:
    # The most recent level-up moves at or below the level, oldest first
    learned: list[int] = []
    for learn_level in sorted(template.learnset):
        if learn_level > level:
            break
        for move_id in template.learnset[learn_level]:
            if move_id not in learned:
                learned.append(move_id)
    return learned[-MAX_MON_MOVES:]


def create_pokemon(
    template: CreatureTemplate,
    level: int = 5,
    moves: Iterable[int] | None = None,
    iv: int = 0,
    ev: int = 0,
    uid: Optional[str] = None,
    nickname: Optional[str] = None,
    experience: Optional[int] = None,
) -> Pokemon:
    mon_moves = list(moves)[:MAX_MON_MOVES] if moves is not None else _starting_moves(template, level)

    if experience is None:
        experience = required_experience(template.growth_rate, level)

    return Pokemon(
        uid=uid or uuid.uuid4().hex,
        species_id=template.id,
        name=nickname or template.name,
        type1=template.type1,
        type2=template.type2,
        level=level,
        hp=Stat(base=template.base_hp, iv=iv, ev=ev),
        attack=Stat(base=template.base_attack, iv=iv, ev=ev),
        defense=Stat(base=template.base_defense, iv=iv, ev=ev),
        sp_attack=Stat(base=template.base_sp_attack, iv=iv, ev=ev),
        sp_defense=Stat(base=template.base_sp_defense, iv=iv, ev=ev),
        speed=Stat(base=template.base_speed, iv=iv, ev=ev),
        moves=mon_moves,
        catch_rate=template.catch_rate,
        growth_rate=template.growth_rate,
        base_experience=template.base_experience,
        experience=experience,
    )


def create_random_pokemon(template: CreatureTemplate, level: int, rng: RandomSource) -> Pokemon:
    """Wild creature with random IVs"""
    return create_pokemon(template, level=level, iv=rng.randint(0, MAX_PER_STAT_IVS))
