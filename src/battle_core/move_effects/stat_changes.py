from src.battle_core.config import EngineConfig
from src.battle_core.schema.battle_move import Move, StatChange
from src.battle_core.schema.battle_state import PokemonBattleInfo
from src.battle_core.schema.reports import StatChangeReport
from src.battle_core.utils.rng import RandomSource


def change_stage(info: PokemonBattleInfo, change: StatChange, config: EngineConfig) -> int:
    """Apply a stage change, bounded by the configured limits, and return the delta actually applied"""
    current = info.get_stage(change.stat)
    new_stage = config.clamp_stage(current + change.change)
    info.set_stage(change.stat, new_stage)
    return new_stage - current


def apply_stat_changes(
    move: Move,
    affected: PokemonBattleInfo,
    on_user: bool,
    config: EngineConfig,
    rng: RandomSource,
) -> list[StatChangeReport]:
    """Roll the move's stat-change chance once and apply every listed change on success.

    Changes that were fully absorbed by the stage bounds are not reported.
    """
    if not move.stat_changes:
        return []
    if not rng.chance(move.effective_chance(move.stat_chance)):
        return []

    reports = []
    for change in move.stat_changes:
        applied = change_stage(affected, change, config)
        if applied != 0:
            reports.append(StatChangeReport(stat=change.stat, change=applied, on_user=on_user))
    return reports
