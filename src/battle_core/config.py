import os

from pydantic import BaseModel, ConfigDict, Field

from src.battle_core.constants import CRIT_MULTIPLIER, MAX_LEVEL, MAX_MON_MOVES, MAX_STAT_STAGE, MIN_STAT_STAGE, PARTY_SIZE

ENV_PREFIX = "BATTLE_CORE_"


class EngineConfig(BaseModel):
    """Tunable engine rules, constructed once at startup and passed down explicitly"""

    model_config = ConfigDict(frozen=True)

    max_party_size: int = Field(default=PARTY_SIZE, ge=1, le=PARTY_SIZE)
    max_moves: int = Field(default=MAX_MON_MOVES, ge=1, le=MAX_MON_MOVES)

    # Stat stages are bounded to [min_stat_stage, max_stat_stage] when enabled
    clamp_stat_stages: bool = True
    min_stat_stage: int = Field(default=MIN_STAT_STAGE, le=0)
    max_stat_stage: int = Field(default=MAX_STAT_STAGE, ge=0)

    crit_multiplier: float = Field(default=CRIT_MULTIPLIER, ge=1.0)
    max_level: int = Field(default=MAX_LEVEL, ge=1, le=MAX_LEVEL)

    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "EngineConfig":
        """Build a config from BATTLE_CORE_* variables, e.g. BATTLE_CORE_MAX_PARTY_SIZE=3.

        Values are passed through as strings and coerced by pydantic validation.
        """
        environ = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            key = ENV_PREFIX + name.upper()
            if key in environ:
                values[name] = environ[key]
        return cls.model_validate(values)

    def clamp_stage(self, stage: int) -> int:
        if not self.clamp_stat_stages:
            return stage
        return max(self.min_stat_stage, min(self.max_stat_stage, stage))
