# =============================================================================
# STAT STAGES
# =============================================================================
MIN_STAT_STAGE = -6
MAX_STAT_STAGE = 6

# =============================================================================
# CREATURE LIMITS
# =============================================================================
MIN_LEVEL = 1
MAX_LEVEL = 100
MAX_MON_MOVES = 4
PARTY_SIZE = 6
MAX_PER_STAT_IVS = 31
MAX_PER_STAT_EVS = 255

# =============================================================================
# TYPE EFFECTIVENESS MULTIPLIERS
# =============================================================================
TYPE_MUL_NO_EFFECT = 0.0
TYPE_MUL_NOT_EFFECTIVE = 0.5
TYPE_MUL_NORMAL = 1.0
TYPE_MUL_SUPER_EFFECTIVE = 2.0

# =============================================================================
# DAMAGE
# =============================================================================
STAB_MULTIPLIER = 1.5
CRIT_MULTIPLIER = 2.0
# Random damage factor is drawn as an integer percentage in [MIN, MAX], inclusive
DAMAGE_ROLL_MIN = 85
DAMAGE_ROLL_MAX = 100

# Critical hit chance in percent, indexed by the move's crit-rate tier.
# Tiers beyond the last entry always crit.
CRIT_CHANCES = [6.25, 12.5, 50.0, 100.0]

# =============================================================================
# CAPTURE
# =============================================================================
CATCH_ROLL_MAX = 256.0

# =============================================================================
# EXPERIENCE
# =============================================================================
WILD_EXP_MULTIPLIER = 1.0
TRAINER_EXP_MULTIPLIER = 1.5
EXP_DIVISOR = 7.0
