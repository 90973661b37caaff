# ===== Built-in defaults (solver knobs and game constants) =====

# Attribute order is canonical: every solver iterates attributes in this order.
BUDGET_ATTRIBUTES: tuple[str, ...] = ("vigor", "mind", "endurance")
DAMAGE_ATTRIBUTES: tuple[str, ...] = ("strength", "dexterity", "intelligence", "faith", "arcane")
ALL_ATTRIBUTES: tuple[str, ...] = BUDGET_ATTRIBUTES + DAMAGE_ATTRIBUTES

# Short names accepted by the CLI/API
ATTRIBUTE_ALIASES: dict[str, str] = {
    "vig": "vigor",
    "mnd": "mind",
    "end": "endurance",
    "str": "strength",
    "dex": "dexterity",
    "int": "intelligence",
    "fai": "faith",
    "arc": "arcane",
}

MIN_ATTRIBUTE_VALUE = 1
MAX_ATTRIBUTE_VALUE = 99

# Starting values for attributes the caller does not bound
DEFAULT_ATTRIBUTE_VALUES: dict[str, int] = {
    "vigor": 40,
    "mind": 20,
    "endurance": 25,
    "strength": 10,
    "dexterity": 10,
    "intelligence": 10,
    "faith": 10,
    "arcane": 10,
}

DAMAGE_CHANNELS: tuple[str, ...] = ("physical", "magic", "fire", "lightning", "holy")

# Solver knobs
DEFAULT_LOOKAHEAD = 2
MIN_GAIN_THRESHOLD = 0.01
BRUTE_FORCE_TOLERANCE = 0.01

# Common soft caps, used as multi-start anchors when a curve has no data
CURVE_BREAKPOINTS: tuple[int, ...] = (15, 16, 18, 20, 25, 30, 40, 43, 45, 50, 58, 60, 80, 99)

# Curve interior points outside this window coincide with the attribute bounds
BREAKPOINT_WINDOW: tuple[int, int] = (2, 98)

# Two-handing
TWO_HAND_STRENGTH_MULTIPLIER = 1.5
MAX_EFFECTIVE_ATTRIBUTE = 148
FIST_WEAPON_TYPE = 35
ALWAYS_TWO_HANDED_WEAPON_TYPES: frozenset[int] = frozenset({50, 51, 53, 56})  # bows, greatbows, crossbows, ballistae

# Scaling penalty applied when a requirement is unmet
REQUIREMENT_PENALTY = -0.4

# Spell scaling
SPELL_SCALING_BASE = 100.0
SPELL_SCALING_UNMET = 60.0

# Skill bullet damage grows by this factor from +0 to max upgrade
BULLET_UPGRADE_GROWTH = 3.0
