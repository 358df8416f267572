"""
Craps Gauntlet - Game Rule Constants

Fixed rule values shared by every engine. These are not runtime
configurable; see craps_gauntlet.config for environment settings.
"""

# Player starting values
STARTING_GOLD = 4
STARTING_VICTORY_POINTS = 0
STARTING_DAMAGE = 0

# Victory conditions
VICTORY_POINTS_TO_WIN = 10

# Card limits
MAX_PERMANENT_CARDS = 6
MAX_SINGLE_USE_CARDS = 8

# Marketplace
MARKETPLACE_SIZE = 8
MARKETPLACE_REFRESH_COST = 3
MARKETPLACE_LOW_THRESHOLD = 3

# Damage leader
DAMAGE_LEADER_BONUS = 3

# Dice
DEFAULT_DICE_COUNT = 2
DICE_SIDES = 6
MIN_TWO_DICE_SUM = 2
MAX_TWO_DICE_SUM = 12

# Craps numbers
NATURAL_NUMBERS = frozenset({7, 11})
CRAPS_NUMBERS = frozenset({2, 3, 12})
POINT_NUMBERS = (4, 5, 6, 8, 9, 10)
CRAP_OUT_NUMBER = 7
ESCAPE_NUMBER = 2

# Gold penalties
CRAP_OUT_GOLD_PENALTY_PERCENT = 50

# Player limits
MIN_PLAYERS = 2
MAX_PLAYERS = 8

# Monsters
MONSTER_COUNT = 10

# Betting
MAX_BET_AMOUNT = 5
POINT_PHASE_HIT_BONUS = 1
