"""Constants and enums for the Pandemic rules engine."""

from enum import Enum


class Color(Enum):
    """Disease colors. Every city has one base color."""

    RED = "red"
    BLUE = "blue"
    YELLOW = "yellow"
    BLACK = "black"


class CardType(Enum):
    """Kinds of cards that can appear in a deck."""

    CITY = "city"
    EVENT = "event"
    ROLE = "role"
    EPIDEMIC = "epidemic"


class DeckKind(Enum):
    """The three decks used by a game session."""

    ROLE = "role"
    INFECTION = "infection"
    PLAYER = "player"


class Difficulty(Enum):
    """Difficulty levels, controlling how many epidemics are shuffled in."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class TurnPhase(Enum):
    """Sub-phases of a single player turn."""

    ACTING = "acting"
    DRAWING = "drawing"
    INFECTING = "infecting"
    ENDING = "ending"

    # Preempting phases (override the turn's own phase while pending)
    DISCARDING = "discarding"
    FORECASTING = "forecasting"

    # Terminal
    GAME_OVER = "game_over"


class RoleType(Enum):
    """Roles that can be dealt to players."""

    CONTINGENCY_PLANNER = "contingency planner"
    DISPATCHER = "dispatcher"
    MEDIC = "medic"
    OPERATIONS_EXPERT = "operations expert"
    QUARANTINE_SPECIALIST = "quarantine specialist"
    RESEARCHER = "researcher"
    SCIENTIST = "scientist"


class Capability(Enum):
    """Rule exceptions granted by a role."""

    TREAT_ALL = "treat_all"
    AUTO_TREAT_CURED = "auto_treat_cured"
    CURE_WITH_FOUR = "cure_with_four"
    BUILD_WITHOUT_CARD = "build_without_card"
    MOVE_OTHERS = "move_others"
    STORE_EVENT = "store_event"
    SHARE_ANY_CITY = "share_any_city"
    PREVENT_INFECTION = "prevent_infection"


class EventType(Enum):
    """Event cards shuffled into the player deck."""

    AIRLIFT = "Airlift"
    FORECAST = "Forecast"
    GOVERNMENT_GRANT = "Government Grant"
    ONE_QUIET_NIGHT = "One Quiet Night"
    RESILIENT_POPULATION = "Resilient Population"


class GameOverReason(Enum):
    """Why a game session ended."""

    OUTBREAK_LIMIT = "outbreak_limit"
    CUBES_EXHAUSTED = "cubes_exhausted"
    PLAYER_DECK_EXHAUSTED = "player_deck_exhausted"
    ALL_CURED = "all_cured"


# Player limits
MIN_PLAYERS = 2
MAX_PLAYERS = 4

# Disease limits
CUBES_PER_COLOR = 24
MAX_CUBES_PER_CITY = 3
OUTBREAK_LIMIT = 7  # The 8th outbreak ends the game

# Turn structure
ACTIONS_PER_TURN = 4
CARDS_DRAWN_PER_TURN = 2
MAX_HAND_SIZE = 7

# Research stations in the box
RESEARCH_STATIONS = 6

# Cards needed to discover a cure
CURE_CARDS_REQUIRED = 5
CURE_CARDS_REQUIRED_SCIENTIST = 4

# Epidemic infection
EPIDEMIC_INFECTION_CUBES = 3

# Cards revealed by Forecast
FORECAST_CARDS = 6

# Infection rate track, indexed by the number of epidemics resolved
INFECTION_RATE_TRACK = [2, 2, 2, 3, 3, 4, 4]

# Cards dealt to each player by player count
CARDS_PER_PLAYER = {
    2: 4,
    3: 3,
    4: 2,
}

# Epidemic cards shuffled into the player deck by difficulty
DIFFICULTY_EPIDEMICS = {
    Difficulty.EASY: 4,
    Difficulty.MEDIUM: 5,
    Difficulty.HARD: 6,
}

# Every pawn starts here, next to the first research station
START_CITY = "Atlanta"

# Initial infection: cubes placed on each of the first nine infection cards
INITIAL_INFECTION_CUBES = [1, 1, 1, 2, 2, 2, 3, 3, 3]

# Capabilities granted by each role
ROLE_CAPABILITIES: dict[RoleType, frozenset[Capability]] = {
    RoleType.CONTINGENCY_PLANNER: frozenset({Capability.STORE_EVENT}),
    RoleType.DISPATCHER: frozenset({Capability.MOVE_OTHERS}),
    RoleType.MEDIC: frozenset({Capability.TREAT_ALL, Capability.AUTO_TREAT_CURED}),
    RoleType.OPERATIONS_EXPERT: frozenset({Capability.BUILD_WITHOUT_CARD}),
    RoleType.QUARANTINE_SPECIALIST: frozenset({Capability.PREVENT_INFECTION}),
    RoleType.RESEARCHER: frozenset({Capability.SHARE_ANY_CITY}),
    RoleType.SCIENTIST: frozenset({Capability.CURE_WITH_FOUR}),
}
