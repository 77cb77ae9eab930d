"""Core data models for the Pandemic rules engine."""

from .constants import (
    Color,
    CardType,
    DeckKind,
    Difficulty,
    TurnPhase,
    RoleType,
    Capability,
    EventType,
    GameOverReason,
    MIN_PLAYERS,
    MAX_PLAYERS,
    CUBES_PER_COLOR,
    MAX_CUBES_PER_CITY,
    OUTBREAK_LIMIT,
    ACTIONS_PER_TURN,
    CARDS_DRAWN_PER_TURN,
    MAX_HAND_SIZE,
    RESEARCH_STATIONS,
    CURE_CARDS_REQUIRED,
    CURE_CARDS_REQUIRED_SCIENTIST,
    EPIDEMIC_INFECTION_CUBES,
    FORECAST_CARDS,
    INFECTION_RATE_TRACK,
    CARDS_PER_PLAYER,
    DIFFICULTY_EPIDEMICS,
    START_CITY,
    INITIAL_INFECTION_CUBES,
    ROLE_CAPABILITIES,
)

from .board import CityName, EdgeId, make_edge_id, City, CityGraph

from .errors import GameOver, IllegalActionError

from .cards import (
    Card,
    Deck,
    EPIDEMIC_CARD_NAME,
    split_into_groups,
    build_role_deck,
    build_infection_deck,
    build_player_deck,
)

from .ledger import DiseaseState, DiseaseLedger

from .player import Role, Player

from .turn import Turn

from .config import GameConfig

from .game_state import GlobalState, GameState

__all__ = [
    # Constants
    "Color",
    "CardType",
    "DeckKind",
    "Difficulty",
    "TurnPhase",
    "RoleType",
    "Capability",
    "EventType",
    "GameOverReason",
    "MIN_PLAYERS",
    "MAX_PLAYERS",
    "CUBES_PER_COLOR",
    "MAX_CUBES_PER_CITY",
    "OUTBREAK_LIMIT",
    "ACTIONS_PER_TURN",
    "CARDS_DRAWN_PER_TURN",
    "MAX_HAND_SIZE",
    "RESEARCH_STATIONS",
    "CURE_CARDS_REQUIRED",
    "CURE_CARDS_REQUIRED_SCIENTIST",
    "EPIDEMIC_INFECTION_CUBES",
    "FORECAST_CARDS",
    "INFECTION_RATE_TRACK",
    "CARDS_PER_PLAYER",
    "DIFFICULTY_EPIDEMICS",
    "START_CITY",
    "INITIAL_INFECTION_CUBES",
    "ROLE_CAPABILITIES",
    # Board
    "CityName",
    "EdgeId",
    "make_edge_id",
    "City",
    "CityGraph",
    # Errors
    "GameOver",
    "IllegalActionError",
    # Cards
    "Card",
    "Deck",
    "EPIDEMIC_CARD_NAME",
    "split_into_groups",
    "build_role_deck",
    "build_infection_deck",
    "build_player_deck",
    # Ledger
    "DiseaseState",
    "DiseaseLedger",
    # Player
    "Role",
    "Player",
    # Turn
    "Turn",
    # Config
    "GameConfig",
    # Game State
    "GlobalState",
    "GameState",
]
