"""Game engine for the Pandemic rules engine.

This module provides the game logic including:
- Phase state machine for turn flow control
- Action resolvers for each kind of action
- Game engine for coordinating game play
"""

from .actions import (
    Action,
    ActionType,
    COSTED_ACTIONS,
    MOVEMENT_ACTIONS,
)

from .phase_machine import (
    PhaseMachine,
    PhaseTransitionResult,
    PHASE_TRANSITIONS,
)

from .setup import (
    SetupManager,
    SetupResult,
    InitialInfection,
    initialize_game,
)

from .game_engine import (
    GameEngine,
    StepResult,
)

__all__ = [
    # Actions
    "Action",
    "ActionType",
    "COSTED_ACTIONS",
    "MOVEMENT_ACTIONS",
    # Phase machine
    "PhaseMachine",
    "PhaseTransitionResult",
    "PHASE_TRANSITIONS",
    # Setup
    "SetupManager",
    "SetupResult",
    "InitialInfection",
    "initialize_game",
    # Game engine
    "GameEngine",
    "StepResult",
]
