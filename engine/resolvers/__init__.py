"""Action resolvers for the Pandemic rules engine.

Each resolver:
- Takes the game state as input
- Provides get_valid_actions() (or a variant) listing the legal options
- Provides a method that executes one option and updates the state
- Returns a result dataclass where the outcome carries information

Resolvers hold no state of their own; the GameEngine creates them on
demand, so the legal options are always computed from the current state.
"""

from .infection import (
    InfectionResolver,
    InfectionResult,
)

from .epidemic import (
    EpidemicResolver,
    EpidemicResult,
)

from .treatment import (
    TreatmentResolver,
    TreatmentResult,
    CureResult,
    cards_needed_to_cure,
)

from .movement import MovementResolver

from .stations import ResearchStationResolver

from .knowledge import ShareKnowledgeResolver

from .events import EventResolver

__all__ = [
    # Infection
    "InfectionResolver",
    "InfectionResult",
    # Epidemic
    "EpidemicResolver",
    "EpidemicResult",
    # Treatment
    "TreatmentResolver",
    "TreatmentResult",
    "CureResult",
    "cards_needed_to_cure",
    # Movement
    "MovementResolver",
    # Research stations
    "ResearchStationResolver",
    # Share knowledge
    "ShareKnowledgeResolver",
    # Events
    "EventResolver",
]
