"""Action values offered by the engine and accepted by GameEngine.step."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ActionType(Enum):
    """Types of actions a player can take."""

    # Acting phase (each costs one action)
    DRIVE = "drive"
    DIRECT_FLIGHT = "direct_flight"
    CHARTER_FLIGHT = "charter_flight"
    SHUTTLE_FLIGHT = "shuttle_flight"
    DISPATCH_TO_PAWN = "dispatch_to_pawn"
    BUILD_RESEARCH_STATION = "build_research_station"
    TREAT_DISEASE = "treat_disease"
    SHARE_KNOWLEDGE = "share_knowledge"
    DISCOVER_CURE = "discover_cure"
    RETRIEVE_EVENT = "retrieve_event"

    # Free actions
    PLAY_EVENT = "play_event"
    ARRANGE_FORECAST = "arrange_forecast"
    DISCARD = "discard"

    # Turn steps
    DRAW_CARDS = "draw_cards"
    INFECT_CITIES = "infect_cities"
    END_TURN = "end_turn"


# Actions that use up one of the turn's four actions
COSTED_ACTIONS = frozenset({
    ActionType.DRIVE,
    ActionType.DIRECT_FLIGHT,
    ActionType.CHARTER_FLIGHT,
    ActionType.SHUTTLE_FLIGHT,
    ActionType.DISPATCH_TO_PAWN,
    ActionType.BUILD_RESEARCH_STATION,
    ActionType.TREAT_DISEASE,
    ActionType.SHARE_KNOWLEDGE,
    ActionType.DISCOVER_CURE,
    ActionType.RETRIEVE_EVENT,
})

MOVEMENT_ACTIONS = frozenset({
    ActionType.DRIVE,
    ActionType.DIRECT_FLIGHT,
    ActionType.CHARTER_FLIGHT,
    ActionType.SHUTTLE_FLIGHT,
    ActionType.DISPATCH_TO_PAWN,
})


@dataclass
class Action:
    """Represents an action to be executed.

    Attributes:
        action_type: The type of action.
        player_id: The player taking the action.
        params: Exactly the payload the action needs (names, not objects).
    """

    action_type: ActionType
    player_id: int
    params: dict[str, Any] = field(default_factory=dict)

    @property
    def costs_action(self) -> bool:
        return self.action_type in COSTED_ACTIONS

    def describe(self) -> str:
        """Human-readable one-line description."""
        p = self.params
        t = self.action_type
        if t in MOVEMENT_ACTIONS:
            via = f" (discard {p['card']})" if p.get("card") else ""
            return f"{t.value.replace('_', ' ').title()}: pawn {p['pawn']} to {p['city']}{via}"
        if t == ActionType.BUILD_RESEARCH_STATION:
            via = f" (discard {p['card']})" if p.get("card") else ""
            return f"Build research station in {p['city']}{via}"
        if t == ActionType.TREAT_DISEASE:
            return f"Treat {p['amount']} {p['color']} cube(s) in {p['city']}"
        if t == ActionType.SHARE_KNOWLEDGE:
            return f"Share {p['card']}: player {p['giver']} -> player {p['receiver']}"
        if t == ActionType.DISCOVER_CURE:
            return f"Cure {p['color']} with {', '.join(p['cards'])}"
        if t == ActionType.RETRIEVE_EVENT:
            return f"Retrieve {p['card']} from the discard pile"
        if t == ActionType.PLAY_EVENT:
            extra = ", ".join(f"{k}={v}" for k, v in p.items() if k != "event")
            return f"Play {p['event']}" + (f" ({extra})" if extra else "")
        if t == ActionType.ARRANGE_FORECAST:
            return f"Place {p['card']} next in the infection deck"
        if t == ActionType.DISCARD:
            return f"Discard {p['card']}"
        return t.value.replace("_", " ").capitalize()

    def __str__(self) -> str:
        return f"Action({self.action_type.value}, player={self.player_id}, params={self.params})"
