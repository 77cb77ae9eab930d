"""Player model for the Pandemic rules engine.

Each player has a pawn on a city, a hand of cards and a role. The role is a
closed set of types; what a role may do is looked up as capabilities, never
by comparing role names.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .constants import Capability, Color, RoleType, ROLE_CAPABILITIES, START_CITY
from .cards import Card


@dataclass
class Role:
    """A player's role.

    Attributes:
        role_type: Which role this is.
        stored_event: Event card kept aside by a role that can store one.
    """

    role_type: RoleType
    stored_event: Optional[Card] = None

    @property
    def name(self) -> str:
        return self.role_type.value

    @property
    def capabilities(self) -> frozenset[Capability]:
        return ROLE_CAPABILITIES[self.role_type]

    def has(self, capability: Capability) -> bool:
        """Check if this role grants a capability."""
        return capability in ROLE_CAPABILITIES[self.role_type]


@dataclass
class Player:
    """Represents a player in the game.

    Attributes:
        name: Display name.
        player_id: Seat index (0-indexed).
        role: Assigned role, or None before roles are dealt.
        location: Name of the city holding this player's pawn.
        hand: Cards in hand, newest first.
    """

    name: str
    player_id: int = 0
    role: Optional[Role] = None
    location: str = START_CITY
    hand: list[Card] = field(default_factory=list)

    def has(self, capability: Capability) -> bool:
        """Check if this player's role grants a capability."""
        return self.role is not None and self.role.has(capability)

    def pick_up(self, card: Card) -> None:
        """Put a card at the front of this player's hand.

        A card held by another player is taken out of that hand first.
        """
        if card.holder is not None:
            card.holder.remove_card(card)
        card.holder = self
        self.hand.insert(0, card)

    def remove_card(self, card: Card) -> None:
        """Take a card out of this hand.

        Raises:
            ValueError: If the card is not in this hand.
        """
        if card not in self.hand:
            raise ValueError(f"{self.name} does not hold {card.name}")
        self.hand.remove(card)
        card.holder = None

    def hand_size(self) -> int:
        return len(self.hand)

    def city_cards(self) -> list[Card]:
        """Return the city cards in hand."""
        return [c for c in self.hand if c.is_city]

    def event_cards(self) -> list[Card]:
        """Return the event cards in hand."""
        return [c for c in self.hand if c.is_event]

    def cards_of_color(self, color: Color) -> list[Card]:
        """Return the city cards of a color in hand."""
        return [c for c in self.hand if c.is_city and c.color == color]

    def get_city_card(self, city: str) -> Optional[Card]:
        """Return the city card for a city if it is in hand."""
        for card in self.hand:
            if card.is_city and card.city == city:
                return card
        return None

    def has_card(self, name: str) -> bool:
        return any(c.name == name for c in self.hand)

    def __str__(self) -> str:
        role = self.role.name if self.role else "no role"
        return f"{self.name} ({role}) in {self.location}"
