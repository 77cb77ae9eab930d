"""Cards and decks for the Pandemic rules engine.

Three decks are used by a session:
- Role deck: one card per role, dealt once at setup
- Infection deck: one card per city, with a discard pile recycled by epidemics
- Player deck: city cards, event cards and (after the deal) epidemic cards

A card is held by exactly one container at a time: a draw pile, a discard
pile, the removed-from-game pile, a player's hand or a stored event slot.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from .constants import (
    CardType,
    Color,
    DeckKind,
    Difficulty,
    EventType,
    GameOverReason,
    RoleType,
    CARDS_PER_PLAYER,
    DIFFICULTY_EPIDEMICS,
)
from .errors import GameOver

if TYPE_CHECKING:
    from .board import CityGraph
    from .player import Player


EPIDEMIC_CARD_NAME = "Epidemic"


@dataclass(eq=False)
class Card:
    """A single card.

    Cards compare by identity: two epidemic cards are distinct cards.

    Attributes:
        card_type: What kind of card this is.
        name: Display name (the city name for city cards).
        city: City name, for city cards.
        color: Base color of the city, for city cards.
        role: Role granted, for role cards.
        event: Event triggered, for event cards.
        holder: Player whose hand holds the card, if any.
    """

    card_type: CardType
    name: str
    city: Optional[str] = None
    color: Optional[Color] = None
    role: Optional[RoleType] = None
    event: Optional[EventType] = None
    holder: Optional[Player] = field(default=None, repr=False)

    @property
    def is_city(self) -> bool:
        return self.card_type == CardType.CITY

    @property
    def is_event(self) -> bool:
        return self.card_type == CardType.EVENT

    @property
    def is_epidemic(self) -> bool:
        return self.card_type == CardType.EPIDEMIC

    def __str__(self) -> str:
        if self.is_city and self.color is not None:
            return f"{self.name} ({self.color.value})"
        return self.name


@dataclass
class Deck:
    """An ordered draw pile plus its discard and removed piles.

    Attributes:
        kind: Which of the three decks this is.
        rng: Random source used for every shuffle.
        cards: Draw pile; index 0 is the top.
        discarded: Discard pile; index 0 is the most recent discard.
        removed: Cards taken out of the game.
    """

    kind: DeckKind
    rng: random.Random = field(default_factory=random.Random, repr=False)
    cards: list[Card] = field(default_factory=list)
    discarded: list[Card] = field(default_factory=list)
    removed: list[Card] = field(default_factory=list)

    @property
    def remaining(self) -> int:
        """Number of cards left in the draw pile."""
        return len(self.cards)

    def total_cards(self) -> int:
        """Cards owned by the deck that are not currently held by a player."""
        return len(self.cards) + len(self.discarded) + len(self.removed)

    # -------------------------------------------------------------------------
    # Ordering
    # -------------------------------------------------------------------------

    def shuffle(self) -> None:
        """Shuffle the draw pile in place (Fisher-Yates, via the deck's rng)."""
        self.rng.shuffle(self.cards)

    def deal(self, players: list[Player], difficulty: Difficulty = Difficulty.EASY) -> None:
        """Deal starting hands, then seed the rest of the deck with epidemics.

        The undealt cards are split into one contiguous group per epidemic,
        an epidemic card is shuffled into each group, and the groups are
        stacked back in order. Each slice of the deck therefore holds
        exactly one epidemic.

        Args:
            players: Players to deal to, in seating order.
            difficulty: Controls the number of epidemic cards.

        Raises:
            ValueError: If the player count has no dealing rule.
        """
        if len(players) not in CARDS_PER_PLAYER:
            raise ValueError(f"Cannot deal to {len(players)} players")

        self.shuffle()

        for _ in range(CARDS_PER_PLAYER[len(players)]):
            for player in players:
                player.pick_up(self.draw())

        new_order: list[Card] = []
        for group in split_into_groups(self.cards, DIFFICULTY_EPIDEMICS[difficulty]):
            group.append(Card(card_type=CardType.EPIDEMIC, name=EPIDEMIC_CARD_NAME))
            self.rng.shuffle(group)
            new_order.extend(group)
        self.cards = new_order

    def reorder_top(self, names: list[str]) -> None:
        """Rewrite the order of the top cards of the draw pile.

        Args:
            names: Names of the top ``len(names)`` cards in their new order.

        Raises:
            ValueError: If the names are not a permutation of the top cards.
        """
        top = self.cards[:len(names)]
        if sorted(c.name for c in top) != sorted(names):
            raise ValueError(f"{names} is not an arrangement of the top {len(names)} cards")
        by_name = {c.name: c for c in top}
        self.cards[:len(names)] = [by_name[name] for name in names]

    # -------------------------------------------------------------------------
    # Moving cards
    # -------------------------------------------------------------------------

    def draw(self) -> Card:
        """Remove and return the top card.

        Raises:
            GameOver: If this is the player deck and fewer than 2 cards remain.
            ValueError: If the draw pile is empty.
        """
        if self.kind == DeckKind.PLAYER and len(self.cards) < 2:
            raise GameOver(GameOverReason.PLAYER_DECK_EXHAUSTED, "The player deck ran out")
        if not self.cards:
            raise ValueError(f"The {self.kind.value} deck is empty")
        return self.cards.pop(0)

    def draw_bottom(self) -> Card:
        """Remove and return the bottom card.

        Raises:
            ValueError: If the draw pile is empty.
        """
        if not self.cards:
            raise ValueError(f"The {self.kind.value} deck is empty")
        return self.cards.pop()

    def discard(self, card: Card) -> None:
        """Put a card on top of the discard pile.

        The card is taken out of the draw pile or out of the hand
        holding it, whichever currently owns it.
        """
        if card in self.cards:
            self.cards.remove(card)
        if card.holder is not None:
            card.holder.remove_card(card)
        self.discarded.insert(0, card)

    def take_from_discard(self, card: Card) -> Card:
        """Remove a specific card from the discard pile.

        Raises:
            ValueError: If the card is not in the discard pile.
        """
        if card not in self.discarded:
            raise ValueError(f"{card.name} is not in the {self.kind.value} discard pile")
        self.discarded.remove(card)
        return card

    def remove_from_game(self, card: Card) -> None:
        """Take a card out of the game wherever it currently is."""
        if card in self.cards:
            self.cards.remove(card)
        if card in self.discarded:
            self.discarded.remove(card)
        if card.holder is not None:
            card.holder.remove_card(card)
        self.removed.append(card)

    def intensify(self, card: Card) -> None:
        """Stack the whole discard pile, unchanged, on top of the draw pile.

        The discard pile is then restarted with ``card``.
        """
        self.cards = self.discarded + self.cards
        self.discarded = [card]

    def find(self, name: str, draw: bool = False) -> Optional[Card]:
        """Find a card in the draw pile by name.

        Args:
            name: Card name to look for.
            draw: If True, also remove the card from the draw pile.

        Returns:
            The card, or None if it is not in the draw pile.
        """
        for i, card in enumerate(self.cards):
            if card.name == name:
                if draw:
                    del self.cards[i]
                return card
        return None

    def find_discarded(self, name: str) -> Optional[Card]:
        """Find a card in the discard pile by name."""
        for card in self.discarded:
            if card.name == name:
                return card
        return None

    def count(self, card_type: CardType) -> int:
        """Count cards of a type in the draw pile."""
        return sum(1 for c in self.cards if c.card_type == card_type)


def split_into_groups(cards: list[Card], num_groups: int) -> list[list[Card]]:
    """Split cards into contiguous near-equal groups.

    Groups have ``len(cards) // num_groups`` cards; the first
    ``len(cards) % num_groups`` groups get one extra.
    """
    size, extra = divmod(len(cards), num_groups)
    groups: list[list[Card]] = []
    start = 0
    for i in range(num_groups):
        end = start + size + (1 if i < extra else 0)
        groups.append(list(cards[start:end]))
        start = end
    return groups


# -----------------------------------------------------------------------------
# Deck builders
# -----------------------------------------------------------------------------

def build_role_deck(rng: random.Random) -> Deck:
    """Build and shuffle the role deck."""
    deck = Deck(kind=DeckKind.ROLE, rng=rng)
    deck.cards = [
        Card(card_type=CardType.ROLE, name=role.value, role=role)
        for role in RoleType
    ]
    deck.shuffle()
    return deck


def _city_cards(board: CityGraph) -> list[Card]:
    return [
        Card(card_type=CardType.CITY, name=city.name, city=city.name, color=city.color)
        for city in board
    ]


def build_infection_deck(board: CityGraph, rng: random.Random) -> Deck:
    """Build and shuffle the infection deck, one card per city."""
    deck = Deck(kind=DeckKind.INFECTION, rng=rng)
    deck.cards = _city_cards(board)
    deck.shuffle()
    return deck


def build_player_deck(board: CityGraph, rng: random.Random) -> Deck:
    """Build and shuffle the player deck: one card per city plus the events."""
    deck = Deck(kind=DeckKind.PLAYER, rng=rng)
    deck.cards = _city_cards(board) + [
        Card(card_type=CardType.EVENT, name=event.value, event=event)
        for event in EventType
    ]
    deck.shuffle()
    return deck
