"""Epidemic resolver for the Pandemic rules engine.

Drawing an epidemic card from the player deck:
1. Increase - the infection rate moves one step along the track
2. Infect - the bottom infection card is drawn and its city gets 3 cubes
3. Intensify - the infection discard pile goes back on top of the
   infection deck as a block, and the drawn card starts a new discard pile
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from core.constants import EPIDEMIC_INFECTION_CUBES

from .infection import InfectionResolver, InfectionResult

if TYPE_CHECKING:
    from core.cards import Card
    from core.game_state import GameState


logger = logging.getLogger(__name__)


@dataclass
class EpidemicResult:
    """Result of resolving one epidemic.

    Attributes:
        city: City infected from the bottom of the infection deck.
        infection_rate: Infection rate after the increase.
        recycled: Number of discarded infection cards put back on top.
        infection: Cubes and outbreaks caused by the infect step.
    """

    city: str
    infection_rate: int
    recycled: int
    infection: InfectionResult = field(default_factory=InfectionResult)


class EpidemicResolver:
    """Resolves epidemic cards drawn from the player deck."""

    def __init__(self, state: GameState):
        """Initialize the resolver with the game state.

        Args:
            state: The current game state.
        """
        self.state = state

    def resolve(self, epidemic_card: Card) -> EpidemicResult:
        """Resolve an epidemic and discard the epidemic card.

        Args:
            epidemic_card: The epidemic card just drawn.

        Returns:
            EpidemicResult describing the epidemic.

        Raises:
            GameOver: If the infect step ends the game.
        """
        gs = self.state.global_state
        deck = self.state.infection_deck

        # Increase
        gs.infection_rate_index += 1

        # Infect
        card = deck.draw_bottom()
        logger.info(f"Epidemic in {card.city} (infection rate now {gs.infection_rate})")
        recycled = len(deck.discarded)
        try:
            infection = InfectionResolver(self.state).infect(
                card.city, EPIDEMIC_INFECTION_CUBES
            )
        finally:
            # Intensify
            deck.intensify(card)
            self.state.player_deck.discard(epidemic_card)

        return EpidemicResult(
            city=card.city,
            infection_rate=gs.infection_rate,
            recycled=recycled,
            infection=infection,
        )
