"""Build Research Station resolver.

A player builds a station in their current city by discarding that
city's card; the operations expert needs no card. Stations come from
a limited supply.
"""

from __future__ import annotations

import logging
from typing import Optional, TYPE_CHECKING

from core.constants import Capability

from engine.actions import Action, ActionType

if TYPE_CHECKING:
    from core.game_state import GameState
    from core.player import Player


logger = logging.getLogger(__name__)


class ResearchStationResolver:
    """Computes and executes research station construction."""

    def __init__(self, state: GameState):
        """Initialize the resolver with the game state.

        Args:
            state: The current game state.
        """
        self.state = state

    def can_build(self, city_name: str) -> bool:
        """Check if a station could be placed in a city at all."""
        city = self.state.board.get_city(city_name)
        return (
            not city.research_station
            and self.state.global_state.research_stations_remaining > 0
        )

    def get_valid_actions(self, player: Player) -> list[Action]:
        """Return the build option for the player's city, if any."""
        if not self.can_build(player.location):
            return []

        if player.has(Capability.BUILD_WITHOUT_CARD):
            card = None
        else:
            held = player.get_city_card(player.location)
            if held is None:
                return []
            card = held.name

        return [Action(
            action_type=ActionType.BUILD_RESEARCH_STATION,
            player_id=player.player_id,
            params={"city": player.location, "card": card},
        )]

    def build(self, city_name: str) -> None:
        """Place a station from the supply.

        Raises:
            ValueError: If the city already has one or the supply is empty.
        """
        if not self.can_build(city_name):
            raise ValueError(f"Cannot build a research station in {city_name}")
        self.state.board.get_city(city_name).build_research_station()
        self.state.global_state.research_stations_remaining -= 1
        logger.info(
            f"Research station built in {city_name} "
            f"({self.state.global_state.research_stations_remaining} left)"
        )

    def resolve(self, action: Action) -> None:
        """Execute a build action, discarding the card if one was used."""
        player = self.state.get_player(action.player_id)
        card_name: Optional[str] = action.params.get("card")
        if card_name is not None:
            card = player.get_city_card(card_name)
            if card is None:
                raise ValueError(f"{player.name} does not hold {card_name}")
            self.state.player_deck.discard(card)
        self.build(action.params["city"])
