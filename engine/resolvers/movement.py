"""Movement resolver for the Pandemic rules engine.

Movement actions:
- Drive: to a neighbouring city
- Direct flight: discard a city card to fly to that city
- Charter flight: discard the card of the current city to fly anywhere
- Shuttle flight: between two research stations

A dispatcher may move any pawn with these actions (spending cards from
the dispatcher's own hand), and may move any pawn to a city holding
another pawn. A medic arriving in a city clears cured diseases there.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from core.constants import Capability

from engine.actions import Action, ActionType
from .treatment import TreatmentResolver

if TYPE_CHECKING:
    from core.game_state import GameState
    from core.player import Player


logger = logging.getLogger(__name__)


class MovementResolver:
    """Computes and executes pawn movement."""

    def __init__(self, state: GameState):
        """Initialize the resolver with the game state.

        Args:
            state: The current game state.
        """
        self.state = state

    def movable_pawns(self, player: Player) -> list[Player]:
        """Pawns the player may move: their own, or every pawn for a dispatcher."""
        if player.has(Capability.MOVE_OTHERS):
            return list(self.state.players)
        return [player]

    def get_valid_actions(self, player: Player) -> list[Action]:
        """Return every movement option for the acting player.

        Args:
            player: The player taking the action.

        Returns:
            List of movement actions.
        """
        actions: list[Action] = []
        for pawn in self.movable_pawns(player):
            actions.extend(self._pawn_moves(player, pawn))

        if player.has(Capability.MOVE_OTHERS):
            actions.extend(self._dispatch_moves(player))
        return actions

    def _pawn_moves(self, player: Player, pawn: Player) -> list[Action]:
        board = self.state.board
        here = board.get_city(pawn.location)
        actions = []

        def move(action_type: ActionType, city: str, card: str | None = None) -> Action:
            params = {"pawn": pawn.player_id, "city": city}
            if card is not None:
                params["card"] = card
            return Action(action_type=action_type, player_id=player.player_id, params=params)

        for neighbor in here.adjacent:
            actions.append(move(ActionType.DRIVE, neighbor))

        for card in player.city_cards():
            if card.city != here.name:
                actions.append(move(ActionType.DIRECT_FLIGHT, card.city, card.name))

        charter = player.get_city_card(here.name)
        if charter is not None:
            for city in board:
                if city.name != here.name:
                    actions.append(move(ActionType.CHARTER_FLIGHT, city.name, charter.name))

        if here.research_station:
            for city in board.research_station_cities():
                if city.name != here.name:
                    actions.append(move(ActionType.SHUTTLE_FLIGHT, city.name))

        return actions

    def _dispatch_moves(self, player: Player) -> list[Action]:
        actions = []
        seen: set[tuple[int, str]] = set()
        for pawn in self.state.players:
            for other in self.state.players:
                key = (pawn.player_id, other.location)
                if other is pawn or other.location == pawn.location or key in seen:
                    continue
                seen.add(key)
                actions.append(Action(
                    action_type=ActionType.DISPATCH_TO_PAWN,
                    player_id=player.player_id,
                    params={"pawn": pawn.player_id, "city": other.location},
                ))
        return actions

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def resolve(self, action: Action) -> None:
        """Execute a movement action: discard the card used, then move the pawn."""
        player = self.state.get_player(action.player_id)
        pawn = self.state.get_player(action.params["pawn"])
        card_name = action.params.get("card")
        if card_name is not None:
            card = player.get_city_card(card_name)
            if card is None:
                raise ValueError(f"{player.name} does not hold {card_name}")
            self.state.player_deck.discard(card)
        self.move_pawn(pawn, action.params["city"])

    def move_pawn(self, pawn: Player, city: str) -> None:
        """Put a pawn in a city, applying arrival effects."""
        self.state.board.get_city(city)
        logger.debug(f"{pawn.name} moves {pawn.location} -> {city}")
        pawn.location = city
        TreatmentResolver(self.state).auto_treat(pawn)
