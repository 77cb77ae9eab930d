"""Share Knowledge resolver.

Two players in the same city may pass that city's card between them,
either direction. A researcher may give any city card, and anyone may
take any city card from a researcher.

Options are built as a set of (giver, receiver, card) outcomes, so a
transfer allowed by more than one rule is offered once.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from core.constants import Capability

from engine.actions import Action, ActionType

if TYPE_CHECKING:
    from core.cards import Card
    from core.game_state import GameState
    from core.player import Player


logger = logging.getLogger(__name__)


class ShareKnowledgeResolver:
    """Computes and executes card transfers between co-located players."""

    def __init__(self, state: GameState):
        """Initialize the resolver with the game state.

        Args:
            state: The current game state.
        """
        self.state = state

    def _giveable(self, giver: Player) -> list[Card]:
        if giver.has(Capability.SHARE_ANY_CITY):
            return giver.city_cards()
        card = giver.get_city_card(giver.location)
        return [card] if card is not None else []

    def get_outcomes(self, player: Player) -> set[tuple[int, int, str]]:
        """All (giver, receiver, card name) transfers the player can make."""
        outcomes: set[tuple[int, int, str]] = set()
        for other in self.state.players_at(player.location):
            if other is player:
                continue
            for card in self._giveable(player):
                outcomes.add((player.player_id, other.player_id, card.name))
            for card in self._giveable(other):
                outcomes.add((other.player_id, player.player_id, card.name))
        return outcomes

    def get_valid_actions(self, player: Player) -> list[Action]:
        """Return one action per distinct transfer, in a stable order."""
        return [
            Action(
                action_type=ActionType.SHARE_KNOWLEDGE,
                player_id=player.player_id,
                params={"giver": giver, "receiver": receiver, "card": card},
            )
            for giver, receiver, card in sorted(self.get_outcomes(player))
        ]

    def resolve(self, action: Action) -> None:
        """Move the card from the giver's hand to the front of the receiver's."""
        giver = self.state.get_player(action.params["giver"])
        receiver = self.state.get_player(action.params["receiver"])
        card = giver.get_city_card(action.params["card"])
        if card is None:
            raise ValueError(f"{giver.name} does not hold {action.params['card']}")
        receiver.pick_up(card)
        logger.debug(f"{giver.name} gave {card.name} to {receiver.name}")
