"""Treat Disease and Discover a Cure resolver.

Treating removes one cube of a color from the player's city, or every
cube of that color when the disease is cured or the player is a medic.
Curing discards 5 city cards of one color at a research station
(4 for the scientist). A cured disease with no cubes left on the board
is eradicated. Curing all four diseases wins the game.

A medic also clears cubes of cured diseases from any city they stand in,
without spending an action.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import combinations
from typing import TYPE_CHECKING

from core.constants import (
    Capability,
    Color,
    GameOverReason,
    CURE_CARDS_REQUIRED,
    CURE_CARDS_REQUIRED_SCIENTIST,
)
from core.errors import GameOver

from engine.actions import Action, ActionType

if TYPE_CHECKING:
    from core.game_state import GameState
    from core.player import Player


logger = logging.getLogger(__name__)


@dataclass
class TreatmentResult:
    """Result of removing cubes from a city.

    Attributes:
        city: City treated.
        color: Disease treated.
        removed: Cubes returned to the supply.
        eradicated: Whether the disease became eradicated.
    """

    city: str
    color: Color
    removed: int
    eradicated: bool = False


@dataclass
class CureResult:
    """Result of discovering a cure.

    Attributes:
        color: Disease cured.
        cards: Names of the cards discarded.
        eradicated: Whether the disease became eradicated.
    """

    color: Color
    cards: tuple[str, ...]
    eradicated: bool = False


def cards_needed_to_cure(player: Player) -> int:
    """Number of same-color cards a player needs to discover a cure."""
    if player.has(Capability.CURE_WITH_FOUR):
        return CURE_CARDS_REQUIRED_SCIENTIST
    return CURE_CARDS_REQUIRED


class TreatmentResolver:
    """Resolves Treat Disease, Discover a Cure and medic clean-up."""

    def __init__(self, state: GameState):
        """Initialize the resolver with the game state.

        Args:
            state: The current game state.
        """
        self.state = state

    # -------------------------------------------------------------------------
    # Valid actions
    # -------------------------------------------------------------------------

    def get_treat_actions(self, player: Player) -> list[Action]:
        """Treat options in the player's city, one per color present."""
        city = self.state.board.get_city(player.location)
        actions = []
        for color in Color:
            count = city.cubes(color)
            if count == 0:
                continue
            full = self.state.ledger.is_cured(color) or player.has(Capability.TREAT_ALL)
            actions.append(Action(
                action_type=ActionType.TREAT_DISEASE,
                player_id=player.player_id,
                params={"city": city.name, "color": color.value, "amount": count if full else 1},
            ))
        return actions

    def get_cure_actions(self, player: Player) -> list[Action]:
        """Cure options: every combination of the required number of cards.

        A player holding more matching cards than needed is offered each
        distinct subset as its own option.
        """
        city = self.state.board.get_city(player.location)
        if not city.research_station:
            return []

        needed = cards_needed_to_cure(player)
        actions = []
        for color in Color:
            if self.state.ledger.is_cured(color):
                continue
            cards = player.cards_of_color(color)
            for combo in combinations(cards, needed):
                actions.append(Action(
                    action_type=ActionType.DISCOVER_CURE,
                    player_id=player.player_id,
                    params={"color": color.value, "cards": tuple(c.name for c in combo)},
                ))
        return actions

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def treat(self, player: Player, color: Color, amount: int) -> TreatmentResult:
        """Remove cubes of a color from the player's city."""
        city = self.state.board.get_city(player.location)
        city.remove_cubes(color, amount)
        self.state.ledger.return_cubes(color, amount)
        logger.debug(f"{player.name} treated {amount} {color.value} in {city.name}")
        return TreatmentResult(
            city=city.name,
            color=color,
            removed=amount,
            eradicated=self._check_eradication(color),
        )

    def cure(self, player: Player, color: Color, card_names: tuple[str, ...]) -> CureResult:
        """Discard the given cards and cure a disease.

        Raises:
            ValueError: If a card is not in the player's hand.
            GameOver: If this was the last disease to cure (a win).
        """
        cards = []
        for name in card_names:
            card = player.get_city_card(name)
            if card is None:
                raise ValueError(f"{player.name} does not hold {name}")
            cards.append(card)

        for card in cards:
            self.state.player_deck.discard(card)
        self.state.ledger.cure(color)
        logger.info(f"{player.name} discovered a cure for {color.value}")

        for medic in self.state.players:
            self.auto_treat(medic)

        result = CureResult(
            color=color,
            cards=tuple(card_names),
            eradicated=self._check_eradication(color),
        )

        if self.state.ledger.all_cured():
            raise GameOver(GameOverReason.ALL_CURED, "All four diseases are cured")
        return result

    def auto_treat(self, player: Player) -> list[TreatmentResult]:
        """Clear every cured color from a medic's city.

        Does nothing for players without the capability.
        """
        if not player.has(Capability.AUTO_TREAT_CURED):
            return []
        city = self.state.board.get_city(player.location)
        results = []
        for color in Color:
            count = city.cubes(color)
            if count and self.state.ledger.is_cured(color):
                city.remove_cubes(color, count)
                self.state.ledger.return_cubes(color, count)
                results.append(TreatmentResult(
                    city=city.name,
                    color=color,
                    removed=count,
                    eradicated=self._check_eradication(color),
                ))
        return results

    def _check_eradication(self, color: Color) -> bool:
        eradicated = self.state.ledger.check_eradication(color)
        if eradicated:
            logger.info(f"The {color.value} disease has been eradicated")
        return eradicated
