"""Event card resolver.

Event cards are free to play, by whoever holds them, at any time except
while a player must discard or a Forecast is being arranged:
- Airlift: move any pawn to any city
- Government Grant: build a research station anywhere, no card needed
- One Quiet Night: skip the next infection step
- Resilient Population: remove a card from the infection discard pile
- Forecast: look at the top 6 infection cards and put them back in any order

A contingency planner may spend an action to take an event card from the
player discard pile and keep it aside. A stored event is played like one
in hand, then leaves the game.
"""

from __future__ import annotations

import logging
from typing import Optional, TYPE_CHECKING

from core.constants import Capability, EventType, FORECAST_CARDS

from engine.actions import Action, ActionType
from .movement import MovementResolver
from .stations import ResearchStationResolver

if TYPE_CHECKING:
    from core.cards import Card
    from core.game_state import GameState
    from core.player import Player


logger = logging.getLogger(__name__)


class EventResolver:
    """Computes and executes event cards, stored events and Forecast."""

    def __init__(self, state: GameState):
        """Initialize the resolver with the game state.

        Args:
            state: The current game state.
        """
        self.state = state

    # -------------------------------------------------------------------------
    # Held events
    # -------------------------------------------------------------------------

    def held_events(self, player: Player) -> list[Card]:
        """Event cards a player can play: in hand, then the stored one."""
        events = player.event_cards()
        if player.role is not None and player.role.stored_event is not None:
            events.append(player.role.stored_event)
        return events

    def _find_event(self, player: Player, event: EventType) -> Optional[Card]:
        for card in self.held_events(player):
            if card.event == event:
                return card
        return None

    # -------------------------------------------------------------------------
    # Valid actions
    # -------------------------------------------------------------------------

    def get_valid_actions(self) -> list[Action]:
        """Return every playable event for every player."""
        actions: list[Action] = []
        for player in self.state.players:
            for card in self.held_events(player):
                actions.extend(self._event_options(player, card))
        return actions

    def _event_options(self, player: Player, card: Card) -> list[Action]:
        def play(**params) -> Action:
            return Action(
                action_type=ActionType.PLAY_EVENT,
                player_id=player.player_id,
                params={"event": card.event.value, **params},
            )

        event = card.event
        if event == EventType.AIRLIFT:
            return [
                play(pawn=pawn.player_id, city=city.name)
                for pawn in self.state.players
                for city in self.state.board
                if city.name != pawn.location
            ]
        if event == EventType.GOVERNMENT_GRANT:
            stations = ResearchStationResolver(self.state)
            return [play(city=city.name) for city in self.state.board if stations.can_build(city.name)]
        if event == EventType.ONE_QUIET_NIGHT:
            return [play()]
        if event == EventType.RESILIENT_POPULATION:
            return [play(card=c.name) for c in self.state.infection_deck.discarded]
        if event == EventType.FORECAST:
            return [play()] if self.state.infection_deck.remaining else []
        return []

    def get_retrieve_actions(self, player: Player) -> list[Action]:
        """Options to store a discarded event (contingency planner only)."""
        if not player.has(Capability.STORE_EVENT) or player.role.stored_event is not None:
            return []
        return [
            Action(
                action_type=ActionType.RETRIEVE_EVENT,
                player_id=player.player_id,
                params={"card": card.name},
            )
            for card in self.state.player_deck.discarded
            if card.is_event
        ]

    def get_forecast_actions(self) -> list[Action]:
        """Options while arranging a Forecast: which card goes next."""
        gs = self.state.global_state
        if gs.forecast_player is None:
            return []
        return [
            Action(
                action_type=ActionType.ARRANGE_FORECAST,
                player_id=gs.forecast_player,
                params={"card": name},
            )
            for name in gs.forecast_cards
        ]

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def play(self, action: Action) -> None:
        """Spend the event card, then apply its effect."""
        player = self.state.get_player(action.player_id)
        event = EventType(action.params["event"])
        card = self._find_event(player, event)
        if card is None:
            raise ValueError(f"{player.name} does not hold {event.value}")

        self._spend(player, card)
        logger.info(f"{player.name} played {event.value}")

        if event == EventType.AIRLIFT:
            pawn = self.state.get_player(action.params["pawn"])
            MovementResolver(self.state).move_pawn(pawn, action.params["city"])
        elif event == EventType.GOVERNMENT_GRANT:
            ResearchStationResolver(self.state).build(action.params["city"])
        elif event == EventType.ONE_QUIET_NIGHT:
            self._quiet_night()
        elif event == EventType.RESILIENT_POPULATION:
            deck = self.state.infection_deck
            removed = deck.find_discarded(action.params["card"])
            if removed is None:
                raise ValueError(f"{action.params['card']} is not in the infection discard pile")
            deck.remove_from_game(removed)
        elif event == EventType.FORECAST:
            gs = self.state.global_state
            gs.forecast_player = player.player_id
            gs.forecast_cards = [c.name for c in self.state.infection_deck.cards[:FORECAST_CARDS]]
            gs.forecast_order = []

    def _spend(self, player: Player, card: Card) -> None:
        role = player.role
        if role is not None and role.stored_event is card:
            role.stored_event = None
            self.state.player_deck.removed.append(card)
        else:
            self.state.player_deck.discard(card)

    def _quiet_night(self) -> None:
        turn = self.state.current_turn()
        if turn.infected or turn.skip_infect:
            # This turn's infection step is already settled; skip the next one
            self.state.global_state.quiet_night_pending = True
        else:
            turn.skip_infect = True

    def retrieve(self, action: Action) -> None:
        """Move an event card from the player discard pile into the stored slot."""
        player = self.state.get_player(action.player_id)
        deck = self.state.player_deck
        card = deck.find_discarded(action.params["card"])
        if card is None:
            raise ValueError(f"{action.params['card']} is not in the player discard pile")
        player.role.stored_event = deck.take_from_discard(card)
        logger.debug(f"{player.name} stored {card.name}")

    def arrange_forecast(self, action: Action) -> None:
        """Place the chosen card next; when all are placed, rewrite the deck top."""
        gs = self.state.global_state
        name = action.params["card"]
        gs.forecast_cards.remove(name)
        gs.forecast_order.append(name)
        if not gs.forecast_cards:
            self.state.infection_deck.reorder_top(gs.forecast_order)
            logger.debug(f"Forecast arranged: {gs.forecast_order}")
            gs.forecast_player = None
            gs.forecast_order = []
