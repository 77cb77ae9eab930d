"""Game state for the Pandemic rules engine.

GameState is the single source of truth for a session.
It combines the board, the disease ledger, the three decks and the
players, and provides methods for cloning, serialization, state
hashing and consistency checks.
"""

from __future__ import annotations

import copy
import hashlib
import json
import random
from dataclasses import dataclass, field
from typing import Optional, Any

from .constants import (
    Color,
    Difficulty,
    GameOverReason,
    TurnPhase,
    CUBES_PER_COLOR,
    INFECTION_RATE_TRACK,
    MAX_CUBES_PER_CITY,
    MAX_HAND_SIZE,
    RESEARCH_STATIONS,
)
from .board import CityGraph
from .cards import Card, Deck, build_infection_deck, build_player_deck, build_role_deck
from .config import GameConfig
from .ledger import DiseaseLedger
from .player import Player
from .turn import Turn


@dataclass
class GlobalState:
    """Counters and flags not tied to a specific player or city.

    Attributes:
        infection_rate_index: Position on the infection rate track.
        outbreak_count: Outbreaks so far; the 8th ends the game.
        research_stations_remaining: Stations left in the supply.
        difficulty: Difficulty the player deck was dealt for.
        quiet_night_pending: Skip the next infection step not yet run.
        forecast_player: Seat of the player arranging a Forecast, if any.
        forecast_cards: Names of revealed infection cards not yet placed.
        forecast_order: Names placed so far, top first.
        game_ended: Whether the session is over.
        game_over_reason: Why the session ended.
    """

    infection_rate_index: int = 0
    outbreak_count: int = 0
    research_stations_remaining: int = RESEARCH_STATIONS
    difficulty: Difficulty = Difficulty.EASY
    quiet_night_pending: bool = False
    forecast_player: Optional[int] = None
    forecast_cards: list[str] = field(default_factory=list)
    forecast_order: list[str] = field(default_factory=list)
    game_ended: bool = False
    game_over_reason: Optional[GameOverReason] = None

    @property
    def infection_rate(self) -> int:
        """Infection cards drawn per infection step (saturates at the end of the track)."""
        index = min(self.infection_rate_index, len(INFECTION_RATE_TRACK) - 1)
        return INFECTION_RATE_TRACK[index]

    @property
    def forecast_pending(self) -> bool:
        return self.forecast_player is not None

    @property
    def victory(self) -> bool:
        return self.game_over_reason == GameOverReason.ALL_CURED


@dataclass
class GameState:
    """The complete game state - single source of truth.

    Attributes:
        board: The city graph with cubes and research stations.
        ledger: Cube supply and cure status per disease.
        player_deck: Deck of city, event and epidemic cards.
        infection_deck: Deck of infection cards.
        role_deck: Roles not dealt to a player.
        players: All players in seating order.
        turns: Turns played so far; the last is the current turn.
        global_state: Session-wide counters.
        phase: Phase of the current turn (overridden by discarding,
            forecasting and game over, see engine.phase_machine).
        rng: Random source shared by every deck.
    """

    board: CityGraph
    ledger: DiseaseLedger
    player_deck: Deck
    infection_deck: Deck
    role_deck: Deck
    players: list[Player]
    global_state: GlobalState
    turns: list[Turn] = field(default_factory=list)
    phase: TurnPhase = TurnPhase.ACTING
    rng: random.Random = field(default_factory=random.Random, repr=False)

    @classmethod
    def create_initial_state(
        cls,
        board: CityGraph,
        config: Optional[GameConfig] = None,
    ) -> GameState:
        """Create a fresh state: shuffled decks, players without roles or cards.

        Args:
            board: The loaded city graph (no cubes, no stations).
            config: Session settings; defaults to GameConfig().

        Returns:
            A new GameState ready for engine.setup.initialize_game.

        Raises:
            KeyError: If the configured start city is not on the board.
        """
        config = config or GameConfig()
        board.get_city(config.start_city)

        rng = random.Random(config.seed)
        players = [
            Player(name=name, player_id=i, location=config.start_city)
            for i, name in enumerate(config.names())
        ]

        return cls(
            board=board,
            ledger=DiseaseLedger(),
            player_deck=build_player_deck(board, rng),
            infection_deck=build_infection_deck(board, rng),
            role_deck=build_role_deck(rng),
            players=players,
            global_state=GlobalState(difficulty=config.difficulty),
            rng=rng,
        )

    # -------------------------------------------------------------------------
    # Player access methods
    # -------------------------------------------------------------------------

    def current_turn(self) -> Turn:
        """Get the current turn.

        Raises:
            RuntimeError: If no turn has started.
        """
        if not self.turns:
            raise RuntimeError("No turn has started")
        return self.turns[-1]

    def get_current_player(self) -> Player:
        """Get the player whose turn it is."""
        return self.players[self.current_turn().player_index]

    def get_player(self, player_id: int) -> Player:
        """Get a player by seat index.

        Raises:
            ValueError: If player_id is invalid.
        """
        if not 0 <= player_id < len(self.players):
            raise ValueError(f"Invalid player ID: {player_id}")
        return self.players[player_id]

    def num_players(self) -> int:
        return len(self.players)

    def players_at(self, city: str) -> list[Player]:
        """Return the players whose pawns are in a city."""
        return [p for p in self.players if p.location == city]

    def overflowing_players(self) -> list[Player]:
        """Players holding more than the hand limit, active player first."""
        over = [p for p in self.players if p.hand_size() > MAX_HAND_SIZE]
        if self.turns:
            active = self.current_turn().player_index
            over.sort(key=lambda p: (p.player_id - active) % len(self.players))
        return over

    # -------------------------------------------------------------------------
    # Game over
    # -------------------------------------------------------------------------

    def is_game_over(self) -> bool:
        return self.global_state.game_ended

    def end_game(self, reason: GameOverReason) -> None:
        """Mark the session as finished."""
        self.global_state.game_ended = True
        self.global_state.game_over_reason = reason
        self.phase = TurnPhase.GAME_OVER

    # -------------------------------------------------------------------------
    # Cloning and serialization
    # -------------------------------------------------------------------------

    def clone(self) -> GameState:
        """Create a deep copy of the game state, random source included."""
        return copy.deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the game state to a dictionary.

        Returns:
            Dictionary representation of the game state.
        """
        gs = self.global_state
        return {
            "phase": self.phase.value,
            "global_state": {
                "infection_rate_index": gs.infection_rate_index,
                "infection_rate": gs.infection_rate,
                "outbreak_count": gs.outbreak_count,
                "research_stations_remaining": gs.research_stations_remaining,
                "difficulty": gs.difficulty.value,
                "quiet_night_pending": gs.quiet_night_pending,
                "forecast_player": gs.forecast_player,
                "forecast_cards": list(gs.forecast_cards),
                "forecast_order": list(gs.forecast_order),
                "game_ended": gs.game_ended,
                "game_over_reason": gs.game_over_reason.value if gs.game_over_reason else None,
            },
            "diseases": {
                color.value: {
                    "cubes": d.cubes,
                    "cured": d.cured,
                    "eradicated": d.eradicated,
                }
                for color, d in self.ledger.diseases.items()
            },
            "cities": {
                city.name: {
                    "infection": {c.value: n for c, n in city.infection.items()},
                    "research_station": city.research_station,
                }
                for city in self.board
            },
            "players": [
                {
                    "name": p.name,
                    "player_id": p.player_id,
                    "role": p.role.name if p.role else None,
                    "stored_event": (
                        p.role.stored_event.name if p.role and p.role.stored_event else None
                    ),
                    "location": p.location,
                    "hand": [c.name for c in p.hand],
                }
                for p in self.players
            ],
            "decks": {
                deck.kind.value: {
                    "cards": [c.name for c in deck.cards],
                    "discarded": [c.name for c in deck.discarded],
                    "removed": [c.name for c in deck.removed],
                }
                for deck in (self.player_deck, self.infection_deck, self.role_deck)
            },
            "turn": (
                {
                    "player_index": self.turns[-1].player_index,
                    "number": self.turns[-1].number,
                    "actions_remaining": self.turns[-1].actions_remaining,
                    "drawn": self.turns[-1].drawn,
                    "infected": self.turns[-1].infected,
                    "skip_infect": self.turns[-1].skip_infect,
                }
                if self.turns
                else None
            ),
        }

    def state_hash(self) -> str:
        """Compute a hash of the game state.

        Returns:
            A hex string hash of the serialized state.
        """
        state_json = json.dumps(self.to_dict(), sort_keys=True)
        return hashlib.sha256(state_json.encode()).hexdigest()

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self) -> list[str]:
        """Validate the game state for consistency.

        Returns:
            List of validation error messages (empty if valid).
        """
        errors: list[str] = []

        # Cubes are conserved per color
        for color in Color:
            on_board = self.board.cubes_on_board(color)
            pool = self.ledger.pool(color)
            if on_board + pool != CUBES_PER_COLOR:
                errors.append(
                    f"{color.value}: {on_board} cubes on board + {pool} in supply "
                    f"!= {CUBES_PER_COLOR}"
                )
            disease = self.ledger[color]
            if disease.eradicated and not disease.cured:
                errors.append(f"{color.value} is eradicated but not cured")

        for city in self.board:
            for color, count in city.infection.items():
                if not 0 <= count <= MAX_CUBES_PER_CITY:
                    errors.append(f"{city.name} has {count} {color.value} cubes")

        # Research stations are conserved
        built = len(self.board.research_station_cities())
        if built + self.global_state.research_stations_remaining != RESEARCH_STATIONS:
            errors.append(
                f"{built} research stations built + "
                f"{self.global_state.research_stations_remaining} remaining "
                f"!= {RESEARCH_STATIONS}"
            )

        errors.extend(self._validate_card_ownership())

        for player in self.players:
            if player.location not in self.board:
                errors.append(f"{player.name} is in unknown city {player.location}")

        return errors

    def _validate_card_ownership(self) -> list[str]:
        """Check every card sits in exactly one container."""
        errors: list[str] = []
        seen: dict[int, str] = {}

        def record(card: Card, where: str) -> None:
            if id(card) in seen:
                errors.append(f"{card.name} is in both {seen[id(card)]} and {where}")
            else:
                seen[id(card)] = where

        for deck in (self.player_deck, self.infection_deck, self.role_deck):
            for card in deck.cards:
                record(card, f"{deck.kind.value} draw pile")
            for card in deck.discarded:
                record(card, f"{deck.kind.value} discard pile")
            for card in deck.removed:
                record(card, f"{deck.kind.value} removed pile")

        for player in self.players:
            for card in player.hand:
                record(card, f"{player.name}'s hand")
                if card.holder is not player:
                    errors.append(f"{card.name} in {player.name}'s hand has the wrong holder")
            if player.role is not None and player.role.stored_event is not None:
                record(player.role.stored_event, f"{player.name}'s stored event")

        return errors

    def __str__(self) -> str:
        """Return a human-readable summary of the game state."""
        gs = self.global_state
        lines = [
            f"Phase: {self.phase.value}",
            f"Outbreaks: {gs.outbreak_count}, Infection rate: {gs.infection_rate}, "
            f"Research stations left: {gs.research_stations_remaining}",
            "Diseases: " + ", ".join(
                f"{color.value}={d.cubes}"
                + (" (eradicated)" if d.eradicated else " (cured)" if d.cured else "")
                for color, d in self.ledger.diseases.items()
            ),
            f"Player deck: {self.player_deck.remaining}, "
            f"Infection deck: {self.infection_deck.remaining}",
        ]
        for player in self.players:
            hand = ", ".join(c.name for c in player.hand) or "-"
            lines.append(f"  {player}: {hand}")
        return "\n".join(lines)
