"""Per-session configuration for the Pandemic rules engine."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .constants import Difficulty, MIN_PLAYERS, MAX_PLAYERS, START_CITY


@dataclass(frozen=True)
class GameConfig:
    """Settings chosen when a session is created.

    Attributes:
        num_players: Number of players (2-4).
        difficulty: Number of epidemics shuffled into the player deck.
        seed: Seed for every shuffle in the session; None for a random game.
        start_city: City where pawns start and the first station is built.
        cities_path: Optional city table to load instead of the bundled one.
        player_names: Optional display names, one per player.
    """

    num_players: int = 2
    difficulty: Difficulty = Difficulty.EASY
    seed: Optional[int] = None
    start_city: str = START_CITY
    cities_path: Optional[Path] = None
    player_names: Optional[tuple[str, ...]] = None

    def __post_init__(self) -> None:
        if not MIN_PLAYERS <= self.num_players <= MAX_PLAYERS:
            raise ValueError(
                f"Number of players must be between {MIN_PLAYERS} and {MAX_PLAYERS}, "
                f"got {self.num_players}"
            )
        if self.player_names is not None and len(self.player_names) != self.num_players:
            raise ValueError(
                f"Expected {self.num_players} player names, got {len(self.player_names)}"
            )

    def names(self) -> list[str]:
        """Display names for the players."""
        if self.player_names is not None:
            return list(self.player_names)
        return [f"Player {i + 1}" for i in range(self.num_players)]
