"""A single player turn."""

from __future__ import annotations

from dataclasses import dataclass

from .constants import ACTIONS_PER_TURN


@dataclass
class Turn:
    """Bookkeeping for one player's turn.

    A new Turn replaces the old one when the turn ends; the legal actions
    are never stored here, they are derived from the state on demand.

    Attributes:
        player_index: Seat index of the active player.
        number: 1-indexed count of turns played in this session.
        actions_remaining: Actions left before drawing.
        drawn: Whether the two player cards have been drawn.
        infected: Whether the infection step has run.
        skip_infect: Whether the infection step is skipped this turn.
    """

    player_index: int
    number: int = 1
    actions_remaining: int = ACTIONS_PER_TURN
    drawn: bool = False
    infected: bool = False
    skip_infect: bool = False

    def spend_action(self) -> None:
        """Use one action.

        Raises:
            ValueError: If no actions remain.
        """
        if self.actions_remaining <= 0:
            raise ValueError("No actions remaining this turn")
        self.actions_remaining -= 1
