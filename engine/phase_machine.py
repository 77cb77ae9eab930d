"""Phase state machine for the Pandemic rules engine.

Manages the phases of a player turn:
- Acting: the active player spends their 4 actions
- Drawing: the active player draws 2 player cards
- Infecting: infection cards are drawn at the current infection rate
- Ending: the turn passes to the next player

Two phases preempt the turn's own phase while they are pending:
- Discarding: some player holds more than 7 cards
- Forecasting: a Forecast card is being arranged

The phase machine enforces valid transitions and provides the logic for
when transitions should occur. It does not modify game state directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from core.constants import TurnPhase

if TYPE_CHECKING:
    from core.game_state import GameState


# Valid phase transitions
PHASE_TRANSITIONS: dict[TurnPhase, list[TurnPhase]] = {
    TurnPhase.ACTING: [TurnPhase.DRAWING, TurnPhase.GAME_OVER],
    TurnPhase.DRAWING: [TurnPhase.INFECTING, TurnPhase.ENDING, TurnPhase.GAME_OVER],
    TurnPhase.INFECTING: [TurnPhase.ENDING, TurnPhase.GAME_OVER],
    TurnPhase.ENDING: [TurnPhase.ACTING, TurnPhase.GAME_OVER],
    # Terminal
    TurnPhase.GAME_OVER: [],
}

# Phases that override the turn's phase while pending (never stored)
PREEMPTING_PHASES = (TurnPhase.DISCARDING, TurnPhase.FORECASTING)


@dataclass
class PhaseTransitionResult:
    """Result of a phase transition attempt.

    Attributes:
        success: Whether the transition was successful.
        new_phase: The new phase if successful, None otherwise.
        reason: Description of why the transition failed (if it did).
    """

    success: bool
    new_phase: Optional[TurnPhase]
    reason: Optional[str] = None


class PhaseMachine:
    """State machine for the phases of a turn.

    The machine tracks the turn's own phase (Acting, Drawing, Infecting,
    Ending, Game Over). Discarding and Forecasting are derived from the
    state on every read by current_phase().
    """

    def __init__(self, initial_phase: TurnPhase = TurnPhase.ACTING):
        """Initialize the phase machine.

        Args:
            initial_phase: The starting phase (default: ACTING).
        """
        if initial_phase in PREEMPTING_PHASES:
            raise ValueError(f"{initial_phase.value} cannot be a stored phase")
        self._phase = initial_phase

    @property
    def phase(self) -> TurnPhase:
        """Get the turn's own phase."""
        return self._phase

    def get_valid_transitions(self) -> list[TurnPhase]:
        """Get the list of valid next phases from the current phase."""
        return PHASE_TRANSITIONS.get(self._phase, [])

    def can_transition_to(self, target_phase: TurnPhase) -> bool:
        """Check if a transition to the target phase is valid."""
        return target_phase in self.get_valid_transitions()

    def transition_to(self, target_phase: TurnPhase) -> PhaseTransitionResult:
        """Attempt to transition to a new phase.

        Args:
            target_phase: The phase to transition to.

        Returns:
            PhaseTransitionResult indicating success or failure.
        """
        if not self.can_transition_to(target_phase):
            valid = self.get_valid_transitions()
            return PhaseTransitionResult(
                success=False,
                new_phase=None,
                reason=f"Cannot transition from {self._phase.value} to {target_phase.value}. "
                f"Valid transitions: {[p.value for p in valid]}",
            )

        self._phase = target_phase
        return PhaseTransitionResult(success=True, new_phase=target_phase)

    def is_game_over(self) -> bool:
        """Check if the game has ended."""
        return self._phase == TurnPhase.GAME_OVER

    # -------------------------------------------------------------------------
    # Phase computation
    # -------------------------------------------------------------------------

    def current_phase(self, state: GameState) -> TurnPhase:
        """The phase that decides which actions are legal right now.

        Game over beats everything; a pending Forecast beats discarding;
        discarding beats the turn's own phase.
        """
        if state.is_game_over() or self._phase == TurnPhase.GAME_OVER:
            return TurnPhase.GAME_OVER
        if state.global_state.forecast_pending:
            return TurnPhase.FORECASTING
        if state.overflowing_players():
            return TurnPhase.DISCARDING
        return self._phase

    def compute_next_phase(self, state: GameState) -> PhaseTransitionResult:
        """Compute what the turn's next phase should be based on game state.

        Args:
            state: The current game state.

        Returns:
            PhaseTransitionResult with the recommended next phase.
        """
        current = self._phase

        if current == TurnPhase.GAME_OVER:
            return PhaseTransitionResult(
                success=False,
                new_phase=None,
                reason="Game has ended - no further transitions",
            )

        if state.is_game_over():
            return PhaseTransitionResult(
                success=True,
                new_phase=TurnPhase.GAME_OVER,
                reason=state.global_state.game_over_reason.value,
            )

        turn = state.current_turn()

        if current == TurnPhase.ACTING:
            if turn.actions_remaining == 0:
                return PhaseTransitionResult(success=True, new_phase=TurnPhase.DRAWING)
            return PhaseTransitionResult(
                success=False,
                new_phase=None,
                reason=f"{turn.actions_remaining} actions remaining",
            )

        if current == TurnPhase.DRAWING:
            if not turn.drawn:
                return PhaseTransitionResult(
                    success=False, new_phase=None, reason="Cards not drawn yet"
                )
            if turn.skip_infect:
                return PhaseTransitionResult(success=True, new_phase=TurnPhase.ENDING)
            return PhaseTransitionResult(success=True, new_phase=TurnPhase.INFECTING)

        if current == TurnPhase.INFECTING:
            if turn.infected or turn.skip_infect:
                return PhaseTransitionResult(success=True, new_phase=TurnPhase.ENDING)
            return PhaseTransitionResult(
                success=False, new_phase=None, reason="Infection step pending"
            )

        if current == TurnPhase.ENDING:
            return PhaseTransitionResult(
                success=False, new_phase=None, reason="Waiting for the turn to end"
            )

        # Fallback (should not reach here)
        return PhaseTransitionResult(
            success=False,
            new_phase=None,
            reason=f"Unknown phase: {current}",
        )
