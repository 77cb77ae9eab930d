"""Main game engine for the Pandemic rules engine.

The GameEngine is the primary interface for playing the game. It provides:
- reset(): Initialize a new game
- step(): Execute an action and advance game state
- get_valid_actions(): Return legal actions for the current state

The engine enforces all game rules and manages phase transitions.
The legal actions are recomputed from the state on every call and an
action that is not among them is never executed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Any

from core.constants import (
    Color,
    Difficulty,
    TurnPhase,
    CARDS_DRAWN_PER_TURN,
)
from core.board import CityGraph
from core.config import GameConfig
from core.errors import GameOver, IllegalActionError
from core.game_state import GameState
from core.player import Player
from core.turn import Turn
from data.loader import load_cities, load_default_cities

from .actions import Action, ActionType, MOVEMENT_ACTIONS
from .phase_machine import PhaseMachine
from .resolvers import (
    EpidemicResolver,
    EventResolver,
    InfectionResolver,
    MovementResolver,
    ResearchStationResolver,
    ShareKnowledgeResolver,
    TreatmentResolver,
)
from .setup import SetupResult, initialize_game


logger = logging.getLogger(__name__)


@dataclass
class StepResult:
    """Result of executing a step in the game.

    Attributes:
        success: Whether the action was executed.
        state: The game state after the action.
        done: Whether the game has ended.
        info: Additional information about the step.
    """

    success: bool
    state: GameState
    done: bool
    info: dict[str, Any]


class GameEngine:
    """Main engine for playing a game session.

    Usage:
        engine = GameEngine()
        engine.reset(num_players=2, seed=7)

        while not engine.is_game_over():
            actions = engine.get_valid_actions()
            action = select_action(actions)
            result = engine.step(action)
    """

    def __init__(self):
        """Initialize the game engine."""
        self._state: Optional[GameState] = None
        self._phase_machine: Optional[PhaseMachine] = None
        self._setup_result: Optional[SetupResult] = None
        self._config: Optional[GameConfig] = None

    @property
    def state(self) -> GameState:
        """Get the current game state.

        Raises:
            RuntimeError: If the game has not been initialized.
        """
        if self._state is None:
            raise RuntimeError("Game not initialized. Call reset() first.")
        return self._state

    @property
    def phase(self) -> TurnPhase:
        """Get the phase that governs the legal actions right now."""
        return self._phase_machine.current_phase(self.state)

    @property
    def setup_result(self) -> Optional[SetupResult]:
        return self._setup_result

    def is_game_over(self) -> bool:
        """Check if the game has ended."""
        return self._state is not None and self.state.is_game_over()

    # -------------------------------------------------------------------------
    # Game Initialization
    # -------------------------------------------------------------------------

    def reset(
        self,
        num_players: int = 2,
        difficulty: Difficulty = Difficulty.EASY,
        seed: Optional[int] = None,
        board: Optional[CityGraph] = None,
        config: Optional[GameConfig] = None,
    ) -> GameState:
        """Initialize a new game.

        Args:
            num_players: Number of players (2-4). Ignored if config is given.
            difficulty: Number of epidemics. Ignored if config is given.
            seed: Seed for every shuffle. Ignored if config is given.
            board: Optional custom board. If None, the configured or
                bundled city table is loaded.
            config: Full session settings.

        Returns:
            The initial game state, ready for the first player's actions.

        Raises:
            CityLoadError: If the city table is invalid.
        """
        if config is None:
            config = GameConfig(num_players=num_players, difficulty=difficulty, seed=seed)
        self._config = config

        if board is None:
            if config.cities_path is not None:
                board = load_cities(config.cities_path)
            else:
                board = load_default_cities()

        self._state = GameState.create_initial_state(board, config)
        self._setup_result = initialize_game(self._state, config.start_city)
        self._phase_machine = PhaseMachine(initial_phase=TurnPhase.ACTING)

        return self._state

    # -------------------------------------------------------------------------
    # Action Execution
    # -------------------------------------------------------------------------

    def step(self, action: Action) -> StepResult:
        """Execute an action and advance the game state.

        A game-ending condition raised while the action runs marks the
        state terminal and is reported with ``done=True``.

        Args:
            action: The action to execute.

        Returns:
            StepResult with the outcome of the action.
        """
        valid_actions = self.get_valid_actions()
        if not self._is_action_valid(action, valid_actions):
            return StepResult(
                success=False,
                state=self.state,
                done=self.is_game_over(),
                info={"error": f"Invalid action: {action}"},
            )

        info: dict[str, Any] = {"action": str(action)}
        logger.debug(f"Executing {action}")

        try:
            self._execute(action, info)
            self._check_phase_transition()
        except GameOver as e:
            self._end_game(e)
            info["game_over"] = e.reason.value
            info["victory"] = e.victory

        info["phase"] = self.phase.value
        info["turn"] = self.state.current_turn().number

        return StepResult(
            success=True,
            state=self.state,
            done=self.is_game_over(),
            info=info,
        )

    def apply(self, action: Action) -> StepResult:
        """Execute an action, raising if it is not currently legal.

        Raises:
            IllegalActionError: If the action is not offered.
        """
        result = self.step(action)
        if not result.success:
            raise IllegalActionError(result.info["error"])
        return result

    def _is_action_valid(self, action: Action, valid_actions: list[Action]) -> bool:
        """Check if an action is in the list of valid actions."""
        for valid in valid_actions:
            if (
                action.action_type == valid.action_type
                and action.player_id == valid.player_id
                and action.params == valid.params
            ):
                return True
        return False

    def _execute(self, action: Action, info: dict[str, Any]) -> None:
        """Dispatch an action to its resolver."""
        state = self.state
        t = action.action_type

        if t in MOVEMENT_ACTIONS:
            MovementResolver(state).resolve(action)
        elif t == ActionType.BUILD_RESEARCH_STATION:
            ResearchStationResolver(state).resolve(action)
        elif t == ActionType.TREAT_DISEASE:
            result = TreatmentResolver(state).treat(
                state.get_player(action.player_id),
                Color(action.params["color"]),
                action.params["amount"],
            )
            info["eradicated"] = result.eradicated
        elif t == ActionType.SHARE_KNOWLEDGE:
            ShareKnowledgeResolver(state).resolve(action)
        elif t == ActionType.DISCOVER_CURE:
            cure = TreatmentResolver(state).cure(
                state.get_player(action.player_id),
                Color(action.params["color"]),
                action.params["cards"],
            )
            info["eradicated"] = cure.eradicated
        elif t == ActionType.RETRIEVE_EVENT:
            EventResolver(state).retrieve(action)
        elif t == ActionType.PLAY_EVENT:
            EventResolver(state).play(action)
        elif t == ActionType.ARRANGE_FORECAST:
            EventResolver(state).arrange_forecast(action)
        elif t == ActionType.DISCARD:
            self._execute_discard(action)
        elif t == ActionType.DRAW_CARDS:
            info["epidemics"] = self._execute_draw_cards()
        elif t == ActionType.INFECT_CITIES:
            info["outbreaks"] = self._execute_infect_cities()
        elif t == ActionType.END_TURN:
            self._execute_end_turn()

        if action.costs_action:
            state.current_turn().spend_action()

    # -------------------------------------------------------------------------
    # Action Execution Helpers
    # -------------------------------------------------------------------------

    def _execute_discard(self, action: Action) -> None:
        """Discard a card from an overflowing hand."""
        player = self.state.get_player(action.player_id)
        for card in player.hand:
            if card.name == action.params["card"]:
                self.state.player_deck.discard(card)
                return
        raise ValueError(f"{player.name} does not hold {action.params['card']}")

    def _execute_draw_cards(self) -> list[str]:
        """Draw two player cards, resolving any epidemics drawn.

        Returns:
            Cities hit by epidemics, in order.
        """
        state = self.state
        player = state.get_current_player()
        turn = state.current_turn()
        epidemics: list[str] = []

        for _ in range(CARDS_DRAWN_PER_TURN):
            card = state.player_deck.draw()
            if card.is_epidemic:
                result = EpidemicResolver(state).resolve(card)
                epidemics.append(result.city)
            else:
                player.pick_up(card)
                logger.debug(f"{player.name} drew {card.name}")

        turn.drawn = True
        return epidemics

    def _execute_infect_cities(self) -> list[str]:
        """Run the infection step unless it is skipped this turn.

        Returns:
            Cities that outbroke, in order.
        """
        turn = self.state.current_turn()
        outbreaks: list[str] = []
        if not turn.skip_infect:
            outbreaks = InfectionResolver(self.state).run_infection_step().outbreaks
        turn.infected = True
        return outbreaks

    def _execute_end_turn(self) -> None:
        """Start the next player's turn."""
        state = self.state
        turn = state.current_turn()
        gs = state.global_state

        state.turns.append(Turn(
            player_index=(turn.player_index + 1) % state.num_players(),
            number=turn.number + 1,
            skip_infect=gs.quiet_night_pending,
        ))
        gs.quiet_night_pending = False
        self._transition_to_phase(TurnPhase.ACTING)
        logger.info(f"Turn {turn.number + 1}: {state.get_current_player().name}")

    def _end_game(self, error: GameOver) -> None:
        """Mark the session terminal."""
        self.state.end_game(error.reason)
        self._phase_machine.transition_to(TurnPhase.GAME_OVER)
        if error.victory:
            logger.info(f"Game won: {error}")
        else:
            logger.warning(f"Game lost: {error}")

    # -------------------------------------------------------------------------
    # Phase Transition Logic
    # -------------------------------------------------------------------------

    def _check_phase_transition(self) -> None:
        """Advance the turn's phase as far as the state allows."""
        while True:
            result = self._phase_machine.compute_next_phase(self.state)
            if not result.success:
                return
            self._transition_to_phase(result.new_phase)

    def _transition_to_phase(self, new_phase: TurnPhase) -> None:
        """Transition to a new phase."""
        result = self._phase_machine.transition_to(new_phase)
        if not result.success:
            raise RuntimeError(result.reason)
        self.state.phase = new_phase

    # -------------------------------------------------------------------------
    # Valid Actions
    # -------------------------------------------------------------------------

    def get_valid_actions(self) -> list[Action]:
        """Get all valid actions for the current state.

        Returns:
            List of valid actions, computed fresh from the state.
        """
        phase = self.phase
        state = self.state

        if phase == TurnPhase.GAME_OVER:
            return []
        if phase == TurnPhase.FORECASTING:
            return EventResolver(state).get_forecast_actions()
        if phase == TurnPhase.DISCARDING:
            return self._get_valid_discard_actions()

        player = state.get_current_player()
        if phase == TurnPhase.ACTING:
            actions = self._get_valid_acting_actions(player)
        elif phase == TurnPhase.DRAWING:
            actions = [Action(ActionType.DRAW_CARDS, player.player_id)]
        elif phase == TurnPhase.INFECTING:
            actions = [Action(ActionType.INFECT_CITIES, player.player_id)]
        else:
            actions = [Action(ActionType.END_TURN, player.player_id)]

        actions.extend(EventResolver(state).get_valid_actions())
        return actions

    def _get_valid_acting_actions(self, player: Player) -> list[Action]:
        """Get the costed actions of the acting player."""
        state = self.state
        treatment = TreatmentResolver(state)
        actions: list[Action] = []
        actions.extend(MovementResolver(state).get_valid_actions(player))
        actions.extend(ResearchStationResolver(state).get_valid_actions(player))
        actions.extend(treatment.get_treat_actions(player))
        actions.extend(ShareKnowledgeResolver(state).get_valid_actions(player))
        actions.extend(treatment.get_cure_actions(player))
        actions.extend(EventResolver(state).get_retrieve_actions(player))
        return actions

    def _get_valid_discard_actions(self) -> list[Action]:
        """One discard option per card of the first overflowing player."""
        player = self.state.overflowing_players()[0]
        return [
            Action(ActionType.DISCARD, player.player_id, {"card": card.name})
            for card in player.hand
        ]

    def get_actions_of_type(self, action_type: ActionType) -> list[Action]:
        """Valid actions filtered to one type."""
        return [a for a in self.get_valid_actions() if a.action_type == action_type]

    # -------------------------------------------------------------------------
    # Utility Methods
    # -------------------------------------------------------------------------

    def get_current_player(self) -> Player:
        """Get the current player."""
        return self.state.get_current_player()

    def clone(self) -> GameEngine:
        """Create a deep copy of the engine for simulation.

        Returns:
            A new GameEngine with cloned state.
        """
        new_engine = GameEngine()
        new_engine._state = self.state.clone()
        new_engine._phase_machine = PhaseMachine(initial_phase=self._phase_machine.phase)
        new_engine._setup_result = self._setup_result
        new_engine._config = self._config
        return new_engine

    def get_game_summary(self) -> dict[str, Any]:
        """Get a summary of the current game state.

        Returns:
            Dictionary with game summary information.
        """
        state = self.state
        gs = state.global_state
        turn = state.current_turn()
        return {
            "phase": self.phase.value,
            "turn": turn.number,
            "current_player": turn.player_index,
            "actions_remaining": turn.actions_remaining,
            "infection_rate": gs.infection_rate,
            "outbreaks": gs.outbreak_count,
            "research_stations_remaining": gs.research_stations_remaining,
            "player_deck_remaining": state.player_deck.remaining,
            "infection_deck_remaining": state.infection_deck.remaining,
            "diseases": {
                color.value: {
                    "cubes": d.cubes,
                    "cured": d.cured,
                    "eradicated": d.eradicated,
                }
                for color, d in state.ledger.diseases.items()
            },
            "players": [
                {
                    "id": p.player_id,
                    "name": p.name,
                    "role": p.role.name if p.role else None,
                    "location": p.location,
                    "hand_size": p.hand_size(),
                }
                for p in state.players
            ],
            "game_over": self.is_game_over(),
            "game_over_reason": gs.game_over_reason.value if gs.game_over_reason else None,
        }

    def __str__(self) -> str:
        """Return string representation of the engine."""
        if self._state is None:
            return "GameEngine(not initialized)"
        return f"GameEngine(phase={self.phase.value}, turn={self.state.current_turn().number})"
