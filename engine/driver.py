"""Interactive CLI driver for playing Pandemic.

This module provides a text-based interface for playing the game.
It serves as both a playable game and a reference implementation
for how another front end would interact with the game engine.

The driver is designed to be extensible:
- GameRenderer handles all display logic
- ActionPrompter handles all user input
- GameDriver orchestrates the game loop

Usage:
    python -m engine.driver --players 2 --difficulty easy --seed 7

Or from code:
    from engine.driver import GameDriver
    driver = GameDriver(GameConfig(num_players=3))
    driver.run()
"""

from __future__ import annotations

import argparse
import logging
import random
import re
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from core.config import GameConfig
from core.constants import Color, Difficulty, TurnPhase, MIN_PLAYERS, MAX_PLAYERS
from core.game_state import GameState

from engine.actions import Action, ActionType
from engine.game_engine import GameEngine


logger = logging.getLogger(__name__)


# =============================================================================
# Display Formatters
# =============================================================================

class GameRenderer(ABC):
    """Abstract base class for rendering game state.

    The CLI renderer is provided as TextRenderer.
    """

    @abstractmethod
    def render_state(self, state: GameState, phase: TurnPhase) -> None:
        """Render the full game state."""
        pass

    @abstractmethod
    def render_message(self, message: str) -> None:
        """Render a message to the user."""
        pass

    @abstractmethod
    def render_error(self, error: str) -> None:
        """Render an error message."""
        pass

    @abstractmethod
    def render_game_over(self, state: GameState) -> None:
        """Render the game over screen."""
        pass


class TextRenderer(GameRenderer):
    """CLI text-based renderer for the game state."""

    # Box drawing characters
    H_LINE = "─"
    V_LINE = "│"
    TL_CORNER = "┌"
    TR_CORNER = "┐"
    BL_CORNER = "└"
    BR_CORNER = "┘"

    # Disease colors (ANSI codes)
    DISEASE_COLORS = {
        Color.RED: "\033[91m",
        Color.BLUE: "\033[94m",
        Color.YELLOW: "\033[93m",
        Color.BLACK: "\033[90m",
    }
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    def __init__(self, use_colors: bool = True):
        """Initialize the renderer.

        Args:
            use_colors: Whether to use ANSI color codes.
        """
        self.use_colors = use_colors

    def _color(self, text: str, color: str) -> str:
        """Apply color to text if colors are enabled."""
        if self.use_colors:
            return f"{color}{text}{self.RESET}"
        return text

    def _box(self, title: str, content: list[str], width: int = 70) -> str:
        """Create a box around content."""
        lines = []
        title_space = max(width - len(title) - 4, 0)
        lines.append(f"{self.TL_CORNER}{self.H_LINE}{self.H_LINE} {title} {self.H_LINE * title_space}{self.TR_CORNER}")

        for line in content:
            visible_len = len(self._strip_ansi(line))
            padding = max(width - visible_len - 2, 0)
            lines.append(f"{self.V_LINE} {line}{' ' * padding}{self.V_LINE}")

        lines.append(f"{self.BL_CORNER}{self.H_LINE * width}{self.BR_CORNER}")
        return "\n".join(lines)

    def _strip_ansi(self, text: str) -> str:
        """Strip ANSI escape codes from text."""
        return re.sub(r"\033\[[0-9;]*m", "", text)

    def render_state(self, state: GameState, phase: TurnPhase) -> None:
        """Render the full game state."""
        print("\n" + "=" * 72)
        self.render_phase_header(state, phase)
        print()
        self.render_diseases(state)
        print()
        self.render_players(state)
        print()
        self.render_infected_cities(state)

    def render_phase_header(self, state: GameState, phase: TurnPhase) -> None:
        """Render the turn and phase header."""
        turn = state.current_turn()
        player = state.get_current_player()
        gs = state.global_state

        header = f"Turn {turn.number} - {phase.value.upper()}"
        print(self._color("=" * 72, self.DIM))
        print(self._color(header.center(72), self.BOLD))
        print(f"Current player: {player} | Actions left: {turn.actions_remaining}")
        print(
            f"Outbreaks: {gs.outbreak_count} | Infection rate: {gs.infection_rate} | "
            f"Player deck: {state.player_deck.remaining} | "
            f"Stations left: {gs.research_stations_remaining}"
        )
        print(self._color("=" * 72, self.DIM))

    def render_diseases(self, state: GameState) -> None:
        """Render cube supply and cure status per disease."""
        content = []
        for color, disease in state.ledger.diseases.items():
            status = "eradicated" if disease.eradicated else "cured" if disease.cured else "active"
            name = self._color(f"{color.value:7}", self.DISEASE_COLORS[color])
            content.append(f"{name} cubes left: {disease.cubes:2}  {status}")
        print(self._box("Diseases", content))

    def render_players(self, state: GameState) -> None:
        """Render every player's role, location and hand."""
        content = []
        for player in state.players:
            content.append(self._color(str(player), self.BOLD))
            cards = []
            for card in player.hand:
                if card.is_city:
                    cards.append(self._color(card.name, self.DISEASE_COLORS[card.color]))
                else:
                    cards.append(card.name)
            content.append("  " + (", ".join(cards) or "(no cards)"))
            if player.role is not None and player.role.stored_event is not None:
                content.append(f"  stored: {player.role.stored_event.name}")
        print(self._box("Players", content))

    def render_infected_cities(self, state: GameState) -> None:
        """Render the cities holding cubes, most infected first."""
        infected = sorted(
            (city for city in state.board if city.total_infection),
            key=lambda c: (-c.total_infection, c.name),
        )
        content = []
        for city in infected:
            cubes = " ".join(
                self._color(f"{color.value[0].upper()}{count}", self.DISEASE_COLORS[color])
                for color, count in city.infection.items() if count
            )
            station = " [station]" if city.research_station else ""
            content.append(f"{city.name:18} {cubes}{station}")
        print(self._box("Infected cities", content or ["(none)"]))

    def render_message(self, message: str) -> None:
        """Render a message to the user."""
        print(f"\n{message}")

    def render_error(self, error: str) -> None:
        """Render an error message."""
        print(self._color(f"\n[ERROR] {error}", "\033[91m"))

    def render_game_over(self, state: GameState) -> None:
        """Render the game over screen."""
        gs = state.global_state
        print("\n" + "=" * 72)
        print(self._color("GAME OVER".center(72), self.BOLD))
        print("=" * 72)
        if gs.victory:
            print(self._color("All four diseases are cured. You win!", self.BOLD))
        else:
            reason = gs.game_over_reason.value if gs.game_over_reason else "unknown"
            print(self._color(f"You lose: {reason}", self.BOLD))
        print(f"Turns played: {state.current_turn().number}, outbreaks: {gs.outbreak_count}")
        print("=" * 72)


# =============================================================================
# Action Prompter
# =============================================================================

@dataclass
class ActionChoice:
    """Represents a choice the player can make."""
    index: int
    description: str
    action: Action


class ActionPrompter(ABC):
    """Abstract base class for prompting player actions.

    The CLI prompter is provided as TextPrompter.
    """

    @abstractmethod
    def prompt_choice(
        self,
        message: str,
        choices: list[ActionChoice],
    ) -> Optional[ActionChoice]:
        """Prompt the player to make a choice.

        Args:
            message: The prompt message.
            choices: List of available choices.

        Returns:
            The selected choice, or None if the player quits.
        """
        pass


class TextPrompter(ActionPrompter):
    """CLI text-based action prompter."""

    def prompt_choice(
        self,
        message: str,
        choices: list[ActionChoice],
    ) -> Optional[ActionChoice]:
        """Prompt the player to make a choice."""
        print(f"\n{message}")
        print("-" * 50)

        for choice in choices:
            print(f"  {choice.index}. {choice.description}")
        print("  q. Quit")

        print()
        while True:
            try:
                raw = input("Enter choice: ").strip().lower()

                if raw == "q":
                    return None

                idx = int(raw)
                for choice in choices:
                    if choice.index == idx:
                        return choice

                print("Invalid choice. Please try again.")
            except ValueError:
                print("Invalid input. Please enter a number.")
            except (KeyboardInterrupt, EOFError):
                print("\nGame interrupted.")
                return None


class RandomPrompter(ActionPrompter):
    """Picks a uniformly random choice; for unattended games."""

    def __init__(self, seed: Optional[int] = None):
        self.rng = random.Random(seed)

    def prompt_choice(
        self,
        message: str,
        choices: list[ActionChoice],
    ) -> Optional[ActionChoice]:
        return self.rng.choice(choices) if choices else None


# =============================================================================
# Game Driver
# =============================================================================

class GameDriver:
    """Main driver for running an interactive game session.

    This class orchestrates the game loop and delegates to:
    - GameEngine for game logic
    - GameRenderer for display
    - ActionPrompter for user input
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        renderer: Optional[GameRenderer] = None,
        prompter: Optional[ActionPrompter] = None,
        map_path: Optional[Path] = None,
    ):
        """Initialize the game driver.

        Args:
            config: Session settings (default: 2 players, easy).
            renderer: The renderer to use (default: TextRenderer).
            prompter: The prompter to use (default: TextPrompter).
            map_path: If given, the final board is saved there as a PNG.
        """
        self.config = config or GameConfig()
        self.engine = GameEngine()
        self.renderer = renderer or TextRenderer()
        self.prompter = prompter or TextPrompter()
        self.map_path = map_path

    def run(self) -> GameState:
        """Run the main game loop until the game ends or the player quits."""
        self.engine.reset(config=self.config)
        self.renderer.render_message(
            f"Starting Pandemic with {self.config.num_players} players "
            f"({self.config.difficulty.value})"
        )

        while not self.engine.is_game_over():
            self.renderer.render_state(self.engine.state, self.engine.phase)
            if not self._take_step():
                self.renderer.render_message("Game abandoned.")
                break

        if self.engine.is_game_over():
            self.renderer.render_game_over(self.engine.state)

        if self.map_path is not None:
            self._save_map()

        return self.engine.state

    def _take_step(self) -> bool:
        """Prompt for one action and execute it. Returns False on quit."""
        choices = self._build_choices(self.engine.get_valid_actions())
        phase = self.engine.phase

        choice = self.prompter.prompt_choice(self._prompt_message(phase), choices)
        if choice is None:
            return False

        result = self.engine.step(choice.action)
        if not result.success:
            self.renderer.render_error(result.info.get("error", "Unknown error"))
        for city in result.info.get("epidemics", []):
            self.renderer.render_message(f"EPIDEMIC in {city}!")
        for city in result.info.get("outbreaks", []):
            self.renderer.render_message(f"Outbreak in {city}!")
        return True

    def _build_choices(self, actions: list[Action]) -> list[ActionChoice]:
        """Number the actions, turn steps first and events last."""
        def order(action: Action) -> int:
            return 1 if action.action_type == ActionType.PLAY_EVENT else 0

        ordered = sorted(actions, key=order)
        return [
            ActionChoice(idx, action.describe(), action)
            for idx, action in enumerate(ordered)
        ]

    def _prompt_message(self, phase: TurnPhase) -> str:
        state = self.engine.state
        if phase == TurnPhase.DISCARDING:
            player = state.overflowing_players()[0]
            return f"{player.name}: too many cards, choose one to discard"
        if phase == TurnPhase.FORECASTING:
            player = state.get_player(state.global_state.forecast_player)
            return f"{player.name}: choose the next card from the top of the infection deck"
        player = state.get_current_player()
        return f"{player.name}: choose an action"

    def _save_map(self) -> None:
        from data.map_vis import visualize_map

        state = self.engine.state
        visualize_map(
            state,
            title=f"Pandemic - turn {state.current_turn().number}",
            save_path=self.map_path,
            show=False,
        )
        self.renderer.render_message(f"Board saved to {self.map_path}")


# =============================================================================
# Entry Point
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Play a game of Pandemic in the terminal",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--players", type=int, default=2,
                        choices=range(MIN_PLAYERS, MAX_PLAYERS + 1),
                        help="Number of players")
    parser.add_argument("--difficulty", type=str, default=Difficulty.EASY.value,
                        choices=[d.value for d in Difficulty],
                        help="Number of epidemics: easy 4, medium 5, hard 6")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for every shuffle")
    parser.add_argument("--cities", type=Path, default=None,
                        help="Custom city table (JSON)")
    parser.add_argument("--map", type=Path, default=None,
                        help="Save the final board as a PNG")
    parser.add_argument("--random", action="store_true",
                        help="Pick random actions instead of prompting")
    parser.add_argument("--no-color", action="store_true",
                        help="Disable ANSI colors")
    parser.add_argument("--log-level", type=str, default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI driver."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = GameConfig(
        num_players=args.players,
        difficulty=Difficulty(args.difficulty),
        seed=args.seed,
        cities_path=args.cities,
    )
    prompter = RandomPrompter(args.seed) if args.random else TextPrompter()
    driver = GameDriver(
        config,
        renderer=TextRenderer(use_colors=not args.no_color),
        prompter=prompter,
        map_path=args.map,
    )

    try:
        state = driver.run()
    except KeyboardInterrupt:
        print("\n\nGame interrupted. Goodbye!")
        return 0

    logger.info(f"Session ended after {state.current_turn().number} turns: {state.global_state.game_over_reason}")
    return 0 if state.global_state.victory else 1


if __name__ == "__main__":
    sys.exit(main())
