"""Initial game setup logic for the Pandemic rules engine.

Handles the setup which occurs once at the beginning of each game:
1. Build the first research station in the start city
2. Deal one role to each player
4. Infect nine cities: three with 1 cube, three with 2, three with 3
4. Infect nine cities: three with 3 cubes, three with 2, three with 1

After setup completes, the first player's turn starts in the ACTING phase.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from core.constants import TurnPhase, INITIAL_INFECTION_CUBES, START_CITY
from core.player import Role
from core.turn import Turn

from .resolvers.infection import InfectionResolver
from .resolvers.stations import ResearchStationResolver

if TYPE_CHECKING:
    from core.game_state import GameState


logger = logging.getLogger(__name__)


@dataclass
class InitialInfection:
    """One city infected during setup.

    Attributes:
        city: City infected.
        cubes: Cubes requested for the city.
    """

    city: str
    cubes: int


@dataclass
class SetupResult:
    """Summary of what setup did.

    Attributes:
        start_city: City holding the first station and every pawn.
        roles: Role name per player, in seating order.
        hand_sizes: Starting hand size per player.
        infections: Cities infected, in draw order.
    """

    start_city: str
    roles: list[str] = field(default_factory=list)
    hand_sizes: list[int] = field(default_factory=list)
    infections: list[InitialInfection] = field(default_factory=list)


class SetupManager:
    """Runs the setup steps against a freshly created state."""

    def __init__(self, state: GameState, start_city: str = START_CITY):
        """Initialize the setup manager.

        Args:
            state: The game state to set up.
            start_city: City where pawns start.
        """
        self.state = state
        self.start_city = start_city
        self.result = SetupResult(start_city=start_city)

    def build_starting_station(self) -> None:
        """Place every pawn and the first research station in the start city."""
        for player in self.state.players:
            player.location = self.start_city
        ResearchStationResolver(self.state).build(self.start_city)

    def assign_roles(self) -> None:
        """Draw one role card per player from the shuffled role deck."""
        for player in self.state.players:
            card = self.state.role_deck.draw()
            player.role = Role(role_type=card.role)
            self.result.roles.append(player.role.name)
            logger.debug(f"{player.name} is the {player.role.name}")

    def deal_cards(self) -> None:
        """Deal starting hands and seed the player deck with epidemics."""
        self.state.player_deck.deal(self.state.players, self.state.global_state.difficulty)
        self.result.hand_sizes = [p.hand_size() for p in self.state.players]

    def infect_initial_cities(self) -> None:
        """Infect one city per entry of the initial infection schedule."""
        infection = InfectionResolver(self.state)
        for cubes in INITIAL_INFECTION_CUBES:
            card = self.state.infection_deck.draw()
            infection.infect_from_card(card, cubes)
            self.result.infections.append(InitialInfection(city=card.city, cubes=cubes))

    def start_first_turn(self) -> None:
        """Create the first turn for the first player."""
        self.state.turns.append(Turn(player_index=0, number=1))
        self.state.phase = TurnPhase.ACTING

    def run(self) -> SetupResult:
        """Run every setup step in order."""
        self.build_starting_station()
        self.assign_roles()
        self.deal_cards()
        self.infect_initial_cities()
        self.start_first_turn()
        logger.info(
            f"Game set up: {len(self.state.players)} players, "
            f"{self.state.global_state.difficulty.value}, roles {self.result.roles}"
        )
        return self.result


def initialize_game(state: GameState, start_city: str = START_CITY) -> SetupResult:
    """Set up a new game.

    Args:
        state: The game state to initialize (from GameState.create_initial_state).
        start_city: City where pawns start and the first station is built.

    Returns:
        A SetupResult describing the setup.
    """
    return SetupManager(state, start_city).run()
