"""Infection and outbreak resolver for the Pandemic rules engine.

Infecting a city places cubes of one color on it, drawn from the disease
ledger. A city can hold at most 3 cubes of a color; pushing it past 3
fills it up and triggers an outbreak instead, which infects every
neighbour with one cube. Outbreaks chain, but a single cascade never
outbreaks the same city twice.

Rules applied to every infection, in order:
1. An eradicated disease places no cubes.
2. A quarantine specialist in the city or next to it prevents infection.
3. Overflow outbreaks; otherwise the cubes are added.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from core.constants import (
    Capability,
    Color,
    GameOverReason,
    MAX_CUBES_PER_CITY,
    OUTBREAK_LIMIT,
)
from core.errors import GameOver

if TYPE_CHECKING:
    from core.board import City
    from core.cards import Card
    from core.game_state import GameState


logger = logging.getLogger(__name__)


@dataclass
class InfectionResult:
    """Result of one top-level infection, cascade included.

    Attributes:
        cubes_placed: Cubes added per city name.
        outbreaks: Cities that outbroke, in order.
        prevented: Cities where infection was blocked.
    """

    cubes_placed: dict[str, int] = field(default_factory=dict)
    outbreaks: list[str] = field(default_factory=list)
    prevented: list[str] = field(default_factory=list)

    @property
    def total_cubes(self) -> int:
        return sum(self.cubes_placed.values())

    def merge(self, other: InfectionResult) -> None:
        """Fold another result into this one."""
        for name, count in other.cubes_placed.items():
            self.cubes_placed[name] = self.cubes_placed.get(name, 0) + count
        self.outbreaks.extend(other.outbreaks)
        self.prevented.extend(other.prevented)


class InfectionResolver:
    """Places disease cubes and runs outbreak cascades."""

    def __init__(self, state: GameState):
        """Initialize the resolver with the game state.

        Args:
            state: The current game state.
        """
        self.state = state

    def infect(
        self,
        city_name: str,
        amount: int = 1,
        color: Optional[Color] = None,
    ) -> InfectionResult:
        """Infect a city, running any outbreak cascade to completion.

        Args:
            city_name: City to infect.
            amount: Cubes to place.
            color: Disease color; defaults to the city's base color.

        Returns:
            InfectionResult describing every cube placed.

        Raises:
            GameOver: If the supply runs out or the outbreak limit is passed.
        """
        city = self.state.board.get_city(city_name)
        result = InfectionResult()
        self._infect(city, amount, color or city.color, set(), result)
        return result

    def infect_from_card(self, card: Card, amount: int = 1) -> InfectionResult:
        """Discard an infection card and infect its city."""
        self.state.infection_deck.discard(card)
        return self.infect(card.city, amount)

    def run_infection_step(self) -> InfectionResult:
        """Draw as many infection cards as the infection rate and infect 1 cube each."""
        result = InfectionResult()
        for _ in range(self.state.global_state.infection_rate):
            card = self.state.infection_deck.draw()
            logger.debug(f"Infection card drawn: {card.name}")
            result.merge(self.infect_from_card(card, 1))
        return result

    # -------------------------------------------------------------------------
    # Prevention
    # -------------------------------------------------------------------------

    def is_prevented(self, city: City) -> bool:
        """Check whether a quarantine specialist protects this city."""
        for player in self.state.players:
            if player.has(Capability.PREVENT_INFECTION):
                if player.location == city.name or city.is_adjacent(player.location):
                    return True
        return False

    # -------------------------------------------------------------------------
    # Cascade
    # -------------------------------------------------------------------------

    def _infect(
        self,
        city: City,
        amount: int,
        color: Color,
        visited: set[str],
        result: InfectionResult,
    ) -> None:
        if self.state.ledger.is_eradicated(color):
            return

        if self.is_prevented(city):
            result.prevented.append(city.name)
            return

        current = city.cubes(color)
        if current + amount > MAX_CUBES_PER_CITY:
            fill = MAX_CUBES_PER_CITY - current
            if fill > 0:
                self._place(city, color, fill, result)
            self._outbreak(city, color, visited, result)
            return

        self._place(city, color, amount, result)

    def _place(self, city: City, color: Color, amount: int, result: InfectionResult) -> None:
        # Supply is checked before the board changes
        self.state.ledger.take_cubes(color, amount)
        city.add_cubes(color, amount)
        result.cubes_placed[city.name] = result.cubes_placed.get(city.name, 0) + amount

    def _outbreak(
        self,
        city: City,
        color: Color,
        visited: set[str],
        result: InfectionResult,
    ) -> None:
        if city.name in visited:
            return

        gs = self.state.global_state
        gs.outbreak_count += 1
        result.outbreaks.append(city.name)
        logger.info(f"Outbreak of {color.value} in {city.name} (outbreak {gs.outbreak_count})")
        if gs.outbreak_count > OUTBREAK_LIMIT:
            raise GameOver(
                GameOverReason.OUTBREAK_LIMIT,
                f"Outbreak limit passed at {city.name}",
            )

        visited.add(city.name)
        for neighbor in self.state.board.get_neighbors(city.name):
            self._infect(neighbor, 1, color, visited, result)
