"""City graph model for the Pandemic rules engine.

The board is an arena of cities keyed by name:
- Each city knows its neighbours by name, in a fixed insertion order
- Topology is immutable once loaded; only infection cubes and
  research stations change during play
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Iterator

from .constants import Color, MAX_CUBES_PER_CITY


# Type aliases for clarity
CityName = str
EdgeId = tuple[str, str]  # Canonical form: (min_name, max_name)


def make_edge_id(city_a: CityName, city_b: CityName) -> EdgeId:
    """Create a canonical edge ID from two city names.

    Edge IDs are always stored with the lexically smaller name first
    to ensure consistent lookups regardless of direction.
    """
    return (min(city_a, city_b), max(city_a, city_b))


def _empty_infection() -> dict[Color, int]:
    return {color: 0 for color in Color}


@dataclass
class City:
    """State of a single city on the board.

    Attributes:
        name: Unique name of the city.
        color: Base disease color of the city.
        coordinate: (latitude, longitude) pair, only used for rendering.
        adjacent: Names of neighbouring cities, in insertion order.
        infection: Disease cubes present, per color (0-3 each).
        research_station: Whether a research station stands here.
    """

    name: CityName
    color: Color
    coordinate: tuple[float, float] = (0.0, 0.0)
    adjacent: list[CityName] = field(default_factory=list)
    infection: dict[Color, int] = field(default_factory=_empty_infection)
    research_station: bool = False

    @property
    def total_infection(self) -> int:
        """Total number of cubes on this city, all colors combined."""
        return sum(self.infection.values())

    def cubes(self, color: Color) -> int:
        """Return the number of cubes of a color on this city."""
        return self.infection[color]

    def is_adjacent(self, other: CityName) -> bool:
        """Check if another city is a direct neighbour."""
        return other in self.adjacent

    def add_cubes(self, color: Color, amount: int) -> None:
        """Add cubes of a color.

        Raises:
            ValueError: If the city would hold more than 3 cubes of that color.
        """
        if self.infection[color] + amount > MAX_CUBES_PER_CITY:
            raise ValueError(
                f"{self.name} cannot hold more than {MAX_CUBES_PER_CITY} "
                f"{color.value} cubes"
            )
        self.infection[color] += amount

    def remove_cubes(self, color: Color, amount: int) -> None:
        """Remove cubes of a color.

        Raises:
            ValueError: If fewer cubes are present than requested.
        """
        if amount > self.infection[color]:
            raise ValueError(
                f"{self.name} has only {self.infection[color]} {color.value} cubes"
            )
        self.infection[color] -= amount

    def build_research_station(self) -> None:
        """Place a research station in this city.

        Raises:
            ValueError: If a research station already exists here.
        """
        if self.research_station:
            raise ValueError(f"{self.name} already has a research station")
        self.research_station = True


@dataclass
class CityGraph:
    """The complete board: an arena of cities addressed by name.

    Attributes:
        cities: Mapping from city name to its state, in table order.
    """

    cities: dict[CityName, City] = field(default_factory=dict)

    def __iter__(self) -> Iterator[City]:
        return iter(self.cities.values())

    def __len__(self) -> int:
        return len(self.cities)

    def __contains__(self, name: object) -> bool:
        return name in self.cities

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get_city(self, name: CityName) -> City:
        """Get a city by name.

        Raises:
            KeyError: If no city has that name.
        """
        if name not in self.cities:
            raise KeyError(f"Unknown city: {name}")
        return self.cities[name]

    def get_neighbors(self, name: CityName) -> list[City]:
        """Return the neighbouring cities of a city, in adjacency order."""
        return [self.cities[n] for n in self.get_city(name).adjacent]

    def names(self) -> list[CityName]:
        """Return all city names in table order."""
        return list(self.cities.keys())

    def cities_of_color(self, color: Color) -> list[City]:
        """Return all cities whose base color is the given color."""
        return [city for city in self.cities.values() if city.color == color]

    def research_station_cities(self) -> list[City]:
        """Return all cities holding a research station."""
        return [city for city in self.cities.values() if city.research_station]

    def cubes_on_board(self, color: Color) -> int:
        """Count the cubes of one color across all cities."""
        return sum(city.infection[color] for city in self.cities.values())

    def edges(self) -> list[EdgeId]:
        """Return the deduplicated set of adjacency edges, in discovery order."""
        seen: set[EdgeId] = set()
        result: list[EdgeId] = []
        for city in self.cities.values():
            for other in city.adjacent:
                edge_id = make_edge_id(city.name, other)
                if edge_id not in seen:
                    seen.add(edge_id)
                    result.append(edge_id)
        return result

    def clone(self) -> CityGraph:
        """Create a deep copy of the board."""
        return copy.deepcopy(self)
