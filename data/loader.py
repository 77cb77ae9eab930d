"""City table loader for the Pandemic rules engine.

Loads and validates the city table from JSON files, converting it
into a CityGraph ready for use in the game.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from core.constants import Color
from core.board import City, CityGraph, make_edge_id


logger = logging.getLogger(__name__)


def resource_path(relative_path: str) -> Path:
    """Get the absolute path to a file bundled with the data package."""
    return Path(__file__).parent / relative_path


class CityLoadError(Exception):
    """Raised when city table loading or validation fails."""
    pass


class CityLoader:
    """Loads and validates city tables from JSON files."""

    # Expected shape of the standard world map
    EXPECTED_CITIES = 48
    EXPECTED_CITIES_PER_COLOR = 12

    def __init__(self, strict: bool = True):
        """Initialize the loader.

        Args:
            strict: If True, also require symmetric adjacency and the
                    standard 48-city, 12-per-color map. Set to False
                    for small custom maps.
        """
        self.strict = strict

    def load_from_file(self, file_path: str | Path) -> CityGraph:
        """Load a city table from a JSON file.

        Args:
            file_path: Path to the JSON city file.

        Returns:
            A CityGraph instance with the loaded topology.

        Raises:
            CityLoadError: If the file cannot be read or parsed.
            CityLoadError: If validation fails.
        """
        path = Path(file_path)

        if not path.exists():
            raise CityLoadError(f"City file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise CityLoadError(f"Invalid JSON in city file: {e}")
        except IOError as e:
            raise CityLoadError(f"Error reading city file: {e}")

        graph = self.load_from_dict(data)
        logger.debug(f"Loaded {len(graph)} cities from {path}")
        return graph

    def load_from_dict(self, data: dict[str, Any]) -> CityGraph:
        """Load a city table from a dictionary.

        Args:
            data: Dictionary with a 'cities' list.

        Returns:
            A CityGraph instance with the loaded topology.

        Raises:
            CityLoadError: If validation fails.
        """
        self._validate_structure(data)

        graph = CityGraph()
        for city_data in data["cities"]:
            city = self._create_city(city_data)
            if city.name in graph.cities:
                raise CityLoadError(f"Duplicate city: {city.name}")
            graph.cities[city.name] = city

        # Every adjacency must resolve to a known city
        for city in graph:
            seen: set[str] = set()
            for other in city.adjacent:
                if other not in graph.cities:
                    raise CityLoadError(
                        f"City {city.name} is adjacent to unknown city: {other}"
                    )
                if other == city.name:
                    raise CityLoadError(f"City {city.name} is adjacent to itself")
                if other in seen:
                    raise CityLoadError(f"City {city.name} lists {other} twice")
                seen.add(other)

        self._validate_graph(graph)

        return graph

    def _validate_structure(self, data: dict[str, Any]) -> None:
        """Validate the basic structure of the city data."""
        if not isinstance(data, dict):
            raise CityLoadError("City data must be a dictionary")

        if "cities" not in data:
            raise CityLoadError("City data missing 'cities' key")

        if not isinstance(data["cities"], list):
            raise CityLoadError("'cities' must be a list")

        if len(data["cities"]) == 0:
            raise CityLoadError("City table must have at least one city")

    def _create_city(self, city_data: dict[str, Any]) -> City:
        """Create a City from one table row."""
        required_fields = ["name", "coordinate", "color", "adjacent"]
        for field in required_fields:
            if field not in city_data:
                raise CityLoadError(f"City missing required field: {field}")

        name = city_data["name"]
        if not isinstance(name, str) or not name:
            raise CityLoadError(f"Invalid city name: {name!r}")

        try:
            color = Color(city_data["color"])
        except ValueError:
            raise CityLoadError(
                f"Invalid color '{city_data['color']}' for {name}. "
                f"Valid colors: {', '.join(c.value for c in Color)}"
            )

        coordinate = city_data["coordinate"]
        if not isinstance(coordinate, list) or len(coordinate) != 2:
            raise CityLoadError(f"Invalid coordinate format for {name}")

        adjacent = city_data["adjacent"]
        if not isinstance(adjacent, list):
            raise CityLoadError(f"'adjacent' must be a list for {name}")

        return City(
            name=name,
            color=color,
            coordinate=(float(coordinate[0]), float(coordinate[1])),
            adjacent=list(adjacent),
        )

    def _validate_graph(self, graph: CityGraph) -> None:
        """Validate the complete graph structure."""
        if not self.strict:
            return

        for city in graph:
            for other in city.adjacent:
                if city.name not in graph.cities[other].adjacent:
                    raise CityLoadError(
                        f"Adjacency is not symmetric: {city.name} -> {other}"
                    )

        if len(graph) != self.EXPECTED_CITIES:
            raise CityLoadError(
                f"Expected {self.EXPECTED_CITIES} cities, found {len(graph)}"
            )

        for color in Color:
            count = len(graph.cities_of_color(color))
            if count != self.EXPECTED_CITIES_PER_COLOR:
                raise CityLoadError(
                    f"Expected {self.EXPECTED_CITIES_PER_COLOR} {color.value} cities, "
                    f"found {count}"
                )


def load_cities(file_path: str | Path, strict: bool = True) -> CityGraph:
    """Convenience function to load a city table from a file.

    Args:
        file_path: Path to the JSON city file.
        strict: If True, enforce strict validation.

    Returns:
        A CityGraph instance with the loaded topology.
    """
    loader = CityLoader(strict=strict)
    return loader.load_from_file(file_path)


def load_default_cities() -> CityGraph:
    """Load the standard world map.

    Raises:
        CityLoadError: If the bundled city file is missing or invalid.
    """
    return load_cities(resource_path("cities.json"), strict=True)


def get_map_stats(graph: CityGraph) -> dict[str, Any]:
    """Get statistics about a city graph.

    Args:
        graph: The city graph to analyze.

    Returns:
        Dictionary with map statistics.
    """
    degrees = [len(city.adjacent) for city in graph]
    return {
        "num_cities": len(graph),
        "num_edges": len(graph.edges()),
        "cities_by_color": {
            color.value: len(graph.cities_of_color(color)) for color in Color
        },
        "max_degree": max(degrees) if degrees else 0,
        "min_degree": min(degrees) if degrees else 0,
        "research_stations": len(graph.research_station_cities()),
    }
