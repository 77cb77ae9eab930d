"""Read-only export of the board for display.

A MapSnapshot is a plain copy of what a map needs: for each city its
color, cube total, coordinate and research station flag, and the
deduplicated list of adjacency edges. Building one never touches the
game state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from core.board import CityGraph, CityName, EdgeId

if TYPE_CHECKING:
    from core.game_state import GameState


STATIC_MAP_BASE_URL = (
    "https://maps.googleapis.com/maps/api/staticmap"
    "?zoom=1&size=1200x1200&maptype=terrain"
)
RESEARCH_STATION_ICON = "http%3A%2F%2Fi.imgur.com%2FB5DUeSF.png"


@dataclass(frozen=True)
class CitySnapshot:
    """Display data for one city.

    Attributes:
        name: City name.
        color: Native disease color value.
        total_cubes: Cubes of every color in the city.
        coordinate: (latitude, longitude).
        research_station: Whether the city holds a station.
    """

    name: CityName
    color: str
    total_cubes: int
    coordinate: tuple[float, float]
    research_station: bool

    @property
    def location(self) -> str:
        """The coordinate as "lat,lng"."""
        return f"{self.coordinate[0]},{self.coordinate[1]}"


@dataclass(frozen=True)
class MapSnapshot:
    """Cities and edges of the board at one moment."""

    cities: dict[CityName, CitySnapshot] = field(default_factory=dict)
    edges: list[EdgeId] = field(default_factory=list)

    def get(self, name: CityName) -> CitySnapshot:
        return self.cities[name]

    def research_stations(self) -> list[CityName]:
        return [name for name, city in self.cities.items() if city.research_station]

    def total_cubes(self) -> int:
        return sum(city.total_cubes for city in self.cities.values())


def snapshot_board(board: CityGraph) -> MapSnapshot:
    """Copy the display data out of a board."""
    cities = {
        city.name: CitySnapshot(
            name=city.name,
            color=city.color.value,
            total_cubes=city.total_infection,
            coordinate=tuple(city.coordinate),
            research_station=city.research_station,
        )
        for city in board
    }
    return MapSnapshot(cities=cities, edges=board.edges())


def build_map_snapshot(state: GameState) -> MapSnapshot:
    """Copy the display data out of a game state."""
    return snapshot_board(state.board)


def static_map_url(snapshot: MapSnapshot) -> str:
    """Render a snapshot as a Google Static Maps URL.

    Each city gets a marker in its color labelled with its cube total,
    each station an extra icon marker, and each edge a single path.
    """
    url = STATIC_MAP_BASE_URL
    pending = list(snapshot.edges)
    for name, city in snapshot.cities.items():
        url += f"&markers=color:{city.color}|label:{city.total_cubes}|{city.location}"
        if city.research_station:
            url += f"&markers=icon:{RESEARCH_STATION_ICON}|{city.location}"
        for edge in [e for e in pending if name in e]:
            other = edge[1] if edge[0] == name else edge[0]
            url += f"&path=weight:1|{city.location}|{snapshot.get(other).location}"
            pending.remove(edge)
    return url
