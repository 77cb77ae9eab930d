"""Map visualization for the Pandemic board using NetworkX and matplotlib.

Provides visualization of:
- City positions (longitude, latitude) and adjacency routes
- Native disease color of each city
- Cube totals per city
- Research stations
- Pawn locations, when drawn from a game state
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Any, TYPE_CHECKING

import matplotlib.pyplot as plt
import matplotlib.patches as mpatches
import networkx as nx

from core.board import CityGraph, CityName
from core.constants import Color

from .snapshot import MapSnapshot, snapshot_board, build_map_snapshot

if TYPE_CHECKING:
    from core.game_state import GameState


# Color schemes
DISEASE_COLORS = {
    Color.RED.value: "#E63946",
    Color.BLUE.value: "#457B9D",
    Color.YELLOW.value: "#E9C46A",
    Color.BLACK.value: "#333333",
}

PAWN_COLORS = [
    "#2A9D8F",  # Teal
    "#9B5DE5",  # Purple
    "#F15BB5",  # Pink
    "#00BBF9",  # Cyan
]

STATION_COLOR = "#FFFFFF"

# Routes longer than this wrap around the Pacific and are not drawn
MAX_DRAWN_LONGITUDE_SPAN = 180.0


class MapVisualizer:
    """Visualizes a Pandemic board using NetworkX and matplotlib."""

    def __init__(
        self,
        snapshot: MapSnapshot,
        pawns: Optional[dict[CityName, list[int]]] = None,
        figsize: tuple[int, int] = (16, 9),
        node_size: int = 220,
        font_size: int = 6,
    ):
        """Initialize the visualizer.

        Args:
            snapshot: The map data to draw.
            pawns: Optional player ids per city.
            figsize: Figure size as (width, height).
            node_size: Base size for city nodes.
            font_size: Font size for labels.
        """
        self.snapshot = snapshot
        self.pawns = pawns or {}
        self.figsize = figsize
        self.node_size = node_size
        self.font_size = font_size
        self._graph: Optional[nx.Graph] = None

    @classmethod
    def from_board(cls, board: CityGraph, **kwargs: Any) -> MapVisualizer:
        return cls(snapshot_board(board), **kwargs)

    @classmethod
    def from_state(cls, state: GameState, **kwargs: Any) -> MapVisualizer:
        pawns: dict[CityName, list[int]] = {}
        for player in state.players:
            pawns.setdefault(player.location, []).append(player.player_id)
        return cls(build_map_snapshot(state), pawns=pawns, **kwargs)

    def _build_networkx_graph(self) -> nx.Graph:
        """Convert the snapshot to a NetworkX graph."""
        G = nx.Graph()

        for name, city in self.snapshot.cities.items():
            lat, lng = city.coordinate
            G.add_node(
                name,
                pos=(lng, lat),
                color=city.color,
                cubes=city.total_cubes,
                research_station=city.research_station,
            )

        for a, b in self.snapshot.edges:
            G.add_edge(a, b)

        return G

    def _drawn_edges(self, G: nx.Graph, pos: dict) -> list[tuple[str, str]]:
        """Edges short enough to draw as straight lines on the flat map."""
        return [
            (u, v) for u, v in G.edges()
            if abs(pos[u][0] - pos[v][0]) <= MAX_DRAWN_LONGITUDE_SPAN
        ]

    def _draw_cubes(self, ax: plt.Axes, G: nx.Graph, pos: dict) -> None:
        """Annotate infected cities with their cube total."""
        for name in G.nodes():
            cubes = G.nodes[name]["cubes"]
            if not cubes:
                continue
            x, y = pos[name]
            ax.annotate(
                str(cubes),
                (x, y + 3),
                fontsize=self.font_size + 1,
                fontweight="bold",
                ha="center",
                va="bottom",
                color="#8B0000",
                bbox=dict(
                    boxstyle="round,pad=0.2",
                    facecolor="#FFEEEE",
                    edgecolor="#8B0000",
                    linewidth=1,
                ),
                zorder=6,
            )

    def _draw_pawns(self, ax: plt.Axes, pos: dict) -> None:
        """Draw one small marker per pawn below its city."""
        for name, player_ids in self.pawns.items():
            if name not in pos:
                continue
            x, y = pos[name]
            for i, player_id in enumerate(player_ids):
                offset = (i - (len(player_ids) - 1) / 2) * 2.5
                ax.scatter(
                    [x + offset], [y - 3.5],
                    marker="v",
                    s=60,
                    c=PAWN_COLORS[player_id % len(PAWN_COLORS)],
                    edgecolors="black",
                    linewidths=0.8,
                    zorder=7,
                )

    def visualize(
        self,
        title: str = "Pandemic Board",
        show_labels: bool = True,
        show_legend: bool = True,
        save_path: Optional[str | Path] = None,
        show: bool = True,
    ) -> plt.Figure:
        """Visualize the map.

        Args:
            title: Title for the figure.
            show_labels: Whether to show city names.
            show_legend: Whether to show the legend.
            save_path: If provided, save the figure to this path.
            show: Whether to display the figure.

        Returns:
            The matplotlib Figure object.
        """
        G = self._build_networkx_graph()
        self._graph = G
        pos = nx.get_node_attributes(G, "pos")

        fig, ax = plt.subplots(figsize=self.figsize)
        ax.set_title(title, fontsize=14, fontweight="bold")

        nx.draw_networkx_edges(
            G, pos,
            edgelist=self._drawn_edges(G, pos),
            edge_color="#CCCCCC",
            width=1.2,
            ax=ax,
        )

        nx.draw_networkx_nodes(
            G, pos,
            node_color=[DISEASE_COLORS[G.nodes[n]["color"]] for n in G.nodes()],
            edgecolors=[
                STATION_COLOR if G.nodes[n]["research_station"] else "#000000"
                for n in G.nodes()
            ],
            linewidths=[3 if G.nodes[n]["research_station"] else 1 for n in G.nodes()],
            node_size=self.node_size,
            ax=ax,
        )

        if show_labels:
            nx.draw_networkx_labels(
                G,
                {n: (x, y - 2) for n, (x, y) in pos.items()},
                font_size=self.font_size,
                verticalalignment="top",
                ax=ax,
            )

        self._draw_cubes(ax, G, pos)
        self._draw_pawns(ax, pos)

        if show_legend:
            self._draw_legend(ax)

        ax.axis("off")
        plt.tight_layout()

        if save_path:
            fig.savefig(save_path, dpi=150, bbox_inches="tight")

        if show:
            plt.show()

        return fig

    def _draw_legend(self, ax: plt.Axes) -> None:
        """Draw the legend."""
        legend_elements = [
            mpatches.Patch(facecolor=color, edgecolor="black", label=f"{name.title()} disease")
            for name, color in DISEASE_COLORS.items()
        ]
        legend_elements.append(
            plt.Line2D([0], [0], marker="o", color="w", markerfacecolor="#999999",
                       markeredgecolor=STATION_COLOR, markeredgewidth=3,
                       markersize=10, label="Research station")
        )
        for i, color in enumerate(PAWN_COLORS):
            legend_elements.append(
                plt.Line2D([0], [0], marker="v", color="w", markerfacecolor=color,
                           markeredgecolor="black", markersize=8, label=f"Player {i}")
            )

        ax.legend(
            handles=legend_elements,
            loc="lower left",
            fontsize=8,
        )


def visualize_map(
    state: GameState,
    title: str = "Pandemic Board",
    save_path: Optional[str | Path] = None,
    show: bool = True,
    **kwargs: Any,
) -> plt.Figure:
    """Convenience function to visualize a game in progress.

    Args:
        state: The game state to draw.
        title: Title for the figure.
        save_path: If provided, save the figure to this path.
        show: Whether to display the figure.
        **kwargs: Additional arguments passed to MapVisualizer.visualize()

    Returns:
        The matplotlib Figure object.
    """
    visualizer = MapVisualizer.from_state(state)
    return visualizer.visualize(title=title, save_path=save_path, show=show, **kwargs)


def visualize_default_map(
    save_path: Optional[str | Path] = None,
    show: bool = True,
) -> plt.Figure:
    """Load and visualize the bundled world map."""
    from data.loader import load_default_cities

    visualizer = MapVisualizer.from_board(load_default_cities())
    return visualizer.visualize(
        title="Pandemic World Map",
        save_path=save_path,
        show=show,
    )
