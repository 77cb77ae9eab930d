"""Data loading, export and visualization utilities for the Pandemic rules engine."""

from .loader import (
    CityLoader,
    CityLoadError,
    load_cities,
    load_default_cities,
    get_map_stats,
)

from .snapshot import (
    CitySnapshot,
    MapSnapshot,
    snapshot_board,
    build_map_snapshot,
    static_map_url,
)

from .map_vis import (
    MapVisualizer,
    visualize_map,
    visualize_default_map,
)

__all__ = [
    # Loader
    "CityLoader",
    "CityLoadError",
    "load_cities",
    "load_default_cities",
    "get_map_stats",
    # Snapshot
    "CitySnapshot",
    "MapSnapshot",
    "snapshot_board",
    "build_map_snapshot",
    "static_map_url",
    # Visualization
    "MapVisualizer",
    "visualize_map",
    "visualize_default_map",
]
