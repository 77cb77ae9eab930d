"""Script to generate map visualizations.

Run from the project root:
    python scripts/generate_map_vis.py
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from data.loader import load_default_cities, get_map_stats
from data.map_vis import visualize_map, visualize_default_map
from data.snapshot import build_map_snapshot, static_map_url
from engine.driver import RandomPrompter, GameDriver, TextRenderer
from core.config import GameConfig


class _QuietRenderer(TextRenderer):
    """Renderer that only reports the end of the game."""

    def render_state(self, state, phase):
        pass

    def render_message(self, message):
        pass


def generate_default_map_vis():
    """Generate visualization of the world map before setup."""
    print("Loading default map...")
    board = load_default_cities()

    stats = get_map_stats(board)
    print(f"Map has {stats['num_cities']} cities and {stats['num_edges']} routes")
    print(f"Cities by color: {stats['cities_by_color']}")

    output_path = project_root / "output" / "world_map.png"
    output_path.parent.mkdir(exist_ok=True)

    print(f"Generating visualization -> {output_path}")
    fig = visualize_default_map(save_path=output_path, show=False)
    print("Done!")
    return fig


def generate_late_game_vis(seed: int = 7):
    """Play a random game to the end and draw the final board."""
    print(f"\nPlaying a random 4-player game (seed {seed})...")
    driver = GameDriver(
        GameConfig(num_players=4, seed=seed),
        renderer=_QuietRenderer(use_colors=False),
        prompter=RandomPrompter(seed),
    )
    state = driver.run()

    output_path = project_root / "output" / "final_board.png"
    output_path.parent.mkdir(exist_ok=True)

    print(f"Generating visualization -> {output_path}")
    fig = visualize_map(
        state,
        title=f"Pandemic - Final Board (turn {state.current_turn().number})",
        save_path=output_path,
        show=False,
    )

    url_path = project_root / "output" / "final_board_url.txt"
    url_path.write_text(static_map_url(build_map_snapshot(state)) + "\n")
    print(f"Static map URL -> {url_path}")
    print("Done!")
    return fig


if __name__ == "__main__":
    import matplotlib
    matplotlib.use("Agg")  # Non-interactive backend

    generate_default_map_vis()
    generate_late_game_vis()

    print("\nVisualizations saved to output/ directory")
