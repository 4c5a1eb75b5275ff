from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

# Survey columns (as they appear in the CSV header)
COL_HOURS = "Hours per day"
COL_ANXIETY = "Anxiety"
COL_DEPRESSION = "Depression"
COL_GENRE = "Fav genre"
COL_EFFECT = "Music effects"

REQUIRED_COLUMNS: Tuple[str, ...] = (COL_HOURS, COL_ANXIETY, COL_DEPRESSION, COL_GENRE, COL_EFFECT)

EFFECTS: Tuple[str, ...] = ("Improve", "No effect", "Worsen")

EFFECT_COLORS = {
    "Improve": "#2ca02c",
    "No effect": "#cccccc",
    "Worsen": "red",
}


@dataclass(frozen=True)
class ViewConfig:
    """Tunables shared by the three views."""
    bin_count: int = 20
    faded_alpha: float = 0.2
    transition_ms: int = 500
    transition_steps: int = 10
    histogram_color: str = "#69b3a2"
    link_color: str = "#555555"
    root_color: str = "#999999"
    row_height: int = 30
    pinned_edge: Tuple[str, float] = ("black", 3.0)
    normal_edge: Tuple[str, float] = ("white", 1.0)


DEFAULT_CONFIG = ViewConfig()
