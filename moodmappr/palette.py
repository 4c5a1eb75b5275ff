from __future__ import annotations

from typing import Dict, Sequence

import matplotlib
from matplotlib.colors import to_hex


def build_palette(genres: Sequence[str], cmap_name: str = "turbo") -> Dict[str, str]:
    """Map each genre to a hex colour sampled evenly along a colormap.

    The genre list is sorted first, so the same dataset always gets the same
    colours.
    """
    ordered = sorted(set(genres))
    if not ordered:
        return {}
    cmap = matplotlib.colormaps[cmap_name]
    n = len(ordered)
    if n == 1:
        return {ordered[0]: to_hex(cmap(0.0))}
    return {g: to_hex(cmap(i / (n - 1))) for i, g in enumerate(ordered)}
