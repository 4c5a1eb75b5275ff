from __future__ import annotations

from typing import Callable, Dict, List, Optional, Tuple

from matplotlib.artist import Artist
from matplotlib.axes import Axes
from matplotlib.patches import Patch, PathPatch
from matplotlib.path import Path
from matplotlib.widgets import SpanSelector

from .config import DEFAULT_CONFIG, EFFECT_COLORS, ViewConfig
from .layout import (
    Bin,
    TreeNode,
    build_effect_tree,
    histogram_bins,
    layout_tree,
    link_curve,
    pie_order,
    share_percent,
)
from .model import RecordStore, genre_counts, genre_effect_counts
from .selection import Brush, SelectionState, is_active

Scheduler = Callable[[int, Callable[[], None]], object]

TREE_WIDTH = 100.0


def element_alpha(state: SelectionState, genre: str, config: ViewConfig = DEFAULT_CONFIG) -> float:
    """Opacity for anything drawn on behalf of ``genre``."""
    return 1.0 if is_active(state, genre) else config.faded_alpha


# ---------------- Tooltip text ----------------

def bin_tooltip(b: Bin) -> str:
    return f"{b.x0:.1f}–{b.x1:.1f} hrs\nCount: {b.count}"


def slice_tooltip(genre: str, count: int, total: int) -> str:
    return f"{genre}\n{share_percent(count, total):.1f}%"


def leaf_tooltip(node: TreeNode) -> str:
    return f"{node.genre} → {node.effect}\nCount: {node.value}"


# ---------------- Shared helpers ----------------
class Fader:
    """Steps artist alphas towards their targets.

    With a scheduler (tk's ``after``) the change is spread over ``duration_ms``;
    without one it is applied at once. A newer fade supersedes a running one.
    """

    def __init__(self, redraw: Callable[[], None], schedule: Optional[Scheduler] = None,
                 duration_ms: int = DEFAULT_CONFIG.transition_ms,
                 steps: int = DEFAULT_CONFIG.transition_steps):
        self.redraw = redraw
        self.schedule = schedule
        self.duration_ms = duration_ms
        self.steps = max(1, steps)
        self._generation = 0

    def fade(self, targets: Dict[Artist, float], animate: bool = True) -> None:
        self._generation += 1
        if not animate or self.schedule is None or self.duration_ms <= 0 or self.steps == 1:
            for artist, alpha in targets.items():
                artist.set_alpha(alpha)
            self.redraw()
            return

        generation = self._generation
        start = {a: (a.get_alpha() if a.get_alpha() is not None else 1.0) for a in targets}
        interval = max(1, self.duration_ms // self.steps)

        def step(i: int) -> None:
            if generation != self._generation:
                return
            t = i / self.steps
            for artist, alpha in targets.items():
                artist.set_alpha(start[artist] + (alpha - start[artist]) * t)
            self.redraw()
            if i < self.steps:
                self.schedule(interval, lambda: step(i + 1))

        step(1)


class HoverTip:
    """A single floating annotation per axes."""

    def __init__(self, ax: Axes):
        self.ax = ax
        self.annotation = ax.annotate(
            "", xy=(0, 0), xytext=(10, 10), textcoords="offset points",
            bbox=dict(boxstyle="round", fc="#333333", ec="#888888"),
            color="white", fontsize=9, zorder=100,
        )
        self.annotation.set_visible(False)

    def show(self, x: float, y: float, text: str) -> None:
        self.annotation.xy = (x, y)
        self.annotation.set_text(text)
        self.annotation.set_visible(True)

    def hide(self) -> bool:
        """Hide the tip; returns True when it was visible."""
        was_visible = self.annotation.get_visible()
        self.annotation.set_visible(False)
        return was_visible


# ---------------- Histogram ----------------
class HistogramView:
    """Overview of hours per day; the source of brush events."""

    def __init__(self, ax: Axes, store: RecordStore, config: ViewConfig = DEFAULT_CONFIG):
        self.ax = ax
        self.store = store
        self.config = config
        self.bins: List[Bin] = []
        self.bars: list = []
        self.selector: Optional[SpanSelector] = None
        self._on_brush: Optional[Callable[[Brush], None]] = None

    def draw(self) -> None:
        self.bins = histogram_bins(self.store.hours, self.config.bin_count)
        container = self.ax.bar(
            [b.x0 for b in self.bins],
            [b.count for b in self.bins],
            width=[b.x1 - b.x0 for b in self.bins],
            align="edge",
            color=self.config.histogram_color,
            edgecolor="white",
            linewidth=1,
        )
        self.bars = list(container.patches)
        self.ax.set_xlabel("Hours per day")
        self.ax.set_ylabel("Count")
        self.ax.set_title("Listening hours")

    def bind_brush(self, callback: Callable[[Brush], None]) -> None:
        """Attach a horizontal brush; ``callback`` gets (lo, hi) or None when cleared."""
        self._on_brush = callback
        self.selector = SpanSelector(
            self.ax, self._on_select, "horizontal",
            useblit=False, props=dict(alpha=0.25, facecolor="tab:blue"),
            interactive=True,
        )

    def _on_select(self, xmin: float, xmax: float) -> None:
        if self._on_brush is None:
            return
        if xmax - xmin <= 0:
            self._on_brush(None)
        else:
            self._on_brush((xmin, xmax))

    def hover_text(self, event) -> Optional[str]:
        for bar, b in zip(self.bars, self.bins):
            contains, _ = bar.contains(event)
            if contains:
                return bin_tooltip(b)
        return None


# ---------------- Pie ----------------
class PieView:
    """Genre shares; the source of click events and a fade target."""

    def __init__(self, ax: Axes, store: RecordStore, palette: Dict[str, str],
                 config: ViewConfig = DEFAULT_CONFIG, fader: Optional[Fader] = None):
        self.ax = ax
        self.store = store
        self.palette = palette
        self.config = config
        self.fader = fader or Fader(ax.figure.canvas.draw_idle)
        self.counts: Dict[str, int] = {}
        self.total = 0
        self.wedges: Dict[str, Patch] = {}
        self._genre_by_wedge: Dict[Patch, str] = {}
        self._on_click: Optional[Callable[[str], None]] = None

    def draw(self) -> None:
        self.counts = genre_counts(self.store.records)
        self.total = sum(self.counts.values())
        ordered = pie_order(self.counts)
        edge_color, edge_width = self.config.normal_edge
        patches, _ = self.ax.pie(
            [c for _, c in ordered],
            colors=[self.palette[g] for g, _ in ordered],
            startangle=90,
            counterclock=False,
            wedgeprops=dict(edgecolor=edge_color, linewidth=edge_width),
        )
        for (genre, _), wedge in zip(ordered, patches):
            wedge.set_picker(True)
            self.wedges[genre] = wedge
            self._genre_by_wedge[wedge] = genre
        self.ax.axis("equal")
        self.ax.set_title("Favorite genre")

        handles = [Patch(facecolor=self.palette[g], label=g) for g in self.counts]
        self.ax.legend(handles=handles, loc="center left", bbox_to_anchor=(1.0, 0.5),
                       fontsize=8, frameon=False)

    def bind_click(self, callback: Callable[[str], None]) -> int:
        """Route wedge picks to ``callback``; returns the canvas connection id."""
        self._on_click = callback
        return self.ax.figure.canvas.mpl_connect("pick_event", self._on_pick)

    def _on_pick(self, event) -> None:
        genre = self._genre_by_wedge.get(event.artist)
        if genre is not None and self._on_click is not None:
            self._on_click(genre)

    def decorate(self, state: SelectionState, animate: bool = True) -> None:
        targets = {}
        for genre, wedge in self.wedges.items():
            pinned = genre == state.selected_genre
            edge_color, edge_width = self.config.pinned_edge if pinned else self.config.normal_edge
            wedge.set_edgecolor(edge_color)
            wedge.set_linewidth(edge_width)
            targets[wedge] = element_alpha(state, genre, self.config)
        self.fader.fade(targets, animate)

    def hover_text(self, event) -> Optional[str]:
        for genre, wedge in self.wedges.items():
            contains, _ = wedge.contains(event)
            if contains:
                return slice_tooltip(genre, self.counts[genre], self.total)
        return None


# ---------------- Dendrogram ----------------
class DendrogramView:
    """Genre -> music effect tree; a fade target."""

    def __init__(self, ax: Axes, store: RecordStore, palette: Dict[str, str],
                 config: ViewConfig = DEFAULT_CONFIG, fader: Optional[Fader] = None):
        self.ax = ax
        self.store = store
        self.palette = palette
        self.config = config
        self.fader = fader or Fader(ax.figure.canvas.draw_idle)
        self.root: Optional[TreeNode] = None
        self.height = 0.0
        # (node, [marker, label]) for every genre and leaf node
        self.node_artists: List[Tuple[TreeNode, List[Artist]]] = []
        self.links: List[PathPatch] = []
        self.root_artists: List[Artist] = []

    def node_color(self, node: TreeNode) -> str:
        if node.depth == 0:
            return self.config.root_color
        if node.depth == 1:
            return self.palette[node.genre]
        return EFFECT_COLORS.get(node.effect, "#cccccc")

    def draw(self) -> None:
        self.root = build_effect_tree(genre_effect_counts(self.store.records))
        self.height = layout_tree(self.root, TREE_WIDTH, self.config.row_height)

        for source, target in self.root.links():
            path = Path(link_curve(source, target), [Path.MOVETO, Path.CURVE4, Path.CURVE4, Path.CURVE4])
            patch = PathPatch(path, facecolor="none", edgecolor=self.config.link_color, linewidth=1, zorder=1)
            self.ax.add_patch(patch)
            self.links.append(patch)

        for node in self.root.descendants():
            marker = self.ax.plot(
                [node.x], [node.y], marker="o", markersize=8, linestyle="none",
                markerfacecolor=self.node_color(node), markeredgecolor="black", zorder=3,
            )[0]
            offset = 8 if node.is_leaf else -8
            label = self.ax.annotate(
                node.name, xy=(node.x, node.y), xytext=(offset, 0), textcoords="offset points",
                ha="left" if node.is_leaf else "right", va="center", fontsize=8,
            )
            if node.depth == 0:
                self.root_artists = [marker, label]
            else:
                self.node_artists.append((node, [marker, label]))

        self.ax.set_xlim(-TREE_WIDTH * 0.25, TREE_WIDTH * 1.3)
        pad = self.config.row_height
        self.ax.set_ylim(self.height + pad, -pad)
        self.ax.axis("off")
        self.ax.set_title("Genre → music effect")

    def decorate(self, state: SelectionState, animate: bool = True) -> None:
        targets = {}
        for node, artists in self.node_artists:
            alpha = element_alpha(state, node.genre, self.config)
            for artist in artists:
                targets[artist] = alpha
        self.fader.fade(targets, animate)

    def genre_alpha(self, genre: str) -> Optional[float]:
        """Current alpha of the depth-1 node for ``genre``."""
        for node, artists in self.node_artists:
            if node.depth == 1 and node.genre == genre:
                return artists[0].get_alpha()
        return None

    def hover_text(self, event) -> Optional[str]:
        for node, artists in self.node_artists:
            if not node.is_leaf:
                continue
            contains, _ = artists[0].contains(event)
            if contains:
                return leaf_tooltip(node)
        return None
