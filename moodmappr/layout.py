from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .config import EFFECTS

Point = Tuple[float, float]


# ---------------- Histogram ----------------
@dataclass(frozen=True)
class Bin:
    x0: float
    x1: float
    count: int


def histogram_bins(values: Sequence[float], bin_count: int = 20) -> List[Bin]:
    """Fixed-width bins over the full extent of ``values``.

    A degenerate extent (every value equal) is widened by 0.5 on each side
    so the single bar still has a width.
    """
    if not len(values):
        return []
    lo, hi = float(min(values)), float(max(values))
    if lo == hi:
        lo, hi = lo - 0.5, hi + 0.5
    counts, edges = np.histogram(np.asarray(values, dtype=float), bins=bin_count, range=(lo, hi))
    return [Bin(float(edges[i]), float(edges[i + 1]), int(counts[i])) for i in range(len(counts))]


# ---------------- Pie ----------------

def pie_order(counts: Dict[str, int]) -> List[Tuple[str, int]]:
    """Wedges largest first; ties keep first-appearance order."""
    return sorted(counts.items(), key=lambda item: -item[1])


def share_percent(count: int, total: int) -> float:
    return (count / total) * 100 if total else 0.0


# ---------------- Dendrogram ----------------
@dataclass
class TreeNode:
    name: str
    depth: int
    value: int = 0
    genre: Optional[str] = None
    effect: Optional[str] = None
    children: List["TreeNode"] = field(default_factory=list)
    parent: Optional["TreeNode"] = field(default=None, repr=False)
    x: float = 0.0
    y: float = 0.0

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def descendants(self) -> List["TreeNode"]:
        """Pre-order walk, self first."""
        out = [self]
        for child in self.children:
            out.extend(child.descendants())
        return out

    def leaves(self) -> List["TreeNode"]:
        return [n for n in self.descendants() if n.is_leaf]

    def links(self) -> List[Tuple["TreeNode", "TreeNode"]]:
        return [(n.parent, n) for n in self.descendants() if n.parent is not None]


def leaf_label(effect: str, count: int) -> str:
    return f"{effect} ({count})"


def build_effect_tree(effect_counts: Dict[str, Dict[str, int]], root_name: str = "Genres") -> TreeNode:
    """Root -> genre -> one leaf per effect, siblings sorted by value (desc)."""
    root = TreeNode(root_name, depth=0)
    for genre, per_effect in effect_counts.items():
        node = TreeNode(genre, depth=1, genre=genre, parent=root)
        for eff in EFFECTS:
            count = per_effect.get(eff, 0)
            node.children.append(
                TreeNode(leaf_label(eff, count), depth=2, value=count, genre=genre, effect=eff, parent=node)
            )
        node.value = sum(c.value for c in node.children)
        node.children.sort(key=lambda n: -n.value)
        root.children.append(node)
    root.value = sum(c.value for c in root.children)
    root.children.sort(key=lambda n: -n.value)
    return root


def layout_tree(root: TreeNode, width: float, row_height: float) -> float:
    """Place nodes for a left-to-right tree; returns the total height used.

    ``x`` grows with depth, ``y`` with leaf order. Sibling leaves sit one row
    apart, cousins two; an inner node sits midway between its outer children.
    """
    leaves = root.leaves()
    if not leaves:
        return 0.0

    slot = 0.0
    prev: Optional[TreeNode] = None
    for leaf in leaves:
        if prev is not None:
            slot += 1.0 if leaf.parent is prev.parent else 2.0
        leaf.y = slot
        prev = leaf
    _center_inner(root)

    max_depth = max(n.depth for n in leaves)
    height = len(leaves) * row_height
    scale = height / slot if slot else 0.0
    for n in root.descendants():
        n.x = (n.depth / max_depth) * width if max_depth else 0.0
        n.y = n.y * scale if slot else height / 2
    return height


def _center_inner(node: TreeNode) -> None:
    if node.is_leaf:
        return
    for child in node.children:
        _center_inner(child)
    node.y = (node.children[0].y + node.children[-1].y) / 2


def link_curve(source: TreeNode, target: TreeNode) -> List[Point]:
    """Control points of a horizontal cubic curve from source to target."""
    mid = (source.x + target.x) / 2
    return [(source.x, source.y), (mid, source.y), (mid, target.y), (target.x, target.y)]
