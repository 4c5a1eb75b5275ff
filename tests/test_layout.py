"""Tests for histogram binning, pie ordering and the dendrogram tree."""

import pytest

from moodmappr.layout import (
    build_effect_tree,
    histogram_bins,
    layout_tree,
    leaf_label,
    link_curve,
    pie_order,
    share_percent,
)
from moodmappr.model import genre_effect_counts


class TestHistogramBins:
    def test_fixed_bin_count_over_extent(self, rock_jazz_pop):
        bins = histogram_bins(rock_jazz_pop.hours, 20)
        assert len(bins) == 20
        assert bins[0].x0 == pytest.approx(0.5)
        assert bins[-1].x1 == pytest.approx(6.0)
        assert sum(b.count for b in bins) == len(rock_jazz_pop)

    def test_degenerate_extent_is_widened(self):
        bins = histogram_bins([2.0, 2.0, 2.0], 4)
        assert bins[0].x0 == pytest.approx(1.5)
        assert bins[-1].x1 == pytest.approx(2.5)
        assert sum(b.count for b in bins) == 3

    def test_no_values(self):
        assert histogram_bins([], 20) == []


class TestPie:
    def test_largest_first_ties_stable(self):
        counts = {"Pop": 2, "Rock": 3, "Jazz": 2}
        assert pie_order(counts) == [("Rock", 3), ("Pop", 2), ("Jazz", 2)]

    def test_share_percent(self):
        assert share_percent(1, 4) == 25.0
        assert share_percent(0, 0) == 0.0


class TestEffectTree:
    def test_three_leaves_per_genre(self, rock_jazz_pop):
        root = build_effect_tree(genre_effect_counts(rock_jazz_pop.records))
        assert root.name == "Genres"
        assert len(root.children) == 3
        for genre_node in root.children:
            assert genre_node.depth == 1
            assert genre_node.genre == genre_node.name
            assert len(genre_node.children) == 3
            assert all(leaf.genre == genre_node.genre for leaf in genre_node.children)

    def test_zero_counts_still_present(self, rock_jazz_pop):
        root = build_effect_tree(genre_effect_counts(rock_jazz_pop.records))
        rock = next(n for n in root.children if n.genre == "Rock")
        assert leaf_label("No effect", 0) in [leaf.name for leaf in rock.children]

    def test_siblings_sorted_by_value(self, rock_jazz_pop):
        root = build_effect_tree(genre_effect_counts(rock_jazz_pop.records))
        assert [n.name for n in root.children] == ["Rock", "Pop", "Jazz"]
        rock = root.children[0]
        assert [leaf.effect for leaf in rock.children] == ["Improve", "Worsen", "No effect"]
        assert root.value == len(rock_jazz_pop)

    def test_links_skip_root_parent(self, rock_jazz_pop):
        root = build_effect_tree(genre_effect_counts(rock_jazz_pop.records))
        assert len(root.links()) == 3 + 9


class TestLayoutTree:
    def test_positions(self, rock_jazz_pop):
        root = build_effect_tree(genre_effect_counts(rock_jazz_pop.records))
        height = layout_tree(root, width=100.0, row_height=30)
        leaves = root.leaves()
        assert height == 9 * 30
        assert leaves[0].y == pytest.approx(0.0)
        assert leaves[-1].y == pytest.approx(height)
        assert root.x == 0.0
        assert all(leaf.x == 100.0 for leaf in leaves)
        assert all(n.x == 50.0 for n in root.children)

    def test_cousins_spaced_wider_than_siblings(self, rock_jazz_pop):
        root = build_effect_tree(genre_effect_counts(rock_jazz_pop.records))
        layout_tree(root, width=100.0, row_height=30)
        leaves = root.leaves()
        sibling_gap = leaves[1].y - leaves[0].y
        cousin_gap = leaves[3].y - leaves[2].y
        assert cousin_gap == pytest.approx(2 * sibling_gap)

    def test_parent_between_children(self, rock_jazz_pop):
        root = build_effect_tree(genre_effect_counts(rock_jazz_pop.records))
        layout_tree(root, width=100.0, row_height=30)
        for node in root.children:
            assert node.y == pytest.approx((node.children[0].y + node.children[-1].y) / 2)

    def test_link_curve_is_horizontal_bezier(self, rock_jazz_pop):
        root = build_effect_tree(genre_effect_counts(rock_jazz_pop.records))
        layout_tree(root, width=100.0, row_height=30)
        child = root.children[0]
        pts = link_curve(root, child)
        assert pts[0] == (root.x, root.y)
        assert pts[-1] == (child.x, child.y)
        assert pts[1] == (25.0, root.y)
        assert pts[2] == (25.0, child.y)
