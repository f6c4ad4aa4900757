"""Tests for palette_tool.core.grouping: greedy leader-takes-neighbours merging."""

import math

import numpy as np
import pytest
from palette_tool.core.colour import rgb_distance
from palette_tool.core.errors import ValidationError
from palette_tool.core.grouping import check_threshold, group_colours
from palette_tool.core.histogram import build_histogram
from palette_tool.core.types import ColorCount


def _counts(*items: tuple[tuple[int, int, int], int]) -> list[ColorCount]:
    return [ColorCount(r=r, g=g, b=b, count=n) for (r, g, b), n in items]


def _noisy_histogram(seed: int = 42, size: int = 30, levels: int = 12) -> list[ColorCount]:
    """Histogram of a small random image with clustered channel values."""
    rng = np.random.default_rng(seed)
    rgb = rng.integers(0, levels, size=(size * size, 3)) * (256 // levels)
    pixels = np.concatenate([rgb, np.full((size * size, 1), 255)], axis=1).astype(np.uint8)
    return build_histogram(pixels.tobytes(), size, size)


def _scalar_reference(counts: list[ColorCount], threshold: float) -> list[tuple]:
    """Straightforward nested-loop version of the pass, for comparison."""
    consumed = [False] * len(counts)
    groups = []
    for i, leader in enumerate(counts):
        if consumed[i]:
            continue
        consumed[i] = True
        total, merged = leader.count, 0
        for j in range(i + 1, len(counts)):
            if consumed[j]:
                continue
            if rgb_distance(leader.rgb, counts[j].rgb) <= threshold:
                total += counts[j].count
                merged += 1
                consumed[j] = True
        groups.append((leader.rgb, total, merged))
    groups.sort(key=lambda g: g[1], reverse=True)
    return groups


class TestThresholdZero:
    def test_one_group_per_colour(self) -> None:
        counts = _counts(((0, 0, 0), 5), ((1, 1, 1), 3), ((2, 2, 2), 1))
        groups = group_colours(counts, 0)
        assert [(g.rgb, g.count, g.merged_count) for g in groups] == [
            ((0, 0, 0), 5, 0),
            ((1, 1, 1), 3, 0),
            ((2, 2, 2), 1, 0),
        ]

    def test_order_unchanged(self) -> None:
        # Not sorted on purpose: threshold 0 must not reorder
        counts = _counts(((9, 9, 9), 1), ((8, 8, 8), 7))
        assert [g.rgb for g in group_colours(counts, 0)] == [(9, 9, 9), (8, 8, 8)]

    def test_empty(self) -> None:
        assert group_colours([], 0) == []
        assert group_colours([], 50) == []


class TestGreedyPass:
    def test_leader_absorbs_neighbour(self) -> None:
        counts = _counts(((0, 0, 0), 2), ((10, 10, 10), 1), ((255, 255, 255), 1))
        groups = group_colours(counts, 20)
        assert [(g.rgb, g.count, g.merged_count) for g in groups] == [
            ((0, 0, 0), 3, 1),
            ((255, 255, 255), 1, 0),
        ]
        assert groups[0].members == ((10, 10, 10),)

    def test_distance_boundary_is_inclusive(self) -> None:
        counts = _counts(((0, 0, 0), 2), ((3, 4, 0), 1))
        assert len(group_colours(counts, 5)) == 1
        assert len(group_colours(counts, 4.999)) == 2

    def test_member_is_not_a_leader(self) -> None:
        # B is within range of A; C is within range of B but not of A.
        # B is consumed by A, so C must start its own group.
        counts = _counts(((0, 0, 0), 10), ((10, 0, 0), 5), ((20, 0, 0), 1))
        groups = group_colours(counts, 10)
        assert [(g.rgb, g.count, g.merged_count) for g in groups] == [
            ((0, 0, 0), 15, 1),
            ((20, 0, 0), 1, 0),
        ]

    def test_later_leader_takes_remaining(self) -> None:
        counts = _counts(((0, 0, 0), 10), ((100, 0, 0), 6), ((0, 0, 200), 4), ((105, 0, 0), 3))
        groups = group_colours(counts, 10)
        assert [(g.rgb, g.count, g.merged_count) for g in groups] == [
            ((0, 0, 0), 10, 0),
            ((100, 0, 0), 9, 1),
            ((0, 0, 200), 4, 0),
        ]

    def test_resort_by_merged_count(self) -> None:
        counts = _counts(
            ((0, 0, 0), 5),
            ((200, 200, 200), 4),
            ((201, 201, 201), 3),
            ((202, 202, 202), 2),
        )
        groups = group_colours(counts, 10)
        assert [g.rgb for g in groups] == [(200, 200, 200), (0, 0, 0)]
        assert groups[0].count == 9
        assert groups[0].merged_count == 2

    def test_resort_is_stable_for_equal_counts(self) -> None:
        # After merging both groups hold 4 pixels; pass order must be kept
        counts = _counts(
            ((0, 0, 0), 3),
            ((100, 100, 100), 2),
            ((100, 100, 101), 2),
            ((0, 0, 1), 1),
        )
        groups = group_colours(counts, 2)
        assert [(g.rgb, g.count) for g in groups] == [((0, 0, 0), 4), ((100, 100, 100), 4)]

    def test_members_in_absorb_order(self) -> None:
        counts = _counts(((50, 50, 50), 9), ((52, 50, 50), 4), ((40, 50, 50), 2), ((50, 51, 50), 1))
        groups = group_colours(counts, 15)
        assert groups[0].members == ((52, 50, 50), (40, 50, 50), (50, 51, 50))

    def test_single_colour(self) -> None:
        groups = group_colours(_counts(((7, 7, 7), 12)), 100)
        assert [(g.rgb, g.count, g.merged_count) for g in groups] == [((7, 7, 7), 12, 0)]

    def test_huge_threshold_merges_everything(self) -> None:
        counts = _noisy_histogram()
        groups = group_colours(counts, 500)
        assert len(groups) == 1
        assert groups[0].rgb == counts[0].rgb
        assert groups[0].merged_count == len(counts) - 1

    def test_fractional_threshold(self) -> None:
        # distance (1,1,1) = sqrt(3) ~ 1.732
        counts = _counts(((0, 0, 0), 2), ((1, 1, 1), 1))
        assert len(group_colours(counts, 1.73)) == 2
        assert len(group_colours(counts, 1.74)) == 1

    @pytest.mark.parametrize('threshold', [1, 15, 30, 45.5, 90])
    def test_matches_scalar_walk(self, threshold: float) -> None:
        counts = _noisy_histogram()
        groups = group_colours(counts, threshold)
        assert [(g.rgb, g.count, g.merged_count) for g in groups] == _scalar_reference(counts, threshold)


class TestProperties:
    @pytest.mark.parametrize('threshold', [0, 10, 30, 60, 120])
    def test_conservation(self, threshold: float) -> None:
        counts = _noisy_histogram()
        groups = group_colours(counts, threshold)
        assert sum(g.count for g in groups) == sum(c.count for c in counts)

    @pytest.mark.parametrize('threshold', [0, 10, 30, 60, 120])
    def test_partition(self, threshold: float) -> None:
        counts = _noisy_histogram()
        groups = group_colours(counts, threshold)
        seen = [g.rgb for g in groups] + [m for g in groups for m in g.members]
        assert len(seen) == len(counts)
        assert set(seen) == {c.rgb for c in counts}
        for g in groups:
            assert g.merged_count == len(g.members)

    @pytest.mark.parametrize('threshold', [10, 30, 60, 120])
    def test_distance_bound(self, threshold: float) -> None:
        for g in group_colours(_noisy_histogram(), threshold):
            for member in g.members:
                assert rgb_distance(g.rgb, member) <= threshold

    @pytest.mark.parametrize('threshold', [1, 10, 30, 60, 120])
    def test_group_count_between_extremes(self, threshold: float) -> None:
        counts = _noisy_histogram(seed=7)
        assert len(group_colours(counts, 450)) <= len(group_colours(counts, threshold)) <= len(counts)

    def test_group_count_non_increasing_on_a_line(self) -> None:
        counts = _counts(((0, 0, 0), 9), ((0, 8, 0), 5), ((0, 16, 0), 4), ((0, 30, 0), 2), ((0, 60, 0), 1))
        sizes = [len(group_colours(counts, t)) for t in (0, 4, 8, 14, 16, 30, 60)]
        assert sizes == [5, 5, 4, 3, 3, 2, 1]

    def test_greedy_group_count_can_grow(self) -> None:
        # Single greedy pass, not clustering: at 10 the leader steals B,
        # leaving C and D (about 12.7 apart) as separate leaders.
        counts = _counts(((0, 0, 0), 8), ((10, 0, 0), 4), ((10, 9, 0), 2), ((10, 0, 9), 1))
        assert len(group_colours(counts, 9.5)) == 2
        assert len(group_colours(counts, 10)) == 3

    def test_deterministic(self) -> None:
        counts = _noisy_histogram()
        assert group_colours(counts, 33) == group_colours(list(counts), 33)


class TestCheckThreshold:
    def test_zero_ok(self) -> None:
        assert check_threshold(0) == 0.0

    def test_int_to_float(self) -> None:
        assert check_threshold(15) == 15.0

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValidationError):
            check_threshold(-0.5)

    def test_nan_rejected(self) -> None:
        with pytest.raises(ValidationError):
            check_threshold(math.nan)

    def test_non_number_rejected(self) -> None:
        with pytest.raises(ValidationError):
            check_threshold('wide')

    def test_group_colours_rejects_negative(self) -> None:
        with pytest.raises(ValidationError):
            group_colours(_counts(((0, 0, 0), 1)), -1)

    def test_validation_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            check_threshold(-1)
