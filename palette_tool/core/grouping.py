"""Greedy leader-takes-neighbours grouping of a colour histogram.

Walks the histogram in rank order. The first colour not yet consumed becomes a
leader and absorbs every later unconsumed colour within `threshold` (RGB
Euclidean distance, inclusive). Groups are then re-sorted by merged count,
stable, so equal counts keep the order the pass produced them in.

This is a single deterministic pass, not clustering: the same histogram order
and threshold always yield the same leaders and the same members. Cost is
O(k^2) in the number of distinct colours; the distance scan per leader is
vectorised but assignments are identical to a scalar walk.
"""

import math
from collections.abc import Sequence

import numpy as np

from palette_tool.core.errors import ValidationError
from palette_tool.core.types import ColorCount, ColorGroup


def check_threshold(threshold: float) -> float:
    """Return threshold as float, or raise ValidationError if negative or NaN."""
    try:
        value = float(threshold)
    except (TypeError, ValueError):
        raise ValidationError(f'Threshold must be a number, got {threshold!r}') from None
    if math.isnan(value) or value < 0:
        raise ValidationError(f'Threshold must be >= 0, got {threshold!r}')
    return value


def group_colours(counts: Sequence[ColorCount], threshold: float) -> list[ColorGroup]:
    """Merge colours within `threshold` of a higher-ranked leader.

    `counts` must already be in histogram order (see build_histogram).
    threshold == 0 disables grouping: one group per colour, order unchanged.
    """
    threshold = check_threshold(threshold)

    if threshold == 0:
        return [ColorGroup(r=c.r, g=c.g, b=c.b, count=c.count) for c in counts]

    n = len(counts)
    if n == 0:
        return []

    rgb = np.array([(c.r, c.g, c.b) for c in counts], dtype=np.int64)
    sizes = np.array([c.count for c in counts], dtype=np.int64)
    consumed = np.zeros(n, dtype=bool)

    groups: list[ColorGroup] = []
    for i in range(n):
        if consumed[i]:
            continue
        consumed[i] = True

        # Unconsumed candidates after the leader, ascending index
        candidates = np.flatnonzero(~consumed[i + 1 :]) + (i + 1)
        if candidates.size:
            diff = rgb[candidates] - rgb[i]
            dist = np.sqrt((diff * diff).sum(axis=1))
            members = candidates[dist <= threshold]
            consumed[members] = True
        else:
            members = candidates

        leader = counts[i]
        groups.append(
            ColorGroup(
                r=leader.r,
                g=leader.g,
                b=leader.b,
                count=leader.count + int(sizes[members].sum()),
                merged_count=int(members.size),
                members=tuple(counts[j].rgb for j in members),
            )
        )

    # list.sort is stable: ties keep pass order
    groups.sort(key=lambda g: g.count, reverse=True)
    return groups
