"""Palette extraction entry point: histogram -> grouping -> formatting.

    >>> pixels = bytes([0, 0, 0, 255] * 2 + [10, 10, 10, 255] + [255, 255, 255, 255])
    >>> [(e.hex, e.count, e.percentage) for e in analyze_colours(pixels, 2, 2, 20)]
    [('#000000', 3, '75.00%'), ('#FFFFFF', 1, '25.00%')]

Stateless and free of I/O; safe to call concurrently on independent buffers.
"""

from collections.abc import Sequence

from palette_tool.core.formatter import format_palette
from palette_tool.core.grouping import check_threshold, group_colours
from palette_tool.core.histogram import build_histogram
from palette_tool.core.types import ColorCount, PaletteEntry


def palette_from_histogram(counts: Sequence[ColorCount], total_pixels: int, threshold: float) -> list[PaletteEntry]:
    """Group and format an already-built histogram."""
    groups = group_colours(counts, threshold)
    return format_palette(groups, total_pixels)


def analyze_colours(pixels, width: int, height: int, threshold: float) -> list[PaletteEntry]:
    """Ranked palette of an RGBA buffer.

    Raises ValidationError (before any work) for a negative threshold or a
    buffer whose length is not width * height * 4. A zero-area image returns [].
    """
    threshold = check_threshold(threshold)
    counts = build_histogram(pixels, width, height)
    return palette_from_histogram(counts, width * height, threshold)
