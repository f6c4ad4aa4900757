"""Project colour groups into presentation-ready palette entries."""

from collections.abc import Sequence

from palette_tool.core.colour import rgb_text, rgb_to_hex
from palette_tool.core.types import ColorGroup, PaletteEntry


def format_percentage(count: int, total_pixels: int) -> str:
    """'12.34%' share of total_pixels. A zero-area image gives '0.00%'."""
    if total_pixels == 0:
        return '0.00%'
    return f'{(count / total_pixels) * 100:.2f}%'


def format_palette(groups: Sequence[ColorGroup], total_pixels: int) -> list[PaletteEntry]:
    """One PaletteEntry per group, same order."""
    return [
        PaletteEntry(
            hex=rgb_to_hex(g.r, g.g, g.b),
            rgb=rgb_text(g.r, g.g, g.b),
            count=g.count,
            percentage=format_percentage(g.count, total_pixels),
            merged_colors=g.merged_count,
        )
        for g in groups
    ]
