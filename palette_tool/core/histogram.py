"""Exact colour histogram of an RGBA pixel buffer.

Each pixel's r, g, b bytes are packed into one integer key (r<<16 | g<<8 | b);
alpha is ignored. Counts come back most frequent first, with equal counts kept
in the order their colour was first seen scanning the buffer row-major.
Grouping depends on that order, so it is part of the contract.
"""

import numpy as np

from palette_tool.core.pixels import as_pixel_array
from palette_tool.core.types import ColorCount


def build_histogram(pixels, width: int, height: int) -> list[ColorCount]:
    """Count every distinct (r, g, b) in the buffer.

    Returns [] for a zero-area image. Raises ValidationError for a buffer that
    does not match the dimensions.
    """
    arr = as_pixel_array(pixels, width, height)
    if arr.shape[0] == 0:
        return []

    rgb = arr[:, :3].astype(np.uint32)
    packed = (rgb[:, 0] << 16) | (rgb[:, 1] << 8) | rgb[:, 2]

    # first_seen is the buffer index of each key's first occurrence
    keys, first_seen, counts = np.unique(packed, return_index=True, return_counts=True)

    # lexsort: last key is primary -> count descending, then first seen ascending
    order = np.lexsort((first_seen, -counts.astype(np.int64)))

    return [
        ColorCount(
            r=int(keys[i] >> 16) & 0xFF,
            g=int(keys[i] >> 8) & 0xFF,
            b=int(keys[i]) & 0xFF,
            count=int(counts[i]),
        )
        for i in order
    ]
