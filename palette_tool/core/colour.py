"""Colour conversions and RGB Euclidean distance."""

import math

RGB = tuple[int, int, int]


def hex_to_rgb(hex_str: str) -> RGB:
    """Parse '#rrggbb' or '#rgb' (hash optional, any case).

    Raises ValueError for anything else.
    """
    h = hex_str.strip().lstrip('#')
    if len(h) == 3:
        h = ''.join(c * 2 for c in h)
    if len(h) != 6:
        raise ValueError(f'Not a hex colour: {hex_str!r}')
    try:
        return (int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16))
    except ValueError:
        raise ValueError(f'Not a hex colour: {hex_str!r}') from None


def rgb_to_hex(r: int, g: int, b: int) -> str:
    return f'#{r:02X}{g:02X}{b:02X}'


def rgb_text(r: int, g: int, b: int) -> str:
    return f'rgb({r}, {g}, {b})'


def rgb_distance(a: RGB, b: RGB) -> float:
    """Unweighted Euclidean distance in RGB space. Inputs are cast to int, so uint8 never wraps."""
    dr = int(a[0]) - int(b[0])
    dg = int(a[1]) - int(b[1])
    db = int(a[2]) - int(b[2])
    return math.sqrt(dr * dr + dg * dg + db * db)
