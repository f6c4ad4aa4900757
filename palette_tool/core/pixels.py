"""PixelBuffer validation: raw RGBA bytes to an (N, 4) uint8 array."""

import numpy as np

from palette_tool.core.errors import ValidationError


def as_pixel_array(pixels, width: int, height: int) -> np.ndarray:
    """View a row-major RGBA buffer as an (N, 4) uint8 array.

    Accepts bytes, bytearray, memoryview or a uint8 numpy array. No copy is
    made for bytes-like input. Raises ValidationError when the length is not
    a multiple of 4 or does not match width * height * 4.
    """
    if width < 0 or height < 0:
        raise ValidationError(f'Dimensions must be non-negative, got {width}x{height}')

    if isinstance(pixels, np.ndarray):
        if pixels.dtype != np.uint8:
            raise ValidationError(f'Pixel array must be uint8, got {pixels.dtype}')
        flat = pixels.reshape(-1)
    else:
        flat = np.frombuffer(pixels, dtype=np.uint8)

    if flat.size % 4 != 0:
        raise ValidationError(f'Pixel buffer length {flat.size} is not a multiple of 4')
    expected = width * height * 4
    if flat.size != expected:
        raise ValidationError(f'Pixel buffer length {flat.size} does not match {width}x{height}x4 = {expected}')

    return flat.reshape(-1, 4)
