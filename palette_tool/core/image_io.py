"""Image decoding with Pillow: file -> RGBA PixelBuffer + dimensions.

Size limits are enforced here, before the core runs, since grouping cost
grows with the square of the distinct colour count.
"""

import os

from PIL import Image, UnidentifiedImageError

from palette_tool.core.errors import ImageLoadError, ValidationError

MAX_FILE_SIZE = 10 * 1024 * 1024


def load_image(path: str, max_bytes: int = MAX_FILE_SIZE, max_pixels: int = 0) -> Image.Image:
    """Open and fully decode an image file.

    max_bytes = 0 or max_pixels = 0 disables that limit.
    """
    if not os.path.isfile(path):
        raise ImageLoadError(f'image not found: {path}')

    size = os.path.getsize(path)
    if max_bytes and size > max_bytes:
        raise ImageLoadError(f'image too large: {path} ({size} bytes, limit {max_bytes})')

    try:
        image = Image.open(path)
        image.load()
    except Image.DecompressionBombError as exc:
        raise ValidationError(f'image has too many pixels to decode: {path} ({exc})') from exc
    except (UnidentifiedImageError, OSError) as exc:
        raise ImageLoadError(f'cannot decode image: {path} ({exc})') from exc

    pixel_count = image.width * image.height
    if max_pixels and pixel_count > max_pixels:
        raise ValidationError(f'image has {pixel_count} pixels, limit {max_pixels}: {path}')

    return image


def to_pixel_buffer(image: Image.Image) -> tuple[bytes, int, int]:
    """Raw row-major RGBA bytes plus (width, height). Opaque alpha is added if missing."""
    if image.mode != 'RGBA':
        image = image.convert('RGBA')
    return image.tobytes(), image.width, image.height
