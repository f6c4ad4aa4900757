"""Error types raised by palette-tool.

Every error the tool raises on purpose derives from PaletteError, so the CLI
can report it with a single handler.
"""


class PaletteError(Exception):
    """Base class for palette-tool errors."""


class ValidationError(PaletteError, ValueError):
    """Input rejected before any computation: bad threshold, buffer or limits."""


class ImageLoadError(PaletteError):
    """Image file missing, oversize, or not decodable."""
