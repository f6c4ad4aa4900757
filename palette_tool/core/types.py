"""Shared types for palette-tool: ColorCount, ColorGroup, PaletteEntry, Technique, ImageInput, Report."""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from PIL import Image


@dataclass(frozen=True)
class ColorCount:
    """One distinct (r, g, b) triple and the number of pixels that carry it."""

    r: int
    g: int
    b: int
    count: int

    @property
    def rgb(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)


@dataclass(frozen=True)
class ColorGroup:
    """A leader colour plus every colour folded into it by the grouping pass."""

    r: int
    g: int
    b: int
    count: int  # leader count + all member counts
    merged_count: int = 0  # distinct colours folded in, leader excluded
    members: tuple[tuple[int, int, int], ...] = field(default=(), repr=False)

    @property
    def rgb(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)


@dataclass(frozen=True)
class PaletteEntry:
    """Presentation record for one colour or colour group."""

    hex: str  # '#RRGGBB', uppercase
    rgb: str  # 'rgb(r, g, b)'
    count: int
    percentage: str  # '12.34%'
    merged_colors: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Transport shape, as serialised to JSON clients."""
        return {
            'hex': self.hex,
            'rgb': self.rgb,
            'count': self.count,
            'percentage': self.percentage,
            'mergedColors': self.merged_colors,
        }


class Technique:
    """A self-registering analysis technique.

    Usage in a technique module:

        technique = Technique(name='palette', help='Extract the colour palette')

        @technique.run
        def run(images, report, args):
            ...
    """

    def __init__(self, name: str, help: str = ''):
        self.name = name
        self.help = help
        self._run_fn: Callable | None = None

    def run(self, fn: Callable) -> Callable:
        """Decorator to register the run function."""
        self._run_fn = fn
        return fn

    def execute(self, images: list[ImageInput], report: Report, args: Any) -> None:
        """Execute the technique's run function."""
        if self._run_fn is None:
            raise RuntimeError(f'Technique {self.name} has no run function')
        self._run_fn(images, report, args)


@dataclass
class ImageInput:
    """A decoded image ready for analysis.

    Histogram and palettes are cached so that several techniques in one run
    share a single pass over the pixels.
    """

    name: str
    path: str
    image: Image.Image
    stem: str = ''  # artefact file stem, unique within a run
    _histogram: list[ColorCount] | None = field(default=None, repr=False, compare=False)
    _palettes: dict[float, list[PaletteEntry]] = field(default_factory=dict, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.stem:
            self.stem = os.path.splitext(os.path.basename(self.name))[0]

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def total_pixels(self) -> int:
        return self.image.width * self.image.height

    def histogram(self) -> list[ColorCount]:
        """Exact colour counts, most frequent first."""
        if self._histogram is None:
            from palette_tool.core.histogram import build_histogram
            from palette_tool.core.image_io import to_pixel_buffer

            pixels, width, height = to_pixel_buffer(self.image)
            self._histogram = build_histogram(pixels, width, height)
        return self._histogram

    def palette(self, threshold: float) -> list[PaletteEntry]:
        """Palette entries for this image at the given merge threshold."""
        from palette_tool.core.grouping import check_threshold

        key = check_threshold(threshold)
        if key not in self._palettes:
            from palette_tool.core.analyze import palette_from_histogram

            self._palettes[key] = palette_from_histogram(self.histogram(), self.total_pixels, key)
        return self._palettes[key]


@dataclass
class Report:
    """Accumulates results from techniques for text/JSON output."""

    threshold: float = 0.0
    images: dict[str, dict[str, Any]] = field(default_factory=dict)
    pass_count: int = 0
    fail_count: int = 0

    def _entry(self, image_name: str) -> dict[str, Any]:
        if image_name not in self.images:
            self.images[image_name] = {'path': None, 'size': None, 'techniques': {}}
        return self.images[image_name]

    def add(self, image_name: str, technique_name: str, data: dict[str, Any]) -> None:
        """Add technique results for an image."""
        self._entry(image_name)['techniques'][technique_name] = data

    def set_source(self, image_name: str, path: str, size: tuple[int, int]) -> None:
        """Set the file path and (width, height) for an image in the report."""
        entry = self._entry(image_name)
        entry['path'] = path
        entry['size'] = list(size)

    def record_pass(self, image_name: str) -> None:
        self.pass_count += 1

    def record_fail(self, image_name: str) -> None:
        self.fail_count += 1
