"""Render each image's palette as a strip of colour chips.

Takes the top 50 palette entries and draws them left to right, each chip as
wide as its share of those entries' pixels (at least 1px). Saves to
<tmp_dir>/palette_<image stem>.png.

Uses the same threshold resolution as 'palette'.

Example:
    uv run palette-tool strip ./tmp photo.png --level 2
"""

import os

from PIL import Image, ImageDraw

from palette_tool.core.colour import hex_to_rgb
from palette_tool.core.types import ImageInput, PaletteEntry, Report, Technique

technique = Technique(
    name='strip',
    help='Draw the top palette entries as proportional colour chips. Save as PNG.',
)

STRIP_LIMIT = 50
STRIP_WIDTH = 800
STRIP_HEIGHT = 80


def chip_bounds(entries: list[PaletteEntry], width: int) -> list[tuple[int, int]]:
    """(x0, x1) per entry, x1 exclusive. Boundaries are rounded cumulative shares."""
    total = sum(e.count for e in entries)
    if total == 0:
        return []
    bounds = []
    running = 0
    x0 = 0
    for e in entries:
        running += e.count
        x1 = max(round(running / total * width), x0 + 1)
        bounds.append((x0, x1))
        x0 = x1
    return bounds


def render_strip(entries: list[PaletteEntry], width: int = STRIP_WIDTH, height: int = STRIP_HEIGHT) -> Image.Image:
    top = entries[:STRIP_LIMIT]
    bounds = chip_bounds(top, width)
    # Narrow chips can push the last boundary past width; grow to fit
    canvas_width = max(width, bounds[-1][1]) if bounds else width
    img = Image.new('RGB', (canvas_width, height), (255, 255, 255))
    draw = ImageDraw.Draw(img)
    for e, (x0, x1) in zip(top, bounds):
        draw.rectangle((x0, 0, x1 - 1, height - 1), fill=hex_to_rgb(e.hex))
    return img


@technique.run
def run(images: list[ImageInput], report: Report, args) -> None:
    threshold = float(getattr(args, 'threshold', 0.0) or 0.0)
    os.makedirs(args.tmp_dir, exist_ok=True)
    for image in images:
        entries = image.palette(threshold)
        path = os.path.join(args.tmp_dir, f'palette_{image.stem}.png')
        strip = render_strip(entries)
        strip.save(path)
        report.add(
            image.name,
            'strip',
            {
                'file': path,
                'chips': min(len(entries), STRIP_LIMIT),
            },
        )
