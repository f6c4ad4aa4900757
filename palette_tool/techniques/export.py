"""Export the full palette of each image as CSV.

Writes <tmp_dir>/palette_<image stem>.csv (palette_<stem>_2.csv and so on when
images in one run share a stem) with columns
Hex, RGB, Count, Percentage, Merged Colors. Unlike --json output, the CSV is
never truncated: every colour group is written. The file starts with a UTF-8
BOM so spreadsheet apps pick the right encoding.

Uses the same threshold resolution as 'palette'.

Example:
    uv run palette-tool csv ./tmp photo.png --level 3
"""

import os

from palette_tool.core.report import format_csv
from palette_tool.core.types import ImageInput, Report, Technique

technique = Technique(
    name='csv',
    help='Write the full (untruncated) palette of each image to <tmp_dir>/palette_<name>.csv.',
)


def csv_path(tmp_dir: str, stem: str) -> str:
    return os.path.join(tmp_dir, f'palette_{stem}.csv')


@technique.run
def run(images: list[ImageInput], report: Report, args) -> None:
    threshold = float(getattr(args, 'threshold', 0.0) or 0.0)
    os.makedirs(args.tmp_dir, exist_ok=True)
    for image in images:
        entries = image.palette(threshold)
        path = csv_path(args.tmp_dir, image.stem)
        with open(path, 'w', encoding='utf-8', newline='') as f:
            f.write(format_csv(entries))
        report.add(image.name, 'csv', {'file': path, 'rows': len(entries)})
