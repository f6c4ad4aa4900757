"""Run every technique, combine into a single report.

Runs: palette, csv, strip. Each image is scanned once; the histogram and
palette are shared across techniques.

Example:
    uv run palette-tool all ./tmp photo.png --level 2
    uv run palette-tool all ./tmp a.png b.png -t 25 --json
"""

from palette_tool.core.types import ImageInput, Report, Technique

technique = Technique(
    name='all',
    help='Run every technique (palette, csv, strip). Combine into a single report.',
)

SKIP = {'all'}


def _run_order(item: tuple) -> tuple:
    # palette first so its table leads the text report
    name, _tech = item
    return (name != 'palette', name)


@technique.run
def run(images: list[ImageInput], report: Report, args) -> None:
    from palette_tool.registry import all_techniques

    for name, tech in sorted(all_techniques().items(), key=_run_order):
        if name in SKIP:
            continue
        tech.execute(images, report, args)
