"""Ranked colour palette per image: exact counts, optionally merged by distance.

Counts every distinct RGB colour (alpha ignored). With a threshold above 0,
walks the colours from most to least frequent; each colour not yet taken
becomes a group leader and absorbs every less frequent colour within the
threshold (RGB Euclidean distance). Groups are ranked by merged pixel count.

Threshold: --threshold T, or --level L (0-10 slider scale, T = L * 15),
else PALETTE_TOOL_THRESHOLD, else 0 (exact colours only).

Checks (optional, recorded as pass/fail; exit status 1 on any failure):
  --fail-on-groups N     more than N colour groups fails the image
  --expect-dominant HEX  top entry farther than 20 from HEX fails the image

Example:
    uv run palette-tool palette ./tmp photo.png --level 2
    uv run palette-tool palette ./tmp logo.png -t 30 --expect-dominant '#ffffff' --json
"""

from palette_tool.core.colour import hex_to_rgb, rgb_distance
from palette_tool.core.types import ImageInput, PaletteEntry, Report, Technique

technique = Technique(
    name='palette',
    help='Ranked colour palette per image. Merge colours within --threshold.',
)

DOMINANT_TOLERANCE = 20.0


def _check_groups(entries: list[PaletteEntry], max_groups: int) -> dict:
    return {
        'name': 'groups',
        'detail': f'{len(entries)} <= {max_groups}',
        'pass': len(entries) <= max_groups,
    }


def _check_dominant(entries: list[PaletteEntry], expected: str) -> dict:
    exp_rgb = hex_to_rgb(expected)
    if not entries:
        return {'name': 'dominant', 'detail': f'expected {expected}, image is empty', 'pass': False}
    top = entries[0]
    dist = rgb_distance(exp_rgb, hex_to_rgb(top.hex))
    return {
        'name': 'dominant',
        'detail': f'expected {expected}  got {top.hex}  Δ={dist:.1f}',
        'pass': dist <= DOMINANT_TOLERANCE,
        'distance': round(dist, 1),
    }


@technique.run
def run(images: list[ImageInput], report: Report, args) -> None:
    threshold = float(getattr(args, 'threshold', 0.0) or 0.0)
    max_groups = getattr(args, 'fail_on_groups', None)
    expected = getattr(args, 'expect_dominant', None)

    for image in images:
        entries = image.palette(threshold)
        data: dict = {
            'threshold': threshold,
            'total_pixels': image.total_pixels,
            'distinct_colours': len(image.histogram()),
            'entries': entries,
        }

        checks = []
        if max_groups is not None:
            checks.append(_check_groups(entries, max_groups))
        if expected:
            checks.append(_check_dominant(entries, expected))
        for check in checks:
            if check['pass']:
                report.record_pass(image.name)
            else:
                report.record_fail(image.name)
        if checks:
            data['checks'] = checks

        report.add(image.name, 'palette', data)
