"""Report builder: text, JSON and CSV output for palette-tool results."""

import csv
import io
import json
from collections.abc import Sequence
from typing import Any

from palette_tool.core.errors import ValidationError
from palette_tool.core.types import PaletteEntry, Report

TABLE_LIMIT = 100  # rows shown per image in text output
MAX_ENTRIES = 1000  # entries per image in JSON output

CSV_HEADER = ['Hex', 'RGB', 'Count', 'Percentage', 'Merged Colors']


def _palette_data(image_data: dict[str, Any]) -> dict[str, Any] | None:
    return image_data.get('techniques', {}).get('palette')


def format_text(report: Report, limit: int = TABLE_LIMIT) -> str:
    """Format report as human-readable text."""
    lines = [f'palette-tool: {len(report.images)} image(s), threshold {report.threshold:g}', '']

    for name, image_data in report.images.items():
        size = image_data.get('size')
        dim = f'[{size[0]}\u00d7{size[1]}]' if size else ''
        lines.append(f'\u2500\u2500 {name} {dim}')

        for tech_name, tech_data in image_data.get('techniques', {}).items():
            if tech_name == 'palette':
                lines.extend(_palette_lines(tech_data, limit))
            elif tech_name in ('csv', 'strip') and 'file' in tech_data:
                lines.append(f'  {tech_name}: {tech_data["file"]}')
            else:
                for k, v in tech_data.items():
                    lines.append(f'  {tech_name}.{k}: {v}')

        lines.append('')

    total = report.pass_count + report.fail_count
    if total > 0:
        lines.append(f'PASS {report.pass_count}/{total} checks  FAIL {report.fail_count}/{total} checks')
    return '\n'.join(lines)


def _palette_lines(data: dict[str, Any], limit: int) -> list[str]:
    entries: list[PaletteEntry] = data['entries']
    lines = [f'  colours: {data["distinct_colours"]} distinct, {len(entries)} group(s)']
    for e in entries[:limit]:
        merged = f'  +{e.merged_colors} merged' if e.merged_colors else ''
        lines.append(f'  {e.hex}  {e.rgb:<20} {e.count:>10}  {e.percentage:>7}{merged}')
    if len(entries) > limit:
        lines.append(f'  ... {len(entries) - limit} more (export all with: palette-tool csv)')

    for check in data.get('checks', []):
        mark = '\u2713' if check['pass'] else '\u2717'
        lines.append(f'  {check["name"]}: {check["detail"]}  {mark}')
    return lines


def format_json(report: Report, max_entries: int = MAX_ENTRIES) -> str:
    """Format report as JSON. Each image's colour list is cut to max_entries."""
    if max_entries < 0:
        raise ValidationError(f'max entries must be >= 0, got {max_entries}')
    obj: dict[str, Any] = {'threshold': report.threshold, 'images': []}

    for name, image_data in report.images.items():
        size = image_data.get('size') or [0, 0]
        image_obj: dict[str, Any] = {'filename': name, 'path': image_data.get('path')}
        extra: dict[str, Any] = {}

        for tech_name, tech_data in image_data.get('techniques', {}).items():
            if tech_name == 'palette':
                entries: list[PaletteEntry] = tech_data['entries']
                image_obj['totalPixels'] = size[0] * size[1]
                image_obj['distinctColors'] = tech_data['distinct_colours']
                image_obj['uniqueColorGroups'] = len(entries)
                image_obj['colors'] = [e.to_dict() for e in entries[:max_entries]]
                if tech_data.get('checks'):
                    extra['checks'] = tech_data['checks']
            else:
                extra[tech_name] = tech_data

        image_obj.update(extra)
        obj['images'].append(image_obj)

    obj['summary'] = {
        'total': report.pass_count + report.fail_count,
        'pass': report.pass_count,
        'fail': report.fail_count,
    }
    return json.dumps(obj, indent=2)


def format_csv(entries: Sequence[PaletteEntry]) -> str:
    """Full palette as CSV, BOM-prefixed so spreadsheet apps detect UTF-8."""
    buf = io.StringIO()
    buf.write('\ufeff')
    writer = csv.writer(buf, lineterminator='\n')
    writer.writerow(CSV_HEADER)
    for e in entries:
        writer.writerow([e.hex, e.rgb, e.count, e.percentage, e.merged_colors])
    return buf.getvalue()
