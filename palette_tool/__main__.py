"""palette-tool: dominant colour palettes from images.

Usage: uv run palette-tool <technique> <tmp_dir> <image>... [options]

Techniques are auto-discovered from palette_tool/techniques/.
Each technique module's docstring is its documentation.
Run `palette-tool help <technique>` for full module docs.

Environment variables / .env loading:
  OS environment variables are always used first.
  If a variable is not set, palette-tool looks for a .env file starting from
  the current directory and walking up, stopping at the nearest .git boundary.
  Use --env-file to override the .env location explicitly.
"""

import argparse
import os
import sys

from palette_tool import registry
from palette_tool.core.colour import hex_to_rgb
from palette_tool.core.config import Settings, load_env
from palette_tool.core.errors import PaletteError, ValidationError
from palette_tool.core.image_io import load_image
from palette_tool.core.report import format_json, format_text
from palette_tool.core.types import ImageInput, Report

LEVEL_STEP = 15  # --level 0..10 maps to threshold 0..150


def _short_doc(name: str) -> str:
    doc = (registry.module_for(name).__doc__ or '').strip()
    return doc.splitlines()[0] if doc else registry.get(name).help


def _build_parser() -> argparse.ArgumentParser:
    techniques = registry.all_techniques()

    epilog = (
        'Examples:\n'
        '  palette-tool palette ./tmp photo.png\n'
        '  palette-tool palette ./tmp photo.png --level 2\n'
        '  palette-tool palette ./tmp a.png b.png -t 30 --json\n'
        '  palette-tool csv ./tmp photo.png -t 30\n'
        '  palette-tool all ./tmp logo.png -t 20 --fail-on-groups 8\n'
        '  palette-tool palette ./tmp page.png -t 20 --expect-dominant "#ffffff"\n'
        '  palette-tool help palette\n'
        '\n'
        'Settings (env vars, or .env):\n'
        '  PALETTE_TOOL_THRESHOLD      default threshold (0)\n'
        '  PALETTE_TOOL_MAX_ENTRIES    colours per image in --json output (1000)\n'
        '  PALETTE_TOOL_MAX_FILE_SIZE  largest image file in bytes (10485760)\n'
        '  PALETTE_TOOL_MAX_PIXELS     largest image pixel count, 0 = unlimited (0)\n'
    )
    parser = argparse.ArgumentParser(
        prog='palette-tool',
        description='Dominant colour palettes from images: exact counts, merged by RGB distance.',
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    # Global --env-file option before subcommand
    parser.add_argument(
        '--env-file',
        metavar='PATH',
        default=None,
        help='Path to .env file (default: walk up from cwd to .git boundary)',
    )
    sub = parser.add_subparsers(dest='technique', help='Technique to run')

    # Auto-register each technique as a subcommand using module docstring
    for name in sorted(techniques):
        p = sub.add_parser(name, help=_short_doc(name))
        p.add_argument('tmp_dir', help='Working directory for artefacts')
        p.add_argument('images', nargs='+', help='Path(s) to image files')
        level = p.add_mutually_exclusive_group()
        level.add_argument(
            '-t',
            '--threshold',
            type=float,
            default=None,
            metavar='T',
            help='Merge colours within RGB distance T (default: PALETTE_TOOL_THRESHOLD or 0)',
        )
        level.add_argument(
            '-l',
            '--level',
            type=int,
            choices=range(0, 11),
            default=None,
            metavar='L',
            help=f'Grouping level 0-10, threshold = L * {LEVEL_STEP}',
        )
        p.add_argument('-j', '--json', action='store_true', help='Output JSON instead of text')
        p.add_argument(
            '-n',
            '--max-entries',
            type=int,
            default=None,
            metavar='N',
            help='Colours per image in JSON output (default: PALETTE_TOOL_MAX_ENTRIES or 1000)',
        )
        p.add_argument(
            '-g',
            '--fail-on-groups',
            type=int,
            default=None,
            metavar='N',
            help='Exit 1 if any image has more than N colour groups (CI gating)',
        )
        p.add_argument(
            '-e',
            '--expect-dominant',
            default=None,
            metavar='HEX',
            help='Exit 1 if the top colour of any image is farther than 20 from HEX',
        )

    # `help` subcommand: prints full module docstring for a technique
    help_parser = sub.add_parser('help', help='Print full docs for a technique')
    help_parser.add_argument('command', nargs='?', help='Technique name')

    return parser


def _print_help(command: str | None) -> None:
    """Print full module docstring for a technique."""
    techniques = registry.all_techniques()

    if command is None:
        print('Available techniques:\n')
        for name in sorted(techniques):
            print(f'  {name:<10} {_short_doc(name)}')
        print('\nRun: palette-tool help <technique> for full docs.')
        return

    if command not in techniques:
        print(f'Unknown technique: {command}', file=sys.stderr)
        print(f'Available: {", ".join(sorted(techniques))}', file=sys.stderr)
        sys.exit(1)

    doc = (registry.module_for(command).__doc__ or '').strip()
    if not doc:
        print(f'(No module docs for {command!r})')
        return
    print(doc)


def resolve_threshold(args: argparse.Namespace, settings: Settings) -> float:
    """--threshold wins, then --level, then the configured default."""
    if args.threshold is not None:
        return args.threshold
    if args.level is not None:
        return float(args.level * LEVEL_STEP)
    return settings.threshold


def _unique(value: str, taken: set[str]) -> str:
    """value, or value_2, value_3, ... if already taken. Marks the result taken."""
    candidate = value
    n = 2
    while candidate in taken:
        candidate = f'{value}_{n}'
        n += 1
    taken.add(candidate)
    return candidate


def _load_images(paths: list[str], settings: Settings) -> list[ImageInput]:
    images = []
    names: set[str] = set()
    stems: set[str] = set()
    for path in paths:
        image = load_image(path, max_bytes=settings.max_file_size, max_pixels=settings.max_pixels)
        name = os.path.basename(path)
        # Same basename twice (a/x.png, b/x.png): fall back to the path as given
        if name in names:
            name = path
        stem = os.path.splitext(os.path.basename(path))[0]
        images.append(ImageInput(name=_unique(name, names), path=path, image=image, stem=_unique(stem, stems)))
    return images


def run(args: argparse.Namespace, settings: Settings) -> Report:
    """Load images, run the chosen technique and return the filled report."""
    if args.expect_dominant:
        try:
            hex_to_rgb(args.expect_dominant)
        except ValueError as exc:
            raise ValidationError(str(exc)) from None
    if getattr(args, 'max_entries', None) is not None and args.max_entries < 0:
        raise ValidationError(f'--max-entries must be >= 0, got {args.max_entries}')

    args.threshold = resolve_threshold(args, settings)
    images = _load_images(args.images, settings)

    report = Report(threshold=args.threshold)
    for image in images:
        report.set_source(image.name, image.path, (image.width, image.height))

    tech = registry.get(args.technique)
    tech.execute(images, report, args)
    return report


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    # Load .env before anything else, OS env vars always win
    env_path = load_env(env_file=getattr(args, 'env_file', None))
    if env_path:
        print(f'palette-tool: loaded {env_path}', file=sys.stderr)

    if not args.technique:
        parser.print_help()
        sys.exit(1)

    # Handle `help` subcommand
    if args.technique == 'help':
        _print_help(getattr(args, 'command', None))
        return

    try:
        settings = Settings.from_env()
        report = run(args, settings)
    except PaletteError as exc:
        print(f'Error: {exc}', file=sys.stderr)
        sys.exit(1)

    if args.json:
        max_entries = args.max_entries if args.max_entries is not None else settings.max_entries
        print(format_json(report, max_entries=max_entries))
    else:
        print(format_text(report))

    # CI gate: after output so the report is visible even on failure
    if report.fail_count:
        print(f'\nFAIL: {report.fail_count} check(s) failed', file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
