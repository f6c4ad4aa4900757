"""Configuration for palette-tool: .env loading and PALETTE_TOOL_* settings.

Load order (first wins):
  1. Existing OS environment variables, never overwritten.
  2. The .env file given by --env-file.
  3. The nearest .env walking up from cwd, stopping at a .git dir or file.

Settings read from the environment:
  PALETTE_TOOL_THRESHOLD      default merge threshold (0 = exact colours)
  PALETTE_TOOL_MAX_ENTRIES    palette entries kept per image in JSON output
  PALETTE_TOOL_MAX_FILE_SIZE  largest accepted image file, in bytes
  PALETTE_TOOL_MAX_PIXELS     largest accepted pixel count (0 = unlimited)
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from palette_tool.core.errors import ValidationError
from palette_tool.core.image_io import MAX_FILE_SIZE

ENV_PREFIX = 'PALETTE_TOOL_'


def find_dotenv(start: Path) -> Path | None:
    """Nearest .env at or above start. Never looks past a repo root."""
    for directory in (start.resolve(), *start.resolve().parents):
        candidate = directory / '.env'
        if candidate.is_file():
            return candidate
        # .git is a dir in a clone, a file in a worktree
        if (directory / '.git').exists():
            return None
    return None


def parse_dotenv(path: Path) -> dict[str, str]:
    """KEY=value lines; quotes stripped, comments and malformed lines skipped."""
    values: dict[str, str] = {}
    for raw in path.read_text(encoding='utf-8').splitlines():
        line = raw.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        key, _, value = line.partition('=')
        key = key.strip()
        if key.startswith('export '):
            key = key[len('export ') :].strip()
        if key:
            values[key] = value.strip().strip('"').strip("'")
    return values


def load_env(env_file: str | None = None) -> Path | None:
    """Merge a .env into os.environ without overriding existing keys.

    Returns the file that was loaded, or None.
    """
    path = Path(env_file) if env_file else find_dotenv(Path.cwd())
    if path is None or not path.is_file():
        return None

    for key, value in parse_dotenv(path).items():
        os.environ.setdefault(key, value)
    return path


def _number(env: Mapping[str, str], name: str, default, cast):
    raw = env.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == '':
        return default
    try:
        value = cast(raw.strip())
    except ValueError:
        raise ValidationError(f'{ENV_PREFIX}{name} must be a number, got {raw!r}') from None
    if value < 0:
        raise ValidationError(f'{ENV_PREFIX}{name} must be >= 0, got {raw!r}')
    return value


@dataclass(frozen=True)
class Settings:
    threshold: float = 0.0
    max_entries: int = 1000
    max_file_size: int = MAX_FILE_SIZE
    max_pixels: int = 0

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> 'Settings':
        """Build settings from PALETTE_TOOL_* variables (os.environ by default)."""
        env = os.environ if env is None else env
        return cls(
            threshold=_number(env, 'THRESHOLD', cls.threshold, float),
            max_entries=_number(env, 'MAX_ENTRIES', cls.max_entries, int),
            max_file_size=_number(env, 'MAX_FILE_SIZE', cls.max_file_size, int),
            max_pixels=_number(env, 'MAX_PIXELS', cls.max_pixels, int),
        )
