"""Configuration for png2ilbm: .env loading and PNG2ILBM_* settings.

Load order (first wins):
  1. Existing OS environment variables — never overwritten.
  2. The nearest .env walking up from cwd, stopping at a .git boundary.

Recognised variables:
  PNG2ILBM_WIDTH_POLICY  pad | reject   (default pad)
  PNG2ILBM_PAD_CHUNKS    bool           (default off)
  PNG2ILBM_JSON          bool           (default off)
  PNG2ILBM_QUIET         bool           (default off)
"""

import os
from collections.abc import Mapping
from pathlib import Path

from png2ilbm.core.errors import ConfigError
from png2ilbm.core.types import WIDTH_POLICIES, Settings

PREFIX = 'PNG2ILBM_'

_TRUE = {'1', 'true', 'yes', 'on'}
_FALSE = {'0', 'false', 'no', 'off', ''}


def _find_dotenv(start: Path) -> Path | None:
    """Walk up from start, return first .env found, stop at .git boundary."""
    current = start.resolve()
    while True:
        candidate = current / '.env'
        if candidate.is_file():
            return candidate
        # .git can be a dir (clone) or a file (worktree)
        if (current / '.git').exists():
            return None
        if current.parent == current:
            return None
        current = current.parent


def _parse_dotenv(path: Path) -> dict[str, str]:
    """Parse KEY=value lines. Quotes and a leading `export ` are stripped."""
    result: dict[str, str] = {}
    for raw in path.read_text(encoding='utf-8').splitlines():
        line = raw.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        if line.startswith('export '):
            line = line[len('export ') :]
        key, _, value = line.partition('=')
        key = key.strip()
        if key:
            result[key] = value.strip().strip('"').strip("'")
    return result


def load_env(start: Path | None = None) -> Path | None:
    """Fill os.environ from the nearest .env for keys not already set.

    Returns the .env path that was used, or None.
    """
    path = _find_dotenv(start or Path.cwd())
    if path is None:
        return None
    for key, value in _parse_dotenv(path).items():
        os.environ.setdefault(key, value)
    return path


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigError(name, value)


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from PNG2ILBM_* variables (os.environ by default)."""
    env = os.environ if environ is None else environ
    settings = Settings()
    policy = env.get(f'{PREFIX}WIDTH_POLICY')
    if policy is not None:
        policy = policy.strip().lower()
        if policy not in WIDTH_POLICIES:
            raise ConfigError(f'{PREFIX}WIDTH_POLICY', env[f'{PREFIX}WIDTH_POLICY'])
        settings.width_policy = policy

    for attr in ('pad_chunks', 'json', 'quiet'):
        name = f'{PREFIX}{attr.upper()}'
        if name in env:
            setattr(settings, attr, _parse_bool(name, env[name]))
    return settings
