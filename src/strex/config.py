"""User configuration: ``strex.toml`` or ``[tool.strex]`` in pyproject.toml.

Precedence: CLI flag > config file > default.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from .discovery import DEFAULT_EXTENSIONS, SKIP_DIRS
from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "strex.toml"
PYPROJECT_FILENAME = "pyproject.toml"


class StrexConfig(BaseModel):
    """Settings for one extraction run."""

    extensions: list[str] = Field(default_factory=lambda: sorted(DEFAULT_EXTENSIONS))
    """File extensions to scan (case-insensitive)."""

    skip_dirs: list[str] = Field(default_factory=lambda: sorted(SKIP_DIRS))
    """Directory names pruned during traversal."""

    concurrency: int = Field(default=8, ge=1)
    """Maximum files scanned in parallel."""

    encoding: str = "utf-8-sig"
    """Text encoding of source files."""

    indent: int = Field(default=2, ge=0)
    """JSON indentation of the report."""

    ensure_ascii: bool = True
    """Escape non-ASCII characters in the JSON report."""

    hole_literals: bool = False
    """Also report literals nested inside interpolation holes."""

    @field_validator("extensions")
    @classmethod
    def _normalise_extensions(cls, value: list[str]) -> list[str]:
        out: list[str] = []
        for ext in value:
            ext = ext.strip().lower()
            if not ext:
                continue
            if not ext.startswith("."):
                ext = "." + ext
            out.append(ext)
        return out


def _has_tool_table(pyproject: Path) -> bool:
    try:
        data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
        logger.debug("Ignoring unreadable %s: %s", pyproject, exc)
        return False
    return isinstance(data.get("tool", {}).get("strex"), dict)


def find_config(start: Path) -> Path | None:
    """Return the config file for *start*, searching it and then its parents.

    In each directory ``strex.toml`` wins over a ``pyproject.toml``; the
    latter only counts when it has a ``[tool.strex]`` table.
    """
    search = start.resolve()
    for d in [search, *search.parents]:
        candidate = d / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        pyproject = d / PYPROJECT_FILENAME
        if pyproject.is_file() and _has_tool_table(pyproject):
            return pyproject
    return None


def load_config(path: Path | None = None, *, start: Path | None = None) -> StrexConfig:
    """Load configuration from *path*, or discover it from *start*.

    A ``pyproject.toml`` is read from its ``[tool.strex]`` table.  With no
    file found, defaults are returned.
    """
    if path is None and start is not None:
        path = find_config(start)
    if path is None:
        return StrexConfig()

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read config {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc

    if path.name == PYPROJECT_FILENAME:
        data = data.get("tool", {}).get("strex", {})

    try:
        return StrexConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config in {path}", {"errors": exc.errors()}) from exc
