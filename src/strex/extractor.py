"""Per-unit extraction: read one source file and run the scanner over it."""

from __future__ import annotations

import logging
from pathlib import Path

from .errors import UnitReadError
from .lexer import Scanner
from .models import SourceUnit, UnitResult

logger = logging.getLogger(__name__)


def read_source_unit(root: Path, rel_path: str, encoding: str = "utf-8-sig") -> SourceUnit:
    """Read *rel_path* under *root* into a SourceUnit.

    Raises :class:`UnitReadError` when the file cannot be read or decoded.
    """
    try:
        text = (root / rel_path).read_text(encoding=encoding)
    except UnicodeDecodeError as exc:
        raise UnitReadError(rel_path, f"not valid {encoding}: {exc.reason}") from exc
    except OSError as exc:
        raise UnitReadError(rel_path, exc.strerror or str(exc)) from exc
    return SourceUnit(path=rel_path, text=text)


def extract_source(unit: SourceUnit, hole_literals: bool = False) -> UnitResult:
    """Scan an in-memory unit. Never fails."""
    scanner = Scanner(unit.text, hole_literals=hole_literals)
    literals = [literal.text for literal in scanner.literals()]
    if scanner.anomalies:
        logger.debug("%s: recovered from %d lexical anomalies", unit.path, len(scanner.anomalies))
    return UnitResult(path=unit.path, literals=literals, anomalies=len(scanner.anomalies))


def extract_unit(
    root: Path,
    rel_path: str,
    encoding: str = "utf-8-sig",
    hole_literals: bool = False,
) -> UnitResult:
    """Read and scan one file, turning read failures into a failed result.

    This is the CPU-bound step that runs in a thread.
    """
    try:
        unit = read_source_unit(root, rel_path, encoding)
    except UnitReadError as exc:
        logger.warning("Skipping %s: %s", rel_path, exc.reason)
        return UnitResult(path=rel_path, error=exc.reason)
    return extract_source(unit, hole_literals=hole_literals)
