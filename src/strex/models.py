"""Pydantic models for strex's extraction pipeline."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Per-unit models
# ---------------------------------------------------------------------------

class SourceUnit(BaseModel):
    """One source file: its identifier plus full text content."""

    model_config = ConfigDict(frozen=True)

    path: str       # relative to the scan root, platform separator
    text: str


class UnitResult(BaseModel):
    """Literals extracted from a single source unit."""

    path: str
    literals: list[str] = Field(default_factory=list)
    anomalies: int = 0

    # If the unit could not be read, store the reason here.
    error: str | None = None


# ---------------------------------------------------------------------------
# Run-level output
# ---------------------------------------------------------------------------

class Report(BaseModel):
    """Unit identifier -> literals, for every unit that produced any.

    Insertion order of ``files`` follows the enumeration order of units.
    Only ``files`` is written to the JSON output.
    """

    root: str
    files: dict[str, list[str]] = Field(default_factory=dict)
    failed: list[str] = Field(default_factory=list)
    scanned: int = 0

    def add(self, result: UnitResult) -> None:
        """Merge one unit's result, skipping failed or empty units."""
        self.scanned += 1
        if result.error is not None:
            self.failed.append(result.path)
        elif result.literals:
            self.files[result.path] = result.literals

    @property
    def literal_count(self) -> int:
        return sum(len(v) for v in self.files.values())
