"""Orchestrator -- async fan-out of per-file extraction, ordered fan-in."""

from __future__ import annotations

import asyncio
import logging
import traceback
from pathlib import Path

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from .config import StrexConfig
from .discovery import iter_source_files
from .extractor import extract_unit
from .models import Report, UnitResult

logger = logging.getLogger(__name__)


async def _extract_one(
    root: Path,
    rel_path: str,
    sem: asyncio.Semaphore,
    config: StrexConfig,
    progress: Progress | None = None,
    task_id: int | None = None,
) -> UnitResult:
    """Run a single file extraction under concurrency control."""
    async with sem:
        try:
            return await asyncio.to_thread(
                extract_unit, root, rel_path, config.encoding, config.hole_literals,
            )
        except Exception:
            # Read failures are handled in extract_unit; this is anything else.
            logger.error("Extraction failed for %s", rel_path, exc_info=True)
            return UnitResult(path=rel_path, error=traceback.format_exc(limit=4))
        finally:
            if progress is not None and task_id is not None:
                progress.advance(task_id)


async def run_async(
    root: Path,
    config: StrexConfig | None = None,
    console: Console | None = None,
) -> Report:
    """Full pipeline: discover -> extract (in parallel) -> merge in order.

    Results are merged in enumeration order regardless of which file
    finishes first.  Pass *console* to show a progress bar.
    """
    config = config or StrexConfig()
    root = root.resolve()

    paths = await asyncio.to_thread(
        lambda: list(iter_source_files(root, config.extensions, config.skip_dirs))
    )
    logger.debug("Discovered %d source file(s) under %s", len(paths), root)

    sem = asyncio.Semaphore(config.concurrency)
    report = Report(root=str(root))

    if console is not None and paths:
        with Progress(
            SpinnerColumn(),
            TextColumn("[bold]Scanning[/bold]"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
            transient=True,
        ) as progress:
            task_id = progress.add_task("scan", total=len(paths))
            results = await asyncio.gather(*(
                _extract_one(root, p, sem, config, progress, task_id) for p in paths
            ))
    else:
        results = await asyncio.gather(*(_extract_one(root, p, sem, config) for p in paths))

    # gather() preserves submission order, which is enumeration order.
    for result in results:
        report.add(result)
    return report


def run(root: Path, config: StrexConfig | None = None, console: Console | None = None) -> Report:
    """Synchronous wrapper around :func:`run_async`."""
    return asyncio.run(run_async(root, config, console))
