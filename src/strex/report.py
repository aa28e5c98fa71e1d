"""Report serialization -- indented JSON, written all-or-nothing."""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from pathlib import Path

from .errors import OutputWriteError
from .models import Report

logger = logging.getLogger(__name__)

# Surrogates left after json.dumps are unpaired and cannot be encoded as UTF-8.
_LONE_SURROGATE = re.compile(r"[\ud800-\udfff]")


def render_json(report: Report, indent: int = 2, ensure_ascii: bool = True) -> str:
    """Render ``{"<unit-id>": ["literal", ...], ...}``.

    With ``ensure_ascii=False`` unpaired surrogates are still written as
    ``\\uXXXX`` escapes so the result stays valid UTF-8.
    """
    payload = json.dumps(report.files, indent=indent, ensure_ascii=ensure_ascii)
    if ensure_ascii:
        return payload
    return _LONE_SURROGATE.sub(lambda m: "\\u%04x" % ord(m.group()), payload)


def write_report(
    report: Report,
    output: Path,
    indent: int = 2,
    ensure_ascii: bool = True,
) -> Path:
    """Write *report* to *output* atomically.

    The JSON goes to a temporary file next to *output* which is then
    renamed over it, so *output* is either the complete new report or
    untouched.  Raises :class:`OutputWriteError` on failure.
    """
    output = Path(output)
    try:
        payload = render_json(report, indent=indent, ensure_ascii=ensure_ascii)
        output.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{output.name}.", suffix=".tmp", dir=output.parent)
    except (OSError, UnicodeEncodeError, ValueError) as exc:
        raise OutputWriteError(str(output), str(exc)) from exc

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(payload)
        os.replace(tmp_name, output)
    except (OSError, UnicodeEncodeError) as exc:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise OutputWriteError(str(output), str(exc)) from exc

    logger.debug("Wrote %d unit(s) to %s", len(report.files), output)
    return output
