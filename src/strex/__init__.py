"""strex - Extract string literals from C# source code."""

from .config import StrexConfig, load_config
from .errors import ConfigError, OutputWriteError, StrexError, UnitReadError
from .lexer import LexicalAnomaly, Scanner, StringLiteral, extract, scan
from .models import Report, SourceUnit, UnitResult
from .orchestrator import run, run_async
from .report import render_json, write_report

__version__ = "0.1.0"

__all__ = [
    "extract",
    "scan",
    "run",
    "run_async",
    "render_json",
    "write_report",
    "load_config",
    "Scanner",
    "StringLiteral",
    "LexicalAnomaly",
    "SourceUnit",
    "UnitResult",
    "Report",
    "StrexConfig",
    "StrexError",
    "UnitReadError",
    "OutputWriteError",
    "ConfigError",
]
