"""Lexical scanner that finds C# string literals in raw source text.

The scanner is a single left-to-right pass with one active mode at a time.
It understands just enough of the language to find literal boundaries:
comments, character literals, preprocessor directives, and every string
flavor (regular, verbatim, interpolated, raw, and their combinations).

Literal text is reconstructed per flavor:

- regular strings have their backslash escapes decoded;
- verbatim strings are kept raw, with ``""`` collapsed to ``"``;
- interpolated strings keep their ``{expr}`` holes exactly as written and
  collapse ``{{`` / ``}}`` outside of holes;
- raw strings are kept raw, with the closing-line indentation removed from
  multi-line bodies.

The scanner never raises on malformed input.  Unterminated constructs are
closed at the point where recovery is possible and recorded as
:class:`LexicalAnomaly` entries.
"""

from __future__ import annotations

import bisect
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

logger = logging.getLogger(__name__)


class Mode(Enum):
    code = "code"
    line_comment = "line_comment"
    block_comment = "block_comment"
    char_literal = "char_literal"
    directive = "directive"
    regular = "regular"
    verbatim = "verbatim"
    interpolated = "interpolated"
    interpolated_verbatim = "interpolated_verbatim"
    raw = "raw"
    interpolated_raw = "interpolated_raw"


@dataclass(frozen=True)
class StringLiteral:
    """One string literal found by the scanner."""

    text: str
    kind: Mode
    line: int       # 1-based line of the opening delimiter (or prefix)
    column: int     # 1-based column of the opening delimiter (or prefix)
    terminated: bool = True


@dataclass(frozen=True)
class LexicalAnomaly:
    """A malformed construct the scanner recovered from."""

    kind: str       # "unterminated_string" | "unterminated_comment" | ...
    line: int
    column: int


# Characters that end a line for single-line constructs.
_NEWLINES = frozenset("\n\r\u0085\u2028\u2029")
_LINE_END = re.compile(r"[\n\r\u0085\u2028\u2029]")
_LINE_BREAK = re.compile(r"(\r\n|[\n\r\u0085\u2028\u2029])")

# Runs of characters with no special meaning inside each string flavor.
_REGULAR_RUN = re.compile(r'[^"\\\n\r\u0085\u2028\u2029]+')
_INTERPOLATED_RUN = re.compile(r'[^"\\{}\n\r\u0085\u2028\u2029]+')
_VERBATIM_RUN = re.compile(r'[^"]+')
_INTERPOLATED_VERBATIM_RUN = re.compile(r'[^"{}]+')

_IDENTIFIER_RUN = re.compile(r"\w+")

_HEX4 = re.compile(r"[0-9A-Fa-f]{4}")
_HEX8 = re.compile(r"[0-9A-Fa-f]{8}")
_HEX1_4 = re.compile(r"[0-9A-Fa-f]{1,4}")

_SIMPLE_ESCAPES = {
    "'": "'",
    '"': '"',
    "\\": "\\",
    "0": "\0",
    "a": "\a",
    "b": "\b",
    "e": "\x1b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}


def _has_surrogates(value: str) -> bool:
    return any("\ud800" <= ch <= "\udfff" for ch in value)


def _join_surrogates(value: str) -> str:
    """Combine UTF-16 surrogate pairs produced by consecutive ``\\u`` escapes."""
    if not _has_surrogates(value):
        return value
    return value.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "surrogatepass")


def _dedent_raw(body: str) -> str:
    """Apply the multi-line raw string rules to *body*.

    *body* runs from just after the opening quotes to just before the
    closing quotes.  The opening line and the closing line are dropped and
    the closing line's whitespace is removed from the front of every
    content line.
    """
    parts = _LINE_BREAK.split(body)
    lines = parts[0::2]
    breaks = parts[1::2]
    if len(lines) < 2:
        return body

    indent = lines[-1]
    if indent.strip(" \t"):
        # Content on the closing line: nothing to strip, keep that line.
        indent = ""
        content, seps = lines[1:], breaks[1:]
    else:
        content, seps = lines[1:-1], breaks[1:-1]

    out: list[str] = []
    for i, line in enumerate(content):
        if line.startswith(indent):
            line = line[len(indent):]
        elif not line.strip(" \t"):
            line = ""
        out.append(line)
        if i < len(seps):
            out.append(seps[i])
    return "".join(out)


class Scanner:
    """Single-pass mode scanner over one source text.

    Usage::

        scanner = Scanner(source)
        for literal in scanner.literals():
            print(literal.line, literal.text)

    When *hole_literals* is true, literals nested inside interpolation
    holes are also yielded, right after the interpolated literal that
    contains them (outer first).
    """

    def __init__(self, text: str, *, hole_literals: bool = False) -> None:
        self.text = text
        self.hole_literals = hole_literals
        self.anomalies: list[LexicalAnomaly] = []
        self._pos = 0
        self._line_starts: list[int] | None = None
        # Literals found inside holes, waiting for their enclosing literal.
        self._nested: list[StringLiteral] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def literals(self) -> Iterator[StringLiteral]:
        """Yield every string literal in source order."""
        text = self.text
        n = len(text)
        self._pos = 0
        self.anomalies = []
        at_line_start = True

        while self._pos < n:
            ch = text[self._pos]

            if ch in " \t\f\v\ufeff":
                self._pos += 1
                continue
            if ch in _NEWLINES:
                at_line_start = True
                self._pos += 1
                continue
            if ch == "#" and at_line_start:
                self._skip_to_line_end()
                continue
            at_line_start = False

            if ch == "/":
                nxt = self._peek(1)
                if nxt == "/":
                    self._skip_to_line_end()
                    continue
                if nxt == "*":
                    self._skip_block_comment()
                    continue
                self._pos += 1
                continue

            if ch == "'":
                self._skip_char_literal()
                continue

            if ch in "\"@$":
                literal = self._scan_literal()
                if literal is None:
                    self._pos += 1
                    continue
                yield literal
                if self._nested:
                    nested, self._nested = self._nested, []
                    yield from nested
                continue

            m = _IDENTIFIER_RUN.match(text, self._pos)
            self._pos = m.end() if m else self._pos + 1

    # ------------------------------------------------------------------
    # Character access
    # ------------------------------------------------------------------

    def _peek(self, offset: int = 0) -> str:
        pos = self._pos + offset
        if pos >= len(self.text):
            return ""
        return self.text[pos]

    def _run_length(self, ch: str, pos: int | None = None) -> int:
        """Length of the run of *ch* starting at *pos* (default: current)."""
        text = self.text
        start = self._pos if pos is None else pos
        end = start
        while end < len(text) and text[end] == ch:
            end += 1
        return end - start

    def _location(self, pos: int) -> tuple[int, int]:
        if self._line_starts is None:
            self._line_starts = [0] + [m.end() for m in _LINE_BREAK.finditer(self.text)]
        line = bisect.bisect_right(self._line_starts, pos)
        return line, pos - self._line_starts[line - 1] + 1

    def _anomaly(self, kind: str, pos: int) -> None:
        line, column = self._location(pos)
        self.anomalies.append(LexicalAnomaly(kind=kind, line=line, column=column))
        logger.debug("Lexical anomaly %s at %d:%d", kind, line, column)

    # ------------------------------------------------------------------
    # Trivia: comments, directives, character literals
    # ------------------------------------------------------------------

    def _skip_to_line_end(self) -> None:
        """Skip a line comment or directive, stopping before the newline."""
        m = _LINE_END.search(self.text, self._pos)
        self._pos = m.start() if m else len(self.text)

    def _skip_block_comment(self) -> None:
        end = self.text.find("*/", self._pos + 2)
        if end == -1:
            self._anomaly("unterminated_comment", self._pos)
            self._pos = len(self.text)
        else:
            self._pos = end + 2

    def _skip_char_literal(self) -> None:
        text = self.text
        n = len(text)
        start = self._pos
        self._pos += 1  # opening '
        while self._pos < n:
            ch = text[self._pos]
            if ch == "'":
                self._pos += 1
                return
            if ch in _NEWLINES:
                break
            if ch == "\\" and self._pos + 1 < n and text[self._pos + 1] not in _NEWLINES:
                self._pos += 2
            else:
                self._pos += 1
        self._anomaly("unterminated_char", start)

    # ------------------------------------------------------------------
    # String literals
    # ------------------------------------------------------------------

    def _scan_literal(self) -> StringLiteral | None:
        """Scan a string literal starting at the current position.

        Handles the ``$``/``@`` prefixes.  Returns None (without moving)
        when the characters do not start a string literal.
        """
        text = self.text
        n = len(text)
        start = self._pos

        dollars = self._run_length("$", start)
        pos = start + dollars
        verbatim = False
        if pos < n and text[pos] == "@":
            verbatim = True
            pos += 1
            if dollars == 0:
                dollars = self._run_length("$", pos)
                pos += dollars
        if pos >= n or text[pos] != '"':
            return None

        line, column = self._location(start)
        interpolated = dollars > 0
        quotes = self._run_length('"', pos)

        if verbatim:
            self._pos = pos + 1
            value, closed = self._read_verbatim(interpolated)
            kind = Mode.interpolated_verbatim if interpolated else Mode.verbatim
        elif quotes >= 3:
            self._pos = pos + quotes
            value, closed = self._read_raw(quotes, dollars)
            kind = Mode.interpolated_raw if interpolated else Mode.raw
        else:
            self._pos = pos + 1
            value, closed = self._read_regular(interpolated)
            kind = Mode.interpolated if interpolated else Mode.regular

        if not closed:
            self._anomaly("unterminated_string", start)
        return StringLiteral(text=value, kind=kind, line=line, column=column, terminated=closed)

    def _read_regular(self, interpolated: bool) -> tuple[str, bool]:
        text = self.text
        n = len(text)
        run = _INTERPOLATED_RUN if interpolated else _REGULAR_RUN
        buf: list[str] = []

        while self._pos < n:
            m = run.match(text, self._pos)
            if m:
                buf.append(m.group())
                self._pos = m.end()
                continue

            ch = text[self._pos]
            if ch == '"':
                self._pos += 1
                return _join_surrogates("".join(buf)), True
            if ch in _NEWLINES:
                # Regular strings end at the line; leave the newline to Code.
                return _join_surrogates("".join(buf)), False
            if ch == "\\":
                buf.append(self._read_escape())
                continue
            # Only braces remain, and only in interpolated strings.
            if self._peek(1) == ch:
                buf.append(ch)
                self._pos += 2
            elif ch == "{":
                hole, _ = self._read_hole(allow_newlines=False)
                buf.append(hole)
            else:
                buf.append(ch)
                self._pos += 1

        return _join_surrogates("".join(buf)), False

    def _read_verbatim(self, interpolated: bool) -> tuple[str, bool]:
        text = self.text
        n = len(text)
        run = _INTERPOLATED_VERBATIM_RUN if interpolated else _VERBATIM_RUN
        buf: list[str] = []

        while self._pos < n:
            m = run.match(text, self._pos)
            if m:
                buf.append(m.group())
                self._pos = m.end()
                continue

            ch = text[self._pos]
            if ch == '"':
                if self._peek(1) == '"':
                    buf.append('"')
                    self._pos += 2
                    continue
                self._pos += 1
                return "".join(buf), True
            if self._peek(1) == ch:
                buf.append(ch)
                self._pos += 2
            elif ch == "{":
                hole, _ = self._read_hole(allow_newlines=True)
                buf.append(hole)
            else:
                buf.append(ch)
                self._pos += 1

        return "".join(buf), False

    def _read_raw(self, quotes: int, dollars: int) -> tuple[str, bool]:
        text = self.text
        n = len(text)
        eol = _LINE_END.search(text, self._pos)
        rest_of_line = text[self._pos:eol.start() if eol else n]
        multiline = not rest_of_line.strip(" \t")
        buf: list[str] = []
        closed = False

        while self._pos < n:
            ch = text[self._pos]
            if ch == '"':
                count = self._run_length('"')
                self._pos += count
                if count >= quotes:
                    closed = True
                    break
                buf.append('"' * count)
                continue
            if ch in _NEWLINES and not multiline:
                break
            if ch == "{" and dollars:
                count = self._run_length("{")
                if count < dollars:
                    buf.append("{" * count)
                    self._pos += count
                    continue
                # Extra leading braces are content; the last *dollars* open the hole.
                buf.append("{" * (count - dollars))
                self._pos += count - dollars
                hole, _ = self._read_hole(allow_newlines=multiline, delimiter=dollars)
                buf.append(hole)
                continue
            buf.append(ch)
            self._pos += 1

        body = "".join(buf)
        if multiline:
            body = _dedent_raw(body)
        return body, closed

    def _read_hole(self, *, allow_newlines: bool, delimiter: int = 1) -> tuple[str, bool]:
        """Copy an interpolation hole through verbatim.

        The current position is on the opening brace run of length
        *delimiter*.  Returns the hole's source text, braces included, and
        whether the closing brace run was found.
        """
        text = self.text
        n = len(text)
        start = self._pos
        self._pos += delimiter
        depth = 0

        while self._pos < n:
            ch = text[self._pos]
            if ch in _NEWLINES and not allow_newlines:
                return text[start:self._pos], False
            if ch == "{":
                depth += 1
                self._pos += 1
            elif ch == "}":
                if depth == 0:
                    self._pos += max(1, min(self._run_length("}"), delimiter))
                    return text[start:self._pos], True
                depth -= 1
                self._pos += 1
            elif ch == "'":
                self._skip_char_literal()
            elif ch == "/" and self._peek(1) == "*":
                self._skip_block_comment()
            elif ch == "/" and self._peek(1) == "/" and allow_newlines:
                self._skip_to_line_end()
            elif ch in "\"@$":
                self._scan_nested()
            else:
                self._pos += 1

        return text[start:self._pos], False

    def _scan_nested(self) -> None:
        """Scan a literal inside a hole; queue it when hole literals are wanted."""
        mark = len(self._nested)
        literal = self._scan_literal()
        if literal is None:
            self._pos += 1
            return
        if self.hole_literals:
            # Insert before anything queued from deeper holes: outer first.
            self._nested.insert(mark, literal)

    def _read_escape(self) -> str:
        """Decode the backslash escape at the current position."""
        text = self.text
        start = self._pos
        nxt = self._peek(1)

        if nxt == "" or nxt in _NEWLINES:
            # Stray backslash before the end of the line: keep it.
            self._anomaly("unknown_escape", start)
            self._pos += 1
            return "\\"

        simple = _SIMPLE_ESCAPES.get(nxt)
        if simple is not None:
            self._pos += 2
            return simple

        if nxt in "uUx":
            pattern = {"u": _HEX4, "U": _HEX8, "x": _HEX1_4}[nxt]
            m = pattern.match(text, start + 2)
            if m:
                value = int(m.group(), 16)
                if value <= 0x10FFFF:
                    self._pos = m.end()
                    return chr(value)

        self._anomaly("unknown_escape", start)
        self._pos += 2
        return text[start:start + 2]


def scan(text: str, *, hole_literals: bool = False) -> list[StringLiteral]:
    """Return every string literal in *text* with its kind and position."""
    return list(Scanner(text, hole_literals=hole_literals).literals())


def extract(text: str, *, hole_literals: bool = False) -> list[str]:
    """Return the text of every string literal in *text*, in source order."""
    return [literal.text for literal in Scanner(text, hole_literals=hole_literals).literals()]
