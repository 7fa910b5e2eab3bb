"""
Token reader for ASCII MSH streams.

Splits the stream into whitespace-delimited tokens one line at a time, so
record fields may be spread over lines freely while keyword lines
(`$Nodes`, `$EndNodes`, ...) are still recognised as whole lines.

A double-quoted string is a single token even if it contains spaces; this
is how `$PhysicalNames` entries spell multi-word names.
"""
import re
from dataclasses import dataclass
from typing import List, Optional, TextIO

from .errors import IoFailure, MalformedNumber, MissingSection, UnexpectedEof

_TOKEN_RE = re.compile(r'"[^"]*"|\S+')


@dataclass
class Mark:
    """Saved reader position returned by `TokenReader.mark_position`."""
    tokens: List[str]
    index: int
    line_number: int
    offset: int


class TokenReader:
    """
    Pull tokens and numbers from a text stream.

    Only `readline()` is required of the stream; rewinding works on pipes
    and other non-seekable streams because lines read after a mark are kept
    until the mark is restored or released.

    Attributes:
        line_number: 1-based number of the last line read (0 before any read)
    """

    def __init__(self, stream: TextIO):
        self._stream = stream
        self._tokens: List[str] = []
        self._index = 0
        self._replay: List[str] = []
        self._journal: Optional[List[str]] = None
        self._active_marks = 0
        self.line_number = 0

    # ------------------------------------------------------------------
    # Line level
    # ------------------------------------------------------------------

    def _read_line(self) -> str:
        if self._replay:
            line = self._replay.pop()
        else:
            try:
                line = self._stream.readline()
            except (OSError, UnicodeDecodeError) as exc:
                raise IoFailure(exc, self.line_number) from exc
            except ValueError as exc:
                # readline() on a closed file
                raise UnexpectedEof(self.line_number) from exc
        if line:
            self.line_number += 1
            if self._journal is not None:
                self._journal.append(line)
        return line

    def _fill(self) -> bool:
        """Make sure a token is buffered. Returns False at end of stream."""
        while self._index >= len(self._tokens):
            line = self._read_line()
            if not line:
                return False
            self._tokens = _TOKEN_RE.findall(line)
            self._index = 0
        return True

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    def peek_token(self) -> Optional[str]:
        """Next token without consuming it, or None at end of stream."""
        if not self._fill():
            return None
        return self._tokens[self._index]

    def next_token(self) -> str:
        if not self._fill():
            raise UnexpectedEof(self.line_number)
        token = self._tokens[self._index]
        self._index += 1
        return token

    def next_int(self) -> int:
        token = self.next_token()
        try:
            return int(token)
        except ValueError:
            raise MalformedNumber(token, "int", self.line_number) from None

    def next_float(self) -> float:
        token = self.next_token()
        try:
            return float(token)
        except ValueError:
            raise MalformedNumber(token, "float", self.line_number) from None

    # ------------------------------------------------------------------
    # Keyword lines
    # ------------------------------------------------------------------

    def expect_keyword_line(self, expected: str) -> None:
        """Consume a line consisting of exactly `expected`."""
        if not self._fill():
            raise MissingSection(expected, None, self.line_number)
        whole_line = self._index == 0 and len(self._tokens) == 1
        if not whole_line or self._tokens[0] != expected:
            found = " ".join(self._tokens[self._index:])
            raise MissingSection(expected, found, self.line_number)
        self._index = 1

    def read_keyword_line(self) -> str:
        """Consume the rest of the current line (or the next non-blank one)."""
        if not self._fill():
            return ""
        text = " ".join(self._tokens[self._index:])
        self._index = len(self._tokens)
        return text

    def peek_keyword_line(self) -> str:
        mark = self.mark_position()
        try:
            return self.read_keyword_line()
        finally:
            self.restore_position(mark)

    # ------------------------------------------------------------------
    # Rewind
    # ------------------------------------------------------------------

    def mark_position(self) -> Mark:
        if self._journal is None:
            self._journal = []
        self._active_marks += 1
        return Mark(list(self._tokens), self._index, self.line_number,
                    len(self._journal))

    def restore_position(self, mark: Mark) -> None:
        """Rewind to `mark`; lines read since then will be read again."""
        if self._journal is None or mark.offset > len(self._journal):
            raise ValueError("mark is no longer active")
        replay = self._journal[mark.offset:]
        del self._journal[mark.offset:]
        self._replay.extend(reversed(replay))
        self._tokens = list(mark.tokens)
        self._index = mark.index
        self.line_number = mark.line_number
        self._drop_mark()

    def release_mark(self, mark: Mark) -> None:
        """Keep the current position and stop recording lines for `mark`."""
        if self._journal is None:
            raise ValueError("mark is no longer active")
        self._drop_mark()

    def _drop_mark(self) -> None:
        # Lines stay journaled while any outer mark is still active.
        self._active_marks -= 1
        if self._active_marks <= 0:
            self._active_marks = 0
            self._journal = None
