"""
Error types raised while reading MSH files.

Every error derives from `ParseError` (itself a `ValueError`, matching the
plain ValueError raised for bad input elsewhere) and carries the 1-based
line number where the problem was detected when it is known.
"""
from typing import Any, Optional


class ParseError(ValueError):
    """Base class for all fatal parse errors."""

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class IoFailure(ParseError):
    """The underlying stream could not be opened or read."""

    def __init__(self, cause: Exception, line: Optional[int] = None):
        self.cause = cause
        super().__init__(f"I/O failure: {cause}", line)


class UnexpectedEof(ParseError):
    """The stream ended while another token was required."""

    def __init__(self, line: Optional[int] = None):
        super().__init__("unexpected end of file", line)


class MissingSection(ParseError):
    def __init__(self, expected: str, found: Optional[str] = None,
                 line: Optional[int] = None):
        self.expected = expected
        self.found = found
        if found is None:
            message = f"expected {expected!r}, reached end of file"
        else:
            message = f"expected {expected!r}, found {found!r}"
        super().__init__(message, line)


class MalformedNumber(ParseError):
    def __init__(self, token: str, kind: str, line: Optional[int] = None,
                 reason: Optional[str] = None):
        self.token = token
        self.kind = kind
        message = reason or f"expected {kind}, got {token!r}"
        super().__init__(message, line)


class CountMismatch(ParseError):
    """
    A section declared `expected` records but `actual` were found.

    `actual` is None when the section holds more records than declared.
    """

    def __init__(self, section: str, expected: int, actual: Optional[int],
                 line: Optional[int] = None):
        self.section = section
        self.expected = expected
        self.actual = actual
        found = "more" if actual is None else str(actual)
        super().__init__(
            f"{section}: declared {expected} record(s), found {found}", line)


class UnknownElementType(ParseError):
    def __init__(self, code: int, line: Optional[int] = None):
        self.code = code
        super().__init__(f"unknown element type code {code}", line)


class UnsupportedEncoding(ParseError):
    """The header declares a binary payload, which is not decoded."""

    def __init__(self, header: Any, line: Optional[int] = None):
        self.header = header
        super().__init__(
            f"binary MSH files are not supported (file-type flag {header.file_type})",
            line)


class LimitExceeded(ParseError):
    """A variable-length field is longer than the format allows."""

    def __init__(self, field: str, limit: int, actual: int,
                 line: Optional[int] = None):
        self.field = field
        self.limit = limit
        self.actual = actual
        super().__init__(f"{field} is {actual}, limit is {limit}", line)
