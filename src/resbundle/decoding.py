"""Textual bundle decoders.

The textual loader hands an open byte stream to a TextualDecoder and gets
a ResourceBundle back. PropertiesDecoder is the stock decoder for the
".properties" key/value format.

Python 3.13+.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import BinaryIO, Protocol

from resbundle.bundle import PropertyResourceBundle, ResourceBundle
from resbundle.constants import DEFAULT_ENCODING, FALLBACK_ENCODING, MAX_RESOURCE_SIZE
from resbundle.errors import DecodeError

__all__ = [
    "PropertiesDecoder",
    "TextualDecoder",
]

logger = logging.getLogger(__name__)

_SIMPLE_ESCAPES: dict[str, str] = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_KEY_TERMINATORS = frozenset("=: \t\f")
_WHITESPACE = frozenset(" \t\f")
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class TextualDecoder(Protocol):
    """Protocol for decoding a byte stream into a bundle."""

    def decode(self, stream: BinaryIO) -> ResourceBundle:
        """Decode stream into a bundle.

        Raises:
            DecodeError: On malformed input, truncated stream or I/O failure
        """


def _ends_with_continuation(line: str) -> bool:
    """True if line ends in an odd number of backslashes."""
    count = len(line) - len(line.rstrip("\\"))
    return count % 2 == 1


def _unescape(text: str, line_no: int) -> str:
    """Resolve backslash escapes of a key or value."""
    if "\\" not in text:
        return text
    out: list[str] = []
    i = 0
    length = len(text)
    while i < length:
        char = text[i]
        i += 1
        if char != "\\" or i >= length:
            out.append(char)
            continue
        char = text[i]
        i += 1
        if char == "u":
            digits = text[i : i + 4]
            if len(digits) != 4 or any(d not in "0123456789abcdefABCDEF" for d in digits):
                msg = f"Malformed \\uXXXX escape on line {line_no}: \\u{digits}"
                raise DecodeError(msg, line=line_no)
            out.append(chr(int(digits, 16)))
            i += 4
        else:
            out.append(_SIMPLE_ESCAPES.get(char, char))
    return "".join(out)


def _split_entry(line: str) -> tuple[str, str]:
    """Split a logical line into raw key and raw value."""
    i = 0
    length = len(line)
    while i < length:
        char = line[i]
        if char == "\\":
            i += 2
            continue
        if char in _KEY_TERMINATORS:
            break
        i += 1
    key = line[: min(i, length)]
    # Skip whitespace, at most one "=" or ":", then whitespace again.
    while i < length and line[i] in _WHITESPACE:
        i += 1
    if i < length and line[i] in "=:":
        i += 1
    while i < length and line[i] in _WHITESPACE:
        i += 1
    return key, line[i:]


def _logical_lines(text: str) -> list[tuple[int, str]]:
    """Join continuation lines, dropping comments and blank lines.

    Returns:
        (line number of first physical line, logical line) pairs
    """
    result: list[tuple[int, str]] = []
    pending: list[str] = []
    start = 0
    for line_no, raw in enumerate(_LINE_BREAK.split(text), start=1):
        line = raw.lstrip(" \t\f")
        if not pending:
            if not line or line[0] in "#!":
                continue
            start = line_no
        if _ends_with_continuation(line):
            pending.append(line[:-1])
            continue
        pending.append(line)
        result.append((start, "".join(pending)))
        pending = []
    if pending:
        # Continuation at end of input: keep what was accumulated.
        result.append((start, "".join(pending)))
    return result


@dataclass(frozen=True, slots=True)
class PropertiesDecoder:
    """Decoder for the ".properties" key/value format.

    Reads the whole stream, decodes it as ``encoding`` and, for legacy
    files that are not valid in that encoding, as ``fallback_encoding``.

    Attributes:
        encoding: Primary text encoding (default: UTF-8)
        fallback_encoding: Encoding tried after a decoding failure, or None
            to fail instead (default: ISO-8859-1)
        max_size: Maximum accepted stream size in bytes

    Example:
        >>> import io
        >>> bundle = PropertiesDecoder().decode(io.BytesIO(b"greeting = Hello"))
        >>> bundle.get_string("greeting")
        'Hello'
    """

    encoding: str = DEFAULT_ENCODING
    fallback_encoding: str | None = FALLBACK_ENCODING
    max_size: int = MAX_RESOURCE_SIZE

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            ValueError: If max_size is not positive
        """
        if self.max_size <= 0:
            msg = f"max_size must be positive, got {self.max_size}"
            raise ValueError(msg)

    def _read(self, stream: BinaryIO) -> bytes:
        # Raw streams may return short reads; keep reading until EOF or past the limit.
        chunks: list[bytes] = []
        remaining = self.max_size + 1
        try:
            while remaining > 0:
                chunk = stream.read(remaining)
                if not chunk:
                    break
                chunks.append(chunk)
                remaining -= len(chunk)
        except OSError as e:
            msg = f"Failed to read textual bundle: {e}"
            raise DecodeError(msg) from e
        data = b"".join(chunks)
        if len(data) > self.max_size:
            msg = f"Textual bundle exceeds maximum size of {self.max_size} bytes"
            raise DecodeError(msg)
        return data

    def _to_text(self, data: bytes) -> str:
        try:
            return data.decode(self.encoding)
        except UnicodeDecodeError as e:
            if self.fallback_encoding is None:
                msg = f"Textual bundle is not valid {self.encoding}: {e}"
                raise DecodeError(msg) from e
            logger.warning(
                "Textual bundle is not valid %s, decoding as %s",
                self.encoding,
                self.fallback_encoding,
            )
            try:
                return data.decode(self.fallback_encoding)
            except UnicodeDecodeError as fallback_error:
                msg = f"Textual bundle is not valid {self.fallback_encoding}: {fallback_error}"
                raise DecodeError(msg) from fallback_error

    def decode_text(self, text: str) -> dict[str, str]:
        """Parse ".properties" text into key/value pairs.

        Raises:
            DecodeError: If an escape sequence is malformed
        """
        entries: dict[str, str] = {}
        for line_no, line in _logical_lines(text.removeprefix("\ufeff")):
            raw_key, raw_value = _split_entry(line)
            entries[_unescape(raw_key, line_no)] = _unescape(raw_value, line_no)
        return entries

    def decode(self, stream: BinaryIO) -> PropertyResourceBundle:
        """Decode stream into a PropertyResourceBundle.

        Raises:
            DecodeError: On I/O failure, oversized input, undecodable bytes
                or malformed escapes
        """
        return PropertyResourceBundle(self.decode_text(self._to_text(self._read(stream))))
