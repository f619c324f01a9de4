"""C string literal handling for message texts."""
from __future__ import annotations

import re
from typing import Iterable, Optional

from fbmsggen.internals.errors import CatalogError
from fbmsggen.internals.report import Span


class InvalidEscapeError(CatalogError):
    """Raised when a string literal contains an escape C does not define."""

    def __init__(self, escape: str, span: Optional[Span] = None):
        super().__init__("GE1001", span, escape=escape)
        self.escape = escape


_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "\\": "\\",
    "'": "'",
    '"': '"',
    "?": "?",
}

_ESCAPE_RE = re.compile(r"\\(x[0-9a-fA-F]+|[0-7]{1,3}|.)", re.DOTALL)


def _escape_bytes(esc: str, span: Optional[Span]) -> bytes:
    if esc[0] == "x" and len(esc) > 1:
        value = int(esc[1:], 16)
    elif esc[0] in "01234567":
        value = int(esc, 8)
    else:
        try:
            return _SIMPLE_ESCAPES[esc].encode("ascii")
        except KeyError:
            raise InvalidEscapeError(esc, span) from None
    # Numeric escapes denote a single byte
    if value > 0xFF:
        raise InvalidEscapeError(esc, span)
    return bytes((value,))


def process_string_escapes(body: str, span: Optional[Span] = None) -> str:
    """Resolve C escape sequences in the body of a string literal (no quotes).

    Numeric escapes are bytes, as in C. The result is the UTF-8 decoding of
    the literal's bytes; bytes that are not valid UTF-8 survive as
    ``surrogateescape`` code points, which ``go_quote`` writes back as ``\\xNN``.
    """
    out = bytearray()
    pos = 0
    for match in _ESCAPE_RE.finditer(body):
        out += body[pos:match.start()].encode("utf-8")
        out += _escape_bytes(match.group(1), span)
        pos = match.end()
    out += body[pos:].encode("utf-8")
    return out.decode("utf-8", "surrogateescape")


def parse_string_tokens(tokens: Iterable[str], span: Optional[Span] = None) -> str:
    """Decode and concatenate adjacent C string literals ("a" "b" -> ab)."""
    text = "".join(process_string_escapes(tok[1:-1], span) for tok in tokens)
    # A multi-byte sequence may be split across literals
    return text.encode("utf-8", "surrogateescape").decode("utf-8", "surrogateescape")
