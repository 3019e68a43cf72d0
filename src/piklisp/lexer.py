"""Token classification for Piklisp source.

A token is a double-quoted string, a single-quoted character, or a bare run
of non-syntax characters. The scanner in ``piklisp.parser`` handles
parentheses, whitespace and comments itself and asks this module only where
the token starting at the cursor ends.
"""

from __future__ import annotations

import re
from enum import Enum, auto


class TokenKind(Enum):
    STRING = auto()
    CHAR = auto()
    SYMBOL = auto()


# Shortest run from a double quote to the next unescaped double quote.
_STRING_RE = re.compile(r'"(?:[^"\\]|\\.)*"')

# Quote, optional backslash, any one character, quote.
_CHAR_RE = re.compile(r"'\\?.'")

# Longest run of non-syntax characters.
_SYMBOL_RE = re.compile(r'[^ \t\n"()]+')

_PATTERNS = {
    TokenKind.STRING: _STRING_RE,
    TokenKind.CHAR: _CHAR_RE,
    TokenKind.SYMBOL: _SYMBOL_RE,
}


def classify(ch: str) -> TokenKind:
    """Which token rule applies to a token starting with ``ch``."""
    if ch == '"':
        return TokenKind.STRING
    if ch == "'":
        return TokenKind.CHAR
    return TokenKind.SYMBOL


def find_token_end(source: str, pos: int = 0) -> int | None:
    """Return the index just past the token starting at ``pos``.

    Returns None when no valid token starts there: an unterminated string,
    a malformed character literal, or a syntax character at ``pos``.
    """
    if pos >= len(source):
        return None
    match = _PATTERNS[classify(source[pos])].match(source, pos)
    if match is None:
        return None
    return match.end()
