"""Tokenizer for the class-hierarchy configuration language.

Turns raw config text into a lazy stream of immutable tokens. Comments run
from ``#`` to the end of the line and are discarded together with all
whitespace. ``abstract`` and ``scalar`` are keywords; identifiers may contain
``::`` namespace separators (``Op::Plus`` is a single token).

The lexical rules below are collected by ``ply.lex`` from this module.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator

import ply.lex as lex

from .errors import LexError
from .logging_config import get_logger

logger = get_logger(__name__)


class TokenKind(Enum):
    """Token kinds produced by the tokenizer."""

    IDENT = "identifier"
    NAMESPACED_IDENT = "namespaced identifier"
    ABSTRACT = "keyword 'abstract'"
    SCALAR = "keyword 'scalar'"
    LPAREN = "'('"
    RPAREN = "')'"
    COMMA = "','"
    EOF = "end of input"


@dataclass(frozen=True)
class Token:
    """A single lexical token with its 1-based source position."""

    kind: TokenKind
    text: str
    line: int
    column: int = 0

    @property
    def is_name(self) -> bool:
        return self.kind in (TokenKind.IDENT, TokenKind.NAMESPACED_IDENT)

    def __str__(self) -> str:
        if self.is_name:
            return f"{self.kind.value} '{self.text}'"
        return self.kind.value


#
# Lexical rules (ply.lex)
#

reserved = {
    "abstract": "ABSTRACT",
    "scalar": "SCALAR",
}

tokens = [
    "IDENT",
    "NAMESPACED_IDENT",
    "LPAREN",
    "RPAREN",
    "COMMA",
] + list(reserved.values())

t_LPAREN = r"\("
t_RPAREN = r"\)"
t_COMMA = r"\,"

t_ignore = " \t\r\f\v"
t_ignore_COMMENT = r"\#[^\n]*"


def t_IDENT(t):
    r"[A-Za-z_][A-Za-z0-9_]*(?:::[A-Za-z_][A-Za-z0-9_]*)*"
    t.type = reserved.get(t.value)
    if t.type is None:
        t.type = "NAMESPACED_IDENT" if "::" in t.value else "IDENT"
    return t


def t_newline(t):
    r"\n+"
    t.lexer.lineno += len(t.value)


def t_error(t):
    column = find_column(t.lexer.lexdata, t.lexpos)
    logger.debug("illegal character %r at %d:%d", t.value[0], t.lexer.lineno, column)
    raise LexError(t.value[0], t.lexer.lineno, column)


def find_column(text: str, pos: int) -> int:
    """Return the 1-based column of offset ``pos`` in ``text``."""
    line_start = text.rfind("\n", 0, pos) + 1
    return pos - line_start + 1


_master_lexer = None


def _new_lexer():
    global _master_lexer
    if _master_lexer is None:
        _master_lexer = lex.lex(debug=False, optimize=False, errorlog=lex.NullLogger())
    lexer = _master_lexer.clone()
    lexer.lineno = 1
    return lexer


def tokenize(text: str) -> Iterator[Token]:
    """Lazily tokenize config text.

    The returned generator yields every token in order and finishes with a
    single ``TokenKind.EOF`` token. It cannot be restarted.

    Args:
        text: The complete configuration text.

    Yields:
        Token values.

    Raises:
        LexError: When a character matches no lexical rule. The error is
            raised when the generator reaches that character.
    """
    lexer = _new_lexer()
    lexer.input(text)
    count = 0
    for tok in iter(lexer.token, None):
        count += 1
        yield Token(
            kind=TokenKind[tok.type],
            text=tok.value,
            line=tok.lineno,
            column=find_column(text, tok.lexpos),
        )
    logger.debug("tokenized %d tokens", count)
    yield Token(TokenKind.EOF, "", lexer.lineno, find_column(text, len(text)))
