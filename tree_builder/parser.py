"""Parser for the class-hierarchy configuration language.

Grammar::

    declaration := 'abstract'? name name? '(' paramList? ')'
    paramList   := param (',' param)*
    param       := ('scalar' | name) ident?

With one name before ``(`` the name is the class's own name; with two, the
first is the supertype and the second the class name. No semantic lookup
happens here, the class registry resolves names later.

The grammar rules below are collected by ``ply.yacc`` from this module.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

import ply.lex as lex
import ply.yacc as yacc

from .errors import ParseError
from .lexer import Token, TokenKind, tokenize, tokens  # noqa: F401 (tokens is read by ply.yacc)
from .logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ParamDecl:
    """One constructor parameter: a declared type and an optional name."""

    type_token: Token
    name_token: Optional[Token] = None

    @property
    def is_scalar(self) -> bool:
        return self.type_token.kind is TokenKind.SCALAR

    @property
    def type_name(self) -> str:
        return self.type_token.text

    @property
    def explicit_name(self) -> Optional[str]:
        return self.name_token.text if self.name_token is not None else None


@dataclass(frozen=True)
class AbstractDecl:
    """``abstract [Super] Name()``.

    ``params`` is normally empty; a non-empty list is kept so the registry
    can report it as a semantic error against the class name.
    """

    name: str
    supertype: Optional[str] = None
    params: Tuple[ParamDecl, ...] = ()
    line: int = 0


@dataclass(frozen=True)
class ConcreteDecl:
    """``[Super] Name(params)``."""

    name: str
    supertype: Optional[str] = None
    params: Tuple[ParamDecl, ...] = ()
    line: int = 0


Declaration = Union[AbstractDecl, ConcreteDecl]


#
# Syntax rules (ply.yacc)
#

start = "config"


def p_config(p):
    """config : declarations"""
    p[0] = p[1]


def p_config_empty(p):
    """config : empty"""
    p[0] = []


def p_declarations_first(p):
    """declarations : declaration"""
    p[0] = [p[1]]


def p_declarations_rest(p):
    """declarations : declarations declaration"""
    p[1].append(p[2])
    p[0] = p[1]


def p_declaration_abstract(p):
    """declaration : ABSTRACT class_head LPAREN params RPAREN"""
    supertype, name = p[2]
    p[0] = AbstractDecl(
        name=name.text,
        supertype=supertype.text if supertype else None,
        params=tuple(p[4]),
        line=p[1].line,
    )


def p_declaration_concrete(p):
    """declaration : class_head LPAREN params RPAREN"""
    supertype, name = p[1]
    p[0] = ConcreteDecl(
        name=name.text,
        supertype=supertype.text if supertype else None,
        params=tuple(p[3]),
        line=(supertype or name).line,
    )


def p_class_head_name(p):
    """class_head : name"""
    p[0] = (None, p[1])


def p_class_head_supertype(p):
    """class_head : name name"""
    p[0] = (p[1], p[2])


def p_name(p):
    """name : IDENT
    | NAMESPACED_IDENT"""
    p[0] = p[1]


def p_params(p):
    """params : param_list"""
    p[0] = p[1]


def p_params_empty(p):
    """params : empty"""
    p[0] = []


def p_param_list_first(p):
    """param_list : param"""
    p[0] = [p[1]]


def p_param_list_rest(p):
    """param_list : param_list COMMA param"""
    p[1].append(p[3])
    p[0] = p[1]


def p_param_anonymous(p):
    """param : param_type"""
    p[0] = ParamDecl(p[1])


def p_param_named(p):
    """param : param_type IDENT"""
    p[0] = ParamDecl(p[1], p[2])


def p_param_type(p):
    """param_type : SCALAR
    | name"""
    p[0] = p[1]


def p_empty(p):
    """empty :"""
    p[0] = None


class _EndOfInput(Exception):
    pass


def p_error(t):
    if t is None:
        raise _EndOfInput()
    tok = t.value
    logger.debug("syntax error at %s (line %d)", tok, tok.line)
    raise ParseError(f"unexpected {tok}", token=tok)


class _TokenFeed:
    """Feeds Token values to ply.yacc through its ``token()`` protocol."""

    def __init__(self, tokens: Iterable[Token]):
        self._tokens = iter(tokens)
        self.depth = 0
        self.last: Optional[Token] = None
        self.end: Optional[Token] = None

    def token(self):
        tok = next(self._tokens, None)
        if tok is None or tok.kind is TokenKind.EOF:
            self.end = tok
            return None
        if tok.kind is TokenKind.LPAREN:
            self.depth += 1
        elif tok.kind is TokenKind.RPAREN and self.depth:
            self.depth -= 1
        self.last = tok

        lex_token = lex.LexToken()
        lex_token.type = tok.kind.name
        lex_token.value = tok
        lex_token.lineno = tok.line
        lex_token.lexpos = tok.column
        return lex_token

    @property
    def end_line(self) -> int:
        if self.last is not None:
            return self.last.line
        if self.end is not None:
            return self.end.line
        return 1


_parser = None


def _get_parser():
    global _parser
    if _parser is None:
        _parser = yacc.yacc(
            debug=False, write_tables=False, errorlog=yacc.NullLogger()
        )
    return _parser


def parse(tokens: Iterable[Token]) -> List[Declaration]:
    """Parse a token stream into an ordered list of declarations.

    Args:
        tokens: Tokens as produced by ``tokenize``. The stream may end with
            an EOF token; it is consumed at most once.

    Returns:
        Declarations in source order (empty for an empty stream).

    Raises:
        ParseError: On an unexpected token or a premature end of input.
        LexError: Propagated from a lazy tokenizer.
    """
    feed = _TokenFeed(tokens)
    try:
        declarations = _get_parser().parse(lexer=feed)
    except _EndOfInput:
        if feed.depth > 0:
            message = "missing closing ')'"
        else:
            message = "unexpected end of input"
        logger.debug("%s at line %d", message, feed.end_line)
        raise ParseError(message, token=feed.end, line=feed.end_line) from None

    declarations = declarations or []
    logger.info("parsed %d declarations", len(declarations))
    return declarations


def parse_text(text: str) -> List[Declaration]:
    """Tokenize and parse config text in one step."""
    return parse(tokenize(text))
