"""
fns - Lexer
Tokenizes fns source code into a flat token stream.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, List

from .errors import FnsError


class TokenType(Enum):
    # Literals
    NUMBER     = auto()
    STRING     = auto()
    IDENTIFIER = auto()
    BOOLEAN    = auto()   # true false
    NONE       = auto()   # none
    # Keywords
    LET        = auto()
    CONST      = auto()
    # Arithmetic
    PLUS       = auto()   # +
    MINUS      = auto()   # -
    STAR       = auto()   # *
    SLASH      = auto()   # /
    # Comparisons & logical
    EQ         = auto()   # ==
    NEQ        = auto()   # !=
    LTE        = auto()   # <=
    GTE        = auto()   # >=
    LT         = auto()   # <
    GT         = auto()   # >
    AND        = auto()   # &&
    OR         = auto()   # ||
    BANG       = auto()   # !
    ASSIGN     = auto()   # =
    # Punctuation
    LPAREN     = auto()   # (
    RPAREN     = auto()   # )
    LBRACE     = auto()   # {
    RBRACE     = auto()   # }
    COLON      = auto()   # :
    COMMA      = auto()   # ,
    DOT        = auto()   # .
    # Sentinel
    EOF        = auto()


KEYWORDS = {
    "let":   TokenType.LET,
    "const": TokenType.CONST,
    "true":  TokenType.BOOLEAN,
    "false": TokenType.BOOLEAN,
    "none":  TokenType.NONE,
}


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str
    line: int
    column: int

    def __repr__(self):
        return f"Token({self.type.name}, {self.value!r}, line={self.line}, column={self.column})"


class LexerError(FnsError):
    pass


# Token specification: ordered list of (TokenType, regex) pairs.
# Two-character operators precede their one-character prefixes.
_TOKEN_SPEC = [
    (TokenType.EQ,         r'=='),
    (TokenType.NEQ,        r'!='),
    (TokenType.LTE,        r'<='),
    (TokenType.GTE,        r'>='),
    (TokenType.AND,        r'&&'),
    (TokenType.OR,         r'\|\|'),
    (TokenType.LT,         r'<'),
    (TokenType.GT,         r'>'),
    (TokenType.BANG,       r'!'),
    (TokenType.ASSIGN,     r'='),
    (TokenType.NUMBER,     r'\d+(?:\.\d*)?'),
    (TokenType.IDENTIFIER, r'[A-Za-z_]+'),
    (TokenType.STRING,     r'"[^"]*"'),
    (TokenType.PLUS,       r'\+'),
    (TokenType.MINUS,      r'-'),
    (TokenType.STAR,       r'\*'),
    (TokenType.SLASH,      r'/'),
    (TokenType.LPAREN,     r'\('),
    (TokenType.RPAREN,     r'\)'),
    (TokenType.LBRACE,     r'\{'),
    (TokenType.RBRACE,     r'\}'),
    (TokenType.COLON,      r':'),
    (TokenType.COMMA,      r','),
    (TokenType.DOT,        r'\.'),
]

_MASTER_RE = re.compile(
    r'(?:' + '|'.join(f'(?P<T{i}>{spec[1]})' for i, spec in enumerate(_TOKEN_SPEC)) + r')',
    re.ASCII
)

_WHITESPACE_RE = re.compile(r'[ \t\r]+')
_COMMENT_RE    = re.compile(r'//[^\n]*')
_NEWLINE_RE    = re.compile(r'\n')


class Lexer:
    """
    Lazy token stream over a source string.

    Each call to ``iter()`` starts again from the beginning of the source,
    so the same Lexer can be consumed more than once.
    Raises LexerError on the first unrecognized character.
    """

    def __init__(self, source: str):
        self.source = source

    def __iter__(self) -> Iterator[Token]:
        source = self.source
        line = 1
        line_start = 0
        pos = 0
        length = len(source)

        while pos < length:
            # Skip whitespace (not newlines)
            m = _WHITESPACE_RE.match(source, pos)
            if m:
                pos = m.end()
                continue

            # Skip comments; must come before the '/' operator
            m = _COMMENT_RE.match(source, pos)
            if m:
                pos = m.end()
                continue

            # Newlines
            m = _NEWLINE_RE.match(source, pos)
            if m:
                line += 1
                pos = m.end()
                line_start = pos
                continue

            column = pos - line_start + 1
            m = _MASTER_RE.match(source, pos)
            if not m:
                if source[pos] == '"':
                    raise LexerError("Unterminated string", line, column)
                raise LexerError(f"Unexpected character: {source[pos]!r}", line, column)

            raw = m.group(0)
            tok_type = _TOKEN_SPEC[int(m.lastgroup[1:])][0]
            value = raw

            if tok_type == TokenType.IDENTIFIER:
                tok_type = KEYWORDS.get(raw, TokenType.IDENTIFIER)
            elif tok_type == TokenType.NUMBER:
                if source.startswith('.', m.end()):
                    raise LexerError(f"Malformed number: {raw + '.'!r}", line, column)
            elif tok_type == TokenType.STRING:
                value = raw[1:-1]

            yield Token(tok_type, value, line, column)
            pos = m.end()

            # Strings may span lines
            if tok_type == TokenType.STRING and '\n' in raw:
                line += raw.count('\n')
                line_start = m.start() + raw.rindex('\n') + 1

        yield Token(TokenType.EOF, '', line, pos - line_start + 1)


def tokenize(source: str) -> List[Token]:
    """
    Convert fns source string into a list of Tokens ending with EOF.
    Raises LexerError on unrecognized characters.
    """
    return list(Lexer(source))
