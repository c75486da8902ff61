"""Literal tokenization: strings and numbers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .tokens import Token, TokenType

if TYPE_CHECKING:
    from .lexer import Lexer


def read_string(lex: Lexer) -> Token:
    """Read a double-quoted, single-line string literal.

    The token value is the content between the quotes; escape sequences are
    kept verbatim.
    """
    from .lexer import LexerError
    line, col = lex.line, lex.col
    lex._advance()  # skip opening "

    chars: list[str] = []
    while lex.pos < len(lex.source):
        ch = lex._peek()
        if ch == '"':
            lex._advance()
            return lex._emit(TokenType.STRING_LIT, ''.join(chars), line, col)
        elif ch == '\\':
            chars.append(lex._advance())
            if lex.pos < len(lex.source) and lex._peek() != '\n':
                chars.append(lex._advance())
        elif ch == '\n':
            raise LexerError("Unterminated string literal", line, col)
        else:
            chars.append(lex._advance())
    raise LexerError("Unterminated string literal", line, col)


def read_number(lex: Lexer) -> Token:
    """Read an integer or decimal number constant."""
    line, col = lex.line, lex.col
    start = lex.pos
    while lex.pos < len(lex.source) and lex._peek().isdigit():
        lex._advance()
    # Fractional part only when a digit follows the dot
    if lex._peek() == '.' and lex._peek(1).isdigit():
        lex._advance()
        while lex.pos < len(lex.source) and lex._peek().isdigit():
            lex._advance()
    return lex._emit(TokenType.NUMBER_LIT, lex.source[start:lex.pos], line, col)
