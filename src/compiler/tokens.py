"""Token type definitions for the rgg language.

TokenType enum and keyword/operator tables are validated against
src/language/grammar.ebnf at import time so the grammar stays the single
source of truth.
"""

from enum import Enum, auto
from dataclasses import dataclass


class TokenType(Enum):
    # Literals
    IDENT = auto()
    NUMBER_LIT = auto()
    STRING_LIT = auto()

    # Keywords
    BEGIN = auto()
    END = auto()
    IF = auto()
    THEN = auto()
    ELSE = auto()
    WHILE = auto()
    LOOP = auto()
    DO = auto()
    UNTIL = auto()
    FOR = auto()
    CALL = auto()

    # Relational operators
    LT = auto()            # <
    LT_EQ = auto()         # <=
    EQ = auto()            # =
    SLASH_EQ = auto()      # /=
    GT = auto()            # >
    GT_EQ = auto()         # >=

    # Arithmetic operators
    PLUS = auto()          # +
    MINUS = auto()         # -
    STAR = auto()          # *
    SLASH = auto()         # /

    COLON_EQ = auto()      # :=

    # Punctuation
    SEMICOLON = auto()     # ;
    COMMA = auto()         # ,
    LPAREN = auto()        # (
    RPAREN = auto()        # )

    EOF = auto()


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str
    line: int
    col: int

    @property
    def kind_name(self) -> str:
        return TOKEN_NAMES[self.type]

    def describe(self) -> str:
        """Human readable form used in diagnostics, e.g. identifier 'x'."""
        if self.type in VALUE_TOKENS:
            return f"{self.kind_name} '{self.value}'"
        return self.kind_name

    def __repr__(self):
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.col})"


def _resolve(spellings: dict[str, str], what: str) -> dict[str, TokenType]:
    """Map each grammar spelling to the TokenType member it names."""
    table: dict[str, TokenType] = {}
    for spelling, token_name in spellings.items():
        if token_name not in TokenType.__members__:
            raise RuntimeError(
                f"Grammar {what} {spelling!r} needs TokenType.{token_name}; "
                f"add it to tokens.py."
            )
        table[spelling] = TokenType[token_name]
    return table


def _grammar():
    from .ebnf import get_grammar_info
    return get_grammar_info()


KEYWORDS: dict[str, TokenType] = _resolve(_grammar().keyword_to_token, "keyword")

# Longest spelling first, the order the lexer trie is built in
OPERATORS: dict[str, TokenType] = _resolve(_grammar().op_to_token, "operator")

# Token types whose text is part of the trace and of diagnostics
VALUE_TOKENS: set[TokenType] = {
    TokenType.IDENT, TokenType.NUMBER_LIT, TokenType.STRING_LIT,
}

# Display names: keywords and operators by their spelling
TOKEN_NAMES: dict[TokenType, str] = {
    TokenType.IDENT: "identifier",
    TokenType.NUMBER_LIT: "numberConstant",
    TokenType.STRING_LIT: "stringConstant",
    TokenType.EOF: "end of file",
}
TOKEN_NAMES.update({tt: kw for kw, tt in KEYWORDS.items()})
TOKEN_NAMES.update({tt: op for op, tt in OPERATORS.items()})

_missing = [tt.name for tt in TokenType if tt not in TOKEN_NAMES]
if _missing:
    raise RuntimeError(
        f"TokenType members {', '.join(_missing)} are not declared in the "
        f"grammar's @lexical section."
    )
del _missing


def _check_literal_names():
    declared = _grammar().literals
    for tt in sorted(VALUE_TOKENS, key=lambda t: t.name):
        if TOKEN_NAMES[tt] not in declared:
            raise RuntimeError(
                f"Literal class {TOKEN_NAMES[tt]!r} is not declared in the "
                f"grammar's @literals section."
            )


_check_literal_names()

RELATIONAL_OPERATORS: tuple[TokenType, ...] = (
    TokenType.LT, TokenType.LT_EQ, TokenType.EQ,
    TokenType.SLASH_EQ, TokenType.GT, TokenType.GT_EQ,
)

# Lookaheads that begin an Expression, Term or Factor
OPERAND_STARTS: tuple[TokenType, ...] = (
    TokenType.IDENT, TokenType.NUMBER_LIT, TokenType.LPAREN,
)

# Lookaheads that begin a Statement
STATEMENT_STARTS: tuple[TokenType, ...] = (
    TokenType.IDENT, TokenType.IF, TokenType.WHILE,
    TokenType.CALL, TokenType.DO, TokenType.FOR,
)
