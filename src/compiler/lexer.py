"""Lexer for the rgg language.

Grammar-driven: keyword and operator tables are built from
src/language/grammar.ebnf via the ebnf module. Literal scanning lives in
lexer_literals.py.

The lexer is pull-based: the parser asks for one token at a time with
next_token(), and the end of input is reported by an EOF token (repeated on
every further call). tokenize() drains the stream into a list.
"""

from .ebnf import get_grammar_info
from .lexer_literals import read_number, read_string
from .tokens import KEYWORDS, OPERATORS, Token, TokenType


class LexerError(Exception):
    def __init__(self, message: str, line: int, col: int):
        self.message = message
        self.line = line
        self.col = col
        super().__init__(f"{message} at {line}:{col}")


class Lexer:
    def __init__(self, source: str, filename: str = "<stdin>"):
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.col = 1

        # Build operator trie from grammar for longest-match tokenization
        gi = get_grammar_info()
        self._op_trie = _build_trie(gi.operators)

    def next_token(self) -> Token:
        self._skip_whitespace()
        if self.pos >= len(self.source):
            return Token(TokenType.EOF, "", self.line, self.col)

        ch = self.source[self.pos]

        if ch == '"':
            return read_string(self)
        if ch.isdigit():
            return read_number(self)
        if ch.isalpha() or ch == '_':
            return self._read_identifier()
        return self._read_operator()

    def tokenize(self) -> list[Token]:
        tokens: list[Token] = []
        while True:
            tok = self.next_token()
            tokens.append(tok)
            if tok.type == TokenType.EOF:
                return tokens

    # --- Character helpers ---

    def _peek(self, offset: int = 0) -> str:
        pos = self.pos + offset
        if pos < len(self.source):
            return self.source[pos]
        return '\0'

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        return ch

    def _emit(self, token_type: TokenType, value: str, line: int, col: int) -> Token:
        return Token(token_type, value, line, col)

    def _skip_whitespace(self):
        while self.pos < len(self.source) and self._peek() in (' ', '\t', '\n', '\r'):
            self._advance()

    # --- Identifier / keyword ---

    def _read_identifier(self) -> Token:
        line, col = self.line, self.col
        start = self.pos
        while self.pos < len(self.source) and (self._peek().isalnum() or self._peek() == '_'):
            self._advance()
        value = self.source[start:self.pos]
        token_type = KEYWORDS.get(value, TokenType.IDENT)
        return self._emit(token_type, value, line, col)

    # --- Operators and punctuation (trie-based longest match) ---

    def _read_operator(self) -> Token:
        line, col = self.line, self.col

        node = self._op_trie
        best_match = None
        best_len = 0
        i = 0
        while self.pos + i < len(self.source):
            ch = self.source[self.pos + i]
            if ch not in node:
                break
            node = node[ch]
            i += 1
            if '' in node:  # terminal marker
                best_match = node['']
                best_len = i

        if best_match is not None:
            value = self.source[self.pos:self.pos + best_len]
            for _ in range(best_len):
                self._advance()
            return self._emit(best_match, value, line, col)

        ch = self._peek()
        raise LexerError(f"Unexpected character '{ch}'", line, col)


def _build_trie(operators: list[str]) -> dict:
    """Build a trie from operator strings for longest-match tokenization.

    Each node is a dict mapping character -> child node.
    Terminal nodes have '' -> TokenType entry.
    """
    root: dict = {}
    for op in operators:
        token_type = OPERATORS[op]
        node = root
        for ch in op:
            if ch not in node:
                node[ch] = {}
            node = node[ch]
        node[''] = token_type
    return root
