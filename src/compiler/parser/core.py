"""Parser core: lookahead handling, terminal acceptance, fault reporting and
the analyse() entry point."""

from __future__ import annotations

import functools
import logging
import sys
from typing import NoReturn, Optional

from ..diagnostics import AnalysisError, ParseError, UndeclaredVariableError
from ..semantics.scope import ScopeStack, Variable
from ..semantics.types import ExpressionTypeChecker
from ..tokens import TOKEN_NAMES, Token, TokenType
from ..trace import TraceSink

logger = logging.getLogger(__name__)

# StatementList and Expression recurse once per statement or operand, two
# frames (wrapper and method) per level
RECURSION_LIMIT = 10000


def production(name: str):
    """Turn a method into a traced grammar production.

    The wrapped method is bracketed by begin/end events (end is emitted on
    every exit path), and any fault escaping it is re-raised as a TraceError
    link naming the production.
    """
    def decorate(method):
        @functools.wraps(method)
        def wrapper(self, *args, **kwargs):
            self.sink.begin(name)
            try:
                return method(self, *args, **kwargs)
            except AnalysisError as fault:
                self.sink.error(self.lookahead, f"error caught in {name}",
                                cause=fault, production=name)
            finally:
                self.sink.end(name)
        return wrapper
    return decorate


class ParserBase:
    def __init__(self, stream, sink: TraceSink):
        """``stream`` is any object with a next_token() method (e.g. Lexer)."""
        self.stream = stream
        self.sink = sink
        self.scopes = ScopeStack(sink)
        self.types = ExpressionTypeChecker(self.scopes)
        self.lookahead: Optional[Token] = None

    def analyse(self):
        """Analyse one program. Raises the first AnalysisError found.

        The recursion limit is raised to RECURSION_LIMIT for the duration of
        the analysis; a program deeper than that still raises RecursionError.
        """
        logger.debug("analysis started")
        sys_limit = sys.getrecursionlimit()
        if RECURSION_LIMIT > sys_limit:
            sys.setrecursionlimit(RECURSION_LIMIT)
        try:
            self.lookahead = self.stream.next_token()
            self._statement_part()
            if self.lookahead.type != TokenType.EOF:
                self._fail(f"unexpected {self.lookahead.describe()} after end of program")
        finally:
            sys.setrecursionlimit(sys_limit)
        logger.debug("analysis finished, %d global variable(s)",
                     len(self.scopes.global_scope))

    # ---- Terminals ----

    def accept_terminal(self, expected: TokenType) -> Token:
        tok = self.lookahead
        if tok.type != expected:
            self._fail(f"expected '{TOKEN_NAMES[expected]}', got {tok.describe()}")
        self.sink.terminal(tok)
        self.lookahead = self.stream.next_token()
        return tok

    def _check(self, *types: TokenType) -> bool:
        return self.lookahead.type in types

    # ---- Faults ----

    def _fail(self, message: str, kind: type[AnalysisError] = ParseError,
              token: Optional[Token] = None) -> NoReturn:
        self.sink.error(token or self.lookahead, message, kind=kind)

    def _invalid_token(self) -> NoReturn:
        self._fail(f"invalid token: {self.lookahead.describe()}")

    # ---- Scope helpers ----

    def _require_declared(self) -> Optional[Variable]:
        """If the lookahead is an identifier it must name a visible variable."""
        tok = self.lookahead
        if tok.type != TokenType.IDENT:
            return None
        variable = self.scopes.lookup(tok.value)
        if variable is None:
            self._fail(f"undeclared variable '{tok.value}'",
                       kind=UndeclaredVariableError)
        return variable
