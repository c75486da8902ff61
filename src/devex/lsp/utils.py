"""Shared helpers for the rgg LSP feature modules."""

from __future__ import annotations

from typing import Optional

from lsprotocol import types as lsp

from src.compiler.semantics.scope import Variable
from src.compiler.tokens import Token, TokenType
from src.compiler.trace import TraceEvent


def to_position(line: int, col: int) -> lsp.Position:
    """Convert a 1-based rgg position to a 0-based LSP position."""
    return lsp.Position(line=max(0, line - 1), character=max(0, col - 1))


def name_range(line: int, col: int, name: str) -> lsp.Range:
    start = to_position(line, col)
    end = lsp.Position(line=start.line, character=start.character + len(name))
    return lsp.Range(start=start, end=end)


def find_token_at_position(
    tokens: list[Token], position: lsp.Position
) -> Optional[Token]:
    """Find the token that covers the given 0-based LSP position."""
    target_line = position.line + 1
    target_col = position.character + 1

    for tok in tokens:
        if tok.type == TokenType.EOF:
            continue
        if tok.line != target_line:
            continue
        tok_end_col = tok.col + len(tok.value)
        if tok.col <= target_col < tok_end_col:
            return tok
    return None


def declared_variables(events: list[TraceEvent]) -> list[Variable]:
    """Every variable declaration in trace order, re-declarations included."""
    return [e.variable for e in events if e.kind == "add" and e.variable is not None]


def latest_declaration(events: list[TraceEvent], identifier: str,
                       line: int, col: int) -> Optional[Variable]:
    """The last declaration of ``identifier`` at or before line:col."""
    found = None
    for variable in declared_variables(events):
        if variable.identifier != identifier:
            continue
        if (variable.line, variable.col) <= (line, col):
            found = variable
    return found
