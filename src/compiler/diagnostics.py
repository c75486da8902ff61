"""Analysis faults and their cause chains.

A fault raised deep inside the parser is re-wrapped by every production it
passes through, so the exception that reaches the caller is the head of a
chain: outermost link first, the original fault last.
"""

from __future__ import annotations

from typing import Iterator


class AnalysisError(Exception):
    def __init__(self, message: str, line: int = 0, col: int = 0,
                 cause: AnalysisError | None = None):
        self.message = message
        self.line = line
        self.col = col
        self.cause = cause
        super().__init__(f"{message} at {line}:{col}")

    def chain(self) -> Iterator[AnalysisError]:
        """Yield this fault and its causes, outermost first."""
        fault: AnalysisError | None = self
        while fault is not None:
            yield fault
            fault = fault.cause

    @property
    def root(self) -> AnalysisError:
        """The original fault at the end of the chain."""
        *_, last = self.chain()
        return last

    @property
    def productions(self) -> list[str]:
        """Names of the productions the fault unwound through, outermost first."""
        return [f.production for f in self.chain() if isinstance(f, TraceError)]


class ParseError(AnalysisError):
    """The lookahead does not match what the active production requires."""


class UndeclaredVariableError(AnalysisError):
    """An identifier is used before any visible assignment declared it."""


class TypeMismatchError(AnalysisError):
    """An arithmetic operator is applied to incompatible operand types."""


class TraceError(AnalysisError):
    """Context link added by an enclosing production."""

    def __init__(self, message: str, line: int = 0, col: int = 0,
                 cause: AnalysisError | None = None, production: str = ""):
        super().__init__(message, line, col, cause)
        self.production = production


def format_chain(fault: AnalysisError, indent: str = "  ") -> str:
    """Render a fault chain top to bottom, one link per line.

    error caught in StatementPart at 3:1
      caused by: error caught in StatementList at 3:1
        caused by: undeclared variable 'x' at 3:10
    """
    lines = []
    for depth, link in enumerate(fault.chain()):
        prefix = indent * depth + ("caused by: " if depth else "")
        lines.append(f"{prefix}{link}")
    return "\n".join(lines)
