"""Variables and the scope stack: one global table plus one table per open loop."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from ..trace import TraceSink

logger = logging.getLogger(__name__)


class VarType(Enum):
    NUMBER = "NUMBER"
    STRING = "STRING"
    UNKNOWN = "UNKNOWN"


@dataclass
class Variable:
    identifier: str
    type: VarType = VarType.UNKNOWN
    # Position of the identifier in the assignment that declared it
    line: int = 0
    col: int = 0

    def __str__(self):
        return f"{self.identifier} {self.type.value}"


class ScopeStack:
    """Global scope plus a stack of loop scopes, innermost last.

    Loop scopes are opened and closed in strict stack order around each for
    loop. Lookup does not walk the stack innermost-first: every open loop
    scope is searched from the outermost inward, then the global scope. A
    name declared in an outer loop therefore hides the same name declared in
    an inner one.
    """

    def __init__(self, sink: TraceSink):
        self.sink = sink
        self.global_scope: dict[str, Variable] = {}
        self.loop_scopes: list[dict[str, Variable]] = []

    @property
    def depth(self) -> int:
        """Number of currently open loop scopes (0 at top level)."""
        return len(self.loop_scopes)

    def declare(self, identifier: str, variable: Variable):
        if self.loop_scopes:
            self.loop_scopes[-1][identifier] = variable
        else:
            self.global_scope[identifier] = variable
        self.sink.variable_added(variable)

    def lookup(self, identifier: str) -> Variable | None:
        for scope in self.loop_scopes:
            if identifier in scope:
                return scope[identifier]
        return self.global_scope.get(identifier)

    def enter_loop_scope(self):
        self.loop_scopes.append({})
        logger.debug("entered loop scope at depth %d", self.depth)

    def exit_loop_scope(self) -> list[Variable]:
        if not self.loop_scopes:
            raise RuntimeError("exit_loop_scope() called with no open loop scope")
        scope = self.loop_scopes.pop()
        removed = list(scope.values())
        for variable in removed:
            self.sink.variable_removed(variable)
        logger.debug("left loop scope at depth %d, removed %d variable(s)",
                     self.depth + 1, len(removed))
        return removed

    @contextmanager
    def loop_scope(self) -> Iterator[dict[str, Variable]]:
        """Open a loop scope for the duration of the block.

        If the block raises, the scope is dropped without removal events so
        nothing but the fault's own events follows it in the trace.
        """
        self.enter_loop_scope()
        opened = self.depth
        try:
            yield self.loop_scopes[-1]
        except Exception:
            del self.loop_scopes[opened - 1:]
            raise
        self.exit_loop_scope()
