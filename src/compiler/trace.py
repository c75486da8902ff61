"""Trace sinks: receivers of the parser's begin/end/terminal/variable/error events."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import NoReturn, Optional, TextIO

from .diagnostics import AnalysisError, ParseError, TraceError
from .semantics.scope import Variable
from .tokens import Token, VALUE_TOKENS


class TraceSink(ABC):
    """Event receiver driven by the parser.

    Nesting depth is the sink's own state; the parser only guarantees one
    begin/end pair per production call.
    """

    @abstractmethod
    def begin(self, name: str): ...

    @abstractmethod
    def end(self, name: str): ...

    @abstractmethod
    def terminal(self, token: Token): ...

    @abstractmethod
    def variable_added(self, variable: Variable): ...

    @abstractmethod
    def variable_removed(self, variable: Variable): ...

    @abstractmethod
    def report_error(self, token: Token, fault: AnalysisError): ...

    def error(self, token: Token, message: str,
              cause: Optional[AnalysisError] = None,
              kind: Optional[type[AnalysisError]] = None,
              **details) -> NoReturn:
        """Record a fault at ``token`` and raise it. Never returns.

        With a cause the fault is a TraceError link unless ``kind`` says
        otherwise; without one it is a ParseError.
        """
        if kind is None:
            kind = TraceError if cause is not None else ParseError
        fault = kind(message, token.line, token.col, cause=cause, **details)
        self.report_error(token, fault)
        raise fault from cause


class IndentedTraceSink(TraceSink):
    """Writes one line per event, indented with a tab per open production."""

    def __init__(self, stream: TextIO | None = None, marker: str = "rgg"):
        self.stream = stream if stream is not None else sys.stdout
        self.marker = marker
        self.indentation_level = 0

    def _write(self, tag: str, text: str):
        self.stream.write("\t" * self.indentation_level
                          + f"{self.marker}{tag} {text}\n")

    def begin(self, name: str):
        self._write("BEGIN", name)
        self.indentation_level += 1

    def end(self, name: str):
        self.indentation_level -= 1
        self._write("END", name)

    def terminal(self, token: Token):
        text = token.kind_name
        if token.type in VALUE_TOKENS:
            text += f" '{token.value}'"
        self._write("TOKEN", f"{text} on line {token.line}")

    def variable_added(self, variable: Variable):
        self._write("DECL", str(variable))

    def variable_removed(self, variable: Variable):
        self._write("REMOVE", str(variable))

    def report_error(self, token: Token, fault: AnalysisError):
        self._write("ERROR", f"{fault.message} on line {token.line}")


@dataclass(frozen=True)
class TraceEvent:
    kind: str  # "begin" | "end" | "terminal" | "add" | "remove" | "error"
    name: str = ""
    token: Optional[Token] = None
    variable: Optional[Variable] = None
    fault: Optional[AnalysisError] = None


class RecordingTraceSink(TraceSink):
    """Keeps every event in memory, in order."""

    def __init__(self):
        self.events: list[TraceEvent] = []

    def begin(self, name: str):
        self.events.append(TraceEvent("begin", name))

    def end(self, name: str):
        self.events.append(TraceEvent("end", name))

    def terminal(self, token: Token):
        self.events.append(TraceEvent("terminal", token.kind_name, token=token))

    def variable_added(self, variable: Variable):
        self.events.append(TraceEvent("add", variable.identifier, variable=variable))

    def variable_removed(self, variable: Variable):
        self.events.append(TraceEvent("remove", variable.identifier, variable=variable))

    def report_error(self, token: Token, fault: AnalysisError):
        self.events.append(TraceEvent("error", fault.message, token=token, fault=fault))

    def of_kind(self, kind: str) -> list[TraceEvent]:
        return [e for e in self.events if e.kind == kind]
