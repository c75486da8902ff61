"""Parser assembly: combines the production mixins into the final Parser class."""

from typing import Optional

from ..lexer import Lexer
from ..trace import RecordingTraceSink, TraceSink
from .core import ParserBase
from .statements import StatementsMixin
from .control_flow import ControlFlowMixin
from .expressions import ExpressionsMixin


class Parser(
    ExpressionsMixin,
    ControlFlowMixin,
    StatementsMixin,
    ParserBase,
):
    """Recursive descent parser and semantic checker for the rgg language."""
    pass


def analyse(stream, sink: Optional[TraceSink] = None) -> Parser:
    """Analyse the program read from ``stream``.

    Raises the first AnalysisError found; returns the finished Parser so
    callers can inspect the final global scope.
    """
    parser = Parser(stream, sink if sink is not None else RecordingTraceSink())
    parser.analyse()
    return parser


def analyse_source(source: str, sink: Optional[TraceSink] = None,
                   filename: str = "<stdin>") -> Parser:
    return analyse(Lexer(source, filename), sink)


__all__ = ["Parser", "analyse", "analyse_source"]
