"""rggc: single-pass syntax and semantic analyser for the rgg language."""

from .lexer import Lexer as Lexer, LexerError as LexerError
from .parser.parser import (
    Parser as Parser, analyse as analyse, analyse_source as analyse_source,
)
from .diagnostics import (
    AnalysisError as AnalysisError,
    ParseError as ParseError,
    TraceError as TraceError,
    TypeMismatchError as TypeMismatchError,
    UndeclaredVariableError as UndeclaredVariableError,
)
from .trace import (
    IndentedTraceSink as IndentedTraceSink,
    RecordingTraceSink as RecordingTraceSink,
)
