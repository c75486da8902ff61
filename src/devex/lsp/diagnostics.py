"""Diagnostic computation for rgg documents.

Runs the analyser (lexer -> parser with semantic checks) on source text and
converts the fault, if any, into an LSP Diagnostic.
"""

import os
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlparse, unquote

from lsprotocol import types as lsp

from src.compiler.diagnostics import AnalysisError
from src.compiler.lexer import Lexer, LexerError
from src.compiler.parser.parser import analyse
from src.compiler.tokens import Token
from src.compiler.trace import RecordingTraceSink, TraceEvent


@dataclass
class AnalysisResult:
    """Cached result of analysing a document."""

    uri: str
    source: str
    diagnostics: list[lsp.Diagnostic] = field(default_factory=list)
    tokens: Optional[list[Token]] = None
    events: list[TraceEvent] = field(default_factory=list)
    fault: Optional[AnalysisError] = None


def uri_to_path(uri: str) -> str:
    """Convert file:// URI to filesystem path."""
    parsed = urlparse(uri)
    return unquote(parsed.path)


def _make_diagnostic(
    line: int,
    col: int,
    message: str,
    length: int = 1,
    code: Optional[str] = None,
    severity: lsp.DiagnosticSeverity = lsp.DiagnosticSeverity.Error,
    source: str = "rggc",
) -> lsp.Diagnostic:
    """Create an LSP Diagnostic.

    rgg uses 1-based line/col; LSP uses 0-based.
    """
    line_0 = max(0, line - 1)
    col_0 = max(0, col - 1)
    return lsp.Diagnostic(
        range=lsp.Range(
            start=lsp.Position(line=line_0, character=col_0),
            end=lsp.Position(line=line_0, character=col_0 + max(length, 1)),
        ),
        message=message,
        severity=severity,
        code=code,
        source=source,
    )


def _fault_token(result: AnalysisResult, fault: AnalysisError) -> Optional[Token]:
    """The token the root fault was reported at, from the recorded events."""
    for event in result.events:
        if event.kind == "error" and event.fault is fault:
            return event.token
    return None


def compute_diagnostics(uri: str, source: str) -> AnalysisResult:
    """Analyse the document and return at most one diagnostic."""
    result = AnalysisResult(uri=uri, source=source)
    filename = os.path.basename(uri_to_path(uri))

    try:
        result.tokens = Lexer(source, filename).tokenize()
    except LexerError as e:
        result.diagnostics.append(
            _make_diagnostic(e.line, e.col, e.message, code=type(e).__name__))
        return result

    sink = RecordingTraceSink()
    result.events = sink.events
    try:
        analyse(Lexer(source, filename), sink)
    except AnalysisError as e:
        result.fault = e
        root = e.root
        message = root.message
        if e.productions:
            message += f" (in {' > '.join(e.productions)})"
        tok = _fault_token(result, root)
        length = len(tok.value) if tok is not None and tok.value else 1
        result.diagnostics.append(
            _make_diagnostic(root.line, root.col, message, length=length,
                             code=type(root).__name__))
    except RecursionError:
        result.diagnostics.append(
            _make_diagnostic(1, 1, "program nests too deeply to analyse",
                             code="RecursionError"))
    return result
