"""Hover provider for rgg: keyword help and the inferred type of variables."""

from typing import Optional

from lsprotocol import types as lsp

from src.compiler.tokens import TokenType
from src.devex.lsp.diagnostics import AnalysisResult
from src.devex.lsp.utils import find_token_at_position, latest_declaration

_KEYWORD_DOCS: dict[str, str] = {
    "begin": "Opens the program body: `begin <statements> end`.",
    "if": "Conditional: `if <condition> then ... [else ...] end if`.",
    "while": "Pre-tested loop: `while <condition> loop ... end loop`.",
    "do": "Post-tested loop: `do ... until <condition>`; also opens a `for` body.",
    "for": ("Counted loop: `for (<assign>; <condition>; <assign>) do ... end loop`. "
            "Variables assigned in the header or body are local to the loop."),
    "call": "Procedure call: `call name(arg, ...)`; arguments must be declared.",
}


def get_hover_info(
    result: AnalysisResult, position: lsp.Position
) -> Optional[lsp.Hover]:
    """Return hover information for the token at the given position."""
    if not result.tokens:
        return None

    token = find_token_at_position(result.tokens, position)
    if token is None:
        return None

    content: Optional[str] = None
    if token.value in _KEYWORD_DOCS and token.type != TokenType.IDENT:
        content = f"**`{token.value}`**: {_KEYWORD_DOCS[token.value]}"
    elif token.type == TokenType.IDENT:
        variable = latest_declaration(result.events, token.value, token.line, token.col)
        if variable is not None:
            content = f"```rgg\n{variable.identifier}: {variable.type.value}\n```"

    if content is None:
        return None

    return lsp.Hover(
        contents=lsp.MarkupContent(
            kind=lsp.MarkupKind.Markdown,
            value=content,
        ),
    )
