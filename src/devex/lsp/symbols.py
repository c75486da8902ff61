"""Document symbol provider for rgg.

Lists each variable the analysis declared, at its first declaration.
"""

from __future__ import annotations

from lsprotocol import types as lsp

from src.devex.lsp.diagnostics import AnalysisResult
from src.devex.lsp.utils import declared_variables, name_range


def get_document_symbols(result: AnalysisResult) -> list[lsp.DocumentSymbol]:
    symbols: list[lsp.DocumentSymbol] = []
    seen: set[str] = set()

    for variable in declared_variables(result.events):
        if variable.identifier in seen:
            continue
        seen.add(variable.identifier)
        rng = name_range(variable.line, variable.col, variable.identifier)
        symbols.append(
            lsp.DocumentSymbol(
                name=variable.identifier,
                kind=lsp.SymbolKind.Variable,
                range=rng,
                selection_range=rng,
                detail=variable.type.value,
            )
        )
    return symbols
