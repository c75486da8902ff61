"""Reader for src/language/grammar.ebnf.

Extracts from the @lexical section:
  - keywords and their TokenType names ("until" -> "UNTIL")
  - operators, longest first, and their TokenType names (":=" -> "COLON_EQ")
  - literal classes (identifier, numberConstant, stringConstant) and patterns

and, from the rest of the file, the production names in declaration order.
tokens.py builds its tables from this, so a terminal that is not declared
in the grammar cannot be lexed.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field


@dataclass
class GrammarInfo:
    keywords: set[str] = field(default_factory=set)
    operators: list[str] = field(default_factory=list)  # longest first
    keyword_to_token: dict[str, str] = field(default_factory=dict)
    op_to_token: dict[str, str] = field(default_factory=dict)
    literals: dict[str, str] = field(default_factory=dict)  # name -> regex
    productions: list[str] = field(default_factory=list)


_CHAR_NAMES: dict[str, str] = {
    '<': 'LT', '>': 'GT', '=': 'EQ', ':': 'COLON',
    '+': 'PLUS', '-': 'MINUS', '*': 'STAR', '/': 'SLASH',
    ';': 'SEMICOLON', ',': 'COMMA', '(': 'LPAREN', ')': 'RPAREN',
}

_LINE_COMMENT = re.compile(r'--[^\n]*')
_BLOCK_COMMENT = re.compile(r'\(\*.*?\*\)', re.S)
_LITERAL_RULE = re.compile(r'([A-Za-z_]\w*)\s*=\s*/((?:[^/\\\n]|\\.)*)/')
_PRODUCTION_RULE = re.compile(r'^\s*([A-Z]\w*)\s*=', re.M)


def _op_to_token_name(op: str) -> str:
    """"+" -> "PLUS", "<=" -> "LT_EQ": one name component per character."""
    try:
        return '_'.join(_CHAR_NAMES[ch] for ch in op)
    except KeyError as e:
        raise ValueError(
            f"No character name for {e.args[0]!r} in operator {op!r}. "
            f"Add it to _CHAR_NAMES."
        ) from None


def _skip_quoted(text: str, i: int, close: str) -> int:
    """Index just past the ``close`` that ends the quoted run opened at i."""
    i += 1
    while i < len(text) and text[i] != close:
        i += 2 if text[i] == '\\' else 1
    return i + 1


def _block_span(text: str, marker: str) -> tuple[int, int] | None:
    """(start, end) of the body of ``marker { ... }``, braces balanced.

    Braces inside "strings", /regexes/ and -- comments do not count.
    """
    m = re.search(re.escape(marker) + r'\s*\{', text)
    if m is None:
        return None
    depth, i = 1, m.end()
    while i < len(text):
        ch = text[i]
        if text.startswith('--', i):
            i = text.find('\n', i)
            if i < 0:
                break
            continue
        if ch in '"/':
            i = _skip_quoted(text, i, ch)
            continue
        if ch == '{':
            depth += 1
        elif ch == '}':
            depth -= 1
            if depth == 0:
                return m.end(), i
        i += 1
    return None


def _block(text: str, marker: str) -> str | None:
    span = _block_span(text, marker)
    return text[span[0]:span[1]] if span else None


def parse_grammar(text: str) -> GrammarInfo:
    """Parse grammar text. Raises ValueError without an @lexical section."""
    text = _BLOCK_COMMENT.sub('', text)
    span = _block_span(text, "@lexical")
    if span is None:
        raise ValueError("No @lexical section found in grammar")
    lexical = text[span[0]:span[1]]
    info = GrammarInfo()

    keywords = _block(lexical, "@keywords")
    if keywords is not None:
        words = re.findall(r'[A-Za-z_]\w*', _LINE_COMMENT.sub('', keywords))
        info.keywords = set(words)
        info.keyword_to_token = {kw: kw.upper() for kw in words}

    operators = _block(lexical, "@operators")
    if operators is not None:
        ops = re.findall(r'"([^"]+)"', _LINE_COMMENT.sub('', operators))
        info.operators = sorted(ops, key=lambda op: (-len(op), op))
        info.op_to_token = {op: _op_to_token_name(op) for op in info.operators}

    literals = _block(lexical, "@literals")
    if literals is not None:
        info.literals = dict(_LITERAL_RULE.findall(literals))

    # Everything outside the @lexical section is the production list
    rest = text[:span[0]] + text[span[1]:]
    info.productions = _PRODUCTION_RULE.findall(rest)
    return info


def parse_file(filepath: str) -> GrammarInfo:
    with open(filepath) as f:
        return parse_grammar(f.read())


def _find_grammar_file() -> str:
    """src/language/grammar.ebnf, next to this package."""
    here = os.path.dirname(os.path.abspath(__file__))
    return os.path.join(os.path.dirname(here), "language", "grammar.ebnf")


_grammar_info: GrammarInfo | None = None


def get_grammar_info() -> GrammarInfo:
    """Parsed grammar, loaded on first access."""
    global _grammar_info
    if _grammar_info is None:
        _grammar_info = parse_file(_find_grammar_file())
    return _grammar_info
