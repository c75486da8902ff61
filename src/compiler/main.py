#!/usr/bin/env python3
"""rggc: syntax and semantic analyser for rgg programs.

Usage: rggc <input.rgg> [--emit-tokens] [--quiet] [--verbose]
"""

import sys
import os
import argparse
import logging

from .diagnostics import AnalysisError, format_chain
from .lexer import Lexer, LexerError
from .parser.parser import analyse
from .trace import IndentedTraceSink, RecordingTraceSink

logger = logging.getLogger(__name__)


def _format_error(source: str, filename: str, message: str,
                  line: int, col: int) -> str:
    """Format an error with source context and caret."""
    lines = source.split('\n')
    if line < 1 or line > len(lines):
        return f"error: {message}\n --> {filename}:{line}:{col}"
    source_line = lines[line - 1]
    width = len(str(line))
    pad = " " * width
    caret_offset = max(col - 1, 0)
    caret = " " * caret_offset + "^"
    return (
        f"error: {message}\n"
        f" {pad}--> {filename}:{line}:{col}\n"
        f" {pad} |\n"
        f" {line} | {source_line}\n"
        f" {pad} | {caret}"
    )


def main(argv=None) -> int:
    argparser = argparse.ArgumentParser(
        prog="rggc", description="rgg syntax and semantic analyser")
    argparser.add_argument("input", help="Input .rgg file")
    argparser.add_argument("--emit-tokens", action="store_true", help="Print token stream")
    argparser.add_argument("-q", "--quiet", action="store_true",
                           help="Don't print the parse trace")
    argparser.add_argument("-v", "--verbose", action="store_true",
                           help="Log scope and analysis details to stderr")

    args = argparser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        stream=sys.stderr)

    try:
        with open(args.input, "r") as f:
            source = f.read()
    except FileNotFoundError:
        print(f"Error: File '{args.input}' not found", file=sys.stderr)
        return 1

    filename = os.path.basename(args.input)

    if args.emit_tokens:
        try:
            tokens = Lexer(source, filename).tokenize()
        except LexerError as e:
            print(_format_error(source, filename, e.message, e.line, e.col),
                  file=sys.stderr)
            return 1
        for tok in tokens:
            print(tok)
        return 0

    sink = RecordingTraceSink() if args.quiet else IndentedTraceSink(sys.stdout)
    logger.debug("analysing %s", args.input)
    try:
        analyse(Lexer(source, filename), sink)
    except LexerError as e:
        print(_format_error(source, filename, e.message, e.line, e.col),
              file=sys.stderr)
        return 1
    except AnalysisError as e:
        print(format_chain(e), file=sys.stderr)
        root = e.root
        print(_format_error(source, filename, root.message, root.line, root.col),
              file=sys.stderr)
        return 1
    except RecursionError:
        logger.debug("recursion limit reached while analysing %s", args.input)
        print(f"error: {filename}: program nests too deeply to analyse",
              file=sys.stderr)
        return 1

    print(f"Analysed {args.input}: no errors")
    return 0


if __name__ == "__main__":
    sys.exit(main())
