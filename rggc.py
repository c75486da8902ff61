#!/usr/bin/env python3
"""rggc: syntax and semantic analyser for rgg programs.

Thin entry point that delegates to src.compiler.main.
"""

import sys

from src.compiler.main import main

if __name__ == "__main__":
    sys.exit(main())
