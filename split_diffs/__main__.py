# split_diffs/__main__.py
"""Allow running split-diffs as ``python -m split_diffs``."""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
