"""Allow ``python -m cpylang``."""

import sys

from cpylang.cli import main

raise SystemExit(main(sys.argv[1:]))
