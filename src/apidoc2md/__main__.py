"""Entry point for ``python -m apidoc2md``."""

import sys

from apidoc2md.cli import main

if __name__ == "__main__":
    sys.exit(main())
