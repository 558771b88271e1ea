"""Allow running proctree with python -m proctree."""

import sys

from proctree.cli import main

sys.exit(main())
