"""Allow running the renderer with ``python -m smallpt``."""

import sys

from smallpt.cli import main

sys.exit(main())
