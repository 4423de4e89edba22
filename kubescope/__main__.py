"""Allow ``python -m kubescope``."""

import sys

from kubescope.cli import main

sys.exit(main())
