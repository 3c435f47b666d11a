"""Allow ``python -m riviere``."""

import sys

from riviere.cli import main

sys.exit(main())
