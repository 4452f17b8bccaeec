"""Allow ``python -m hoptreelib``."""

import sys

from .cli import main

sys.exit(main())
