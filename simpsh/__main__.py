"""Allow running simpsh with ``python -m simpsh``."""

import sys

from simpsh.main import main

sys.exit(main())
