"""Allow running as ``python -m repoprep``."""

import sys

from .cli import main

sys.exit(main())
