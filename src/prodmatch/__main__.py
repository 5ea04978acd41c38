"""Allow running with: python -m prodmatch"""

import sys

from .main import cli

sys.exit(cli())
