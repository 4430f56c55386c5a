"""Bootstrap module for CLI path setup.

Makes the project root importable when the CLI is run from a checkout
(python cli/cli.py) instead of an installed package.
"""

import sys
from pathlib import Path

_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))
