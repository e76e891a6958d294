from __future__ import annotations

import sys
from pathlib import Path

# Import buildwatch from this checkout's src/ even when an older copy is installed.
SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))
