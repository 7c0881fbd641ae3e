# Ensure the src/ directory is on sys.path so 'netirc' is importable when running
# pytest from a checkout that has not been installed.
import sys
from pathlib import Path

import pytest

SRC = Path(__file__).parent.resolve() / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture(autouse=True)
def no_debug_env(monkeypatch):
    """Keep log messages in their concise form regardless of the caller's shell."""
    monkeypatch.delenv("DEBUG", raising=False)
