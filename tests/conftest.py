import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))


@pytest.fixture(autouse=True)
def _fresh_global_emitter():
    from event_emitter import reset_event_emitter

    reset_event_emitter()
    yield
    reset_event_emitter()
