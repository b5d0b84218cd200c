import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from justcmd.failure import RecordingFailureHandler, get_fail_handler, set_fail_handler  # noqa: E402


@pytest.fixture(autouse=True)
def restore_fail_handler():
    previous = get_fail_handler()
    yield
    set_fail_handler(previous)


@pytest.fixture
def recorder() -> RecordingFailureHandler:
    handler = RecordingFailureHandler()
    set_fail_handler(handler)
    return handler
