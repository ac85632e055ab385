from __future__ import annotations

import sys
from pathlib import Path

import pytest


ROOT = Path(__file__).resolve().parents[1]
PYTHON_SRC = ROOT / "python"

if str(PYTHON_SRC) not in sys.path:
    sys.path.insert(0, str(PYTHON_SRC))
else:
    sys.path.remove(str(PYTHON_SRC))
    sys.path.insert(0, str(PYTHON_SRC))


@pytest.fixture(autouse=True)
def _isolated_audit_state():
    from treea11y import ui
    from treea11y.accessibility import deactivate, reset_id_counter

    reset_id_counter()
    yield
    deactivate(ui)
    reset_id_counter()


@pytest.fixture
def click():
    def handler(*_args):
        return None

    return handler
