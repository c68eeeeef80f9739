import datetime
import pathlib
import sys

import pytest

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from checklist.tasks.models import Task  # noqa: E402

# Wednesday
FIXED_NOW = datetime.datetime(2024, 1, 10, 10, 0)


@pytest.fixture
def fixed_now() -> datetime.datetime:
    return FIXED_NOW


@pytest.fixture
def make_task():
    """Factory for tasks with sensible defaults."""

    counter = iter(range(1, 10_000))

    def _make(text: str = "Task", **fields) -> Task:
        fields.setdefault("id", f"task-{next(counter):06d}")
        return Task(text=text, **fields)

    return _make
