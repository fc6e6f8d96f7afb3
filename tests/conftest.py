from datetime import date

import pytest

from neet_planner.models import Task, TaskStatus, TaskType
from neet_planner.syllabus import Syllabus


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_planner.db")
    return db_path


@pytest.fixture
def small_syllabus():
    return Syllabus.from_dict({
        "Physics": {
            "Mechanics": ["Kinematics", "Laws of Motion"],
            "Optics": ["Ray Optics"],
        },
        "Chemistry": {
            "Atomic Structure": ["Bohr Model"],
        },
        "Botany": {},
        "Zoology": {
            "Evolution": ["Origin of Life"],
        },
    })


@pytest.fixture
def make_task():
    counter = iter(range(1, 10_000))

    def _make(subject="Physics", chapter="Mechanics", microtopic="Kinematics",
              task_type=TaskType.STUDY, status=TaskStatus.PENDING, **kwargs):
        return Task(
            id=kwargs.pop("id", f"t{next(counter)}"),
            subject=subject,
            chapter=chapter,
            microtopic=microtopic,
            task_type=task_type,
            date=kwargs.pop("date", date(2025, 3, 1)),
            status=status,
            **kwargs,
        )

    return _make
