# tests/test_planner.py
from datetime import date

import pytest

from neet_planner.db import init_db, load_tasks, save_tasks
from neet_planner.models import TaskStatus, TaskType
from neet_planner.planner import (
    InvalidFeedbackError, PlannerError, TaskAlreadyCompletedError, TaskNotFoundError,
    UnknownSyllabusPathError, add_task, complete_practice_task, complete_study_task,
    complete_task, delete_task, get_pending_tasks, get_task, group_tasks_by_date,
)


@pytest.fixture
def db(tmp_db):
    init_db(tmp_db)
    return tmp_db


def _add(db, task_type=TaskType.STUDY, task_date=date(2025, 5, 1), **kwargs):
    return add_task(
        db, kwargs.get("subject", "Physics"), kwargs.get("chapter", "Mechanics"),
        kwargs.get("microtopic", "Kinematics"), task_type, task_date,
    )


def test_add_task_creates_pending(db):
    task = _add(db)
    assert task.status == TaskStatus.PENDING
    assert task.difficulty is None
    assert load_tasks(db) == [task]


def test_add_task_ids_unique(db):
    a = _add(db)
    b = _add(db)
    assert a.id != b.id


def test_add_task_keeps_list_sorted_by_date(db):
    late = _add(db, task_date=date(2025, 6, 1))
    early = _add(db, task_date=date(2025, 1, 1))
    middle = _add(db, task_date=date(2025, 3, 1))
    assert [t.id for t in load_tasks(db)] == [early.id, middle.id, late.id]


def test_add_task_accepts_enum_subject(db):
    from neet_planner.models import Subject
    task = add_task(db, Subject.BOTANY, "Ecology", "Ecosystem", TaskType.REVISION, date(2025, 1, 1))
    assert task.subject == "Botany"


def test_add_task_rejects_unknown_path(db):
    with pytest.raises(UnknownSyllabusPathError):
        _add(db, chapter="Astrophysics")
    with pytest.raises(UnknownSyllabusPathError):
        _add(db, subject="Mathematics")
    assert load_tasks(db) == []


def test_add_task_with_custom_syllabus(db, small_syllabus):
    task = add_task(db, "Zoology", "Evolution", "Origin of Life", TaskType.STUDY,
                    date(2025, 1, 1), syllabus=small_syllabus)
    assert task.chapter == "Evolution"


def test_complete_study_task(db):
    task = _add(db)
    done = complete_study_task(db, task.id, 4)
    assert done.status == TaskStatus.COMPLETED
    assert done.difficulty == 4
    assert get_task(db, task.id) == done


def test_complete_revision_task(db):
    task = _add(db, task_type=TaskType.REVISION)
    assert complete_study_task(db, task.id, 1).difficulty == 1


@pytest.mark.parametrize("difficulty", [0, 6])
def test_complete_study_rejects_out_of_range(db, difficulty):
    task = _add(db)
    with pytest.raises(InvalidFeedbackError):
        complete_study_task(db, task.id, difficulty)
    assert get_task(db, task.id).status == TaskStatus.PENDING


def test_complete_study_rejects_practice_task(db):
    task = _add(db, task_type=TaskType.PRACTICE)
    with pytest.raises(InvalidFeedbackError):
        complete_study_task(db, task.id, 3)


def test_complete_practice_task(db):
    task = _add(db, task_type=TaskType.PRACTICE)
    done = complete_practice_task(db, task.id, 10, 7)
    assert done.status == TaskStatus.COMPLETED
    assert (done.total_questions, done.correct_answers) == (10, 7)
    assert done.difficulty is None


@pytest.mark.parametrize("total,correct", [(0, 0), (5, 6), (5, -1)])
def test_complete_practice_rejects_bad_counts(db, total, correct):
    task = _add(db, task_type=TaskType.PRACTICE)
    with pytest.raises(InvalidFeedbackError):
        complete_practice_task(db, task.id, total, correct)


def test_complete_practice_rejects_study_task(db):
    task = _add(db)
    with pytest.raises(InvalidFeedbackError):
        complete_practice_task(db, task.id, 5, 5)


def test_completed_task_cannot_be_completed_again(db):
    task = _add(db)
    complete_study_task(db, task.id, 2)
    with pytest.raises(TaskAlreadyCompletedError):
        complete_study_task(db, task.id, 5)
    assert get_task(db, task.id).difficulty == 2


def test_complete_unknown_task(db):
    with pytest.raises(TaskNotFoundError):
        complete_study_task(db, "missing", 3)


def test_complete_task_dispatches_by_type(db):
    study = _add(db)
    practice = _add(db, task_type=TaskType.PRACTICE)
    assert complete_task(db, study.id, difficulty=5).difficulty == 5
    assert complete_task(db, practice.id, total_questions=4, correct_answers=2).correct_answers == 2


def test_complete_task_requires_matching_feedback(db):
    study = _add(db)
    practice = _add(db, task_type=TaskType.PRACTICE)
    with pytest.raises(InvalidFeedbackError):
        complete_task(db, study.id, total_questions=4, correct_answers=2)
    with pytest.raises(InvalidFeedbackError):
        complete_task(db, practice.id, difficulty=3)


def test_complete_leaves_other_tasks_alone(db):
    a = _add(db, task_date=date(2025, 1, 1))
    b = _add(db, task_date=date(2025, 2, 1))
    complete_study_task(db, a.id, 3)
    tasks = load_tasks(db)
    assert [t.id for t in tasks] == [a.id, b.id]
    assert tasks[1] == b


def test_delete_task(db):
    a = _add(db)
    b = _add(db)
    delete_task(db, a.id)
    assert load_tasks(db) == [b]


def test_delete_unknown_task(db):
    with pytest.raises(TaskNotFoundError):
        delete_task(db, "missing")


def test_errors_share_base_class():
    assert issubclass(TaskNotFoundError, PlannerError)
    assert issubclass(TaskNotFoundError, LookupError)
    assert issubclass(InvalidFeedbackError, ValueError)


def test_group_tasks_by_date(make_task):
    tasks = [
        make_task(id="a", date=date(2025, 1, 1)),
        make_task(id="b", date=date(2025, 1, 2)),
        make_task(id="c", date=date(2025, 1, 1)),
    ]
    grouped = group_tasks_by_date(tasks)
    assert list(grouped) == [date(2025, 1, 1), date(2025, 1, 2)]
    assert [t.id for t in grouped[date(2025, 1, 1)]] == ["a", "c"]


def test_get_pending_tasks(make_task):
    tasks = [make_task(id="a"), make_task(id="b", status=TaskStatus.COMPLETED, difficulty=1)]
    assert [t.id for t in get_pending_tasks(tasks)] == ["a"]


def test_stale_stored_task_is_still_loadable(db, make_task):
    save_tasks(db, [make_task(id="old", chapter="Removed Chapter")])
    assert get_task(db, "old").chapter == "Removed Chapter"
