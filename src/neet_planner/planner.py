"""Task planning: add, complete with feedback, delete, and group tasks."""
import logging
import uuid
from dataclasses import replace
from datetime import date
from typing import Optional

from neet_planner.db import load_tasks, save_tasks
from neet_planner.models import RATED_TASK_TYPES, Subject, Task, TaskStatus, TaskType
from neet_planner.syllabus import Syllabus, load_syllabus

logger = logging.getLogger(__name__)

MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 5


class PlannerError(Exception):
    """Base class for errors raised by planner operations."""


class TaskNotFoundError(PlannerError, LookupError):
    def __init__(self, task_id: str):
        super().__init__(f"No task with id {task_id}")
        self.task_id = task_id


class TaskAlreadyCompletedError(PlannerError):
    def __init__(self, task_id: str):
        super().__init__(f"Task {task_id} is already completed")
        self.task_id = task_id


class InvalidFeedbackError(PlannerError, ValueError):
    pass


class UnknownSyllabusPathError(PlannerError, ValueError):
    pass


def get_task(db_path: str, task_id: str) -> Task:
    for task in load_tasks(db_path):
        if task.id == task_id:
            return task
    raise TaskNotFoundError(task_id)


def add_task(
    db_path: str,
    subject: str,
    chapter: str,
    microtopic: str,
    task_type: TaskType,
    task_date: date,
    syllabus: Optional[Syllabus] = None,
) -> Task:
    """Plan a new pending task. The task list stays sorted by date."""
    syllabus = syllabus or load_syllabus()
    try:
        subject = Subject(subject).value
    except ValueError:
        raise UnknownSyllabusPathError(f"Unknown subject: {subject}") from None
    if not syllabus.contains(subject, chapter, microtopic):
        raise UnknownSyllabusPathError(f"{subject} > {chapter} > {microtopic} is not in the syllabus")
    task = Task(
        id=str(uuid.uuid4()),
        subject=subject,
        chapter=chapter,
        microtopic=microtopic,
        task_type=TaskType(task_type),
        date=task_date,
        status=TaskStatus.PENDING,
    )
    tasks = sorted([*load_tasks(db_path), task], key=lambda t: t.date)
    save_tasks(db_path, tasks)
    logger.info("Added %s task %s for %s on %s", task.task_type.value, task.id, microtopic, task_date)
    return task


def _replace_task(db_path: str, task_id: str, build) -> Task:
    tasks = load_tasks(db_path)
    for i, task in enumerate(tasks):
        if task.id != task_id:
            continue
        if task.is_completed:
            raise TaskAlreadyCompletedError(task_id)
        updated = build(task)
        save_tasks(db_path, [*tasks[:i], updated, *tasks[i + 1:]])
        return updated
    raise TaskNotFoundError(task_id)


def complete_study_task(db_path: str, task_id: str, difficulty: int) -> Task:
    """Complete a Study or Revision task with a 1-5 difficulty rating."""
    if not MIN_DIFFICULTY <= difficulty <= MAX_DIFFICULTY:
        raise InvalidFeedbackError(
            f"Difficulty must be between {MIN_DIFFICULTY} and {MAX_DIFFICULTY}, got {difficulty}"
        )

    def build(task: Task) -> Task:
        if task.task_type not in RATED_TASK_TYPES:
            raise InvalidFeedbackError(f"{task.task_type.value} tasks are completed with a question count")
        return replace(task, status=TaskStatus.COMPLETED, difficulty=difficulty)

    task = _replace_task(db_path, task_id, build)
    logger.info("Completed task %s with difficulty %d", task_id, difficulty)
    return task


def complete_practice_task(db_path: str, task_id: str, total_questions: int, correct_answers: int) -> Task:
    """Complete a Practice task with the number of questions attempted and answered correctly."""
    if total_questions <= 0:
        raise InvalidFeedbackError("Total questions must be greater than zero")
    if not 0 <= correct_answers <= total_questions:
        raise InvalidFeedbackError(
            f"Correct answers must be between 0 and {total_questions}, got {correct_answers}"
        )

    def build(task: Task) -> Task:
        if task.task_type != TaskType.PRACTICE:
            raise InvalidFeedbackError(f"{task.task_type.value} tasks are completed with a difficulty rating")
        return replace(
            task, status=TaskStatus.COMPLETED,
            total_questions=total_questions, correct_answers=correct_answers,
        )

    task = _replace_task(db_path, task_id, build)
    logger.info("Completed task %s with %d/%d correct", task_id, correct_answers, total_questions)
    return task


def complete_task(
    db_path: str,
    task_id: str,
    difficulty: Optional[int] = None,
    total_questions: Optional[int] = None,
    correct_answers: Optional[int] = None,
) -> Task:
    """Complete a task with the feedback appropriate to its type."""
    task = get_task(db_path, task_id)
    if task.task_type == TaskType.PRACTICE:
        if total_questions is None or correct_answers is None:
            raise InvalidFeedbackError("Practice tasks need total_questions and correct_answers")
        return complete_practice_task(db_path, task_id, total_questions, correct_answers)
    if difficulty is None:
        raise InvalidFeedbackError(f"{task.task_type.value} tasks need a difficulty rating")
    return complete_study_task(db_path, task_id, difficulty)


def delete_task(db_path: str, task_id: str) -> None:
    tasks = load_tasks(db_path)
    remaining = [t for t in tasks if t.id != task_id]
    if len(remaining) == len(tasks):
        raise TaskNotFoundError(task_id)
    save_tasks(db_path, remaining)
    logger.info("Deleted task %s", task_id)


def group_tasks_by_date(tasks: list[Task]) -> dict[date, list[Task]]:
    grouped: dict[date, list[Task]] = {}
    for task in tasks:
        grouped.setdefault(task.date, []).append(task)
    return grouped


def get_pending_tasks(tasks: list[Task]) -> list[Task]:
    return [t for t in tasks if not t.is_completed]
