"""Progress aggregation: fold a task list into subject/chapter/microtopic statistics.

This is a pure computation module with no I/O. The stats tree is rebuilt from
scratch on every call and never persisted.
"""
import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from neet_planner.models import (
    ChapterStats, MicrotopicStats, ProgressStats, StatsNode, Subject, SubjectStats, Task,
)
from neet_planner.syllabus import Syllabus

logger = logging.getLogger(__name__)


def _percent(part: float, whole: float) -> float:
    if not whole:
        return 0.0
    return (part / whole) * 100


def _mean(total: float, count: int) -> float:
    if not count:
        return 0.0
    return total / count


@dataclass
class _Tally:
    """Running counters for one node of the tree."""

    total: int = 0
    completed: int = 0
    difficulty_sum: float = 0.0
    difficulty_count: int = 0
    accuracy_sum: float = 0.0
    accuracy_count: int = 0
    children: dict[str, "_Tally"] = field(default_factory=dict)

    def record(self, task: Task) -> None:
        self.total += 1
        if not task.is_completed:
            return
        self.completed += 1
        if task.difficulty is not None:
            self.difficulty_sum += task.difficulty
            self.difficulty_count += 1
        accuracy = task.accuracy
        if accuracy is not None:
            self.accuracy_sum += accuracy
            self.accuracy_count += 1

    def fill(self, node: StatsNode) -> StatsNode:
        node.total = self.total
        node.completed = self.completed
        node.completion_rate = _percent(self.completed, self.total)
        node.avg_difficulty = _mean(self.difficulty_sum, self.difficulty_count)
        node.avg_accuracy = _mean(self.accuracy_sum, self.accuracy_count)
        return node


def _build_shell(syllabus: Syllabus) -> dict[str, _Tally]:
    shell = {}
    for subject in Subject:
        subject_tally = _Tally()
        for chapter in syllabus.chapters(subject.value):
            subject_tally.children[chapter] = _Tally(children={
                microtopic: _Tally() for microtopic in syllabus.microtopics(subject.value, chapter) or []
            })
        shell[subject.value] = subject_tally
    return shell


def _resolve(shell: dict[str, _Tally], task: Task) -> Optional[tuple[_Tally, _Tally, _Tally]]:
    subject = shell.get(task.subject)
    if subject is None:
        return None
    chapter = subject.children.get(task.chapter)
    if chapter is None:
        return None
    microtopic = chapter.children.get(task.microtopic)
    if microtopic is None:
        return None
    return subject, chapter, microtopic


def calculate_progress(syllabus: Syllabus, tasks: Iterable[Task]) -> ProgressStats:
    """Aggregate tasks into a ProgressStats tree covering every syllabus node.

    Root totals count every task. Tasks whose subject/chapter/microtopic path
    is not in the syllabus are left out of the per-subject breakdown.
    """
    tasks = list(tasks)
    shell = _build_shell(syllabus)

    for task in tasks:
        path = _resolve(shell, task)
        if path is None:
            logger.debug(
                "Skipping task %s: %s / %s / %s is not in the syllabus",
                task.id, task.subject, task.chapter, task.microtopic,
            )
            continue
        for tally in path:
            tally.record(task)

    total_tasks = len(tasks)
    completed_tasks = sum(1 for t in tasks if t.is_completed)

    subjects = {}
    for subject_name, subject_tally in shell.items():
        chapters = {}
        for chapter_name, chapter_tally in subject_tally.children.items():
            microtopics = {
                name: tally.fill(MicrotopicStats())
                for name, tally in chapter_tally.children.items()
            }
            chapters[chapter_name] = chapter_tally.fill(ChapterStats(microtopics=microtopics))
        subjects[subject_name] = subject_tally.fill(SubjectStats(chapters=chapters))

    return ProgressStats(
        total_tasks=total_tasks,
        completed_tasks=completed_tasks,
        completion_rate=_percent(completed_tasks, total_tasks),
        subjects=subjects,
    )
