"""Data classes for the planner domain model."""
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional


class Subject(str, Enum):
    PHYSICS = "Physics"
    CHEMISTRY = "Chemistry"
    BOTANY = "Botany"
    ZOOLOGY = "Zoology"


class TaskType(str, Enum):
    STUDY = "Study"
    REVISION = "Revision"
    PRACTICE = "Practice"


class TaskStatus(str, Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"


# Task types whose completion feedback is a 1-5 difficulty rating
RATED_TASK_TYPES = (TaskType.STUDY, TaskType.REVISION)


@dataclass(frozen=True)
class Task:
    id: str
    subject: str
    chapter: str
    microtopic: str
    task_type: TaskType
    date: date
    status: TaskStatus = TaskStatus.PENDING
    difficulty: Optional[int] = None
    total_questions: Optional[int] = None
    correct_answers: Optional[int] = None

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    @property
    def accuracy(self) -> Optional[float]:
        """Percentage of correct answers, or None without a usable practice result."""
        if self.total_questions is None or self.correct_answers is None:
            return None
        if self.total_questions <= 0:
            return None
        return (self.correct_answers / self.total_questions) * 100


@dataclass
class StatsNode:
    total: int = 0
    completed: int = 0
    completion_rate: float = 0.0
    avg_difficulty: float = 0.0
    avg_accuracy: float = 0.0


MicrotopicStats = StatsNode


@dataclass
class ChapterStats(StatsNode):
    microtopics: dict[str, MicrotopicStats] = field(default_factory=dict)


@dataclass
class SubjectStats(StatsNode):
    chapters: dict[str, ChapterStats] = field(default_factory=dict)


@dataclass
class ProgressStats:
    total_tasks: int = 0
    completed_tasks: int = 0
    completion_rate: float = 0.0
    subjects: dict[str, SubjectStats] = field(default_factory=dict)

    @property
    def pending_tasks(self) -> int:
        return self.total_tasks - self.completed_tasks
