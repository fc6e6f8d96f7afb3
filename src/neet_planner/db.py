"""Database initialization, connection management, and the task store."""
import os
import sqlite3
from datetime import date
from pathlib import Path

from neet_planner.models import Task, TaskStatus, TaskType

DEFAULT_DB_PATH = str(Path.home() / ".neet_planner" / "planner.db")
DB_PATH_ENV = "NEET_PLANNER_DB"

SCHEMA = """
CREATE TABLE IF NOT EXISTS tasks (
    position INTEGER PRIMARY KEY AUTOINCREMENT,
    id TEXT NOT NULL UNIQUE,
    subject TEXT NOT NULL,
    chapter TEXT NOT NULL,
    microtopic TEXT NOT NULL,
    task_type TEXT NOT NULL,
    date TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'Pending',
    difficulty INTEGER,
    total_questions INTEGER,
    correct_answers INTEGER
);

CREATE TABLE IF NOT EXISTS user_settings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    key TEXT NOT NULL UNIQUE,
    value TEXT
);
"""


def resolve_db_path() -> str:
    """Database path from the NEET_PLANNER_DB environment variable, else the default."""
    return os.environ.get(DB_PATH_ENV) or DEFAULT_DB_PATH


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating all tables if they don't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()


def task_from_row(row: sqlite3.Row) -> Task:
    return Task(
        id=row["id"],
        subject=row["subject"],
        chapter=row["chapter"],
        microtopic=row["microtopic"],
        task_type=TaskType(row["task_type"]),
        date=date.fromisoformat(row["date"]),
        status=TaskStatus(row["status"]),
        difficulty=row["difficulty"],
        total_questions=row["total_questions"],
        correct_answers=row["correct_answers"],
    )


def task_to_row(task: Task) -> tuple:
    return (
        task.id, task.subject, task.chapter, task.microtopic,
        task.task_type.value, task.date.isoformat(), task.status.value,
        task.difficulty, task.total_questions, task.correct_answers,
    )


def load_tasks(db_path: str) -> list[Task]:
    """Return the full task list in stored order."""
    conn = get_connection(db_path)
    rows = conn.execute("SELECT * FROM tasks ORDER BY position").fetchall()
    conn.close()
    return [task_from_row(r) for r in rows]


def save_tasks(db_path: str, tasks: list[Task]) -> None:
    """Replace the stored task list with `tasks`, keeping their order."""
    conn = get_connection(db_path)
    with conn:
        conn.execute("DELETE FROM tasks")
        conn.executemany(
            """INSERT INTO tasks
            (id, subject, chapter, microtopic, task_type, date, status, difficulty, total_questions, correct_answers)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            [task_to_row(t) for t in tasks],
        )
    conn.close()
