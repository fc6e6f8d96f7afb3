"""Interactive CLI application."""
import logging
import os
import sys
from datetime import date

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table
from rich.tree import Tree

from neet_planner.dashboard import (
    SUBJECT_COLORS, format_accuracy, format_difficulty, get_breakdown_rows,
    get_completion_color, get_subject_completion, get_subject_performance, get_summary,
)
from neet_planner.db import init_db, load_tasks, resolve_db_path
from neet_planner.models import RATED_TASK_TYPES, Subject, Task, TaskType
from neet_planner.planner import (
    MAX_DIFFICULTY, MIN_DIFFICULTY, PlannerError, add_task, complete_practice_task,
    complete_study_task, delete_task, get_pending_tasks, group_tasks_by_date,
)
from neet_planner.progress import calculate_progress
from neet_planner.settings import get_theme, toggle_theme
from neet_planner.syllabus import load_syllabus

LOG_LEVEL_ENV = "NEET_PLANNER_LOG_LEVEL"
EXIT_WORDS = ("q", "menu")
THEME_ACCENTS = {"dark": "cyan", "light": "blue"}

console = Console()
logger = logging.getLogger(__name__)


class SessionExitRequested(Exception):
    """Raised when the user abandons a multi-step prompt to return to the menu."""


def session_prompt(text: str, choices: list[str] | None = None, default: str | None = None) -> str:
    """Prompt for input; typing 'q' or 'menu' raises SessionExitRequested."""
    while True:
        if default is None:
            answer = Prompt.ask(text)
        else:
            answer = Prompt.ask(text, default=default)
        answer = answer.strip()
        if answer.lower() in EXIT_WORDS:
            raise SessionExitRequested()
        if choices and answer not in choices:
            console.print(f"[red]Please choose one of: {', '.join(choices)}[/red]")
            continue
        return answer


def session_int_prompt(text: str, choices: list[str] | None = None, default: int | None = None) -> int:
    while True:
        answer = session_prompt(text, default=None if default is None else str(default))
        try:
            value = int(answer)
        except ValueError:
            console.print("[red]Please enter a whole number.[/red]")
            continue
        if choices and answer not in choices:
            console.print(f"[red]Please choose one of: {', '.join(choices)}[/red]")
            continue
        return value


def accent(db_path: str) -> str:
    return THEME_ACCENTS[get_theme(db_path)]


def show_welcome(db_path: str):
    console.print(Panel(
        "[bold]NEET Study Planner[/bold]\n[dim]Plan tasks, log feedback, track progress[/dim]",
        title="Welcome", border_style=accent(db_path),
    ))


def show_menu(db_path: str):
    color = accent(db_path)
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("add", "Plan a new task"),
        ("plan", "View your plan"),
        ("complete", "Complete a task"),
        ("delete", "Delete a task"),
        ("dashboard", "Progress overview"),
        ("breakdown", "Detailed breakdown"),
        ("syllabus", "Browse the syllabus"),
        ("theme", "Toggle light/dark theme"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [{color}]{cmd:<14}[/{color}] {desc}")


def _choose_from(label: str, options: list[str], default_index: int = 0) -> str:
    for i, option in enumerate(options, 1):
        console.print(f"  [cyan]{i}[/cyan]) {option}")
    index = session_int_prompt(
        f"Select {label}", choices=[str(i) for i in range(1, len(options) + 1)], default=default_index + 1,
    )
    return options[index - 1]


def _task_label(task: Task) -> str:
    return f"{task.microtopic} [dim]({task.subject} > {task.chapter})[/dim]"


def _choose_task(tasks: list[Task], title: str) -> Task:
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Date")
    table.add_column("Type")
    table.add_column("Topic")
    for i, task in enumerate(tasks, 1):
        table.add_row(str(i), task.date.isoformat(), task.task_type.value, _task_label(task))
    console.print(table)
    index = session_int_prompt("Task number", choices=[str(i) for i in range(1, len(tasks) + 1)])
    return tasks[index - 1]


def cmd_add(db_path: str):
    syllabus = load_syllabus()
    console.print("\n[bold]Plan a New Task[/bold] [dim](type 'q' to cancel)[/dim]")
    subject = session_prompt(
        "Subject", choices=[s.value for s in Subject], default=Subject.PHYSICS.value,
    )
    chapter = _choose_from("chapter", syllabus.chapters(subject))
    microtopic = _choose_from("microtopic", syllabus.microtopics(subject, chapter))
    task_type = session_prompt(
        "Task type", choices=[t.value for t in TaskType], default=TaskType.STUDY.value,
    )
    while True:
        raw_date = session_prompt("Date (YYYY-MM-DD)", default=date.today().isoformat())
        try:
            task_date = date.fromisoformat(raw_date)
            break
        except ValueError:
            console.print("[red]Dates look like 2025-05-04.[/red]")
    task = add_task(db_path, subject, chapter, microtopic, TaskType(task_type), task_date, syllabus=syllabus)
    console.print(f"[green]Added {task.task_type.value} task: {task.microtopic} on {task.date.isoformat()}[/green]")


def cmd_plan(db_path: str):
    tasks = load_tasks(db_path)
    if not tasks:
        console.print("[yellow]Your planner is empty. Use 'add' to plan a task![/yellow]")
        return
    color = accent(db_path)
    for task_date, day_tasks in group_tasks_by_date(tasks).items():
        table = Table(title=task_date.strftime("%a %b %d %Y"), title_justify="left")
        table.add_column("Type", style=color)
        table.add_column("Topic")
        table.add_column("Status")
        for task in day_tasks:
            status = "[green]Completed[/green]" if task.is_completed else "[yellow]Pending[/yellow]"
            table.add_row(task.task_type.value, _task_label(task), status)
        console.print(table)


def cmd_complete(db_path: str):
    pending = get_pending_tasks(load_tasks(db_path))
    if not pending:
        console.print("[green]No pending tasks. Nice work![/green]")
        return
    task = _choose_task(pending, "Pending Tasks")
    if task.task_type in RATED_TASK_TYPES:
        difficulty = session_int_prompt(
            f"How difficult was this topic? ({MIN_DIFFICULTY}: Easy - {MAX_DIFFICULTY}: Hard)",
            choices=[str(i) for i in range(MIN_DIFFICULTY, MAX_DIFFICULTY + 1)],
            default=3,
        )
        complete_study_task(db_path, task.id, difficulty)
    else:
        total = session_int_prompt("Total questions attempted")
        correct = session_int_prompt("Number of correct answers")
        complete_practice_task(db_path, task.id, total, correct)
    console.print(f"[green]Completed: {task.microtopic}[/green]")


def cmd_delete(db_path: str):
    tasks = load_tasks(db_path)
    if not tasks:
        console.print("[yellow]Nothing to delete.[/yellow]")
        return
    task = _choose_task(tasks, "Your Plan")
    if Confirm.ask("Are you sure you want to delete this task?", default=False):
        delete_task(db_path, task.id)
        console.print("[green]Task deleted.[/green]")


def cmd_dashboard(db_path: str):
    stats = calculate_progress(load_syllabus(), load_tasks(db_path))
    summary = get_summary(stats)
    color = accent(db_path)
    rate = summary["completion_rate"]
    rate_color = get_completion_color(rate)

    bar_filled = int(rate / 5)
    bar = f"[{rate_color}]{'█' * bar_filled}{'░' * (20 - bar_filled)}[/{rate_color}]"
    console.print(Panel(
        f"Overall Completion: [bold]{rate}%[/bold] {bar}\n"
        f"{summary['completed_tasks']} of {summary['total_tasks']} tasks completed  |  "
        f"Pending: [bold]{summary['pending_tasks']}[/bold]",
        title="Dashboard", border_style=color,
    ))

    completion = get_subject_completion(stats)
    if completion:
        done = sum(count for _, count in completion)
        console.print("\n[bold]Completed Tasks by Subject[/bold]")
        for name, count in completion:
            share = count / done * 100
            console.print(
                f"  {name:<10} [{SUBJECT_COLORS[name]}]{'█' * max(1, int(share / 5))}[/{SUBJECT_COLORS[name]}]"
                f" {count} ({share:.0f}%)"
            )
    else:
        console.print("\n[dim]No completed tasks to show.[/dim]")

    table = Table(title="Performance by Subject")
    table.add_column("Subject")
    table.add_column("Avg Difficulty (1-5)", justify="right")
    table.add_column("Avg Accuracy (%)", justify="right")
    for row in get_subject_performance(stats):
        table.add_row(
            f"[{SUBJECT_COLORS[row['subject']]}]{row['subject']}[/{SUBJECT_COLORS[row['subject']]}]",
            f"{row['avg_difficulty']:.2f}",
            f"{row['avg_accuracy']:.2f}",
        )
    console.print(table)


def cmd_breakdown(db_path: str):
    stats = calculate_progress(load_syllabus(), load_tasks(db_path))
    if stats.total_tasks == 0:
        console.print("[yellow]No tasks planned yet.[/yellow]")
        return
    subjects = [name for name, s in stats.subjects.items() if s.total > 0]
    choice = session_prompt("Expand which subject?", choices=["all", "none", *subjects], default="all")
    if choice == "none":
        expanded = []
    else:
        names = subjects if choice == "all" else [choice]
        expanded = [*names, *(f"{n}-{c}" for n in names for c in stats.subjects[n].chapters)]

    table = Table(title="Detailed Breakdown")
    table.add_column("Topic")
    table.add_column("Completed / Total", justify="center")
    table.add_column("Completion %", justify="center")
    table.add_column("Avg. Difficulty", justify="center")
    table.add_column("Avg. Accuracy", justify="center")
    for row in get_breakdown_rows(stats, expanded):
        name = "    " * row["level"] + row["name"]
        if row["level"] == 0:
            name = f"[bold {SUBJECT_COLORS[row['name']]}]{name}[/]"
        elif row["level"] == 2:
            name = f"[dim]{name}[/dim]"
        table.add_row(
            name, f"{row['completed']} / {row['total']}", row["completion"],
            row["avg_difficulty"], row["avg_accuracy"],
        )
    console.print(table)


def cmd_syllabus(db_path: str):
    syllabus = load_syllabus()
    tree = Tree(f"[bold]Syllabus[/bold] [dim]({syllabus.microtopic_count()} microtopics)[/dim]")
    for subject in syllabus.subjects():
        branch = tree.add(f"[{SUBJECT_COLORS.get(subject, accent(db_path))}]{subject}[/]")
        for chapter in syllabus.chapters(subject):
            chapter_branch = branch.add(chapter)
            for microtopic in syllabus.microtopics(subject, chapter):
                chapter_branch.add(f"[dim]{microtopic}[/dim]")
    console.print(tree)


def cmd_theme(db_path: str):
    theme = toggle_theme(db_path)
    console.print(f"[{THEME_ACCENTS[theme]}]Theme set to {theme}.[/{THEME_ACCENTS[theme]}]")


def main():
    logging.basicConfig(
        level=os.environ.get(LOG_LEVEL_ENV, "WARNING").upper(),
        format="%(levelname)s:%(name)s:%(message)s",
        stream=sys.stderr,
    )
    db_path = resolve_db_path()
    init_db(db_path)
    logger.debug("Using database at %s", db_path)

    show_welcome(db_path)

    commands = {
        "add": cmd_add,
        "plan": cmd_plan,
        "complete": cmd_complete,
        "delete": cmd_delete,
        "dashboard": cmd_dashboard,
        "breakdown": cmd_breakdown,
        "syllabus": cmd_syllabus,
        "theme": cmd_theme,
    }
    while True:
        show_menu(db_path)
        choice = Prompt.ask("\n[bold]>[/bold]", default="plan").strip().lower()
        try:
            if choice in commands:
                commands[choice](db_path)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Good luck on your exam![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except SessionExitRequested:
            console.print("[dim]Back to menu.[/dim]")
        except PlannerError as e:
            console.print(f"[red]{e}[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            logger.exception("Command %s failed", choice)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
