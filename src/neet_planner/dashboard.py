"""Dashboard view data built from a ProgressStats tree."""
from neet_planner.models import ProgressStats, StatsNode, Subject

SUBJECT_COLORS = {
    Subject.PHYSICS.value: "#00EFFF",
    Subject.CHEMISTRY.value: "#8884d8",
    Subject.BOTANY.value: "#82ca9c",
    Subject.ZOOLOGY.value: "#ffc658",
}


def get_completion_color(rate: float) -> str:
    if rate >= 80:
        return "green"
    elif rate >= 50:
        return "yellow"
    elif rate > 0:
        return "dark_orange"
    return "red"


def format_rate(rate: float) -> str:
    return f"{rate:.1f}%"


def format_difficulty(value: float) -> str:
    return f"{value:.2f}" if value > 0 else "N/A"


def format_accuracy(value: float) -> str:
    return f"{value:.1f}%" if value > 0 else "N/A"


def get_summary(stats: ProgressStats) -> dict:
    return {
        "completion_rate": round(stats.completion_rate, 1),
        "completed_tasks": stats.completed_tasks,
        "total_tasks": stats.total_tasks,
        "pending_tasks": stats.pending_tasks,
    }


def get_subject_completion(stats: ProgressStats) -> list[tuple[str, int]]:
    """Completed task count per subject, leaving out subjects with nothing completed."""
    return [(name, s.completed) for name, s in stats.subjects.items() if s.completed > 0]


def get_subject_performance(stats: ProgressStats) -> list[dict]:
    return [
        {
            "subject": name,
            "avg_difficulty": round(s.avg_difficulty, 2),
            "avg_accuracy": round(s.avg_accuracy, 2),
        }
        for name, s in stats.subjects.items()
    ]


def _row(level: int, name: str, key: str, node: StatsNode) -> dict:
    return {
        "level": level,
        "name": name,
        "key": key,
        "completed": node.completed,
        "total": node.total,
        "completion": format_rate(node.completion_rate),
        "avg_difficulty": format_difficulty(node.avg_difficulty),
        "avg_accuracy": format_accuracy(node.avg_accuracy),
    }


def get_breakdown_rows(stats: ProgressStats, expanded=()) -> list[dict]:
    """Flatten the stats tree into table rows.

    Only nodes with at least one task are listed. Chapters appear under an
    expanded subject key ("Physics"), microtopics under an expanded chapter
    key ("Physics-Mechanics").
    """
    expanded = set(expanded)
    rows = []
    for subject_name, subject in stats.subjects.items():
        if subject.total == 0:
            continue
        rows.append(_row(0, subject_name, subject_name, subject))
        if subject_name not in expanded:
            continue
        for chapter_name, chapter in subject.chapters.items():
            if chapter.total == 0:
                continue
            chapter_key = f"{subject_name}-{chapter_name}"
            rows.append(_row(1, chapter_name, chapter_key, chapter))
            if chapter_key not in expanded:
                continue
            for microtopic_name, microtopic in chapter.microtopics.items():
                if microtopic.total == 0:
                    continue
                rows.append(_row(2, microtopic_name, f"{chapter_key}-{microtopic_name}", microtopic))
    return rows
