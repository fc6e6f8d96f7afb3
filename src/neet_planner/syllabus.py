"""Static NEET syllabus: subject -> chapter -> microtopics."""
import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from neet_planner.models import Subject

CONTENT_DIR = Path(__file__).parent / "content"
DEFAULT_SYLLABUS_PATH = CONTENT_DIR / "syllabus.json"


@dataclass(frozen=True)
class Syllabus:
    """Immutable syllabus tree. Chapter and microtopic order follows the source file."""

    tree: tuple[tuple[str, tuple[tuple[str, tuple[str, ...]], ...]], ...]

    @classmethod
    def from_dict(cls, data: dict) -> "Syllabus":
        return cls(tree=tuple(
            (subject, tuple((chapter, tuple(microtopics)) for chapter, microtopics in chapters.items()))
            for subject, chapters in data.items()
        ))

    def _chapter_map(self, subject: str) -> Optional[dict[str, tuple[str, ...]]]:
        for name, chapters in self.tree:
            if name == subject:
                return dict(chapters)
        return None

    def subjects(self) -> list[str]:
        return [name for name, _ in self.tree]

    def chapters(self, subject: str) -> list[str]:
        chapters = self._chapter_map(subject)
        return list(chapters) if chapters else []

    def microtopics(self, subject: str, chapter: str) -> Optional[list[str]]:
        """Microtopics under a chapter, or None if the subject/chapter path is not in the syllabus."""
        chapters = self._chapter_map(subject)
        if chapters is None or chapter not in chapters:
            return None
        return list(chapters[chapter])

    def contains(self, subject: str, chapter: str, microtopic: str) -> bool:
        microtopics = self.microtopics(subject, chapter)
        return microtopics is not None and microtopic in microtopics

    def default_chapter(self, subject: str) -> Optional[str]:
        chapters = self.chapters(subject)
        return chapters[0] if chapters else None

    def default_microtopic(self, subject: str, chapter: str) -> Optional[str]:
        microtopics = self.microtopics(subject, chapter)
        return microtopics[0] if microtopics else None

    def microtopic_count(self) -> int:
        return sum(len(microtopics) for _, chapters in self.tree for _, microtopics in chapters)


def read_syllabus(path: Path) -> Syllabus:
    """Read a syllabus JSON file of the form {"subjects": {subject: {chapter: [microtopic, ...]}}}."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return Syllabus.from_dict(data["subjects"])


@lru_cache(maxsize=1)
def load_syllabus() -> Syllabus:
    """Return the packaged syllabus. Subjects are kept in canonical Subject order."""
    syllabus = read_syllabus(DEFAULT_SYLLABUS_PATH)
    order = [s.value for s in Subject]
    return Syllabus(tree=tuple(sorted(
        syllabus.tree, key=lambda entry: order.index(entry[0]) if entry[0] in order else len(order),
    )))
