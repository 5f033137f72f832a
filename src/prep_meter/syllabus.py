"""Topic hierarchy normalization."""
from dataclasses import dataclass

from prep_meter.lookup import entity_key
from prep_meter.models import Chapter, ChemistrySubject, SubjectData, NOT_STARTED


@dataclass
class SyllabusChapter:
    subject: str
    chapter: Chapter
    section: str | None = None

    @property
    def name(self) -> str:
        return self.chapter.name


def flatten_subjects(subjects: list[SubjectData]) -> list[SyllabusChapter]:
    """Flatten every subject into one chapter list; Chemistry sections become a tag."""
    flat = []
    for subject in subjects:
        if isinstance(subject, ChemistrySubject):
            for section in subject.sections:
                for chapter in section.chapters:
                    flat.append(SyllabusChapter(subject.name, chapter, section.name))
        else:
            for chapter in subject.chapters:
                flat.append(SyllabusChapter(subject.name, chapter))
    return flat


def chapter_subjects(subjects: list[SubjectData]) -> dict[str, str]:
    """Chapter name -> subject name for the whole hierarchy."""
    return {entity_key(entry.name): entry.subject for entry in flatten_subjects(subjects)}


def status_counts(subjects: list[SubjectData]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for entry in flatten_subjects(subjects):
        status = entry.chapter.status or NOT_STARTED
        counts[status] = counts.get(status, 0) + 1
    return counts
