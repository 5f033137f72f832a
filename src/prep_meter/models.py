"""Data classes for the study-tracker domain model."""
from dataclasses import dataclass, field
from typing import Optional, Union

SUBJECTS = ("Physics", "Chemistry", "Math")
TIERS = ("Basic", "Mains", "Advanced")

# Topic status values
NOT_STARTED = "Not Started"
IN_PROGRESS = "In Progress"
COMPLETED = "Completed"
REVISE = "Revise"

# Plan item / slot status values
PENDING = "Pending"
DONE = "Completed"
INCOMPLETE = "Incomplete"

# Doubt status values
CLEARED = "Cleared"
STILL_CONFUSING = "Still Confusing"

# Coaching activity kinds
LECTURE = "lecture"
TEST = "test"
OTHER = "other"


@dataclass
class Subtopic:
    name: str
    status: str = NOT_STARTED
    coaching_status: str = NOT_STARTED


@dataclass
class MajorTopic:
    name: str
    subtopics: list[Subtopic] = field(default_factory=list)


@dataclass
class ChapterProgress:
    level1: bool = False
    level2: bool = False
    mains: bool = False
    advanced: bool = False
    pyqs: bool = False
    pyqs_count: int = 0


@dataclass
class Chapter:
    name: str
    status: str = NOT_STARTED
    coaching_status: str = NOT_STARTED
    progress: ChapterProgress = field(default_factory=ChapterProgress)
    major_topics: list[MajorTopic] = field(default_factory=list)


@dataclass
class ChemistrySection:
    name: str  # Physical / Inorganic / Organic Chemistry
    chapters: list[Chapter] = field(default_factory=list)


@dataclass
class PhysicsSubject:
    chapters: list[Chapter] = field(default_factory=list)
    name: str = "Physics"


@dataclass
class MathSubject:
    chapters: list[Chapter] = field(default_factory=list)
    name: str = "Math"


@dataclass
class ChemistrySubject:
    sections: list[ChemistrySection] = field(default_factory=list)
    name: str = "Chemistry"


SubjectData = Union[PhysicsSubject, ChemistrySubject, MathSubject]


@dataclass
class TestSyllabusItem:
    __test__ = False

    subject: str
    chapter: str


@dataclass
class TestResult:
    __test__ = False

    id: str
    name: str
    date: str
    total_marks: float
    type: str = "JEE Mains"
    marks: dict[str, float] = field(default_factory=dict)
    negative_marks: dict[str, float] = field(default_factory=dict)
    syllabus: list[TestSyllabusItem] = field(default_factory=list)
    custom_syllabus: str = ""
    analysis_done: bool = False
    feedback: str = ""
    learnings: str = ""
    class_rank: Optional[int] = None
    test_scope: Optional[str] = None

    @property
    def score(self) -> float:
        return sum(self.marks.values())

    @property
    def negative(self) -> float:
        return sum(self.negative_marks.values())


@dataclass
class PlannedTopic:
    id: str
    subject: str
    chapter_name: str
    is_full_chapter: bool = True
    subtopic_names: list[str] = field(default_factory=list)
    note: str = ""
    status: str = PENDING
    is_carried_over: bool = False


@dataclass
class HourlySlot:
    id: str
    start_time: str
    end_time: str
    planned_topic_id: Optional[str] = None
    subject: Optional[str] = None
    status: str = PENDING


@dataclass
class DailyPlanTask:
    id: str
    text: str
    status: str = PENDING
    is_carried_over: bool = False


@dataclass
class QuestionsSolvedLog:
    id: str
    subject: str
    chapter: str
    count: int
    type: str = "Basic"


@dataclass
class DailyPlan:
    date: str
    subject_plans: dict[str, list[PlannedTopic]] = field(default_factory=dict)
    schedule: list[HourlySlot] = field(default_factory=list)
    tasks: list[DailyPlanTask] = field(default_factory=list)
    is_reviewed: bool = False
    wake_up_time: str = ""
    sleep_time: str = ""
    daily_mood: Optional[int] = None
    questions_solved: list[QuestionsSolvedLog] = field(default_factory=list)

    def planned_topics(self) -> list[PlannedTopic]:
        return [topic for topics in self.subject_plans.values() for topic in topics]


@dataclass
class Lecture:
    id: str
    title: str
    subject: str
    chapter: str
    category: str = "Other"
    url: str = ""
    video_id: str = ""
    date_added: str = ""

    @property
    def date(self) -> str:
        return self.date_added[:10]


@dataclass
class WellnessLog:
    date: str
    mood: int
    sleep_hours: float
    journal: str = ""


@dataclass
class Doubt:
    id: str
    subject: str
    topic: str
    date: str
    status: str = STILL_CONFUSING
    description: str = ""
    context: str = ""


@dataclass
class CoachingLecture:
    id: str
    start_time: str
    end_time: str
    subject: str
    teacher: str
    chapter: str = ""
    category: str = "Theory"
    subtopics_taught: list[str] = field(default_factory=list)
    remarks: str = ""
    rating: Optional[float] = None
    homework: str = ""
    doubts: str = ""
    kind: str = field(default=LECTURE, init=False)


@dataclass
class CoachingTestActivity:
    id: str
    start_time: str
    end_time: str
    test_name: str = ""
    upcoming_test_id: Optional[str] = None
    test_result_id: Optional[str] = None
    kind: str = field(default=TEST, init=False)


@dataclass
class CoachingOtherActivity:
    id: str
    start_time: str
    end_time: str
    description: str = ""
    kind: str = field(default=OTHER, init=False)


CoachingActivity = Union[CoachingLecture, CoachingTestActivity, CoachingOtherActivity]


@dataclass
class CoachingLog:
    date: str
    activities: list[CoachingActivity] = field(default_factory=list)
    motivation: Optional[int] = None

    def lectures(self) -> list[CoachingLecture]:
        return [a for a in self.activities if a.kind == LECTURE]


@dataclass
class StudyRecords:
    """Everything the report engine reads for one user."""
    daily_plans: list[DailyPlan] = field(default_factory=list)
    coaching_logs: list[CoachingLog] = field(default_factory=list)
    tests: list[TestResult] = field(default_factory=list)
    wellness_logs: list[WellnessLog] = field(default_factory=list)
    doubts: list[Doubt] = field(default_factory=list)
    lectures: list[Lecture] = field(default_factory=list)
    subjects: list[SubjectData] = field(default_factory=list)
    teachers: list[str] = field(default_factory=list)


@dataclass
class DateRange:
    start: str
    end: str

    @property
    def label(self) -> str:
        return f"{self.start} to {self.end}"
