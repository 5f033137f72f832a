"""Conversion between the app's camelCase JSON records and the dataclass model."""
from dataclasses import asdict
from datetime import date

from prep_meter.models import (
    Chapter, ChapterProgress, ChemistrySection, ChemistrySubject, CoachingLecture,
    CoachingLog, CoachingOtherActivity, CoachingTestActivity, DailyPlan, DailyPlanTask,
    Doubt, HourlySlot, Lecture, MajorTopic, MathSubject, PhysicsSubject, PlannedTopic,
    QuestionsSolvedLog, StudyRecords, Subtopic, TestResult, TestSyllabusItem, WellnessLog,
    LECTURE, NOT_STARTED, OTHER, PENDING, STILL_CONFUSING, TEST,
)

# ReportData fields whose keys are entity names, not field names
ENTITY_MAPS = ("chapter_metrics", "teacher_metrics")


class RecordFormatError(ValueError):
    """Raised when an exported record cannot be turned into the domain model."""


def _date(value, where: str) -> str:
    try:
        return date.fromisoformat(str(value)[:10]).isoformat()
    except ValueError:
        raise RecordFormatError(f"{where}: invalid date {value!r}") from None


def _subtopic(data: dict) -> Subtopic:
    return Subtopic(
        name=data["name"],
        status=data.get("status", NOT_STARTED),
        coaching_status=data.get("coachingStatus", NOT_STARTED),
    )


def _chapter(data: dict) -> Chapter:
    progress = data.get("progress") or {}
    return Chapter(
        name=data["name"],
        status=data.get("status", NOT_STARTED),
        coaching_status=data.get("coachingStatus", NOT_STARTED),
        progress=ChapterProgress(
            level1=bool(progress.get("level1")),
            level2=bool(progress.get("level2")),
            mains=bool(progress.get("mains")),
            advanced=bool(progress.get("advanced")),
            pyqs=bool(progress.get("pyqs")),
            pyqs_count=int(progress.get("pyqsCount") or 0),
        ),
        major_topics=[
            MajorTopic(name=m["name"], subtopics=[_subtopic(s) for s in m.get("subtopics", [])])
            for m in data.get("majorTopics", [])
        ],
    )


def subject_from_dict(data: dict):
    """Build the subject variant named by ``data["name"]``."""
    name = data.get("name")
    if name == "Chemistry":
        return ChemistrySubject(sections=[
            ChemistrySection(name=s["name"], chapters=[_chapter(c) for c in s.get("chapters", [])])
            for s in data.get("sections", [])
        ])
    chapters = [_chapter(c) for c in data.get("chapters", [])]
    if name == "Physics":
        return PhysicsSubject(chapters=chapters)
    if name == "Math":
        return MathSubject(chapters=chapters)
    raise RecordFormatError(f"unknown subject {name!r}")


def _marks(data: dict | None) -> dict[str, float]:
    # stored lowercase (physics/chemistry/math); reported by subject name
    return {key[:1].upper() + key[1:]: float(value or 0) for key, value in (data or {}).items()}


def result_from_dict(data: dict) -> TestResult:
    return TestResult(
        id=data["id"],
        name=data.get("name", ""),
        date=_date(data.get("date"), f"test {data['id']}"),
        total_marks=float(data.get("totalMarks") or 0),
        type=data.get("type", "JEE Mains"),
        marks=_marks(data.get("marks")),
        negative_marks=_marks(data.get("negativeMarks")),
        syllabus=[TestSyllabusItem(s.get("subject", ""), s.get("chapter", "")) for s in data.get("syllabus", [])],
        custom_syllabus=data.get("customSyllabus", ""),
        analysis_done=bool(data.get("analysisDone")),
        feedback=data.get("feedback", ""),
        learnings=data.get("learnings", ""),
        class_rank=data.get("classRank"),
        test_scope=data.get("testScope"),
    )


def plan_from_dict(data: dict) -> DailyPlan:
    day = _date(data.get("date"), "daily plan")
    return DailyPlan(
        date=day,
        subject_plans={
            subject: [
                PlannedTopic(
                    id=t["id"],
                    subject=t.get("subject", subject),
                    chapter_name=t.get("chapterName", ""),
                    is_full_chapter=bool(t.get("isFullChapter", True)),
                    subtopic_names=list(t.get("subtopicNames", [])),
                    note=t.get("note", ""),
                    status=t.get("status", PENDING),
                    is_carried_over=bool(t.get("isCarriedOver")),
                )
                for t in topics
            ]
            for subject, topics in (data.get("subjectPlans") or {}).items()
        },
        schedule=[
            HourlySlot(
                id=s["id"],
                start_time=s.get("startTime", ""),
                end_time=s.get("endTime", ""),
                planned_topic_id=s.get("plannedTopicId"),
                subject=s.get("subject"),
                status=s.get("status", PENDING),
            )
            for s in data.get("schedule", [])
        ],
        tasks=[
            DailyPlanTask(t["id"], t.get("text", ""), t.get("status", PENDING), bool(t.get("isCarriedOver")))
            for t in data.get("tasks", [])
        ],
        is_reviewed=bool(data.get("isReviewed")),
        wake_up_time=data.get("wakeUpTime", ""),
        sleep_time=data.get("sleepTime", ""),
        daily_mood=data.get("dailyMood"),
        questions_solved=[
            QuestionsSolvedLog(q["id"], q.get("subject", ""), q.get("chapter", ""), int(q.get("count") or 0), q.get("type", "Basic"))
            for q in data.get("questionsSolved", [])
        ],
    )


def activity_from_dict(data: dict):
    kind = data.get("type")
    common = dict(id=data["id"], start_time=data.get("startTime", ""), end_time=data.get("endTime", ""))
    if kind == LECTURE:
        return CoachingLecture(
            **common,
            subject=data.get("subject", ""),
            teacher=data.get("teacher", ""),
            chapter=data.get("chapter", ""),
            category=data.get("category", "Theory"),
            subtopics_taught=list(data.get("subtopicsTaught", [])),
            remarks=data.get("remarks", ""),
            rating=data.get("rating") or None,
            homework=data.get("homework", ""),
            doubts=data.get("doubts", ""),
        )
    if kind == TEST:
        return CoachingTestActivity(
            **common,
            test_name=data.get("testName", ""),
            upcoming_test_id=data.get("upcomingTestId"),
            test_result_id=data.get("testResultId"),
        )
    if kind == OTHER:
        return CoachingOtherActivity(**common, description=data.get("description", ""))
    raise RecordFormatError(f"coaching activity {data['id']}: unknown type {kind!r}")


def coaching_log_from_dict(data: dict) -> CoachingLog:
    return CoachingLog(
        date=_date(data.get("date"), "coaching log"),
        activities=[activity_from_dict(a) for a in data.get("activities", [])],
        motivation=data.get("motivation"),
    )


def wellness_from_dict(data: dict) -> WellnessLog:
    day = _date(data.get("date"), "wellness log")
    mood = data.get("mood")
    if mood is None or not 1 <= int(mood) <= 5:
        raise RecordFormatError(f"wellness log {day}: mood must be 1-5, got {mood!r}")
    return WellnessLog(day, int(mood), float(data.get("sleepHours") or 0), data.get("journal", ""))


def records_from_dict(data: dict) -> StudyRecords:
    """Parse a full user export (the app's ``User`` document) into a record bundle."""
    try:
        return StudyRecords(
            daily_plans=[plan_from_dict(p) for p in data.get("dailyPlans", [])],
            coaching_logs=[coaching_log_from_dict(c) for c in data.get("coachingLogs", [])],
            tests=[result_from_dict(t) for t in data.get("tests", [])],
            wellness_logs=[wellness_from_dict(w) for w in data.get("wellnessLogs", [])],
            doubts=[
                Doubt(
                    id=d["id"],
                    subject=d.get("subject", ""),
                    topic=d.get("topic", ""),
                    date=_date(d.get("date"), f"doubt {d['id']}"),
                    status=d.get("status", STILL_CONFUSING),
                    description=d.get("description", ""),
                    context=d.get("context", ""),
                )
                for d in data.get("doubts", [])
            ],
            lectures=[
                Lecture(
                    id=l["id"],
                    title=l.get("title", ""),
                    subject=l.get("subject", ""),
                    chapter=l.get("chapter", ""),
                    category=l.get("category", "Other"),
                    url=l.get("url", ""),
                    video_id=l.get("videoId", ""),
                    date_added=l.get("dateAdded", ""),
                )
                for l in data.get("lectures", [])
            ],
            subjects=[subject_from_dict(s) for s in (data.get("topics") or {}).values()],
            teachers=list(data.get("teachers", [])),
        )
    except KeyError as e:
        raise RecordFormatError(f"missing required field {e}") from None


def camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def _camelize(value):
    if isinstance(value, dict):
        return {camel_case(k): _camelize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_camelize(v) for v in value]
    return value


def report_to_dict(report) -> dict:
    """Render a ReportData with camelCase keys, leaving chapter/teacher names untouched."""
    out = {}
    for name, value in asdict(report).items():
        if name in ENTITY_MAPS:
            value = {entity: _camelize(metrics) for entity, metrics in value.items()}
        else:
            value = _camelize(value)
        out[camel_case(name)] = value
    return out
