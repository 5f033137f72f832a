"""Per-day rollups merging plan, coaching, wellness and question logs."""
from dataclasses import dataclass, field
from typing import Optional

from prep_meter.clock import duration_hours, window_hours
from prep_meter.models import (
    CoachingActivity, CoachingLecture, CoachingLog, DailyPlan,
    HourlySlot, Lecture, QuestionsSolvedLog, StudyRecords, TestResult, WellnessLog,
    DONE, LECTURE, OTHER, TEST,
)

# Slot activity kinds
TOPIC = "topic"
TASK = "task"
ACTIVITY = "activity"
FREE = "free"
LECTURE_SLOT = "lecture"
COACHING = "coaching"

STUDY_KINDS = (TOPIC, TASK, LECTURE_SLOT)
ACTIVITY_PREFIX = "activity:"
UNATTRIBUTED = "Other"


@dataclass
class ReportHourlySlot(HourlySlot):
    activity_name: str = "Free"
    activity_kind: str = FREE
    chapter: Optional[str] = None
    hours: float = 0.0

    @property
    def is_study(self) -> bool:
        return self.status == DONE and self.activity_kind in STUDY_KINDS


@dataclass
class DailyBreakdownItem:
    date: str
    study_hours: float = 0.0
    coaching_hours: float = 0.0
    break_hours: float = 0.0
    efficiency: Optional[float] = None
    topics_studied: list[str] = field(default_factory=list)
    schedule: list[ReportHourlySlot] = field(default_factory=list)
    wellness: Optional[WellnessLog] = None
    questions_solved: list[QuestionsSolvedLog] = field(default_factory=list)
    coaching_activities: list[CoachingActivity] = field(default_factory=list)

    @property
    def question_count(self) -> int:
        return sum(log.count for log in self.questions_solved)

    @property
    def has_schedule_data(self) -> bool:
        return bool(self.schedule) or bool(self.coaching_activities)


def describe_activity(activity: CoachingActivity, tests_by_id: dict[str, TestResult]) -> str:
    if activity.kind == LECTURE:
        topic = activity.chapter or activity.category
        return f"{activity.subject} lecture: {topic} ({activity.teacher})"
    if activity.kind == TEST:
        linked = tests_by_id.get(activity.test_result_id or "")
        return linked.name if linked else (activity.test_name or "Coaching test")
    if activity.kind == OTHER:
        return activity.description or "Coaching activity"
    raise ValueError(f"unhandled coaching activity kind {activity.kind!r}")


def resolve_slot(
    slot: HourlySlot,
    plan: DailyPlan,
    coaching_log: CoachingLog | None,
    lectures_by_id: dict[str, Lecture],
    tests_by_id: dict[str, TestResult],
) -> ReportHourlySlot:
    """Annotate a schedule slot with the name and kind of whatever it links to."""
    name, kind, subject, chapter = "Free", FREE, slot.subject, None
    link = (slot.planned_topic_id or "").strip()
    topics = {topic.id: topic for topic in plan.planned_topics()}
    tasks = {task.id: task for task in plan.tasks}
    activities = {a.id: a for a in coaching_log.activities} if coaching_log else {}
    if not link:
        pass
    elif link in topics:
        topic = topics[link]
        name, kind, subject, chapter = topic.chapter_name, TOPIC, topic.subject, topic.chapter_name
    elif link in tasks:
        name, kind = tasks[link].text, TASK
    elif link in lectures_by_id:
        lecture = lectures_by_id[link]
        name, kind, subject, chapter = lecture.title, LECTURE_SLOT, lecture.subject, lecture.chapter
    elif link in activities:
        activity = activities[link]
        name, kind = describe_activity(activity, tests_by_id), COACHING
        if isinstance(activity, CoachingLecture):
            subject = activity.subject
    elif link.startswith(ACTIVITY_PREFIX):
        name, kind = link[len(ACTIVITY_PREFIX):].strip() or "Activity", ACTIVITY
    return ReportHourlySlot(
        id=slot.id,
        start_time=slot.start_time,
        end_time=slot.end_time,
        planned_topic_id=slot.planned_topic_id,
        subject=subject or slot.subject,
        status=slot.status,
        activity_name=name,
        activity_kind=kind,
        chapter=chapter,
        hours=duration_hours(slot.start_time, slot.end_time),
    )


def safe_ratio(numerator: float, denominator: float) -> float | None:
    if denominator <= 0:
        return None
    return numerator / denominator


def build_day(
    day: str,
    plan: DailyPlan | None,
    coaching_log: CoachingLog | None,
    wellness: WellnessLog | None,
    lectures_by_id: dict[str, Lecture],
    tests_by_id: dict[str, TestResult],
) -> DailyBreakdownItem:
    schedule = []
    window = 0.0
    if plan:
        schedule = [resolve_slot(s, plan, coaching_log, lectures_by_id, tests_by_id) for s in plan.schedule]
        if plan.wake_up_time and plan.sleep_time:
            window = window_hours(plan.wake_up_time, plan.sleep_time)
    activities = list(coaching_log.activities) if coaching_log else []

    study = sum(slot.hours for slot in schedule if slot.is_study)
    coaching = sum(duration_hours(a.start_time, a.end_time) for a in activities)
    breaks = max(0.0, window - study - coaching)

    topics_studied = []
    for slot in schedule:
        if slot.is_study and slot.chapter and slot.chapter not in topics_studied:
            topics_studied.append(slot.chapter)

    return DailyBreakdownItem(
        date=day,
        study_hours=study,
        coaching_hours=coaching,
        break_hours=breaks,
        efficiency=safe_ratio(study, study + breaks),
        topics_studied=topics_studied,
        schedule=schedule,
        wellness=wellness,
        questions_solved=list(plan.questions_solved) if plan else [],
        coaching_activities=activities,
    )


def rollup_dates(filtered: StudyRecords) -> list[str]:
    """Distinct dates present in the filtered date-keyed collections, oldest first."""
    dates = set()
    for items in (filtered.daily_plans, filtered.coaching_logs, filtered.wellness_logs,
                  filtered.tests, filtered.doubts):
        dates.update(item.date for item in items)
    return sorted(dates)


def build_daily_breakdown(filtered: StudyRecords, records: StudyRecords) -> list[DailyBreakdownItem]:
    """One rollup per date seen in ``filtered``.

    Cross references (lectures, linked test results) resolve against the
    unfiltered ``records`` so a lecture added last month still names today's slot.
    """
    plans = {plan.date: plan for plan in filtered.daily_plans}
    coaching = {log.date: log for log in filtered.coaching_logs}
    wellness = {log.date: log for log in filtered.wellness_logs}
    lectures_by_id = {lecture.id: lecture for lecture in records.lectures}
    tests_by_id = {test.id: test for test in records.tests}
    return [
        build_day(day, plans.get(day), coaching.get(day), wellness.get(day), lectures_by_id, tests_by_id)
        for day in rollup_dates(filtered)
    ]


def study_subject(slot: ReportHourlySlot) -> str:
    return slot.subject or UNATTRIBUTED
