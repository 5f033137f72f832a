"""Dimension aggregators: chapter, teacher, time-bucket, trend and distribution tables.

Each function is an independent fold over the daily rollups and/or a
filtered record collection. None of them reads another's output.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from prep_meter.clock import duration_hours, hour_overlaps
from prep_meter.daterange import calendar_days
from prep_meter.lookup import KeyIndex, entity_key, matches, mentions
from prep_meter.models import (
    CoachingLog, DailyPlan, DateRange, Doubt, Lecture, SubjectData, TestResult,
    CLEARED, DONE, LECTURE, SUBJECTS, TIERS,
)
from prep_meter.rollup import DailyBreakdownItem, safe_ratio, study_subject
from prep_meter.syllabus import chapter_subjects


def _mean(values) -> float | None:
    values = list(values)
    if not values:
        return None
    return sum(values) / len(values)


def _percent(part: float, whole: float) -> float | None:
    ratio = safe_ratio(part, whole)
    return None if ratio is None else ratio * 100


def _clamped_percent(score: float, total_marks: float) -> float | None:
    if total_marks <= 0:
        return None
    return min(max(score, 0.0), total_marks) / total_marks * 100


def _subject_order(names) -> list[str]:
    return sorted(names, key=lambda s: (SUBJECTS.index(s) if s in SUBJECTS else len(SUBJECTS), s))


def _by_date(items):
    return sorted(items, key=lambda item: item.date)


# ---------------------------------------------------------------------------
# Chapters
# ---------------------------------------------------------------------------

@dataclass
class ChapterTest:
    id: str
    name: str
    score: float
    total_marks: float
    date: str
    score_percent: Optional[float]


@dataclass
class ChapterMetrics:
    subject: str = ""
    questions: dict[str, int] = field(default_factory=lambda: {tier: 0 for tier in TIERS})
    total_questions: int = 0
    hours: float = 0.0
    tests: list[ChapterTest] = field(default_factory=list)
    avg_test_score: Optional[float] = None


def chapter_metrics(
    days: list[DailyBreakdownItem],
    tests: list[TestResult],
    subjects: list[SubjectData] | None = None,
) -> dict[str, ChapterMetrics]:
    index = KeyIndex(lambda name: ChapterMetrics())
    known_subjects = chapter_subjects(subjects or [])

    for day in days:
        for log in day.questions_solved:
            entry = index.get(log.chapter)
            if entry is None:
                continue
            entry.subject = entry.subject or log.subject
            entry.questions[log.type] = entry.questions.get(log.type, 0) + log.count
            entry.total_questions += log.count
        for slot in day.schedule:
            if not slot.is_study or not slot.chapter:
                continue
            entry = index.get(slot.chapter)
            if entry is None:
                continue
            entry.subject = entry.subject or (slot.subject or "")
            entry.hours += slot.hours

    for test in _by_date(tests):
        seen = set()
        for item in test.syllabus:
            key = entity_key(item.chapter)
            if not key or key in seen:
                continue
            seen.add(key)
            entry = index.get(key)
            entry.subject = entry.subject or item.subject
            entry.tests.append(ChapterTest(
                id=test.id,
                name=test.name,
                score=test.score,
                total_marks=test.total_marks,
                date=test.date,
                score_percent=_clamped_percent(test.score, test.total_marks),
            ))

    metrics = index.to_dict()
    for name, entry in metrics.items():
        entry.subject = entry.subject or known_subjects.get(name, "")
        entry.avg_test_score = _mean(t.score_percent for t in entry.tests if t.score_percent is not None)
    return metrics


def rank_chapters(metrics: dict[str, ChapterMetrics], limit: int = 5, weakest: bool = True) -> list[dict]:
    """Chapters ordered by average test score; untested chapters are left out."""
    scored = [(name, m) for name, m in metrics.items() if m.avg_test_score is not None]
    direction = 1 if weakest else -1
    scored.sort(key=lambda item: (direction * item[1].avg_test_score, item[0]))
    return [
        {"name": name, "avg_score": m.avg_test_score, "subject": m.subject}
        for name, m in scored[:limit]
    ]


def chapter_breakdown(metrics: dict[str, ChapterMetrics], field_name: str) -> list[dict]:
    """Per-subject ``{name, value}`` tables for hours, total_questions or avg_test_score.

    Untested chapters are left out of the test table; a tested chapter
    averaging 0% stays in it.
    """
    grouped: dict[str, list[dict]] = {}
    for name, entry in metrics.items():
        value = getattr(entry, field_name)
        if value is None or (field_name != "avg_test_score" and not value):
            continue
        grouped.setdefault(entry.subject or "Other", []).append({"name": name, "value": value})
    return [
        {"subject": subject, "data": sorted(grouped[subject], key=lambda row: (-row["value"], row["name"]))}
        for subject in _subject_order(grouped)
    ]


# ---------------------------------------------------------------------------
# Teachers
# ---------------------------------------------------------------------------

@dataclass
class TeacherMetrics:
    ratings: list[float] = field(default_factory=list)
    avg_rating: Optional[float] = None
    class_count: int = 0
    total_hours: float = 0.0
    doubts_cleared: int = 0


def _cleared_by(teacher: str, sessions: list[tuple[str, str]], doubt: Doubt, window_days: int) -> bool:
    """Best-effort join: doubts carry no teacher link, only a subject, a date and free text."""
    if mentions(doubt.context, teacher):
        return True
    doubt_day = date.fromisoformat(doubt.date)
    for session_date, subject in sessions:
        gap = (doubt_day - date.fromisoformat(session_date)).days
        if matches(subject, doubt.subject) and 0 <= gap <= window_days:
            return True
    return False


def teacher_metrics(
    coaching_logs: list[CoachingLog],
    doubts: list[Doubt],
    window_days: int = 1,
) -> dict[str, TeacherMetrics]:
    index = KeyIndex(lambda name: TeacherMetrics())
    sessions: dict[str, list[tuple[str, str]]] = {}
    for log in _by_date(coaching_logs):
        for lecture in log.lectures():
            entry = index.get(lecture.teacher)
            if entry is None:
                continue
            entry.class_count += 1
            entry.total_hours += duration_hours(lecture.start_time, lecture.end_time)
            if lecture.rating is not None and 1 <= lecture.rating <= 5:
                entry.ratings.append(lecture.rating)
            sessions.setdefault(entity_key(lecture.teacher), []).append((log.date, lecture.subject))

    cleared = [d for d in doubts if d.status == CLEARED]
    metrics = index.to_dict()
    for name, entry in metrics.items():
        entry.avg_rating = _mean(entry.ratings)
        entry.doubts_cleared = sum(1 for d in cleared if _cleared_by(name, sessions[name], d, window_days))
    return metrics


def teacher_lecture_count(metrics: dict[str, TeacherMetrics]) -> list[dict]:
    rows = [{"name": name, "count": m.class_count} for name, m in metrics.items()]
    return sorted(rows, key=lambda row: (-row["count"], row["name"]))


def teacher_rating_distribution(metrics: dict[str, TeacherMetrics]) -> list[dict]:
    rows = []
    for name, entry in metrics.items():
        row = {"name": name, **{str(bucket): 0 for bucket in range(1, 6)}}
        for rating in entry.ratings:
            bucket = min(5, max(1, int(rating + 0.5)))
            row[str(bucket)] += 1
        rows.append(row)
    return rows


# ---------------------------------------------------------------------------
# Time buckets
# ---------------------------------------------------------------------------

def hourly_activity_heatmap(days: list[DailyBreakdownItem]) -> tuple[list[dict], list[str]]:
    """Hours of study and coaching per hour-of-day, one column per rollup date.

    A date with neither schedule slots nor coaching activities gets None in
    every hour so "no data" stays distinct from "no activity".
    """
    if not days:
        return [], []
    rows = [{"hour": f"{hour:02d}", "values": []} for hour in range(24)]
    for day in days:
        if not day.has_schedule_data:
            for row in rows:
                row["values"].append(None)
            continue
        buckets = [0.0] * 24
        intervals = [(s.start_time, s.end_time) for s in day.schedule if s.is_study]
        intervals += [(a.start_time, a.end_time) for a in day.coaching_activities]
        for start, end in intervals:
            for hour, hours in hour_overlaps(start, end).items():
                buckets[hour] += hours
        for row, value in zip(rows, buckets):
            row["values"].append(value)
    return rows, [day.date for day in days]


def daily_hours_breakdown(days: list[DailyBreakdownItem], date_range: DateRange) -> list[dict]:
    """Every calendar date of the range; dates without a rollup are zero-filled.

    With no rollups at all there is nothing to compare against and the table is empty.
    """
    if not days:
        return []
    by_date = {day.date: day for day in days}
    rows = []
    for day_str in calendar_days(date_range):
        day = by_date.get(day_str)
        rows.append({
            "date": day_str,
            "self_study": day.study_hours if day else 0.0,
            "coaching": day.coaching_hours if day else 0.0,
            "breaks": day.break_hours if day else 0.0,
        })
    return rows


# ---------------------------------------------------------------------------
# Trends
# ---------------------------------------------------------------------------

def daily_performance_trend(days: list[DailyBreakdownItem]) -> list[dict]:
    return [
        {
            "date": day.date,
            "study_hours": day.study_hours,
            "coaching_hours": day.coaching_hours,
            "questions": day.question_count,
            "efficiency": day.efficiency,
        }
        for day in days
    ]


def syllabus_coverage_trend(days: list[DailyBreakdownItem], subjects: list[SubjectData] | None = None) -> list[dict]:
    """Cumulative count of distinct chapters studied, one point per date that adds one.

    With a topic hierarchy supplied, only chapters from it count.
    """
    syllabus = chapter_subjects(subjects or [])
    covered = set()
    trend = []
    for day in days:
        new = {
            entity_key(chapter) for chapter in day.topics_studied
            if not syllabus or entity_key(chapter) in syllabus
        } - covered
        if not new:
            continue
        covered |= new
        trend.append({"date": day.date, "count": len(covered)})
    return trend


def exam_performance_trend(tests: list[TestResult]) -> list[dict]:
    return [
        {
            "date": test.date,
            "name": test.name,
            "score": test.score,
            "total_marks": test.total_marks,
            "percentage": _percent(test.score, test.total_marks),
            "negative": test.negative,
        }
        for test in _by_date(tests)
    ]


def negative_marks_analysis(tests: list[TestResult]) -> list[dict]:
    rows = []
    for test in _by_date(tests):
        percentage = _percent(test.score, test.total_marks)
        if percentage is not None:
            rows.append({"negative": test.negative, "percentage": percentage})
    return rows


def subject_wise_test_performance(tests: list[TestResult]) -> list[dict]:
    """Mean raw marks per subject across the tests that report that subject."""
    marks: dict[str, list[float]] = {}
    for test in tests:
        for subject, value in test.marks.items():
            marks.setdefault(subject, []).append(value)
    return [{"name": subject, "avg_score": _mean(marks[subject])} for subject in _subject_order(marks)]


def wellness_trend(days: list[DailyBreakdownItem]) -> list[dict]:
    return [
        {
            "date": day.date,
            "mood": day.wellness.mood,
            "sleep": day.wellness.sleep_hours,
            "efficiency": day.efficiency,
        }
        for day in days if day.wellness
    ]


def motivation_vs_coaching(coaching_logs: list[CoachingLog]) -> list[dict]:
    return [
        {
            "date": log.date,
            "motivation": log.motivation or None,
            "hours": sum(duration_hours(a.start_time, a.end_time) for a in log.activities),
        }
        for log in _by_date(coaching_logs)
    ]


def homework_completion_rate(plans: list[DailyPlan]) -> float | None:
    tasks = [task for plan in plans for task in plan.tasks]
    return _percent(sum(1 for task in tasks if task.status == DONE), len(tasks))


# ---------------------------------------------------------------------------
# Distributions
# ---------------------------------------------------------------------------

def _named_values(totals: dict[str, float], ordered=None) -> list[dict]:
    names = ordered if ordered is not None else list(totals)
    return [{"name": name, "value": totals[name]} for name in names if totals[name]]


def subject_time_distribution(days: list[DailyBreakdownItem]) -> list[dict]:
    """Study hours by subject; study with no subject lands in ``Other``."""
    totals: dict[str, float] = {}
    for day in days:
        for slot in day.schedule:
            if slot.is_study:
                subject = study_subject(slot)
                totals[subject] = totals.get(subject, 0.0) + slot.hours
    return _named_values(totals, _subject_order(totals))


def question_type_distribution(days: list[DailyBreakdownItem]) -> list[dict]:
    per_subject: dict[str, dict[str, int]] = {}
    for day in days:
        for log in day.questions_solved:
            tiers = per_subject.setdefault(log.subject, {tier: 0 for tier in TIERS})
            tiers[log.type] = tiers.get(log.type, 0) + log.count
    return [{"name": subject, **per_subject[subject]} for subject in _subject_order(per_subject)]


def doubt_distribution(doubts: list[Doubt]) -> list[dict]:
    """Counts by subject, followed by counts by clearing status."""
    by_subject: dict[str, int] = {}
    by_status: dict[str, int] = {}
    for doubt in doubts:
        by_subject[doubt.subject] = by_subject.get(doubt.subject, 0) + 1
        by_status[doubt.status] = by_status.get(doubt.status, 0) + 1
    return _named_values(by_subject, _subject_order(by_subject)) + _named_values(by_status)


def _coaching_lectures(days: list[DailyBreakdownItem]):
    return [a for day in days for a in day.coaching_activities if a.kind == LECTURE]


def lecture_category_distribution(days: list[DailyBreakdownItem], lectures: list[Lecture]) -> list[dict]:
    """Categories of coaching lectures plus library lectures added in the range."""
    counts: dict[str, int] = {}
    for lecture in _coaching_lectures(days) + list(lectures):
        counts[lecture.category] = counts.get(lecture.category, 0) + 1
    return _named_values(counts)


def coaching_subject_distribution(days: list[DailyBreakdownItem]) -> list[dict]:
    hours: dict[str, float] = {}
    for lecture in _coaching_lectures(days):
        hours[lecture.subject] = hours.get(lecture.subject, 0.0) + duration_hours(lecture.start_time, lecture.end_time)
    return _named_values(hours, _subject_order(hours))
