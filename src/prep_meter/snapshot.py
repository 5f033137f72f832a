"""Report snapshot assembly."""
import logging
from dataclasses import dataclass
from typing import Optional

from prep_meter import aggregators
from prep_meter.aggregators import ChapterMetrics, TeacherMetrics
from prep_meter.config import ReportOptions
from prep_meter.daterange import select_range
from prep_meter.models import DateRange, StudyRecords, TestResult
from prep_meter.rollup import DailyBreakdownItem, build_daily_breakdown

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportData:
    # General
    title: str
    date_range: str

    # KPIs
    total_study_hours: Optional[float]
    total_coaching_hours: Optional[float]
    total_questions_solved: Optional[int]
    tests_taken_count: Optional[int]
    avg_mood: Optional[float]
    avg_sleep: Optional[float]
    avg_efficiency: Optional[float]

    # Dashboard graphs
    daily_performance_trend: list[dict]
    subject_time_distribution: list[dict]
    question_type_distribution: list[dict]

    # Time analysis
    hourly_activity_heatmap: list[dict]
    activity_heatmap_labels: list[str]
    daily_hours_breakdown: list[dict]

    # Test analysis
    test_performance_trend: list[dict]
    subject_wise_test_performance: list[dict]
    negative_marks_analysis: list[dict]
    weakest_chapters: list[dict]
    strongest_chapters: list[dict]

    # Topic analysis
    syllabus_coverage_trend: list[dict]
    chapter_metrics: dict[str, ChapterMetrics]
    chapter_time_metrics: list[dict]
    chapter_question_metrics: list[dict]
    chapter_test_metrics: list[dict]

    # Coaching and wellness
    teacher_metrics: dict[str, TeacherMetrics]
    homework_completion_rate: Optional[float]
    wellness_trend: list[dict]
    doubt_distribution: list[dict]
    teacher_lecture_count: list[dict]
    teacher_rating_distribution: list[dict]
    coaching_subject_distribution: list[dict]
    lecture_category_distribution: list[dict]
    motivation_vs_coaching: list[dict]

    # Raw data for detailed views
    daily_breakdown: list[DailyBreakdownItem]
    tests_taken: list[TestResult]


def _total(values, sample) -> float | None:
    return sum(values) if sample else None


def _average(values) -> float | None:
    values = [v for v in values if v is not None]
    return sum(values) / len(values) if values else None


def build_report(
    records: StudyRecords,
    date_range: DateRange,
    options: ReportOptions | None = None,
) -> ReportData:
    """Compute the full analytics snapshot for ``records`` inside ``date_range``.

    Pure: reads nothing but its arguments and never modifies them. Empty
    samples give None for scalar KPIs and empty lists/dicts for tables.
    """
    options = options or ReportOptions()
    filtered = select_range(records, date_range)
    days = build_daily_breakdown(filtered, records)
    logger.debug("Building report for %s: %d daily rollups", date_range.label, len(days))

    chapters = aggregators.chapter_metrics(days, filtered.tests, records.subjects)
    teachers = aggregators.teacher_metrics(filtered.coaching_logs, filtered.doubts, options.doubt_window_days)
    heatmap, heatmap_labels = aggregators.hourly_activity_heatmap(days)
    wellness = filtered.wellness_logs

    return ReportData(
        title=options.title,
        date_range=date_range.label,
        total_study_hours=_total((d.study_hours for d in days), filtered.daily_plans),
        total_coaching_hours=_total((d.coaching_hours for d in days), filtered.coaching_logs),
        total_questions_solved=_total((d.question_count for d in days), filtered.daily_plans),
        tests_taken_count=len(filtered.tests) if filtered.tests else None,
        avg_mood=_average(log.mood for log in wellness),
        avg_sleep=_average(log.sleep_hours for log in wellness),
        avg_efficiency=_average(d.efficiency for d in days),
        daily_performance_trend=aggregators.daily_performance_trend(days),
        subject_time_distribution=aggregators.subject_time_distribution(days),
        question_type_distribution=aggregators.question_type_distribution(days),
        hourly_activity_heatmap=heatmap,
        activity_heatmap_labels=heatmap_labels,
        daily_hours_breakdown=aggregators.daily_hours_breakdown(days, date_range),
        test_performance_trend=aggregators.exam_performance_trend(filtered.tests),
        subject_wise_test_performance=aggregators.subject_wise_test_performance(filtered.tests),
        negative_marks_analysis=aggregators.negative_marks_analysis(filtered.tests),
        weakest_chapters=aggregators.rank_chapters(chapters, options.ranking_size, weakest=True),
        strongest_chapters=aggregators.rank_chapters(chapters, options.ranking_size, weakest=False),
        syllabus_coverage_trend=aggregators.syllabus_coverage_trend(days, records.subjects),
        chapter_metrics=chapters,
        chapter_time_metrics=aggregators.chapter_breakdown(chapters, "hours"),
        chapter_question_metrics=aggregators.chapter_breakdown(chapters, "total_questions"),
        chapter_test_metrics=aggregators.chapter_breakdown(chapters, "avg_test_score"),
        teacher_metrics=teachers,
        homework_completion_rate=aggregators.homework_completion_rate(filtered.daily_plans),
        wellness_trend=aggregators.wellness_trend(days),
        doubt_distribution=aggregators.doubt_distribution(filtered.doubts),
        teacher_lecture_count=aggregators.teacher_lecture_count(teachers),
        teacher_rating_distribution=aggregators.teacher_rating_distribution(teachers),
        coaching_subject_distribution=aggregators.coaching_subject_distribution(days),
        lecture_category_distribution=aggregators.lecture_category_distribution(days, filtered.lectures),
        motivation_vs_coaching=aggregators.motivation_vs_coaching(filtered.coaching_logs),
        daily_breakdown=days,
        tests_taken=filtered.tests,
    )
