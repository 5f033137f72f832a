import pytest

from prep_meter import aggregators
from prep_meter.daterange import select_range
from prep_meter.models import (
    Chapter, CoachingLecture, CoachingLog, DailyPlan, DailyPlanTask, DateRange, Doubt,
    HourlySlot, Lecture, PhysicsSubject, PlannedTopic, QuestionsSolvedLog, StudyRecords,
    TestResult, TestSyllabusItem, WellnessLog, CLEARED, DONE, STILL_CONFUSING,
)
from prep_meter.rollup import build_daily_breakdown

WINDOW = DateRange("2024-01-01", "2024-01-31")


def _days(records, window=WINDOW):
    return build_daily_breakdown(select_range(records, window), records)


def _study_plan(day, chapter, start="09:00", end="11:00", subject="Physics", questions=()):
    topic_id = f"{day}-{chapter}"
    return DailyPlan(
        date=day,
        subject_plans={subject: [PlannedTopic(id=topic_id, subject=subject, chapter_name=chapter, status=DONE)]},
        schedule=[HourlySlot(f"s-{topic_id}", start, end, topic_id, subject, DONE)],
        wake_up_time="06:00",
        sleep_time="22:00",
        questions_solved=list(questions),
    )


def _test(test_id, day, score, chapters, total=100):
    return TestResult(
        id=test_id, name=f"Test {test_id}", date=day, total_marks=total,
        marks={"Physics": score}, negative_marks={"Physics": 2},
        syllabus=[TestSyllabusItem("Physics", c) for c in chapters],
    )


def _lecture(lecture_id, teacher, rating, subject="Physics", start="16:00", end="17:30"):
    return CoachingLecture(lecture_id, start, end, subject=subject, teacher=teacher, rating=rating)


# Chapters

def test_chapter_average_over_tests():
    tests = [_test("a", "2024-01-05", 60, ["Thermodynamics"]), _test("b", "2024-01-09", 80, ["Thermodynamics"])]
    metrics = aggregators.chapter_metrics([], tests)
    assert metrics["Thermodynamics"].avg_test_score == pytest.approx(70)
    assert [t.score_percent for t in metrics["Thermodynamics"].tests] == [60, 80]


def test_untested_chapter_has_no_average():
    plan = _study_plan("2024-01-02", "Kinematics", questions=[
        QuestionsSolvedLog("q1", "Physics", "Kinematics", 20, "Basic"),
        QuestionsSolvedLog("q2", "Physics", "Kinematics", 5, "Advanced"),
    ])
    metrics = aggregators.chapter_metrics(_days(StudyRecords(daily_plans=[plan])), [])
    entry = metrics["Kinematics"]
    assert entry.avg_test_score is None
    assert entry.questions == {"Basic": 20, "Mains": 0, "Advanced": 5}
    assert entry.total_questions == 25
    assert entry.hours == 2
    assert entry.subject == "Physics"


def test_test_score_clamped_to_total():
    tests = [_test("a", "2024-01-05", 130, ["Optics"]), _test("b", "2024-01-06", -10, ["Waves"])]
    metrics = aggregators.chapter_metrics([], tests)
    assert metrics["Optics"].avg_test_score == 100
    assert metrics["Waves"].avg_test_score == 0


def test_chapter_listed_twice_counts_once_per_test():
    metrics = aggregators.chapter_metrics([], [_test("a", "2024-01-05", 50, ["Optics", "Optics"])])
    assert len(metrics["Optics"].tests) == 1


def test_zero_total_marks_gives_no_percentage():
    metrics = aggregators.chapter_metrics([], [_test("a", "2024-01-05", 50, ["Optics"], total=0)])
    assert metrics["Optics"].tests[0].score_percent is None
    assert metrics["Optics"].avg_test_score is None


def test_chapter_subject_falls_back_to_hierarchy():
    tests = [TestResult("a", "T", "2024-01-05", 100, marks={"Physics": 40},
                        syllabus=[TestSyllabusItem("", "Optics")])]
    metrics = aggregators.chapter_metrics([], tests, [PhysicsSubject(chapters=[Chapter("Optics")])])
    assert metrics["Optics"].subject == "Physics"


def test_rankings_exclude_untested_and_break_ties_by_name():
    tests = [
        _test("a", "2024-01-05", 50, ["Waves", "Optics"]),
        _test("b", "2024-01-06", 90, ["Kinematics"]),
    ]
    plan = _study_plan("2024-01-02", "Gravitation")
    metrics = aggregators.chapter_metrics(_days(StudyRecords(daily_plans=[plan])), tests)
    weakest = aggregators.rank_chapters(metrics, limit=5, weakest=True)
    strongest = aggregators.rank_chapters(metrics, limit=5, weakest=False)
    assert [r["name"] for r in weakest] == ["Optics", "Waves", "Kinematics"]
    assert [r["name"] for r in strongest] == ["Kinematics", "Optics", "Waves"]
    assert aggregators.rank_chapters(metrics, limit=1) == [{"name": "Optics", "avg_score": 50, "subject": "Physics"}]


def test_chapter_breakdown_groups_by_subject():
    plans = [
        _study_plan("2024-01-02", "Kinematics"),
        _study_plan("2024-01-03", "Limits", "09:00", "12:00", subject="Math"),
        _study_plan("2024-01-04", "Optics", "09:00", "12:00"),
    ]
    metrics = aggregators.chapter_metrics(_days(StudyRecords(daily_plans=plans)), [])
    table = aggregators.chapter_breakdown(metrics, "hours")
    assert table == [
        {"subject": "Physics", "data": [{"name": "Optics", "value": 3.0}, {"name": "Kinematics", "value": 2.0}]},
        {"subject": "Math", "data": [{"name": "Limits", "value": 3.0}]},
    ]
    assert aggregators.chapter_breakdown(metrics, "avg_test_score") == []


# Teachers

def test_teacher_ratings_average_and_count():
    logs = [
        CoachingLog("2024-01-02", [_lecture("c1", "Mr. Rao", 4)]),
        CoachingLog("2024-01-03", [_lecture("c2", "Mr. Rao", 5)]),
        CoachingLog("2024-01-04", [_lecture("c3", "Mr. Rao", 3)]),
    ]
    metrics = aggregators.teacher_metrics(logs, [])
    rao = metrics["Mr. Rao"]
    assert rao.ratings == [4, 5, 3]
    assert rao.avg_rating == 4
    assert rao.class_count == 3
    assert rao.total_hours == pytest.approx(4.5)


def test_ratings_follow_date_order():
    logs = [
        CoachingLog("2024-01-04", [_lecture("c3", "Ms. Iyer", 2)]),
        CoachingLog("2024-01-02", [_lecture("c1", "Ms. Iyer", 5)]),
    ]
    assert aggregators.teacher_metrics(logs, [])["Ms. Iyer"].ratings == [5, 2]


def test_unrated_teacher_has_no_average():
    logs = [CoachingLog("2024-01-02", [_lecture("c1", "Ms. Iyer", None)])]
    entry = aggregators.teacher_metrics(logs, [])["Ms. Iyer"]
    assert entry.avg_rating is None
    assert entry.class_count == 1


def test_doubts_cleared_joined_by_subject_date_and_context():
    logs = [CoachingLog("2024-01-01", [_lecture("c1", "Mr. Sharma", 4)])]
    doubts = [
        Doubt("d1", "Physics", "Friction", "2024-01-02", status=CLEARED),
        Doubt("d2", "Physics", "Friction", "2024-01-05", status=CLEARED),
        Doubt("d3", "Chemistry", "Moles", "2024-01-01", status=CLEARED, context="Asked Mr. Sharma after class"),
        Doubt("d4", "Physics", "Friction", "2024-01-01", status=STILL_CONFUSING),
    ]
    assert aggregators.teacher_metrics(logs, doubts)["Mr. Sharma"].doubts_cleared == 2
    assert aggregators.teacher_metrics(logs, doubts, window_days=5)["Mr. Sharma"].doubts_cleared == 3


def test_teacher_tables():
    logs = [CoachingLog("2024-01-02", [
        _lecture("c1", "Mr. Rao", 4),
        _lecture("c2", "Ms. Iyer", 5),
        _lecture("c3", "Ms. Iyer", 4.6),
    ])]
    metrics = aggregators.teacher_metrics(logs, [])
    assert aggregators.teacher_lecture_count(metrics) == [
        {"name": "Ms. Iyer", "count": 2},
        {"name": "Mr. Rao", "count": 1},
    ]
    histogram = aggregators.teacher_rating_distribution(metrics)
    assert histogram[0] == {"name": "Mr. Rao", "1": 0, "2": 0, "3": 0, "4": 1, "5": 0}
    assert histogram[1] == {"name": "Ms. Iyer", "1": 0, "2": 0, "3": 0, "4": 0, "5": 2}


# Time buckets

def test_heatmap_marks_dates_without_schedule_data():
    plan = _study_plan("2024-01-02", "Kinematics", "09:30", "11:00")
    logs = [CoachingLog("2024-01-02", [_lecture("c1", "Mr. Rao", 4, start="10:00", end="11:00")])]
    wellness = [WellnessLog("2024-01-03", mood=3, sleep_hours=6)]
    days = _days(StudyRecords(daily_plans=[plan], coaching_logs=logs, wellness_logs=wellness))
    rows, labels = aggregators.hourly_activity_heatmap(days)
    assert labels == ["2024-01-02", "2024-01-03"]
    assert len(rows) == 24
    by_hour = {row["hour"]: row["values"] for row in rows}
    assert by_hour["09"] == [0.5, None]
    assert by_hour["10"] == [2.0, None]
    assert by_hour["12"] == [0.0, None]


def test_daily_hours_breakdown_zero_fills_range():
    plans = [_study_plan("2024-01-01", "Optics"), _study_plan("2024-01-03", "Waves")]
    window = DateRange("2024-01-01", "2024-01-03")
    rows = aggregators.daily_hours_breakdown(_days(StudyRecords(daily_plans=plans), window), window)
    assert [r["date"] for r in rows] == ["2024-01-01", "2024-01-02", "2024-01-03"]
    assert rows[1] == {"date": "2024-01-02", "self_study": 0.0, "coaching": 0.0, "breaks": 0.0}
    assert rows[0]["self_study"] == 2


# Trends

def test_syllabus_coverage_is_cumulative_and_skips_gaps():
    plans = [
        _study_plan("2024-01-01", "Kinematics"),
        DailyPlan(
            date="2024-01-02",
            subject_plans={"Physics": [
                PlannedTopic("a", "Physics", "Kinematics", status=DONE),
                PlannedTopic("b", "Physics", "Optics", status=DONE),
            ]},
            schedule=[HourlySlot("s1", "09:00", "10:00", "a", status=DONE),
                      HourlySlot("s2", "10:00", "11:00", "b", status=DONE)],
        ),
        _study_plan("2024-01-03", "Kinematics"),
    ]
    days = _days(StudyRecords(daily_plans=plans))
    assert aggregators.syllabus_coverage_trend(days) == [
        {"date": "2024-01-01", "count": 1},
        {"date": "2024-01-02", "count": 2},
    ]
    optics_only = [PhysicsSubject(chapters=[Chapter("Optics")])]
    assert aggregators.syllabus_coverage_trend(days, optics_only) == [{"date": "2024-01-02", "count": 1}]


def test_exam_trends_are_chronological():
    tests = [_test("b", "2024-01-09", 80, []), _test("a", "2024-01-05", 60, [])]
    trend = aggregators.exam_performance_trend(tests)
    assert [t["name"] for t in trend] == ["Test a", "Test b"]
    assert trend[0] == {"date": "2024-01-05", "name": "Test a", "score": 60, "total_marks": 100,
                        "percentage": pytest.approx(60), "negative": 2}
    analysis = aggregators.negative_marks_analysis(tests)
    assert [row["negative"] for row in analysis] == [2, 2]
    assert [row["percentage"] for row in analysis] == pytest.approx([60, 80])


def test_subject_wise_test_performance():
    tests = [
        TestResult("a", "A", "2024-01-05", 300, marks={"Physics": 60, "Math": 30}),
        TestResult("b", "B", "2024-01-06", 300, marks={"Physics": 80, "Chemistry": 50}),
    ]
    assert aggregators.subject_wise_test_performance(tests) == [
        {"name": "Physics", "avg_score": 70},
        {"name": "Chemistry", "avg_score": 50},
        {"name": "Math", "avg_score": 30},
    ]


def test_wellness_and_motivation_trends():
    logs = [CoachingLog("2024-01-02", [_lecture("c1", "Mr. Rao", 4)], motivation=3)]
    wellness = [WellnessLog("2024-01-02", mood=5, sleep_hours=8)]
    days = _days(StudyRecords(coaching_logs=logs, wellness_logs=wellness))
    assert aggregators.wellness_trend(days) == [{"date": "2024-01-02", "mood": 5, "sleep": 8, "efficiency": None}]
    assert aggregators.motivation_vs_coaching(logs) == [{"date": "2024-01-02", "motivation": 3, "hours": 1.5}]


def test_homework_completion_rate():
    plan = DailyPlan("2024-01-02", tasks=[DailyPlanTask("k1", "DPP", DONE), DailyPlanTask("k2", "Notes")])
    assert aggregators.homework_completion_rate([plan]) == 50
    assert aggregators.homework_completion_rate([DailyPlan("2024-01-02")]) is None


# Distributions

def test_subject_time_distribution_includes_unattributed_study():
    plan = DailyPlan(
        date="2024-01-02",
        subject_plans={"Math": [PlannedTopic("t1", "Math", "Limits", status=DONE)]},
        tasks=[DailyPlanTask("k1", "Mock analysis", DONE)],
        schedule=[HourlySlot("s1", "09:00", "11:00", "t1", status=DONE),
                  HourlySlot("s2", "11:00", "12:00", "k1", status=DONE)],
    )
    days = _days(StudyRecords(daily_plans=[plan]))
    assert aggregators.subject_time_distribution(days) == [
        {"name": "Math", "value": 2.0},
        {"name": "Other", "value": 1.0},
    ]


def test_question_type_distribution_omits_absent_subjects():
    plan = _study_plan("2024-01-02", "Limits", subject="Math", questions=[
        QuestionsSolvedLog("q1", "Math", "Limits", 10, "Mains"),
        QuestionsSolvedLog("q2", "Math", "Limits", 4, "Basic"),
    ])
    days = _days(StudyRecords(daily_plans=[plan]))
    assert aggregators.question_type_distribution(days) == [{"name": "Math", "Basic": 4, "Mains": 10, "Advanced": 0}]


def test_doubt_distribution():
    doubts = [
        Doubt("d1", "Math", "Limits", "2024-01-02", status=CLEARED),
        Doubt("d2", "Physics", "Optics", "2024-01-02"),
        Doubt("d3", "Physics", "Waves", "2024-01-03"),
    ]
    assert aggregators.doubt_distribution(doubts) == [
        {"name": "Physics", "value": 2},
        {"name": "Math", "value": 1},
        {"name": "Cleared", "value": 1},
        {"name": "Still Confusing", "value": 2},
    ]


def test_coaching_distributions():
    logs = [CoachingLog("2024-01-02", [
        CoachingLecture("c1", "09:00", "11:00", subject="Chemistry", teacher="Mr. Rao", category="Theory"),
        CoachingLecture("c2", "11:00", "12:00", subject="Physics", teacher="Ms. Iyer", category="Questions"),
        CoachingLecture("c3", "12:00", "13:00", subject="Chemistry", teacher="Mr. Rao", category="Theory"),
    ])]
    days = _days(StudyRecords(coaching_logs=logs))
    assert aggregators.lecture_category_distribution(days, []) == [
        {"name": "Theory", "value": 2},
        {"name": "Questions", "value": 1},
    ]
    assert aggregators.coaching_subject_distribution(days) == [
        {"name": "Physics", "value": 1.0},
        {"name": "Chemistry", "value": 3.0},
    ]


def test_lecture_categories_include_library_lectures_in_range():
    logs = [CoachingLog("2024-01-02", [
        CoachingLecture("c1", "09:00", "11:00", subject="Math", teacher="Ms. Iyer", category="Questions"),
    ])]
    library = [
        Lecture("l1", "Limits one shot", "Math", "Limits", category="One Shot", date_added="2024-01-03T10:00:00Z"),
        Lecture("l2", "Old revision", "Math", "Limits", category="Revision", date_added="2023-11-01T10:00:00Z"),
    ]
    records = StudyRecords(coaching_logs=logs, lectures=library)
    filtered = select_range(records, WINDOW)
    days = build_daily_breakdown(filtered, records)
    assert aggregators.lecture_category_distribution(days, filtered.lectures) == [
        {"name": "Questions", "value": 1},
        {"name": "One Shot", "value": 1},
    ]


def test_zero_percent_chapter_stays_in_test_table():
    metrics = aggregators.chapter_metrics([], [_test("a", "2024-01-05", 0, ["Optics"])])
    assert metrics["Optics"].avg_test_score == 0
    assert aggregators.chapter_breakdown(metrics, "avg_test_score") == [
        {"subject": "Physics", "data": [{"name": "Optics", "value": 0.0}]},
    ]
    assert aggregators.chapter_breakdown(metrics, "hours") == []
    assert aggregators.rank_chapters(metrics)[0]["name"] == "Optics"
