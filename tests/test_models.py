"""Tests for data model classes."""
from prep_meter.models import (
    Chapter, CoachingLecture, CoachingLog, CoachingOtherActivity, CoachingTestActivity,
    DailyPlan, DateRange, Doubt, HourlySlot, Lecture, PlannedTopic, TestResult,
)


def test_hourly_slot_defaults():
    s = HourlySlot(id="s1", start_time="09:00", end_time="10:00")
    assert s.planned_topic_id is None
    assert s.subject is None
    assert s.status == "Pending"


def test_chapter_defaults():
    c = Chapter(name="Optics")
    assert c.status == "Not Started"
    assert c.progress.pyqs_count == 0
    assert c.major_topics == []


def test_test_result_totals():
    t = TestResult(id="t1", name="AITS", date="2024-01-02", total_marks=300,
                   marks={"Physics": 60, "Chemistry": -4, "Math": 40},
                   negative_marks={"Physics": 4, "Chemistry": 8})
    assert t.score == 96
    assert t.negative == 12
    assert t.type == "JEE Mains"


def test_activity_kinds_are_fixed():
    lecture = CoachingLecture(id="c1", start_time="09:00", end_time="10:00", subject="Math", teacher="Ms. Iyer")
    exam = CoachingTestActivity(id="c2", start_time="10:00", end_time="13:00")
    other = CoachingOtherActivity(id="c3", start_time="14:00", end_time="15:00")
    assert (lecture.kind, exam.kind, other.kind) == ("lecture", "test", "other")
    assert lecture.rating is None
    assert lecture.category == "Theory"


def test_coaching_log_lectures():
    lecture = CoachingLecture(id="c1", start_time="09:00", end_time="10:00", subject="Math", teacher="Ms. Iyer")
    log = CoachingLog(date="2024-01-02", activities=[CoachingOtherActivity("c0", "08:00", "09:00"), lecture])
    assert log.lectures() == [lecture]
    assert log.motivation is None


def test_daily_plan_planned_topics():
    plan = DailyPlan(date="2024-01-02", subject_plans={
        "Physics": [PlannedTopic(id="p1", subject="Physics", chapter_name="Optics")],
        "Math": [PlannedTopic(id="m1", subject="Math", chapter_name="Limits")],
    })
    assert [t.id for t in plan.planned_topics()] == ["p1", "m1"]
    assert plan.wake_up_time == ""


def test_lecture_date():
    lecture = Lecture(id="l1", title="Limits", subject="Math", chapter="Limits", date_added="2024-01-03T10:00:00.000Z")
    assert lecture.date == "2024-01-03"


def test_doubt_defaults():
    d = Doubt(id="d1", subject="Physics", topic="Optics", date="2024-01-02")
    assert d.status == "Still Confusing"
    assert d.context == ""


def test_date_range_label():
    assert DateRange("2024-01-01", "2024-01-07").label == "2024-01-01 to 2024-01-07"
