import pytest


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_records.db")
    return db_path


@pytest.fixture
def sample_export():
    """A small user export in the app's camelCase document shape."""
    return {
        "topics": {
            "physics": {"name": "Physics", "chapters": [
                {
                    "name": "Kinematics", "status": "Completed", "coachingStatus": "Completed",
                    "progress": {"level1": True, "level2": False, "mains": True, "advanced": False,
                                 "pyqs": True, "pyqsCount": 12},
                    "majorTopics": [{"name": "Motion in 1D", "subtopics": [
                        {"name": "Relative velocity", "status": "Completed", "coachingStatus": "Not Started"},
                    ]}],
                },
            ]},
            "chemistry": {"name": "Chemistry", "sections": [
                {"name": "Physical Chemistry", "chapters": [{"name": "Thermodynamics", "status": "In Progress"}]},
                {"name": "Organic Chemistry", "chapters": [{"name": "GOC"}]},
            ]},
            "math": {"name": "Math", "chapters": [{"name": "Limits"}]},
        },
        "tests": [{
            "id": "t1", "name": "AITS 1", "date": "2024-01-02", "type": "JEE Mains",
            "marks": {"physics": 60, "chemistry": 50, "math": 40},
            "negativeMarks": {"physics": 4, "chemistry": 8, "math": 0},
            "totalMarks": 300,
            "syllabus": [{"subject": "Physics", "chapter": "Kinematics"},
                         {"subject": "Chemistry", "chapter": "Thermodynamics"}],
            "customSyllabus": "", "analysisDone": True, "feedback": "", "learnings": "",
        }],
        "dailyPlans": [{
            "date": "2024-01-01",
            "subjectPlans": {
                "Physics": [{"id": "p1", "subject": "Physics", "chapterName": "Kinematics", "isFullChapter": True,
                             "subtopicNames": [], "note": "", "status": "Completed"}],
                "Chemistry": [],
                "Math": [],
            },
            "schedule": [
                {"id": "s1", "startTime": "09:00", "endTime": "11:00", "plannedTopicId": "p1",
                 "subject": "Physics", "status": "Completed"},
                {"id": "s2", "startTime": "11:00", "endTime": "12:00", "plannedTopicId": None,
                 "subject": None, "status": "Pending"},
            ],
            "tasks": [{"id": "k1", "text": "DPP 3", "status": "Completed"}],
            "isReviewed": True,
            "wakeUpTime": "06:00",
            "sleepTime": "22:00",
            "dailyMood": 4,
            "questionsSolved": [{"id": "q1", "subject": "Physics", "chapter": "Kinematics", "count": 25, "type": "Mains"}],
        }],
        "coachingLogs": [{
            "date": "2024-01-02",
            "motivation": 4,
            "activities": [
                {"id": "c1", "type": "lecture", "startTime": "16:00", "endTime": "18:00", "subject": "Chemistry",
                 "teacher": "Mr. Rao", "category": "Theory", "chapter": "Thermodynamics",
                 "subtopicsTaught": ["First law"], "remarks": "", "rating": 4, "homework": "Ex 6.1", "doubts": ""},
                {"id": "c2", "type": "test", "upcomingTestId": None, "testResultId": "t1", "testName": "",
                 "startTime": "09:00", "endTime": "12:00"},
                {"id": "c3", "type": "other", "description": "Orientation", "startTime": "12:30", "endTime": "13:00"},
            ],
        }],
        "wellnessLogs": [{"date": "2024-01-01", "mood": 4, "sleepHours": 7.5}],
        "doubts": [{"id": "d1", "subject": "Chemistry", "topic": "Thermodynamics", "description": "Sign convention",
                    "date": "2024-01-03", "status": "Cleared"}],
        "lectures": [{"id": "l1", "title": "Projectile motion one shot", "url": "https://youtu.be/x", "videoId": "x",
                      "subject": "Physics", "chapter": "Kinematics", "category": "Theory",
                      "dateAdded": "2024-01-01T08:00:00.000Z"}],
        "teachers": ["Mr. Rao"],
    }
