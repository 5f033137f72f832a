"""Database initialization, record storage and settings."""
import json
import logging
import sqlite3
from datetime import datetime
from pathlib import Path

from prep_meter.codec import records_from_dict
from prep_meter.config import DEFAULT_DB_PATH
from prep_meter.models import StudyRecords

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS records (
    collection TEXT NOT NULL,
    record_key TEXT NOT NULL,
    payload TEXT NOT NULL,
    updated_at TEXT,
    PRIMARY KEY (collection, record_key)
);

CREATE TABLE IF NOT EXISTS user_settings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    key TEXT NOT NULL UNIQUE,
    value TEXT
);
"""

# Export collection name -> field that identifies a record within it.
# Date-keyed collections therefore hold at most one record per day.
COLLECTION_KEYS = {
    "dailyPlans": "date",
    "coachingLogs": "date",
    "wellnessLogs": "date",
    "tests": "id",
    "doubts": "id",
    "lectures": "id",
}
TOPICS = "topics"
TEACHERS = "teachers"


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating all tables if they don't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()


def _upsert(conn: sqlite3.Connection, collection: str, key: str, payload) -> None:
    conn.execute(
        """INSERT INTO records (collection, record_key, payload, updated_at) VALUES (?, ?, ?, ?)
        ON CONFLICT(collection, record_key) DO UPDATE SET payload=excluded.payload, updated_at=excluded.updated_at""",
        (collection, key, json.dumps(payload), datetime.now().isoformat()),
    )


def save_export(db_path: str, export: dict) -> dict[str, int]:
    """Store every collection of a user export, replacing records with the same key.

    Returns the number of records written per collection.
    """
    counts = {}
    conn = get_connection(db_path)
    for collection, key_field in COLLECTION_KEYS.items():
        items = export.get(collection) or []
        for item in items:
            key = str(item[key_field])
            if key_field == "date":
                key = key[:10]
            _upsert(conn, collection, key, item)
        counts[collection] = len(items)
    topics = export.get(TOPICS) or {}
    for subject_key, subject in topics.items():
        _upsert(conn, TOPICS, subject_key, subject)
    counts[TOPICS] = len(topics)
    teachers = export.get(TEACHERS) or []
    for name in teachers:
        _upsert(conn, TEACHERS, name, name)
    counts[TEACHERS] = len(teachers)
    conn.commit()
    conn.close()
    logger.info("Stored records: %s", counts)
    return counts


def load_collection(db_path: str, collection: str) -> list[dict]:
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT record_key, payload FROM records WHERE collection = ? ORDER BY rowid", (collection,)
    ).fetchall()
    conn.close()
    return [json.loads(row["payload"]) for row in rows]


def load_export(db_path: str) -> dict:
    """Reassemble the stored records into the export document shape."""
    export = {collection: load_collection(db_path, collection) for collection in COLLECTION_KEYS}
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT record_key, payload FROM records WHERE collection = ? ORDER BY rowid", (TOPICS,)
    ).fetchall()
    conn.close()
    export[TOPICS] = {row["record_key"]: json.loads(row["payload"]) for row in rows}
    export[TEACHERS] = load_collection(db_path, TEACHERS)
    return export


def load_records(db_path: str) -> StudyRecords:
    return records_from_dict(load_export(db_path))


def get_record_counts(db_path: str) -> dict[str, int]:
    conn = get_connection(db_path)
    rows = conn.execute("SELECT collection, COUNT(*) as n FROM records GROUP BY collection").fetchall()
    conn.close()
    return {row["collection"]: row["n"] for row in rows}


def get_setting(db_path: str, key: str, default: str = None) -> str | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT value FROM user_settings WHERE key = ?", (key,)).fetchone()
    conn.close()
    return row["value"] if row else default


def set_setting(db_path: str, key: str, value: str) -> None:
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO user_settings (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=?",
        (key, value, value),
    )
    conn.commit()
    conn.close()
