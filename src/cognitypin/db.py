"""Database initialization and the key-value preferences store."""
import json
import os
import sqlite3
from pathlib import Path

from loguru import logger

DEFAULT_DB_PATH = os.environ.get(
    "COGNITYPIN_DB", str(Path.home() / ".cognitypin" / "cognitypin.db")
)

SCHEMA = """
CREATE TABLE IF NOT EXISTS user_settings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    key TEXT NOT NULL UNIQUE,
    value TEXT
);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating the settings table if it doesn't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()


def get_value(db_path: str, key: str, default=None):
    """Load a JSON value by key. Missing or unreadable values yield ``default``."""
    conn = get_connection(db_path)
    try:
        row = conn.execute("SELECT value FROM user_settings WHERE key = ?", (key,)).fetchone()
    except sqlite3.Error as e:
        logger.warning("Could not read {} from {}: {}", key, db_path, e)
        return default
    finally:
        conn.close()
    if row is None or row["value"] is None:
        return default
    try:
        return json.loads(row["value"])
    except ValueError:
        logger.warning("Discarding malformed value stored under {}", key)
        return default


def set_value(db_path: str, key: str, value) -> None:
    encoded = json.dumps(value)
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO user_settings (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=?",
        (key, encoded, encoded),
    )
    conn.commit()
    conn.close()
    logger.debug("Stored {} ({} bytes)", key, len(encoded))


def delete_value(db_path: str, key: str) -> None:
    conn = get_connection(db_path)
    conn.execute("DELETE FROM user_settings WHERE key = ?", (key,))
    conn.commit()
    conn.close()
