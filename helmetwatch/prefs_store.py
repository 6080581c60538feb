import json
import sqlite3
from pathlib import Path
from typing import Any

from helmetwatch.settings import DB_PATH

PREFS_TABLE = "ui_prefs"


def connect(db_path: str | Path = DB_PATH) -> sqlite3.Connection:
    """
    Open the preference database, creating its folder and table on first use.
    """
    db_file = Path(db_path)
    if not db_file.is_absolute():
        db_file = Path.cwd() / db_file
    db_file.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_file)
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA busy_timeout=5000;")
    conn.execute(
        f"""
        CREATE TABLE IF NOT EXISTS {PREFS_TABLE} (
            key TEXT PRIMARY KEY,
            value_json TEXT NOT NULL
        )
        """
    )
    return conn


def get_pref(conn: sqlite3.Connection, key: str, default: Any = None) -> Any:
    row = conn.execute(
        f"SELECT value_json FROM {PREFS_TABLE} WHERE key = ?",
        (key,),
    ).fetchone()
    if not row:
        return default
    try:
        return json.loads(row[0])
    except json.JSONDecodeError:
        return default


def set_pref(conn: sqlite3.Connection, key: str, value: Any) -> None:
    conn.execute(
        f"""
        INSERT INTO {PREFS_TABLE} (key, value_json)
        VALUES (?, ?)
        ON CONFLICT(key) DO UPDATE SET
          value_json=excluded.value_json
        """,
        (key, json.dumps(value)),
    )
    conn.commit()


def load_pref(key: str, default: Any = None, db_path: str | Path = DB_PATH) -> Any:
    try:
        conn = connect(db_path)
    except sqlite3.Error:
        return default
    try:
        return get_pref(conn, key, default)
    except sqlite3.Error:
        return default
    finally:
        conn.close()


def save_pref(key: str, value: Any, db_path: str | Path = DB_PATH) -> bool:
    try:
        conn = connect(db_path)
    except sqlite3.Error:
        return False
    try:
        set_pref(conn, key, value)
        return True
    except sqlite3.Error:
        return False
    finally:
        conn.close()
