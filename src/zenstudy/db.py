"""SQLite storage for notebooks and user stats."""
import json
import os
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Optional

from zenstudy.errors import PersistenceFailure
from zenstudy.models import Notebook, UserStats

DEFAULT_DB_PATH = os.environ.get(
    "ZENSTUDY_DB_PATH", str(Path.home() / ".zenstudy" / "zenstudy.db")
)
STATS_KEY = "current"

SCHEMA = """
CREATE TABLE IF NOT EXISTS notebooks (
    id TEXT PRIMARY KEY,
    position INTEGER NOT NULL,
    payload TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS user_stats (
    key TEXT PRIMARY KEY,
    payload TEXT NOT NULL
);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating all tables if they don't exist."""
    try:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        with closing(get_connection(db_path)) as conn:
            conn.executescript(SCHEMA)
            conn.commit()
    except (OSError, sqlite3.Error) as e:
        raise PersistenceFailure(f"Could not initialise {db_path}: {e}") from e


def save_notebooks(db_path: str, notebooks: list) -> None:
    """Replace the whole stored collection with `notebooks`."""
    try:
        with closing(get_connection(db_path)) as conn, conn:
            conn.execute("DELETE FROM notebooks")
            conn.executemany(
                "INSERT INTO notebooks (id, position, payload) VALUES (?, ?, ?)",
                [
                    (nb.id, pos, json.dumps(nb.to_dict()))
                    for pos, nb in enumerate(notebooks)
                ],
            )
    except sqlite3.Error as e:
        raise PersistenceFailure(f"Could not save notebooks: {e}") from e


def load_notebooks(db_path: str) -> Optional[list]:
    """Stored notebooks in saved order, or None when nothing has been saved."""
    try:
        with closing(get_connection(db_path)) as conn:
            rows = conn.execute("SELECT payload FROM notebooks ORDER BY position").fetchall()
        if not rows:
            return None
        return [Notebook.from_dict(json.loads(row["payload"])) for row in rows]
    except (sqlite3.Error, ValueError, KeyError) as e:
        raise PersistenceFailure(f"Could not load notebooks: {e}") from e


def save_stats(db_path: str, stats: UserStats) -> None:
    try:
        with closing(get_connection(db_path)) as conn, conn:
            conn.execute(
                "INSERT INTO user_stats (key, payload) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET payload=excluded.payload",
                (STATS_KEY, json.dumps(stats.to_dict())),
            )
    except sqlite3.Error as e:
        raise PersistenceFailure(f"Could not save stats: {e}") from e


def load_stats(db_path: str) -> Optional[UserStats]:
    try:
        with closing(get_connection(db_path)) as conn:
            row = conn.execute(
                "SELECT payload FROM user_stats WHERE key = ?", (STATS_KEY,)
            ).fetchone()
        if row is None:
            return None
        return UserStats.from_dict(json.loads(row["payload"]))
    except (sqlite3.Error, ValueError, KeyError) as e:
        raise PersistenceFailure(f"Could not load stats: {e}") from e
