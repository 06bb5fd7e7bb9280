import sqlite3
import json
import uuid
from datetime import datetime, timezone
from typing import Dict, Optional

from config import DB_PATH
from memory.models import GameSession, SessionAnswer
from utils.logging_utils import get_logger

logger = get_logger(__name__)


class StoreError(Exception):
    """Raised when the skill ledger or session store cannot be read or written."""


def _connect() -> sqlite3.Connection:
    try:
        return sqlite3.connect(DB_PATH)
    except sqlite3.Error as e:
        logger.error(f"Failed to open database {DB_PATH}: {e}")
        raise StoreError(f"Failed to open database: {e}") from e


def init_db():
    conn = _connect()
    c = conn.cursor()
    c.execute(
        """
        CREATE TABLE IF NOT EXISTS skill_ledger (
            user_id TEXT NOT NULL,
            skill TEXT NOT NULL,
            xp INTEGER NOT NULL DEFAULT 0,
            PRIMARY KEY (user_id, skill)
        )
    """
    )
    c.execute(
        """
        CREATE TABLE IF NOT EXISTS game_sessions (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            game_id TEXT NOT NULL,
            user_type TEXT,
            started_at TEXT NOT NULL,
            responses TEXT NOT NULL DEFAULT '[]',
            score INTEGER NOT NULL DEFAULT 0,
            completed INTEGER NOT NULL DEFAULT 0,
            completed_at TEXT
        )
    """
    )
    conn.commit()
    conn.close()


init_db()


def get_ledger(user_id: str) -> Dict[str, int]:
    """Return the user's {skill name: xp} mapping; empty for a new user."""
    conn = _connect()
    try:
        c = conn.cursor()
        c.execute("SELECT skill, xp FROM skill_ledger WHERE user_id = ?", (user_id,))
        rows = c.fetchall()
    except sqlite3.Error as e:
        logger.error(f"Failed to load skill ledger for user {user_id}: {e}")
        raise StoreError(f"Failed to load skill ledger: {e}") from e
    finally:
        conn.close()

    return {skill: xp for skill, xp in rows}


def merge_ledger(user_id: str, delta: Dict[str, int]) -> Dict[str, int]:
    """
    Add a delta to the user's ledger and return the updated ledger.

    Each skill is incremented in place at the storage layer, so two sessions
    writing for the same user never overwrite each other's XP. All rows of a
    delta are committed in one transaction.
    """
    conn = _connect()
    try:
        with conn:
            conn.executemany(
                """
                INSERT INTO skill_ledger (user_id, skill, xp) VALUES (?, ?, ?)
                ON CONFLICT (user_id, skill) DO UPDATE SET xp = xp + excluded.xp
                """,
                [(user_id, skill, int(xp)) for skill, xp in delta.items()],
            )
    except sqlite3.Error as e:
        logger.error(f"Failed to update skill ledger for user {user_id}: {e}")
        raise StoreError(f"Failed to update skill ledger: {e}") from e
    finally:
        conn.close()

    return get_ledger(user_id)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def start_session(user_id: str, game_id: str, user_type: str = "student") -> str:
    session_id = uuid.uuid4().hex
    conn = _connect()
    try:
        with conn:
            conn.execute(
                """
                INSERT INTO game_sessions (id, user_id, game_id, user_type, started_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (session_id, user_id, game_id, user_type, _now()),
            )
    except sqlite3.Error as e:
        logger.error(f"Failed to start {game_id} session for user {user_id}: {e}")
        raise StoreError(f"Failed to start game session: {e}") from e
    finally:
        conn.close()

    return session_id


def load_session(session_id: str) -> Optional[GameSession]:
    conn = _connect()
    try:
        c = conn.cursor()
        c.execute(
            """
            SELECT id, user_id, game_id, user_type, started_at, responses,
                   score, completed, completed_at
            FROM game_sessions WHERE id = ?
            """,
            (session_id,),
        )
        row = c.fetchone()
    except sqlite3.Error as e:
        logger.error(f"Failed to load session {session_id}: {e}")
        raise StoreError(f"Failed to load game session: {e}") from e
    finally:
        conn.close()

    if not row:
        return None

    responses = [SessionAnswer(**r) for r in json.loads(row[5])]
    return GameSession(
        id=row[0],
        user_id=row[1],
        game_id=row[2],
        user_type=row[3],
        started_at=row[4],
        responses=responses,
        score=row[6],
        completed=bool(row[7]),
        completed_at=row[8],
    )


def append_answer(session_id: str, answer: SessionAnswer) -> GameSession:
    """Append one answer to a session and recount its score."""
    session = load_session(session_id)
    if session is None:
        raise StoreError(f"Unknown game session: {session_id}")

    session.responses.append(answer)
    session.score = sum(1 for a in session.responses if a.correct)

    conn = _connect()
    try:
        with conn:
            conn.execute(
                "UPDATE game_sessions SET responses = ?, score = ? WHERE id = ?",
                (
                    json.dumps([vars(a) for a in session.responses]),
                    session.score,
                    session_id,
                ),
            )
    except sqlite3.Error as e:
        logger.error(f"Failed to record answer for session {session_id}: {e}")
        raise StoreError(f"Failed to update game session: {e}") from e
    finally:
        conn.close()

    return session


def complete_session(session_id: str) -> GameSession:
    completed_at = _now()
    conn = _connect()
    try:
        with conn:
            cur = conn.execute(
                "UPDATE game_sessions SET completed = 1, completed_at = ? WHERE id = ?",
                (completed_at, session_id),
            )
            updated = cur.rowcount
    except sqlite3.Error as e:
        logger.error(f"Failed to end session {session_id}: {e}")
        raise StoreError(f"Failed to end game session: {e}") from e
    finally:
        conn.close()

    if not updated:
        raise StoreError(f"Unknown game session: {session_id}")

    return load_session(session_id)
