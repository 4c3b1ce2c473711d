"""PostgreSQL storage implementation."""

import json
import logging
import os

import psycopg2
from psycopg2.extras import RealDictCursor

from core.interfaces import Storage

logger = logging.getLogger(__name__)


class PostgresStorage(Storage):
    """PostgreSQL-based storage implementation."""

    def __init__(self, db_url: str = None):
        self.db_url = db_url or os.environ.get(
            'DATABASE_URL',
            'postgresql://localhost:5432/latin_quest'
        )
        self._conn = None
        self._initialized = False

    @property
    def conn(self):
        """Lazy connection initialization."""
        if self._conn is None or self._conn.closed:
            self._conn = psycopg2.connect(self.db_url)
            if not self._initialized:
                self._init_db()
                self._initialized = True
        return self._conn

    def _init_db(self):
        """Create tables if they don't exist."""
        with self._conn.cursor() as cur:
            cur.execute("""
                CREATE TABLE IF NOT EXISTS player_progress (
                    user_id VARCHAR(255) PRIMARY KEY,
                    progress JSONB NOT NULL,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
            # Events log table (round starts/ends, unlocks)
            cur.execute("""
                CREATE TABLE IF NOT EXISTS events (
                    id SERIAL PRIMARY KEY,
                    timestamp TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    event VARCHAR(50) NOT NULL,
                    user_id VARCHAR(255) NOT NULL,
                    data JSONB
                )
            """)
            cur.execute("""
                CREATE INDEX IF NOT EXISTS idx_events_user_id ON events(user_id)
            """)
            cur.execute("""
                CREATE INDEX IF NOT EXISTS idx_events_event ON events(event)
            """)
        self._conn.commit()

    def close(self):
        """Close the database connection."""
        if self._conn and not self._conn.closed:
            self._conn.close()

    def load_state(self, user_id: str = "default") -> dict | None:
        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(
                    "SELECT progress FROM player_progress WHERE user_id = %s",
                    (user_id,)
                )
                row = cur.fetchone()
                if row:
                    return row['progress']
                return None
        except psycopg2.Error as e:
            logger.error(f"Error loading progress for {user_id}: {e}")
            return None

    def save_state(self, state: dict, user_id: str = "default") -> None:
        try:
            with self.conn.cursor() as cur:
                cur.execute("""
                    INSERT INTO player_progress (user_id, progress, updated_at)
                    VALUES (%s, %s, CURRENT_TIMESTAMP)
                    ON CONFLICT (user_id)
                    DO UPDATE SET progress = EXCLUDED.progress, updated_at = CURRENT_TIMESTAMP
                """, (user_id, json.dumps(state)))
            self.conn.commit()
        except psycopg2.Error as e:
            logger.error(f"Error saving progress for {user_id}: {e}")
            self.conn.rollback()
            raise

    def list_users(self) -> list[str]:
        """List all existing user IDs."""
        try:
            with self.conn.cursor() as cur:
                cur.execute("SELECT user_id FROM player_progress ORDER BY user_id")
                return [row[0] for row in cur.fetchall()]
        except psycopg2.Error as e:
            logger.error(f"Error listing users: {e}")
            return []

    def delete_user(self, user_id: str) -> bool:
        """Delete a user's progress."""
        try:
            with self.conn.cursor() as cur:
                cur.execute(
                    "DELETE FROM player_progress WHERE user_id = %s",
                    (user_id,)
                )
                deleted = cur.rowcount > 0
            self.conn.commit()
            return deleted
        except psycopg2.Error as e:
            logger.error(f"Error deleting user {user_id}: {e}")
            self.conn.rollback()
            return False

    def log_event(self, event: str, user_id: str, **data) -> None:
        """Append an event row. Failures are logged, never raised."""
        try:
            with self.conn.cursor() as cur:
                cur.execute(
                    "INSERT INTO events (event, user_id, data) VALUES (%s, %s, %s)",
                    (event, user_id, json.dumps(data))
                )
            self.conn.commit()
        except psycopg2.Error as e:
            logger.error(f"Error logging event {event}: {e}")
            self.conn.rollback()

    def get_recent_events(self, user_id: str, limit: int = 50) -> list[dict]:
        """Most recent events for a user, newest first."""
        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute("""
                    SELECT timestamp, event, data FROM events
                    WHERE user_id = %s ORDER BY timestamp DESC LIMIT %s
                """, (user_id, limit))
                return [dict(row) for row in cur.fetchall()]
        except psycopg2.Error as e:
            logger.error(f"Error getting events for {user_id}: {e}")
            return []
