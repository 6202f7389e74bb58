# ===== IMPORTS & DEPENDENCIES =====
import os
import sqlite3
import logging
from datetime import datetime
from typing import Any, Dict, List

from steamcompass.models.game import GameMetrics

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

# ===== CORE BUSINESS LOGIC =====
class MetricsDatabase:
    """Stores one metrics record per (user, game). A later run replaces the record."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        directory = os.path.dirname(self.db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        self._create_tables()
        logger.info(f"[{self.__class__.__name__}] Database initialized at: {self.db_path}")

    def _get_connection(self) -> sqlite3.Connection:
        """Returns a new database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _create_tables(self):
        """Creates required tables if they don't exist."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS game_metrics (
                    user_id TEXT NOT NULL,
                    app_id INTEGER NOT NULL,
                    name TEXT NOT NULL,
                    critic_score INTEGER,
                    user_score REAL,
                    review_positive INTEGER NOT NULL DEFAULT 0,
                    review_negative INTEGER NOT NULL DEFAULT 0,
                    estimated_hours REAL NOT NULL DEFAULT 0,
                    star_rating REAL NOT NULL,
                    quality_score REAL NOT NULL,
                    value_rating REAL NOT NULL,
                    computed_at TEXT NOT NULL,
                    owned_playtime_minutes INTEGER NOT NULL DEFAULT 0,
                    missing_signals TEXT NOT NULL DEFAULT '',
                    UNIQUE(user_id, app_id)
                )
            """)
            conn.commit()

    def upsert_game_metrics(self, user_id: str, metrics: GameMetrics) -> None:
        """Inserts or fully replaces the record keyed by (user_id, app_id)."""
        record = metrics.to_record()
        record["user_id"] = str(user_id)
        columns = ", ".join(record)
        placeholders = ", ".join(f":{column}" for column in record)
        updates = ", ".join(f"{column} = excluded.{column}" for column in record if column not in ("user_id", "app_id"))
        with self._get_connection() as conn:
            conn.execute(
                f"INSERT INTO game_metrics ({columns}) VALUES ({placeholders}) "
                f"ON CONFLICT(user_id, app_id) DO UPDATE SET {updates}",
                record,
            )
            conn.commit()
        logger.debug(f"[{self.__class__.__name__}] Upserted metrics for user={user_id}, app={metrics.external_id}")

    def get_user_games(self, user_id: str) -> List[Dict[str, Any]]:
        """Returns every stored record for a user, best rated first."""
        with self._get_connection() as conn:
            cursor = conn.execute(
                "SELECT * FROM game_metrics WHERE user_id = ? ORDER BY star_rating DESC, name ASC",
                (str(user_id),),
            )
            rows = [dict(row) for row in cursor.fetchall()]
        for row in rows:
            row["missing_signals"] = [s for s in row["missing_signals"].split(",") if s]
            row["computed_at"] = datetime.fromisoformat(row["computed_at"])
        return rows
