"""MetricsDatabase tests"""

from datetime import datetime, timezone

import pytest

from steamcompass.core.database import MetricsDatabase
from steamcompass.models.game import GameMetrics


def make_metrics(app_id=620, name="Portal 2", stars=4.7, missing=()):
    return GameMetrics(
        external_id=app_id,
        display_name=name,
        critic_score=95,
        user_score=9.0,
        review_positive=9000,
        review_negative=100,
        estimated_hours=8.0,
        star_rating=stars,
        quality_score=95.0,
        value_rating=10.0,
        computed_at=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        owned_playtime_minutes=480,
        missing_signals=missing,
    )


@pytest.fixture
def db(tmp_path) -> MetricsDatabase:
    return MetricsDatabase(str(tmp_path / "data" / "metrics.db"))


class TestMetricsDatabase:
    """Per-user metrics storage"""

    def test_creates_parent_directory(self, tmp_path, db):
        assert (tmp_path / "data" / "metrics.db").exists()

    def test_round_trip(self, db):
        db.upsert_game_metrics("alice", make_metrics())

        [row] = db.get_user_games("alice")
        assert row["app_id"] == 620
        assert row["name"] == "Portal 2"
        assert row["critic_score"] == 95
        assert row["star_rating"] == 4.7
        assert row["missing_signals"] == []
        assert row["owned_playtime_minutes"] == 480
        assert row["computed_at"] == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def test_upsert_replaces_previous_run(self, db):
        db.upsert_game_metrics("alice", make_metrics(stars=4.7))
        db.upsert_game_metrics("alice", make_metrics(stars=3.1, missing=("critic_scores",)))

        [row] = db.get_user_games("alice")
        assert row["star_rating"] == 3.1
        assert row["missing_signals"] == ["critic_scores"]

    def test_users_are_separate(self, db):
        db.upsert_game_metrics("alice", make_metrics())
        db.upsert_game_metrics("bob", make_metrics(stars=2.0))

        assert db.get_user_games("alice")[0]["star_rating"] == 4.7
        assert db.get_user_games("bob")[0]["star_rating"] == 2.0
        assert db.get_user_games("carol") == []

    def test_best_rated_first(self, db):
        db.upsert_game_metrics("alice", make_metrics(1, "Beta", 3.0))
        db.upsert_game_metrics("alice", make_metrics(2, "Alpha", 3.0))
        db.upsert_game_metrics("alice", make_metrics(3, "Gamma", 4.5))

        assert [row["name"] for row in db.get_user_games("alice")] == ["Gamma", "Alpha", "Beta"]

    def test_degraded_record_keeps_missing_scores(self, db, unknown_identity):
        db.upsert_game_metrics("alice", GameMetrics.degraded(unknown_identity))

        [row] = db.get_user_games("alice")
        assert row["critic_score"] is None
        assert row["user_score"] is None
        assert row["review_positive"] == 0
        assert row["missing_signals"] == ["critic_scores", "review_sentiment", "completion_hours"]
