"""Deterministic sample rows used to populate an empty posts table."""
from datetime import datetime, timedelta, timezone

SEED_POST_COUNT = 35

SEED_AUTHORS = ("admin", "Hong Gildong", "Im Kkeokjeong", "Lee Mongryong", "Seong Chunhyang")

INSERT_POST_SQL = "INSERT INTO posts (title, content, author, createdAt) VALUES (?, ?, ?, ?)"


def build_seed_rows(now: datetime | None = None) -> list[tuple[str, str, str, str]]:
    """
    Return ``(title, content, author, createdAt)`` tuples for the seed set.

    Row *i* (1-based) is stamped *i* hours before *now*, so the newest
    sample is the one with the lowest id.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    rows = []
    for i in range(1, SEED_POST_COUNT + 1):
        created_at = now - timedelta(hours=i)
        rows.append(
            (
                f"Sample post {i}",
                f"This is sample post #{i}. SQLite seed data.",
                SEED_AUTHORS[(i - 1) % len(SEED_AUTHORS)],
                created_at.isoformat(),
            )
        )
    return rows
