"""
Post repository — data access for the ``posts`` table.

Design notes
------------
- Posts are listed by ascending ``id`` only; ids grow with insertion
  order, so this is also creation order.
- Rows are validated into ``Post`` models on the way out, so a malformed
  row fails here instead of further up the stack.
- There is no delete.  ``update_post`` replaces all three mutable fields
  and never touches ``id`` or ``createdAt``.
"""
import logging
from datetime import datetime, timezone

from board.database import StorageGateway
from board.schemas import Post, PostCreate
from board.seed import INSERT_POST_SQL

logger = logging.getLogger(__name__)


async def count_posts(db: StorageGateway) -> int:
    """Return the total number of posts."""
    row = await db.query_one("SELECT COUNT(*) AS count FROM posts")
    return row["count"] if row else 0


async def list_posts(db: StorageGateway, limit: int, offset: int) -> list[Post]:
    """
    Return at most *limit* posts ordered by id, skipping the first *offset*.

    *limit* and *offset* are expected to be clamped by the caller.
    """
    rows = await db.query_many(
        "SELECT id, title, content, author, createdAt FROM posts ORDER BY id LIMIT ? OFFSET ?",
        (limit, offset),
    )
    return [Post.model_validate(row) for row in rows]


async def get_post_by_id(db: StorageGateway, post_id: int) -> Post | None:
    """Return the post with *post_id*, or None when it does not exist."""
    row = await db.query_one(
        "SELECT id, title, content, author, createdAt FROM posts WHERE id = ?",
        (post_id,),
    )
    if row is None:
        return None
    return Post.model_validate(row)


async def create_post(db: StorageGateway, data: PostCreate) -> int:
    """Insert a new post stamped with the current UTC time and return its id."""
    created_at = datetime.now(timezone.utc).isoformat()
    post_id = await db.insert_returning_id(
        INSERT_POST_SQL,
        (data.title, data.content, data.author, created_at),
    )
    logger.info("Created post id=%d", post_id)
    return post_id


async def update_post(db: StorageGateway, post_id: int, data: PostCreate) -> bool:
    """
    Replace the title, content and author of *post_id*.

    Always returns True when no error is raised, including when no row
    matched; callers that need the post to exist check with
    ``get_post_by_id`` first.
    """
    await db.execute(
        "UPDATE posts SET title = ?, content = ?, author = ? WHERE id = ?",
        (data.title, data.content, data.author, post_id),
    )
    logger.info("Updated post id=%d", post_id)
    return True
