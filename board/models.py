from sqlalchemy import Column, Integer, MetaData, Table, Text

metadata = MetaData()

# ---------------------------------------------------------------------------
# Post
# ---------------------------------------------------------------------------
# Queries are written as plain parameterized SQL against this table; the
# Table object only drives DDL.  ``sqlite_autoincrement`` renders
# AUTOINCREMENT so ids are never reused and always grow with insertion order.
posts = Table(
    "posts",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("title", Text, nullable=False),
    Column("content", Text, nullable=False),
    Column("author", Text, nullable=False),
    Column("createdAt", Text, nullable=False),
    sqlite_autoincrement=True,
)
