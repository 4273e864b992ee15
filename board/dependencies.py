import re

from fastapi import Query

from board.config import settings

_LEADING_INT_RE = re.compile(r"^\s*([+-]?)0*(\d+)", re.ASCII)

# Largest value SQLite can bind as INTEGER.
SQLITE_MAX_INTEGER = 2**63 - 1
_MAX_DIGITS = len(str(SQLITE_MAX_INTEGER))


def _bounded_int(sign: str, digits: str) -> int:
    # Longer digit strings saturate instead of reaching int().
    value = int(digits) if len(digits) <= _MAX_DIGITS else SQLITE_MAX_INTEGER + 1
    return -value if sign == "-" else value


def parse_int(value: str | None, default: int) -> int:
    """
    Parse the leading integer of *value*, e.g. ``"12abc"`` -> 12.

    Missing, unparsable and zero values all fall back to *default*.
    Values too long for SQLite saturate just past ``SQLITE_MAX_INTEGER``.
    """
    if not value:
        return default
    match = _LEADING_INT_RE.match(value)
    if match is None:
        return default
    return _bounded_int(match.group(1), match.group(2)) or default


def parse_post_id(raw: str) -> int | None:
    """
    Return *raw* as a positive post id, or None when it is not one.

    ASCII digits only.  Ids past ``SQLITE_MAX_INTEGER`` are returned as
    ``SQLITE_MAX_INTEGER + 1``; no stored post can have them.
    """
    if not (raw.isascii() and raw.isdigit()):
        return None
    post_id = _bounded_int("", raw.lstrip("0") or "0")
    return post_id if post_id > 0 else None


class PaginationParams:
    """
    Reusable FastAPI dependency that parses and clamps the list page's
    query parameters.

    Usage in a router::

        @router.get("/board/list")
        async def board_list(pagination: PaginationParams = Depends()):
            ...

    Bad values never produce a 422; they are clamped instead.

    Attributes
    ----------
    page:
        1-based page number (minimum 1).
    page_size:
        Number of posts per page, clamped to ``1..settings.MAX_PAGE_SIZE``.
    offset:
        Computed SQL OFFSET derived from *page* and *page_size*.
    """

    def __init__(
        self,
        page: str | None = Query(
            None,
            description="Page number (1-based).",
        ),
        page_size: str | None = Query(
            None,
            alias="pageSize",
            description="Number of posts per page.",
        ),
    ) -> None:
        self.page_size = min(
            max(parse_int(page_size, settings.DEFAULT_PAGE_SIZE), 1),
            settings.MAX_PAGE_SIZE,
        )
        # Keep the OFFSET bindable; pages that far out are simply empty.
        self.page = min(
            max(parse_int(page, 1), 1),
            SQLITE_MAX_INTEGER // self.page_size + 1,
        )

    @property
    def offset(self) -> int:
        """SQL OFFSET value computed from the current page and page size."""
        return (self.page - 1) * self.page_size
