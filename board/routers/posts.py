import logging
from pathlib import Path

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from board.database import StorageGateway, get_db
from board.dependencies import SQLITE_MAX_INTEGER, PaginationParams, parse_post_id
from board.exceptions import StorageQueryError
from board.repositories import post_repository
from board.schemas import Post, PostPage, validate_post_input

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/board", tags=["board"])

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))

SERVER_ERROR_MESSAGE = "A server error occurred. Please try again."


def _empty_form() -> dict[str, str]:
    return {"title": "", "content": "", "author": ""}


def _render_missing(request: Request, status_code: int) -> HTMLResponse:
    return templates.TemplateResponse(
        request, "board-detail.html", {"post": None}, status_code=status_code
    )


async def _find_post(db: StorageGateway, post_id: int) -> Post | None:
    # No stored post can have an id SQLite cannot bind.
    if post_id > SQLITE_MAX_INTEGER:
        return None
    return await post_repository.get_post_by_id(db, post_id)


@router.get("/list", response_class=HTMLResponse)
async def board_list(
    request: Request,
    pagination: PaginationParams = Depends(),
    db: StorageGateway = Depends(get_db),
):
    total = await post_repository.count_posts(db)
    posts = await post_repository.list_posts(db, pagination.page_size, pagination.offset)
    page = PostPage(items=posts, total=total, page=pagination.page, page_size=pagination.page_size)
    return templates.TemplateResponse(request, "board-list.html", {"page": page})


@router.get("/list/{post_id}", response_class=HTMLResponse)
async def board_detail(request: Request, post_id: str, db: StorageGateway = Depends(get_db)):
    parsed_id = parse_post_id(post_id)
    if parsed_id is None:
        return _render_missing(request, 400)
    post = await _find_post(db, parsed_id)
    if post is None:
        return _render_missing(request, 404)
    return templates.TemplateResponse(request, "board-detail.html", {"post": post})


@router.get("/new", response_class=HTMLResponse)
async def board_new(request: Request):
    return templates.TemplateResponse(
        request,
        "board-form.html",
        {"mode": "create", "post": _empty_form(), "errors": {}},
    )


@router.post("", response_class=HTMLResponse)
async def board_create(
    request: Request,
    title: str = Form(""),
    content: str = Form(""),
    author: str = Form(""),
    db: StorageGateway = Depends(get_db),
):
    data, errors, values = validate_post_input(title, content, author)
    if data is None:
        return templates.TemplateResponse(
            request,
            "board-form.html",
            {"mode": "create", "post": values, "errors": errors},
            status_code=400,
        )
    try:
        post_id = await post_repository.create_post(db, data)
    except StorageQueryError:
        # Re-render so the user keeps what they wrote.
        logger.exception("Error creating post")
        return templates.TemplateResponse(
            request,
            "board-form.html",
            {"mode": "create", "post": values, "errors": {"_global": SERVER_ERROR_MESSAGE}},
            status_code=500,
        )
    return RedirectResponse(f"/board/list/{post_id}", status_code=303)


@router.get("/list/{post_id}/edit", response_class=HTMLResponse)
async def board_edit_form(request: Request, post_id: str, db: StorageGateway = Depends(get_db)):
    parsed_id = parse_post_id(post_id)
    if parsed_id is None:
        return _render_missing(request, 400)
    try:
        post = await _find_post(db, parsed_id)
    except StorageQueryError:
        logger.exception("Error rendering edit form for post id=%s", post_id)
        return _render_missing(request, 500)
    if post is None:
        return _render_missing(request, 404)
    return templates.TemplateResponse(
        request,
        "board-form.html",
        {"mode": "edit", "post_id": post.id, "post": post.model_dump(), "errors": {}},
    )


@router.post("/list/{post_id}/edit", response_class=HTMLResponse)
async def board_edit(
    request: Request,
    post_id: str,
    title: str = Form(""),
    content: str = Form(""),
    author: str = Form(""),
    db: StorageGateway = Depends(get_db),
):
    parsed_id = parse_post_id(post_id)
    if parsed_id is None:
        return _render_missing(request, 400)
    try:
        # update_post does not check existence, so check here first.
        existing = await _find_post(db, parsed_id)
        if existing is None:
            return _render_missing(request, 404)

        data, errors, values = validate_post_input(title, content, author)
        if data is None:
            return templates.TemplateResponse(
                request,
                "board-form.html",
                {"mode": "edit", "post_id": existing.id, "post": values, "errors": errors},
                status_code=400,
            )
        await post_repository.update_post(db, parsed_id, data)
    except StorageQueryError:
        logger.exception("Error updating post id=%s", post_id)
        return _render_missing(request, 500)
    return RedirectResponse(f"/board/list/{parsed_id}", status_code=303)
