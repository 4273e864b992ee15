import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from board import __version__
from board.config import Settings, settings
from board.database import StorageGateway, get_db
from board.exceptions import StorageQueryError
from board.middleware import RequestStatsMiddleware
from board.routers import posts

logger = logging.getLogger(__name__)


def create_app(app_settings: Settings = settings) -> FastAPI:
    """Build the application; the gateway is opened and closed by the lifespan."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup: a StorageInitError propagates and aborts the server.
        db = StorageGateway(
            app_settings.DATABASE_URL,
            echo=app_settings.DEBUG,
            seed_on_empty=app_settings.SEED_ON_EMPTY,
        )
        await db.initialize()
        app.state.db = db
        logger.info("Database ready: %s", app_settings.DATABASE_URL)
        yield
        # Shutdown
        await db.shutdown()
        logger.info("Database connection closed")

    app = FastAPI(
        title="Bulletin Board",
        description="List, view, create and edit text posts",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(RequestStatsMiddleware)

    @app.exception_handler(StorageQueryError)
    async def storage_error_handler(request: Request, exc: StorageQueryError):
        logger.error(
            "Storage failure while handling %s %s", request.method, request.url.path, exc_info=exc
        )
        return JSONResponse(status_code=500, content={"error": "Internal Server Error"})

    @app.exception_handler(404)
    async def not_found_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=404, content={"error": "Not Found"})

    app.include_router(posts.router)

    @app.get("/", include_in_schema=False)
    async def root():
        return RedirectResponse("/board/list", status_code=303)

    @app.get("/health")
    async def health(db: StorageGateway = Depends(get_db)):
        try:
            row = await db.query_one("SELECT 1 AS ok")
        except StorageQueryError as exc:
            return JSONResponse(
                status_code=500,
                content={"status": "error", "db": "error", "message": str(exc)},
            )
        return {
            "status": "ok",
            "db": "ok" if row and row["ok"] == 1 else "unknown",
            "version": __version__,
        }

    return app


app = create_app()
