# gameforge/main.py — application factory, middleware, error mapping

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from .auth import dev_router, router as auth_router
from .chat import router as chat_router
from .config import Settings
from .errors import StorageError
from .library import router as library_router
from .projects import router as projects_router
from .storage import Storage, build_storage
from .store import router as store_router

log = logging.getLogger(__name__)

_LOCATIONS = ("body", "query", "path", "header", "cookie")


def _field_errors(exc: RequestValidationError) -> list[dict]:
    errors = []
    for err in exc.errors():
        loc = list(err.get("loc", ()))
        if loc and loc[0] in _LOCATIONS:
            loc = loc[1:]
        field = ".".join(str(part) for part in loc) or "body"
        errors.append({"field": field, "message": err.get("msg", "Invalid value")})
    return errors


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_failed(request: Request, exc: RequestValidationError):
        errors = _field_errors(exc)
        summary = ", ".join(f"{e['field']}: {e['message']}" for e in errors)
        return JSONResponse(
            status_code=400,
            content={"message": f"Validation failed: {summary}", "errors": errors},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(StorageError)
    async def storage_error(request: Request, exc: StorageError):
        log.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"message": "Storage temporarily unavailable"})

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        log.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})


def create_app(settings: Settings | None = None, storage: Storage | None = None) -> FastAPI:
    """Build the app. Without an injected ``storage`` one is built from ``settings`` at startup."""
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_storage = storage is None
        if owns_storage:
            app.state.storage = build_storage(settings)
        logging.getLogger("uvicorn").info(
            "Storage backend: %s (env=%s)", type(app.state.storage).__name__, settings.app_env
        )
        try:
            yield
        finally:
            if owns_storage:
                app.state.storage.close()

    app = FastAPI(title="GameForge Studio", lifespan=lifespan)
    app.state.settings = settings
    if storage is not None:
        app.state.storage = storage

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.secret_key,
        session_cookie=settings.session_cookie,
        https_only=settings.is_production,
    )
    install_error_handlers(app)

    # ---- Routers
    app.include_router(auth_router)
    if not settings.is_production:
        app.include_router(dev_router)  # /api/auth/dev-login
    app.include_router(projects_router)
    app.include_router(store_router)
    app.include_router(library_router)
    app.include_router(chat_router)

    @app.get("/health")
    def health():
        return {"ok": True}

    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run("gameforge.main:app", host="0.0.0.0", port=int(os.getenv("PORT", "5000")))


if __name__ == "__main__":
    run()
