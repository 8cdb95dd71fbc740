from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from emulation.config import Settings, settings as default_settings
from emulation.exceptions import EmulationError, Unauthorized
from emulation.logging_config import configure_logging
from emulation.routers.auth.routes import router as auth_router
from emulation.routers.buttons.routes import router as buttons_router
from emulation.routers.imports.routes import router as imports_router
from emulation.routers.pages.routes import router as pages_router
from emulation.routers.public.routes import router as public_router
from emulation.routers.scores.routes import router as scores_router
from emulation.routers.students.routes import router as students_router
from emulation.routers.user.routes import router as user_router
from emulation.routers.weeks.routes import router as weeks_router
from emulation.store import Store, build_store

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    store: Store = app.state.store
    store.initialize()
    try:
        yield
    finally:
        store.close()


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())[1:])
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(Unauthorized)
    async def handle_unauthorized(request: Request, exc: Unauthorized):
        return JSONResponse({"error": exc.message}, status_code=401)

    @app.exception_handler(EmulationError)
    async def handle_domain_error(request: Request, exc: EmulationError):
        # DuplicateKey, NotFound, ValidationError
        log.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
        return JSONResponse({"error": exc.message}, status_code=400)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return JSONResponse({"error": _validation_message(exc)}, status_code=400)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        log.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse({"error": str(exc) or exc.__class__.__name__}, status_code=500)


def create_app(store: Store | None = None, app_settings: Settings | None = None) -> FastAPI:
    cfg = app_settings or default_settings
    configure_logging(cfg.LOG_LEVEL)

    app = FastAPI(title=cfg.APP_NAME, lifespan=lifespan)
    app.state.settings = cfg
    app.state.store = store if store is not None else build_store(cfg)

    app.add_middleware(
        SessionMiddleware,
        secret_key=cfg.SECRET_KEY,
        max_age=cfg.SESSION_MAX_AGE,
        same_site=cfg.SESSION_COOKIE_SAMESITE,
        https_only=cfg.SESSION_COOKIE_SECURE,
    )
    register_exception_handlers(app)

    app.include_router(auth_router)
    app.include_router(students_router)
    app.include_router(buttons_router)
    app.include_router(weeks_router)
    app.include_router(scores_router)
    app.include_router(public_router)
    app.include_router(user_router)
    app.include_router(imports_router)
    app.include_router(pages_router)

    return app
