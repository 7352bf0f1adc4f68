"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from basis_planner.api.router import api_router
from basis_planner.core.config import Settings, settings
from basis_planner.core.database import create_engine, create_schema, create_sessionmaker
from basis_planner.core.errors import PlannerError
from basis_planner.core.middleware import BodySizeLimitMiddleware, SecurityHeadersMiddleware
from basis_planner.core.rate_limit import create_limiter
from basis_planner.core.seed import seed_defaults
from basis_planner.services.audit import AuditLog

logger = logging.getLogger(__name__)


async def planner_error_handler(request: Request, exc: PlannerError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Ungültige oder fehlende Felder", "details": jsonable_encoder(exc.errors())},
    )


async def overflow_error_handler(request: Request, exc: OverflowError) -> JSONResponse:
    # SQLite integers are 64 bit; larger ids in paths or bodies never match a row
    logger.warning("Integer out of range on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "Zahl außerhalb des gültigen Bereichs"})


def create_app(app_settings: Settings | None = None) -> FastAPI:
    app_settings = app_settings or settings
    logging.basicConfig(
        level=app_settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        engine = create_engine(app_settings.database_url, echo=app_settings.DEBUG)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        await create_schema(engine)
        await seed_defaults(app.state.sessionmaker, app_settings)
        logger.info("%s ready, database %s", app_settings.APP_NAME, app_settings.DATABASE_PATH)
        yield
        # Shutdown
        await engine.dispose()
        logger.info("Database connections closed")

    app = FastAPI(
        title=app_settings.APP_NAME,
        version="0.1.0",
        docs_url=f"{app_settings.API_PREFIX}/docs",
        redoc_url=f"{app_settings.API_PREFIX}/redoc",
        openapi_url=f"{app_settings.API_PREFIX}/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.audit_log = AuditLog(app_settings.AUDIT_LOG_FILE, max_bytes=app_settings.AUDIT_LOG_MAX_BYTES)
    app.state.limiter = create_limiter(app_settings)

    app.add_exception_handler(PlannerError, planner_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(OverflowError, overflow_error_handler)

    app.add_middleware(BodySizeLimitMiddleware, max_bytes=app_settings.MAX_BODY_BYTES)
    app.add_middleware(SecurityHeadersMiddleware, enable_hsts=app_settings.COOKIE_SECURE)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix=app_settings.API_PREFIX)
    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run("basis_planner.main:app", host="0.0.0.0", port=3232)
