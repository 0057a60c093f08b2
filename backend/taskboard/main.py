import logging
import threading
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from taskboard.core.config import (
    API_PREFIX,
    CORS_ORIGINS,
    CORS_ORIGIN_REGEX,
    DB_BOOTSTRAP_MODE,
    DB_POOL_PREWARM,
    MAX_REQUEST_BYTES,
    parse_cors_origins,
)
from taskboard.core.errors import ConnectivityError, ConstraintViolationError
from taskboard.database.base import Base
from taskboard.database.pool import ConnectionPool
from taskboard.resources import RESOURCES
from taskboard.routes.crud import build_crud_router

logger = logging.getLogger("uvicorn.error")


def run_db_bootstrap(pool: ConnectionPool) -> None:
    try:
        Base.metadata.create_all(bind=pool.engine)
    except Exception:  # pragma: no cover - startup hardening
        logger.exception("Falha ao executar bootstrap do banco")


def trigger_db_bootstrap(pool: ConnectionPool, mode: str) -> None:
    if mode == "off":
        logger.info("DB bootstrap desativado (DB_BOOTSTRAP_MODE=off).")
        return
    if mode == "sync":
        logger.info("Executando DB bootstrap em modo sincronizado.")
        run_db_bootstrap(pool)
        return

    logger.info("Executando DB bootstrap em background.")
    threading.Thread(target=run_db_bootstrap, args=(pool,), daemon=True, name="db-bootstrap").start()


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(ConstraintViolationError)
    async def constraint_exception_handler(request: Request, exc: ConstraintViolationError):
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": exc.message})

    @app.exception_handler(ConnectivityError)
    async def connectivity_exception_handler(request: Request, exc: ConnectivityError):
        logger.warning("Banco indisponivel em %s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": exc.message},
            headers={"Retry-After": "1"},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception("Erro inesperado em %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Erro interno do servidor"},
        )


def create_app(pool: Optional[ConnectionPool] = None) -> FastAPI:
    if pool is None:
        pool = ConnectionPool.from_config()

    app = FastAPI(title="Taskboard")
    app.state.pool = pool

    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_cors_origins(CORS_ORIGINS),
        allow_origin_regex=CORS_ORIGIN_REGEX,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"]
    )

    @app.middleware("http")
    async def limit_request_size(request: Request, call_next):
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > MAX_REQUEST_BYTES:
            return JSONResponse(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                content={"detail": "Corpo da requisição excede o limite permitido"},
            )
        return await call_next(request)

    @app.middleware("http")
    async def ensure_utf8_json_charset(request: Request, call_next):
        response = await call_next(request)
        content_type = str(response.headers.get("content-type", ""))
        if content_type.startswith("application/json") and "charset=" not in content_type.lower():
            response.headers["content-type"] = "application/json; charset=utf-8"
        return response

    register_error_handlers(app)

    for resource in RESOURCES:
        app.include_router(build_crud_router(resource), prefix=API_PREFIX)

    @app.get("/")
    def root():
        return {"message": "API rodando corretamente!"}

    @app.get("/health")
    def healthcheck():
        return {"status": "ok"}

    @app.get("/health/db")
    def healthcheck_db():
        with pool.lease() as connection:
            connection.execute(text("SELECT 1"))
        return {"status": "ok", "pool": pool.status()}

    @app.on_event("startup")
    def startup_event():
        if DB_POOL_PREWARM:
            pool.open(prewarm=True)
        trigger_db_bootstrap(pool, DB_BOOTSTRAP_MODE)

    @app.on_event("shutdown")
    def shutdown_event():
        pool.dispose()

    return app


app = create_app()
