"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from config.settings import settings
from src.sim_common.database import create_engine, create_session_factory, create_tables
from src.sim_common.datetime_utils import to_iso
from src.sim_common.errors import AppError, InvalidRequestError, StorageError
from src.sim_common.response import error_response
from src.sim_gateway.middleware.request_log import RequestLogMiddleware
from src.sim_report.api.router import router as report_router
from src.sim_stock.api.router import router as stock_router
from src.sim_stock.application.price_ticker import PriceTicker
from src.sim_trading.api.router import router as trading_router
from src.sim_user.api.router import router as user_router

VERSION = "0.1.0"

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("sim.app")


def _error_json(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(status_code=exc.http_status, content=resp.model_dump())


def _describe_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc or 'body'}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


def create_app(
    engine: AsyncEngine | None = None,
    start_price_ticker: bool | None = None,
) -> FastAPI:
    """Build the application around ``engine`` (a new one from settings if omitted)."""
    engine = engine or create_engine()
    session_factory = create_session_factory(engine)
    ticker = PriceTicker(session_factory, interval_seconds=settings.PRICE_TICK_SECONDS)
    run_ticker = settings.PRICE_TICK_ENABLED if start_price_ticker is None else start_price_ticker

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Startup: verify DB, create tables, start ticker. Shutdown: stop, dispose."""
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        if settings.AUTO_CREATE_TABLES:
            await create_tables(engine)
        if run_ticker:
            await ticker.start()
        logger.info("%s %s started on %s", settings.APP_NAME, VERSION, engine.dialect.name)
        yield
        await ticker.stop()
        await engine.dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        version=VERSION,
        lifespan=lifespan,
    )
    # Set here as well as in lifespan: test transports skip lifespan events
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.price_ticker = ticker

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLogMiddleware)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        if exc.http_status < 500:
            logger.info("%s %s rejected: %d %s", request.method, request.url.path, exc.code, exc.message)
        return _error_json(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        err = InvalidRequestError(_describe_validation_errors(exc))
        logger.info("%s %s rejected: %d %s", request.method, request.url.path, err.code, err.message)
        return _error_json(request, err)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error_json(request, StorageError())

    app.include_router(stock_router, prefix=settings.API_PREFIX)
    app.include_router(user_router, prefix=settings.API_PREFIX)
    app.include_router(trading_router, prefix=settings.API_PREFIX)
    app.include_router(report_router, prefix=settings.API_PREFIX)

    @app.get("/health")
    async def health() -> dict[str, str | None]:
        return {
            "status": "ok",
            "version": VERSION,
            "last_price_tick": to_iso(ticker.last_tick_at),
        }

    return app


app = create_app()
