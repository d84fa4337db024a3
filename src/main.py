"""
Production FastAPI Application

GraphQL and REST API. Background work (emails, wait list promotion, payment polling) runs
in the arq worker, see src/worker.py.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.di import cleanup, container, setup
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.orm_db_setting import dispose_engine, get_engine
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig
from src.platform.state.redis_client import redis_client


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [API] Starting up...')

    tracing = TracingConfig(service_name='membership-api')
    tracing.setup()
    Logger.base.info('📊 [API] OpenTelemetry tracing configured')

    setup()
    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [API] Dependency injection wired')

    tracing.instrument_sqlalchemy(engine=get_engine())
    tracing.instrument_redis()
    Logger.base.info('🗄️  [API] Database engine ready + instrumented')

    # Fail fast when Redis is unreachable, both auth state and the job queue need it
    await redis_client.initialize()
    await container.job_queue().connect()
    Logger.base.info('📡 [API] Redis and job queue connected')

    Logger.base.info('✅ [API] Ready to serve requests')

    yield

    Logger.base.info('🛑 [API] Shutting down...')

    await cleanup()
    await redis_client.disconnect()
    await dispose_engine()
    Logger.base.info('🗄️  [API] Connections closed')

    tracing.shutdown()
    container.unwire()

    Logger.base.info('👋 [API] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
