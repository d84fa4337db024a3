"""
arq worker

Runs the background jobs: email delivery, wait list promotion and the Vipps
payment pipeline.

    arq src.worker.WorkerSettings
"""

from typing import Any

from src.platform.config.di import cleanup, container, setup
from src.platform.database.orm_db_setting import dispose_engine, get_engine
from src.platform.logging.loguru_io import Logger
from src.platform.message_queue.arq_queue import build_redis_settings
from src.platform.observability.tracing import TracingConfig
from src.service.event.driving_adapter.job.event_capacity_increased_job import (
    event_capacity_increased,
)
from src.service.mail.driving_adapter.job.send_email_job import send_email
from src.service.product.driving_adapter.job.payment_job import (
    capture_payment,
    poll_payment_attempt,
)


async def on_startup(ctx: dict[str, Any]) -> None:
    Logger.base.info('⚙️ [Worker] Starting up...')
    tracing = TracingConfig(service_name='membership-worker')
    tracing.setup()
    tracing.instrument_sqlalchemy(engine=get_engine())
    ctx['tracing'] = tracing

    setup()
    await container.job_queue().connect()
    Logger.base.info('⚙️ [Worker] Ready')


async def on_shutdown(ctx: dict[str, Any]) -> None:
    Logger.base.info('⚙️ [Worker] Shutting down...')
    await cleanup()
    await dispose_engine()
    tracing: TracingConfig | None = ctx.get('tracing')
    if tracing:
        tracing.shutdown()


class WorkerSettings:
    functions = [send_email, event_capacity_increased, poll_payment_attempt, capture_payment]
    redis_settings = build_redis_settings()
    on_startup = on_startup
    on_shutdown = on_shutdown
    max_tries = 5
    job_timeout = 60
