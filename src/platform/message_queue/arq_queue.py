"""
arq job queue adapter.

Producers (GraphQL/REST use cases) enqueue jobs through ``ArqJobQueue``; the
worker process defined in ``src.worker`` executes them. Job ids make enqueueing
idempotent: arq refuses a second job with an id that is still queued.
"""

from typing import Any, Optional

from arq.connections import ArqRedis, RedisSettings, create_pool

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import inject_trace_context
from src.service.shared_kernel.app.interface.i_job_queue import IJobQueue


def build_redis_settings() -> RedisSettings:
    return RedisSettings(
        host=settings.REDIS_HOST,
        port=settings.REDIS_PORT,
        database=settings.REDIS_DB,
        password=settings.REDIS_PASSWORD or None,
        conn_timeout=settings.REDIS_POOL_SOCKET_CONNECT_TIMEOUT,
    )


class ArqJobQueue(IJobQueue):
    def __init__(self, redis_settings: Optional[RedisSettings] = None) -> None:
        self.redis_settings = redis_settings or build_redis_settings()
        self._pool: Optional[ArqRedis] = None

    async def connect(self) -> None:
        if self._pool is None:
            self._pool = await create_pool(self.redis_settings)
            Logger.base.info('📬 [QUEUE] Connected to arq redis')

    async def close(self) -> None:
        if self._pool:
            await self._pool.aclose()
            self._pool = None

    async def _ensure_connected(self) -> ArqRedis:
        if self._pool is None:
            await self.connect()
        return self._pool  # type: ignore

    @Logger.io
    async def enqueue(
        self,
        job_name: str,
        *,
        job_id: Optional[str] = None,
        defer_by_seconds: Optional[float] = None,
        **job_kwargs: Any,
    ) -> bool:
        pool = await self._ensure_connected()
        job = await pool.enqueue_job(
            job_name,
            _job_id=job_id,
            _defer_by=defer_by_seconds,
            trace_context=inject_trace_context(),
            **job_kwargs,
        )
        if job is None:
            Logger.base.info(f'📬 [QUEUE] {job_name} already queued (job_id={job_id})')
            return False
        Logger.base.info(f'📬 [QUEUE] Enqueued {job_name} job_id={job.job_id}')
        return True
