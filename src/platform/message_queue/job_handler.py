"""
Shared error policy for arq job functions.

DownstreamServiceError is transient: the job is retried after RETRY_DELAY_SECONDS.
Domain errors (not found, invalid state, internal invariants) will not heal on
retry, so the job is logged and dropped.
"""

import functools
import time
from typing import Any, Awaitable, Callable, Optional

from arq import Retry
from opentelemetry import trace

from src.platform.exception.exceptions import (
    DownstreamServiceError,
    InternalServerError,
    InvalidArgumentError,
    NotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.membership_metrics import metrics
from src.platform.observability.tracing import extract_trace_context


RETRY_DELAY_SECONDS = 60
GIVE_UP_ERRORS = (NotFoundError, InvalidArgumentError, InternalServerError)

JobFunction = Callable[..., Awaitable[Any]]


def job_handler(job_name: str) -> Callable[[JobFunction], JobFunction]:
    def decorator(func: JobFunction) -> JobFunction:
        tracer = trace.get_tracer(func.__module__)

        @functools.wraps(func)
        async def wrapper(
            ctx: dict[str, Any],
            *args: Any,
            trace_context: Optional[dict[str, str]] = None,
            **kwargs: Any,
        ) -> Any:
            extract_trace_context(carrier=trace_context)
            start = time.perf_counter()
            error_type: Optional[str] = None
            try:
                with tracer.start_as_current_span(f'job.{job_name}'):
                    return await func(ctx, *args, **kwargs)
            except DownstreamServiceError as e:
                error_type = type(e).__name__
                Logger.base.warning(
                    f'⚙️ [JOB] {job_name} try {ctx.get("job_try")} failed downstream, '
                    f'retrying in {RETRY_DELAY_SECONDS}s: {e.message}'
                )
                raise Retry(defer=RETRY_DELAY_SECONDS) from e
            except GIVE_UP_ERRORS as e:
                error_type = type(e).__name__
                Logger.base.error(f'⚙️ [JOB] {job_name} gave up: {e.message}')
                return None
            except Exception as e:
                error_type = type(e).__name__
                raise
            finally:
                metrics.record_job(
                    job=job_name, duration=time.perf_counter() - start, error_type=error_type
                )

        wrapper.__name__ = job_name
        wrapper.__qualname__ = job_name
        return wrapper

    return decorator
