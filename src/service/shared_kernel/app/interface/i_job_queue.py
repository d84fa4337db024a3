"""Job Queue Interface (Port)

Background work (emails, waitlist promotion, payment polling) is handed to the
worker process through this port.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class IJobQueue(ABC):
    @abstractmethod
    async def enqueue(
        self,
        job_name: str,
        *,
        job_id: Optional[str] = None,
        defer_by_seconds: Optional[float] = None,
        **job_kwargs: Any,
    ) -> bool:
        """
        Enqueue a job for the worker

        Args:
            job_name: Registered worker function name
            job_id: Optional idempotency key, a job with the same id is not queued twice
            defer_by_seconds: Delay before the job becomes runnable

        Returns:
            False when a job with the same id is already queued
        """
        pass
