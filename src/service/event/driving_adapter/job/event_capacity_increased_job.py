from typing import Any
from uuid import UUID

from src.platform.config.di import container
from src.platform.message_queue.job_handler import job_handler
from src.platform.message_queue.job_name import JobName


@job_handler(JobName.EVENT_CAPACITY_INCREASED)
async def event_capacity_increased(ctx: dict[str, Any], *, event_id: str) -> int:
    """Fill freed seats from the wait list; returns the number of promoted sign ups"""
    promoted = await container.wait_list_use_case().handle_capacity_increased(
        event_id=UUID(event_id)
    )
    return len(promoted)
