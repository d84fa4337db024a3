from typing import Any

from src.platform.config.di import container
from src.platform.message_queue.job_handler import job_handler
from src.platform.message_queue.job_name import JobName


@job_handler(JobName.POLL_PAYMENT_ATTEMPT)
async def poll_payment_attempt(ctx: dict[str, Any], *, reference: str, poll_no: int) -> bool:
    return await container.payment_use_case().poll_payment_attempt(
        reference=reference, poll_no=poll_no
    )


@job_handler(JobName.CAPTURE_PAYMENT)
async def capture_payment(ctx: dict[str, Any], *, reference: str) -> str:
    _, order = await container.payment_use_case().capture_payment(reference=reference)
    return order.payment_status
