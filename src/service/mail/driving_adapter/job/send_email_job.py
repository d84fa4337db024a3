from typing import Any, Optional

from src.platform.config.di import container
from src.platform.message_queue.job_handler import job_handler
from src.platform.message_queue.job_name import JobName
from src.service.mail.domain.email_entity import EmailRequest


@job_handler(JobName.SEND_EMAIL)
async def send_email(ctx: dict[str, Any], **email_kwargs: Optional[str]) -> str:
    email = EmailRequest.from_job_kwargs(**email_kwargs)
    content = await container.send_email_use_case().send(email=email)
    return content.template_alias
