from uuid import UUID

from src.platform.logging.loguru_io import Logger
from src.platform.message_queue.job_name import JobName
from src.service.mail.domain.email_entity import EmailRequest
from src.service.shared_kernel.app.interface.i_job_queue import IJobQueue
from src.service.shared_kernel.app.interface.i_mail_publisher import IMailPublisher
from src.service.shared_kernel.domain.enum.email_type import EmailType


class MailPublisherImpl(IMailPublisher):
    """Enqueues send_email jobs; rendering and delivery happen in the worker"""

    def __init__(self, *, job_queue: IJobQueue) -> None:
        self.job_queue = job_queue

    async def send_async(self, email: EmailRequest) -> None:
        await self.job_queue.enqueue(JobName.SEND_EMAIL, **email.to_job_kwargs())
        Logger.base.info(f'✉️ [MAIL] Queued {email.type}')

    @Logger.io
    async def send_user_registration(self, *, recipient_id: UUID) -> None:
        await self.send_async(
            EmailRequest(type=EmailType.USER_REGISTRATION, recipient_id=recipient_id)
        )

    @Logger.io
    async def send_wait_list_confirmation(self, *, event_id: UUID, recipient_id: UUID) -> None:
        await self.send_async(
            EmailRequest(
                type=EmailType.EVENT_WAIT_LIST_CONFIRMATION,
                event_id=event_id,
                recipient_id=recipient_id,
            )
        )

    @Logger.io
    async def send_cabin_booking_receipt(self, *, booking_id: UUID) -> None:
        await self.send_async(
            EmailRequest(type=EmailType.CABIN_BOOKING_RECEIPT, booking_id=booking_id)
        )
