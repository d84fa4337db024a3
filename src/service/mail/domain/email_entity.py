from typing import Any, Optional
from uuid import UUID

import attrs

from src.service.shared_kernel.domain.enum.email_type import EmailType


# Postmark template aliases per email type
TEMPLATE_ALIASES = {
    EmailType.USER_REGISTRATION: 'user-registration',
    EmailType.EVENT_WAIT_LIST_CONFIRMATION: 'event-wait-list',
    EmailType.CABIN_BOOKING_RECEIPT: 'cabin-booking-receipt',
}


@attrs.define(kw_only=True, frozen=True)
class EmailRequest:
    """What a producer asks the worker to send; serialized into the job kwargs"""

    type: EmailType
    recipient_id: Optional[UUID] = None
    event_id: Optional[UUID] = None
    booking_id: Optional[UUID] = None

    def to_job_kwargs(self) -> dict[str, Optional[str]]:
        return {
            'type': self.type.value,
            'recipient_id': str(self.recipient_id) if self.recipient_id else None,
            'event_id': str(self.event_id) if self.event_id else None,
            'booking_id': str(self.booking_id) if self.booking_id else None,
        }

    @classmethod
    def from_job_kwargs(cls, **kwargs: Optional[str]) -> 'EmailRequest':
        def _uuid(key: str) -> Optional[UUID]:
            value = kwargs.get(key)
            return UUID(value) if value else None

        return cls(
            type=EmailType(kwargs['type']),
            recipient_id=_uuid('recipient_id'),
            event_id=_uuid('event_id'),
            booking_id=_uuid('booking_id'),
        )


@attrs.define(kw_only=True, frozen=True)
class EmailContent:
    to: str
    template_alias: str
    template_model: dict[str, Any]
