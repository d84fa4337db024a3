from datetime import datetime
from enum import StrEnum
from typing import Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7


class SignUpStatus(StrEnum):
    CONFIRMED = 'CONFIRMED'
    ON_WAITLIST = 'ON_WAITLIST'
    REMOVED = 'REMOVED'
    RETRACTED = 'RETRACTED'


ACTIVE_STATUSES = frozenset({SignUpStatus.CONFIRMED, SignUpStatus.ON_WAITLIST})


class SignUpAvailability(StrEnum):
    UNAVAILABLE = 'UNAVAILABLE'
    DISABLED = 'DISABLED'
    NOT_OPEN = 'NOT_OPEN'
    CLOSED = 'CLOSED'
    WAITLIST_AVAILABLE = 'WAITLIST_AVAILABLE'
    AVAILABLE = 'AVAILABLE'
    CONFIRMED = 'CONFIRMED'
    ON_WAITLIST = 'ON_WAITLIST'


@attrs.define(kw_only=True)
class SignUpEntity:
    user_id: UUID
    event_id: UUID
    participation_status: SignUpStatus
    slot_id: Optional[UUID] = None
    user_provided_information: str = ''
    order_id: Optional[UUID] = None
    id: UUID = attrs.field(factory=uuid7)
    version: int = 0
    created_at: Optional[datetime] = None

    @property
    def active(self) -> bool:
        return self.participation_status in ACTIVE_STATUSES

    @classmethod
    def confirmed(
        cls, *, user_id: UUID, event_id: UUID, slot_id: UUID, user_provided_information: str = ''
    ) -> 'SignUpEntity':
        return cls(
            user_id=user_id,
            event_id=event_id,
            slot_id=slot_id,
            participation_status=SignUpStatus.CONFIRMED,
            user_provided_information=user_provided_information,
        )

    @classmethod
    def on_wait_list(
        cls, *, user_id: UUID, event_id: UUID, user_provided_information: str = ''
    ) -> 'SignUpEntity':
        return cls(
            user_id=user_id,
            event_id=event_id,
            participation_status=SignUpStatus.ON_WAITLIST,
            user_provided_information=user_provided_information,
        )
