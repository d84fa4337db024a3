"""Mail Publisher Interface (Port)

Emails are rendered and delivered by the worker; producers only enqueue.
"""

from abc import ABC, abstractmethod
from uuid import UUID


class IMailPublisher(ABC):
    @abstractmethod
    async def send_user_registration(self, *, recipient_id: UUID) -> None:
        pass

    @abstractmethod
    async def send_wait_list_confirmation(self, *, event_id: UUID, recipient_id: UUID) -> None:
        pass

    @abstractmethod
    async def send_cabin_booking_receipt(self, *, booking_id: UUID) -> None:
        pass
