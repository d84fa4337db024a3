from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.service.event.domain.sign_up_entity import SignUpEntity, SignUpStatus


class ISignUpRepo(ABC):
    @abstractmethod
    async def create_confirmed(self, *, sign_up: SignUpEntity) -> SignUpEntity:
        """
        Insert a CONFIRMED sign up and take one seat from the event and the slot

        Raises:
            NotFoundError: the event or slot had no remaining capacity left
            AlreadySignedUpError: the user already has an active sign up
        """
        pass

    @abstractmethod
    async def create_on_wait_list(self, *, sign_up: SignUpEntity) -> SignUpEntity:
        """
        Raises:
            AlreadySignedUpError: the user already has an active sign up
        """
        pass

    @abstractmethod
    async def get(self, *, user_id: UUID, event_id: UUID) -> Optional[SignUpEntity]:
        """The active sign up, else the most recent inactive one"""
        pass

    @abstractmethod
    async def get_by_id(self, *, sign_up_id: UUID) -> Optional[SignUpEntity]:
        pass

    @abstractmethod
    async def find_many(
        self,
        *,
        event_id: Optional[UUID] = None,
        user_id: Optional[UUID] = None,
        status: Optional[SignUpStatus] = None,
    ) -> list[SignUpEntity]:
        """Ordered by created_at, oldest first"""
        pass

    @abstractmethod
    async def promote(self, *, sign_up: SignUpEntity, slot_id: UUID) -> SignUpEntity:
        """
        Move an ON_WAITLIST sign up into slot_id as CONFIRMED

        Raises:
            NotFoundError: the sign up changed meanwhile, or the event or slot is full
        """
        pass

    @abstractmethod
    async def deactivate(
        self, *, sign_up: SignUpEntity, new_status: SignUpStatus
    ) -> SignUpEntity:
        """
        Make an active sign up RETRACTED or REMOVED

        Older inactive sign ups of the same user and event are deleted first.
        A CONFIRMED sign up gives its seat back to the event and the slot.
        """
        pass

    @abstractmethod
    async def add_order(self, *, sign_up_id: UUID, order_id: UUID) -> SignUpEntity:
        pass
