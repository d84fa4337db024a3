from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from src.platform.exception.exceptions import (
    NotFoundError,
    PermissionDeniedError,
    UnauthorizedError,
)
from src.platform.logging.loguru_io import Logger
from src.service.event.app.interface.i_event_repo import IEventRepo
from src.service.event.app.interface.i_sign_up_repo import ISignUpRepo
from src.service.event.domain.sign_up_entity import (
    SignUpAvailability,
    SignUpEntity,
    SignUpStatus,
)
from src.service.shared_kernel.app.interface.i_permission_service import IPermissionService
from src.service.shared_kernel.domain.enum.role import Role
from src.service.user.app.interface.i_user_query_repo import IUserQueryRepo


class SignUpQueryUseCase:
    def __init__(
        self,
        *,
        event_repo: IEventRepo,
        sign_up_repo: ISignUpRepo,
        user_query_repo: IUserQueryRepo,
        permission_service: IPermissionService,
    ) -> None:
        self.event_repo = event_repo
        self.sign_up_repo = sign_up_repo
        self.user_query_repo = user_query_repo
        self.permission_service = permission_service

    @Logger.io
    async def can_sign_up_for_event(self, *, user_id: UUID, event_id: UUID) -> bool:
        event = await self.event_repo.get_by_id(event_id=event_id)
        if event is None or not event.sign_ups_available():
            return False
        if (event.remaining_capacity or 0) <= 0:
            return False

        sign_up = await self.sign_up_repo.get(user_id=user_id, event_id=event_id)
        if sign_up is not None and sign_up.active:
            return False

        user = await self.user_query_repo.get_by_id(user_id=user_id)
        if user is None:
            return False
        slot = await self.event_repo.get_slot_with_remaining_capacity(
            event_id=event_id, grade_year=user.grade_year()
        )
        return slot is not None

    @Logger.io
    async def get_sign_up_availability(
        self, *, user_id: Optional[UUID], event_id: UUID
    ) -> SignUpAvailability:
        event = await self.event_repo.get_by_id(event_id=event_id)
        if event is None:
            return SignUpAvailability.UNAVAILABLE
        if not event.is_sign_up_event:
            return SignUpAvailability.DISABLED
        if user_id is None:
            return SignUpAvailability.UNAVAILABLE
        user = await self.user_query_repo.get_by_id(user_id=user_id)
        if user is None:
            return SignUpAvailability.UNAVAILABLE

        sign_up = await self.sign_up_repo.get(user_id=user_id, event_id=event_id)
        if sign_up is not None:
            if sign_up.participation_status == SignUpStatus.CONFIRMED:
                return SignUpAvailability.CONFIRMED
            if sign_up.participation_status == SignUpStatus.ON_WAITLIST:
                return SignUpAvailability.ON_WAITLIST

        grade_year = user.grade_year()
        slots = await self.event_repo.find_many_slots(event_id=event_id, grade_year=grade_year)
        if not slots:
            return SignUpAvailability.UNAVAILABLE

        now = datetime.now(timezone.utc)
        if event.signups_start_at and event.signups_start_at > now:
            return SignUpAvailability.NOT_OPEN
        if event.signups_end_at and event.signups_end_at < now:
            return SignUpAvailability.CLOSED
        if not event.remaining_capacity:
            return SignUpAvailability.WAITLIST_AVAILABLE

        slot = await self.event_repo.get_slot_with_remaining_capacity(
            event_id=event_id, grade_year=grade_year
        )
        if slot is None:
            return SignUpAvailability.WAITLIST_AVAILABLE
        return SignUpAvailability.AVAILABLE

    @Logger.io
    async def find_many_sign_ups(
        self,
        *,
        user_id: Optional[UUID],
        event_id: UUID,
        status: Optional[SignUpStatus] = None,
    ) -> list[SignUpEntity]:
        if user_id is None:
            raise UnauthorizedError('You must be logged in to view sign ups')
        event = await self.event_repo.get_by_id(event_id=event_id)
        if event is None:
            raise NotFoundError(f'Event {event_id} not found')
        if event.organization_id is None:
            raise PermissionDeniedError('You do not have permission to view these sign ups')
        is_member = await self.permission_service.has_role(
            user_id=user_id, organization_id=event.organization_id, role=Role.MEMBER
        )
        if not is_member:
            raise PermissionDeniedError('You do not have permission to view these sign ups')
        return await self.sign_up_repo.find_many(event_id=event_id, status=status)

    @Logger.io
    async def get_sign_up(self, *, user_id: UUID, event_id: UUID) -> Optional[SignUpEntity]:
        return await self.sign_up_repo.get(user_id=user_id, event_id=event_id)

    @Logger.io
    async def find_many_for_user(
        self, *, user_id: UUID, status: Optional[SignUpStatus] = None
    ) -> list[SignUpEntity]:
        return await self.sign_up_repo.find_many(user_id=user_id, status=status)
