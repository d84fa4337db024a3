"""
Event sign ups

Capacity is guarded with optimistic concurrency: every attempt reloads the event,
picks a slot and lets the repository take the seat with a conditional update.
When a concurrent sign up takes the last seat first, the repository raises
NotFoundError and the attempt is retried.
"""

from typing import Optional
from uuid import UUID

from opentelemetry import trace

from src.platform.exception.exceptions import (
    InternalServerError,
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
    UnauthorizedError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.message_queue.job_name import JobName
from src.platform.metrics.membership_metrics import metrics
from src.service.event.app.interface.i_event_repo import IEventRepo
from src.service.event.app.interface.i_sign_up_repo import ISignUpRepo
from src.service.event.domain.event_entity import EventEntity, EventType
from src.service.event.domain.sign_up_entity import SignUpEntity, SignUpStatus
from src.service.product.app.command.order_use_case import OrderUseCase
from src.service.shared_kernel.app.interface.i_job_queue import IJobQueue
from src.service.shared_kernel.app.interface.i_permission_service import IPermissionService
from src.service.shared_kernel.domain.enum.feature_permission import FeaturePermission
from src.service.shared_kernel.domain.enum.role import Role
from src.service.user.app.interface.i_user_query_repo import IUserQueryRepo


MAX_SIGN_UP_ATTEMPTS = 20


class SignUpUseCase:
    def __init__(
        self,
        *,
        event_repo: IEventRepo,
        sign_up_repo: ISignUpRepo,
        user_query_repo: IUserQueryRepo,
        permission_service: IPermissionService,
        order_use_case: OrderUseCase,
        job_queue: IJobQueue,
    ) -> None:
        self.event_repo = event_repo
        self.sign_up_repo = sign_up_repo
        self.user_query_repo = user_query_repo
        self.permission_service = permission_service
        self.order_use_case = order_use_case
        self.job_queue = job_queue
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def sign_up(
        self,
        *,
        user_id: Optional[UUID],
        event_id: UUID,
        user_provided_information: str = '',
    ) -> SignUpEntity:
        """
        Sign up for an event, landing on the wait list when the event or every
        slot open to the user's grade year is full

        Raises:
            UnauthorizedError: not logged in
            InvalidArgumentError: sign ups are not open
            AlreadySignedUpError: the user already has an active sign up
            InternalServerError: gave up after MAX_SIGN_UP_ATTEMPTS conflicts
        """
        if user_id is None:
            raise UnauthorizedError('You must be logged in to sign up for an event')
        user = await self.user_query_repo.get_by_id(user_id=user_id)
        if user is None:
            raise NotFoundError('User not found')
        grade_year = user.grade_year()

        with self.tracer.start_as_current_span(
            'use_case.sign_up', attributes={'event.id': str(event_id)}
        ):
            for attempt in range(MAX_SIGN_UP_ATTEMPTS):
                Logger.base.info(
                    f'📝 [SIGN_UP] user={user_id} event={event_id} attempt={attempt}'
                )
                event = await self._get_event(event_id)
                if not event.sign_ups_available():
                    raise InvalidArgumentError('Cannot sign up for the event.')

                if (event.remaining_capacity or 0) <= 0:
                    return await self._join_wait_list(user_id, event_id, user_provided_information)

                slot = await self.event_repo.get_slot_with_remaining_capacity(
                    event_id=event_id, grade_year=grade_year
                )
                if slot is None:
                    return await self._join_wait_list(user_id, event_id, user_provided_information)

                try:
                    sign_up = await self.sign_up_repo.create_confirmed(
                        sign_up=SignUpEntity.confirmed(
                            user_id=user_id,
                            event_id=event_id,
                            slot_id=slot.id,
                            user_provided_information=user_provided_information,
                        )
                    )
                except NotFoundError:
                    # Someone else took the seat
                    continue

                Logger.base.info(f'📝 [SIGN_UP] Confirmed {sign_up.id} on attempt {attempt}')
                metrics.record_sign_up(status=sign_up.participation_status, attempts=attempt + 1)
                if event.type == EventType.TICKETS:
                    sign_up = await self._attach_order(event, sign_up)
                return sign_up

        Logger.base.error(
            f'📝 [SIGN_UP] Failed to sign up user after {MAX_SIGN_UP_ATTEMPTS} attempts'
        )
        raise InternalServerError(f'Failed to sign up user after {MAX_SIGN_UP_ATTEMPTS} attempts')

    @Logger.io
    async def retract_sign_up(self, *, user_id: Optional[UUID], event_id: UUID) -> SignUpEntity:
        if user_id is None:
            raise UnauthorizedError('You must be logged in to retract a sign up')
        sign_up = await self.sign_up_repo.get(user_id=user_id, event_id=event_id)
        if sign_up is None:
            raise NotFoundError('Sign up not found')
        if not sign_up.active:
            return sign_up
        return await self._deactivate(sign_up, SignUpStatus.RETRACTED)

    @Logger.io
    async def remove_sign_up(self, *, user_id: Optional[UUID], sign_up_id: UUID) -> SignUpEntity:
        if user_id is None:
            raise UnauthorizedError('You must be logged in to remove a sign up')
        sign_up = await self.sign_up_repo.get_by_id(sign_up_id=sign_up_id)
        if sign_up is None:
            raise NotFoundError('Sign up not found')
        event = await self._get_event(sign_up.event_id)
        if event.organization_id is None:
            raise PermissionDeniedError('You do not have permission to remove this sign up')

        may_remove = await self.permission_service.has_role(
            user_id=user_id,
            organization_id=event.organization_id,
            role=Role.MEMBER,
            feature_permission=FeaturePermission.EVENT_WRITE_SIGN_UPS,
        )
        if not may_remove:
            raise PermissionDeniedError('You do not have permission to remove this sign up')
        if not sign_up.active:
            raise InvalidArgumentError('Can only remove active sign ups')
        return await self._deactivate(sign_up, SignUpStatus.REMOVED)

    async def _deactivate(self, sign_up: SignUpEntity, new_status: SignUpStatus) -> SignUpEntity:
        was_confirmed = sign_up.participation_status == SignUpStatus.CONFIRMED
        if was_confirmed and sign_up.slot_id is None:
            raise InternalServerError('Sign up is missing slot ID, but has status CONFIRMED')

        updated = await self.sign_up_repo.deactivate(sign_up=sign_up, new_status=new_status)
        metrics.record_sign_up(status=new_status)
        if was_confirmed:
            await self.job_queue.enqueue(
                JobName.EVENT_CAPACITY_INCREASED, event_id=str(sign_up.event_id)
            )
        return updated

    async def _join_wait_list(
        self, user_id: UUID, event_id: UUID, user_provided_information: str
    ) -> SignUpEntity:
        Logger.base.info(f'📝 [SIGN_UP] Event {event_id} is full, adding user to wait list')
        sign_up = await self.sign_up_repo.create_on_wait_list(
            sign_up=SignUpEntity.on_wait_list(
                user_id=user_id,
                event_id=event_id,
                user_provided_information=user_provided_information,
            )
        )
        metrics.record_sign_up(status=sign_up.participation_status)
        return sign_up

    async def _attach_order(self, event: EventEntity, sign_up: SignUpEntity) -> SignUpEntity:
        if event.product_id is None:
            raise InternalServerError('TICKETS event is missing its product')
        order = await self.order_use_case.create_order(
            user_id=sign_up.user_id, product_id=event.product_id
        )
        return await self.sign_up_repo.add_order(sign_up_id=sign_up.id, order_id=order.id)

    async def _get_event(self, event_id: UUID) -> EventEntity:
        event = await self.event_repo.get_by_id(event_id=event_id)
        if event is None:
            raise NotFoundError(f'Event {event_id} not found')
        return event
