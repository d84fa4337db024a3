from typing import Optional
from uuid import UUID

from src.platform.exception.exceptions import InvalidArgumentError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.membership_metrics import metrics
from src.service.event.app.interface.i_event_repo import IEventRepo
from src.service.event.app.interface.i_sign_up_repo import ISignUpRepo
from src.service.event.domain.event_entity import EventType
from src.service.event.domain.sign_up_entity import SignUpEntity, SignUpStatus
from src.service.product.app.command.order_use_case import OrderUseCase
from src.service.shared_kernel.app.interface.i_mail_publisher import IMailPublisher
from src.service.user.app.interface.i_user_query_repo import IUserQueryRepo


class WaitListUseCase:
    """
    Wait list promotion

    Runs in the worker after seats are freed: users are promoted in sign up order,
    skipping users whose grade year has no open slot, and each promoted user is
    notified by email.
    """

    def __init__(
        self,
        *,
        event_repo: IEventRepo,
        sign_up_repo: ISignUpRepo,
        user_query_repo: IUserQueryRepo,
        order_use_case: OrderUseCase,
        mail_publisher: IMailPublisher,
    ) -> None:
        self.event_repo = event_repo
        self.sign_up_repo = sign_up_repo
        self.user_query_repo = user_query_repo
        self.order_use_case = order_use_case
        self.mail_publisher = mail_publisher

    @Logger.io
    async def promote_from_wait_list(self, *, event_id: UUID) -> Optional[SignUpEntity]:
        event = await self.event_repo.get_by_id(event_id=event_id)
        if event is None:
            raise NotFoundError(f'Event {event_id} not found')
        if event.type == EventType.BASIC:
            raise InvalidArgumentError('This event does not have sign ups.')
        if (event.remaining_capacity or 0) <= 0:
            raise InvalidArgumentError('This event is full.')

        wait_list = await self.sign_up_repo.find_many(
            event_id=event_id, status=SignUpStatus.ON_WAITLIST
        )
        for sign_up in wait_list:
            user = await self.user_query_repo.get_by_id(user_id=sign_up.user_id)
            grade_year = user.grade_year() if user else None
            slot = await self.event_repo.get_slot_with_remaining_capacity(
                event_id=event_id, grade_year=grade_year
            )
            if slot is None:
                continue
            try:
                promoted = await self.sign_up_repo.promote(sign_up=sign_up, slot_id=slot.id)
            except NotFoundError:
                continue

            if event.type == EventType.TICKETS and event.product_id is not None:
                order = await self.order_use_case.create_order(
                    user_id=promoted.user_id, product_id=event.product_id
                )
                promoted = await self.sign_up_repo.add_order(
                    sign_up_id=promoted.id, order_id=order.id
                )
            Logger.base.info(f'📝 [WAIT_LIST] Promoted {promoted.id} to confirmed')
            metrics.record_wait_list_promotion()
            return promoted

        Logger.base.info(f'📝 [WAIT_LIST] Found no sign ups to promote for event {event_id}')
        return None

    @Logger.io
    async def handle_capacity_increased(self, *, event_id: UUID) -> list[SignUpEntity]:
        event = await self.event_repo.get_by_id(event_id=event_id)
        if event is None:
            raise NotFoundError(f'Event {event_id} not found')
        if not event.signups_enabled:
            raise InvalidArgumentError('Event is not accepting sign ups')

        promoted: list[SignUpEntity] = []
        for _ in range(event.remaining_capacity or 0):
            try:
                sign_up = await self.promote_from_wait_list(event_id=event_id)
            except InvalidArgumentError:
                break
            if sign_up is None:
                break
            promoted.append(sign_up)

        for sign_up in promoted:
            await self.mail_publisher.send_wait_list_confirmation(
                event_id=event_id, recipient_id=sign_up.user_id
            )
        return promoted

    @Logger.io
    async def get_approximate_wait_list_position(
        self, *, user_id: UUID, event_id: UUID
    ) -> Optional[int]:
        """1-based position in the wait list; promotion skips grade years, hence approximate"""
        wait_list = await self.sign_up_repo.find_many(
            event_id=event_id, status=SignUpStatus.ON_WAITLIST
        )
        for position, sign_up in enumerate(wait_list, start=1):
            if sign_up.user_id == user_id:
                return position
        return None
