"""
Vipps payments for orders

Flow:
1. initiate_payment_attempt(): create the Vipps payment, store the attempt and
   schedule polling (Vipps webhooks are not guaranteed to arrive)
2. poll_payment_attempt(): worker job, refreshes the attempt every 2 seconds
   until it reaches a final state or the polling budget runs out
3. capture_payment(): worker job, enqueued once an attempt becomes AUTHORIZED
"""

from datetime import datetime, timezone
from typing import Optional
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse
from uuid import UUID

import attrs
from opentelemetry import trace

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import (
    InternalServerError,
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
    UnauthorizedError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.membership_metrics import metrics
from src.platform.message_queue.job_name import JobName
from src.platform.validation.validators import is_allowed_origin
from src.service.product.app.interface.i_order_repo import IOrderRepo
from src.service.product.app.interface.i_product_repo import IProductRepo
from src.service.product.app.interface.i_vipps_client import IVippsClient
from src.service.product.domain.product_entity import (
    MerchantEntity,
    OrderEntity,
    OrderPaymentStatus,
    PaymentAttemptEntity,
    PaymentAttemptState,
)
from src.service.shared_kernel.app.interface.i_job_queue import IJobQueue
from src.service.shared_kernel.app.interface.i_permission_service import IPermissionService


FIRST_POLL_DELAY_SECONDS = 5
POLL_INTERVAL_SECONDS = 2
# Vipps payments expire after 10 minutes: 600s / 2s
MAX_POLLS = 300

_UNPAYABLE_ORDER_MESSAGES = {
    OrderPaymentStatus.CAPTURED: 'Order has been captured',
    OrderPaymentStatus.CANCELLED: 'Order has been cancelled',
    OrderPaymentStatus.REFUNDED: 'Order has been refunded',
    OrderPaymentStatus.RESERVED: 'Order already has a reserved payment',
}


@attrs.define
class InitiatedPayment:
    redirect_url: str
    payment_attempt: PaymentAttemptEntity
    order: OrderEntity


def _with_reference(return_url: str, reference: str) -> str:
    parsed = urlparse(return_url)
    query = dict(parse_qsl(parsed.query))
    query['reference'] = reference
    return urlunparse(parsed._replace(query=urlencode(query)))


def poll_job_id(reference: str, poll_no: int) -> str:
    return f'{reference}:{poll_no}'


class PaymentUseCase:
    def __init__(
        self,
        *,
        order_repo: IOrderRepo,
        product_repo: IProductRepo,
        vipps_client: IVippsClient,
        job_queue: IJobQueue,
        permission_service: IPermissionService,
    ) -> None:
        self.order_repo = order_repo
        self.product_repo = product_repo
        self.vipps_client = vipps_client
        self.job_queue = job_queue
        self.permission_service = permission_service
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def initiate_payment_attempt(
        self, *, user_id: Optional[UUID], order_id: UUID, return_url: str
    ) -> InitiatedPayment:
        with self.tracer.start_as_current_span(
            'use_case.initiate_payment_attempt',
            attributes={'order.id': str(order_id)},
        ):
            if user_id is None:
                raise UnauthorizedError('You must be logged in to initiate payment')
            if not is_allowed_origin(return_url, settings.REDIRECT_ORIGINS):
                raise InvalidArgumentError('Invalid return url')

            order = await self.order_repo.get_order(order_id=order_id)
            if order is None or order.user_id != user_id:
                raise NotFoundError('Order not found')
            if order.payment_status in _UNPAYABLE_ORDER_MESSAGES:
                raise InvalidArgumentError(_UNPAYABLE_ORDER_MESSAGES[order.payment_status])

            product = await self.product_repo.get_product(product_id=order.product_id)
            if product is None:
                raise NotFoundError('Product not found')

            reference = order.next_payment_reference()
            merchant, token = await self._authenticate(order.id)
            payment = await self.vipps_client.create_payment(
                merchant=merchant,
                token=token,
                reference=reference,
                amount=order.total_price,
                return_url=_with_reference(return_url, reference),
                description=product.description or product.name,
            )

            if order.payment_status == OrderPaymentStatus.PENDING:
                order.payment_status = OrderPaymentStatus.CREATED
            payment_attempt, order = await self.order_repo.create_payment_attempt(
                order=order,
                payment_attempt=PaymentAttemptEntity(order_id=order.id, reference=reference),
            )

            await self.job_queue.enqueue(
                JobName.POLL_PAYMENT_ATTEMPT,
                job_id=poll_job_id(reference, 1),
                defer_by_seconds=FIRST_POLL_DELAY_SECONDS,
                reference=reference,
                poll_no=1,
            )
            Logger.base.info(f'💳 [PAYMENT] Initiated payment attempt {reference}')
            metrics.record_payment_attempt(state=PaymentAttemptState.CREATED)
            return InitiatedPayment(
                redirect_url=payment.redirect_url, payment_attempt=payment_attempt, order=order
            )

    @Logger.io
    async def update_payment_attempt_state(self, *, reference: str) -> PaymentAttemptEntity:
        payment_attempt = await self._get_attempt(reference)
        if payment_attempt.is_final:
            Logger.base.info(f'💳 [PAYMENT] {reference} is not in progress')
            return payment_attempt

        order = await self.order_repo.get_order(order_id=payment_attempt.order_id)
        if order is None:
            raise NotFoundError('Order not found')

        merchant, token = await self._authenticate(order.id)
        new_state = await self.vipps_client.get_payment_state(
            merchant=merchant, token=token, reference=reference
        )
        if new_state == payment_attempt.state:
            return payment_attempt

        payment_attempt.state = new_state
        if new_state == PaymentAttemptState.AUTHORIZED and not order.is_final:
            order.payment_status = OrderPaymentStatus.RESERVED
        payment_attempt, order = await self.order_repo.update_payment_attempt(
            payment_attempt=payment_attempt, order=order
        )
        Logger.base.info(f'💳 [PAYMENT] {reference} moved to {new_state}')
        metrics.record_payment_attempt(state=new_state)

        if payment_attempt.state == PaymentAttemptState.AUTHORIZED:
            await self.job_queue.enqueue(
                JobName.CAPTURE_PAYMENT, job_id=f'capture:{reference}', reference=reference
            )
        return payment_attempt

    @Logger.io
    async def poll_payment_attempt(self, *, reference: str, poll_no: int) -> bool:
        """Refresh the attempt once; returns True if another poll was scheduled"""
        payment_attempt = await self.update_payment_attempt_state(reference=reference)
        if payment_attempt.is_final:
            return False
        if poll_no >= MAX_POLLS:
            Logger.base.warning(f'💳 [PAYMENT] Gave up polling {reference} after {poll_no} polls')
            return False
        await self.job_queue.enqueue(
            JobName.POLL_PAYMENT_ATTEMPT,
            job_id=poll_job_id(reference, poll_no + 1),
            defer_by_seconds=POLL_INTERVAL_SECONDS,
            reference=reference,
            poll_no=poll_no + 1,
        )
        return True

    @Logger.io
    async def capture_payment(self, *, reference: str) -> tuple[PaymentAttemptEntity, OrderEntity]:
        payment_attempt = await self._get_attempt(reference)
        if payment_attempt.state != PaymentAttemptState.AUTHORIZED:
            raise InvalidArgumentError('Payment attempt must be in state AUTHORIZED to capture')

        order = await self.order_repo.get_order(order_id=payment_attempt.order_id)
        if order is None:
            raise NotFoundError('Order not found')
        if order.payment_status == OrderPaymentStatus.CAPTURED:
            raise InvalidArgumentError('Order has already been captured')
        if order.payment_status in (OrderPaymentStatus.CANCELLED, OrderPaymentStatus.REFUNDED):
            raise InvalidArgumentError(_UNPAYABLE_ORDER_MESSAGES[order.payment_status])

        merchant, token = await self._authenticate(order.id)
        await self.vipps_client.capture_payment(
            merchant=merchant, token=token, reference=reference, amount=order.total_price
        )

        if order.payment_status != OrderPaymentStatus.RESERVED:
            Logger.base.warning(
                f'💳 [PAYMENT] Order {order.id} had unexpected status {order.payment_status} '
                'during capture'
            )
        order.payment_status = OrderPaymentStatus.CAPTURED
        order.purchased_at = datetime.now(timezone.utc)
        order = await self.order_repo.update_order(order=order)
        Logger.base.info(f'💳 [PAYMENT] Captured {reference}')
        metrics.record_payment_capture(result='captured')
        return payment_attempt, order

    @Logger.io
    async def get_payment_attempt(
        self, *, user_id: Optional[UUID], reference: str
    ) -> PaymentAttemptEntity:
        if user_id is None:
            raise UnauthorizedError('You must be logged in to get a payment attempt')
        payment_attempt = await self._get_attempt(reference)
        order = await self.order_repo.get_order(order_id=payment_attempt.order_id)
        if order is None or (
            order.user_id != user_id
            and not await self.permission_service.is_super_user(user_id=user_id)
        ):
            raise NotFoundError('Payment attempt not found')
        return payment_attempt

    @Logger.io
    async def find_many_payment_attempts(
        self,
        *,
        user_id: Optional[UUID],
        order_id: Optional[UUID] = None,
        for_user_id: Optional[UUID] = None,
        product_id: Optional[UUID] = None,
    ) -> list[PaymentAttemptEntity]:
        if user_id is None:
            raise UnauthorizedError('You must be logged in to get payment attempts')
        if await self.permission_service.is_super_user(user_id=user_id):
            return await self.order_repo.find_many_payment_attempts(
                user_id=for_user_id, order_id=order_id, product_id=product_id
            )
        if for_user_id is not None and for_user_id != user_id:
            raise PermissionDeniedError(
                'You are not allowed to view payment attempts for other users'
            )
        return await self.order_repo.find_many_payment_attempts(
            user_id=user_id, order_id=order_id, product_id=product_id
        )

    async def _get_attempt(self, reference: str) -> PaymentAttemptEntity:
        payment_attempt = await self.order_repo.get_payment_attempt(reference=reference)
        if payment_attempt is None:
            raise NotFoundError('Payment attempt not found')
        return payment_attempt

    async def _authenticate(self, order_id: UUID) -> tuple[MerchantEntity, str]:
        merchant = await self.product_repo.get_merchant_for_order(order_id=order_id)
        if merchant is None:
            raise InternalServerError('Failed to create Vipps client for merchant')
        token = await self.vipps_client.get_access_token(merchant=merchant)
        return merchant, token
