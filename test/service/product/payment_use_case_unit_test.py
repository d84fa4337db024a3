"""
Unit tests for PaymentUseCase

Test Focus:
1. initiate_payment_attempt: ownership, return url origin, unpayable orders, polling scheduled
2. update_payment_attempt_state: AUTHORIZED reserves the order and schedules capture
3. poll_payment_attempt: reschedules until final or out of budget
4. capture_payment: only AUTHORIZED attempts, order ends CAPTURED
"""

from unittest.mock import AsyncMock
from uuid import uuid4

import attrs
import pytest

from src.platform.exception.exceptions import (
    InternalServerError,
    InvalidArgumentError,
    NotFoundError,
    UnauthorizedError,
)
from src.platform.message_queue.job_name import JobName
from src.service.product.app.command.payment_use_case import (
    FIRST_POLL_DELAY_SECONDS,
    MAX_POLLS,
    PaymentUseCase,
)
from src.service.product.app.interface.i_vipps_client import CreatedPayment
from src.service.product.domain.product_entity import (
    MerchantEntity,
    OrderEntity,
    OrderPaymentStatus,
    PaymentAttemptEntity,
    PaymentAttemptState,
    ProductEntity,
)


RETURN_URL = 'http://localhost:3000/ecommerce/fallback?orderId=1'


@pytest.fixture
def merchant() -> MerchantEntity:
    return MerchantEntity.create(
        name='Indøk',
        client_id='client',
        client_secret='secret',
        serial_number='123456',
        subscription_key='key',
    )


@pytest.fixture
def product(merchant: MerchantEntity) -> ProductEntity:
    return ProductEntity.create(
        name='Julebord', description='Billetter til Julebord', price=45000, merchant_id=merchant.id
    )


@pytest.fixture
def buyer_id():
    return uuid4()


@pytest.fixture
def order(product: ProductEntity, buyer_id) -> OrderEntity:
    return OrderEntity.create(product=product, user_id=buyer_id)


@pytest.fixture
def mock_order_repo(order: OrderEntity) -> AsyncMock:
    repo = AsyncMock()
    repo.get_order.return_value = order

    async def create_payment_attempt(*, order, payment_attempt):
        return payment_attempt, attrs.evolve(order, attempt=order.attempt + 1)

    async def update_payment_attempt(*, payment_attempt, order):
        return payment_attempt, order

    async def update_order(*, order):
        return order

    repo.create_payment_attempt.side_effect = create_payment_attempt
    repo.update_payment_attempt.side_effect = update_payment_attempt
    repo.update_order.side_effect = update_order
    return repo


@pytest.fixture
def mock_product_repo(product: ProductEntity, merchant: MerchantEntity) -> AsyncMock:
    repo = AsyncMock()
    repo.get_product.return_value = product
    repo.get_merchant_for_order.return_value = merchant
    return repo


@pytest.fixture
def mock_vipps_client() -> AsyncMock:
    client = AsyncMock()
    client.get_access_token.return_value = 'access-token'
    client.create_payment.return_value = CreatedPayment(
        reference='ignored', redirect_url='https://apitest.vipps.no/landing'
    )
    client.get_payment_state.return_value = PaymentAttemptState.CREATED
    return client


@pytest.fixture
def mock_job_queue() -> AsyncMock:
    queue = AsyncMock()
    queue.enqueue.return_value = True
    return queue


@pytest.fixture
def mock_permission_service() -> AsyncMock:
    service = AsyncMock()
    service.is_super_user.return_value = False
    return service


@pytest.fixture
def payment_use_case(
    mock_order_repo, mock_product_repo, mock_vipps_client, mock_job_queue, mock_permission_service
) -> PaymentUseCase:
    return PaymentUseCase(
        order_repo=mock_order_repo,
        product_repo=mock_product_repo,
        vipps_client=mock_vipps_client,
        job_queue=mock_job_queue,
        permission_service=mock_permission_service,
    )


@pytest.mark.unit
class TestInitiatePaymentAttempt:
    @pytest.mark.asyncio
    async def test_initiate_success__creates_attempt_and_schedules_poll(
        self,
        payment_use_case: PaymentUseCase,
        order: OrderEntity,
        buyer_id,
        mock_vipps_client: AsyncMock,
        mock_job_queue: AsyncMock,
    ):
        """
        Given: a PENDING order owned by the buyer
        When: the buyer starts a payment
        Then: Vipps is asked for the order total, the order becomes CREATED,
              and the first poll is scheduled
        """
        # Act
        result = await payment_use_case.initiate_payment_attempt(
            user_id=buyer_id, order_id=order.id, return_url=RETURN_URL
        )

        # Assert
        reference = f'indok-ntnu-{order.id}-1'
        assert result.redirect_url == 'https://apitest.vipps.no/landing'
        assert result.payment_attempt.reference == reference
        assert result.payment_attempt.state == PaymentAttemptState.CREATED
        assert result.order.payment_status == OrderPaymentStatus.CREATED

        vipps_kwargs = mock_vipps_client.create_payment.await_args.kwargs
        assert vipps_kwargs['amount'] == 45000
        assert f'reference={reference}' in vipps_kwargs['return_url']
        assert 'orderId=1' in vipps_kwargs['return_url']

        mock_job_queue.enqueue.assert_awaited_once_with(
            JobName.POLL_PAYMENT_ATTEMPT,
            job_id=f'{reference}:1',
            defer_by_seconds=FIRST_POLL_DELAY_SECONDS,
            reference=reference,
            poll_no=1,
        )

    @pytest.mark.asyncio
    async def test_initiate_fail__someone_elses_order(
        self, payment_use_case: PaymentUseCase, order: OrderEntity
    ):
        with pytest.raises(NotFoundError):
            await payment_use_case.initiate_payment_attempt(
                user_id=uuid4(), order_id=order.id, return_url=RETURN_URL
            )

    @pytest.mark.asyncio
    async def test_initiate_fail__foreign_return_url(
        self, payment_use_case: PaymentUseCase, order: OrderEntity, buyer_id
    ):
        with pytest.raises(InvalidArgumentError, match='Invalid return url'):
            await payment_use_case.initiate_payment_attempt(
                user_id=buyer_id, order_id=order.id, return_url='https://evil.example.org/'
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'status',
        [
            OrderPaymentStatus.CAPTURED,
            OrderPaymentStatus.RESERVED,
            OrderPaymentStatus.CANCELLED,
            OrderPaymentStatus.REFUNDED,
        ],
    )
    async def test_initiate_fail__order_not_payable(
        self,
        payment_use_case: PaymentUseCase,
        order: OrderEntity,
        buyer_id,
        status: OrderPaymentStatus,
        mock_vipps_client: AsyncMock,
    ):
        order.payment_status = status

        with pytest.raises(InvalidArgumentError):
            await payment_use_case.initiate_payment_attempt(
                user_id=buyer_id, order_id=order.id, return_url=RETURN_URL
            )
        mock_vipps_client.create_payment.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_initiate_fail__anonymous(self, payment_use_case: PaymentUseCase, order):
        with pytest.raises(UnauthorizedError):
            await payment_use_case.initiate_payment_attempt(
                user_id=None, order_id=order.id, return_url=RETURN_URL
            )

    @pytest.mark.asyncio
    async def test_initiate_fail__merchant_missing(
        self, payment_use_case: PaymentUseCase, order, buyer_id, mock_product_repo
    ):
        mock_product_repo.get_merchant_for_order.return_value = None

        with pytest.raises(InternalServerError):
            await payment_use_case.initiate_payment_attempt(
                user_id=buyer_id, order_id=order.id, return_url=RETURN_URL
            )


@pytest.mark.unit
class TestPaymentStateAndPolling:
    @pytest.fixture
    def attempt(self, order: OrderEntity, mock_order_repo: AsyncMock) -> PaymentAttemptEntity:
        attempt = PaymentAttemptEntity(order_id=order.id, reference=f'indok-ntnu-{order.id}-1')
        order.payment_status = OrderPaymentStatus.CREATED
        mock_order_repo.get_payment_attempt.return_value = attempt
        return attempt

    @pytest.mark.asyncio
    async def test_authorized__reserves_order_and_schedules_capture(
        self,
        payment_use_case: PaymentUseCase,
        attempt: PaymentAttemptEntity,
        order: OrderEntity,
        mock_vipps_client: AsyncMock,
        mock_job_queue: AsyncMock,
    ):
        # Arrange
        mock_vipps_client.get_payment_state.return_value = PaymentAttemptState.AUTHORIZED

        # Act
        result = await payment_use_case.update_payment_attempt_state(reference=attempt.reference)

        # Assert
        assert result.state == PaymentAttemptState.AUTHORIZED
        assert order.payment_status == OrderPaymentStatus.RESERVED
        mock_job_queue.enqueue.assert_awaited_once_with(
            JobName.CAPTURE_PAYMENT,
            job_id=f'capture:{attempt.reference}',
            reference=attempt.reference,
        )

    @pytest.mark.asyncio
    async def test_final_attempt_is_not_refreshed(
        self, payment_use_case: PaymentUseCase, attempt, mock_vipps_client
    ):
        attempt.state = PaymentAttemptState.FAILED

        result = await payment_use_case.update_payment_attempt_state(reference=attempt.reference)

        assert result.state == PaymentAttemptState.FAILED
        mock_vipps_client.get_payment_state.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_poll__reschedules_while_in_progress(
        self, payment_use_case: PaymentUseCase, attempt, mock_job_queue
    ):
        rescheduled = await payment_use_case.poll_payment_attempt(
            reference=attempt.reference, poll_no=3
        )

        assert rescheduled is True
        kwargs = mock_job_queue.enqueue.await_args.kwargs
        assert kwargs['poll_no'] == 4
        assert kwargs['job_id'] == f'{attempt.reference}:4'

    @pytest.mark.asyncio
    async def test_poll__gives_up_after_budget(
        self, payment_use_case: PaymentUseCase, attempt, mock_job_queue
    ):
        rescheduled = await payment_use_case.poll_payment_attempt(
            reference=attempt.reference, poll_no=MAX_POLLS
        )

        assert rescheduled is False
        mock_job_queue.enqueue.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_poll__stops_when_final(
        self, payment_use_case: PaymentUseCase, attempt, mock_vipps_client, mock_job_queue
    ):
        mock_vipps_client.get_payment_state.return_value = PaymentAttemptState.EXPIRED

        rescheduled = await payment_use_case.poll_payment_attempt(
            reference=attempt.reference, poll_no=1
        )

        assert rescheduled is False
        mock_job_queue.enqueue.assert_not_awaited()


@pytest.mark.unit
class TestCapturePayment:
    @pytest.mark.asyncio
    async def test_capture_success__order_captured(
        self,
        payment_use_case: PaymentUseCase,
        order: OrderEntity,
        mock_order_repo: AsyncMock,
        mock_vipps_client: AsyncMock,
    ):
        # Arrange
        attempt = PaymentAttemptEntity(
            order_id=order.id, reference='ref-1', state=PaymentAttemptState.AUTHORIZED
        )
        order.payment_status = OrderPaymentStatus.RESERVED
        mock_order_repo.get_payment_attempt.return_value = attempt

        # Act
        _, captured = await payment_use_case.capture_payment(reference='ref-1')

        # Assert
        assert captured.payment_status == OrderPaymentStatus.CAPTURED
        assert captured.purchased_at is not None
        mock_vipps_client.capture_payment.assert_awaited_once()
        assert mock_vipps_client.capture_payment.await_args.kwargs['amount'] == 45000

    @pytest.mark.asyncio
    async def test_capture_fail__not_authorized(
        self, payment_use_case: PaymentUseCase, order: OrderEntity, mock_order_repo
    ):
        mock_order_repo.get_payment_attempt.return_value = PaymentAttemptEntity(
            order_id=order.id, reference='ref-1'
        )

        with pytest.raises(InvalidArgumentError, match='AUTHORIZED'):
            await payment_use_case.capture_payment(reference='ref-1')

    @pytest.mark.asyncio
    async def test_capture_fail__already_captured(
        self, payment_use_case: PaymentUseCase, order: OrderEntity, mock_order_repo
    ):
        mock_order_repo.get_payment_attempt.return_value = PaymentAttemptEntity(
            order_id=order.id, reference='ref-1', state=PaymentAttemptState.AUTHORIZED
        )
        order.payment_status = OrderPaymentStatus.CAPTURED

        with pytest.raises(InvalidArgumentError, match='already been captured'):
            await payment_use_case.capture_payment(reference='ref-1')
