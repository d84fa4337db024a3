"""
Unit tests for OrderUseCase and ProductUseCase

Test Focus:
1. Orders copy the product price
2. Other users' orders look like missing orders; super users see everything
3. Merchants and products are managed by super users
"""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from src.platform.exception.exceptions import (
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
    UnauthorizedError,
)
from src.service.product.app.command.order_use_case import OrderUseCase
from src.service.product.app.command.product_use_case import ProductUseCase
from src.service.product.domain.product_entity import OrderEntity, ProductEntity


@pytest.fixture
def product() -> ProductEntity:
    return ProductEntity.create(
        name='Hyttetur', description='Billetter til Hyttetur', price=20000, merchant_id=uuid4()
    )


@pytest.fixture
def mock_product_repo(product: ProductEntity) -> AsyncMock:
    repo = AsyncMock()
    repo.get_product.return_value = product
    repo.create_product.side_effect = lambda *, product: product
    repo.create_merchant.side_effect = lambda *, merchant: merchant
    return repo


@pytest.fixture
def mock_order_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.create_order.side_effect = lambda *, order: order
    return repo


@pytest.fixture
def mock_permission_service() -> AsyncMock:
    service = AsyncMock()
    service.is_super_user.return_value = False
    return service


@pytest.fixture
def order_use_case(mock_order_repo, mock_product_repo, mock_permission_service) -> OrderUseCase:
    return OrderUseCase(
        order_repo=mock_order_repo,
        product_repo=mock_product_repo,
        permission_service=mock_permission_service,
    )


@pytest.fixture
def product_use_case(mock_product_repo, mock_permission_service) -> ProductUseCase:
    return ProductUseCase(product_repo=mock_product_repo, permission_service=mock_permission_service)


@pytest.mark.unit
class TestOrders:
    @pytest.mark.asyncio
    async def test_create_order__copies_price(
        self, order_use_case: OrderUseCase, product: ProductEntity
    ):
        user_id = uuid4()

        order = await order_use_case.create_order(user_id=user_id, product_id=product.id)

        assert order.total_price == 20000
        assert order.user_id == user_id
        assert order.payment_status == 'PENDING'
        assert order.attempt == 0

    @pytest.mark.asyncio
    async def test_create_order_fail__unknown_product(
        self, order_use_case: OrderUseCase, mock_product_repo
    ):
        mock_product_repo.get_product.return_value = None

        with pytest.raises(NotFoundError):
            await order_use_case.create_order(user_id=uuid4(), product_id=uuid4())

    @pytest.mark.asyncio
    async def test_get_order_fail__other_users_order_is_not_found(
        self, order_use_case: OrderUseCase, product: ProductEntity, mock_order_repo
    ):
        """
        Given: an order that belongs to someone else
        When: a regular user asks for it
        Then: it is reported as not found
        """
        mock_order_repo.get_order.return_value = OrderEntity.create(
            product=product, user_id=uuid4()
        )

        with pytest.raises(NotFoundError):
            await order_use_case.get_order(user_id=uuid4(), order_id=uuid4())

    @pytest.mark.asyncio
    async def test_get_order__super_user_sees_any_order(
        self,
        order_use_case: OrderUseCase,
        product: ProductEntity,
        mock_order_repo,
        mock_permission_service,
    ):
        order = OrderEntity.create(product=product, user_id=uuid4())
        mock_order_repo.get_order.return_value = order
        mock_permission_service.is_super_user.return_value = True

        assert await order_use_case.get_order(user_id=uuid4(), order_id=order.id) is order

    @pytest.mark.asyncio
    async def test_find_many_orders_fail__other_user(self, order_use_case: OrderUseCase):
        with pytest.raises(PermissionDeniedError):
            await order_use_case.find_many_orders(user_id=uuid4(), for_user_id=uuid4())

    @pytest.mark.asyncio
    async def test_find_many_orders__defaults_to_own_orders(
        self, order_use_case: OrderUseCase, mock_order_repo
    ):
        user_id = uuid4()

        await order_use_case.find_many_orders(user_id=user_id)

        mock_order_repo.find_many_orders.assert_awaited_once_with(user_id=user_id, product_id=None)


@pytest.mark.unit
class TestProducts:
    @pytest.mark.asyncio
    async def test_create_merchant_fail__not_super_user(self, product_use_case: ProductUseCase):
        with pytest.raises(PermissionDeniedError):
            await product_use_case.create_merchant(
                user_id=uuid4(),
                name='Indøk',
                client_id='client',
                client_secret='secret',
                serial_number='123',
                subscription_key='key',
            )

    @pytest.mark.asyncio
    async def test_create_merchant_fail__empty_field(
        self, product_use_case: ProductUseCase, mock_permission_service
    ):
        mock_permission_service.is_super_user.return_value = True

        with pytest.raises(InvalidArgumentError, match='client_secret'):
            await product_use_case.create_merchant(
                user_id=uuid4(),
                name='Indøk',
                client_id='client',
                client_secret='',
                serial_number='123',
                subscription_key='key',
            )

    @pytest.mark.asyncio
    async def test_create_product_fail__anonymous(self, product_use_case: ProductUseCase):
        with pytest.raises(UnauthorizedError):
            await product_use_case.create_product(
                user_id=None, name='Genser', description='', price=30000, merchant_id=uuid4()
            )

    @pytest.mark.asyncio
    async def test_create_ticket_product_fail__non_positive_price(
        self, product_use_case: ProductUseCase
    ):
        with pytest.raises(InvalidArgumentError):
            await product_use_case.create_ticket_product(
                name='Gratis', description='', price=0, merchant_id=uuid4()
            )

    @pytest.mark.asyncio
    async def test_create_ticket_product_fail__unknown_merchant(
        self, product_use_case: ProductUseCase, mock_product_repo
    ):
        mock_product_repo.get_merchant.return_value = None

        with pytest.raises(NotFoundError):
            await product_use_case.create_ticket_product(
                name='Julebord', description='', price=45000, merchant_id=uuid4()
            )
