"""
Unit tests for OrderRepoImpl.create_payment_attempt

Test Focus:
1. The attempt counter is bumped on a copy, the caller's order is left as is
2. A version conflict rolls back without storing the payment attempt
"""

from contextlib import asynccontextmanager
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.dialects import postgresql

from src.platform.exception.exceptions import InvalidArgumentError
from src.service.product.domain.product_entity import (
    OrderEntity,
    OrderPaymentStatus,
    PaymentAttemptEntity,
)
from src.service.product.driven_adapter.repo.order_repo_impl import OrderRepoImpl


@pytest.fixture
def order() -> OrderEntity:
    return OrderEntity(
        product_id=uuid4(),
        user_id=uuid4(),
        total_price=45000,
        payment_status=OrderPaymentStatus.CREATED,
        attempt=2,
        version=3,
    )


@pytest.fixture
def payment_attempt(order: OrderEntity) -> PaymentAttemptEntity:
    return PaymentAttemptEntity(order_id=order.id, reference=f'indok-ntnu-{order.id}-3')


@pytest.fixture
def mock_session() -> AsyncMock:
    session = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def order_repo(mock_session: AsyncMock) -> OrderRepoImpl:
    @asynccontextmanager
    async def session_factory():
        yield mock_session

    return OrderRepoImpl(session_factory)


def _returning(row) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = row
    return result


@pytest.mark.unit
class TestCreatePaymentAttempt:
    @pytest.mark.asyncio
    async def test_stored_order_has_next_attempt(
        self,
        order_repo: OrderRepoImpl,
        mock_session: AsyncMock,
        order: OrderEntity,
        payment_attempt: PaymentAttemptEntity,
    ):
        # Arrange
        stored = SimpleNamespace(
            id=order.id,
            product_id=order.product_id,
            user_id=order.user_id,
            total_price=order.total_price,
            payment_status=order.payment_status.value,
            attempt=3,
            version=4,
            purchased_at=None,
            created_at=None,
        )
        mock_session.execute.return_value = _returning(stored)

        # Act
        attempt, updated = await order_repo.create_payment_attempt(
            order=order, payment_attempt=payment_attempt
        )

        # Assert
        statement = mock_session.execute.await_args.args[0]
        assert statement.compile(dialect=postgresql.dialect()).params['attempt'] == 3
        assert updated.attempt == 3
        assert updated.version == 4
        assert order.attempt == 2
        assert attempt.reference == payment_attempt.reference
        mock_session.add.assert_called_once()
        mock_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_version_conflict_leaves_caller_order_untouched(
        self,
        order_repo: OrderRepoImpl,
        mock_session: AsyncMock,
        order: OrderEntity,
        payment_attempt: PaymentAttemptEntity,
    ):
        # Given: another writer bumped the order version first
        mock_session.execute.return_value = _returning(None)
        mock_session.get.return_value = MagicMock()

        # When
        with pytest.raises(InvalidArgumentError, match='modified concurrently'):
            await order_repo.create_payment_attempt(order=order, payment_attempt=payment_attempt)

        # Then
        assert order.attempt == 2
        mock_session.rollback.assert_awaited_once()
        mock_session.add.assert_not_called()
        mock_session.commit.assert_not_awaited()
