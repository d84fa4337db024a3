from typing import AsyncContextManager, Callable, Optional
from uuid import UUID

import attrs
from sqlalchemy import select, update as sql_update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import InvalidArgumentError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.product.app.interface.i_order_repo import IOrderRepo
from src.service.product.domain.product_entity import (
    OrderEntity,
    OrderPaymentStatus,
    PaymentAttemptEntity,
    PaymentAttemptState,
)
from src.service.product.driven_adapter.model.product_model import (
    OrderModel,
    PaymentAttemptModel,
)


class OrderRepoImpl(IOrderRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @Logger.io
    async def create_order(self, *, order: OrderEntity) -> OrderEntity:
        async with self.session_factory() as session:
            model = OrderModel(
                id=order.id,
                product_id=order.product_id,
                user_id=order.user_id,
                total_price=order.total_price,
                payment_status=order.payment_status.value,
                attempt=order.attempt,
                version=order.version,
            )
            session.add(model)
            await session.commit()
            await session.refresh(model)
            return self._order_to_entity(model)

    @Logger.io
    async def get_order(self, *, order_id: UUID) -> Optional[OrderEntity]:
        async with self.session_factory() as session:
            model = await session.get(OrderModel, order_id)
            return self._order_to_entity(model) if model else None

    @Logger.io
    async def find_many_orders(
        self, *, user_id: Optional[UUID] = None, product_id: Optional[UUID] = None
    ) -> list[OrderEntity]:
        async with self.session_factory() as session:
            stmt = select(OrderModel).order_by(OrderModel.created_at.desc())
            if user_id is not None:
                stmt = stmt.where(OrderModel.user_id == user_id)
            if product_id is not None:
                stmt = stmt.where(OrderModel.product_id == product_id)
            result = await session.execute(stmt)
            return [self._order_to_entity(m) for m in result.scalars().all()]

    @Logger.io
    async def update_order(self, *, order: OrderEntity) -> OrderEntity:
        async with self.session_factory() as session:
            model = await self._update_order_versioned(session, order)
            await session.commit()
            return self._order_to_entity(model)

    @Logger.io
    async def create_payment_attempt(
        self, *, order: OrderEntity, payment_attempt: PaymentAttemptEntity
    ) -> tuple[PaymentAttemptEntity, OrderEntity]:
        next_order = attrs.evolve(order, attempt=order.attempt + 1)
        async with self.session_factory() as session:
            order_model = await self._update_order_versioned(session, next_order)
            attempt_model = PaymentAttemptModel(
                id=payment_attempt.id,
                order_id=order.id,
                reference=payment_attempt.reference,
                state=payment_attempt.state.value,
                version=payment_attempt.version,
            )
            session.add(attempt_model)
            await session.commit()
            await session.refresh(attempt_model)
            return self._attempt_to_entity(attempt_model), self._order_to_entity(order_model)

    @Logger.io
    async def get_payment_attempt(self, *, reference: str) -> Optional[PaymentAttemptEntity]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(PaymentAttemptModel).where(PaymentAttemptModel.reference == reference)
            )
            model = result.scalar_one_or_none()
            return self._attempt_to_entity(model) if model else None

    @Logger.io
    async def find_many_payment_attempts(
        self,
        *,
        user_id: Optional[UUID] = None,
        order_id: Optional[UUID] = None,
        product_id: Optional[UUID] = None,
    ) -> list[PaymentAttemptEntity]:
        async with self.session_factory() as session:
            stmt = (
                select(PaymentAttemptModel)
                .join(OrderModel, OrderModel.id == PaymentAttemptModel.order_id)
                .order_by(PaymentAttemptModel.created_at.desc())
            )
            if user_id is not None:
                stmt = stmt.where(OrderModel.user_id == user_id)
            if order_id is not None:
                stmt = stmt.where(OrderModel.id == order_id)
            if product_id is not None:
                stmt = stmt.where(OrderModel.product_id == product_id)
            result = await session.execute(stmt)
            return [self._attempt_to_entity(m) for m in result.scalars().all()]

    @Logger.io
    async def update_payment_attempt(
        self, *, payment_attempt: PaymentAttemptEntity, order: OrderEntity
    ) -> tuple[PaymentAttemptEntity, OrderEntity]:
        async with self.session_factory() as session:
            result = await session.execute(
                sql_update(PaymentAttemptModel)
                .where(
                    PaymentAttemptModel.id == payment_attempt.id,
                    PaymentAttemptModel.version == payment_attempt.version,
                )
                .values(state=payment_attempt.state.value, version=PaymentAttemptModel.version + 1)
                .returning(PaymentAttemptModel)
            )
            attempt_model = result.scalar_one_or_none()
            if attempt_model is None:
                await session.rollback()
                raise InvalidArgumentError(
                    f'Payment attempt {payment_attempt.reference} was modified concurrently'
                )
            order_model = await self._update_order_versioned(session, order)
            await session.commit()
            return self._attempt_to_entity(attempt_model), self._order_to_entity(order_model)

    @staticmethod
    async def _update_order_versioned(session: AsyncSession, order: OrderEntity) -> OrderModel:
        result = await session.execute(
            sql_update(OrderModel)
            .where(OrderModel.id == order.id, OrderModel.version == order.version)
            .values(
                payment_status=order.payment_status.value,
                attempt=order.attempt,
                purchased_at=order.purchased_at,
                version=OrderModel.version + 1,
            )
            .returning(OrderModel)
        )
        model = result.scalar_one_or_none()
        if model is None:
            await session.rollback()
            existing = await session.get(OrderModel, order.id)
            if existing is None:
                raise NotFoundError('Order not found')
            raise InvalidArgumentError(f'Order {order.id} was modified concurrently')
        return model

    @staticmethod
    def _order_to_entity(model: OrderModel) -> OrderEntity:
        return OrderEntity(
            id=model.id,
            product_id=model.product_id,
            user_id=model.user_id,
            total_price=model.total_price,
            payment_status=OrderPaymentStatus(model.payment_status),
            attempt=model.attempt,
            version=model.version,
            purchased_at=model.purchased_at,
            created_at=model.created_at,
        )

    @staticmethod
    def _attempt_to_entity(model: PaymentAttemptModel) -> PaymentAttemptEntity:
        return PaymentAttemptEntity(
            id=model.id,
            order_id=model.order_id,
            reference=model.reference,
            state=PaymentAttemptState(model.state),
            version=model.version,
            created_at=model.created_at,
        )
