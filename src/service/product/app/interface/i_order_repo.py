from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.service.product.domain.product_entity import OrderEntity, PaymentAttemptEntity


class IOrderRepo(ABC):
    @abstractmethod
    async def create_order(self, *, order: OrderEntity) -> OrderEntity:
        pass

    @abstractmethod
    async def get_order(self, *, order_id: UUID) -> Optional[OrderEntity]:
        pass

    @abstractmethod
    async def find_many_orders(
        self, *, user_id: Optional[UUID] = None, product_id: Optional[UUID] = None
    ) -> list[OrderEntity]:
        pass

    @abstractmethod
    async def update_order(self, *, order: OrderEntity) -> OrderEntity:
        """
        Raises:
            InvalidArgumentError: the order version changed since it was loaded
        """
        pass

    @abstractmethod
    async def create_payment_attempt(
        self, *, order: OrderEntity, payment_attempt: PaymentAttemptEntity
    ) -> tuple[PaymentAttemptEntity, OrderEntity]:
        """Insert the attempt and bump the order's attempt counter in one transaction"""
        pass

    @abstractmethod
    async def get_payment_attempt(self, *, reference: str) -> Optional[PaymentAttemptEntity]:
        pass

    @abstractmethod
    async def find_many_payment_attempts(
        self,
        *,
        user_id: Optional[UUID] = None,
        order_id: Optional[UUID] = None,
        product_id: Optional[UUID] = None,
    ) -> list[PaymentAttemptEntity]:
        pass

    @abstractmethod
    async def update_payment_attempt(
        self, *, payment_attempt: PaymentAttemptEntity, order: OrderEntity
    ) -> tuple[PaymentAttemptEntity, OrderEntity]:
        """Persist both under version checks in one transaction"""
        pass
