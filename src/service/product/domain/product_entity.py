from datetime import datetime
from enum import StrEnum
from typing import Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import InvalidArgumentError
from src.platform.logging.loguru_io import Logger


class OrderPaymentStatus(StrEnum):
    PENDING = 'PENDING'  # no payment attempt yet
    CREATED = 'CREATED'  # a payment attempt exists, the user has not paid
    RESERVED = 'RESERVED'  # payment authorized, not yet captured
    CAPTURED = 'CAPTURED'
    REFUNDED = 'REFUNDED'
    CANCELLED = 'CANCELLED'


FINAL_ORDER_STATUSES = frozenset(
    {OrderPaymentStatus.CAPTURED, OrderPaymentStatus.REFUNDED, OrderPaymentStatus.CANCELLED}
)


class PaymentAttemptState(StrEnum):
    CREATED = 'CREATED'
    AUTHORIZED = 'AUTHORIZED'
    FAILED = 'FAILED'
    TERMINATED = 'TERMINATED'
    EXPIRED = 'EXPIRED'
    ABORTED = 'ABORTED'


def is_final_payment_state(state: PaymentAttemptState) -> bool:
    return state != PaymentAttemptState.CREATED


def payment_reference(order_id: UUID, attempt: int) -> str:
    # Vipps requires a unique reference per attempt
    return f'indok-ntnu-{order_id}-{attempt}'


@attrs.define(kw_only=True)
class MerchantEntity:
    name: str
    client_id: str
    client_secret: str
    serial_number: str
    subscription_key: str
    id: UUID = attrs.field(factory=uuid7)

    @classmethod
    def create(
        cls,
        *,
        name: str,
        client_id: str,
        client_secret: str,
        serial_number: str,
        subscription_key: str,
    ) -> 'MerchantEntity':
        fields = {
            'name': name,
            'client_id': client_id,
            'client_secret': client_secret,
            'serial_number': serial_number,
            'subscription_key': subscription_key,
        }
        empty = [key for key, value in fields.items() if not value]
        if empty:
            raise InvalidArgumentError(f'merchant fields must not be empty: {", ".join(empty)}')
        return cls(**fields)


@attrs.define(kw_only=True)
class ProductEntity:
    name: str
    description: str
    price: int  # øre
    merchant_id: UUID
    id: UUID = attrs.field(factory=uuid7)
    version: int = 0

    @classmethod
    @Logger.io
    def create(
        cls, *, name: str, description: str, price: int, merchant_id: UUID
    ) -> 'ProductEntity':
        if price <= 0:
            raise InvalidArgumentError('price must be a positive amount of øre')
        return cls(name=name, description=description, price=price, merchant_id=merchant_id)


@attrs.define(kw_only=True)
class OrderEntity:
    product_id: UUID
    user_id: Optional[UUID]
    total_price: int
    payment_status: OrderPaymentStatus = OrderPaymentStatus.PENDING
    attempt: int = 0
    id: UUID = attrs.field(factory=uuid7)
    version: int = 0
    purchased_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def create(cls, *, product: ProductEntity, user_id: UUID) -> 'OrderEntity':
        return cls(product_id=product.id, user_id=user_id, total_price=product.price)

    @property
    def is_final(self) -> bool:
        return self.payment_status in FINAL_ORDER_STATUSES

    def next_payment_reference(self) -> str:
        return payment_reference(self.id, self.attempt + 1)


@attrs.define(kw_only=True)
class PaymentAttemptEntity:
    order_id: UUID
    reference: str
    state: PaymentAttemptState = PaymentAttemptState.CREATED
    id: UUID = attrs.field(factory=uuid7)
    version: int = 0
    created_at: Optional[datetime] = None

    @property
    def in_progress(self) -> bool:
        return self.state == PaymentAttemptState.CREATED

    @property
    def is_final(self) -> bool:
        return is_final_payment_state(self.state)
