from datetime import datetime
from typing import Optional
from uuid import UUID

import strawberry

from src.platform.config.di import container
from src.platform.exception.exceptions import NotFoundError
from src.platform.graphql.context import GraphQLInfo
from src.service.product.domain.product_entity import (
    MerchantEntity,
    OrderEntity,
    OrderPaymentStatus,
    PaymentAttemptEntity,
    PaymentAttemptState,
    ProductEntity,
)
from src.service.user.driving_adapter.graphql.types import User

strawberry.enum(OrderPaymentStatus)
strawberry.enum(PaymentAttemptState)


@strawberry.type
class Merchant:
    """Client secrets never leave the backend"""

    id: UUID
    name: str
    serial_number: str

    @classmethod
    def from_entity(cls, entity: MerchantEntity) -> 'Merchant':
        return cls(id=entity.id, name=entity.name, serial_number=entity.serial_number)


@strawberry.type
class Price:
    value: int
    unit: str
    value_in_nok: float


@strawberry.type
class Product:
    id: UUID
    name: str
    description: str
    merchant_id: UUID
    price: Price

    @classmethod
    def from_entity(cls, entity: ProductEntity) -> 'Product':
        return cls(
            id=entity.id,
            name=entity.name,
            description=entity.description,
            merchant_id=entity.merchant_id,
            price=Price(value=entity.price, unit='øre', value_in_nok=entity.price / 100),
        )


@strawberry.type
class Order:
    id: UUID
    product_id: UUID
    user_id: Optional[UUID]
    payment_status: OrderPaymentStatus
    attempt: int
    total_price: Price
    is_final: bool
    purchased_at: Optional[datetime]
    created_at: Optional[datetime]

    @classmethod
    def from_entity(cls, entity: OrderEntity) -> 'Order':
        return cls(
            id=entity.id,
            product_id=entity.product_id,
            user_id=entity.user_id,
            payment_status=entity.payment_status,
            attempt=entity.attempt,
            total_price=Price(
                value=entity.total_price, unit='øre', value_in_nok=entity.total_price / 100
            ),
            is_final=entity.is_final,
            purchased_at=entity.purchased_at,
            created_at=entity.created_at,
        )

    @strawberry.field
    async def product(self) -> Optional[Product]:
        try:
            product = await container.product_use_case().get_product(product_id=self.product_id)
        except NotFoundError:
            return None
        return Product.from_entity(product)

    @strawberry.field
    async def user(self) -> Optional[User]:
        user = await container.user_query_use_case().get_optional(user_id=self.user_id)
        return User.from_entity(user) if user else None

    @strawberry.field
    async def payment_attempts(self, info: GraphQLInfo) -> list['PaymentAttempt']:
        attempts = await container.payment_use_case().find_many_payment_attempts(
            user_id=info.context.user_id, order_id=self.id
        )
        return [PaymentAttempt.from_entity(a) for a in attempts]


@strawberry.type
class PaymentAttempt:
    id: UUID
    order_id: UUID
    reference: str
    state: PaymentAttemptState
    in_progress: bool
    is_final: bool
    created_at: Optional[datetime]

    @classmethod
    def from_entity(cls, entity: PaymentAttemptEntity) -> 'PaymentAttempt':
        return cls(
            id=entity.id,
            order_id=entity.order_id,
            reference=entity.reference,
            state=entity.state,
            in_progress=entity.in_progress,
            is_final=entity.is_final,
            created_at=entity.created_at,
        )

    @strawberry.field
    async def order(self, info: GraphQLInfo) -> Order:
        order = await container.order_use_case().get_order(
            user_id=info.context.user_id, order_id=self.order_id
        )
        return Order.from_entity(order)


@strawberry.type
class MerchantResponse:
    merchant: Merchant


@strawberry.type
class MerchantsResponse:
    merchants: list[Merchant]


@strawberry.type
class ProductResponse:
    product: Product


@strawberry.type
class ProductsResponse:
    products: list[Product]
    total: int


@strawberry.type
class OrderResponse:
    order: Order


@strawberry.type
class OrdersResponse:
    orders: list[Order]
    total: int


@strawberry.type
class PaymentAttemptResponse:
    payment_attempt: Optional[PaymentAttempt]


@strawberry.type
class PaymentAttemptsResponse:
    payment_attempts: list[PaymentAttempt]
    total: int


@strawberry.type
class InitiatePaymentAttemptResponse:
    redirect_url: str
    payment_attempt: PaymentAttempt
    order: Order


@strawberry.input
class CreateMerchantInput:
    name: str
    client_id: str
    client_secret: str
    serial_number: str
    subscription_key: str


@strawberry.input
class CreateProductInput:
    name: str
    description: str
    price: int
    merchant_id: UUID


@strawberry.input
class OrdersInput:
    user_id: Optional[UUID] = None
    product_id: Optional[UUID] = None


@strawberry.input
class PaymentAttemptsInput:
    order_id: Optional[UUID] = None
    user_id: Optional[UUID] = None
    product_id: Optional[UUID] = None


@strawberry.input
class InitiatePaymentAttemptInput:
    order_id: UUID
    return_url: str
