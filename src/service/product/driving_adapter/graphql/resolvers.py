from typing import Optional
from uuid import UUID

import strawberry

from src.platform.config.di import container
from src.platform.graphql.context import GraphQLInfo
from src.service.product.driving_adapter.graphql.types import (
    CreateMerchantInput,
    CreateProductInput,
    InitiatePaymentAttemptInput,
    InitiatePaymentAttemptResponse,
    Merchant,
    MerchantResponse,
    MerchantsResponse,
    Order,
    OrderResponse,
    OrdersInput,
    OrdersResponse,
    PaymentAttempt,
    PaymentAttemptResponse,
    PaymentAttemptsInput,
    PaymentAttemptsResponse,
    Product,
    ProductResponse,
    ProductsResponse,
)


@strawberry.type
class ProductQuery:
    @strawberry.field
    async def products(self) -> ProductsResponse:
        products = await container.product_use_case().find_many_products()
        return ProductsResponse(
            products=[Product.from_entity(p) for p in products], total=len(products)
        )

    @strawberry.field
    async def merchants(self, info: GraphQLInfo) -> MerchantsResponse:
        merchants = await container.product_use_case().find_many_merchants(
            user_id=info.context.user_id
        )
        return MerchantsResponse(merchants=[Merchant.from_entity(m) for m in merchants])

    @strawberry.field
    async def order(self, info: GraphQLInfo, id: UUID) -> OrderResponse:
        order = await container.order_use_case().get_order(
            user_id=info.context.user_id, order_id=id
        )
        return OrderResponse(order=Order.from_entity(order))

    @strawberry.field
    async def orders(self, info: GraphQLInfo, data: Optional[OrdersInput] = None) -> OrdersResponse:
        data = data or OrdersInput()
        orders = await container.order_use_case().find_many_orders(
            user_id=info.context.user_id, for_user_id=data.user_id, product_id=data.product_id
        )
        return OrdersResponse(orders=[Order.from_entity(o) for o in orders], total=len(orders))

    @strawberry.field
    async def payment_attempt(self, info: GraphQLInfo, reference: str) -> PaymentAttemptResponse:
        attempt = await container.payment_use_case().get_payment_attempt(
            user_id=info.context.user_id, reference=reference
        )
        return PaymentAttemptResponse(payment_attempt=PaymentAttempt.from_entity(attempt))

    @strawberry.field
    async def payment_attempts(
        self, info: GraphQLInfo, data: Optional[PaymentAttemptsInput] = None
    ) -> PaymentAttemptsResponse:
        data = data or PaymentAttemptsInput()
        attempts = await container.payment_use_case().find_many_payment_attempts(
            user_id=info.context.user_id,
            order_id=data.order_id,
            for_user_id=data.user_id,
            product_id=data.product_id,
        )
        return PaymentAttemptsResponse(
            payment_attempts=[PaymentAttempt.from_entity(a) for a in attempts],
            total=len(attempts),
        )


@strawberry.type
class ProductMutation:
    @strawberry.mutation
    async def create_merchant(
        self, info: GraphQLInfo, data: CreateMerchantInput
    ) -> MerchantResponse:
        merchant = await container.product_use_case().create_merchant(
            user_id=info.context.user_id,
            name=data.name,
            client_id=data.client_id,
            client_secret=data.client_secret,
            serial_number=data.serial_number,
            subscription_key=data.subscription_key,
        )
        return MerchantResponse(merchant=Merchant.from_entity(merchant))

    @strawberry.mutation
    async def create_product(self, info: GraphQLInfo, data: CreateProductInput) -> ProductResponse:
        product = await container.product_use_case().create_product(
            user_id=info.context.user_id,
            name=data.name,
            description=data.description,
            price=data.price,
            merchant_id=data.merchant_id,
        )
        return ProductResponse(product=Product.from_entity(product))

    @strawberry.mutation
    async def create_order(self, info: GraphQLInfo, product_id: UUID) -> OrderResponse:
        order = await container.order_use_case().create_order(
            user_id=info.context.user_id, product_id=product_id
        )
        return OrderResponse(order=Order.from_entity(order))

    @strawberry.mutation
    async def initiate_payment_attempt(
        self, info: GraphQLInfo, data: InitiatePaymentAttemptInput
    ) -> InitiatePaymentAttemptResponse:
        initiated = await container.payment_use_case().initiate_payment_attempt(
            user_id=info.context.user_id, order_id=data.order_id, return_url=data.return_url
        )
        return InitiatePaymentAttemptResponse(
            redirect_url=initiated.redirect_url,
            payment_attempt=PaymentAttempt.from_entity(initiated.payment_attempt),
            order=Order.from_entity(initiated.order),
        )
