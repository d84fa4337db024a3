from typing import Optional
from uuid import UUID

from src.platform.exception.exceptions import (
    NotFoundError,
    PermissionDeniedError,
    UnauthorizedError,
)
from src.platform.logging.loguru_io import Logger
from src.service.product.app.interface.i_order_repo import IOrderRepo
from src.service.product.app.interface.i_product_repo import IProductRepo
from src.service.product.domain.product_entity import OrderEntity
from src.service.shared_kernel.app.interface.i_permission_service import IPermissionService


class OrderUseCase:
    """
    Orders

    Visibility: super users see every order, everyone else only their own.
    Someone else's order is reported as not found rather than forbidden.
    """

    def __init__(
        self,
        *,
        order_repo: IOrderRepo,
        product_repo: IProductRepo,
        permission_service: IPermissionService,
    ) -> None:
        self.order_repo = order_repo
        self.product_repo = product_repo
        self.permission_service = permission_service

    @Logger.io
    async def create_order(self, *, user_id: Optional[UUID], product_id: UUID) -> OrderEntity:
        if user_id is None:
            raise UnauthorizedError('You must be logged in to create an order')
        product = await self.product_repo.get_product(product_id=product_id)
        if product is None:
            raise NotFoundError('Product not found')
        order = await self.order_repo.create_order(
            order=OrderEntity.create(product=product, user_id=user_id)
        )
        Logger.base.info(f'💳 [ORDER] Created order {order.id} for product {product_id}')
        return order

    @Logger.io
    async def get_order(self, *, user_id: Optional[UUID], order_id: UUID) -> OrderEntity:
        if user_id is None:
            raise UnauthorizedError('You must be logged in to get an order')
        order = await self.order_repo.get_order(order_id=order_id)
        if order is None:
            raise NotFoundError('Order not found')
        if order.user_id != user_id and not await self.permission_service.is_super_user(
            user_id=user_id
        ):
            raise NotFoundError('Order not found')
        return order

    @Logger.io
    async def find_many_orders(
        self,
        *,
        user_id: Optional[UUID],
        for_user_id: Optional[UUID] = None,
        product_id: Optional[UUID] = None,
    ) -> list[OrderEntity]:
        if user_id is None:
            raise UnauthorizedError('You must be logged in to get orders')
        if await self.permission_service.is_super_user(user_id=user_id):
            return await self.order_repo.find_many_orders(
                user_id=for_user_id, product_id=product_id
            )
        if for_user_id is not None and for_user_id != user_id:
            raise PermissionDeniedError('You can only get your own orders')
        return await self.order_repo.find_many_orders(user_id=user_id, product_id=product_id)
