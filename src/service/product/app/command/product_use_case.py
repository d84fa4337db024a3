from typing import Optional
from uuid import UUID

from src.platform.exception.exceptions import (
    NotFoundError,
    PermissionDeniedError,
    UnauthorizedError,
)
from src.platform.logging.loguru_io import Logger
from src.service.product.app.interface.i_product_repo import IProductRepo
from src.service.product.domain.product_entity import MerchantEntity, ProductEntity
from src.service.shared_kernel.app.interface.i_permission_service import IPermissionService


class ProductUseCase:
    """Merchants and products. Managing merchants is reserved for super users."""

    def __init__(
        self, *, product_repo: IProductRepo, permission_service: IPermissionService
    ) -> None:
        self.product_repo = product_repo
        self.permission_service = permission_service

    @Logger.io
    async def create_merchant(
        self,
        *,
        user_id: Optional[UUID],
        name: str,
        client_id: str,
        client_secret: str,
        serial_number: str,
        subscription_key: str,
    ) -> MerchantEntity:
        await self._require_super_user(user_id, 'You must be a super user to create a merchant.')
        merchant = MerchantEntity.create(
            name=name,
            client_id=client_id,
            client_secret=client_secret,
            serial_number=serial_number,
            subscription_key=subscription_key,
        )
        created = await self.product_repo.create_merchant(merchant=merchant)
        Logger.base.info(f'💳 [PRODUCT] Created merchant {created.name}')
        return created

    @Logger.io
    async def find_many_merchants(self, *, user_id: Optional[UUID]) -> list[MerchantEntity]:
        await self._require_super_user(user_id, 'You must be a super user to view merchants.')
        return await self.product_repo.find_many_merchants()

    @Logger.io
    async def create_product(
        self,
        *,
        user_id: Optional[UUID],
        name: str,
        description: str,
        price: int,
        merchant_id: UUID,
    ) -> ProductEntity:
        await self._require_super_user(user_id, 'You must be a super user to create a product.')
        return await self.create_ticket_product(
            name=name, description=description, price=price, merchant_id=merchant_id
        )

    @Logger.io
    async def create_ticket_product(
        self, *, name: str, description: str, price: int, merchant_id: UUID
    ) -> ProductEntity:
        """Create a product without a permission check, callers authorize themselves"""
        merchant = await self.product_repo.get_merchant(merchant_id=merchant_id)
        if merchant is None:
            raise NotFoundError('Merchant not found')
        product = ProductEntity.create(
            name=name, description=description, price=price, merchant_id=merchant_id
        )
        return await self.product_repo.create_product(product=product)

    @Logger.io
    async def get_product(self, *, product_id: UUID) -> ProductEntity:
        product = await self.product_repo.get_product(product_id=product_id)
        if product is None:
            raise NotFoundError('Product not found')
        return product

    @Logger.io
    async def find_many_products(self) -> list[ProductEntity]:
        return await self.product_repo.find_many_products()

    async def _require_super_user(self, user_id: Optional[UUID], message: str) -> None:
        if user_id is None:
            raise UnauthorizedError()
        if not await self.permission_service.is_super_user(user_id=user_id):
            raise PermissionDeniedError(message)
