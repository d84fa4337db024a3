from typing import AsyncContextManager, Callable, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import InvalidArgumentError
from src.platform.logging.loguru_io import Logger
from src.service.product.app.interface.i_product_repo import IProductRepo
from src.service.product.domain.product_entity import MerchantEntity, ProductEntity
from src.service.product.driven_adapter.model.product_model import (
    MerchantModel,
    OrderModel,
    ProductModel,
)


class ProductRepoImpl(IProductRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @Logger.io
    async def create_merchant(self, *, merchant: MerchantEntity) -> MerchantEntity:
        async with self.session_factory() as session:
            model = MerchantModel(
                id=merchant.id,
                name=merchant.name,
                client_id=merchant.client_id,
                client_secret=merchant.client_secret,
                serial_number=merchant.serial_number,
                subscription_key=merchant.subscription_key,
            )
            session.add(model)
            try:
                await session.commit()
            except IntegrityError as e:
                raise InvalidArgumentError(
                    'A merchant with this name or serial number already exists'
                ) from e
            return self._merchant_to_entity(model)

    @Logger.io
    async def get_merchant(self, *, merchant_id: UUID) -> Optional[MerchantEntity]:
        async with self.session_factory() as session:
            model = await session.get(MerchantModel, merchant_id)
            return self._merchant_to_entity(model) if model else None

    @Logger.io
    async def get_merchant_for_order(self, *, order_id: UUID) -> Optional[MerchantEntity]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(MerchantModel)
                .join(ProductModel, ProductModel.merchant_id == MerchantModel.id)
                .join(OrderModel, OrderModel.product_id == ProductModel.id)
                .where(OrderModel.id == order_id)
            )
            model = result.scalar_one_or_none()
            return self._merchant_to_entity(model) if model else None

    @Logger.io
    async def find_many_merchants(self) -> list[MerchantEntity]:
        async with self.session_factory() as session:
            result = await session.execute(select(MerchantModel).order_by(MerchantModel.name))
            return [self._merchant_to_entity(m) for m in result.scalars().all()]

    @Logger.io
    async def create_product(self, *, product: ProductEntity) -> ProductEntity:
        async with self.session_factory() as session:
            model = ProductModel(
                id=product.id,
                name=product.name,
                description=product.description,
                price=product.price,
                merchant_id=product.merchant_id,
                version=product.version,
            )
            session.add(model)
            try:
                await session.commit()
            except IntegrityError as e:
                raise InvalidArgumentError(f'Merchant {product.merchant_id} does not exist') from e
            return self._product_to_entity(model)

    @Logger.io
    async def get_product(self, *, product_id: UUID) -> Optional[ProductEntity]:
        async with self.session_factory() as session:
            model = await session.get(ProductModel, product_id)
            return self._product_to_entity(model) if model else None

    @Logger.io
    async def find_many_products(self) -> list[ProductEntity]:
        async with self.session_factory() as session:
            result = await session.execute(select(ProductModel).order_by(ProductModel.created_at))
            return [self._product_to_entity(m) for m in result.scalars().all()]

    @staticmethod
    def _merchant_to_entity(model: MerchantModel) -> MerchantEntity:
        return MerchantEntity(
            id=model.id,
            name=model.name,
            client_id=model.client_id,
            client_secret=model.client_secret,
            serial_number=model.serial_number,
            subscription_key=model.subscription_key,
        )

    @staticmethod
    def _product_to_entity(model: ProductModel) -> ProductEntity:
        return ProductEntity(
            id=model.id,
            name=model.name,
            description=model.description,
            price=model.price,
            merchant_id=model.merchant_id,
            version=model.version,
        )
