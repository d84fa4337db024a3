from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.service.product.domain.product_entity import MerchantEntity, ProductEntity


class IProductRepo(ABC):
    @abstractmethod
    async def create_merchant(self, *, merchant: MerchantEntity) -> MerchantEntity:
        pass

    @abstractmethod
    async def get_merchant(self, *, merchant_id: UUID) -> Optional[MerchantEntity]:
        pass

    @abstractmethod
    async def get_merchant_for_order(self, *, order_id: UUID) -> Optional[MerchantEntity]:
        pass

    @abstractmethod
    async def find_many_merchants(self) -> list[MerchantEntity]:
        pass

    @abstractmethod
    async def create_product(self, *, product: ProductEntity) -> ProductEntity:
        pass

    @abstractmethod
    async def get_product(self, *, product_id: UUID) -> Optional[ProductEntity]:
        pass

    @abstractmethod
    async def find_many_products(self) -> list[ProductEntity]:
        pass
