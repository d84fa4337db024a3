from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.service.listing.domain.listing_entity import ListingEntity


class IListingRepo(ABC):
    @abstractmethod
    async def create(self, *, listing: ListingEntity) -> ListingEntity:
        pass

    @abstractmethod
    async def update(self, *, listing: ListingEntity) -> ListingEntity:
        pass

    @abstractmethod
    async def delete(self, *, listing_id: UUID) -> ListingEntity:
        pass

    @abstractmethod
    async def get_by_id(self, *, listing_id: UUID) -> Optional[ListingEntity]:
        pass

    @abstractmethod
    async def find_many(
        self,
        *,
        closes_at_gte: Optional[datetime] = None,
        organization_id: Optional[UUID] = None,
    ) -> list[ListingEntity]:
        pass
