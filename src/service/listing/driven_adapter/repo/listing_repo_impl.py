from datetime import datetime
from typing import AsyncContextManager, Callable, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.listing.app.interface.i_listing_repo import IListingRepo
from src.service.listing.domain.listing_entity import ListingEntity
from src.service.listing.driven_adapter.model.listing_model import ListingModel


class ListingRepoImpl(IListingRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @Logger.io
    async def create(self, *, listing: ListingEntity) -> ListingEntity:
        async with self.session_factory() as session:
            model = ListingModel(
                id=listing.id,
                name=listing.name,
                description=listing.description,
                closes_at=listing.closes_at,
                application_url=listing.application_url,
                organization_id=listing.organization_id,
            )
            session.add(model)
            await session.commit()
            return self._model_to_entity(model)

    @Logger.io
    async def update(self, *, listing: ListingEntity) -> ListingEntity:
        async with self.session_factory() as session:
            model = await session.get(ListingModel, listing.id)
            if model is None:
                raise NotFoundError(f'Listing {listing.id} not found')
            model.name = listing.name
            model.description = listing.description
            model.closes_at = listing.closes_at
            model.application_url = listing.application_url
            await session.commit()
            return self._model_to_entity(model)

    @Logger.io
    async def delete(self, *, listing_id: UUID) -> ListingEntity:
        async with self.session_factory() as session:
            model = await session.get(ListingModel, listing_id)
            if model is None:
                raise NotFoundError(f'Listing {listing_id} not found')
            listing = self._model_to_entity(model)
            await session.delete(model)
            await session.commit()
            return listing

    @Logger.io
    async def get_by_id(self, *, listing_id: UUID) -> Optional[ListingEntity]:
        async with self.session_factory() as session:
            model = await session.get(ListingModel, listing_id)
            return self._model_to_entity(model) if model else None

    @Logger.io
    async def find_many(
        self,
        *,
        closes_at_gte: Optional[datetime] = None,
        organization_id: Optional[UUID] = None,
    ) -> list[ListingEntity]:
        async with self.session_factory() as session:
            stmt = select(ListingModel).order_by(ListingModel.closes_at)
            if closes_at_gte is not None:
                stmt = stmt.where(ListingModel.closes_at >= closes_at_gte)
            if organization_id is not None:
                stmt = stmt.where(ListingModel.organization_id == organization_id)
            result = await session.execute(stmt)
            return [self._model_to_entity(m) for m in result.scalars().all()]

    @staticmethod
    def _model_to_entity(model: ListingModel) -> ListingEntity:
        return ListingEntity(
            id=model.id,
            name=model.name,
            description=model.description,
            closes_at=model.closes_at,
            application_url=model.application_url,
            organization_id=model.organization_id,
        )
