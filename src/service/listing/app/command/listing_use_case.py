from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from src.platform.exception.exceptions import (
    NotFoundError,
    PermissionDeniedError,
    UnauthorizedError,
)
from src.platform.logging.loguru_io import Logger
from src.service.listing.app.interface.i_listing_repo import IListingRepo
from src.service.listing.domain.listing_entity import ListingEntity
from src.service.shared_kernel.app.interface.i_permission_service import IPermissionService
from src.service.shared_kernel.domain.enum.role import Role


class ListingUseCase:
    def __init__(
        self, *, listing_repo: IListingRepo, permission_service: IPermissionService
    ) -> None:
        self.listing_repo = listing_repo
        self.permission_service = permission_service

    @Logger.io
    async def get(self, *, listing_id: UUID) -> ListingEntity:
        listing = await self.listing_repo.get_by_id(listing_id=listing_id)
        if listing is None:
            raise NotFoundError(f'Listing {listing_id} not found')
        return listing

    @Logger.io
    async def find_many(self, *, organization_id: Optional[UUID] = None) -> list[ListingEntity]:
        """Listings that have not closed yet"""
        return await self.listing_repo.find_many(
            closes_at_gte=datetime.now(timezone.utc), organization_id=organization_id
        )

    @Logger.io
    async def create(
        self,
        *,
        user_id: Optional[UUID],
        organization_id: UUID,
        name: str,
        closes_at: datetime,
        description: Optional[str] = None,
        application_url: Optional[str] = None,
    ) -> ListingEntity:
        await self._require_member(user_id, organization_id)
        listing = ListingEntity.create(
            name=name,
            closes_at=closes_at,
            organization_id=organization_id,
            description=description,
            application_url=application_url,
        )
        return await self.listing_repo.create(listing=listing)

    @Logger.io
    async def update(
        self,
        *,
        user_id: Optional[UUID],
        listing_id: UUID,
        name: Optional[str] = None,
        description: Optional[str] = None,
        closes_at: Optional[datetime] = None,
        application_url: Optional[str] = None,
    ) -> ListingEntity:
        listing = await self.get(listing_id=listing_id)
        await self._require_member(user_id, listing.organization_id)
        listing.apply_update(
            name=name,
            description=description,
            closes_at=closes_at,
            application_url=application_url,
        )
        return await self.listing_repo.update(listing=listing)

    @Logger.io
    async def delete(self, *, user_id: Optional[UUID], listing_id: UUID) -> ListingEntity:
        listing = await self.get(listing_id=listing_id)
        await self._require_member(user_id, listing.organization_id)
        return await self.listing_repo.delete(listing_id=listing_id)

    async def _require_member(self, user_id: Optional[UUID], organization_id: UUID) -> None:
        if user_id is None:
            raise UnauthorizedError()
        is_member = await self.permission_service.has_role(
            user_id=user_id, organization_id=organization_id, role=Role.MEMBER
        )
        if not is_member:
            raise PermissionDeniedError('You must be a member of the organization to do this.')
