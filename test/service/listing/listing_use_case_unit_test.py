"""
Unit tests for ListingUseCase

Test Focus:
1. Listings are managed by members of the owning organization
2. Field validation (name length, closing time, application url)
3. Only open listings are returned
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from src.platform.exception.exceptions import (
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
    UnauthorizedError,
)
from src.service.listing.app.command.listing_use_case import ListingUseCase
from src.service.listing.domain.listing_entity import ListingEntity


@pytest.fixture
def organization_id():
    return uuid4()


@pytest.fixture
def next_week() -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=7)


@pytest.fixture
def mock_listing_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.create.side_effect = lambda *, listing: listing
    repo.update.side_effect = lambda *, listing: listing
    return repo


@pytest.fixture
def mock_permission_service() -> AsyncMock:
    service = AsyncMock()
    service.has_role.return_value = True
    return service


@pytest.fixture
def use_case(mock_listing_repo, mock_permission_service) -> ListingUseCase:
    return ListingUseCase(listing_repo=mock_listing_repo, permission_service=mock_permission_service)


@pytest.mark.unit
class TestCreateListing:
    @pytest.mark.asyncio
    async def test_create_success(self, use_case: ListingUseCase, organization_id, next_week):
        listing = await use_case.create(
            user_id=uuid4(),
            organization_id=organization_id,
            name='Styreverv',
            closes_at=next_week,
            application_url='https://forms.indokntnu.no/styreverv',
        )

        assert listing.name == 'Styreverv'
        assert listing.description == ''

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'overrides',
        [
            {'name': 'S'},
            {'name': 'x' * 101},
            {'closes_at': datetime.now(timezone.utc) - timedelta(hours=1)},
            {'application_url': 'not a url'},
            {'description': 'x' * 10001},
        ],
    )
    async def test_create_fail__invalid_fields(
        self, use_case: ListingUseCase, organization_id, next_week, overrides, mock_listing_repo
    ):
        fields = {'name': 'Styreverv', 'closes_at': next_week} | overrides

        with pytest.raises(InvalidArgumentError):
            await use_case.create(user_id=uuid4(), organization_id=organization_id, **fields)
        mock_listing_repo.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_fail__not_member(
        self, use_case: ListingUseCase, organization_id, next_week, mock_permission_service
    ):
        mock_permission_service.has_role.return_value = False

        with pytest.raises(PermissionDeniedError):
            await use_case.create(
                user_id=uuid4(), organization_id=organization_id, name='Verv', closes_at=next_week
            )

    @pytest.mark.asyncio
    async def test_create_fail__anonymous(self, use_case: ListingUseCase, organization_id, next_week):
        with pytest.raises(UnauthorizedError):
            await use_case.create(
                user_id=None, organization_id=organization_id, name='Verv', closes_at=next_week
            )


@pytest.mark.unit
class TestUpdateAndQuery:
    @pytest.mark.asyncio
    async def test_update__past_closing_time_kept_when_not_changed(
        self, use_case: ListingUseCase, organization_id, mock_listing_repo
    ):
        """
        Given: a listing that has already closed
        When: only its description is edited
        Then: the closing time is not re-validated
        """
        # Arrange
        listing = ListingEntity(
            name='Styreverv',
            closes_at=datetime.now(timezone.utc) - timedelta(days=1),
            organization_id=organization_id,
        )
        mock_listing_repo.get_by_id.return_value = listing

        # Act
        updated = await use_case.update(
            user_id=uuid4(), listing_id=listing.id, description='Søk nå'
        )

        # Assert
        assert updated.description == 'Søk nå'

    @pytest.mark.asyncio
    async def test_get_fail__unknown_listing(self, use_case: ListingUseCase, mock_listing_repo):
        mock_listing_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await use_case.get(listing_id=uuid4())

    @pytest.mark.asyncio
    async def test_find_many__only_open_listings(
        self, use_case: ListingUseCase, mock_listing_repo
    ):
        before = datetime.now(timezone.utc)

        await use_case.find_many()

        kwargs = mock_listing_repo.find_many.await_args.kwargs
        assert kwargs['closes_at_gte'] >= before
        assert kwargs['organization_id'] is None
