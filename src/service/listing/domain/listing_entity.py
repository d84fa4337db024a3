from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import InvalidArgumentError
from src.platform.validation.validators import is_valid_url


NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 10000


@attrs.define(kw_only=True)
class ListingEntity:
    name: str
    closes_at: datetime
    organization_id: UUID
    description: str = ''
    application_url: str = ''
    id: UUID = attrs.field(factory=uuid7)

    @classmethod
    def create(
        cls,
        *,
        name: str,
        closes_at: datetime,
        organization_id: UUID,
        description: Optional[str] = None,
        application_url: Optional[str] = None,
    ) -> 'ListingEntity':
        listing = cls(
            name=name,
            closes_at=closes_at,
            organization_id=organization_id,
            description=description or '',
            application_url=application_url or '',
        )
        listing.validate()
        return listing

    def apply_update(
        self,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        closes_at: Optional[datetime] = None,
        application_url: Optional[str] = None,
    ) -> None:
        if name is not None:
            self.name = name
        if description is not None:
            self.description = description
        if closes_at is not None:
            self.closes_at = closes_at
        if application_url is not None:
            self.application_url = application_url
        self.validate(check_closes_at=closes_at is not None)

    def validate(self, *, check_closes_at: bool = True) -> None:
        if not NAME_MIN_LENGTH <= len(self.name) <= NAME_MAX_LENGTH:
            raise InvalidArgumentError(
                f'name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters'
            )
        if len(self.description) > DESCRIPTION_MAX_LENGTH:
            raise InvalidArgumentError(
                f'description must be at most {DESCRIPTION_MAX_LENGTH} characters'
            )
        if check_closes_at and self.closes_at <= datetime.now(timezone.utc):
            raise InvalidArgumentError('closesAt must be in the future')
        if self.application_url and not is_valid_url(self.application_url):
            raise InvalidArgumentError('applicationUrl must be a valid URL')
