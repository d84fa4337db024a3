from datetime import datetime
from typing import Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import InvalidArgumentError


NAME_MAX_LENGTH = 255


@attrs.define(kw_only=True)
class DocumentCategoryEntity:
    name: str
    id: UUID = attrs.field(factory=uuid7)


def validate_name(name: str) -> None:
    if not name or len(name) > NAME_MAX_LENGTH:
        raise InvalidArgumentError(
            f'Document name must be between 1 and {NAME_MAX_LENGTH} characters'
        )


@attrs.define(kw_only=True)
class DocumentEntity:
    name: str
    file_id: UUID
    description: str = ''
    categories: list[DocumentCategoryEntity] = attrs.field(factory=list)
    id: UUID = attrs.field(factory=uuid7)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def create(cls, *, name: str, file_id: UUID, description: str = '') -> 'DocumentEntity':
        validate_name(name)
        return cls(name=name, file_id=file_id, description=description)

    def apply_update(self, *, name: Optional[str] = None, description: Optional[str] = None) -> None:
        if name is not None:
            validate_name(name)
            self.name = name
        if description is not None:
            self.description = description
