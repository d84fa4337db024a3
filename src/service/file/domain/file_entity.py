from typing import Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import InvalidArgumentError


ALLOWED_EXTENSIONS = ('jpg', 'jpeg', 'png', 'gif', 'pdf', 'docx', 'txt')


@attrs.define(kw_only=True)
class FileEntity:
    user_id: Optional[UUID]
    name: str
    id: UUID = attrs.field(factory=uuid7)

    @classmethod
    def create(cls, *, user_id: UUID, extension: str) -> 'FileEntity':
        if extension not in ALLOWED_EXTENSIONS:
            raise InvalidArgumentError(
                f'File type not allowed. Allowed extensions: {", ".join(ALLOWED_EXTENSIONS)}'
            )
        file_id = uuid7()
        return cls(id=file_id, user_id=user_id, name=f'{file_id}.{extension}')

    @property
    def extension(self) -> str:
        return self.name.rsplit('.', 1)[-1]
