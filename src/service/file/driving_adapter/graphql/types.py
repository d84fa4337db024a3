from typing import Optional
from uuid import UUID

import strawberry

from src.platform.config.di import container
from src.service.file.domain.file_entity import FileEntity


@strawberry.type
class RemoteFile:
    id: UUID
    name: str
    user_id: Optional[UUID]

    @classmethod
    def from_entity(cls, entity: FileEntity) -> 'RemoteFile':
        return cls(id=entity.id, name=entity.name, user_id=entity.user_id)

    @strawberry.field(description='Presigned download URL, short lived')
    async def url(self, download_as: Optional[str] = None) -> str:
        result = await container.file_use_case().create_file_download_url(
            file_id=self.id, download_as=download_as
        )
        return result.url


@strawberry.type
class UploadFileResponse:
    file: RemoteFile
    upload_url: str
