from typing import Optional
from uuid import UUID

import attrs

from src.platform.exception.exceptions import NotFoundError, UnauthorizedError
from src.platform.logging.loguru_io import Logger
from src.service.file.app.interface.i_blob_storage import IBlobStorage
from src.service.file.app.interface.i_file_repo import IFileRepo
from src.service.file.domain.file_entity import FileEntity


@attrs.define(frozen=True)
class FileWithUrl:
    file: FileEntity
    url: str


class FileUseCase:
    def __init__(self, *, file_repo: IFileRepo, blob_storage: IBlobStorage) -> None:
        self.file_repo = file_repo
        self.blob_storage = blob_storage

    @Logger.io
    async def create_file_upload_url(
        self, *, user_id: Optional[UUID], extension: str
    ) -> FileWithUrl:
        """
        Register a file and hand out a signed URL the client uploads its contents to

        Raises:
            UnauthorizedError: not logged in
            InvalidArgumentError: extension is not allowed
        """
        if user_id is None:
            raise UnauthorizedError('You must be logged in to upload a file.')
        file = FileEntity.create(user_id=user_id, extension=extension)
        file = await self.file_repo.create(file=file)
        url = await self.blob_storage.create_upload_url(name=file.name)
        return FileWithUrl(file=file, url=url)

    @Logger.io
    async def create_file_download_url(
        self, *, file_id: UUID, download_as: Optional[str] = None
    ) -> FileWithUrl:
        file = await self.get_file(file_id=file_id)
        if download_as and '.' not in download_as:
            download_as = f'{download_as}.{file.extension}'
        url = await self.blob_storage.create_download_url(name=file.name, download_as=download_as)
        return FileWithUrl(file=file, url=url)

    @Logger.io
    async def get_file(self, *, file_id: UUID) -> FileEntity:
        file = await self.file_repo.get_by_id(file_id=file_id)
        if file is None:
            raise NotFoundError(f'File {file_id} not found')
        return file
