from typing import AsyncContextManager, Callable, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.file.app.interface.i_file_repo import IFileRepo
from src.service.file.domain.file_entity import FileEntity
from src.service.file.driven_adapter.model.file_model import FileModel


class FileRepoImpl(IFileRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @Logger.io
    async def create(self, *, file: FileEntity) -> FileEntity:
        async with self.session_factory() as session:
            model = FileModel(id=file.id, user_id=file.user_id, name=file.name)
            session.add(model)
            await session.commit()
            return self._model_to_entity(model)

    @Logger.io
    async def get_by_id(self, *, file_id: UUID) -> Optional[FileEntity]:
        async with self.session_factory() as session:
            model = await session.get(FileModel, file_id)
            return self._model_to_entity(model) if model else None

    @staticmethod
    def _model_to_entity(model: FileModel) -> FileEntity:
        return FileEntity(id=model.id, user_id=model.user_id, name=model.name)
