from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.service.file.domain.file_entity import FileEntity


class IFileRepo(ABC):
    @abstractmethod
    async def create(self, *, file: FileEntity) -> FileEntity:
        pass

    @abstractmethod
    async def get_by_id(self, *, file_id: UUID) -> Optional[FileEntity]:
        pass
