from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.service.document.domain.document_entity import DocumentCategoryEntity, DocumentEntity


class IDocumentRepo(ABC):
    @abstractmethod
    async def create(
        self, *, document: DocumentEntity, category_names: Optional[list[str]] = None
    ) -> DocumentEntity:
        """Categories are referenced by name and created when missing"""
        pass

    @abstractmethod
    async def update(
        self, *, document: DocumentEntity, category_names: Optional[list[str]] = None
    ) -> DocumentEntity:
        """category_names replaces the document's categories; None leaves them"""
        pass

    @abstractmethod
    async def delete(self, *, document_id: UUID) -> DocumentEntity:
        pass

    @abstractmethod
    async def get_by_id(self, *, document_id: UUID) -> Optional[DocumentEntity]:
        pass

    @abstractmethod
    async def find_many(
        self, *, category_ids: Optional[list[UUID]] = None
    ) -> list[DocumentEntity]:
        pass

    @abstractmethod
    async def find_many_categories(self) -> list[DocumentCategoryEntity]:
        pass

    @abstractmethod
    async def delete_category(self, *, category_id: UUID) -> DocumentCategoryEntity:
        pass
