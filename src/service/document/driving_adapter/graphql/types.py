from datetime import datetime
from typing import Optional
from uuid import UUID

import strawberry

from src.platform.config.di import container
from src.service.document.domain.document_entity import DocumentCategoryEntity, DocumentEntity
from src.service.file.driving_adapter.graphql.types import RemoteFile


@strawberry.type
class DocumentCategory:
    id: UUID
    name: str

    @classmethod
    def from_entity(cls, entity: DocumentCategoryEntity) -> 'DocumentCategory':
        return cls(id=entity.id, name=entity.name)


@strawberry.type
class Document:
    id: UUID
    name: str
    description: str
    file_id: UUID
    categories: list[DocumentCategory]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_entity(cls, entity: DocumentEntity) -> 'Document':
        return cls(
            id=entity.id,
            name=entity.name,
            description=entity.description,
            file_id=entity.file_id,
            categories=[DocumentCategory.from_entity(c) for c in entity.categories],
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    @strawberry.field
    async def file(self) -> RemoteFile:
        file = await container.file_use_case().get_file(file_id=self.file_id)
        return RemoteFile.from_entity(file)


@strawberry.type
class DocumentResponse:
    document: Document


@strawberry.type
class DocumentsResponse:
    documents: list[Document]
    total: int


@strawberry.type
class CreateDocumentResponse:
    document: Document
    upload_url: str


@strawberry.type
class DocumentCategoriesResponse:
    categories: list[DocumentCategory]


@strawberry.type
class DocumentCategoryResponse:
    category: DocumentCategory


@strawberry.input
class CreateDocumentInput:
    name: str
    file_extension: str
    description: str = ''
    categories: Optional[list[str]] = None


@strawberry.input
class UpdateDocumentInput:
    id: UUID
    name: Optional[str] = None
    description: Optional[str] = None
    categories: Optional[list[str]] = None


@strawberry.input
class DocumentsInput:
    category_ids: Optional[list[UUID]] = None
