from typing import Optional
from uuid import UUID

import strawberry

from src.platform.config.di import container
from src.platform.graphql.context import GraphQLInfo
from src.service.document.driving_adapter.graphql.types import (
    CreateDocumentInput,
    CreateDocumentResponse,
    Document,
    DocumentCategoriesResponse,
    DocumentCategory,
    DocumentCategoryResponse,
    DocumentResponse,
    DocumentsInput,
    DocumentsResponse,
    UpdateDocumentInput,
)


@strawberry.type
class DocumentQuery:
    @strawberry.field
    async def document(self, info: GraphQLInfo, id: UUID) -> DocumentResponse:
        document = await container.document_use_case().get(
            user_id=info.context.user_id, document_id=id
        )
        return DocumentResponse(document=Document.from_entity(document))

    @strawberry.field
    async def documents(
        self, info: GraphQLInfo, data: Optional[DocumentsInput] = None
    ) -> DocumentsResponse:
        documents = await container.document_use_case().find_many(
            user_id=info.context.user_id, category_ids=data.category_ids if data else None
        )
        return DocumentsResponse(
            documents=[Document.from_entity(d) for d in documents], total=len(documents)
        )

    @strawberry.field
    async def document_categories(self, info: GraphQLInfo) -> DocumentCategoriesResponse:
        categories = await container.document_use_case().find_many_categories(
            user_id=info.context.user_id
        )
        return DocumentCategoriesResponse(
            categories=[DocumentCategory.from_entity(c) for c in categories]
        )


@strawberry.type
class DocumentMutation:
    @strawberry.mutation
    async def create_document(
        self, info: GraphQLInfo, data: CreateDocumentInput
    ) -> CreateDocumentResponse:
        result = await container.document_use_case().create(
            user_id=info.context.user_id,
            name=data.name,
            file_extension=data.file_extension,
            description=data.description,
            category_names=data.categories,
        )
        return CreateDocumentResponse(
            document=Document.from_entity(result.document), upload_url=result.upload_url
        )

    @strawberry.mutation
    async def update_document(
        self, info: GraphQLInfo, data: UpdateDocumentInput
    ) -> DocumentResponse:
        document = await container.document_use_case().update(
            user_id=info.context.user_id,
            document_id=data.id,
            name=data.name,
            description=data.description,
            category_names=data.categories,
        )
        return DocumentResponse(document=Document.from_entity(document))

    @strawberry.mutation
    async def delete_document(self, info: GraphQLInfo, id: UUID) -> DocumentResponse:
        document = await container.document_use_case().delete(
            user_id=info.context.user_id, document_id=id
        )
        return DocumentResponse(document=Document.from_entity(document))

    @strawberry.mutation
    async def delete_document_category(
        self, info: GraphQLInfo, id: UUID
    ) -> DocumentCategoryResponse:
        category = await container.document_use_case().delete_category(
            user_id=info.context.user_id, category_id=id
        )
        return DocumentCategoryResponse(category=DocumentCategory.from_entity(category))
