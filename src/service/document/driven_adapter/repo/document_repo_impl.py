from typing import AsyncContextManager, Callable, Optional
from uuid import UUID

from sqlalchemy import delete as sql_delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import InvalidArgumentError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.document.app.interface.i_document_repo import IDocumentRepo
from src.service.document.domain.document_entity import DocumentCategoryEntity, DocumentEntity
from src.service.document.driven_adapter.model.document_model import (
    DocumentCategoryModel,
    DocumentModel,
    document_category_link,
)


class DocumentRepoImpl(IDocumentRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @Logger.io
    async def create(
        self, *, document: DocumentEntity, category_names: Optional[list[str]] = None
    ) -> DocumentEntity:
        async with self.session_factory() as session:
            model = DocumentModel(
                id=document.id,
                name=document.name,
                description=document.description,
                file_id=document.file_id,
                categories=await self._get_or_create_categories(session, category_names or []),
            )
            session.add(model)
            try:
                await session.commit()
            except IntegrityError as e:
                raise InvalidArgumentError('A document for this file already exists') from e
            await session.refresh(model)
            return self._model_to_entity(model)

    @Logger.io
    async def update(
        self, *, document: DocumentEntity, category_names: Optional[list[str]] = None
    ) -> DocumentEntity:
        async with self.session_factory() as session:
            model = await session.get(DocumentModel, document.id, with_for_update=True)
            if model is None:
                raise NotFoundError(f'Document {document.id} not found')
            model.name = document.name
            model.description = document.description
            if category_names is not None:
                model.categories = await self._get_or_create_categories(session, category_names)
            await session.commit()
            await session.refresh(model)
            return self._model_to_entity(model)

    @Logger.io
    async def delete(self, *, document_id: UUID) -> DocumentEntity:
        async with self.session_factory() as session:
            model = await session.get(DocumentModel, document_id)
            if model is None:
                raise NotFoundError(f'Document {document_id} not found')
            document = self._model_to_entity(model)
            await session.delete(model)
            await session.commit()
            return document

    @Logger.io
    async def get_by_id(self, *, document_id: UUID) -> Optional[DocumentEntity]:
        async with self.session_factory() as session:
            model = await session.get(DocumentModel, document_id)
            return self._model_to_entity(model) if model else None

    @Logger.io
    async def find_many(
        self, *, category_ids: Optional[list[UUID]] = None
    ) -> list[DocumentEntity]:
        async with self.session_factory() as session:
            stmt = select(DocumentModel).order_by(DocumentModel.created_at.desc())
            if category_ids:
                stmt = stmt.where(
                    DocumentModel.id.in_(
                        select(document_category_link.c.document_id).where(
                            document_category_link.c.category_id.in_(category_ids)
                        )
                    )
                )
            result = await session.execute(stmt)
            return [self._model_to_entity(m) for m in result.scalars().all()]

    @Logger.io
    async def find_many_categories(self) -> list[DocumentCategoryEntity]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(DocumentCategoryModel).order_by(DocumentCategoryModel.name)
            )
            return [self._category_to_entity(m) for m in result.scalars().all()]

    @Logger.io
    async def delete_category(self, *, category_id: UUID) -> DocumentCategoryEntity:
        async with self.session_factory() as session:
            result = await session.execute(
                sql_delete(DocumentCategoryModel)
                .where(DocumentCategoryModel.id == category_id)
                .returning(DocumentCategoryModel)
            )
            model = result.scalar_one_or_none()
            if model is None:
                raise NotFoundError(f'Category {category_id} not found')
            await session.commit()
            return self._category_to_entity(model)

    @staticmethod
    async def _get_or_create_categories(
        session: AsyncSession, names: list[str]
    ) -> list[DocumentCategoryModel]:
        names = list(dict.fromkeys(name.strip() for name in names if name.strip()))
        if not names:
            return []
        result = await session.execute(
            select(DocumentCategoryModel).where(DocumentCategoryModel.name.in_(names))
        )
        existing = {m.name: m for m in result.scalars().all()}
        categories = []
        for name in names:
            model = existing.get(name)
            if model is None:
                model = DocumentCategoryModel(id=uuid7(), name=name)
                session.add(model)
            categories.append(model)
        return categories

    @staticmethod
    def _category_to_entity(model: DocumentCategoryModel) -> DocumentCategoryEntity:
        return DocumentCategoryEntity(id=model.id, name=model.name)

    @classmethod
    def _model_to_entity(cls, model: DocumentModel) -> DocumentEntity:
        return DocumentEntity(
            id=model.id,
            name=model.name,
            description=model.description,
            file_id=model.file_id,
            categories=[cls._category_to_entity(c) for c in model.categories],
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
