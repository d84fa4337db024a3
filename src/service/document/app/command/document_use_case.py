from typing import Optional
from uuid import UUID

import attrs

from src.platform.exception.exceptions import (
    NotFoundError,
    PermissionDeniedError,
    UnauthorizedError,
)
from src.platform.logging.loguru_io import Logger
from src.service.document.app.interface.i_document_repo import IDocumentRepo
from src.service.document.domain.document_entity import (
    DocumentCategoryEntity,
    DocumentEntity,
    validate_name,
)
from src.service.file.app.command.file_use_case import FileUseCase
from src.service.shared_kernel.app.interface.i_permission_service import IPermissionService
from src.service.shared_kernel.domain.enum.feature_permission import FeaturePermission


PERMISSION_DENIED_MESSAGE = 'You do not have the permission required to perform this action.'


@attrs.define(frozen=True)
class NewDocument:
    document: DocumentEntity
    upload_url: str


class DocumentUseCase:
    """Document archive; writes need ARCHIVE_WRITE_DOCUMENTS, reads ARCHIVE_VIEW_DOCUMENTS"""

    def __init__(
        self,
        *,
        document_repo: IDocumentRepo,
        permission_service: IPermissionService,
        file_use_case: FileUseCase,
    ) -> None:
        self.document_repo = document_repo
        self.permission_service = permission_service
        self.file_use_case = file_use_case

    @Logger.io
    async def create(
        self,
        *,
        user_id: Optional[UUID],
        name: str,
        file_extension: str,
        description: str = '',
        category_names: Optional[list[str]] = None,
    ) -> NewDocument:
        await self._require(user_id, FeaturePermission.ARCHIVE_WRITE_DOCUMENTS)
        # before a file row is created
        validate_name(name)

        upload = await self.file_use_case.create_file_upload_url(
            user_id=user_id, extension=file_extension
        )
        document = await self.document_repo.create(
            document=DocumentEntity.create(
                name=name, file_id=upload.file.id, description=description
            ),
            category_names=category_names,
        )
        return NewDocument(document=document, upload_url=upload.url)

    @Logger.io
    async def update(
        self,
        *,
        user_id: Optional[UUID],
        document_id: UUID,
        name: Optional[str] = None,
        description: Optional[str] = None,
        category_names: Optional[list[str]] = None,
    ) -> DocumentEntity:
        await self._require(user_id, FeaturePermission.ARCHIVE_WRITE_DOCUMENTS)
        document = await self._get(document_id)
        document.apply_update(name=name, description=description)
        return await self.document_repo.update(document=document, category_names=category_names)

    @Logger.io
    async def delete(self, *, user_id: Optional[UUID], document_id: UUID) -> DocumentEntity:
        await self._require(user_id, FeaturePermission.ARCHIVE_WRITE_DOCUMENTS)
        return await self.document_repo.delete(document_id=document_id)

    @Logger.io
    async def find_many(
        self, *, user_id: Optional[UUID], category_ids: Optional[list[UUID]] = None
    ) -> list[DocumentEntity]:
        await self._require(user_id, FeaturePermission.ARCHIVE_VIEW_DOCUMENTS)
        return await self.document_repo.find_many(category_ids=category_ids)

    @Logger.io
    async def get(self, *, user_id: Optional[UUID], document_id: UUID) -> DocumentEntity:
        await self._require(user_id, FeaturePermission.ARCHIVE_VIEW_DOCUMENTS)
        return await self._get(document_id)

    @Logger.io
    async def find_many_categories(self, *, user_id: Optional[UUID]) -> list[DocumentCategoryEntity]:
        await self._require(user_id, FeaturePermission.ARCHIVE_VIEW_DOCUMENTS)
        return await self.document_repo.find_many_categories()

    @Logger.io
    async def delete_category(
        self, *, user_id: Optional[UUID], category_id: UUID
    ) -> DocumentCategoryEntity:
        await self._require(user_id, FeaturePermission.ARCHIVE_WRITE_DOCUMENTS)
        return await self.document_repo.delete_category(category_id=category_id)

    async def _get(self, document_id: UUID) -> DocumentEntity:
        document = await self.document_repo.get_by_id(document_id=document_id)
        if document is None:
            raise NotFoundError(f'Document {document_id} not found')
        return document

    async def _require(self, user_id: Optional[UUID], permission: FeaturePermission) -> None:
        if user_id is None:
            raise UnauthorizedError()
        allowed = await self.permission_service.has_feature_permission(
            user_id=user_id, feature_permission=permission
        )
        if not allowed:
            raise PermissionDeniedError(PERMISSION_DENIED_MESSAGE)
