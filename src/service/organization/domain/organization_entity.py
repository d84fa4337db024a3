from datetime import datetime
from typing import Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import InvalidArgumentError
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.enum.feature_permission import FeaturePermission
from src.service.shared_kernel.domain.enum.role import Role


NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 10000


@attrs.define(kw_only=True)
class OrganizationUpdate:
    name: Optional[str] = None
    description: Optional[str] = None
    logo_file_id: Optional[UUID] = None
    feature_permissions: Optional[list[FeaturePermission]] = None


@attrs.define(kw_only=True)
class OrganizationEntity:
    name: str
    description: str = ''
    id: UUID = attrs.field(factory=uuid7)
    logo_file_id: Optional[UUID] = None
    feature_permissions: list[FeaturePermission] = attrs.field(factory=list)
    created_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        name: str,
        description: Optional[str] = None,
        feature_permissions: Optional[list[FeaturePermission]] = None,
    ) -> 'OrganizationEntity':
        cls._validate_name(name)
        cls._validate_description(description)
        return cls(
            name=name,
            description=description or '',
            feature_permissions=list(feature_permissions or []),
        )

    def apply_update(self, update: OrganizationUpdate) -> None:
        if update.name is not None:
            self._validate_name(update.name)
            self.name = update.name
        if update.description is not None:
            self._validate_description(update.description)
            self.description = update.description
        if update.logo_file_id is not None:
            self.logo_file_id = update.logo_file_id
        if update.feature_permissions is not None:
            self.feature_permissions = list(update.feature_permissions)

    def has_feature_permission(self, feature_permission: FeaturePermission) -> bool:
        return feature_permission in self.feature_permissions

    @staticmethod
    def _validate_name(name: str) -> None:
        if not 1 <= len(name) <= NAME_MAX_LENGTH:
            raise InvalidArgumentError(
                f'organization name must be between 1 and {NAME_MAX_LENGTH} characters'
            )

    @staticmethod
    def _validate_description(description: Optional[str]) -> None:
        if description and len(description) > DESCRIPTION_MAX_LENGTH:
            raise InvalidArgumentError(
                f'organization description must be at most {DESCRIPTION_MAX_LENGTH} characters'
            )


@attrs.define(kw_only=True)
class MemberEntity:
    user_id: UUID
    organization_id: UUID
    role: Role = Role.MEMBER
    id: UUID = attrs.field(factory=uuid7)
    created_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
