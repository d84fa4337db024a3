"""Permission Service Interface (Port)

Every service that guards writes by organization membership or feature
permission depends on this port instead of the organization repositories.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.service.shared_kernel.domain.enum.feature_permission import FeaturePermission
from src.service.shared_kernel.domain.enum.role import Role


class IPermissionService(ABC):
    @abstractmethod
    async def is_super_user(self, *, user_id: Optional[UUID]) -> bool:
        pass

    @abstractmethod
    async def has_role(
        self,
        *,
        user_id: Optional[UUID],
        organization_id: UUID,
        role: Role,
        feature_permission: Optional[FeaturePermission] = None,
    ) -> bool:
        """
        Check the user's role in an organization

        ADMIN satisfies any role requirement. When feature_permission is given,
        the organization must also hold that permission. Super users always pass.
        """
        pass

    @abstractmethod
    async def has_feature_permission(
        self, *, user_id: Optional[UUID], feature_permission: FeaturePermission
    ) -> bool:
        """
        True if the user is a super user, belongs to an organization with the
        permission, or has a confirmed study program with the permission.
        """
        pass
