"""Shared Kernel Enums"""

from src.service.shared_kernel.domain.enum.email_type import EmailType
from src.service.shared_kernel.domain.enum.feature_permission import FeaturePermission
from src.service.shared_kernel.domain.enum.role import Role

__all__ = ['EmailType', 'FeaturePermission', 'Role']
