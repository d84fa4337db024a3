"""Organization Role Enum"""

from enum import StrEnum


class Role(StrEnum):
    ADMIN = 'ADMIN'
    MEMBER = 'MEMBER'
