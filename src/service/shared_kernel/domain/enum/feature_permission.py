"""Feature Permission Enum"""

from enum import StrEnum


class FeaturePermission(StrEnum):
    ARCHIVE_VIEW_DOCUMENTS = 'ARCHIVE_VIEW_DOCUMENTS'
    ARCHIVE_WRITE_DOCUMENTS = 'ARCHIVE_WRITE_DOCUMENTS'
    EVENT_WRITE_SIGN_UPS = 'EVENT_WRITE_SIGN_UPS'
    CABIN_ADMIN = 'CABIN_ADMIN'
