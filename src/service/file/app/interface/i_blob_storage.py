"""Blob Storage Interface (Port)

File contents never pass through the API; clients upload and download
directly against short-lived signed URLs.
"""

from abc import ABC, abstractmethod
from typing import Optional


class IBlobStorage(ABC):
    @abstractmethod
    async def create_upload_url(self, *, name: str) -> str:
        pass

    @abstractmethod
    async def create_download_url(self, *, name: str, download_as: Optional[str] = None) -> str:
        """
        Args:
            name: Blob key
            download_as: File name the browser should save the download as
        """
        pass
