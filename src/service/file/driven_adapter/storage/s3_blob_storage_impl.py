"""
S3 blob storage

boto3 is synchronous; presigning resolves credentials and may touch the
network, so calls run in a worker thread.
"""

import asyncio
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import DownstreamServiceError
from src.platform.logging.loguru_io import Logger
from src.service.file.app.interface.i_blob_storage import IBlobStorage


class S3BlobStorageImpl(IBlobStorage):
    def __init__(self, *, s3_client: Any = None) -> None:
        self.bucket = settings.S3_BUCKET
        self._s3_client = s3_client

    def _client(self) -> Any:
        if self._s3_client is None:
            self._s3_client = boto3.client(
                's3', region_name=settings.S3_REGION, endpoint_url=settings.S3_ENDPOINT_URL
            )
        return self._s3_client

    async def _presign(self, operation: str, params: dict[str, Any], expires_in: int) -> str:
        try:
            return await asyncio.to_thread(
                self._client().generate_presigned_url,
                operation,
                Params=params,
                ExpiresIn=expires_in,
            )
        except (BotoCoreError, ClientError) as e:
            raise DownstreamServiceError(f'Failed to create {operation} url: {e}') from e

    @Logger.io
    async def create_upload_url(self, *, name: str) -> str:
        return await self._presign(
            'put_object',
            {'Bucket': self.bucket, 'Key': name},
            settings.FILE_UPLOAD_URL_EXPIRES_SECONDS,
        )

    @Logger.io
    async def create_download_url(self, *, name: str, download_as: Optional[str] = None) -> str:
        params: dict[str, Any] = {'Bucket': self.bucket, 'Key': name}
        if download_as:
            params['ResponseContentDisposition'] = f'attachment; filename="{download_as}"'
        return await self._presign(
            'get_object', params, settings.FILE_DOWNLOAD_URL_EXPIRES_SECONDS
        )
