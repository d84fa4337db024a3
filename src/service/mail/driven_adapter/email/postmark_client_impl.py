from typing import Any

import httpx

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import DownstreamServiceError
from src.platform.logging.loguru_io import Logger
from src.service.mail.app.interface.i_email_client import IEmailClient
from src.service.mail.domain.email_entity import EmailContent


class PostmarkClientImpl(IEmailClient):
    def __init__(self, *, http_client: httpx.AsyncClient | None = None) -> None:
        self.from_address = settings.NO_REPLY_EMAIL
        self._http_client = http_client

    def _client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                base_url=settings.POSTMARK_BASE_URL,
                timeout=10.0,
                headers={
                    'Accept': 'application/json',
                    'X-Postmark-Server-Token': settings.POSTMARK_API_TOKEN.get_secret_value(),
                },
            )
        return self._http_client

    @Logger.io
    async def send(self, *, email: EmailContent) -> None:
        payload: dict[str, Any] = {
            'From': self.from_address,
            'To': email.to,
            'TemplateAlias': email.template_alias,
            'TemplateModel': email.template_model,
        }
        try:
            response = await self._client().post('/email/withTemplate', json=payload)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise DownstreamServiceError(f'Failed to send {email.template_alias} email: {e}') from e

    async def aclose(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
