"""
Vipps ePayment API client

Every call authenticates as the merchant that owns the product: the access token
is fetched with the merchant's client credentials, and the merchant serial number
and subscription key travel as headers on each request.
"""

from typing import Any

import httpx
from uuid_utils.compat import uuid7

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import DownstreamServiceError
from src.platform.logging.loguru_io import Logger
from src.service.product.app.interface.i_vipps_client import CreatedPayment, IVippsClient
from src.service.product.domain.product_entity import MerchantEntity, PaymentAttemptState


CURRENCY = 'NOK'
SYSTEM_NAME = 'indok-membership-api'


class VippsClientImpl(IVippsClient):
    def __init__(self, *, http_client: httpx.AsyncClient | None = None) -> None:
        self.base_url = settings.VIPPS_BASE_URL
        self._http_client = http_client

    def _client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(base_url=self.base_url, timeout=10.0)
        return self._http_client

    @staticmethod
    def _merchant_headers(merchant: MerchantEntity) -> dict[str, str]:
        return {
            'Ocp-Apim-Subscription-Key': merchant.subscription_key,
            'Merchant-Serial-Number': merchant.serial_number,
            'Vipps-System-Name': SYSTEM_NAME,
        }

    def _authorized_headers(self, merchant: MerchantEntity, token: str) -> dict[str, str]:
        return self._merchant_headers(merchant) | {'Authorization': f'Bearer {token}'}

    async def _request(self, method: str, url: str, action: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = await self._client().request(method, url, **kwargs)
            response.raise_for_status()
            return response.json() if response.content else {}
        except (httpx.HTTPError, ValueError) as e:
            raise DownstreamServiceError(f'Failed to {action}: {e}') from e

    @Logger.io
    async def get_access_token(self, *, merchant: MerchantEntity) -> str:
        data = await self._request(
            'POST',
            '/accesstoken/get',
            'fetch vipps access token',
            headers=self._merchant_headers(merchant)
            | {'client_id': merchant.client_id, 'client_secret': merchant.client_secret},
        )
        token = data.get('access_token')
        if not token:
            raise DownstreamServiceError('Failed to fetch vipps access token')
        return token

    @Logger.io
    async def create_payment(
        self,
        *,
        merchant: MerchantEntity,
        token: str,
        reference: str,
        amount: int,
        return_url: str,
        description: str,
    ) -> CreatedPayment:
        data = await self._request(
            'POST',
            '/epayment/v1/payments',
            'create vipps payment',
            headers=self._authorized_headers(merchant, token) | {'Idempotency-Key': str(uuid7())},
            json={
                'reference': reference,
                'amount': {'value': amount, 'currency': CURRENCY},
                'paymentMethod': {'type': 'WALLET'},
                'userFlow': 'WEB_REDIRECT',
                'returnUrl': return_url,
                'paymentDescription': description,
            },
        )
        redirect_url = data.get('redirectUrl')
        if not redirect_url:
            raise DownstreamServiceError('Vipps did not return a redirect url')
        return CreatedPayment(reference=data.get('reference', reference), redirect_url=redirect_url)

    @Logger.io
    async def get_payment_state(
        self, *, merchant: MerchantEntity, token: str, reference: str
    ) -> PaymentAttemptState:
        data = await self._request(
            'GET',
            f'/epayment/v1/payments/{reference}',
            'fetch payment status from vipps',
            headers=self._authorized_headers(merchant, token),
        )
        try:
            return PaymentAttemptState(data['state'])
        except (KeyError, ValueError) as e:
            raise DownstreamServiceError(f'Unexpected payment state from vipps: {data}') from e

    @Logger.io
    async def capture_payment(
        self, *, merchant: MerchantEntity, token: str, reference: str, amount: int
    ) -> None:
        await self._request(
            'POST',
            f'/epayment/v1/payments/{reference}/capture',
            'capture payment',
            headers=self._authorized_headers(merchant, token)
            | {'Idempotency-Key': f'capture-{reference}'},
            json={'modificationAmount': {'value': amount, 'currency': CURRENCY}},
        )

    async def aclose(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
