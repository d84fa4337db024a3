"""
Feide (Dataporten) OpenID Connect client

Authorization code flow with PKCE (S256):
1. authorization_url(): browser is redirected to Feide
2. fetch_user_info(): code + verifier are exchanged for an access token,
   which is used to read the user info endpoint
"""

from urllib.parse import urlencode

import httpx

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import DownstreamServiceError
from src.platform.logging.loguru_io import Logger
from src.service.user.app.interface.i_feide_client import FeideUserInfo, IFeideClient


FEIDE_SCOPE = 'openid userid userid-feide userinfo-name userinfo-photo email groups-edu'


class FeideClientImpl(IFeideClient):
    def __init__(self, *, http_client: httpx.AsyncClient | None = None) -> None:
        self.base_url = settings.FEIDE_BASE_URL.rstrip('/')
        self.client_id = settings.FEIDE_CLIENT_ID
        self.client_secret = settings.FEIDE_CLIENT_SECRET.get_secret_value()
        self.redirect_uri = f'{settings.SERVER_URL.rstrip("/")}/api/auth/callback'
        self._http_client = http_client

    def _client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=10.0)
        return self._http_client

    def authorization_url(self, *, state: str, code_challenge: str) -> str:
        query = urlencode(
            {
                'client_id': self.client_id,
                'response_type': 'code',
                'redirect_uri': self.redirect_uri,
                'scope': FEIDE_SCOPE,
                'state': state,
                'code_challenge': code_challenge,
                'code_challenge_method': 'S256',
            }
        )
        return f'{self.base_url}/oauth/authorization?{query}'

    @Logger.io
    async def fetch_user_info(self, *, code: str, code_verifier: str) -> FeideUserInfo:
        client = self._client()
        try:
            token_response = await client.post(
                f'{self.base_url}/oauth/token',
                data={
                    'grant_type': 'authorization_code',
                    'code': code,
                    'code_verifier': code_verifier,
                    'redirect_uri': self.redirect_uri,
                    'client_id': self.client_id,
                },
                auth=(self.client_id, self.client_secret),
            )
            token_response.raise_for_status()
            access_token = token_response.json()['access_token']

            userinfo_response = await client.get(
                f'{self.base_url}/openid/userinfo',
                headers={'Authorization': f'Bearer {access_token}'},
            )
            userinfo_response.raise_for_status()
            data = userinfo_response.json()
        except (httpx.HTTPError, KeyError, ValueError) as e:
            raise DownstreamServiceError(f'Feide login failed: {e}') from e

        return FeideUserInfo(
            feide_id=data['sub'],
            name=data.get('name', ''),
            email=data.get('email', ''),
            secondary_user_ids=list(data.get('dataporten-userid_sec', [])),
        )

    async def aclose(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
