import base64
import hashlib
import secrets
from typing import Optional

import attrs
from opentelemetry import trace

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import InvalidArgumentError, UnauthorizedError
from src.platform.logging.loguru_io import Logger
from src.platform.validation.validators import is_allowed_origin
from src.service.user.app.command.user_command_use_case import UserCommandUseCase
from src.service.user.app.interface.i_auth_state_store import IAuthStateStore, LoginState
from src.service.user.app.interface.i_feide_client import IFeideClient
from src.service.user.app.interface.i_user_query_repo import IUserQueryRepo
from src.service.user.domain.user_entity import UserEntity, username_from_feide_ids


@attrs.define
class AuthenticationResult:
    user: UserEntity
    redirect: Optional[str] = None


def generate_pkce_pair() -> tuple[str, str]:
    """Return (code_verifier, S256 code_challenge)."""
    code_verifier = secrets.token_urlsafe(64)
    digest = hashlib.sha256(code_verifier.encode('ascii')).digest()
    code_challenge = base64.urlsafe_b64encode(digest).rstrip(b'=').decode('ascii')
    return code_verifier, code_challenge


class AuthenticateUseCase:
    """
    Feide login flow

    Flow:
    1. authorization_url(): validate redirect, store PKCE verifier under a random state
    2. authenticate(): consume the state, exchange the code, create or log in the user
    """

    def __init__(
        self,
        *,
        feide_client: IFeideClient,
        auth_state_store: IAuthStateStore,
        user_query_repo: IUserQueryRepo,
        user_command_use_case: UserCommandUseCase,
    ) -> None:
        self.feide_client = feide_client
        self.auth_state_store = auth_state_store
        self.user_query_repo = user_query_repo
        self.user_command_use_case = user_command_use_case
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def authorization_url(self, *, redirect: Optional[str] = None) -> str:
        if redirect and not is_allowed_origin(redirect, settings.REDIRECT_ORIGINS):
            raise InvalidArgumentError('Invalid redirect url')

        code_verifier, code_challenge = generate_pkce_pair()
        state = secrets.token_urlsafe(32)
        await self.auth_state_store.save(
            state=state, login_state=LoginState(code_verifier=code_verifier, redirect=redirect)
        )
        return self.feide_client.authorization_url(state=state, code_challenge=code_challenge)

    @Logger.io
    async def authenticate(self, *, code: str, state: str) -> AuthenticationResult:
        with self.tracer.start_as_current_span('use_case.authenticate'):
            login_state = await self.auth_state_store.pop(state=state)
            if login_state is None:
                raise UnauthorizedError('Login session expired or invalid state')

            user_info = await self.feide_client.fetch_user_info(
                code=code, code_verifier=login_state.code_verifier
            )

            existing = await self.user_query_repo.get_by_feide_id(feide_id=user_info.feide_id)
            if existing:
                user = await self.user_command_use_case.login(user_id=existing.id)
            else:
                user = await self.user_command_use_case.create(
                    feide_id=user_info.feide_id,
                    email=user_info.email,
                    first_name=user_info.first_name,
                    last_name=user_info.last_name,
                    username=username_from_feide_ids(user_info.secondary_user_ids),
                )
            return AuthenticationResult(user=user, redirect=login_state.redirect)
