"""
Unit tests for the user use cases

Test Focus:
1. AuthenticateUseCase: PKCE state, redirect validation, new vs returning users
2. UserCommandUseCase: registration mail, profile updates, super user updates
3. UserQueryUseCase: listing users is reserved for super users
"""

import base64
import hashlib
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.platform.exception.exceptions import (
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
    UnauthorizedError,
)
from src.service.user.app.command.authenticate_use_case import (
    AuthenticateUseCase,
    generate_pkce_pair,
)
from src.service.user.app.command.user_command_use_case import UserCommandUseCase
from src.service.user.app.interface.i_auth_state_store import LoginState
from src.service.user.app.interface.i_feide_client import FeideUserInfo
from src.service.user.app.query.user_query_use_case import UserQueryUseCase
from src.service.user.domain.user_entity import SuperUserUpdate, UserEntity, UserUpdate


@pytest.fixture
def existing_user() -> UserEntity:
    return UserEntity.create(
        feide_id='feide-123',
        email='ola.nordmann@indokntnu.no',
        first_name='Ola',
        last_name='Nordmann',
        username='olanor',
    )


@pytest.fixture
def mock_user_query_repo(existing_user: UserEntity) -> AsyncMock:
    repo = AsyncMock()
    repo.get_by_id.return_value = existing_user
    repo.get_by_feide_id.return_value = None
    return repo


@pytest.fixture
def mock_user_command_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.create.side_effect = lambda *, user: user
    repo.update.side_effect = lambda *, user: user
    return repo


@pytest.fixture
def mock_mail_publisher() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def command_use_case(
    mock_user_command_repo, mock_user_query_repo, mock_mail_publisher
) -> UserCommandUseCase:
    return UserCommandUseCase(
        user_command_repo=mock_user_command_repo,
        user_query_repo=mock_user_query_repo,
        mail_publisher=mock_mail_publisher,
    )


@pytest.mark.unit
class TestPkce:
    def test_challenge_is_s256_of_verifier(self):
        verifier, challenge = generate_pkce_pair()

        digest = hashlib.sha256(verifier.encode('ascii')).digest()
        assert challenge == base64.urlsafe_b64encode(digest).rstrip(b'=').decode('ascii')
        assert '=' not in challenge


@pytest.mark.unit
class TestAuthenticate:
    @pytest.fixture
    def mock_feide_client(self) -> MagicMock:
        client = MagicMock()
        client.authorization_url.return_value = 'https://auth.dataporten.no/oauth/authorization?x=1'
        client.fetch_user_info = AsyncMock(
            return_value=FeideUserInfo(
                feide_id='feide-456',
                name='Kari Mari Nordmann',
                email='kari@indokntnu.no',
                secondary_user_ids=['feide:karinor@ntnu.no'],
            )
        )
        return client

    @pytest.fixture
    def mock_state_store(self) -> AsyncMock:
        store = AsyncMock()
        store.pop.return_value = LoginState(
            code_verifier='verifier', redirect='http://localhost:3000/profile'
        )
        return store

    @pytest.fixture
    def use_case(
        self, mock_feide_client, mock_state_store, mock_user_query_repo, command_use_case
    ) -> AuthenticateUseCase:
        return AuthenticateUseCase(
            feide_client=mock_feide_client,
            auth_state_store=mock_state_store,
            user_query_repo=mock_user_query_repo,
            user_command_use_case=command_use_case,
        )

    @pytest.mark.asyncio
    async def test_authorization_url__stores_login_state(
        self, use_case: AuthenticateUseCase, mock_state_store, mock_feide_client
    ):
        # Act
        url = await use_case.authorization_url(redirect='http://localhost:3000/profile')

        # Assert
        assert url.startswith('https://auth.dataporten.no')
        saved = mock_state_store.save.await_args.kwargs
        assert saved['login_state'].redirect == 'http://localhost:3000/profile'
        passed = mock_feide_client.authorization_url.call_args.kwargs
        assert passed['state'] == saved['state']

    @pytest.mark.asyncio
    async def test_authorization_url_fail__foreign_redirect(
        self, use_case: AuthenticateUseCase, mock_state_store
    ):
        with pytest.raises(InvalidArgumentError):
            await use_case.authorization_url(redirect='https://evil.example.org/')
        mock_state_store.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_authenticate_new_user__registers_and_sends_mail(
        self, use_case: AuthenticateUseCase, mock_mail_publisher, mock_feide_client
    ):
        """
        Given: a Feide user that has never logged in
        When: the callback is handled
        Then: a user is created with the NTNU username and a welcome mail is queued
        """
        # Act
        result = await use_case.authenticate(code='code', state='state')

        # Assert
        assert result.user.username == 'karinor'
        assert result.user.first_name == 'Kari Mari'
        assert result.user.last_name == 'Nordmann'
        assert result.redirect == 'http://localhost:3000/profile'
        mock_feide_client.fetch_user_info.assert_awaited_once_with(
            code='code', code_verifier='verifier'
        )
        mock_mail_publisher.send_user_registration.assert_awaited_once_with(
            recipient_id=result.user.id
        )

    @pytest.mark.asyncio
    async def test_authenticate_returning_user__only_logs_in(
        self,
        use_case: AuthenticateUseCase,
        existing_user: UserEntity,
        mock_user_query_repo,
        mock_user_command_repo,
        mock_mail_publisher,
    ):
        mock_user_query_repo.get_by_feide_id.return_value = existing_user

        result = await use_case.authenticate(code='code', state='state')

        assert result.user is existing_user
        mock_user_command_repo.create.assert_not_awaited()
        mock_mail_publisher.send_user_registration.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_authenticate_fail__unknown_state(
        self, use_case: AuthenticateUseCase, mock_state_store, mock_feide_client
    ):
        mock_state_store.pop.return_value = None

        with pytest.raises(UnauthorizedError):
            await use_case.authenticate(code='code', state='replayed')
        mock_feide_client.fetch_user_info.assert_not_awaited()


@pytest.mark.unit
class TestUserCommands:
    @pytest.mark.asyncio
    async def test_update_fail__anonymous(self, command_use_case: UserCommandUseCase):
        with pytest.raises(UnauthorizedError):
            await command_use_case.update(user_id=None, data=UserUpdate(first_name='Ola'))

    @pytest.mark.asyncio
    async def test_update_fail__unknown_user(
        self, command_use_case: UserCommandUseCase, mock_user_query_repo
    ):
        mock_user_query_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await command_use_case.update(user_id=uuid4(), data=UserUpdate(first_name='Ola'))

    @pytest.mark.asyncio
    async def test_update_success(
        self, command_use_case: UserCommandUseCase, existing_user, mock_user_command_repo
    ):
        updated = await command_use_case.update(
            user_id=existing_user.id, data=UserUpdate(allergies='Nøtter')
        )

        assert updated.allergies == 'Nøtter'
        mock_user_command_repo.update.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_super_update_fail__not_super_user(
        self, command_use_case: UserCommandUseCase, existing_user
    ):
        with pytest.raises(PermissionDeniedError):
            await command_use_case.super_update(
                current_user_id=existing_user.id,
                user_id=uuid4(),
                data=SuperUserUpdate(is_super_user=True),
            )


@pytest.mark.unit
class TestUserQueries:
    @pytest.mark.asyncio
    async def test_find_many_fail__not_super_user(self, mock_user_query_repo, existing_user):
        use_case = UserQueryUseCase(user_query_repo=mock_user_query_repo)

        with pytest.raises(PermissionDeniedError):
            await use_case.find_many(current_user_id=existing_user.id)

    @pytest.mark.asyncio
    async def test_find_many_success__super_user(self, mock_user_query_repo, existing_user):
        existing_user.is_super_user = True
        mock_user_query_repo.find_many.return_value = [existing_user]
        use_case = UserQueryUseCase(user_query_repo=mock_user_query_repo)

        assert await use_case.find_many(current_user_id=existing_user.id) == [existing_user]

    @pytest.mark.asyncio
    async def test_get_optional__anonymous_is_none(self, mock_user_query_repo):
        use_case = UserQueryUseCase(user_query_repo=mock_user_query_repo)

        assert await use_case.get_optional(user_id=None) is None
        mock_user_query_repo.get_by_id.assert_not_awaited()
