"""
Unit tests for JwtAuth

Test Focus:
1. Missing, expired and foreign tokens are rejected with UnauthorizedError
2. The optional variant maps every failure to an anonymous user
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt
import pytest

from src.platform.exception.exceptions import UnauthorizedError
from src.service.user.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


@pytest.fixture
def jwt_auth() -> JwtAuth:
    return JwtAuth()


@pytest.mark.unit
class TestJwtAuth:
    def test_issued_token_identifies_user(self, jwt_auth: JwtAuth):
        user_id = uuid4()

        token = jwt_auth.create_jwt_token(user_id=user_id)

        assert jwt_auth.get_user_id_from_jwt(token) == user_id

    def test_missing_token_is_rejected(self, jwt_auth: JwtAuth):
        with pytest.raises(UnauthorizedError, match='Not authenticated'):
            jwt_auth.get_user_id_from_jwt(None)

    def test_expired_token_is_rejected(self, jwt_auth: JwtAuth):
        # Given: a token that expired yesterday
        past = datetime.now(timezone.utc) - timedelta(days=2)
        token = jwt.encode(
            {'sub': str(uuid4()), 'iat': past, 'exp': past + timedelta(days=1)},
            jwt_auth.secret,
            algorithm=jwt_auth.algorithm,
        )

        # Then
        with pytest.raises(UnauthorizedError):
            jwt_auth.get_user_id_from_jwt(token)

    def test_token_signed_with_other_secret_is_rejected(self, jwt_auth: JwtAuth):
        token = jwt.encode(
            {'sub': str(uuid4())}, 'another-secret-key-of-sufficient-length', algorithm='HS256'
        )

        with pytest.raises(UnauthorizedError):
            jwt_auth.get_user_id_from_jwt(token)

    def test_token_without_uuid_subject_is_rejected(self, jwt_auth: JwtAuth):
        token = jwt.encode({'sub': 'olanor'}, jwt_auth.secret, algorithm=jwt_auth.algorithm)

        with pytest.raises(UnauthorizedError):
            jwt_auth.get_user_id_from_jwt(token)

    @pytest.mark.parametrize('token', [None, '', 'not-a-jwt'])
    def test_optional_user_is_anonymous_on_bad_cookie(self, jwt_auth: JwtAuth, token):
        assert jwt_auth.get_optional_user_id_from_jwt(token) is None

    def test_max_age_matches_expiry(self, jwt_auth: JwtAuth):
        assert jwt_auth.max_age_seconds == jwt_auth.token_expire_days * 86400
