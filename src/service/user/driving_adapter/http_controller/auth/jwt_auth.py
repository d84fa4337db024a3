"""
Session token handling

The session is a signed JWT carried in an http-only cookie. It only holds the
user id; the user row is loaded per request where the caller needs it.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional
from uuid import UUID

import jwt

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import UnauthorizedError


class JwtAuth:
    def __init__(self) -> None:
        self.secret = settings.SECRET_KEY.get_secret_value()
        self.algorithm = settings.ALGORITHM
        self.token_expire_days = settings.ACCESS_TOKEN_EXPIRE_DAYS

    @property
    def max_age_seconds(self) -> int:
        return self.token_expire_days * 24 * 60 * 60

    def create_jwt_token(self, *, user_id: UUID) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            'sub': str(user_id),
            'exp': now + timedelta(days=self.token_expire_days),
            'iat': now,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_jwt_token(self, token: str) -> Dict:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.PyJWTError:
            raise UnauthorizedError('Invalid token')

    def get_user_id_from_jwt(self, token: Optional[str]) -> UUID:
        if not token:
            raise UnauthorizedError('Not authenticated')

        payload = self.decode_jwt_token(token)
        try:
            return UUID(payload['sub'])
        except (KeyError, ValueError):
            raise UnauthorizedError('Invalid token')

    def get_optional_user_id_from_jwt(self, token: Optional[str]) -> Optional[UUID]:
        """Anonymous access is allowed; a missing or broken cookie means no user."""
        if not token:
            return None
        try:
            return self.get_user_id_from_jwt(token)
        except UnauthorizedError:
            return None
