from typing import Optional

import orjson

from src.platform.config.core_setting import settings
from src.platform.state.redis_client import RedisClient
from src.service.user.app.interface.i_auth_state_store import IAuthStateStore, LoginState


class RedisAuthStateStore(IAuthStateStore):
    KEY_PREFIX = 'auth:state:'

    def __init__(self, *, redis: RedisClient) -> None:
        self.redis = redis

    async def save(self, *, state: str, login_state: LoginState) -> None:
        await self.redis.get_client().set(
            f'{self.KEY_PREFIX}{state}',
            orjson.dumps(
                {'code_verifier': login_state.code_verifier, 'redirect': login_state.redirect}
            ),
            ex=settings.AUTH_STATE_TTL_SECONDS,
        )

    async def pop(self, *, state: str) -> Optional[LoginState]:
        raw = await self.redis.get_client().getdel(f'{self.KEY_PREFIX}{state}')
        if raw is None:
            return None
        data = orjson.loads(raw)
        return LoginState(code_verifier=data['code_verifier'], redirect=data.get('redirect'))
