from typing import Optional
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Cookie, Depends

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.service.user.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


@inject
async def get_current_user_id(
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
    token: Optional[str] = Cookie(None, alias=settings.SESSION_COOKIE_NAME),
) -> UUID:
    """User id from the session cookie (stateless, no DB query)"""
    return jwt_auth.get_user_id_from_jwt(token)


@inject
async def get_optional_user_id(
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
    token: Optional[str] = Cookie(None, alias=settings.SESSION_COOKIE_NAME),
) -> Optional[UUID]:
    return jwt_auth.get_optional_user_id_from_jwt(token)
