from typing import Optional
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import RedirectResponse

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.user.app.command.authenticate_use_case import AuthenticateUseCase
from src.service.user.app.command.user_command_use_case import UserCommandUseCase
from src.service.user.app.query.user_query_use_case import UserQueryUseCase
from src.service.user.driving_adapter.http_controller.auth.dependencies import (
    get_current_user_id,
)
from src.service.user.driving_adapter.http_controller.auth.jwt_auth import JwtAuth
from src.service.user.driving_adapter.http_controller.auth.session_cookie import (
    clear_session_cookie,
    set_session_cookie,
)
from src.service.user.driving_adapter.http_controller.schema.user_schema import (
    UpdateUserRequest,
    UserResponse,
)


router = APIRouter()


@router.get('/login', status_code=status.HTTP_307_TEMPORARY_REDIRECT)
@Logger.io
@inject
async def login(
    redirect: Optional[str] = Query(None, description='Where to send the browser after login'),
    authenticate_use_case: AuthenticateUseCase = Depends(Provide[Container.authenticate_use_case]),
) -> RedirectResponse:
    url = await authenticate_use_case.authorization_url(redirect=redirect)
    return RedirectResponse(url=url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)


@router.get('/callback', status_code=status.HTTP_307_TEMPORARY_REDIRECT)
@Logger.io
@inject
async def callback(
    code: str,
    state: str,
    authenticate_use_case: AuthenticateUseCase = Depends(Provide[Container.authenticate_use_case]),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
) -> RedirectResponse:
    result = await authenticate_use_case.authenticate(code=code, state=state)
    response = RedirectResponse(
        url=result.redirect or settings.CLIENT_URL,
        status_code=status.HTTP_307_TEMPORARY_REDIRECT,
    )
    set_session_cookie(
        response, token=jwt_auth.create_jwt_token(user_id=result.user.id), jwt_auth=jwt_auth
    )
    return response


@router.post('/logout', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def logout(response: Response) -> None:
    clear_session_cookie(response)


@router.get('/me', response_model=UserResponse)
@Logger.io
@inject
async def get_me(
    user_id: UUID = Depends(get_current_user_id),
    user_query_use_case: UserQueryUseCase = Depends(Provide[Container.user_query_use_case]),
) -> UserResponse:
    user = await user_query_use_case.get(user_id=user_id)
    return UserResponse.from_entity(user)


@router.patch('/me', response_model=UserResponse)
@Logger.io
@inject
async def update_me(
    request: UpdateUserRequest,
    user_id: UUID = Depends(get_current_user_id),
    user_command_use_case: UserCommandUseCase = Depends(Provide[Container.user_command_use_case]),
) -> UserResponse:
    user = await user_command_use_case.update(user_id=user_id, data=request.to_update())
    return UserResponse.from_entity(user)
