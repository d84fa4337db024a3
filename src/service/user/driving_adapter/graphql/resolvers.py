from typing import Optional
from uuid import UUID

import strawberry

from src.platform.config.di import container
from src.platform.exception.exceptions import BadRequestError
from src.platform.graphql.context import GraphQLInfo
from src.service.user.driving_adapter.graphql.types import (
    AuthenticateResponse,
    LogoutResponse,
    LogoutStatus,
    RedirectUrlResponse,
    StudyProgram,
    SuperUpdateUserInput,
    UpdateUserInput,
    User,
    UserResponse,
    UsersResponse,
)
from src.service.user.driving_adapter.http_controller.auth.session_cookie import (
    clear_session_cookie,
    set_session_cookie,
)


@strawberry.type
class UserQuery:
    @strawberry.field
    async def user(self, info: GraphQLInfo) -> UserResponse:
        """The logged in user, null for anonymous requests"""
        user = await container.user_query_use_case().get_optional(user_id=info.context.user_id)
        return UserResponse(user=User.from_entity(user) if user else None)

    @strawberry.field
    async def users(self, info: GraphQLInfo) -> UsersResponse:
        users = await container.user_query_use_case().find_many(
            current_user_id=info.context.user_id
        )
        return UsersResponse(users=[User.from_entity(u) for u in users], total=len(users))

    @strawberry.field
    async def study_programs(self) -> list[StudyProgram]:
        programs = await container.user_query_use_case().find_many_study_programs()
        return [StudyProgram.from_entity(p) for p in programs]


@strawberry.type
class UserMutation:
    @strawberry.mutation
    async def redirect_url(self, redirect: Optional[str] = None) -> RedirectUrlResponse:
        url = await container.authenticate_use_case().authorization_url(redirect=redirect)
        return RedirectUrlResponse(url=url)

    @strawberry.mutation
    async def authenticate(self, info: GraphQLInfo, code: str, state: str) -> AuthenticateResponse:
        result = await container.authenticate_use_case().authenticate(code=code, state=state)
        jwt_auth = container.jwt_auth()
        set_session_cookie(
            info.context.response,
            token=jwt_auth.create_jwt_token(user_id=result.user.id),
            jwt_auth=jwt_auth,
        )
        info.context.user_id = result.user.id
        return AuthenticateResponse(user=User.from_entity(result.user))

    @strawberry.mutation
    async def logout(self, info: GraphQLInfo) -> LogoutResponse:
        if info.context.user_id is None:
            raise BadRequestError('User is not authenticated')
        clear_session_cookie(info.context.response)
        info.context.user_id = None
        return LogoutResponse(status=LogoutStatus.SUCCESS)

    @strawberry.mutation
    async def update_user(self, info: GraphQLInfo, data: UpdateUserInput) -> UserResponse:
        user = await container.user_command_use_case().update(
            user_id=info.context.user_id, data=data.to_update()
        )
        return UserResponse(user=User.from_entity(user))

    @strawberry.mutation
    async def super_update_user(
        self, info: GraphQLInfo, id: UUID, data: SuperUpdateUserInput
    ) -> UserResponse:
        user = await container.user_command_use_case().super_update(
            current_user_id=info.context.user_id, user_id=id, data=data.to_update()
        )
        return UserResponse(user=User.from_entity(user))
