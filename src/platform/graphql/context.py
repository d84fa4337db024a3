from typing import Optional
from uuid import UUID

from fastapi import Depends
from strawberry.fastapi import BaseContext
from strawberry.types import Info

from src.service.user.driving_adapter.http_controller.auth.dependencies import (
    get_optional_user_id,
)


class GraphQLContext(BaseContext):
    """Per-request context; user_id is None for anonymous requests."""

    def __init__(self, *, user_id: Optional[UUID]) -> None:
        super().__init__()
        self.user_id = user_id


async def get_graphql_context(
    user_id: Optional[UUID] = Depends(get_optional_user_id),
) -> GraphQLContext:
    return GraphQLContext(user_id=user_id)


GraphQLInfo = Info[GraphQLContext, None]
