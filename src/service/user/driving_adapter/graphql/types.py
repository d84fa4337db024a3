from datetime import datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Annotated, Optional
from uuid import UUID

import strawberry

from src.platform.config.di import container
from src.service.user.domain.user_entity import (
    StudyProgramEntity,
    SuperUserUpdate,
    UserEntity,
    UserUpdate,
)


if TYPE_CHECKING:
    from src.service.organization.driving_adapter.graphql.types import Organization

OrganizationRef = Annotated[
    'Organization', strawberry.lazy('src.service.organization.driving_adapter.graphql.types')
]


@strawberry.type
class StudyProgram:
    id: UUID
    name: str
    external_id: str

    @classmethod
    def from_entity(cls, entity: StudyProgramEntity) -> 'StudyProgram':
        return cls(id=entity.id, name=entity.name, external_id=entity.external_id)


@strawberry.type
class User:
    id: UUID
    username: str
    email: str
    first_name: str
    last_name: str
    graduation_year: Optional[int]
    grade_year: Optional[int]
    can_update_year: bool
    first_login: bool
    last_login: Optional[datetime]
    allergies: str
    phone_number: str
    is_super_user: bool
    study_program_id: Optional[UUID]

    @classmethod
    def from_entity(cls, entity: UserEntity) -> 'User':
        return cls(
            id=entity.id,
            username=entity.username,
            email=entity.email,
            first_name=entity.first_name,
            last_name=entity.last_name,
            graduation_year=entity.graduation_year,
            grade_year=entity.grade_year(),
            can_update_year=entity.can_update_year(),
            first_login=entity.first_login,
            last_login=entity.last_login,
            allergies=entity.allergies,
            phone_number=entity.phone_number,
            is_super_user=entity.is_super_user,
            study_program_id=entity.study_program_id,
        )

    @strawberry.field
    async def study_program(self) -> Optional[StudyProgram]:
        if self.study_program_id is None:
            return None
        program = await container.user_query_use_case().get_study_program(
            study_program_id=self.study_program_id
        )
        return StudyProgram.from_entity(program) if program else None

    @strawberry.field
    async def organizations(self) -> list[OrganizationRef]:
        from src.service.organization.driving_adapter.graphql.types import Organization

        organizations = await container.organization_query_use_case().find_many(user_id=self.id)
        return [Organization.from_entity(o) for o in organizations]


@strawberry.type
class UserResponse:
    user: Optional[User]


@strawberry.type
class UsersResponse:
    users: list[User]
    total: int


@strawberry.type
class RedirectUrlResponse:
    url: str


@strawberry.type
class AuthenticateResponse:
    user: User


@strawberry.enum
class LogoutStatus(StrEnum):
    SUCCESS = 'SUCCESS'


@strawberry.type
class LogoutResponse:
    status: LogoutStatus


@strawberry.input
class UpdateUserInput:
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    graduation_year: Optional[int] = None
    allergies: Optional[str] = None
    phone_number: Optional[str] = None
    study_program_id: Optional[UUID] = None

    def to_update(self) -> UserUpdate:
        return UserUpdate(
            first_name=self.first_name,
            last_name=self.last_name,
            graduation_year=self.graduation_year,
            allergies=self.allergies,
            phone_number=self.phone_number,
            study_program_id=self.study_program_id,
        )


@strawberry.input
class SuperUpdateUserInput(UpdateUserInput):
    is_super_user: Optional[bool] = None

    def to_update(self) -> SuperUserUpdate:
        return SuperUserUpdate(
            first_name=self.first_name,
            last_name=self.last_name,
            graduation_year=self.graduation_year,
            allergies=self.allergies,
            phone_number=self.phone_number,
            study_program_id=self.study_program_id,
            is_super_user=self.is_super_user,
        )
