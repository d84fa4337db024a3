from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from src.service.user.domain.user_entity import UserEntity, UserUpdate


class UserResponse(BaseModel):
    id: UUID
    username: str
    email: str
    first_name: str
    last_name: str
    graduation_year: Optional[int] = None
    grade_year: Optional[int] = None
    can_update_year: bool
    first_login: bool
    allergies: str
    phone_number: str
    is_super_user: bool
    last_login: Optional[datetime] = None

    model_config = {
        'json_schema_extra': {
            'example': {
                'id': '0191d3c2-6a39-7b1e-9d52-45a0f1a2b3c4',
                'username': 'olanor',
                'email': 'ola.nordmann@example.com',
                'first_name': 'Ola',
                'last_name': 'Nordmann',
                'graduation_year': 2028,
                'grade_year': 3,
                'can_update_year': True,
                'first_login': False,
                'allergies': '',
                'phone_number': '40000000',
                'is_super_user': False,
                'last_login': '2026-09-01T12:00:00Z',
            }
        }
    }

    @classmethod
    def from_entity(cls, user: UserEntity) -> 'UserResponse':
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            graduation_year=user.graduation_year,
            grade_year=user.grade_year(),
            can_update_year=user.can_update_year(),
            first_login=user.first_login,
            allergies=user.allergies,
            phone_number=user.phone_number,
            is_super_user=user.is_super_user,
            last_login=user.last_login,
        )


class UpdateUserRequest(BaseModel):
    first_name: Optional[str] = Field(default=None, max_length=255)
    last_name: Optional[str] = Field(default=None, max_length=255)
    graduation_year: Optional[int] = None
    allergies: Optional[str] = Field(default=None, max_length=1000)
    phone_number: Optional[str] = None
    study_program_id: Optional[UUID] = None

    def to_update(self) -> UserUpdate:
        return UserUpdate(**self.model_dump())
