from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import InvalidArgumentError, PermissionDeniedError
from src.platform.logging.loguru_io import Logger
from src.platform.validation.validators import NORWEGIAN_MOBILE_PATTERN
from src.service.shared_kernel.domain.enum.feature_permission import FeaturePermission


MIN_GRADE_YEAR = 1
MAX_GRADE_YEAR = 5
# The academic year starts in August
ACADEMIC_YEAR_START_MONTH = 8


@attrs.define
class StudyProgramEntity:
    name: str
    external_id: str
    id: UUID = attrs.field(factory=uuid7)
    feature_permissions: list[FeaturePermission] = attrs.field(factory=list)


@attrs.define(kw_only=True)
class UserUpdate:
    """Fields a user may change on their own profile. None means unchanged."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    graduation_year: Optional[int] = None
    allergies: Optional[str] = None
    phone_number: Optional[str] = None
    study_program_id: Optional[UUID] = None


@attrs.define(kw_only=True)
class SuperUserUpdate(UserUpdate):
    is_super_user: Optional[bool] = None


@attrs.define(kw_only=True)
class UserEntity:
    feide_id: str
    email: str
    username: str
    first_name: str = ''
    last_name: str = ''
    id: UUID = attrs.field(factory=uuid7)
    graduation_year: Optional[int] = None
    graduation_year_updated_at: Optional[datetime] = None
    first_login: bool = True
    last_login: Optional[datetime] = None
    allergies: str = ''
    phone_number: str = ''
    is_super_user: bool = False
    study_program_id: Optional[UUID] = None
    confirmed_study_program_id: Optional[UUID] = None
    created_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls, *, feide_id: str, email: str, first_name: str, last_name: str, username: str
    ) -> 'UserEntity':
        if not feide_id:
            raise InvalidArgumentError('feide id is required')
        return cls(
            feide_id=feide_id,
            email=email,
            first_name=first_name,
            last_name=last_name,
            username=username,
            last_login=datetime.now(timezone.utc),
        )

    def grade_year(self, now: Optional[datetime] = None) -> Optional[int]:
        """
        Current year of study derived from the expected graduation year.

        A student graduating in June 2027 is in their 5th year from August 2026,
        4th year from August 2025, and so on.
        """
        if self.graduation_year is None:
            return None
        now = now or datetime.now(timezone.utc)
        academic_end_year = now.year + 1 if now.month >= ACADEMIC_YEAR_START_MONTH else now.year
        grade = MAX_GRADE_YEAR - (self.graduation_year - academic_end_year)
        return max(MIN_GRADE_YEAR, min(MAX_GRADE_YEAR, grade))

    def can_update_year(self, now: Optional[datetime] = None) -> bool:
        if self.graduation_year_updated_at is None:
            return True
        now = now or datetime.now(timezone.utc)
        return now - self.graduation_year_updated_at >= timedelta(days=365)

    def apply_update(self, update: UserUpdate, now: Optional[datetime] = None) -> None:
        now = now or datetime.now(timezone.utc)
        self._validate_update(update, now)

        if update.first_name is not None:
            self.first_name = update.first_name
        if update.last_name is not None:
            self.last_name = update.last_name
        if update.allergies is not None:
            self.allergies = update.allergies
        if update.phone_number is not None:
            self.phone_number = update.phone_number
        if update.study_program_id is not None:
            self.study_program_id = update.study_program_id

        if self.first_login:
            self.first_login = False
            if update.graduation_year is not None:
                self.graduation_year = update.graduation_year
        elif (
            update.graduation_year is not None
            and update.graduation_year != self.graduation_year
            and self.can_update_year(now)
        ):
            self.graduation_year = update.graduation_year
            self.graduation_year_updated_at = now

    def apply_super_update(self, update: SuperUserUpdate, now: Optional[datetime] = None) -> None:
        now = now or datetime.now(timezone.utc)
        self._validate_update(update, now)
        for field in ('first_name', 'last_name', 'allergies', 'phone_number', 'study_program_id'):
            value = getattr(update, field)
            if value is not None:
                setattr(self, field, value)
        if update.graduation_year is not None and update.graduation_year != self.graduation_year:
            self.graduation_year = update.graduation_year
            self.graduation_year_updated_at = now
        if update.is_super_user is not None:
            self.is_super_user = update.is_super_user

    def mark_logged_in(self, now: Optional[datetime] = None) -> None:
        self.last_login = now or datetime.now(timezone.utc)

    @staticmethod
    def _validate_update(update: UserUpdate, now: datetime) -> None:
        if update.first_name is not None and len(update.first_name) < 2:
            raise InvalidArgumentError('first name must be at least 2 characters')
        if update.last_name is not None and len(update.last_name) < 2:
            raise InvalidArgumentError('last name must be at least 2 characters')
        if update.graduation_year is not None and update.graduation_year < now.year:
            raise InvalidArgumentError('graduation year must be this year or later')
        if update.phone_number and not NORWEGIAN_MOBILE_PATTERN.match(update.phone_number):
            raise InvalidArgumentError('invalid phone number')

    @staticmethod
    def validate_super_user(user: Optional['UserEntity']) -> 'UserEntity':
        if user is None or not user.is_super_user:
            raise PermissionDeniedError('You must be a super user to perform this action.')
        return user


def username_from_feide_ids(feide_ids: list[str]) -> str:
    """
    Pick the username from the Feide secondary user ids.

    Ids look like ``feide:olanor@ntnu.no``; the NTNU one is preferred.
    """
    candidates = [fid.removeprefix('feide:') for fid in feide_ids if fid.startswith('feide:')]
    if not candidates:
        raise InvalidArgumentError('No Feide user id in user info')
    preferred = next((c for c in candidates if c.endswith('@ntnu.no')), candidates[0])
    return preferred.split('@', 1)[0]
