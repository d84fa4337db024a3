from datetime import datetime, timedelta, timezone
from enum import StrEnum
from typing import Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import InvalidArgumentError, InvalidCapacityError
from src.platform.logging.loguru_io import Logger
from src.platform.validation.validators import is_valid_email


NAME_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 10000
CATEGORY_NAME_MAX_LENGTH = 100
DEFAULT_DURATION = timedelta(hours=2)
ALL_GRADE_YEARS = [1, 2, 3, 4, 5]


class EventType(StrEnum):
    BASIC = 'BASIC'
    SIGN_UPS = 'SIGN_UPS'
    TICKETS = 'TICKETS'


@attrs.define(kw_only=True)
class EventCategoryEntity:
    name: str
    id: UUID = attrs.field(factory=uuid7)

    @classmethod
    def create(cls, *, name: str) -> 'EventCategoryEntity':
        cls.validate_name(name)
        return cls(name=name)

    @staticmethod
    def validate_name(name: str) -> None:
        if not 1 <= len(name) <= CATEGORY_NAME_MAX_LENGTH:
            raise InvalidArgumentError(
                f'category name must be between 1 and {CATEGORY_NAME_MAX_LENGTH} characters'
            )


@attrs.define(kw_only=True)
class SlotEntity:
    capacity: int
    remaining_capacity: int
    event_id: Optional[UUID] = None
    grade_years: list[int] = attrs.field(factory=lambda: list(ALL_GRADE_YEARS))
    id: UUID = attrs.field(factory=uuid7)
    version: int = 0

    @classmethod
    def create(cls, *, capacity: int, grade_years: Optional[list[int]] = None) -> 'SlotEntity':
        if capacity < 0:
            raise InvalidArgumentError('slot capacity must be at least 0')
        cls._validate_grade_years(grade_years)
        return cls(
            capacity=capacity,
            remaining_capacity=capacity,
            grade_years=list(grade_years) if grade_years else list(ALL_GRADE_YEARS),
        )

    @property
    def has_sign_ups(self) -> bool:
        return self.remaining_capacity != self.capacity

    def apply_update(
        self, *, capacity: Optional[int] = None, grade_years: Optional[list[int]] = None
    ) -> None:
        if grade_years is not None:
            self._validate_grade_years(grade_years)
            self.grade_years = list(grade_years)
        if capacity is not None:
            if capacity <= 0:
                raise InvalidArgumentError('slot capacity must be positive')
            new_remaining_capacity = self.remaining_capacity + capacity - self.capacity
            if new_remaining_capacity < 0:
                raise InvalidCapacityError('New capacity cannot be less than remaining capacity')
            self.capacity = capacity
            self.remaining_capacity = new_remaining_capacity

    @staticmethod
    def _validate_grade_years(grade_years: Optional[list[int]]) -> None:
        if grade_years and any(year < 1 for year in grade_years):
            raise InvalidArgumentError('grade years must be positive')


@attrs.define(kw_only=True)
class SignUpDetails:
    signups_start_at: datetime
    signups_end_at: datetime
    capacity: int
    signups_enabled: bool = False

    def validate(self) -> None:
        if self.capacity < 0:
            raise InvalidArgumentError('capacity must be at least 0')
        if self.signups_start_at >= self.signups_end_at:
            raise InvalidArgumentError('signUpsStartAt must be before signUpsEndAt')


@attrs.define(kw_only=True)
class EventUpdate:
    """Partial event update. None means unchanged."""

    name: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    contact_email: Optional[str] = None
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    signups_enabled: Optional[bool] = None
    signups_start_at: Optional[datetime] = None
    signups_end_at: Optional[datetime] = None
    capacity: Optional[int] = None


@attrs.define(kw_only=True)
class SlotUpdate:
    id: UUID
    capacity: Optional[int] = None
    grade_years: Optional[list[int]] = None


@attrs.define(kw_only=True)
class EventEntity:
    name: str
    start_at: datetime
    end_at: datetime
    organization_id: Optional[UUID]
    type: EventType = EventType.BASIC
    description: str = ''
    location: str = ''
    contact_email: str = ''
    id: UUID = attrs.field(factory=uuid7)
    signups_enabled: bool = False
    signups_start_at: Optional[datetime] = None
    signups_end_at: Optional[datetime] = None
    capacity: Optional[int] = None
    remaining_capacity: Optional[int] = None
    product_id: Optional[UUID] = None
    version: int = 0
    categories: list[EventCategoryEntity] = attrs.field(factory=list)
    slots: list[SlotEntity] = attrs.field(factory=list)

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        type: EventType,
        name: str,
        start_at: datetime,
        organization_id: UUID,
        end_at: Optional[datetime] = None,
        description: Optional[str] = None,
        location: Optional[str] = None,
        contact_email: Optional[str] = None,
        signup_details: Optional[SignUpDetails] = None,
        product_id: Optional[UUID] = None,
        categories: Optional[list[EventCategoryEntity]] = None,
        now: Optional[datetime] = None,
    ) -> 'EventEntity':
        now = now or datetime.now(timezone.utc)
        end_at = end_at or start_at + DEFAULT_DURATION
        cls._validate_name(name)
        cls._validate_description(description)
        cls._validate_contact_email(contact_email)
        if start_at < now:
            raise InvalidArgumentError('startAt must be in the future')
        cls._validate_time_range(start_at, end_at)

        event = cls(
            type=type,
            name=name,
            start_at=start_at,
            end_at=end_at,
            organization_id=organization_id,
            description=description or '',
            location=location or '',
            contact_email=contact_email or '',
            categories=list(categories or []),
        )

        if type == EventType.BASIC:
            return event

        if signup_details is None:
            raise InvalidArgumentError(f'sign up details are required for {type} events')
        signup_details.validate()
        event.signups_enabled = signup_details.signups_enabled
        event.signups_start_at = signup_details.signups_start_at
        event.signups_end_at = signup_details.signups_end_at
        event.capacity = signup_details.capacity
        event.remaining_capacity = signup_details.capacity

        if type == EventType.TICKETS:
            if product_id is None:
                raise InvalidArgumentError('TICKETS events require a product')
            event.product_id = product_id
        return event

    def degrade_incomplete(self) -> 'EventEntity':
        """
        Rows written before the sign up columns became mandatory can be missing
        them; such events are served as BASIC instead of failing.
        """
        if self.type == EventType.BASIC:
            return self
        missing_details = (
            self.signups_start_at is None
            or self.signups_end_at is None
            or self.capacity is None
            or self.remaining_capacity is None
        )
        missing_product = self.type == EventType.TICKETS and self.product_id is None
        if missing_details or missing_product:
            Logger.base.warning(f'📅 [EVENT] Event {self.id} is incomplete, serving as BASIC')
            self.type = EventType.BASIC
        return self

    @property
    def is_sign_up_event(self) -> bool:
        return self.type in (EventType.SIGN_UPS, EventType.TICKETS)

    def sign_ups_available(self, now: Optional[datetime] = None) -> bool:
        if not self.is_sign_up_event or not self.signups_enabled:
            return False
        if self.signups_start_at is None or self.signups_end_at is None:
            return False
        now = now or datetime.now(timezone.utc)
        return self.signups_start_at <= now <= self.signups_end_at

    def apply_update(self, update: EventUpdate) -> None:
        if update.name is not None:
            self._validate_name(update.name)
            self.name = update.name
        if update.description is not None:
            self._validate_description(update.description)
            self.description = update.description
        if update.location is not None:
            self.location = update.location
        if update.contact_email is not None:
            self._validate_contact_email(update.contact_email)
            self.contact_email = update.contact_email

        start_at = update.start_at or self.start_at
        end_at = update.end_at or self.end_at
        self._validate_time_range(start_at, end_at)
        self.start_at = start_at
        self.end_at = end_at

        if not self.is_sign_up_event:
            return

        if update.signups_enabled is not None:
            self.signups_enabled = update.signups_enabled
        signups_start_at = update.signups_start_at or self.signups_start_at
        signups_end_at = update.signups_end_at or self.signups_end_at
        if signups_start_at and signups_end_at and signups_start_at >= signups_end_at:
            raise InvalidArgumentError('signUpsStartAt must be before signUpsEndAt')
        self.signups_start_at = signups_start_at
        self.signups_end_at = signups_end_at

        if update.capacity is not None:
            if update.capacity < 0:
                raise InvalidArgumentError('capacity must be at least 0')
            new_remaining_capacity = (
                (self.remaining_capacity or 0) + update.capacity - (self.capacity or 0)
            )
            if new_remaining_capacity < 0:
                raise InvalidCapacityError(
                    'New capacity would result in negative remaining capacity'
                )
            self.capacity = update.capacity
            self.remaining_capacity = new_remaining_capacity

    @staticmethod
    def _validate_name(name: str) -> None:
        if not 1 <= len(name) <= NAME_MAX_LENGTH:
            raise InvalidArgumentError(
                f'event name must be between 1 and {NAME_MAX_LENGTH} characters'
            )

    @staticmethod
    def _validate_description(description: Optional[str]) -> None:
        if description and len(description) > DESCRIPTION_MAX_LENGTH:
            raise InvalidArgumentError(
                f'event description must be at most {DESCRIPTION_MAX_LENGTH} characters'
            )

    @staticmethod
    def _validate_contact_email(contact_email: Optional[str]) -> None:
        if contact_email and not is_valid_email(contact_email):
            raise InvalidArgumentError('contact email must be a valid email address')

    @staticmethod
    def _validate_time_range(start_at: datetime, end_at: datetime) -> None:
        if end_at <= start_at:
            raise InvalidArgumentError('endAt must be after startAt')
