from datetime import date, datetime, timedelta
from enum import StrEnum
from typing import Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import InvalidArgumentError
from src.platform.logging.loguru_io import Logger
from src.platform.validation.validators import NORWEGIAN_PHONE_PATTERN, is_valid_email


class BookingStatus(StrEnum):
    PENDING = 'PENDING'
    CONFIRMED = 'CONFIRMED'
    CANCELLED = 'CANCELLED'
    REJECTED = 'REJECTED'


class Semester(StrEnum):
    SPRING = 'SPRING'
    FALL = 'FALL'


# (start month, start day, end month, end day) used when a semester row does not exist yet
DEFAULT_SEMESTER_BOUNDS = {
    Semester.SPRING: (1, 1, 7, 31),
    Semester.FALL: (8, 1, 12, 31),
}


@attrs.define(kw_only=True)
class GuestCount:
    internal: int = 0
    external: int = 0

    @property
    def total(self) -> int:
        return self.internal + self.external


@attrs.define(kw_only=True)
class CabinEntity:
    name: str
    capacity: int
    internal_price: int
    external_price: int
    internal_price_weekend: int
    external_price_weekend: int
    id: UUID = attrs.field(factory=uuid7)

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        name: str,
        capacity: int,
        internal_price: int,
        external_price: int,
        internal_price_weekend: Optional[int] = None,
        external_price_weekend: Optional[int] = None,
    ) -> 'CabinEntity':
        cabin = cls(
            name=name,
            capacity=capacity,
            internal_price=internal_price,
            external_price=external_price,
            internal_price_weekend=(
                internal_price if internal_price_weekend is None else internal_price_weekend
            ),
            external_price_weekend=(
                external_price if external_price_weekend is None else external_price_weekend
            ),
        )
        cabin.validate()
        return cabin

    def apply_update(
        self,
        *,
        name: Optional[str] = None,
        capacity: Optional[int] = None,
        internal_price: Optional[int] = None,
        external_price: Optional[int] = None,
        internal_price_weekend: Optional[int] = None,
        external_price_weekend: Optional[int] = None,
    ) -> None:
        if name is not None:
            self.name = name
        if capacity is not None:
            self.capacity = capacity
        if internal_price is not None:
            self.internal_price = internal_price
        if external_price is not None:
            self.external_price = external_price
        if internal_price_weekend is not None:
            self.internal_price_weekend = internal_price_weekend
        if external_price_weekend is not None:
            self.external_price_weekend = external_price_weekend
        self.validate()

    def validate(self) -> None:
        if not self.name:
            raise InvalidArgumentError('cabin name must not be empty')
        if self.capacity < 1:
            raise InvalidArgumentError('cabin capacity must be at least 1')
        prices = (
            self.internal_price,
            self.external_price,
            self.internal_price_weekend,
            self.external_price_weekend,
        )
        if any(price < 0 for price in prices):
            raise InvalidArgumentError('cabin prices must not be negative')

    def night_price(self, night: date, guests: GuestCount) -> int:
        """Price of the night starting on `night`; Friday and Saturday nights are weekend nights"""
        is_weekend = night.weekday() in (4, 5)
        if guests.internal >= guests.external:
            return self.internal_price_weekend if is_weekend else self.internal_price
        return self.external_price_weekend if is_weekend else self.external_price


def nights_between(start_date: date, end_date: date) -> list[date]:
    return [start_date + timedelta(days=i) for i in range((end_date - start_date).days)]


def total_cost(
    *, cabins: list[CabinEntity], start_date: date, end_date: date, guests: GuestCount
) -> int:
    if end_date <= start_date:
        raise InvalidArgumentError('end date must be after start date')
    return sum(
        cabin.night_price(night, guests)
        for night in nights_between(start_date, end_date)
        for cabin in cabins
    )


@attrs.define(kw_only=True)
class BookingSemesterEntity:
    semester: Semester
    start_at: date
    end_at: date
    bookings_enabled: bool = False
    id: UUID = attrs.field(factory=uuid7)

    @classmethod
    def default(cls, semester: Semester, year: int) -> 'BookingSemesterEntity':
        start_month, start_day, end_month, end_day = DEFAULT_SEMESTER_BOUNDS[semester]
        return cls(
            semester=semester,
            start_at=date(year, start_month, start_day),
            end_at=date(year, end_month, end_day),
        )

    def contains(self, start_date: date, end_date: date) -> bool:
        """The whole stay lies inside this semester and the semester takes bookings"""
        return self.bookings_enabled and self.start_at <= start_date and end_date <= self.end_at

    def covers(self, day: date) -> bool:
        return self.start_at <= day <= self.end_at


def is_cross_semester_booking(
    start_date: date,
    end_date: date,
    *,
    fall: Optional[BookingSemesterEntity],
    spring: Optional[BookingSemesterEntity],
) -> bool:
    """
    A stay may start in one semester and end in the other when both take bookings
    and the first ends at most one day before the second starts.
    """
    if fall is None or spring is None:
        return False
    if not fall.bookings_enabled or not spring.bookings_enabled:
        return False

    fall_adjoins_spring = fall.end_at + timedelta(days=1) >= spring.start_at
    spring_adjoins_fall = spring.end_at + timedelta(days=1) >= fall.start_at

    if fall.covers(start_date) and spring.covers(end_date) and fall_adjoins_spring:
        return True
    return spring.covers(start_date) and fall.covers(end_date) and spring_adjoins_fall


@attrs.define(kw_only=True)
class BookingEntity:
    start_date: date
    end_date: date
    email: str
    first_name: str
    last_name: str
    phone_number: str
    cabins: list[CabinEntity]
    internal_participants: int = 0
    external_participants: int = 0
    status: BookingStatus = BookingStatus.PENDING
    id: UUID = attrs.field(factory=uuid7)
    created_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        start_date: date,
        end_date: date,
        email: str,
        first_name: str,
        last_name: str,
        phone_number: str,
        cabins: list[CabinEntity],
        internal_participants: int = 0,
        external_participants: int = 0,
        today: date,
    ) -> 'BookingEntity':
        if not first_name:
            raise InvalidArgumentError('first name must be at least 1 character')
        if not last_name:
            raise InvalidArgumentError('last name must be at least 1 character')
        if start_date <= today:
            raise InvalidArgumentError('start date must be in the future')
        if end_date <= today:
            raise InvalidArgumentError('end date must be in the future')
        if end_date <= start_date:
            raise InvalidArgumentError('end date must be after start date')
        if not is_valid_email(email):
            raise InvalidArgumentError('invalid email')
        if not NORWEGIAN_PHONE_PATTERN.match(phone_number):
            raise InvalidArgumentError('invalid phone number')
        if not cabins:
            raise InvalidArgumentError('a booking must include at least one cabin')
        if internal_participants < 0 or external_participants < 0:
            raise InvalidArgumentError('participant counts must not be negative')
        return cls(
            start_date=start_date,
            end_date=end_date,
            email=email,
            first_name=first_name,
            last_name=last_name,
            phone_number=phone_number,
            cabins=list(cabins),
            internal_participants=internal_participants,
            external_participants=external_participants,
        )

    @property
    def guests(self) -> GuestCount:
        return GuestCount(internal=self.internal_participants, external=self.external_participants)

    @property
    def total_cost(self) -> int:
        return total_cost(
            cabins=self.cabins,
            start_date=self.start_date,
            end_date=self.end_date,
            guests=self.guests,
        )

    def occupies(self, day: date) -> bool:
        """`day` falls within this stay, check out day included"""
        return self.start_date <= day <= self.end_date


@attrs.define(kw_only=True)
class BookingContactEntity:
    name: str = ''
    email: str = ''
    phone_number: str = ''
    id: UUID = attrs.field(factory=uuid7)

    def apply_update(
        self,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        phone_number: Optional[str] = None,
    ) -> None:
        if email is not None:
            if email and not is_valid_email(email):
                raise InvalidArgumentError('invalid email')
            self.email = email
        if phone_number is not None:
            if phone_number and not NORWEGIAN_PHONE_PATTERN.match(phone_number):
                raise InvalidArgumentError('invalid phone number')
            self.phone_number = phone_number
        if name is not None:
            self.name = name


@attrs.define(kw_only=True)
class BookingTermsEntity:
    file_id: UUID
    id: UUID = attrs.field(factory=uuid7)
    created_at: Optional[datetime] = None


@attrs.define(kw_only=True)
class CalendarDay:
    day: date
    bookable: bool
    available: bool
    price: int
    available_for_check_in: bool = False
    available_for_check_out: bool = False
