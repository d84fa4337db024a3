from datetime import date, datetime
from typing import Optional
from uuid import UUID

import strawberry

from src.service.cabin.app.command.cabin_use_case import CabinData, NewBookingData
from src.service.cabin.app.query.cabin_query_use_case import CalendarMonth as CalendarMonthResult
from src.service.cabin.domain.cabin_entity import (
    BookingContactEntity,
    BookingEntity,
    BookingSemesterEntity,
    BookingStatus,
    BookingTermsEntity,
    CabinEntity,
    CalendarDay as CalendarDayEntity,
    GuestCount,
    Semester,
)

strawberry.enum(BookingStatus)
strawberry.enum(Semester)


@strawberry.type
class Cabin:
    id: UUID
    name: str
    capacity: int
    internal_price: int
    external_price: int
    internal_price_weekend: int
    external_price_weekend: int

    @classmethod
    def from_entity(cls, entity: CabinEntity) -> 'Cabin':
        return cls(
            id=entity.id,
            name=entity.name,
            capacity=entity.capacity,
            internal_price=entity.internal_price,
            external_price=entity.external_price,
            internal_price_weekend=entity.internal_price_weekend,
            external_price_weekend=entity.external_price_weekend,
        )


@strawberry.type
class Booking:
    id: UUID
    start_date: date
    end_date: date
    email: str
    first_name: str
    last_name: str
    phone_number: str
    status: BookingStatus
    internal_participants: int
    external_participants: int
    total_cost: int
    cabins: list[Cabin]
    created_at: Optional[datetime]

    @classmethod
    def from_entity(cls, entity: BookingEntity) -> 'Booking':
        return cls(
            id=entity.id,
            start_date=entity.start_date,
            end_date=entity.end_date,
            email=entity.email,
            first_name=entity.first_name,
            last_name=entity.last_name,
            phone_number=entity.phone_number,
            status=entity.status,
            internal_participants=entity.internal_participants,
            external_participants=entity.external_participants,
            total_cost=entity.total_cost,
            cabins=[Cabin.from_entity(c) for c in entity.cabins],
            created_at=entity.created_at,
        )


@strawberry.type
class BookingSemester:
    id: UUID
    semester: Semester
    start_at: date
    end_at: date
    bookings_enabled: bool

    @classmethod
    def from_entity(cls, entity: BookingSemesterEntity) -> 'BookingSemester':
        return cls(
            id=entity.id,
            semester=entity.semester,
            start_at=entity.start_at,
            end_at=entity.end_at,
            bookings_enabled=entity.bookings_enabled,
        )


@strawberry.type
class BookingSemestersResponse:
    fall: Optional[BookingSemester]
    spring: Optional[BookingSemester]


@strawberry.type
class BookingContact:
    id: UUID
    name: str
    email: str
    phone_number: str

    @classmethod
    def from_entity(cls, entity: BookingContactEntity) -> 'BookingContact':
        return cls(
            id=entity.id, name=entity.name, email=entity.email, phone_number=entity.phone_number
        )


@strawberry.type
class BookingTerms:
    id: UUID
    file_id: UUID
    created_at: Optional[datetime]
    url: Optional[str] = None

    @classmethod
    def from_entity(cls, entity: BookingTermsEntity, url: Optional[str] = None) -> 'BookingTerms':
        return cls(id=entity.id, file_id=entity.file_id, created_at=entity.created_at, url=url)


@strawberry.type
class CalendarDay:
    calendar_date: date
    bookable: bool
    available: bool
    price: int
    available_for_check_in: bool
    available_for_check_out: bool

    @classmethod
    def from_entity(cls, entity: CalendarDayEntity) -> 'CalendarDay':
        return cls(
            calendar_date=entity.day,
            bookable=entity.bookable,
            available=entity.available,
            price=entity.price,
            available_for_check_in=entity.available_for_check_in,
            available_for_check_out=entity.available_for_check_out,
        )


@strawberry.type
class CalendarMonth:
    month: int
    year: int
    days: list[CalendarDay]

    @classmethod
    def from_result(cls, result: CalendarMonthResult) -> 'CalendarMonth':
        return cls(
            month=result.month,
            year=result.year,
            days=[CalendarDay.from_entity(d) for d in result.days],
        )


@strawberry.type
class CabinsResponse:
    cabins: list[Cabin]


@strawberry.type
class CabinResponse:
    cabin: Cabin


@strawberry.type
class BookingResponse:
    booking: Booking


@strawberry.type
class BookingsResponse:
    bookings: list[Booking]
    total: int


@strawberry.type
class BookingTermsResponse:
    booking_terms: BookingTerms


@strawberry.type
class UpdateBookingTermsResponse:
    booking_terms: BookingTerms
    upload_url: str


@strawberry.type
class TotalCostResponse:
    total_cost: int


@strawberry.type
class AvailabilityCalendarResponse:
    calendar_months: list[CalendarMonth]


@strawberry.input
class GuestsInput:
    internal: int = 0
    external: int = 0

    def to_guests(self) -> GuestCount:
        return GuestCount(internal=self.internal, external=self.external)


@strawberry.input
class NewBookingInput:
    start_date: date
    end_date: date
    email: str
    first_name: str
    last_name: str
    phone_number: str
    cabins: list[UUID]
    internal_participants: int = 0
    external_participants: int = 0

    def to_data(self) -> NewBookingData:
        return NewBookingData(
            start_date=self.start_date,
            end_date=self.end_date,
            email=self.email,
            first_name=self.first_name,
            last_name=self.last_name,
            phone_number=self.phone_number,
            cabin_ids=list(self.cabins),
            internal_participants=self.internal_participants,
            external_participants=self.external_participants,
        )


@strawberry.input
class BookingInput:
    id: UUID
    email: str


@strawberry.input
class UpdateBookingSemesterInput:
    semester: Semester
    start_at: Optional[date] = None
    end_at: Optional[date] = None
    bookings_enabled: Optional[bool] = None


@strawberry.input
class UpdateBookingContactInput:
    name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None


@strawberry.input
class CabinInput:
    name: Optional[str] = None
    capacity: Optional[int] = None
    internal_price: Optional[int] = None
    external_price: Optional[int] = None
    internal_price_weekend: Optional[int] = None
    external_price_weekend: Optional[int] = None

    def to_data(self) -> CabinData:
        return CabinData(
            name=self.name,
            capacity=self.capacity,
            internal_price=self.internal_price,
            external_price=self.external_price,
            internal_price_weekend=self.internal_price_weekend,
            external_price_weekend=self.external_price_weekend,
        )


@strawberry.input
class TotalCostInput:
    start_date: date
    end_date: date
    cabins: list[UUID]
    guests: GuestsInput


@strawberry.input
class CalendarInput:
    month: int
    year: int
    cabins: list[UUID]
    guests: GuestsInput
    count: int = 12
