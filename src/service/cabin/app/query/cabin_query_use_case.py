from calendar import monthrange
from datetime import date, timedelta
from typing import Optional
from uuid import UUID

import attrs

from src.platform.exception.exceptions import (
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
)
from src.platform.logging.loguru_io import Logger
from src.service.cabin.app.interface.i_cabin_repo import ICabinRepo
from src.service.cabin.domain.cabin_entity import (
    BookingContactEntity,
    BookingEntity,
    BookingSemesterEntity,
    BookingStatus,
    BookingTermsEntity,
    CabinEntity,
    CalendarDay,
    GuestCount,
    Semester,
    total_cost,
)
from src.service.file.app.command.file_use_case import FileUseCase
from src.service.shared_kernel.app.interface.i_permission_service import IPermissionService
from src.service.shared_kernel.domain.enum.feature_permission import FeaturePermission


MAX_CALENDAR_MONTHS = 24


@attrs.define(frozen=True)
class BookingSemesters:
    fall: Optional[BookingSemesterEntity]
    spring: Optional[BookingSemesterEntity]


@attrs.define(frozen=True)
class BookingTermsWithUrl:
    terms: BookingTermsEntity
    url: str


@attrs.define(kw_only=True)
class CalendarMonth:
    month: int
    year: int
    days: list[CalendarDay]


def _month_days(year: int, month: int) -> list[date]:
    return [date(year, month, day) for day in range(1, monthrange(year, month)[1] + 1)]


def _shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


class CabinQueryUseCase:
    def __init__(
        self,
        *,
        cabin_repo: ICabinRepo,
        permission_service: IPermissionService,
        file_use_case: FileUseCase,
    ) -> None:
        self.cabin_repo = cabin_repo
        self.permission_service = permission_service
        self.file_use_case = file_use_case

    @Logger.io
    async def find_many_cabins(self) -> list[CabinEntity]:
        return await self.cabin_repo.find_many_cabins()

    @Logger.io
    async def get_booking_semesters(self) -> BookingSemesters:
        return BookingSemesters(
            fall=await self.cabin_repo.get_booking_semester(semester=Semester.FALL),
            spring=await self.cabin_repo.get_booking_semester(semester=Semester.SPRING),
        )

    @Logger.io
    async def get_booking_contact(self) -> BookingContactEntity:
        return await self.cabin_repo.get_booking_contact()

    @Logger.io
    async def find_many_bookings(
        self, *, user_id: Optional[UUID], status: Optional[BookingStatus] = None
    ) -> list[BookingEntity]:
        is_admin = await self.permission_service.has_feature_permission(
            user_id=user_id, feature_permission=FeaturePermission.CABIN_ADMIN
        )
        if not is_admin:
            raise PermissionDeniedError('You do not have permission to view bookings.')
        return await self.cabin_repo.find_many_bookings(status=status)

    @Logger.io
    async def get_booking(self, *, booking_id: UUID, email: str) -> BookingEntity:
        """Bookings are anonymous; knowing the id and the email proves ownership"""
        booking = await self.cabin_repo.get_booking(booking_id=booking_id)
        if booking is None or booking.email.lower() != email.lower():
            raise NotFoundError(f'Booking {booking_id} not found')
        return booking

    @Logger.io
    async def get_booking_terms(self) -> BookingTermsWithUrl:
        terms = await self.cabin_repo.get_latest_booking_terms()
        if terms is None:
            raise NotFoundError('No booking terms found')
        download = await self.file_use_case.create_file_download_url(
            file_id=terms.file_id, download_as='kontrakt.pdf'
        )
        return BookingTermsWithUrl(terms=terms, url=download.url)

    @Logger.io
    async def total_cost(
        self,
        *,
        start_date: date,
        end_date: date,
        cabin_ids: list[UUID],
        guests: GuestCount,
    ) -> int:
        cabins = await self.cabin_repo.find_many_cabins(cabin_ids=cabin_ids)
        if len(cabins) != len(set(cabin_ids)):
            raise NotFoundError('One or more cabins were not found')
        return total_cost(cabins=cabins, start_date=start_date, end_date=end_date, guests=guests)

    @Logger.io
    async def get_availability_calendar(
        self,
        *,
        month: int,
        year: int,
        count: int,
        cabin_ids: list[UUID],
        guests: GuestCount,
        today: Optional[date] = None,
    ) -> list[CalendarMonth]:
        """
        `count` consecutive months starting at month/year, one CalendarDay per day

        A day is available when no confirmed stay of the requested cabins covers it,
        check out day included. It is bookable when it lies after today inside a
        semester that takes bookings and a stay can either start or end on it; a day
        squeezed between closed days fits no stay.
        """
        if not 1 <= month <= 12:
            raise InvalidArgumentError('month must be between 1 and 12')
        if not 1 <= count <= MAX_CALENDAR_MONTHS:
            raise InvalidArgumentError(f'count must be between 1 and {MAX_CALENDAR_MONTHS}')

        cabins = await self.cabin_repo.find_many_cabins(cabin_ids=cabin_ids)
        if not cabins or len(cabins) != len(set(cabin_ids)):
            raise NotFoundError('One or more cabins were not found')
        today = today or date.today()
        semesters = await self.get_booking_semesters()
        open_semesters = [
            s for s in (semesters.fall, semesters.spring) if s is not None and s.bookings_enabled
        ]

        months = [_shift_month(year, month, offset) for offset in range(count)]
        first_day = date(months[0][0], months[0][1], 1)
        last_year, last_month = months[-1]
        # Pad so check in/out on the edges can look at neighbours, stays hold their end day
        range_start = first_day - timedelta(days=2)
        range_end = date(last_year, last_month, monthrange(last_year, last_month)[1]) + timedelta(
            days=2
        )
        confirmed = await self.cabin_repo.find_overlapping_bookings(
            start_date=range_start,
            end_date=range_end,
            status=BookingStatus.CONFIRMED,
            cabin_ids=cabin_ids,
        )

        def in_open_semester(day: date) -> bool:
            return day > today and any(s.covers(day) for s in open_semesters)

        def available(day: date) -> bool:
            return not any(booking.occupies(day) for booking in confirmed)

        def open_day(day: date) -> bool:
            return in_open_semester(day) and available(day)

        calendar: list[CalendarMonth] = []
        for month_year, month_no in months:
            days = []
            for day in _month_days(month_year, month_no):
                is_open = open_day(day)
                check_in = is_open and open_day(day + timedelta(days=1))
                check_out = is_open and open_day(day - timedelta(days=1))
                days.append(
                    CalendarDay(
                        day=day,
                        bookable=in_open_semester(day) and (check_in or check_out),
                        available=available(day),
                        price=sum(cabin.night_price(day, guests) for cabin in cabins),
                        available_for_check_in=check_in,
                        available_for_check_out=check_out,
                    )
                )
            calendar.append(CalendarMonth(month=month_no, year=month_year, days=days))
        return calendar
