"""
Unit tests for CabinUseCase and CabinQueryUseCase

Test Focus:
1. Booking requests are checked against the open booking semesters
2. Confirming a booking never double books a cabin
3. Admin operations require the CABIN_ADMIN feature permission
4. Availability calendar: bookable, available, check-in/check-out flags, squeezed days
"""

from datetime import date
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from src.platform.exception.exceptions import (
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
)
from src.service.cabin.app.command.cabin_use_case import CabinData, CabinUseCase, NewBookingData
from src.service.cabin.app.query.cabin_query_use_case import CabinQueryUseCase
from src.service.cabin.domain.cabin_entity import (
    BookingEntity,
    BookingSemesterEntity,
    BookingStatus,
    CabinEntity,
    GuestCount,
    Semester,
)


TODAY = date(2030, 1, 10)


@pytest.fixture
def cabin() -> CabinEntity:
    return CabinEntity.create(
        name='Oksen',
        capacity=18,
        internal_price=1100,
        external_price=2700,
        internal_price_weekend=1500,
        external_price_weekend=3700,
    )


@pytest.fixture
def spring() -> BookingSemesterEntity:
    return BookingSemesterEntity(
        semester=Semester.SPRING,
        start_at=date(2030, 1, 1),
        end_at=date(2030, 7, 31),
        bookings_enabled=True,
    )


@pytest.fixture
def mock_cabin_repo(cabin: CabinEntity, spring: BookingSemesterEntity) -> AsyncMock:
    repo = AsyncMock()

    async def get_booking_semester(*, semester):
        return spring if semester == Semester.SPRING else None

    async def create_booking(*, booking):
        return booking

    repo.get_booking_semester.side_effect = get_booking_semester
    repo.create_booking.side_effect = create_booking
    repo.find_many_cabins.return_value = [cabin]
    repo.find_overlapping_bookings.return_value = []
    return repo


@pytest.fixture
def mock_permission_service() -> AsyncMock:
    service = AsyncMock()
    service.has_feature_permission.return_value = True
    return service


@pytest.fixture
def mock_mail_publisher() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def cabin_use_case(mock_cabin_repo, mock_permission_service, mock_mail_publisher) -> CabinUseCase:
    return CabinUseCase(
        cabin_repo=mock_cabin_repo,
        permission_service=mock_permission_service,
        mail_publisher=mock_mail_publisher,
        file_use_case=AsyncMock(),
    )


@pytest.fixture
def cabin_query_use_case(mock_cabin_repo, mock_permission_service) -> CabinQueryUseCase:
    return CabinQueryUseCase(
        cabin_repo=mock_cabin_repo,
        permission_service=mock_permission_service,
        file_use_case=AsyncMock(),
    )


def _booking_data(cabin: CabinEntity, **overrides) -> NewBookingData:
    fields = {
        'start_date': date(2030, 3, 1),
        'end_date': date(2030, 3, 3),
        'email': 'kari.nordmann@indokntnu.no',
        'first_name': 'Kari',
        'last_name': 'Nordmann',
        'phone_number': '40000000',
        'cabin_ids': [cabin.id],
        'internal_participants': 6,
    }
    fields.update(overrides)
    return NewBookingData(**fields)


def _confirmed_booking(cabin: CabinEntity, start: date, end: date) -> BookingEntity:
    return BookingEntity(
        start_date=start,
        end_date=end,
        email='someone@indokntnu.no',
        first_name='Some',
        last_name='One',
        phone_number='40000000',
        cabins=[cabin],
        internal_participants=2,
        status=BookingStatus.CONFIRMED,
    )


@pytest.mark.unit
class TestNewBooking:
    @pytest.mark.asyncio
    async def test_new_booking_success__pending_and_receipt_queued(
        self, cabin_use_case: CabinUseCase, cabin: CabinEntity, mock_mail_publisher: AsyncMock
    ):
        """
        Given: spring bookings are open
        When: a stay inside spring is requested
        Then: the booking is stored as PENDING and a receipt email is queued
        """
        # Act
        booking = await cabin_use_case.new_booking(data=_booking_data(cabin), today=TODAY)

        # Assert
        assert booking.status == BookingStatus.PENDING
        assert booking.cabins == [cabin]
        mock_mail_publisher.send_cabin_booking_receipt.assert_awaited_once_with(
            booking_id=booking.id
        )

    @pytest.mark.asyncio
    async def test_new_booking_fail__bookings_disabled(
        self, cabin_use_case: CabinUseCase, cabin: CabinEntity, spring, mock_cabin_repo
    ):
        # Arrange
        spring.bookings_enabled = False

        # Act & Assert
        with pytest.raises(InvalidArgumentError, match='Bookings are not enabled'):
            await cabin_use_case.new_booking(data=_booking_data(cabin), today=TODAY)
        mock_cabin_repo.create_booking.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_new_booking_fail__outside_semester(
        self, cabin_use_case: CabinUseCase, cabin: CabinEntity
    ):
        # Arrange - fall has no semester row, so September is closed
        data = _booking_data(cabin, start_date=date(2030, 9, 6), end_date=date(2030, 9, 8))

        # Act & Assert
        with pytest.raises(InvalidArgumentError, match='not in an active booking semester'):
            await cabin_use_case.new_booking(data=data, today=TODAY)

    @pytest.mark.asyncio
    async def test_new_booking_fail__unknown_cabin(
        self, cabin_use_case: CabinUseCase, cabin: CabinEntity
    ):
        data = _booking_data(cabin, cabin_ids=[cabin.id, uuid4()])

        with pytest.raises(NotFoundError):
            await cabin_use_case.new_booking(data=data, today=TODAY)


@pytest.mark.unit
class TestUpdateBookingStatus:
    @pytest.mark.asyncio
    async def test_confirm_fail__overlaps_confirmed_booking(
        self, cabin_use_case: CabinUseCase, cabin: CabinEntity, mock_cabin_repo: AsyncMock
    ):
        """
        Given: another confirmed booking of the same cabin overlaps
        When: an admin confirms the booking
        Then: the update is rejected and the status is untouched
        """
        # Arrange
        pending = _confirmed_booking(cabin, date(2030, 3, 1), date(2030, 3, 3))
        pending.status = BookingStatus.PENDING
        mock_cabin_repo.get_booking.return_value = pending
        mock_cabin_repo.find_overlapping_bookings.return_value = [
            _confirmed_booking(cabin, date(2030, 3, 2), date(2030, 3, 5))
        ]

        # Act & Assert
        with pytest.raises(InvalidArgumentError, match='overlaps'):
            await cabin_use_case.update_booking_status(
                user_id=uuid4(), booking_id=pending.id, status=BookingStatus.CONFIRMED
            )
        mock_cabin_repo.update_booking_status.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_reject_skips_overlap_check(
        self, cabin_use_case: CabinUseCase, cabin: CabinEntity, mock_cabin_repo: AsyncMock
    ):
        # Arrange
        booking = _confirmed_booking(cabin, date(2030, 3, 1), date(2030, 3, 3))
        booking.status = BookingStatus.REJECTED
        mock_cabin_repo.update_booking_status.return_value = booking

        # Act
        result = await cabin_use_case.update_booking_status(
            user_id=uuid4(), booking_id=booking.id, status=BookingStatus.REJECTED
        )

        # Assert
        assert result.status == BookingStatus.REJECTED
        mock_cabin_repo.find_overlapping_bookings.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_fail__not_cabin_admin(
        self, cabin_use_case: CabinUseCase, mock_permission_service: AsyncMock
    ):
        mock_permission_service.has_feature_permission.return_value = False

        with pytest.raises(PermissionDeniedError):
            await cabin_use_case.update_booking_status(
                user_id=uuid4(), booking_id=uuid4(), status=BookingStatus.CONFIRMED
            )


@pytest.mark.unit
class TestCabinAdministration:
    @pytest.mark.asyncio
    async def test_update_booking_semester__creates_default_row(
        self, cabin_use_case: CabinUseCase, mock_cabin_repo: AsyncMock
    ):
        # Arrange - the fall semester has never been saved
        mock_cabin_repo.save_booking_semester.side_effect = lambda *, booking_semester: (
            booking_semester
        )

        # Act
        result = await cabin_use_case.update_booking_semester(
            user_id=uuid4(), semester=Semester.FALL, bookings_enabled=True
        )

        # Assert
        assert result.semester == Semester.FALL
        assert result.bookings_enabled is True
        assert (result.start_at.month, result.start_at.day) == (8, 1)
        assert (result.end_at.month, result.end_at.day) == (12, 31)

    @pytest.mark.asyncio
    async def test_update_booking_semester_fail__end_before_start(
        self, cabin_use_case: CabinUseCase
    ):
        with pytest.raises(InvalidArgumentError):
            await cabin_use_case.update_booking_semester(
                user_id=uuid4(),
                semester=Semester.SPRING,
                start_at=date(2030, 6, 1),
                end_at=date(2030, 1, 1),
            )

    @pytest.mark.asyncio
    async def test_create_cabin_fail__missing_prices(self, cabin_use_case: CabinUseCase):
        with pytest.raises(InvalidArgumentError):
            await cabin_use_case.create_cabin(
                user_id=uuid4(), data=CabinData(name='Bjørnen', capacity=10)
            )


@pytest.mark.unit
class TestCabinQueries:
    @pytest.mark.asyncio
    async def test_get_booking__email_is_case_insensitive(
        self, cabin_query_use_case: CabinQueryUseCase, cabin: CabinEntity, mock_cabin_repo
    ):
        booking = _confirmed_booking(cabin, date(2030, 3, 1), date(2030, 3, 3))
        mock_cabin_repo.get_booking.return_value = booking

        result = await cabin_query_use_case.get_booking(
            booking_id=booking.id, email='SomeOne@IndokNTNU.no'
        )

        assert result is booking

    @pytest.mark.asyncio
    async def test_get_booking_fail__wrong_email_looks_like_missing_booking(
        self, cabin_query_use_case: CabinQueryUseCase, cabin: CabinEntity, mock_cabin_repo
    ):
        booking = _confirmed_booking(cabin, date(2030, 3, 1), date(2030, 3, 3))
        mock_cabin_repo.get_booking.return_value = booking

        with pytest.raises(NotFoundError):
            await cabin_query_use_case.get_booking(
                booking_id=booking.id, email='intruder@indokntnu.no'
            )

    @pytest.mark.asyncio
    async def test_find_many_bookings_fail__not_cabin_admin(
        self, cabin_query_use_case: CabinQueryUseCase, mock_permission_service
    ):
        mock_permission_service.has_feature_permission.return_value = False

        with pytest.raises(PermissionDeniedError):
            await cabin_query_use_case.find_many_bookings(user_id=None)


@pytest.mark.unit
class TestAvailabilityCalendar:
    @pytest.mark.asyncio
    async def test_confirmed_stay_blocks_its_days(
        self, cabin_query_use_case: CabinQueryUseCase, cabin: CabinEntity, mock_cabin_repo
    ):
        """
        Given: a confirmed stay from March 10 to March 12
        When: the March calendar is requested
        Then: the 10th to the 12th are unavailable and the neighbours lose check in/out
        """
        # Arrange
        mock_cabin_repo.find_overlapping_bookings.return_value = [
            _confirmed_booking(cabin, date(2030, 3, 10), date(2030, 3, 12))
        ]

        # Act
        months = await cabin_query_use_case.get_availability_calendar(
            month=3,
            year=2030,
            count=1,
            cabin_ids=[cabin.id],
            guests=GuestCount(internal=4),
            today=TODAY,
        )

        # Assert
        assert len(months) == 1
        days = {d.day.day: d for d in months[0].days}
        assert len(days) == 31
        assert not days[10].available
        assert not days[11].available
        assert not days[12].available
        assert days[13].available
        assert not days[9].available_for_check_in
        assert days[9].available_for_check_out
        assert days[13].available_for_check_in
        assert not days[13].available_for_check_out
        assert days[9].bookable
        assert days[13].bookable
        # March 1st 2030 is a Friday
        assert days[1].price == 1500
        assert days[4].price == 1100

    @pytest.mark.asyncio
    async def test_stay_ending_before_the_month_blocks_check_out_on_the_first(
        self, cabin_query_use_case: CabinQueryUseCase, cabin: CabinEntity, mock_cabin_repo
    ):
        mock_cabin_repo.find_overlapping_bookings.return_value = [
            _confirmed_booking(cabin, date(2030, 2, 25), date(2030, 2, 28))
        ]

        months = await cabin_query_use_case.get_availability_calendar(
            month=3,
            year=2030,
            count=1,
            cabin_ids=[cabin.id],
            guests=GuestCount(internal=4),
            today=TODAY,
        )

        first = months[0].days[0]
        assert first.available
        assert first.available_for_check_in
        assert not first.available_for_check_out
        kwargs = mock_cabin_repo.find_overlapping_bookings.await_args.kwargs
        assert kwargs['start_date'] == date(2030, 2, 27)
        assert kwargs['status'] == BookingStatus.CONFIRMED

    @pytest.mark.asyncio
    async def test_days_outside_open_semester_are_not_bookable(
        self, cabin_query_use_case: CabinQueryUseCase, cabin: CabinEntity
    ):
        months = await cabin_query_use_case.get_availability_calendar(
            month=7,
            year=2030,
            count=2,
            cabin_ids=[cabin.id],
            guests=GuestCount(internal=1),
            today=TODAY,
        )

        july, august = months
        assert (august.month, august.year) == (8, 2030)
        assert july.days[-1].bookable
        assert not any(day.bookable for day in august.days)
        assert not july.days[-1].available_for_check_in

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'stays,squeezed',
        [
            # between two stays
            (
                [(date(2030, 3, 1), date(2030, 3, 2)), (date(2030, 3, 4), date(2030, 3, 5))],
                date(2030, 3, 3),
            ),
            # between today and a stay
            ([(date(2030, 1, 12), date(2030, 1, 20))], date(2030, 1, 11)),
            # between a stay and the end of the semester
            ([(date(2030, 7, 1), date(2030, 7, 30))], date(2030, 7, 31)),
        ],
    )
    async def test_squeezed_day_is_not_bookable(
        self,
        cabin_query_use_case: CabinQueryUseCase,
        cabin: CabinEntity,
        mock_cabin_repo,
        stays: list,
        squeezed: date,
    ):
        # Given: a free day where no stay can start or end
        mock_cabin_repo.find_overlapping_bookings.return_value = [
            _confirmed_booking(cabin, start, end) for start, end in stays
        ]

        # When
        months = await cabin_query_use_case.get_availability_calendar(
            month=squeezed.month,
            year=squeezed.year,
            count=1,
            cabin_ids=[cabin.id],
            guests=GuestCount(internal=2),
            today=TODAY,
        )

        # Then
        day = months[0].days[squeezed.day - 1]
        assert day.day == squeezed
        assert day.available
        assert not day.available_for_check_in
        assert not day.available_for_check_out
        assert not day.bookable

    @pytest.mark.asyncio
    async def test_guest_count_above_capacity_keeps_days_available(
        self, cabin_query_use_case: CabinQueryUseCase, cabin: CabinEntity
    ):
        # Given: 20 guests for a cabin that sleeps 18
        months = await cabin_query_use_case.get_availability_calendar(
            month=3,
            year=2030,
            count=1,
            cabin_ids=[cabin.id],
            guests=GuestCount(internal=10, external=10),
            today=TODAY,
        )

        # Then
        assert all(day.available for day in months[0].days)
        assert all(day.bookable for day in months[0].days)

    @pytest.mark.asyncio
    @pytest.mark.parametrize('count', [0, 25])
    async def test_count_out_of_range_is_rejected(
        self, cabin_query_use_case: CabinQueryUseCase, cabin: CabinEntity, count: int
    ):
        with pytest.raises(InvalidArgumentError):
            await cabin_query_use_case.get_availability_calendar(
                month=3,
                year=2030,
                count=count,
                cabin_ids=[cabin.id],
                guests=GuestCount(internal=1),
                today=TODAY,
            )

    @pytest.mark.asyncio
    async def test_year_wraps_after_december(
        self, cabin_query_use_case: CabinQueryUseCase, cabin: CabinEntity
    ):
        months = await cabin_query_use_case.get_availability_calendar(
            month=12,
            year=2029,
            count=2,
            cabin_ids=[cabin.id],
            guests=GuestCount(internal=1),
            today=date(2029, 11, 1),
        )

        assert [(m.month, m.year) for m in months] == [(12, 2029), (1, 2030)]
