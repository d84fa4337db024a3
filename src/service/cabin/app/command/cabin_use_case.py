"""
Cabin bookings and their administration

Anyone may request a booking; everything else requires the CABIN_ADMIN
feature permission.
"""

from datetime import date
from typing import Optional
from uuid import UUID

import attrs

from src.platform.exception.exceptions import (
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.membership_metrics import metrics
from src.service.cabin.app.interface.i_cabin_repo import ICabinRepo
from src.service.cabin.domain.cabin_entity import (
    BookingContactEntity,
    BookingEntity,
    BookingSemesterEntity,
    BookingStatus,
    BookingTermsEntity,
    CabinEntity,
    Semester,
    is_cross_semester_booking,
)
from src.service.file.app.command.file_use_case import FileUseCase, FileWithUrl
from src.service.shared_kernel.app.interface.i_mail_publisher import IMailPublisher
from src.service.shared_kernel.app.interface.i_permission_service import IPermissionService
from src.service.shared_kernel.domain.enum.feature_permission import FeaturePermission


@attrs.define(kw_only=True)
class NewBookingData:
    start_date: date
    end_date: date
    email: str
    first_name: str
    last_name: str
    phone_number: str
    cabin_ids: list[UUID]
    internal_participants: int = 0
    external_participants: int = 0


@attrs.define(kw_only=True)
class CabinData:
    name: Optional[str] = None
    capacity: Optional[int] = None
    internal_price: Optional[int] = None
    external_price: Optional[int] = None
    internal_price_weekend: Optional[int] = None
    external_price_weekend: Optional[int] = None


@attrs.define(frozen=True)
class NewBookingTerms:
    terms: BookingTermsEntity
    upload_url: str


class CabinUseCase:
    def __init__(
        self,
        *,
        cabin_repo: ICabinRepo,
        permission_service: IPermissionService,
        mail_publisher: IMailPublisher,
        file_use_case: FileUseCase,
    ) -> None:
        self.cabin_repo = cabin_repo
        self.permission_service = permission_service
        self.mail_publisher = mail_publisher
        self.file_use_case = file_use_case

    @Logger.io
    async def new_booking(self, *, data: NewBookingData, today: Optional[date] = None) -> BookingEntity:
        """
        Request a booking; it stays PENDING until a cabin admin confirms it

        Raises:
            InvalidArgumentError: bookings are closed, a field is invalid, or the
                stay is outside the open booking semesters
            NotFoundError: one of the cabins does not exist
        """
        fall = await self.cabin_repo.get_booking_semester(semester=Semester.FALL)
        spring = await self.cabin_repo.get_booking_semester(semester=Semester.SPRING)
        if not any(s is not None and s.bookings_enabled for s in (fall, spring)):
            raise InvalidArgumentError('Bookings are not enabled.')

        cabins = await self._get_cabins(data.cabin_ids)
        booking = BookingEntity.create(
            start_date=data.start_date,
            end_date=data.end_date,
            email=data.email,
            first_name=data.first_name,
            last_name=data.last_name,
            phone_number=data.phone_number,
            cabins=cabins,
            internal_participants=data.internal_participants,
            external_participants=data.external_participants,
            today=today or date.today(),
        )

        in_semester = any(
            s is not None and s.contains(booking.start_date, booking.end_date)
            for s in (fall, spring)
        )
        if not in_semester and not is_cross_semester_booking(
            booking.start_date, booking.end_date, fall=fall, spring=spring
        ):
            raise InvalidArgumentError(
                'booking is not in an active booking semester, '
                'and is not a valid cross-semester booking'
            )

        booking = await self.cabin_repo.create_booking(booking=booking)
        metrics.record_cabin_booking(status=booking.status)
        Logger.base.info(f'🏠 [CABIN] New booking {booking.id}')
        await self.mail_publisher.send_cabin_booking_receipt(booking_id=booking.id)
        return booking

    @Logger.io
    async def update_booking_status(
        self, *, user_id: Optional[UUID], booking_id: UUID, status: BookingStatus
    ) -> BookingEntity:
        await self._require_cabin_admin(user_id, 'You do not have permission to update this booking.')

        if status == BookingStatus.CONFIRMED:
            booking = await self.cabin_repo.get_booking(booking_id=booking_id)
            if booking is None:
                raise NotFoundError(f'Booking {booking_id} not found')
            overlapping = await self.cabin_repo.find_overlapping_bookings(
                start_date=booking.start_date,
                end_date=booking.end_date,
                status=BookingStatus.CONFIRMED,
                cabin_ids=[cabin.id for cabin in booking.cabins],
                exclude_booking_id=booking.id,
            )
            if overlapping:
                raise InvalidArgumentError('this booking overlaps with another confirmed booking')

        booking = await self.cabin_repo.update_booking_status(booking_id=booking_id, status=status)
        metrics.record_cabin_booking(status=booking.status)
        return booking

    @Logger.io
    async def update_booking_semester(
        self,
        *,
        user_id: Optional[UUID],
        semester: Semester,
        start_at: Optional[date] = None,
        end_at: Optional[date] = None,
        bookings_enabled: Optional[bool] = None,
    ) -> BookingSemesterEntity:
        await self._require_cabin_admin(
            user_id, 'You do not have permission to update the booking semester.'
        )

        booking_semester = await self.cabin_repo.get_booking_semester(semester=semester)
        if booking_semester is None:
            booking_semester = BookingSemesterEntity.default(semester, date.today().year)

        if start_at is not None:
            booking_semester.start_at = start_at
        if end_at is not None:
            booking_semester.end_at = end_at
        if bookings_enabled is not None:
            booking_semester.bookings_enabled = bookings_enabled
        if booking_semester.end_at < booking_semester.start_at:
            raise InvalidArgumentError('end date must be after start date')

        return await self.cabin_repo.save_booking_semester(booking_semester=booking_semester)

    @Logger.io
    async def update_booking_contact(
        self,
        *,
        user_id: Optional[UUID],
        name: Optional[str] = None,
        email: Optional[str] = None,
        phone_number: Optional[str] = None,
    ) -> BookingContactEntity:
        await self._require_cabin_admin(
            user_id, 'You do not have permission to update the booking contact.'
        )
        contact = await self.cabin_repo.get_booking_contact()
        contact.apply_update(name=name, email=email, phone_number=phone_number)
        return await self.cabin_repo.save_booking_contact(contact=contact)

    @Logger.io
    async def create_cabin(self, *, user_id: Optional[UUID], data: CabinData) -> CabinEntity:
        await self._require_cabin_admin(user_id, 'You do not have permission to create a cabin.')
        if data.name is None or data.capacity is None:
            raise InvalidArgumentError('name and capacity are required')
        if data.internal_price is None or data.external_price is None:
            raise InvalidArgumentError('internal and external price are required')
        cabin = CabinEntity.create(
            name=data.name,
            capacity=data.capacity,
            internal_price=data.internal_price,
            external_price=data.external_price,
            internal_price_weekend=data.internal_price_weekend,
            external_price_weekend=data.external_price_weekend,
        )
        return await self.cabin_repo.create_cabin(cabin=cabin)

    @Logger.io
    async def update_cabin(
        self, *, user_id: Optional[UUID], cabin_id: UUID, data: CabinData
    ) -> CabinEntity:
        await self._require_cabin_admin(user_id, 'You do not have permission to update a cabin.')
        cabin = await self.cabin_repo.get_cabin(cabin_id=cabin_id)
        if cabin is None:
            raise NotFoundError(f'Cabin {cabin_id} not found')
        cabin.apply_update(**attrs.asdict(data))
        return await self.cabin_repo.update_cabin(cabin=cabin)

    @Logger.io
    async def update_booking_terms(self, *, user_id: Optional[UUID]) -> NewBookingTerms:
        """New terms are a pdf the caller uploads to the returned URL"""
        await self._require_cabin_admin(
            user_id, 'You do not have permission to update the booking terms.'
        )
        upload: FileWithUrl = await self.file_use_case.create_file_upload_url(
            user_id=user_id, extension='pdf'
        )
        terms = await self.cabin_repo.create_booking_terms(
            terms=BookingTermsEntity(file_id=upload.file.id)
        )
        return NewBookingTerms(terms=terms, upload_url=upload.url)

    async def _get_cabins(self, cabin_ids: list[UUID]) -> list[CabinEntity]:
        if not cabin_ids:
            raise InvalidArgumentError('a booking must include at least one cabin')
        cabins = await self.cabin_repo.find_many_cabins(cabin_ids=cabin_ids)
        if len(cabins) != len(set(cabin_ids)):
            raise NotFoundError('One or more cabins were not found')
        return cabins

    async def _require_cabin_admin(self, user_id: Optional[UUID], message: str) -> None:
        is_admin = await self.permission_service.has_feature_permission(
            user_id=user_id, feature_permission=FeaturePermission.CABIN_ADMIN
        )
        if not is_admin:
            raise PermissionDeniedError(message)
