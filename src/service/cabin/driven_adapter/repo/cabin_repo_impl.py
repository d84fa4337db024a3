from datetime import date
from typing import AsyncContextManager, Callable, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import InvalidArgumentError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.cabin.app.interface.i_cabin_repo import ICabinRepo
from src.service.cabin.domain.cabin_entity import (
    BookingContactEntity,
    BookingEntity,
    BookingSemesterEntity,
    BookingStatus,
    BookingTermsEntity,
    CabinEntity,
    Semester,
)
from src.service.cabin.driven_adapter.model.cabin_model import (
    BookingContactModel,
    BookingModel,
    BookingSemesterModel,
    BookingTermsModel,
    CabinModel,
    booking_cabin_link,
)


class CabinRepoImpl(ICabinRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @Logger.io
    async def create_cabin(self, *, cabin: CabinEntity) -> CabinEntity:
        async with self.session_factory() as session:
            model = CabinModel(
                id=cabin.id,
                name=cabin.name,
                capacity=cabin.capacity,
                internal_price=cabin.internal_price,
                external_price=cabin.external_price,
                internal_price_weekend=cabin.internal_price_weekend,
                external_price_weekend=cabin.external_price_weekend,
            )
            session.add(model)
            try:
                await session.commit()
            except IntegrityError as e:
                raise InvalidArgumentError('A cabin with this name already exists') from e
            return self._cabin_to_entity(model)

    @Logger.io
    async def update_cabin(self, *, cabin: CabinEntity) -> CabinEntity:
        async with self.session_factory() as session:
            model = await session.get(CabinModel, cabin.id)
            if model is None:
                raise NotFoundError(f'Cabin {cabin.id} not found')
            model.name = cabin.name
            model.capacity = cabin.capacity
            model.internal_price = cabin.internal_price
            model.external_price = cabin.external_price
            model.internal_price_weekend = cabin.internal_price_weekend
            model.external_price_weekend = cabin.external_price_weekend
            try:
                await session.commit()
            except IntegrityError as e:
                raise InvalidArgumentError('A cabin with this name already exists') from e
            return self._cabin_to_entity(model)

    @Logger.io
    async def get_cabin(self, *, cabin_id: UUID) -> Optional[CabinEntity]:
        async with self.session_factory() as session:
            model = await session.get(CabinModel, cabin_id)
            return self._cabin_to_entity(model) if model else None

    @Logger.io
    async def find_many_cabins(self, *, cabin_ids: Optional[list[UUID]] = None) -> list[CabinEntity]:
        async with self.session_factory() as session:
            stmt = select(CabinModel).order_by(CabinModel.name)
            if cabin_ids is not None:
                stmt = stmt.where(CabinModel.id.in_(cabin_ids))
            result = await session.execute(stmt)
            return [self._cabin_to_entity(m) for m in result.scalars().all()]

    @Logger.io
    async def create_booking(self, *, booking: BookingEntity) -> BookingEntity:
        async with self.session_factory() as session:
            cabin_ids = [cabin.id for cabin in booking.cabins]
            result = await session.execute(select(CabinModel).where(CabinModel.id.in_(cabin_ids)))
            cabins = list(result.scalars().all())
            if len(cabins) != len(set(cabin_ids)):
                raise NotFoundError('One or more cabins were not found')

            model = BookingModel(
                id=booking.id,
                start_date=booking.start_date,
                end_date=booking.end_date,
                email=booking.email,
                first_name=booking.first_name,
                last_name=booking.last_name,
                phone_number=booking.phone_number,
                internal_participants=booking.internal_participants,
                external_participants=booking.external_participants,
                status=booking.status.value,
                cabins=cabins,
            )
            session.add(model)
            await session.commit()
            await session.refresh(model)
            return self._booking_to_entity(model)

    @Logger.io
    async def get_booking(self, *, booking_id: UUID) -> Optional[BookingEntity]:
        async with self.session_factory() as session:
            model = await session.get(BookingModel, booking_id)
            return self._booking_to_entity(model) if model else None

    @Logger.io
    async def update_booking_status(
        self, *, booking_id: UUID, status: BookingStatus
    ) -> BookingEntity:
        async with self.session_factory() as session:
            model = await session.get(BookingModel, booking_id, with_for_update=True)
            if model is None:
                raise NotFoundError(f'Booking {booking_id} not found')
            model.status = status.value
            await session.commit()
            return self._booking_to_entity(model)

    @Logger.io
    async def find_many_bookings(
        self, *, status: Optional[BookingStatus] = None
    ) -> list[BookingEntity]:
        async with self.session_factory() as session:
            stmt = select(BookingModel).order_by(BookingModel.start_date)
            if status is not None:
                stmt = stmt.where(BookingModel.status == status.value)
            result = await session.execute(stmt)
            return [self._booking_to_entity(m) for m in result.scalars().all()]

    @Logger.io
    async def find_overlapping_bookings(
        self,
        *,
        start_date: date,
        end_date: date,
        status: BookingStatus,
        cabin_ids: Optional[list[UUID]] = None,
        exclude_booking_id: Optional[UUID] = None,
    ) -> list[BookingEntity]:
        async with self.session_factory() as session:
            stmt = select(BookingModel).where(
                BookingModel.status == status.value,
                BookingModel.start_date < end_date,
                BookingModel.end_date > start_date,
            )
            if cabin_ids is not None:
                stmt = stmt.where(
                    BookingModel.id.in_(
                        select(booking_cabin_link.c.booking_id).where(
                            booking_cabin_link.c.cabin_id.in_(cabin_ids)
                        )
                    )
                )
            if exclude_booking_id is not None:
                stmt = stmt.where(BookingModel.id != exclude_booking_id)
            result = await session.execute(stmt.order_by(BookingModel.start_date))
            return [self._booking_to_entity(m) for m in result.scalars().all()]

    @Logger.io
    async def get_booking_semester(self, *, semester: Semester) -> Optional[BookingSemesterEntity]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(BookingSemesterModel).where(BookingSemesterModel.semester == semester.value)
            )
            model = result.scalar_one_or_none()
            return self._semester_to_entity(model) if model else None

    @Logger.io
    async def save_booking_semester(
        self, *, booking_semester: BookingSemesterEntity
    ) -> BookingSemesterEntity:
        async with self.session_factory() as session:
            result = await session.execute(
                select(BookingSemesterModel)
                .where(BookingSemesterModel.semester == booking_semester.semester.value)
                .with_for_update()
            )
            model = result.scalar_one_or_none()
            if model is None:
                model = BookingSemesterModel(
                    id=booking_semester.id, semester=booking_semester.semester.value
                )
                session.add(model)
            model.start_at = booking_semester.start_at
            model.end_at = booking_semester.end_at
            model.bookings_enabled = booking_semester.bookings_enabled
            try:
                await session.commit()
            except IntegrityError as e:
                raise InvalidArgumentError(
                    'The booking semester was modified by someone else, please try again'
                ) from e
            return self._semester_to_entity(model)

    @Logger.io
    async def get_booking_contact(self) -> BookingContactEntity:
        async with self.session_factory() as session:
            result = await session.execute(select(BookingContactModel).limit(1))
            model = result.scalar_one_or_none()
            return self._contact_to_entity(model) if model else BookingContactEntity()

    @Logger.io
    async def save_booking_contact(self, *, contact: BookingContactEntity) -> BookingContactEntity:
        async with self.session_factory() as session:
            result = await session.execute(select(BookingContactModel).limit(1).with_for_update())
            model = result.scalar_one_or_none()
            if model is None:
                model = BookingContactModel(id=contact.id)
                session.add(model)
            model.name = contact.name
            model.email = contact.email
            model.phone_number = contact.phone_number
            await session.commit()
            return self._contact_to_entity(model)

    @Logger.io
    async def create_booking_terms(self, *, terms: BookingTermsEntity) -> BookingTermsEntity:
        async with self.session_factory() as session:
            model = BookingTermsModel(id=terms.id, file_id=terms.file_id)
            session.add(model)
            await session.commit()
            await session.refresh(model)
            return self._terms_to_entity(model)

    @Logger.io
    async def get_latest_booking_terms(self) -> Optional[BookingTermsEntity]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(BookingTermsModel).order_by(BookingTermsModel.created_at.desc()).limit(1)
            )
            model = result.scalar_one_or_none()
            return self._terms_to_entity(model) if model else None

    @staticmethod
    def _cabin_to_entity(model: CabinModel) -> CabinEntity:
        return CabinEntity(
            id=model.id,
            name=model.name,
            capacity=model.capacity,
            internal_price=model.internal_price,
            external_price=model.external_price,
            internal_price_weekend=model.internal_price_weekend,
            external_price_weekend=model.external_price_weekend,
        )

    @classmethod
    def _booking_to_entity(cls, model: BookingModel) -> BookingEntity:
        return BookingEntity(
            id=model.id,
            start_date=model.start_date,
            end_date=model.end_date,
            email=model.email,
            first_name=model.first_name,
            last_name=model.last_name,
            phone_number=model.phone_number,
            cabins=[cls._cabin_to_entity(c) for c in model.cabins],
            internal_participants=model.internal_participants,
            external_participants=model.external_participants,
            status=BookingStatus(model.status),
            created_at=model.created_at,
        )

    @staticmethod
    def _semester_to_entity(model: BookingSemesterModel) -> BookingSemesterEntity:
        return BookingSemesterEntity(
            id=model.id,
            semester=Semester(model.semester),
            start_at=model.start_at,
            end_at=model.end_at,
            bookings_enabled=model.bookings_enabled,
        )

    @staticmethod
    def _contact_to_entity(model: BookingContactModel) -> BookingContactEntity:
        return BookingContactEntity(
            id=model.id, name=model.name, email=model.email, phone_number=model.phone_number
        )

    @staticmethod
    def _terms_to_entity(model: BookingTermsModel) -> BookingTermsEntity:
        return BookingTermsEntity(id=model.id, file_id=model.file_id, created_at=model.created_at)
