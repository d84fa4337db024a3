from abc import ABC, abstractmethod
from datetime import date
from typing import Optional
from uuid import UUID

from src.service.cabin.domain.cabin_entity import (
    BookingContactEntity,
    BookingEntity,
    BookingSemesterEntity,
    BookingStatus,
    BookingTermsEntity,
    CabinEntity,
    Semester,
)


class ICabinRepo(ABC):
    # Cabins
    @abstractmethod
    async def create_cabin(self, *, cabin: CabinEntity) -> CabinEntity:
        pass

    @abstractmethod
    async def update_cabin(self, *, cabin: CabinEntity) -> CabinEntity:
        pass

    @abstractmethod
    async def get_cabin(self, *, cabin_id: UUID) -> Optional[CabinEntity]:
        pass

    @abstractmethod
    async def find_many_cabins(self, *, cabin_ids: Optional[list[UUID]] = None) -> list[CabinEntity]:
        pass

    # Bookings
    @abstractmethod
    async def create_booking(self, *, booking: BookingEntity) -> BookingEntity:
        pass

    @abstractmethod
    async def get_booking(self, *, booking_id: UUID) -> Optional[BookingEntity]:
        pass

    @abstractmethod
    async def update_booking_status(
        self, *, booking_id: UUID, status: BookingStatus
    ) -> BookingEntity:
        pass

    @abstractmethod
    async def find_many_bookings(
        self, *, status: Optional[BookingStatus] = None
    ) -> list[BookingEntity]:
        pass

    @abstractmethod
    async def find_overlapping_bookings(
        self,
        *,
        start_date: date,
        end_date: date,
        status: BookingStatus,
        cabin_ids: Optional[list[UUID]] = None,
        exclude_booking_id: Optional[UUID] = None,
    ) -> list[BookingEntity]:
        """Bookings sharing at least one night with [start_date, end_date)"""
        pass

    # Semesters
    @abstractmethod
    async def get_booking_semester(self, *, semester: Semester) -> Optional[BookingSemesterEntity]:
        pass

    @abstractmethod
    async def save_booking_semester(
        self, *, booking_semester: BookingSemesterEntity
    ) -> BookingSemesterEntity:
        """Insert or update the row for booking_semester.semester"""
        pass

    # Contact
    @abstractmethod
    async def get_booking_contact(self) -> BookingContactEntity:
        """The single contact row, an empty contact if none is stored"""
        pass

    @abstractmethod
    async def save_booking_contact(self, *, contact: BookingContactEntity) -> BookingContactEntity:
        pass

    # Terms
    @abstractmethod
    async def create_booking_terms(self, *, terms: BookingTermsEntity) -> BookingTermsEntity:
        pass

    @abstractmethod
    async def get_latest_booking_terms(self) -> Optional[BookingTermsEntity]:
        pass
