from datetime import date, datetime
from uuid import UUID

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
    func,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.platform.database.orm_db_setting import Base


booking_cabin_link = Table(
    'booking_cabin_link',
    Base.metadata,
    Column(
        'booking_id',
        PG_UUID(as_uuid=True),
        ForeignKey('booking.id', ondelete='CASCADE'),
        primary_key=True,
    ),
    Column(
        'cabin_id',
        PG_UUID(as_uuid=True),
        ForeignKey('cabin.id', ondelete='CASCADE'),
        primary_key=True,
    ),
)


class CabinModel(Base):
    __tablename__ = 'cabin'

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    internal_price: Mapped[int] = mapped_column(Integer, nullable=False)
    external_price: Mapped[int] = mapped_column(Integer, nullable=False)
    internal_price_weekend: Mapped[int] = mapped_column(Integer, nullable=False)
    external_price_weekend: Mapped[int] = mapped_column(Integer, nullable=False)

    def __repr__(self):
        return f'<CabinModel(id={self.id}, name={self.name})>'


class BookingModel(Base):
    __tablename__ = 'booking'

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    end_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(20), nullable=False)
    internal_participants: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    external_participants: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default='PENDING', index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    cabins: Mapped[list[CabinModel]] = relationship(secondary=booking_cabin_link, lazy='selectin')

    def __repr__(self):
        return f'<BookingModel(id={self.id}, status={self.status})>'


class BookingSemesterModel(Base):
    __tablename__ = 'booking_semester'

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    semester: Mapped[str] = mapped_column(String(10), nullable=False, unique=True)
    start_at: Mapped[date] = mapped_column(Date, nullable=False)
    end_at: Mapped[date] = mapped_column(Date, nullable=False)
    bookings_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class BookingContactModel(Base):
    __tablename__ = 'booking_contact'

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default='')
    email: Mapped[str] = mapped_column(String(255), nullable=False, default='')
    phone_number: Mapped[str] = mapped_column(String(20), nullable=False, default='')


class BookingTermsModel(Base):
    __tablename__ = 'booking_terms'

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    file_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey('file.id'), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
