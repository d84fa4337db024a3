from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import ARRAY, UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.platform.database.orm_db_setting import Base


event_category_link = Table(
    'event_category_link',
    Base.metadata,
    Column(
        'event_id',
        PG_UUID(as_uuid=True),
        ForeignKey('event.id', ondelete='CASCADE'),
        primary_key=True,
    ),
    Column(
        'category_id',
        PG_UUID(as_uuid=True),
        ForeignKey('event_category.id', ondelete='CASCADE'),
        primary_key=True,
    ),
)


class EventCategoryModel(Base):
    __tablename__ = 'event_category'

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    def __repr__(self):
        return f'<EventCategoryModel(id={self.id}, name={self.name})>'


class EventModel(Base):
    __tablename__ = 'event'

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default='BASIC')
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default='')
    location: Mapped[str] = mapped_column(String(255), nullable=False, default='')
    contact_email: Mapped[str] = mapped_column(String(255), nullable=False, default='')
    start_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    organization_id: Mapped[Optional[UUID]] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey('organization.id', ondelete='SET NULL'),
        nullable=True,
        index=True,
    )
    signups_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    signups_start_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    signups_end_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    capacity: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    remaining_capacity: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    product_id: Mapped[Optional[UUID]] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey('product.id', ondelete='SET NULL'), nullable=True
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    slots: Mapped[list['EventSlotModel']] = relationship(
        'EventSlotModel', back_populates='event', cascade='all, delete-orphan', lazy='selectin'
    )
    categories: Mapped[list[EventCategoryModel]] = relationship(
        EventCategoryModel, secondary=event_category_link, lazy='selectin'
    )

    def __repr__(self):
        return f'<EventModel(id={self.id}, name={self.name}, type={self.type})>'


class EventSlotModel(Base):
    __tablename__ = 'event_slot'

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    event_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey('event.id', ondelete='CASCADE'), nullable=False, index=True
    )
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    remaining_capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    grade_years: Mapped[list[int]] = mapped_column(
        ARRAY(Integer), nullable=False, server_default='{1,2,3,4,5}'
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    event: Mapped[EventModel] = relationship('EventModel', back_populates='slots')

    def __repr__(self):
        return (
            f'<EventSlotModel(id={self.id}, remaining={self.remaining_capacity}/{self.capacity})>'
        )


class SignUpModel(Base):
    __tablename__ = 'event_sign_up'
    # Only one active sign up per user and event; inactive history is pruned to one row
    __table_args__ = (UniqueConstraint('user_id', 'event_id', 'active'),)

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    user_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey('user.id', ondelete='CASCADE'), nullable=False
    )
    event_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey('event.id', ondelete='CASCADE'), nullable=False, index=True
    )
    slot_id: Mapped[Optional[UUID]] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey('event_slot.id', ondelete='SET NULL'), nullable=True
    )
    participation_status: Mapped[str] = mapped_column(String(20), nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    user_provided_information: Mapped[str] = mapped_column(Text, nullable=False, default='')
    order_id: Mapped[Optional[UUID]] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey('order.id', ondelete='SET NULL'), nullable=True
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    def __repr__(self):
        return (
            f'<SignUpModel(id={self.id}, user_id={self.user_id}, '
            f'status={self.participation_status})>'
        )
