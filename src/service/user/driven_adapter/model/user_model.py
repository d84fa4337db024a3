from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import ARRAY, Boolean, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


class StudyProgramModel(Base):
    __tablename__ = 'study_program'

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    external_id: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    feature_permissions: Mapped[list[str]] = mapped_column(
        ARRAY(String(50)), nullable=False, server_default='{}'
    )

    def __repr__(self):
        return f'<StudyProgramModel(id={self.id}, name={self.name})>'


class UserModel(Base):
    __tablename__ = 'user'

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    feide_id: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    username: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    first_name: Mapped[str] = mapped_column(String(255), nullable=False, default='')
    last_name: Mapped[str] = mapped_column(String(255), nullable=False, default='')
    graduation_year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    graduation_year_updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    first_login: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    last_login: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    allergies: Mapped[str] = mapped_column(String(1000), nullable=False, default='')
    phone_number: Mapped[str] = mapped_column(String(20), nullable=False, default='')
    is_super_user: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    study_program_id: Mapped[Optional[UUID]] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey('study_program.id', ondelete='SET NULL'), nullable=True
    )
    confirmed_study_program_id: Mapped[Optional[UUID]] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey('study_program.id', ondelete='SET NULL'), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    def __repr__(self):
        return f'<UserModel(id={self.id}, username={self.username})>'
