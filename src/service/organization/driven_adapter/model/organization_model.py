from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import (
    ARRAY,
    DateTime,
    ForeignKey,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.platform.database.orm_db_setting import Base


class OrganizationModel(Base):
    __tablename__ = 'organization'

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default='')
    logo_file_id: Mapped[Optional[UUID]] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey('file.id', ondelete='SET NULL'), nullable=True
    )
    feature_permissions: Mapped[list[str]] = mapped_column(
        ARRAY(String(50)), nullable=False, server_default='{}'
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    members: Mapped[list['MemberModel']] = relationship(
        'MemberModel', back_populates='organization', cascade='all, delete-orphan'
    )

    def __repr__(self):
        return f'<OrganizationModel(id={self.id}, name={self.name})>'


class MemberModel(Base):
    __tablename__ = 'member'
    __table_args__ = (UniqueConstraint('user_id', 'organization_id'),)

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    user_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey('user.id', ondelete='CASCADE'), nullable=False
    )
    organization_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey('organization.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    role: Mapped[str] = mapped_column(String(20), nullable=False, default='MEMBER')
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    organization: Mapped[OrganizationModel] = relationship(
        'OrganizationModel', back_populates='members'
    )

    def __repr__(self):
        return f'<MemberModel(id={self.id}, user_id={self.user_id}, role={self.role})>'
