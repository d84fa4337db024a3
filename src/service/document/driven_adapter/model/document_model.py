from datetime import datetime
from uuid import UUID

from sqlalchemy import Column, DateTime, ForeignKey, String, Table, Text, func
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.platform.database.orm_db_setting import Base


document_category_link = Table(
    'document_category_link',
    Base.metadata,
    Column(
        'document_id',
        PG_UUID(as_uuid=True),
        ForeignKey('document.id', ondelete='CASCADE'),
        primary_key=True,
    ),
    Column(
        'category_id',
        PG_UUID(as_uuid=True),
        ForeignKey('document_category.id', ondelete='CASCADE'),
        primary_key=True,
    ),
)


class DocumentCategoryModel(Base):
    __tablename__ = 'document_category'

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)


class DocumentModel(Base):
    __tablename__ = 'document'

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default='')
    file_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey('file.id'), nullable=False, unique=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    categories: Mapped[list[DocumentCategoryModel]] = relationship(
        secondary=document_category_link, lazy='selectin'
    )

    def __repr__(self):
        return f'<DocumentModel(id={self.id}, name={self.name})>'
