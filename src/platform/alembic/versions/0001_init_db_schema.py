"""init_db_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18

Schema:
- study_program, user: Feide users and the study programs that grant feature permissions
- file: uploaded blobs (the object itself lives in S3)
- organization, member: organizations and their members with roles
- merchant, product, order, payment_attempt: Vipps payments
- event_category, event, event_slot, event_sign_up: events with capacity per slot
- cabin, booking, booking_semester, booking_contact, booking_terms: cabin rentals
- document_category, document: the document archive
- listing: open positions in organizations
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ARRAY, UUID


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        'created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False
    )


def _updated_at() -> sa.Column:
    return sa.Column(
        'updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False
    )


def upgrade() -> None:
    """Create all tables with final schema."""

    # ========== STEP 1: Users ==========

    op.create_table(
        'study_program',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('external_id', sa.String(length=255), nullable=False),
        sa.Column(
            'feature_permissions',
            ARRAY(sa.String(length=50)),
            server_default='{}',
            nullable=False,
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('external_id'),
    )

    op.create_table(
        'user',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('feide_id', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('username', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=255), nullable=False),
        sa.Column('last_name', sa.String(length=255), nullable=False),
        sa.Column('graduation_year', sa.Integer(), nullable=True),
        sa.Column('graduation_year_updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('first_login', sa.Boolean(), nullable=False),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        sa.Column('allergies', sa.String(length=1000), nullable=False),
        sa.Column('phone_number', sa.String(length=20), nullable=False),
        sa.Column('is_super_user', sa.Boolean(), nullable=False),
        sa.Column('study_program_id', UUID(as_uuid=True), nullable=True),
        sa.Column('confirmed_study_program_id', UUID(as_uuid=True), nullable=True),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(['study_program_id'], ['study_program.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(
            ['confirmed_study_program_id'], ['study_program.id'], ondelete='SET NULL'
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username'),
    )
    op.create_index(op.f('ix_user_feide_id'), 'user', ['feide_id'], unique=True)

    op.create_table(
        'file',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', UUID(as_uuid=True), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )

    # ========== STEP 2: Organizations ==========

    op.create_table(
        'organization',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('logo_file_id', UUID(as_uuid=True), nullable=True),
        sa.Column(
            'feature_permissions',
            ARRAY(sa.String(length=50)),
            server_default='{}',
            nullable=False,
        ),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(['logo_file_id'], ['file.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )

    op.create_table(
        'member',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', UUID(as_uuid=True), nullable=False),
        sa.Column('organization_id', UUID(as_uuid=True), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['organization_id'], ['organization.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'organization_id'),
    )
    op.create_index(op.f('ix_member_organization_id'), 'member', ['organization_id'])

    # ========== STEP 3: Products and payments ==========

    op.create_table(
        'merchant',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('client_id', sa.String(length=255), nullable=False),
        sa.Column('client_secret', sa.String(length=255), nullable=False),
        sa.Column('serial_number', sa.String(length=64), nullable=False),
        sa.Column('subscription_key', sa.String(length=255), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
        sa.UniqueConstraint('serial_number'),
    )

    op.create_table(
        'product',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('merchant_id', UUID(as_uuid=True), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(['merchant_id'], ['merchant.id']),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'order',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('product_id', UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', UUID(as_uuid=True), nullable=True),
        sa.Column('total_price', sa.Integer(), nullable=False),
        sa.Column('payment_status', sa.String(length=20), nullable=False),
        sa.Column('attempt', sa.Integer(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('purchased_at', sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(['product_id'], ['product.id']),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_order_product_id'), 'order', ['product_id'])
    op.create_index(op.f('ix_order_user_id'), 'order', ['user_id'])

    op.create_table(
        'payment_attempt',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('order_id', UUID(as_uuid=True), nullable=False),
        sa.Column('reference', sa.String(length=100), nullable=False),
        sa.Column('state', sa.String(length=20), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(['order_id'], ['order.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('reference'),
    )
    op.create_index(op.f('ix_payment_attempt_order_id'), 'payment_attempt', ['order_id'])

    # ========== STEP 4: Events ==========

    op.create_table(
        'event_category',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )

    op.create_table(
        'event',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=False),
        sa.Column('contact_email', sa.String(length=255), nullable=False),
        sa.Column('start_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('organization_id', UUID(as_uuid=True), nullable=True),
        sa.Column('signups_enabled', sa.Boolean(), nullable=False),
        sa.Column('signups_start_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('signups_end_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('capacity', sa.Integer(), nullable=True),
        sa.Column('remaining_capacity', sa.Integer(), nullable=True),
        sa.Column('product_id', UUID(as_uuid=True), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(['organization_id'], ['organization.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['product_id'], ['product.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_event_end_at'), 'event', ['end_at'])
    op.create_index(op.f('ix_event_organization_id'), 'event', ['organization_id'])

    op.create_table(
        'event_category_link',
        sa.Column('event_id', UUID(as_uuid=True), nullable=False),
        sa.Column('category_id', UUID(as_uuid=True), nullable=False),
        sa.ForeignKeyConstraint(['event_id'], ['event.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['category_id'], ['event_category.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('event_id', 'category_id'),
    )

    op.create_table(
        'event_slot',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('event_id', UUID(as_uuid=True), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('remaining_capacity', sa.Integer(), nullable=False),
        sa.Column(
            'grade_years', ARRAY(sa.Integer()), server_default='{1,2,3,4,5}', nullable=False
        ),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['event_id'], ['event.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_event_slot_event_id'), 'event_slot', ['event_id'])

    op.create_table(
        'event_sign_up',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', UUID(as_uuid=True), nullable=False),
        sa.Column('event_id', UUID(as_uuid=True), nullable=False),
        sa.Column('slot_id', UUID(as_uuid=True), nullable=True),
        sa.Column('participation_status', sa.String(length=20), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False),
        sa.Column('user_provided_information', sa.Text(), nullable=False),
        sa.Column('order_id', UUID(as_uuid=True), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['event_id'], ['event.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['slot_id'], ['event_slot.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['order_id'], ['order.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'event_id', 'active'),
    )
    op.create_index(op.f('ix_event_sign_up_event_id'), 'event_sign_up', ['event_id'])

    # ========== STEP 5: Cabins ==========

    op.create_table(
        'cabin',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('internal_price', sa.Integer(), nullable=False),
        sa.Column('external_price', sa.Integer(), nullable=False),
        sa.Column('internal_price_weekend', sa.Integer(), nullable=False),
        sa.Column('external_price_weekend', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )

    op.create_table(
        'booking',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=255), nullable=False),
        sa.Column('last_name', sa.String(length=255), nullable=False),
        sa.Column('phone_number', sa.String(length=20), nullable=False),
        sa.Column('internal_participants', sa.Integer(), nullable=False),
        sa.Column('external_participants', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_booking_start_date'), 'booking', ['start_date'])
    op.create_index(op.f('ix_booking_end_date'), 'booking', ['end_date'])
    op.create_index(op.f('ix_booking_status'), 'booking', ['status'])

    op.create_table(
        'booking_cabin_link',
        sa.Column('booking_id', UUID(as_uuid=True), nullable=False),
        sa.Column('cabin_id', UUID(as_uuid=True), nullable=False),
        sa.ForeignKeyConstraint(['booking_id'], ['booking.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['cabin_id'], ['cabin.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('booking_id', 'cabin_id'),
    )

    op.create_table(
        'booking_semester',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('semester', sa.String(length=10), nullable=False),
        sa.Column('start_at', sa.Date(), nullable=False),
        sa.Column('end_at', sa.Date(), nullable=False),
        sa.Column('bookings_enabled', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('semester'),
    )

    op.create_table(
        'booking_contact',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone_number', sa.String(length=20), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'booking_terms',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('file_id', UUID(as_uuid=True), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(['file_id'], ['file.id']),
        sa.PrimaryKeyConstraint('id'),
    )

    # ========== STEP 6: Documents and listings ==========

    op.create_table(
        'document_category',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )

    op.create_table(
        'document',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('file_id', UUID(as_uuid=True), nullable=False),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(['file_id'], ['file.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('file_id'),
    )

    op.create_table(
        'document_category_link',
        sa.Column('document_id', UUID(as_uuid=True), nullable=False),
        sa.Column('category_id', UUID(as_uuid=True), nullable=False),
        sa.ForeignKeyConstraint(['document_id'], ['document.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['category_id'], ['document_category.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('document_id', 'category_id'),
    )

    op.create_table(
        'listing',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('closes_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('application_url', sa.String(length=2048), nullable=False),
        sa.Column('organization_id', UUID(as_uuid=True), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(['organization_id'], ['organization.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_listing_closes_at'), 'listing', ['closes_at'])
    op.create_index(op.f('ix_listing_organization_id'), 'listing', ['organization_id'])


def downgrade() -> None:
    """Drop all tables in reverse order of creation (indexes dropped automatically)."""
    for table in (
        'listing',
        'document_category_link',
        'document',
        'document_category',
        'booking_terms',
        'booking_contact',
        'booking_semester',
        'booking_cabin_link',
        'booking',
        'cabin',
        'event_sign_up',
        'event_slot',
        'event_category_link',
        'event',
        'event_category',
        'payment_attempt',
        'order',
        'product',
        'merchant',
        'member',
        'organization',
        'file',
        'user',
        'study_program',
    ):
        op.drop_table(table)
