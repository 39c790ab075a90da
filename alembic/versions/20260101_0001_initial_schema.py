"""Create initial schema

Revision ID: 20260101_0001
Revises: 
Create Date: 2026-01-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '20260101_0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

def _has_table(bind, name: str) -> bool:
    try:
        insp = inspect(bind)
        return insp.has_table(name)
    except Exception:
        return False

def upgrade() -> None:
    bind = op.get_bind()

    # Define ENUM types for use in table creation
    roomtype_enum = sa.Enum('STANDARD', 'DELUXE', 'SUITE', 'PRESIDENTIAL', 'PENTHOUSE', name='roomtype')
    roomstatus_enum = sa.Enum('AVAILABLE', 'OCCUPIED', 'MAINTENANCE', 'RESERVED', name='roomstatus')
    bookingstatus_enum = sa.Enum('PENDING', 'CONFIRMED', 'CHECKED_IN', 'CHECKED_OUT', 'CANCELLED', 'NO_SHOW', name='bookingstatus')
    paymentstatus_enum = sa.Enum('PENDING', 'PAID', 'REFUNDED', 'FAILED', 'PARTIALLY_REFUNDED', name='paymentstatus')
    paymentmethod_enum = sa.Enum('CREDIT_CARD', 'DEBIT_CARD', 'STRIPE', 'CASH', 'BANK_TRANSFER', name='paymentmethod')

    if not _has_table(bind, 'users'):
        op.create_table('users',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('email', sa.String(length=255), nullable=False),
            sa.Column('hashed_password', sa.String(length=255), nullable=False),
            sa.Column('first_name', sa.String(length=100), nullable=False),
            sa.Column('last_name', sa.String(length=100), nullable=False),
            sa.Column('phone', sa.String(length=50), nullable=True),
            sa.Column('role', sa.String(length=20), server_default='guest', nullable=False),
            sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
        op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)

    if not _has_table(bind, 'hotels'):
        op.create_table('hotels',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('name', sa.String(length=200), nullable=False),
            sa.Column('description', sa.Text(), nullable=False),
            sa.Column('street', sa.String(length=300), nullable=False),
            sa.Column('city', sa.String(length=100), nullable=False),
            sa.Column('state', sa.String(length=100), nullable=False),
            sa.Column('country', sa.String(length=100), nullable=False),
            sa.Column('zip_code', sa.String(length=20), nullable=False),
            sa.Column('phone', sa.String(length=50), nullable=False),
            sa.Column('email', sa.String(length=255), nullable=False),
            sa.Column('website', sa.String(length=300), nullable=True),
            sa.Column('star_rating', sa.Integer(), nullable=False),
            sa.Column('image_url', sa.String(length=500), nullable=True),
            sa.Column('check_in_time', sa.String(length=5), server_default='14:00', nullable=False),
            sa.Column('check_out_time', sa.String(length=5), server_default='12:00', nullable=False),
            sa.Column('cancellation_policy', sa.Text(), nullable=True),
            sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
            sa.Column('is_featured', sa.Boolean(), server_default=sa.false(), nullable=False),
            sa.Column('total_rooms', sa.Integer(), server_default='0', nullable=False),
            sa.Column('average_rating', sa.Numeric(precision=3, scale=1), server_default='0', nullable=False),
            sa.Column('total_reviews', sa.Integer(), server_default='0', nullable=False),
            sa.Column('created_by', sa.Integer(), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=True),
            sa.ForeignKeyConstraint(['created_by'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_hotels_id'), 'hotels', ['id'], unique=False)
        op.create_index(op.f('ix_hotels_city'), 'hotels', ['city'], unique=False)
        op.create_index(op.f('ix_hotels_country'), 'hotels', ['country'], unique=False)

    if not _has_table(bind, 'rooms'):
        op.create_table('rooms',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('hotel_id', sa.Integer(), nullable=False),
            sa.Column('room_number', sa.String(length=20), nullable=False),
            sa.Column('type', roomtype_enum, nullable=False),
            sa.Column('name', sa.String(length=200), nullable=False),
            sa.Column('description', sa.Text(), nullable=False),
            sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
            sa.Column('discount_price', sa.Numeric(precision=10, scale=2), nullable=True),
            sa.Column('capacity_adults', sa.Integer(), nullable=False),
            sa.Column('capacity_children', sa.Integer(), nullable=False),
            sa.Column('size_sqm', sa.Integer(), nullable=True),
            sa.Column('floor', sa.Integer(), nullable=False),
            sa.Column('bed_type', sa.String(length=50), nullable=False),
            sa.Column('view', sa.String(length=100), nullable=True),
            sa.Column('image_url', sa.String(length=500), nullable=True),
            sa.Column('status', roomstatus_enum, nullable=False),
            sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=True),
            sa.ForeignKeyConstraint(['hotel_id'], ['hotels.id'], ),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('hotel_id', 'room_number', name='uq_rooms_hotel_room_number')
        )
        op.create_index(op.f('ix_rooms_hotel_id'), 'rooms', ['hotel_id'], unique=False)

    if not _has_table(bind, 'bookings'):
        op.create_table('bookings',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('booking_reference', sa.String(length=20), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('hotel_id', sa.Integer(), nullable=False),
            sa.Column('room_id', sa.Integer(), nullable=False),
            sa.Column('check_in', sa.Date(), nullable=False),
            sa.Column('check_out', sa.Date(), nullable=False),
            sa.Column('adults', sa.Integer(), nullable=False),
            sa.Column('children', sa.Integer(), nullable=False),
            sa.Column('nights', sa.Integer(), nullable=False),
            sa.Column('price_per_night', sa.Numeric(precision=10, scale=2), nullable=False),
            sa.Column('subtotal', sa.Numeric(precision=10, scale=2), nullable=False),
            sa.Column('taxes', sa.Numeric(precision=10, scale=2), nullable=False),
            sa.Column('total_amount', sa.Numeric(precision=10, scale=2), nullable=False),
            sa.Column('status', bookingstatus_enum, nullable=False),
            sa.Column('payment_status', paymentstatus_enum, nullable=False),
            sa.Column('payment_method', paymentmethod_enum, nullable=True),
            sa.Column('payment_intent_id', sa.String(length=255), nullable=True),
            sa.Column('guest_first_name', sa.String(length=100), nullable=False),
            sa.Column('guest_last_name', sa.String(length=100), nullable=False),
            sa.Column('guest_email', sa.String(length=255), nullable=False),
            sa.Column('guest_phone', sa.String(length=50), nullable=False),
            sa.Column('special_requests', sa.Text(), nullable=True),
            sa.Column('cancellation_reason', sa.Text(), nullable=True),
            sa.Column('cancelled_at', sa.DateTime(), nullable=True),
            sa.Column('checked_in_at', sa.DateTime(), nullable=True),
            sa.Column('checked_out_at', sa.DateTime(), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=True),
            sa.Column('updated_at', sa.DateTime(), nullable=True),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.ForeignKeyConstraint(['hotel_id'], ['hotels.id'], ),
            sa.ForeignKeyConstraint(['room_id'], ['rooms.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_bookings_id'), 'bookings', ['id'], unique=False)
        op.create_index(op.f('ix_bookings_booking_reference'), 'bookings', ['booking_reference'], unique=True)
        # composite indexes help overlap searches
        op.create_index('ix_bookings_room_check_in_check_out', 'bookings', ['room_id', 'check_in', 'check_out'], unique=False)
        op.create_index('ix_bookings_hotel_check_in_check_out', 'bookings', ['hotel_id', 'check_in', 'check_out'], unique=False)
        op.create_index('ix_bookings_user_status', 'bookings', ['user_id', 'status'], unique=False)

    if not _has_table(bind, 'reviews'):
        op.create_table('reviews',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('hotel_id', sa.Integer(), nullable=False),
            sa.Column('booking_id', sa.Integer(), nullable=False),
            sa.Column('rating', sa.Integer(), nullable=False),
            sa.Column('title', sa.String(length=100), nullable=False),
            sa.Column('comment', sa.Text(), nullable=False),
            sa.Column('cleanliness', sa.Integer(), nullable=False),
            sa.Column('service', sa.Integer(), nullable=False),
            sa.Column('location', sa.Integer(), nullable=False),
            sa.Column('value', sa.Integer(), nullable=False),
            sa.Column('amenities', sa.Integer(), nullable=False),
            sa.Column('is_verified', sa.Boolean(), server_default=sa.false(), nullable=False),
            sa.Column('is_approved', sa.Boolean(), server_default=sa.false(), nullable=False),
            sa.Column('response_text', sa.Text(), nullable=True),
            sa.Column('responded_at', sa.DateTime(), nullable=True),
            sa.Column('responded_by', sa.Integer(), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=True),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.ForeignKeyConstraint(['hotel_id'], ['hotels.id'], ),
            sa.ForeignKeyConstraint(['booking_id'], ['bookings.id'], ),
            sa.ForeignKeyConstraint(['responded_by'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('booking_id')
        )
        op.create_index(op.f('ix_reviews_id'), 'reviews', ['id'], unique=False)
        op.create_index('ix_reviews_hotel_approved', 'reviews', ['hotel_id', 'is_approved'], unique=False)


def downgrade() -> None:
    op.drop_table('reviews')
    op.drop_table('bookings')
    op.drop_table('rooms')
    op.drop_table('hotels')
    op.drop_table('users')
    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        for name in ('paymentmethod', 'paymentstatus', 'bookingstatus', 'roomstatus', 'roomtype'):
            op.execute(f'DROP TYPE IF EXISTS {name}')
