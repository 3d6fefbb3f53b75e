"""initial schema: users, studios, availability, bookings, reviews

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2025-01-10 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'a1b2c3d4e5f6'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'roles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=120), nullable=False),
        sa.Column('phone_number', sa.String(length=30), nullable=True),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'user_roles',
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('role_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['role_id'], ['roles.id']),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('user_id', 'role_id'),
    )
    op.create_table(
        'sessions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('token_hash', sa.String(length=128), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('last_seen_at', sa.DateTime(), nullable=True),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('revoked', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_sessions_user_id', 'sessions', ['user_id'])
    op.create_index('ix_sessions_token_hash', 'sessions', ['token_hash'], unique=True)

    op.create_table(
        'verification_otps',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('channel', sa.String(length=10), nullable=False),
        sa.Column('code_hash', sa.String(length=128), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('consumed_at', sa.DateTime(), nullable=True),
        sa.Column('attempts', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_verification_otps_user_id', 'verification_otps', ['user_id'])

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('action', sa.String(length=80), nullable=False),
        sa.Column('entity', sa.String(length=80), nullable=True),
        sa.Column('entity_id', sa.String(length=80), nullable=True),
        sa.Column('ip', sa.String(length=64), nullable=True),
        sa.Column('metadata_json', sa.Text(), nullable=True),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_audit_logs_action', 'audit_logs', ['action'])

    op.create_table(
        'studios',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('equipments', sa.JSON(), nullable=False),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column('full_address', sa.String(length=255), nullable=True),
        sa.Column('city', sa.String(length=80), nullable=True),
        sa.Column('state', sa.String(length=80), nullable=True),
        sa.Column('pin_code', sa.String(length=12), nullable=True),
        sa.Column('price_per_hour', sa.Integer(), nullable=False),
        sa.Column('open_hour', sa.Integer(), nullable=False),
        sa.Column('close_hour', sa.Integer(), nullable=False),
        sa.Column('approved', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('open_hour >= 0 AND open_hour <= 23', name='ck_studio_open_hour'),
        sa.CheckConstraint('close_hour >= 1 AND close_hour <= 24', name='ck_studio_close_hour'),
        sa.CheckConstraint('open_hour < close_hour', name='ck_studio_hours_order'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_studios_owner_id', 'studios', ['owner_id'])

    op.create_table(
        'studio_packages',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('studio_id', sa.Integer(), nullable=False),
        sa.Column('key', sa.String(length=80), nullable=False),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['studio_id'], ['studios.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('studio_id', 'key', name='uq_studio_package_key'),
    )
    op.create_index('ix_studio_packages_studio_id', 'studio_packages', ['studio_id'])

    op.create_table(
        'studio_addons',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('studio_id', sa.Integer(), nullable=False),
        sa.Column('key', sa.String(length=80), nullable=False),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=False),
        sa.Column('max_quantity', sa.Integer(), nullable=False),
        sa.CheckConstraint('max_quantity >= 1', name='ck_addon_max_quantity'),
        sa.ForeignKeyConstraint(['studio_id'], ['studios.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('studio_id', 'key', name='uq_studio_addon_key'),
    )
    op.create_index('ix_studio_addons_studio_id', 'studio_addons', ['studio_id'])

    op.create_table(
        'availabilities',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('studio_id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['studio_id'], ['studios.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('studio_id', 'date', name='uq_availability_studio_date'),
    )
    op.create_index('ix_availabilities_studio_id', 'availabilities', ['studio_id'])
    op.create_index('ix_availabilities_date', 'availabilities', ['date'])

    op.create_table(
        'availability_slots',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('availability_id', sa.Integer(), nullable=False),
        sa.Column('hour', sa.Integer(), nullable=False),
        sa.Column('is_available', sa.Boolean(), nullable=False),
        sa.CheckConstraint('hour >= 0 AND hour <= 23', name='ck_availability_slot_hour'),
        sa.ForeignKeyConstraint(['availability_id'], ['availabilities.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('availability_id', 'hour', name='uq_availability_slot_hour'),
    )
    op.create_index('ix_availability_slots_availability_id', 'availability_slots', ['availability_id'])

    op.create_table(
        'bookings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('studio_id', sa.Integer(), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('hours', sa.JSON(), nullable=False),
        sa.Column('package_key', sa.String(length=80), nullable=False),
        sa.Column('package_price', sa.Integer(), nullable=False),
        sa.Column('total_price', sa.Integer(), nullable=False),
        sa.Column('payment_status', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['customer_id'], ['users.id']),
        sa.ForeignKeyConstraint(['studio_id'], ['studios.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_bookings_studio_id', 'bookings', ['studio_id'])
    op.create_index('ix_bookings_customer_id', 'bookings', ['customer_id'])
    op.create_index('ix_bookings_studio_date', 'bookings', ['studio_id', 'date'])

    op.create_table(
        'booking_addons',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('booking_id', sa.Integer(), nullable=False),
        sa.Column('key', sa.String(length=80), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price', sa.Integer(), nullable=False),
        sa.CheckConstraint('quantity >= 1', name='ck_booking_addon_quantity'),
        sa.ForeignKeyConstraint(['booking_id'], ['bookings.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_booking_addons_booking_id', 'booking_addons', ['booking_id'])

    op.create_table(
        'reviews',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('studio_id', sa.Integer(), nullable=False),
        sa.Column('reviewer_id', sa.Integer(), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('rating >= 1 AND rating <= 5', name='ck_review_rating'),
        sa.ForeignKeyConstraint(['reviewer_id'], ['users.id']),
        sa.ForeignKeyConstraint(['studio_id'], ['studios.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('studio_id', 'reviewer_id', name='uq_review_studio_reviewer'),
    )
    op.create_index('ix_reviews_studio_id', 'reviews', ['studio_id'])
    op.create_index('ix_reviews_reviewer_id', 'reviews', ['reviewer_id'])


def downgrade():
    op.drop_table('reviews')
    op.drop_table('booking_addons')
    op.drop_table('bookings')
    op.drop_table('availability_slots')
    op.drop_table('availabilities')
    op.drop_table('studio_addons')
    op.drop_table('studio_packages')
    op.drop_table('studios')
    op.drop_table('audit_logs')
    op.drop_table('verification_otps')
    op.drop_table('sessions')
    op.drop_table('user_roles')
    op.drop_table('users')
    op.drop_table('roles')
