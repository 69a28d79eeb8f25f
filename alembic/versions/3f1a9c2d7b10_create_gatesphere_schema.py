"""create_gatesphere_schema

Revision ID: 3f1a9c2d7b10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1a9c2d7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Tables owned by a society; each gets an index on society_id
SOCIETY_SCOPED = [
    'visitors', 'staff', 'complaints', 'announcements', 'polls', 'maintenance_bills',
    'expenses', 'amenities', 'amenity_bookings', 'documents', 'inventory_items',
    'messages', 'security_alerts', 'audit_logs', 'buildings', 'flats', 'users',
]


def _timestamps(updated=True):
    columns = [sa.Column('created_at', sa.DateTime(), nullable=True)]
    if updated:
        columns.append(sa.Column('updated_at', sa.DateTime(), nullable=True))
    return columns


def _society_fk():
    return sa.Column('society_id', sa.Integer(), sa.ForeignKey('societies.id'), nullable=False)


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'societies',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('city', sa.String(100), nullable=False),
        sa.Column('state', sa.String(100), nullable=False),
        sa.Column('pincode', sa.String(10), nullable=False),
        sa.Column('phone', sa.String(15), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('total_flats', sa.Integer(), nullable=True),
        sa.Column('admin_name', sa.String(255), nullable=True),
        sa.Column('admin_phone', sa.String(15), nullable=True),
        sa.Column('settings', sa.JSON(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(100), nullable=False, unique=True),
        sa.Column('password', sa.Text(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(15), nullable=False),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('society_id', sa.Integer(), sa.ForeignKey('societies.id'), nullable=True),
        sa.Column('flat_number', sa.String(20), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.Column('preferences', sa.JSON(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'buildings',
        sa.Column('id', sa.Integer(), primary_key=True),
        _society_fk(),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('floors', sa.Integer(), nullable=False),
        sa.Column('flats_per_floor', sa.Integer(), nullable=False),
        *_timestamps(updated=False),
    )

    op.create_table(
        'flats',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('building_id', sa.Integer(), sa.ForeignKey('buildings.id'), nullable=False),
        _society_fk(),
        sa.Column('flat_number', sa.String(20), nullable=False),
        sa.Column('floor', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(50), nullable=True),
        sa.Column('area', sa.Numeric(8, 2), nullable=True),
        sa.Column('owner_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('tenant_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('monthly_maintenance', sa.Numeric(10, 2), nullable=True),
        sa.Column('is_occupied', sa.Boolean(), nullable=True),
        sa.Column('parking_slots', sa.Integer(), nullable=True),
        *_timestamps(updated=False),
    )

    op.create_table(
        'visitors',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(15), nullable=False),
        sa.Column('visitor_type', sa.String(20), nullable=False),
        sa.Column('flat_id', sa.Integer(), sa.ForeignKey('flats.id'), nullable=False),
        _society_fk(),
        sa.Column('purpose', sa.Text(), nullable=True),
        sa.Column('vehicle_number', sa.String(20), nullable=True),
        sa.Column('photo_url', sa.Text(), nullable=True),
        sa.Column('id_proof_url', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('approved_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('check_in_time', sa.DateTime(), nullable=True),
        sa.Column('check_out_time', sa.DateTime(), nullable=True),
        sa.Column('expected_duration', sa.Integer(), nullable=True),
        sa.Column('qr_code', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'staff',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(15), nullable=False),
        sa.Column('category', sa.String(20), nullable=False),
        _society_fk(),
        sa.Column('shift_timing', sa.String(50), nullable=True),
        sa.Column('salary', sa.Numeric(10, 2), nullable=True),
        sa.Column('joining_date', sa.DateTime(), nullable=True),
        sa.Column('id_proof_type', sa.String(50), nullable=True),
        sa.Column('id_proof_number', sa.String(100), nullable=True),
        sa.Column('photo_url', sa.Text(), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('emergency_contact', sa.String(15), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'staff_attendance',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('staff_id', sa.Integer(), sa.ForeignKey('staff.id'), nullable=False),
        _society_fk(),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('check_in_time', sa.DateTime(), nullable=True),
        sa.Column('check_out_time', sa.DateTime(), nullable=True),
        sa.Column('hours_worked', sa.Numeric(4, 2), nullable=True),
        sa.Column('status', sa.String(20), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index(op.f('ix_staff_attendance_staff_id'), 'staff_attendance', ['staff_id'], unique=False)

    op.create_table(
        'complaints',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('priority', sa.String(20), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='open'),
        sa.Column('flat_id', sa.Integer(), sa.ForeignKey('flats.id'), nullable=False),
        _society_fk(),
        sa.Column('raised_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('assigned_to', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('estimated_cost', sa.Numeric(10, 2), nullable=True),
        sa.Column('actual_cost', sa.Numeric(10, 2), nullable=True),
        sa.Column('images', sa.JSON(), nullable=True),
        sa.Column('resolution_notes', sa.Text(), nullable=True),
        sa.Column('satisfaction_rating', sa.Integer(), nullable=True),
        sa.Column('escalation_level', sa.Integer(), nullable=True),
        sa.Column('due_date', sa.DateTime(), nullable=True),
        sa.Column('resolved_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'announcements',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('priority', sa.String(20), nullable=True),
        _society_fk(),
        sa.Column('created_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('target_audience', sa.JSON(), nullable=True),
        sa.Column('attachments', sa.JSON(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('expires_at', sa.DateTime(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'polls',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('announcement_id', sa.Integer(), sa.ForeignKey('announcements.id'), nullable=True),
        sa.Column('question', sa.Text(), nullable=False),
        sa.Column('options', sa.JSON(), nullable=False),
        sa.Column('allow_multiple', sa.Boolean(), nullable=True),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        _society_fk(),
        *_timestamps(updated=False),
    )

    op.create_table(
        'poll_votes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('poll_id', sa.Integer(), sa.ForeignKey('polls.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('selected_options', sa.JSON(), nullable=False),
        *_timestamps(updated=False),
        sa.UniqueConstraint('poll_id', 'user_id', name='uq_poll_vote_user'),
    )
    op.create_index(op.f('ix_poll_votes_poll_id'), 'poll_votes', ['poll_id'], unique=False)

    op.create_table(
        'maintenance_bills',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('flat_id', sa.Integer(), sa.ForeignKey('flats.id'), nullable=False),
        _society_fk(),
        sa.Column('month', sa.Integer(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('base_amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('additional_charges', sa.JSON(), nullable=True),
        sa.Column('late_fee', sa.Numeric(10, 2), nullable=True),
        sa.Column('total_amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('status', sa.String(20), nullable=True),
        sa.Column('due_date', sa.DateTime(), nullable=False),
        sa.Column('paid_date', sa.DateTime(), nullable=True),
        sa.Column('payment_method', sa.String(50), nullable=True),
        sa.Column('transaction_id', sa.String(255), nullable=True),
        sa.Column('receipt_url', sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'expenses',
        sa.Column('id', sa.Integer(), primary_key=True),
        _society_fk(),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('vendor', sa.String(255), nullable=True),
        sa.Column('bill_number', sa.String(100), nullable=True),
        sa.Column('bill_date', sa.DateTime(), nullable=True),
        sa.Column('payment_date', sa.DateTime(), nullable=True),
        sa.Column('payment_method', sa.String(50), nullable=True),
        sa.Column('approved_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('attachments', sa.JSON(), nullable=True),
        *_timestamps(updated=False),
    )

    op.create_table(
        'amenities',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        _society_fk(),
        sa.Column('hourly_rate', sa.Numeric(10, 2), nullable=True),
        sa.Column('daily_rate', sa.Numeric(10, 2), nullable=True),
        sa.Column('capacity', sa.Integer(), nullable=True),
        sa.Column('available_hours', sa.JSON(), nullable=True),
        sa.Column('rules', sa.Text(), nullable=True),
        sa.Column('images', sa.JSON(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        *_timestamps(updated=False),
    )

    op.create_table(
        'amenity_bookings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('amenity_id', sa.Integer(), sa.ForeignKey('amenities.id'), nullable=False),
        sa.Column('flat_id', sa.Integer(), sa.ForeignKey('flats.id'), nullable=False),
        _society_fk(),
        sa.Column('booked_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('end_time', sa.DateTime(), nullable=False),
        sa.Column('purpose', sa.Text(), nullable=True),
        sa.Column('guests', sa.Integer(), nullable=True),
        sa.Column('total_amount', sa.Numeric(10, 2), nullable=True),
        sa.Column('status', sa.String(20), nullable=True),
        sa.Column('payment_status', sa.String(20), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index(op.f('ix_amenity_bookings_amenity_id'), 'amenity_bookings', ['amenity_id'], unique=False)

    op.create_table(
        'documents',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('file_url', sa.Text(), nullable=False),
        sa.Column('file_name', sa.String(255), nullable=False),
        sa.Column('file_size', sa.Integer(), nullable=True),
        sa.Column('mime_type', sa.String(100), nullable=True),
        _society_fk(),
        sa.Column('uploaded_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('access_level', sa.String(20), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'inventory_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('brand', sa.String(100), nullable=True),
        sa.Column('model', sa.String(100), nullable=True),
        sa.Column('serial_number', sa.String(100), nullable=True),
        sa.Column('purchase_date', sa.DateTime(), nullable=True),
        sa.Column('purchase_price', sa.Numeric(10, 2), nullable=True),
        sa.Column('current_value', sa.Numeric(10, 2), nullable=True),
        sa.Column('condition', sa.String(50), nullable=True),
        sa.Column('location', sa.String(255), nullable=True),
        _society_fk(),
        sa.Column('added_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('warranty_expiry', sa.DateTime(), nullable=True),
        sa.Column('maintenance_schedule', sa.JSON(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'messages',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('sender_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('receiver_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        _society_fk(),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('message_type', sa.String(20), nullable=True),
        sa.Column('attachment_url', sa.Text(), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=True),
        sa.Column('read_at', sa.DateTime(), nullable=True),
        sa.Column('is_group_message', sa.Boolean(), nullable=True),
        sa.Column('group_id', sa.String(100), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index(op.f('ix_messages_sender_id'), 'messages', ['sender_id'], unique=False)
    op.create_index(op.f('ix_messages_receiver_id'), 'messages', ['receiver_id'], unique=False)

    op.create_table(
        'security_alerts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('location', sa.String(255), nullable=True),
        _society_fk(),
        sa.Column('triggered_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('priority', sa.String(20), nullable=True),
        sa.Column('status', sa.String(20), nullable=True),
        sa.Column('acknowledged_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('acknowledged_at', sa.DateTime(), nullable=True),
        sa.Column('resolved_at', sa.DateTime(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        _society_fk(),
        sa.Column('action', sa.String(100), nullable=False),
        sa.Column('entity', sa.String(100), nullable=False),
        sa.Column('entity_id', sa.Integer(), nullable=True),
        sa.Column('old_data', sa.JSON(), nullable=True),
        sa.Column('new_data', sa.JSON(), nullable=True),
        sa.Column('ip_address', sa.String(45), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )

    for table in SOCIETY_SCOPED:
        op.create_index(op.f(f'ix_{table}_society_id'), table, ['society_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    for table in SOCIETY_SCOPED:
        op.drop_index(op.f(f'ix_{table}_society_id'), table_name=table)

    op.drop_index(op.f('ix_messages_receiver_id'), table_name='messages')
    op.drop_index(op.f('ix_messages_sender_id'), table_name='messages')
    op.drop_index(op.f('ix_amenity_bookings_amenity_id'), table_name='amenity_bookings')
    op.drop_index(op.f('ix_poll_votes_poll_id'), table_name='poll_votes')
    op.drop_index(op.f('ix_staff_attendance_staff_id'), table_name='staff_attendance')

    # Children before parents
    for table in (
        'audit_logs', 'security_alerts', 'messages', 'inventory_items', 'documents',
        'amenity_bookings', 'amenities', 'expenses', 'maintenance_bills', 'poll_votes',
        'polls', 'announcements', 'complaints', 'staff_attendance', 'staff', 'visitors',
        'flats', 'buildings', 'users', 'societies',
    ):
        op.drop_table(table)
