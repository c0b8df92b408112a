"""salon availability and appointments

Revision ID: 5b2f9c1d7e40
Revises:
Create Date: 2025-11-24 10:12:41.402117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '5b2f9c1d7e40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    # 1. Salons
    op.create_table(
        'salons',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('timezone', sa.String(50), nullable=False, server_default='UTC'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'))
    )

    # 2. Customers
    op.create_table(
        'customers',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('salon_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('salons.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(30), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'))
    )
    op.create_index('ix_customers_salon_id', 'customers', ['salon_id'])

    # 3. Weekly availability, one row per salon and day (0=Sunday)
    op.create_table(
        'salon_availability',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('salon_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('salons.id', ondelete='CASCADE'), nullable=False),
        sa.Column('day_of_week', sa.Integer, nullable=False),
        sa.Column('is_working_day', sa.Boolean, nullable=False, server_default=sa.text('true')),
        sa.Column('start_time', sa.Time, nullable=False),
        sa.Column('end_time', sa.Time, nullable=False),
        sa.Column('slot_duration', sa.Integer, nullable=False, server_default='30'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.UniqueConstraint('salon_id', 'day_of_week', name='uq_salon_availability_day'),
        sa.CheckConstraint('day_of_week BETWEEN 0 AND 6', name='check_availability_day_of_week')
    )
    op.create_index('ix_salon_availability_salon_id', 'salon_availability', ['salon_id'])

    # 4. Appointments
    op.create_table(
        'appointments',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('salon_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('salons.id'), nullable=False),
        sa.Column('customer_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('customers.id'), nullable=False),
        sa.Column('subscription_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('requested_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('proposed_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('status', sa.String(30), nullable=False, server_default='PENDING'),
        sa.Column('notes', sa.Text, nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.CheckConstraint(
            "(status = 'RESCHEDULE_PROPOSED') = (proposed_time IS NOT NULL)",
            name='check_proposed_time_only_when_proposed'
        )
    )

    op.create_index('ix_appointments_salon_id', 'appointments', ['salon_id'])
    op.create_index('ix_appointments_customer_id', 'appointments', ['customer_id'])
    op.create_index('idx_appointments_salon_status', 'appointments', ['salon_id', 'status'])

    # At most one confirmed appointment per salon instant
    op.create_index(
        'uq_appointments_confirmed_slot',
        'appointments',
        ['salon_id', 'requested_time'],
        unique=True,
        postgresql_where=sa.text("status = 'CONFIRMED'")
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('uq_appointments_confirmed_slot', table_name='appointments')
    op.drop_index('idx_appointments_salon_status', table_name='appointments')
    op.drop_index('ix_appointments_customer_id', table_name='appointments')
    op.drop_index('ix_appointments_salon_id', table_name='appointments')
    op.drop_table('appointments')

    op.drop_index('ix_salon_availability_salon_id', table_name='salon_availability')
    op.drop_table('salon_availability')

    op.drop_index('ix_customers_salon_id', table_name='customers')
    op.drop_table('customers')

    op.drop_table('salons')
