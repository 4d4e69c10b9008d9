"""Initial RentMaster schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

Users, properties, units, tenants, leases, payments, documents, audit log.
Money as NUMERIC(12, 2); one ACTIVE lease per unit via a partial unique index.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(), 'postgresql')


def upgrade() -> None:
    # === USERS ===
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('firebase_uid', sa.String(128), unique=True, nullable=False, index=True),
        sa.Column('email', sa.String(255), unique=True, nullable=False, index=True),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('role', sa.Enum('ADMIN', 'MANAGER', name='userrole'), nullable=False, index=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )

    # === PROPERTIES ===
    op.create_table(
        'properties',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('location', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )

    # === UNITS (LOCALS) ===
    op.create_table(
        'units',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('property_id', sa.Uuid(), sa.ForeignKey('properties.id', ondelete='RESTRICT'), nullable=False, index=True),
        sa.Column('reference_code', sa.String(100), unique=True, nullable=False),
        sa.Column('floor', sa.String(50), nullable=True),
        sa.Column('unit_type', sa.String(100), nullable=True),
        sa.Column('size_m2', sa.Float(), nullable=True),
        sa.Column('status', sa.Enum('AVAILABLE', 'OCCUPIED', 'MAINTENANCE', name='unitstatus'), nullable=False, index=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )

    # === TENANTS ===
    op.create_table(
        'tenants',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('type', sa.Enum('INDIVIDUAL', 'COMPANY', name='tenanttype'), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )

    # === LEASES ===
    op.create_table(
        'leases',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('tenant_id', sa.Uuid(), sa.ForeignKey('tenants.id', ondelete='RESTRICT'), nullable=False, index=True),
        sa.Column('unit_id', sa.Uuid(), sa.ForeignKey('units.id', ondelete='RESTRICT'), nullable=False, index=True),
        sa.Column('lease_reference', sa.String(100), unique=True, nullable=False),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=True),
        sa.Column('rent_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('billing_cycle', sa.Enum('MONTHLY', 'QUARTERLY', name='billingcycle'), nullable=False),
        sa.Column('status', sa.Enum('ACTIVE', 'TERMINATED', name='leasestatus'), nullable=False, index=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('rent_amount > 0', name='ck_lease_rent_amount_positive'),
    )
    op.create_index(
        'uq_leases_active_unit',
        'leases',
        ['unit_id'],
        unique=True,
        postgresql_where=sa.text("status = 'ACTIVE'"),
        sqlite_where=sa.text("status = 'ACTIVE'"),
    )

    # === PAYMENT MODES ===
    op.create_table(
        'payment_modes',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('code', sa.String(50), unique=True, nullable=False),
        sa.Column('display_name', sa.String(100), nullable=False),
        sa.Column('requires_proof', sa.Boolean(), nullable=False, server_default=sa.false()),
    )

    # === PAYMENTS ===
    op.create_table(
        'payments',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('lease_id', sa.Uuid(), sa.ForeignKey('leases.id', ondelete='RESTRICT'), nullable=False, index=True),
        sa.Column('payment_mode_id', sa.Uuid(), sa.ForeignKey('payment_modes.id', ondelete='RESTRICT'), nullable=False, index=True),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('paid_at', sa.DateTime(), nullable=False, index=True),
        sa.Column('reference', sa.String(255), nullable=True),
        sa.Column('status', sa.Enum('PENDING', 'COMPLETED', name='paymentstatus'), nullable=False, index=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('amount > 0', name='ck_payment_amount_positive'),
    )

    # === DOCUMENTS ===
    op.create_table(
        'documents',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('owner_table', sa.Enum('LEASES', 'PAYMENTS', name='ownertable'), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('file_key', sa.String(255), nullable=False),
        sa.Column('filename', sa.String(255), nullable=False),
        sa.Column('doc_type', sa.String(100), nullable=False),
        sa.Column('uploaded_by', sa.Uuid(), sa.ForeignKey('users.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('uploaded_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_documents_owner', 'documents', ['owner_table', 'owner_id'])

    # === AUDIT LOG (append-only) ===
    op.create_table(
        'audit_log',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('action', sa.Enum('CREATE', 'UPDATE', 'DELETE', 'TERMINATE', name='auditaction'), nullable=False, index=True),
        sa.Column('entity_table', sa.String(50), nullable=False),
        sa.Column('entity_id', sa.Uuid(), nullable=True),
        sa.Column('old_data', JSON_TYPE, nullable=True),
        sa.Column('new_data', JSON_TYPE, nullable=True),
        sa.Column('ip_address', sa.String(45), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True, index=True),
    )


def downgrade() -> None:
    op.drop_table('audit_log')
    op.drop_index('ix_documents_owner', table_name='documents')
    op.drop_table('documents')
    op.drop_table('payments')
    op.drop_table('payment_modes')
    op.drop_index('uq_leases_active_unit', table_name='leases')
    op.drop_table('leases')
    op.drop_table('tenants')
    op.drop_table('units')
    op.drop_table('properties')
    op.drop_table('users')

    # Drop enums
    op.execute('DROP TYPE IF EXISTS auditaction')
    op.execute('DROP TYPE IF EXISTS ownertable')
    op.execute('DROP TYPE IF EXISTS paymentstatus')
    op.execute('DROP TYPE IF EXISTS leasestatus')
    op.execute('DROP TYPE IF EXISTS billingcycle')
    op.execute('DROP TYPE IF EXISTS tenanttype')
    op.execute('DROP TYPE IF EXISTS unitstatus')
    op.execute('DROP TYPE IF EXISTS userrole')
