"""Initial schema: users, groups, documents, grants, assignments, notifications, audit log

Revision ID: 001
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # Create user table
    op.create_table(
        'user',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.Text(), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('role', sa.Text(), server_default='MEMBER', nullable=False),
        sa.Column('status', sa.Text(), server_default='ACTIVE', nullable=False),
        sa.Column('avatar_url', sa.Text(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email', name='uq_user_email'),
        sa.CheckConstraint("role IN ('ADMIN', 'MEMBER')", name='ck_user_role'),
        sa.CheckConstraint("status IN ('ACTIVE', 'DISABLED')", name='ck_user_status')
    )

    # Create group and group_member tables
    op.create_table(
        'group',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['owner_id'], ['user.id'], ondelete='RESTRICT')
    )

    op.create_table(
        'group_member',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('group_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('role', sa.String(length=20), server_default='VIEWER', nullable=False),
        sa.Column('joined_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['group_id'], ['group.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('group_id', 'user_id', name='uq_group_member_group_user')
    )
    op.create_index('ix_group_member_user_id', 'group_member', ['user_id'])

    # Create document table
    op.create_table(
        'document',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('group_id', sa.Uuid(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('size_bytes', sa.BigInteger(), server_default='0', nullable=False),
        sa.Column('mime_type', sa.Text(), nullable=True),
        sa.Column('storage_key', sa.Text(), nullable=True),
        sa.Column('file_status', sa.String(length=20), server_default='ACTIVE', nullable=False),
        sa.Column('sharing_status', sa.String(length=20), server_default='NONE', nullable=False),
        sa.Column('is_deleted', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('deleted_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('deleted_by', sa.Uuid(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['owner_id'], ['user.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['group_id'], ['group.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['deleted_by'], ['user.id'], ondelete='SET NULL'),
        # Trash marker and timestamp move together
        sa.CheckConstraint('is_deleted = (deleted_at IS NOT NULL)', name='ck_document_deleted_at')
    )
    op.create_index('ix_document_owner_id', 'document', ['owner_id'])
    op.create_index('ix_document_group_id', 'document', ['group_id'])
    op.create_index('ix_document_is_deleted_updated_at', 'document', ['is_deleted', 'updated_at'])

    # Create document_permission table (document_id is stored by value so grants outlive a purge)
    op.create_table(
        'document_permission',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('document_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('level', sa.String(length=20), server_default='NONE', nullable=False),
        sa.Column('granted_by', sa.Uuid(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['granted_by'], ['user.id'], ondelete='SET NULL'),
        sa.UniqueConstraint('document_id', 'user_id', name='uq_document_permission_document_user')
    )
    op.create_index('ix_document_permission_user_id', 'document_permission', ['user_id'])

    # Create document_assignment table (document_id is stored by value, as above)
    op.create_table(
        'document_assignment',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('document_id', sa.Uuid(), nullable=False),
        sa.Column('assigned_by', sa.Uuid(), nullable=False),
        sa.Column('assigned_to', sa.Uuid(), nullable=False),
        sa.Column('status', sa.String(length=20), server_default='PENDING', nullable=False),
        sa.Column('due_date', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('completed_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['assigned_by'], ['user.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['assigned_to'], ['user.id'], ondelete='RESTRICT'),
        sa.CheckConstraint(
            "status IN ('PENDING', 'ACCEPTED', 'COMPLETED', 'REJECTED')",
            name='ck_document_assignment_status'
        )
    )
    op.create_index('ix_document_assignment_assigned_to', 'document_assignment', ['assigned_to', 'status'])
    op.create_index('ix_document_assignment_assigned_by', 'document_assignment', ['assigned_by', 'status'])
    op.create_index('ix_document_assignment_document_id', 'document_assignment', ['document_id'])

    # Create notification table
    op.create_table(
        'notification',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('type', sa.Text(), server_default='info', nullable=False),
        sa.Column('entity_type', sa.Text(), nullable=True),
        sa.Column('entity_id', sa.Uuid(), nullable=True),
        sa.Column('is_read', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('read_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE')
    )
    op.create_index('ix_notification_user_id_is_read', 'notification', ['user_id', 'is_read'])

    # Create audit_log table (entity_id is stored by value, no foreign key)
    op.create_table(
        'audit_log',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('actor_id', sa.Uuid(), nullable=True),
        sa.Column('action', sa.Text(), nullable=False),
        sa.Column('entity_type', sa.Text(), nullable=True),
        sa.Column('entity_id', sa.Uuid(), nullable=True),
        sa.Column('entity_name', sa.Text(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('metadata_json', sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), 'postgresql'), nullable=True),
        sa.Column('ip_address', sa.Text(), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['actor_id'], ['user.id'], ondelete='SET NULL')
    )
    op.create_index('ix_audit_log_created_at', 'audit_log', ['created_at'])
    op.create_index('ix_audit_log_actor_id_created_at', 'audit_log', ['actor_id', 'created_at'])
    op.create_index('ix_audit_log_entity', 'audit_log', ['entity_type', 'entity_id'])


def downgrade():
    op.drop_index('ix_audit_log_entity', table_name='audit_log')
    op.drop_index('ix_audit_log_actor_id_created_at', table_name='audit_log')
    op.drop_index('ix_audit_log_created_at', table_name='audit_log')
    op.drop_table('audit_log')

    op.drop_index('ix_notification_user_id_is_read', table_name='notification')
    op.drop_table('notification')

    op.drop_index('ix_document_assignment_document_id', table_name='document_assignment')
    op.drop_index('ix_document_assignment_assigned_by', table_name='document_assignment')
    op.drop_index('ix_document_assignment_assigned_to', table_name='document_assignment')
    op.drop_table('document_assignment')

    op.drop_index('ix_document_permission_user_id', table_name='document_permission')
    op.drop_table('document_permission')

    op.drop_index('ix_document_is_deleted_updated_at', table_name='document')
    op.drop_index('ix_document_group_id', table_name='document')
    op.drop_index('ix_document_owner_id', table_name='document')
    op.drop_table('document')

    op.drop_index('ix_group_member_user_id', table_name='group_member')
    op.drop_table('group_member')
    op.drop_table('group')

    op.drop_table('user')
