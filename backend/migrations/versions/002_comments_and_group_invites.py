"""Document comments and group invite codes

Revision ID: 002
Revises: 001
Create Date: 2026-10-18 15:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '002'
down_revision = '001'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'document_comment',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('document_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('parent_id', sa.Uuid(), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('page_number', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['document_id'], ['document.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['parent_id'], ['document_comment.id'], ondelete='CASCADE')
    )
    op.create_index(
        'ix_document_comment_document_id_created_at', 'document_comment', ['document_id', 'created_at']
    )

    # Existing groups get a random code before the column becomes mandatory
    op.add_column('group', sa.Column('invite_code', sa.Text(), nullable=True))
    op.execute(
        'UPDATE "group" SET invite_code = upper(substr(md5(random()::text || id::text), 1, 12)) '
        'WHERE invite_code IS NULL'
    )
    op.alter_column('group', 'invite_code', nullable=False)
    op.create_unique_constraint('uq_group_invite_code', 'group', ['invite_code'])


def downgrade():
    op.drop_constraint('uq_group_invite_code', 'group', type_='unique')
    op.drop_column('group', 'invite_code')

    op.drop_index('ix_document_comment_document_id_created_at', table_name='document_comment')
    op.drop_table('document_comment')
