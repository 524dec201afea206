"""add locks and single running inventory

Revision ID: 7d2a4c8e1b53
Revises: 3c5e1f0a9b27
Create Date: 2026-10-18 16:02:47.381950

"""
from alembic import op
import sqlalchemy as sa


revision = '7d2a4c8e1b53'
down_revision = '3c5e1f0a9b27'
branch_labels = None
depends_on = None


def upgrade():
    locks = op.create_table('locks',
                            sa.Column('name', sa.String(length=64), nullable=False),
                            sa.PrimaryKeyConstraint('name')
                            )
    op.bulk_insert(locks, [{'name': 'categories'}, {'name': 'inventories'}])

    with op.batch_alter_table('inventories') as batch_op:
        batch_op.add_column(sa.Column('running', sa.Boolean(), nullable=True))
    op.execute(sa.text('UPDATE inventories SET running = :running WHERE stop IS NULL').bindparams(running=True))
    with op.batch_alter_table('inventories') as batch_op:
        batch_op.create_unique_constraint('inventories_single_running', ['running'])
        batch_op.create_check_constraint(
            'inventories_running_matches_stop',
            '(stop IS NULL AND running IS NOT NULL) OR (stop IS NOT NULL AND running IS NULL)'
        )


def downgrade():
    with op.batch_alter_table('inventories') as batch_op:
        batch_op.drop_constraint('inventories_running_matches_stop', type_='check')
        batch_op.drop_constraint('inventories_single_running', type_='unique')
        batch_op.drop_column('running')
    op.drop_table('locks')
