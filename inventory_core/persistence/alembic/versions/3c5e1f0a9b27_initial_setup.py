"""initial setup

Revision ID: 3c5e1f0a9b27
Revises:
Create Date: 2026-10-18 10:24:31.518204

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '3c5e1f0a9b27'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('categories',
                    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
                    sa.Column('name', sa.String(length=255), nullable=False),
                    sa.Column('position', sa.Integer(), nullable=False),
                    sa.Column('timestamp', sa.Integer(), nullable=False),
                    sa.CheckConstraint('position > 0'),
                    sa.PrimaryKeyConstraint('id'),
                    sa.UniqueConstraint('id')
                    )
    op.create_table('inventories',
                    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
                    sa.Column('start', sa.Integer(), nullable=False),
                    sa.Column('stop', sa.Integer(), nullable=True),
                    sa.CheckConstraint('stop IS NULL OR stop >= start'),
                    sa.PrimaryKeyConstraint('id'),
                    sa.UniqueConstraint('id')
                    )
    op.create_table('tokens',
                    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
                    sa.Column('name', sa.String(length=255), nullable=False),
                    sa.Column('token', sa.String(length=255), nullable=False),
                    sa.Column('active', sa.Boolean(), nullable=False),
                    sa.PrimaryKeyConstraint('id'),
                    sa.UniqueConstraint('id'),
                    sa.UniqueConstraint('name'),
                    sa.UniqueConstraint('token')
                    )
    op.create_table('request_logs',
                    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
                    sa.Column('timestamp', sa.Integer(), nullable=False),
                    sa.Column('type', sa.String(length=32), nullable=False),
                    sa.Column('content', sa.String(length=2048), nullable=False),
                    sa.Column('client_name', sa.String(length=255), nullable=True),
                    sa.Column('client_ip', sa.String(length=255), nullable=True),
                    sa.Column('user_agent', sa.String(length=1024), nullable=True),
                    sa.PrimaryKeyConstraint('id'),
                    sa.UniqueConstraint('id')
                    )
    op.create_table('articles',
                    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
                    sa.Column('category_id', sa.Integer(), nullable=False),
                    sa.Column('name', sa.String(length=255), nullable=False),
                    sa.Column('size', sa.Float(), nullable=False),
                    sa.Column('unit', sa.String(length=255), nullable=False),
                    sa.Column('inventoried', sa.Integer(), nullable=False),
                    sa.Column('position', sa.Integer(), nullable=False),
                    sa.Column('timestamp', sa.Integer(), nullable=False),
                    sa.CheckConstraint('inventoried IN (-1, 0, 1)'),
                    sa.CheckConstraint('position > 0'),
                    sa.ForeignKeyConstraint(['category_id'], ['categories.id'], ),
                    sa.PrimaryKeyConstraint('id'),
                    sa.UniqueConstraint('id')
                    )
    op.create_index('articles_by_category', 'articles', ['category_id', 'position'], unique=False)
    op.create_table('gtins',
                    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
                    sa.Column('article_id', sa.Integer(), nullable=False),
                    sa.Column('gtin', sa.String(length=255), nullable=False),
                    sa.ForeignKeyConstraint(['article_id'], ['articles.id'], ondelete='CASCADE'),
                    sa.PrimaryKeyConstraint('id'),
                    sa.UniqueConstraint('id')
                    )
    op.create_index(op.f('ix_gtins_gtin'), 'gtins', ['gtin'], unique=False)
    op.create_table('lots',
                    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
                    sa.Column('article_id', sa.Integer(), nullable=False),
                    sa.Column('best_before', sa.String(length=255), nullable=False),
                    sa.Column('stock', sa.Integer(), nullable=False),
                    sa.Column('position', sa.Integer(), nullable=False),
                    sa.Column('timestamp', sa.Integer(), nullable=False),
                    sa.CheckConstraint('position > 0'),
                    sa.ForeignKeyConstraint(['article_id'], ['articles.id'], ondelete='CASCADE'),
                    sa.PrimaryKeyConstraint('id'),
                    sa.UniqueConstraint('id')
                    )
    op.create_index('lots_by_article', 'lots', ['article_id', 'position'], unique=False)


def downgrade():
    op.drop_index('lots_by_article', table_name='lots')
    op.drop_table('lots')
    op.drop_index(op.f('ix_gtins_gtin'), table_name='gtins')
    op.drop_table('gtins')
    op.drop_index('articles_by_category', table_name='articles')
    op.drop_table('articles')
    op.drop_table('request_logs')
    op.drop_table('tokens')
    op.drop_table('inventories')
    op.drop_table('categories')
