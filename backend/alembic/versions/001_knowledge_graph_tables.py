"""Create posts and knowledge graph tables

Revision ID: 001
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create posts table
    op.create_table(
        'posts',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(255), nullable=False),
        sa.Column('original_url', sa.String(2000)),
        sa.Column('platform', sa.String(50), server_default='linkedin'),
        sa.Column('author_name', sa.String(255)),
        sa.Column('author_url', sa.String(2000)),
        sa.Column('image_url', sa.String(2000)),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('summary', sa.Text()),
        sa.Column('tags', sa.JSON(), server_default='[]'),
        sa.Column('is_favorite', sa.Boolean(), server_default=sa.false()),
        sa.Column('published_at', sa.DateTime(timezone=True)),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )
    op.create_index('ix_posts_user_id', 'posts', ['user_id'])
    op.create_index('idx_posts_user_created', 'posts', ['user_id', 'created_at'])

    # Create entities table
    op.create_table(
        'entities',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(255), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('canonical_name', sa.Text(), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('mention_count', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.UniqueConstraint('user_id', 'canonical_name', 'type', name='uq_entities_user_canonical_type'),
        sa.CheckConstraint('mention_count >= 1', name='ck_entities_mention_count_positive'),
        sa.CheckConstraint(
            "type IN ('person', 'company', 'topic', 'technology')", name='ck_entities_type'
        ),
    )
    op.create_index('ix_entities_user_id', 'entities', ['user_id'])
    op.create_index('idx_entities_user_type', 'entities', ['user_id', 'type'])

    # Create entity_links table
    op.create_table(
        'entity_links',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('entity_id', sa.Integer(), nullable=False),
        sa.Column('post_id', sa.Integer(), nullable=False),
        sa.Column('confidence', sa.Float(), nullable=False, server_default='1.0'),
        sa.Column('context', sa.Text()),
        sa.ForeignKeyConstraint(['entity_id'], ['entities.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['post_id'], ['posts.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('entity_id', 'post_id', name='uq_entity_links_entity_post'),
    )
    op.create_index('idx_entity_links_post', 'entity_links', ['post_id'])

    # Create entity_edges table
    op.create_table(
        'entity_edges',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('source_entity_id', sa.Integer(), nullable=False),
        sa.Column('target_entity_id', sa.Integer(), nullable=False),
        sa.Column('relation_type', sa.String(50), nullable=False, server_default='co-occurrence'),
        sa.Column('weight', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('user_id', sa.String(255), nullable=False),
        sa.ForeignKeyConstraint(['source_entity_id'], ['entities.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['target_entity_id'], ['entities.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('source_entity_id', 'target_entity_id', 'user_id', name='uq_entity_edges_pair_user'),
        sa.CheckConstraint('source_entity_id < target_entity_id', name='ck_entity_edges_ordered_pair'),
        sa.CheckConstraint('weight >= 1', name='ck_entity_edges_weight_positive'),
    )
    op.create_index('ix_entity_edges_user_id', 'entity_edges', ['user_id'])
    op.create_index('idx_entity_edges_source', 'entity_edges', ['source_entity_id'])
    op.create_index('idx_entity_edges_target', 'entity_edges', ['target_entity_id'])

    # Create extraction_status table
    op.create_table(
        'extraction_status',
        sa.Column('post_id', sa.Integer(), primary_key=True),
        sa.Column('status', sa.String(50), nullable=False),
        sa.Column('processed_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('error', sa.Text()),
        sa.ForeignKeyConstraint(['post_id'], ['posts.id'], ondelete='CASCADE'),
    )


def downgrade() -> None:
    op.drop_table('extraction_status')
    op.drop_index('idx_entity_edges_target', table_name='entity_edges')
    op.drop_index('idx_entity_edges_source', table_name='entity_edges')
    op.drop_index('ix_entity_edges_user_id', table_name='entity_edges')
    op.drop_table('entity_edges')
    op.drop_index('idx_entity_links_post', table_name='entity_links')
    op.drop_table('entity_links')
    op.drop_index('idx_entities_user_type', table_name='entities')
    op.drop_index('ix_entities_user_id', table_name='entities')
    op.drop_table('entities')
    op.drop_index('idx_posts_user_created', table_name='posts')
    op.drop_index('ix_posts_user_id', table_name='posts')
    op.drop_table('posts')
