"""Initial schema

Revision ID: 5c1f0a7e2d93
Revises: 
Create Date: 2026-10-19 10:12:31.402117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5c1f0a7e2d93'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create profiles table
    op.create_table('profiles',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('name', sa.String(length=100), nullable=False),
    sa.Column('surname', sa.String(length=100), nullable=False),
    sa.Column('nickname', sa.String(length=100), nullable=True),
    sa.Column('email', sa.String(length=255), nullable=True),
    sa.Column('dob', sa.Date(), nullable=True),
    sa.Column('city', sa.String(length=100), nullable=False),
    sa.Column('province', sa.String(length=100), nullable=True),
    sa.Column('job', sa.String(length=100), nullable=True),
    sa.Column('description', sa.Text(), nullable=True),
    sa.Column('hobbies', sa.Text(), nullable=True),
    sa.Column('desires', sa.Text(), nullable=True),
    sa.Column('gender', sa.String(length=20), nullable=True),
    sa.Column('orientation', sa.Text(), nullable=True),
    sa.Column('body_type', sa.String(length=50), nullable=True),
    sa.Column('height_cm', sa.Integer(), nullable=True),
    sa.Column('looking_for_gender', sa.Text(), nullable=True),
    sa.Column('looking_for_age_min', sa.Integer(), nullable=True),
    sa.Column('looking_for_age_max', sa.Integer(), nullable=True),
    sa.Column('looking_for_job', sa.String(length=100), nullable=True),
    sa.Column('looking_for_hobbies', sa.Text(), nullable=True),
    sa.Column('looking_for_city', sa.String(length=100), nullable=True),
    sa.Column('looking_for_height', sa.String(length=50), nullable=True),
    sa.Column('looking_for_body_type', sa.String(length=50), nullable=True),
    sa.Column('looking_for_other', sa.Text(), nullable=True),
    sa.Column('is_paid', sa.Boolean(), nullable=False),
    sa.Column('is_online', sa.Boolean(), nullable=False),
    sa.Column('is_validated', sa.Boolean(), nullable=False),
    sa.Column('is_blocked', sa.Boolean(), nullable=False),
    sa.Column('is_suspended', sa.Boolean(), nullable=False),
    sa.Column('photo_url', sa.Text(), nullable=True),
    sa.Column('photos', sa.Text(), nullable=True),
    sa.Column('id_document_url', sa.Text(), nullable=True),
    sa.Column('getting_to_know', sa.Text(), nullable=True),
    sa.Column('created_at', sa.DateTime(), nullable=True),
    sa.Column('updated_at', sa.DateTime(), nullable=True),
    sa.PrimaryKeyConstraint('id')
    )

    # Create interactions table
    op.create_table('interactions',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('from_profile_id', sa.Integer(), nullable=False),
    sa.Column('to_profile_id', sa.Integer(), nullable=False),
    sa.Column('type', sa.String(length=10), nullable=False),
    sa.Column('created_at', sa.DateTime(), nullable=True),
    sa.ForeignKeyConstraint(['from_profile_id'], ['profiles.id'], ),
    sa.ForeignKeyConstraint(['to_profile_id'], ['profiles.id'], ),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('from_profile_id', 'to_profile_id', 'type', name='uq_interaction_edge')
    )
    op.create_index('ix_interactions_from_profile_id', 'interactions', ['from_profile_id'])
    op.create_index('ix_interactions_to_profile_id', 'interactions', ['to_profile_id'])

    # Create chat_requests table
    op.create_table('chat_requests',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('from_profile_id', sa.Integer(), nullable=False),
    sa.Column('to_profile_id', sa.Integer(), nullable=False),
    sa.Column('status', sa.String(length=20), nullable=False),
    sa.Column('message', sa.String(length=1000), nullable=True),
    sa.Column('created_at', sa.DateTime(), nullable=True),
    sa.ForeignKeyConstraint(['from_profile_id'], ['profiles.id'], ),
    sa.ForeignKeyConstraint(['to_profile_id'], ['profiles.id'], ),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('from_profile_id', 'to_profile_id', name='uq_chat_request_pair')
    )
    op.create_index('ix_chat_requests_from_profile_id', 'chat_requests', ['from_profile_id'])
    op.create_index('ix_chat_requests_to_profile_id', 'chat_requests', ['to_profile_id'])

    # Create posts table
    op.create_table('posts',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('profile_id', sa.Integer(), nullable=False),
    sa.Column('photos', sa.Text(), nullable=True),
    sa.Column('description', sa.Text(), nullable=True),
    sa.Column('post_date', sa.Date(), nullable=False),
    sa.Column('created_at', sa.DateTime(), nullable=False),
    sa.ForeignKeyConstraint(['profile_id'], ['profiles.id'], ),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('profile_id', 'post_date', name='uq_post_per_day')
    )
    op.create_index('ix_posts_profile_id', 'posts', ['profile_id'])

    # Create post_interactions table
    op.create_table('post_interactions',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('post_id', sa.Integer(), nullable=False),
    sa.Column('profile_id', sa.Integer(), nullable=False),
    sa.Column('type', sa.String(length=10), nullable=False),
    sa.Column('created_at', sa.DateTime(), nullable=True),
    sa.ForeignKeyConstraint(['post_id'], ['posts.id'], ),
    sa.ForeignKeyConstraint(['profile_id'], ['profiles.id'], ),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('post_id', 'profile_id', 'type', name='uq_post_interaction_edge')
    )
    op.create_index('ix_post_interactions_post_id', 'post_interactions', ['post_id'])
    op.create_index('ix_post_interactions_profile_id', 'post_interactions', ['profile_id'])

    # Create banner tables
    op.create_table('banner_messages',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('profile_id', sa.Integer(), nullable=False),
    sa.Column('message', sa.Text(), nullable=False),
    sa.Column('created_at', sa.DateTime(), nullable=False),
    sa.ForeignKeyConstraint(['profile_id'], ['profiles.id'], ),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_banner_messages_profile_id', 'banner_messages', ['profile_id'])

    op.create_table('banner_replies',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('banner_message_id', sa.Integer(), nullable=False),
    sa.Column('from_profile_id', sa.Integer(), nullable=False),
    sa.Column('reply_text', sa.Text(), nullable=False),
    sa.Column('created_at', sa.DateTime(), nullable=False),
    sa.ForeignKeyConstraint(['banner_message_id'], ['banner_messages.id'], ),
    sa.ForeignKeyConstraint(['from_profile_id'], ['profiles.id'], ),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_banner_replies_banner_message_id', 'banner_replies', ['banner_message_id'])

    # Create site_settings table
    op.create_table('site_settings',
    sa.Column('key', sa.String(length=100), nullable=False),
    sa.Column('value', sa.Text(), nullable=True),
    sa.PrimaryKeyConstraint('key')
    )


def downgrade() -> None:
    op.drop_table('site_settings')
    op.drop_table('banner_replies')
    op.drop_table('banner_messages')
    op.drop_table('post_interactions')
    op.drop_table('posts')
    op.drop_table('chat_requests')
    op.drop_table('interactions')
    op.drop_table('profiles')
