"""init

Revision ID: 3f2b9c41d7a0
Revises: 
Create Date: 2026-10-19 09:30:12.418220

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from typemonkey_api.orm.custom import BigSerial

# revision identifiers, used by Alembic.
revision: str = '3f2b9c41d7a0'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', BigSerial(), nullable=False),
        sa.Column('username', sa.Text(), nullable=False),
        sa.Column('email', sa.Text(), nullable=False),
        sa.Column('password', sa.Text(), nullable=False),
        sa.Column('first_name', sa.Text(), nullable=True),
        sa.Column('last_name', sa.Text(), nullable=True),
        sa.Column('avatar', sa.Text(), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('country', sa.Text(), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('theme', sa.Text(), nullable=False),
        sa.Column('sound_enabled', sa.Boolean(), nullable=False),
        sa.Column('show_wpm', sa.Boolean(), nullable=False),
        sa.Column('show_accuracy', sa.Boolean(), nullable=False),
        sa.Column('total_tests',
                  sa.Integer(),
                  server_default=sa.text('0'),
                  nullable=False),
        sa.Column('total_time_typed',
                  sa.Float(),
                  server_default=sa.text('0'),
                  nullable=False),
        sa.Column('best_wpm',
                  sa.Float(),
                  server_default=sa.text('0'),
                  nullable=False),
        sa.Column('best_accuracy',
                  sa.Float(),
                  server_default=sa.text('0'),
                  nullable=False),
        sa.Column('average_wpm',
                  sa.Float(),
                  server_default=sa.text('0'),
                  nullable=False),
        sa.Column('average_accuracy',
                  sa.Float(),
                  server_default=sa.text('0'),
                  nullable=False),
        sa.Column('total_characters_typed',
                  sa.Integer(),
                  server_default=sa.text('0'),
                  nullable=False),
        sa.Column('total_correct_characters',
                  sa.Integer(),
                  server_default=sa.text('0'),
                  nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at',
                  sa.DateTime(timezone=True),
                  server_default=sa.text('CURRENT_TIMESTAMP'),
                  nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username'),
        sa.UniqueConstraint('email'),
        if_not_exists=True,
    )
    op.create_table(
        'achievements',
        sa.Column('id', BigSerial(), nullable=False),
        sa.Column('user_id', sa.BigInteger(), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('icon', sa.Text(), nullable=True),
        sa.Column('unlocked_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'name'),
        if_not_exists=True,
    )
    op.create_table(
        'typing_tests',
        sa.Column('id', BigSerial(), nullable=False),
        sa.Column('submission_id', sa.Text(), nullable=True),
        sa.Column('user_id', sa.BigInteger(), nullable=True),
        sa.Column('is_guest', sa.Boolean(), nullable=False),
        sa.Column('guest_id', sa.Text(), nullable=True),
        sa.Column('text_type', sa.Text(), nullable=False),
        sa.Column('difficulty', sa.Text(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('language', sa.Text(), nullable=False),
        sa.Column('word_count', sa.Integer(), nullable=True),
        sa.Column('original_text', sa.Text(), nullable=False),
        sa.Column('text_source', sa.Text(), nullable=True),
        sa.Column('wpm', sa.Float(), nullable=False),
        sa.Column('accuracy', sa.Float(), nullable=False),
        sa.Column('time_elapsed', sa.Float(), nullable=False),
        sa.Column('total_characters', sa.Integer(), nullable=False),
        sa.Column('correct_characters', sa.Integer(), nullable=False),
        sa.Column('incorrect_characters', sa.Integer(), nullable=False),
        sa.Column('missed_characters',
                  sa.Integer(),
                  server_default=sa.text('0'),
                  nullable=False),
        sa.Column('extra_characters',
                  sa.Integer(),
                  server_default=sa.text('0'),
                  nullable=False),
        sa.Column('consistency_score',
                  sa.Float(),
                  server_default=sa.text('0'),
                  nullable=False),
        sa.Column('keystroke_data', sa.JSON(), nullable=False),
        sa.Column('wpm_history', sa.JSON(), nullable=False),
        sa.Column('accuracy_history', sa.JSON(), nullable=False),
        sa.Column('session_metadata', sa.JSON(), nullable=False),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('is_completed', sa.Boolean(), nullable=False),
        sa.Column('is_public', sa.Boolean(), nullable=False),
        sa.Column('created_at',
                  sa.DateTime(timezone=True),
                  server_default=sa.text('CURRENT_TIMESTAMP'),
                  nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('submission_id'),
        if_not_exists=True,
    )
    op.create_index('ix_typing_tests_user_id', 'typing_tests', ['user_id'])
    op.create_index('ix_typing_tests_wpm', 'typing_tests', ['wpm'])
    op.create_index('ix_typing_tests_created_at', 'typing_tests',
                    ['created_at'])
    op.create_table(
        'text_contents',
        sa.Column('id', BigSerial(), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('category', sa.Text(), nullable=False),
        sa.Column('difficulty', sa.Text(), nullable=False),
        sa.Column('language', sa.Text(), nullable=False),
        sa.Column('author', sa.Text(), nullable=True),
        sa.Column('source', sa.Text(), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('word_count', sa.Integer(), nullable=False),
        sa.Column('character_count', sa.Integer(), nullable=False),
        sa.Column('average_word_length', sa.Float(), nullable=False),
        sa.Column('commonality',
                  sa.Integer(),
                  server_default=sa.text('5'),
                  nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_by', sa.BigInteger(), nullable=True),
        sa.Column('usage_count',
                  sa.Integer(),
                  server_default=sa.text('0'),
                  nullable=False),
        sa.Column('rating_average',
                  sa.Float(),
                  server_default=sa.text('0'),
                  nullable=False),
        sa.Column('rating_count',
                  sa.Integer(),
                  server_default=sa.text('0'),
                  nullable=False),
        sa.Column('created_at',
                  sa.DateTime(timezone=True),
                  server_default=sa.text('CURRENT_TIMESTAMP'),
                  nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'],
                                ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        if_not_exists=True,
    )
    op.create_index('ix_text_contents_category', 'text_contents',
                    ['category'])
    op.create_index('ix_text_contents_difficulty', 'text_contents',
                    ['difficulty'])


def downgrade() -> None:
    op.drop_index('ix_text_contents_difficulty', table_name='text_contents')
    op.drop_index('ix_text_contents_category', table_name='text_contents')
    op.drop_table('text_contents', if_exists=True)
    op.drop_index('ix_typing_tests_created_at', table_name='typing_tests')
    op.drop_index('ix_typing_tests_wpm', table_name='typing_tests')
    op.drop_index('ix_typing_tests_user_id', table_name='typing_tests')
    op.drop_table('typing_tests', if_exists=True)
    op.drop_table('achievements', if_exists=True)
    op.drop_table('users', if_exists=True)
