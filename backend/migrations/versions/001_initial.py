"""Initial migration - create the students table

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

Creates the single table of the report card viewer:
- students: one row per student, keyed by the school's student ID,
  with grade entries stored as a JSONB document
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'students',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('class_name', sa.Text(), nullable=True),
        sa.Column('roll_number', sa.Text(), nullable=True),
        sa.Column('academic_year', sa.Text(), nullable=True),
        sa.Column('principal_comment', sa.Text(), nullable=True),
        sa.Column('school_name', sa.Text(), nullable=True),
        sa.Column('school_address', sa.Text(), nullable=True),
        sa.Column('is_archived', sa.Boolean(), nullable=False,
                  server_default=sa.false()),
        sa.Column('grades', postgresql.JSONB(), nullable=False,
                  server_default='[]'),
        sa.Column('created_at', sa.DateTime(timezone=True),
                  server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True),
                  server_default=sa.func.now(), nullable=False),
    )

    # Admin listings filter on archived status
    op.create_index('ix_students_is_archived', 'students', ['is_archived'])


def downgrade() -> None:
    op.drop_index('ix_students_is_archived', table_name='students')
    op.drop_table('students')
