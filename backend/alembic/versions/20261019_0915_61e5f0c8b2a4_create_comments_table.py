"""create_comments_table

Revision ID: 61e5f0c8b2a4
Revises: d47b0e93a6c8
Create Date: 2026-10-19 09:15:00

"""
from typing import Sequence, Union

from alembic import op

revision: str = '61e5f0c8b2a4'
down_revision: Union[str, None] = 'd47b0e93a6c8'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE comments (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            task_id UUID NOT NULL REFERENCES tasks(id) ON DELETE CASCADE,
            author_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            content TEXT NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
    """)
    op.execute("CREATE INDEX idx_comments_task_id ON comments(task_id)")
    op.execute("CREATE INDEX idx_comments_author_id ON comments(author_id)")
    op.execute("CREATE INDEX idx_comments_created_at ON comments(task_id, created_at)")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS comments")
