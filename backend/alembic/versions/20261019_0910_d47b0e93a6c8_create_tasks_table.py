"""create_tasks_table

Revision ID: d47b0e93a6c8
Revises: 8c2e4b7a1d55
Create Date: 2026-10-19 09:10:00

"""
from typing import Sequence, Union

from alembic import op

revision: str = 'd47b0e93a6c8'
down_revision: Union[str, None] = '8c2e4b7a1d55'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("CREATE TYPE task_status AS ENUM ('todo', 'in_progress', 'done')")
    op.execute("""
        CREATE TABLE tasks (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            project_id UUID NOT NULL REFERENCES projects(id) ON DELETE CASCADE,
            title VARCHAR(500) NOT NULL,
            description TEXT,
            status task_status NOT NULL DEFAULT 'todo',
            assignee_id UUID REFERENCES users(id) ON DELETE SET NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
    """)
    op.execute("CREATE INDEX idx_tasks_project_id ON tasks(project_id)")
    op.execute("CREATE INDEX idx_tasks_assignee_id ON tasks(assignee_id)")
    op.execute("CREATE INDEX idx_tasks_status ON tasks(project_id, status)")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS tasks")
    op.execute("DROP TYPE IF EXISTS task_status")
