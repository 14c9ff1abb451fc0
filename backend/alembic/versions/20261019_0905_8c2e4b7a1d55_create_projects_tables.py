"""create_projects_tables

Revision ID: 8c2e4b7a1d55
Revises: 3f1a9c2d7b10
Create Date: 2026-10-19 09:05:00

"""
from typing import Sequence, Union

from alembic import op

revision: str = '8c2e4b7a1d55'
down_revision: Union[str, None] = '3f1a9c2d7b10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE projects (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            name VARCHAR(200) NOT NULL,
            description TEXT,
            created_by UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
    """)
    op.execute("CREATE INDEX idx_projects_created_by ON projects(created_by)")

    op.execute("""
        CREATE TABLE project_members (
            project_id UUID NOT NULL REFERENCES projects(id) ON DELETE CASCADE,
            user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            PRIMARY KEY (project_id, user_id)
        )
    """)
    op.execute("CREATE INDEX idx_project_members_user_id ON project_members(user_id)")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS project_members")
    op.execute("DROP TABLE IF EXISTS projects")
