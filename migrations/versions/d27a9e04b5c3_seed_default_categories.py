"""seed_default_categories

Revision ID: d27a9e04b5c3
Revises: 8c3f5d61e2ab
Create Date: 2026-10-19 10:05:51.602719

"""

import uuid
from collections.abc import Sequence
from datetime import datetime

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "d27a9e04b5c3"
down_revision: str | Sequence[str] | None = "8c3f5d61e2ab"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

DEFAULT_CATEGORIES = [
    ("Faith", "#6366F1", "sparkles", "Spiritual wellness and practices"),
    ("Life", "#10B981", "users", "Personal development and relationships"),
    ("Work", "#F59E0B", "briefcase", "Professional growth and career"),
    ("Health", "#F43F5E", "activity", "Physical and mental wellbeing"),
]

categories = sa.table(
    "categories",
    sa.column("id", sa.UUID()),
    sa.column("user_id", sa.UUID()),
    sa.column("name", sa.String()),
    sa.column("color", sa.String()),
    sa.column("icon", sa.String()),
    sa.column("description", sa.Text()),
    sa.column("display_order", sa.Integer()),
    sa.column("is_active", sa.Boolean()),
    sa.column("created_at", sa.DateTime()),
    sa.column("updated_at", sa.DateTime()),
)


def upgrade() -> None:
    """Insert the system categories shared by every user (user_id NULL)."""
    now = datetime.utcnow()
    op.bulk_insert(
        categories,
        [
            {
                "id": uuid.uuid4(),
                "user_id": None,
                "name": name,
                "color": color,
                "icon": icon,
                "description": description,
                "display_order": order,
                "is_active": True,
                "created_at": now,
                "updated_at": now,
            }
            for order, (name, color, icon, description) in enumerate(DEFAULT_CATEGORIES)
        ],
    )


def downgrade() -> None:
    names = [name for name, *_ in DEFAULT_CATEGORIES]
    op.execute(
        categories.delete().where(
            categories.c.user_id.is_(None), categories.c.name.in_(names)
        )
    )
