"""add_wellness_rls_policies

Revision ID: 8c3f5d61e2ab
Revises: 4b7e1c2a9d10
Create Date: 2026-10-19 09:40:02.117934

"""

from collections.abc import Sequence

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "8c3f5d61e2ab"
down_revision: str | Sequence[str] | None = "4b7e1c2a9d10"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_OWNED_TABLES = ("goals", "entries")


def upgrade() -> None:
    """Row Level Security for direct Supabase client access.

    The API connects with a role that bypasses RLS and enforces ownership
    in the service layer.
    """
    for table in ("profiles", "categories", *_OWNED_TABLES):
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY;")

    # --- Profiles: a user sees and edits only their own row ---
    op.execute("""
        CREATE POLICY profile_select ON profiles
            FOR SELECT USING (id = (SELECT auth.uid()));
    """)
    op.execute("""
        CREATE POLICY profile_insert ON profiles
            FOR INSERT WITH CHECK (id = (SELECT auth.uid()));
    """)
    op.execute("""
        CREATE POLICY profile_update ON profiles
            FOR UPDATE USING (id = (SELECT auth.uid()));
    """)

    # --- Categories: system defaults are readable by everyone, read-only ---
    op.execute("""
        CREATE POLICY category_select ON categories
            FOR SELECT USING (user_id IS NULL OR user_id = (SELECT auth.uid()));
    """)
    for action, clause in (
        ("insert", "WITH CHECK"),
        ("update", "USING"),
        ("delete", "USING"),
    ):
        op.execute(f"""
            CREATE POLICY category_{action} ON categories
                FOR {action.upper()} {clause} (user_id = (SELECT auth.uid()));
        """)

    # --- Goals and entries: owner only, on a visible category ---
    for table in _OWNED_TABLES:
        op.execute(f"""
            CREATE POLICY {table}_select ON {table}
                FOR SELECT USING (user_id = (SELECT auth.uid()));
        """)
        op.execute(f"""
            CREATE POLICY {table}_insert ON {table}
                FOR INSERT WITH CHECK (
                    user_id = (SELECT auth.uid())
                    AND category_id IN (
                        SELECT id FROM categories
                        WHERE user_id IS NULL OR user_id = (SELECT auth.uid())
                    )
                );
        """)
        op.execute(f"""
            CREATE POLICY {table}_update ON {table}
                FOR UPDATE USING (user_id = (SELECT auth.uid()));
        """)
        op.execute(f"""
            CREATE POLICY {table}_delete ON {table}
                FOR DELETE USING (user_id = (SELECT auth.uid()));
        """)


def downgrade() -> None:
    """Remove the policies and disable RLS."""
    for table in _OWNED_TABLES:
        for action in ("select", "insert", "update", "delete"):
            op.execute(f"DROP POLICY IF EXISTS {table}_{action} ON {table};")
    for action in ("select", "insert", "update", "delete"):
        op.execute(f"DROP POLICY IF EXISTS category_{action} ON categories;")
    for action in ("select", "insert", "update"):
        op.execute(f"DROP POLICY IF EXISTS profile_{action} ON profiles;")

    for table in ("profiles", "categories", *_OWNED_TABLES):
        op.execute(f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY;")
