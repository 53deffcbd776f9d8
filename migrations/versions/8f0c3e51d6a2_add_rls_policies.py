"""add_rls_policies

Revision ID: 8f0c3e51d6a2
Revises: 4b1d7e2a9c30
Create Date: 2026-09-14 11:03:18.044671

"""

from collections.abc import Sequence

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "8f0c3e51d6a2"
down_revision: str | Sequence[str] | None = "4b1d7e2a9c30"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Add Row Level Security policies for profiles and swap_requests.

    The API connects with a service account that bypasses RLS; these policies
    apply to direct Supabase client connections such as realtime subscriptions.
    """
    op.execute("""
        CREATE OR REPLACE FUNCTION is_platform_admin()
        RETURNS BOOLEAN
        LANGUAGE sql
        STABLE
        AS $$
            SELECT coalesce((auth.jwt() -> 'app_metadata' ->> 'role') = 'admin', false);
        $$;
    """)

    for table in ["profiles", "swap_requests"]:
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY;")

    # --- Profiles policies ---
    # SELECT: public profiles, your own, or any for admins
    op.execute("""
        CREATE POLICY profile_select ON profiles
            FOR SELECT USING (
                is_public
                OR user_id = (SELECT auth.uid())
                OR is_platform_admin()
            );
    """)
    # INSERT/UPDATE: only your own row
    op.execute("""
        CREATE POLICY profile_insert ON profiles
            FOR INSERT WITH CHECK (user_id = (SELECT auth.uid()));
    """)
    op.execute("""
        CREATE POLICY profile_update ON profiles
            FOR UPDATE USING (user_id = (SELECT auth.uid()));
    """)
    # DELETE: admins only
    op.execute("""
        CREATE POLICY profile_delete ON profiles
            FOR DELETE USING (is_platform_admin());
    """)

    # --- Swap request policies ---
    # SELECT: participants and admins
    op.execute("""
        CREATE POLICY swap_request_select ON swap_requests
            FOR SELECT USING (
                from_user_id = (SELECT auth.uid())
                OR to_user_id = (SELECT auth.uid())
                OR is_platform_admin()
            );
    """)
    # INSERT: as yourself, pending, never to yourself
    op.execute("""
        CREATE POLICY swap_request_insert ON swap_requests
            FOR INSERT WITH CHECK (
                from_user_id = (SELECT auth.uid())
                AND to_user_id <> (SELECT auth.uid())
                AND status = 'pending'
            );
    """)
    # UPDATE: the recipient answers a pending request
    op.execute("""
        CREATE POLICY swap_request_update ON swap_requests
            FOR UPDATE USING (
                to_user_id = (SELECT auth.uid()) AND status = 'pending'
            );
    """)
    # DELETE: the sender withdraws a pending request, admins delete anything
    op.execute("""
        CREATE POLICY swap_request_delete ON swap_requests
            FOR DELETE USING (
                (from_user_id = (SELECT auth.uid()) AND status = 'pending')
                OR is_platform_admin()
            );
    """)


def downgrade() -> None:
    """Remove RLS policies and helper function."""
    for policy, table in [
        ("swap_request_delete", "swap_requests"),
        ("swap_request_update", "swap_requests"),
        ("swap_request_insert", "swap_requests"),
        ("swap_request_select", "swap_requests"),
        ("profile_delete", "profiles"),
        ("profile_update", "profiles"),
        ("profile_insert", "profiles"),
        ("profile_select", "profiles"),
    ]:
        op.execute(f"DROP POLICY IF EXISTS {policy} ON {table};")

    for table in ["profiles", "swap_requests"]:
        op.execute(f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY;")

    op.execute("DROP FUNCTION IF EXISTS is_platform_admin();")
