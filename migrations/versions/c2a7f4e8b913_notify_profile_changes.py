"""notify_profile_changes

Revision ID: c2a7f4e8b913
Revises: 8f0c3e51d6a2
Create Date: 2026-10-17 09:41:52.310217

"""

from collections.abc import Sequence

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "c2a7f4e8b913"
down_revision: str | Sequence[str] | None = "8f0c3e51d6a2"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Announce every profile row change on the ``profile_changes`` channel.

    Fires for writes from any connection, including direct Supabase clients
    allowed by the RLS policies, so every API worker can drop its directory
    cache.
    """
    op.execute("""
        CREATE OR REPLACE FUNCTION notify_profile_change()
        RETURNS TRIGGER
        LANGUAGE plpgsql
        AS $$
        BEGIN
            PERFORM pg_notify(
                'profile_changes',
                json_build_object(
                    'table', TG_TABLE_NAME,
                    'type', TG_OP,
                    'id', CASE WHEN TG_OP = 'DELETE' THEN OLD.user_id ELSE NEW.user_id END
                )::text
            );
            RETURN NULL;
        END;
        $$;
    """)
    op.execute("""
        CREATE TRIGGER profiles_notify_change
            AFTER INSERT OR UPDATE OR DELETE ON profiles
            FOR EACH ROW EXECUTE FUNCTION notify_profile_change();
    """)


def downgrade() -> None:
    """Remove the profile change trigger."""
    op.execute("DROP TRIGGER IF EXISTS profiles_notify_change ON profiles;")
    op.execute("DROP FUNCTION IF EXISTS notify_profile_change();")
