"""create users table

Revision ID: 0001_create_users
Revises:
Create Date: 2026-10-16 00:00:00.000000

Databases that already carry a users table created outside of Alembic
version tracking are left untouched; the revision is only stamped.
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_create_users"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    inspector = sa.inspect(op.get_bind())
    if inspector.has_table("users"):
        return

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("external_id", sa.String(), nullable=True),
        sa.Column("display_name", sa.String(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
        sa.UniqueConstraint("external_id", name="uq_users_external_id"),
        sa.UniqueConstraint("external_id", "display_name", name="uq_users_identity_pair"),
        sqlite_autoincrement=True,
    )


def downgrade() -> None:
    op.drop_table("users")
