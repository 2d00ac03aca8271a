"""Track the admin behind impersonation sessions

Revision ID: 4e7b2c91a0f3
Revises: 8c1f3a2b9d40
Create Date: 2026-10-18 12:00:00.000000

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "4e7b2c91a0f3"
down_revision = "8c1f3a2b9d40"
branch_labels = None
depends_on = None


def upgrade() -> None:
    with op.batch_alter_table("sessions") as batch_op:
        batch_op.add_column(sa.Column("impersonated_by_id", sa.Uuid(), nullable=True))
        batch_op.create_foreign_key(
            "fk_sessions_impersonated_by_id_users",
            "users",
            ["impersonated_by_id"],
            ["id"],
            ondelete="CASCADE",
        )


def downgrade() -> None:
    with op.batch_alter_table("sessions") as batch_op:
        batch_op.drop_constraint(
            "fk_sessions_impersonated_by_id_users", type_="foreignkey"
        )
        batch_op.drop_column("impersonated_by_id")
