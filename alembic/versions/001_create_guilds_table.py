"""create guilds table

Revision ID: 001
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "guilds",
        sa.Column("guild_id", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("guild_name", sa.String(), nullable=True),
        sa.Column("premium", sa.SmallInteger(), nullable=False, server_default="0"),
        sa.Column("tx_time_unix", sa.Integer(), nullable=True),
        sa.Column("transferred_to", sa.BigInteger(), nullable=True),
        sa.Column("inherits_from", sa.BigInteger(), nullable=True),
        sa.PrimaryKeyConstraint("guild_id"),
        # 0 = free, 1 = standard, 2 = gold
        sa.CheckConstraint(
            "premium IN (0, 1, 2)",
            name="ck_guilds_premium_tier",
        ),
        # A guild can neither transfer to nor inherit from itself
        sa.CheckConstraint(
            "transferred_to IS NULL OR transferred_to <> guild_id",
            name="ck_guilds_transferred_to_other",
        ),
        sa.CheckConstraint(
            "inherits_from IS NULL OR inherits_from <> guild_id",
            name="ck_guilds_inherits_from_other",
        ),
    )
    op.create_index("ix_guilds_transferred_to", "guilds", ["transferred_to"], unique=False)
    op.create_index("ix_guilds_inherits_from", "guilds", ["inherits_from"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_guilds_inherits_from", table_name="guilds")
    op.drop_index("ix_guilds_transferred_to", table_name="guilds")
    op.drop_table("guilds")
