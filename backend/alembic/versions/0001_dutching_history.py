"""dutching history ledger

Revision ID: 0001_dutching_history
Revises:
Create Date: 2026-10-17 00:00:00

"""

from typing import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001_dutching_history"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "dutching_history",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("total_invested", sa.Numeric(14, 4), nullable=False),
        sa.Column("odds", sa.JSON(), nullable=False),
        sa.Column("stakes", sa.JSON(), nullable=False),
        sa.Column("guaranteed_return", sa.Numeric(14, 4), nullable=False),
        sa.Column("profit", sa.Numeric(14, 4), nullable=False),
        sa.Column("roi", sa.Numeric(12, 6), nullable=False),
        sa.Column("observation", sa.Text(), nullable=True),
    )
    op.create_index("ix_dutching_history_user_id", "dutching_history", ["user_id"])
    op.create_index("ix_dutching_history_user_created", "dutching_history", ["user_id", "created_at"])


def downgrade() -> None:
    op.drop_index("ix_dutching_history_user_created", table_name="dutching_history")
    op.drop_index("ix_dutching_history_user_id", table_name="dutching_history")
    op.drop_table("dutching_history")
