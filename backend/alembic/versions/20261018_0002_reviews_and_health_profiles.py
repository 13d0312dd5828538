"""reviews and health profiles

Revision ID: 20261018_0002
Revises: 20260101_0001
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa


revision = "20261018_0002"
down_revision = "20260101_0001"
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def _label_list(name: str) -> sa.Column:
    return sa.Column(name, sa.JSON(), server_default=sa.text("'[]'"))


def upgrade() -> None:
    op.create_table(
        "remedy_reviews",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("remedy_id", sa.String(length=100), nullable=False),
        sa.Column("remedy_name", sa.String(length=200), nullable=False),
        sa.Column(
            "user_id",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=200)),
        sa.Column("comment", sa.Text(), nullable=False),
        sa.Column("verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "remedy_id", name="uq_reviews_user_remedy"),
    )
    op.create_index("ix_remedy_reviews_remedy_id", "remedy_reviews", ["remedy_id"])
    op.create_index("ix_remedy_reviews_user_id", "remedy_reviews", ["user_id"])

    op.create_table(
        "health_profiles",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        _label_list("categories"),
        _label_list("goals"),
        _label_list("allergies"),
        _label_list("conditions"),
        _label_list("dietary_prefs"),
        *_timestamps(),
    )
    op.create_index("ix_health_profiles_user_id", "health_profiles", ["user_id"])


def downgrade() -> None:
    op.drop_table("health_profiles")
    op.drop_table("remedy_reviews")
