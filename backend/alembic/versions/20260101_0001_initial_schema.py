"""initial schema

Revision ID: 20260101_0001
Revises:
Create Date: 2026-01-01
"""

from alembic import op
import sqlalchemy as sa


revision = "20260101_0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("external_id", sa.String(length=255), unique=True),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("name", sa.String(length=255)),
        sa.Column("image", sa.String(length=512)),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="user"),
        sa.Column("has_used_trial", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("trial_start_date", sa.DateTime(timezone=True)),
        sa.Column("trial_end_date", sa.DateTime(timezone=True)),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"])

    op.create_table(
        "token_blacklist",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("token_jti", sa.String(length=256), nullable=False, unique=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_token_blacklist_token_jti", "token_blacklist", ["token_jti"])

    op.create_table(
        "subscriptions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("plan", sa.String(length=20), nullable=False, server_default="free"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("interval", sa.String(length=10)),
        sa.Column("current_period_end", sa.DateTime(timezone=True)),
        sa.Column(
            "cancel_at_period_end", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column("provider_customer_id", sa.String(length=255)),
        sa.Column("provider_subscription_id", sa.String(length=255)),
        *_timestamps(),
    )
    op.create_index("ix_subscriptions_user_id", "subscriptions", ["user_id"])

    op.create_table(
        "favorites",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("session_id", sa.String(length=36)),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id", ondelete="CASCADE")),
        sa.Column("remedy_id", sa.String(length=100), nullable=False),
        sa.Column("remedy_name", sa.String(length=200), nullable=False),
        sa.Column("notes", sa.Text()),
        sa.Column("collection_name", sa.String(length=100)),
        *_timestamps(),
        sa.UniqueConstraint("session_id", "remedy_id", name="uq_favorites_session_remedy"),
        sa.UniqueConstraint("user_id", "remedy_id", name="uq_favorites_user_remedy"),
    )
    op.create_index("ix_favorites_session_id", "favorites", ["session_id"])
    op.create_index("ix_favorites_user_id", "favorites", ["user_id"])

    op.create_table(
        "journal_entries",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("remedy_id", sa.String(length=100), nullable=False),
        sa.Column("remedy_name", sa.String(length=200), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("symptoms", sa.JSON(), server_default=sa.text("'[]'")),
        sa.Column("side_effects", sa.JSON(), server_default=sa.text("'[]'")),
        sa.Column("dosage_taken", sa.String(length=100)),
        sa.Column("notes", sa.Text()),
        sa.Column("mood", sa.Integer()),
        sa.Column("energy_level", sa.Integer()),
        sa.Column("sleep_quality", sa.Integer()),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "remedy_id", "date", name="uq_journal_user_remedy_date"),
    )
    op.create_index("ix_journal_entries_user_id", "journal_entries", ["user_id"])
    op.create_index("ix_journal_entries_remedy_id", "journal_entries", ["remedy_id"])
    op.create_index("ix_journal_entries_date", "journal_entries", ["date"])

    op.create_table(
        "medications",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("dosage", sa.String(length=100)),
        sa.Column("frequency", sa.String(length=20)),
        sa.Column("start_date", sa.DateTime(timezone=True)),
        sa.Column("notes", sa.Text()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "name", name="uq_medications_user_name"),
    )
    op.create_index("ix_medications_user_id", "medications", ["user_id"])

    op.create_table(
        "search_history",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("session_id", sa.String(length=36)),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id", ondelete="CASCADE")),
        sa.Column("query", sa.String(length=100), nullable=False),
        sa.Column("results_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("filters", sa.JSON()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_search_history_session_id", "search_history", ["session_id"])
    op.create_index("ix_search_history_user_id", "search_history", ["user_id"])
    op.create_index("ix_search_history_query", "search_history", ["query"])

    op.create_table(
        "filter_preferences",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("session_id", sa.String(length=36), unique=True),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id", ondelete="CASCADE")),
        sa.Column("categories", sa.JSON(), server_default=sa.text("'[]'")),
        sa.Column("nutrients", sa.JSON(), server_default=sa.text("'[]'")),
        sa.Column("evidence_levels", sa.JSON(), server_default=sa.text("'[]'")),
        sa.Column("sort_by", sa.String(length=20)),
        sa.Column("sort_order", sa.String(length=4)),
        *_timestamps(),
    )
    op.create_index("ix_filter_preferences_user_id", "filter_preferences", ["user_id"])

    op.create_table(
        "natural_remedies",
        sa.Column("id", sa.String(length=100), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("image_url", sa.String(length=512)),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.Column("matching_nutrients", sa.JSON(), server_default=sa.text("'[]'")),
        sa.Column("similarity_score", sa.Float(), nullable=False, server_default="0"),
        sa.Column("evidence_level", sa.String(length=20)),
        sa.Column("usage", sa.Text()),
        sa.Column("dosage", sa.Text()),
        sa.Column("precautions", sa.Text()),
        sa.Column("scientific_info", sa.Text()),
        sa.Column("references", sa.JSON(), server_default=sa.text("'[]'")),
        *_timestamps(),
    )
    op.create_index("ix_natural_remedies_name", "natural_remedies", ["name"])
    op.create_index("ix_natural_remedies_category", "natural_remedies", ["category"])

    op.create_table(
        "remedy_contributions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.Column("ingredients", sa.JSON(), server_default=sa.text("'[]'")),
        sa.Column("benefits", sa.JSON(), server_default=sa.text("'[]'")),
        sa.Column("usage", sa.Text()),
        sa.Column("dosage", sa.Text()),
        sa.Column("precautions", sa.Text()),
        sa.Column("scientific_info", sa.Text()),
        sa.Column("references", sa.JSON(), server_default=sa.text("'[]'")),
        sa.Column("image_url", sa.String(length=512)),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("moderator_note", sa.Text()),
        sa.Column("moderated_by", sa.String(length=36)),
        sa.Column("moderated_at", sa.DateTime(timezone=True)),
        *_timestamps(),
    )
    op.create_index("ix_remedy_contributions_user_id", "remedy_contributions", ["user_id"])
    op.create_index("ix_remedy_contributions_status", "remedy_contributions", ["status"])

    op.create_table(
        "interactions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("substance_a", sa.String(length=200), nullable=False),
        sa.Column("substance_a_type", sa.String(length=20), nullable=False),
        sa.Column("substance_b", sa.String(length=200), nullable=False),
        sa.Column("substance_b_type", sa.String(length=20), nullable=False),
        sa.Column("severity", sa.String(length=20), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("mechanism", sa.Text()),
        sa.Column("recommendation", sa.Text(), nullable=False),
        sa.Column("evidence", sa.String(length=50)),
        sa.Column("sources", sa.JSON(), server_default=sa.text("'[]'")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_interactions_substance_a", "interactions", ["substance_a"])
    op.create_index("ix_interactions_substance_b", "interactions", ["substance_b"])

    op.create_table(
        "usage_records",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("searches", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("ai_searches", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("exports", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("comparisons", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "date", name="uq_usage_user_date"),
    )
    op.create_index("ix_usage_records_user_id", "usage_records", ["user_id"])
    op.create_index("ix_usage_records_date", "usage_records", ["date"])


def downgrade() -> None:
    op.drop_table("usage_records")
    op.drop_table("interactions")
    op.drop_table("remedy_contributions")
    op.drop_table("natural_remedies")
    op.drop_table("filter_preferences")
    op.drop_table("search_history")
    op.drop_table("medications")
    op.drop_table("journal_entries")
    op.drop_table("favorites")
    op.drop_table("subscriptions")
    op.drop_table("token_blacklist")
    op.drop_table("users")
