"""waste rewards ledger schema

Revision ID: 5e1d2c3b4a90
Revises: 
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "5e1d2c3b4a90"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _uuid():
    return postgresql.UUID(as_uuid=True)


def _timestamps():
    return [
        sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
        sa.Column("updated_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if not inspector.has_table("users"):
        op.create_table(
            "users",
            sa.Column("id", _uuid(), primary_key=True, nullable=False),
            sa.Column("name", sa.String(length=100), nullable=True),
            sa.Column("email", sa.String(length=255), nullable=False),
            sa.Column("role", sa.String(length=20), nullable=False, server_default="user"),
            sa.Column("zone", sa.String(length=50), nullable=True),
            sa.Column("points", sa.Integer(), nullable=False, server_default="0"),
            *_timestamps(),
            sa.UniqueConstraint("email", name="uq_users_email"),
            sa.CheckConstraint("points >= 0", name="ck_users_points_non_negative"),
        )

    if not inspector.has_table("rewards"):
        op.create_table(
            "rewards",
            sa.Column("id", _uuid(), primary_key=True, nullable=False),
            sa.Column("name", sa.String(length=100), nullable=False),
            sa.Column("description", sa.String(length=255), nullable=True),
            sa.Column("points_cost", sa.Integer(), nullable=False),
            sa.Column("category", sa.String(length=50), nullable=False, server_default="voucher"),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
            sa.CheckConstraint("points_cost > 0", name="ck_rewards_points_cost_positive"),
        )

    if not inspector.has_table("redemptions"):
        op.create_table(
            "redemptions",
            sa.Column("id", _uuid(), primary_key=True, nullable=False),
            sa.Column("user_id", _uuid(), sa.ForeignKey("users.id"), nullable=False),
            sa.Column("reward_id", _uuid(), sa.ForeignKey("rewards.id"), nullable=False),
            sa.Column("points_spent", sa.Integer(), nullable=False),
            sa.Column("code", sa.String(length=40), nullable=False),
            sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
            sa.UniqueConstraint("code", name="uq_redemptions_code"),
        )
        op.create_index("ix_redemptions_user_id", "redemptions", ["user_id"])

    if not inspector.has_table("award_events"):
        op.create_table(
            "award_events",
            sa.Column("id", _uuid(), primary_key=True, nullable=False),
            sa.Column("user_id", _uuid(), sa.ForeignKey("users.id"), nullable=False),
            sa.Column("kind", sa.String(length=50), nullable=False),
            sa.Column("points", sa.Integer(), nullable=False),
            sa.Column("reason", sa.String(length=255), nullable=True),
            sa.Column("source_entity_id", _uuid(), nullable=False),
            sa.Column("occurred_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
            sa.UniqueConstraint("source_entity_id", "kind", name="uq_award_events_source_entity_id_kind"),
        )
        op.create_index("ix_award_events_user_id", "award_events", ["user_id"])

    if not inspector.has_table("notifications"):
        op.create_table(
            "notifications",
            sa.Column("id", _uuid(), primary_key=True, nullable=False),
            sa.Column("user_id", _uuid(), sa.ForeignKey("users.id"), nullable=False),
            sa.Column("type", sa.String(length=30), nullable=False),
            sa.Column("title", sa.String(length=200), nullable=False),
            sa.Column("message", sa.String(length=1000), nullable=False),
            sa.Column("link", sa.String(length=255), nullable=True),
            sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
        )
        op.create_index("ix_notifications_user_id", "notifications", ["user_id"])

    if not inspector.has_table("analytics_rollups"):
        op.create_table(
            "analytics_rollups",
            sa.Column("id", _uuid(), primary_key=True, nullable=False),
            sa.Column("date", sa.Date(), nullable=False),
            sa.Column("zone", sa.String(length=50), nullable=False),
            sa.Column("total_collections", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("completed_collections", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("recycling_weight", sa.Float(), nullable=False, server_default="0"),
            sa.Column("general_waste_weight", sa.Float(), nullable=False, server_default="0"),
            sa.Column("co2_saved", sa.Float(), nullable=False, server_default="0"),
            *_timestamps(),
            sa.UniqueConstraint("date", "zone", name="uq_analytics_rollups_date_zone"),
        )

    if not inspector.has_table("collections"):
        op.create_table(
            "collections",
            sa.Column("id", _uuid(), primary_key=True, nullable=False),
            sa.Column("user_id", _uuid(), sa.ForeignKey("users.id"), nullable=False),
            sa.Column("waste_type", sa.String(length=20), nullable=False),
            sa.Column("zone", sa.String(length=50), nullable=False),
            sa.Column("address", sa.String(length=255), nullable=True),
            sa.Column("priority", sa.String(length=10), nullable=False, server_default="normal"),
            sa.Column("notes", sa.String(length=1000), nullable=True),
            sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
            sa.Column("scheduled_date", sa.Date(), nullable=True),
            sa.Column("scheduled_time", sa.String(length=20), nullable=True),
            sa.Column("collector_id", _uuid(), sa.ForeignKey("users.id"), nullable=True),
            sa.Column("completed_at", sa.TIMESTAMP(), nullable=True),
            *_timestamps(),
        )
        op.create_index("ix_collections_user_id", "collections", ["user_id"])
        op.create_index("ix_collections_zone_status", "collections", ["zone", "status"])

    if not inspector.has_table("reports"):
        op.create_table(
            "reports",
            sa.Column("id", _uuid(), primary_key=True, nullable=False),
            sa.Column("user_id", _uuid(), sa.ForeignKey("users.id"), nullable=False),
            sa.Column("type", sa.String(length=30), nullable=False),
            sa.Column("title", sa.String(length=200), nullable=False),
            sa.Column("description", sa.String(length=2000), nullable=True),
            sa.Column("location", sa.String(length=255), nullable=True),
            sa.Column("priority", sa.String(length=10), nullable=False, server_default="normal"),
            sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
            sa.Column("resolved_by", _uuid(), sa.ForeignKey("users.id"), nullable=True),
            sa.Column("resolved_at", sa.TIMESTAMP(), nullable=True),
            *_timestamps(),
        )
        op.create_index("ix_reports_user_id", "reports", ["user_id"])

    if not inspector.has_table("schedules"):
        op.create_table(
            "schedules",
            sa.Column("id", _uuid(), primary_key=True, nullable=False),
            sa.Column("zone", sa.String(length=50), nullable=False),
            sa.Column("day_of_week", sa.Integer(), nullable=False),
            sa.Column("time_slot", sa.String(length=20), nullable=False),
            sa.Column("waste_type", sa.String(length=20), nullable=False),
            sa.Column("collector_id", _uuid(), sa.ForeignKey("users.id"), nullable=True),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
            sa.CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_schedules_day_of_week"),
        )
        op.create_index("ix_schedules_zone", "schedules", ["zone"])


def downgrade() -> None:
    """Downgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    # children first
    for table in (
        "schedules",
        "reports",
        "collections",
        "analytics_rollups",
        "notifications",
        "award_events",
        "redemptions",
        "rewards",
        "users",
    ):
        if inspector.has_table(table):
            op.drop_table(table)
