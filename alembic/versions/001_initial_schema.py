"""Initial schema: users, search history, search cache, IP usage and rate limit log

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("firebase_uid", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("remaining_searches", sa.Integer(), nullable=False, server_default="3"),
        sa.Column("is_premium", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_banned", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("registration_ip", sa.String(64), nullable=True),
        sa.Column("last_login_at", sa.DateTime(), nullable=True),
        sa.Column("last_login_ip", sa.String(64), nullable=True),
        sa.Column("last_search_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_firebase_uid", "users", ["firebase_uid"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_is_banned", "users", ["is_banned"])

    op.create_table(
        "search_records",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("city", sa.String(200), nullable=False),
        sa.Column("business_type", sa.String(100), nullable=False),
        sa.Column("radius_km", sa.Float(), nullable=False),
        sa.Column("results_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("ip_address", sa.String(64), nullable=True),
        sa.Column("center_lat", sa.Float(), nullable=False),
        sa.Column("center_lng", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_search_records_id", "search_records", ["id"])
    op.create_index("ix_search_records_user_id", "search_records", ["user_id"])
    op.create_index("ix_search_records_business_type", "search_records", ["business_type"])
    op.create_index("ix_search_records_created_at", "search_records", ["created_at"])

    op.create_table(
        "business_results",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("search_id", sa.Integer(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("place_id", sa.String(255), nullable=True),
        sa.Column("name", sa.String(500), nullable=False),
        sa.Column("address", sa.String(500), nullable=True),
        sa.Column("rating", sa.Float(), nullable=True),
        sa.Column("total_reviews", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("lat", sa.Float(), nullable=False),
        sa.Column("lng", sa.Float(), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("website", sa.String(500), nullable=True),
        sa.Column("operational_status", sa.String(50), nullable=True),
        sa.Column("distance_km", sa.Float(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["search_id"], ["search_records.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_business_results_id", "business_results", ["id"])
    op.create_index("ix_business_results_search_id", "business_results", ["search_id"])

    op.create_table(
        "search_cache_entries",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("cache_key", sa.String(400), nullable=False),
        sa.Column("city", sa.String(200), nullable=False),
        sa.Column("business_type", sa.String(100), nullable=False),
        sa.Column("radius_km", sa.Float(), nullable=False),
        sa.Column("businesses", sa.JSON(), nullable=False),
        sa.Column("center_lat", sa.Float(), nullable=False),
        sa.Column("center_lng", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_search_cache_entries_id", "search_cache_entries", ["id"])
    op.create_index(
        "ix_search_cache_entries_cache_key", "search_cache_entries", ["cache_key"], unique=True
    )
    op.create_index("ix_search_cache_entries_created_at", "search_cache_entries", ["created_at"])

    op.create_table(
        "ip_usage_records",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("ip_address", sa.String(64), nullable=False),
        sa.Column("account_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_blocked", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("first_seen", sa.DateTime(), nullable=False),
        sa.Column("last_seen", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_ip_usage_records_id", "ip_usage_records", ["id"])
    op.create_index(
        "ix_ip_usage_records_ip_address", "ip_usage_records", ["ip_address"], unique=True
    )

    op.create_table(
        "rate_limit_requests",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("ip_address", sa.String(64), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_rate_limit_requests_ip_created", "rate_limit_requests", ["ip_address", "created_at"]
    )


def downgrade() -> None:
    op.drop_index("ix_rate_limit_requests_ip_created", table_name="rate_limit_requests")
    op.drop_table("rate_limit_requests")
    op.drop_index("ix_ip_usage_records_ip_address", table_name="ip_usage_records")
    op.drop_index("ix_ip_usage_records_id", table_name="ip_usage_records")
    op.drop_table("ip_usage_records")
    op.drop_index("ix_search_cache_entries_created_at", table_name="search_cache_entries")
    op.drop_index("ix_search_cache_entries_cache_key", table_name="search_cache_entries")
    op.drop_index("ix_search_cache_entries_id", table_name="search_cache_entries")
    op.drop_table("search_cache_entries")
    op.drop_index("ix_business_results_search_id", table_name="business_results")
    op.drop_index("ix_business_results_id", table_name="business_results")
    op.drop_table("business_results")
    op.drop_index("ix_search_records_created_at", table_name="search_records")
    op.drop_index("ix_search_records_business_type", table_name="search_records")
    op.drop_index("ix_search_records_user_id", table_name="search_records")
    op.drop_index("ix_search_records_id", table_name="search_records")
    op.drop_table("search_records")
    op.drop_index("ix_users_is_banned", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_index("ix_users_firebase_uid", table_name="users")
    op.drop_index("ix_users_id", table_name="users")
    op.drop_table("users")
