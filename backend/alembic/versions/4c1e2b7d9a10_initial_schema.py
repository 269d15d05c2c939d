"""initial schema

Revision ID: 4c1e2b7d9a10
Revises:
Create Date: 2026-10-19 09:40:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "4c1e2b7d9a10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("display_name", sa.String(length=200), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("last_login", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "cards",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("annual_fee", sa.Float(), nullable=False),
        sa.Column("min_spend", sa.Float(), nullable=False),
        sa.Column("min_spend_period", sa.Integer(), nullable=False),
        sa.Column("welcome_bonus", sa.Integer(), nullable=False),
        sa.Column("reward_rate", sa.Float(), nullable=False),
        sa.Column("reward_multiplier", sa.Float(), nullable=False),
        sa.Column("point_value", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_cards_user_id", "cards", ["user_id"])
    op.create_index("ix_cards_created_at", "cards", ["created_at"])

    op.create_table(
        "card_special_categories",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("card_id", sa.Integer(), sa.ForeignKey("cards.id", ondelete="CASCADE"), nullable=False),
        sa.Column("category", sa.String(length=200), nullable=False),
        sa.Column("reward_rate", sa.Float(), nullable=False),
        sa.Column("min_spend", sa.Float(), nullable=True),
        sa.Column("max_spend", sa.Float(), nullable=True),
    )
    op.create_index("ix_card_special_categories_card_id", "card_special_categories", ["card_id"])

    op.create_table(
        "card_bonus_tiers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("card_id", sa.Integer(), sa.ForeignKey("cards.id", ondelete="CASCADE"), nullable=False),
        sa.Column("min_spend", sa.Float(), nullable=False),
        sa.Column("max_spend", sa.Float(), nullable=False),
        sa.Column("point_value", sa.Float(), nullable=False),
    )
    op.create_index("ix_card_bonus_tiers_card_id", "card_bonus_tiers", ["card_id"])

    op.create_table(
        "card_partner_bonuses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("card_id", sa.Integer(), sa.ForeignKey("cards.id", ondelete="CASCADE"), nullable=False),
        sa.Column("partner_name", sa.String(length=200), nullable=False),
        sa.Column("bonus_rate", sa.Float(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
    )
    op.create_index("ix_card_partner_bonuses_card_id", "card_partner_bonuses", ["card_id"])


def downgrade() -> None:
    op.drop_table("card_partner_bonuses")
    op.drop_table("card_bonus_tiers")
    op.drop_table("card_special_categories")
    op.drop_table("cards")
    op.drop_table("users")
