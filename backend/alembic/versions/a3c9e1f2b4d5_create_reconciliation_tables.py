"""Create players, tanks, fish, decorations and sync_queue tables

Revision ID: a3c9e1f2b4d5
Revises:
Create Date: 2026-10-17 10:00:00.000000

This migration:
1. Creates the players table keyed by wallet address
2. Creates the tanks table (capacity stays on-chain)
3. Creates the fish table with self-referencing parent pointers for lineage
4. Creates the decorations table (XP multiplier stays on-chain)
5. Creates the sync_queue table for transaction confirmation tracking
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "a3c9e1f2b4d5"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "players",
        sa.Column("address", sa.String(), primary_key=True),
        sa.Column("total_xp", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("fish_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("tournaments_won", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("reputation", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("offspring_created", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("avatar_url", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_players_address", "players", ["address"])

    op.create_table(
        "tanks",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column("owner", sa.String(), sa.ForeignKey("players.address"), nullable=False),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("sprite_url", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_tanks_owner", "tanks", ["owner"])

    op.create_table(
        "fish",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column("owner", sa.String(), sa.ForeignKey("players.address"), nullable=False),
        sa.Column(
            "tank_id",
            sa.Integer(),
            sa.ForeignKey("tanks.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("species", sa.String(), nullable=False),
        sa.Column("dna", sa.String(), nullable=True),
        sa.Column("sprite_url", sa.String(), nullable=True),
        sa.Column(
            "parent1_id",
            sa.Integer(),
            sa.ForeignKey("fish.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "parent2_id",
            sa.Integer(),
            sa.ForeignKey("fish.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_fish_owner", "fish", ["owner"])
    op.create_index("ix_fish_tank_id", "fish", ["tank_id"])
    op.create_index("ix_fish_parent1_id", "fish", ["parent1_id"])
    op.create_index("ix_fish_parent2_id", "fish", ["parent2_id"])
    op.create_index("idx_fish_parents", "fish", ["parent1_id", "parent2_id"])

    op.create_table(
        "decorations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column("owner", sa.String(), sa.ForeignKey("players.address"), nullable=False),
        sa.Column("kind", sa.String(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("image_url", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint(
            "kind IN ('Plant', 'Statue', 'Background', 'Ornament')",
            name="ck_decorations_kind",
        ),
    )
    op.create_index("ix_decorations_owner", "decorations", ["owner"])

    op.create_table(
        "sync_queue",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("tx_hash", sa.String(), nullable=False),
        sa.Column("entity_type", sa.String(), nullable=False),
        sa.Column("entity_id", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("retry_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint(
            "entity_type IN ('player', 'fish', 'tank', 'decoration')",
            name="ck_sync_queue_entity_type",
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'failed')",
            name="ck_sync_queue_status",
        ),
    )
    op.create_index("ix_sync_queue_tx_hash", "sync_queue", ["tx_hash"], unique=True)
    op.create_index("idx_sync_queue_status_created", "sync_queue", ["status", "created_at"])


def downgrade() -> None:
    op.drop_index("idx_sync_queue_status_created", table_name="sync_queue")
    op.drop_index("ix_sync_queue_tx_hash", table_name="sync_queue")
    op.drop_table("sync_queue")

    op.drop_index("ix_decorations_owner", table_name="decorations")
    op.drop_table("decorations")

    op.drop_index("idx_fish_parents", table_name="fish")
    op.drop_index("ix_fish_parent2_id", table_name="fish")
    op.drop_index("ix_fish_parent1_id", table_name="fish")
    op.drop_index("ix_fish_tank_id", table_name="fish")
    op.drop_index("ix_fish_owner", table_name="fish")
    op.drop_table("fish")

    op.drop_index("ix_tanks_owner", table_name="tanks")
    op.drop_table("tanks")

    op.drop_index("ix_players_address", table_name="players")
    op.drop_table("players")
