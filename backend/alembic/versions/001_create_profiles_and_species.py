"""Create profiles and species tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates `profiles`, the `kingdom` enum type and `species`.
How:   Mirrors the hosted schema: profile ids are auth user UUIDs, species
       ids are bigint identities, species.author references profiles.id.

Rollback: downgrade() drops both tables and the enum (destructive).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

KINGDOMS = ("Animalia", "Plantae", "Fungi", "Protista", "Archaea", "Bacteria")


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False,
                  comment="Auth user id (JWT `sub` claim)"),
        sa.Column("display_name", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("biography", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    kingdom = postgresql.ENUM(*KINGDOMS, name="kingdom", create_type=False)
    kingdom.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "species",
        sa.Column("id", sa.BigInteger(), sa.Identity(always=False), nullable=False),
        sa.Column("scientific_name", sa.Text(), nullable=False),
        sa.Column("common_name", sa.Text(), nullable=True),
        sa.Column("kingdom", kingdom, nullable=False),
        sa.Column("total_population", sa.BigInteger(), nullable=True),
        sa.Column("image", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("endangered", sa.Boolean(), nullable=True,
                  server_default=sa.text("false")),
        sa.Column("author", postgresql.UUID(as_uuid=True), nullable=False),
        sa.ForeignKeyConstraint(["author"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("species")
    postgresql.ENUM(name="kingdom").drop(op.get_bind(), checkfirst=True)
    op.drop_table("profiles")
