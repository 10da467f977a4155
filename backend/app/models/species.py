"""
Biodex Backend - Species SQLAlchemy Model
==========================================

What:  ORM model for the `species` table and the `kingdom` enum type.
Why:   Maps species rows to Python objects for the list and editor pages.
Who:   Used by SpeciesService for CRUD operations and by Alembic.

Column notes:
    - id: bigint identity, so "ordered by id descending" means newest first
    - kingdom: PostgreSQL enum restricted to the six biological kingdoms
    - endangered: nullable in the hosted schema; readers treat NULL as false
    - author: profile id of the user who created the row; the only value
      checked before an edit or delete is allowed
"""

import enum
import uuid

from sqlalchemy import BigInteger, Boolean, Enum, ForeignKey, Identity, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import Uuid

from app.database import Base


class Kingdom(str, enum.Enum):
    """The six fixed biological kingdoms a species can belong to."""

    ANIMALIA = "Animalia"
    PLANTAE = "Plantae"
    FUNGI = "Fungi"
    PROTISTA = "Protista"
    ARCHAEA = "Archaea"
    BACTERIA = "Bacteria"


class Species(Base):
    """A species card authored by one profile."""

    __tablename__ = "species"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        Identity(always=False),
        primary_key=True,
    )

    scientific_name: Mapped[str] = mapped_column(Text, nullable=False)

    common_name: Mapped[str | None] = mapped_column(Text, nullable=True)

    kingdom: Mapped[Kingdom] = mapped_column(
        Enum(
            Kingdom,
            name="kingdom",
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
    )

    total_population: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    image: Mapped[str | None] = mapped_column(Text, nullable=True)

    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    endangered: Mapped[bool | None] = mapped_column(Boolean, nullable=True, default=False)

    author: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Species(id={self.id}, scientific_name='{self.scientific_name}')>"
