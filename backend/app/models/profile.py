"""
Biodex Backend - Profile SQLAlchemy Model
==========================================

What:  ORM model for the `profiles` table.
Why:   One row per signed-up user; the id is the user id issued by the hosted
       auth service, so species authorship and sessions share one identifier.
Who:   Read by ProfileService for the users list. Never written by this app:
       rows are created by the auth service's sign-up hook.
"""

import uuid

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import Uuid

from app.database import Base


class Profile(Base):
    """A signed-up user as shown on the users page."""

    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        comment="Auth user id (JWT `sub` claim)",
    )

    display_name: Mapped[str] = mapped_column(Text, nullable=False)

    email: Mapped[str] = mapped_column(Text, nullable=False)

    biography: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, display_name='{self.display_name}')>"
