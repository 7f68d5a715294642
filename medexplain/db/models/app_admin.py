"""
AppAdmin model: administrator membership.

The existence of a row for a user id is the sole admin predicate. It is
resolved once per request into ``Principal.is_admin``
(see medexplain.core.access).
"""

import uuid

from sqlalchemy import Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from medexplain.db.base import Base, CreatedAtMixin, UUIDMixin


class AppAdmin(UUIDMixin, CreatedAtMixin, Base):
    """
    Marks a user of the external auth provider as an administrator.

    Attributes:
        id: UUID7 primary key
        user_id: Auth provider user id (unique)
        email: Contact email, informational only
        created_at: When admin rights were granted
    """

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        nullable=False,
        unique=True,
        index=True,
        comment="Auth provider user id",
    )

    email: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Admin email address",
    )

    def __repr__(self) -> str:
        return f"<AppAdmin(user_id={self.user_id}, email={self.email!r})>"
