"""
SavedAnswer model: a user's snapshot of a rendered answer.

Saved answers copy the drug name, gene symbol, view mode and answer text at
save time. They hold no foreign keys into reference data, so later edits to
guidelines or interactions never change what a user saved.
"""

import uuid

from sqlalchemy import Index, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from medexplain.db.base import Base, CreatedAtMixin, UUIDMixin


class SavedAnswer(UUIDMixin, CreatedAtMixin, Base):
    """
    An answer saved by its owner.

    Attributes:
        user_id: Owning user (only this user may read or delete the row)
        drug_name: Drug name as displayed at save time
        gene_name: Gene symbol as displayed at save time
        user_type: View mode the answer was rendered for ("Patient"/"Clinician")
        answer: Rendered answer text
        created_at: Save time (lists are newest first)
    """

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        nullable=False,
        comment="Owning user id",
    )

    drug_name: Mapped[str] = mapped_column(Text, nullable=False)
    gene_name: Mapped[str] = mapped_column(Text, nullable=False)
    user_type: Mapped[str] = mapped_column(Text, nullable=False, comment="Patient / Clinician")
    answer: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (
        Index("ix_saved_answers_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<SavedAnswer(user_id={self.user_id}, drug={self.drug_name!r}, gene={self.gene_name!r})>"
