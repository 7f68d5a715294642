"""
Saved answers: user-owned snapshots of rendered answers.

Every statement here is filtered by ``owned_by(SavedAnswer, principal)``,
so a caller can never see, fetch or delete another user's rows.
"""

from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from medexplain.core.access import Principal, owned_by
from medexplain.core.errors import NotFound, StorageUnavailable
from medexplain.core.logging import get_logger
from medexplain.db.enums import ViewMode
from medexplain.db.models import SavedAnswer
from medexplain.db.session import transaction

logger = get_logger(__name__)


class SavedAnswerService:
    """CRUD over the caller's saved answers."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def save(
        self,
        principal: Principal,
        drug_name: str,
        gene_symbol: str,
        view_mode: ViewMode,
        answer: str,
    ) -> SavedAnswer:
        """
        Store a denormalized copy of an answer.

        Nothing here points back at reference data, so later guideline
        edits do not change the saved text.
        """
        saved = SavedAnswer(
            user_id=principal.user_id,
            drug_name=drug_name,
            gene_name=gene_symbol,
            user_type=view_mode.value,
            answer=answer,
        )
        try:
            async with transaction(self.db):
                self.db.add(saved)
        except SQLAlchemyError as e:
            raise StorageUnavailable(str(e)) from e

        logger.info("Answer saved", saved_answer_id=str(saved.id), drug=drug_name, gene=gene_symbol)
        return saved

    async def list(self, principal: Principal) -> list[SavedAnswer]:
        """The caller's saved answers, newest first."""
        stmt = (
            select(SavedAnswer)
            .where(owned_by(SavedAnswer, principal))
            .order_by(SavedAnswer.created_at.desc(), SavedAnswer.id.desc())
        )
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            raise StorageUnavailable(str(e)) from e
        return list(result.scalars().all())

    async def get(self, principal: Principal, saved_answer_id: UUID) -> SavedAnswer:
        """
        One of the caller's saved answers.

        Raises:
            NotFound: Absent, or owned by someone else
        """
        stmt = select(SavedAnswer).where(
            SavedAnswer.id == saved_answer_id,
            owned_by(SavedAnswer, principal),
        )
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            raise StorageUnavailable(str(e)) from e
        saved = result.scalar_one_or_none()
        if saved is None:
            raise NotFound(f"Saved answer {saved_answer_id} not found")
        return saved

    async def delete(self, principal: Principal, saved_answer_id: UUID) -> bool:
        """
        Delete one of the caller's saved answers.

        Idempotent: deleting an absent row, or someone else's row, is a
        no-op that leaves the table untouched.

        Returns:
            True if a row was deleted
        """
        stmt = delete(SavedAnswer).where(
            SavedAnswer.id == saved_answer_id,
            owned_by(SavedAnswer, principal),
        )
        try:
            async with transaction(self.db):
                result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            raise StorageUnavailable(str(e)) from e

        deleted = result.rowcount > 0
        logger.info(
            "Saved answer delete",
            saved_answer_id=str(saved_answer_id),
            deleted=deleted,
        )
        return deleted
