"""Unit tests for saved answers."""

import uuid

import pytest
from sqlalchemy import select

from medexplain.core.errors import NotFound
from medexplain.db import Guideline, SavedAnswer, ViewMode
from medexplain.services.saved_answers import SavedAnswerService


async def save_one(db_session, principal, answer: str = "Reduce dose") -> SavedAnswer:
    return await SavedAnswerService(db_session).save(
        principal,
        drug_name="Warfarin",
        gene_symbol="CYP2C9",
        view_mode=ViewMode.PATIENT,
        answer=answer,
    )


class TestSave:
    async def test_denormalized_fields(self, db_session, user) -> None:
        saved = await save_one(db_session, user)

        assert saved.user_id == user.user_id
        assert saved.gene_name == "CYP2C9"
        assert saved.user_type == "Patient"
        assert saved.created_at is not None

    async def test_unaffected_by_later_guideline_edit(
        self, db_session, reference_data, user
    ) -> None:
        saved = await save_one(db_session, user)

        guideline = await db_session.get(Guideline, reference_data["guideline"].id)
        guideline.patient_summary = "Completely different advice"
        await db_session.commit()

        fetched = await SavedAnswerService(db_session).get(user, saved.id)
        assert fetched.answer == "Reduce dose"


class TestOwnership:
    async def test_list_only_own_newest_first(self, db_session, user, other_user) -> None:
        first = await save_one(db_session, user, "first")
        second = await save_one(db_session, user, "second")
        await save_one(db_session, other_user, "not mine")

        saved = await SavedAnswerService(db_session).list(user)
        assert [s.id for s in saved] == [second.id, first.id]

    async def test_get_foreign_is_not_found(self, db_session, user, other_user) -> None:
        theirs = await save_one(db_session, other_user)
        with pytest.raises(NotFound):
            await SavedAnswerService(db_session).get(user, theirs.id)

    async def test_delete_own(self, db_session, user) -> None:
        saved = await save_one(db_session, user)
        service = SavedAnswerService(db_session)

        assert await service.delete(user, saved.id) is True
        assert await service.list(user) == []

    async def test_delete_foreign_is_noop(self, db_session, user, other_user) -> None:
        theirs = await save_one(db_session, other_user)

        assert await SavedAnswerService(db_session).delete(user, theirs.id) is False

        remaining = (await db_session.execute(select(SavedAnswer.id))).scalars().all()
        assert remaining == [theirs.id]

    async def test_delete_absent_is_noop(self, db_session, user) -> None:
        assert await SavedAnswerService(db_session).delete(user, uuid.uuid4()) is False
