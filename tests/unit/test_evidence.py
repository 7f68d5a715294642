"""Unit tests for the evidence browser."""

from medexplain.db import Drug, Gene, Guideline
from medexplain.services.evidence import EvidenceService


async def add_guideline(db_session, drug_name: str, gene_symbol: str, **fields) -> Guideline:
    drug = Drug(name=drug_name)
    gene = Gene(symbol=gene_symbol)
    db_session.add_all([drug, gene])
    await db_session.flush()
    guideline = Guideline(drug_id=drug.id, gene_id=gene.id, **fields)
    db_session.add(guideline)
    await db_session.commit()
    return guideline


class TestListGuidelines:
    async def test_includes_drug_gene_source_and_citations(self, db_session, reference_data) -> None:
        views = await EvidenceService(db_session).list_guidelines()

        assert len(views) == 1
        view = views[0]
        assert (view.drug_name, view.gene_symbol, view.source_name) == ("Warfarin", "CYP2C9", "CPIC")
        assert view.evidence_level == "High"
        assert [c.title for c in view.citations] == ["CPIC Guideline for Warfarin Dosing"]

    async def test_search_matches_drug_gene_or_recommendation(self, db_session, reference_data) -> None:
        await add_guideline(
            db_session, "Codeine", "CYP2D6X", recommendation="Avoid in ultrarapid metabolizers"
        )
        service = EvidenceService(db_session)

        assert [v.drug_name for v in await service.list_guidelines(search="warf")] == ["Warfarin"]
        assert [v.drug_name for v in await service.list_guidelines(search="2d6x")] == ["Codeine"]
        assert [v.drug_name for v in await service.list_guidelines(search="ULTRARAPID")] == ["Codeine"]

    async def test_filters_combine(self, db_session, reference_data) -> None:
        await add_guideline(db_session, "Codeine", "CYP2D6X", evidence_level="Moderate")
        service = EvidenceService(db_session)

        assert len(await service.list_guidelines(evidence_level="Moderate")) == 1
        assert len(await service.list_guidelines(drug="Warfarin", gene="CYP2C9")) == 1
        assert await service.list_guidelines(drug="Warfarin", evidence_level="Moderate") == []

    async def test_newest_first(self, db_session, reference_data) -> None:
        newer = await add_guideline(db_session, "Codeine", "CYP2D6X")
        views = await EvidenceService(db_session).list_guidelines()
        assert [v.id for v in views] == [newer.id, reference_data["guideline"].id]


async def test_filter_options(db_session, reference_data) -> None:
    options = await EvidenceService(db_session).filter_options()

    assert options.drugs == ["Ibuprofen", "Warfarin"]
    assert options.genes == ["CYP2C9", "CYP2D6"]
    assert options.evidence_levels == ["High", "Moderate", "Low"]
