#!/usr/bin/env python3
"""
Load a small sample of reference data for local development.

Creates the CPIC source and two well-known drug-gene pairs
(Warfarin/CYP2C9, Clopidogrel/CYP2C19), each with a phenotype, a guideline,
a citation and an interaction. Running the script again is a no-op: rows are
matched by source name, drug name and gene symbol and skipped if present.

Usage:
    python scripts/seed_reference_data.py

    # Preview without writing
    python scripts/seed_reference_data.py --dry-run

    # Start from an empty schema
    python scripts/seed_reference_data.py --reset

Requirements:
    - Database must be running
    - Migration must be applied (alembic upgrade head)
"""

import argparse
import asyncio
import sys
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from medexplain.core.logging import get_logger, setup_logging
from medexplain.db import (
    Citation,
    Drug,
    EvidenceLevel,
    Gene,
    Guideline,
    Interaction,
    Phenotype,
    Source,
    dispose_engine,
    drop_db,
    get_db_context,
    init_db,
)

logger = get_logger(__name__)

CPIC = {
    "name": "CPIC",
    "url": "https://cpicpgx.org",
    "description": "Clinical Pharmacogenetics Implementation Consortium",
}

SAMPLE_PAIRS: list[dict[str, Any]] = [
    {
        "drug": {"name": "Warfarin", "aliases": ["Coumadin", "Jantoven"]},
        "gene": {"symbol": "CYP2C9", "name": "Cytochrome P450 2C9"},
        "phenotype": "Poor Metabolizer",
        "guideline": {
            "recommendation": "Consider a lower starting dose and closer INR monitoring.",
            "evidence_level": EvidenceLevel.HIGH.value,
            "patient_summary": (
                "Your body breaks down warfarin more slowly. Your doctor may "
                "start you on a lower dose."
            ),
            "clinician_summary": (
                "CYP2C9 reduced-function alleles decrease S-warfarin clearance; "
                "reduce the initial dose and titrate by INR."
            ),
        },
        "interaction": {
            "action": "Reduce initial dose",
            "summary": "Reduced warfarin metabolism increases bleeding risk.",
            "evidence": "Multiple prospective dosing studies",
        },
        "citation": {
            "title": "CPIC Guideline for Pharmacogenetics-Guided Warfarin Dosing: 2017 Update",
            "authors": "Johnson JA, Caudle KE, Gong L, et al.",
            "journal": "Clin Pharmacol Ther",
            "year": 2017,
            "pmid": "28198005",
            "doi": "10.1002/cpt.668",
        },
    },
    {
        "drug": {"name": "Clopidogrel", "aliases": ["Plavix"]},
        "gene": {"symbol": "CYP2C19", "name": "Cytochrome P450 2C19"},
        "phenotype": "Poor Metabolizer",
        "guideline": {
            "recommendation": "Use an alternative antiplatelet agent if no contraindication.",
            "evidence_level": EvidenceLevel.HIGH.value,
            "patient_summary": (
                "Clopidogrel may not work well for you. Your doctor may choose "
                "a different medicine."
            ),
            "clinician_summary": (
                "CYP2C19 poor metabolizers form little active metabolite; "
                "prefer prasugrel or ticagrelor."
            ),
        },
        "interaction": {
            "action": "Avoid; use alternative",
            "summary": "Reduced activation of clopidogrel lowers its antiplatelet effect.",
            "evidence": "Meta-analyses of cardiovascular outcomes",
        },
        "citation": {
            "title": "CPIC Guideline for CYP2C19 Genotype and Clopidogrel Therapy: 2022 Update",
            "authors": "Lee CR, Luzum JA, Sangkuhl K, et al.",
            "journal": "Clin Pharmacol Ther",
            "year": 2022,
            "pmid": "35034351",
            "doi": "10.1002/cpt.2526",
        },
    },
]


async def get_or_create(db: AsyncSession, model: type, lookup: dict[str, Any], **fields) -> tuple[Any, bool]:
    """Return (row, created) for the row matching lookup."""
    stmt = select(model).filter_by(**lookup)
    existing = (await db.execute(stmt)).scalars().first()
    if existing is not None:
        return existing, False
    row = model(**lookup, **fields)
    db.add(row)
    await db.flush()
    return row, True


async def seed(db: AsyncSession) -> dict[str, int]:
    """
    Insert the sample data.

    Returns:
        Number of drug-gene pairs created and skipped
    """
    source, _ = await get_or_create(
        db, Source, {"name": CPIC["name"]}, url=CPIC["url"], description=CPIC["description"]
    )

    created = skipped = 0
    for pair in SAMPLE_PAIRS:
        drug, drug_created = await get_or_create(
            db, Drug, {"name": pair["drug"]["name"]}, aliases=pair["drug"]["aliases"]
        )
        gene, gene_created = await get_or_create(
            db, Gene, {"symbol": pair["gene"]["symbol"]}, name=pair["gene"]["name"]
        )
        if not (drug_created or gene_created):
            logger.debug("Pair already seeded", drug=drug.name, gene=gene.symbol)
            skipped += 1
            continue

        phenotype = Phenotype(gene_id=gene.id, phenotype=pair["phenotype"])
        guideline = Guideline(
            drug_id=drug.id,
            gene_id=gene.id,
            source_id=source.id,
            **pair["guideline"],
        )
        db.add_all([phenotype, guideline])
        await db.flush()

        db.add(Citation(guideline_id=guideline.id, **pair["citation"]))
        db.add(
            Interaction(
                drug_id=drug.id,
                gene_id=gene.id,
                phenotype_id=phenotype.id,
                guideline_id=guideline.id,
                **pair["interaction"],
            )
        )
        created += 1
        logger.info("Seeded pair", drug=drug.name, gene=gene.symbol)

    return {"created": created, "skipped": skipped}


async def run(dry_run: bool, create_tables: bool, reset: bool) -> int:
    try:
        if reset:
            logger.warning("Dropping all tables")
            await drop_db()
        if create_tables or reset:
            await init_db()
        async with get_db_context() as db:
            counts = await seed(db)
            if dry_run:
                await db.rollback()
            else:
                await db.commit()
    finally:
        await dispose_engine()

    print(f"Created: {counts['created']}  Skipped (exists): {counts['skipped']}")
    if dry_run:
        print("Dry run - nothing was saved.")
    return 0


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Seed sample reference data for local development",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Run the inserts, then roll back",
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables first (local databases without Alembic)",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Drop and recreate all tables before seeding (destroys data)",
    )
    args = parser.parse_args()

    setup_logging()
    sys.exit(asyncio.run(run(args.dry_run, args.create_tables, args.reset)))


if __name__ == "__main__":
    main()
