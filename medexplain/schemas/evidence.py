"""Pydantic schemas for the evidence browser."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CitationResponse(BaseModel):
    """A guideline citation."""

    title: str | None = None
    authors: str | None = None
    journal: str | None = None
    year: int | None = None
    doi: str | None = None
    pmid: str | None = None
    url: str | None = None

    model_config = ConfigDict(from_attributes=True)


class GuidelineResponse(BaseModel):
    """A guideline with its drug, gene, source and citations."""

    id: UUID = Field(description="Guideline UUID")
    drug_name: str = Field(description="Drug name")
    gene_symbol: str = Field(description="Gene symbol")
    source_name: str | None = Field(default=None, description="Publishing source")
    recommendation: str | None = None
    evidence_level: str | None = Field(default=None, description="High / Moderate / Low")
    patient_summary: str | None = None
    clinician_summary: str | None = None
    citations: list[CitationResponse] = Field(default_factory=list)


class EvidenceFilters(BaseModel):
    """Values available for the evidence browser's filters."""

    drugs: list[str] = Field(description="Drug names, sorted")
    genes: list[str] = Field(description="Gene symbols, sorted")
    evidence_levels: list[str] = Field(description="Known evidence levels")
