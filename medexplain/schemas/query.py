"""Pydantic schemas for the query and usage endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from medexplain.db.enums import ViewMode

# =============================================================================
# Request Schemas
# =============================================================================


class QueryRequest(BaseModel):
    """A drug/gene question."""

    model_config = ConfigDict(str_strip_whitespace=True)

    drug: str = Field(
        min_length=1,
        max_length=200,
        description="Drug name or part of it (e.g., 'warf')",
        examples=["Warfarin"],
    )
    gene: str = Field(
        min_length=1,
        max_length=50,
        description="Gene symbol or part of it",
        examples=["CYP2C9"],
    )
    view_mode: ViewMode = Field(
        default=ViewMode.PATIENT,
        description="Answer framing: Patient or Clinician",
    )


# =============================================================================
# Response Schemas
# =============================================================================


class UsageResponse(BaseModel):
    """Query usage for one calendar month."""

    month: str = Field(description="Calendar month YYYY-MM (UTC)")
    query_count: int = Field(description="Successful queries this month")
    limit: int = Field(description="Monthly query quota")

    @property
    def remaining(self) -> int:
        """Queries left this month."""
        return max(0, self.limit - self.query_count)


class QueryResponse(BaseModel):
    """A rendered answer."""

    drug_name: str = Field(description="Resolved drug name")
    gene_symbol: str = Field(description="Resolved gene symbol")
    view_mode: ViewMode = Field(description="Framing the answer was rendered for")
    answer: str = Field(description="Rendered answer text")
    citations: list[str] = Field(default_factory=list, description="Formatted citations")
    usage: UsageResponse | None = Field(
        default=None,
        description="Usage after this query was charged",
    )
