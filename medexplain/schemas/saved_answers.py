"""Pydantic schemas for saved answer endpoints."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from medexplain.db.enums import ViewMode
from medexplain.schemas.common import BaseResponse


class SavedAnswerCreate(BaseModel):
    """Snapshot of an answer to save."""

    drug_name: str = Field(min_length=1, description="Drug name as displayed")
    gene_symbol: str = Field(min_length=1, description="Gene symbol as displayed")
    view_mode: ViewMode = Field(description="Framing the answer was rendered for")
    answer: str = Field(min_length=1, description="Rendered answer text")


class SavedAnswerResponse(BaseResponse):
    """A saved answer."""

    user_id: UUID = Field(description="Owning user id")
    drug_name: str = Field(description="Drug name at save time")
    gene_symbol: str = Field(validation_alias="gene_name", description="Gene symbol at save time")
    view_mode: ViewMode = Field(validation_alias="user_type", description="Answer framing")
    answer: str = Field(description="Answer text at save time")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
