# fanbase/schemas/search.py

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SearchCreate(BaseModel):
    query: str = Field(..., max_length=200, examples=["Barcelona"])

    @field_validator("query")
    def strip_query(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Search query is required")
        return v


class SearchRead(BaseModel):
    query: str
    searched_at: datetime

    model_config = ConfigDict(from_attributes=True)
