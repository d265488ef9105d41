"""Schemas for city records, writes and paginated listings."""

from typing import List
from pydantic import BaseModel, ConfigDict, Field, field_validator


class City(BaseModel):
    """City document returned to clients."""
    id: str = Field(alias="_id")
    cityName: str
    count: int

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_document(cls, doc: dict) -> "City":
        return cls(id=str(doc["_id"]), cityName=doc["cityName"], count=doc["count"])


class CityWrite(BaseModel):
    """Body for create and update requests."""
    cityName: str = Field(..., min_length=1)
    count: int = Field(..., ge=0)

    @field_validator("cityName")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("cityName must not be blank")
        return v


class CityListResponse(BaseModel):
    """One page of search results."""
    cities: List[City]
    total: int
    page: int
    totalPages: int


class MessageResponse(BaseModel):
    message: str
