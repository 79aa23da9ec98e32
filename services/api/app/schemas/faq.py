"""WellnessFaq schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _normalize_keywords(keywords: list[str] | None) -> list[str] | None:
    if keywords is None:
        return None
    normalized: list[str] = []
    for keyword in keywords:
        kw = keyword.strip().lower()
        if kw and kw not in normalized:
            normalized.append(kw)
    if not normalized:
        raise ValueError("At least one non-empty keyword is required")
    return normalized


class FaqCreate(BaseModel):
    """Schema for creating an FAQ entry."""

    question: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1)
    keywords: list[str] = Field(..., min_length=1)
    is_active: bool = Field(default=True, alias="isActive")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("keywords")
    @classmethod
    def normalize_keywords(cls, value: list[str] | None) -> list[str] | None:
        return _normalize_keywords(value)


class FaqUpdate(BaseModel):
    """Schema for updating an FAQ entry."""

    question: str | None = Field(default=None, min_length=1)
    answer: str | None = Field(default=None, min_length=1)
    keywords: list[str] | None = None
    is_active: bool | None = Field(default=None, alias="isActive")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("keywords")
    @classmethod
    def normalize_keywords(cls, value: list[str] | None) -> list[str] | None:
        return _normalize_keywords(value)


class FaqResponse(BaseModel):
    """Schema for FAQ entry response."""

    id: str
    question: str
    answer: str
    keywords: list[str]
    is_active: bool = Field(alias="isActive")
    hit_count: int = Field(alias="hitCount")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
