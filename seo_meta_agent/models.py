from __future__ import annotations

from typing import Literal
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

IssueType = Literal["error", "warning", "success"]
TagStatus = Literal["good", "warning", "missing"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AnalyzeRequest(BaseModel):
    url: str = Field(..., min_length=1)

    @field_validator("url")
    @classmethod
    def _absolute_url(cls, value: str) -> str:
        value = value.strip()
        try:
            parts = urlsplit(value)
        except ValueError:
            raise ValueError("Please provide a valid URL.") from None
        if not parts.scheme or not parts.netloc:
            raise ValueError("Please provide a full URL including http:// or https://.")
        return value


class SEOIssue(_CamelModel):
    type: IssueType
    message: str


class MetaTagReport(_CamelModel):
    name: str
    content: str
    status: TagStatus
    recommendation: str | None = None


class AnalyzeResponse(_CamelModel):
    url: str
    title: str | None = None
    description: str | None = None
    og_title: str | None = None
    og_description: str | None = None
    og_image: str | None = None
    twitter_title: str | None = None
    twitter_description: str | None = None
    twitter_image: str | None = None
    canonical: str | None = None
    robots: str | None = None
    viewport: str | None = None

    score: int = Field(..., ge=0, le=100)
    issues: list[SEOIssue]
    tags: list[MetaTagReport]

    analyzed_at: str
