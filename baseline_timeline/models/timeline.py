from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field


class FeatureEntry(BaseModel):
    """
    Canonical, normalized representation of a single web-feature feed entry.
    Only built by the normalizer once id, title and link are all non-empty.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    link: str = Field(min_length=1)
    # ISO-8601 timestamp string, or "" when the feed did not supply one
    updated: str = ""
    summary_html: str = Field(default="", alias="summaryHtml")
    summary_text: str = Field(default="", alias="summaryText")


class TimelineData(BaseModel):
    """Both feeds, sorted, plus the most recent update across them."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    widely_available: Tuple[FeatureEntry, ...] = Field(default=(), alias="widelyAvailable")
    newly_available: Tuple[FeatureEntry, ...] = Field(default=(), alias="newlyAvailable")
    last_updated: str = Field(default="", alias="lastUpdated")
