"""Shared Pydantic base model for request/response schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class BloomBase(BaseModel):
    """Base model with shared config for all Bloom schemas."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )
