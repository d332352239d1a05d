"""
Shared Pydantic base models.

Application models inherit from StrictModel. Models that mirror records written
by Claude Code inherit from RecordModel, which tolerates fields we do not use.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class StrictModel(BaseModel):
    """Base model with strict validation settings."""

    model_config = ConfigDict(
        extra='forbid',  # Raise error on unexpected fields
        strict=True,  # Strict type validation
        frozen=True,  # Immutable (cannot modify after creation)
    )


class RecordModel(BaseModel):
    """Base model for JSONL records - the log format evolves, so unknown fields are dropped."""

    model_config = ConfigDict(
        extra='ignore',
        frozen=True,
        populate_by_name=True,
    )
