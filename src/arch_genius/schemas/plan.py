from __future__ import annotations

import re
from typing import Annotated

from pydantic import Field, StrictInt, model_validator

from arch_genius.core.constants import PLAN_OPTION_COUNT
from .base import StrictModel


Text = Annotated[str, Field(min_length=1)]


class RoomSize(StrictModel):
    room: Text = Field(description="Room label (e.g. 'Master Bedroom').")
    area: Text = Field(description="Area or dimensions as written by the designer (e.g. '14x16 ft').")


class PlanOption(StrictModel):
    id: StrictInt = Field(description="Identifier, unique within one batch.")
    name: Text = Field(description="Display name of the option.")
    concept: Text = Field(description="One-paragraph design concept.")
    room_sizes: list[RoomSize] = Field(alias="roomSizes", min_length=1)
    total_area_used: Text = Field(alias="totalAreaUsed")
    layout_description: Text = Field(alias="layoutDescription")
    unique_aspects: Text = Field(alias="uniqueAspects")
    pros: list[Text] = Field(min_length=1)
    cons: list[Text] = Field(min_length=1)

    @property
    def file_stem(self) -> str:
        """Plan name made filename-friendly: each whitespace run becomes '_'."""
        return re.sub(r"\s+", "_", self.name)


class GenerationResponse(StrictModel):
    """
    The full batch returned by one generation call.

    The backend is asked for a schema-constrained response, but nothing guarantees it,
    so the batch size and id uniqueness are checked here.
    """
    options: list[PlanOption]

    @model_validator(mode="after")
    def check_batch(self) -> GenerationResponse:
        if len(self.options) != PLAN_OPTION_COUNT:
            raise ValueError(f"expected exactly {PLAN_OPTION_COUNT} options, got {len(self.options)}")

        ids: list[int] = [option.id for option in self.options]
        duplicates: list[int] = sorted({plan_id for plan_id in ids if ids.count(plan_id) > 1})
        if duplicates:
            raise ValueError(f"option ids must be unique within a batch; duplicated: {duplicates}")
        return self
