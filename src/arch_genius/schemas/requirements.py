from __future__ import annotations

from typing import Annotated

from pydantic import ConfigDict, Field, field_validator

from arch_genius.core.constants import STYLE_OPTIONS
from .base import StrictModel


CountText = Annotated[str, Field(min_length=1, max_length=2)]


class Requirements(StrictModel):
    """
    One submission of the project specification form.

    Counts stay text, the way the form collects them, but must hold an integer in range.
    """
    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True, str_strip_whitespace=True)

    plot_size: str = Field(
        alias="plotSize",
        min_length=1,
        max_length=200,
        description="Plot size as an area or dimension pair (e.g. '2400 sqft' or '40x60').",
    )
    floors: CountText = Field(default="1", description="Number of floors.")
    bedrooms: CountText = Field(default="3", description="Number of bedrooms (1-10).")
    bathrooms: CountText = Field(default="2", description="Number of bathrooms (1-10).")
    style: str = Field(default=STYLE_OPTIONS[0], description="Architectural style preference.")
    requirements: str = Field(
        default="",
        max_length=2000,
        description="Free-text notes (e.g. home office, garage, garden).",
    )

    @field_validator("floors", "bedrooms", "bathrooms")
    @classmethod
    def count_must_be_in_range(cls, value: str) -> str:
        if not value.isdigit() or not 1 <= int(value) <= 10:
            raise ValueError("must be a whole number between 1 and 10")
        return str(int(value))

    @field_validator("style")
    @classmethod
    def style_must_be_known(cls, value: str) -> str:
        if value not in STYLE_OPTIONS:
            raise ValueError(f"must be one of: {', '.join(STYLE_OPTIONS)}")
        return value
