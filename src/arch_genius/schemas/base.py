from pydantic import BaseModel, ConfigDict


class StrictModel(BaseModel):
    """Strict schema contract: reject unknown keys, strip text, accept both wire (camelCase) and python names."""
    model_config = ConfigDict(extra="forbid", populate_by_name=True, str_strip_whitespace=True)
