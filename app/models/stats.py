"""Stats model — aggregate summary over the item catalog."""

from pydantic import BaseModel, ConfigDict, Field


class Stats(BaseModel):
    """Immutable catalog summary.

    Serialized as ``{"total": ..., "averagePrice": ...}``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    total: int = Field(ge=0)
    average_price: float = Field(alias="averagePrice")
