"""Item model — one catalog entry stored in the JSON data file."""

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt


class ItemCreate(BaseModel):
    # Payloads are stored as sent; unknown fields are kept.
    model_config = ConfigDict(extra="allow")

    name: str | None = None
    category: str | None = None
    price: StrictInt | StrictFloat | None = None


class Item(ItemCreate):
    id: int


# ── Pagination schemas ───────────────────────────────────────

class Pagination(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_page: int = Field(alias="currentPage")
    page_size: int = Field(alias="pageSize")
    total_items: int = Field(alias="totalItems")
    total_pages: int = Field(alias="totalPages")
    has_next_page: bool = Field(alias="hasNextPage")
    has_previous_page: bool = Field(alias="hasPreviousPage")


class ItemPage(BaseModel):
    items: list[dict]
    pagination: Pagination
