"""Item catalog endpoints — search, pagination, lookup and creation."""

import math
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status

from app.api.deps import AppSettings, ItemStore
from app.models.item import Item, ItemCreate, ItemPage, Pagination

router = APIRouter(prefix="/items", tags=["items"])


def _matches(item: dict, term: str) -> bool:
    name = str(item.get("name") or "").lower()
    category = str(item.get("category") or "").lower()
    return term in name or term in category


@router.get("", response_model=ItemPage | list[dict])
async def list_items(
    store: ItemStore,
    settings: AppSettings,
    q: str | None = None,
    page: int | None = None,
    page_size: Annotated[int | None, Query(alias="pageSize")] = None,
    limit: int | None = None,
) -> ItemPage | list[dict]:
    """List items, optionally filtered by ``q`` over name and category.

    ``limit`` without ``page`` returns a bare list of the first matches
    for older clients; every other request gets a paginated envelope.
    """
    results = await store.read_all()
    if q:
        term = q.lower()
        results = [item for item in results if _matches(item, term)]

    if limit is not None and page is None:
        return results[: max(limit, 0)]

    if not page_size or page_size < 1:
        page_size = settings.default_page_size
    current_page = page if page and page > 0 else 1
    total = len(results)
    total_pages = math.ceil(total / page_size)
    offset = (current_page - 1) * page_size

    return ItemPage(
        items=results[offset : offset + page_size],
        pagination=Pagination(
            current_page=current_page,
            page_size=page_size,
            total_items=total,
            total_pages=total_pages,
            has_next_page=current_page < total_pages,
            has_previous_page=current_page > 1,
        ),
    )


@router.get("/{item_id}")
async def get_item(item_id: str, store: ItemStore) -> dict:
    # Non-numeric ids can never match, so they are a plain 404.
    try:
        key = int(item_id)
    except ValueError:
        key = None

    item = await store.get(key) if key is not None else None
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")
    return item


@router.post("", response_model=Item, status_code=status.HTTP_201_CREATED)
async def create_item(body: ItemCreate, store: ItemStore) -> Item:
    """Store the payload as a new item with a timestamp id."""
    item = await store.add_item(body.model_dump(exclude_unset=True))
    return Item.model_validate(item)
