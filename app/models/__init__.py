"""Catalog models and API schemas."""

from app.models.item import Item, ItemCreate, ItemPage, Pagination
from app.models.stats import Stats

__all__ = [
    "Item",
    "ItemCreate",
    "ItemPage",
    "Pagination",
    "Stats",
]
