"""Domain error hierarchy."""


class CatalogError(Exception):
    """Base class for catalog and stats failures."""


class StoreError(CatalogError):
    """The item store could not be read or written."""


class DataError(CatalogError):
    """A record cannot be aggregated (missing or non-numeric price)."""


class StatsInitializationError(CatalogError):
    """The initial stats computation failed; the cache cannot serve."""
