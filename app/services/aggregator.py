"""Stats aggregation — pure summary statistics over item records."""

import math
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from app.core.errors import DataError
from app.models.stats import Stats


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean. Raises ZeroDivisionError on an empty sequence."""
    return sum(values) / len(values)


def _price_of(record: Mapping[str, Any]) -> float:
    try:
        price = record["price"]
    except (KeyError, TypeError) as exc:
        raise DataError(f"Record has no price: {record!r}") from exc

    # bool is an int subclass but never a usable price
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        raise DataError(f"Record price is not numeric: {price!r}")
    if not math.isfinite(price):
        raise DataError(f"Record price is not finite: {price!r}")
    return float(price)


def compute_stats(records: Iterable[Mapping[str, Any]]) -> Stats:
    """Compute ``total`` and ``averagePrice`` for a record set.

    An empty record set yields ``total=0, averagePrice=0``. Any record
    without a finite numeric ``price`` raises :class:`DataError`.
    """
    prices = [_price_of(record) for record in records]
    if not prices:
        return Stats(total=0, average_price=0.0)
    return Stats(total=len(prices), average_price=mean(prices))
