"""Data processing utilities for search results."""
from __future__ import annotations

from typing import Dict, Iterable, List

import pandas as pd

from .config import DEPARTURE_WINDOWS, STOP_OPTIONS, SearchFilters
from .models import Offer

_COLUMNS = ["id", "provider", "price", "stops", "departure_hour", "amenities"]


def offers_to_dataframe(offers: Iterable[Offer]) -> pd.DataFrame:
    """Convert offers into a :class:`~pandas.DataFrame` keyed by offer id."""

    records: List[Dict[str, object]] = []
    for offer in offers:
        records.append(
            {
                "id": offer.id,
                "provider": offer.provider,
                "price": offer.price,
                "stops": offer.stops,
                "departure_hour": offer.departure_time.hour,
                "amenities": frozenset(offer.amenities),
            }
        )
    return pd.DataFrame.from_records(records, columns=_COLUMNS)


def filter_by_price_range(df: pd.DataFrame, filters: SearchFilters) -> pd.DataFrame:
    """Keep offers whose price lies within the requested bounds."""

    if df.empty:
        return df
    if filters.min_price is not None:
        df = df[df["price"] >= filters.min_price]
    if filters.max_price is not None:
        df = df[df["price"] <= filters.max_price]
    return df


def filter_by_departure_window(df: pd.DataFrame, filters: SearchFilters) -> pd.DataFrame:
    """Keep offers departing inside any of the selected time-of-day windows."""

    if not filters.departure_windows or df.empty:
        return df
    mask = pd.Series(False, index=df.index)
    for label in filters.departure_windows:
        start, end = DEPARTURE_WINDOWS[label]
        mask |= (df["departure_hour"] >= start) & (df["departure_hour"] < end)
    return df[mask]


def filter_by_stops(df: pd.DataFrame, filters: SearchFilters) -> pd.DataFrame:
    """Keep offers matching any of the selected stop options."""

    if not filters.stops or df.empty:
        return df
    mask = pd.Series(False, index=df.index)
    for label in filters.stops:
        count = STOP_OPTIONS[label]
        if label.endswith("+ Stops"):
            mask |= df["stops"] >= count
        else:
            mask |= df["stops"] == count
    return df[mask]


def filter_by_amenities(df: pd.DataFrame, filters: SearchFilters) -> pd.DataFrame:
    """Keep offers providing every requested amenity."""

    if not filters.amenities or df.empty:
        return df
    wanted = set(filters.amenities)
    return df[df["amenities"].apply(lambda available: wanted <= available)]


def apply_filters(offers: List[Offer], filters: SearchFilters | None) -> List[Offer]:
    """Full filtering pipeline; the order of ``offers`` is preserved."""

    if filters is None or filters.is_empty() or not offers:
        return list(offers)

    df = offers_to_dataframe(offers)
    df = filter_by_price_range(df, filters)
    df = filter_by_departure_window(df, filters)
    df = filter_by_stops(df, filters)
    df = filter_by_amenities(df, filters)

    kept = set(df["id"])
    return [offer for offer in offers if offer.id in kept]


def summarise_offers(offers: List[Offer]) -> Dict[str, float]:
    """Return simple price statistics across all offers."""

    if not offers:
        return {"count": 0, "min_price": 0.0, "average_price": 0.0, "max_price": 0.0}

    prices = offers_to_dataframe(offers)["price"]
    return {
        "count": int(prices.count()),
        "min_price": float(prices.min()),
        "average_price": float(prices.mean()),
        "max_price": float(prices.max()),
    }
