"""Request parsing helpers turning query strings into search configuration."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .models import TransportType

_DATE_FORMATS = [
    "%Y-%m-%d",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y-%m-%dT%H:%M:%S.%fZ",
    "%d.%m.%Y",
    "%d/%m/%Y",
]

DEPARTURE_WINDOWS = {
    "Morning (6AM-12PM)": (6, 12),
    "Afternoon (12PM-6PM)": (12, 18),
    "Evening (6PM-12AM)": (18, 24),
}

STOP_OPTIONS = {
    "Direct": 0,
    "1 Stop": 1,
    "2+ Stops": 2,
}

MAX_PASSENGERS = 8


class SearchValidationError(ValueError):
    """Raised when a search request cannot be turned into criteria."""


@dataclass
class SearchCriteria:
    """Canonical parameters driving offer generation."""

    transport_type: TransportType
    origin: str
    destination: str
    departure_date: date
    passengers: int = 1
    return_date: Optional[date] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serialisable version of the criteria."""

        return {
            "type": self.transport_type.value,
            "from": self.origin,
            "to": self.destination,
            "depart": self.departure_date.isoformat(),
            "return": self.return_date.isoformat() if self.return_date else None,
            "passengers": self.passengers,
        }


@dataclass
class SearchFilters:
    """Optional narrowing applied to a generated result list."""

    min_price: Optional[float] = None
    max_price: Optional[float] = None
    departure_windows: List[str] = field(default_factory=list)
    stops: List[str] = field(default_factory=list)
    amenities: List[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return (
            self.min_price is None
            and self.max_price is None
            and not self.departure_windows
            and not self.stops
            and not self.amenities
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "minPrice": self.min_price,
            "maxPrice": self.max_price,
            "departureTime": self.departure_windows,
            "stops": self.stops,
            "amenities": self.amenities,
        }


def _parse_date(value: str | None) -> Optional[date]:
    if not value:
        return None
    value = value.strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def _parse_float(value: str | None) -> Optional[float]:
    if value is None or value == "":
        return None
    cleaned = str(value).replace("$", "").strip()
    try:
        return float(cleaned)
    except ValueError:
        return None


def _ensure_list(value: str | Iterable[str] | None) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        if not value:
            return []
        return [item.strip() for item in value.split(",") if item.strip()]
    return [item for item in value if item]


def parse_transport_type(value: Any) -> TransportType:
    """Coerce a raw value into :class:`TransportType` or fail loudly."""

    if isinstance(value, TransportType):
        return value
    try:
        return TransportType(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(member.value for member in TransportType)
        raise SearchValidationError(
            f"Unknown transport type {value!r}; expected one of: {allowed}"
        ) from None


def parse_passenger_count(value: Any) -> int:
    if value is None or value == "":
        return 1
    try:
        count = int(str(value).strip())
    except ValueError:
        raise SearchValidationError(f"Invalid passenger count {value!r}") from None
    if count < 1:
        raise SearchValidationError("Passenger count must be at least 1")
    if count > MAX_PASSENGERS:
        raise SearchValidationError(f"Passenger count must be at most {MAX_PASSENGERS}")
    return count


def create_criteria_from_query(query: Mapping[str, Any]) -> SearchCriteria:
    """Create search criteria from a query-string style mapping.

    ``from``, ``to`` and ``depart`` are mandatory. ``type`` defaults to
    ``flight`` and ``passengers`` to one.
    """

    origin = str(query.get("from") or "").strip()
    destination = str(query.get("to") or "").strip()
    depart_raw = query.get("depart")
    if not origin or not destination or not depart_raw:
        raise SearchValidationError("Missing required parameters")

    departure_date = _parse_date(str(depart_raw))
    if departure_date is None:
        raise SearchValidationError(f"Invalid departure date {depart_raw!r}")

    return_raw = query.get("return")
    return_date = _parse_date(str(return_raw)) if return_raw else None
    if return_raw and return_date is None:
        raise SearchValidationError(f"Invalid return date {return_raw!r}")

    return SearchCriteria(
        transport_type=parse_transport_type(query.get("type") or TransportType.FLIGHT.value),
        origin=origin,
        destination=destination,
        departure_date=departure_date,
        return_date=return_date,
        passengers=parse_passenger_count(query.get("passengers")),
    )


def create_filters_from_query(query: Mapping[str, Any]) -> SearchFilters:
    """Read the result filters from a query mapping. Unknown labels are dropped."""

    bounds = {}
    for key in ("minPrice", "maxPrice"):
        raw = query.get(key)
        parsed = _parse_float(raw)
        if raw not in (None, "") and parsed is None:
            raise SearchValidationError(f"Invalid {key} value {raw!r}")
        bounds[key] = parsed

    windows = [label for label in _ensure_list(query.get("departureTime")) if label in DEPARTURE_WINDOWS]
    stops = [label for label in _ensure_list(query.get("stops")) if label in STOP_OPTIONS]

    return SearchFilters(
        min_price=bounds["minPrice"],
        max_price=bounds["maxPrice"],
        departure_windows=windows,
        stops=stops,
        amenities=_ensure_list(query.get("amenities")),
    )
