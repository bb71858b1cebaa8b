"""Travel core package exposing search and booking helpers."""
from .bookings import BookingValidationError, create_booking, fare_breakdown, list_bookings
from .config import (
    SearchCriteria,
    SearchFilters,
    SearchValidationError,
    create_criteria_from_query,
    create_filters_from_query,
)
from .generator import generate_offers
from .models import Offer, SortOrder, TransportType
from .workflow import SearchResult, run_search

__all__ = [
    "BookingValidationError",
    "Offer",
    "SearchCriteria",
    "SearchFilters",
    "SearchResult",
    "SearchValidationError",
    "SortOrder",
    "TransportType",
    "create_booking",
    "create_criteria_from_query",
    "create_filters_from_query",
    "fare_breakdown",
    "generate_offers",
    "list_bookings",
    "run_search",
]
