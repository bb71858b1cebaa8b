"""Mock transport offer generation."""
from __future__ import annotations

import logging
import random
from datetime import datetime, time, timedelta
from typing import Dict, List, Optional, Tuple

from .config import SearchCriteria
from .models import Offer, SortOrder, TransportType

LOGGER = logging.getLogger(__name__)

PROVIDERS: Dict[TransportType, Tuple[str, ...]] = {
    TransportType.FLIGHT: ("Air Express", "SkyWings", "Global Air", "FastJet", "Coastal Airways"),
    TransportType.TRAIN: ("RailConnect", "Express Rail", "National Railways", "SpeedTrain", "RegionalLink"),
    TransportType.BUS: ("BusLines", "Express Coach", "City Connect", "LongDistance", "ComfortBus"),
}

AMENITIES: Dict[TransportType, Tuple[str, ...]] = {
    TransportType.FLIGHT: ("Wi-Fi", "Meal Included", "Extra Legroom", "Entertainment", "Power Outlets"),
    TransportType.TRAIN: ("Wi-Fi", "Dining Car", "Quiet Car", "Power Outlets", "Sleeper Cabin"),
    TransportType.BUS: ("Wi-Fi", "Restroom", "Power Outlets", "Reclining Seats", "Snacks"),
}

# Inclusive ranges of whole hours.
DURATION_HOURS: Dict[TransportType, Tuple[int, int]] = {
    TransportType.FLIGHT: (1, 4),
    TransportType.TRAIN: (2, 7),
    TransportType.BUS: (3, 9),
}

MAX_STOPS: Dict[TransportType, int] = {
    TransportType.FLIGHT: 2,
    TransportType.TRAIN: 1,
    TransportType.BUS: 1,
}

# (fixed part, per hour)
_PRICE_FORMULA: Dict[TransportType, Tuple[int, int]] = {
    TransportType.FLIGHT: (150, 50),
    TransportType.TRAIN: (80, 20),
    TransportType.BUS: (40, 10),
}

MIN_BATCH_SIZE = 5
MAX_BATCH_SIZE = 8
MIN_PRICE = 20
ID_OFFSET = 1000


def base_price(transport_type: TransportType, duration_hours: int) -> int:
    fixed, per_hour = _PRICE_FORMULA[transport_type]
    return fixed + per_hour * duration_hours


def format_duration(hours: int, minutes: int) -> str:
    """Return a label such as ``"3h 25m"`` or ``"2h"``."""

    if minutes > 0:
        return f"{hours}h {minutes}m"
    return f"{hours}h"


def _five_minute_step(rng: random.Random) -> int:
    return rng.randrange(0, 60, 5)


def _pick_amenities(catalog: Tuple[str, ...], rng: random.Random) -> Tuple[str, ...]:
    if not catalog:
        return ()
    target = min(rng.randint(1, 4), len(catalog))
    selected: List[str] = []
    while len(selected) < target:
        amenity = rng.choice(catalog)
        if amenity not in selected:
            selected.append(amenity)
    return tuple(selected)


def _build_offer(criteria: SearchCriteria, index: int, rng: random.Random) -> Offer:
    transport_type = criteria.transport_type

    departure_time = datetime.combine(
        criteria.departure_date,
        time(hour=rng.randint(6, 21), minute=_five_minute_step(rng)),
    )
    low, high = DURATION_HOURS[transport_type]
    duration_hours = rng.randint(low, high)
    duration_minutes = _five_minute_step(rng)
    arrival_time = departure_time + timedelta(hours=duration_hours, minutes=duration_minutes)

    stops = rng.randint(0, MAX_STOPS[transport_type])
    variation = rng.randint(-20, 19)
    price = max(MIN_PRICE, base_price(transport_type, duration_hours) + variation)

    return Offer(
        id=f"{transport_type.value}-{index + ID_OFFSET}",
        transport_type=transport_type,
        provider=rng.choice(PROVIDERS[transport_type]),
        origin=criteria.origin,
        destination=criteria.destination,
        departure_time=departure_time,
        arrival_time=arrival_time,
        duration_hours=duration_hours,
        duration_minutes=duration_minutes,
        duration_label=format_duration(duration_hours, duration_minutes),
        price=price,
        stops=stops,
        amenities=_pick_amenities(AMENITIES[transport_type], rng),
    )


def sort_offers(offers: List[Offer], order: SortOrder) -> List[Offer]:
    if order is SortOrder.DEPARTURE:
        return sorted(offers, key=lambda offer: offer.departure_time)
    return sorted(offers, key=lambda offer: offer.price)


def generate_offers(
    criteria: SearchCriteria,
    order: SortOrder = SortOrder.PRICE,
    rng: Optional[random.Random] = None,
) -> List[Offer]:
    """Synthesise a batch of five to eight offers for ``criteria``.

    Prices are per person; the passenger count does not take part in
    generation. Pass a seeded :class:`random.Random` as ``rng`` for
    reproducible batches.
    """

    rng = rng or random.Random()
    count = rng.randint(MIN_BATCH_SIZE, MAX_BATCH_SIZE)
    offers = [_build_offer(criteria, index, rng) for index in range(count)]
    LOGGER.debug(
        "Generated %d %s offers for %s -> %s on %s",
        count,
        criteria.transport_type.value,
        criteria.origin,
        criteria.destination,
        criteria.departure_date.isoformat(),
    )
    return sort_offers(offers, SortOrder(order))
