"""Shared data structures used across search, processing and bookings."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class TransportType(str, Enum):
    """Kinds of transport the search can return."""

    FLIGHT = "flight"
    TRAIN = "train"
    BUS = "bus"


class SortOrder(str, Enum):
    """Ordering applied to a generated batch of offers."""

    PRICE = "price"
    DEPARTURE = "departure"


@dataclass(frozen=True)
class Offer:
    """A single synthesised transport option."""

    id: str
    transport_type: TransportType
    provider: str
    origin: str
    destination: str
    departure_time: datetime
    arrival_time: datetime
    duration_hours: int
    duration_minutes: int
    duration_label: str
    price: int
    stops: int
    amenities: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the offer into a JSON-ready structure."""

        return {
            "id": self.id,
            "type": self.transport_type.value,
            "provider": self.provider,
            "from": self.origin,
            "to": self.destination,
            "departureTime": self.departure_time.isoformat(),
            "arrivalTime": self.arrival_time.isoformat(),
            "duration": self.duration_label,
            "price": self.price,
            "stops": self.stops,
            "amenities": list(self.amenities),
        }


@dataclass
class Passenger:
    first_name: str
    last_name: str
    email: str
    phone: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
        }


@dataclass
class PaymentDetails:
    """Card details captured by the booking form. Never stored or charged."""

    cardholder_name: str
    card_number: str
    expiry_date: str
    cvv: str
    billing_address: str
    save_payment_info: bool = False


@dataclass
class Booking:
    """Internal representation of a booking in the user's history."""

    id: str
    reference: str
    user_id: str
    transport_type: TransportType
    provider: str
    origin: str
    destination: str
    depart_date: datetime
    passengers: List[Passenger]
    total_price: int
    status: str
    created_at: datetime
    return_date: Optional[datetime] = None
    special_requests: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the booking into a JSON-ready structure."""

        payload: Dict[str, Any] = {
            "id": self.id,
            "reference": self.reference,
            "userId": self.user_id,
            "type": self.transport_type.value,
            "provider": self.provider,
            "from": self.origin,
            "to": self.destination,
            "departDate": self.depart_date.isoformat(),
            "passengers": [passenger.to_dict() for passenger in self.passengers],
            "totalPrice": self.total_price,
            "status": self.status,
            "createdAt": self.created_at.isoformat(),
        }
        if self.return_date is not None:
            payload["returnDate"] = self.return_date.isoformat()
        if self.special_requests:
            payload["specialRequests"] = self.special_requests
        return payload
