"""Booking history fixtures, booking request validation and fare maths."""
from __future__ import annotations

import random
import re
import string
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .config import SearchValidationError, _parse_date, parse_passenger_count, parse_transport_type
from .models import Booking, Passenger, PaymentDetails, TransportType

MOCK_USER_ID = "user-123"
BOOKING_STATUSES = ("upcoming", "completed", "cancelled")
REFERENCE_LENGTH = 8

# Per person: (base fare, taxes)
_FARES: Dict[TransportType, Tuple[int, int]] = {
    TransportType.FLIGHT: (299, 45),
    TransportType.TRAIN: (129, 15),
    TransportType.BUS: (59, 8),
}
BOOKING_FEE = 20

_SUMMARY_PROVIDERS = {
    TransportType.FLIGHT: "Air Express",
    TransportType.TRAIN: "RailConnect",
    TransportType.BUS: "BusLines",
}

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_REQUIRED_FIELDS = ("type", "from", "to", "departDate", "passengers", "payment")


class BookingValidationError(ValueError):
    """Raised when a booking payload is incomplete or malformed."""

    def __init__(self, message: str, details: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.details = list(details or [])


@dataclass
class BookingRequest:
    """A validated booking form submission."""

    transport_type: TransportType
    origin: str
    destination: str
    depart_date: str
    passengers: List[Passenger]
    payment: PaymentDetails
    special_requests: str = ""


def _ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _john() -> Passenger:
    return Passenger("John", "Doe", "john@example.com", "123-456-7890")


def _jane() -> Passenger:
    return Passenger("Jane", "Doe", "jane@example.com", "123-456-7891")


def mock_bookings(user_id: str = MOCK_USER_ID) -> List[Booking]:
    """Return the static booking history shown to every user."""

    return [
        Booking(
            id="booking-1",
            reference="BK12345",
            user_id=user_id,
            transport_type=TransportType.FLIGHT,
            provider="Air Express",
            origin="New York",
            destination="London",
            depart_date=_ts("2025-04-15T10:30:00Z"),
            return_date=_ts("2025-04-22T14:45:00Z"),
            passengers=[_john(), _jane()],
            total_price=1298,
            status="upcoming",
            created_at=_ts("2025-01-15T12:30:00Z"),
        ),
        Booking(
            id="booking-2",
            reference="BK12346",
            user_id=user_id,
            transport_type=TransportType.TRAIN,
            provider="RailConnect",
            origin="Paris",
            destination="Amsterdam",
            depart_date=_ts("2025-05-10T08:15:00Z"),
            passengers=[_john()],
            special_requests="Window seat preferred",
            total_price=164,
            status="upcoming",
            created_at=_ts("2025-01-20T09:45:00Z"),
        ),
        Booking(
            id="booking-3",
            reference="BK12347",
            user_id=user_id,
            transport_type=TransportType.BUS,
            provider="BusLines",
            origin="Boston",
            destination="Washington DC",
            depart_date=_ts("2025-03-05T09:00:00Z"),
            passengers=[
                _john(),
                _jane(),
                Passenger("Bob", "Smith", "bob@example.com", "123-456-7892"),
            ],
            total_price=261,
            status="completed",
            created_at=_ts("2025-01-05T14:20:00Z"),
        ),
        Booking(
            id="booking-4",
            reference="BK12348",
            user_id=user_id,
            transport_type=TransportType.FLIGHT,
            provider="SkyWings",
            origin="Miami",
            destination="Las Vegas",
            depart_date=_ts("2025-02-20T07:30:00Z"),
            return_date=_ts("2025-02-27T19:15:00Z"),
            passengers=[_john(), _jane()],
            special_requests="Vegetarian meals",
            total_price=876,
            status="cancelled",
            created_at=_ts("2025-01-10T11:15:00Z"),
        ),
    ]


def list_bookings(status: str = "all", user_id: str = MOCK_USER_ID) -> List[Booking]:
    """Return the user's bookings, optionally restricted to one status."""

    status = (status or "all").strip().lower()
    if status != "all" and status not in BOOKING_STATUSES:
        raise BookingValidationError(f"Unknown booking status {status!r}")
    bookings = mock_bookings(user_id)
    if status == "all":
        return bookings
    return [booking for booking in bookings if booking.status == status]


def _min_length(errors: List[str], label: str, value: Any, minimum: int, message: str) -> str:
    text = str(value or "").strip()
    if len(text) < minimum:
        errors.append(f"{label}: {message}")
    return text


def _parse_passenger(index: int, data: Any, errors: List[str]) -> Optional[Passenger]:
    label = f"passengers[{index}]"
    if not isinstance(data, Mapping):
        errors.append(f"{label}: passenger details must be an object")
        return None
    first_name = _min_length(errors, f"{label}.firstName", data.get("firstName"), 2,
                             "First name must be at least 2 characters.")
    last_name = _min_length(errors, f"{label}.lastName", data.get("lastName"), 2,
                            "Last name must be at least 2 characters.")
    email = str(data.get("email") or "").strip()
    if not _EMAIL_PATTERN.match(email):
        errors.append(f"{label}.email: Please enter a valid email address.")
    phone = _min_length(errors, f"{label}.phone", data.get("phone"), 10,
                        "Please enter a valid phone number.")
    return Passenger(first_name=first_name, last_name=last_name, email=email, phone=phone)


def _parse_payment(data: Any, errors: List[str]) -> Optional[PaymentDetails]:
    if not isinstance(data, Mapping):
        errors.append("payment: payment details must be an object")
        return None
    return PaymentDetails(
        cardholder_name=_min_length(errors, "payment.cardholderName", data.get("cardholderName"), 2,
                                    "Cardholder name is required."),
        card_number=_min_length(errors, "payment.cardNumber", data.get("cardNumber"), 16,
                                "Please enter a valid card number."),
        expiry_date=_min_length(errors, "payment.expiryDate", data.get("expiryDate"), 5,
                                "Please enter a valid expiry date (MM/YY)."),
        cvv=_min_length(errors, "payment.cvv", data.get("cvv"), 3, "Please enter a valid CVV."),
        billing_address=_min_length(errors, "payment.billingAddress", data.get("billingAddress"), 5,
                                    "Billing address is required."),
        save_payment_info=data.get("savePaymentInfo") is True,
    )


def validate_booking_request(payload: Mapping[str, Any]) -> BookingRequest:
    """Validate a booking form submission.

    Raises :class:`BookingValidationError` listing every problem found.
    """

    missing = [name for name in _REQUIRED_FIELDS if not payload.get(name)]
    if missing:
        raise BookingValidationError(
            "Missing required booking information",
            [f"{name}: this field is required" for name in missing],
        )

    errors: List[str] = []
    try:
        transport_type = parse_transport_type(payload["type"])
    except SearchValidationError as exc:
        raise BookingValidationError("Missing required booking information", [f"type: {exc}"]) from exc

    depart_date = str(payload["departDate"])
    if _parse_date(depart_date) is None:
        errors.append(f"departDate: invalid date {depart_date!r}")

    raw_passengers = payload["passengers"]
    if not isinstance(raw_passengers, list):
        raw_passengers = [raw_passengers]
    passengers = [
        passenger
        for passenger in (_parse_passenger(idx, item, errors) for idx, item in enumerate(raw_passengers))
        if passenger is not None
    ]
    payment = _parse_payment(payload["payment"], errors)

    if "termsAccepted" in payload and payload.get("termsAccepted") is not True:
        errors.append("termsAccepted: You must accept the terms and conditions.")

    if errors or payment is None:
        raise BookingValidationError("Missing required booking information", errors)

    return BookingRequest(
        transport_type=transport_type,
        origin=str(payload["from"]),
        destination=str(payload["to"]),
        depart_date=depart_date,
        passengers=passengers,
        payment=payment,
        special_requests=str(payload.get("specialRequests") or ""),
    )


def generate_reference(rng: Optional[random.Random] = None) -> str:
    """Return a random booking reference such as ``"K3J9QZ1A"``."""

    rng = rng or random.Random()
    alphabet = string.ascii_uppercase + string.digits
    return "".join(rng.choice(alphabet) for _ in range(REFERENCE_LENGTH))


def create_booking(payload: Mapping[str, Any], rng: Optional[random.Random] = None) -> Dict[str, Any]:
    """Validate ``payload`` and confirm the booking. Nothing is stored."""

    booking_request = validate_booking_request(payload)
    return {
        "reference": generate_reference(rng),
        "type": booking_request.transport_type.value,
        "from": booking_request.origin,
        "to": booking_request.destination,
        "departDate": booking_request.depart_date,
        "status": "upcoming",
    }


def fare_breakdown(transport_type: TransportType | str, passengers: Any = 1) -> Dict[str, Any]:
    """Per-person fare components and the total for the whole party."""

    transport_type = parse_transport_type(transport_type)
    count = parse_passenger_count(passengers)
    base_fare, taxes = _FARES[transport_type]
    per_person = base_fare + taxes + BOOKING_FEE
    return {
        "provider": _SUMMARY_PROVIDERS[transport_type],
        "passengers": count,
        "base_fare": base_fare,
        "taxes": taxes,
        "fees": BOOKING_FEE,
        "total_per_person": per_person,
        "total": per_person * count,
    }
