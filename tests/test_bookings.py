import random
import sys
from pathlib import Path
import unittest

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from travel_core.bookings import (
    BookingValidationError,
    create_booking,
    fare_breakdown,
    generate_reference,
    list_bookings,
    validate_booking_request,
)
from travel_core.config import SearchValidationError
from travel_core.models import TransportType


def _payload(**overrides):
    payload = {
        "type": "train",
        "from": "Paris",
        "to": "Amsterdam",
        "departDate": "2025-05-10",
        "passengers": [
            {"firstName": "John", "lastName": "Doe", "email": "john@example.com", "phone": "123-456-7890"}
        ],
        "payment": {
            "cardholderName": "John Doe",
            "cardNumber": "4111111111111111",
            "expiryDate": "12/27",
            "cvv": "123",
            "billingAddress": "1 Main Street",
        },
        "termsAccepted": True,
    }
    payload.update(overrides)
    return payload


class BookingHistoryTests(unittest.TestCase):
    def test_all_bookings_are_listed(self) -> None:
        bookings = list_bookings()
        self.assertEqual([booking.reference for booking in bookings], ["BK12345", "BK12346", "BK12347", "BK12348"])

    def test_status_filter(self) -> None:
        for status, expected in [("upcoming", 2), ("completed", 1), ("cancelled", 1)]:
            with self.subTest(status=status):
                bookings = list_bookings(status)
                self.assertEqual(len(bookings), expected)
                self.assertTrue(all(booking.status == status for booking in bookings))

    def test_unknown_status_is_rejected(self) -> None:
        with self.assertRaises(BookingValidationError):
            list_bookings("pending")

    def test_booking_serialisation(self) -> None:
        payload = list_bookings("cancelled")[0].to_dict()
        self.assertEqual(payload["reference"], "BK12348")
        self.assertEqual(payload["type"], "flight")
        self.assertEqual(payload["specialRequests"], "Vegetarian meals")
        self.assertIn("returnDate", payload)
        self.assertEqual(len(payload["passengers"]), 2)


class BookingRequestTests(unittest.TestCase):
    def test_valid_request(self) -> None:
        request = validate_booking_request(_payload())
        self.assertIs(request.transport_type, TransportType.TRAIN)
        self.assertEqual(request.passengers[0].first_name, "John")
        self.assertEqual(request.payment.cvv, "123")

    def test_save_payment_info_requires_a_real_boolean(self) -> None:
        for raw, expected in [(True, True), ("false", False), ("true", False), (1, False), (False, False)]:
            with self.subTest(raw=raw):
                payload = _payload()
                payload["payment"]["savePaymentInfo"] = raw
                self.assertIs(validate_booking_request(payload).payment.save_payment_info, expected)

    def test_missing_fields_are_listed(self) -> None:
        payload = _payload()
        del payload["payment"]
        payload["from"] = ""
        with self.assertRaises(BookingValidationError) as ctx:
            validate_booking_request(payload)
        self.assertEqual(str(ctx.exception), "Missing required booking information")
        self.assertEqual(ctx.exception.details, ["from: this field is required", "payment: this field is required"])

    def test_field_level_problems_are_reported(self) -> None:
        payload = _payload(
            passengers=[{"firstName": "J", "lastName": "Doe", "email": "not-an-email", "phone": "123"}],
        )
        payload["payment"]["cardNumber"] = "4111"
        with self.assertRaises(BookingValidationError) as ctx:
            validate_booking_request(payload)
        details = ctx.exception.details
        self.assertIn("passengers[0].firstName: First name must be at least 2 characters.", details)
        self.assertIn("passengers[0].email: Please enter a valid email address.", details)
        self.assertIn("passengers[0].phone: Please enter a valid phone number.", details)
        self.assertIn("payment.cardNumber: Please enter a valid card number.", details)

    def test_terms_must_be_accepted(self) -> None:
        with self.assertRaises(BookingValidationError) as ctx:
            validate_booking_request(_payload(termsAccepted=False))
        self.assertTrue(any(detail.startswith("termsAccepted") for detail in ctx.exception.details))

    def test_unknown_transport_type(self) -> None:
        with self.assertRaises(BookingValidationError):
            validate_booking_request(_payload(type="ferry"))


def test_create_booking_returns_upcoming_confirmation() -> None:
    booking = create_booking(_payload(), rng=random.Random(4))

    assert booking["status"] == "upcoming"
    assert booking["type"] == "train"
    assert booking["from"] == "Paris"
    assert len(booking["reference"]) == 8
    assert booking["reference"].isupper() or booking["reference"].isdigit()


def test_reference_is_uppercase_alphanumeric() -> None:
    rng = random.Random(0)
    for _ in range(50):
        reference = generate_reference(rng)
        assert len(reference) == 8
        assert all(char.isdigit() or "A" <= char <= "Z" for char in reference)


def test_fare_breakdown_multiplies_by_passengers() -> None:
    flight = fare_breakdown("flight", 2)
    assert flight["total_per_person"] == 299 + 45 + 20
    assert flight["total"] == 728
    assert flight["provider"] == "Air Express"

    bus = fare_breakdown(TransportType.BUS, "3")
    assert bus["total_per_person"] == 87
    assert bus["total"] == 261


def test_fare_breakdown_rejects_unknown_type() -> None:
    with pytest.raises(SearchValidationError):
        fare_breakdown("boat", 1)


if __name__ == "__main__":
    unittest.main()
