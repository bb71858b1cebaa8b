"""Flask based backend and web interface for transport search and bookings."""
from __future__ import annotations

import logging
import os
import random
import time
from typing import Any, Dict, List, Mapping

from flask import Flask, jsonify, redirect, render_template, request, url_for

from travel_core import (
    BookingValidationError,
    SearchValidationError,
    SortOrder,
    TransportType,
    create_booking,
    create_criteria_from_query,
    create_filters_from_query,
    fare_breakdown,
    list_bookings,
    run_search,
)
from travel_core.bookings import BOOKING_STATUSES
from travel_core.config import DEPARTURE_WINDOWS, STOP_OPTIONS
from travel_core.generator import AMENITIES

LOGGER = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)

app = Flask(__name__)
app.config["MOCK_DELAY_SECONDS"] = float(os.getenv("MOCK_DELAY_SECONDS", "0.5"))

FEATURED_DESTINATIONS: List[Dict[str, Any]] = [
    {"id": 1, "name": "Paris, France", "price": "From $299"},
    {"id": 2, "name": "Tokyo, Japan", "price": "From $799"},
    {"id": 3, "name": "New York, USA", "price": "From $349"},
    {"id": 4, "name": "Sydney, Australia", "price": "From $899"},
]

_PAYMENT_FIELDS = ("cardholderName", "cardNumber", "expiryDate", "cvv", "billingAddress")
_PASSENGER_FIELDS = ("firstName", "lastName", "email", "phone")


def _maybe_delay(factor: float = 1.0) -> None:
    """Sleep for the configured interval to mimic a slow backend."""
    seconds = app.config.get("MOCK_DELAY_SECONDS", 0) * factor
    if seconds > 0:
        time.sleep(seconds)


def _query_args() -> Dict[str, Any]:
    """Request args with repeated keys (checkbox groups) kept as lists."""
    args = request.args.to_dict(flat=False)
    return {key: values if len(values) > 1 else values[0] for key, values in args.items()}


def _rng() -> random.Random | None:
    """Optional seeded random source, set by tests via ``app.config``."""
    seed = app.config.get("RANDOM_SEED")
    return random.Random(seed) if seed is not None else None


def _booking_payload_from_form(
    form: Mapping[str, str], transport_type: str, passengers: int
) -> Dict[str, Any]:
    return {
        "type": transport_type,
        "from": form.get("from"),
        "to": form.get("to"),
        "departDate": form.get("depart"),
        "passengers": [
            {name: form.get(f"{name}_{index}", "") for name in _PASSENGER_FIELDS}
            for index in range(passengers)
        ],
        "payment": {
            **{name: form.get(name, "") for name in _PAYMENT_FIELDS},
            "savePaymentInfo": form.get("savePaymentInfo") == "on",
        },
        "specialRequests": form.get("specialRequests", ""),
        "termsAccepted": form.get("termsAccepted") == "on",
    }


@app.route("/")
def index() -> str:
    return render_template(
        "index.html",
        destinations=FEATURED_DESTINATIONS,
        transport_types=[member.value for member in TransportType],
    )


@app.route("/search")
def search_page():
    args = _query_args()
    try:
        criteria = create_criteria_from_query(args)
        filters = create_filters_from_query(args)
    except SearchValidationError as exc:
        return render_template("search.html", error=str(exc), result=None, query=request.args), 400

    result = run_search(criteria, filters, order=SortOrder.DEPARTURE, rng=_rng())
    return render_template(
        "search.html",
        error=None,
        result=result,
        query=request.args,
        filters=filters,
        amenity_options=AMENITIES[criteria.transport_type],
        departure_windows=list(DEPARTURE_WINDOWS),
        stop_options=list(STOP_OPTIONS),
    )


@app.route("/api/search")
def api_search():
    args = _query_args()
    try:
        criteria = create_criteria_from_query(args)
        filters = create_filters_from_query(args)
    except SearchValidationError as exc:
        return jsonify({"error": str(exc)}), 400

    try:
        _maybe_delay()
        result = run_search(criteria, filters, order=SortOrder.PRICE, rng=_rng())
    except Exception:  # pragma: no cover - runtime safeguard
        LOGGER.exception("Search failed for %s", criteria.to_dict())
        return jsonify({"error": "Failed to search for transportation options"}), 500

    payload = result.to_dict()
    return jsonify({"results": payload["results"], "summary": payload["summary"]})


@app.route("/api/bookings", methods=["GET"])
def api_list_bookings():
    try:
        _maybe_delay()
        bookings = list_bookings(request.args.get("status", "all"))
    except BookingValidationError as exc:
        return jsonify({"error": str(exc)}), 400
    return jsonify({"bookings": [booking.to_dict() for booking in bookings]})


@app.route("/api/bookings", methods=["POST"])
def api_create_booking():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return jsonify({"error": "Missing required booking information"}), 400

    try:
        _maybe_delay(2)
        booking = create_booking(payload, rng=_rng())
    except BookingValidationError as exc:
        return jsonify({"error": str(exc), "details": exc.details}), 400
    except Exception:  # pragma: no cover - runtime safeguard
        LOGGER.exception("Booking creation failed")
        return jsonify({"error": "Failed to create booking"}), 500

    LOGGER.info("Created booking %s (%s %s -> %s)", booking["reference"], booking["type"], booking["from"], booking["to"])
    return jsonify({"success": True, "booking": booking})


@app.route("/booking/<transport_type>/<offer_id>", methods=["GET", "POST"])
def booking_page(transport_type: str, offer_id: str):
    source = request.form if request.method == "POST" else request.args
    if not source.get("from") or not source.get("to") or not source.get("depart"):
        return redirect(url_for("index"))

    try:
        summary = fare_breakdown(transport_type, source.get("passengers") or 1)
    except SearchValidationError as exc:
        return render_template("booking.html", error=str(exc), summary=None, query=source), 400

    errors: List[str] = []
    if request.method == "POST":
        payload = _booking_payload_from_form(request.form, transport_type, summary["passengers"])
        try:
            booking = create_booking(payload, rng=_rng())
        except BookingValidationError as exc:
            errors = exc.details or [str(exc)]
        else:
            return redirect(url_for("confirmation_page", reference=booking["reference"]))

    return render_template(
        "booking.html",
        error=None,
        errors=errors,
        summary=summary,
        transport_type=transport_type,
        offer_id=offer_id,
        query=source,
    )


@app.route("/booking/confirmation/<reference>")
def confirmation_page(reference: str) -> str:
    return render_template("confirmation.html", reference=reference)


@app.route("/bookings")
def bookings_page() -> str:
    grouped = {status: list_bookings(status) for status in BOOKING_STATUSES}
    return render_template("bookings.html", grouped=grouped)


if __name__ == "__main__":
    app.run(debug=True)
