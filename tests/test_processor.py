import random
import sys
from datetime import date, datetime, timedelta
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from travel_core.config import SearchCriteria, SearchFilters
from travel_core.models import Offer, SortOrder, TransportType
from travel_core.processor import apply_filters, summarise_offers
from travel_core.workflow import run_search


def _offer(index: int, price: int, hour: int, stops: int, amenities: tuple) -> Offer:
    departure = datetime(2025, 4, 15, hour, 0)
    return Offer(
        id=f"flight-{1000 + index}",
        transport_type=TransportType.FLIGHT,
        provider="SkyWings",
        origin="NYC",
        destination="LON",
        departure_time=departure,
        arrival_time=departure + timedelta(hours=2),
        duration_hours=2,
        duration_minutes=0,
        duration_label="2h",
        price=price,
        stops=stops,
        amenities=amenities,
    )


OFFERS = [
    _offer(0, 180, 7, 0, ("Wi-Fi", "Meal Included")),
    _offer(1, 240, 13, 1, ("Wi-Fi",)),
    _offer(2, 310, 19, 2, ("Entertainment", "Wi-Fi", "Power Outlets")),
    _offer(3, 420, 21, 0, ("Extra Legroom",)),
]


class FilterPipelineTests(unittest.TestCase):
    def test_without_filters_everything_is_kept(self) -> None:
        self.assertEqual(apply_filters(OFFERS, None), OFFERS)
        self.assertEqual(apply_filters(OFFERS, SearchFilters()), OFFERS)

    def test_price_range_is_inclusive(self) -> None:
        kept = apply_filters(OFFERS, SearchFilters(min_price=240, max_price=310))
        self.assertEqual([offer.id for offer in kept], ["flight-1001", "flight-1002"])

    def test_departure_windows_are_combined(self) -> None:
        kept = apply_filters(
            OFFERS, SearchFilters(departure_windows=["Morning (6AM-12PM)", "Evening (6PM-12AM)"])
        )
        self.assertEqual([offer.id for offer in kept], ["flight-1000", "flight-1002", "flight-1003"])

    def test_stop_options(self) -> None:
        direct = apply_filters(OFFERS, SearchFilters(stops=["Direct"]))
        self.assertEqual([offer.stops for offer in direct], [0, 0])

        multi = apply_filters(OFFERS, SearchFilters(stops=["1 Stop", "2+ Stops"]))
        self.assertEqual([offer.id for offer in multi], ["flight-1001", "flight-1002"])

    def test_every_requested_amenity_must_be_present(self) -> None:
        kept = apply_filters(OFFERS, SearchFilters(amenities=["Wi-Fi", "Power Outlets"]))
        self.assertEqual([offer.id for offer in kept], ["flight-1002"])

    def test_filters_preserve_input_order(self) -> None:
        reversed_offers = list(reversed(OFFERS))
        kept = apply_filters(reversed_offers, SearchFilters(amenities=["Wi-Fi"]))
        self.assertEqual([offer.id for offer in kept], ["flight-1002", "flight-1001", "flight-1000"])

    def test_filters_can_remove_everything(self) -> None:
        kept = apply_filters(OFFERS, SearchFilters(max_price=10, stops=["Direct"]))
        self.assertEqual(kept, [])


class SummaryTests(unittest.TestCase):
    def test_summary_statistics(self) -> None:
        summary = summarise_offers(OFFERS)
        self.assertEqual(summary["count"], 4)
        self.assertAlmostEqual(summary["min_price"], 180.0)
        self.assertAlmostEqual(summary["max_price"], 420.0)
        self.assertAlmostEqual(summary["average_price"], 287.5)

    def test_summary_of_nothing(self) -> None:
        self.assertEqual(
            summarise_offers([]),
            {"count": 0, "min_price": 0.0, "average_price": 0.0, "max_price": 0.0},
        )


def test_run_search_filters_and_summarises() -> None:
    criteria = SearchCriteria(
        transport_type=TransportType.TRAIN,
        origin="Paris",
        destination="Amsterdam",
        departure_date=date(2025, 5, 10),
    )
    filters = SearchFilters(stops=["Direct"])

    result = run_search(criteria, filters, order=SortOrder.DEPARTURE, rng=random.Random(21))

    assert all(offer.stops == 0 for offer in result.offers)
    assert result.summary["count"] == len(result.offers)
    departures = [offer.departure_time for offer in result.offers]
    assert departures == sorted(departures)

    payload = result.to_dict()
    assert payload["criteria"]["type"] == "train"
    assert len(payload["results"]) == len(result.offers)


if __name__ == "__main__":
    unittest.main()
