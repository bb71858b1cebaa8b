"""High level orchestration for running a transport search."""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Dict, List, Optional

from .config import SearchCriteria, SearchFilters
from .generator import generate_offers
from .models import Offer, SortOrder
from .processor import apply_filters, summarise_offers

LOGGER = logging.getLogger(__name__)


@dataclass
class SearchResult:
    """Result returned by :func:`run_search`."""

    criteria: SearchCriteria
    offers: List[Offer]
    summary: Dict[str, float]
    filters: Optional[SearchFilters] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            "criteria": self.criteria.to_dict(),
            "results": [offer.to_dict() for offer in self.offers],
            "summary": self.summary,
        }


def run_search(
    criteria: SearchCriteria,
    filters: Optional[SearchFilters] = None,
    order: SortOrder = SortOrder.PRICE,
    rng: Optional[random.Random] = None,
) -> SearchResult:
    """Generate, filter and summarise offers for a single request."""

    offers = generate_offers(criteria, order=order, rng=rng)
    filtered = apply_filters(offers, filters)
    if len(filtered) < len(offers):
        LOGGER.info("Filters removed %d of %d offers", len(offers) - len(filtered), len(offers))
    return SearchResult(
        criteria=criteria,
        offers=filtered,
        summary=summarise_offers(filtered),
        filters=filters,
    )
