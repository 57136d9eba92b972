# medimap/application/search_use_case.py
from __future__ import annotations

import time
import logging
from typing import List, Optional

from medimap.application.commands import SearchMedicinesCommand
from medimap.domain.models import RankedResult
from medimap.domain.ports import CatalogRepoPort
from medimap.domain.services.search_ranker import GeoSearchRanker, resolve_sort_mode

logger = logging.getLogger("medimap.search")


class SearchMedicinesUseCase:
    """
    GET /api/medicines/search

    Two store round trips (in-stock entries, then the pharmacies they
    reference); everything after that is the in-memory ranker.
    Store errors propagate as-is; the route turns them into a 500.
    """

    def __init__(self, repo: CatalogRepoPort, ranker: Optional[GeoSearchRanker] = None):
        self.repo = repo
        self.ranker = ranker or GeoSearchRanker()

    async def run(self, cmd: SearchMedicinesCommand) -> List[RankedResult]:
        t0 = time.monotonic()
        query = (cmd.query or "").strip() or None

        entries = await self.repo.find_in_stock(query)
        wanted = {e.pharmacy_id for e in entries}
        locations = await self.repo.get_pharmacies(wanted) if wanted else {}

        missing = wanted - set(locations)
        if missing:
            logger.warning("[search] %d listing(s) reference unknown pharmacies: %s",
                           sum(1 for e in entries if e.pharmacy_id in missing), sorted(missing))

        mode = resolve_sort_mode(cmd.sort, cmd.observer)
        results = self.ranker.rank(
            entries,
            locations,
            observer=cmd.observer,
            delivery_only=cmd.delivery_only,
            sort_mode=mode,
        )

        logger.info(
            "[search] query=%r observer=%s delivery_only=%s sort=%s hits=%d returned=%d ms=%d",
            query, bool(cmd.observer), cmd.delivery_only, mode.value,
            len(entries), len(results), int((time.monotonic() - t0) * 1000),
        )
        return results
