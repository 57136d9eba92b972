# medimap/application/commands.py
from typing import Optional

from pydantic import BaseModel

from medimap.domain.models import GeoPoint
from medimap.domain.services.search_ranker import SortMode


class SearchMedicinesCommand(BaseModel):
    query: Optional[str] = None
    observer: Optional[GeoPoint] = None
    delivery_only: bool = False
    sort: Optional[SortMode] = None
