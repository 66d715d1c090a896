"""Report DTOs (Pydantic v2, immutable)."""

from __future__ import annotations

from datetime import date
from typing import List

from pydantic import BaseModel, ConfigDict


class MarketplaceSummaryDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    marketplace: str
    count: int = 0
    qty: int = 0
    done: int = 0
    pending: int = 0


class ReportDTO(BaseModel):
    """Production recap over an inclusive ``order_date`` range."""

    model_config = ConfigDict(frozen=True)

    start_date: date
    end_date: date
    total: int
    completed: int
    production_qty: int
    stock_qty: int
    total_qty: int
    marketplaces: List[MarketplaceSummaryDTO]
    grand_total: MarketplaceSummaryDTO


class ExportFileDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    content: bytes
    content_type: str
    filename: str
