# tests/conftest.py
from __future__ import annotations

from collections.abc import Callable, Generator
from typing import Any

import pytest

from peerboard.config.settings import get_settings
from peerboard.domain.entities.company import Company
from peerboard.domain.entities.comparison_group import ComparisonGroup
from peerboard.domain.entities.record import Record
from peerboard.domain.enums.fetch_status import FetchStatus
from peerboard.domain.services.metric_registry import MetricRegistry, build_registry

RecordFactory = Callable[..., Record]


@pytest.fixture(autouse=True)
def _fresh_settings() -> Generator[None, None, None]:
    """Drop the cached settings singleton around every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_record() -> RecordFactory:
    """Build a record with identity fields filled in."""

    def _make(ticker: str = "AAPL", name: str | None = None, **fields: Any) -> Record:
        return Record({"ticker": ticker, "name": name or f"{ticker} Inc.", **fields})

    return _make


@pytest.fixture
def loaded_company(make_record: RecordFactory) -> Callable[..., Company]:
    """Build a loaded company whose record carries ``fields``."""

    def _make(company_id: str, ticker: str | None = None, **fields: Any) -> Company:
        symbol = ticker or company_id.upper()
        return Company(
            company_id=company_id,
            ticker=symbol,
            record=make_record(symbol, **fields),
            status=FetchStatus.LOADED,
        )

    return _make


@pytest.fixture
def peer_companies(loaded_company: Callable[..., Company]) -> list[Company]:
    """Three companies with market caps 100/200/300 and a weighted field 10/20/30."""
    return [
        loaded_company("a", marketCap=100, peRatio=10, price=1.0, revenue=50),
        loaded_company("b", marketCap=200, peRatio=20, price=2.0, revenue=70),
        loaded_company("c", marketCap=300, peRatio=30, price=4.0),
    ]


@pytest.fixture
def peer_group() -> ComparisonGroup:
    return ComparisonGroup(group_id="g1", name="Peers", member_ids=("a", "b", "c"))


@pytest.fixture
def peer_registry(peer_companies: list[Company]) -> MetricRegistry:
    return build_registry(c.record for c in peer_companies if c.record is not None)
