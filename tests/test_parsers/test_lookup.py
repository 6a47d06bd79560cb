"""Tests for the parallel token lookup (market data + holder graph)."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.parsers.bubblemaps.exceptions import BubblemapsFetchError, TokenNotComputedError
from src.parsers.bubblemaps.models import HolderGraph
from src.parsers.coinmarketcap.exceptions import CoinMarketCapError
from src.parsers.coinmarketcap.models import MarketData
from src.parsers.lookup import TokenLookup

TOKEN = "0x6982508145454ce325ddbe47a25d4ec3d2311933"

MARKET = MarketData(cmc_id=1, name="Pepe", symbol="PEPE", price=0.00001)


def _lookup(market=None, graph=None) -> TokenLookup:
    bubblemaps = MagicMock()
    bubblemaps.get_map_data = AsyncMock(
        **({"side_effect": graph} if isinstance(graph, Exception) else {"return_value": graph})
    )
    cmc = MagicMock()
    cmc.get_market_data = AsyncMock(
        **({"side_effect": market} if isinstance(market, Exception) else {"return_value": market})
    )
    return TokenLookup(bubblemaps=bubblemaps, cmc=cmc)


@pytest.mark.asyncio
async def test_both_succeed(graph_factory) -> None:
    lookup = _lookup(market=MARKET, graph=graph_factory([1200, 800, 600, 500, 400, 300, 300, 200, 200, 100]))

    report = await lookup.lookup(TOKEN, "eth")

    assert report.market is MARKET
    assert report.market_error is None
    assert report.graph_error is None
    assert report.distribution is not None
    assert report.distribution.score == 54.0
    assert report.symbol == "TEST"


@pytest.mark.asyncio
async def test_market_failure_tolerated(graph_factory) -> None:
    error = CoinMarketCapError("HTTP 500")
    lookup = _lookup(market=error, graph=graph_factory([5000, 3000, 2000]))

    report = await lookup.lookup(TOKEN, "eth")

    assert report.market is None
    assert report.market_error is error
    assert report.distribution is not None
    assert report.distribution.score == 0.0


@pytest.mark.asyncio
async def test_graph_failure_keeps_market() -> None:
    error = TokenNotComputedError("Token not computed yet or API key required")
    lookup = _lookup(market=MARKET, graph=error)

    report = await lookup.lookup(TOKEN, "eth")

    assert report.market is MARKET
    assert report.graph is None
    assert report.graph_error is error
    assert report.distribution is None
    assert report.symbol == "PEPE"


@pytest.mark.asyncio
async def test_both_fail() -> None:
    lookup = _lookup(market=CoinMarketCapError("down"), graph=BubblemapsFetchError("down"))

    report = await lookup.lookup(TOKEN, "bsc")

    assert report.market_error is not None
    assert report.graph_error is not None
    assert report.symbol == TOKEN[:8]


@pytest.mark.asyncio
async def test_empty_graph_means_score_unavailable() -> None:
    lookup = _lookup(market=MARKET, graph=HolderGraph(symbol="EMPTY"))

    report = await lookup.lookup(TOKEN, "eth")

    assert report.graph is not None
    assert report.graph_error is None
    assert report.distribution is None


@pytest.mark.asyncio
async def test_fetches_run_concurrently(graph_factory) -> None:
    """Both upstream calls are in flight at the same time."""
    started: list[str] = []
    both_started = asyncio.Event()

    async def fake_market(address, chain):
        started.append("market")
        if len(started) == 2:
            both_started.set()
        await asyncio.wait_for(both_started.wait(), timeout=1)
        return MARKET

    async def fake_graph(address, chain):
        started.append("graph")
        if len(started) == 2:
            both_started.set()
        await asyncio.wait_for(both_started.wait(), timeout=1)
        return graph_factory([100])

    bubblemaps = MagicMock()
    bubblemaps.get_map_data = fake_graph
    cmc = MagicMock()
    cmc.get_market_data = fake_market

    report = await TokenLookup(bubblemaps=bubblemaps, cmc=cmc).lookup(TOKEN, "eth")

    assert sorted(started) == ["graph", "market"]
    assert report.market is MARKET
    assert report.distribution is not None


@pytest.mark.asyncio
async def test_close_closes_clients() -> None:
    lookup = _lookup()
    lookup._bubblemaps.close = AsyncMock()
    lookup._cmc.close = AsyncMock()

    await lookup.close()

    lookup._bubblemaps.close.assert_awaited_once()
    lookup._cmc.close.assert_awaited_once()
