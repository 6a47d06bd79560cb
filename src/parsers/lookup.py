"""Token lookup — market data and holder graph fetched in parallel.

Each fetch succeeds or fails on its own; the caller decides what to render
from the resulting TokenReport.
"""

import asyncio
from dataclasses import dataclass

from loguru import logger

from src.parsers.bubblemaps.client import BubblemapsClient
from src.parsers.bubblemaps.models import HolderGraph
from src.parsers.coinmarketcap.client import CoinMarketCapClient
from src.parsers.coinmarketcap.models import MarketData
from src.parsers.distribution import (
    DistributionSummary,
    InsufficientDataError,
    summarize_distribution,
)


@dataclass
class TokenReport:
    """Everything known about one token after a lookup."""

    address: str
    chain: str
    market: MarketData | None = None
    market_error: Exception | None = None
    graph: HolderGraph | None = None
    graph_error: Exception | None = None
    distribution: DistributionSummary | None = None  # None = score unavailable

    @property
    def symbol(self) -> str:
        if self.graph and self.graph.symbol:
            return self.graph.symbol
        if self.market:
            return self.market.symbol
        return self.address[:8]


class TokenLookup:
    def __init__(self, bubblemaps: BubblemapsClient, cmc: CoinMarketCapClient) -> None:
        self._bubblemaps = bubblemaps
        self._cmc = cmc

    async def close(self) -> None:
        await self._bubblemaps.close()
        await self._cmc.close()

    async def lookup(self, address: str, chain: str) -> TokenReport:
        report = TokenReport(address=address, chain=chain)

        market_result, graph_result = await asyncio.gather(
            self._cmc.get_market_data(address, chain),
            self._bubblemaps.get_map_data(address, chain),
            return_exceptions=True,
        )
        for r in (market_result, graph_result):
            if isinstance(r, BaseException) and not isinstance(r, Exception):
                raise r  # cancellation and friends

        if isinstance(market_result, Exception):
            logger.info(f"[LOOKUP] Market data unavailable for {address[:12]}: {market_result}")
            report.market_error = market_result
        else:
            report.market = market_result

        if isinstance(graph_result, Exception):
            logger.info(f"[LOOKUP] Holder graph unavailable for {address[:12]}: {graph_result}")
            report.graph_error = graph_result
            return report

        report.graph = graph_result
        try:
            report.distribution = summarize_distribution(graph_result)
        except InsufficientDataError:
            logger.info(f"[LOOKUP] No holders in graph for {address[:12]}, score unavailable")

        return report
