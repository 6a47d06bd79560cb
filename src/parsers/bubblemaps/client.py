"""Bubblemaps legacy API client — token holder graph (map-data).

The map-data endpoint returns the top holders of a token as graph nodes,
already sorted by descending percentage, plus transfer links between them.
Tokens that Bubblemaps has not computed yet answer with 401.
"""

import httpx
from loguru import logger

from src.parsers.bubblemaps.exceptions import (
    BubblemapsFetchError,
    TokenNotComputedError,
    UnsupportedChainError,
)
from src.parsers.bubblemaps.models import HolderGraph
from src.utils.chains import SUPPORTED_CHAINS

BASE_URL = "https://api-legacy.bubblemaps.io"
APP_URL = "https://app.bubblemaps.io"


def map_url(chain: str, token_address: str, app_url: str = APP_URL) -> str:
    """Public web page with the bubble map of a token."""
    return f"{app_url.rstrip('/')}/{chain}/token/{token_address}"


class BubblemapsClient:
    """Async HTTP client for the Bubblemaps legacy API (no auth)."""

    def __init__(self, base_url: str = BASE_URL, timeout: float = 15.0) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def get_map_data(self, token_address: str, chain: str) -> HolderGraph:
        """Fetch the holder graph for a token.

        Raises:
            UnsupportedChainError: chain is not supported or the API rejected the request.
            TokenNotComputedError: Bubblemaps has no map for this token yet.
            BubblemapsFetchError: network failure, unexpected status or malformed body.
        """
        if chain not in SUPPORTED_CHAINS:
            raise UnsupportedChainError(f"Unsupported chain: {chain}")

        params = {"token": token_address, "chain": chain}
        try:
            resp = await self._client.get("/map-data", params=params)
        except httpx.HTTPError as e:
            logger.warning(f"[BUBBLEMAPS] Request failed for {token_address[:12]}: {e}")
            raise BubblemapsFetchError(f"Bubblemaps request failed: {e}") from e

        if resp.status_code in (401, 404):
            logger.debug(f"[BUBBLEMAPS] No map for {token_address[:12]} on {chain}")
            raise TokenNotComputedError("Token not computed yet or API key required")

        if resp.status_code == 400:
            raise UnsupportedChainError(f"Bubblemaps rejected token/chain: {chain}")

        if resp.status_code != 200:
            logger.debug(f"[BUBBLEMAPS] HTTP {resp.status_code} for {token_address[:12]}")
            raise BubblemapsFetchError(f"Bubblemaps returned HTTP {resp.status_code}")

        try:
            graph = HolderGraph.model_validate(resp.json())
        except ValueError as e:  # bad JSON or pydantic ValidationError
            logger.warning(f"[BUBBLEMAPS] Malformed map-data for {token_address[:12]}: {e}")
            raise BubblemapsFetchError("Malformed map data from Bubblemaps") from e

        logger.debug(
            f"[BUBBLEMAPS] {graph.symbol or token_address[:12]}: "
            f"{len(graph.nodes)} nodes, {len(graph.links)} links"
        )
        return graph
