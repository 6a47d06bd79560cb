"""CoinMarketCap API client — token market data by contract address.

Two calls per lookup: /cryptocurrency/info resolves the contract address to
a CMC id (and gives description + links), /cryptocurrency/quotes/latest
gives the USD quote for that id.
"""

import httpx
from loguru import logger

from src.parsers.coinmarketcap.exceptions import CmcTokenNotFoundError, CoinMarketCapError
from src.parsers.coinmarketcap.models import MarketData
from src.utils.chains import normalize_chain

BASE_URL = "https://pro-api.coinmarketcap.com/v2"


class CoinMarketCapClient:
    """Async HTTP client for the CoinMarketCap Pro API (requires API key)."""

    def __init__(self, api_key: str, base_url: str = BASE_URL, timeout: float = 15.0) -> None:
        self._api_key = api_key
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"X-CMC_PRO_API_KEY": api_key, "Accept": "application/json"},
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _get(self, path: str, params: dict) -> dict:
        try:
            resp = await self._client.get(path, params=params)
        except httpx.HTTPError as e:
            raise CoinMarketCapError(f"CoinMarketCap request failed: {e}") from e

        if resp.status_code == 401:
            raise CoinMarketCapError("Invalid CoinMarketCap API key")
        if resp.status_code == 400:
            # CMC answers 400 for addresses it does not list
            raise CmcTokenNotFoundError("Could not find token on CoinMarketCap")
        if resp.status_code != 200:
            raise CoinMarketCapError(f"CoinMarketCap returned HTTP {resp.status_code}")

        try:
            payload = resp.json()
        except ValueError as e:
            raise CoinMarketCapError("Malformed CoinMarketCap response") from e
        return payload.get("data") or {}

    async def get_market_data(self, token_address: str, chain: str) -> MarketData:
        """Resolve a contract address and fetch its latest USD quote."""
        if not self._api_key:
            raise CoinMarketCapError("CMC_API_KEY not configured")
        if normalize_chain(chain) is None:
            raise CoinMarketCapError(f"Unsupported chain: {chain}")

        info_data = await self._get("/cryptocurrency/info", {"address": token_address})
        token_info = _first_entry(info_data)
        cmc_id = token_info.get("id")
        if not cmc_id:
            raise CmcTokenNotFoundError("Could not find token on CoinMarketCap")

        quotes_data = await self._get(
            "/cryptocurrency/quotes/latest", {"id": cmc_id, "convert": "USD"}
        )
        quote_data = quotes_data.get(str(cmc_id))
        if isinstance(quote_data, list):
            quote_data = quote_data[0] if quote_data else None
        if not quote_data:
            raise CmcTokenNotFoundError(f"No quote for CMC id {cmc_id}")

        market = _parse_market_data(token_info, quote_data)
        logger.debug(f"[CMC] {market.symbol} (id={cmc_id}) price=${market.price}")
        return market


def _first_entry(data: dict | list) -> dict:
    """Info responses are keyed by CMC id; the address lookup yields one entry."""
    values = list(data.values()) if isinstance(data, dict) else list(data)
    if not values:
        return {}
    first = values[0]
    if isinstance(first, list):
        return first[0] if first else {}
    return first


def _parse_market_data(token_info: dict, quote_data: dict) -> MarketData:
    usd = (quote_data.get("quote") or {}).get("USD") or {}
    urls = token_info.get("urls") or {}

    def _first_url(kind: str) -> str | None:
        links = urls.get(kind) or []
        return links[0] if links else None

    return MarketData(
        cmc_id=token_info["id"],
        name=quote_data.get("name") or token_info.get("name", ""),
        symbol=quote_data.get("symbol") or token_info.get("symbol", ""),
        price=usd.get("price") or 0.0,
        percent_change_24h=usd.get("percent_change_24h") or 0.0,
        market_cap=usd.get("market_cap") or 0.0,
        volume_24h=usd.get("volume_24h") or 0.0,
        circulating_supply=quote_data.get("circulating_supply"),
        total_supply=quote_data.get("total_supply"),
        description=token_info.get("description") or "",
        website=_first_url("website"),
        explorer=_first_url("explorer"),
        twitter=_first_url("twitter"),
    )
