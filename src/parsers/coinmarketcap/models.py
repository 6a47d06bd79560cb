from pydantic import BaseModel


class MarketData(BaseModel):
    """Market snapshot for one token from CoinMarketCap (info + USD quote)."""

    cmc_id: int
    name: str
    symbol: str
    price: float
    percent_change_24h: float = 0.0
    market_cap: float = 0.0
    volume_24h: float = 0.0
    circulating_supply: float | None = None
    total_supply: float | None = None
    description: str = ""
    website: str | None = None
    explorer: str | None = None
    twitter: str | None = None

    model_config = {"extra": "ignore"}
