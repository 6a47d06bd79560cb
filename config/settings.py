from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Telegram bot
    telegram_bot_token: str = ""
    default_chain: str = "eth"

    # Session storage (empty = in-memory, lost on restart)
    redis_url: str = ""

    # CoinMarketCap (market data)
    cmc_api_key: str = ""
    cmc_base_url: str = "https://pro-api.coinmarketcap.com/v2"

    # Bubblemaps legacy API + web app
    bubblemaps_api_url: str = "https://api-legacy.bubblemaps.io"
    bubblemaps_app_url: str = "https://app.bubblemaps.io"

    # Upstream HTTP timeout
    http_timeout_sec: float = 15.0

    # Headless browser screenshot
    screenshot_timeout_ms: int = 60000  # page.goto navigation timeout
    screenshot_settle_ms: int = 5000  # extra wait for the map to render
    screenshot_viewport_width: int = 1920
    screenshot_viewport_height: int = 1080

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False


settings = Settings()
