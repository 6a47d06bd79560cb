"""Telegram bot lifecycle — aiogram 3.x polling mode.

Upstream clients, the screenshot renderer and the session store are created
once and handed to handlers through the Dispatcher's workflow data.
"""

import os

from aiogram import Bot, Dispatcher
from aiogram.types import BotCommand
from loguru import logger

from config.settings import settings
from src.bot.handlers import router
from src.bot.session import SessionStore, create_session_store
from src.parsers.bubblemaps.client import BubblemapsClient
from src.parsers.bubblemaps.screenshot import BubblemapRenderer
from src.parsers.coinmarketcap.client import CoinMarketCapClient
from src.parsers.lookup import TokenLookup

BOT_COMMANDS = [
    BotCommand(command="start", description="Start the bot and show main menu"),
    BotCommand(command="menu", description="Show the main menu"),
    BotCommand(command="help", description="Show help information"),
    BotCommand(command="setchain", description="Set blockchain network (eth, bsc, etc.)"),
]

_bot_instance: Bot | None = None
_lookup_instance: TokenLookup | None = None
_session_store: SessionStore | None = None


def get_bot() -> Bot:
    """Get or create the aiogram Bot singleton."""
    global _bot_instance
    if _bot_instance is None:
        token = os.environ.get("TELEGRAM_BOT_TOKEN", "") or settings.telegram_bot_token
        if not token:
            raise RuntimeError("TELEGRAM_BOT_TOKEN not configured")
        _bot_instance = Bot(token=token)
    return _bot_instance


def build_lookup() -> TokenLookup:
    return TokenLookup(
        bubblemaps=BubblemapsClient(
            base_url=settings.bubblemaps_api_url, timeout=settings.http_timeout_sec
        ),
        cmc=CoinMarketCapClient(
            api_key=settings.cmc_api_key,
            base_url=settings.cmc_base_url,
            timeout=settings.http_timeout_sec,
        ),
    )


def build_renderer() -> BubblemapRenderer:
    return BubblemapRenderer(
        app_url=settings.bubblemaps_app_url,
        navigation_timeout_ms=settings.screenshot_timeout_ms,
        settle_ms=settings.screenshot_settle_ms,
        viewport=(settings.screenshot_viewport_width, settings.screenshot_viewport_height),
    )


def build_dispatcher() -> Dispatcher:
    """Dispatcher with handlers registered and dependencies injected."""
    global _lookup_instance, _session_store
    _lookup_instance = build_lookup()
    _session_store = create_session_store()
    dp = Dispatcher(
        session_store=_session_store,
        lookup=_lookup_instance,
        renderer=build_renderer(),
    )
    dp.include_router(router)
    dp.startup.register(_on_startup)
    return dp


async def _on_startup(bot: Bot) -> None:
    try:
        await bot.set_my_commands(BOT_COMMANDS)
        logger.info("[BOT] Menu commands set")
    except Exception as e:
        logger.warning(f"[BOT] Could not set menu commands: {e}")


async def run_bot() -> None:
    """Start the Telegram bot in polling mode; returns when polling stops."""
    bot = get_bot()
    dp = build_dispatcher()
    logger.info("[BOT] Starting Telegram bot (polling mode)")
    await dp.start_polling(bot, close_bot_session=False, handle_signals=False)


async def stop_bot() -> None:
    """Gracefully stop the bot and close HTTP clients and the session store."""
    global _bot_instance, _lookup_instance, _session_store
    if _lookup_instance:
        await _lookup_instance.close()
        _lookup_instance = None
    if _session_store:
        await _session_store.close()
        _session_store = None
    if _bot_instance:
        await _bot_instance.session.close()
        _bot_instance = None
