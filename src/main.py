"""Entry point for the Bubblemaps Telegram bot."""

import asyncio
import signal

from loguru import logger

from config.settings import settings
from src.bot.bot import run_bot, stop_bot
from src.utils.logger import setup_logger


async def main() -> None:
    setup_logger(json_logs=settings.json_logs, level=settings.log_level)
    logger.info("Starting Bubblemaps bot...")

    # Graceful shutdown on SIGINT/SIGTERM
    loop = asyncio.get_running_loop()
    shutdown_event = asyncio.Event()

    def _signal_handler() -> None:
        logger.info("Shutdown signal received")
        shutdown_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _signal_handler)

    bot_task = asyncio.create_task(run_bot())

    # Wait for either the bot to stop or a shutdown signal
    done, pending = await asyncio.wait(
        [bot_task, asyncio.create_task(shutdown_event.wait())],
        return_when=asyncio.FIRST_COMPLETED,
    )

    for task in pending:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    if bot_task in done and bot_task.exception() is not None:
        logger.error(f"Bot stopped with error: {bot_task.exception()}")

    await stop_bot()
    logger.info("Shutdown complete")


if __name__ == "__main__":
    asyncio.run(main())
