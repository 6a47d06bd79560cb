"""Format lookup results into Telegram HTML messages."""

import html
import math

from src.parsers.coinmarketcap.models import MarketData
from src.parsers.distribution import DistributionSummary

DESCRIPTION_MAX_LEN = 200

WELCOME_TEXT = (
    "Welcome to Bubblemaps Telegram Bot! 🎯\n\n"
    "I can show you bubble maps for any token contract address.\n\n"
    "Use the menu below to get started:"
)

COMMANDS_HELP_TEXT = (
    "Available commands:\n\n"
    "/start - Start the bot and show main menu\n"
    "/help - Show this help message\n"
    "/menu - Show main menu\n"
    "/setchain [chain] - Set blockchain (eth, bsc, ftm, avax, cro, arbi, poly, base, sol, sonic)\n\n"
    "Or simply send me a contract address and I'll analyze it for you!"
)

MENU_HELP_TEXT = (
    "Available options:\n\n"
    "🔍 Search Token - Analyze a token contract\n"
    "⛓️ Change Chain - Switch to a different blockchain\n"
    "ℹ️ Help - Show this help message\n"
    "📊 My Current Chain - Show currently selected blockchain\n\n"
    "You can also simply send a contract address at any time to analyze it."
)

MARKET_DATA_UNAVAILABLE = "Sorry, could not retrieve token information."
SCREENSHOT_UNAVAILABLE = (
    "Could not generate bubble map screenshot. "
    "Please check the token on Bubblemaps website."
)


def format_currency(num: float) -> str:
    """$1.23B / $4.56M / $7.89K / $0.12."""
    if num >= 1_000_000_000:
        return f"${num / 1_000_000_000:.2f}B"
    if num >= 1_000_000:
        return f"${num / 1_000_000:.2f}M"
    if num >= 1_000:
        return f"${num / 1_000:.2f}K"
    return f"${num:.2f}"


def format_price(price: float) -> str:
    """Sub-cent prices need 8 decimals to be readable."""
    return f"${price:.8f}" if price < 0.01 else f"${price:.2f}"


def format_market_data(market: MarketData) -> str:
    change = market.percent_change_24h
    change_emoji = "🟢" if change >= 0 else "🔴"
    change_text = f"+{change:.2f}%" if change >= 0 else f"{change:.2f}%"

    symbol = html.escape(market.symbol)
    if market.circulating_supply:
        supply = f"{math.floor(market.circulating_supply):,} {symbol}"
    else:
        supply = "N/A"

    lines = [
        f"<b>{html.escape(market.name)} ({symbol})</b>",
        "",
        f"💰 <b>Price</b>: {format_price(market.price)} {change_emoji} {change_text}",
        f"📊 <b>Market Cap</b>: {format_currency(market.market_cap)}",
        f"📈 <b>24h Volume</b>: {format_currency(market.volume_24h)}",
        f"🏦 <b>Circulating Supply</b>: {supply}",
    ]

    if market.description:
        description = market.description[:DESCRIPTION_MAX_LEN]
        if len(market.description) > DESCRIPTION_MAX_LEN:
            description += "..."
        lines += ["", html.escape(description)]

    links = [
        f'<a href="{html.escape(url, quote=True)}">{label}</a>'
        for label, url in (
            ("Website", market.website),
            ("Explorer", market.explorer),
            ("Twitter", market.twitter),
        )
        if url
    ]
    if links:
        lines += ["", f"<b>Links</b>: {' | '.join(links)}"]

    return "\n".join(lines)


def format_distribution(summary: DistributionSummary | None) -> str:
    """Decentralization score and numbered top holders."""
    if summary is None:
        return "🔐 <b>Decentralization Score</b>: unavailable (no holder data)"

    lines = [
        f"🔐 <b>Decentralization Score</b>: {summary.score}/100",
        "",
        f"👥 <b>Top {len(summary.top_holders)} Holders:</b>",
    ]
    for holder in summary.top_holders:
        lines.append(f"{holder.rank}. {html.escape(holder.label)}: {holder.percentage:.2f}%")
    return "\n".join(lines)


def format_graph_error(error: Exception) -> str:
    return f"Error fetching bubble map data: {html.escape(str(error))}"
