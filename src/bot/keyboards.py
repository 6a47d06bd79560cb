"""Inline keyboards and their callback data."""

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from src.utils.chains import SUPPORTED_CHAINS

CB_SEARCH_TOKEN = "search_token"
CB_CHANGE_CHAIN = "change_chain"
CB_SHOW_HELP = "show_help"
CB_SHOW_CHAIN = "show_chain"
CB_MAIN_MENU = "main_menu"
CB_SET_CHAIN_PREFIX = "set_chain:"


def main_menu() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [
                InlineKeyboardButton(text="🔍 Search Token", callback_data=CB_SEARCH_TOKEN),
                InlineKeyboardButton(text="⛓️ Change Chain", callback_data=CB_CHANGE_CHAIN),
            ],
            [
                InlineKeyboardButton(text="ℹ️ Help", callback_data=CB_SHOW_HELP),
                InlineKeyboardButton(text="📊 My Current Chain", callback_data=CB_SHOW_CHAIN),
            ],
        ]
    )


def chain_menu() -> InlineKeyboardMarkup:
    """Supported chains two per row, then a back button."""
    rows: list[list[InlineKeyboardButton]] = []
    for i in range(0, len(SUPPORTED_CHAINS), 2):
        rows.append([
            InlineKeyboardButton(text=chain.upper(), callback_data=f"{CB_SET_CHAIN_PREFIX}{chain}")
            for chain in SUPPORTED_CHAINS[i:i + 2]
        ])
    rows.append([InlineKeyboardButton(text="🔙 Back to Main Menu", callback_data=CB_MAIN_MENU)])
    return InlineKeyboardMarkup(inline_keyboard=rows)


def token_menu(bubblemaps_url: str) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [InlineKeyboardButton(text="View on Bubblemaps", url=bubblemaps_url)],
            [InlineKeyboardButton(text="🔙 Back to Menu", callback_data=CB_MAIN_MENU)],
        ]
    )
