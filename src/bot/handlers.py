"""Telegram bot command, callback and address handlers.

Dependencies arrive as handler kwargs from the dispatcher's workflow data:
``session_store`` (SessionStore), ``lookup`` (TokenLookup) and
``renderer`` (BubblemapRenderer).
"""

from aiogram import Bot, F, Router
from aiogram.enums import ChatAction
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command, CommandObject, CommandStart
from aiogram.types import BufferedInputFile, CallbackQuery, LinkPreviewOptions, Message
from loguru import logger

from src.bot.formatters import (
    COMMANDS_HELP_TEXT,
    MARKET_DATA_UNAVAILABLE,
    MENU_HELP_TEXT,
    SCREENSHOT_UNAVAILABLE,
    WELCOME_TEXT,
    format_distribution,
    format_graph_error,
    format_market_data,
)
from src.bot.keyboards import (
    CB_CHANGE_CHAIN,
    CB_MAIN_MENU,
    CB_SEARCH_TOKEN,
    CB_SET_CHAIN_PREFIX,
    CB_SHOW_CHAIN,
    CB_SHOW_HELP,
    chain_menu,
    main_menu,
    token_menu,
)
from src.bot.session import SessionStore
from src.parsers.bubblemaps.exceptions import ScreenshotError
from src.parsers.bubblemaps.screenshot import BubblemapRenderer
from src.parsers.lookup import TokenLookup
from src.utils.chains import is_valid_address, normalize_chain

router = Router()

NO_PREVIEW = LinkPreviewOptions(is_disabled=True)


def _callback_chat_id(callback: CallbackQuery) -> int:
    if callback.message is not None:
        return callback.message.chat.id
    return callback.from_user.id


@router.message(CommandStart())
async def cmd_start(message: Message) -> None:
    await message.answer(WELCOME_TEXT, reply_markup=main_menu())


@router.message(Command("help"))
async def cmd_help(message: Message) -> None:
    await message.answer(COMMANDS_HELP_TEXT, reply_markup=main_menu())


@router.message(Command("menu"))
async def cmd_menu(message: Message) -> None:
    await message.answer("Please select an option:", reply_markup=main_menu())


@router.message(Command("setchain"))
async def cmd_setchain(
    message: Message, command: CommandObject, session_store: SessionStore
) -> None:
    """/setchain <chain> — kept alongside the chain menu."""
    arg = command.args.split()[0] if command.args else None
    chain = normalize_chain(arg)
    if chain is None:
        await message.answer("Please specify a valid chain:", reply_markup=chain_menu())
        return

    ctx = await session_store.get(message.chat.id)
    ctx.chain = chain
    await session_store.save(message.chat.id, ctx)
    await message.answer(f"Chain set to {chain.upper()}", reply_markup=main_menu())


@router.callback_query(F.data == CB_SEARCH_TOKEN)
async def cb_search_token(callback: CallbackQuery, bot: Bot, session_store: SessionStore) -> None:
    chat_id = _callback_chat_id(callback)
    ctx = await session_store.get(chat_id)
    ctx.awaiting_address = True
    await session_store.save(chat_id, ctx)
    await callback.answer("Please send a contract address")
    await bot.send_message(chat_id, f"Please send a contract address for {ctx.chain.upper()}:")


@router.callback_query(F.data == CB_CHANGE_CHAIN)
async def cb_change_chain(callback: CallbackQuery, bot: Bot) -> None:
    await callback.answer("Select a chain")
    await bot.send_message(
        _callback_chat_id(callback), "Select blockchain:", reply_markup=chain_menu()
    )


@router.callback_query(F.data == CB_SHOW_HELP)
async def cb_show_help(callback: CallbackQuery, bot: Bot) -> None:
    await callback.answer("Showing help")
    await bot.send_message(_callback_chat_id(callback), MENU_HELP_TEXT)


@router.callback_query(F.data == CB_SHOW_CHAIN)
async def cb_show_chain(callback: CallbackQuery, bot: Bot, session_store: SessionStore) -> None:
    chat_id = _callback_chat_id(callback)
    ctx = await session_store.get(chat_id)
    await callback.answer(f"Current chain: {ctx.chain.upper()}")
    await bot.send_message(
        chat_id, f"Your currently selected blockchain is: {ctx.chain.upper()}"
    )


@router.callback_query(F.data == CB_MAIN_MENU)
async def cb_main_menu(callback: CallbackQuery, bot: Bot) -> None:
    await callback.answer("Showing main menu")
    await bot.send_message(_callback_chat_id(callback), "Main menu:", reply_markup=main_menu())


@router.callback_query(F.data.startswith(CB_SET_CHAIN_PREFIX))
async def cb_set_chain(callback: CallbackQuery, bot: Bot, session_store: SessionStore) -> None:
    chain = normalize_chain((callback.data or "").removeprefix(CB_SET_CHAIN_PREFIX))
    if chain is None:
        await callback.answer("Unknown chain")
        return

    chat_id = _callback_chat_id(callback)
    ctx = await session_store.get(chat_id)
    ctx.chain = chain
    await session_store.save(chat_id, ctx)
    await callback.answer(f"Chain set to {chain.upper()}")
    await bot.send_message(chat_id, f"Blockchain set to {chain.upper()}", reply_markup=main_menu())


@router.callback_query()
async def cb_unknown(callback: CallbackQuery) -> None:
    await callback.answer("Unknown option")


@router.message(F.text)
async def on_address(
    message: Message,
    bot: Bot,
    session_store: SessionStore,
    lookup: TokenLookup,
    renderer: BubblemapRenderer,
) -> None:
    """Analyze a contract address sent as plain text on the session's chain."""
    text = (message.text or "").strip()
    if text.startswith("/"):
        return

    chat_id = message.chat.id
    ctx = await session_store.get(chat_id)
    chain = ctx.chain

    if not is_valid_address(text, chain):
        # Stray chatter is ignored unless the user asked to search
        if ctx.awaiting_address:
            hint = (
                "Please send a valid Solana contract address"
                if chain == "sol"
                else "Please send a valid contract address (0x... format) for EVM chains"
            )
            ctx.awaiting_address = False
            await session_store.save(chat_id, ctx)
            await message.answer(hint, reply_markup=main_menu())
        return

    if ctx.awaiting_address:
        ctx.awaiting_address = False
        await session_store.save(chat_id, ctx)

    logger.info(f"[BOT] Lookup {text} on {chain} for chat {chat_id}")
    processing = await message.answer("Processing your request. This may take a few moments...")

    try:
        await bot.send_chat_action(chat_id, ChatAction.TYPING)
        report = await lookup.lookup(text, chain)

        if report.graph_error is not None:
            await message.answer(
                format_graph_error(report.graph_error),
                parse_mode="HTML",
                reply_markup=main_menu(),
            )
            return

        market_text = (
            format_market_data(report.market) if report.market else MARKET_DATA_UNAVAILABLE
        )
        await message.answer(market_text, parse_mode="HTML", link_preview_options=NO_PREVIEW)

        await message.answer(
            format_distribution(report.distribution),
            parse_mode="HTML",
            reply_markup=token_menu(renderer.page_url(text, chain)),
            link_preview_options=NO_PREVIEW,
        )

        await bot.send_chat_action(chat_id, ChatAction.UPLOAD_PHOTO)
        try:
            png = await renderer.capture(text, chain)
        except ScreenshotError as e:
            logger.warning(f"[BOT] Screenshot failed for {text}: {e}")
            await message.answer(SCREENSHOT_UNAVAILABLE, reply_markup=main_menu())
            return

        await message.answer_photo(
            BufferedInputFile(png, filename=f"bubblemap_{chain}_{text}.png"),
            caption=f"🔍 Bubble Map for {report.symbol} ({chain.upper()})",
            reply_markup=main_menu(),
        )
    except Exception as e:
        logger.exception(f"[BOT] Error processing token {text}")
        await message.answer(
            f"Error processing token: {e}", reply_markup=main_menu()
        )
    finally:
        try:
            await processing.delete()
        except TelegramBadRequest as e:
            logger.debug(f"[BOT] Processing message already gone: {e}")
