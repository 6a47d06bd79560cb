"""Supported chains and per-chain contract address validation."""

import re

from solders.pubkey import Pubkey  # type: ignore[import-untyped]

SUPPORTED_CHAINS: tuple[str, ...] = (
    "eth",
    "bsc",
    "ftm",
    "avax",
    "cro",
    "arbi",
    "poly",
    "base",
    "sol",
    "sonic",
)

EVM_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")


def normalize_chain(chain: str | None) -> str | None:
    """Lower-case a chain code, returning None when it is not supported."""
    if not chain:
        return None
    code = chain.strip().lower()
    return code if code in SUPPORTED_CHAINS else None


def is_valid_address(text: str, chain: str) -> bool:
    """Check that ``text`` looks like a token address on ``chain``."""
    if chain == "sol":
        try:
            Pubkey.from_string(text)
        except ValueError:
            return False
        return True
    return bool(EVM_ADDRESS_RE.match(text))
