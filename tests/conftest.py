"""Shared test fixtures."""

import pytest

from src.parsers.bubblemaps.models import HolderGraph, HolderNode


def make_graph(percentages: list[float], names: dict[int, str] | None = None) -> HolderGraph:
    """Graph with EVM-style addresses, nodes in the given order."""
    names = names or {}
    nodes = [
        HolderNode(
            address=f"0x{i:040x}",
            percentage=pct,
            name=names.get(i),
        )
        for i, pct in enumerate(percentages)
    ]
    return HolderGraph(nodes=nodes, symbol="TEST", full_name="Test Token")


@pytest.fixture
def graph_factory():
    return make_graph


@pytest.fixture
def sample_map_data() -> dict:
    """Trimmed map-data response from the Bubblemaps legacy API."""
    return {
        "version": 4,
        "chain": "eth",
        "token_address": "0x6982508145454ce325ddbe47a25d4ec3d2311933",
        "dt_update": "2024-03-01 12:00:00",
        "full_name": "Pepe",
        "symbol": "PEPE",
        "is_X721": False,
        "metadata": {"max_amount": 1.0e13, "min_amount": 1.0e9},
        "nodes": [
            {
                "address": "0xf977814e90da44bfa03b6295a0616a897441acec",
                "amount": 1.0e13,
                "is_contract": False,
                "name": "Binance 8",
                "percentage": 1200.0,
                "transaction_count": 120,
                "transfer_X721_count": None,
                "transfer_count": 80,
            },
            {
                "address": "0x5a52e96bacdabb82fd05763e25335261b270efcb",
                "amount": 6.5e12,
                "is_contract": False,
                "percentage": 800.0,
                "transaction_count": 40,
                "transfer_X721_count": None,
                "transfer_count": 12,
            },
            {
                "address": "0xa43fe16908251ee70ef74718545e4fe6c5ccec9f",
                "amount": 4.0e12,
                "is_contract": True,
                "percentage": 600.0,
                "transaction_count": 9000,
                "transfer_X721_count": None,
                "transfer_count": 8000,
            },
        ],
        "links": [{"source": 0, "target": 1, "forward": 2.0e11, "backward": 0}],
        "token_links": [],
    }
