"""Holder distribution analysis — decentralization score and top holder summary.

Pure functions over a HolderGraph: no I/O, the graph is never mutated and
nodes are never re-sorted (the provider's descending order is authoritative).
"""

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import NamedTuple

from src.parsers.bubblemaps.models import HolderGraph, HolderNode

TOP_HOLDERS_WINDOW = 10
# Provider percentages are scaled x100 relative to a human percent
PERCENTAGE_SCALE = 100
LABEL_PREFIX_LEN = 6
LABEL_SUFFIX_LEN = 4


class InsufficientDataError(Exception):
    """Graph has no usable holder data, so no score can be computed."""


class TopHolder(NamedTuple):
    rank: int
    label: str
    percentage: float


@dataclass(frozen=True)
class DistributionSummary:
    """Decentralization score plus the ranked top holders it was computed from."""

    score: float  # 0-100, higher = more decentralized
    top_holders: tuple[TopHolder, ...]
    top10_concentration: float  # window sum the score was derived from


def compute_score(graph: HolderGraph) -> float:
    """Score 0-100 from the share held by the first 10 nodes.

    Fewer than 10 nodes: only the existing ones are summed, no padding.
    """
    return _score_from_concentration(_top10_concentration(graph))


def summarize_top_holders(graph: HolderGraph, n: int = TOP_HOLDERS_WINDOW) -> tuple[TopHolder, ...]:
    """First ``n`` holders as (rank, label, percentage), rank 1-based by position."""
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")
    return tuple(
        TopHolder(rank=i, label=holder_label(node), percentage=node.percentage)
        for i, node in enumerate(graph.nodes[:n], start=1)
    )


def summarize_distribution(graph: HolderGraph, n: int = TOP_HOLDERS_WINDOW) -> DistributionSummary:
    concentration = _top10_concentration(graph)
    return DistributionSummary(
        score=_score_from_concentration(concentration),
        top_holders=summarize_top_holders(graph, n),
        top10_concentration=concentration,
    )


def holder_label(node: HolderNode) -> str:
    """Known entity name, or the address shortened to ``0x1234...abcd``."""
    if node.name:
        return node.name
    address = node.address
    if len(address) <= LABEL_PREFIX_LEN + LABEL_SUFFIX_LEN:
        return address
    return f"{address[:LABEL_PREFIX_LEN]}...{address[-LABEL_SUFFIX_LEN:]}"


def _top10_concentration(graph: HolderGraph) -> float:
    """Sum of the first 10 percentages; corrupt values fail closed."""
    if not graph.nodes:
        raise InsufficientDataError("Holder graph has no nodes")

    window = graph.nodes[:TOP_HOLDERS_WINDOW]
    for node in window:
        if not math.isfinite(node.percentage) or node.percentage < 0:
            raise InsufficientDataError(
                f"Invalid percentage {node.percentage!r} for holder {node.address}"
            )
    return sum(n.percentage for n in window)


def _score_from_concentration(top10_concentration: float) -> float:
    score = max(0.0, min(100.0, 100 - top10_concentration / PERCENTAGE_SCALE))
    return _round_half_away(score)


def _round_half_away(value: float) -> float:
    """Round to one decimal, halves away from zero (round() is banker's)."""
    return float(Decimal(repr(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))
