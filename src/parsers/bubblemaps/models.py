"""Data models for the Bubblemaps legacy map-data API."""

from pydantic import BaseModel, ConfigDict, Field


class HolderNode(BaseModel):
    """One holder address in the token graph.

    ``percentage`` is passed through exactly as the provider reports it; a
    missing, negative or non-finite value rejects the whole payload.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    address: str
    percentage: float = Field(ge=0, allow_inf_nan=False)
    is_contract: bool = False
    name: str | None = None
    amount: float = 0.0
    transaction_count: int = 0
    transfer_count: int = 0
    transfer_X721_count: int | None = None


class HolderLink(BaseModel):
    """Transfer edge between two nodes (indices into ``nodes``)."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    source: int
    target: int
    forward: float = 0.0
    backward: float = 0.0


class TokenLink(BaseModel):
    """Another token sharing holders with this one."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    address: str
    name: str = ""
    symbol: str = ""
    decimals: int | None = None
    links: tuple[HolderLink, ...] = ()


class GraphMetadata(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    max_amount: float = 0.0
    min_amount: float = 0.0


class HolderGraph(BaseModel):
    """Full holder snapshot for one token.

    Nodes keep the provider's order (descending percentage). The model is
    frozen so a graph can be shared between concurrent handlers.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    nodes: tuple[HolderNode, ...] = ()
    symbol: str = ""
    full_name: str = ""
    version: int | None = None
    chain: str = ""
    token_address: str = ""
    dt_update: str | None = None
    is_X721: bool = False
    metadata: GraphMetadata | None = None
    links: tuple[HolderLink, ...] = ()
    token_links: tuple[TokenLink, ...] = ()
