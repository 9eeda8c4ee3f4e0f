"""Normalized token records.

Every upstream response, whatever shape it arrived in, is mapped into one of
these models so API consumers never branch on upstream variance. Fields are
defaulted so a record can always be built from a partial payload.
"""

from pydantic import BaseModel, ConfigDict, Field


class SearchToken(BaseModel):
    """Token entry returned by keyword search.

    Attributes:
        token: Token contract address.
        chain: Blockchain identifier (e.g., "bsc", "solana").
        symbol: Token ticker symbol.
        name: Token name, falling back to the appendix name or the symbol.
        logo_url: URL to the token logo.
        current_price_usd: Current price in USD.
        price_change_24h: 24-hour price change in percent.
        tx_volume_u_24h: 24-hour trading volume in USD.
        holders: Number of holders.
        market_cap: Market capitalization as reported upstream.
        risk_score: Upstream risk score.
    """

    token: str = ""
    chain: str = ""
    symbol: str = ""
    name: str = "Unknown Token"
    logo_url: str = ""
    current_price_usd: float = 0.0
    price_change_24h: float = 0.0
    tx_volume_u_24h: float = 0.0
    holders: int = 0
    market_cap: str = "0"
    risk_score: float = 0.0


class TokenDetails(BaseModel):
    """Token detail record.

    Serialized with camelCase aliases (``by_alias=True``) to match the
    payload the frontend consumes.
    """

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    symbol: str = "N/A"
    name: str = "Unknown"
    address: str = ""
    logo: str = ""
    chain: str = ""
    price: float = 0.0
    price_change: float = Field(default=0.0, alias="priceChange")
    price_change_24h: float = Field(default=0.0, alias="priceChange24h")
    volume_24h: float = Field(default=0.0, alias="volume24h")
    market_cap: float = Field(default=0.0, alias="marketCap")
    total_supply: float = Field(default=0.0, alias="totalSupply")
    holders: int = 0
    website: str = ""
    twitter: str = ""
    telegram: str = ""
    created_at: int = 0
    risk_score: float = 0.0
    risk_level: int = 0
    launch_at: int = 0
    buy_tx: float = 0.0
    sell_tx: float = 0.0
    locked_percent: float = 0.0
    burn_amount: float = 0.0


class HolderEntry(BaseModel):
    """One row of the top-holder ranking.

    Attributes:
        address: Holder wallet address.
        quantity: Held amount as a decimal string.
        percent: Share of the listed total, two decimals (e.g. "30.00").
        is_contract: Whether the holder is a contract.
        mark: Upstream label (exchange, burn address, ...), if any.
    """

    address: str
    quantity: str = "0"
    percent: str = "0.00"
    is_contract: bool = False
    mark: str | None = None


class TransactionEntry(BaseModel):
    """A swap involving the requested token, seen from the token's side."""

    tx_hash: str = ""
    timestamp: int = 0
    from_addr: str = ""
    to_addr: str = ""
    is_buy: bool = False
    token_amount: float = 0.0
    token_symbol: str = ""
    eth_amount: float = 0.0
    main_token_symbol: str = ""
    usd_amount: float = 0.0
    block_number: int = 0
    amm: str = ""
    chain: str = ""


class RiskReport(BaseModel):
    """Contract risk report.

    Flag fields hold the upstream 0/1 markers coerced to int. ``risk_reasons``
    carries upstream reasons when present, otherwise reasons derived from the
    flags.
    """

    token: str = ""
    chain: str = ""
    risk_score: float = 0.0
    risk_level: int = 0
    is_honeypot: int = 0
    hidden_owner: int = 0
    has_mint_method: int = 0
    has_black_method: int = 0
    has_white_method: int = 0
    analysis_big_wallet: int = 0
    selfdestruct: int = 0
    big_lp_without_any_lock: int = 0
    transfer_pausable: int = 0
    cannot_sell_all: int = 0
    can_take_back_ownership: int = 0
    creator_percent: float = 0.0
    owner: str = ""
    buy_tax: float = 0.0
    sell_tax: float = 0.0
    risk_reasons: list[str] = Field(default_factory=list)


class KlinePoint(BaseModel):
    """One candlestick; ``timestamp`` is in milliseconds."""

    timestamp: int
    open: float = 0.0
    high: float = 0.0
    low: float = 0.0
    close: float = 0.0
    volume: float = 0.0
