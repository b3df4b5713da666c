"""
Domain enumerations: chains, trade types and assets a trade may carry.
"""

from backend_journal.domain.enums import (
    Asset,
    Chain,
    TradeType,
    is_valid_asset,
    is_valid_chain,
    is_valid_trade_type,
    validate_trade_fields,
)

__all__ = [
    "Asset",
    "Chain",
    "TradeType",
    "is_valid_asset",
    "is_valid_chain",
    "is_valid_trade_type",
    "validate_trade_fields",
]
