"""
Fixed enumerations shared by the models, the metrics engine and the UI.
"""

from enum import Enum


class AssetType(str, Enum):
    """Asset-type category of an investment, in display order."""
    EQUITY = "Equity"
    COMMODITY = "Commodity"
    BONDS = "Bonds"
    REAL_ESTATE = "Real Estate"
    MUTUAL_FUNDS = "Mutual Funds"


class Country(str, Enum):
    INDIA = "India"
    US = "US"


class TransactionType(str, Enum):
    BUY = "buy"
    SELL = "sell"
