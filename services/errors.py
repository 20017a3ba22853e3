"""
Exception hierarchy for InvestTrack services.
Store errors forward the underlying store message verbatim.
"""


class InvestTrackError(Exception):
    """Base class for all application errors."""


class NotAuthenticatedError(InvestTrackError):
    """Raised when a write is attempted without a resolved user identity."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class StoreError(InvestTrackError):
    """A failure reported by the data store."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class StoreFetchError(StoreError):
    """Reading investments or transactions failed."""


class RecordValidationError(StoreFetchError):
    """A record read from the store failed boundary validation."""


class StoreWriteError(StoreError):
    """Creating an investment or transaction failed."""


class InvestmentNotFoundError(InvestTrackError):
    """The investment does not exist or belongs to another user."""

    def __init__(self, investment_id):
        super().__init__(f"Investment {investment_id} not found")
        self.investment_id = investment_id
