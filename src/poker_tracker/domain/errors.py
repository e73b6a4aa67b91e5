"""Domain error hierarchy."""


class PokerTrackerError(Exception):
    """Base class for errors reported to callers."""


class ValidationError(PokerTrackerError, ValueError):
    """Input failed validation; nothing was written."""


class InvalidAmountError(ValidationError):
    """A monetary amount could not be parsed or was negative."""


class NotFoundError(PokerTrackerError):
    """A referenced player or session does not exist."""


class InvariantViolationError(PokerTrackerError):
    """The operation would break a ledger invariant; nothing was written."""


class PoolExceededError(InvariantViolationError):
    """Total cash-out would exceed total buy-in for a session."""


class PlayerInActiveSessionError(InvariantViolationError):
    """The player still has an open seat in some session."""


class StoreError(PokerTrackerError):
    """The backing store call failed."""
