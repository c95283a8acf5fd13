"""Custom exceptions for splitledger."""


class SplitLedgerError(Exception):
    """Base exception for all splitledger errors."""

    pass


class ConfigurationError(SplitLedgerError):
    """Raised when configuration is invalid or missing."""

    pass


class LedgerInputError(SplitLedgerError):
    """Raised when an expense or balance document cannot be read."""

    def __init__(self, source: str, message: str | None = None):
        self.source = source
        super().__init__(message or f"Could not read ledger input from {source}")


class SplitValidationError(SplitLedgerError):
    """Raised when a split calculation is given invalid input."""

    pass


class UnknownStrategyError(SplitLedgerError):
    """Raised when a settlement strategy name is not registered."""

    def __init__(self, name: str, available: list[str]):
        self.name = name
        self.available = available
        super().__init__(
            f"Unknown settlement strategy '{name}' "
            f"(available: {', '.join(available)})"
        )
