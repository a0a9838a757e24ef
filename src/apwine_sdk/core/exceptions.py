"""Custom exceptions for the APWine SDK."""

from typing import Optional, Any, Dict


class APWineSDKError(Exception):
    """Base exception for all APWine SDK errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(APWineSDKError):
    """Configuration is invalid or missing."""
    pass


class ValidationError(APWineSDKError):
    """Input validation failed."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, details)
        self.field = field
        self.value = value


class MissingSignerError(APWineSDKError):
    """A transaction was requested on a session without a signer."""

    def __init__(
        self,
        message: str = "This is a transaction, a signer is required. Use sdk.update_signer() to proceed.",
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, details)
        self.operation = operation


class PathfindingError(APWineSDKError):
    """Swap route resolution failed."""

    def __init__(
        self,
        message: str,
        source: Optional[Any] = None,
        target: Optional[Any] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, details)
        self.source = source
        self.target = target


class NoPathFoundError(PathfindingError):
    """No swap route connects the source token kind to the target token kind."""
    pass


class NotYetInitializedError(APWineSDKError):
    """An asynchronously resolved property was used before the SDK was ready."""
    pass


class InitializationError(APWineSDKError):
    """Asynchronous initialization of the SDK failed."""
    pass


class RemoteCallError(APWineSDKError):
    """A contract read or write failed at the RPC boundary."""

    def __init__(
        self,
        message: str,
        method: Optional[str] = None,
        address: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, details)
        self.method = method
        self.address = address


class TransactionError(APWineSDKError):
    """A submitted transaction reverted or could not be confirmed."""

    def __init__(
        self,
        message: str,
        tx_hash: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, details)
        self.tx_hash = tx_hash
