"""Passkey Pay exception hierarchy.

This module defines the base exception class and specialized exceptions
for configuration, RPC access and the payment failure taxonomy.
"""

from enum import Enum


class PasskeyPayError(Exception):
    """Base exception for all Passkey Pay errors.

    All custom exceptions should inherit from this class
    to enable consistent error handling and logging.
    """

    pass


class ConfigurationError(PasskeyPayError):
    """Raised when configuration is invalid or missing.

    Example:
        raise ConfigurationError("Missing required env var: MERCHANT_WALLET")
    """

    pass


class ValidationError(PasskeyPayError):
    """Raised when data validation fails.

    Example:
        raise ValidationError("Wallet address must be 32 bytes")
    """

    pass


class ExternalServiceError(PasskeyPayError):
    """Raised when an external service call fails.

    Attributes:
        service: Name of the external service that failed.
        status_code: HTTP status code if available, None otherwise.

    Example:
        raise ExternalServiceError(service="rpc", message="Rate limited", status_code=429)
    """

    def __init__(
        self,
        service: str,
        message: str,
        status_code: int | None = None,
    ) -> None:
        self.service = service
        self.status_code = status_code
        super().__init__(f"{service}: {message}")


class RpcError(ExternalServiceError):
    """Raised when a JSON-RPC call returns an error object.

    Attributes:
        code: JSON-RPC error code.
    """

    def __init__(self, service: str, code: int, message: str) -> None:
        self.code = code
        self.rpc_message = message
        super().__init__(service=service, message=f"[{code}] {message}")


class CircuitBreakerOpenError(PasskeyPayError):
    """Raised when circuit breaker is open.

    Example:
        raise CircuitBreakerOpenError("Circuit is open for Solana RPC")
    """

    pass


class WalletConnectionError(PasskeyPayError):
    """Raised when an RPC call about a wallet cannot be completed.

    Attributes:
        wallet_address: The address involved (if available).
    """

    def __init__(self, message: str, wallet_address: str | None = None) -> None:
        super().__init__(message)
        self.wallet_address = wallet_address


class AccountNotFoundError(PasskeyPayError):
    """Raised when an on-chain account does not exist."""

    def __init__(self, address: str) -> None:
        super().__init__(f"Account not found: {address}")
        self.address = address


# =============================================================================
# Payment failures
# =============================================================================


class PaymentErrorKind(str, Enum):
    """Failure categories surfaced to the user."""

    SESSION_UNAVAILABLE = "session_unavailable"
    ACCOUNT_NOT_READY = "account_not_ready"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    SUBMISSION_FAILED = "submission_failed"


class PaymentError(PasskeyPayError):
    """Base class for failures that terminate a payment attempt.

    `str(error)` is the message shown to the user.
    """

    kind: PaymentErrorKind = PaymentErrorKind.SUBMISSION_FAILED

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SessionUnavailableError(PaymentError):
    """Connect failed or produced no usable wallet address."""

    kind = PaymentErrorKind.SESSION_UNAVAILABLE


class WalletNotConnectedError(SessionUnavailableError):
    """Instructions were requested without a sender address."""

    def __init__(self, message: str = "Wallet not connected") -> None:
        super().__init__(message)


class AccountNotReadyError(PaymentError):
    """A token account needed by the payment does not exist."""

    kind = PaymentErrorKind.ACCOUNT_NOT_READY


class InsufficientFundsError(PaymentError):
    """Submission was rejected for balance reasons."""

    kind = PaymentErrorKind.INSUFFICIENT_FUNDS


class SubmissionFailedError(PaymentError):
    """Any other rejection (compute exhaustion, timeout, signing declined)."""

    kind = PaymentErrorKind.SUBMISSION_FAILED


class PaymentTransitionError(PasskeyPayError):
    """Invalid payment state transition."""

    pass
