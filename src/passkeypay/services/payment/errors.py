"""Map submission failures onto the user-facing error taxonomy."""

import re

from passkeypay.constants.payment import (
    ACCOUNT_NOT_FOUND_MARKERS,
    FEE_TOKENS,
    INSUFFICIENT_FUNDS_MARKER,
    MSG_ACCOUNT_NOT_READY,
    MSG_INSUFFICIENT_FUNDS,
    MSG_PAYMENT_FAILED,
    SPL_INSUFFICIENT_FUNDS_PATTERN,
)
from passkeypay.core.exceptions import (
    AccountNotReadyError,
    InsufficientFundsError,
    PaymentError,
    SubmissionFailedError,
)
from passkeypay.models.payment import AssetKind

_SPL_INSUFFICIENT_FUNDS = re.compile(SPL_INSUFFICIENT_FUNDS_PATTERN)


def classify_submission_error(
    error: BaseException,
    asset_kind: AssetKind = AssetKind.STABLE_TOKEN,
) -> PaymentError:
    """Classify any failure of a payment attempt.

    Known causes get a fixed message; everything else keeps the
    underlying message verbatim.

    Example:
        >>> str(classify_submission_error(Exception("insufficient lamports")))
        'Insufficient USDC balance'
    """
    if isinstance(error, PaymentError):
        return error

    message = str(error)

    if any(marker in message for marker in ACCOUNT_NOT_FOUND_MARKERS):
        return AccountNotReadyError(MSG_ACCOUNT_NOT_READY)

    if INSUFFICIENT_FUNDS_MARKER in message.lower() or _SPL_INSUFFICIENT_FUNDS.search(
        message
    ):
        return InsufficientFundsError(
            MSG_INSUFFICIENT_FUNDS.format(symbol=FEE_TOKENS[asset_kind])
        )

    return SubmissionFailedError(message or MSG_PAYMENT_FAILED)
