"""Test data factories using factory_boy.

These factories generate realistic test data for Passkey Pay models.
"""

from tests.factories.payment import (
    PaymentRequestFactory,
    TransactionRecordFactory,
    generate_solana_address,
)

__all__ = [
    "PaymentRequestFactory",
    "TransactionRecordFactory",
    "generate_solana_address",
]
