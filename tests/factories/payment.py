"""Factories for payment requests and transaction records."""

from decimal import Decimal

import factory
from faker import Faker
from solders.keypair import Keypair

from passkeypay.models.payment import AssetKind, FeeMode, PaymentRequest
from passkeypay.models.wallet import TransactionRecord, TransactionStatus

fake = Faker()


def generate_solana_address() -> str:
    """Generate a valid Solana address (32-byte ed25519 public key)."""
    return str(Keypair().pubkey())


def generate_signature() -> str:
    """Generate a valid base58 transaction signature."""
    return str(Keypair().sign_message(fake.binary(length=32)))


class PaymentRequestFactory(factory.Factory):
    """Factory for PaymentRequest.

    Usage:
        request = PaymentRequestFactory()
        sol = PaymentRequestFactory(asset_kind=AssetKind.NATIVE)
    """

    class Meta:
        model = PaymentRequest

    amount = factory.LazyFunction(
        lambda: Decimal(str(fake.pyfloat(min_value=0.01, max_value=50, right_digits=2)))
    )
    asset_kind = AssetKind.STABLE_TOKEN
    recipient = factory.LazyFunction(generate_solana_address)
    fee_mode = FeeMode.SPONSORED
    label = factory.LazyFunction(lambda: fake.catch_phrase())


class TransactionRecordFactory(factory.Factory):
    """Factory for TransactionRecord."""

    class Meta:
        model = TransactionRecord

    product = factory.LazyFunction(lambda: fake.catch_phrase())
    amount = factory.LazyFunction(
        lambda: Decimal(str(fake.pyfloat(min_value=0.01, max_value=50, right_digits=2)))
    )
    currency = "USDC"
    signature = factory.LazyFunction(generate_signature)
    status = TransactionStatus.COMPLETED
    merchant_wallet = factory.LazyFunction(generate_solana_address)
