"""Unit tests for payment models."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from passkeypay.models.payment import (
    PAYMENT_TRANSITIONS,
    AssetKind,
    FeeMode,
    PaymentRequest,
    PaymentSnapshot,
    PaymentState,
    ReadinessResult,
)


@pytest.mark.unit
class TestPaymentRequest:
    def test_defaults(self, merchant_address):
        request = PaymentRequest(amount=Decimal("0.1"), recipient=merchant_address)

        assert request.asset_kind == AssetKind.STABLE_TOKEN
        assert request.fee_mode == FeeMode.SPONSORED
        assert request.label is None

    def test_float_amount_keeps_decimal_value(self, merchant_address):
        request = PaymentRequest(amount=0.1, recipient=merchant_address)

        assert request.amount == Decimal("0.1")

    @pytest.mark.parametrize("amount", [0, -1, "-0.5"])
    def test_amount_must_be_positive(self, merchant_address, amount):
        with pytest.raises(ValidationError):
            PaymentRequest(amount=amount, recipient=merchant_address)

    @pytest.mark.parametrize("recipient", ["", "not-an-address", "1111"])
    def test_recipient_must_be_address(self, recipient):
        with pytest.raises(ValidationError):
            PaymentRequest(amount=Decimal("1"), recipient=recipient)

    def test_is_immutable(self, payment_request_factory):
        request = payment_request_factory()

        with pytest.raises(ValidationError):
            request.amount = Decimal("99")

    def test_fee_modes_match_sdk_values(self):
        assert FeeMode.SPONSORED.value == "paymaster"
        assert FeeMode.PAYER_FUNDED.value == "user"


@pytest.mark.unit
class TestPaymentTransitions:
    def test_success_path_is_allowed(self):
        path = [
            PaymentState.IDLE,
            PaymentState.CONNECTING,
            PaymentState.AUTHENTICATING,
            PaymentState.PROCESSING,
            PaymentState.SUCCESS,
            PaymentState.IDLE,
        ]

        for current, following in zip(path, path[1:]):
            assert following in PAYMENT_TRANSITIONS[current]

    @pytest.mark.parametrize(
        "state",
        [PaymentState.CONNECTING, PaymentState.AUTHENTICATING, PaymentState.PROCESSING],
    )
    def test_every_active_state_can_fail(self, state):
        assert PaymentState.ERROR in PAYMENT_TRANSITIONS[state]

    def test_connecting_only_from_idle_or_terminal(self):
        sources = {s for s, targets in PAYMENT_TRANSITIONS.items() if PaymentState.CONNECTING in targets}

        assert sources == {PaymentState.IDLE, PaymentState.SUCCESS, PaymentState.ERROR}


@pytest.mark.unit
class TestPaymentSnapshot:
    def test_can_pay_only_when_idle(self):
        for state in PaymentState:
            assert PaymentSnapshot(state=state).can_pay is (state == PaymentState.IDLE)

    def test_terminal_states(self):
        assert PaymentSnapshot(state=PaymentState.SUCCESS).is_terminal
        assert PaymentSnapshot(state=PaymentState.ERROR).is_terminal
        assert not PaymentSnapshot(state=PaymentState.PROCESSING).is_terminal

    def test_serializes_computed_fields(self):
        data = PaymentSnapshot().model_dump()

        assert data["can_pay"] is True
        assert data["is_terminal"] is False


@pytest.mark.unit
def test_readiness_balance_cannot_be_negative(sender_address):
    with pytest.raises(ValidationError):
        ReadinessResult(wallet_address=sender_address, balance=Decimal("-1"))
