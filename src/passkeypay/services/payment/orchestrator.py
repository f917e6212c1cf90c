"""Payment orchestrator: the state machine from user intent to finality.

States:
    IDLE -> CONNECTING -> AUTHENTICATING -> PROCESSING -> SUCCESS | ERROR

SUCCESS and ERROR return to IDLE after `reset_delay` seconds unless a new
attempt starts first. An attempt is never retried internally: submission
can be ambiguous (accepted but unconfirmed), so another try always needs a
new user action.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Callable
from typing import Any

import structlog

from passkeypay.config.settings import Settings, get_settings
from passkeypay.constants.payment import FEE_TOKENS
from passkeypay.core.exceptions import PaymentError, PaymentTransitionError
from passkeypay.models.payment import (
    PAYMENT_TRANSITIONS,
    AssetKind,
    PaymentRequest,
    PaymentSnapshot,
    PaymentState,
    ReadinessResult,
)
from passkeypay.models.wallet import TransactionRecord, TransactionStatus
from passkeypay.services.history.transactions import TransactionHistory
from passkeypay.services.payment.errors import classify_submission_error
from passkeypay.services.payment.instruction_builder import InstructionBuilder
from passkeypay.services.readiness.checker import ReadinessChecker
from passkeypay.services.session.manager import SessionManager
from passkeypay.services.session.protocol import SignAndSendRequest, TransactionOptions
from passkeypay.utils.formatters import format_address

logger = structlog.get_logger(__name__)

SnapshotListener = Callable[[PaymentSnapshot], None]


class PaymentOrchestrator:
    """Drives one payment attempt at a time for a single UI surface.

    Example:
        orchestrator = PaymentOrchestrator(session_manager, builder, checker)
        snapshot = await orchestrator.pay(
            PaymentRequest(amount=Decimal("0.1"), recipient=merchant)
        )
    """

    def __init__(
        self,
        session_manager: SessionManager,
        builder: InstructionBuilder,
        readiness_checker: ReadinessChecker | None = None,
        history: TransactionHistory | None = None,
        settings: Settings | None = None,
        reset_delay: float | None = None,
        compute_unit_limit: int | None = None,
        on_success: Callable[[str], None] | None = None,
        on_error: Callable[[PaymentError], None] | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._sessions = session_manager
        self._builder = builder
        self._readiness_checker = readiness_checker
        self._history = history
        self.reset_delay = (
            settings.payment_reset_seconds if reset_delay is None else reset_delay
        )
        self.compute_unit_limit = compute_unit_limit or settings.compute_unit_limit
        self._on_success = on_success
        self._on_error = on_error

        self._state = PaymentState.IDLE
        self._signature: str | None = None
        self._error: PaymentError | None = None
        self._readiness: ReadinessResult | None = None
        self._reset_task: asyncio.Task[None] | None = None
        self._listeners: list[SnapshotListener] = []

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def state(self) -> PaymentState:
        return self._state

    @property
    def signature(self) -> str | None:
        return self._signature

    @property
    def error(self) -> str | None:
        return self._error.message if self._error else None

    @property
    def readiness(self) -> ReadinessResult | None:
        """Latest advisory readiness, independent of attempt outcome."""
        return self._readiness

    @property
    def can_pay(self) -> bool:
        return self._state == PaymentState.IDLE

    def snapshot(self) -> PaymentSnapshot:
        return PaymentSnapshot(
            state=self._state,
            signature=self._signature,
            error=self.error,
            error_kind=self._error.kind if self._error else None,
            readiness=self._readiness,
        )

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register a listener called with a snapshot on every change.

        Returns:
            Function removing the listener.
        """
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.error("payment_listener_failed", error=str(e))

    def _transition_to(self, new_state: PaymentState) -> None:
        """Move to `new_state` if the transition table allows it.

        Raises:
            PaymentTransitionError: If the transition is invalid.
        """
        valid_next = PAYMENT_TRANSITIONS.get(self._state, [])
        if new_state not in valid_next:
            raise PaymentTransitionError(
                f"Invalid transition: {self._state.value} -> {new_state.value}. "
                f"Valid transitions: {[s.value for s in valid_next]}"
            )

        logger.debug(
            "payment_state_changed",
            from_state=self._state.value,
            to_state=new_state.value,
        )
        self._state = new_state
        self._notify()

    # ------------------------------------------------------------------
    # Auto reset
    # ------------------------------------------------------------------

    def _cancel_reset(self) -> None:
        if self._reset_task is not None and not self._reset_task.done():
            self._reset_task.cancel()
        self._reset_task = None

    def _schedule_reset(self) -> None:
        self._cancel_reset()
        self._reset_task = asyncio.create_task(self._reset_after_delay())

    async def _reset_after_delay(self) -> None:
        await asyncio.sleep(self.reset_delay)
        self._signature = None
        self._error = None
        self._transition_to(PaymentState.IDLE)
        logger.debug("payment_state_reset")

    async def wait_for_reset(self) -> None:
        """Wait until a pending auto reset has run (no-op if none is pending)."""
        task = self._reset_task
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    # ------------------------------------------------------------------
    # Payment attempt
    # ------------------------------------------------------------------

    async def pay(self, request: PaymentRequest) -> PaymentSnapshot | None:
        """Run one payment attempt to a terminal state.

        Returns:
            The terminal snapshot, or None if an attempt is already in flight.
        """
        if self._state not in (PaymentState.IDLE, PaymentState.SUCCESS, PaymentState.ERROR):
            logger.info("payment_attempt_ignored", state=self._state.value)
            return None

        self._cancel_reset()
        self._error = None
        self._signature = None
        self._transition_to(PaymentState.CONNECTING)

        log = logger.bind(
            asset_kind=request.asset_kind.value,
            amount=str(request.amount),
            recipient=format_address(request.recipient),
        )

        try:
            sender = await self._sessions.connect(request.fee_mode)
            self._transition_to(PaymentState.AUTHENTICATING)

            await self._refresh_readiness(sender)

            instructions = await self._builder.build_instructions(
                sender, request.recipient, request.asset_kind, request.amount
            )
            submission = SignAndSendRequest(
                instructions=instructions.instructions,
                transaction_options=self._transaction_options(request.asset_kind),
            )

            self._transition_to(PaymentState.PROCESSING)
            log.info(
                "payment_submitting",
                instruction_count=len(instructions),
                creates_recipient_account=instructions.creates_recipient_account,
            )
            signature = await self._sessions.session.sign_and_send_transaction(submission)

        except PaymentTransitionError:
            raise
        except Exception as e:
            error = classify_submission_error(e, request.asset_kind)
            log.error(
                "payment_failed",
                error_kind=error.kind.value,
                error=str(e),
                state=self._state.value,
            )
            self._error = error
            self._transition_to(PaymentState.ERROR)
            self._schedule_reset()
            self._run_callback(self._on_error, error)
            return self.snapshot()

        self._signature = signature
        self._transition_to(PaymentState.SUCCESS)
        log.info("payment_succeeded", signature=signature)
        self._record(request, signature)
        self._schedule_reset()
        self._run_callback(self._on_success, signature)
        return self.snapshot()

    def _run_callback(self, callback: Callable[[Any], None] | None, value: Any) -> None:
        """Call an outcome callback; the attempt has already ended either way."""
        if callback is None:
            return
        try:
            callback(value)
        except Exception as e:
            logger.error("payment_callback_failed", error=str(e), state=self._state.value)

    async def _refresh_readiness(self, wallet_address: str) -> None:
        """Advisory readiness; never blocks or fails the attempt."""
        if self._readiness_checker is None:
            return
        try:
            self._readiness = await self._readiness_checker.check_readiness(
                wallet_address
            )
        except Exception as e:
            logger.warning("payment_readiness_unavailable", error=str(e))
            return
        if not self._readiness.sufficient:
            logger.info(
                "payment_readiness_advice",
                advice_code=self._readiness.advice_code.value,
            )
        self._notify()

    def _transaction_options(self, asset_kind: AssetKind) -> TransactionOptions:
        # Static ceiling sized for account creation plus transfer
        return TransactionOptions(
            fee_token=FEE_TOKENS[asset_kind],
            compute_unit_limit=self.compute_unit_limit,
        )

    def _record(self, request: PaymentRequest, signature: str) -> None:
        if self._history is None:
            return
        record = TransactionRecord(
            product=request.label or "Payment",
            amount=request.amount,
            currency=FEE_TOKENS[request.asset_kind],
            signature=signature,
            status=TransactionStatus.COMPLETED,
            merchant_wallet=request.recipient,
        )
        self._history.add(record)

    async def close(self) -> None:
        """Cancel a pending auto reset."""
        task = self._reset_task
        self._cancel_reset()
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task
