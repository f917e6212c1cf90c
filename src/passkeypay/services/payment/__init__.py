"""Payment instruction building, error classification and orchestration."""

from passkeypay.services.payment.errors import classify_submission_error
from passkeypay.services.payment.instruction_builder import (
    InstructionBuilder,
    InstructionSet,
)
from passkeypay.services.payment.orchestrator import PaymentOrchestrator

__all__ = [
    "InstructionBuilder",
    "InstructionSet",
    "PaymentOrchestrator",
    "classify_submission_error",
]
