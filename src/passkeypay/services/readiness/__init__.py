"""Wallet readiness for stable-token payments."""

from passkeypay.services.readiness.checker import ReadinessChecker
from passkeypay.services.readiness.guidance import (
    get_manual_funding_instructions,
    get_status_message,
)

__all__ = [
    "ReadinessChecker",
    "get_manual_funding_instructions",
    "get_status_message",
]
