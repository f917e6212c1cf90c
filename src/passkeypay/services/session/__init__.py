"""Passkey session interface and lifecycle helpers."""

from passkeypay.services.session.manager import SessionManager
from passkeypay.services.session.protocol import (
    PasskeySession,
    SessionConfig,
    SessionFactory,
    SignAndSendRequest,
    TransactionOptions,
)

__all__ = [
    "PasskeySession",
    "SessionConfig",
    "SessionFactory",
    "SessionManager",
    "SignAndSendRequest",
    "TransactionOptions",
]
