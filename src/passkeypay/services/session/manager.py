"""Session restore, connect and disconnect around the passkey SDK."""

from __future__ import annotations

import structlog

from passkeypay.constants.payment import MSG_SESSION_UNAVAILABLE
from passkeypay.core.exceptions import SessionUnavailableError
from passkeypay.models.payment import FeeMode
from passkeypay.services.readiness.checker import ReadinessChecker
from passkeypay.services.session.protocol import PasskeySession
from passkeypay.services.storage.flags import SessionHint

logger = structlog.get_logger(__name__)


class SessionManager:
    """Keeps the session-presence hint in step with the SDK.

    The hint only says "try a silent reconnect"; it never stands in for a
    valid session.
    """

    def __init__(
        self,
        session: PasskeySession,
        hint: SessionHint,
        readiness_checker: ReadinessChecker | None = None,
    ) -> None:
        self._session = session
        self._hint = hint
        self._readiness = readiness_checker

    @property
    def session(self) -> PasskeySession:
        return self._session

    @property
    def is_active(self) -> bool:
        """Connected with a usable wallet address."""
        return self._session.is_connected and self._session.wallet_address is not None

    async def connect(self, fee_mode: FeeMode = FeeMode.SPONSORED) -> str:
        """Connect (or reuse the current session) and return the wallet address.

        Raises:
            SessionUnavailableError: If connect fails or yields no address.
        """
        if not self.is_active:
            try:
                await self._session.connect(fee_mode)
            except Exception as e:
                logger.warning("session_connect_failed", error=str(e))
                raise SessionUnavailableError(str(e) or MSG_SESSION_UNAVAILABLE) from e

        address = self._session.wallet_address
        if address is None:
            logger.warning("session_connected_without_address")
            raise SessionUnavailableError(MSG_SESSION_UNAVAILABLE)

        self.sync()
        return address

    async def restore(self) -> bool:
        """Attempt one silent reconnect if a previous session is hinted.

        Returns:
            True if a session is active afterwards.
        """
        if not self._hint.is_set() or self._session.is_connected:
            return self.is_active

        logger.info("session_restore_attempt")
        try:
            await self._session.connect(FeeMode.SPONSORED)
        except Exception as e:
            # Drop the hint so the next start does not retry
            logger.info("session_restore_failed", error=str(e))
            self._hint.clear()
            return False

        logger.info("session_restored")
        self.sync()
        return self.is_active

    def sync(self) -> None:
        """Mirror the SDK's reactive state into the hint."""
        if self.is_active:
            self._hint.set()
        else:
            self._hint.clear()

    async def disconnect(self) -> None:
        """Disconnect the SDK and forget everything cached for the wallet."""
        address = self._session.wallet_address
        await self._session.disconnect()
        self._hint.clear()
        if address and self._readiness is not None:
            self._readiness.forget(address)
        logger.info("session_disconnected")
