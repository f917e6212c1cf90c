"""Unit tests for session restore, connect and disconnect."""

import pytest

from passkeypay.core.exceptions import SessionUnavailableError
from passkeypay.models.payment import FeeMode
from passkeypay.services.readiness.checker import ReadinessChecker
from passkeypay.services.session.manager import SessionManager
from passkeypay.services.session.protocol import PasskeySession
from tests.support.fake_session import FakePasskeySession


@pytest.fixture
def checker(mock_rpc, checked_wallets, settings) -> ReadinessChecker:
    return ReadinessChecker(mock_rpc, checked_wallets, settings)


@pytest.mark.unit
class TestRestore:
    """Silent reconnect at startup."""

    async def test_reconnects_when_hinted(self, disconnected_session, session_hint):
        session_hint.set()
        manager = SessionManager(disconnected_session, session_hint)

        assert await manager.restore() is True
        assert disconnected_session.connect_calls == [FeeMode.SPONSORED]
        assert session_hint.is_set()

    async def test_no_hint_no_connect(self, disconnected_session, session_hint):
        manager = SessionManager(disconnected_session, session_hint)

        assert await manager.restore() is False
        assert disconnected_session.connect_calls == []

    async def test_failure_clears_hint(self, session_hint):
        session_hint.set()
        session = FakePasskeySession(connect_error=RuntimeError("credential revoked"))
        manager = SessionManager(session, session_hint)

        assert await manager.restore() is False
        assert not session_hint.is_set()

    async def test_already_connected_is_not_reconnected(self, fake_session, session_hint):
        session_hint.set()
        manager = SessionManager(fake_session, session_hint)

        assert await manager.restore() is True
        assert fake_session.connect_calls == []


@pytest.mark.unit
class TestConnect:
    async def test_returns_address_and_sets_hint(
        self, disconnected_session, session_hint, sender_address
    ):
        manager = SessionManager(disconnected_session, session_hint)

        address = await manager.connect(FeeMode.PAYER_FUNDED)

        assert address == sender_address
        assert disconnected_session.connect_calls == [FeeMode.PAYER_FUNDED]
        assert session_hint.is_set()
        assert manager.is_active

    async def test_failure_is_session_unavailable(self, session_hint):
        manager = SessionManager(
            FakePasskeySession(connect_error=RuntimeError("timeout")), session_hint
        )

        with pytest.raises(SessionUnavailableError, match="timeout"):
            await manager.connect()

    async def test_connected_without_address(self, session_hint):
        manager = SessionManager(FakePasskeySession(address_on_connect=None), session_hint)

        with pytest.raises(SessionUnavailableError, match="Wallet connection failed"):
            await manager.connect()
        assert not session_hint.is_set()


@pytest.mark.unit
class TestDisconnect:
    async def test_clears_hint_and_forgets_wallet(
        self, fake_session, session_hint, checker, mock_rpc, sender_address
    ):
        manager = SessionManager(fake_session, session_hint, checker)
        await manager.connect()
        await checker.check_readiness(sender_address)

        await manager.disconnect()
        await checker.check_readiness(sender_address)

        assert fake_session.disconnect_calls == 1
        assert not session_hint.is_set()
        assert not manager.is_active
        assert mock_rpc.get_account.await_count == 2

    async def test_sync_follows_sdk_state(self, fake_session, session_hint):
        manager = SessionManager(fake_session, session_hint)

        manager.sync()
        assert session_hint.is_set()

        await fake_session.disconnect()
        manager.sync()
        assert not session_hint.is_set()


@pytest.mark.unit
def test_fake_session_satisfies_protocol(fake_session):
    assert isinstance(fake_session, PasskeySession)
