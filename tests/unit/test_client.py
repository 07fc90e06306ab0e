"""
Unit Tests - API Client and Session
"""
import json

import httpx
import pytest

from syntera.client import (
    ACKNOWLEDGE_MESSAGE,
    WELCOME_MESSAGE,
    ApiClientError,
    ClientSession,
    NotLoggedInError,
    SessionStore,
    SynteraClient,
)


@pytest.fixture
def session_store(tmp_path) -> SessionStore:
    return SessionStore(tmp_path / "session.json")


@pytest.fixture
async def api(app, session_store):
    async with SynteraClient("http://test", session_store, transport=httpx.ASGITransport(app=app)) as client:
        yield client


class TestSessionLifecycle:
    """Session is created on signup/login, cleared on logout, rehydrated on startup"""

    async def test_signup_creates_and_persists_session(self, api, session_store, consumer_payload):
        session = await api.signup(**consumer_payload)

        assert session.name == "abc"
        assert session.type == "consumer"
        assert session_store.load() == session

    async def test_login_then_rehydrate(self, app, api, session_store, business_payload):
        await api.signup(**business_payload)
        api.logout()
        assert api.session is None
        assert session_store.load() is None

        session = await api.login(business_payload["email"], business_payload["password"])
        assert session.name == "Acme Retail"
        assert session.tracks_sales

        restarted = SynteraClient("http://test", session_store, transport=httpx.ASGITransport(app=app))
        try:
            assert restarted.session == session
        finally:
            await restarted.aclose()

    async def test_failed_login_keeps_no_session(self, api, session_store):
        with pytest.raises(ApiClientError) as exc_info:
            await api.login("ghost@x.com", "nope")

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Invalid credentials"
        assert api.session is None
        assert session_store.load() is None

    async def test_user_calls_require_session(self, api):
        with pytest.raises(NotLoggedInError):
            await api.list_messages()

    def test_corrupt_session_file_is_discarded(self, session_store):
        session_store.path.write_text("{not json", encoding="utf-8")

        assert session_store.load() is None
        assert not session_store.path.exists()

    def test_session_file_round_trip(self, session_store):
        session = ClientSession(user_id="u1", name="abc", type="consumer", email="a@x.com")

        session_store.save(session)

        assert json.loads(session_store.path.read_text(encoding="utf-8"))["user_id"] == "u1"
        assert session_store.load() == session


class TestSupportConversation:
    async def test_open_greets_once(self, api, consumer_payload):
        await api.signup(**consumer_payload)

        first = await api.open_support_conversation()
        second = await api.open_support_conversation()

        assert [m["text"] for m in first] == [WELCOME_MESSAGE]
        assert len(second) == 1

    async def test_send_posts_message_and_acknowledgment(self, api, consumer_payload):
        await api.signup(**consumer_payload)

        await api.send_support_message("Where is my order?")
        history = await api.list_messages()

        assert [(m["sender"], m["text"]) for m in history] == [
            ("agent", ACKNOWLEDGE_MESSAGE),
            ("user", "Where is my order?"),
        ]

    async def test_blank_message_rejected(self, api, consumer_payload):
        await api.signup(**consumer_payload)

        with pytest.raises(ValueError):
            await api.send_support_message("   ")


class TestFeedbackAndSales:
    async def test_feedback_defaults_to_session_email(self, api, consumer_payload):
        await api.signup(**consumer_payload)

        item = await api.submit_feedback("Bug", "complaint", "App crashes")

        assert item["email"] == "a@x.com"
        assert item["status"] == "pending"
        assert len(await api.list_feedback()) == 1

    async def test_sales_round_trip(self, api, business_payload):
        await api.signup(**business_payload)
        assert await api.latest_sales() is None

        await api.record_sales(revenue=12_450_00, conversions=145, avg_order_value=85_86)

        latest = await api.latest_sales()
        assert latest["conversions"] == 145
        assert [r["id"] for r in await api.list_sales()] == [latest["id"]]

    async def test_validation_error_message_is_field_list(self, api, business_payload):
        await api.signup(**business_payload)

        with pytest.raises(ApiClientError) as exc_info:
            await api.record_sales(revenue="lots", conversions=1, avg_order_value=1)

        assert exc_info.value.status_code == 400
        assert isinstance(exc_info.value.message, list)
