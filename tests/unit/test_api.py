"""
Unit Tests - HTTP API
"""
from datetime import datetime, timedelta

import pytest
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from syntera.database.connection import get_db_dependency
from syntera.database.results import Ok
from syntera.database.store import RecordStore
from syntera.serving.api.dependencies import get_record_store


class StaleLookupStore(RecordStore):
    """Duplicate checks see no user, as when a concurrent signup commits first"""

    async def get_user_by_email(self, email):
        return Ok(None)

    async def get_user_by_username(self, username):
        return Ok(None)


async def stale_lookup_store(db: AsyncSession = Depends(get_db_dependency)) -> RecordStore:
    return StaleLookupStore(db)


async def signup(client, payload):
    return await client.post("/api/auth/signup", json=payload)


class TestSignup:
    """Tests for POST /api/auth/signup"""

    async def test_signup_returns_user_without_password(self, client, consumer_payload):
        response = await signup(client, consumer_payload)

        assert response.status_code == 200
        body = response.json()
        assert body["id"]
        assert body["email"] == "a@x.com"
        assert body["uniqueCode"] == "ABCD"
        assert "createdAt" in body
        assert "password" not in body

    async def test_business_signup(self, client, business_payload):
        response = await signup(client, business_payload)

        assert response.status_code == 200
        body = response.json()
        assert body["type"] == "business"
        assert body["businessName"] == "Acme Retail"
        assert body["username"] is None

    async def test_duplicate_email_is_conflict(self, client, consumer_payload):
        await signup(client, consumer_payload)

        response = await signup(client, {**consumer_payload, "username": "different", "type": "business"})

        assert response.status_code == 400
        assert response.json() == {"error": "User already exists with this email"}

    async def test_duplicate_username_is_conflict(self, client, consumer_payload):
        await signup(client, consumer_payload)

        response = await signup(client, {**consumer_payload, "email": "other@x.com"})

        assert response.status_code == 400
        assert response.json() == {"error": "Username already taken"}

    @pytest.mark.parametrize("change", [{"username": "different"}, {"email": "other@x.com"}])
    async def test_insert_conflict_after_prechecks_is_400(self, app, client, consumer_payload, change):
        await signup(client, consumer_payload)
        app.dependency_overrides[get_record_store] = stale_lookup_store

        response = await signup(client, {**consumer_payload, **change})

        assert response.status_code == 400
        assert response.json() == {"error": "User already exists with this email or username"}

    async def test_blank_username_is_treated_as_absent(self, client, business_payload):
        first = await signup(client, {**business_payload, "username": ""})
        second = await signup(client, {**business_payload, "email": "b2@acme.example", "username": ""})

        assert first.status_code == 200
        assert second.status_code == 200
        assert second.json()["username"] is None

    @pytest.mark.parametrize("missing", ["email", "password", "type"])
    async def test_missing_required_field_is_validation_error(self, client, consumer_payload, missing):
        payload = {k: v for k, v in consumer_payload.items() if k != missing}

        response = await signup(client, payload)

        assert response.status_code == 400
        errors = response.json()["error"]
        assert isinstance(errors, list)
        assert any(missing in err["loc"] for err in errors)

    async def test_unknown_user_type_is_validation_error(self, client, consumer_payload):
        response = await signup(client, {**consumer_payload, "type": "admin"})

        assert response.status_code == 400


class TestLogin:
    """Tests for POST /api/auth/login"""

    async def test_login_returns_matching_user(self, client, consumer_payload):
        created = (await signup(client, consumer_payload)).json()

        response = await client.post("/api/auth/login", json={"email": "a@x.com", "password": "12345678"})

        assert response.status_code == 200
        assert response.json()["id"] == created["id"]
        assert "password" not in response.json()

    async def test_wrong_password_is_unauthorized(self, client, consumer_payload):
        await signup(client, consumer_payload)

        response = await client.post("/api/auth/login", json={"email": "a@x.com", "password": "wrong"})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid credentials"}

    async def test_unknown_email_is_unauthorized(self, client):
        response = await client.post("/api/auth/login", json={"email": "ghost@x.com", "password": "x"})

        assert response.status_code == 401

    async def test_missing_fields_are_unauthorized(self, client):
        response = await client.post("/api/auth/login", json={})

        assert response.status_code == 401

    async def test_missing_body_is_unauthorized(self, client):
        response = await client.post("/api/auth/login")

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid credentials"}


class TestMessages:
    """Tests for /api/messages"""

    async def test_post_then_list(self, client, consumer_payload):
        user = (await signup(client, consumer_payload)).json()

        posted = await client.post("/api/messages", json={"userId": user["id"], "text": "hi", "sender": "user"})

        assert posted.status_code == 200
        message = posted.json()
        assert isinstance(message["id"], int)
        assert message["sender"] == "user"

        listed = await client.get(f"/api/messages/{user['id']}")
        assert listed.status_code == 200
        assert [m["id"] for m in listed.json()] == [message["id"]]

    async def test_list_newest_first(self, client):
        for text in ("first", "second", "third"):
            await client.post("/api/messages", json={"userId": "u1", "text": text, "sender": "agent"})

        listed = (await client.get("/api/messages/u1")).json()

        assert [m["text"] for m in listed] == ["third", "second", "first"]
        stamps = [m["createdAt"] for m in listed]
        assert stamps == sorted(stamps, reverse=True)

    async def test_created_at_carries_utc_offset(self, client):
        posted = (await client.post("/api/messages", json={"userId": "u1", "text": "hi", "sender": "user"})).json()

        created_at = datetime.fromisoformat(posted["createdAt"].replace("Z", "+00:00"))

        assert created_at.tzinfo is not None
        assert created_at.utcoffset() == timedelta(0)

    async def test_empty_history(self, client):
        response = await client.get("/api/messages/nobody")

        assert response.status_code == 200
        assert response.json() == []

    async def test_invalid_sender_is_validation_error(self, client):
        response = await client.post("/api/messages", json={"userId": "u1", "text": "hi", "sender": "bot"})

        assert response.status_code == 400
        assert isinstance(response.json()["error"], list)

    async def test_store_fault_is_500(self, broken_client):
        response = await broken_client.get("/api/messages/u1")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch messages"}


class TestFeedback:
    """Tests for /api/feedback"""

    async def test_client_status_is_ignored(self, client):
        response = await client.post("/api/feedback", json={
            "userId": "u1",
            "subject": "Idea",
            "type": "suggestion",
            "message": "Dark mode please",
            "email": "a@x.com",
            "status": "resolved",
        })

        assert response.status_code == 200
        assert response.json()["status"] == "pending"

        listed = (await client.get("/api/feedback/u1")).json()
        assert [f["status"] for f in listed] == ["pending"]

    async def test_invalid_type_is_validation_error(self, client):
        response = await client.post("/api/feedback", json={
            "userId": "u1",
            "subject": "Idea",
            "type": "praise",
            "message": "m",
            "email": "a@x.com",
        })

        assert response.status_code == 400


class TestSales:
    """Tests for /api/sales"""

    async def test_latest_is_null_without_records(self, client):
        response = await client.get("/api/sales/biz/latest")

        assert response.status_code == 200
        assert response.json() is None

    async def test_create_list_and_latest(self, client):
        for revenue in (1_000, 2_000):
            created = await client.post("/api/sales", json={
                "businessId": "biz",
                "revenue": revenue,
                "conversions": 3,
                "avgOrderValue": 500,
            })
            assert created.status_code == 200

        listed = (await client.get("/api/sales/biz")).json()
        latest = (await client.get("/api/sales/biz/latest")).json()

        assert [r["revenue"] for r in listed] == [2_000, 1_000]
        assert latest["revenue"] == 2_000
        assert latest["avgOrderValue"] == 500
        assert "date" in latest

    async def test_revenue_beyond_integer_column_is_validation_error(self, client):
        response = await client.post("/api/sales", json={
            "businessId": "biz",
            "revenue": 2**31,
            "conversions": 3,
            "avgOrderValue": 500,
        })

        assert response.status_code == 400
        assert any("revenue" in err["loc"] for err in response.json()["error"])

    async def test_non_integer_revenue_is_validation_error(self, client):
        response = await client.post("/api/sales", json={
            "businessId": "biz",
            "revenue": "lots",
            "conversions": 3,
            "avgOrderValue": 500,
        })

        assert response.status_code == 400


class TestScenario:
    """Signup, duplicate signup, message round trip"""

    async def test_end_to_end(self, client):
        payload = {"email": "a@x.com", "password": "p", "type": "consumer", "username": "abc"}

        first = await signup(client, payload)
        assert first.status_code == 200
        user = first.json()
        assert user["id"] and "password" not in user

        again = await signup(client, payload)
        assert again.status_code == 400

        message = await client.post("/api/messages", json={"userId": user["id"], "text": "hi", "sender": "user"})
        assert message.status_code == 200

        history = (await client.get(f"/api/messages/{user['id']}")).json()
        assert message.json() in history


class TestHealth:
    async def test_health_reports_database(self, client):
        # The module-level pool is not opened in tests
        response = await client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert "database" in response.json()["checks"]

    async def test_liveness(self, client):
        response = await client.get("/api/health/live")

        assert response.json() == {"status": "alive"}

    async def test_request_id_header(self, client):
        response = await client.get("/api/info", headers={"X-Request-ID": "req-1"})

        assert response.headers["X-Request-ID"] == "req-1"
        assert response.json()["version"]
