"""
Syntera API Client

Async client for the HTTP API plus the client-side session.

The session is an explicit object owned by the caller: created by a
successful ``login``/``signup``, destroyed by ``logout`` and rehydrated from
its JSON file at startup with ``SessionStore.load()``.

Example:
    sessions = SessionStore(Path("~/.syntera/session.json").expanduser())
    async with SynteraClient("http://localhost:5000", sessions) as client:
        if client.session is None:
            await client.login("a@x.com", "12345678")
        await client.open_support_conversation()
        await client.send_support_message("My order is late")
"""

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx
import structlog

logger = structlog.get_logger(__name__)

WELCOME_MESSAGE = "Hello! Welcome to Syntera 24/7 Support. How can I help you today?"
ACKNOWLEDGE_MESSAGE = (
    "Thank you for your message. An agent is reviewing your request and will reply shortly."
)


class ApiClientError(Exception):
    """Non-2xx response; ``message`` is the server's error value verbatim."""

    def __init__(self, status_code: int, message: Any):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class NotLoggedInError(Exception):
    """A user-scoped call was made without a session."""


@dataclass
class ClientSession:
    """The logged-in user as the client keeps it"""
    user_id: str
    name: str
    type: str
    email: Optional[str] = None
    category: Optional[str] = None

    @classmethod
    def from_user(cls, user: Dict[str, Any]) -> "ClientSession":
        return cls(
            user_id=user["id"],
            name=user.get("username") or user.get("businessName") or "User",
            type=user["type"],
            email=user.get("email"),
            category=user.get("category"),
        )

    @property
    def is_business(self) -> bool:
        return self.type == "business"

    @property
    def tracks_sales(self) -> bool:
        return self.is_business and self.category == "Sales"


class SessionStore:
    """Persists one ClientSession as a JSON file."""

    def __init__(self, path: Path):
        self.path = path

    def load(self) -> Optional[ClientSession]:
        if not self.path.exists():
            return None
        try:
            return ClientSession(**json.loads(self.path.read_text(encoding="utf-8")))
        except (ValueError, TypeError) as e:
            logger.warning("Discarding unreadable session file", path=str(self.path), error=str(e))
            self.clear()
            return None

    def save(self, session: ClientSession) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(asdict(session)), encoding="utf-8")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class SynteraClient:
    """
    Async HTTP client for the Syntera API.

    Args:
        base_url: API origin, e.g. ``http://localhost:5000``
        session_store: Where the session is persisted; ``None`` keeps it in memory
        transport: Optional httpx transport (``httpx.ASGITransport`` in tests)
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        base_url: str,
        session_store: Optional[SessionStore] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)
        self._store = session_store
        self.session: Optional[ClientSession] = session_store.load() if session_store else None

    async def __aenter__(self) -> "SynteraClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        response = await self._http.request(method, path, json=payload)
        if response.is_error:
            try:
                message = response.json().get("error", response.text)
            except ValueError:
                message = response.text
            raise ApiClientError(response.status_code, message)
        return response.json()

    def _require_session(self) -> ClientSession:
        if self.session is None:
            raise NotLoggedInError("Log in or sign up first")
        return self.session

    def _start_session(self, user: Dict[str, Any]) -> ClientSession:
        self.session = ClientSession.from_user(user)
        if self._store:
            self._store.save(self.session)
        return self.session

    # -------------------------------------------------------------------------
    # auth
    # -------------------------------------------------------------------------

    async def signup(self, **fields: Any) -> ClientSession:
        """Register; fields use the wire names (``businessName``, ``uniqueCode``...)."""
        user = await self._request("POST", "/api/auth/signup", fields)
        return self._start_session(user)

    async def login(self, email: str, password: str) -> ClientSession:
        user = await self._request("POST", "/api/auth/login", {"email": email, "password": password})
        return self._start_session(user)

    def logout(self) -> None:
        self.session = None
        if self._store:
            self._store.clear()

    # -------------------------------------------------------------------------
    # messages
    # -------------------------------------------------------------------------

    async def list_messages(self) -> List[Dict[str, Any]]:
        session = self._require_session()
        return await self._request("GET", f"/api/messages/{session.user_id}")

    async def post_message(self, text: str, sender: str = "user") -> Dict[str, Any]:
        session = self._require_session()
        return await self._request(
            "POST", "/api/messages", {"userId": session.user_id, "text": text, "sender": sender}
        )

    async def open_support_conversation(self) -> List[Dict[str, Any]]:
        """History, after greeting the user if the conversation is empty."""
        messages = await self.list_messages()
        if not messages:
            await self.post_message(WELCOME_MESSAGE, sender="agent")
            messages = await self.list_messages()
        return messages

    async def send_support_message(self, text: str) -> List[Dict[str, Any]]:
        """Post the user's message followed by the agent acknowledgment."""
        if not text.strip():
            raise ValueError("Message text is empty")
        sent = await self.post_message(text, sender="user")
        ack = await self.post_message(ACKNOWLEDGE_MESSAGE, sender="agent")
        return [sent, ack]

    # -------------------------------------------------------------------------
    # feedback
    # -------------------------------------------------------------------------

    async def submit_feedback(self, subject: str, type: str, message: str, email: Optional[str] = None) -> Dict[str, Any]:
        session = self._require_session()
        return await self._request("POST", "/api/feedback", {
            "userId": session.user_id,
            "subject": subject,
            "type": type,
            "message": message,
            "email": email or session.email,
        })

    async def list_feedback(self) -> List[Dict[str, Any]]:
        session = self._require_session()
        return await self._request("GET", f"/api/feedback/{session.user_id}")

    # -------------------------------------------------------------------------
    # sales
    # -------------------------------------------------------------------------

    async def list_sales(self) -> List[Dict[str, Any]]:
        session = self._require_session()
        return await self._request("GET", f"/api/sales/{session.user_id}")

    async def latest_sales(self) -> Optional[Dict[str, Any]]:
        session = self._require_session()
        return await self._request("GET", f"/api/sales/{session.user_id}/latest")

    async def record_sales(self, revenue: int, conversions: int, avg_order_value: int) -> Dict[str, Any]:
        session = self._require_session()
        return await self._request("POST", "/api/sales", {
            "businessId": session.user_id,
            "revenue": revenue,
            "conversions": conversions,
            "avgOrderValue": avg_order_value,
        })
