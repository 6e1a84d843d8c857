"""
HTTP client for the marketplace API.

Every call goes through one request helper: non-2xx responses become
``ApiError`` carrying the server's ``error`` string (or a per-call fallback),
network and JSON failures become ``ApiError(None, "An unexpected error occurred")``.
No retries.
"""

from typing import Any, Dict, Iterable, Optional

import requests

from marketplace.core.config import get_settings
from marketplace.core.logging import get_logger

logger = get_logger(__name__)

UNEXPECTED_ERROR = "An unexpected error occurred"


class ApiError(Exception):
    """A failed API call. ``status_code`` is None when no response arrived."""

    def __init__(self, status_code: Optional[int], message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def _error_message(response: requests.Response, default: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return default
    if not isinstance(body, dict):
        return default
    if isinstance(body.get("error"), str) and body["error"]:
        return body["error"]
    if isinstance(body.get("detail"), str) and body["detail"]:
        return body["detail"]
    if isinstance(body.get("errors"), list) and body["errors"]:
        return "; ".join(str(e) for e in body["errors"])
    return default


class MarketplaceClient:
    """
    Thin wrapper around the REST API.

    Usage:
        client = MarketplaceClient()
        client.login("ada@example.com", "password123")
        projects = client.list_projects()
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.token = token
        self.timeout = timeout if timeout is not None else settings.request_timeout_seconds
        self.session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def request(self, method: str, path: str, default_error: str = UNEXPECTED_ERROR, **kwargs) -> Any:
        """Send one request and return the decoded JSON body."""
        url = self.base_url + path
        try:
            response = self.session.request(
                method, url, headers=self._headers(), timeout=self.timeout, **kwargs
            )
        except requests.RequestException as exc:
            logger.error("%s %s failed: %s", method, path, exc)
            raise ApiError(None, UNEXPECTED_ERROR) from exc

        if not 200 <= response.status_code < 300:
            message = _error_message(response, default_error)
            logger.error("%s %s returned %s: %s", method, path, response.status_code, message)
            raise ApiError(response.status_code, message)

        try:
            return response.json()
        except ValueError as exc:
            logger.error("%s %s returned a non-JSON body", method, path)
            raise ApiError(None, UNEXPECTED_ERROR) from exc

    # ============================================================
    # AUTH
    # ============================================================

    def register(self, email: str, password: str, name: str, role: str, **profile) -> dict:
        payload = {"email": email, "password": password, "name": name, "role": role, **profile}
        return self.request("POST", "/auth/register", "Failed to create account", json=payload)

    def login(self, email: str, password: str) -> dict:
        data = self.request(
            "POST", "/auth/login", "Invalid email or password", json={"email": email, "password": password}
        )
        self.token = data["access_token"]
        return data

    def me(self) -> dict:
        return self.request("GET", "/auth/me")

    # ============================================================
    # PROJECTS & PICKS
    # ============================================================

    def list_projects(self, client_id: Optional[str] = None) -> list:
        params = {"client_id": client_id} if client_id else None
        return self.request("GET", "/projects", "Failed to fetch projects", params=params)["projects"]

    def create_project(self, **project) -> dict:
        return self.request("POST", "/projects", "Failed to create project", json=project)["project"]

    def apply(self, project_id: str, cover_letter: Optional[str] = None,
              proposed_rate: Optional[float] = None) -> dict:
        payload = {"project_id": project_id, "cover_letter": cover_letter, "proposed_rate": proposed_rate}
        return self.request("POST", "/applications", "Failed to pick project", json=payload)["application"]

    def list_applications(self, **filters) -> list:
        params = {k: v for k, v in filters.items() if v is not None}
        return self.request("GET", "/applications", "Failed to fetch applications", params=params)["applications"]

    def pick(self, application_id: str) -> dict:
        return self.request(
            "POST", "/applications/pick", "Failed to pick project", json={"application_id": application_id}
        )

    def unpick(self, application_id: str) -> dict:
        return self.request(
            "DELETE", "/applications/pick", "Failed to unpick project", params={"application_id": application_id}
        )

    # ============================================================
    # DIRECTORIES
    # ============================================================

    def list_talents(self, search: str = "", experience: Optional[str] = None,
                     skills: Iterable[str] = ()) -> list:
        params = {"search": search}
        if experience:
            params["experience"] = experience
        if skills:
            params["skills"] = ",".join(skills)
        return self.request("GET", "/talents", "Failed to fetch talents", params=params)["talents"]

    def list_agencies(self, search: str = "", industry: Optional[str] = None,
                      company_size: Optional[str] = None) -> list:
        params = {"search": search}
        if industry:
            params["industry"] = industry
        if company_size:
            params["company_size"] = company_size
        return self.request("GET", "/agencies", "Failed to fetch agencies", params=params)["agencies"]

    # ============================================================
    # CONVERSATIONS & MESSAGES
    # ============================================================

    def list_conversations(self, archived: bool = False) -> list:
        return self.request(
            "GET", "/conversations", "Failed to fetch conversations",
            params={"archived": "true" if archived else "false"}
        )

    def start_conversation(self, other_user_id: str, project_id: Optional[str] = None) -> dict:
        return self.request(
            "POST", "/conversations", "Failed to create conversation",
            json={"other_user_id": other_user_id, "project_id": project_id}
        )

    def update_conversation(self, conversation_id: str, action: str) -> dict:
        return self.request(
            "PATCH", f"/conversations/{conversation_id}", "Failed to update conversation", json={"action": action}
        )

    def get_messages(self, conversation_id: str) -> list:
        return self.request(
            "GET", "/messages", "Failed to fetch messages", params={"conversation_id": conversation_id}
        )

    def send_message(self, conversation_id: str, content: str) -> dict:
        return self.request(
            "POST", "/messages", "Failed to send message",
            json={"conversation_id": conversation_id, "content": content}
        )

    def mark_read(self, conversation_id: str) -> dict:
        return self.request(
            "PATCH", "/messages/mark-read", "Failed to mark messages as read",
            json={"conversation_id": conversation_id}
        )

    def unread_message_count(self) -> int:
        return self.request("GET", "/messages/unread-count")["count"]

    # ============================================================
    # NOTIFICATIONS
    # ============================================================

    def list_notifications(self, limit: int = 10, unread_only: bool = False) -> list:
        params = {"limit": limit, "unread_only": "true" if unread_only else "false"}
        return self.request("GET", "/notifications", "Failed to fetch notifications", params=params)["notifications"]

    def mark_notifications_read(self, notification_id: Optional[str] = None, mark_all: bool = False) -> dict:
        payload = {"notification_id": notification_id, "mark_all_as_read": mark_all}
        return self.request("PATCH", "/notifications", "Failed to update notification", json=payload)
