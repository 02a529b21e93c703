"""
Brief Service Client for BriefDesk
Talks to the brief generation service over its REST API.

Endpoints used:
- POST   /brief              generate a creative brief for a brand description
- POST   /chat               continue the conversation about a brief
- GET    /prompt-templates   prompt chips grouped by category
- POST   /sessions/save      persist a session snapshot
- GET    /sessions           list stored sessions
- GET    /sessions/{id}      load one session
- DELETE /sessions/{id}      delete one session

Every failure surfaces as RuntimeError with an actionable message; callers
(workers, BriefSession) decide what the user sees.
"""

from dataclasses import dataclass
from typing import Any

import requests

from briefdesk.config import (
    BRIEF_API_BASE,
    BRIEF_TIMEOUT_SECONDS,
    CHAT_TIMEOUT_SECONDS,
    SESSION_TIMEOUT_SECONDS,
)
from briefdesk.logging_config import debug_log

PROMPT_CATEGORIES = ("deeper", "challenge", "iterate", "execution", "strategy", "audience")


@dataclass
class BriefResponse:
    """Result of POST /brief."""
    brand_description: str
    creative_brief: str
    memories_used: int = 0


class BriefServiceClient:
    """
    Client for the brief generation service.

    Example:
        client = BriefServiceClient()
        brief = client.generate_brief("A sustainable sneaker brand for Gen Z")
        reply = client.send_chat(brief.brand_description, brief.creative_brief,
                                 messages, "Push the tone further")
    """

    def __init__(self, api_base: str = BRIEF_API_BASE, session: requests.Session | None = None):
        """
        Initialize the client.

        Args:
            api_base: Base URL of the service (no trailing slash needed)
            session: Optional requests.Session (connection reuse, tests)
        """
        self.api_base = api_base.rstrip("/")
        self.http = session or requests.Session()

    def _request(self, method: str, path: str, timeout: float, **kwargs) -> Any:
        """
        Perform one request and decode its JSON body.

        Raises:
            RuntimeError: On timeout, connection failure, non-200 status or
                a body that is not JSON
        """
        url = f"{self.api_base}{path}"
        debug_log(f"[SERVICE] {method} {path}")
        try:
            response = self.http.request(method, url, timeout=timeout, **kwargs)
        except requests.exceptions.Timeout as e:
            raise RuntimeError(
                f"The brief service did not answer within {timeout} seconds. "
                "Try again, or raise the timeout in config."
            ) from e
        except requests.exceptions.ConnectionError as e:
            raise RuntimeError(
                f"Cannot connect to the brief service at {self.api_base}. "
                "Check the backend is running (BRIEFDESK_API_URL)."
            ) from e

        if response.status_code != 200:
            debug_log(f"[SERVICE] {method} {path} failed: status {response.status_code}")
            raise RuntimeError(f"Brief service returned status {response.status_code}: {response.text}")

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise RuntimeError(f"Brief service returned invalid JSON for {path}") from e

    def is_available(self) -> bool:
        """Check whether the service answers at all."""
        try:
            self._request("GET", "/prompt-templates", timeout=5)
            return True
        except RuntimeError as e:
            debug_log(f"[SERVICE] Brief service unavailable: {e}")
            return False

    # =========================================================================
    # Generation
    # =========================================================================

    def generate_brief(self, brand_description: str) -> BriefResponse:
        """
        Generate a creative brief.

        Args:
            brand_description: Free-text brand description

        Returns:
            BriefResponse whose creative_brief uses "## " section markers.

        Raises:
            RuntimeError: If the service is unreachable or fails
        """
        debug_log(f"[SERVICE] Generating brief for {len(brand_description)} char description")
        data = self._request(
            "POST", "/brief", timeout=BRIEF_TIMEOUT_SECONDS,
            json={"brand_description": brand_description},
        ) or {}
        result = BriefResponse(
            brand_description=data.get("brand_description", brand_description),
            creative_brief=data.get("creative_brief", ""),
            memories_used=int(data.get("memories_used", 0) or 0),
        )
        debug_log(f"[SERVICE] Brief received: {len(result.creative_brief)} chars, "
                  f"{result.memories_used} memories used")
        return result

    def send_chat(
        self,
        brand_description: str,
        creative_brief: str,
        messages: list[dict],
        user_message: str,
    ) -> str:
        """
        Send one chat turn.

        Args:
            brand_description: Brand the brief was generated for
            creative_brief: Full brief text
            messages: Conversation so far as {"role", "content"} dicts,
                including the new user message
            user_message: The new user message

        Returns:
            The assistant reply text (may end with a "## SOURCES" block).

        Raises:
            RuntimeError: If the service is unreachable or fails
        """
        data = self._request(
            "POST", "/chat", timeout=CHAT_TIMEOUT_SECONDS,
            json={
                "brand_description": brand_description,
                "creative_brief": creative_brief,
                "messages": messages,
                "user_message": user_message,
            },
        ) or {}
        reply = data.get("response", "")
        debug_log(f"[SERVICE] Chat reply: {len(reply)} chars")
        return reply

    def get_prompt_templates(self) -> dict[str, list[str]]:
        """
        Fetch prompt chips grouped by category.

        Raises:
            RuntimeError: If the service is unreachable or fails
        """
        data = self._request("GET", "/prompt-templates", timeout=SESSION_TIMEOUT_SECONDS) or {}
        return {
            category: [str(prompt) for prompt in data.get(category) or []]
            for category in PROMPT_CATEGORIES
            if data.get(category)
        }

    # =========================================================================
    # Sessions
    # =========================================================================

    def save_session(self, payload: dict) -> None:
        self._request("POST", "/sessions/save", timeout=SESSION_TIMEOUT_SECONDS, json=payload)

    def list_sessions(self) -> list[dict]:
        return self._request("GET", "/sessions", timeout=SESSION_TIMEOUT_SECONDS) or []

    def get_session(self, session_id: str) -> dict:
        data = self._request("GET", f"/sessions/{session_id}", timeout=SESSION_TIMEOUT_SECONDS)
        if not data:
            raise RuntimeError(f"Brief service returned no data for session {session_id}")
        return data

    def delete_session(self, session_id: str) -> None:
        self._request("DELETE", f"/sessions/{session_id}", timeout=SESSION_TIMEOUT_SECONDS)
