"""
HTTP client the UI uses to reach the chat API server (POST /api/chat).
"""

from typing import Dict, List, Optional, Sequence

import httpx

from config.app_config import ClientConfig, get_config
from services.chat_service.models import Message
from utils.logging_config import get_logger


class ChatAPIError(Exception):
    """Base class for failures talking to the chat API server"""
    pass


class ChatAPITimeoutError(ChatAPIError):
    """The chat API did not answer within the client timeout"""
    pass


class ChatAPIConnectionError(ChatAPIError):
    """The chat API could not be reached"""
    pass


class ChatAPIResponseError(ChatAPIError):
    """The chat API answered with an error status or an unusable body"""

    def __init__(self, message: str, status: Optional[int] = None, error: Optional[str] = None):
        self.status = status
        self.error = error
        super().__init__(message)


class ChatAPIClient:
    """
    Sends a conversation history to the chat API and returns the assistant reply.

    Pass an existing httpx.Client (for instance a FastAPI TestClient) to
    reuse its connection pool or transport; otherwise one is created on
    first use.
    """

    def __init__(self, client_config: Optional[ClientConfig] = None, http_client: Optional[httpx.Client] = None):
        self.logger = get_logger(__name__)
        self.client_config = client_config or get_config().client
        self._http_client = http_client

    @property
    def http_client(self) -> httpx.Client:
        if self._http_client is None:
            self._http_client = httpx.Client(timeout=self.client_config.timeout)
        return self._http_client

    def fetch_reply(self, messages: Sequence[Dict[str, str]]) -> Message:
        """
        Post the full history and return the assistant message

        Args:
            messages: Role/content pairs, oldest first

        Returns:
            Message: Assistant reply

        Raises:
            ChatAPIError: on timeout, transport failure, error status or bad body
        """
        payload: Dict[str, List[Dict[str, str]]] = {"messages": list(messages)}

        try:
            response = self.http_client.post(
                self.client_config.chat_api_url,
                json=payload,
                timeout=self.client_config.timeout
            )
        except httpx.TimeoutException as e:
            raise ChatAPITimeoutError(f"Chat API timed out after {self.client_config.timeout:.0f}s") from e
        except httpx.HTTPError as e:
            raise ChatAPIConnectionError(f"Could not reach chat API: {e}") from e

        if not response.is_success:
            raise ChatAPIResponseError(
                f"API call failed with status {response.status_code}",
                status=response.status_code,
                error=self._error_text(response)
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ChatAPIResponseError("Chat API returned a non-JSON body", status=response.status_code) from e

        reply = data.get("response") if isinstance(data, dict) else None
        if not isinstance(reply, str) or not reply:
            raise ChatAPIResponseError("No response from chat API", status=response.status_code)

        return Message.assistant(reply)

    @staticmethod
    def _error_text(response: httpx.Response) -> Optional[str]:
        try:
            data = response.json()
        except ValueError:
            return response.text or None
        if isinstance(data, dict):
            return data.get("error")
        return None

    def close(self) -> None:
        if self._http_client is not None:
            self._http_client.close()
