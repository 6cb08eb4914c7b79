"""
Conversation manager service - the send path between the UI, the session store and the chat API.
"""

from typing import Optional

from config.app_config import get_config
from services.chat_service.chat_api_client import ChatAPIClient, ChatAPIError
from services.chat_service.models import Message
from services.chat_service.session_store import SessionStore
from utils.logging_config import get_error_tracker, get_logger


class ConversationManager:
    """
    Service for sending user turns and recording replies.

    Each send holds the conversation's pending flag for the whole round
    trip, so the history given to the server always ends with the newest
    user message and replies land in send order.
    """

    def __init__(
        self,
        store: SessionStore,
        api_client: Optional[ChatAPIClient] = None,
        fallback_message: Optional[str] = None
    ):
        self.logger = get_logger(__name__)
        self.store = store
        self.api_client = api_client or ChatAPIClient()
        self.fallback_message = fallback_message or get_config().ui.fallback_message

    def send_message(self, conversation_id: str, text: str) -> Optional[Message]:
        """
        Send a user turn and append the assistant reply

        Args:
            conversation_id: Target conversation
            text: User input; blank input is ignored

        Returns:
            The assistant message appended (the fallback message on failure),
            or None when nothing was sent

        Raises:
            ConversationNotFoundError: unknown conversation
            ConversationBusyError: a request for this conversation is already in flight
        """
        if not text or not text.strip():
            return None

        self.store.begin_request(conversation_id)
        try:
            self.store.append_message(conversation_id, Message.user(text))
            history = self.store.history(conversation_id)

            try:
                reply = self.api_client.fetch_reply(history)
            except ChatAPIError as e:
                get_error_tracker().track_error(e, "chat_api_request", conversation_id=conversation_id)
                reply = Message.assistant(self.fallback_message)

            self.store.append_message(conversation_id, reply)
            return reply
        finally:
            self.store.end_request(conversation_id)

    def send_to_active(self, text: str) -> Optional[Message]:
        """Send a user turn on the active conversation"""
        active = self.store.get_active()
        if active is None:
            self.logger.warning("Send ignored: no active conversation")
            return None
        return self.send_message(active.conversation_id, text)
