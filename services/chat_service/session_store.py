"""
Session store - holds the conversations of one UI session and the active pointer.

Kept independent of Streamlit: the UI keeps one SessionStore per browser
session in st.session_state and drives it through the methods below.
"""

import threading
import uuid
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from services.chat_service.exceptions import ConversationBusyError, ConversationNotFoundError
from services.chat_service.models import Conversation, ConversationSummary, Message
from utils.logging_config import get_logger, log_conversation_event


class SessionStore:
    """
    Ordered collection of conversations (newest first) plus the active conversation.

    Invariants:
    - the active id, when set, always names a conversation in the store
    - a conversation's messages are only ever appended to
    """

    def __init__(self):
        self.logger = get_logger(__name__)
        self._conversations: List[Conversation] = []
        self._active_id: Optional[str] = None
        self._lock = threading.RLock()

    @classmethod
    def with_default_conversation(cls, name: str, welcome_messages: Iterable[str]) -> 'SessionStore':
        """Create a store seeded with one named conversation holding assistant greetings"""
        store = cls()
        conversation = store.create_conversation(name)
        for text in welcome_messages:
            store.append_message(conversation.conversation_id, Message.assistant(text))
        return store

    def __len__(self) -> int:
        return len(self._conversations)

    def _find(self, conversation_id: str) -> Optional[Conversation]:
        for conversation in self._conversations:
            if conversation.conversation_id == conversation_id:
                return conversation
        return None

    def _require(self, conversation_id: str) -> Conversation:
        conversation = self._find(conversation_id)
        if conversation is None:
            raise ConversationNotFoundError(conversation_id)
        return conversation

    def create_conversation(self, name: str = "") -> Conversation:
        """
        Insert a new conversation at the front and make it active.

        Without a name the conversation starts in the editing state until
        rename_active() commits one.
        """
        with self._lock:
            conversation = Conversation(
                conversation_id=uuid.uuid4().hex,
                name=name,
                is_editing=not name
            )
            self._conversations.insert(0, conversation)
            self._active_id = conversation.conversation_id

        log_conversation_event(self.logger, "created", conversation.conversation_id)
        return conversation

    def rename_active(self, name: str) -> Conversation:
        """Commit a name to the active conversation and leave the editing state"""
        with self._lock:
            if self._active_id is None:
                raise ConversationNotFoundError(None)
            conversation = self._require(self._active_id)
            conversation.name = name.strip()
            conversation.is_editing = False
            conversation.updated_at = datetime.now()

        log_conversation_event(self.logger, "renamed", conversation.conversation_id, name=conversation.name)
        return conversation

    def append_message(self, conversation_id: str, message: Message) -> bool:
        """
        Append a message to a conversation.

        Returns False without raising when the conversation no longer
        exists; ids are never reused so a late reply cannot land elsewhere.
        """
        with self._lock:
            conversation = self._find(conversation_id)
            if conversation is None:
                self.logger.debug(f"Dropping message for unknown conversation {conversation_id}")
                return False
            conversation.messages.append(message)
            conversation.updated_at = datetime.now()

        log_conversation_event(self.logger, "message_added", conversation_id, role=message.role)
        return True

    def set_active(self, conversation_id: str) -> Conversation:
        with self._lock:
            conversation = self._require(conversation_id)
            self._active_id = conversation_id
        return conversation

    def search(self, query: str) -> List[Conversation]:
        """Conversations whose name contains query, case-insensitive, in store order"""
        needle = (query or "").lower()
        with self._lock:
            return [c for c in self._conversations if needle in c.name.lower()]

    def remove_conversation(self, conversation_id: str) -> bool:
        """Remove a conversation; if it was active, the newest remaining one becomes active"""
        with self._lock:
            conversation = self._find(conversation_id)
            if conversation is None:
                return False
            self._conversations.remove(conversation)
            if self._active_id == conversation_id:
                self._active_id = self._conversations[0].conversation_id if self._conversations else None

        log_conversation_event(self.logger, "removed", conversation_id)
        return True

    def get_conversation(self, conversation_id: str) -> Conversation:
        with self._lock:
            return self._require(conversation_id)

    def get_active(self) -> Optional[Conversation]:
        with self._lock:
            if self._active_id is None:
                return None
            return self._find(self._active_id)

    @property
    def active_id(self) -> Optional[str]:
        return self._active_id

    def list_conversations(self) -> List[Conversation]:
        with self._lock:
            return list(self._conversations)

    def list_summaries(self, preview_length: int = 30) -> List[ConversationSummary]:
        return [
            ConversationSummary.from_conversation(c, preview_length)
            for c in self.list_conversations()
        ]

    def history(self, conversation_id: str) -> List[Dict[str, str]]:
        """Full message history in the wire shape, oldest first"""
        with self._lock:
            return self._require(conversation_id).history()

    # Pending-request bookkeeping: at most one completion in flight per conversation

    def begin_request(self, conversation_id: str) -> None:
        with self._lock:
            conversation = self._require(conversation_id)
            if conversation.pending_request:
                raise ConversationBusyError(conversation_id)
            conversation.pending_request = True

    def end_request(self, conversation_id: str) -> None:
        with self._lock:
            conversation = self._find(conversation_id)
            if conversation is not None:
                conversation.pending_request = False

    def is_pending(self, conversation_id: str) -> bool:
        with self._lock:
            conversation = self._find(conversation_id)
            return bool(conversation and conversation.pending_request)
