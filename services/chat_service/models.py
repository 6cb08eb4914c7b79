"""
Chat service data models for conversations and messages.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Dict, Optional


USER_ROLE = "user"
ASSISTANT_ROLE = "assistant"
MESSAGE_ROLES = (USER_ROLE, ASSISTANT_ROLE)

UNNAMED_CONVERSATION = "Unnamed Conversation"
NO_MESSAGES_PREVIEW = "No messages yet"


@dataclass(frozen=True)
class Message:
    """Individual message in a conversation"""
    role: str  # "user" or "assistant"
    content: str
    created_at: datetime = field(default_factory=datetime.now, compare=False)

    def __post_init__(self):
        if self.role not in MESSAGE_ROLES:
            raise ValueError(f"Invalid message role: {self.role!r}")

    @classmethod
    def user(cls, content: str) -> 'Message':
        return cls(role=USER_ROLE, content=content)

    @classmethod
    def assistant(cls, content: str) -> 'Message':
        return cls(role=ASSISTANT_ROLE, content=content)

    @property
    def is_user(self) -> bool:
        return self.role == USER_ROLE

    def to_dict(self) -> Dict[str, str]:
        """Wire representation sent to the chat API"""
        return {"role": self.role, "content": self.content}


@dataclass
class Conversation:
    """Conversation containing messages and metadata"""
    conversation_id: str
    name: str = ""
    messages: List[Message] = field(default_factory=list)
    is_editing: bool = False
    pending_request: bool = False
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    @property
    def display_name(self) -> str:
        return self.name or UNNAMED_CONVERSATION

    @property
    def last_message(self) -> Optional[Message]:
        return self.messages[-1] if self.messages else None

    def preview_text(self, length: int = 30) -> str:
        """Truncated content of the last message, for the sidebar"""
        last = self.last_message
        if last is None or not last.content:
            return NO_MESSAGES_PREVIEW
        return last.content[:length]

    def history(self) -> List[Dict[str, str]]:
        return [message.to_dict() for message in self.messages]


@dataclass
class ConversationSummary:
    """Summary of conversation for listing/navigation"""
    conversation_id: str
    title: str
    message_count: int
    last_activity: datetime
    created_at: datetime
    is_editing: bool = False
    preview_text: Optional[str] = None

    @classmethod
    def from_conversation(cls, conversation: Conversation, preview_length: int = 30) -> 'ConversationSummary':
        return cls(
            conversation_id=conversation.conversation_id,
            title=conversation.display_name,
            message_count=len(conversation.messages),
            last_activity=conversation.updated_at,
            created_at=conversation.created_at,
            is_editing=conversation.is_editing,
            preview_text=conversation.preview_text(preview_length)
        )
