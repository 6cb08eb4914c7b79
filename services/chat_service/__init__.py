"""
Chat service - conversations, the session store and the client side of the send path.
"""

from .models import Message, Conversation, ConversationSummary
from .exceptions import ChatServiceError, ConversationNotFoundError, ConversationBusyError
from .session_store import SessionStore
from .chat_api_client import (
    ChatAPIClient,
    ChatAPIError,
    ChatAPITimeoutError,
    ChatAPIConnectionError,
    ChatAPIResponseError
)
from .conversation_manager import ConversationManager

__all__ = [
    'Message',
    'Conversation',
    'ConversationSummary',
    'ChatServiceError',
    'ConversationNotFoundError',
    'ConversationBusyError',
    'SessionStore',
    'ChatAPIClient',
    'ChatAPIError',
    'ChatAPITimeoutError',
    'ChatAPIConnectionError',
    'ChatAPIResponseError',
    'ConversationManager'
]
