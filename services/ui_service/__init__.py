"""
UI service - handles user interface components and interactions.
"""

from .chat_interface import (
    ChatInterface,
    get_chat_interface,
    get_session_store,
    get_session_manager
)

__all__ = [
    'ChatInterface',
    'get_chat_interface',
    'get_session_store',
    'get_session_manager'
]
