"""
Chat service exceptions.
"""


class ChatServiceError(Exception):
    """Base class for session store and chat controller errors"""
    pass


class ConversationNotFoundError(ChatServiceError, KeyError):
    """Raised when a conversation id is not present in the session store"""

    def __init__(self, conversation_id):
        self.conversation_id = conversation_id
        super().__init__(f"Conversation not found: {conversation_id}")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class ConversationBusyError(ChatServiceError):
    """Raised when a send is attempted while the conversation already has a request in flight"""

    def __init__(self, conversation_id: str):
        self.conversation_id = conversation_id
        super().__init__(f"Conversation {conversation_id} already has a request in flight")
