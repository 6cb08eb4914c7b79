"""
Chat interface service - handles chat UI components and interactions.
Renders the conversation sidebar and chat area on top of a SessionStore.
"""

import streamlit as st
from typing import List, Optional

from config.app_config import get_config
from services.chat_service.chat_api_client import ChatAPIClient
from services.chat_service.conversation_manager import ConversationManager
from services.chat_service.exceptions import ConversationBusyError, ConversationNotFoundError
from services.chat_service.models import Conversation, Message
from services.chat_service.session_store import SessionStore
from utils.logging_config import get_logger


STORE_KEY = "session_store"
MANAGER_KEY = "conversation_manager"
SEARCH_KEY = "search_query"


def get_session_store() -> SessionStore:
    """SessionStore for this browser session, seeded with the default conversation on first use"""
    if STORE_KEY not in st.session_state:
        ui = get_config().ui
        st.session_state[STORE_KEY] = SessionStore.with_default_conversation(
            ui.default_conversation_name, ui.welcome_messages
        )
    return st.session_state[STORE_KEY]


def get_session_manager() -> ConversationManager:
    """ConversationManager bound to this browser session's store"""
    if MANAGER_KEY not in st.session_state:
        st.session_state[MANAGER_KEY] = ConversationManager(get_session_store(), ChatAPIClient())
    return st.session_state[MANAGER_KEY]


class ChatInterface:
    """
    Service for chat interface components and interactions.
    Handles the conversation sidebar, message rendering and the send flow.
    """

    def __init__(self, store: SessionStore, manager: ConversationManager):
        self.logger = get_logger(__name__)
        self.config = get_config()
        self.store = store
        self.manager = manager

    # Sidebar

    def filtered_conversations(self, query: Optional[str]) -> List[Conversation]:
        return self.store.search(query or "")

    def _select(self, conversation_id: str):
        try:
            self.store.set_active(conversation_id)
        except ConversationNotFoundError:
            self.logger.warning(f"Selected conversation vanished: {conversation_id}")

    def _commit_name(self, conversation_id: str, input_key: str):
        # Commit to the conversation being edited even if another one was clicked meanwhile
        self.store.set_active(conversation_id)
        self.store.rename_active(st.session_state.get(input_key, ""))

    def _new_conversation(self):
        self.store.create_conversation()

    def render_conversation_sidebar(self):
        """Render the conversation sidebar"""
        ui = self.config.ui
        active = self.store.get_active()

        with st.sidebar:
            st.markdown(f"## 👤 {ui.sidebar_title}")

            query = st.text_input(
                "Search",
                key=SEARCH_KEY,
                placeholder=ui.search_placeholder,
                label_visibility="collapsed"
            )

            conversations = self.filtered_conversations(query)
            if not conversations:
                st.caption("No matching conversations")

            for conversation in conversations:
                cid = conversation.conversation_id
                is_active = active is not None and cid == active.conversation_id

                if conversation.is_editing:
                    input_key = f"name_{cid}"
                    st.text_input(
                        "Conversation name",
                        key=input_key,
                        placeholder=ui.name_placeholder,
                        on_change=self._commit_name,
                        args=(cid, input_key),
                        label_visibility="collapsed"
                    )
                    continue

                label = f"**{conversation.display_name}**  \n{conversation.preview_text(ui.preview_length)}..."
                st.button(
                    label,
                    key=f"select_{cid}",
                    use_container_width=True,
                    type="primary" if is_active else "secondary",
                    on_click=self._select,
                    args=(cid,)
                )

            st.divider()
            st.button(
                "➕ New Conversation",
                use_container_width=True,
                on_click=self._new_conversation
            )

    # Chat area

    def render_chat_messages(self, messages: List[Message]):
        """Render each message as a chat bubble with markdown content"""
        for message in messages:
            with st.chat_message(message.role):
                st.markdown(message.content)

    def handle_user_input(self, conversation: Conversation):
        """Chat input plus the send round trip for the active conversation"""
        ui = self.config.ui
        cid = conversation.conversation_id

        prompt = st.chat_input(ui.input_placeholder, disabled=self.store.is_pending(cid))
        if not prompt or not prompt.strip():
            return

        with st.chat_message("user"):
            st.markdown(prompt)

        with st.chat_message("assistant"):
            placeholder = st.empty()
            placeholder.markdown(ui.typing_indicator)
            try:
                reply = self.manager.send_message(cid, prompt)
            except ConversationBusyError:
                placeholder.warning("Still waiting for the previous reply.")
                return
            placeholder.markdown(reply.content if reply else "")

        st.rerun()

    def render_chat_area(self):
        active = self.store.get_active()
        if active is None:
            st.info("Create a conversation to start chatting.")
            return

        self.render_chat_messages(active.messages)
        self.handle_user_input(active)


def get_chat_interface() -> ChatInterface:
    """Chat interface wired to this browser session's store and manager"""
    return ChatInterface(get_session_store(), get_session_manager())
