"""
Tests for the chat interface session wiring (Streamlit mocked)
"""

from unittest.mock import Mock, patch


from services.chat_service.conversation_manager import ConversationManager
from services.chat_service.session_store import SessionStore
from services.ui_service import chat_interface
from services.ui_service.chat_interface import ChatInterface


class MockSessionState(dict):
    """Dict with attribute access, like st.session_state"""

    def __getattr__(self, key):
        try:
            return self[key]
        except KeyError:
            raise AttributeError(key)


class TestSessionWiring:
    """Test per-session store and manager creation"""

    def setup_method(self):
        self.mock_st = Mock()
        self.mock_st.session_state = MockSessionState()
        self.st_patcher = patch.object(chat_interface, "st", self.mock_st)
        self.st_patcher.start()

    def teardown_method(self):
        self.st_patcher.stop()

    def test_store_seeded_once_per_session(self):
        store = chat_interface.get_session_store()

        assert chat_interface.get_session_store() is store
        active = store.get_active()
        assert active.name == "Default Conversation"
        assert [m.content for m in active.messages] == [
            "Welcome to the Data Structures Tutor!",
            "How can I assist you today?"
        ]

    def test_manager_bound_to_session_store(self):
        manager = chat_interface.get_session_manager()

        assert manager.store is chat_interface.get_session_store()
        assert chat_interface.get_session_manager() is manager

    def test_commit_name_renames_edited_conversation(self):
        store = SessionStore()
        editing = store.create_conversation()
        store.create_conversation("Other")
        ui = ChatInterface(store, Mock(spec=ConversationManager))

        self.mock_st.session_state["name_x"] = "Tries"
        ui._commit_name(editing.conversation_id, "name_x")

        assert editing.name == "Tries"
        assert editing.is_editing is False
        assert store.get_active() is editing

    def test_filtered_conversations_uses_search(self):
        store = SessionStore()
        store.create_conversation("Heaps")
        store.create_conversation("Stacks")
        ui = ChatInterface(store, Mock(spec=ConversationManager))

        assert [c.name for c in ui.filtered_conversations("heap")] == ["Heaps"]
        assert len(ui.filtered_conversations(None)) == 2

    def test_select_unknown_conversation_is_logged_not_raised(self):
        store = SessionStore()
        current = store.create_conversation("Current")
        ui = ChatInterface(store, Mock(spec=ConversationManager))

        ui._select("gone")

        assert store.get_active() is current
