"""
Tests for the session store
"""

import random

import pytest

from services.chat_service.exceptions import ConversationBusyError, ConversationNotFoundError
from services.chat_service.models import Message, UNNAMED_CONVERSATION, NO_MESSAGES_PREVIEW
from services.chat_service.session_store import SessionStore


class TestCreateConversation:
    """Test conversation creation"""

    def test_new_conversation_is_active_and_first(self):
        store = SessionStore()
        first = store.create_conversation("first")
        second = store.create_conversation()

        assert store.get_active() is second
        assert store.list_conversations() == [second, first]

    def test_unnamed_conversation_starts_editing(self):
        """A conversation created without a name waits for one"""
        store = SessionStore()
        conversation = store.create_conversation()

        assert conversation.name == ""
        assert conversation.is_editing is True
        assert conversation.messages == []
        assert conversation.display_name == UNNAMED_CONVERSATION

    def test_ids_are_unique(self):
        store = SessionStore()
        ids = {store.create_conversation().conversation_id for _ in range(50)}
        assert len(ids) == 50

    def test_default_conversation_seed(self):
        store = SessionStore.with_default_conversation(
            "Default Conversation",
            ["Welcome to the Data Structures Tutor!", "How can I assist you today?"]
        )

        active = store.get_active()
        assert len(store) == 1
        assert active.name == "Default Conversation"
        assert active.is_editing is False
        assert [m.role for m in active.messages] == ["assistant", "assistant"]
        assert active.messages[0].content == "Welcome to the Data Structures Tutor!"


class TestRenameActive:
    """Test committing names"""

    def test_rename_commits_name_and_clears_editing(self):
        store = SessionStore()
        conversation = store.create_conversation()

        store.rename_active("Linked lists")

        assert conversation.name == "Linked lists"
        assert conversation.is_editing is False

    def test_rename_targets_active_conversation_only(self):
        store = SessionStore()
        other = store.create_conversation("Trees")
        store.create_conversation()

        store.rename_active("Graphs")

        assert other.name == "Trees"
        assert store.get_active().name == "Graphs"

    def test_rename_without_active_raises(self):
        store = SessionStore()
        with pytest.raises(ConversationNotFoundError):
            store.rename_active("anything")


class TestAppendMessage:
    """Test message appends"""

    def test_append_is_prefix_extension(self):
        store = SessionStore()
        cid = store.create_conversation("c").conversation_id

        previous = []
        for i in range(6):
            role = "user" if i % 2 == 0 else "assistant"
            assert store.append_message(cid, Message(role=role, content=f"m{i}")) is True
            current = list(store.get_conversation(cid).messages)
            assert current[:len(previous)] == previous
            assert len(current) == len(previous) + 1
            previous = current

    def test_append_to_unknown_conversation_is_noop(self):
        store = SessionStore()
        store.create_conversation("c")

        assert store.append_message("missing", Message.user("hi")) is False
        assert all(not c.messages for c in store.list_conversations())

    def test_append_after_removal_is_noop(self):
        store = SessionStore()
        cid = store.create_conversation("c").conversation_id
        store.remove_conversation(cid)

        assert store.append_message(cid, Message.assistant("late reply")) is False

    def test_history_is_wire_format(self):
        store = SessionStore()
        cid = store.create_conversation("c").conversation_id
        store.append_message(cid, Message.user("hi"))
        store.append_message(cid, Message.assistant("hello"))

        assert store.history(cid) == [
            {"role": "user", "content": "hi"},
            {"role": "assistant", "content": "hello"},
        ]

    def test_invalid_role_rejected(self):
        with pytest.raises(ValueError):
            Message(role="system", content="nope")


class TestSetActive:
    """Test switching the active conversation"""

    def test_set_active_switches_pointer(self):
        store = SessionStore()
        first = store.create_conversation("a")
        store.create_conversation("b")

        store.set_active(first.conversation_id)
        assert store.get_active() is first

    def test_set_active_unknown_raises(self):
        store = SessionStore()
        store.create_conversation("a")

        with pytest.raises(ConversationNotFoundError):
            store.set_active("nope")

    def test_active_always_present(self):
        """Random create/set_active/remove sequences never leave a dangling active pointer"""
        rng = random.Random(1234)
        store = SessionStore()
        known_ids = []

        for _ in range(300):
            action = rng.choice(["create", "set", "set_missing", "remove"])
            if action == "create":
                known_ids.append(store.create_conversation().conversation_id)
            elif action == "set" and known_ids:
                store.set_active(rng.choice(known_ids))
            elif action == "set_missing":
                with pytest.raises(ConversationNotFoundError):
                    store.set_active("missing-id")
            elif action == "remove" and known_ids:
                store.remove_conversation(known_ids.pop(rng.randrange(len(known_ids))))

            active = store.get_active()
            present = {c.conversation_id for c in store.list_conversations()}
            if store.active_id is not None:
                assert store.active_id in present
                assert active is not None
            else:
                assert not present


class TestSearch:
    """Test conversation search"""

    def setup_method(self):
        self.store = SessionStore()
        self.store.create_conversation("Binary Trees")
        self.store.create_conversation("Hash maps")
        self.store.create_conversation("tree traversal")
        self.store.create_conversation()

    def test_empty_query_returns_all(self):
        assert self.store.search("") == self.store.list_conversations()

    def test_case_insensitive_substring(self):
        names = [c.name for c in self.store.search("TREE")]
        assert names == ["tree traversal", "Binary Trees"]

    def test_no_fuzzy_matching(self):
        assert self.store.search("hsh") == []

    def test_unnamed_conversation_only_matches_empty_query(self):
        assert all(c.name for c in self.store.search("a"))


class TestRemoveConversation:
    """Test conversation removal"""

    def test_remove_active_promotes_newest_remaining(self):
        store = SessionStore()
        oldest = store.create_conversation("old")
        newer = store.create_conversation("new")
        newest = store.create_conversation("newest")

        assert store.remove_conversation(newest.conversation_id) is True
        assert store.get_active() is newer
        assert store.list_conversations() == [newer, oldest]

    def test_remove_last_clears_active(self):
        store = SessionStore()
        only = store.create_conversation("only")

        store.remove_conversation(only.conversation_id)
        assert store.get_active() is None
        assert len(store) == 0

    def test_remove_unknown_returns_false(self):
        assert SessionStore().remove_conversation("nope") is False


class TestPendingRequests:
    """Test the one-request-in-flight rule"""

    def test_second_begin_raises_busy(self):
        store = SessionStore()
        cid = store.create_conversation("c").conversation_id

        store.begin_request(cid)
        assert store.is_pending(cid)
        with pytest.raises(ConversationBusyError):
            store.begin_request(cid)

        store.end_request(cid)
        assert not store.is_pending(cid)
        store.begin_request(cid)

    def test_pending_is_per_conversation(self):
        store = SessionStore()
        a = store.create_conversation("a").conversation_id
        b = store.create_conversation("b").conversation_id

        store.begin_request(a)
        store.begin_request(b)
        assert store.is_pending(a) and store.is_pending(b)


class TestSummaries:
    """Test sidebar summaries"""

    def test_summary_preview(self):
        store = SessionStore()
        cid = store.create_conversation("Stacks").conversation_id
        store.create_conversation()
        store.append_message(cid, Message.assistant("A stack is a LIFO structure used for many things"))

        empty, stacks = store.list_summaries()

        assert empty.title == UNNAMED_CONVERSATION
        assert empty.preview_text == NO_MESSAGES_PREVIEW
        assert empty.is_editing is True
        assert stacks.title == "Stacks"
        assert stacks.message_count == 1
        assert stacks.preview_text == "A stack is a LIFO structure us"
