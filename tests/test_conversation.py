"""Unit tests for the conversation manager."""
import json

import pytest
from hypothesis import given
from hypothesis import strategies as st

from polychat.conversation import ConversationManager, HistoryEntry, transcript_from_history
from polychat.errors import InvalidRewindIndexError, RewindError, ValidationError
from polychat.llm import ChatMessage

SYSTEM = "You are terse."


def converse(manager: ConversationManager, turns: int) -> None:
    for n in range(1, turns + 1):
        manager.append_user(f"q{n}")
        manager.append_assistant(f"a{n}")
        manager.record_history(f"q{n}", f"a{n}")


@pytest.fixture
def manager():
    return ConversationManager(SYSTEM, platform="openai", model="gpt-4o")


class TestBasics:
    """Tests for transcript and history bookkeeping."""

    def test_starts_with_system_prompt(self, manager):
        """Test the initial transcript and sentinel."""
        assert manager.messages == [ChatMessage(role="system", content=SYSTEM)]
        assert len(manager.history) == 1
        assert manager.history[0].user == SYSTEM
        assert manager.history[0].bot == ""
        assert manager.turn_count == 0

    def test_record_history_tags_connection(self, manager):
        """Test that history entries carry the current platform and model."""
        manager.model = "o3"
        entry = manager.record_history("q", "a")

        assert entry.platform == "openai"
        assert entry.model == "o3"
        assert entry.time > 0

    def test_remove_last_user(self, manager):
        """Test rolling back an unanswered user turn."""
        manager.append_user("pending")
        manager.remove_last_user()

        assert manager.messages == [ChatMessage(role="system", content=SYSTEM)]

    def test_remove_last_user_ignores_assistant(self, manager):
        """Test that an answered turn is left alone."""
        converse(manager, 1)
        manager.remove_last_user()

        assert len(manager.messages) == 3

    def test_remove_last_user_never_drops_system(self, manager):
        """Test that the system prompt survives a rollback."""
        manager.remove_last_user()

        assert len(manager.messages) == 1

    def test_clear(self, manager):
        """Test that clearing restores the initial state."""
        converse(manager, 3)
        manager.clear()

        assert manager.messages == [ChatMessage(role="system", content=SYSTEM)]
        assert manager.turn_count == 0

    def test_copies_are_returned(self, manager):
        """Test that callers cannot mutate internal lists."""
        manager.messages.append(ChatMessage(role="user", content="sneaky"))
        manager.history.clear()

        assert len(manager.messages) == 1
        assert len(manager.history) == 1


class TestRewind:
    """Tests for rewind_to."""

    def test_rewind_to_first_turn(self, manager):
        """Test keeping only the first of three turns."""
        converse(manager, 3)

        removed = manager.rewind_to(1)

        assert removed == 2
        assert [m.content for m in manager.messages] == [SYSTEM, "q1", "a1"]
        assert len(manager.history) == 2

    def test_rewind_to_last_is_noop(self, manager):
        """Test that rewinding to the newest entry removes nothing."""
        converse(manager, 2)
        before = manager.messages

        assert manager.rewind_to(2) == 0
        assert manager.messages == before

    def test_rewind_without_history(self, manager):
        """Test that a fresh conversation cannot rewind."""
        with pytest.raises(RewindError):
            manager.rewind_to(1)

    @pytest.mark.parametrize("index", [0, -1, 3, 99])
    def test_invalid_index_leaves_state(self, manager, index: int):
        """Test that rejected indices change nothing."""
        converse(manager, 2)
        messages, history = manager.messages, manager.history

        with pytest.raises(InvalidRewindIndexError):
            manager.rewind_to(index)

        assert manager.messages == messages
        assert manager.history == history

    def test_rewind_skips_empty_sides(self, manager):
        """Test that entries with an empty reply contribute only the prompt."""
        manager.record_history("q1", "")
        manager.record_history("q2", "a2")

        manager.rewind_to(2)

        assert [m.role for m in manager.messages] == ["system", "user", "user", "assistant"]

    def test_rewind_choices_newest_first(self, manager):
        """Test that choices carry indices, newest first."""
        converse(manager, 3)

        choices = manager.rewind_choices()

        assert [index for index, _ in choices] == [3, 2, 1]
        assert choices[0][1].startswith("3: ")
        assert choices[0][1].endswith("q3")

    @given(st.integers(min_value=1, max_value=8), st.data())
    def test_rewind_is_idempotent(self, turns: int, data):
        """Property test: rewinding twice to the same index changes nothing more."""
        manager = ConversationManager(SYSTEM)
        converse(manager, turns)
        index = data.draw(st.integers(min_value=1, max_value=turns))

        manager.rewind_to(index)
        messages = manager.messages

        assert manager.rewind_to(index) == 0
        assert manager.messages == messages
        assert len(manager.history) == index + 1
        assert manager.messages == transcript_from_history(manager.history)


class TestLoad:
    """Tests for wholesale replacement."""

    def test_load(self, manager):
        """Test that load replaces transcript and history."""
        messages = [
            ChatMessage(role="system", content="other"),
            ChatMessage(role="user", content="u"),
            ChatMessage(role="assistant", content="b"),
        ]
        history = [HistoryEntry(user="other"), HistoryEntry(user="u", bot="b")]

        manager.load(messages, history)

        assert manager.messages == messages
        assert manager.turn_count == 1
        assert manager.system_prompt == "other"

    def test_load_requires_system_first(self, manager):
        """Test that a transcript without a system prompt is rejected."""
        with pytest.raises(ValidationError):
            manager.load([ChatMessage(role="user", content="u")], [HistoryEntry(user="s")])

        assert len(manager.messages) == 1


class TestExport:
    """Tests for exports and the state summary."""

    def test_export_history(self, manager, tmp_path):
        """Test the JSON export of recorded turns."""
        converse(manager, 2)

        path = manager.export_history(tmp_path)
        data = json.loads(path.read_text())

        assert path.name.startswith("ch_")
        assert [entry["user_prompt"] for entry in data] == ["q1", "q2"]
        assert data[0]["platform"] == "openai"
        assert data[0]["model_name"] == "gpt-4o"
        assert set(data[0]) == {"platform", "model_name", "user_prompt", "bot_response", "timestamp"}

    def test_export_selected_turns(self, manager, tmp_path):
        """Test exporting a subset of turns in history order."""
        converse(manager, 3)

        path = manager.export_history(tmp_path, indices=[3, 1])
        data = json.loads(path.read_text())

        assert [entry["user_prompt"] for entry in data] == ["q1", "q3"]

    def test_export_invalid_index(self, manager, tmp_path):
        """Test that the sentinel cannot be exported."""
        converse(manager, 1)

        with pytest.raises(ValidationError):
            manager.export_history(tmp_path, indices=[0])

    def test_export_history_empty(self, manager, tmp_path):
        """Test that an empty history cannot be exported."""
        with pytest.raises(ValidationError):
            manager.export_history(tmp_path)

    def test_export_last_response(self, manager, tmp_path):
        """Test saving the last reply as text."""
        converse(manager, 2)

        path = manager.export_last_response(tmp_path)

        assert path.read_text() == "a2"

    def test_state_summary(self, manager):
        """Test the state summary fields."""
        converse(manager, 2)

        summary = manager.state_summary()

        assert summary.platform == "openai"
        assert summary.model == "gpt-4o"
        assert summary.chats == 2
