"""Tests for the local conversation history."""

from datetime import datetime, timedelta, timezone

import pytest

from gptiqx.core.models import ScoreSnapshot
from gptiqx.services.history import ConversationHistory, HistoryError

START = datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def history(tmp_path):
    return ConversationHistory(str(tmp_path / "data" / "conversations.json"))


def add(history, title, days=0, user_iq=70):
    scores = ScoreSnapshot(user_iq=user_iq, gpt_iq=70, conversation_iq=70, user_clarity=80)
    return history.add("User: hi\nGPT: hello", scores, title=title, created_at=START + timedelta(days=days))


def test_empty_history(history):
    assert history.list() == []
    assert history.latest() is None


def test_add_persists_round_trip(history):
    saved = add(history, "Recursion", user_iq=82)
    reloaded = ConversationHistory(str(history.path)).get(saved.id)
    assert reloaded == saved
    assert reloaded.scores.user_clarity == 80
    assert reloaded.created_at.tzinfo is not None


def test_list_order_and_latest(history):
    add(history, "Second", days=1)
    add(history, "First", days=0)
    add(history, "Third", days=2)
    assert [c.title for c in history.list()] == ["First", "Second", "Third"]
    assert [c.title for c in history.list(ascending=False)] == ["Third", "Second", "First"]
    assert history.latest().title == "Third"


def test_delete(history):
    keep = add(history, "Keep")
    drop = add(history, "Drop", days=1)
    assert history.delete(drop.id) is True
    assert history.delete(drop.id) is False
    assert [c.id for c in history.list()] == [keep.id]


def test_search_is_case_insensitive(history):
    add(history, "Python decorators")
    add(history, "SQL joins", days=1)
    add(history, "python typing", days=2)
    assert [c.title for c in history.search("PYTHON")] == ["python typing", "Python decorators"]
    assert len(history.search("  ")) == 3
    assert history.search("rust") == []


def test_corrupt_file_raises(tmp_path):
    path = tmp_path / "conversations.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(HistoryError):
        ConversationHistory(str(path)).list()


def test_non_list_file_raises(tmp_path):
    path = tmp_path / "conversations.json"
    path.write_text('{"id": "x"}', encoding="utf-8")
    with pytest.raises(HistoryError):
        ConversationHistory(str(path)).list()


def test_legacy_rows_without_sub_scores(tmp_path):
    path = tmp_path / "conversations.json"
    path.write_text(
        '[{"id": "old", "title": "", "transcript": "t", "created_at": "2024-06-01T10:00:00Z",'
        ' "user_iq": 60, "gpt_iq": 70, "conversation_iq": 65}]',
        encoding="utf-8",
    )
    conversation = ConversationHistory(str(path)).get("old")
    assert conversation.title == "New Analysis"
    assert conversation.scores.user_depth is None
    assert conversation.created_at == datetime(2024, 6, 1, 10, tzinfo=timezone.utc)
