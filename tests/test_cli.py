"""Tests for the command-line interface."""

import json
from unittest.mock import patch

import pytest

from gptiqx import cli
from gptiqx.services.history import ConversationHistory
from gptiqx.services.llm import FallbackScoringService, AnalysisError


@pytest.fixture
def history_file(tmp_path):
    return str(tmp_path / "conversations.json")


@pytest.fixture
def transcript_file(tmp_path):
    path = tmp_path / "chat.txt"
    path.write_text("User: How do generators work?\nGPT: They yield values lazily.", encoding="utf-8")
    return str(path)


@pytest.fixture(autouse=True)
def offline_scoring():
    with patch.object(cli.ScoringServiceFactory, "create", return_value=FallbackScoringService()):
        yield


def test_no_command_prints_help(capsys):
    cli.main([])
    assert "usage" in capsys.readouterr().out


def test_analyze_saves_conversation(history_file, transcript_file, capsys):
    cli.main(["--history", history_file, "analyze", transcript_file, "--title", "Generators"])
    out = capsys.readouterr().out
    assert "Analysis Complete" in out
    assert "UserIQ:" in out

    conversations = ConversationHistory(history_file).list()
    assert [c.title for c in conversations] == ["Generators"]


def test_analyze_no_save_with_json_out(history_file, transcript_file, tmp_path):
    out_file = tmp_path / "scores.json"
    cli.main(["--history", history_file, "analyze", transcript_file, "--no-save", "--out", str(out_file)])
    assert ConversationHistory(history_file).list() == []
    assert 70 <= json.loads(out_file.read_text(encoding="utf-8"))["user_iq"] <= 99


def test_analysis_error_exits_nonzero(history_file, transcript_file):
    with patch.object(FallbackScoringService, "analyze", side_effect=AnalysisError("Rate limit", 429)):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["--history", history_file, "analyze", transcript_file])
    assert exc_info.value.code == 1


def test_insights_without_history(history_file, capsys):
    cli.main(["--history", history_file, "insights"])
    assert "Get Started" in capsys.readouterr().out


def test_history_and_export(history_file, transcript_file, tmp_path, capsys):
    cli.main(["--history", history_file, "analyze", transcript_file, "--title", "Generators"])
    conversation = ConversationHistory(history_file).latest()
    capsys.readouterr()

    cli.main(["--history", history_file, "history", "--search", "gen"])
    out = capsys.readouterr().out
    assert conversation.id in out
    assert "Total: 1" in out

    csv_file = tmp_path / "report.csv"
    cli.main(["--history", history_file, "export", conversation.id, "--format", "csv", "--out", str(csv_file)])
    assert csv_file.read_text(encoding="utf-8").startswith('"GPTIQX Analysis Report"')


def test_delete(history_file, transcript_file, capsys):
    cli.main(["--history", history_file, "analyze", transcript_file])
    conversation = ConversationHistory(history_file).latest()

    cli.main(["--history", history_file, "delete", conversation.id])
    assert f"Deleted {conversation.id}" in capsys.readouterr().out
    assert ConversationHistory(history_file).list() == []
