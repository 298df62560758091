"""Data preparation for export."""

import csv
import datetime
import io
import json
import re
from typing import Dict, Any, List

from ..core.constants import FileConstants
from ..core.models import Conversation

NOT_AVAILABLE = "N/A"


def format_date(value: datetime.datetime) -> str:
    """Format like 'Jan 5, 2025'."""
    return f"{value.strftime('%b')} {value.day}, {value.year}"


def export_filename(title: str, ext: str) -> str:
    """Filesystem-safe export name derived from a conversation title."""
    return f"{re.sub(r'[^a-z0-9]', '_', title, flags=re.IGNORECASE)}_analysis.{ext}"


def _breakdowns(conversation: Conversation) -> List[Dict[str, Any]]:
    """Sub-score tables; a block is only included when its first component was reported."""
    s = conversation.scores
    blocks = []
    if s.user_clarity:
        blocks.append({
            "title": "UserIQ Breakdown",
            "rows": [("Clarity", s.user_clarity), ("Depth", s.user_depth or NOT_AVAILABLE),
                     ("Creativity", s.user_creativity or NOT_AVAILABLE)],
        })
    if s.gpt_clarity:
        blocks.append({
            "title": "GPTIQ Breakdown",
            "rows": [("Clarity", s.gpt_clarity), ("Depth", s.gpt_depth or NOT_AVAILABLE),
                     ("Flow", s.gpt_flow or NOT_AVAILABLE)],
        })
    if s.conversation_flow:
        blocks.append({
            "title": "ConversationIQ Breakdown",
            "rows": [("Flow", s.conversation_flow),
                     ("Synergy", s.conversation_synergy or NOT_AVAILABLE)],
        })
    return blocks


def prepare_export(conversation: Conversation) -> Dict[str, Any]:
    """Prepare a conversation for JSON export."""
    s = conversation.scores
    return {
        "id": conversation.id,
        "title": conversation.title,
        "created_at": conversation.created_at.isoformat(),
        "scores": {
            "user_iq": s.user_iq,
            "gpt_iq": s.gpt_iq,
            "conversation_iq": s.conversation_iq,
        },
        "breakdowns": {
            block["title"]: dict(block["rows"]) for block in _breakdowns(conversation)
        },
        "justification": s.justification,
        "transcript": conversation.transcript,
        "metadata": {
            "export_timestamp": None,  # Will be set by caller
            "version": FileConstants.EXPORT_VERSION,
        },
    }


def export_to_json(data: Dict[str, Any], filename: str) -> None:
    """Export data to JSON file."""
    data.setdefault("metadata", {})
    data["metadata"]["export_timestamp"] = datetime.datetime.now().isoformat()

    with open(filename, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def conversation_to_csv_rows(conversation: Conversation) -> List[List[Any]]:
    """Rows of the CSV analysis report."""
    s = conversation.scores
    rows: List[List[Any]] = [
        ["GPTIQX Analysis Report"],
        ["Title", conversation.title],
        ["Date", format_date(conversation.created_at)],
        [],
        ["Main Scores"],
        ["Metric", "Score"],
        ["UserIQ", s.user_iq],
        ["GPTIQ", s.gpt_iq],
        ["ConversationIQ", s.conversation_iq],
        [],
    ]
    for block in _breakdowns(conversation):
        rows.append([block["title"]])
        rows.append(["Component", "Score"])
        rows.extend([name, value] for name, value in block["rows"])
        rows.append([])

    if s.justification:
        rows.append(["Analysis Summary"])
        rows.append([s.justification])
        rows.append([])

    rows.append(["Full Transcript"])
    rows.append([conversation.transcript])
    return rows


def conversation_to_csv(conversation: Conversation) -> str:
    """CSV analysis report with every cell quoted."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows(conversation_to_csv_rows(conversation))
    return buffer.getvalue()


def export_to_csv(conversation: Conversation, filename: str) -> None:
    """Write the CSV analysis report."""
    with open(filename, 'w', encoding='utf-8', newline='') as f:
        f.write(conversation_to_csv(conversation))
