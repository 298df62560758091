"""Local conversation history backed by a JSON file."""

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from ..core.config import settings
from ..core.models import Conversation, ScoreSnapshot

logger = logging.getLogger(__name__)


class HistoryError(Exception):
    """Raised when the history file cannot be read or written."""


class ConversationHistory:
    """Stores analyzed conversations, one JSON row per conversation."""

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path or settings.history_file)

    def _load(self) -> List[Conversation]:
        if not self.path.exists():
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                rows = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise HistoryError(f"Failed to load conversation history from {self.path}: {e}") from e
        if not isinstance(rows, list):
            raise HistoryError(f"Conversation history in {self.path} is not a list")
        return [Conversation.from_dict(row) for row in rows]

    def _save(self, conversations: List[Conversation]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump([c.to_dict() for c in conversations], f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise HistoryError(f"Failed to save conversation history to {self.path}: {e}") from e

    def add(self, transcript: str, scores: ScoreSnapshot, title: str = "New Analysis",
            created_at: Optional[datetime] = None) -> Conversation:
        conversations = self._load()
        conversation = Conversation(
            id=str(uuid.uuid4()),
            title=title,
            transcript=transcript,
            created_at=created_at or datetime.now(timezone.utc),
            scores=scores,
        )
        conversations.append(conversation)
        self._save(conversations)
        logger.info(f"Saved conversation {conversation.id} ({title})")
        return conversation

    def list(self, ascending: bool = True) -> List[Conversation]:
        return sorted(self._load(), key=lambda c: c.created_at, reverse=not ascending)

    def get(self, conversation_id: str) -> Optional[Conversation]:
        return next((c for c in self._load() if c.id == conversation_id), None)

    def latest(self) -> Optional[Conversation]:
        conversations = self.list(ascending=False)
        return conversations[0] if conversations else None

    def delete(self, conversation_id: str) -> bool:
        conversations = self._load()
        remaining = [c for c in conversations if c.id != conversation_id]
        if len(remaining) == len(conversations):
            return False
        self._save(remaining)
        logger.info(f"Deleted conversation {conversation_id}")
        return True

    def search(self, query: str) -> List[Conversation]:
        """Case-insensitive title search; a blank query returns everything."""
        conversations = self.list(ascending=False)
        if not query or not query.strip():
            return conversations
        needle = query.lower()
        return [c for c in conversations if needle in c.title.lower()]
