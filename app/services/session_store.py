from __future__ import annotations

import json
import logging

from pydantic import TypeAdapter, ValidationError

from app.core.history_storage import KeyValueStorage
from app.schemas.analysis import AnalysisHistoryItem, AnalysisResult

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "resume_guard_history"

_history_adapter = TypeAdapter(list[AnalysisHistoryItem])


class SessionStore:
    """Current analysis plus the persisted, most-recent-first history.

    Every history mutation rewrites the whole list to storage.
    ``max_items`` of 0 keeps every entry.
    """

    def __init__(self, storage: KeyValueStorage, *, key: str = DEFAULT_STORAGE_KEY, max_items: int = 0):
        self.storage = storage
        self.key = key
        self.max_items = max(0, int(max_items))
        self.current: AnalysisResult | None = None
        self.history: list[AnalysisHistoryItem] = []

    def load(self) -> list[AnalysisHistoryItem]:
        try:
            raw = self.storage.read(self.key)
        except Exception as exc:
            logger.error("history_load_failed key=%s error=%s", self.key, exc)
            self.history = []
            return []

        if not raw:
            self.history = []
            return []

        try:
            self.history = _history_adapter.validate_python(json.loads(raw))
        except (ValueError, ValidationError) as exc:
            logger.error("history_load_corrupt key=%s error=%s", self.key, exc)
            self.history = []
        return list(self.history)

    def save(self, history: list[AnalysisHistoryItem] | None = None) -> None:
        candidate = list(self.history if history is None else history)
        payload = [item.model_dump(by_alias=True) for item in candidate]
        self.storage.write(self.key, json.dumps(payload, ensure_ascii=False))
        self.history = candidate

    def record_result(self, result: AnalysisResult) -> AnalysisHistoryItem:
        item = AnalysisHistoryItem.from_result(result)
        history = [item, *self.history]
        if self.max_items and len(history) > self.max_items:
            history = history[: self.max_items]
        self.save(history)
        self.current = result
        return item

    def update_current(self, result: AnalysisResult) -> None:
        history = [
            item.model_copy(update={"ai_score": result.ai_probability}) if item.id == result.id else item
            for item in self.history
        ]
        if history != self.history:
            self.save(history)
        self.current = result

    def delete_history_item(self, item_id: str) -> bool:
        remaining = [item for item in self.history if item.id != item_id]
        if len(remaining) == len(self.history):
            return False
        self.save(remaining)
        return True

    def get_history_item(self, item_id: str) -> AnalysisHistoryItem | None:
        for item in self.history:
            if item.id == item_id:
                return item
        return None

    def clear_current(self) -> None:
        self.current = None
