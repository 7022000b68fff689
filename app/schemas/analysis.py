from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field

ResultView = Literal["original", "humanized"]
ControllerStateName = Literal["idle", "submitting", "ready"]

PREVIEW_CHARS = 100
PREVIEW_SUFFIX = "..."
UNTITLED_LABEL = "Untitled"

HIGH_AI_VERDICT = "High AI Content Detected"
HUMAN_VERDICT = "Content Appears Human"
HIGH_AI_DETAIL = "This resume shows patterns typical of AI generation. We recommend humanizing it."
HUMAN_DETAIL = "Great job! This resume has a natural, human tone."


def iso_from_epoch_ms(timestamp_ms: int) -> str:
    seconds, millis = divmod(int(timestamp_ms), 1000)
    moment = datetime.fromtimestamp(seconds, tz=timezone.utc) + timedelta(milliseconds=millis)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class AnalysisResult(BaseModel):
    id: str
    file_name: str | None = None
    original_text: str
    ai_probability: int = Field(ge=0, le=100)
    human_probability: int = Field(ge=0, le=100)
    timestamp: int
    suggestions: list[str] = Field(default_factory=list)
    humanized_text: str | None = None


class AnalysisHistoryItem(BaseModel):
    """Persisted summary of a past analysis.

    Keeps the camelCase keys of the stored history document so existing
    histories stay readable.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    file_name: str = Field(alias="fileName")
    date: str
    ai_score: int = Field(alias="aiScore")
    preview: str

    @classmethod
    def from_result(cls, result: AnalysisResult) -> "AnalysisHistoryItem":
        return cls(
            id=result.id,
            file_name=result.file_name or UNTITLED_LABEL,
            date=iso_from_epoch_ms(result.timestamp),
            ai_score=result.ai_probability,
            preview=result.original_text[:PREVIEW_CHARS] + PREVIEW_SUFFIX,
        )


class AnalysisResultView(BaseModel):
    id: str
    file_name: str | None = None
    original_text: str
    ai_probability: int
    human_probability: int
    timestamp: int
    suggestions: list[str]
    humanized_text: str | None = None

    @computed_field
    @property
    def humanized_available(self) -> bool:
        return self.humanized_text is not None

    @computed_field
    @property
    def verdict(self) -> str:
        return HIGH_AI_VERDICT if self.ai_probability > 50 else HUMAN_VERDICT

    @computed_field
    @property
    def verdict_detail(self) -> str:
        return HIGH_AI_DETAIL if self.ai_probability > 50 else HUMAN_DETAIL

    @classmethod
    def from_result(cls, result: AnalysisResult) -> "AnalysisResultView":
        return cls(**result.model_dump())


class TextSubmission(BaseModel):
    text: str = Field(default="", max_length=200000)
    file_name: str | None = Field(default=None, max_length=255)


class HistoryItemView(BaseModel):
    id: str
    file_name: str
    date: str
    ai_score: int
    preview: str

    @classmethod
    def from_item(cls, item: AnalysisHistoryItem) -> "HistoryItemView":
        return cls(
            id=item.id,
            file_name=item.file_name,
            date=item.date,
            ai_score=item.ai_score,
            preview=item.preview,
        )


class HistorySelection(BaseModel):
    item: HistoryItemView
    report_available: bool = False
    notice: str


class SessionStatus(BaseModel):
    state: ControllerStateName
    is_analyzing: bool
    is_humanizing: bool
    current_id: str | None = None
    history_count: int
    accepted_types: list[str]
    upload_size_hint_mb: int
    min_text_chars: int
