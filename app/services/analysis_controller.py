from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Protocol

from app.core.errors import (
    AnalysisFailure,
    AnalysisInProgressError,
    ExtractionError,
    HumanizeInProgressError,
    InputValidationError,
    NoCurrentAnalysisError,
    ResumeGuardError,
    ViewUnavailableError,
)
from app.parsing.extract import extract_text, is_supported
from app.parsing.signatures import normalize_content_type
from app.schemas.analysis import AnalysisHistoryItem, AnalysisResult, ControllerStateName, ResultView
from app.services.analysis_engine import AnalysisEngine, epoch_ms, humanized_scores
from app.services.session_store import SessionStore

logger = logging.getLogger(__name__)

MANUAL_ENTRY_LABEL = "Manual Entry"
UPLOAD_CHUNK_BYTES = 1024 * 64

Extractor = Callable[..., str]


class UploadedFile(Protocol):
    """What the controller needs from an upload (FastAPI's UploadFile fits)."""

    filename: str | None
    content_type: str | None

    async def read(self, size: int = -1) -> bytes: ...


class AnalysisController:
    """Request lifecycle for one session: idle -> submitting -> ready."""

    def __init__(
        self,
        store: SessionStore,
        engine: AnalysisEngine | None = None,
        *,
        extractor: Extractor = extract_text,
        analysis_delay: float = 0.0,
        humanize_delay: float = 0.0,
        min_text_chars: int = 50,
        max_upload_bytes: int = 0,
        clock: Callable[[], int] = epoch_ms,
    ):
        self.store = store
        self.engine = engine or AnalysisEngine()
        self.extractor = extractor
        self.analysis_delay = analysis_delay
        self.humanize_delay = humanize_delay
        self.min_text_chars = min_text_chars
        self.max_upload_bytes = max_upload_bytes
        self.clock = clock
        self.is_analyzing = False
        self._humanizing: set[str] = set()

    @property
    def current(self) -> AnalysisResult | None:
        return self.store.current

    @property
    def state(self) -> ControllerStateName:
        if self.is_analyzing:
            return "submitting"
        if self.store.current is not None:
            return "ready"
        return "idle"

    @property
    def is_humanizing(self) -> bool:
        return bool(self._humanizing)

    def _begin_submit(self) -> None:
        if self.is_analyzing:
            raise AnalysisInProgressError("An analysis is already running. Please wait for it to finish.")
        self.is_analyzing = True

    def validate_text(self, text: str) -> None:
        if len((text or "").strip()) < self.min_text_chars:
            raise InputValidationError(
                f"Please enter at least {self.min_text_chars} characters for accurate analysis.",
                reason="too_short",
            )

    async def submit_text(self, text: str, file_name: str | None = None) -> AnalysisResult:
        self.validate_text(text)
        self._begin_submit()
        return await self._run_submit(lambda: self._passthrough(text), file_name or MANUAL_ENTRY_LABEL)

    async def submit_file(self, upload: UploadedFile) -> AnalysisResult:
        file_name = upload.filename or "uploaded-file"
        declared_type = normalize_content_type(upload.content_type)
        if not is_supported(declared_type, file_name):
            logger.info("upload_rejected declared_type=%s file=%s", declared_type, file_name)
            raise ExtractionError.unsupported_type(declared_type)

        self._begin_submit()

        async def extract() -> str:
            content = await self._read_upload(upload)
            return await asyncio.to_thread(self.extractor, content, declared_type, file_name)

        return await self._run_submit(extract, file_name)

    async def _passthrough(self, text: str) -> str:
        return text

    async def _read_upload(self, upload: UploadedFile) -> bytes:
        chunks: list[bytes] = []
        total = 0
        while True:
            chunk = await upload.read(UPLOAD_CHUNK_BYTES)
            if not chunk:
                break
            total += len(chunk)
            if self.max_upload_bytes and total > self.max_upload_bytes:
                raise InputValidationError(
                    f"File too large. Maximum allowed size is {self.max_upload_bytes} bytes.",
                    reason="too_large",
                )
            chunks.append(chunk)
        return b"".join(chunks)

    async def _run_submit(self, load_text: Callable[[], Any], file_name: str) -> AnalysisResult:
        try:
            text = await load_text()
            if self.analysis_delay:
                await asyncio.sleep(self.analysis_delay)
            result = self.engine.analyze(text, file_name)
            self.store.record_result(result)
        except ResumeGuardError as exc:
            logger.info("analysis_rejected file=%s kind=%s", file_name, exc.kind)
            self.store.clear_current()
            raise
        except Exception as exc:
            logger.exception("analysis_failed file=%s", file_name)
            self.store.clear_current()
            raise AnalysisFailure() from exc
        finally:
            self.is_analyzing = False

        logger.info(
            "analysis_submitted id=%s file=%s chars=%s ai=%s",
            result.id,
            file_name,
            len(text),
            result.ai_probability,
        )
        return result

    async def humanize(self) -> AnalysisResult:
        if self.is_analyzing:
            raise AnalysisInProgressError("An analysis is running. Humanize its result once it finishes.")
        result = self.store.current
        if result is None:
            raise NoCurrentAnalysisError("There is no analysis to humanize.")
        if result.id in self._humanizing:
            raise HumanizeInProgressError("Humanization is already running for this analysis.")

        self._humanizing.add(result.id)
        try:
            if self.humanize_delay:
                await asyncio.sleep(self.humanize_delay)
            humanized_text = self.engine.humanize(result.original_text)
        finally:
            self._humanizing.discard(result.id)

        latest = self.store.current
        if latest is None or latest.id != result.id:
            # Reset or superseded while rewriting; keep the new state untouched.
            logger.info("humanize_discarded id=%s", result.id)
            raise NoCurrentAnalysisError("The analysis was closed before humanization finished.")

        ai_probability, human_probability = humanized_scores(latest.ai_probability, latest.human_probability)
        updated = latest.model_copy(
            update={
                "humanized_text": humanized_text,
                "ai_probability": ai_probability,
                "human_probability": human_probability,
            }
        )
        self.store.update_current(updated)
        logger.info("humanize_completed id=%s ai=%s human=%s", updated.id, ai_probability, human_probability)
        return updated

    def reset(self) -> None:
        if self.store.current is not None:
            logger.info("analysis_reset id=%s", self.store.current.id)
        self.store.clear_current()

    def export(self, view: ResultView) -> tuple[str, str]:
        result = self.store.current
        if result is None:
            raise NoCurrentAnalysisError("There is no analysis to download.")
        if view == "humanized":
            if result.humanized_text is None:
                raise ViewUnavailableError("Humanize the analysis before downloading the humanized text.")
            text = result.humanized_text
        else:
            text = result.original_text
        return f"resume_{view}_{self.clock()}.txt", text

    def history(self) -> list[AnalysisHistoryItem]:
        return list(self.store.history)

    def delete_history_item(self, item_id: str) -> bool:
        deleted = self.store.delete_history_item(item_id)
        if deleted:
            logger.info("history_item_deleted id=%s", item_id)
        return deleted

    def select_history_item(self, item_id: str) -> AnalysisHistoryItem | None:
        return self.store.get_history_item(item_id)
