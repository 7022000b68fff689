from __future__ import annotations

from typing import Literal

ExtractionErrorKind = Literal["unsupported_type", "pdf_unreadable", "docx_unreadable"]


class ResumeGuardError(Exception):
    kind = "resume_guard_error"
    status_code = 500


class ExtractionError(ResumeGuardError, ValueError):
    """Raised when an uploaded document cannot be turned into plain text."""

    def __init__(self, message: str, *, kind: ExtractionErrorKind, declared_type: str | None = None):
        super().__init__(message)
        self.kind = kind
        self.declared_type = declared_type
        self.status_code = 415 if kind == "unsupported_type" else 422

    @classmethod
    def unsupported_type(cls, declared_type: str) -> "ExtractionError":
        return cls(
            f"Unsupported file type: {declared_type or 'unknown'}. Please upload PDF, DOCX, or TXT.",
            kind="unsupported_type",
            declared_type=declared_type,
        )

    @classmethod
    def pdf_unreadable(cls) -> "ExtractionError":
        return cls(
            "Could not extract text from PDF. Please ensure it is a valid text-based PDF.",
            kind="pdf_unreadable",
            declared_type="application/pdf",
        )

    @classmethod
    def docx_unreadable(cls) -> "ExtractionError":
        return cls(
            "Could not extract text from DOCX. Please re-save the document as .docx or paste the text.",
            kind="docx_unreadable",
        )


class InputValidationError(ResumeGuardError, ValueError):
    status_code = 400

    def __init__(self, message: str, *, reason: Literal["too_short", "too_large"] = "too_short"):
        super().__init__(message)
        self.kind = reason
        self.status_code = 413 if reason == "too_large" else 400


class AnalysisFailure(ResumeGuardError, RuntimeError):
    kind = "analysis_failed"
    status_code = 500

    def __init__(self, message: str = "Analysis failed. Please try again."):
        super().__init__(message)


class AnalysisInProgressError(ResumeGuardError, RuntimeError):
    kind = "analysis_in_progress"
    status_code = 409


class HumanizeInProgressError(ResumeGuardError, RuntimeError):
    kind = "humanize_in_progress"
    status_code = 409


class NoCurrentAnalysisError(ResumeGuardError, LookupError):
    kind = "no_current_analysis"
    status_code = 404


class ViewUnavailableError(ResumeGuardError, LookupError):
    kind = "view_unavailable"
    status_code = 409
