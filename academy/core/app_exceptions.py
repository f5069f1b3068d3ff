"""Grading error codes and the exception that carries them to the error envelope."""

from enum import Enum
from typing import Any

from fastapi import HTTPException


class ErrorCode(str, Enum):
    """Error codes the grading API reports in `error_code`."""

    EXAM_WEIGHTS_MISMATCH = "EXAM_WEIGHTS_MISMATCH"
    ITEM_NOT_FOUND = "ITEM_NOT_FOUND"
    ENTRY_INCOMPLETE = "ENTRY_INCOMPLETE"
    ENTRY_INVALID = "ENTRY_INVALID"


# Rejections of the exam or entry itself; the rest map to their own status.
_STATUS_BY_CODE = {
    ErrorCode.EXAM_WEIGHTS_MISMATCH: 422,
    ErrorCode.ITEM_NOT_FOUND: 404,
    ErrorCode.ENTRY_INCOMPLETE: 422,
    ErrorCode.ENTRY_INVALID: 422,
}


class GradingError(HTTPException):
    """A grading request the engine refuses, tagged with its ErrorCode."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        *,
        exam_id: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = dict(details or {})
        if exam_id is not None:
            details.setdefault("exam_id", exam_id)
        super().__init__(
            status_code=_STATUS_BY_CODE[code],
            detail={"code": code.value, "message": message, "details": details or None},
        )
        self.code = code.value
        self.message = message
        self.details = details or None
        self.exam_id = exam_id


def raise_grading_error(
    code: ErrorCode,
    message: str,
    *,
    exam_id: str | None = None,
    details: dict[str, Any] | None = None,
) -> None:
    """Raise a GradingError; the status code follows from `code`."""
    raise GradingError(code, message, exam_id=exam_id, details=details)


def raise_invalid_exam(exam_id: str, message: str, details: dict[str, Any] | None = None) -> None:
    """Reject an exam definition the grading engine should never see."""
    raise_grading_error(ErrorCode.EXAM_WEIGHTS_MISMATCH, message, exam_id=exam_id, details=details)
