"""Request ID middleware and per-request exam annotations for access logs."""

import time
import uuid
from typing import Any, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from academy.core.logging import get_logger, request_id_var
from academy.grading.contracts import ExamDefinition

logger = get_logger(__name__)


def note_exam(request: Request, exam: ExamDefinition) -> None:
    """Record which exam a request graded, and how many entries it carried."""
    exam_ids = getattr(request.state, "exam_ids", None)
    if exam_ids is None:
        exam_ids = request.state.exam_ids = []
        request.state.participants = 0
    exam_ids.append(exam.id)
    request.state.participants += len(exam.scores)


def exam_fields(request: Request) -> dict[str, Any]:
    """Log fields for the exams noted on this request, if any."""
    exam_ids = getattr(request.state, "exam_ids", None)
    if not exam_ids:
        return {}
    fields: dict[str, Any] = {"participants": request.state.participants}
    if len(exam_ids) == 1:
        fields["exam_id"] = exam_ids[0]
    else:
        fields["exam_ids"] = list(exam_ids)
    return fields


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and log one line per graded request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": 500,
                    "latency_ms": int((time.perf_counter() - start) * 1000),
                    "error": str(e),
                    **exam_fields(request),
                },
                exc_info=True,
            )
            raise
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "Request completed",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "latency_ms": int((time.perf_counter() - start) * 1000),
                **exam_fields(request),
            },
        )
        return response
