"""Custom exceptions following RFC 9457 Problem Details for HTTP APIs."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

logger = logging.getLogger(__name__)


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class ProblemDetailsException(HTTPException):
    """
    Base exception class following RFC 9457 Problem Details for HTTP APIs.

    https://tools.ietf.org/rfc/rfc9457.txt
    """

    def __init__(
        self,
        status_code: int,
        title: str,
        detail: Optional[str] = None,
        type_uri: Optional[str] = None,
        instance: Optional[str] = None,
        extensions: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize Problem Details exception.

        Args:
            status_code: HTTP status code
            title: Short, human-readable summary of the problem type
            detail: Human-readable explanation specific to this occurrence
            type_uri: URI reference that identifies the problem type
            instance: URI reference that identifies the specific occurrence
            extensions: Additional problem-specific information
            headers: HTTP headers to include in response
        """
        self.status_code = status_code
        self.title = title
        self.detail = detail
        self.type_uri = type_uri or f"about:blank#{status_code}"
        self.instance = instance
        self.extensions = extensions or {}

        self.problem_details = {
            "type": self.type_uri,
            "title": self.title,
            "status": self.status_code,
        }

        if self.detail:
            self.problem_details["detail"] = self.detail

        if self.instance:
            self.problem_details["instance"] = self.instance

        self.problem_details.update(self.extensions)

        super().__init__(
            status_code=status_code,
            detail=self.problem_details,
            headers=headers
        )


class ValidationError(ProblemDetailsException):
    """Exception for rejected discovery requests (bad page, limit, difficulty, query)."""

    def __init__(
        self,
        detail: str = "The request parameters failed validation",
        violations: Optional[List[Dict[str, str]]] = None,
        instance: Optional[str] = None,
    ):
        super().__init__(
            status_code=400,
            title="Validation Error",
            detail=detail,
            type_uri="https://example.com/problems/validation-error",
            instance=instance,
            extensions={"violations": violations or []},
        )

    @classmethod
    def from_errors(
        cls,
        errors: List[Dict[str, Any]],
        instance: Optional[str] = None,
    ) -> "ValidationError":
        """Build from pydantic/FastAPI error dicts, one violation per failing field."""
        violations = []
        for error in errors:
            # FastAPI prefixes locations with the parameter source ("query", "body")
            loc = [str(part) for part in error.get("loc", ()) if part not in ("query", "body")]
            violations.append({
                "path": ".".join(loc) or "$",
                "message": error.get("msg", "Invalid value"),
            })
        return cls(violations=violations, instance=instance)


class CatalogUnavailableError(ProblemDetailsException):
    """Exception raised when the tour catalog store cannot be read."""

    def __init__(
        self,
        detail: str = "The tour catalog is temporarily unavailable",
        instance: Optional[str] = None,
    ):
        super().__init__(
            status_code=503,
            title="Catalog Unavailable",
            detail=detail,
            type_uri="https://example.com/problems/catalog-unavailable",
            instance=instance,
            extensions={"retryable": True},
            headers={"Retry-After": "5"},
        )


async def problem_details_handler(request: Request, exc: ProblemDetailsException) -> JSONResponse:
    """
    Exception handler for Problem Details exceptions.

    Args:
        request: FastAPI request object
        exc: Problem Details exception

    Returns:
        JSONResponse: Problem Details formatted response
    """
    content = dict(exc.problem_details)
    content.setdefault("instance", str(request.url))
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=exc.headers,
        media_type="application/problem+json",
    )


async def request_validation_handler(
    request: Request,
    exc: RequestValidationError | PydanticValidationError,
) -> JSONResponse:
    """Render framework and model validation failures as 400 Problem Details."""
    problem = ValidationError.from_errors(list(exc.errors()), instance=str(request.url))
    logger.info(
        "Rejected invalid request",
        extra={"path": request.url.path, "violations": problem.problem_details["violations"]}
    )
    return await problem_details_handler(request, problem)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Generic exception handler that converts unhandled exceptions to Problem Details format.

    Args:
        request: FastAPI request object
        exc: Unhandled exception

    Returns:
        JSONResponse: Problem Details formatted response
    """
    error_id = str(uuid.uuid4())
    logger.error(
        "Unhandled exception",
        extra={"error_id": error_id, "path": request.url.path},
        exc_info=exc,
    )

    problem_details = {
        "type": "https://example.com/problems/internal-server-error",
        "title": "Internal Server Error",
        "status": 500,
        "detail": "An unexpected error occurred while processing the request",
        "instance": str(request.url),
        "error_id": error_id,
        "timestamp": _utc_timestamp(),
    }

    return JSONResponse(
        status_code=500,
        content=problem_details,
        media_type="application/problem+json",
    )
