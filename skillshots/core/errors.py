"""
Error taxonomy shared by every SkillShots component.

Each kind carries the HTTP status the API renders it with, so callers can
tell a rejected authoring edit from a missing topic or a Gemini outage.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class SkillShotsError(Exception):
    status_code = 500
    kind = "internal_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SkillShotsError):
    status_code = 400
    kind = "validation_error"


class OutOfRangeError(ValidationError):
    kind = "out_of_range"


class QuizNotPassedError(ValidationError):
    kind = "quiz_not_passed"


class NotFoundError(SkillShotsError):
    status_code = 404
    kind = "not_found"

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} '{entity_id}' not found")
        self.entity = entity
        self.entity_id = entity_id


class PermissionDeniedError(SkillShotsError):
    status_code = 403
    kind = "permission_denied"


class ConflictError(SkillShotsError):
    status_code = 409
    kind = "conflict"


class ExternalServiceError(SkillShotsError):
    status_code = 502
    kind = "external_service_error"


async def skillshots_error_handler(request: Request, exc: SkillShotsError) -> JSONResponse:
    if isinstance(exc, ExternalServiceError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.kind},
    )


def register_error_handlers(app: FastAPI):
    app.add_exception_handler(SkillShotsError, skillshots_error_handler)
