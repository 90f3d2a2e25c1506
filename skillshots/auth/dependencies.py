from fastapi import Depends, Header, HTTPException, Request
from jose import JWTError

from skillshots.ai.services import ContentGenerationService
from skillshots.auth.security import decode_access_token
from skillshots.catalog.models import User
from skillshots.catalog.store import Catalog
from skillshots.core.config import Configuration
from skillshots.core.errors import NotFoundError, PermissionDeniedError
from skillshots.notifications.mailer import Mailer
from skillshots.progress.tracker import ProgressTracker
from skillshots.quiz.evaluator import QuizSessions

# ==================== SERVICES ====================

def get_configuration(request: Request) -> Configuration:
    return request.app.state.config


def get_catalog(request: Request) -> Catalog:
    return request.app.state.catalog


def get_generator(request: Request) -> ContentGenerationService:
    return request.app.state.generator


def get_quiz_sessions(request: Request) -> QuizSessions:
    return request.app.state.quiz_sessions


def get_tracker(request: Request) -> ProgressTracker:
    return request.app.state.tracker


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer

# ==================== AUTH ====================

async def get_current_user(
    authorization: str = Header(None),
    config: Configuration = Depends(get_configuration),
    catalog: Catalog = Depends(get_catalog),
) -> User:
    """
    Resolve the bearer token to a catalog user.

    Raises:
        401: Missing, invalid or expired token, or the user no longer exists
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Unauthorized")

    token = authorization.split(" ", 1)[1]
    try:
        payload = decode_access_token(token, config)
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or Expired Token")

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token: missing user id")

    try:
        return catalog.get_user(user_id)
    except NotFoundError:
        raise HTTPException(status_code=401, detail="Account no longer exists")


async def require_creator(user: User = Depends(get_current_user)) -> User:
    if not user.is_creator:
        raise PermissionDeniedError("Access denied. Creator privileges required.")
    return user
