import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, EmailStr, Field

from skillshots.auth.dependencies import get_catalog, get_configuration, get_current_user
from skillshots.auth.security import create_access_token, hash_password, verify_password
from skillshots.authoring.admin import generate_id
from skillshots.catalog.models import User, UserRole
from skillshots.catalog.store import Catalog
from skillshots.core.config import Configuration
from skillshots.core.errors import ConflictError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


class RegisterBody(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6)


class LoginBody(BaseModel):
    email: EmailStr
    password: str


def public_user(user: User, catalog: Catalog) -> dict:
    """User without the password hash, with group names resolved"""
    data = user.model_dump(mode="json", exclude={"password_hash"})
    data["groups"] = [
        {"id": g.id, "name": g.name} for g in catalog.list_groups() if g.id in user.group_ids
    ]
    return data


def token_response(user: User, catalog: Catalog, config: Configuration) -> dict:
    return {
        "access_token": create_access_token(user.id, config),
        "token_type": "bearer",
        "user": public_user(user, catalog),
    }


@router.post("/register", status_code=201)
async def register(
    body: RegisterBody,
    catalog: Catalog = Depends(get_catalog),
    config: Configuration = Depends(get_configuration),
):
    """Self sign-up. New accounts are Learners in the everyone group."""
    if catalog.find_user_by_email(body.email):
        raise ConflictError(f"A user with email {body.email} already exists")

    group_ids = [catalog.everyone_group_id] if catalog.everyone_group_id else []
    user = User(
        id=generate_id("USER"),
        name=body.name.strip(),
        email=body.email,
        role=UserRole.LEARNER,
        group_ids=group_ids,
        password_hash=hash_password(body.password),
    )
    await catalog.put_user(user)
    logger.info("Registered learner %s", user.email)
    return token_response(user, catalog, config)


@router.post("/login")
async def login(
    body: LoginBody,
    catalog: Catalog = Depends(get_catalog),
    config: Configuration = Depends(get_configuration),
):
    user = catalog.find_user_by_email(body.email)
    if not user or not verify_password(body.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return token_response(user, catalog, config)


@router.get("/me")
async def me(
    user: User = Depends(get_current_user),
    catalog: Catalog = Depends(get_catalog),
):
    return public_user(user, catalog)
