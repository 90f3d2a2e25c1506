"""
Creator administration: users, groups and categories.
"""

import logging
import secrets
import string
from typing import List, Optional

from skillshots.auth.security import hash_password
from skillshots.catalog.models import Group, User, UserRole
from skillshots.catalog.store import Catalog
from skillshots.core.errors import ExternalServiceError, ValidationError
from skillshots.notifications.mailer import Mailer

logger = logging.getLogger(__name__)

TEMP_PASSWORD_LENGTH = 8
_ALPHABET = string.ascii_lowercase + string.digits


def generate_id(prefix: str) -> str:
    """Generate unique ID with prefix"""
    return f"{prefix}_{secrets.token_hex(8).upper()}"


def temporary_password() -> str:
    return "".join(secrets.choice(_ALPHABET) for _ in range(TEMP_PASSWORD_LENGTH))


async def _notify(send, user: User, password: str) -> bool:
    """
    Mail a temporary password that is already stored.

    A delivery failure is reported as email_sent=False instead of an
    error, the password is returned to the creator either way.
    """
    try:
        return await send(user.name, user.email, password)
    except ExternalServiceError as e:
        logger.warning("Temporary password for %s was not mailed: %s", user.id, e.message)
        return False

# ==================== USERS ====================

async def add_user(
    catalog: Catalog,
    mailer: Mailer,
    name: str,
    email: str,
    role: UserRole = UserRole.LEARNER,
    group_ids: Optional[List[str]] = None,
) -> dict:
    """
    Create an account with a temporary password and mail it to the user.

    Returns the stored user together with the temporary password and
    whether the mail went out, so the creator can pass it on manually.
    """
    name = name.strip()
    if not name:
        raise ValidationError("Name cannot be empty")
    if not email.strip():
        raise ValidationError("Email cannot be empty")

    password = temporary_password()
    user = User(
        id=generate_id("USER"),
        name=name,
        email=email,
        role=role,
        group_ids=list(dict.fromkeys(group_ids or [])),
        password_hash=hash_password(password),
    )
    await catalog.put_user(user)
    logger.info("Created %s account %s for %s", role.value, user.id, user.email)

    mailed = await _notify(mailer.send_credentials, user, password)
    return {"user": user, "temporary_password": password, "email_sent": mailed}


async def update_user(
    catalog: Catalog,
    user_id: str,
    name: Optional[str] = None,
    email: Optional[str] = None,
    role: Optional[UserRole] = None,
    group_ids: Optional[List[str]] = None,
) -> User:
    user = catalog.get_user(user_id)

    changes = {}
    if name is not None:
        if not name.strip():
            raise ValidationError("Name cannot be empty")
        changes["name"] = name.strip()
    if email is not None:
        changes["email"] = email.strip().lower()
    if role is not None:
        if user.role == UserRole.CREATOR and role != UserRole.CREATOR and len(catalog.creators()) == 1:
            raise ValidationError("Cannot demote the last Creator account")
        changes["role"] = role
    if group_ids is not None:
        changes["group_ids"] = list(dict.fromkeys(group_ids))

    updated = user.model_copy(update=changes)
    await catalog.put_user(updated)
    return updated


async def delete_user(catalog: Catalog, user_id: str):
    await catalog.remove_user(user_id)
    logger.info("Deleted user %s", user_id)


async def reset_password(catalog: Catalog, mailer: Mailer, user_id: str) -> dict:
    user = catalog.get_user(user_id)
    password = temporary_password()

    updated = user.model_copy(update={"password_hash": hash_password(password)})
    await catalog.put_user(updated)
    logger.info("Password reset for %s", user.id)

    mailed = await _notify(mailer.send_password_reset, updated, password)
    return {"user": updated, "temporary_password": password, "email_sent": mailed}

# ==================== GROUPS ====================

async def add_group(catalog: Catalog, name: str) -> Group:
    name = name.strip()
    if not name:
        raise ValidationError("Group name cannot be empty")
    group = Group(id=generate_id("GROUP"), name=name)
    await catalog.put_group(group)
    logger.info("Created group %s (%s)", group.id, group.name)
    return group


async def delete_group(catalog: Catalog, group_id: str):
    await catalog.remove_group(group_id)
    logger.info("Deleted group %s", group_id)

# ==================== CATEGORIES ====================

async def add_category(catalog: Catalog, name: str) -> List[str]:
    return await catalog.add_category(name)


async def delete_category(catalog: Catalog, name: str) -> List[str]:
    return await catalog.remove_category(name)
