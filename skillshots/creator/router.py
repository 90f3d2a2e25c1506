from fastapi import APIRouter, Depends, Request

from skillshots.ai.services import ContentGenerationService
from skillshots.auth.dependencies import get_catalog, get_generator, get_mailer, require_creator
from skillshots.auth.router import public_user
from skillshots.authoring import admin
from skillshots.authoring import service
from skillshots.authoring.service import DraftBoard, TopicDraft
from skillshots.catalog.models import User
from skillshots.catalog.store import Catalog
from skillshots.creator.schemas import (
    BlockAdd, BlockFieldUpdate, CategoryCreate, CourseDraftRequest,
    DraftOpen, DraftUpdate, GroupCreate, UserCreate, UserUpdate
)
from skillshots.notifications.mailer import Mailer

router = APIRouter(prefix="/creator", tags=["Creator Studio"])


def get_drafts(request: Request) -> DraftBoard:
    return request.app.state.drafts

# ==================== TOPICS ====================

@router.get("/topics")
async def list_topics(
    creator: User = Depends(require_creator),
    catalog: Catalog = Depends(get_catalog),
):
    """Every topic in the catalog, regardless of sharing"""
    return [t.model_dump(mode="json") for t in catalog.list_topics()]


@router.post("/topics", status_code=201)
async def create_topic(
    draft: TopicDraft,
    creator: User = Depends(require_creator),
    catalog: Catalog = Depends(get_catalog),
):
    """Save a complete draft in one request"""
    draft.topic_id = None
    topic = await service.save_topic(draft, catalog, creator.id)
    return topic.model_dump(mode="json")


@router.put("/topics/{topic_id}")
async def update_topic(
    topic_id: str,
    draft: TopicDraft,
    creator: User = Depends(require_creator),
    catalog: Catalog = Depends(get_catalog),
):
    draft.topic_id = topic_id
    topic = await service.save_topic(draft, catalog, creator.id)
    return topic.model_dump(mode="json")


@router.delete("/topics/{topic_id}")
async def delete_topic(
    topic_id: str,
    creator: User = Depends(require_creator),
    catalog: Catalog = Depends(get_catalog),
):
    await service.delete_topic(topic_id, catalog)
    return {"message": "Topic deleted"}

# ==================== DRAFT EDITING ====================

@router.post("/drafts", status_code=201)
async def open_draft(
    data: DraftOpen,
    creator: User = Depends(require_creator),
    catalog: Catalog = Depends(get_catalog),
    drafts: DraftBoard = Depends(get_drafts),
):
    """Start a blank draft or re-open an existing topic. Replaces any open draft."""
    if data.topic_id:
        draft = service.draft_from_topic(catalog.get_topic(data.topic_id), catalog.everyone_group_id)
    else:
        draft = TopicDraft()
    return drafts.open(creator.id, draft)


@router.get("/drafts/current")
async def get_draft(
    creator: User = Depends(require_creator),
    drafts: DraftBoard = Depends(get_drafts),
):
    return drafts.current(creator.id)


@router.patch("/drafts/current")
async def update_draft(
    data: DraftUpdate,
    creator: User = Depends(require_creator),
    drafts: DraftBoard = Depends(get_drafts),
):
    draft = drafts.current(creator.id)
    for field, value in data.model_dump(exclude_none=True).items():
        setattr(draft, field, value)
    return draft


@router.delete("/drafts/current")
async def discard_draft(
    creator: User = Depends(require_creator),
    drafts: DraftBoard = Depends(get_drafts),
):
    drafts.close(creator.id)
    return {"message": "Draft discarded"}


@router.post("/drafts/current/blocks", status_code=201)
async def add_block(
    data: BlockAdd,
    creator: User = Depends(require_creator),
    drafts: DraftBoard = Depends(get_drafts),
):
    draft = drafts.current(creator.id)
    service.add_block(draft, data.type)
    return draft


@router.patch("/drafts/current/blocks/{index}")
async def update_block(
    index: int,
    data: BlockFieldUpdate,
    creator: User = Depends(require_creator),
    drafts: DraftBoard = Depends(get_drafts),
):
    draft = drafts.current(creator.id)
    service.update_block_field(draft, index, data.field, data.value)
    return draft


@router.delete("/drafts/current/blocks/{index}")
async def remove_block(
    index: int,
    creator: User = Depends(require_creator),
    drafts: DraftBoard = Depends(get_drafts),
):
    draft = drafts.current(creator.id)
    service.remove_block(draft, index)
    return draft


@router.post("/drafts/current/generate")
async def generate_course_draft(
    data: CourseDraftRequest,
    creator: User = Depends(require_creator),
    catalog: Catalog = Depends(get_catalog),
    generator: ContentGenerationService = Depends(get_generator),
    drafts: DraftBoard = Depends(get_drafts),
):
    """Fill the open draft from an AI-generated course outline"""
    draft = drafts.current(creator.id)
    course = await generator.generate_course(data.prompt, data.resources, catalog.categories)
    return service.apply_generated_course(draft, course, catalog.categories)


@router.post("/drafts/current/save")
async def save_draft(
    creator: User = Depends(require_creator),
    catalog: Catalog = Depends(get_catalog),
    drafts: DraftBoard = Depends(get_drafts),
):
    """Store the open draft as a topic and close it"""
    topic = await service.save_topic(drafts.current(creator.id), catalog, creator.id)
    drafts.close(creator.id)
    return topic.model_dump(mode="json")

# ==================== USERS ====================

@router.get("/users")
async def list_users(
    creator: User = Depends(require_creator),
    catalog: Catalog = Depends(get_catalog),
):
    return [public_user(u, catalog) for u in catalog.list_users()]


@router.post("/users", status_code=201)
async def create_user(
    data: UserCreate,
    creator: User = Depends(require_creator),
    catalog: Catalog = Depends(get_catalog),
    mailer: Mailer = Depends(get_mailer),
):
    result = await admin.add_user(catalog, mailer, data.name, data.email, data.role, data.group_ids)
    return {**result, "user": public_user(result["user"], catalog)}


@router.patch("/users/{user_id}")
async def update_user(
    user_id: str,
    data: UserUpdate,
    creator: User = Depends(require_creator),
    catalog: Catalog = Depends(get_catalog),
):
    user = await admin.update_user(catalog, user_id, **data.model_dump(exclude_none=True))
    return public_user(user, catalog)


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: str,
    creator: User = Depends(require_creator),
    catalog: Catalog = Depends(get_catalog),
):
    await admin.delete_user(catalog, user_id)
    return {"message": "User deleted"}


@router.post("/users/{user_id}/reset-password")
async def reset_password(
    user_id: str,
    creator: User = Depends(require_creator),
    catalog: Catalog = Depends(get_catalog),
    mailer: Mailer = Depends(get_mailer),
):
    result = await admin.reset_password(catalog, mailer, user_id)
    return {**result, "user": public_user(result["user"], catalog)}

# ==================== GROUPS ====================

@router.get("/groups")
async def list_groups(
    creator: User = Depends(require_creator),
    catalog: Catalog = Depends(get_catalog),
):
    return [g.model_dump() for g in catalog.list_groups()]


@router.post("/groups", status_code=201)
async def create_group(
    data: GroupCreate,
    creator: User = Depends(require_creator),
    catalog: Catalog = Depends(get_catalog),
):
    group = await admin.add_group(catalog, data.name)
    return group.model_dump()


@router.delete("/groups/{group_id}")
async def delete_group(
    group_id: str,
    creator: User = Depends(require_creator),
    catalog: Catalog = Depends(get_catalog),
):
    await admin.delete_group(catalog, group_id)
    return {"message": "Group deleted"}

# ==================== CATEGORIES ====================

@router.get("/categories")
async def list_categories(
    creator: User = Depends(require_creator),
    catalog: Catalog = Depends(get_catalog),
):
    return catalog.categories


@router.post("/categories", status_code=201)
async def create_category(
    data: CategoryCreate,
    creator: User = Depends(require_creator),
    catalog: Catalog = Depends(get_catalog),
):
    return await admin.add_category(catalog, data.name)


@router.delete("/categories/{name}")
async def delete_category(
    name: str,
    creator: User = Depends(require_creator),
    catalog: Catalog = Depends(get_catalog),
):
    return await admin.delete_category(catalog, name)
