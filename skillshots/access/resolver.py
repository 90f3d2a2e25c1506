"""
Topic visibility.

A topic reaches a user through either of two sharing channels:
- a group the user belongs to is in topic.shared_with_groups
- the user's id is in topic.shared_with_users

Either channel alone is enough. Authorship grants nothing by itself.
"""

from typing import Dict, Iterable, List, Optional

from skillshots.catalog.models import ContentType, Topic, TopicStatus, User

ALL_CATEGORIES = "All"


def is_visible(user: User, topic: Topic) -> bool:
    shared_with_group = bool(set(user.group_ids) & set(topic.shared_with_groups))
    shared_with_user = user.id in topic.shared_with_users
    return shared_with_group or shared_with_user


def visible_topics(user: User, all_topics: Iterable[Topic]) -> List[Topic]:
    """Topics the user can see, in catalog order"""
    return [t for t in all_topics if is_visible(user, t)]


def matches_search(topic: Topic, search: str) -> bool:
    """Case-insensitive match on the title or any paragraph text"""
    needle = search.strip().lower()
    if not needle:
        return True
    if needle in topic.title.lower():
        return True
    return any(
        block.type == ContentType.PARAGRAPH and needle in block.content.lower()
        for block in topic.content
    )


def filter_topics(
    topics: Iterable[Topic],
    statuses: Dict[str, TopicStatus],
    search: str = "",
    category: str = ALL_CATEGORIES,
    status: Optional[TopicStatus] = None,
    sop_only: bool = False,
) -> List[Topic]:
    """
    Dashboard filters applied on top of visibility.

    Args:
        topics: Already-visible topics
        statuses: topic_id -> status for the requesting user
        search: Free text, matched against title and paragraphs
        category: Exact category or "All"
        status: Keep only Pending or only Completed topics
        sop_only: SOP library view (reference documents only)
    """
    result = []
    for topic in topics:
        if sop_only and not topic.is_sop:
            continue
        if category and category != ALL_CATEGORIES and topic.category != category:
            continue
        if status and statuses.get(topic.id, TopicStatus.PENDING) != status:
            continue
        if not matches_search(topic, search):
            continue
        result.append(topic)
    return result


def split_by_status(topics: Iterable[Topic], statuses: Dict[str, TopicStatus]):
    """Returns (pending, completed)"""
    pending, completed = [], []
    for topic in topics:
        if statuses.get(topic.id, TopicStatus.PENDING) == TopicStatus.COMPLETED:
            completed.append(topic)
        else:
            pending.append(topic)
    return pending, completed
