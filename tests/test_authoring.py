"""
Content authoring tests: block editing, saving and sharing modes.
"""

import logging

import pytest

from skillshots.ai.schemas import GeneratedCourse
from skillshots.authoring.service import (
    PLACEHOLDER_VIDEO_URL, DraftBoard, ShareMode, TopicDraft, add_block,
    apply_generated_course, delete_topic, draft_from_topic, remove_block,
    resolve_sharing, save_topic, update_block_field
)
from skillshots.catalog.models import ContentType, ParagraphBlock
from skillshots.core.errors import NotFoundError, OutOfRangeError, ValidationError


def draft_with_blocks(*texts, **kwargs) -> TopicDraft:
    draft = TopicDraft(title=kwargs.pop("title", "Draft"), **kwargs)
    for text in texts:
        block = add_block(draft, ContentType.PARAGRAPH)
        block.content = text
    return draft


class TestBlockEditing:

    def test_add_block_appends_empty_block(self):
        draft = TopicDraft()
        add_block(draft, ContentType.PARAGRAPH)
        block = add_block(draft, ContentType.VIDEO)
        assert block.type == "video"
        assert block.content == ""
        assert [b.order for b in draft.blocks] == [1, 2]

    def test_remove_block_keeps_old_orders(self):
        draft = draft_with_blocks("A", "B", "C")
        removed = remove_block(draft, 1)
        assert removed.content == "B"
        assert [b.content for b in draft.blocks] == ["A", "C"]
        assert [b.order for b in draft.blocks] == [1, 3]

    @pytest.mark.parametrize("index", [-1, 3, 10])
    def test_remove_block_out_of_range(self, index):
        draft = draft_with_blocks("A", "B", "C")
        with pytest.raises(OutOfRangeError):
            remove_block(draft, index)
        assert len(draft.blocks) == 3

    def test_update_block_field_mutates_in_place(self):
        draft = draft_with_blocks("A")
        update_block_field(draft, 0, "title", "Intro")
        update_block_field(draft, 0, "content", "Updated")
        assert draft.blocks[0].title == "Intro"
        assert draft.blocks[0].content == "Updated"

    def test_update_block_field_out_of_range(self):
        draft = draft_with_blocks("A")
        with pytest.raises(OutOfRangeError):
            update_block_field(draft, 1, "content", "x")

    def test_update_block_field_rejects_unknown_field(self):
        draft = draft_with_blocks("A")
        with pytest.raises(ValidationError):
            update_block_field(draft, 0, "type", "video")

    def test_update_block_field_rejects_wrong_value_type(self):
        draft = draft_with_blocks("A")
        with pytest.raises(ValidationError):
            update_block_field(draft, 0, "order", "first")
        with pytest.raises(ValidationError):
            update_block_field(draft, 0, "content", 42)


class TestSharingModes:

    def test_users_mode_clears_groups(self):
        groups, users = resolve_sharing(ShareMode.USERS, ["group-1"], ["user-2"], "group-3")
        assert groups == []
        assert users == ["user-2"]

    def test_departments_mode_clears_users(self):
        groups, users = resolve_sharing(ShareMode.DEPARTMENTS, ["group-1", "group-2"], ["user-2"], "group-3")
        assert groups == ["group-1", "group-2"]
        assert users == []

    def test_all_mode_uses_everyone_group(self):
        assert resolve_sharing(ShareMode.ALL, ["group-1"], ["user-2"], "group-3") == (["group-3"], [])

    def test_all_mode_without_everyone_group_is_empty(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert resolve_sharing(ShareMode.ALL, [], [], None) == ([], [])
        assert "everyone group is missing" in caplog.text


class TestSaveTopic:

    async def test_new_topic_gets_id_author_and_renumbered_blocks(self, catalog):
        draft = draft_with_blocks("A", "B", "C", title="  Fresh Topic  ")
        remove_block(draft, 1)

        topic = await save_topic(draft, catalog, "user-1")

        assert topic.id.startswith("TOPIC_")
        assert topic.author_id == "user-1"
        assert topic.title == "Fresh Topic"
        assert [b.content for b in topic.content] == ["A", "C"]
        assert [b.order for b in topic.content] == [1, 2]
        assert catalog.get_topic(topic.id) == topic

    async def test_save_persists_topics(self, catalog, store):
        topic = await save_topic(draft_with_blocks("A"), catalog, "user-1")
        assert any(t["id"] == topic.id for t in store.snapshots["topics"])

    async def test_empty_title_rejected_without_mutation(self, catalog):
        before = dict(catalog.topics)
        with pytest.raises(ValidationError):
            await save_topic(draft_with_blocks("A", title="   "), catalog, "user-1")
        assert catalog.topics == before

    async def test_empty_category_falls_back_to_general(self, catalog):
        topic = await save_topic(draft_with_blocks("A", category=""), catalog, "user-1")
        assert topic.category == "General"

    async def test_unknown_category_rejected(self, catalog):
        with pytest.raises(ValidationError):
            await save_topic(draft_with_blocks("A", category="Astrology"), catalog, "user-1")

    async def test_non_positive_read_time_rejected(self, catalog):
        with pytest.raises(ValidationError):
            await save_topic(draft_with_blocks("A", read_time=0), catalog, "user-1")

    async def test_empty_blocks_are_accepted(self, catalog):
        draft = TopicDraft(title="Media only")
        add_block(draft, ContentType.IMAGE)
        add_block(draft, ContentType.PARAGRAPH)
        topic = await save_topic(draft, catalog, "user-1")
        assert [b.content for b in topic.content] == ["", ""]

    async def test_users_mode_save_has_no_groups(self, catalog):
        draft = draft_with_blocks(
            "A", share_mode=ShareMode.USERS,
            selected_groups=["group-1"], selected_users=["user-2"],
        )
        topic = await save_topic(draft, catalog, "user-1")
        assert topic.shared_with_groups == []
        assert topic.shared_with_users == ["user-2"]

    async def test_departments_mode_save_has_no_users(self, catalog):
        draft = draft_with_blocks(
            "A", share_mode=ShareMode.DEPARTMENTS,
            selected_groups=["group-4"], selected_users=["user-2"],
        )
        topic = await save_topic(draft, catalog, "user-1")
        assert topic.shared_with_groups == ["group-4"]
        assert topic.shared_with_users == []

    async def test_unknown_selected_group_rejected(self, catalog):
        draft = draft_with_blocks("A", share_mode=ShareMode.DEPARTMENTS, selected_groups=["nope"])
        with pytest.raises(NotFoundError):
            await save_topic(draft, catalog, "user-1")

    async def test_all_mode_after_everyone_group_deleted(self, catalog):
        await catalog.remove_group("group-3")
        topic = await save_topic(draft_with_blocks("A", share_mode=ShareMode.ALL), catalog, "user-1")
        assert topic.shared_with_groups == []
        assert topic.shared_with_users == []

    async def test_edit_keeps_id_and_author(self, catalog):
        original = catalog.get_topic("1")
        draft = draft_from_topic(original, catalog.everyone_group_id)
        draft.title = "Workplace Safety Standards 2025"

        topic = await save_topic(draft, catalog, "user-2")

        assert topic.id == "1"
        assert topic.author_id == "user-1"
        assert catalog.get_topic("1").title == "Workplace Safety Standards 2025"

    async def test_edit_in_users_mode_drops_group_sharing(self, catalog):
        draft = draft_from_topic(catalog.get_topic("3"), catalog.everyone_group_id)
        draft.share_mode = ShareMode.USERS
        draft.selected_users = ["user-2"]

        topic = await save_topic(draft, catalog, "user-1")

        assert topic.shared_with_groups == []
        assert topic.shared_with_users == ["user-2"]

    async def test_editing_deleted_topic_is_not_found(self, catalog):
        draft = draft_from_topic(catalog.get_topic("4"), catalog.everyone_group_id)
        await delete_topic("4", catalog)
        with pytest.raises(NotFoundError):
            await save_topic(draft, catalog, "user-1")


class TestDraftFromTopic:

    async def test_infers_all_mode(self, catalog):
        draft = draft_from_topic(catalog.get_topic("1"), "group-3")
        assert draft.share_mode == ShareMode.ALL

    async def test_infers_departments_mode(self, catalog):
        draft = draft_from_topic(catalog.get_topic("3"), "group-3")
        assert draft.share_mode == ShareMode.DEPARTMENTS
        assert draft.selected_groups == ["group-1", "group-2"]

    async def test_infers_users_mode(self, catalog):
        topic = catalog.get_topic("2").model_copy(update={"shared_with_groups": [], "shared_with_users": ["user-2"]})
        draft = draft_from_topic(topic, "group-3")
        assert draft.share_mode == ShareMode.USERS
        assert draft.selected_users == ["user-2"]

    async def test_draft_blocks_are_copies(self, catalog):
        topic = catalog.get_topic("5")
        draft = draft_from_topic(topic, "group-3")
        update_block_field(draft, 0, "content", "changed")
        assert topic.content[0].content != "changed"


class TestDraftBoard:

    def test_one_draft_per_creator(self):
        board = DraftBoard()
        first = board.open("user-1", TopicDraft(title="one"))
        second = board.open("user-1", TopicDraft(title="two"))
        assert board.current("user-1") is second
        assert first is not second

    def test_missing_draft(self):
        with pytest.raises(NotFoundError):
            DraftBoard().current("user-1")


class TestGeneratedCourse:

    def test_placeholders_replaced(self):
        course = GeneratedCourse(
            title="Ladder Safety",
            category="Health & Safety",
            readTime=4.2,
            coverImageKeyword="ladder",
            content=[
                ParagraphBlock(order=1, content="Always face the ladder."),
                {"type": "image", "content": "placeholder", "order": 2},
                {"type": "video", "content": "placeholder", "order": 3},
                {"type": "video", "content": "https://example.com/real", "order": 4},
            ],
        )
        draft = apply_generated_course(TopicDraft(), course, ["General", "Health & Safety"])

        assert draft.title == "Ladder Safety"
        assert draft.category == "Health & Safety"
        assert draft.read_time == 5
        assert draft.image_url == "https://source.unsplash.com/800x600/?ladder"
        assert draft.blocks[1].content == "https://source.unsplash.com/800x400/?ladder"
        assert draft.blocks[2].content == PLACEHOLDER_VIDEO_URL
        assert draft.blocks[3].content == "https://example.com/real"

    def test_unknown_category_becomes_general(self):
        course = GeneratedCourse(title="X", category="Astrology", content=[])
        draft = apply_generated_course(TopicDraft(), course, ["General"])
        assert draft.category == "General"
