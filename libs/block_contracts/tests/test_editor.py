"""Tests binding éditeur — copy-on-write, no-ops sur références périmées, reorder."""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from block_contracts import (
    EditorBinding, get_default_block_data, new_block,
    remove_block, reorder, set_block_hidden, update_block_data,
)


@pytest.fixture
def cards():
    return EditorBinding.for_type("cards")


@pytest.fixture
def data():
    return {
        "title": "Features",
        "cards": [
            {"id": "a", "title": "A", "description": "first", "imageUrl": ""},
            {"id": "b", "title": "B", "description": "second", "imageUrl": ""},
        ],
    }


def _blocks():
    return [
        {"id": "b1", "type": "text", "data": {"title": "1", "content": "x"}, "hidden": False},
        {"id": "b2", "type": "banner", "data": {"title": "2"}, "hidden": False},
        {"id": "b3", "type": "promoBanner", "data": {}, "hidden": False},
    ]


# ── for_type ──────────────────────────────────────────────────────────────────

def test_for_type_unknown():
    assert EditorBinding.for_type("nonexistent-type") is None


# ── set_scalar ────────────────────────────────────────────────────────────────

class TestSetScalar:
    def test_replaces_value_copy_on_write(self, cards, data):
        new = cards.set_scalar(data, "title", "New")
        assert new["title"] == "New"
        assert data["title"] == "Features"
        assert new is not data

    def test_siblings_kept_by_reference(self, cards, data):
        new = cards.set_scalar(data, "title", "New")
        assert new["cards"] is data["cards"]

    def test_unknown_field_noop(self, cards, data):
        assert cards.set_scalar(data, "nope", "x") is data

    def test_list_field_noop(self, cards, data):
        assert cards.set_scalar(data, "cards", "x") is data

    def test_malformed_inputs_noop(self, cards, data):
        assert cards.set_scalar(data, None, "x") is data
        assert cards.set_scalar(None, "title", "x") is None


# ── add_list_item ─────────────────────────────────────────────────────────────

class TestAddListItem:
    def test_item_shape(self, cards, data):
        new = cards.add_list_item(data, "cards")
        item = new["cards"][-1]
        assert set(item) == {"id", "title", "description", "imageUrl"}
        assert item["title"] == item["description"] == item["imageUrl"] == ""
        assert item["id"] not in {"a", "b"}

    def test_does_not_touch_input(self, cards, data):
        cards.add_list_item(data, "cards")
        assert len(data["cards"]) == 2

    def test_existing_items_kept_by_reference(self, cards, data):
        new = cards.add_list_item(data, "cards")
        assert new["cards"][0] is data["cards"][0]

    def test_missing_list_starts_empty(self, cards):
        new = cards.add_list_item({"title": ""}, "cards")
        assert len(new["cards"]) == 1

    def test_non_list_field_noop(self, cards, data):
        assert cards.add_list_item(data, "title") is data
        assert cards.add_list_item(data, "nope") is data

    def test_add_then_remove_round_trip(self, cards, data):
        before = list(data["cards"])
        added = cards.add_list_item(data, "cards")
        item_id = added["cards"][-1]["id"]
        restored = cards.remove_list_item(added, "cards", item_id)
        assert restored["cards"] == before
        assert len(restored["cards"]) == len(before)

    def test_ids_never_collide(self, cards):
        current = get_default_block_data("cards")
        for _ in range(10_000):
            current = cards.add_list_item(current, "cards")
        ids = [it["id"] for it in current["cards"]]
        assert len(set(ids)) == 10_000

    def test_ids_distinct_across_lists(self):
        gallery = EditorBinding.for_type("gallery")
        one = gallery.add_list_item(get_default_block_data("gallery"), "images")
        two = gallery.add_list_item(get_default_block_data("gallery"), "images")
        assert one["images"][0]["id"] != two["images"][0]["id"]

    def test_unhashable_existing_ids_ignored(self, cards):
        data = {"title": "", "cards": [{"id": {"x": 1}, "title": "A"}, {"id": ["y"], "title": "B"}]}
        new = cards.add_list_item(data, "cards")
        assert len(new["cards"]) == 3
        assert isinstance(new["cards"][-1]["id"], str)
        assert new["cards"][0] is data["cards"][0]


# ── update_list_item ──────────────────────────────────────────────────────────

class TestUpdateListItem:
    def test_merges_patch(self, cards, data):
        new = cards.update_list_item(data, "cards", "b", {"title": "BB"})
        assert new["cards"][1] == {"id": "b", "title": "BB", "description": "second", "imageUrl": ""}
        assert data["cards"][1]["title"] == "B"
        assert new["cards"][0] is data["cards"][0]

    def test_id_never_reassigned(self, cards, data):
        new = cards.update_list_item(data, "cards", "a", {"id": "zzz", "title": "AA"})
        assert new["cards"][0]["id"] == "a"
        assert new["cards"][0]["title"] == "AA"

    def test_unknown_keys_ignored(self, cards, data):
        new = cards.update_list_item(data, "cards", "a", {"bogus": 1})
        assert "bogus" not in new["cards"][0]

    def test_mixed_patch_applies_declared_keys_only(self, cards, data):
        new = cards.update_list_item(data, "cards", "a", {"title": "AA", "bogus": 1, "id": "zzz"})
        assert new["cards"][0] == {"id": "a", "title": "AA", "description": "first", "imageUrl": ""}

    def test_stale_item_id_noop(self, cards, data):
        assert cards.update_list_item(data, "cards", "gone", {"title": "x"}) is data

    def test_bad_field_or_patch_noop(self, cards, data):
        assert cards.update_list_item(data, "title", "a", {"title": "x"}) is data
        new = cards.update_list_item(data, "cards", "a", None)
        assert new["cards"][0] == data["cards"][0]


# ── remove_list_item ──────────────────────────────────────────────────────────

class TestRemoveListItem:
    def test_removes(self, cards, data):
        new = cards.remove_list_item(data, "cards", "a")
        assert [c["id"] for c in new["cards"]] == ["b"]
        assert len(data["cards"]) == 2

    def test_stale_item_id_noop(self, cards, data):
        assert cards.remove_list_item(data, "cards", "gone") is data

    def test_unknown_field_noop(self, cards, data):
        assert cards.remove_list_item(data, "nope", "a") is data


# ── assign_item_ids ───────────────────────────────────────────────────────────

class TestAssignItemIds:
    def test_fills_missing_ids_only(self, cards):
        data = {"title": "", "cards": [{"id": "keep", "title": "A"}, {"title": "B"}]}
        new = cards.assign_item_ids(data)
        assert new["cards"][0]["id"] == "keep"
        assert new["cards"][1]["id"] and new["cards"][1]["id"] != "keep"
        assert "id" not in data["cards"][1]

    def test_noop_when_all_have_ids(self, cards, data):
        assert cards.assign_item_ids(data) is data

    def test_unhashable_ids(self, cards):
        data = {"title": "", "cards": [{"id": [], "title": "A"}, {"id": {"k": 1}, "title": "B"}, {"title": "C"}]}
        new = cards.assign_item_ids(data)
        assert isinstance(new["cards"][0]["id"], str)
        assert new["cards"][1]["id"] == {"k": 1}
        assert isinstance(new["cards"][2]["id"], str)
        assert new["cards"][0]["id"] != new["cards"][2]["id"]


# ── Séquence de blocs ─────────────────────────────────────────────────────────

class TestReorder:
    def test_first_up_is_identity(self):
        blocks = _blocks()
        assert reorder(blocks, 0, "up") is blocks

    def test_last_down_is_identity(self):
        blocks = _blocks()
        assert reorder(blocks, len(blocks) - 1, "down") is blocks

    def test_swap_down(self):
        blocks = _blocks()
        moved = reorder(blocks, 0, "down")
        assert [b["id"] for b in moved] == ["b2", "b1", "b3"]
        assert [b["id"] for b in blocks] == ["b1", "b2", "b3"]

    def test_swap_up(self):
        moved = reorder(_blocks(), 2, "up")
        assert [b["id"] for b in moved] == ["b1", "b3", "b2"]

    @pytest.mark.parametrize("index,direction", [(5, "up"), (-1, "down"), (1, "left"), ("1", "up")])
    def test_invalid_moves_noop(self, index, direction):
        blocks = _blocks()
        assert reorder(blocks, index, direction) is blocks

    def test_empty(self):
        assert reorder([], 0, "down") == []


class TestBlockHelpers:
    def test_new_block(self):
        block = new_block("cards")
        assert block.type == "cards"
        assert block.data == {"title": "", "cards": []}
        assert block.hidden is False
        assert block.id

    def test_new_block_unknown_type(self):
        assert new_block("nonexistent-type").data == {}

    def test_remove_block(self):
        blocks = _blocks()
        assert [b["id"] for b in remove_block(blocks, "b2")] == ["b1", "b3"]
        assert remove_block(blocks, "gone") is blocks

    def test_update_block_data(self):
        blocks = _blocks()
        new = update_block_data(blocks, "b2", {"subtitle": "S"})
        assert new[1]["data"] == {"title": "2", "subtitle": "S"}
        assert blocks[1]["data"] == {"title": "2"}
        assert update_block_data(blocks, "gone", {"x": 1}) is blocks

    def test_set_block_hidden(self):
        blocks = _blocks()
        new = set_block_hidden(blocks, "b1", True)
        assert new[0]["hidden"] is True
        assert blocks[0]["hidden"] is False
        assert set_block_hidden(blocks, "gone", True) is blocks

    @pytest.mark.parametrize("blocks", [None, "b1", {"id": "b1"}, 42])
    def test_non_sequence_blocks_returned_unchanged(self, blocks):
        assert reorder(blocks, 0, "down") is blocks
        assert remove_block(blocks, "b1") is blocks
        assert update_block_data(blocks, "b1", {"x": 1}) is blocks
        assert set_block_hidden(blocks, "b1", True) is blocks
