"""
Tests for emberls/utils/items.py
"""
from __future__ import annotations

from lsprotocol.types import CompletionItem, CompletionItemKind

from emberls.utils.items import item_label, uniq_by_label, with_label


class TestItemLabel:
    def test_object(self):
        assert item_label(CompletionItem(label="foo")) == "foo"

    def test_dict(self):
        assert item_label({"label": "foo"}) == "foo"

    def test_without_label(self):
        assert item_label(object()) is None
        assert item_label({}) is None


class TestUniqByLabel:
    def test_first_occurrence_kept(self):
        first = CompletionItem(label="foo", detail="first")
        second = CompletionItem(label="foo", detail="second")

        result = uniq_by_label([first, CompletionItem(label="bar"), second])

        assert [item.label for item in result] == ["foo", "bar"]
        assert result[0] is first

    def test_mixed_dicts_and_objects(self):
        result = uniq_by_label([{"label": "foo"}, CompletionItem(label="foo"), {"label": "bar"}])
        assert result == [{"label": "foo"}, {"label": "bar"}]

    def test_idempotent(self):
        items = [CompletionItem(label=label) for label in ("a", "b", "a", "c", "b")]

        once = uniq_by_label(items)

        assert uniq_by_label(once) == once
        assert len({item.label for item in once}) == len(once)


def test_with_label_copies():
    item = CompletionItem(label="foo-bar", kind=CompletionItemKind.Class, detail="component")

    relabeled = with_label(item, "FooBar")

    assert relabeled.label == "FooBar"
    assert relabeled.kind == CompletionItemKind.Class
    assert relabeled.detail == "component"
    assert item.label == "foo-bar"
