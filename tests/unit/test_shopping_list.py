from __future__ import annotations

import itertools

import pytest

from circle_import.models.item import CandidateItem, PurchaseStatus, ShoppingItem
from circle_import.services.shopping_list import ShoppingList


def _sequential_ids():
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture()
def shopping_list() -> ShoppingList:
    return ShoppingList("C105", id_factory=_sequential_ids())


def test_bulk_add_assigns_identity_and_orders(shopping_list, item_factory):
    report = shopping_list.bulk_add(
        [
            item_factory(circle="B", number="10"),
            item_factory(circle="A", number="2"),
        ]
    )
    assert [i.number for i in shopping_list.items] == ["2", "10"]
    assert {i.id for i in shopping_list.items} == {"id-1", "id-2"}
    assert all(i.purchase_status == PurchaseStatus.NONE for i in shopping_list.items)
    assert len(report.added) == 2
    assert report.changed


def test_bulk_add_skips_exact_duplicates(shopping_list, item_factory):
    shopping_list.bulk_add([item_factory(title="Foo")])
    report = shopping_list.bulk_add([item_factory(title="Foo"), item_factory(title="Foo")])
    assert report.duplicates == 2
    assert not report.changed
    assert len(shopping_list) == 1


def test_bulk_add_updates_title_on_positional_match(shopping_list, item_factory):
    shopping_list.bulk_add([item_factory(title="Old", price=500)])
    original = shopping_list.items[0]
    shopping_list.set_status(original.id, PurchaseStatus.PURCHASED)

    report = shopping_list.bulk_add([item_factory(title="New", price=700, remarks="fixed")])
    assert len(report.updated) == 1
    assert len(shopping_list) == 1
    item = shopping_list.items[0]
    assert item.id == original.id
    assert item.title == "New"
    assert item.price == 700
    assert item.remarks == "fixed"
    assert item.purchase_status == PurchaseStatus.PURCHASED


def test_bulk_add_after_title_update_detects_duplicate(shopping_list, item_factory):
    shopping_list.bulk_add([item_factory(title="Old")])
    report = shopping_list.bulk_add([item_factory(title="New"), item_factory(title="New")])
    assert len(report.updated) == 1
    assert report.duplicates == 1


def test_add_item_inserts_in_order(shopping_list, item_factory):
    shopping_list.bulk_add([item_factory(number="1"), item_factory(number="3")])
    added = shopping_list.add_item(item_factory(number="2"))
    assert [i.number for i in shopping_list.items] == ["1", "2", "3"]
    assert shopping_list.get(added.id) is added


def test_update_item_repositions_and_keeps_identity(shopping_list, item_factory):
    shopping_list.bulk_add([item_factory(number=n, circle=n) for n in ("1", "2", "3")])
    first = shopping_list.items[0]
    edited = CandidateItem(circle="1", event_date="1日目", block="A", number="9", title="t")
    updated = shopping_list.update_item(ShoppingItem.from_candidate(edited, first.id))
    assert updated is first
    assert [i.number for i in shopping_list.items] == ["2", "3", "9"]


def test_update_unknown_item_raises(shopping_list, item_factory):
    with pytest.raises(KeyError):
        shopping_list.update_item(ShoppingItem.from_candidate(item_factory(), "missing"))


def test_remove_item(shopping_list, item_factory):
    shopping_list.bulk_add([item_factory(number="1"), item_factory(number="2")])
    target = shopping_list.items[0]
    assert shopping_list.remove_item(target.id) is True
    assert shopping_list.remove_item(target.id) is False
    assert [i.number for i in shopping_list.items] == ["2"]


def test_items_is_a_snapshot(shopping_list, item_factory):
    shopping_list.bulk_add([item_factory()])
    snapshot = shopping_list.items
    snapshot.clear()
    assert len(shopping_list) == 1


def test_bulk_add_counts_repeated_correction_once(shopping_list, item_factory):
    shopping_list.bulk_add([item_factory(title="Old")])
    report = shopping_list.bulk_add([item_factory(title="Fix 1"), item_factory(title="Fix 2")])
    assert len(report.updated) == 1
    assert report.duplicates == 0
    assert shopping_list.items[0].title == "Fix 2"
