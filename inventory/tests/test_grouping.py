import random
from datetime import datetime, timedelta, timezone

import pytest
from common.choices import ItemStatus, TransactionType
from django.contrib.auth import get_user_model
from django.test import override_settings
from inventory.grouping import (
    filter_groups,
    filter_transactions,
    group_transactions,
    paginate_groups,
    transactions_for_item,
)
from inventory.models import Transaction

# Multiple of 5 and 60 seconds since the epoch, so buckets start here
BASE = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

SITE_A = 101
SITE_B = 102
TRUCK = 201


def _user(pk, first="", last="", username=None):
    return get_user_model()(id=pk, username=username or f"user{pk}", first_name=first, last_name=last)


AMY = _user(1, "Amy", "Lee")
BOB = _user(2, username="bob")


def _txn(pk, *, seconds, item_id=1, user=AMY, kind=TransactionType.VEHICLE_TO_SITE, source=TRUCK, dest=SITE_A, status=ItemStatus.ACTIVE, job_id=""):
    return Transaction(
        id=pk,
        item_id=item_id,
        quantity=1,
        transaction_type=kind,
        source_location_id=source,
        dest_location_id=dest,
        submitted_by=user,
        item_status=status,
        job_id=job_id,
        created_at=BASE + timedelta(seconds=seconds),
    )


def _membership(groups):
    return [(g.key, sorted(t.id for t in g.items)) for g in groups]


def test_simultaneous_transfers_by_one_submitter_form_one_group():
    txns = [
        _txn(1, seconds=0.2, item_id=10),
        _txn(2, seconds=1.0, item_id=11),
        _txn(3, seconds=2.1, item_id=12, job_id="J-7"),
    ]

    groups = group_transactions(txns)

    assert len(groups) == 1
    group = groups[0]
    assert sorted(t.id for t in group.items) == [1, 2, 3]
    assert group.transaction_type == TransactionType.VEHICLE_TO_SITE
    assert group.submitted_by_id == AMY.id
    assert group.display_actor == "Amy Lee"
    assert group.created_at == BASE + timedelta(seconds=2.1)
    assert group.latest_sequence == 3
    assert group.job_id == "J-7"


def test_grouping_is_independent_of_input_order():
    txns = [
        _txn(1, seconds=0, item_id=1),
        _txn(2, seconds=1, item_id=2),
        _txn(3, seconds=1, item_id=3, user=BOB),
        _txn(4, seconds=3, item_id=4, kind=TransactionType.SITE_TO_VEHICLE, source=SITE_A, dest=TRUCK),
        _txn(5, seconds=7, item_id=5),
        _txn(6, seconds=7, item_id=6, kind=TransactionType.AUDIT_ADJUSTMENT, source=TRUCK, dest=None),
    ]
    expected = _membership(group_transactions(txns))

    rng = random.Random(42)
    for _ in range(10):
        shuffled = txns[:]
        rng.shuffle(shuffled)
        assert _membership(group_transactions(shuffled)) == expected
    assert len(expected) == 5


def test_groups_split_on_submitter_type_and_window():
    txns = [
        _txn(1, seconds=0),
        _txn(2, seconds=1, user=BOB),
        _txn(3, seconds=1, kind=TransactionType.SITE_TO_VEHICLE, source=SITE_A, dest=TRUCK),
        _txn(4, seconds=6),
    ]

    groups = group_transactions(txns)

    assert len(groups) == 4
    assert {g.display_actor for g in groups} == {"Amy Lee", "bob"}


def test_groups_are_ordered_newest_first():
    txns = [_txn(1, seconds=0), _txn(2, seconds=12), _txn(3, seconds=6)]

    groups = group_transactions(txns)

    assert [g.items[0].id for g in groups] == [2, 3, 1]
    assert [g.created_at for g in groups] == sorted((g.created_at for g in groups), reverse=True)


def test_members_are_listed_newest_first_with_sequence_tiebreak():
    txns = [_txn(1, seconds=1), _txn(2, seconds=1), _txn(3, seconds=0)]

    (group,) = group_transactions(txns)

    assert [t.id for t in group.items] == [2, 1, 3]


def test_system_transactions_show_system_actor():
    (group,) = group_transactions([_txn(1, seconds=0, user=None)])

    assert group.submitted_by_id is None
    assert group.display_actor == "System"


def test_vehicle_feed_splits_by_counterpart_location():
    txns = [_txn(1, seconds=0, dest=SITE_A), _txn(2, seconds=1, dest=SITE_B), _txn(3, seconds=2, dest=SITE_A)]

    assert len(group_transactions(txns)) == 1
    split = group_transactions(txns, split_by_counterpart_of=TRUCK)
    assert sorted(sorted(t.id for t in g.items) for g in split) == [[1, 3], [2]]


def test_window_is_configurable():
    txns = [_txn(1, seconds=0), _txn(2, seconds=40)]

    assert len(group_transactions(txns)) == 2
    assert len(group_transactions(txns, window_seconds=60)) == 1
    with override_settings(INVENTORY_HISTORY_GROUP_WINDOW_SECONDS=60):
        assert len(group_transactions(txns)) == 1
    with pytest.raises(ValueError):
        group_transactions(txns, window_seconds=0)


def test_empty_input_yields_no_groups():
    assert group_transactions([]) == []


def test_filter_groups_matches_any_member_status():
    txns = [
        _txn(1, seconds=0, status=ItemStatus.ACTIVE),
        _txn(2, seconds=1, status=ItemStatus.DAMAGED),
        _txn(3, seconds=20, status=ItemStatus.ACTIVE),
    ]
    groups = group_transactions(txns)

    damaged = filter_groups(groups, item_status=ItemStatus.DAMAGED)

    assert len(damaged) == 1
    assert sorted(t.id for t in damaged[0].items) == [1, 2]
    assert filter_groups(groups, transaction_type=TransactionType.AUDIT_ADJUSTMENT) == []
    assert len(filter_groups(groups)) == 2


def test_filter_transactions_before_grouping():
    txns = [
        _txn(1, seconds=0, status=ItemStatus.MISSING, kind=TransactionType.AUDIT_ADJUSTMENT, dest=None),
        _txn(2, seconds=0),
    ]

    assert [t.id for t in filter_transactions(txns, item_status=ItemStatus.MISSING)] == [1]
    assert [t.id for t in filter_transactions(txns, transaction_type=TransactionType.VEHICLE_TO_SITE)] == [2]


def test_paginate_groups_returns_total_and_page():
    txns = [_txn(i, seconds=i * 10) for i in range(1, 6)]
    groups = group_transactions(txns)

    count, page = paginate_groups(groups, limit=2, offset=1)

    assert count == 5
    assert [g.items[0].id for g in page] == [4, 3]
    assert paginate_groups(groups, limit=2, offset=10) == (5, [])


def test_transactions_for_item_crosses_groups():
    txns = [_txn(1, seconds=0, item_id=7), _txn(2, seconds=0, item_id=8), _txn(3, seconds=30, item_id=7)]

    assert [t.id for t in transactions_for_item(txns, 7)] == [3, 1]
