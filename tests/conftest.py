"""Shared snapshots and fixtures for the kinship test suite."""
import copy

import pytest
from fastapi.testclient import TestClient

from kinship.schemas import TreeSnapshot


def _person(pid, name, gender):
    return {"id": pid, "fullName": name, "gender": gender, "isActive": True}


def _unit(uid, partners, children, status="ACTIVE"):
    return {
        "id": uid,
        "marriageType": "MARRIED",
        "status": status,
        "partners": [{"personId": p} for p in partners],
        "children": [_child(c) for c in children],
    }


def _child(child):
    # plain ids are biological children, (id, lineage) tuples carry a lineage
    if isinstance(child, tuple):
        pid, lineage = child
    else:
        pid, lineage = child, "BIOLOGICAL"
    return {"personId": pid, "lineageType": lineage}


# ── Snapshot constants ──
#
# Three generations around root 10:
#   1 + 2  -> 3, 4          5 + 6 -> 9
#   3 + 9  -> 10, 11        3 + 8 (second marriage, no children)
#   10 + 20 -> 30           10 + 19 -> 31 (adopted)

FAMILY_TREE = {
    "rootPersonId": 10,
    "persons": [
        _person(1, "Grandpa", "MALE"),
        _person(2, "Grandma", "FEMALE"),
        _person(3, "Dad", "MALE"),
        _person(4, "Aunt", "FEMALE"),
        _person(5, "Maternal Grandpa", "MALE"),
        _person(6, "Maternal Grandma", "FEMALE"),
        _person(8, "Stepmom", "FEMALE"),
        _person(9, "Mom", "FEMALE"),
        _person(10, "Root", "MALE"),
        _person(11, "Sister", "FEMALE"),
        _person(19, "Second Wife", "FEMALE"),
        _person(20, "First Wife", "FEMALE"),
        _person(30, "Son", "MALE"),
        _person(31, "Adopted Daughter", "FEMALE"),
    ],
    "familyUnits": [
        _unit(100, [1, 2], [3, 4]),
        _unit(101, [5, 6], [9]),
        _unit(102, [3, 9], [10, 11], status="DISSOLVED"),
        _unit(103, [3, 8], []),
        _unit(104, [10, 20], [30]),
        _unit(105, [10, 19], [(31, "ADOPTED")]),
    ],
}

# Two women share child 5, who is also listed as a sibling of partner 3.
CRASH_TREE = {
    "rootPersonId": 3,
    "persons": [
        _person(1, "X", "MALE"),
        _person(2, "Y", "FEMALE"),
        _person(3, "A", "FEMALE"),
        _person(4, "B", "FEMALE"),
        _person(5, "C", "MALE"),
    ],
    "familyUnits": [
        _unit(200, [1, 2], [3, 5]),
        _unit(201, [3, 4], [5]),
    ],
}

# 1 is recorded as the parent of 2 and 2 as the parent of 3 and of 1.
CYCLIC_TREE = {
    "rootPersonId": 1,
    "persons": [
        _person(1, "Loop A", "MALE"),
        _person(2, "Loop B", "FEMALE"),
        _person(3, "Loop C", "MALE"),
    ],
    "familyUnits": [
        _unit(300, [1], [2]),
        _unit(301, [2], [3, 1]),
    ],
}

SINGLE_PARENT_TREE = {
    "rootPersonId": 2,
    "persons": [
        _person(1, "Mom", "FEMALE"),
        _person(2, "Kid", "MALE"),
    ],
    "familyUnits": [
        _unit(400, [1], [2]),
    ],
}


def snapshot_of(data, **overrides):
    data = copy.deepcopy(data)
    data.update(overrides)
    return TreeSnapshot.model_validate(data)


# ── Fixtures ──

@pytest.fixture
def family():
    return snapshot_of(FAMILY_TREE)


@pytest.fixture
def crash_family():
    return snapshot_of(CRASH_TREE)


@pytest.fixture
def cyclic_family():
    return snapshot_of(CYCLIC_TREE)


@pytest.fixture
def single_parent():
    return snapshot_of(SINGLE_PARENT_TREE)


@pytest.fixture
def client():
    from kinship.main import app, cache

    cache.clear()
    with TestClient(app) as test_client:
        yield test_client
    cache.clear()
