from dataclasses import dataclass

import pytest

from mauengine.registry import ENTITY_MASK, NULL_ENTITY_ID, Registry


@dataclass
class Position:
    x: float = 0.0
    y: float = 0.0


@dataclass
class Velocity:
    dx: float = 0.0


class Tag:
    pass


@pytest.fixture
def reg():
    return Registry()


def test_created_entities_are_distinct_and_valid(reg):
    ids = [reg.create() for _ in range(5)]
    assert len(set(ids)) == 5
    assert all(reg.valid(e) for e in ids)


def test_null_entity_is_invalid(reg):
    reg.create()
    assert NULL_ENTITY_ID == 0xFFFFFFFF
    assert reg.valid(NULL_ENTITY_ID) is False


def test_destroy_and_recycle(reg):
    e = reg.create()
    reg.destroy(e)
    assert reg.valid(e) is False
    again = reg.create()
    assert again & ENTITY_MASK == e & ENTITY_MASK
    assert again != e
    assert reg.valid(again) and not reg.valid(e)


def test_destroy_invalid_raises(reg):
    e = reg.create()
    reg.destroy(e)
    with pytest.raises(ValueError):
        reg.destroy(e)


def test_destroy_removes_components(reg):
    e = reg.create()
    reg.emplace(e, Position)
    reg.destroy(e)
    assert reg.size_of(Position) == 0


def test_emplace_and_get(reg):
    e = reg.create()
    p = reg.emplace(e, Position, 1.0, y=2.0)
    assert p == Position(1.0, 2.0)
    assert reg.get(e, Position) is p


def test_emplace_twice_raises(reg):
    e = reg.create()
    reg.emplace(e, Position)
    with pytest.raises(ValueError):
        reg.emplace(e, Position)


def test_get_missing_and_try_get(reg):
    e = reg.create()
    with pytest.raises(KeyError):
        reg.get(e, Velocity)
    assert reg.try_get(e, Velocity) is None


def test_remove_counts(reg):
    e = reg.create()
    reg.emplace(e, Position)
    assert reg.remove(e, Position, Velocity) == 1
    assert reg.any_of(e, Position) is False


def test_remove_many_totals(reg):
    a, b = reg.create(), reg.create()
    reg.emplace(a, Position)
    reg.emplace(b, Position)
    assert reg.remove_many([a, b], Position) == 2
    assert reg.size_of(Position) == 0


def test_erase_requires_component(reg):
    e = reg.create()
    reg.emplace(e, Position)
    with pytest.raises(KeyError):
        reg.erase(e, Position, Velocity)
    reg.erase(e, Position)
    assert not reg.all_of(e, Position)


def test_all_of_any_of(reg):
    e = reg.create()
    reg.emplace(e, Position)
    assert reg.all_of(e, Position)
    assert not reg.all_of(e, Position, Velocity)
    assert reg.any_of(e, Velocity, Position)
    assert not reg.any_of(e, Velocity, Tag)


def test_replace_variants(reg):
    e = reg.create()
    with pytest.raises(KeyError):
        reg.replace(e, Position, 1.0)
    reg.emplace(e, Position)
    assert reg.replace(e, Position, 3.0) == reg.get(e, Position)
    assert reg.get(e, Position).x == 3.0
    reg.emplace_or_replace(e, Position, 4.0)
    assert reg.get(e, Position).x == 4.0
    existing = reg.get(e, Position)
    assert reg.get_or_emplace(e, Position, 9.0) is existing
    assert reg.get_or_emplace(e, Velocity, 5.0) == Velocity(5.0)


def test_insert_copies(reg):
    a, b = reg.create(), reg.create()
    proto = Position(1.0, 1.0)
    reg.insert([a, b], proto)
    assert reg.get(a, Position) == proto
    assert reg.get(a, Position) is not reg.get(b, Position)


def test_clear_by_type_and_all(reg):
    a, b = reg.create(), reg.create()
    reg.emplace(a, Position)
    reg.emplace(b, Velocity)
    reg.clear(Position)
    assert reg.size_of(Position) == 0
    assert reg.valid(a)
    reg.clear()
    assert not reg.valid(a) and not reg.valid(b)
    assert reg.size_of(Velocity) == 0


def test_storage_iteration_newest_first_and_swap_pop(reg):
    a, b, c = reg.create(), reg.create(), reg.create()
    for e in (a, b, c):
        reg.emplace(e, Position)
    assert list(reg.storage(Position)) == [c, b, a]
    reg.remove(b, Position)
    assert list(reg.storage(Position)) == [c, a]
    assert len(reg.storage(Position)) == 2


def test_sort_by_component_value(reg):
    values = [5.0, 1.0, 3.0]
    ids = []
    for v in values:
        e = reg.create()
        reg.emplace(e, Position, v)
        ids.append(e)
    reg.sort(Position, lambda l, r: reg.get(l, Position).x < reg.get(r, Position).x)
    xs = [reg.get(e, Position).x for e in reg.storage(Position)]
    assert xs == sorted(values)


def test_sort_to_follows_other(reg):
    ids = [reg.create() for _ in range(3)]
    for e in ids:
        reg.emplace(e, Position)
    for e in reversed(ids):
        reg.emplace(e, Velocity)
    reg.sort_to(Position, Velocity)
    assert list(reg.storage(Position)) == list(reg.storage(Velocity))


def test_ownership(reg):
    reg.own(Position, Velocity)
    assert reg.owned(Position)
    assert not reg.owned(Tag)
    with pytest.raises(ValueError):
        reg.sort(Position, lambda l, r: l < r)
    with pytest.raises(ValueError):
        reg.own(Position)


def test_compact_keeps_content(reg):
    a, b = reg.create(), reg.create()
    reg.emplace(a, Position, 1.0)
    reg.emplace(b, Position, 2.0)
    reg.remove(a, Position)
    reg.compact(Position)
    assert reg.get(b, Position).x == 2.0
    assert list(reg.storage(Position)) == [b]