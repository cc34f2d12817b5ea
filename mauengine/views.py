"""Views and groups: iterate entities that have a given set of components."""

from __future__ import annotations

import operator
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from functools import cmp_to_key
from typing import Any, Callable, Iterable, Iterator

from mauengine.asserts import me_assert
from mauengine.registry import Registry

_CO_VARARGS = 0x04


class _TypeList:
    """An ordered list of component types."""

    __slots__ = ("types",)

    def __init__(self, *types: type) -> None:
        self.types = tuple(types)

    def __iter__(self) -> Iterator[type]:
        return iter(self.types)

    def __len__(self) -> int:
        return len(self.types)

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.types == other.types  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self), self.types))

    def __repr__(self) -> str:
        names = ", ".join(getattr(t, "__name__", repr(t)) for t in self.types)
        return f"{type(self).__name__}({names})"


class Exclude(_TypeList):
    """Component types an entity must not have."""


class Get(_TypeList):
    """Component types a group observes without owning them."""


def _as_types(value: Any) -> tuple:
    if value is None:
        return ()
    if isinstance(value, _TypeList):
        return value.types
    if isinstance(value, type):
        return (value,)
    return tuple(value)


class _Mode(Enum):
    ENTITY = "entity"
    COMPONENTS = "components"
    NONE = "none"


def _positional_range(func: Callable[..., Any]) -> tuple[int, int | None] | None:
    """Minimum and maximum positional arguments ``func`` accepts, when known."""
    target: Any = func
    skip = 0
    if hasattr(target, "__func__"):
        target = target.__func__
        skip = 1
    code = getattr(target, "__code__", None)
    if code is None:
        target = getattr(type(func), "__call__", None)
        code = getattr(target, "__code__", None)
        if code is None:
            return None
        skip = 1
    defaults = len(getattr(target, "__defaults__", None) or ())
    maximum = max(code.co_argcount - skip, 0)
    minimum = max(maximum - defaults, 0)
    if code.co_flags & _CO_VARARGS:
        return minimum, None
    return minimum, maximum


def _call_mode(func: Callable[..., Any], count: int) -> _Mode:
    accepted = _positional_range(func)
    if accepted is None:
        return _Mode.COMPONENTS
    minimum, maximum = accepted
    for mode, arity in ((_Mode.ENTITY, count + 1), (_Mode.COMPONENTS, count), (_Mode.NONE, 0)):
        if minimum <= arity and (maximum is None or arity <= maximum):
            return mode
    raise TypeError("callback must accept (entity, *components), (*components) or ()")


def _each(
    registry: Registry,
    entities: list[int],
    types: tuple,
    func: Callable[..., Any],
    parallel: bool,
) -> None:
    mode = _call_mode(func, len(types))

    def call(entity: int) -> None:
        if mode is _Mode.NONE:
            func()
            return
        components = [registry.get(entity, t) for t in types]
        if mode is _Mode.ENTITY:
            func(entity, *components)
        else:
            func(*components)

    if parallel:
        with ThreadPoolExecutor() as executor:
            list(executor.map(call, entities))
    else:
        for entity in entities:
            call(entity)


def _less_key(less: Callable[[Any, Any], bool]) -> Any:
    def compare(lhs: Any, rhs: Any) -> int:
        if less(lhs, rhs):
            return -1
        if less(rhs, lhs):
            return 1
        return 0

    return cmp_to_key(compare)


def _fetch(registry: Registry, entity: int, requested: tuple, default: tuple) -> Any:
    if requested:
        components = tuple(registry.get(entity, t) for t in requested)
        return components[0] if len(components) == 1 else components
    return tuple(registry.get(entity, t) for t in default)


class View:
    """Live iteration over entities having all component types and none excluded."""

    def __init__(
        self, registry: Registry, component_types: Any, exclude: Any = None
    ) -> None:
        types = _as_types(component_types)
        if not types:
            raise ValueError("a view needs at least one component type")
        self._registry = registry
        self._types = types
        self._exclude = _as_types(exclude)
        self._filters: list[Callable[[int], bool]] = []

    @property
    def component_types(self) -> tuple:
        return self._types

    def _matches(self, entity: int) -> bool:
        return (
            self._registry.all_of(entity, *self._types)
            and not self._registry.any_of(entity, *self._exclude)
            and all(predicate(entity) for predicate in self._filters)
        )

    def _entities(self) -> list[int]:
        leading = min(self._types, key=self._registry.size_of)
        return [e for e in self._registry.storage(leading) if self._matches(e)]

    def each(self, func: Callable[..., Any], parallel: bool = False) -> None:
        """Call ``func`` for each entity with (id, *components), (*components) or nothing."""
        _each(self._registry, self._entities(), self._types, func, parallel)

    def get(self, entity_id: int, *args: type) -> Any:
        """The listed components (one, or a tuple); all view components when none listed."""
        me_assert(self.contains(entity_id))
        return _fetch(self._registry, entity_id, args, self._types)

    def has_component(self, entity_id: int, component_type: type) -> bool:
        return self._registry.any_of(entity_id, component_type)

    def has_all_components(self, entity_id: int, *args: type) -> bool:
        return self._registry.all_of(entity_id, *args)

    def has_any_component(self, entity_id: int, *args: type) -> bool:
        return self._registry.any_of(entity_id, *args)

    def try_get(self, entity_id: int, component_type: type) -> Any | None:
        """The component, or ``None`` when the entity does not have it."""
        me_assert(self.contains(entity_id))
        return self._registry.try_get(entity_id, component_type)

    def contains(self, entity_id: int) -> bool:
        """Whether the entity is part of the view."""
        return self._matches(entity_id)

    def where(self, predicate: Callable[[int], bool]) -> None:
        """Further restrict the view to entities for which ``predicate(id)`` is true."""
        self._filters.append(predicate)

    def front(self) -> int:
        """The first entity in iteration order."""
        entities = self._entities()
        me_assert(bool(entities))
        return entities[0]

    def back(self) -> int:
        """The last entity in iteration order."""
        entities = self._entities()
        me_assert(bool(entities))
        return entities[-1]

    def empty(self) -> bool:
        return not self._entities()

    def __len__(self) -> int:
        return len(self._entities())

    def __iter__(self) -> Iterator[int]:
        return iter(self._entities())

    def __reversed__(self) -> Iterator[int]:
        return iter(self._entities()[::-1])


class Group:
    """Entities having all owned and observed types; owned storages are kept arranged."""

    def __init__(
        self,
        registry: Registry,
        owned: Iterable[type] = (),
        get: Any = None,
        exclude: Any = None,
    ) -> None:
        self._registry = registry
        self._owned = _as_types(owned)
        self._get = _as_types(get)
        self._exclude = _as_types(exclude)
        if not self._owned and not self._get:
            raise ValueError("a group needs at least one component type")
        if self._owned:
            registry.own(*self._owned)
        self._order: list[int] = []

    @property
    def component_types(self) -> tuple:
        return self._owned + self._get

    def _matches(self, entity: int) -> bool:
        return self._registry.all_of(entity, *self.component_types) and not self._registry.any_of(
            entity, *self._exclude
        )

    def _entities(self) -> list[int]:
        if self._owned:
            return [e for e in self._registry.storage(self._owned[0]) if self._matches(e)]
        ordered = [e for e in self._order if self._matches(e)]
        seen = set(ordered)
        rest = [
            e for e in self._registry.storage(self._get[0]) if e not in seen and self._matches(e)
        ]
        return ordered + rest

    def each(self, func: Callable[..., Any], parallel: bool = False) -> None:
        """Call ``func`` for each entity with (id, *components), (*components) or nothing."""
        _each(self._registry, self._entities(), self.component_types, func, parallel)

    def sort(self, *args: type, compare: Callable[[Any, Any], bool] | None = None) -> None:
        """Sort by the listed components (tuples when several), or by entity when none listed.

        ``compare`` is a "less than" predicate; ``<`` is used when it is omitted.
        """
        less = compare if compare is not None else operator.lt
        if args:
            def value(entity: int) -> Any:
                components = tuple(self._registry.get(entity, t) for t in args)
                return components[0] if len(components) == 1 else components
        else:
            def value(entity: int) -> Any:
                return entity
        key = _less_key(less)
        ordered = sorted(self._entities(), key=lambda e: key(value(e)))
        if self._owned:
            for t in self._owned:
                self._registry.storage(t)._arrange(ordered)
        else:
            self._order = ordered

    def get(self, entity_id: int, *args: type) -> Any:
        """The listed components (one, or a tuple); all group components when none listed."""
        me_assert(self.contains(entity_id))
        return _fetch(self._registry, entity_id, args, self.component_types)

    def contains(self, entity_id: int) -> bool:
        return self._matches(entity_id)

    def front(self) -> int:
        entities = self._entities()
        me_assert(bool(entities))
        return entities[0]

    def back(self) -> int:
        entities = self._entities()
        me_assert(bool(entities))
        return entities[-1]

    def empty(self) -> bool:
        return not self._entities()

    def __len__(self) -> int:
        return len(self._entities())

    def __iter__(self) -> Iterator[int]:
        return iter(self._entities())

    def __reversed__(self) -> Iterator[int]:
        return iter(self._entities()[::-1])