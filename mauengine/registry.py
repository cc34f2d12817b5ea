"""Sparse-set component storage and the entity registry that owns it."""

from __future__ import annotations

import copy
from functools import cmp_to_key
from typing import Any, Callable, Iterable, Iterator

# An entity identifier: the low 20 bits are a slot index, the high 12 bits a version.
NULL_ENTITY_ID = 0xFFFFFFFF
ENTITY_MASK = 0xFFFFF
VERSION_MASK = 0xFFF
VERSION_SHIFT = 20


def _less_key(less: Callable[[Any, Any], bool]) -> Any:
    """Turn a strict "less than" predicate into a sort key."""

    def compare(lhs: Any, rhs: Any) -> int:
        if less(lhs, rhs):
            return -1
        if less(rhs, lhs):
            return 1
        return 0

    return cmp_to_key(compare)


def _type_name(component_type: Any) -> str:
    return getattr(component_type, "__name__", repr(component_type))


class Storage:
    """Packed storage of one component type, indexed by entity.

    Iteration yields entities from the most recently placed to the oldest;
    removal moves the last packed element into the freed slot.
    """

    def __init__(self, component_type: type) -> None:
        self.component_type = component_type
        self._dense: list[int] = []
        self._values: list[Any] = []
        self._index: dict[int, int] = {}

    def get(self, entity: int) -> Any:
        """The component of ``entity``; ``KeyError`` when it has none."""
        try:
            return self._values[self._index[entity]]
        except KeyError:
            raise KeyError(
                f"entity {entity:#x} has no {_type_name(self.component_type)} component"
            ) from None

    def __contains__(self, entity: object) -> bool:
        return entity in self._index

    def __len__(self) -> int:
        return len(self._dense)

    def __iter__(self) -> Iterator[int]:
        return iter(self._dense[::-1])

    def _emplace(self, entity: int, value: Any) -> None:
        self._index[entity] = len(self._dense)
        self._dense.append(entity)
        self._values.append(value)

    def _set(self, entity: int, value: Any) -> None:
        self._values[self._index[entity]] = value

    def _remove(self, entity: int) -> bool:
        pos = self._index.pop(entity, None)
        if pos is None:
            return False
        last_entity = self._dense.pop()
        last_value = self._values.pop()
        if pos < len(self._dense):
            self._dense[pos] = last_entity
            self._values[pos] = last_value
            self._index[last_entity] = pos
        return True

    def _clear(self) -> None:
        self._dense.clear()
        self._values.clear()
        self._index.clear()

    def _compact(self) -> None:
        self._index = {entity: pos for pos, entity in enumerate(self._dense)}

    def _arrange(self, order: Iterable[int]) -> None:
        """Iterate ``order`` (those present) first, then the rest as before."""
        present = [e for e in dict.fromkeys(order) if e in self._index]
        seen = set(present)
        iteration = present + [e for e in self if e not in seen]
        packed = iteration[::-1]
        self._values = [self._values[self._index[e]] for e in packed]
        self._dense = packed
        self._compact()


class Registry:
    """Creates entities and stores their components, one storage per type."""

    def __init__(self) -> None:
        self._entities: list[int] = []
        self._free: list[int] = []
        self._released: set[int] = set()
        self._storages: dict[Any, Storage] = {}
        self._owners: dict[Any, frozenset] = {}

    # Entities

    def create(self) -> int:
        """A new valid entity, recycling the most recently released slot."""
        if self._free:
            index = self._free.pop()
            self._released.discard(index)
            return self._entities[index]
        index = len(self._entities)
        if index >= ENTITY_MASK:
            raise OverflowError("no more entity identifiers available")
        self._entities.append(index)
        return index

    def destroy(self, entity: int) -> None:
        """Remove every component of ``entity`` and release its identifier."""
        self._require_valid(entity)
        for storage in self._storages.values():
            storage._remove(entity)
        self._release(entity)

    def valid(self, entity: Any) -> bool:
        """Whether ``entity`` was created here and not destroyed since."""
        if not isinstance(entity, int) or entity < 0:
            return False
        index = entity & ENTITY_MASK
        return (
            index < len(self._entities)
            and index not in self._released
            and self._entities[index] == entity
        )

    def _release(self, entity: int) -> None:
        index = entity & ENTITY_MASK
        version = ((entity >> VERSION_SHIFT) + 1) & VERSION_MASK
        if version == VERSION_MASK:
            version = 0
        self._entities[index] = (version << VERSION_SHIFT) | index
        self._free.append(index)
        self._released.add(index)

    def _require_valid(self, entity: Any) -> None:
        if not self.valid(entity):
            raise ValueError(f"invalid entity {entity!r}")

    # Storages

    def storage(self, component_type: type) -> Storage:
        """The storage of ``component_type``, created on first use."""
        found = self._storages.get(component_type)
        if found is None:
            found = Storage(component_type)
            self._storages[component_type] = found
        return found

    def _find(self, component_type: type) -> Storage | None:
        return self._storages.get(component_type)

    # Components

    def emplace(self, entity: int, component_type: type, *args: Any, **kwargs: Any) -> Any:
        """Construct a ``component_type`` for ``entity``, which must not have one yet."""
        self._require_valid(entity)
        storage = self.storage(component_type)
        if entity in storage:
            raise ValueError(
                f"entity {entity:#x} already has a {_type_name(component_type)} component"
            )
        component = component_type(*args, **kwargs)
        storage._emplace(entity, component)
        return component

    def get(self, entity: int, component_type: type) -> Any:
        """The component of ``entity``; ``KeyError`` when it has none."""
        storage = self._find(component_type)
        if storage is None:
            raise KeyError(f"entity {entity:#x} has no {_type_name(component_type)} component")
        return storage.get(entity)

    def try_get(self, entity: int, component_type: type) -> Any | None:
        """The component of ``entity``, or ``None``."""
        storage = self._find(component_type)
        if storage is None or entity not in storage:
            return None
        return storage.get(entity)

    def remove(self, entity: int, *args: type) -> int:
        """Remove the listed components where present; return how many were removed."""
        if not args:
            raise TypeError("remove() needs at least one component type")
        self._require_valid(entity)
        return sum(
            1 for t in args if (s := self._find(t)) is not None and s._remove(entity)
        )

    def remove_many(self, entities: Iterable[int], *args: type) -> int:
        """Remove the listed components from every entity; return the total removed."""
        return sum(self.remove(entity, *args) for entity in list(entities))

    def erase(self, entity: int, *args: type) -> None:
        """Remove the listed components, all of which must be present."""
        if not args:
            raise TypeError("erase() needs at least one component type")
        self._require_valid(entity)
        missing = [t for t in args if (s := self._find(t)) is None or entity not in s]
        if missing:
            raise KeyError(
                f"entity {entity:#x} has no {_type_name(missing[0])} component"
            )
        for t in args:
            self._storages[t]._remove(entity)

    def erase_many(self, entities: Iterable[int], *args: type) -> None:
        """Erase the listed components from every entity."""
        for entity in list(entities):
            self.erase(entity, *args)

    def all_of(self, entity: int, *args: type) -> bool:
        """Whether ``entity`` has every listed component."""
        return all((s := self._find(t)) is not None and entity in s for t in args)

    def any_of(self, entity: int, *args: type) -> bool:
        """Whether ``entity`` has at least one listed component."""
        return any((s := self._find(t)) is not None and entity in s for t in args)

    def replace(self, entity: int, component_type: type, *args: Any, **kwargs: Any) -> Any:
        """Replace an existing component with a newly constructed one."""
        self._require_valid(entity)
        storage = self._find(component_type)
        if storage is None or entity not in storage:
            raise KeyError(f"entity {entity:#x} has no {_type_name(component_type)} component")
        component = component_type(*args, **kwargs)
        storage._set(entity, component)
        return component

    def emplace_or_replace(
        self, entity: int, component_type: type, *args: Any, **kwargs: Any
    ) -> Any:
        """Construct the component, replacing any existing one."""
        self._require_valid(entity)
        storage = self.storage(component_type)
        component = component_type(*args, **kwargs)
        if entity in storage:
            storage._set(entity, component)
        else:
            storage._emplace(entity, component)
        return component

    def get_or_emplace(
        self, entity: int, component_type: type, *args: Any, **kwargs: Any
    ) -> Any:
        """The existing component, or a newly constructed one."""
        self._require_valid(entity)
        storage = self.storage(component_type)
        if entity in storage:
            return storage.get(entity)
        component = component_type(*args, **kwargs)
        storage._emplace(entity, component)
        return component

    def insert(self, entities: Iterable[int], component: Any) -> None:
        """Give each entity its own copy of ``component``."""
        targets = list(entities)
        storage = self.storage(type(component))
        for entity in targets:
            self._require_valid(entity)
            if entity in storage:
                raise ValueError(
                    f"entity {entity:#x} already has a {_type_name(type(component))} component"
                )
        for entity in targets:
            storage._emplace(entity, copy.copy(component))

    def clear(self, *args: type) -> None:
        """Drop all components of the listed types; with none listed, destroy everything."""
        if args:
            for t in args:
                storage = self._find(t)
                if storage is not None:
                    storage._clear()
            return
        for storage in self._storages.values():
            storage._clear()
        for index, entity in enumerate(self._entities):
            if index not in self._released:
                self._release(entity)

    def compact(self, *args: type) -> None:
        """Rebuild the lookup tables of the listed storages (all when none listed)."""
        targets = [self._find(t) for t in args] if args else list(self._storages.values())
        for storage in targets:
            if storage is not None:
                storage._compact()

    def size_of(self, component_type: type) -> int:
        """How many entities have a ``component_type``."""
        storage = self._find(component_type)
        return 0 if storage is None else len(storage)

    def sort(self, component_type: type, compare: Callable[[int, int], bool]) -> None:
        """Reorder a storage so iteration follows ``compare``, a "less than" on entities."""
        if self.owned(component_type):
            raise ValueError(f"{_type_name(component_type)} is owned by a group")
        storage = self.storage(component_type)
        storage._arrange(sorted(storage, key=_less_key(compare)))

    def sort_to(self, component_type: type, other_type: type) -> None:
        """Reorder ``component_type`` so shared entities come first, in ``other_type``'s order."""
        if self.owned(component_type):
            raise ValueError(f"{_type_name(component_type)} is owned by a group")
        self.storage(component_type)._arrange(list(self.storage(other_type)))

    # Ownership

    def own(self, *args: type) -> None:
        """Mark the listed types as owned together by one group."""
        key = frozenset(args)
        for t in args:
            current = self._owners.get(t)
            if current is not None and current != key:
                raise ValueError(f"{_type_name(t)} is already owned by another group")
        for t in args:
            self._owners[t] = key
            self.storage(t)

    def owned(self, *args: type) -> bool:
        """Whether any of the listed types is owned by a group."""
        return any(t in self._owners for t in args)