"""The entity-component world: entities, their components, views and groups."""

from __future__ import annotations

from typing import Any, Callable, Iterable

from mauengine import services
from mauengine.asserts import me_assert
from mauengine.entity import Entity
from mauengine.logger import LogCategory, LogPriority
from mauengine.registry import Registry
from mauengine.views import Group, View

_OWNED_SORT_ERROR = "Can not sort, trying to sort owned components (use group sort)"


def _entity_id(entity: Entity | int) -> int:
    return entity.id if isinstance(entity, Entity) else entity


class ECSWorld:
    """Owns a registry and exposes entity and component operations on it."""

    def __init__(self) -> None:
        self._registry = Registry()

    @property
    def registry(self) -> Registry:
        return self._registry

    def __copy__(self) -> Any:
        raise TypeError("ECSWorld cannot be copied")

    def __deepcopy__(self, memo: Any) -> Any:
        raise TypeError("ECSWorld cannot be copied")

    # Registry

    def compact(self, *args: type) -> None:
        """Compact the storages of the listed types (all when none listed)."""
        self._registry.compact(*args)

    def is_owned(self, *args: type) -> bool:
        """Whether any listed type is owned by a group."""
        return self._registry.owned(*args)

    # Entities

    def create_entity(self) -> Entity:
        """Create an entity in this world."""
        return Entity(self, self._registry.create())

    def destroy_entity(self, entity: Entity | int) -> None:
        """Destroy an entity, given as a handle or an identifier."""
        entity_id = _entity_id(entity)
        me_assert(self.is_valid(entity_id))
        self._registry.destroy(entity_id)

    def is_valid(self, entity: Entity | int) -> bool:
        """Whether the entity exists in this world."""
        return self._registry.valid(_entity_id(entity))

    def clear(self, *args: type) -> None:
        """Remove every component of the listed types."""
        if not args:
            raise TypeError("clear() needs at least one component type")
        self._registry.clear(*args)

    def has_all_of_components(self, entity_id: int, *args: type) -> bool:
        me_assert(self.is_valid(entity_id))
        return self._registry.all_of(entity_id, *args)

    def has_any_of_components(self, entity_id: int, *args: type) -> bool:
        me_assert(self.is_valid(entity_id))
        return self._registry.any_of(entity_id, *args)

    def erase(self, entity_id: int, *args: type) -> None:
        """Remove the listed components, all of which must be present."""
        if not args:
            raise TypeError("erase() needs at least one component type")
        me_assert(self.is_valid(entity_id))
        me_assert(self.has_component(entity_id, args[0]))
        me_assert(self.has_all_of_components(entity_id, *args[1:]))
        self._registry.erase(entity_id, *args)

    def erase_many(self, entity_ids: Iterable[int], *args: type) -> None:
        """Erase the listed components from every entity."""
        if not args:
            raise TypeError("erase_many() needs at least one component type")
        self._registry.erase_many(entity_ids, *args)

    def insert(self, entity_ids: Iterable[int], component: Any) -> None:
        """Give each entity its own copy of ``component``."""
        self._registry.insert(entity_ids, component)

    # Components

    def component_count(self, component_type: type) -> int:
        """How many entities have a component of this type."""
        return self._registry.size_of(component_type)

    def add_component(
        self, entity_id: int, component_type: type, *args: Any, **kwargs: Any
    ) -> Any:
        """Construct and attach a component; the entity must not have one yet."""
        me_assert(self.is_valid(entity_id))
        me_assert(not self.has_component(entity_id, component_type))
        return self._registry.emplace(entity_id, component_type, *args, **kwargs)

    def get_component(self, entity_id: int, component_type: type) -> Any:
        """The component, which must be present."""
        me_assert(self.is_valid(entity_id))
        me_assert(self.has_component(entity_id, component_type))
        return self._registry.get(entity_id, component_type)

    def remove_component(self, entity_id: int, *args: type) -> bool:
        """Remove the listed components where present; True if all were removed."""
        if not args:
            raise TypeError("remove_component() needs at least one component type")
        me_assert(self.is_valid(entity_id))
        return self._registry.remove(entity_id, *args) == len(args)

    def remove_many(self, entity_ids: Iterable[int], *args: type) -> bool:
        """Remove the listed components from every entity.

        True when the total removed equals the number of listed types.
        """
        if not args:
            raise TypeError("remove_many() needs at least one component type")
        return self._registry.remove_many(entity_ids, *args) == len(args)

    def has_component(self, entity_id: int, component_type: type) -> bool:
        me_assert(self.is_valid(entity_id))
        return self._registry.any_of(entity_id, component_type)

    def try_get_component(self, entity_id: int, component_type: type) -> Any | None:
        """The component, or ``None``."""
        return self._registry.try_get(entity_id, component_type)

    def replace_component(
        self, entity_id: int, component_type: type, *args: Any, **kwargs: Any
    ) -> Any:
        """Replace an existing component with a newly constructed one."""
        me_assert(self.is_valid(entity_id))
        me_assert(self.has_component(entity_id, component_type))
        return self._registry.replace(entity_id, component_type, *args, **kwargs)

    def add_or_replace_component(
        self, entity_id: int, component_type: type, *args: Any, **kwargs: Any
    ) -> Any:
        me_assert(self.is_valid(entity_id))
        return self._registry.emplace_or_replace(entity_id, component_type, *args, **kwargs)

    def get_or_emplace_component(
        self, entity_id: int, component_type: type, *args: Any, **kwargs: Any
    ) -> Any:
        me_assert(self.is_valid(entity_id))
        return self._registry.get_or_emplace(entity_id, component_type, *args, **kwargs)

    def _log_owned_sort(self) -> None:
        services.get_logger().log(LogPriority.ERROR, LogCategory.ENGINE, _OWNED_SORT_ERROR)

    def sort(self, component_type: type, compare: Callable[[Any, Any], bool]) -> None:
        """Sort a storage with a "less than" predicate.

        The predicate is given entity identifiers when it accepts them, and
        the components otherwise. Owned storages are not sorted.
        """
        if self.is_owned(component_type):
            self._log_owned_sort()
            return
        storage = self._registry.storage(component_type)
        entities = list(storage)
        by_entity = True
        if len(entities) >= 2:
            try:
                compare(entities[0], entities[1])
            except (TypeError, AttributeError):
                by_entity = False
        if by_entity:
            self._registry.sort(component_type, compare)
        else:
            self._registry.sort(
                component_type, lambda lhs, rhs: compare(storage.get(lhs), storage.get(rhs))
            )

    def sort_pair(self, first_type: type, second_type: type) -> None:
        """Arrange ``first_type`` to follow the order of ``second_type``."""
        if self.is_owned(first_type, second_type):
            self._log_owned_sort()
            return
        self._registry.sort_to(first_type, second_type)

    # Views and groups

    def view(self, *args: type, exclude: Any = None) -> View:
        """A view over entities having all listed types and none of ``exclude``."""
        return View(self._registry, args, exclude)

    def group(self, *args: type, get: Any = None, exclude: Any = None) -> Group:
        """A group owning the listed types, observing ``get`` and skipping ``exclude``."""
        return Group(self._registry, args, get, exclude)