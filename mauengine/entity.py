"""A lightweight handle pairing an entity identifier with the world it lives in."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mauengine.registry import NULL_ENTITY_ID

if TYPE_CHECKING:
    from mauengine.world import ECSWorld


class Entity:
    """Handle to an entity in an :class:`~mauengine.world.ECSWorld`.

    Constructing one directly does not add anything to a world; use
    ``ECSWorld.create_entity`` for that.
    """

    __slots__ = ("_world", "_id")

    def __init__(self, world: ECSWorld | None = None, entity_id: int = NULL_ENTITY_ID) -> None:
        self._world = world
        self._id = entity_id

    @property
    def id(self) -> int:
        """The underlying entity identifier."""
        return self._id

    @property
    def world(self) -> ECSWorld | None:
        """The world this entity belongs to, if any."""
        return self._world

    def _attached(self) -> ECSWorld:
        if self._world is None:
            raise ValueError("entity is not attached to a world")
        return self._world

    def destroy(self) -> None:
        """Remove the entity from its world."""
        self._attached().destroy_entity(self)

    def has_all_of_components(self, *args: type) -> bool:
        """Whether the entity has every listed component."""
        return self._attached().has_all_of_components(self._id, *args)

    def has_any_of_components(self, *args: type) -> bool:
        """Whether the entity has at least one listed component."""
        return self._attached().has_any_of_components(self._id, *args)

    def add_component(self, component_type: type, *args: Any, **kwargs: Any) -> Any:
        """Construct and attach a component; the entity must not have one yet."""
        return self._attached().add_component(self._id, component_type, *args, **kwargs)

    def remove_component(self, *args: type) -> bool:
        """Remove the listed components where present; True if all were removed."""
        return self._attached().remove_component(self._id, *args)

    def erase_component(self, *args: type) -> None:
        """Remove the listed components, all of which must be present."""
        self._attached().erase(self._id, *args)

    def get_component(self, component_type: type) -> Any:
        """The component of the given type, which must be present."""
        return self._attached().get_component(self._id, component_type)

    def has_component(self, component_type: type) -> bool:
        """Whether the entity has a component of the given type."""
        return self._attached().has_component(self._id, component_type)

    def try_get_component(self, component_type: type) -> Any | None:
        """The component of the given type, or ``None``."""
        return self._attached().try_get_component(self._id, component_type)

    def replace_component(self, component_type: type, *args: Any, **kwargs: Any) -> Any:
        """Replace an existing component with a newly constructed one."""
        return self._attached().replace_component(self._id, component_type, *args, **kwargs)

    def get_or_emplace_component(self, component_type: type, *args: Any, **kwargs: Any) -> Any:
        """The existing component, or a newly constructed one."""
        return self._attached().get_or_emplace_component(
            self._id, component_type, *args, **kwargs
        )

    def add_or_replace_component(self, component_type: type, *args: Any, **kwargs: Any) -> Any:
        """Construct the component, replacing any existing one."""
        return self._attached().add_or_replace_component(
            self._id, component_type, *args, **kwargs
        )

    def __bool__(self) -> bool:
        return self._world is not None and self._world.is_valid(self._id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity):
            return NotImplemented
        return self._id == other._id and self._world is other._world

    def __hash__(self) -> int:
        return hash((id(self._world), self._id))

    def __repr__(self) -> str:
        return f"Entity(id={self._id:#x})"