"""
Tea API — In-memory stores
One keyed collection per entity type, plus the context that owns them.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Callable, Generic, TypeVar

from models import Brew, Steep, Tea, Teapot, utc_timestamp

T = TypeVar("T")


def new_id() -> str:
    return str(uuid.uuid4())


class EntityStore(Generic[T]):
    """
    Primary-key map for one entity type.
    Iteration follows insertion order; re-inserting an id keeps its slot.
    Anything beyond lookup by id is a linear scan over list().
    """

    def __init__(self, name: str):
        self.name = name
        self._items: dict[str, T] = {}

    def insert(self, entity: T) -> T:
        self._items[entity.id] = entity
        return entity

    def get(self, entity_id: str) -> T | None:
        return self._items.get(entity_id)

    def list(self) -> list[T]:
        return list(self._items.values())

    def delete(self, entity_id: str) -> bool:
        return self._items.pop(entity_id, None) is not None

    def has(self, entity_id: str) -> bool:
        return entity_id in self._items

    def __len__(self) -> int:
        return len(self._items)


@dataclass
class AppContext:
    """Everything a request may read or write. Build a new one for a clean slate."""

    teapots: EntityStore[Teapot] = field(default_factory=lambda: EntityStore("teapots"))
    teas: EntityStore[Tea] = field(default_factory=lambda: EntityStore("teas"))
    brews: EntityStore[Brew] = field(default_factory=lambda: EntityStore("brews"))
    steeps: EntityStore[Steep] = field(default_factory=lambda: EntityStore("steeps"))
    clock: Callable[[], str] = utc_timestamp
    id_factory: Callable[[], str] = new_id

    def stores(self) -> tuple[EntityStore, ...]:
        return (self.teapots, self.teas, self.brews, self.steeps)
