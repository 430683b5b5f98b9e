#!filepath: src/azstore_app/catalog.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Tuple


@dataclass(frozen=True, slots=True)
class Category:
    """A resource category shown as one box in the left column."""

    name: str
    items: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Catalog:
    """Static sample data: category -> item -> sub entries.

    Attributes:
        categories: Categories in display order.
        entries: Sub entries keyed by item name, e.g. the blobs of a container.
    """

    categories: Tuple[Category, ...]
    entries: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.categories:
            raise ValueError("a catalog needs at least one category")

    @property
    def category_count(self) -> int:
        return len(self.categories)

    def category(self, index: int) -> Category:
        return self.categories[index]

    def item_count(self, category_index: int) -> int:
        return len(self.categories[category_index].items)

    def item(self, category_index: int, item_index: int) -> str | None:
        items = self.categories[category_index].items
        if 0 <= item_index < len(items):
            return items[item_index]
        return None

    def item_entries(self, category_index: int, item_index: int) -> Tuple[str, ...]:
        name = self.item(category_index, item_index)
        if name is None:
            return ()
        return tuple(self.entries.get(name, ()))

    def has_entries(self, category_index: int, item_index: int) -> bool:
        name = self.item(category_index, item_index)
        return name is not None and name in self.entries


def default_catalog() -> Catalog:
    """The sample catalog of an Azurite storage account."""
    entries: Dict[str, Tuple[str, ...]] = {
        "images": ("cat.png", "dog.jpg", "sunset.png"),
        "videos": ("intro.mp4", "trailer.mov"),
        "users": ("alice", "bob", "charlie"),
    }
    return Catalog(
        categories=(
            Category("Containers", ("images", "videos", "backups")),
            Category("Queues", ("email-jobs", "task-queue")),
            Category("File Shares", ("projectA", "projectB")),
            Category("Tables", ("users", "transactions")),
        ),
        entries=entries,
    )
