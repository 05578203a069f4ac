from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Sequence

from lexevo.exceptions import CatalogError
from lexevo.lexicon.models import Category

CONCEPTS: Mapping[Category, tuple[str, ...]] = MappingProxyType(
    {
        Category.NATURAL: (
            "water", "fire", "earth", "wind", "stone", "tree", "river", "mountain",
            "sun", "moon", "star", "rain", "snow", "flower", "seed", "sky", "ocean", "cloud",
        ),
        Category.ABSTRACT: (
            "time", "space", "change", "pattern", "boundary", "flow", "balance",
            "emergence", "connection", "threshold", "cycle", "wave", "order", "chaos",
        ),
        Category.QUALITY: (
            "big", "small", "fast", "slow", "bright", "dark", "warm", "cold",
            "old", "new", "near", "far", "deep", "high", "soft", "hard",
        ),
        Category.ACTION: (
            "move", "grow", "break", "join", "give", "take", "make", "find",
            "hold", "release", "begin", "end", "turn", "fall", "rise",
        ),
        Category.RELATION: (
            "with", "from", "toward", "through", "between", "within", "beyond", "around",
        ),
        Category.BEING: (
            "self", "other", "many", "one", "all", "none", "part", "whole",
        ),
    }
)


class ConceptCatalog:
    """Read-only concept table, flattened for lookup."""

    def __init__(self, table: Mapping[Category, Sequence[str]] = CONCEPTS):
        concepts: list[str] = []
        categories: dict[str, Category] = {}
        for category, names in table.items():
            for name in names:
                if name in categories:
                    raise CatalogError(
                        f"concept '{name}' listed under both "
                        f"{categories[name].value} and {Category(category).value}"
                    )
                categories[name] = Category(category)
                concepts.append(name)
        self._concepts = tuple(concepts)
        self._categories = MappingProxyType(categories)
        self._by_category = MappingProxyType(
            {Category(c): tuple(names) for c, names in table.items()}
        )

    @property
    def concepts(self) -> tuple[str, ...]:
        return self._concepts

    @property
    def categories(self) -> tuple[Category, ...]:
        return tuple(self._by_category)

    def category_of(self, concept: str) -> Category:
        try:
            return self._categories[concept]
        except KeyError:
            raise CatalogError(f"unknown concept '{concept}'") from None

    def concepts_in(self, category: Category) -> tuple[str, ...]:
        return self._by_category.get(Category(category), ())

    def __contains__(self, concept: object) -> bool:
        return concept in self._categories

    def __len__(self) -> int:
        return len(self._concepts)


DEFAULT_CATALOG = ConceptCatalog()
