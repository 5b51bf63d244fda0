"""Catalog taxonomy loading.

Fetches the five facet lists (brands, colors, sizes, tags, product types)
concurrently. Each facet is read in its own session; a failing read is
reported and degrades that facet to an empty list without affecting the
others.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storehub.catalog.repository import TaxonomyRepository
from storehub.catalog.views import (
    BrandSummary,
    ColorSummary,
    ProductTypeSummary,
    SizeSummary,
    TagSummary,
)
from storehub.infrastructure.observability import ErrorReporter, get_error_reporter

logger = structlog.get_logger()


@dataclass
class CatalogTaxonomy:
    """Facet values in display order."""

    brands: list[BrandSummary] = field(default_factory=list)
    colors: list[ColorSummary] = field(default_factory=list)
    sizes: list[SizeSummary] = field(default_factory=list)
    tags: list[TagSummary] = field(default_factory=list)
    product_types: list[ProductTypeSummary] = field(default_factory=list)


async def _read_brands(repo: TaxonomyRepository) -> list[BrandSummary]:
    return [BrandSummary(id=b.id, name=b.name) for b in await repo.get_brands()]


async def _read_colors(repo: TaxonomyRepository) -> list[ColorSummary]:
    return [ColorSummary(id=c.id, name=c.name, hex=c.hex) for c in await repo.get_colors()]


async def _read_sizes(repo: TaxonomyRepository) -> list[SizeSummary]:
    return [SizeSummary(id=s.id, label=s.label) for s in await repo.get_sizes()]


async def _read_tags(repo: TaxonomyRepository) -> list[TagSummary]:
    return [TagSummary(id=t.id, name=t.name, slug=t.slug) for t in await repo.get_tags()]


async def _read_product_types(repo: TaxonomyRepository) -> list[ProductTypeSummary]:
    return [
        ProductTypeSummary(id=p.id, name=p.name) for p in await repo.get_product_types()
    ]


FacetReader = Callable[[TaxonomyRepository], Awaitable[list[Any]]]

# (facet attribute, error context, reader)
FACETS: tuple[tuple[str, str, FacetReader], ...] = (
    ("brands", "catalog.fetch_brands", _read_brands),
    ("colors", "catalog.fetch_colors", _read_colors),
    ("sizes", "catalog.fetch_sizes", _read_sizes),
    ("tags", "catalog.fetch_tags", _read_tags),
    ("product_types", "catalog.fetch_product_types", _read_product_types),
)


class TaxonomyLoader:
    """Loads every facet list for the storefront filters.

    Example usage:
        loader = TaxonomyLoader(async_session_factory)
        taxonomy = await loader.load()
        print([b.name for b in taxonomy.brands])
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        reporter: ErrorReporter | None = None,
    ) -> None:
        """Initialize loader.

        Args:
            session_factory: Factory for per-read sessions.
            reporter: Error reporter (defaults to the global one).
        """
        self.session_factory = session_factory
        self.reporter = reporter or get_error_reporter()

    async def _load_facet(self, context: str, reader: FacetReader) -> list[Any]:
        try:
            async with self.session_factory() as session:
                return await reader(TaxonomyRepository(session))
        except Exception as e:
            self.reporter.report(context, e)
            return []

    async def load(self) -> CatalogTaxonomy:
        """Fetch all facets concurrently.

        Returns:
            CatalogTaxonomy; a facet whose read failed is empty.
        """
        results = await asyncio.gather(
            *(self._load_facet(context, reader) for _, context, reader in FACETS)
        )
        taxonomy = CatalogTaxonomy(
            **{name: values for (name, _, _), values in zip(FACETS, results)}
        )
        logger.debug(
            "Taxonomy loaded",
            **{name: len(values) for (name, _, _), values in zip(FACETS, results)},
        )
        return taxonomy
