"""Catalog service for storefront reads.

High-level service that combines the query builder, repository and view
transformer. Storefront reads never raise: a failed read is reported and
degrades to an empty page or a missing product.
"""

import asyncio
from dataclasses import dataclass, field

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storehub.catalog.filters import CATALOG_PAGE_SIZE, CatalogFilters, build_query_string
from storehub.catalog.query import CatalogQuery
from storehub.catalog.repository import ProductRepository
from storehub.catalog.taxonomy import CatalogTaxonomy, TaxonomyLoader
from storehub.catalog.views import CatalogProduct, to_catalog_product
from storehub.infrastructure.database import async_session_factory
from storehub.infrastructure.observability import ErrorReporter, get_error_reporter

logger = structlog.get_logger()


@dataclass
class CatalogPage:
    """One page of catalog results.

    Attributes:
        products: Products on this page.
        total: Total matching products across all pages.
        filters: Filters that produced the page.
        taxonomy: Facet values, when loaded alongside the products.
    """

    products: list[CatalogProduct]
    total: int
    filters: CatalogFilters
    taxonomy: CatalogTaxonomy | None = None
    page_size: int = field(default=CATALOG_PAGE_SIZE)

    @property
    def page(self) -> int:
        """Current page number."""
        return self.filters.page

    @property
    def total_pages(self) -> int:
        """Calculate total pages."""
        return (self.total + self.page_size - 1) // self.page_size

    @property
    def has_next(self) -> bool:
        """Check if there's a next page."""
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        """Check if there's a previous page."""
        return self.page > 1

    @property
    def next_query(self) -> str | None:
        """Query string for the next page, if any."""
        return build_query_string(self.filters, self.page + 1) if self.has_next else None

    @property
    def prev_query(self) -> str | None:
        """Query string for the previous page, if any."""
        return build_query_string(self.filters, self.page - 1) if self.has_prev else None


class CatalogService:
    """Service for storefront catalog operations.

    Every read opens its own session, so independent reads can run
    concurrently.

    Example usage:
        service = CatalogService()
        page = await service.browse(parse_catalog_params({"brand": ["7"]}))
        for product in page.products:
            print(product.name, product.lowest_price)
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
        reporter: ErrorReporter | None = None,
    ) -> None:
        """Initialize service.

        Args:
            session_factory: Factory for per-read sessions.
            reporter: Error reporter (defaults to the global one).
        """
        self.session_factory = session_factory
        self.reporter = reporter or get_error_reporter()
        self.taxonomy_loader = TaxonomyLoader(session_factory, self.reporter)

    async def load_taxonomy(self) -> CatalogTaxonomy:
        """Load facet values for the filter panel."""
        return await self.taxonomy_loader.load()

    async def fetch_products(self, filters: CatalogFilters) -> CatalogPage:
        """Fetch one page of visible products.

        Args:
            filters: Validated catalog filters.

        Returns:
            CatalogPage without taxonomy. Empty on read failure.
        """
        query = CatalogQuery.from_filters(filters)
        try:
            async with self.session_factory() as session:
                rows, total = await ProductRepository(session).find_catalog_page(query)
        except Exception as e:
            self.reporter.report(
                "catalog.fetch_products",
                e,
                {"filters": filters.to_query_params()},
            )
            return CatalogPage(products=[], total=0, filters=filters)

        logger.debug(
            "Catalog page fetched",
            clauses=query.clause_names,
            page=filters.page,
            total=total,
        )
        return CatalogPage(
            products=[to_catalog_product(row) for row in rows],
            total=total,
            filters=filters,
        )

    async def browse(self, filters: CatalogFilters) -> CatalogPage:
        """Fetch products and taxonomy concurrently for a catalog page.

        Args:
            filters: Validated catalog filters.

        Returns:
            CatalogPage with taxonomy attached.
        """
        taxonomy, page = await asyncio.gather(
            self.load_taxonomy(),
            self.fetch_products(filters),
        )
        page.taxonomy = taxonomy
        return page

    async def get_product_by_slug(self, slug: str) -> CatalogProduct | None:
        """Look up a visible product by slug.

        Not-found and read failure both return None.

        Args:
            slug: Product slug.

        Returns:
            CatalogProduct if found.
        """
        try:
            async with self.session_factory() as session:
                row = await ProductRepository(session).find_one(CatalogQuery.for_slug(slug))
        except Exception as e:
            self.reporter.report("catalog.get_product_by_slug", e, {"slug": slug})
            return None

        return to_catalog_product(row) if row is not None else None

    async def list_inventory(self) -> list[CatalogProduct]:
        """List every product for the admin workspace, newest first.

        Unlike storefront reads, failures propagate to the caller.

        Returns:
            Catalog views of all products, including drafts and archived.
        """
        async with self.session_factory() as session:
            rows = await ProductRepository(session).list_inventory()
        return [to_catalog_product(row) for row in rows]


# Global service instance
_catalog_service: CatalogService | None = None


def get_catalog_service() -> CatalogService:
    """Get the catalog service singleton.

    Returns:
        CatalogService instance.
    """
    global _catalog_service
    if _catalog_service is None:
        _catalog_service = CatalogService()
    return _catalog_service


def reset_catalog_service() -> None:
    """Drop the singleton (used by tests)."""
    global _catalog_service
    _catalog_service = None
