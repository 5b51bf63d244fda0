"""Product Catalog.

Filter parsing, query composition, taxonomy loading and the catalog view
used by the storefront and the admin workspace.
"""

from storehub.catalog.filters import (
    CATALOG_PAGE_SIZE,
    CatalogFilters,
    CatalogSort,
    build_query_string,
    collect_query_params,
    parse_catalog_params,
)
from storehub.catalog.models import Product, ProductStatus, ProductVariant
from storehub.catalog.query import CatalogQuery, escape_like
from storehub.catalog.repository import ProductRepository, TaxonomyRepository
from storehub.catalog.service import (
    CatalogPage,
    CatalogService,
    get_catalog_service,
    reset_catalog_service,
)
from storehub.catalog.taxonomy import CatalogTaxonomy, TaxonomyLoader
from storehub.catalog.views import (
    CatalogProduct,
    CatalogVariant,
    select_reference_variants,
    to_catalog_product,
)

__all__ = [
    # Filters
    "CATALOG_PAGE_SIZE",
    "CatalogFilters",
    "CatalogSort",
    "build_query_string",
    "collect_query_params",
    "parse_catalog_params",
    # Models
    "Product",
    "ProductStatus",
    "ProductVariant",
    # Query
    "CatalogQuery",
    "escape_like",
    # Repository
    "ProductRepository",
    "TaxonomyRepository",
    # Views
    "CatalogProduct",
    "CatalogVariant",
    "select_reference_variants",
    "to_catalog_product",
    # Taxonomy
    "CatalogTaxonomy",
    "TaxonomyLoader",
    # Service
    "CatalogPage",
    "CatalogService",
    "get_catalog_service",
    "reset_catalog_service",
]
