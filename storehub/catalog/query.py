"""Catalog query composition.

Builds the storefront product query from validated filters as an ordered
list of named clauses instead of concatenated conditions, so the set of
active predicates can be inspected and tested.

Variant-scoped constraints (sellable, color, size, price bounds) are folded
into one EXISTS semi-join: a product matches when at least one of its
sellable variants satisfies all of them. Because the product table is never
joined row-for-row against variants, results and counts are distinct by
product.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from sqlalchemy import ColumnElement, Select, and_, exists, func, or_, select
from sqlalchemy.orm import selectinload

from storehub.catalog.filters import CatalogFilters, CatalogSort
from storehub.catalog.models import (
    Product,
    ProductStatus,
    ProductTag,
    ProductVariant,
)

LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Escape LIKE metacharacters so the term matches literally.

    Args:
        term: Raw search term.

    Returns:
        Term with backslash, ``%`` and ``_`` prefixed by a backslash.
    """
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )


def _as_decimal(value: float) -> Decimal:
    return Decimal(str(value))


@dataclass(frozen=True)
class Clause:
    """A named SQL predicate."""

    name: str
    expression: ColumnElement[bool]


@dataclass
class CatalogQuery:
    """Composed storefront query.

    Attributes:
        clauses: Product-level predicates, ANDed together.
        variant_clauses: Predicates a single joined variant must satisfy.
        sort: Requested ordering.
        offset: First row of the page window.
        limit: Page size.

    Example usage:
        query = CatalogQuery.from_filters(filters)
        query.clause_names  # ["visible", "sellable_variant", "brand", ...]
        rows = (await session.execute(query.page_statement())).scalars().all()
    """

    clauses: list[Clause] = field(default_factory=list)
    variant_clauses: list[Clause] = field(default_factory=list)
    sort: CatalogSort = CatalogSort.NEWEST
    offset: int = 0
    limit: int | None = None

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def visible_products(cls) -> "CatalogQuery":
        """Start from the storefront visibility rules."""
        query = cls()
        query.add(
            "visible",
            and_(
                Product.status == ProductStatus.ACTIVE,
                Product.deleted_at.is_(None),
            ),
        )
        query.add_variant(
            "sellable",
            and_(
                ProductVariant.is_active.is_(True),
                ProductVariant.stock_qty > 0,
            ),
        )
        return query

    @classmethod
    def from_filters(cls, filters: CatalogFilters) -> "CatalogQuery":
        """Compose the listing query for a set of filters.

        Args:
            filters: Validated catalog filters.

        Returns:
            Query with one clause per active facet.
        """
        query = cls.visible_products()

        if filters.brand_ids:
            query.add("brand", Product.brand_id.in_(filters.brand_ids))
        if filters.color_ids:
            query.add_variant("color", ProductVariant.color_id.in_(filters.color_ids))
        if filters.size_ids:
            query.add_variant("size", ProductVariant.size_id.in_(filters.size_ids))
        if filters.tag_ids:
            query.add(
                "tag",
                exists().where(
                    ProductTag.product_id == Product.id,
                    ProductTag.tag_id.in_(filters.tag_ids),
                ),
            )
        if filters.product_type_ids:
            query.add("product_type", Product.product_type_id.in_(filters.product_type_ids))
        if filters.min_price is not None:
            query.add_variant("min_price", ProductVariant.price >= _as_decimal(filters.min_price))
        if filters.max_price is not None:
            query.add_variant("max_price", ProductVariant.price <= _as_decimal(filters.max_price))
        if filters.search:
            pattern = f"%{escape_like(filters.search)}%"
            query.add(
                "search",
                or_(
                    Product.name.ilike(pattern, escape=LIKE_ESCAPE),
                    Product.description.ilike(pattern, escape=LIKE_ESCAPE),
                    Product.slug.ilike(pattern, escape=LIKE_ESCAPE),
                ),
            )

        query.sort = filters.sort
        query.offset = filters.offset
        query.limit = filters.page_size
        return query

    @classmethod
    def for_slug(cls, slug: str) -> "CatalogQuery":
        """Compose the single-product lookup used by the detail page."""
        query = cls.visible_products()
        query.add("slug", Product.slug == slug)
        query.limit = 1
        return query

    def add(self, name: str, expression: ColumnElement[bool]) -> None:
        """Append a product-level clause."""
        self.clauses.append(Clause(name, expression))

    def add_variant(self, name: str, expression: ColumnElement[bool]) -> None:
        """Append a clause that the matching variant must satisfy."""
        self.variant_clauses.append(Clause(name, expression))

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def clause_names(self) -> list[str]:
        """Names of the top-level clauses, in application order.

        The variant semi-join appears as ``sellable_variant`` right after
        ``visible``.
        """
        names = [clause.name for clause in self.clauses]
        names.insert(1 if names else 0, "sellable_variant")
        return names

    @property
    def variant_clause_names(self) -> list[str]:
        """Names of the clauses folded into the variant semi-join."""
        return [clause.name for clause in self.variant_clauses]

    # ------------------------------------------------------------------
    # SQL
    # ------------------------------------------------------------------

    def variant_criteria(self) -> list[ColumnElement[bool]]:
        """Variant predicates without the product correlation."""
        return [clause.expression for clause in self.variant_clauses]

    def sellable_variant_exists(self) -> ColumnElement[bool]:
        """EXISTS over the product's variants matching every variant clause."""
        return exists().where(
            ProductVariant.product_id == Product.id,
            *self.variant_criteria(),
        )

    def where_criteria(self) -> list[ColumnElement[bool]]:
        """All product-level predicates including the variant semi-join."""
        criteria = [clause.expression for clause in self.clauses]
        criteria.insert(1 if criteria else 0, self.sellable_variant_exists())
        return criteria

    def order_by(self) -> list[Any]:
        """Sort keys: price aggregate for price sorts, then newest first."""
        keys: list[Any] = []
        if self.sort in (CatalogSort.PRICE_ASC, CatalogSort.PRICE_DESC):
            aggregate = func.min if self.sort == CatalogSort.PRICE_ASC else func.max
            price = (
                select(aggregate(ProductVariant.price))
                .where(ProductVariant.product_id == Product.id, *self.variant_criteria())
                .correlate(Product)
                .scalar_subquery()
            )
            if self.sort == CatalogSort.PRICE_ASC:
                keys.append(price.asc().nulls_last())
            else:
                keys.append(price.desc().nulls_last())
        keys.append(Product.created_at.desc())
        keys.append(Product.id.asc())
        return keys

    def count_statement(self) -> Select:
        """Statement counting matching products (pre-pagination)."""
        return select(func.count(Product.id)).where(*self.where_criteria())

    def page_statement(self) -> Select:
        """Statement loading one page of products with their relations.

        The variant collection of each product is restricted to the same
        variant clauses used for matching.
        """
        statement = (
            select(Product)
            .where(*self.where_criteria())
            .order_by(*self.order_by())
            .options(*catalog_load_options(self.variant_criteria()))
            .execution_options(populate_existing=True)
        )
        if self.offset:
            statement = statement.offset(self.offset)
        if self.limit is not None:
            statement = statement.limit(self.limit)
        return statement


def catalog_load_options(variant_criteria: list[ColumnElement[bool]] | None = None) -> list[Any]:
    """Eager-load options for a product and everything the view needs.

    Args:
        variant_criteria: Optional predicates restricting loaded variants.

    Returns:
        Loader options for ``Select.options``.
    """
    variants = Product.variants
    if variant_criteria:
        variants = variants.and_(*variant_criteria)
    return [
        selectinload(Product.brand),
        selectinload(Product.product_type),
        selectinload(variants).options(
            selectinload(ProductVariant.color),
            selectinload(ProductVariant.size),
        ),
        selectinload(Product.images),
        selectinload(Product.tags).selectinload(ProductTag.tag),
    ]
