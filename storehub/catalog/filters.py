"""Catalog filter parsing.

Turns an untrusted query-parameter bag into a validated CatalogFilters
value. Parsing never fails: malformed tokens are dropped and malformed
scalars fall back to their defaults, so any query string renders a page.
"""

import math
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import urlencode

CATALOG_PAGE_SIZE = 12

# Leading-number prefixes, matching how browsers' parseInt/parseFloat read tokens
_INT_PREFIX = re.compile(r"\s*([+-]?[0-9]+)")
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)")

ParamValue = str | Sequence[str] | None


class CatalogSort(str, Enum):
    """Supported catalog orderings."""

    NEWEST = "newest"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"


@dataclass(frozen=True)
class CatalogFilters:
    """Validated catalog filters.

    ID facets are OR within a facet and AND across facets. Each ID tuple is
    deduplicated and keeps first-seen order.

    Attributes:
        search: Free-text term matched against name, description and slug.
        brand_ids: Brand IDs.
        color_ids: Color IDs (matched against sellable variants).
        size_ids: Size IDs (matched against sellable variants).
        tag_ids: Tag IDs.
        product_type_ids: Product type IDs.
        min_price: Lower bound on variant price.
        max_price: Upper bound on variant price.
        sort: Ordering.
        page: 1-indexed page number.
    """

    search: str | None = None
    brand_ids: tuple[int, ...] = ()
    color_ids: tuple[int, ...] = ()
    size_ids: tuple[int, ...] = ()
    tag_ids: tuple[int, ...] = ()
    product_type_ids: tuple[int, ...] = ()
    min_price: float | None = None
    max_price: float | None = None
    sort: CatalogSort = CatalogSort.NEWEST
    page: int = 1
    page_size: int = field(default=CATALOG_PAGE_SIZE, init=False)

    @property
    def offset(self) -> int:
        """First row index of the page window."""
        return (self.page - 1) * self.page_size

    @property
    def range_end(self) -> int:
        """Last row index of the page window (inclusive)."""
        return self.page * self.page_size - 1

    def to_query_params(self, page: int | None = None) -> list[tuple[str, str]]:
        """Serialize back into the query-string contract.

        Args:
            page: Page to emit instead of the current one.

        Returns:
            Ordered (key, value) pairs; ID facets repeat their key.
        """
        params: list[tuple[str, str]] = []
        if self.search:
            params.append(("q", self.search))
        for key, ids in (
            ("brand", self.brand_ids),
            ("color", self.color_ids),
            ("size", self.size_ids),
            ("tag", self.tag_ids),
            ("product_type_id", self.product_type_ids),
        ):
            params.extend((key, str(value)) for value in ids)
        if self.min_price is not None:
            params.append(("min_price", repr(self.min_price)))
        if self.max_price is not None:
            params.append(("max_price", repr(self.max_price)))
        if self.sort != CatalogSort.NEWEST:
            params.append(("sort", self.sort.value))
        target_page = self.page if page is None else page
        if target_page > 1:
            params.append(("page", str(target_page)))
        return params


def build_query_string(filters: CatalogFilters, page: int | None = None) -> str:
    """Encode filters as a query string (without the leading ``?``)."""
    return urlencode(filters.to_query_params(page=page))


# ============================================================================
# Token parsing
# ============================================================================


def _values(raw: ParamValue) -> list[str]:
    if raw is None:
        return []
    if isinstance(raw, str):
        return [raw]
    return [value for value in raw if isinstance(value, str)]


def _first(raw: ParamValue) -> str | None:
    values = _values(raw)
    return values[0] if values else None


def parse_int(token: str | None) -> int | None:
    """Parse the leading base-10 integer of a token, or None."""
    if not token:
        return None
    match = _INT_PREFIX.match(token)
    return int(match.group(1)) if match else None


def parse_float(token: str | None) -> float | None:
    """Parse the leading finite decimal number of a token, or None."""
    if not token:
        return None
    match = _FLOAT_PREFIX.match(token)
    if not match:
        return None
    try:
        value = float(match.group(1))
    except (ValueError, OverflowError):
        return None
    return value if math.isfinite(value) else None


def _id_set(raw: ParamValue) -> tuple[int, ...]:
    seen: dict[int, None] = {}
    for token in _values(raw):
        value = parse_int(token)
        if value is not None:
            seen.setdefault(value, None)
    return tuple(seen)


def _price(raw: ParamValue) -> float | None:
    value = parse_float(_first(raw))
    if value is None or value < 0:
        return None
    return value


def parse_catalog_params(params: Mapping[str, ParamValue]) -> CatalogFilters:
    """Parse raw query parameters into CatalogFilters.

    Args:
        params: Mapping of parameter name to a single value, a list of
            values, or None.

    Returns:
        Validated filters. Never raises for any input.
    """
    search = _first(params.get("q"))
    search = search.strip() if search is not None else None

    sort_value = _first(params.get("sort"))
    if sort_value in (CatalogSort.PRICE_ASC.value, CatalogSort.PRICE_DESC.value):
        sort = CatalogSort(sort_value)
    else:
        sort = CatalogSort.NEWEST

    page = parse_int(_first(params.get("page")))

    return CatalogFilters(
        search=search or None,
        brand_ids=_id_set(params.get("brand")),
        color_ids=_id_set(params.get("color")),
        size_ids=_id_set(params.get("size")),
        tag_ids=_id_set(params.get("tag")),
        product_type_ids=_id_set(params.get("product_type_id")),
        min_price=_price(params.get("min_price")),
        max_price=_price(params.get("max_price")),
        sort=sort,
        page=max(1, page if page is not None else 1),
    )


def collect_query_params(items: Sequence[tuple[str, str]]) -> dict[str, list[str]]:
    """Group repeated (key, value) pairs into lists, preserving order."""
    grouped: dict[str, list[str]] = {}
    for key, value in items:
        grouped.setdefault(key, []).append(value)
    return grouped
