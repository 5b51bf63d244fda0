"""Tests for catalog filter parsing."""

from urllib.parse import parse_qsl

import pytest

from storehub.catalog.filters import (
    CATALOG_PAGE_SIZE,
    CatalogFilters,
    CatalogSort,
    build_query_string,
    collect_query_params,
    parse_catalog_params,
    parse_float,
    parse_int,
)


def reparse(filters: CatalogFilters) -> CatalogFilters:
    """Parse the query string built from filters."""
    query = build_query_string(filters)
    return parse_catalog_params(collect_query_params(parse_qsl(query)))


class TestTokenParsing:
    """Tests for leading-number token parsing."""

    @pytest.mark.parametrize(
        "token,expected",
        [("12", 12), ("12abc", 12), (" 7", 7), ("-3", -3), ("abc", None), ("", None), (None, None)],
    )
    def test_parse_int(self, token: str | None, expected: int | None) -> None:
        """Integers are read from the token's leading digits."""
        assert parse_int(token) == expected

    @pytest.mark.parametrize(
        "token,expected",
        [("49.99", 49.99), ("1e3", 1000.0), ("10usd", 10.0), (".5", 0.5), ("abc", None)],
    )
    def test_parse_float(self, token: str, expected: float | None) -> None:
        """Floats are read from the token's leading number."""
        assert parse_float(token) == expected

    @pytest.mark.parametrize("token", ["١٢", "٣", "１２"])
    def test_non_ascii_digits_are_not_numbers(self, token: str) -> None:
        """Only ASCII digits count as a number."""
        assert parse_int(token) is None
        assert parse_float(token) is None

    def test_non_ascii_digits_are_dropped_from_params(self) -> None:
        """Facet IDs and pages written in other scripts are ignored."""
        filters = parse_catalog_params({"brand": ["١٢", "4"], "page": "٣"})

        assert filters.brand_ids == (4,)
        assert filters.page == 1

    def test_parse_float_rejects_non_finite(self) -> None:
        """Overflowing values are treated as absent."""
        assert parse_float("1e999") is None
        assert parse_float("Infinity") is None


class TestParseCatalogParams:
    """Tests for parse_catalog_params."""

    def test_empty_params_give_defaults(self) -> None:
        """No parameters means no filters, newest first, page 1."""
        filters = parse_catalog_params({})

        assert filters == CatalogFilters()
        assert filters.sort == CatalogSort.NEWEST
        assert filters.page == 1
        assert filters.page_size == CATALOG_PAGE_SIZE

    def test_id_facets_accept_single_and_repeated_values(self) -> None:
        """ID facets read one or many tokens."""
        filters = parse_catalog_params(
            {
                "brand": "7",
                "color": ["1", "2"],
                "size": ["4"],
                "tag": ["9", "10"],
                "product_type_id": ["3"],
            }
        )

        assert filters.brand_ids == (7,)
        assert filters.color_ids == (1, 2)
        assert filters.size_ids == (4,)
        assert filters.tag_ids == (9, 10)
        assert filters.product_type_ids == (3,)

    def test_id_facets_drop_junk_and_duplicates(self) -> None:
        """Non-numeric tokens are dropped, duplicates collapse in first-seen order."""
        filters = parse_catalog_params({"brand": ["5", "abc", "2", "5", "", "2x"]})

        assert filters.brand_ids == (5, 2)

    def test_search_is_trimmed(self) -> None:
        """Search term is trimmed and the first value wins."""
        assert parse_catalog_params({"q": "  runner  "}).search == "runner"
        assert parse_catalog_params({"q": ["first", "second"]}).search == "first"

    def test_blank_search_is_absent(self) -> None:
        """A whitespace-only search term means no search."""
        assert parse_catalog_params({"q": "   "}).search is None
        assert parse_catalog_params({"q": ""}).search is None

    def test_price_bounds(self) -> None:
        """Prices parse as floats; malformed or negative bounds are absent."""
        filters = parse_catalog_params({"min_price": "50", "max_price": "149.5"})
        assert filters.min_price == 50.0
        assert filters.max_price == 149.5

        filters = parse_catalog_params({"min_price": "cheap", "max_price": "-10"})
        assert filters.min_price is None
        assert filters.max_price is None

    def test_min_above_max_is_kept(self) -> None:
        """Inverted bounds are not corrected; the store returns nothing."""
        filters = parse_catalog_params({"min_price": "200", "max_price": "100"})

        assert filters.min_price == 200.0
        assert filters.max_price == 100.0

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("price-asc", CatalogSort.PRICE_ASC),
            ("price-desc", CatalogSort.PRICE_DESC),
            ("newest", CatalogSort.NEWEST),
            ("popular", CatalogSort.NEWEST),
            (None, CatalogSort.NEWEST),
        ],
    )
    def test_sort(self, raw: str | None, expected: CatalogSort) -> None:
        """Unknown sort values resolve to newest."""
        assert parse_catalog_params({"sort": raw}).sort == expected

    @pytest.mark.parametrize(
        "raw,expected",
        [("3", 3), ("0", 1), ("-4", 1), ("abc", 1), ("2.7", 2), (None, 1)],
    )
    def test_page_is_at_least_one(self, raw: str | None, expected: int) -> None:
        """Non-positive or non-numeric pages fall back to 1."""
        assert parse_catalog_params({"page": raw}).page == expected

    def test_page_window(self) -> None:
        """Page 3 covers rows 24..35."""
        filters = parse_catalog_params({"page": "3"})

        assert filters.offset == 24
        assert filters.range_end == 35

    def test_never_raises_on_odd_input(self) -> None:
        """Unexpected shapes degrade instead of failing."""
        filters = parse_catalog_params(
            {"brand": [None, "1"], "page": [], "sort": [], "q": [], "unknown": "x"}  # type: ignore[list-item]
        )

        assert filters.brand_ids == (1,)
        assert filters.page == 1
        assert filters.search is None


class TestQueryString:
    """Tests for serializing filters back to a query string."""

    def test_defaults_serialize_to_empty_string(self) -> None:
        """Default filters add nothing to the URL."""
        assert build_query_string(CatalogFilters()) == ""

    def test_repeated_keys_and_page_override(self) -> None:
        """ID facets repeat their key and the page can be replaced."""
        filters = CatalogFilters(
            search="trail shoe",
            brand_ids=(7, 9),
            sort=CatalogSort.PRICE_ASC,
            page=2,
        )

        assert build_query_string(filters, page=3) == (
            "q=trail+shoe&brand=7&brand=9&sort=price-asc&page=3"
        )
        assert "page" not in build_query_string(filters, page=1)

    @pytest.mark.parametrize(
        "params",
        [
            {},
            {"q": " 100% cotton ", "brand": ["7", "x", "7"], "min_price": "50"},
            {"color": ["3", "1"], "size": "2", "sort": "price-desc", "page": "4"},
            {"max_price": "1e3", "tag": ["5"], "product_type_id": ["8"], "sort": "bogus"},
            {"min_price": "0.1", "max_price": "19.99", "page": "-1"},
        ],
    )
    def test_parse_serialize_parse_is_stable(self, params: dict) -> None:
        """Parsing a rebuilt query string yields the same filters."""
        filters = parse_catalog_params(params)

        assert reparse(filters) == filters


class TestCollectQueryParams:
    """Tests for collect_query_params."""

    def test_groups_repeated_keys(self) -> None:
        """Repeated keys become lists in order."""
        grouped = collect_query_params([("brand", "1"), ("q", "x"), ("brand", "2")])

        assert grouped == {"brand": ["1", "2"], "q": ["x"]}
