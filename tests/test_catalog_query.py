import pytest
from bson import ObjectId
from pymongo import ASCENDING, DESCENDING

from storefront.core.exceptions import NotFoundError
from storefront.schemas.product import ProductQuery
from storefront.services.catalog import build_product_filter, build_sort, page_count, parse_object_id


def test_empty_query_has_no_conditions():
    assert build_product_filter(ProductQuery()) == {}


def test_search_matches_name_or_description_case_insensitively():
    conditions = build_product_filter(ProductQuery(search="lap"))

    assert conditions == {
        "$or": [
            {"name": {"$regex": "lap", "$options": "i"}},
            {"description": {"$regex": "lap", "$options": "i"}},
        ]
    }


def test_search_text_is_escaped():
    conditions = build_product_filter(ProductQuery(search="c++ (2nd)"))

    assert conditions["$or"][0]["name"]["$regex"] == r"c\+\+\ \(2nd\)"


@pytest.mark.parametrize("category", [None, "", "All"])
def test_all_or_missing_category_disables_filter(category):
    assert "category" not in build_product_filter(ProductQuery(category=category))


def test_category_is_exact_match():
    assert build_product_filter(ProductQuery(category="Books")) == {"category": "Books"}


def test_price_bounds_are_inclusive_and_combinable():
    assert build_product_filter(ProductQuery(min_price=50, max_price=100)) == {
        "price": {"$gte": 50, "$lte": 100}
    }
    assert build_product_filter(ProductQuery(max_price=20)) == {"price": {"$lte": 20}}
    # zero is a real bound, not "absent"
    assert build_product_filter(ProductQuery(min_price=0)) == {"price": {"$gte": 0}}


def test_filters_combine():
    conditions = build_product_filter(ProductQuery(search="mat", category="Sports", min_price=10))

    assert set(conditions) == {"$or", "category", "price"}


def test_default_sort_is_newest_first():
    assert build_sort(ProductQuery()) == [("created_at", DESCENDING), ("_id", DESCENDING)]


def test_sort_by_price_ascending():
    assert build_sort(ProductQuery(sort_by="price", order="asc")) == [("price", ASCENDING), ("_id", ASCENDING)]


def test_unknown_sort_field_falls_back_to_creation_time():
    assert build_sort(ProductQuery(sort_by="password", order="asc"))[0] == ("created_at", ASCENDING)


def test_any_order_other_than_asc_is_descending():
    assert build_sort(ProductQuery(sort_by="name", order="sideways"))[0] == ("name", DESCENDING)


@pytest.mark.parametrize(
    "total, limit, expected",
    [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2), (8, 3, 3), (100, 1, 100)],
)
def test_page_count_is_ceiling_of_total_over_limit(total, limit, expected):
    assert page_count(total, limit) == expected


def test_parse_object_id_rejects_malformed_ids_as_not_found():
    with pytest.raises(NotFoundError):
        parse_object_id("not-an-id")

    object_id = ObjectId()
    assert parse_object_id(str(object_id)) == object_id
