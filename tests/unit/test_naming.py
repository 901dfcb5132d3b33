"""Container names derived from model type names."""

import pytest

from cosmos_linq.naming import derive_container_name, pluralize
from tests.sample_models import LineItem, Order


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Order", "Orders"),
        ("Category", "Categories"),
        ("Invoice", "Invoices"),
        ("Day", "Days"),
        ("Box", "Boxes"),
        ("Church", "Churches"),
        ("Address", "Addresses"),
        ("Person", "People"),
        ("Child", "Children"),
        ("Knife", "Knives"),
        ("Shelf", "Shelves"),
        ("Equipment", "Equipment"),
        ("Quiz", "Quizzes"),
    ],
)
def test_pluralize(name, expected):
    assert pluralize(name) == expected


def test_only_last_word_of_compound_name_is_pluralized():
    assert derive_container_name("SalesOrderLine") == "SalesOrderLines"
    assert derive_container_name("CustomerCategory") == "CustomerCategories"
    assert derive_container_name("SalesPerson") == "SalesPeople"


def test_accepts_model_types():
    assert derive_container_name(Order) == "Orders"
    assert derive_container_name(LineItem) == "LineItems"


def test_lowercase_names_stay_lowercase():
    assert derive_container_name("category") == "categories"
    assert derive_container_name("person") == "people"
