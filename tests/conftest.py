"""Shared fixtures: the five "bad vs. good" examples as model mappings."""

import pytest


@pytest.fixture
def bad_user_repository() -> dict:
    return {
        "classes": {
            "UserRepository": {
                "methods": [
                    {"name": "Authenticate", "parameters": ["string", "string"], "returns": "bool"},
                    {"name": "GetUsers", "returns": "List<User>"},
                ],
            },
        },
    }


@pytest.fixture
def good_user_repository() -> dict:
    return {
        "classes": {
            "UserAuthentication": {
                "methods": [
                    {"name": "Authenticate", "parameters": ["string", "string"], "returns": "bool"},
                ],
            },
            "UserRepository": {
                "methods": [{"name": "GetUsers", "returns": "List<User>"}],
            },
        },
    }


@pytest.fixture
def order_model() -> dict:
    return {
        "classes": {
            "Order": {
                "fields": ["Items: List<Item>"],
                "methods": [
                    {"name": "CalculateTotalCost", "returns": "decimal"},
                    {"name": "CalculateTotalCostWithDiscountForLoyalCustomers", "returns": "decimal"},
                ],
            },
        },
    }


@pytest.fixture
def rectangle_square() -> dict:
    return {
        "classes": {
            "Rectangle": {
                "fields": ["width: int", "height: int"],
                "methods": [
                    {"name": "Width", "kind": "setter", "parameters": ["int"], "virtual": True},
                    {"name": "Height", "kind": "setter", "parameters": ["int"], "virtual": True},
                    {"name": "Area", "returns": "int"},
                ],
            },
            "Square": {
                "base_class": "Rectangle",
                "methods": [
                    {"name": "Width", "kind": "setter", "parameters": ["int"],
                     "also_mutates": ["Height"]},
                ],
            },
        },
    }


@pytest.fixture
def animal_model() -> dict:
    return {
        "interfaces": {
            "IAnimal": {"methods": ["Walk", "Swim", "Fly"]},
        },
        "classes": {
            "Dog": {
                "interfaces": ["IAnimal"],
                "methods": [
                    "Walk",
                    {"name": "Swim", "throws_not_implemented": True},
                    {"name": "Fly", "throws_not_implemented": True},
                ],
            },
        },
    }


@pytest.fixture
def database_model() -> dict:
    return {
        "interfaces": {
            "IDatabase": {"methods": [{"name": "Save", "parameters": ["User"]}]},
        },
        "classes": {
            "SqlDatabase": {
                "interfaces": ["IDatabase"],
                "methods": [{"name": "Save", "parameters": ["User"]}],
            },
            "UserRepository": {
                "methods": [{"name": "Save", "parameters": ["User"]}],
                "dependencies": [{"type": "SqlDatabase", "kind": "directly-instantiated"}],
            },
        },
    }
