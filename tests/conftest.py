"""Shared fixtures and helpers for tests."""

import textwrap
from collections.abc import Callable
from pathlib import Path

import numpy as np
import pytest
from tree_sitter import Language, Parser
from tree_sitter_language_pack import get_language, get_parser

from docify.models import ResourceDescriptor, SchemaField, TypeIdentity

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def go_parser() -> Parser:
    """Return a tree-sitter parser for Go."""
    return get_parser("go")


@pytest.fixture
def go_language() -> Language:
    """Return the tree-sitter Go language."""
    return get_language("go")


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(7)


WriteGo = Callable[[str, str, str], Path]


@pytest.fixture
def write_go(tmp_path: Path) -> WriteGo:
    """Write a Go file below ``tmp_path/<package_path>/`` and return its path."""

    def _write(package_path: str, filename: str, source: str) -> Path:
        package_dir = tmp_path / package_path
        package_dir.mkdir(parents=True, exist_ok=True)
        path = package_dir / filename
        path.write_text(textwrap.dedent(source).lstrip("\n"), encoding="utf-8")
        return path

    return _write


# ---------------------------------------------------------------------------
# Shop model used across builder and sample tests
# ---------------------------------------------------------------------------

SHOP_PACKAGE = "example.com/shop/models"

SHOP_SOURCE = """
package models

import "github.com/shopspring/decimal"

// Product is an item offered in the shop.
type Product struct {
    ID uint `json:"id" gorm:"primaryKey;autoIncrement"`
    // display name
    Name string `json:"name" validation:"required"`
    Status string `json:"status" gorm:"type:enum('active','inactive')"`
    Price decimal.Decimal `json:"price"`
    CategoryID uint `json:"category_id" gorm:"fk:categories"`
    Category *Category `json:"category"`
    Tags []Tag `json:"tags"`
}

// Category groups products.
type Category struct {
    CategoryID uint `json:"category_id" gorm:"primaryKey"`
    Title string `json:"title"`
}
"""


def product_resource() -> ResourceDescriptor:
    return ResourceDescriptor(
        name="models.Product",
        table="products",
        type=TypeIdentity(package_path=SHOP_PACKAGE, name="Product"),
        fields=[
            SchemaField(
                name="ID",
                db_name="id",
                go_type="uint",
                data_type="uint",
                tag='json:"id" gorm:"primaryKey;autoIncrement"',
                primary_key=True,
                auto_increment=True,
            ),
            SchemaField(
                name="Name",
                db_name="name",
                go_type="string",
                data_type="string",
                tag='json:"name" validation:"required"',
                not_null=True,
                comment="display name",
            ),
            SchemaField(
                name="Status",
                db_name="status",
                go_type="string",
                data_type="string",
                tag="json:\"status\" gorm:\"type:enum('active','inactive')\"",
                not_null=True,
            ),
            SchemaField(
                name="Price",
                db_name="price",
                go_type="decimal.Decimal",
                data_type="decimal(10,2)",
                tag='json:"price"',
                not_null=True,
            ),
            SchemaField(
                name="CategoryID",
                db_name="category_id",
                go_type="uint",
                data_type="uint",
                tag='json:"category_id" gorm:"fk:categories"',
                not_null=True,
            ),
            SchemaField(name="Category", go_type="*models.Category", tag='json:"category"'),
            SchemaField(name="Tags", go_type="[]models.Tag", tag='json:"tags"'),
        ],
    )


def category_resource() -> ResourceDescriptor:
    return ResourceDescriptor(
        name="models.Category",
        table="categories",
        type=TypeIdentity(package_path=SHOP_PACKAGE, name="Category"),
        fields=[
            SchemaField(
                name="CategoryID",
                db_name="category_id",
                go_type="uint",
                data_type="uint",
                tag='json:"category_id" gorm:"primaryKey"',
                primary_key=True,
            ),
            SchemaField(name="Title", db_name="title", go_type="string", data_type="string", tag='json:"title"'),
        ],
    )
