"""Tests for catalog records, loading and reload."""

import json

import pytest

from visual_matcher.catalog import (
    DEFAULT_CATALOG_PATH, Catalog, CatalogError, CatalogStore, Product,
    load_catalog, load_catalog_or_empty,
)
from visual_matcher.filtering import KNOWN_CATEGORIES


class TestProduct:
    """Tests for product record parsing."""

    def test_from_dict(self):
        product = Product.from_dict({
            "id": 1, "category": "home", "name": "Lamp",
            "price": 49.99, "image": "lamp.jpg",
        })
        assert product == Product(id=1, category="home", name="Lamp",
                                  price=49.99, image="lamp.jpg")

    def test_optional_fields_defaulted(self):
        product = Product.from_dict({"id": "sku-1", "category": "toys"})
        assert product.name == ""
        assert product.price == 0.0
        assert product.image == ""

    def test_to_dict_echoes_record_unchanged(self):
        record = {"id": 2, "category": "fashion", "name": None,
                  "price": 10, "image": None, "brand": "Acme"}
        data = Product.from_dict(record).to_dict()
        assert data == record
        assert json.dumps(data["price"]) == "10"
        assert data["name"] is None

    def test_to_dict_is_a_copy(self):
        record = {"id": 2, "category": "fashion"}
        data = Product.from_dict(record).to_dict()
        data["similarity"] = 90
        assert "similarity" not in record

    def test_to_dict_without_source(self):
        product = Product(id=3, category="home", name="Lamp", price=20, image="lamp.jpg")
        assert product.to_dict() == {
            "id": 3, "category": "home", "name": "Lamp", "price": 20, "image": "lamp.jpg",
        }

    def test_price_keeps_json_type(self):
        price = Product.from_dict({"id": 1, "category": "home", "price": 10}).price
        assert price == 10 and isinstance(price, int)
        assert Product.from_dict({"id": 1, "category": "home", "price": "12.5"}).price == 12.5

    @pytest.mark.parametrize("price", ["N/A", [1], {"amount": 1}, True])
    def test_invalid_price(self, price):
        with pytest.raises(CatalogError, match="invalid price"):
            Product.from_dict({"id": 1, "category": "home", "price": price})

    @pytest.mark.parametrize("record", [
        {"category": "home"},
        {"id": 1},
        {"id": None, "category": "home"},
    ])
    def test_missing_required_field(self, record):
        with pytest.raises(CatalogError, match="missing"):
            Product.from_dict(record)

    def test_non_mapping_record(self):
        with pytest.raises(CatalogError):
            Product.from_dict(["id", 1])

    def test_immutable(self):
        product = Product(id=1, category="home")
        with pytest.raises(AttributeError):
            product.category = "fashion"


class TestCatalog:

    def test_categories_first_seen_order(self, sample_catalog):
        assert sample_catalog.categories() == [
            "electronics", "fashion", "home", "sports", "toys",
        ]

    def test_get(self, sample_catalog):
        assert sample_catalog.get(3).name == "Table Lamp"
        assert sample_catalog.get(99) is None

    def test_empty(self):
        catalog = Catalog()
        assert len(catalog) == 0
        assert list(catalog) == []


class TestLoadCatalog:
    """Tests for JSON catalog loading."""

    def test_loads_records_in_order(self, catalog_file):
        path = catalog_file([
            {"id": 2, "category": "fashion"},
            {"id": 1, "category": "electronics"},
        ])
        catalog = load_catalog(path)
        assert [p.id for p in catalog] == [2, 1]

    def test_not_a_list(self, catalog_file):
        with pytest.raises(CatalogError, match="list"):
            load_catalog(catalog_file({"id": 1}))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(CatalogError, match="Invalid JSON"):
            load_catalog(path)

    def test_duplicate_ids(self, catalog_file):
        path = catalog_file([
            {"id": 1, "category": "home"},
            {"id": 1, "category": "fashion"},
        ])
        with pytest.raises(CatalogError, match="Duplicate"):
            load_catalog(path)

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(OSError):
            load_catalog(tmp_path / "missing.json")

    def test_or_empty_falls_back(self, tmp_path, caplog):
        catalog = load_catalog_or_empty(tmp_path / "missing.json")
        assert len(catalog) == 0
        assert "Error loading products" in caplog.text

    def test_invalid_price_is_catalog_error(self, catalog_file):
        path = catalog_file([{"id": 1, "category": "home", "price": "N/A"}])
        with pytest.raises(CatalogError, match="invalid price"):
            load_catalog(path)

    def test_non_utf8_file_is_catalog_error(self, tmp_path):
        path = tmp_path / "latin1.json"
        path.write_bytes(b'[{"id": 1, "category": "caf\xe9"}]')
        with pytest.raises(CatalogError, match="UTF-8"):
            load_catalog(path)

    @pytest.mark.parametrize("price", ["N/A", [1]])
    def test_or_empty_falls_back_on_invalid_price(self, catalog_file, price):
        path = catalog_file([{"id": 1, "category": "home", "price": price}])
        assert len(load_catalog_or_empty(path)) == 0

    def test_or_empty_falls_back_on_non_utf8(self, tmp_path):
        path = tmp_path / "latin1.json"
        path.write_bytes(b'[{"id": 1, "category": "caf\xe9"}]')
        assert len(load_catalog_or_empty(path)) == 0

    def test_bundled_catalog(self):
        catalog = load_catalog(DEFAULT_CATALOG_PATH)
        assert len(catalog) > 0
        assert set(catalog.categories()) <= set(KNOWN_CATEGORIES)


class TestCatalogStore:
    """Tests for the atomically swapped catalog reference."""

    def test_loads_on_construction(self, catalog_file):
        store = CatalogStore(catalog_file([{"id": 1, "category": "home"}]))
        assert len(store.catalog) == 1

    def test_reload_swaps_reference(self, catalog_file):
        path = catalog_file([{"id": 1, "category": "home"}])
        store = CatalogStore(path)
        before = store.catalog

        catalog_file([
            {"id": 1, "category": "home"},
            {"id": 2, "category": "sports"},
        ])
        after = store.reload()

        assert store.catalog is after
        assert len(after) == 2
        assert len(before) == 1

    def test_reload_failure_yields_empty(self, catalog_file):
        path = catalog_file([{"id": 1, "category": "home"}])
        store = CatalogStore(path)
        path.write_text("not json", encoding="utf-8")
        assert len(store.reload()) == 0

    def test_reload_with_invalid_price_yields_empty(self, catalog_file):
        path = catalog_file([{"id": 1, "category": "home"}])
        store = CatalogStore(path)
        catalog_file([{"id": 1, "category": "home", "price": [1]}])
        assert len(store.reload()) == 0
        assert len(store.catalog) == 0

    def test_explicit_catalog_skips_loading(self, sample_catalog, tmp_path):
        store = CatalogStore(tmp_path / "missing.json", catalog=sample_catalog)
        assert store.catalog is sample_catalog
