"""
Static product catalog.

Products are loaded once from a JSON list of records and held in an
immutable Catalog. CatalogStore owns the reference served to requests;
reloading builds a complete new Catalog and swaps the reference in a
single assignment, so concurrent readers never see a partial catalog
and never need a lock.
"""

import os
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent / "data" / "products.json"
CATALOG_PATH = Path(os.environ.get("VISUAL_MATCHER_CATALOG", str(DEFAULT_CATALOG_PATH)))

REQUIRED_FIELDS = ("id", "category")

ProductId = Union[int, float, str]


class CatalogError(ValueError):
    """Raised when catalog data is not a list of well-formed product records."""


@dataclass(frozen=True)
class Product:
    """
    One catalog record.

    The typed fields drive scoring and filtering. ``source`` holds the
    record exactly as it was loaded; to_dict() echoes it back so
    responses carry every original field with its original value.
    """

    id: ProductId
    category: str
    name: str = ""
    price: Union[int, float] = 0.0
    image: str = ""
    source: Dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> "Product":
        """
        Build a Product from a raw catalog record.

        Args:
            record: Decoded JSON object with at least id and category.

        Returns:
            Product whose to_dict() returns a copy of ``record``.

        Raises:
            CatalogError: If the record is not a mapping, lacks
                id/category, or has a non-numeric price.
        """
        if not isinstance(record, dict):
            raise CatalogError(f"Product record must be an object, got {type(record).__name__}")
        missing = [name for name in REQUIRED_FIELDS if record.get(name) is None]
        if missing:
            raise CatalogError(f"Product record missing {', '.join(missing)}: {record!r}")

        name = record.get("name")
        image = record.get("image")
        return cls(
            id=record["id"],
            category=str(record["category"]),
            name=str(name) if name is not None else "",
            price=_parse_price(record.get("price"), record["id"]),
            image=str(image) if image is not None else "",
            source=dict(record),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Product fields for a response payload, unchanged from the source record."""
        if self.source:
            return dict(self.source)
        return {
            "id": self.id,
            "category": self.category,
            "name": self.name,
            "price": self.price,
            "image": self.image,
        }


def _parse_price(value: Any, product_id: ProductId) -> Union[int, float]:
    # Numbers keep their JSON type; numeric strings are accepted.
    if value is None:
        return 0.0
    message = f"Product {product_id!r} has invalid price {value!r}"
    if isinstance(value, bool):
        raise CatalogError(message)
    if isinstance(value, (int, float)):
        return value
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise CatalogError(message) from e


@dataclass(frozen=True)
class Catalog:
    """Immutable, ordered collection of products."""

    products: Tuple[Product, ...] = ()

    def __len__(self) -> int:
        return len(self.products)

    def __iter__(self) -> Iterator[Product]:
        return iter(self.products)

    def categories(self) -> List[str]:
        """Distinct categories in first-seen order."""
        seen = []
        for product in self.products:
            if product.category not in seen:
                seen.append(product.category)
        return seen

    def get(self, product_id: ProductId) -> Optional[Product]:
        """Product with the given id, or None."""
        for product in self.products:
            if product.id == product_id:
                return product
        return None


def load_catalog(path: Union[str, Path]) -> Catalog:
    """
    Load a catalog from a JSON file holding a list of product records.

    Raises:
        OSError: If the file cannot be read.
        CatalogError: If the file is not UTF-8 JSON, not a list, a record
            is malformed, or two records share an id.
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        try:
            records = json.load(f)
        except UnicodeDecodeError as e:
            raise CatalogError(f"Catalog {path} is not valid UTF-8: {e}") from e
        except json.JSONDecodeError as e:
            raise CatalogError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(records, list):
        raise CatalogError(f"Catalog {path} must contain a JSON list")

    products = tuple(Product.from_dict(record) for record in records)

    seen_ids = set()
    for product in products:
        key = str(product.id)
        if key in seen_ids:
            raise CatalogError(f"Duplicate product id {product.id!r} in {path}")
        seen_ids.add(key)

    return Catalog(products=products)


def load_catalog_or_empty(path: Union[str, Path]) -> Catalog:
    """Load a catalog, falling back to an empty one if loading fails."""
    try:
        catalog = load_catalog(path)
    except (OSError, CatalogError) as e:
        logger.error(f"Error loading products from {path}: {e}")
        return Catalog()

    logger.info(f"Loaded {len(catalog)} products from {path}")
    return catalog


class CatalogStore:
    """
    Holder for the catalog currently served to requests.

    Readers take ``store.catalog`` once per request and work on that
    immutable snapshot; reload() replaces the reference wholesale.
    """

    def __init__(self, path: Union[str, Path] = None, catalog: Catalog = None):
        self.path = Path(path) if path is not None else CATALOG_PATH
        self._catalog = catalog if catalog is not None else load_catalog_or_empty(self.path)

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    def reload(self) -> Catalog:
        """
        Re-read the catalog file and swap it in.

        A failed load swaps in an empty catalog, as at startup.

        Returns:
            The catalog now being served.
        """
        catalog = load_catalog_or_empty(self.path)
        self._catalog = catalog
        return catalog
