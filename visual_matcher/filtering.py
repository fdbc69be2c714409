"""
Threshold and category filters over ranked results and catalog products.

Filters are plain predicates: they keep the input order and never
recompute scores, so one ranked sequence can be narrowed repeatedly with
different thresholds.
"""

from typing import Dict, List, Sequence

from .catalog import Product
from .scoring import ScoredResult

ALL_CATEGORIES = "all"

# Display labels used by the browse and search views.
KNOWN_CATEGORIES = {
    "electronics": "Electronics",
    "fashion": "Fashion",
    "home": "Home & Kitchen",
    "sports": "Sports & Fitness",
}


def category_labels() -> List[Dict[str, str]]:
    """
    Category ids with display labels, "all" first.

    Returns:
        List of {"id", "name"} dicts for the category picker.
    """
    labels = [{"id": ALL_CATEGORIES, "name": "All Products"}]
    labels.extend({"id": key, "name": name} for key, name in KNOWN_CATEGORIES.items())
    return labels


def matches_category(item_category: str, category: str) -> bool:
    """True if category is "all" or exactly equals item_category."""
    return category == ALL_CATEGORIES or item_category == category


def filter_results(results: Sequence[ScoredResult],
                   min_score: int = 0,
                   category: str = ALL_CATEGORIES) -> List[ScoredResult]:
    """
    Keep results scoring at least min_score in the requested category.

    Args:
        results: Ranked results.
        min_score: Minimum similarity, inclusive.
        category: Exact category to keep, or "all".

    Returns:
        Retained results in their input order.
    """
    return [
        r for r in results
        if r.similarity >= min_score and matches_category(r.category, category)
    ]


def filter_products(products: Sequence[Product],
                    category: str = ALL_CATEGORIES) -> List[Product]:
    """Narrow catalog products to one category ("all" keeps everything)."""
    return [p for p in products if matches_category(p.category, category)]
