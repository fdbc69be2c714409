"""
Synthetic similarity scoring and ranking for visual search results.

A score combines two terms: a hash of the query key, product id and
category (0-50 points on top of a base of 50), and category bias rules
that add a fixed bonus when the query key mentions a keyword tied to the
product's category. The score is a pure function of its inputs, so the
same query always produces the same ranking.

Bias rules are plain data. See DEFAULT_BIAS_RULES for the expected
structure; pass a different table to compute_similarity() to tune them.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Union

import numpy as np

from .catalog import Product, ProductId
from .hashing import string_hash

BASE_SIMILARITY = 50
HASH_SPREAD = 51  # hash term adds 0-50
MAX_SIMILARITY = 100
MIN_SIMILARITY = 0


@dataclass(frozen=True)
class BiasRule:
    """
    Bonus added when the query mentions a keyword tied to a category.

    Attributes:
        keyword: Lowercase substring looked for in the query key.
        category: Product category the bonus applies to (exact match).
        bonus: Points added to the base score.
    """

    keyword: str
    category: str
    bonus: Union[int, float] = 20

    def matches(self, lowered_query: str, category: str) -> bool:
        """True if the lowercased query contains the keyword and the category matches."""
        return self.keyword in lowered_query and category == self.category


DEFAULT_BIAS_RULES = (
    BiasRule("headphone", "electronics", 20),
    BiasRule("shoe", "fashion", 20),
    BiasRule("lamp", "home", 20),
    BiasRule("sport", "sports", 20),
)


@dataclass(frozen=True)
class ScoredResult:
    """A catalog product paired with its similarity for one query."""

    product: Product
    similarity: int

    @property
    def category(self) -> str:
        return self.product.category

    def to_dict(self) -> Dict[str, Any]:
        """Product fields as loaded, plus the integer similarity."""
        data = self.product.to_dict()
        data["similarity"] = self.similarity
        return data


def format_product_id(product_id: ProductId) -> str:
    """Render an id the way catalog JSON numbers were rendered (1.0 -> "1")."""
    if isinstance(product_id, float) and product_id.is_integer():
        return str(int(product_id))
    return str(product_id)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves upward (50.5 -> 51)."""
    return int(math.floor(value + 0.5))


def combination_key(query_key: str, product_id: ProductId, category: str) -> str:
    """
    Build the string hashed for one query/product pair.

    Args:
        query_key: Identifier derived from the search input.
        product_id: Catalog id of the product.
        category: Product category.

    Returns:
        "<query_key>-<product_id>-<category>".
    """
    return f"{query_key}-{format_product_id(product_id)}-{category}"


def category_bonus(query_key: str, category: str,
                   rules: Sequence[BiasRule] = None) -> Union[int, float]:
    """
    Sum the bonuses of every bias rule matching the query and category.

    Args:
        query_key: Identifier derived from the search input (any case).
        category: Product category.
        rules: Optional override for the bias rule table.

    Returns:
        Total bonus; 0 when no rule matches.
    """
    rules = DEFAULT_BIAS_RULES if rules is None else rules
    lowered = query_key.lower()
    return sum(rule.bonus for rule in rules if rule.matches(lowered, category))


def compute_similarity(query_key: str,
                       product_id: ProductId,
                       category: str,
                       rules: Sequence[BiasRule] = None) -> int:
    """
    Compute the synthetic similarity between a query key and a product.

    Args:
        query_key: Identifier derived from the search input.
        product_id: Catalog id of the product.
        category: Product category. Unknown categories never match a rule.
        rules: Optional override for the bias rule table.

    Returns:
        Integer similarity in [0, 100].
    """
    h = string_hash(combination_key(query_key, product_id, category))

    # Bias rules raise the base; the hash term spreads products over 0-50
    base = BASE_SIMILARITY + category_bonus(query_key, category, rules)
    raw = base + (h % HASH_SPREAD)

    return round_half_up(max(MIN_SIMILARITY, min(raw, MAX_SIMILARITY)))


def rank_products(query_key: str,
                  products: Sequence[Product],
                  rules: Sequence[BiasRule] = None) -> List[ScoredResult]:
    """
    Score every product for a query and sort by similarity.

    One result per product, no filtering. Products with equal scores keep
    their catalog order.

    Args:
        query_key: Identifier derived from the search input.
        products: Catalog products in catalog order.
        rules: Optional override for the bias rule table.

    Returns:
        Scored results, highest similarity first.
    """
    products = list(products)
    if not products:
        return []

    scores = np.array(
        [compute_similarity(query_key, p.id, p.category, rules) for p in products],
        dtype=np.int64,
    )
    # Stable sort keeps catalog order among equal scores
    order = np.argsort(-scores, kind="stable")

    return [ScoredResult(product=products[i], similarity=int(scores[i])) for i in order]
