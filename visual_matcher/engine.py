"""
Visual product match engine.

Orchestrates one search:
    1. Snapshot the current catalog
    2. Score every product against the query key and rank
    3. Narrow the ranking by minimum similarity and category

The engine holds no per-request state; each call works on the catalog
snapshot it took at the start.
"""

import logging
from typing import Any, Dict

from .catalog import CatalogStore
from .filtering import ALL_CATEGORIES, filter_products, filter_results
from .scoring import rank_products

logger = logging.getLogger(__name__)


class MatchEngine:
    """
    Synthetic visual product matcher over a static catalog.

    Wraps a CatalogStore and turns query keys into ranked, filtered
    result payloads.
    """

    def __init__(self, store: CatalogStore = None):
        """
        Args:
            store: Catalog holder. Defaults to one loading the configured
                   catalog path.
        """
        self.store = store if store is not None else CatalogStore()

    def search(self,
               query_key: str,
               min_similarity: int = 0,
               category: str = ALL_CATEGORIES) -> Dict[str, Any]:
        """
        Rank the catalog against a query key.

        Args:
            query_key: Key derived from the uploaded file or URL.
            min_similarity: Minimum similarity kept in the results.
            category: Category to keep, or "all".

        Returns:
            Dict with success, query, count, total and results. Each
            result carries the product fields plus its similarity.
        """
        # Step 1: Snapshot the catalog for this search
        catalog = self.store.catalog
        logger.info(f"Searching with input: {query_key}")

        # Step 2: Score and rank every product
        ranked = rank_products(query_key, catalog.products)

        # Step 3: Narrow by threshold and category
        results = filter_results(ranked, min_score=min_similarity, category=category)

        logger.info(f"Generated {len(ranked)} results, {len(results)} after filtering")
        if ranked:
            logger.info(
                f"Similarity range: {ranked[-1].similarity}% - {ranked[0].similarity}%"
            )

        return {
            "success": True,
            "query": query_key,
            "count": len(results),
            "total": len(ranked),
            "results": [r.to_dict() for r in results],
        }

    def list_products(self, category: str = ALL_CATEGORIES) -> Dict[str, Any]:
        """
        List catalog products for browsing.

        Args:
            category: Category to keep, or "all".

        Returns:
            Dict with success, count and products (fields as loaded).
        """
        products = filter_products(self.store.catalog.products, category)
        return {
            "success": True,
            "count": len(products),
            "products": [p.to_dict() for p in products],
        }

    def reload(self) -> int:
        """
        Re-read the catalog file and serve the new catalog.

        Returns:
            Number of products now loaded (0 if loading failed).
        """
        catalog = self.store.reload()
        logger.info(f"Catalog reloaded: {len(catalog)} products")
        return len(catalog)

    def stats(self) -> Dict[str, Any]:
        """Catalog size and the categories present, for health reporting."""
        catalog = self.store.catalog
        return {
            "loaded_products": len(catalog),
            "categories": catalog.categories(),
        }
