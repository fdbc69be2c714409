"""
visual_matcher: synthetic visual product matching over a static catalog.

Scores every catalog product against a key derived from the search input
(uploaded file name, MIME type or image URL), ranks by similarity and
filters by threshold and category. No pixel content is analysed; the
same input always yields the same ranking.

Modules:
    engine      Main MatchEngine class
    hashing     Deterministic 32-bit string hash
    scoring     Similarity scoring with category bias + ranking
    filtering   Threshold and category filters
    catalog     Product records, catalog loading and atomic reload
    query       Query key derivation from uploads and URLs
    api         FastAPI routes
    server      uvicorn entry point
"""

__version__ = "1.0.0"
